# This file is part of serialimage.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

__all__ = ("NumberType", "SampleType")

import enum
from typing import Literal

import numpy as np
import numpy.typing as npt


class NumberType(enum.StrEnum):
    """Enumeration of array value types understood by the library."""

    bool = enum.auto()
    uint8 = enum.auto()
    uint16 = enum.auto()
    uint32 = enum.auto()
    uint64 = enum.auto()
    int8 = enum.auto()
    int16 = enum.auto()
    int32 = enum.auto()
    int64 = enum.auto()
    float32 = enum.auto()
    float64 = enum.auto()

    def to_numpy(self) -> type:
        """Convert an enumeration member to the corresponding numpy scalar
        type object.

        Returns
        -------
        scalar_type
            Numpy scalar type, e.g. `numpy.uint16`.  Note that this inherits
            from `type`, not `numpy.dtype` (though a `numpy.dtype` instance
            can always be constructed from it).
        """
        return getattr(np, self.value)

    @classmethod
    def from_numpy(cls, dtype: npt.DTypeLike) -> NumberType:
        """Construct an enumeration member from anything that can be coerced
        to `numpy.dtype`.

        Parameters
        ----------
        dtype
            Object convertible to `numpy.dtype`.

        Returns
        -------
        member
            Enumeration member.

        Raises
        ------
        ValueError
            Raised if the dtype has no corresponding member (e.g. complex or
            string types).
        """
        return cls(np.dtype(dtype).name)

    @property
    def bitpix(self) -> int:
        """The FITS ``BITPIX`` value used for arrays of this type.

        Unsigned integers are stored as the signed type of the same width with
        a ``BZERO`` offset, so they share its ``BITPIX``.
        """
        dtype = np.dtype(self.to_numpy())
        if dtype.kind == "f":
            return -8 * dtype.itemsize
        if dtype.kind == "b":
            raise TypeError("Boolean arrays have no FITS BITPIX.")
        return 8 * dtype.itemsize


type SampleType = Literal[NumberType.uint8] | Literal[NumberType.uint16] | Literal[NumberType.float32]
