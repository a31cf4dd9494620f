# This file is part of serialimage.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

__all__ = ("PixelFormat",)

import enum

from ._dtypes import NumberType, SampleType


class PixelFormat(enum.StrEnum):
    """Enumeration of the pixel layouts a `DynamicImage` may hold.

    Each member fixes both the number of interleaved channels per pixel and
    the numeric type of every sample.  Floating-point images are only
    supported with color channels.
    """

    luma8 = enum.auto()
    luma_alpha8 = enum.auto()
    rgb8 = enum.auto()
    rgba8 = enum.auto()
    luma16 = enum.auto()
    luma_alpha16 = enum.auto()
    rgb16 = enum.auto()
    rgba16 = enum.auto()
    rgb32f = enum.auto()
    rgba32f = enum.auto()

    @property
    def channels(self) -> int:
        """Number of interleaved samples per pixel."""
        return _LAYOUTS[self][1]

    @property
    def number_type(self) -> SampleType:
        """Numeric type of each sample."""
        return _LAYOUTS[self][0]

    @classmethod
    def from_array_layout(cls, number_type: NumberType, channels: int) -> PixelFormat:
        """Look up the member with the given sample type and channel count.

        Parameters
        ----------
        number_type
            Numeric type of each sample.
        channels
            Number of interleaved samples per pixel.

        Returns
        -------
        member
            Enumeration member.

        Raises
        ------
        ValueError
            Raised if no pixel format has this combination.
        """
        for member, layout in _LAYOUTS.items():
            if layout == (number_type, channels):
                return member
        raise ValueError(f"No pixel format holds {channels} channel(s) of {number_type} samples.")


_LAYOUTS: dict[PixelFormat, tuple[SampleType, int]] = {
    PixelFormat.luma8: (NumberType.uint8, 1),
    PixelFormat.luma_alpha8: (NumberType.uint8, 2),
    PixelFormat.rgb8: (NumberType.uint8, 3),
    PixelFormat.rgba8: (NumberType.uint8, 4),
    PixelFormat.luma16: (NumberType.uint16, 1),
    PixelFormat.luma_alpha16: (NumberType.uint16, 2),
    PixelFormat.rgb16: (NumberType.uint16, 3),
    PixelFormat.rgba16: (NumberType.uint16, 4),
    PixelFormat.rgb32f: (NumberType.float32, 3),
    PixelFormat.rgba32f: (NumberType.float32, 4),
}
