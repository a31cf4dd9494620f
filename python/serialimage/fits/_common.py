# This file is part of serialimage.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

__all__ = (
    "FitsCompression",
    "PathConflictError",
    "split_compression_qualifier",
)

import enum
import os
import re
from pathlib import Path

import astropy.io.fits
import numpy as np


class PathConflictError(IsADirectoryError):
    """The error type raised when the destination of a FITS write is an
    existing directory.
    """


class FitsCompression(enum.StrEnum):
    """Compression modes supported when writing a `DynamicImage`.

    The value of each member is the name recorded in the ``COMPRESSION_ALGO``
    header card of compressed files.  All tile compression is lossless.
    """

    NONE = "uncomp"
    GZIP = "gzip"
    RICE = "rice"
    HCOMPRESS = "hcompress"
    HSMOOTH = "hscompress"
    BZIP2 = "bzip2"
    PLIO = "plio"

    @property
    def display_name(self) -> str:
        """Human-readable algorithm name stored in file headers."""
        return self.value

    @property
    def qualifier(self) -> str | None:
        """Code used in the ``[compress X]`` file name qualifier, or `None`
        for uncompressed output.
        """
        return _QUALIFIERS[self]

    @property
    def extension(self) -> str:
        """File extension, including any compression qualifier, that selects
        this mode (e.g. ``fits[compress G]``).
        """
        if self.qualifier is None:
            return "fits"
        return f"fits[compress {self.qualifier}]"

    @property
    def is_tile_compressed(self) -> bool:
        """Whether the image is stored as a tile-compressed binary table."""
        return self in _TILE_ALGORITHMS

    @classmethod
    def from_optional(cls, mode: FitsCompression | str | None) -> FitsCompression:
        """Normalize an optional compression argument.

        Parameters
        ----------
        mode
            A member, a member value or name (case-insensitive), or `None`.

        Returns
        -------
        member
            `NONE` if ``mode`` is `None`, the matching member otherwise.

        Raises
        ------
        ValueError
            Raised if a string matches no member.
        """
        match mode:
            case None:
                return cls.NONE
            case FitsCompression():
                return mode
        key = mode.strip().lower()
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        raise ValueError(f"Unknown FITS compression mode {mode!r}.")

    @classmethod
    def from_qualifier(cls, code: str | None) -> FitsCompression:
        """Return the member selected by a file name qualifier code.

        Parameters
        ----------
        code
            Qualifier code such as ``"G"`` or ``"HS"``, or `None` for no
            qualifier.

        Raises
        ------
        ValueError
            Raised if the code is not recognized.
        """
        for member, qualifier in _QUALIFIERS.items():
            if qualifier == code:
                return member
        raise ValueError(f"Unknown compression qualifier {code!r}.")

    def make_hdu(self, data: np.ndarray, name: str) -> astropy.io.fits.CompImageHDU:
        """Make a tile-compressed `astropy.io.fits.CompImageHDU` holding the
        given array.

        Raises
        ------
        ValueError
            Raised if this mode does not use tile compression.
        """
        if (algorithm := _TILE_ALGORITHMS.get(self)) is None:
            raise ValueError(f"Compression mode {self.name} does not use tile compression.")
        if self is FitsCompression.HSMOOTH:
            return astropy.io.fits.CompImageHDU(
                data,
                name=name,
                compression_type=algorithm,
                quantize_level=0.0,
                hcomp_scale=0,
                hcomp_smooth=True,
            )
        return astropy.io.fits.CompImageHDU(
            data,
            name=name,
            compression_type=algorithm,
            quantize_level=0.0,
        )


_QUALIFIERS: dict[FitsCompression, str | None] = {
    FitsCompression.NONE: None,
    FitsCompression.GZIP: "G",
    FitsCompression.RICE: "R",
    FitsCompression.HCOMPRESS: "H",
    FitsCompression.HSMOOTH: "HS",
    FitsCompression.BZIP2: "B",
    FitsCompression.PLIO: "P",
}

# BZIP2 has no tile algorithm in astropy; the whole file is bzip2-compressed.
_TILE_ALGORITHMS: dict[FitsCompression, str] = {
    FitsCompression.GZIP: "GZIP_1",
    FitsCompression.RICE: "RICE_1",
    FitsCompression.HCOMPRESS: "HCOMPRESS_1",
    FitsCompression.HSMOOTH: "HCOMPRESS_1",
    FitsCompression.PLIO: "PLIO_1",
}

_QUALIFIER_RE = re.compile(r"^(?P<path>.*)\[compress (?P<code>[A-Z]+)\]$")


def split_compression_qualifier(path: str | os.PathLike[str]) -> tuple[Path, str | None]:
    """Split a ``[compress X]`` qualifier off the end of a file name.

    Parameters
    ----------
    path
        File name that may end with a compression qualifier.

    Returns
    -------
    physical_path
        The file name actually present on disk.
    code
        The qualifier code (e.g. ``"G"``), or `None` if there was none.
    """
    if (match := _QUALIFIER_RE.match(os.fspath(path))) is None:
        return Path(path), None
    return Path(match.group("path")), match.group("code")
