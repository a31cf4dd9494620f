# This file is part of serialimage.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

__all__ = (
    "FixedClock",
    "STRUCTURAL_KEYWORDS",
    "assert_image_hdu_matches",
    "make_array",
)

import datetime
import unittest

import astropy.io.fits
import numpy as np

from .._dtypes import NumberType
from .._image import DynamicImage
from .._pixel_format import PixelFormat

STRUCTURAL_KEYWORDS = frozenset(
    {"SIMPLE", "XTENSION", "BITPIX", "NAXIS", "EXTEND", "PCOUNT", "GCOUNT", "BZERO", "BSCALE", "EXTNAME"}
)
"""Header keywords that describe the HDU itself rather than the image."""


def make_array(pixel_format: PixelFormat, width: int, height: int, seed: int = 1) -> np.ndarray:
    """Make an array of random pixel values with the layout of the given
    pixel format.

    Parameters
    ----------
    pixel_format
        Layout of the array.
    width
        Number of columns.
    height
        Number of rows.
    seed, optional
        Random number seed.
    """
    rng = np.random.default_rng(seed)
    shape: tuple[int, ...] = (height, width)
    if pixel_format.channels > 1:
        shape += (pixel_format.channels,)
    if pixel_format.number_type is NumberType.float32:
        return rng.random(shape, dtype=np.float32)
    dtype = pixel_format.number_type.to_numpy()
    return rng.integers(0, np.iinfo(dtype).max, size=shape, endpoint=True, dtype=dtype)


class FixedClock:
    """A clock for `FitsImageWriter` that always returns the same time and
    counts how often it was read.
    """

    def __init__(self, now: datetime.datetime):
        self.now = now
        self.calls = 0

    def __call__(self) -> datetime.datetime:
        self.calls += 1
        return self.now


def assert_image_hdu_matches(
    tc: unittest.TestCase, hdu: astropy.io.fits.PrimaryHDU | astropy.io.fits.ImageHDU, image: DynamicImage
) -> None:
    """Test that an HDU read back from a file holds exactly the pixels of an
    image.

    Parameters
    ----------
    tc
        Test case object with assert methods to use.
    hdu
        HDU (uncompressed or tile-compressed) to check.
    image
        Image that was written.
    """
    tc.assertEqual(list(hdu.data.shape), image.image_size())
    tc.assertEqual(NumberType.from_numpy(hdu.data.dtype), image.image_type())
    tc.assertEqual(hdu.header["NAXIS"], len(image.image_size()))
    # FITS axes are numbered fastest-varying first.
    tc.assertEqual(
        [hdu.header[f"NAXIS{n}"] for n in range(hdu.header["NAXIS"], 0, -1)],
        image.image_size(),
    )
    np.testing.assert_array_equal(hdu.data, image.array)
