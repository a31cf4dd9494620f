# This file is part of serialimage.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

import unittest

import numpy as np

from serialimage import NumberType, PixelFormat


class NumberTypeTestCase(unittest.TestCase):
    """Tests for the NumberType enumeration."""

    def test_numpy_conversions(self) -> None:
        for number_type in NumberType:
            self.assertEqual(NumberType.from_numpy(number_type.to_numpy()), number_type)
        # Byte order does not matter.
        self.assertEqual(NumberType.from_numpy(">u2"), NumberType.uint16)
        with self.assertRaises(ValueError):
            NumberType.from_numpy(np.complex64)

    def test_bitpix(self) -> None:
        self.assertEqual(NumberType.uint8.bitpix, 8)
        self.assertEqual(NumberType.uint16.bitpix, 16)
        self.assertEqual(NumberType.int32.bitpix, 32)
        self.assertEqual(NumberType.float32.bitpix, -32)
        self.assertEqual(NumberType.float64.bitpix, -64)
        with self.assertRaises(TypeError):
            NumberType.bool.bitpix


class PixelFormatTestCase(unittest.TestCase):
    """Tests for the PixelFormat enumeration."""

    def test_layouts(self) -> None:
        expected = {
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
        self.assertEqual(set(expected), set(PixelFormat))
        for pixel_format, (number_type, channels) in expected.items():
            self.assertEqual(pixel_format.number_type, number_type)
            self.assertEqual(pixel_format.channels, channels)
            self.assertIs(PixelFormat.from_array_layout(number_type, channels), pixel_format)

    def test_unsupported_layouts(self) -> None:
        with self.assertRaises(ValueError):
            PixelFormat.from_array_layout(NumberType.float32, 1)
        with self.assertRaises(ValueError):
            PixelFormat.from_array_layout(NumberType.float32, 2)
        with self.assertRaises(ValueError):
            PixelFormat.from_array_layout(NumberType.uint8, 5)
        with self.assertRaises(ValueError):
            PixelFormat.from_array_layout(NumberType.int16, 1)


if __name__ == "__main__":
    unittest.main()
