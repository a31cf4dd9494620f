# This file is part of serialimage.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

import unittest
from pathlib import Path

import astropy.io.fits
import numpy as np

from serialimage.fits import FitsCompression, split_compression_qualifier


class FitsCompressionTestCase(unittest.TestCase):
    """Tests for the FitsCompression enumeration."""

    def test_extension_and_display_name(self) -> None:
        expected = {
            FitsCompression.NONE: ("fits", "uncomp"),
            FitsCompression.GZIP: ("fits[compress G]", "gzip"),
            FitsCompression.RICE: ("fits[compress R]", "rice"),
            FitsCompression.HCOMPRESS: ("fits[compress H]", "hcompress"),
            FitsCompression.HSMOOTH: ("fits[compress HS]", "hscompress"),
            FitsCompression.BZIP2: ("fits[compress B]", "bzip2"),
            FitsCompression.PLIO: ("fits[compress P]", "plio"),
        }
        self.assertEqual(set(expected), set(FitsCompression))
        for mode, (extension, display_name) in expected.items():
            # Repeated calls give the same answer.
            for _ in range(2):
                self.assertEqual(mode.extension, extension)
                self.assertEqual(mode.display_name, display_name)
                self.assertEqual(str(mode), display_name)

    def test_from_optional(self) -> None:
        self.assertIs(FitsCompression.from_optional(None), FitsCompression.NONE)
        for mode in FitsCompression:
            self.assertIs(FitsCompression.from_optional(mode), mode)
            self.assertIs(FitsCompression.from_optional(mode.value), mode)
            self.assertIs(FitsCompression.from_optional(mode.name), mode)
        self.assertIs(FitsCompression.from_optional(" Rice "), FitsCompression.RICE)
        self.assertIs(FitsCompression.from_optional("hsmooth"), FitsCompression.HSMOOTH)
        with self.assertRaises(ValueError):
            FitsCompression.from_optional("lz4")

    def test_qualifiers(self) -> None:
        for mode in FitsCompression:
            self.assertIs(FitsCompression.from_qualifier(mode.qualifier), mode)
            physical_path, code = split_compression_qualifier(f"dir/out.{mode.extension}")
            self.assertEqual(physical_path, Path("dir/out.fits"))
            self.assertEqual(code, mode.qualifier)
        with self.assertRaises(ValueError):
            FitsCompression.from_qualifier("Z")

    def test_split_without_qualifier(self) -> None:
        self.assertEqual(split_compression_qualifier(Path("a/b.fits")), (Path("a/b.fits"), None))
        self.assertEqual(split_compression_qualifier("a/b[1].fits"), (Path("a/b[1].fits"), None))

    def test_tile_compression(self) -> None:
        data = np.arange(64, dtype=np.uint8).reshape(8, 8)
        for mode in FitsCompression:
            if mode in (FitsCompression.NONE, FitsCompression.BZIP2):
                self.assertFalse(mode.is_tile_compressed)
                with self.assertRaises(ValueError):
                    mode.make_hdu(data, name="IMAGE")
            else:
                self.assertTrue(mode.is_tile_compressed)
                hdu = mode.make_hdu(data, name="IMAGE")
                self.assertIsInstance(hdu, astropy.io.fits.CompImageHDU)
                self.assertEqual(hdu.name, "IMAGE")


if __name__ == "__main__":
    unittest.main()
