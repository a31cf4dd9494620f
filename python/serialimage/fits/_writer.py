# This file is part of serialimage.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

__all__ = ("FitsImageWriter", "write_fits")

import bz2
import datetime
import io
import os
import re
from collections.abc import Callable
from logging import getLogger
from pathlib import Path
from typing import Any

import astropy.io.fits

from lsst.resources import ResourcePath, ResourcePathExpression

from .._image import DynamicImage
from .._metadata import ImageMetadata
from ._common import FitsCompression, PathConflictError, split_compression_qualifier

_LOG = getLogger(__name__)

_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.UTC)

_DATE_OBS_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"

_URI_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


def _utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


class FitsImageWriter:
    """Writes `DynamicImage` objects to FITS files.

    Parameters
    ----------
    clock, optional
        Callable returning the current time.  Used for the ``DATE-OBS`` and
        ``TIMESTAMP`` cards of images without a recorded timestamp.

    Notes
    -----
    Uncompressed images are written to the primary HDU along with all header
    cards.  Compressed images are written to an ``IMAGE`` extension that holds
    all header cards, while the primary HDU has no data and only the
    ``COMPRESSED_IMAGE`` and ``COMPRESSION_ALGO`` cards.
    """

    def __init__(self, clock: Callable[[], datetime.datetime] = _utc_now):
        self._clock = clock

    def write(
        self,
        image: DynamicImage,
        compression: FitsCompression | str | None,
        destination: ResourcePathExpression,
        *,
        overwrite: bool = False,
    ) -> Path:
        """Write an image and its metadata to a FITS file.

        Parameters
        ----------
        image
            Image to write.
        compression
            Compression mode; `None` is equivalent to `FitsCompression.NONE`.
        destination
            Local file path or ``file`` URI to write.  Its extension is
            replaced with ``.fits``.  Relative paths stay relative.
        overwrite, optional
            Whether to replace an existing file.

        Returns
        -------
        path
            The destination with the compression mode's extension applied.
            For compressed modes this ends with a ``[compress X]`` qualifier
            that is not part of the file name on disk; see
            `split_compression_qualifier`.

        Raises
        ------
        PathConflictError
            Raised if the destination is an existing directory.
        OSError
            Raised if the file exists and ``overwrite`` is `False`, or if the
            file system rejects a deletion or write.
        ValueError
            Raised if the destination is not a local file, or by Astropy if the
            image cannot be stored with the requested compression.
        """
        compression = FitsCompression.from_optional(compression)
        path = self._resolve_local(destination)
        if path.is_dir():
            raise PathConflictError(f"Destination {str(path)!r} is a directory.")
        path = path.with_suffix(f".{FitsCompression.NONE.extension}")
        if overwrite and path.exists():
            # Overwriting through a name that carries a compression qualifier
            # does not reliably replace the existing file, so remove it first.
            _LOG.debug("Removing existing file %s before writing.", path)
            path.unlink()
        path = path.with_suffix(f".{compression.extension}")
        physical_path, code = split_compression_qualifier(path)
        # The qualifier on the final name selects how the data are stored.
        compression = FitsCompression.from_qualifier(code)
        _LOG.debug(
            "Writing %s to %s with %s compression (BITPIX=%d, shape=%s).",
            image,
            physical_path,
            compression.display_name,
            image.image_type().bitpix,
            image.image_size(),
        )
        hdu_list = self.make_hdu_list(image, compression)
        if compression is FitsCompression.BZIP2:
            self._write_bzip2(hdu_list, physical_path, overwrite=overwrite)
        else:
            hdu_list.writeto(physical_path, overwrite=overwrite)
        return path

    def make_hdu_list(self, image: DynamicImage, compression: FitsCompression) -> astropy.io.fits.HDUList:
        """Build the in-memory HDUs for an image without writing them.

        Parameters
        ----------
        image
            Image to convert.
        compression
            Compression mode that determines the layout.

        Returns
        -------
        hdu_list
            A single primary HDU holding the image, or a data-less primary HDU
            followed by an ``IMAGE`` extension.
        """
        data = image.array
        if compression is FitsCompression.NONE:
            hdu: Any = astropy.io.fits.PrimaryHDU(data)
            self.update_header(hdu.header, image.metadata)
            return astropy.io.fits.HDUList([hdu])
        primary_hdu = astropy.io.fits.PrimaryHDU()
        _set_card(primary_hdu.header, "COMPRESSED_IMAGE", "T", "Image data is in the IMAGE HDU.")
        _set_card(primary_hdu.header, "COMPRESSION_ALGO", compression.display_name, "Compression algorithm.")
        if compression.is_tile_compressed:
            hdu = compression.make_hdu(data, name="IMAGE")
        else:
            hdu = astropy.io.fits.ImageHDU(data, name="IMAGE")
        self.update_header(hdu.header, image.metadata)
        return astropy.io.fits.HDUList([primary_hdu, hdu])

    def update_header(self, header: astropy.io.fits.Header, metadata: ImageMetadata | None) -> None:
        """Add the acquisition metadata cards to a header.

        Parameters
        ----------
        header
            Header of the HDU that holds the pixel data.  Modified in place.
        metadata
            Image metadata.  If `None`, only ``CAMERA``, ``DATE-OBS`` and
            ``TIMESTAMP`` are written, using the writer's clock.
        """
        timestamp = None if metadata is None else metadata.timestamp
        if timestamp is None:
            timestamp = self._clock()
        timestamp = timestamp.astimezone(datetime.UTC)
        camera_name = "unknown" if metadata is None else metadata.camera_name
        _set_card(header, "CAMERA", camera_name, "Camera name.")
        _set_card(header, "DATE-OBS", timestamp.strftime(_DATE_OBS_FORMAT), "UTC start of exposure.")
        _set_card(
            header,
            "TIMESTAMP",
            (timestamp - _EPOCH) // datetime.timedelta(milliseconds=1),
            "Milliseconds since the Unix epoch.",
        )
        if metadata is None:
            return
        bin_x, bin_y = metadata.binning
        _set_card(header, "XBINNING", bin_x, "Binning factor along x.")
        _set_card(header, "YBINNING", bin_y, "Binning factor along y.")
        pixel_size_x, pixel_size_y = metadata.pixel_size
        _set_card(header, "XPIXSZ", pixel_size_x, "[um] Pixel size along x.")
        _set_card(header, "YPIXSZ", pixel_size_y, "[um] Pixel size along y.")
        _set_card(header, "EXPTIME", metadata.exposure.total_seconds(), "[s] Exposure time.")
        _set_card(header, "CCD-TEMP", metadata.temperature, "[C] Sensor temperature.")
        origin_x, origin_y = metadata.origin
        _set_card(header, "XORIGIN", origin_x, "Frame origin column on the sensor.")
        _set_card(header, "YORIGIN", origin_y, "Frame origin row on the sensor.")
        _set_card(header, "OFFSET", metadata.offset, "Signal offset.")
        _set_card(header, "GAIN", metadata.gain, "Gain setting.")
        _set_card(header, "GAIN_MIN", metadata.min_gain, "Minimum gain setting.")
        _set_card(header, "GAIN_MAX", metadata.max_gain, "Maximum gain setting.")
        # Extended records are appended, so repeated names and names shared
        # with the cards above each get their own record.
        for item in metadata.extended_metadata:
            header.append((_card_keyword(item.name), item.value), end=True)

    @staticmethod
    def _resolve_local(destination: ResourcePathExpression) -> Path:
        # Only explicit URIs are parsed; "#" and "%" in plain paths are part
        # of the file name.
        if isinstance(destination, str | os.PathLike):
            if not _URI_SCHEME_RE.match(os.fspath(destination)):
                return Path(destination)
        uri = ResourcePath(destination)
        if not uri.isLocal:
            raise ValueError(f"FITS files can only be written to local paths, not {uri}.")
        return Path(uri.ospath)

    @staticmethod
    def _write_bzip2(hdu_list: astropy.io.fits.HDUList, path: Path, *, overwrite: bool) -> None:
        # Astropy detects bzip2 streams by their magic bytes on read, so the
        # file keeps its plain .fits name.
        buffer = io.BytesIO()
        hdu_list.writeto(buffer)
        with bz2.open(path, "wb" if overwrite else "xb") as stream:
            stream.write(buffer.getvalue())


def _card_keyword(key: str) -> str:
    # Astropy would otherwise warn before converting long keywords.
    if len(key) > 8:
        return f"HIERARCH {key}"
    return key


def _set_card(header: astropy.io.fits.Header, key: str, value: Any, comment: str | None = None) -> None:
    header.set(_card_keyword(key), value, comment)


_DEFAULT_WRITER = FitsImageWriter()


def write_fits(
    image: DynamicImage,
    compression: FitsCompression | str | None,
    destination: ResourcePathExpression,
    *,
    overwrite: bool = False,
) -> Path:
    """Write an image to a FITS file with the default writer.

    See `FitsImageWriter.write` for details.
    """
    return _DEFAULT_WRITER.write(image, compression, destination, overwrite=overwrite)
