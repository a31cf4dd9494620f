# This file is part of serialimage.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

__all__ = ("DynamicImage",)

from pathlib import Path
from typing import TYPE_CHECKING, final

import numpy as np
import numpy.typing as npt

from lsst.resources import ResourcePathExpression

from ._dtypes import NumberType, SampleType
from ._metadata import ImageMetadata
from ._pixel_format import PixelFormat

if TYPE_CHECKING:
    from .fits import FitsCompression


@final
class DynamicImage:
    """A 2-d image whose pixels may hold one to four interleaved channels.

    Parameters
    ----------
    array
        Pixel array with shape ``(height, width)`` or
        ``(height, width, channels)``.  A trailing channel axis of length one
        is dropped.
    pixel_format, optional
        Expected pixel format.  Inferred from the array's dtype and shape if
        not provided.
    metadata, optional
        Acquisition metadata to attach to the image.

    Notes
    -----
    The array is stored as a read-only, C-contiguous view, so the image
    dimensions and pixel values cannot change after construction.
    """

    def __init__(
        self,
        array: npt.ArrayLike,
        /,
        *,
        pixel_format: PixelFormat | None = None,
        metadata: ImageMetadata | None = None,
    ):
        array = np.asarray(array)
        if array.ndim == 3 and array.shape[2] == 1:
            array = array[:, :, 0]
        if array.ndim == 2:
            channels = 1
        elif array.ndim == 3:
            channels = array.shape[2]
        else:
            raise ValueError(f"Image arrays must have 2 or 3 dimensions, not {array.ndim}.")
        number_type = NumberType.from_numpy(array.dtype)
        inferred = PixelFormat.from_array_layout(number_type, channels)
        if pixel_format is not None and pixel_format != inferred:
            raise ValueError(
                f"Explicit pixel format {pixel_format} does not match array with dtype {array.dtype} "
                f"and shape {array.shape}."
            )
        array = np.ascontiguousarray(array)
        if array.flags.writeable:
            array = array.view()
            array.flags.writeable = False
        self._array = array
        self._pixel_format = inferred
        self._metadata = metadata

    @classmethod
    def from_samples(
        cls,
        samples: npt.ArrayLike,
        *,
        width: int,
        height: int,
        pixel_format: PixelFormat,
        metadata: ImageMetadata | None = None,
    ) -> DynamicImage:
        """Construct an image from a flat, row-major, channel-interleaved
        buffer.

        Parameters
        ----------
        samples
            Flat sequence of ``width * height * channels`` samples.  Values are
            cast to the pixel format's sample type.
        width
            Number of columns.
        height
            Number of rows.
        pixel_format
            Layout of the samples.
        metadata, optional
            Acquisition metadata to attach to the image.

        Returns
        -------
        image
            New image.
        """
        flat = np.asarray(samples, dtype=pixel_format.number_type.to_numpy()).ravel()
        expected = width * height * pixel_format.channels
        if flat.size != expected:
            raise ValueError(
                f"Buffer holds {flat.size} samples; a {width}x{height} {pixel_format} image needs {expected}."
            )
        shape: tuple[int, ...] = (height, width)
        if pixel_format.channels > 1:
            shape += (pixel_format.channels,)
        return cls(flat.reshape(shape), pixel_format=pixel_format, metadata=metadata)

    @property
    def array(self) -> np.ndarray:
        """The read-only pixel array."""
        return self._array

    @property
    def pixel_format(self) -> PixelFormat:
        """Layout of the pixels."""
        return self._pixel_format

    @property
    def width(self) -> int:
        """Number of columns."""
        return self._array.shape[1]

    @property
    def height(self) -> int:
        """Number of rows."""
        return self._array.shape[0]

    @property
    def channels(self) -> int:
        """Number of interleaved samples per pixel."""
        return self._pixel_format.channels

    @property
    def metadata(self) -> ImageMetadata | None:
        """Acquisition metadata, if any."""
        return self._metadata

    @metadata.setter
    def metadata(self, value: ImageMetadata | None) -> None:
        self._metadata = value

    def flattened_samples(self) -> np.ndarray:
        """Return all samples as a 1-d, row-major, channel-interleaved view."""
        return self._array.reshape(-1)

    def image_type(self) -> SampleType:
        """Return the numeric type used to store the samples on disk."""
        return self._pixel_format.number_type

    def image_size(self) -> list[int]:
        """Return the on-disk dimensions, slowest-varying first.

        Returns
        -------
        dimensions
            ``[height, width]`` for single-channel images and
            ``[height, width, channels]`` otherwise.
        """
        if self.channels == 1:
            return [self.height, self.width]
        return [self.height, self.width, self.channels]

    def write_fits(
        self,
        path: ResourcePathExpression,
        compression: FitsCompression | str | None = None,
        *,
        overwrite: bool = False,
    ) -> Path:
        """Write the image and its metadata to a FITS file.

        Parameters
        ----------
        path
            Destination.  The extension is replaced with ``.fits`` and, for
            compressed output, followed by a compression qualifier.
        compression, optional
            Compression mode; `None` writes an uncompressed file.
        overwrite, optional
            Whether to replace an existing file.

        Returns
        -------
        path
            Final path, including any compression qualifier.

        See Also
        --------
        serialimage.fits.FitsImageWriter.write
        """
        from .fits import write_fits

        return write_fits(self, compression, path, overwrite=overwrite)

    def __str__(self) -> str:
        return f"DynamicImage({self.width}x{self.height}, {self._pixel_format})"

    def __repr__(self) -> str:
        return (
            f"DynamicImage(..., pixel_format={self._pixel_format!r}, width={self.width}, "
            f"height={self.height}, metadata={self._metadata!r})"
        )
