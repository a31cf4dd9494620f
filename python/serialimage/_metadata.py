# This file is part of serialimage.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

__all__ = ("ExtendedMetadataItem", "ImageMetadata")

import datetime

import pydantic


class ExtendedMetadataItem(pydantic.BaseModel):
    """A caller-defined header record attached to an image."""

    model_config = pydantic.ConfigDict(frozen=True)

    name: str = pydantic.Field(description="FITS keyword for the record.")
    value: str = pydantic.Field(description="Text value of the record.")

    @pydantic.field_validator("name")
    @classmethod
    def _normalize_name(cls, name: str) -> str:
        name = name.strip().upper()
        if not name:
            raise ValueError("Extended metadata names must not be empty.")
        return name


class ImageMetadata(pydantic.BaseModel):
    """Acquisition metadata that accompanies a `DynamicImage`.

    Instances are immutable; use `model_copy` or `add_extended_attribute` to
    derive modified versions.

    Notes
    -----
    A missing ``timestamp`` is not an error: writers substitute the time at
    which the image is serialized.  Naive timestamps are interpreted as UTC.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    camera_name: str = pydantic.Field(description="Name of the camera that captured the image.")
    timestamp: datetime.datetime | None = pydantic.Field(
        default=None, description="Start of the exposure."
    )
    bin_x: int = pydantic.Field(default=1, ge=1, description="Binning factor along the x axis.")
    bin_y: int = pydantic.Field(default=1, ge=1, description="Binning factor along the y axis.")
    pixel_size_x: float = pydantic.Field(default=0.0, description="Pixel size along x, in microns.")
    pixel_size_y: float = pydantic.Field(default=0.0, description="Pixel size along y, in microns.")
    exposure: datetime.timedelta = pydantic.Field(
        default=datetime.timedelta(0), description="Exposure duration."
    )
    temperature: float = pydantic.Field(default=0.0, description="Sensor temperature, in degrees C.")
    origin_x: int = pydantic.Field(default=0, description="Column of the frame origin on the sensor.")
    origin_y: int = pydantic.Field(default=0, description="Row of the frame origin on the sensor.")
    offset: int = pydantic.Field(default=0, description="Signal offset applied by the camera.")
    gain: float = pydantic.Field(default=0.0, description="Camera gain setting.")
    min_gain: float = pydantic.Field(default=0.0, description="Minimum valid gain setting.")
    max_gain: float = pydantic.Field(default=0.0, description="Maximum valid gain setting.")
    extended_metadata: tuple[ExtendedMetadataItem, ...] = pydantic.Field(
        default=(), description="Additional header records, in the order they should be written."
    )

    @pydantic.field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, timestamp: datetime.datetime | None) -> datetime.datetime | None:
        if timestamp is not None and timestamp.tzinfo is None:
            return timestamp.replace(tzinfo=datetime.UTC)
        return timestamp

    @property
    def binning(self) -> tuple[int, int]:
        """Binning factors as ``(x, y)``."""
        return (self.bin_x, self.bin_y)

    @property
    def pixel_size(self) -> tuple[float, float]:
        """Pixel size as ``(x, y)``, in microns."""
        return (self.pixel_size_x, self.pixel_size_y)

    @property
    def origin(self) -> tuple[int, int]:
        """Frame origin on the sensor as ``(x, y)``."""
        return (self.origin_x, self.origin_y)

    def add_extended_attribute(self, name: str, value: str) -> ImageMetadata:
        """Return a copy with one more extended record appended.

        Parameters
        ----------
        name
            FITS keyword for the record.
        value
            Text value of the record.
        """
        item = ExtendedMetadataItem(name=name, value=value)
        return self.model_copy(update={"extended_metadata": self.extended_metadata + (item,)})
