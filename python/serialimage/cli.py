# This file is part of serialimage.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

__all__ = ("to_fits",)

import datetime
import logging

import click
import numpy as np

from ._image import DynamicImage
from ._metadata import ExtendedMetadataItem, ImageMetadata
from .fits import FitsCompression, write_fits


def _parse_key(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> list[ExtendedMetadataItem]:
    items = []
    for value in values:
        name, sep, text = value.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=VALUE, got {value!r}.", ctx=ctx, param=param)
        items.append(ExtendedMetadataItem(name=name, value=text))
    return items


@click.command("serialimage-fits")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("output", type=click.Path())
@click.option(
    "-c",
    "--compression",
    type=click.Choice([member.value for member in FitsCompression], case_sensitive=False),
    default=FitsCompression.NONE.value,
    help="Compression algorithm.",
)
@click.option("--overwrite", is_flag=True, help="Replace the output file if it exists.")
@click.option("--camera", help="Camera name; enables the full set of metadata cards.")
@click.option("--exposure", type=float, help="Exposure time in seconds.")
@click.option("--gain", type=float, help="Gain setting.")
@click.option(
    "-k",
    "--key",
    "keys",
    multiple=True,
    callback=_parse_key,
    help="Extra header record as NAME=VALUE; may be repeated.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging threshold.",
)
def to_fits(
    input_file: str,
    output: str,
    compression: str,
    overwrite: bool,
    camera: str | None,
    exposure: float | None,
    gain: float | None,
    keys: list[ExtendedMetadataItem],
    log_level: str,
) -> None:
    """Write the image array saved in INPUT_FILE (.npy) to a FITS file."""
    logging.basicConfig(level=log_level.upper())
    try:
        image = DynamicImage(np.load(input_file))
    except ValueError as err:
        raise click.BadParameter(str(err), param_hint="INPUT_FILE") from None
    if camera is not None or exposure is not None or gain is not None or keys:
        image.metadata = ImageMetadata(
            camera_name=camera if camera is not None else "unknown",
            timestamp=datetime.datetime.now(datetime.UTC),
            exposure=datetime.timedelta(seconds=exposure or 0.0),
            gain=gain or 0.0,
            extended_metadata=tuple(keys),
        )
    try:
        path = write_fits(image, FitsCompression.from_optional(compression), output, overwrite=overwrite)
    except (OSError, ValueError) as err:
        raise click.ClickException(str(err)) from err
    click.echo(str(path))


if __name__ == "__main__":
    to_fits()
