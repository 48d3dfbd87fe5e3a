# -*- coding: utf-8 -*-
"""File output for .omap maps.

The file is written in a single pass while the object store is drained.
A write that fails half way leaves no file behind: the partial output is
removed before the error is re-raised.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from omap_lib.constants import OMAP_ENCODING
from omap_lib.constants import OMAP_EXTENSION
from omap_lib.errors import OmapWriteError
from omap_lib.format import format_colors_symbols
from omap_lib.format import format_end_of_file
from omap_lib.format import format_georeferencing
from omap_lib.format import format_header
from omap_lib.format import format_object
from omap_lib.format import format_parts_end
from omap_lib.format import format_parts_start
from omap_lib.map_coord import CoordinateProjector

if TYPE_CHECKING:
    from omap_lib.georeferencing import GeodeticParameters
    from omap_lib.store import MapObjectStore

logger = logging.getLogger(__name__)


def omap_path(path: Path | str) -> Path:
    """Return ``path`` with the .omap extension enforced."""
    path = Path(path)
    if path.suffix.lower() != OMAP_EXTENSION:
        path = path.with_suffix(OMAP_EXTENSION)
    return path


def write_omap_file(
    path: Path | str,
    params: GeodeticParameters,
    store: MapObjectStore,
    *,
    bezier_error: float | None = None,
) -> Path:
    """Write a map to disk, draining ``store``.

    Args:
        path: Output path (extension forced to .omap)
        params: Georeferencing of the map
        store: Objects to write, empty afterwards
        bezier_error: Curve fitting tolerance in meters, None to write raw
            polylines

    Returns:
        Path of the written file

    Raises:
        OmapWriteError: If the file cannot be opened or written
        MapCoordinateOverflowError: If an object falls outside the map range
    """
    path = omap_path(path)
    projector = CoordinateProjector.from_parameters(params)
    num_objects = len(store)

    try:
        f = path.open(mode="w", encoding=OMAP_ENCODING, newline="\n")
    except OSError as e:
        raise OmapWriteError(f"Cannot open `{path}` for writing: {e}") from e

    try:
        with f:
            f.write(format_header())
            f.write(format_georeferencing(params))
            f.write(format_colors_symbols(params.scale))
            f.write(format_parts_start(num_objects))
            for obj in store.drain():
                f.write(format_object(obj, projector, bezier_error))
            f.write(format_parts_end())
            f.write(format_end_of_file())
    except BaseException as e:
        path.unlink(missing_ok=True)
        if isinstance(e, OSError):
            raise OmapWriteError(f"Failed to write `{path}`: {e}") from e
        raise

    logger.info("Wrote %d objects to `%s`", num_objects, path)
    return path
