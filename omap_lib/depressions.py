# -*- coding: utf-8 -*-
"""Reclassification of depression contours.

Closed basemap contours wound clockwise (negative signed area) enclose
terrain lower than their surroundings and are moved to the negative basemap
contour symbol. Run after line merging, which closes new rings.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from omap_lib.enums import Symbol
from omap_lib.errors import MismatchedGeometryError
from omap_lib.objects import Coordinate
from omap_lib.objects import LineObject

if TYPE_CHECKING:
    from omap_lib.objects import MapObject
    from omap_lib.store import MapObjectStore

logger = logging.getLogger(__name__)


def line_string_signed_area(coords: Sequence[Coordinate]) -> float:
    """Shoelace signed area of a closed ring, 0 for open or degenerate lines."""
    if len(coords) < 3 or tuple(coords[0]) != tuple(coords[-1]):
        return 0.0
    ring = np.asarray(coords, dtype=float)
    x = ring[:, 0]
    y = ring[:, 1]
    return 0.5 * float(np.sum(x[:-1] * y[1:] - y[:-1] * x[1:]))


def mark_basemap_depressions(store: MapObjectStore) -> int:
    """Move negative-area closed basemap contours to their own symbol.

    Returns:
        Number of contours reclassified

    Raises:
        MismatchedGeometryError: If a non-line object is stored under the
            basemap contour symbol
    """
    if Symbol.BASEMAP_CONTOUR not in store:
        return 0

    kept: list[MapObject] = []
    depressions: list[MapObject] = []
    for obj in store.get(Symbol.BASEMAP_CONTOUR):
        match obj:
            case LineObject() if (
                obj.is_closed and line_string_signed_area(obj.coords) < 0.0
            ):
                obj.symbol = Symbol.NEG_BASEMAP_CONTOUR
                depressions.append(obj)
            case LineObject():
                kept.append(obj)
            case _:
                raise MismatchedGeometryError(
                    f"Non line object under {Symbol.BASEMAP_CONTOUR.name}"
                )

    store.replace(Symbol.BASEMAP_CONTOUR, kept)
    if depressions:
        store.replace(
            Symbol.NEG_BASEMAP_CONTOUR,
            store.get(Symbol.NEG_BASEMAP_CONTOUR) + depressions,
        )

    logger.info("Marked %d basemap contours as depressions", len(depressions))
    return len(depressions)
