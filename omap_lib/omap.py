# -*- coding: utf-8 -*-
"""Orienteering map aggregate.

ALL OBJECT COORDINATES ARE RELATIVE TO THE REFERENCE POINT. When a CRS is
given the map is written georeferenced, otherwise in local space.

Typical use::

    omap = Omap((512_300.0, 6_634_100.0), crs_epsg=25833, scale=Scale.S15_000)
    omap.add_object(LineObject.from_line_string(coords, Symbol.BASEMAP_CONTOUR))
    omap.merge_lines(0.5)
    omap.mark_basemap_depressions()
    omap.write_to_file(Path("forest.omap"), bezier_error=0.3)

``write_to_file`` consumes the map: afterwards every method raises
``MapConsumedError``.
"""

from __future__ import annotations

import datetime
import functools
from pathlib import Path

from omap_lib.depressions import mark_basemap_depressions
from omap_lib.enums import Scale
from omap_lib.enums import Symbol
from omap_lib.errors import MapConsumedError
from omap_lib.georeferencing import GeodeticParameters
from omap_lib.georeferencing import compute_geodetic_parameters
from omap_lib.io import write_omap_file
from omap_lib.merge import MergeStats
from omap_lib.merge import merge_lines
from omap_lib.objects import MapObject
from omap_lib.store import MapObjectStore


def _not_consumed(method):
    @functools.wraps(method)
    def wrapper(self: Omap, *args, **kwargs):
        if self._consumed:
            raise MapConsumedError
        return method(self, *args, **kwargs)

    return wrapper


class Omap:
    """An orienteering map under construction.

    Args:
        ref_point: Reference point in the projected CRS
        crs_epsg: EPSG code of the projected CRS, None for a local map
        scale: Map scale
        date: Date used for the magnetic declination (default: today)

    Raises:
        ProjectionError: If the georeferencing cannot be computed
    """

    def __init__(
        self,
        ref_point: tuple[float, float],
        crs_epsg: int | None = None,
        scale: Scale = Scale.S15_000,
        *,
        date: datetime.date | None = None,
    ) -> None:
        self._params = compute_geodetic_parameters(ref_point, crs_epsg, scale, date)
        self._objects = MapObjectStore()
        self._consumed = False

    @property
    def consumed(self) -> bool:
        return self._consumed

    @property
    @_not_consumed
    def geodetic_parameters(self) -> GeodeticParameters:
        return self._params

    @property
    @_not_consumed
    def objects(self) -> MapObjectStore:
        return self._objects

    @_not_consumed
    def get_crs(self) -> int | None:
        return self._params.crs_epsg

    @_not_consumed
    def get_ref_point(self) -> tuple[float, float]:
        return self._params.ref_point

    @_not_consumed
    def get_scale(self) -> Scale:
        return self._params.scale

    @_not_consumed
    def reserve_capacity(self, symbol: Symbol) -> None:
        """Create the bucket for ``symbol`` now, fixing its output position."""
        self._objects.reserve_capacity(symbol)

    @_not_consumed
    def add_object(self, obj: MapObject) -> None:
        self._objects.add(obj)

    @_not_consumed
    def merge_lines(self, delta: float) -> MergeStats:
        """Join line fragments whose endpoints are within ``delta`` meters."""
        return merge_lines(self._objects, delta)

    @_not_consumed
    def mark_basemap_depressions(self) -> int:
        """Move closed negative-area basemap contours to their own symbol."""
        return mark_basemap_depressions(self._objects)

    @_not_consumed
    def write_to_file(
        self, path: Path | str, bezier_error: float | None = None
    ) -> Path:
        """Write the map and consume it.

        Args:
            path: Output path, the extension is forced to .omap
            bezier_error: Curve fitting tolerance in meters, None to write
                the vertices unchanged

        Returns:
            Path of the written file
        """
        self._consumed = True
        return write_omap_file(
            path, self._params, self._objects, bezier_error=bezier_error
        )
