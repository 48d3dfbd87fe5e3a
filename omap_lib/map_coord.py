# -*- coding: utf-8 -*-
"""Conversion of projected coordinates to map coordinates.

Map coordinates are integer micrometres on paper, x to the right and
y downwards, with the vertical axis aligned to magnetic north. Input
coordinates are grid coordinates relative to the map reference point.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from omap_lib.constants import MAP_COORD_MAX
from omap_lib.constants import MAP_COORD_MIN
from omap_lib.constants import MAP_UNITS_PER_MM
from omap_lib.constants import MM_PER_METER
from omap_lib.errors import MapCoordinateOverflowError

if TYPE_CHECKING:
    from omap_lib.enums import Scale
    from omap_lib.georeferencing import GeodeticParameters


@dataclass(frozen=True)
class CoordinateProjector:
    """Projects grid coordinates to map units.

    Attributes:
        scale: Map scale
        grivation: Grivation in degrees
        combined_scale_factor: Grid distance / real distance
    """

    scale: Scale
    grivation: float = 0.0
    combined_scale_factor: float = 1.0

    @classmethod
    def from_parameters(cls, params: GeodeticParameters) -> CoordinateProjector:
        return cls(
            scale=params.scale,
            grivation=params.grivation,
            combined_scale_factor=params.combined_scale_factor,
        )

    @property
    def units_per_meter(self) -> float:
        """Map units per real meter at this scale."""
        return MM_PER_METER * MAP_UNITS_PER_MM / self.scale.denominator

    def to_map_coordinates(self, x: float, y: float) -> tuple[int, int]:
        """Project one coordinate.

        Args:
            x: Easting relative to the reference point (meters)
            y: Northing relative to the reference point (meters)

        Returns:
            (x, y) map coordinates

        Raises:
            MapCoordinateOverflowError: If the result is outside the
                representable range
        """
        # grid distance -> real distance
        real_x = x / self.combined_scale_factor
        real_y = y / self.combined_scale_factor

        # rotate so that magnetic north points up
        theta = math.radians(self.grivation)
        cos_t = math.cos(theta)
        sin_t = math.sin(theta)
        rot_x = real_x * cos_t - real_y * sin_t
        rot_y = real_x * sin_t + real_y * cos_t

        map_x = rot_x * self.units_per_meter
        map_y = -rot_y * self.units_per_meter

        if not (
            math.isfinite(map_x)
            and math.isfinite(map_y)
            and MAP_COORD_MIN <= round(map_x) <= MAP_COORD_MAX
            and MAP_COORD_MIN <= round(map_y) <= MAP_COORD_MAX
        ):
            raise MapCoordinateOverflowError(x, y)

        return round(map_x), round(map_y)

    def format_coordinate(self, x: float, y: float, flags: int = 0) -> str:
        """Project one coordinate and format it as a ``<coords>`` token."""
        map_x, map_y = self.to_map_coordinates(x, y)
        if flags:
            return f"{map_x} {map_y} {int(flags)};"
        return f"{map_x} {map_y};"
