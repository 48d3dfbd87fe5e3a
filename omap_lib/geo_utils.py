# -*- coding: utf-8 -*-
"""Thin wrappers around the projection engine and the geomagnetic model."""

from __future__ import annotations

import math

import pyIGRF14 as pyIGRF
from pydantic import BaseModel
from pydantic_extra_types.coordinate import Latitude  # noqa: TC002
from pydantic_extra_types.coordinate import Longitude  # noqa: TC002
from pyproj import CRS
from pyproj import Transformer
from pyproj.exceptions import CRSError
from pyproj.exceptions import ProjError

from omap_lib.constants import DECLINATION_PRECISION
from omap_lib.constants import WGS84_EPSG
from omap_lib.errors import GeomagneticError
from omap_lib.errors import ProjectionError


class GeoLocation(BaseModel):
    latitude: Latitude
    longitude: Longitude

    def as_tuple(self) -> tuple[float, float]:
        """Return the longitude and latitude as a tuple (x, y order)."""
        return (self.longitude, self.latitude)


# Cache for pyproj transformers ((source, target) -> transformer)
_transformer_cache: dict[tuple[str, str], Transformer] = {}


def get_transformer(source: CRS | int | str, target: CRS | int | str) -> Transformer:
    """Get or create a cached, always_xy transformer between two CRS.

    Args:
        source: Source CRS (pyproj CRS, EPSG code or any pyproj CRS input)
        target: Target CRS

    Returns:
        Transformer from ``source`` to ``target``

    Raises:
        ProjectionError: If either CRS is invalid
    """
    key = (_crs_key(source), _crs_key(target))
    if key not in _transformer_cache:
        try:
            _transformer_cache[key] = Transformer.from_crs(
                CRS.from_user_input(source),
                CRS.from_user_input(target),
                always_xy=True,
            )
        except (CRSError, ProjError) as e:
            raise ProjectionError(
                f"Cannot build transformation {key[0]} -> {key[1]}: {e}"
            ) from e
    return _transformer_cache[key]


def _crs_key(crs: CRS | int | str) -> str:
    if isinstance(crs, CRS):
        return crs.to_wkt()
    if isinstance(crs, int):
        return f"EPSG:{crs}"
    return crs


def reproject(
    xs: list[float],
    ys: list[float],
    source: CRS | int | str,
    target: CRS | int | str,
) -> tuple[list[float], list[float]]:
    """Reproject coordinates between two CRS.

    Raises:
        ProjectionError: If any coordinate cannot be transformed
    """
    transformer = get_transformer(source, target)
    try:
        out_x, out_y = transformer.transform(xs, ys, errcheck=True)
    except ProjError as e:
        raise ProjectionError(f"Reprojection failed: {e}") from e

    out_x = [float(x) for x in out_x]
    out_y = [float(y) for y in out_y]
    if not all(math.isfinite(v) for v in (*out_x, *out_y)):
        raise ProjectionError("Reprojection produced non finite coordinates")
    return out_x, out_y


def to_geographic(x: float, y: float, epsg: int) -> GeoLocation:
    """Convert a projected coordinate to WGS84 latitude / longitude."""
    (lon,), (lat,) = reproject([x], [y], epsg, WGS84_EPSG)
    return GeoLocation(latitude=lat, longitude=lon)


def get_declination(location: GeoLocation, year: float) -> float:
    """Magnetic declination in degrees (positive = east) from the IGRF model.

    ``year`` is a decimal year, e.g. ``2024.5`` for early July 2024.

    Raises:
        GeomagneticError: If the model cannot be evaluated
    """
    try:
        declination, _, _, _, _, _, _ = pyIGRF.igrf_value(
            location.latitude,
            location.longitude,
            alt=0.0,
            year=year,
        )
    except Exception as e:
        raise GeomagneticError(
            f"IGRF evaluation failed at ({location.latitude}, "
            f"{location.longitude}) for {year:.2f}: {e}"
        ) from e

    if not math.isfinite(declination):
        raise GeomagneticError("IGRF returned a non finite declination")
    return round(declination, DECLINATION_PRECISION)
