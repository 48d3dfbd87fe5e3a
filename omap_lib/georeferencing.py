# -*- coding: utf-8 -*-
"""Georeferencing parameters of a map.

To compute map coordinates three things are needed besides the map scale:

- a projected CRS for the input coordinates,
- the grivation, the angle between magnetic north and grid north
  (``grivation = declination - convergence``),
- the combined scale factor relating grid distances to real distances
  (``grid_scale_factor * elevation_scale_factor``).

The declination comes from the IGRF magnetic model at the reference point,
the convergence and grid scale factor are estimated from 1 km baselines
the same way OpenOrienteering Mapper does. The elevation scale factor
(``ellipsoid_radius / (ellipsoid_radius + height)``, called auxiliary scale
factor by Mapper) is assumed to be 1.

Without a CRS the map is written in local space: no rotation and no scale
correction.
"""

from __future__ import annotations

import datetime
import logging
import math

from pydantic import BaseModel
from pydantic import ConfigDict
from pyproj import CRS
from pyproj.exceptions import CRSError

from omap_lib.constants import BASELINE_DELTA
from omap_lib.constants import ELEVATION_SCALE_FACTOR
from omap_lib.constants import MIN_JACOBIAN_DETERMINANT
from omap_lib.constants import WGS84_EPSG
from omap_lib.enums import Scale
from omap_lib.errors import GeomagneticError
from omap_lib.errors import ProjectionError
from omap_lib.geo_utils import GeoLocation
from omap_lib.geo_utils import get_declination
from omap_lib.geo_utils import reproject
from omap_lib.geo_utils import to_geographic

logger = logging.getLogger(__name__)


class GeodeticParameters(BaseModel):
    """Immutable georeferencing of a map.

    Angles are stored in degrees, positive clockwise (east).

    Attributes:
        scale: Map scale
        ref_point: Reference point (projected coordinates, meters)
        crs_epsg: EPSG code of the projected CRS, None for local maps
        geographic_ref_point: Reference point in WGS84, None for local maps
        declination: Angle from true north to magnetic north
        convergence: Angle from true north to grid north
        grivation: Angle from grid north to magnetic north
        grid_scale_factor: Grid distance / ellipsoid distance
        elevation_scale_factor: Ellipsoid distance / real distance
        combined_scale_factor: Grid distance / real distance
    """

    model_config = ConfigDict(frozen=True)

    scale: Scale
    ref_point: tuple[float, float]
    crs_epsg: int | None = None
    geographic_ref_point: GeoLocation | None = None
    declination: float = 0.0
    convergence: float = 0.0
    grivation: float = 0.0
    grid_scale_factor: float = 1.0
    elevation_scale_factor: float = ELEVATION_SCALE_FACTOR
    combined_scale_factor: float = 1.0

    @property
    def is_local(self) -> bool:
        return self.crs_epsg is None

    @property
    def grivation_radians(self) -> float:
        return math.radians(self.grivation)


def compute_geodetic_parameters(
    ref_point: tuple[float, float],
    crs_epsg: int | None,
    scale: Scale,
    date: datetime.date | None = None,
) -> GeodeticParameters:
    """Compute the georeferencing of a map.

    Args:
        ref_point: Reference point in the projected CRS
        crs_epsg: EPSG code of the projected CRS (None for a local map)
        scale: Map scale
        date: Date used by the magnetic model (default: today)

    Returns:
        GeodeticParameters

    Raises:
        ProjectionError: If the convergence / scale factor cannot be computed
    """
    ref_point = (float(ref_point[0]), float(ref_point[1]))

    if crs_epsg is None:
        return GeodeticParameters(scale=scale, ref_point=ref_point)

    geographic_ref_point = to_geographic(*ref_point, crs_epsg)

    if date is None:
        date = datetime.date.today()  # noqa: DTZ011
    declination = calculate_declination(geographic_ref_point, date)

    grid_scale_factor, convergence = scale_factor_and_convergence(
        crs_epsg, geographic_ref_point
    )

    params = GeodeticParameters(
        scale=scale,
        ref_point=ref_point,
        crs_epsg=crs_epsg,
        geographic_ref_point=geographic_ref_point,
        declination=declination,
        convergence=convergence,
        grivation=declination - convergence,
        grid_scale_factor=grid_scale_factor,
        elevation_scale_factor=ELEVATION_SCALE_FACTOR,
        combined_scale_factor=grid_scale_factor * ELEVATION_SCALE_FACTOR,
    )
    logger.info(
        "Georeferencing EPSG:%d: declination %.3f°, convergence %.3f°, "
        "grivation %.3f°, combined scale factor %.6f",
        crs_epsg,
        params.declination,
        params.convergence,
        params.grivation,
        params.combined_scale_factor,
    )
    return params


def calculate_declination(location: GeoLocation, date: datetime.date) -> float:
    """Magnetic declination at ``location``, 0 if the model fails.

    The model is evaluated at the start of ``date``, as a decimal year.
    """
    start_of_year = datetime.date(date.year, 1, 1)
    days_in_year = (datetime.date(date.year + 1, 1, 1) - start_of_year).days
    year = date.year + (date.toordinal() - start_of_year.toordinal()) / days_in_year
    try:
        return get_declination(location, year)
    except GeomagneticError:
        logger.warning(
            "Failed to calculate declination for date %s at location "
            "(%.4f, %.4f), using 0",
            date,
            location.latitude,
            location.longitude,
            exc_info=True,
        )
        return 0.0


def scale_factor_and_convergence(
    crs_epsg: int, geographic_ref_point: GeoLocation
) -> tuple[float, float]:
    """Estimate the grid scale factor and the convergence (degrees).

    Baselines of ``BASELINE_DELTA`` meters west-east and south-north are laid
    out on a stereographic projection centred on the reference point and
    reprojected down to the grid. The finite differences form the Jacobian
    of the grid projection.

    Raises:
        ProjectionError: If the projection fails or the Jacobian is degenerate
    """
    try:
        baseline_crs = CRS.from_proj4(
            f"+proj=sterea +lat_0={geographic_ref_point.latitude} "
            f"+lon_0={geographic_ref_point.longitude} +ellps=WGS84 +units=m"
        )
    except CRSError as e:
        raise ProjectionError(f"Cannot build baseline projection: {e}") from e

    half = BASELINE_DELTA / 2.0
    # EAST, NORTH, WEST, SOUTH
    xs = [half, 0.0, -half, 0.0]
    ys = [0.0, half, 0.0, -half]

    lons, lats = reproject(xs, ys, baseline_crs, WGS84_EPSG)
    eastings, northings = reproject(lons, lats, WGS84_EPSG, crs_epsg)

    # Points on the same meridian
    d_northing_dy = (northings[1] - northings[3]) / BASELINE_DELTA
    d_easting_dy = (eastings[1] - eastings[3]) / BASELINE_DELTA

    # Points on the same parallel
    d_northing_dx = (northings[0] - northings[2]) / BASELINE_DELTA
    d_easting_dx = (eastings[0] - eastings[2]) / BASELINE_DELTA

    determinant = d_easting_dx * d_northing_dy - d_northing_dx * d_easting_dy
    if determinant < MIN_JACOBIAN_DETERMINANT:
        raise ProjectionError(
            f"Tolerance condition error: Jacobian determinant {determinant} "
            f"of EPSG:{crs_epsg} at the reference point is degenerate"
        )

    convergence = math.atan2(
        d_northing_dx - d_easting_dy, d_easting_dx + d_northing_dy
    )
    return math.sqrt(determinant), math.degrees(convergence)
