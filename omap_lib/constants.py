# -*- coding: utf-8 -*-
"""Constants used throughout the omap_lib library.

This module centralizes all constant values to ensure consistency
and avoid magic numbers/strings scattered across the codebase.
"""

# -----------------------------------------------------------------------------
# File Format
# -----------------------------------------------------------------------------

#: Encoding used when writing .omap files
OMAP_ENCODING = "utf-8"

#: Encoding used when reading GeoJSON input
JSON_ENCODING = "utf-8"

#: Extension (with dot) enforced on every written map
OMAP_EXTENSION = ".omap"

#: XML namespace of the OpenOrienteering Mapper file format
OMAP_XML_NAMESPACE = "http://openorienteering.org/apps/mapper/xml/v2"

#: Version of the map file format written
OMAP_FORMAT_VERSION: int = 9

#: Barrier version wrapping the sections older readers cannot handle
OMAP_BARRIER_VERSION: int = 6

#: Minimum Mapper release able to read past the barrier
OMAP_BARRIER_REQUIRED = "0.6.0"

# -----------------------------------------------------------------------------
# Map Coordinates
# -----------------------------------------------------------------------------

#: Map units per millimetre on paper (map coordinates are micrometres)
MAP_UNITS_PER_MM: int = 1000

#: Millimetres per metre
MM_PER_METER: int = 1000

#: Inclusive bounds of a map coordinate (signed 32 bit integers)
MAP_COORD_MIN: int = -(2**31)
MAP_COORD_MAX: int = 2**31 - 1

# -----------------------------------------------------------------------------
# Georeferencing
# -----------------------------------------------------------------------------

#: EPSG code of WGS84 geographic coordinates
WGS84_EPSG: int = 4326

#: Length (meters) of the east-west / south-north baselines used to
#: estimate convergence and grid scale factor
BASELINE_DELTA: float = 1000.0

#: Jacobian determinants below this value are considered degenerate
MIN_JACOBIAN_DETERMINANT: float = 0.01

#: Height above the ellipsoid is not modelled
ELEVATION_SCALE_FACTOR: float = 1.0

#: Decimal precision of the declination (degrees) returned by the IGRF model
DECLINATION_PRECISION: int = 2

# -----------------------------------------------------------------------------
# Line Merging
# -----------------------------------------------------------------------------

#: Tag holding the elevation of a contour line
ELEVATION_TAG = "Elevation"

#: Elevations are compared after multiplying by this factor and rounding
ELEVATION_QUANTIZATION: int = 100

# -----------------------------------------------------------------------------
# Curve Fitting
# -----------------------------------------------------------------------------

#: Maximum Newton reparameterization rounds per fitted cubic
BEZIER_MAX_ITERATIONS: int = 12

#: Generic tolerance for degenerate vectors
EPSILON: float = 1e-9
