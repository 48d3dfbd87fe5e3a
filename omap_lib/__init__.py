# -*- coding: utf-8 -*-
"""OpenOrienteering Mapper file writer.

A Python library building georeferenced orienteering maps (.omap) from
points, lines and polygons: it merges fragmented lines, marks depression
contours, fits smooth curves and writes the map file.

Usage:
    from omap_lib import LineObject, Omap, Scale, Symbol

    omap = Omap((512_300.0, 6_634_100.0), crs_epsg=25833, scale=Scale.S15_000)
    contour = LineObject.from_line_string(coords, Symbol.BASEMAP_CONTOUR)
    contour.add_tag("Elevation", "120.5")
    omap.add_object(contour)

    omap.merge_lines(0.5)
    omap.mark_basemap_depressions()
    omap.write_to_file(Path("forest.omap"), bezier_error=0.3)
"""

__version__ = "0.1.0"

from omap_lib.bezier import BezierSegment
from omap_lib.bezier import BezierString
from omap_lib.enums import GeometryKind
from omap_lib.enums import Scale
from omap_lib.enums import Symbol
from omap_lib.errors import GeomagneticError
from omap_lib.errors import MapConsumedError
from omap_lib.errors import MapCoordinateOverflowError
from omap_lib.errors import MismatchedGeometryError
from omap_lib.errors import OmapError
from omap_lib.errors import OmapWriteError
from omap_lib.errors import ProjectionError
from omap_lib.georeferencing import GeodeticParameters
from omap_lib.georeferencing import compute_geodetic_parameters
from omap_lib.map_coord import CoordinateProjector
from omap_lib.objects import AreaObject
from omap_lib.objects import LineObject
from omap_lib.objects import MapObject
from omap_lib.objects import PointObject
from omap_lib.omap import Omap
from omap_lib.store import MapObjectStore

__all__ = [
    # Objects
    "AreaObject",
    # Curves
    "BezierSegment",
    "BezierString",
    # Georeferencing
    "CoordinateProjector",
    "GeodeticParameters",
    # Enums
    "GeometryKind",
    # Errors
    "GeomagneticError",
    "LineObject",
    "MapConsumedError",
    "MapCoordinateOverflowError",
    "MapObject",
    "MapObjectStore",
    "MismatchedGeometryError",
    # Map
    "Omap",
    "OmapError",
    "OmapWriteError",
    "PointObject",
    "ProjectionError",
    "Scale",
    "Symbol",
    "compute_geodetic_parameters",
]
