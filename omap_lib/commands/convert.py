# -*- coding: utf-8 -*-
"""Convert command: GeoJSON features to an orienteering map.

Every feature of the input FeatureCollection needs a ``symbol`` property
naming one of the ``Symbol`` members (case-insensitive) or its numeric id.
Points may carry a ``rotation`` property (radians). All other properties are
written as object tags.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

import geojson
from shapely.affinity import translate
from shapely.geometry import GeometryCollection
from shapely.geometry import shape

from omap_lib.constants import JSON_ENCODING
from omap_lib.enums import Scale
from omap_lib.enums import Symbol
from omap_lib.errors import OmapError
from omap_lib.objects import AreaObject
from omap_lib.objects import LineObject
from omap_lib.objects import MapObject
from omap_lib.objects import PointObject
from omap_lib.omap import Omap

logger = logging.getLogger(__name__)

SYMBOL_PROPERTY = "symbol"
ROTATION_PROPERTY = "rotation"


class ConversionError(Exception):
    """Error raised for invalid conversion input."""


def load_features(path: Path) -> geojson.FeatureCollection:
    """Read and validate a GeoJSON FeatureCollection.

    Raises:
        FileNotFoundError: If the file does not exist
        ConversionError: If the content is not a valid FeatureCollection
    """
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    with path.open(encoding=JSON_ENCODING) as f:
        try:
            collection = geojson.load(f)
        except ValueError as e:
            raise ConversionError(f"Invalid JSON in `{path}`: {e}") from e

    if not isinstance(collection, geojson.FeatureCollection):
        raise ConversionError(f"`{path}` is not a GeoJSON FeatureCollection")
    if not collection.is_valid:
        raise ConversionError(f"Invalid GeoJSON in `{path}`: {collection.errors()}")
    return collection


def default_ref_point(collection: geojson.FeatureCollection) -> tuple[float, float]:
    """Centre of the bounding box of all features."""
    geometries = [shape(feature["geometry"]) for feature in collection["features"]]
    if not geometries:
        raise ConversionError("Cannot derive a reference point from no features")
    min_x, min_y, max_x, max_y = GeometryCollection(geometries).bounds
    return ((min_x + max_x) / 2.0, (min_y + max_y) / 2.0)


def feature_to_objects(
    feature: dict[str, Any], ref_point: tuple[float, float]
) -> list[MapObject]:
    """Build the map objects of one feature.

    Multi geometries give one object per part.

    Raises:
        ConversionError: If the symbol or geometry type is not supported
        MismatchedGeometryError: If the geometry does not fit the symbol
    """
    properties = dict(feature.get("properties") or {})
    if SYMBOL_PROPERTY not in properties:
        raise ConversionError(f"Feature without `{SYMBOL_PROPERTY}` property")
    try:
        symbol = Symbol.from_name(properties.pop(SYMBOL_PROPERTY))
    except ValueError as e:
        raise ConversionError(str(e)) from e

    rotation = float(properties.pop(ROTATION_PROPERTY, 0.0) or 0.0)
    tags = {str(k): str(v) for k, v in properties.items() if v is not None}

    geometry = translate(
        shape(feature["geometry"]), xoff=-ref_point[0], yoff=-ref_point[1]
    )

    match geometry.geom_type:
        case "Point":
            objects = [PointObject.from_point(geometry, symbol, rotation)]
        case "LineString":
            objects = [LineObject.from_line_string(geometry, symbol)]
        case "MultiLineString":
            objects = [LineObject.from_line_string(g, symbol) for g in geometry.geoms]
        case "Polygon":
            objects = [AreaObject.from_polygon(geometry, symbol)]
        case "MultiPolygon":
            objects = [AreaObject.from_polygon(g, symbol) for g in geometry.geoms]
        case other:
            raise ConversionError(f"Unsupported geometry type: `{other}`")

    for obj in objects:
        obj.tags = dict(tags)
    return objects


def _convert(
    input_path: Path,
    output_path: Path,
    *,
    crs_epsg: int | None = None,
    ref_point: tuple[float, float] | None = None,
    scale: Scale = Scale.S15_000,
    merge_delta: float | None = None,
    bezier_error: float | None = None,
    mark_depressions: bool = False,
) -> Path:
    """Convert a GeoJSON file to an .omap file.

    Returns:
        Path of the written map

    Raises:
        ConversionError: If the input is invalid
        OmapError: If the map cannot be built or written
        FileNotFoundError: If the input file doesn't exist
    """
    collection = load_features(input_path)
    if ref_point is None:
        ref_point = default_ref_point(collection)
    logger.info(
        "Reference point (%.2f, %.2f), %s",
        ref_point[0],
        ref_point[1],
        f"EPSG:{crs_epsg}" if crs_epsg is not None else "local coordinates",
    )

    omap = Omap(ref_point, crs_epsg, scale)
    for feature in collection["features"]:
        for obj in feature_to_objects(feature, ref_point):
            omap.add_object(obj)

    if merge_delta is not None:
        omap.merge_lines(merge_delta)
    if mark_depressions:
        omap.mark_basemap_depressions()

    return omap.write_to_file(output_path, bezier_error=bezier_error)


def _parse_ref_point(value: str) -> tuple[float, float]:
    try:
        x, y = (float(v) for v in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Expected `X,Y` for the reference point, got `{value}`"
        ) from None
    return (x, y)


def convert(args: list[str]) -> int:
    """Entry point for the convert command."""
    parser = argparse.ArgumentParser(
        prog="omap convert",
        description="Convert GeoJSON features to an OpenOrienteering Mapper map",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  omap convert -i contours.geojson -o map.omap --crs 25833
  omap convert -i contours.geojson -o map.omap --crs 25833 --merge-delta 0.5 \\
      --mark-depressions --bezier-error 0.3
  omap convert -i sketch.geojson -o sketch.omap --scale 10000

Notes:
  - Coordinates must be in the projected CRS given with --crs (meters),
    or in local meters when no CRS is given
  - Every feature needs a `symbol` property (e.g. "basemap_contour")
  - The reference point defaults to the centre of the features' extent
""",
    )

    parser.add_argument(
        "-i",
        "--input-file",
        type=Path,
        required=True,
        help="Input GeoJSON file",
    )
    parser.add_argument(
        "-o",
        "--output-file",
        type=Path,
        required=True,
        help="Output map file (.omap extension enforced)",
    )
    parser.add_argument(
        "--crs",
        type=int,
        default=None,
        dest="crs_epsg",
        help="EPSG code of the input coordinates (local map if not specified)",
    )
    parser.add_argument(
        "--ref-point",
        type=_parse_ref_point,
        default=None,
        help="Reference point as X,Y in the input CRS",
    )
    parser.add_argument(
        "--scale",
        choices=[s.value for s in Scale],
        default=Scale.S15_000.value,
        help="Map scale denominator (default: 15000)",
    )
    parser.add_argument(
        "--merge-delta",
        type=float,
        default=None,
        help="Join line fragments whose ends are closer than this (meters)",
    )
    parser.add_argument(
        "--bezier-error",
        type=float,
        default=None,
        help="Write smooth curves within this tolerance (meters)",
    )
    parser.add_argument(
        "--mark-depressions",
        action="store_true",
        help="Move closed negative basemap contours to their own symbol",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parsed_args = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        _convert(
            input_path=parsed_args.input_file,
            output_path=parsed_args.output_file,
            crs_epsg=parsed_args.crs_epsg,
            ref_point=parsed_args.ref_point,
            scale=Scale(parsed_args.scale),
            merge_delta=parsed_args.merge_delta,
            bezier_error=parsed_args.bezier_error,
            mark_depressions=parsed_args.mark_depressions,
        )

    except (ConversionError, OmapError, FileNotFoundError, ValueError) as e:
        logger.error("Conversion failed: %s", e)  # noqa: TRY400
        return 1
    except OSError:
        logger.exception("Conversion failed")
        return 1

    return 0
