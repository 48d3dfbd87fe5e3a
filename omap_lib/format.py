# -*- coding: utf-8 -*-
"""Formatting (serialization) of maps to the .omap XML format.

This module provides functions converting map objects and georeferencing
to the text of an OpenOrienteering Mapper file. Objects are formatted one
by one so the caller can stream them to disk.

Coordinates are written as ``"x y;"`` tokens, optionally followed by
coordinate flags: ``1`` marks the start of a cubic Bezier segment (the next
two tokens are its control points) and ``18`` marks the last coordinate of
a closed ring.
"""

from __future__ import annotations

from collections.abc import Sequence
from importlib.resources import files
from typing import TYPE_CHECKING
from xml.sax.saxutils import escape

from omap_lib.bezier import BezierString
from omap_lib.constants import OMAP_BARRIER_REQUIRED
from omap_lib.constants import OMAP_BARRIER_VERSION
from omap_lib.constants import OMAP_ENCODING
from omap_lib.constants import OMAP_FORMAT_VERSION
from omap_lib.constants import OMAP_XML_NAMESPACE
from omap_lib.enums import CoordFlag
from omap_lib.enums import ObjectType
from omap_lib.objects import AreaObject
from omap_lib.objects import Coordinate
from omap_lib.objects import LineObject
from omap_lib.objects import PointObject

if TYPE_CHECKING:
    from omap_lib.enums import Scale
    from omap_lib.georeferencing import GeodeticParameters
    from omap_lib.map_coord import CoordinateProjector
    from omap_lib.objects import MapObject

_ATTRIBUTE_ENTITIES = {'"': "&quot;"}

_RING_END = CoordFlag.ring_end()


# -----------------------------------------------------------------------------
# Static sections
# -----------------------------------------------------------------------------


def format_header() -> str:
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<map xmlns="{OMAP_XML_NAMESPACE}" version="{OMAP_FORMAT_VERSION}">\n'
        "<notes></notes>\n"
    )


def format_georeferencing(params: GeodeticParameters) -> str:
    """Format the ``<georeferencing>`` element.

    Local maps (no CRS) only carry their reference point.
    """
    x, y = params.ref_point
    attributes = (
        f'scale="{params.scale.denominator}" '
        f'auxiliary_scale_factor="{params.elevation_scale_factor}" '
        f'declination="{params.declination}" '
        f'grivation="{params.grivation}"'
    )

    if params.is_local or params.geographic_ref_point is None:
        return (
            f"<georeferencing {attributes}>"
            f'<projected_crs id="Local"><ref_point x="{x}" y="{y}"/></projected_crs>'
            "</georeferencing>\n"
        )

    epsg = params.crs_epsg
    geo = params.geographic_ref_point
    return (
        f"<georeferencing {attributes}>"
        f'<projected_crs id="EPSG"><spec language="PROJ.4">+init=epsg:{epsg}</spec>'
        f'<parameter>{epsg}</parameter><ref_point x="{x}" y="{y}"/></projected_crs>'
        '<geographic_crs id="Geographic coordinates">'
        '<spec language="PROJ.4">+proj=latlong +datum=WGS84</spec>'
        f'<ref_point_deg lat="{geo.latitude}" lon="{geo.longitude}"/>'
        "</geographic_crs></georeferencing>\n"
    )


def format_colors_symbols(scale: Scale) -> str:
    """Colour catalogue, barrier and the symbol catalogue for ``scale``."""
    data = files("omap_lib") / "data"
    colors = (data / "colors.xml").read_text(encoding=OMAP_ENCODING)
    symbols = (data / f"symbols_{scale.denominator}.xml").read_text(
        encoding=OMAP_ENCODING
    )
    return (
        f"{colors.strip()}\n"
        f'<barrier version="{OMAP_BARRIER_VERSION}" '
        f'required="{OMAP_BARRIER_REQUIRED}">\n'
        f"{symbols.strip()}\n"
    )


def format_parts_start(num_objects: int) -> str:
    return (
        '<parts count="1" current="0">\n'
        f'<part name="map"><objects count="{num_objects}">\n'
    )


def format_parts_end() -> str:
    return "</objects></part>\n</parts>\n"


def format_end_of_file() -> str:
    return (
        '<templates count="0" first_front_template="0">\n'
        '<defaults use_meters_per_pixel="true" meters_per_pixel="0" dpi="0" '
        'scale="0"/></templates>\n'
        "<view>\n"
        '<grid color="#646464" display="0" alignment="0" additional_rotation="0" '
        'unit="1" h_spacing="500" v_spacing="500" h_offset="0" v_offset="0" '
        'snapping_enabled="true"/>\n'
        '<map_view zoom="1" position_x="0" position_y="0">'
        '<map opacity="1" visible="true"/><templates count="0"/></map_view>\n'
        "</view>\n"
        "</barrier>\n"
        "</map>"
    )


# -----------------------------------------------------------------------------
# Objects
# -----------------------------------------------------------------------------


def format_object(
    obj: MapObject,
    projector: CoordinateProjector,
    bezier_error: float | None = None,
) -> str:
    """Format one map object as an ``<object>`` element.

    Args:
        obj: Object to format
        projector: Projector to map units
        bezier_error: Curve fitting tolerance in meters, None to write the
            vertices as they are (ignored for points)

    Returns:
        The ``<object>`` element followed by a newline
    """
    match obj:
        case PointObject():
            opening = (
                f'<object type="{ObjectType.POINT.value}" '
                f'symbol="{obj.symbol.id}" rotation="{obj.rotation}">'
            )
            tokens = [projector.format_coordinate(*obj.coordinate)]

        case LineObject():
            opening = f'<object type="{ObjectType.PATH.value}" symbol="{obj.symbol.id}">'
            tokens = format_ring(obj.coords, obj.is_closed, projector, bezier_error)

        case AreaObject():
            opening = f'<object type="{ObjectType.PATH.value}" symbol="{obj.symbol.id}">'
            tokens = []
            for ring in obj.rings:
                tokens.extend(format_ring(ring, True, projector, bezier_error))

        case _:
            raise TypeError(f"Unsupported map object: {type(obj).__name__}")

    return f"{opening}{format_tags(obj.tags)}{format_coords(tokens)}</object>\n"


def format_tags(tags: dict[str, str]) -> str:
    """Format a ``<tags>`` element, empty string when there are no tags."""
    if not tags:
        return ""
    items = "".join(
        f'<t k="{escape(key, _ATTRIBUTE_ENTITIES)}">{escape(value)}</t>'
        for key, value in tags.items()
    )
    return f"<tags>{items}</tags>"


def format_coords(tokens: list[str]) -> str:
    return f'<coords count="{len(tokens)}">{"".join(tokens)}</coords>'


def format_ring(
    coords: Sequence[Coordinate],
    closed: bool,
    projector: CoordinateProjector,
    bezier_error: float | None = None,
) -> list[str]:
    """Coordinate tokens of a polyline or ring."""
    if bezier_error is None:
        return format_polyline(coords, closed, projector)
    return format_bezier(coords, closed, projector, bezier_error)


def format_polyline(
    coords: Sequence[Coordinate], closed: bool, projector: CoordinateProjector
) -> list[str]:
    """One token per vertex, the last one flagged when the ring is closed."""
    tokens = [projector.format_coordinate(x, y) for x, y in coords[:-1]]
    last_flags = _RING_END if closed else CoordFlag.NONE
    tokens.append(projector.format_coordinate(*coords[-1], flags=last_flags))
    return tokens


def format_bezier(
    coords: Sequence[Coordinate],
    closed: bool,
    projector: CoordinateProjector,
    max_error: float,
) -> list[str]:
    """Tokens of the curve fitted through ``coords``.

    A straight segment contributes its start, a Bezier segment its start
    (flagged as curve start) and both control points. The end of the last
    segment closes the sequence.
    """
    bezier = BezierString.from_polyline(coords, max_error)

    tokens = []
    for segment in bezier:
        if segment.is_bezier:
            tokens.append(
                projector.format_coordinate(*segment.start, flags=CoordFlag.CURVE_START)
            )
            tokens.append(projector.format_coordinate(*segment.handle1))
            tokens.append(projector.format_coordinate(*segment.handle2))
        else:
            tokens.append(projector.format_coordinate(*segment.start))

    last_flags = _RING_END if closed else CoordFlag.NONE
    tokens.append(
        projector.format_coordinate(*bezier.segments[-1].end, flags=last_flags)
    )
    return tokens
