# -*- coding: utf-8 -*-
"""Enumerations for orienteering map files.

This module contains all enumerations used when building .omap files,
including map scales, geometry kinds, coordinate flags and the
cartographic symbol set.
"""

from enum import Enum
from enum import IntEnum
from enum import IntFlag


class Scale(str, Enum):
    """Supported map scales.

    The scale selects the symbol catalogue written to the file and the
    conversion between ground meters and map units.

    Attributes:
        S10_000: 1:10 000 (symbols enlarged 150%)
        S15_000: 1:15 000 (ISOM base scale)
    """

    S10_000 = "10000"
    S15_000 = "15000"

    @property
    def denominator(self) -> int:
        """Get the scale denominator as an integer."""
        return int(self.value)

    @classmethod
    def from_denominator(cls, denominator: int | str) -> "Scale":
        """Get the scale for a denominator.

        Args:
            denominator: Scale denominator, e.g. ``15000`` or ``"1:15000"``

        Returns:
            Matching Scale

        Raises:
            ValueError: If the scale is not supported
        """
        value = str(denominator).removeprefix("1:").replace("_", "").strip()
        return cls(value)

    def __str__(self) -> str:
        return self.value


class GeometryKind(str, Enum):
    """Kind of geometry a symbol can be applied to.

    Attributes:
        POINT: Single coordinate with rotation
        LINE: Open or closed polyline
        AREA: Polygon with optional holes
    """

    POINT = "point"
    LINE = "line"
    AREA = "area"


class ObjectType(IntEnum):
    """Object type attribute of an ``<object>`` element."""

    POINT = 0
    PATH = 1


class CoordFlag(IntFlag):
    """Flags appended to a coordinate inside ``<coords>``.

    Attributes:
        CURVE_START: The coordinate starts a cubic Bezier segment, the next
            two coordinates are its control points
        CLOSE_POINT: The coordinate closes the current part
        HOLE_POINT: The coordinate ends a ring, the next one starts a new ring
    """

    NONE = 0
    CURVE_START = 1
    CLOSE_POINT = 2
    HOLE_POINT = 16

    @classmethod
    def ring_end(cls) -> "CoordFlag":
        """Flags marking the last coordinate of a closed ring (``18``)."""
        return cls.CLOSE_POINT | cls.HOLE_POINT


class Symbol(Enum):
    """Cartographic symbols known to the bundled symbol catalogues.

    Each member carries the numeric id referenced by ``<object symbol=...>``
    (also the enum value), its ISOM code and the geometry kind it applies to.
    """

    CONTOUR = (0, "101", GeometryKind.LINE)
    SLOPELINE_CONTOUR = (1, "101.1", GeometryKind.LINE)
    BASEMAP_CONTOUR = (2, "101.2", GeometryKind.LINE)
    NEG_BASEMAP_CONTOUR = (3, "101.3", GeometryKind.LINE)
    INDEX_CONTOUR = (4, "102", GeometryKind.LINE)
    FORMLINE = (5, "103", GeometryKind.LINE)
    SMALL_KNOLL = (6, "109", GeometryKind.POINT)
    SMALL_DEPRESSION = (7, "111", GeometryKind.POINT)
    IMPASSABLE_CLIFF = (8, "201", GeometryKind.LINE)
    CLIFF = (9, "202", GeometryKind.LINE)
    SMALL_BOULDER = (10, "204", GeometryKind.POINT)
    LARGE_BOULDER = (11, "205", GeometryKind.POINT)
    GIGANTIC_BOULDER = (12, "206", GeometryKind.AREA)
    STONY_GROUND = (13, "210", GeometryKind.AREA)
    UNCROSSABLE_WATER = (14, "301", GeometryKind.AREA)
    SHALLOW_WATER = (15, "302", GeometryKind.AREA)
    MARSH = (16, "308", GeometryKind.AREA)
    OPEN_LAND = (17, "401", GeometryKind.AREA)
    ROUGH_OPEN_LAND = (18, "403", GeometryKind.AREA)
    LIGHT_GREEN = (19, "406", GeometryKind.AREA)
    MEDIUM_GREEN = (20, "408", GeometryKind.AREA)
    DARK_GREEN = (21, "410", GeometryKind.AREA)
    PAVED_AREA = (22, "501", GeometryKind.AREA)
    ROAD = (23, "503", GeometryKind.LINE)
    TRAIL = (24, "505", GeometryKind.LINE)
    BUILDING = (25, "521", GeometryKind.AREA)

    def __new__(cls, symbol_id: int, code: str, kind: GeometryKind):
        obj = object.__new__(cls)
        obj._value_ = symbol_id
        obj.code = code
        obj.kind = kind
        return obj

    @property
    def id(self) -> int:  # noqa: A003
        """Numeric id written in the ``symbol`` attribute."""
        return self.value

    def is_point_symbol(self) -> bool:
        return self.kind == GeometryKind.POINT

    def is_line_symbol(self) -> bool:
        return self.kind == GeometryKind.LINE

    def is_area_symbol(self) -> bool:
        return self.kind == GeometryKind.AREA

    @classmethod
    def from_name(cls, name: str | int) -> "Symbol":
        """Look up a symbol by member name (case-insensitive) or numeric id.

        Args:
            name: Member name such as ``"basemap_contour"``, or an id

        Returns:
            The matching Symbol

        Raises:
            ValueError: If no symbol matches
        """
        if isinstance(name, int) or str(name).isdigit():
            return cls(int(name))
        key = str(name).strip().upper().replace(" ", "_").replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown symbol: `{name}`") from None
