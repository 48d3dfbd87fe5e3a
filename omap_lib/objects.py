# -*- coding: utf-8 -*-
"""Map objects: points, lines and areas carrying a symbol and tags.

A map object is one of ``PointObject``, ``LineObject`` or ``AreaObject``.
Consumers dispatch on the concrete type with ``match`` statements.

All coordinates are relative to the map reference point.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from typing import TypeAlias

from shapely.geometry import LineString
from shapely.geometry import Point
from shapely.geometry import Polygon

from omap_lib.enums import GeometryKind
from omap_lib.enums import Symbol
from omap_lib.errors import MismatchedGeometryError

Coordinate: TypeAlias = tuple[float, float]


def _check_symbol(symbol: Symbol, kind: GeometryKind) -> None:
    if symbol.kind != kind:
        raise MismatchedGeometryError(
            f"Symbol {symbol.name} expects {symbol.kind.value} geometry, "
            f"got {kind.value}"
        )


class _TaggedObject:
    tags: dict[str, str]

    def add_tag(self, key: str, value: str) -> None:
        """Set a tag, replacing any previous value for ``key``."""
        self.tags[str(key)] = str(value)


@dataclass
class PointObject(_TaggedObject):
    """A point feature with a rotation in radians."""

    point: Point
    symbol: Symbol
    rotation: float = 0.0
    tags: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_symbol(self.symbol, GeometryKind.POINT)
        if not isinstance(self.point, Point) or self.point.is_empty:
            raise MismatchedGeometryError(
                f"Symbol {self.symbol.name} requires a non empty Point"
            )

    @classmethod
    def from_point(
        cls, point: Point | Coordinate, symbol: Symbol, rotation: float = 0.0
    ) -> PointObject:
        if not isinstance(point, Point):
            point = Point(point)
        return cls(point=point, symbol=symbol, rotation=rotation)

    @property
    def coordinate(self) -> Coordinate:
        return (self.point.x, self.point.y)


@dataclass
class LineObject(_TaggedObject):
    """A polyline feature, closed iff its first and last coordinates match."""

    line: LineString
    symbol: Symbol
    tags: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_symbol(self.symbol, GeometryKind.LINE)
        if not isinstance(self.line, LineString) or len(self.line.coords) < 2:
            raise MismatchedGeometryError(
                f"Symbol {self.symbol.name} requires a LineString with at "
                "least 2 coordinates"
            )

    @classmethod
    def from_line_string(
        cls, line: LineString | Sequence[Coordinate], symbol: Symbol
    ) -> LineObject:
        if not isinstance(line, LineString):
            line = LineString(line)
        return cls(line=line, symbol=symbol)

    @property
    def coords(self) -> list[Coordinate]:
        return [(x, y) for x, y, *_ in self.line.coords]

    @property
    def is_closed(self) -> bool:
        coords = self.line.coords
        return coords[0] == coords[-1]

    @property
    def num_coords(self) -> int:
        return len(self.line.coords)


@dataclass
class AreaObject(_TaggedObject):
    """A polygon feature with an exterior ring and optional holes."""

    polygon: Polygon
    symbol: Symbol
    tags: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_symbol(self.symbol, GeometryKind.AREA)
        if not isinstance(self.polygon, Polygon) or self.polygon.is_empty:
            raise MismatchedGeometryError(
                f"Symbol {self.symbol.name} requires a non empty Polygon"
            )

    @classmethod
    def from_polygon(
        cls,
        polygon: Polygon | Sequence[Coordinate],
        symbol: Symbol,
        holes: Sequence[Sequence[Coordinate]] | None = None,
    ) -> AreaObject:
        if not isinstance(polygon, Polygon):
            polygon = Polygon(polygon, holes)
        return cls(polygon=polygon, symbol=symbol)

    @property
    def rings(self) -> list[list[Coordinate]]:
        """Exterior ring followed by the interior rings, each closed."""
        return [
            [(x, y) for x, y, *_ in ring.coords]
            for ring in (self.polygon.exterior, *self.polygon.interiors)
        ]


MapObject: TypeAlias = PointObject | LineObject | AreaObject
