# -*- coding: utf-8 -*-
"""Ordered multimap from symbol to map objects.

The order of the symbol buckets (first reservation or insertion) and the
order of the objects inside each bucket is the order objects are written.
"""

from __future__ import annotations

from collections.abc import Iterator

from omap_lib.enums import Symbol
from omap_lib.errors import MismatchedGeometryError
from omap_lib.objects import MapObject


class MapObjectStore:
    """Owns all objects of a map until they are written."""

    def __init__(self) -> None:
        self._objects: dict[Symbol, list[MapObject]] = {}

    def reserve_capacity(self, symbol: Symbol) -> list[MapObject]:
        """Make sure a bucket exists for ``symbol`` and return it.

        Reserving buckets up front fixes the order symbols are written in.
        """
        return self._objects.setdefault(symbol, [])

    def add(self, obj: MapObject) -> None:
        self.reserve_capacity(obj.symbol).append(obj)

    def extend(self, objects: list[MapObject]) -> None:
        for obj in objects:
            self.add(obj)

    def get(self, symbol: Symbol) -> list[MapObject]:
        """Objects stored under ``symbol`` (empty list if none)."""
        return self._objects.get(symbol, [])

    def replace(self, symbol: Symbol, objects: list[MapObject]) -> None:
        """Replace the content of a bucket.

        Raises:
            MismatchedGeometryError: If an object carries another symbol
        """
        for obj in objects:
            if obj.symbol != symbol:
                raise MismatchedGeometryError(
                    f"Cannot store a {obj.symbol.name} object under "
                    f"{symbol.name}"
                )
        self._objects[symbol] = objects

    def symbols(self) -> list[Symbol]:
        return list(self._objects)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._objects

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._objects.values())

    def __iter__(self) -> Iterator[MapObject]:
        for bucket in self._objects.values():
            yield from bucket

    def drain(self) -> Iterator[MapObject]:
        """Remove and yield every object in output order.

        The store is empty once the iterator is exhausted.
        """
        while self._objects:
            symbol = next(iter(self._objects))
            bucket = self._objects.pop(symbol)
            bucket.reverse()
            while bucket:
                yield bucket.pop()
