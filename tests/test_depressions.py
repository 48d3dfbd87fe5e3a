# -*- coding: utf-8 -*-
"""Tests for depression contour marking."""

import pytest

from omap_lib.depressions import line_string_signed_area
from omap_lib.depressions import mark_basemap_depressions
from omap_lib.enums import Symbol
from omap_lib.merge import merge_lines
from omap_lib.objects import LineObject
from omap_lib.store import MapObjectStore

# Clockwise (negative) and counter-clockwise (positive) closed rings
CW_RING = [(0.0, 0.0), (0.0, 2.0), (2.0, 0.0), (0.0, 0.0)]
CCW_RING = [(0.0, 0.0), (2.0, 0.0), (0.0, 2.0), (0.0, 0.0)]


def _contour(coords):
    return LineObject.from_line_string(coords, Symbol.BASEMAP_CONTOUR)


class TestSignedArea:
    """Tests for the shoelace signed area."""

    def test_clockwise_is_negative(self):
        """Test a clockwise ring of area 2."""
        assert line_string_signed_area(CW_RING) == pytest.approx(-2.0)

    def test_counter_clockwise_is_positive(self):
        """Test a counter-clockwise ring of area 2."""
        assert line_string_signed_area(CCW_RING) == pytest.approx(2.0)

    def test_open_line_is_zero(self):
        """Test that open lines have no area."""
        assert line_string_signed_area([(0.0, 0.0), (0.0, 2.0), (2.0, 0.0)]) == 0.0

    def test_degenerate_is_zero(self):
        """Test that a line going back and forth has no area."""
        assert line_string_signed_area([(0.0, 0.0), (1.0, 1.0), (0.0, 0.0)]) == 0.0


class TestMarkBasemapDepressions:
    """Tests for moving depressions to their own symbol."""

    def test_negative_ring_moves(self):
        """Test that a negative-area ring changes symbol."""
        store = MapObjectStore()
        depression = _contour(CW_RING)
        store.add(depression)

        assert mark_basemap_depressions(store) == 1
        assert store.get(Symbol.BASEMAP_CONTOUR) == []
        assert store.get(Symbol.NEG_BASEMAP_CONTOUR) == [depression]
        assert depression.symbol == Symbol.NEG_BASEMAP_CONTOUR

    def test_positive_and_open_lines_stay(self):
        """Test that knolls and open contours are left alone."""
        store = MapObjectStore()
        knoll = _contour(CCW_RING)
        open_line = _contour([(0.0, 0.0), (0.0, 2.0), (2.0, 0.0)])
        store.extend([knoll, open_line])

        assert mark_basemap_depressions(store) == 0
        assert store.get(Symbol.BASEMAP_CONTOUR) == [knoll, open_line]
        assert Symbol.NEG_BASEMAP_CONTOUR not in store

    def test_appends_after_existing(self):
        """Test that depressions go after objects already in the bucket."""
        store = MapObjectStore()
        existing = LineObject.from_line_string(CW_RING, Symbol.NEG_BASEMAP_CONTOUR)
        store.add(existing)
        depression = _contour(CW_RING)
        store.add(depression)

        mark_basemap_depressions(store)
        assert store.get(Symbol.NEG_BASEMAP_CONTOUR) == [existing, depression]

    def test_other_symbols_ignored(self):
        """Test that only basemap contours are considered."""
        store = MapObjectStore()
        contour = LineObject.from_line_string(CW_RING, Symbol.CONTOUR)
        store.add(contour)

        assert mark_basemap_depressions(store) == 0
        assert store.get(Symbol.CONTOUR) == [contour]

    def test_empty_store(self):
        """Test a store without basemap contours."""
        assert mark_basemap_depressions(MapObjectStore()) == 0

    def test_rings_closed_by_merge(self, triangle_fragments):
        """Test that rings produced by merging are checked too."""
        store = MapObjectStore()
        store.extend(triangle_fragments)

        merge_lines(store, 0.5)
        assert mark_basemap_depressions(store) == 1
        (ring,) = store.get(Symbol.NEG_BASEMAP_CONTOUR)
        assert ring.is_closed
