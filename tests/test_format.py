# -*- coding: utf-8 -*-
"""Tests for the .omap formatting functions."""

import math

import pytest

from omap_lib.bezier import BezierString
from omap_lib.enums import Scale
from omap_lib.enums import Symbol
from omap_lib.format import format_bezier
from omap_lib.format import format_colors_symbols
from omap_lib.format import format_georeferencing
from omap_lib.format import format_object
from omap_lib.format import format_polyline
from omap_lib.format import format_tags
from omap_lib.geo_utils import GeoLocation
from omap_lib.georeferencing import GeodeticParameters
from omap_lib.objects import AreaObject
from omap_lib.objects import LineObject
from omap_lib.objects import PointObject

SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0), (0.0, 0.0)]
HOLE = [(2.0, 2.0), (2.0, 4.0), (4.0, 4.0), (4.0, 2.0), (2.0, 2.0)]


def _circle(num_points=60, radius=50.0):
    coords = [
        (radius * math.cos(2 * math.pi * i / num_points),
         radius * math.sin(2 * math.pi * i / num_points))
        for i in range(num_points)
    ]
    coords.append(coords[0])
    return coords


def _tokens(text: str) -> list[str]:
    """Coordinate tokens inside the <coords> element of an object."""
    coords = text.split("<coords", 1)[1].split(">", 1)[1].split("</coords>")[0]
    return [f"{token};" for token in coords.split(";") if token]


def _count_flagged(tokens: list[str], flag: int) -> int:
    return sum(1 for token in tokens if token.split()[2:] == [f"{flag};"])


class TestFormatTags:
    """Tests for the <tags> element."""

    def test_no_tags(self):
        """Test that objects without tags have no <tags> element."""
        assert format_tags({}) == ""

    def test_tags_in_order(self):
        """Test that tags are written in insertion order."""
        assert format_tags({"b": "2", "a": "1"}) == (
            '<tags><t k="b">2</t><t k="a">1</t></tags>'
        )

    def test_escaping(self):
        """Test that keys and values are XML-escaped."""
        assert format_tags({'a"b': "<x&y>"}) == (
            '<tags><t k="a&quot;b">&lt;x&amp;y&gt;</t></tags>'
        )


class TestFormatPolyline:
    """Tests for direct (uncurved) coordinates."""

    def test_open_line(self, projector_10k):
        """Test one token per vertex."""
        tokens = format_polyline([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)], False, projector_10k)
        assert tokens == ["0 0;", "100 0;", "100 -100;"]

    def test_closed_ring(self, projector_10k):
        """Test that the last vertex of a ring carries the closing flags."""
        tokens = format_polyline(SQUARE, True, projector_10k)
        assert len(tokens) == 5
        assert tokens[-1] == "0 0 18;"
        assert all(not t.endswith(" 18;") for t in tokens[:-1])


class TestFormatBezier:
    """Tests for curve-fitted coordinates."""

    def test_straight_line(self, projector_10k):
        """Test that a straight line writes its two ends."""
        tokens = format_bezier([(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)], False, projector_10k, 0.1)
        assert tokens == ["0 0;", "200 0;"]

    def test_curve_tokens(self, projector_10k):
        """Test curve start flags and the token count of a fitted ring."""
        coords = _circle()
        tokens = format_bezier(coords, True, projector_10k, 0.1)

        bezier = BezierString.from_polyline(coords, 0.1)
        assert len(tokens) == bezier.num_points

        assert _count_flagged(tokens, 1) == sum(1 for s in bezier if s.is_bezier)
        assert tokens[-1].endswith(" 18;")
        assert tokens[0].split()[:2] == tokens[-1].split()[:2]

    def test_open_curve_end_is_plain(self, projector_10k):
        """Test that the end of an open curve carries no flag."""
        coords = _circle()[:30]
        tokens = format_bezier(coords, False, projector_10k, 0.1)
        assert len(tokens[-1].split()) == 2


class TestFormatObject:
    """Tests for complete <object> elements."""

    def test_point(self, projector_10k):
        """Test a point object with rotation."""
        obj = PointObject.from_point((1.0, 2.0), Symbol.SMALL_KNOLL, rotation=0.5)
        assert format_object(obj, projector_10k) == (
            '<object type="0" symbol="6" rotation="0.5">'
            '<coords count="1">100 -200;</coords></object>\n'
        )

    def test_point_ignores_bezier_error(self, projector_10k):
        """Test that points are written the same with curve fitting."""
        obj = PointObject.from_point((1.0, 2.0), Symbol.SMALL_KNOLL)
        assert format_object(obj, projector_10k, 0.5) == format_object(
            obj, projector_10k
        )

    def test_line_with_tags(self, projector_10k):
        """Test a tagged open line."""
        obj = LineObject.from_line_string([(0.0, 0.0), (1.0, 0.0)], Symbol.TRAIL)
        obj.add_tag("Surface", "gravel")
        assert format_object(obj, projector_10k) == (
            '<object type="1" symbol="24">'
            '<tags><t k="Surface">gravel</t></tags>'
            '<coords count="2">0 0;100 0;</coords></object>\n'
        )

    def test_closed_line(self, projector_10k):
        """Test that a closed line ends with the closing flags."""
        obj = LineObject.from_line_string(SQUARE, Symbol.BASEMAP_CONTOUR)
        text = format_object(obj, projector_10k)
        assert '<coords count="5">' in text
        assert text.endswith("0 0 18;</coords></object>\n")

    def test_area_with_hole(self, projector_10k):
        """Test that every ring is written under one count."""
        obj = AreaObject.from_polygon(SQUARE, Symbol.BUILDING, holes=[HOLE])
        text = format_object(obj, projector_10k)
        assert text.startswith('<object type="1" symbol="25">')
        assert '<coords count="10">' in text
        assert text.count(" 18;") == 2
        assert "0 0 18;200 -200;" in text

    def test_area_curve_mode(self, projector_10k):
        """Test that rings are fitted independently."""
        obj = AreaObject.from_polygon(_circle(), Symbol.MARSH, holes=[_circle(radius=10.0)])
        text = format_object(obj, projector_10k, 0.1)

        outer = BezierString.from_polyline(_circle(), 0.1).num_points
        inner = BezierString.from_polyline(_circle(radius=10.0), 0.1).num_points
        assert f'<coords count="{outer + inner}">' in text
        assert _count_flagged(_tokens(text), 18) == 2

    def test_unknown_object(self, projector_10k):
        """Test that only map objects can be formatted."""
        with pytest.raises(TypeError):
            format_object("not an object", projector_10k)


class TestFormatGeoreferencing:
    """Tests for the <georeferencing> element."""

    def test_local(self):
        """Test a map without CRS."""
        params = GeodeticParameters(scale=Scale.S10_000, ref_point=(1.0, 2.0))
        text = format_georeferencing(params)
        assert 'scale="10000"' in text
        assert 'auxiliary_scale_factor="1.0"' in text
        assert 'declination="0.0"' in text
        assert 'grivation="0.0"' in text
        assert '<projected_crs id="Local"><ref_point x="1.0" y="2.0"/>' in text
        assert "geographic_crs" not in text

    def test_projected(self):
        """Test a map in UTM 33N."""
        params = GeodeticParameters(
            scale=Scale.S15_000,
            ref_point=(500_000.0, 6_650_000.0),
            crs_epsg=32633,
            geographic_ref_point=GeoLocation(latitude=60.0, longitude=15.0),
            declination=2.5,
            grivation=2.5,
            grid_scale_factor=0.9996,
            combined_scale_factor=0.9996,
        )
        text = format_georeferencing(params)
        assert 'declination="2.5" grivation="2.5"' in text
        assert "+init=epsg:32633" in text
        assert "<parameter>32633</parameter>" in text
        assert '<ref_point_deg lat="60.0" lon="15.0"/>' in text


class TestFormatCatalogues:
    """Tests for the scale dependent symbol catalogue."""

    @pytest.mark.parametrize("scale", list(Scale))
    def test_catalogue_per_scale(self, scale):
        """Test that both catalogues are bundled and behind the barrier."""
        text = format_colors_symbols(scale)
        assert text.startswith("<colors")
        assert '<barrier version="6" required="0.6.0">' in text
        assert "<symbols" in text
