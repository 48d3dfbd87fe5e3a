# -*- coding: utf-8 -*-
"""Pytest configuration and fixtures.

This module provides shared fixtures: projectors, maps in local space and
small sets of line fragments. The magnetic model is replaced by a fixed
declination wherever a georeferenced map is built.
"""

from __future__ import annotations

import datetime
import logging
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from omap_lib.constants import OMAP_XML_NAMESPACE
from omap_lib.enums import Scale
from omap_lib.enums import Symbol
from omap_lib.map_coord import CoordinateProjector
from omap_lib.objects import LineObject
from omap_lib.omap import Omap

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


# =============================================================================
# Constants
# =============================================================================

#: Declination returned by the patched magnetic model
FIXED_DECLINATION = 2.5

#: Date used for every georeferenced map
SURVEY_DATE = datetime.date(2024, 6, 1)

#: Reference point on the central meridian of UTM zone 33N (around 60°N)
UTM33_REF_POINT = (500_000.0, 6_650_000.0)


# =============================================================================
# Helpers
# =============================================================================


def parse_omap(path: Path) -> ET.Element:
    """Parse a written map and return its root element."""
    return ET.parse(path).getroot()  # noqa: S314


def ns(tag: str) -> str:
    """Qualify a tag with the map namespace."""
    return f"{{{OMAP_XML_NAMESPACE}}}{tag}"


# =============================================================================
# Projector Fixtures
# =============================================================================


@pytest.fixture
def projector_10k() -> CoordinateProjector:
    """Projector without rotation or scale correction at 1:10 000."""
    return CoordinateProjector(scale=Scale.S10_000)


@pytest.fixture
def projector_15k() -> CoordinateProjector:
    """Projector without rotation or scale correction at 1:15 000."""
    return CoordinateProjector(scale=Scale.S15_000)


# =============================================================================
# Map Fixtures
# =============================================================================


@pytest.fixture
def local_omap() -> Omap:
    """Map in local space at 1:10 000."""
    return Omap((0.0, 0.0), None, Scale.S10_000)


@pytest.fixture
def fixed_declination(monkeypatch) -> float:
    """Replace the IGRF model by a constant declination."""
    monkeypatch.setattr(
        "omap_lib.georeferencing.get_declination",
        lambda location, year: FIXED_DECLINATION,
    )
    return FIXED_DECLINATION


# =============================================================================
# Fragment Fixtures
# =============================================================================


@pytest.fixture
def trail_fragments() -> list[LineObject]:
    """Two trail pieces whose ends are 5 cm apart."""
    return [
        LineObject.from_line_string([(0.0, 0.0), (10.0, 0.0)], Symbol.TRAIL),
        LineObject.from_line_string([(10.05, 0.0), (20.0, 5.0)], Symbol.TRAIL),
    ]


@pytest.fixture
def triangle_fragments() -> list[LineObject]:
    """Three basemap contour pieces forming a clockwise triangle."""
    return [
        LineObject.from_line_string([(0.0, 0.0), (0.0, 10.0)], Symbol.BASEMAP_CONTOUR),
        LineObject.from_line_string(
            [(0.0, 10.0), (10.0, 10.0)], Symbol.BASEMAP_CONTOUR
        ),
        LineObject.from_line_string([(10.0, 10.0), (0.0, 0.0)], Symbol.BASEMAP_CONTOUR),
    ]
