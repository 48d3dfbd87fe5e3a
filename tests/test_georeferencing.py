# -*- coding: utf-8 -*-
"""Tests for georeferencing: declination, convergence and scale factors."""

import datetime
import logging

import pytest
from pyproj import Proj

from omap_lib.enums import Scale
from omap_lib.errors import GeomagneticError
from omap_lib.errors import ProjectionError
from omap_lib.geo_utils import GeoLocation
from omap_lib.geo_utils import to_geographic
from omap_lib.georeferencing import calculate_declination
from omap_lib.georeferencing import compute_geodetic_parameters
from omap_lib.georeferencing import scale_factor_and_convergence
from tests.conftest import FIXED_DECLINATION
from tests.conftest import SURVEY_DATE
from tests.conftest import UTM33_REF_POINT

UTM33N = 32633


class TestLocalParameters:
    """Tests for maps without a CRS."""

    def test_identity(self):
        """Test that local maps have no rotation and no scale correction."""
        params = compute_geodetic_parameters((100.0, 200.0), None, Scale.S10_000)
        assert params.is_local
        assert params.declination == 0.0
        assert params.grivation == 0.0
        assert params.convergence == 0.0
        assert params.combined_scale_factor == 1.0
        assert params.geographic_ref_point is None
        assert params.ref_point == (100.0, 200.0)

    def test_frozen(self):
        """Test that parameters are immutable."""
        params = compute_geodetic_parameters((0.0, 0.0), None, Scale.S10_000)
        with pytest.raises(ValueError):
            params.grivation = 1.0


class TestProjectedParameters:
    """Tests for maps in a projected CRS."""

    def test_central_meridian(self, fixed_declination):
        """Test UTM on its central meridian: no convergence, k0 = 0.9996."""
        params = compute_geodetic_parameters(
            UTM33_REF_POINT, UTM33N, Scale.S15_000, SURVEY_DATE
        )
        assert not params.is_local
        assert params.declination == FIXED_DECLINATION
        assert params.convergence == pytest.approx(0.0, abs=1e-4)
        assert params.grivation == pytest.approx(FIXED_DECLINATION, abs=1e-4)
        assert params.grid_scale_factor == pytest.approx(0.9996, rel=1e-5)
        assert params.elevation_scale_factor == 1.0
        assert params.combined_scale_factor == params.grid_scale_factor

    def test_geographic_ref_point(self, fixed_declination):
        """Test that the reference point is converted to WGS84."""
        params = compute_geodetic_parameters(
            UTM33_REF_POINT, UTM33N, Scale.S15_000, SURVEY_DATE
        )
        geo = params.geographic_ref_point
        assert geo.longitude == pytest.approx(15.0, abs=1e-6)
        assert 59.9 < geo.latitude < 60.1

    def test_grivation_is_declination_minus_convergence(self, fixed_declination):
        """Test the grivation formula away from the central meridian."""
        params = compute_geodetic_parameters(
            (400_000.0, 6_650_000.0), UTM33N, Scale.S15_000, SURVEY_DATE
        )
        assert abs(params.convergence) > 0.5
        assert params.grivation == pytest.approx(
            params.declination - params.convergence
        )

    def test_agrees_with_pyproj_factors(self):
        """Test convergence and scale factor against pyproj's analytic factors."""
        ref_point = (400_000.0, 6_650_000.0)
        location = to_geographic(*ref_point, UTM33N)
        grid_scale_factor, convergence = scale_factor_and_convergence(
            UTM33N, location
        )

        factors = Proj(f"EPSG:{UTM33N}").get_factors(
            location.longitude, location.latitude
        )
        assert grid_scale_factor == pytest.approx(factors.meridional_scale, rel=1e-5)
        assert abs(convergence) == pytest.approx(
            abs(factors.meridian_convergence), abs=1e-3
        )

    def test_degenerate_jacobian(self, monkeypatch):
        """Test that a collapsed projection raises a tolerance error."""
        monkeypatch.setattr(
            "omap_lib.georeferencing.reproject",
            lambda xs, ys, source, target: ([0.0] * len(xs), [0.0] * len(ys)),
        )
        location = GeoLocation(latitude=60.0, longitude=15.0)
        with pytest.raises(ProjectionError, match="Tolerance condition"):
            scale_factor_and_convergence(UTM33N, location)

    def test_unknown_crs(self):
        """Test that an invalid EPSG code aborts construction."""
        with pytest.raises(ProjectionError):
            compute_geodetic_parameters((0.0, 0.0), 999_999, Scale.S15_000)


class TestDeclination:
    """Tests for the magnetic declination."""

    def test_fallback_to_zero(self, monkeypatch, caplog):
        """Test that a failing magnetic model gives a zero declination."""

        def failing(location, year):
            raise GeomagneticError("model unavailable")

        monkeypatch.setattr("omap_lib.georeferencing.get_declination", failing)
        location = GeoLocation(latitude=60.0, longitude=15.0)

        with caplog.at_level(logging.WARNING, logger="omap_lib.georeferencing"):
            declination = calculate_declination(location, SURVEY_DATE)

        assert declination == 0.0
        assert "Failed to calculate declination" in caplog.text

    def test_fallback_keeps_map_valid(self, monkeypatch):
        """Test that map construction survives a magnetic model failure."""

        def failing(location, year):
            raise GeomagneticError("model unavailable")

        monkeypatch.setattr("omap_lib.georeferencing.get_declination", failing)
        params = compute_geodetic_parameters(
            UTM33_REF_POINT, UTM33N, Scale.S15_000, SURVEY_DATE
        )
        assert params.declination == 0.0
        assert params.grivation == pytest.approx(-params.convergence)

    def test_igrf_model(self):
        """Test the IGRF declination in southern Norway (a few degrees east)."""
        location = GeoLocation(latitude=60.0, longitude=15.0)
        declination = calculate_declination(location, datetime.date(2024, 1, 1))
        assert 0.0 < declination < 10.0

    @pytest.mark.parametrize(
        ("date", "expected"),
        [
            (datetime.date(2024, 1, 1), 2024.0),
            (datetime.date(2024, 7, 2), 2024.5),
            (datetime.date(2023, 7, 2), 2023 + 182 / 365),
            (datetime.date(2024, 12, 31), 2024 + 365 / 366),
            (datetime.datetime(2024, 7, 2, 18), 2024.5),  # noqa: DTZ001
        ],
    )
    def test_model_evaluated_at_decimal_year(self, monkeypatch, date, expected):
        """Test that the model is evaluated at the decimal year of the date."""
        years = []

        def recording(location, year):
            years.append(year)
            return FIXED_DECLINATION

        monkeypatch.setattr("omap_lib.georeferencing.get_declination", recording)
        location = GeoLocation(latitude=60.0, longitude=15.0)

        assert calculate_declination(location, date) == FIXED_DECLINATION
        assert years == [pytest.approx(expected)]
