"""Tests for the slope radiation index.

Tests verify Swift's algorithm: self-normalization on flat ground, the
effect of slope orientation, and numeric safety on degenerate geometry.
"""

import math

import numpy as np
import pytest

from snowgrid.radiation import RadiationIndex, radiation_index
from snowgrid.radiation.run import _radiation_index_numba

LATITUDE_46N = math.radians(46.0)
SUMMER_SOLSTICE = 172
WINTER_SOLSTICE = 355


class TestRadiationIndex:
    """Tests for radiation_index()."""

    def test_returns_radiation_index(self) -> None:
        """Result is a RadiationIndex with float fields."""
        result = radiation_index(0.3, 1.0, LATITUDE_46N, SUMMER_SOLSTICE)

        assert isinstance(result, RadiationIndex)
        assert isinstance(result.index, float)
        assert isinstance(result.t4, float)
        assert isinstance(result.t5, float)

    @pytest.mark.parametrize("aspect", [0.0, 0.7, math.pi / 2, math.pi, 4.0, 2 * math.pi - 0.1])
    @pytest.mark.parametrize("day", [1, 80, SUMMER_SOLSTICE, 300, WINTER_SOLSTICE])
    def test_flat_ground_is_one(self, aspect: float, day: int) -> None:
        """Flat ground receives exactly the flat-ground radiation, for any aspect."""
        result = radiation_index(0.0, aspect, LATITUDE_46N, day)

        assert result.index == pytest.approx(1.0, rel=1e-9)

    @pytest.mark.parametrize("latitude", [-1.0, -0.4, 0.0, 0.3, 1.1])
    def test_flat_ground_is_one_at_any_sunlit_latitude(self, latitude: float) -> None:
        """Self-normalization holds across latitudes with a daylight window."""
        result = radiation_index(0.0, 0.0, latitude, 80)

        assert result.index == pytest.approx(1.0, rel=1e-9)

    def test_equator_facing_slope_exceeds_flat_in_winter(self) -> None:
        """A 30° south-facing slope at 46°N gets more winter sun than flat ground."""
        result = radiation_index(math.radians(30.0), math.pi, LATITUDE_46N, WINTER_SOLSTICE)

        assert result.index > 1.0

    def test_pole_facing_slope_below_flat(self) -> None:
        """A gentle north-facing slope in spring is lit, but less than flat ground."""
        result = radiation_index(math.radians(15.0), 0.0, LATITUDE_46N, 80)

        assert 0.0 < result.index < 1.0
        assert result.index == pytest.approx(0.70, abs=0.05)

    def test_steep_pole_facing_slope_in_winter_is_shadowed(self) -> None:
        """A slope whose equivalent latitude is in polar night receives nothing."""
        result = radiation_index(math.radians(30.0), 0.0, LATITUDE_46N, WINTER_SOLSTICE)

        assert result.index == 0.0

    def test_flat_daylight_bounds_are_symmetric(self) -> None:
        """On flat ground sunrise and sunset are symmetric around solar noon."""
        result = radiation_index(0.0, 0.0, LATITUDE_46N, SUMMER_SOLSTICE)

        assert result.t4 == pytest.approx(-result.t5)
        assert result.t5 > 6.0  # Summer day longer than 12 hours
        assert result.day_length == pytest.approx(2.0 * result.t5)

    def test_equator_has_twelve_hour_day(self) -> None:
        """At the equator the day lasts 12 hours."""
        result = radiation_index(0.0, 0.0, 0.0, 80)

        assert result.day_length == pytest.approx(12.0)

    def test_polar_night_is_finite_zero(self) -> None:
        """No flat-ground radiation yields an index of 0 rather than NaN."""
        result = radiation_index(0.2, 1.0, math.radians(80.0), WINTER_SOLSTICE)

        assert result.index == 0.0
        assert math.isfinite(result.t4)
        assert math.isfinite(result.t5)

    def test_polar_day_is_finite(self) -> None:
        """Midnight sun is clamped to a full day."""
        result = radiation_index(0.0, 0.0, math.radians(80.0), SUMMER_SOLSTICE)

        assert result.index == pytest.approx(1.0, rel=1e-9)
        assert result.day_length == pytest.approx(24.0)

    def test_finite_and_non_negative_over_random_geometry(self) -> None:
        """Index is finite and non-negative across a seeded sweep of geometries."""
        rng = np.random.default_rng(42)

        for _ in range(500):
            inclination = rng.uniform(0.0, 1.3)
            aspect = rng.uniform(0.0, 2 * math.pi)
            latitude = rng.uniform(-1.4, 1.4)
            day = int(rng.integers(1, 366))

            result = radiation_index(inclination, aspect, latitude, day)

            assert math.isfinite(result.index)
            assert result.index >= 0.0
            assert math.isfinite(result.t4)
            assert math.isfinite(result.t5)
            if radiation_index(0.0, 0.0, latitude, day).day_length > 0.0:
                assert result.day_length > 0.0

    def test_vertical_wall_does_not_raise(self) -> None:
        """Degenerate geometry with a zero denominator returns a number."""
        result = radiation_index(math.pi / 2, math.pi / 2, 0.0, 80)

        assert math.isfinite(result.index)


class TestRadiationNumbaEquivalence:
    """The compiled kernel matches its Python source."""

    @pytest.mark.parametrize(
        ("inclination", "aspect", "latitude", "day"),
        [
            (0.0, 0.0, 0.8, 172.0),
            (0.5, 3.0, 0.8, 355.0),
            (0.9, 1.2, -0.6, 30.0),
            (1.2, 5.5, 1.2, 200.0),
        ],
    )
    def test_matches_python(self, inclination: float, aspect: float, latitude: float, day: float) -> None:
        """Compiled and interpreted kernels agree."""
        compiled = _radiation_index_numba(inclination, aspect, latitude, day)
        interpreted = _radiation_index_numba.py_func(inclination, aspect, latitude, day)

        for c, p in zip(compiled, interpreted, strict=True):
            assert c == pytest.approx(p, rel=1e-12, abs=1e-12)


class TestSelfShadowedBounds:
    """A slope facing away from the sun still reports its daylight bounds."""

    def test_bounds_kept_when_index_is_zero(self) -> None:
        result = radiation_index(0.4514, 0.9727, 1.2784, 309)

        assert result.index == 0.0
        assert result.t4 == pytest.approx(-1.263, abs=0.01)
        assert result.t5 == pytest.approx(-2.897, abs=0.01)
        assert result.day_length > 0.0
        assert radiation_index(0.0, 0.0, 1.2784, 309).day_length > 0.0
