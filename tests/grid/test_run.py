"""Tests for the parallel grid batch driver.

Tests verify slope and curvature redistribution, agreement with the single
cell kernel, order independence of the grid maximum and input checks.
"""

import math
from dataclasses import replace

import numpy as np
import pytest

from snowgrid import CellState, CellTerrain, SimulationConstants, TerrainGrid, WeatherSeries, initial_state, run_batch
from snowgrid.snowpack import run_cell

REFERENCE_ALTITUDE = 1000.0


def make_constants(width: int, batch_length: int = 24) -> SimulationConstants:
    return SimulationConstants(
        measurement_altitude=REFERENCE_ALTITUDE,
        t_snow_a=0.0,
        t_snow_b=2.0,
        t_melt_a=0.0,
        t_melt_b=4.0,
        k_m=1.0,
        k_e=0.1,
        width=width,
        day_of_year=100,
        hour_of_day=0,
        batch_length=batch_length,
    )


def random_terrain(rng: np.random.Generator, n_cells: int) -> np.ndarray:
    """Random (n_cells, 7) terrain arena."""
    inclination = rng.uniform(0.0, 0.8, size=n_cells)
    return np.ascontiguousarray(
        np.column_stack(
            [
                rng.uniform(0.0, 2 * math.pi, size=n_cells),  # aspect
                inclination,
                rng.uniform(0.7, 0.9, size=n_cells),  # latitude
                rng.uniform(500.0, 2500.0, size=n_cells),  # altitude
                100.0 / np.cos(inclination),  # area
                np.full(n_cells, 100.0),  # area_xy
                rng.uniform(-0.005, 0.005, size=n_cells),  # curvature
            ]
        )
    )


def random_weather(rng: np.random.Generator, n_timesteps: int) -> WeatherSeries:
    temp = rng.uniform(-5.0, 12.0, size=n_timesteps)
    precip = np.where(rng.random(n_timesteps) < 0.25, rng.uniform(0.0, 4.0, size=n_timesteps), 0.0)
    return WeatherSeries(temp=temp, precip=precip)


class TestRedistribution:
    """Slope shedding and curvature trapping after the timestep loop."""

    @pytest.fixture
    def terrain(self) -> np.ndarray:
        slopes = np.radians([0.0, 10.0, 30.0, 0.0, 0.0])
        curvature = np.array([0.0, 0.0, 0.0, 0.01, -0.05])
        n = len(slopes)
        return np.ascontiguousarray(
            np.column_stack(
                [
                    np.zeros(n),
                    slopes,
                    np.full(n, 0.8),
                    np.full(n, REFERENCE_ALTITUDE),
                    100.0 / np.cos(slopes),
                    np.full(n, 100.0),
                    curvature,
                ]
            )
        )

    def test_interpolated_swe_and_depth(self, terrain: np.ndarray) -> None:
        """Cold dry hour: only the redistribution changes the output."""
        state = initial_state(5, swe=1000.0)
        weather = WeatherSeries(temp=[-5.0], precip=[0.0])

        output = run_batch(terrain, state, weather, make_constants(width=5, batch_length=1))

        np.testing.assert_allclose(state[:, 0], 1000.0)
        np.testing.assert_allclose(state[:, 1], [1000.0, 1000.0, 500.0, 1500.0, 0.0])
        np.testing.assert_allclose(output.depth, [10.0, 10.0, 5.0, 15.0, 0.0])
        assert output.global_max == pytest.approx(15.0)

    def test_no_snow(self, terrain: np.ndarray) -> None:
        state = initial_state(5)
        weather = WeatherSeries(temp=[-5.0], precip=[0.0])

        output = run_batch(terrain, state, weather, make_constants(width=5, batch_length=1))

        assert output.global_max == 0.0
        np.testing.assert_array_equal(output.depth, 0.0)


class TestRunBatch:
    """Tests for run_batch()."""

    def test_matches_single_cell_kernel(self) -> None:
        """Each cell of the grid evolves exactly as run_cell() predicts."""
        rng = np.random.default_rng(5)
        terrain = random_terrain(rng, 16)
        initial = initial_state(16)
        initial[:, 0] = rng.uniform(0.0, 2000.0, size=16)
        weather = random_weather(rng, 24)
        constants = make_constants(width=4)

        state = initial.copy()
        run_batch(terrain, state, weather, constants)

        for cell in range(16):
            expected, _ = run_cell(
                CellTerrain.from_array(terrain[cell]),
                weather.temp,
                weather.precip,
                constants,
                initial_state=CellState.from_array(initial[cell]),
            )
            assert state[cell, 0] == pytest.approx(expected.swe, rel=1e-12, abs=1e-12)
            assert state[cell, 2] == pytest.approx(expected.albedo, rel=1e-12)
            assert state[cell, 3] == pytest.approx(expected.days_since_snowfall, rel=1e-12)

    def test_global_max_is_max_of_depth(self) -> None:
        rng = np.random.default_rng(8)
        terrain = random_terrain(rng, 64)
        state = initial_state(64)
        state[:, 0] = rng.uniform(0.0, 3000.0, size=64)

        output = run_batch(terrain, state, random_weather(rng, 48), make_constants(width=8, batch_length=48))

        assert output.global_max == output.depth.max()
        assert output.global_max > 0.0
        assert np.all(output.depth >= 0.0)
        assert np.all(state[:, 0] >= 0.0)

    def test_global_max_independent_of_cell_order(self) -> None:
        """Shuffling cells permutes the output field and leaves the maximum unchanged."""
        rng = np.random.default_rng(13)
        terrain = random_terrain(rng, 64)
        initial = initial_state(64)
        initial[:, 0] = rng.uniform(0.0, 3000.0, size=64)
        weather = random_weather(rng, 48)
        constants = make_constants(width=8, batch_length=48)

        baseline = run_batch(terrain, initial.copy(), weather, constants)

        for _ in range(5):
            perm = rng.permutation(64)
            shuffled = run_batch(
                np.ascontiguousarray(terrain[perm]),
                np.ascontiguousarray(initial[perm]),
                weather,
                constants,
            )
            assert shuffled.global_max == baseline.global_max
            np.testing.assert_array_equal(shuffled.depth, baseline.depth[perm])

    def test_uses_batch_window(self) -> None:
        """Only samples inside [offset, offset + batch_length) reach the cells."""
        grid = TerrainGrid.flat(2, 2, latitude=0.8, altitude=REFERENCE_ALTITUDE, cell_size=10.0)
        precip = np.zeros(48)
        precip[30] = 2.0
        weather = WeatherSeries(temp=np.full(48, -5.0), precip=precip)

        first = replace(make_constants(width=2), timestep_offset=0)
        second = replace(make_constants(width=2), timestep_offset=24)
        state = initial_state(4)

        assert run_batch(grid, state, weather, first).global_max == 0.0
        assert run_batch(grid, state, weather, second).global_max == pytest.approx(2.0)
        np.testing.assert_allclose(state[:, 0], 200.0)

    def test_accepts_terrain_grid(self) -> None:
        grid = TerrainGrid.flat(3, 2, latitude=0.8, altitude=REFERENCE_ALTITUDE)
        weather = WeatherSeries(temp=np.full(24, -5.0), precip=np.full(24, 0.5))

        output = run_batch(grid, initial_state(6), weather, make_constants(width=3))

        assert output.depth_grid.shape == (2, 3)
        assert output.global_max == pytest.approx(12.0)


class TestRunBatchValidation:
    """Input checks performed before dispatch."""

    @pytest.fixture
    def weather(self) -> WeatherSeries:
        return WeatherSeries(temp=np.zeros(24), precip=np.zeros(24))

    @pytest.fixture
    def grid(self) -> TerrainGrid:
        return TerrainGrid.flat(2, 2, latitude=0.8)

    def test_state_shape(self, grid: TerrainGrid, weather: WeatherSeries) -> None:
        with pytest.raises(ValueError, match="state must have shape"):
            run_batch(grid, initial_state(3), weather, make_constants(width=2))

    def test_state_layout(self, grid: TerrainGrid, weather: WeatherSeries) -> None:
        with pytest.raises(ValueError, match="C-contiguous"):
            run_batch(grid, np.asfortranarray(initial_state(4)), weather, make_constants(width=2))

    def test_width_mismatch(self, grid: TerrainGrid, weather: WeatherSeries) -> None:
        with pytest.raises(ValueError, match="does not match terrain width"):
            run_batch(grid, initial_state(4), weather, make_constants(width=4))

    def test_partial_rows(self, weather: WeatherSeries) -> None:
        terrain = np.asarray(TerrainGrid.flat(5, 1, latitude=0.8))

        with pytest.raises(ValueError, match="do not fill rows"):
            run_batch(terrain, initial_state(5), weather, make_constants(width=2))

    def test_window_outside_weather(self, grid: TerrainGrid, weather: WeatherSeries) -> None:
        with pytest.raises(ValueError, match="outside the weather series"):
            run_batch(grid, initial_state(4), weather, make_constants(width=2, batch_length=48))

    def test_degenerate_thresholds(self, grid: TerrainGrid, weather: WeatherSeries) -> None:
        constants = replace(make_constants(width=2), t_melt_b=0.0)

        with pytest.raises(ValueError, match="t_melt_a and t_melt_b"):
            run_batch(grid, initial_state(4), weather, constants)
