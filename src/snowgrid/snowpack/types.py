"""Snow pack data structures for configuration, terrain and state variables.

This module defines the core data types used by the snow pack kernel:
- SimulationConstants: The batch configuration shared by every cell
- CellTerrain: The read-only terrain attributes of one cell
- CellState: The mutable snow state of one cell
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import ClassVar

import numpy as np

from .constants import ALBEDO_FLOOR, CONSTANTS_SIZE, DAYS_PER_YEAR, HOURS_PER_DAY, STATE_SIZE, TERRAIN_SIZE

logger = logging.getLogger(__name__)


# Typical ranges for validation warnings
_CONSTANT_BOUNDS: dict[str, tuple[float, float]] = {
    "measurement_altitude": (-500.0, 9000.0),
    "t_snow_a": (-10.0, 5.0),
    "t_snow_b": (-5.0, 10.0),
    "t_melt_a": (-5.0, 10.0),
    "t_melt_b": (-5.0, 20.0),
    "k_m": (0.0, 100.0),
    "k_e": (0.0, 5.0),
    "day_of_year": (1.0, 365.0),
    "hour_of_day": (0.0, 23.0),
    "vegetation_density": (0.0, 1.0),
}


def _warn_if_outside_bounds(constants: SimulationConstants) -> None:
    """Log warnings for constants outside typical ranges.

    This does not raise errors - values outside bounds may still be valid
    for specific sites or experiments.
    """
    for name, (lower, upper) in _CONSTANT_BOUNDS.items():
        value = getattr(constants, name)
        if value < lower or value > upper:
            logger.warning(
                "Constant %s=%.4f is outside typical range [%.2f, %.2f]",
                name,
                value,
                lower,
                upper,
            )


@dataclass(frozen=True)
class SimulationConstants:
    """Configuration shared by every cell for one batch.

    This is a frozen dataclass: it is constructed once per batch, read by all
    cells during the batch and replaced (see advance()) for the next one.

    Attributes:
        measurement_altitude: Altitude of the weather station.
        t_snow_a: Temperature below which all precipitation is snow [°C].
        t_snow_b: Temperature above which all precipitation is rain [°C].
        t_melt_a: Temperature above which melt starts [°C].
        t_melt_b: Temperature above which melt grows linearly [°C].
        k_m: Melt rate coefficient.
        k_e: Albedo decay coefficient [1/day].
        width: Grid width in cells.
        day_of_year: Day of year of the first timestep of the batch [1-365].
        hour_of_day: Hour of the first timestep of the batch [0-23].
        timestep_offset: Absolute index of the first weather sample of the batch.
        batch_length: Number of hourly timesteps in the batch.
        vegetation_density: Canopy density [-]. Held at 0 (no canopy).
    """

    measurement_altitude: float  # Weather station altitude
    t_snow_a: float  # All-snow threshold [°C]
    t_snow_b: float  # All-rain threshold [°C]
    t_melt_a: float  # Melt onset [°C]
    t_melt_b: float  # Linear melt onset [°C]
    k_m: float  # Melt rate coefficient
    k_e: float  # Albedo decay coefficient [1/day]
    width: int  # Grid width [cells]
    day_of_year: int = 1
    hour_of_day: int = 0
    timestep_offset: int = 0
    batch_length: int = 24
    vegetation_density: float = 0.0

    # Class-level reference to bounds for external access
    BOUNDS: ClassVar[dict[str, tuple[float, float]]] = _CONSTANT_BOUNDS

    def __post_init__(self) -> None:
        """Warn if constants are outside typical ranges."""
        _warn_if_outside_bounds(self)

    def validate(self) -> None:
        """Reject configurations the kernel cannot evaluate.

        Raises:
            ValueError: If a threshold pair is degenerate (division by zero in
                the snow fraction or the melt factor), or the grid width or
                batch window is invalid.
        """
        if self.t_snow_a == self.t_snow_b:
            msg = f"t_snow_a and t_snow_b must differ, both are {self.t_snow_a}"
            raise ValueError(msg)
        if self.t_melt_a == self.t_melt_b:
            msg = f"t_melt_a and t_melt_b must differ, both are {self.t_melt_a}"
            raise ValueError(msg)
        if self.width < 1:
            msg = f"width must be positive, got {self.width}"
            raise ValueError(msg)
        if self.batch_length < 1:
            msg = f"batch_length must be at least 1, got {self.batch_length}"
            raise ValueError(msg)
        if self.timestep_offset < 0:
            msg = f"timestep_offset must be non-negative, got {self.timestep_offset}"
            raise ValueError(msg)

    def advance(self) -> SimulationConstants:
        """Return the constants for the batch following this one.

        The timestep offset, hour of day and day of year move forward by
        batch_length hours.
        """
        elapsed = self.hour_of_day + self.batch_length
        day = (self.day_of_year - 1 + elapsed // HOURS_PER_DAY) % DAYS_PER_YEAR + 1
        return replace(
            self,
            day_of_year=day,
            hour_of_day=elapsed % HOURS_PER_DAY,
            timestep_offset=self.timestep_offset + self.batch_length,
        )

    def __array__(self, dtype: np.dtype | None = None, copy: bool | None = None) -> np.ndarray:
        """Convert the per-cell constants to a 1D array for Numba.

        Layout: [measurement_altitude, t_snow_a, t_snow_b, t_melt_a, t_melt_b,
                 k_m, k_e, day_of_year, hour_of_day, vegetation_density]
        """
        arr = np.array(
            [
                self.measurement_altitude,
                self.t_snow_a,
                self.t_snow_b,
                self.t_melt_a,
                self.t_melt_b,
                self.k_m,
                self.k_e,
                self.day_of_year,
                self.hour_of_day,
                self.vegetation_density,
            ],
            dtype=np.float64,
        )
        if dtype is not None:
            arr = arr.astype(dtype)
        return arr

    @classmethod
    def from_array(
        cls,
        arr: np.ndarray,
        width: int,
        timestep_offset: int = 0,
        batch_length: int = 24,
    ) -> SimulationConstants:
        """Reconstruct constants from the kernel array layout.

        The grid and batch window fields are not part of the array and must be
        given explicitly.
        """
        if len(arr) != CONSTANTS_SIZE:
            msg = f"Expected array of length {CONSTANTS_SIZE}, got {len(arr)}"
            raise ValueError(msg)
        return cls(
            measurement_altitude=float(arr[0]),
            t_snow_a=float(arr[1]),
            t_snow_b=float(arr[2]),
            t_melt_a=float(arr[3]),
            t_melt_b=float(arr[4]),
            k_m=float(arr[5]),
            k_e=float(arr[6]),
            width=width,
            day_of_year=int(arr[7]),
            hour_of_day=int(arr[8]),
            timestep_offset=timestep_offset,
            batch_length=batch_length,
            vegetation_density=float(arr[9]),
        )


@dataclass(frozen=True)
class CellTerrain:
    """Terrain attributes of one grid cell, read-only to the snow model.

    Attributes:
        aspect: Slope azimuth [rad], 0 facing the pole.
        inclination: Slope angle from horizontal [rad].
        latitude: Latitude [rad].
        altitude: Cell altitude, same unit as the measurement altitude.
        area: Surface area of the cell [m²].
        area_xy: Horizontal (projected) area of the cell [m²].
        curvature: Terrain curvature [-], positive for concave terrain.
    """

    aspect: float
    inclination: float
    latitude: float
    altitude: float
    area: float
    area_xy: float
    curvature: float = 0.0

    def __array__(self, dtype: np.dtype | None = None, copy: bool | None = None) -> np.ndarray:
        """Layout: [aspect, inclination, latitude, altitude, area, area_xy, curvature]"""
        arr = np.array(
            [
                self.aspect,
                self.inclination,
                self.latitude,
                self.altitude,
                self.area,
                self.area_xy,
                self.curvature,
            ],
            dtype=np.float64,
        )
        if dtype is not None:
            arr = arr.astype(dtype)
        return arr

    @classmethod
    def from_array(cls, arr: np.ndarray) -> CellTerrain:
        """Reconstruct terrain attributes from array."""
        if len(arr) != TERRAIN_SIZE:
            msg = f"Expected array of length {TERRAIN_SIZE}, got {len(arr)}"
            raise ValueError(msg)
        return cls(
            aspect=float(arr[0]),
            inclination=float(arr[1]),
            latitude=float(arr[2]),
            altitude=float(arr[3]),
            area=float(arr[4]),
            area_xy=float(arr[5]),
            curvature=float(arr[6]),
        )


@dataclass
class CellState:
    """Snow state of one grid cell.

    Mutable state that persists across batches and is updated in place.

    Attributes:
        swe: Snow water equivalent [l]. Constraint: swe >= 0.
        interpolated_swe: SWE after slope and curvature redistribution [l].
        albedo: Snow surface albedo [-], typically in [0.4, 0.8].
        days_since_snowfall: Time since the last precipitation event [day].
    """

    swe: float  # Snow water equivalent [l]
    interpolated_swe: float  # Redistributed SWE [l]
    albedo: float  # Snow albedo [-]
    days_since_snowfall: float  # Days since last precipitation [day]

    @classmethod
    def initialize(cls, swe: float = 0.0, albedo: float = ALBEDO_FLOOR) -> CellState:
        """Create a cell state with no recent snowfall.

        Args:
            swe: Initial snow water equivalent [l].
            albedo: Initial albedo [-].

        Returns:
            Initialized CellState.
        """
        return cls(swe=swe, interpolated_swe=swe, albedo=albedo, days_since_snowfall=0.0)

    def __array__(self, dtype: np.dtype | None = None, copy: bool | None = None) -> np.ndarray:
        """Layout: [swe, interpolated_swe, albedo, days_since_snowfall]"""
        arr = np.array([self.swe, self.interpolated_swe, self.albedo, self.days_since_snowfall], dtype=np.float64)
        if dtype is not None:
            arr = arr.astype(dtype)
        return arr

    @classmethod
    def from_array(cls, arr: np.ndarray) -> CellState:
        """Reconstruct state from array."""
        return cls(
            swe=float(arr[0]),
            interpolated_swe=float(arr[1]),
            albedo=float(arr[2]),
            days_since_snowfall=float(arr[3]),
        )


def initial_state(n_cells: int, swe: float = 0.0, albedo: float = ALBEDO_FLOOR) -> np.ndarray:
    """Allocate the resident state arena for a grid.

    Args:
        n_cells: Number of grid cells.
        swe: Initial snow water equivalent of every cell [l].
        albedo: Initial albedo of every cell [-].

    Returns:
        C-contiguous float64 array of shape (n_cells, 4), one row per cell in
        the CellState layout.
    """
    state = np.zeros((n_cells, STATE_SIZE), dtype=np.float64)
    state[:, 0] = swe
    state[:, 1] = swe
    state[:, 2] = albedo
    return state
