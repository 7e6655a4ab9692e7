"""Input data structures for the snow grid model.

This module defines validated input containers:
- WeatherSeries: Hourly weather samples at the measurement altitude
- TerrainGrid: Static per-cell terrain attributes produced by preprocessing
"""

from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .snowpack.types import CellTerrain

logger = logging.getLogger(__name__)


def _as_float_vector(v: np.ndarray, name: str) -> np.ndarray:
    """Coerce to a 1D float64 array, rejecting NaN values."""
    arr = np.asarray(v, dtype=np.float64)
    if arr.ndim != 1:
        msg = f"{name} array must be 1D, got {arr.ndim}D"
        raise ValueError(msg)
    if np.any(np.isnan(arr)):
        msg = f"{name} array contains NaN values"
        raise ValueError(msg)
    return np.ascontiguousarray(arr)


class WeatherSeries(BaseModel):
    """Validated hourly weather samples, indexed by absolute timestep.

    All arrays must be 1D with the same length. NaN values are rejected.
    Numeric arrays are coerced to float64.

    Attributes:
        temp: Air temperature at the measurement altitude [°C].
        precip: Precipitation at the measurement altitude [l/m²]. Must be >= 0.
        time: Optional datetime array for each timestep (datetime64).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    temp: np.ndarray  # [°C]
    precip: np.ndarray  # [l/m²]
    time: np.ndarray | None = None  # datetime64

    @field_validator("temp", mode="before")
    @classmethod
    def validate_temp(cls, v: np.ndarray) -> np.ndarray:
        """Validate temp array: must be 1D float64 with no NaN values."""
        return _as_float_vector(v, "temp")

    @field_validator("precip", mode="before")
    @classmethod
    def validate_precip(cls, v: np.ndarray) -> np.ndarray:
        """Validate precip array: must be 1D float64, no NaN, non-negative."""
        arr = _as_float_vector(v, "precip")
        if np.any(arr < 0.0):
            msg = "precip array contains negative values"
            raise ValueError(msg)
        return arr

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v: np.ndarray | None) -> np.ndarray | None:
        """Validate time array: must be 1D and coerced to datetime64."""
        if v is None:
            return None
        arr = np.asarray(v)
        if arr.ndim != 1:
            msg = f"time array must be 1D, got {arr.ndim}D"
            raise ValueError(msg)
        return arr.astype("datetime64[ns]")

    @model_validator(mode="after")
    def validate_array_lengths(self) -> WeatherSeries:
        """Ensure all arrays have the same length."""
        n = len(self.temp)
        if len(self.precip) != n:
            msg = f"precip length {len(self.precip)} does not match temp length {n}"
            raise ValueError(msg)
        if self.time is not None and len(self.time) != n:
            msg = f"time length {len(self.time)} does not match temp length {n}"
            raise ValueError(msg)
        return self

    def __len__(self) -> int:
        """Return the number of timesteps."""
        return len(self.temp)

    def window(self, offset: int, length: int) -> tuple[np.ndarray, np.ndarray]:
        """Select the samples of one batch.

        Args:
            offset: Absolute index of the first timestep.
            length: Number of timesteps.

        Returns:
            Tuple of (temp, precip) contiguous float64 arrays of the given length.

        Raises:
            ValueError: If the window does not lie within the series.
        """
        if offset < 0 or length < 0 or offset + length > len(self):
            msg = f"batch window [{offset}, {offset + length}) is outside the weather series of length {len(self)}"
            raise ValueError(msg)
        end = offset + length
        return (
            np.ascontiguousarray(self.temp[offset:end]),
            np.ascontiguousarray(self.precip[offset:end]),
        )

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        temp_column: str = "temp",
        precip_column: str = "precip",
    ) -> WeatherSeries:
        """Build a weather series from a DataFrame.

        A DatetimeIndex, when present, becomes the time array.

        Args:
            df: DataFrame with one row per hourly timestep.
            temp_column: Name of the temperature column [°C].
            precip_column: Name of the precipitation column [l/m²].

        Returns:
            Validated WeatherSeries.
        """
        time = df.index.to_numpy() if isinstance(df.index, pd.DatetimeIndex) else None
        return cls(
            temp=df[temp_column].to_numpy(),
            precip=df[precip_column].to_numpy(),
            time=time,
        )


# Terrain attribute bounds for validation warnings
_TERRAIN_BOUNDS: dict[str, tuple[float, float]] = {
    "inclination": (0.0, math.pi / 2.0),
    "latitude": (-math.pi / 2.0, math.pi / 2.0),
    "curvature": (-0.02, 0.02),
}

_TERRAIN_FIELDS: tuple[str, ...] = (
    "aspect",
    "inclination",
    "latitude",
    "altitude",
    "area",
    "area_xy",
    "curvature",
)


def _warn_if_outside_bounds(grid: TerrainGrid) -> None:
    """Log warnings for terrain attributes outside typical ranges.

    This does not raise errors - preprocessing may legitimately produce
    such values on unusual grids.
    """
    for name, (lower, upper) in _TERRAIN_BOUNDS.items():
        values = getattr(grid, name)
        n_outside = int(np.count_nonzero((values < lower) | (values > upper)))
        if n_outside:
            logger.warning(
                "%d cells have %s outside typical range [%.2f, %.2f]",
                n_outside,
                name,
                lower,
                upper,
            )


class TerrainGrid(BaseModel):
    """Validated per-cell terrain attributes of a rectangular grid.

    Cells are stored row-major: cell index = row * width + col. Every attribute
    array has width * height entries.

    Attributes:
        width: Number of cells per row.
        height: Number of rows.
        aspect: Slope azimuth [rad], 0 facing the pole.
        inclination: Slope angle from horizontal [rad].
        latitude: Latitude [rad].
        altitude: Cell altitude, same unit as the measurement altitude.
        area: Surface area [m²]. Must be > 0.
        area_xy: Horizontal area [m²]. Must be > 0.
        curvature: Terrain curvature [-], positive for concave terrain.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    width: int
    height: int
    aspect: np.ndarray  # [rad]
    inclination: np.ndarray  # [rad]
    latitude: np.ndarray  # [rad]
    altitude: np.ndarray
    area: np.ndarray  # [m²]
    area_xy: np.ndarray  # [m²]
    curvature: np.ndarray  # [-]

    @field_validator("width", "height")
    @classmethod
    def validate_dimension(cls, v: int) -> int:
        """Grid dimensions must be positive."""
        if v < 1:
            msg = f"grid dimensions must be positive, got {v}"
            raise ValueError(msg)
        return v

    @field_validator(*_TERRAIN_FIELDS, mode="before")
    @classmethod
    def validate_attribute(cls, v: np.ndarray) -> np.ndarray:
        """Validate terrain arrays: must be 1D float64 with no NaN values."""
        return _as_float_vector(v, "terrain")

    @model_validator(mode="after")
    def validate_cells(self) -> TerrainGrid:
        """Ensure every attribute covers the grid and areas are positive."""
        n = self.width * self.height
        for name in _TERRAIN_FIELDS:
            length = len(getattr(self, name))
            if length != n:
                msg = f"{name} length {length} does not match grid size {self.width}x{self.height}"
                raise ValueError(msg)
        if np.any(self.area <= 0.0):
            msg = "area array contains non-positive values"
            raise ValueError(msg)
        if np.any(self.area_xy <= 0.0):
            msg = "area_xy array contains non-positive values"
            raise ValueError(msg)
        _warn_if_outside_bounds(self)
        return self

    @property
    def n_cells(self) -> int:
        """Return the number of cells."""
        return self.width * self.height

    def __len__(self) -> int:
        """Return the number of cells."""
        return self.n_cells

    def cell(self, index: int) -> CellTerrain:
        """Terrain attributes of one cell by flat index."""
        return CellTerrain(**{name: float(getattr(self, name)[index]) for name in _TERRAIN_FIELDS})

    def __array__(self, dtype: np.dtype | None = None, copy: bool | None = None) -> np.ndarray:
        """Convert to the (n_cells, 7) terrain arena for Numba.

        Column layout: [aspect, inclination, latitude, altitude, area, area_xy, curvature]
        """
        arr = np.column_stack([getattr(self, name) for name in _TERRAIN_FIELDS])
        if dtype is not None:
            arr = arr.astype(dtype)
        return np.ascontiguousarray(arr)

    @classmethod
    def flat(
        cls,
        width: int,
        height: int,
        *,
        latitude: float,
        altitude: float = 0.0,
        cell_size: float = 1.0,
        inclination: float = 0.0,
        aspect: float = 0.0,
        curvature: float = 0.0,
    ) -> TerrainGrid:
        """Create a grid of identical cells.

        Surface area follows from the horizontal area and the inclination.

        Args:
            width: Number of cells per row.
            height: Number of rows.
            latitude: Latitude of every cell [rad].
            altitude: Altitude of every cell.
            cell_size: Horizontal edge length of a cell [m].
            inclination: Slope of every cell [rad].
            aspect: Aspect of every cell [rad].
            curvature: Curvature of every cell [-].

        Returns:
            Validated TerrainGrid.
        """
        n = width * height
        area_xy = cell_size * cell_size
        return cls(
            width=width,
            height=height,
            aspect=np.full(n, aspect),
            inclination=np.full(n, inclination),
            latitude=np.full(n, latitude),
            altitude=np.full(n, altitude),
            area=np.full(n, area_xy / math.cos(inclination)),
            area_xy=np.full(n, area_xy),
            curvature=np.full(n, curvature),
        )
