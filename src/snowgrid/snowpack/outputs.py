"""Snow pack per-timestep outputs as arrays.

This module provides the dataclass for organizing and accessing the hourly
trace of a single cell.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class CellFluxes:
    """Hourly trace of one cell's snow pack.

    All arrays have the same length as the batch.

    Attributes:
        air_temp: Air temperature at the cell [°C].
        precip: Precipitation at the cell [l/m²].
        snowfall: Water added to the snow pack [l].
        melt: Water removed from the snow pack [l].
        radiation_index: Daily radiation index of the slope, 0 when no melt
            was evaluated [-].
        radiation_weight: Diurnal radiation weight [-].
        swe: Snow water equivalent after the timestep [l].
        albedo: Snow albedo after the timestep [-].
        days_since_snowfall: Days since the last precipitation after the timestep [day].
    """

    air_temp: np.ndarray
    precip: np.ndarray
    snowfall: np.ndarray
    melt: np.ndarray
    radiation_index: np.ndarray
    radiation_weight: np.ndarray
    swe: np.ndarray
    albedo: np.ndarray
    days_since_snowfall: np.ndarray

    def to_dict(self) -> dict[str, np.ndarray]:
        """Convert to dictionary of arrays.

        Returns:
            Dictionary mapping field names to their numpy array values.
        """
        return {field.name: getattr(self, field.name) for field in fields(self)}

    def to_dataframe(self, time: np.ndarray | None = None) -> pd.DataFrame:
        """Convert to a DataFrame, indexed by time when given.

        Args:
            time: Optional datetime64 array, one entry per timestep.

        Returns:
            DataFrame with one column per flux.
        """
        index = pd.DatetimeIndex(np.asarray(time, dtype="datetime64[ns]"), name="time") if time is not None else None
        return pd.DataFrame(self.to_dict(), index=index)

    def __len__(self) -> int:
        """Return the number of timesteps."""
        return len(self.swe)
