"""Snow pack orchestration functions.

This module provides the entry points for updating a single grid cell:
- step(): Execute a single hourly timestep
- update_cell(): Execute a batch of timesteps in place
- run_cell(): Execute a batch and return the hourly trace
"""

from __future__ import annotations

import numpy as np
from numba import njit

from ..radiation.run import _radiation_index_numba
from .constants import FLUX_SIZE
from .outputs import CellFluxes
from .processes import (
    compute_albedo,
    compute_melt_coefficient,
    compute_melt_factor,
    compute_radiation_weight,
    compute_snow_fraction,
    compute_vegetation_factor,
    lapse_precipitation,
    lapse_temperature,
    timestep_clock,
)
from .types import CellState, CellTerrain, SimulationConstants

# Constants inlined for Numba compatibility (from .constants)
_HOUR_FRACTION: float = 1.0 / 24.0
_RAIN_ALBEDO: float = 0.4
_FRESH_SNOW_ALBEDO: float = 0.8


@njit(cache=True)
def _step_numba(
    terrain_row: np.ndarray,  # shape (7,)
    state_row: np.ndarray,  # shape (4,) - modified in place
    temp: float,
    precip: float,
    constants_arr: np.ndarray,  # shape (10,)
    timestep: int,
    out_fluxes: np.ndarray,  # shape (9,) - output written here
) -> None:
    """Execute one hourly timestep of the snow pack using arrays (Numba-optimized).

    Terrain layout: [aspect, inclination, latitude, altitude, area, area_xy, curvature]
    State layout: [swe, interpolated_swe, albedo, days_since_snowfall]
    Constants layout: [measurement_altitude, t_snow_a, t_snow_b, t_melt_a, t_melt_b,
                       k_m, k_e, day_of_year, hour_of_day, vegetation_density]
    Flux output layout: [air_temp, precip, snowfall, melt, radiation_index,
                         radiation_weight, swe, albedo, days_since_snowfall]
    """
    # Unpack terrain
    aspect = terrain_row[0]
    inclination = terrain_row[1]
    latitude = terrain_row[2]
    altitude = terrain_row[3]
    area = terrain_row[4]

    # Unpack constants
    reference_altitude = constants_arr[0]
    t_snow_a = constants_arr[1]
    t_snow_b = constants_arr[2]
    t_melt_a = constants_arr[3]
    t_melt_b = constants_arr[4]
    k_m = constants_arr[5]
    k_e = constants_arr[6]

    # Unpack state
    swe = state_row[0]
    albedo = state_row[2]
    days_since_snowfall = state_row[3]

    snowfall = 0.0
    melt = 0.0
    index = 0.0
    weight = 0.0

    # 1. Temperature at the cell
    air_temp = lapse_temperature(temp, altitude, reference_altitude)

    # 2. Age the snow surface by one hour
    days_since_snowfall += _HOUR_FRACTION

    # 3. Precipitation: rain darkens, snow accumulates and brightens
    if precip > 0.0:
        precip = lapse_precipitation(precip, altitude, reference_altitude)
        days_since_snowfall = 0.0
        if air_temp > t_snow_b:
            albedo = _RAIN_ALBEDO
        else:
            snowfall = precip * area * compute_snow_fraction(air_temp, t_snow_a, t_snow_b)
            swe += snowfall
            albedo = _FRESH_SNOW_ALBEDO

    # 4. Albedo ageing and radiation-temperature melt
    if swe > 0.0:
        albedo = compute_albedo(days_since_snowfall, k_e)
        if air_temp > t_melt_a:
            hour, day = timestep_clock(constants_arr[8], constants_arr[7], timestep)
            index, t4, t5 = _radiation_index_numba(inclination, aspect, latitude, day)
            weight = compute_radiation_weight(index, t4, t5, hour)
            k_v = compute_vegetation_factor(constants_arr[9])
            c_m = compute_melt_coefficient(k_m, k_v, weight, albedo, area)
            melt = min(swe, c_m * compute_melt_factor(air_temp, t_melt_a, t_melt_b))
            swe = max(0.0, swe - melt)

    # Update state array in place
    state_row[0] = swe
    state_row[2] = albedo
    state_row[3] = days_since_snowfall

    # Write outputs
    out_fluxes[0] = air_temp
    out_fluxes[1] = precip
    out_fluxes[2] = snowfall
    out_fluxes[3] = melt
    out_fluxes[4] = index
    out_fluxes[5] = weight
    out_fluxes[6] = swe
    out_fluxes[7] = albedo
    out_fluxes[8] = days_since_snowfall


@njit(cache=True)
def _update_cell_numba(
    terrain_row: np.ndarray,  # shape (7,)
    state_row: np.ndarray,  # shape (4,) - modified in place
    temp_arr: np.ndarray,  # shape (n_timesteps,)
    precip_arr: np.ndarray,  # shape (n_timesteps,)
    constants_arr: np.ndarray,  # shape (10,)
) -> None:
    """Run the snow pack of one cell over a batch (Numba-optimized).

    Timesteps are strictly sequential; state is modified in place.
    """
    n_timesteps = len(temp_arr)
    out_fluxes = np.zeros(9)

    for t in range(n_timesteps):
        _step_numba(terrain_row, state_row, temp_arr[t], precip_arr[t], constants_arr, t, out_fluxes)


@njit(cache=True)
def _run_cell_numba(
    terrain_row: np.ndarray,  # shape (7,)
    state_row: np.ndarray,  # shape (4,) - modified in place
    temp_arr: np.ndarray,  # shape (n_timesteps,)
    precip_arr: np.ndarray,  # shape (n_timesteps,)
    constants_arr: np.ndarray,  # shape (10,)
    outputs_arr: np.ndarray,  # shape (n_timesteps, 9)
) -> None:
    """Run the snow pack of one cell over a batch, recording every timestep.

    State is modified in place. Outputs are written to outputs_arr.
    """
    n_timesteps = len(temp_arr)
    output_single = np.zeros(9)

    for t in range(n_timesteps):
        _step_numba(terrain_row, state_row, temp_arr[t], precip_arr[t], constants_arr, t, output_single)
        for i in range(9):
            outputs_arr[t, i] = output_single[i]


def step(
    state: CellState,
    terrain: CellTerrain,
    temp: float,
    precip: float,
    constants: SimulationConstants,
    timestep: int = 0,
) -> dict[str, float]:
    """Execute one hourly timestep of the snow pack, updating state in place.

    Algorithm steps:
    1. Lapse-correct the air temperature to the cell altitude
    2. Advance days_since_snowfall by one hour
    3. On precipitation: reset days_since_snowfall; rain above t_snow_b sets
       albedo to 0.4, otherwise the snow fraction is added to SWE and albedo
       is set to 0.8
    4. With a snow pack: decay albedo from days_since_snowfall, and above
       t_melt_a remove radiation-temperature melt, flooring SWE at 0

    Args:
        state: Cell state, mutated in place.
        terrain: Cell terrain attributes.
        temp: Air temperature at the measurement altitude [°C].
        precip: Precipitation at the measurement altitude [l/m²].
        constants: Batch configuration.
        timestep: Index of the timestep within the batch, used to advance
            the hour of day and day of year.

    Returns:
        Dictionary of fluxes for the timestep:
            - air_temp: Air temperature at the cell [°C]
            - precip: Precipitation at the cell [l/m²]
            - snowfall: Water added to the snow pack [l]
            - melt: Water removed from the snow pack [l]
            - radiation_index: Daily radiation index [-]
            - radiation_weight: Diurnal radiation weight [-]
            - swe: Snow water equivalent [l]
            - albedo: Snow albedo [-]
            - days_since_snowfall: Days since last precipitation [day]
    """
    state_arr = np.asarray(state)
    terrain_arr = np.asarray(terrain)
    constants_arr = np.asarray(constants)
    out_fluxes = np.zeros(FLUX_SIZE)

    _step_numba(terrain_arr, state_arr, float(temp), float(precip), constants_arr, timestep, out_fluxes)

    state.swe = float(state_arr[0])
    state.albedo = float(state_arr[2])
    state.days_since_snowfall = float(state_arr[3])

    return {
        "air_temp": float(out_fluxes[0]),
        "precip": float(out_fluxes[1]),
        "snowfall": float(out_fluxes[2]),
        "melt": float(out_fluxes[3]),
        "radiation_index": float(out_fluxes[4]),
        "radiation_weight": float(out_fluxes[5]),
        "swe": float(out_fluxes[6]),
        "albedo": float(out_fluxes[7]),
        "days_since_snowfall": float(out_fluxes[8]),
    }


def update_cell(
    state: CellState,
    terrain: CellTerrain,
    temp: np.ndarray,
    precip: np.ndarray,
    constants: SimulationConstants,
) -> None:
    """Update one cell over a batch of hourly timesteps in place.

    Args:
        state: Cell state, mutated in place.
        terrain: Cell terrain attributes.
        temp: Air temperature at the measurement altitude, one per timestep [°C].
        precip: Precipitation at the measurement altitude, one per timestep [l/m²].
        constants: Batch configuration.

    Raises:
        ValueError: If temp and precip lengths differ.
    """
    temp_arr = np.ascontiguousarray(temp, dtype=np.float64)
    precip_arr = np.ascontiguousarray(precip, dtype=np.float64)
    if len(temp_arr) != len(precip_arr):
        msg = f"precip length {len(precip_arr)} does not match temp length {len(temp_arr)}"
        raise ValueError(msg)

    state_arr = np.asarray(state)
    _update_cell_numba(np.asarray(terrain), state_arr, temp_arr, precip_arr, np.asarray(constants))

    state.swe = float(state_arr[0])
    state.albedo = float(state_arr[2])
    state.days_since_snowfall = float(state_arr[3])


def run_cell(
    terrain: CellTerrain,
    temp: np.ndarray,
    precip: np.ndarray,
    constants: SimulationConstants,
    initial_state: CellState | None = None,
) -> tuple[CellState, CellFluxes]:
    """Run one cell over a batch and return its hourly trace.

    Args:
        terrain: Cell terrain attributes.
        temp: Air temperature at the measurement altitude, one per timestep [°C].
        precip: Precipitation at the measurement altitude, one per timestep [l/m²].
        constants: Batch configuration.
        initial_state: Starting state. If None, uses CellState.initialize().

    Returns:
        Tuple of (final_state, fluxes).

    Raises:
        ValueError: If temp and precip lengths differ.
    """
    temp_arr = np.ascontiguousarray(temp, dtype=np.float64)
    precip_arr = np.ascontiguousarray(precip, dtype=np.float64)
    if len(temp_arr) != len(precip_arr):
        msg = f"precip length {len(precip_arr)} does not match temp length {len(temp_arr)}"
        raise ValueError(msg)

    state = CellState.initialize() if initial_state is None else initial_state
    state_arr = np.asarray(state).copy()
    outputs_arr = np.zeros((len(temp_arr), FLUX_SIZE), dtype=np.float64)

    _run_cell_numba(np.asarray(terrain), state_arr, temp_arr, precip_arr, np.asarray(constants), outputs_arr)

    fluxes = CellFluxes(
        air_temp=outputs_arr[:, 0],
        precip=outputs_arr[:, 1],
        snowfall=outputs_arr[:, 2],
        melt=outputs_arr[:, 3],
        radiation_index=outputs_arr[:, 4],
        radiation_weight=outputs_arr[:, 5],
        swe=outputs_arr[:, 6],
        albedo=outputs_arr[:, 7],
        days_since_snowfall=outputs_arr[:, 8],
    )
    return CellState.from_array(state_arr), fluxes
