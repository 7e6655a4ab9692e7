"""Grid batch orchestration functions.

This module provides the main entry point for advancing the whole grid:
- run_batch(): Update every cell over one batch and reduce the grid maximum
"""

from __future__ import annotations

import logging

import numpy as np
from numba import njit, prange

from ..inputs import TerrainGrid, WeatherSeries
from ..outputs import BatchOutput
from ..snowpack.constants import STATE_SIZE, TERRAIN_SIZE
from ..snowpack.run import _update_cell_numba
from ..snowpack.types import SimulationConstants
from .processes import redistribute_swe

logger = logging.getLogger(__name__)


@njit(cache=True)
def _finalize_cell_numba(
    terrain_row: np.ndarray,  # shape (7,)
    state_row: np.ndarray,  # shape (4,) - interpolated_swe written here
) -> float:
    """Redistribute a cell's SWE and return its normalized depth.

    Returns:
        Redistributed SWE divided by the horizontal cell area [l/m²].
    """
    we = redistribute_swe(state_row[0], terrain_row[1], terrain_row[6])
    state_row[1] = we
    return we / terrain_row[5]


@njit(cache=True, parallel=True)
def _run_batch_numba(
    terrain_arr: np.ndarray,  # shape (n_cells, 7)
    state_arr: np.ndarray,  # shape (n_cells, 4) - modified in place
    temp_arr: np.ndarray,  # shape (n_timesteps,)
    precip_arr: np.ndarray,  # shape (n_timesteps,)
    constants_arr: np.ndarray,  # shape (10,)
    out_depth: np.ndarray,  # shape (n_cells,) - output written here
) -> float:
    """Update all cells over a batch in parallel (Numba-optimized).

    Each cell reads only its own terrain and state rows and the shared weather
    and constants, and writes only its own state row and output slot. The grid
    maximum is a parallel max reduction, so its value does not depend on the
    order in which cells run.

    Returns:
        Maximum normalized depth over all cells.
    """
    n_cells = terrain_arr.shape[0]
    global_max = 0.0

    for cell in prange(n_cells):
        _update_cell_numba(terrain_arr[cell], state_arr[cell], temp_arr, precip_arr, constants_arr)
        depth = _finalize_cell_numba(terrain_arr[cell], state_arr[cell])
        out_depth[cell] = depth
        global_max = max(global_max, depth)

    return global_max


def run_batch(
    terrain: TerrainGrid | np.ndarray,
    state: np.ndarray,
    weather: WeatherSeries,
    constants: SimulationConstants,
) -> BatchOutput:
    """Advance every cell of the grid over one batch.

    The batch covers weather samples [constants.timestep_offset,
    constants.timestep_offset + constants.batch_length). Each cell's snow
    pack is updated hour by hour, then its SWE is redistributed by slope and
    curvature and normalized by the horizontal area.

    Args:
        terrain: Terrain grid, or a (n_cells, 7) terrain arena.
        state: Resident (n_cells, 4) float64 state arena, see initial_state().
            Updated in place.
        weather: Weather samples at the measurement altitude.
        constants: Batch configuration.

    Returns:
        BatchOutput with the per-cell depth field and the grid maximum.

    Raises:
        ValueError: If the constants are degenerate, the batch window lies
            outside the weather series, or the terrain and state shapes
            do not match.
    """
    constants.validate()

    if isinstance(terrain, TerrainGrid) and terrain.width != constants.width:
        msg = f"constants width {constants.width} does not match terrain width {terrain.width}"
        raise ValueError(msg)
    terrain_arr = np.ascontiguousarray(np.asarray(terrain), dtype=np.float64)
    if terrain_arr.ndim != 2 or terrain_arr.shape[1] != TERRAIN_SIZE:
        msg = f"terrain must have shape (n_cells, {TERRAIN_SIZE}), got {terrain_arr.shape}"
        raise ValueError(msg)

    n_cells = terrain_arr.shape[0]
    if state.shape != (n_cells, STATE_SIZE):
        msg = f"state must have shape ({n_cells}, {STATE_SIZE}), got {state.shape}"
        raise ValueError(msg)
    if state.dtype != np.float64 or not state.flags.c_contiguous:
        msg = "state must be a C-contiguous float64 array to be updated in place"
        raise ValueError(msg)
    if n_cells % constants.width != 0:
        msg = f"{n_cells} cells do not fill rows of width {constants.width}"
        raise ValueError(msg)

    temp_arr, precip_arr = weather.window(constants.timestep_offset, constants.batch_length)
    out_depth = np.zeros(n_cells, dtype=np.float64)

    logger.debug(
        "Dispatching batch: %d cells, %d timesteps from offset %d (day %d, hour %d)",
        n_cells,
        constants.batch_length,
        constants.timestep_offset,
        constants.day_of_year,
        constants.hour_of_day,
    )

    global_max = _run_batch_numba(terrain_arr, state, temp_arr, precip_arr, np.asarray(constants), out_depth)

    logger.debug("Batch at offset %d complete, global max depth %.4f", constants.timestep_offset, global_max)

    return BatchOutput(
        depth=out_depth,
        global_max=float(global_max),
        width=constants.width,
        timestep_offset=constants.timestep_offset,
    )
