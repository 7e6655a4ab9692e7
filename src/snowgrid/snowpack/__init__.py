"""Hourly snow accumulation, albedo and melt for a single grid cell."""

from .outputs import CellFluxes
from .run import run_cell, step, update_cell
from .types import CellState, CellTerrain, SimulationConstants, initial_state

__all__ = [
    "CellFluxes",
    "CellState",
    "CellTerrain",
    "SimulationConstants",
    "initial_state",
    "run_cell",
    "step",
    "update_cell",
]
