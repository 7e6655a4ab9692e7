"""snowgrid: hourly snow water equivalent over terrain grids.

Snow accumulation and melt driven by altitude-corrected temperature and
precipitation, Swift's potential radiation index for sloped terrain and a
snow albedo decay model, run in parallel over every cell of a grid.
"""

from .grid import Simulation, run_batch
from .inputs import TerrainGrid, WeatherSeries
from .outputs import BatchOutput, decode_fixed_point, encode_fixed_point
from .radiation import RadiationIndex, radiation_index
from .snowpack import CellFluxes, CellState, CellTerrain, SimulationConstants, initial_state, run_cell, step, update_cell

__all__ = [
    "BatchOutput",
    "CellFluxes",
    "CellState",
    "CellTerrain",
    "RadiationIndex",
    "Simulation",
    "SimulationConstants",
    "TerrainGrid",
    "WeatherSeries",
    "decode_fixed_point",
    "encode_fixed_point",
    "initial_state",
    "radiation_index",
    "run_batch",
    "run_cell",
    "step",
    "update_cell",
]
