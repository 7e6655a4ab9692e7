"""Multi-batch simulation over a terrain grid.

The Simulation owns the resident state arena: it is created once, mutated
by every batch and never reallocated. Constants move forward by one batch
after each call to run().
"""

from __future__ import annotations

import logging

import numpy as np

from ..inputs import TerrainGrid, WeatherSeries
from ..outputs import BatchOutput
from ..snowpack.types import SimulationConstants, initial_state
from .run import run_batch

logger = logging.getLogger(__name__)


class Simulation:
    """Snow simulation over a terrain grid, advanced one batch at a time.

    Attributes:
        terrain: Static terrain attributes.
        constants: Constants of the next batch to run.
        state: Resident (n_cells, 4) state arena.
        history: Grid maximum depth of every completed batch.
    """

    def __init__(
        self,
        terrain: TerrainGrid,
        constants: SimulationConstants,
        state: np.ndarray | None = None,
    ) -> None:
        if constants.width != terrain.width:
            msg = f"constants width {constants.width} does not match terrain width {terrain.width}"
            raise ValueError(msg)
        self.terrain = terrain
        self.constants = constants
        self.state = initial_state(terrain.n_cells) if state is None else state
        self.history: list[float] = []
        self._terrain_arr = np.asarray(terrain)

    def run(self, weather: WeatherSeries) -> BatchOutput:
        """Run the next batch and advance the constants.

        Args:
            weather: Weather series covering the batch window.

        Returns:
            BatchOutput of the batch.
        """
        output = run_batch(self._terrain_arr, self.state, weather, self.constants)
        self.history.append(output.global_max)
        self.constants = self.constants.advance()
        return output

    def run_all(self, weather: WeatherSeries) -> list[BatchOutput]:
        """Run batches until the weather series cannot fill another one.

        Args:
            weather: Weather series, read from the current timestep offset.

        Returns:
            One BatchOutput per completed batch, in order.
        """
        outputs: list[BatchOutput] = []
        while self.constants.timestep_offset + self.constants.batch_length <= len(weather):
            outputs.append(self.run(weather))
        logger.info(
            "Ran %d batches, next timestep offset %d",
            len(outputs),
            self.constants.timestep_offset,
        )
        return outputs

    @property
    def swe(self) -> np.ndarray:
        """Current snow water equivalent per cell [l]."""
        return self.state[:, 0]

    @property
    def albedo(self) -> np.ndarray:
        """Current snow albedo per cell [-]."""
        return self.state[:, 2]
