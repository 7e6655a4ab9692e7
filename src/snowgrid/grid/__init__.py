"""Data-parallel snow update over a terrain grid."""

from .run import run_batch
from .simulation import Simulation

__all__ = [
    "Simulation",
    "run_batch",
]
