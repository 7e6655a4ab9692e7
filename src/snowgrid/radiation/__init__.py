"""Potential solar radiation on sloped terrain (Swift's algorithm)."""

from .run import radiation_index
from .types import RadiationIndex

__all__ = [
    "RadiationIndex",
    "radiation_index",
]
