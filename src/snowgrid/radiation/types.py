"""Radiation model result types."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RadiationIndex:
    """Potential radiation of a slope relative to flat ground.

    Attributes:
        index: Ratio of daily potential radiation on the slope to that on a
            horizontal surface at the same latitude [-]. Can exceed 1 on
            sun-facing slopes.
        t4: Sunrise on the slope as an offset from solar noon [hours].
        t5: Sunset on the slope as an offset from solar noon [hours].
    """

    index: float  # Radiation ratio [-]
    t4: float  # Slope sunrise [hours]
    t5: float  # Slope sunset [hours]

    @property
    def day_length(self) -> float:
        """Effective length of the slope's daylight window [hours]."""
        return abs(self.t4) + abs(self.t5)
