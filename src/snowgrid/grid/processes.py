"""Terrain redistribution process functions.

Numba-compiled functions converting a cell's snow pack into the redistributed
SWE and the normalized depth written to the output field.
"""

import math

from numba import njit

# Constants inlined for Numba compatibility (from .constants)
_SLOPE_THRESHOLD_DEG: float = 15.0
_SLOPE_SCALE_DEG: float = 60.0
_CURVATURE_GAIN: float = 50.0


@njit(cache=True)
def compute_slope_factor(inclination: float) -> float:
    """Fraction of snow that slides off a slope.

    Args:
        inclination: Slope angle from horizontal [rad].

    Returns:
        Slope factor [-]: 0 below 15°, slope/60° above.
    """
    slope = math.degrees(inclination)
    if slope < _SLOPE_THRESHOLD_DEG:
        return 0.0
    return slope / _SLOPE_SCALE_DEG


@njit(cache=True)
def redistribute_swe(swe: float, inclination: float, curvature: float) -> float:
    """Apply slope shedding and curvature trapping to a snow pack.

    Args:
        swe: Snow water equivalent [l].
        inclination: Slope angle from horizontal [rad].
        curvature: Terrain curvature [-], positive for concave terrain.

    Returns:
        Redistributed SWE [l], never negative.
    """
    f = compute_slope_factor(inclination)
    return max(0.0, swe * (1.0 - f) * (1.0 + _CURVATURE_GAIN * curvature))
