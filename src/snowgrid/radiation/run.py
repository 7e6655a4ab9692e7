"""Swift's algorithm for potential solar radiation on sloped terrain.

This module provides the radiation entry points:
- _radiation_index_numba(): Numba kernel, callable from the snow pack kernels
- radiation_index(): Python wrapper returning a RadiationIndex
"""

from __future__ import annotations

import math

from numba import njit

from .processes import daylight_half_angle, integrate_radiation, solar_constant_term, solar_declination
from .types import RadiationIndex

# Constants inlined for Numba compatibility (from .constants)
_HOURS_PER_RADIAN: float = 12.0 / math.pi
_MIN_DENOMINATOR: float = 1e-10
_TWO_PI: float = 2.0 * math.pi


@njit(cache=True)
def _radiation_index_numba(
    inclination: float,
    aspect: float,
    latitude: float,
    day_of_year: float,
) -> tuple[float, float, float]:
    """Compute the radiation index and slope daylight bounds (Numba-optimized).

    Returns:
        Tuple of (index, t4, t5) where t4/t5 are the slope sunrise/sunset
        offsets from solar noon in hours.
    """
    sin_i = math.sin(inclination)
    cos_i = math.cos(inclination)
    sin_l0 = math.sin(latitude)
    cos_l0 = math.cos(latitude)
    cos_a = math.cos(aspect)

    # 1. Equivalent latitude and hour-angle offset of the slope
    sin_l1 = min(max(cos_i * sin_l0 + sin_i * cos_l0 * cos_a, -1.0), 1.0)
    l1 = math.asin(sin_l1)
    d1 = cos_i * cos_l0 - sin_i * sin_l0 * cos_a
    if d1 == 0.0:
        d1 = _MIN_DENOMINATOR
    l2 = math.atan(sin_i * math.sin(aspect) / d1)

    # 2. Solar geometry for the day
    declination = solar_declination(day_of_year)
    r1 = solar_constant_term(day_of_year)

    # 3. Daylight windows of the slope (shifted by l2) and of flat ground
    t = daylight_half_angle(l1, declination)
    slope_set = t - l2
    slope_rise = -t - l2

    t = daylight_half_angle(latitude, declination)
    t1 = t
    t0 = -t

    t3 = min(slope_set, t1)
    t2 = max(slope_rise, t0)
    t4 = t2 * _HOURS_PER_RADIAN
    t5 = t3 * _HOURS_PER_RADIAN

    # Wrapped bounds open a second window when the slope sees the sun
    # outside the nominal flat-ground window
    two_windows = False
    t8 = 0.0
    t9 = 0.0
    wrapped_rise = slope_rise + _TWO_PI
    if wrapped_rise < t1:
        t8 = wrapped_rise
        t9 = t1
        two_windows = True
    wrapped_set = slope_set - _TWO_PI
    if wrapped_set > t0:
        t8 = t0
        t9 = wrapped_set
        two_windows = True

    # 4. Self-shadowed slope: no radiation, bounds are still reported
    if t3 < t2:
        t2 = 0.0
        t3 = 0.0

    # 5. Radiation on the slope
    r4 = integrate_radiation(l2, l1, t3, t2, r1, declination)
    if two_windows:
        r4 += integrate_radiation(l2, l1, t9, t8, r1, declination)

    # 6. Normalize by flat ground
    r3 = integrate_radiation(0.0, latitude, t1, t0, r1, declination)

    if r3 <= 0.0:
        return 0.0, t4, t5
    return max(r4 / r3, 0.0), t4, t5


def radiation_index(
    inclination: float,
    aspect: float,
    latitude: float,
    day_of_year: float,
) -> RadiationIndex:
    """Compute the potential radiation index of a slope for one day.

    Implements Swift's algorithm: the slope is replaced by an equivalent
    horizontal surface at latitude L1 whose hour angles are shifted by L2, its
    daily radiation is integrated over the portion of the day when the sun is
    above both the horizon and the slope, and the result is divided by the
    radiation received by flat ground at the true latitude.

    Degenerate geometry never raises: polar day and night are handled by
    clamping, and a day without flat-ground radiation yields an index of 0.

    Args:
        inclination: Slope angle from horizontal [rad].
        aspect: Slope azimuth [rad], 0 facing the pole.
        latitude: Latitude [rad].
        day_of_year: Julian day [1-365].

    Returns:
        RadiationIndex with the radiation ratio and the slope sunrise/sunset
        offsets in hours.
    """
    index, t4, t5 = _radiation_index_numba(
        float(inclination),
        float(aspect),
        float(latitude),
        float(day_of_year),
    )
    return RadiationIndex(index=float(index), t4=float(t4), t5=float(t5))
