"""Solar geometry process functions.

Numba-compiled building blocks for Swift's radiation algorithm: solar
declination, the earth-sun distance correction, the daylight half-angle and
the closed-form integral of extraterrestrial radiation over an hour-angle window.
"""

import math

from numba import njit

# Constants inlined for Numba compatibility (from .constants)
_SOLAR_CONSTANT: float = 1.95
_MINUTES_PER_HOUR: float = 60.0
_DAY_ANGLE: float = 0.0172
_DECLINATION_OFFSET: float = 0.007
_DECLINATION_AMPLITUDE: float = 0.4067
_DECLINATION_DAY_SHIFT: float = 10.0
_ECCENTRICITY_AMPLITUDE: float = 0.0167
_PERIHELION_DAY: float = 3.0
_HOURS_PER_RADIAN: float = 12.0 / math.pi


@njit(cache=True)
def solar_declination(day_of_year: float) -> float:
    """Compute the solar declination for a day of the year.

    Args:
        day_of_year: Julian day [1-365].

    Returns:
        Solar declination [rad].
    """
    return _DECLINATION_OFFSET - _DECLINATION_AMPLITUDE * math.cos((day_of_year + _DECLINATION_DAY_SHIFT) * _DAY_ANGLE)


@njit(cache=True)
def solar_constant_term(day_of_year: float) -> float:
    """Compute the solar constant corrected for earth-sun distance.

    Args:
        day_of_year: Julian day [1-365].

    Returns:
        Hourly extraterrestrial radiation scale R1 [cal/cm²/hour].
    """
    eccentricity = 1.0 - _ECCENTRICITY_AMPLITUDE * math.cos((day_of_year - _PERIHELION_DAY) * _DAY_ANGLE)
    return _MINUTES_PER_HOUR * _SOLAR_CONSTANT / (eccentricity * eccentricity)


@njit(cache=True)
def daylight_half_angle(latitude: float, declination: float) -> float:
    """Compute the sunset hour angle for a (possibly equivalent) latitude.

    The cosine argument is clamped to [-1, 1] so that polar day returns π
    (sun never sets) and polar night returns 0 (sun never rises).

    Args:
        latitude: Latitude [rad].
        declination: Solar declination [rad].

    Returns:
        Half day length as an hour angle [rad], in [0, π].
    """
    x = -math.tan(latitude) * math.tan(declination)
    if x < -1.0:
        x = -1.0
    elif x > 1.0:
        x = 1.0
    return math.acos(x)


@njit(cache=True)
def integrate_radiation(
    offset: float,
    latitude: float,
    hour_angle_end: float,
    hour_angle_start: float,
    r1: float,
    declination: float,
) -> float:
    """Integrate extraterrestrial radiation between two hour angles.

    Closed form of the instantaneous radiation integrated over
    [hour_angle_start, hour_angle_end], on a surface parallel to the horizon at
    ``latitude`` whose hour angles are shifted by ``offset``.

    Args:
        offset: Hour-angle offset of the equivalent surface [rad].
        latitude: Equivalent latitude [rad].
        hour_angle_end: Upper integration bound [rad].
        hour_angle_start: Lower integration bound [rad].
        r1: Distance-corrected solar constant [cal/cm²/hour].
        declination: Solar declination [rad].

    Returns:
        Daily radiation over the window [cal/cm²].
    """
    return r1 * (
        math.sin(declination) * math.sin(latitude) * (hour_angle_end - hour_angle_start) * _HOURS_PER_RADIAN
        + math.cos(declination)
        * math.cos(latitude)
        * (math.sin(hour_angle_end + offset) - math.sin(hour_angle_start + offset))
        * _HOURS_PER_RADIAN
    )
