"""Snow pack process functions.

Numba-compiled functions implementing the altitude corrections, precipitation
partitioning, albedo ageing and the radiation-temperature melt model.
"""

import math

from numba import njit

# Constants inlined for Numba compatibility (from .constants)
_TEMP_LAPSE_FACTOR: float = 0.5
_TEMP_LAPSE_SCALE: float = 10000.0
_PRECIP_LAPSE_FACTOR: float = 10.0 / 24.0
_PRECIP_LAPSE_SCALE: float = 100000.0
_ALBEDO_FLOOR: float = 0.4
_VEGETATION_EXTINCTION: float = 4.0
_HOUR_FRACTION: float = 1.0 / 24.0
_HOURS_PER_DAY: int = 24
_DAYS_PER_YEAR: int = 365


@njit(cache=True)
def lapse_temperature(temp: float, altitude: float, reference_altitude: float) -> float:
    """Extrapolate air temperature from the measurement altitude to a cell.

    Args:
        temp: Air temperature at the measurement altitude [°C].
        altitude: Cell altitude.
        reference_altitude: Measurement altitude.

    Returns:
        Air temperature at the cell [°C].
    """
    return temp - _TEMP_LAPSE_FACTOR * (altitude - reference_altitude) / _TEMP_LAPSE_SCALE


@njit(cache=True)
def lapse_precipitation(precip: float, altitude: float, reference_altitude: float) -> float:
    """Extrapolate precipitation from the measurement altitude to a cell.

    Floored at zero so that cells far below the station never receive
    negative precipitation.

    Args:
        precip: Precipitation at the measurement altitude [l/m²].
        altitude: Cell altitude.
        reference_altitude: Measurement altitude.

    Returns:
        Precipitation at the cell [l/m²].
    """
    return max(0.0, precip + _PRECIP_LAPSE_FACTOR * (altitude - reference_altitude) / _PRECIP_LAPSE_SCALE)


@njit(cache=True)
def compute_snow_fraction(air_temp: float, t_snow_a: float, t_snow_b: float) -> float:
    """Fraction of precipitation falling as snow.

    Linear ramp from 1 at t_snow_a to 0 at t_snow_b.

    Args:
        air_temp: Air temperature at the cell [°C].
        t_snow_a: All-snow temperature threshold [°C].
        t_snow_b: All-rain temperature threshold [°C].

    Returns:
        Snow fraction [-], in [0, 1].
    """
    fraction = 1.0 - (air_temp - t_snow_a) / (t_snow_b - t_snow_a)
    return min(max(fraction, 0.0), 1.0)


@njit(cache=True)
def compute_albedo(days_since_snowfall: float, k_e: float) -> float:
    """Snow albedo decaying from fresh snow toward the old-snow floor.

    Args:
        days_since_snowfall: Time since the last precipitation event [day].
        k_e: Albedo decay coefficient [1/day].

    Returns:
        Snow albedo [-], 0.8 for fresh snow tending to 0.4.
    """
    return _ALBEDO_FLOOR * (1.0 + math.exp(-k_e * days_since_snowfall))


@njit(cache=True)
def compute_radiation_weight(index: float, t4: float, t5: float, hour_of_day: float) -> float:
    """Diurnal weighting of the daily radiation index for one hour.

    Args:
        index: Daily radiation index of the slope [-].
        t4: Slope sunrise offset [hours].
        t5: Slope sunset offset [hours].
        hour_of_day: Hour of the timestep [0-23].

    Returns:
        Radiation weight [-], 0 outside the daylight window or when the slope
        receives no direct sun.
    """
    day_length = abs(t4) + abs(t5)
    if day_length <= 0.0:
        return 0.0
    weight = (math.pi * index / 2.0) * math.sin(math.pi * hour_of_day / day_length - abs(t4) / math.pi)
    return max(0.0, weight)


@njit(cache=True)
def compute_vegetation_factor(vegetation_density: float) -> float:
    """Attenuation of radiation melt by the canopy [-]."""
    return math.exp(-_VEGETATION_EXTINCTION * vegetation_density)


@njit(cache=True)
def compute_melt_coefficient(
    k_m: float,
    k_v: float,
    radiation_weight: float,
    albedo: float,
    area: float,
) -> float:
    """Melt per unit of temperature factor over one hour.

    Args:
        k_m: Melt rate coefficient.
        k_v: Vegetation factor [-].
        radiation_weight: Diurnal radiation weight [-].
        albedo: Snow albedo [-].
        area: Cell surface area [m²].

    Returns:
        Melt coefficient [l/°C].
    """
    return k_m * k_v * radiation_weight * (1.0 - albedo) * _HOUR_FRACTION * area


@njit(cache=True)
def compute_melt_factor(air_temp: float, t_melt_a: float, t_melt_b: float) -> float:
    """Temperature melt factor.

    Quadratic between t_melt_a and t_melt_b, linear above t_melt_b.

    Args:
        air_temp: Air temperature at the cell [°C].
        t_melt_a: Melt onset temperature [°C].
        t_melt_b: Temperature where melt becomes linear [°C].

    Returns:
        Melt factor [°C].
    """
    excess = air_temp - t_melt_a
    if air_temp < t_melt_b:
        return excess * excess / (t_melt_b - t_melt_a)
    return excess


@njit(cache=True)
def timestep_clock(hour_of_day: float, day_of_year: float, timestep: int) -> tuple[float, float]:
    """Hour of day and day of year of a timestep within a batch.

    Args:
        hour_of_day: Hour of the first timestep of the batch [0-23].
        day_of_year: Day of year of the first timestep [1-365].
        timestep: Index of the timestep within the batch.

    Returns:
        Tuple of (hour, day) for the timestep, day wrapped into [1, 365].
    """
    elapsed = int(hour_of_day) + timestep
    hour = float(elapsed % _HOURS_PER_DAY)
    day = (int(day_of_year) - 1 + elapsed // _HOURS_PER_DAY) % _DAYS_PER_YEAR + 1
    return hour, float(day)
