"""Snow pack numerical constants.

Fixed values for the hourly snow accumulation, albedo and melt model.
"""

HOUR_FRACTION: float = 1.0 / 24.0  # One timestep as a fraction of a day [day]
HOURS_PER_DAY: int = 24
DAYS_PER_YEAR: int = 365

# Altitude corrections
TEMP_LAPSE_FACTOR: float = 0.5  # Temperature decrease per lapse unit [°C]
TEMP_LAPSE_SCALE: float = 10000.0  # Altitude difference per lapse unit
PRECIP_LAPSE_FACTOR: float = 10.0 / 24.0  # Precipitation increase per lapse unit [l/m²]
PRECIP_LAPSE_SCALE: float = 100000.0  # Altitude difference per lapse unit

# Albedo
RAIN_ALBEDO: float = 0.4  # Albedo after a rain event [-]
FRESH_SNOW_ALBEDO: float = 0.8  # Albedo after a snowfall [-]
ALBEDO_FLOOR: float = 0.4  # Asymptotic albedo of old snow [-]

# Vegetation
VEGETATION_EXTINCTION: float = 4.0  # Canopy attenuation of radiation melt [-]

# Kernel array layouts
CONSTANTS_SIZE: int = 10
TERRAIN_SIZE: int = 7
STATE_SIZE: int = 4
FLUX_NAMES: tuple[str, ...] = (
    "air_temp",
    "precip",
    "snowfall",
    "melt",
    "radiation_index",
    "radiation_weight",
    "swe",
    "albedo",
    "days_since_snowfall",
)
FLUX_SIZE: int = len(FLUX_NAMES)
