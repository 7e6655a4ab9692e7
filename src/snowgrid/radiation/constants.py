"""Solar radiation numerical constants.

Fixed values for Swift's potential radiation algorithm on sloped terrain.
Values follow Swift (1976), "Algorithm for solar radiation on mountain slopes".
"""

import math

SOLAR_CONSTANT: float = 1.95  # R0, solar constant [cal/cm²/min]
MINUTES_PER_HOUR: float = 60.0  # Scaling of R0 to hourly totals

# Declination and eccentricity approximations (day angle in radians per day)
DAY_ANGLE: float = 0.0172  # ~2π/365 [rad/day]
DECLINATION_OFFSET: float = 0.007  # [rad]
DECLINATION_AMPLITUDE: float = 0.4067  # [rad]
DECLINATION_DAY_SHIFT: float = 10.0  # Days from winter solstice to Jan 1
ECCENTRICITY_AMPLITUDE: float = 0.0167  # [-]
PERIHELION_DAY: float = 3.0  # Day of year of perihelion

HOURS_PER_RADIAN: float = 12.0 / math.pi  # Hour-angle to hours conversion
MIN_DENOMINATOR: float = 1e-10  # Replaces a zero denominator in the slope offset
