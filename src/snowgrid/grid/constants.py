"""Terrain redistribution constants.

Fixed values for the slope and curvature correction applied to each cell
after its timestep loop.
"""

SLOPE_THRESHOLD_DEG: float = 15.0  # Slopes below this keep all their snow [°]
SLOPE_SCALE_DEG: float = 60.0  # Slope at which all snow slides off [°]
CURVATURE_GAIN: float = 50.0  # Accumulation gain per unit of curvature [-]
