"""Grid batch outputs.

This module provides the result of one batch over the grid and the
fixed-point encoding consumers use to combine the grid-wide maximum with an
unsigned-integer atomic max.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

FIXED_POINT_SCALE: float = 1000.0  # Encoded units per unit of depth
_UINT32_MAX: int = 2**32 - 1


def encode_fixed_point(value: float | np.ndarray, scale: float = FIXED_POINT_SCALE) -> int | np.ndarray:
    """Encode non-negative depth values as unsigned 32-bit fixed point.

    The encoding is monotonic, so the maximum of encoded values equals the
    encoding of the maximum. Values are truncated and saturate at the uint32
    range.

    Args:
        value: Depth value or array of depth values.
        scale: Encoded units per unit of depth.

    Returns:
        Python int for scalar input, uint32 array otherwise.

    Raises:
        ValueError: If any value is NaN.
    """
    arr = np.asarray(value, dtype=np.float64)
    if np.any(np.isnan(arr)):
        msg = "cannot encode NaN as fixed point"
        raise ValueError(msg)
    encoded = np.clip(np.floor(arr * scale), 0, _UINT32_MAX).astype(np.uint32)
    if encoded.ndim == 0:
        return int(encoded)
    return encoded


def decode_fixed_point(encoded: int | np.ndarray, scale: float = FIXED_POINT_SCALE) -> float | np.ndarray:
    """Decode fixed-point values produced by encode_fixed_point()."""
    arr = np.asarray(encoded, dtype=np.float64) / scale
    if arr.ndim == 0:
        return float(arr)
    return arr


@dataclass(frozen=True)
class BatchOutput:
    """Result of one batch over the grid.

    Attributes:
        depth: Normalized snow depth per cell, redistributed SWE divided by
            the horizontal cell area [l/m²]. Row-major, shape (n_cells,).
        global_max: Maximum of depth over all cells.
        width: Grid width in cells.
        timestep_offset: Absolute index of the first timestep of the batch.
    """

    depth: np.ndarray
    global_max: float
    width: int
    timestep_offset: int = 0

    @property
    def height(self) -> int:
        """Number of grid rows."""
        return len(self.depth) // self.width

    @property
    def depth_grid(self) -> np.ndarray:
        """Depth reshaped to (height, width)."""
        return self.depth.reshape(self.height, self.width)

    @property
    def global_max_fixed(self) -> int:
        """Global maximum in the uint32 fixed-point encoding."""
        return encode_fixed_point(self.global_max)

    @property
    def normalized_depth(self) -> np.ndarray:
        """Depth divided by the global maximum, in [0, 1]."""
        if self.global_max <= 0.0:
            return np.zeros_like(self.depth)
        return self.depth / self.global_max

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to a DataFrame with one row per cell.

        Returns:
            DataFrame with columns row, col and depth, indexed by cell.
        """
        cells = np.arange(len(self.depth))
        return pd.DataFrame(
            {
                "row": cells // self.width,
                "col": cells % self.width,
                "depth": self.depth,
            },
            index=pd.Index(cells, name="cell"),
        )

    def __len__(self) -> int:
        """Return the number of cells."""
        return len(self.depth)
