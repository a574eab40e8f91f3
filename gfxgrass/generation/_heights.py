import numpy as np


def calculate_height_range(positions):
    """Get the range of the vertical (y) component of the given positions.

    Returns ``(min_height, max_height)``. For empty input this is
    ``(inf, -inf)``, so callers must not assume ``max_height > min_height``.
    """
    positions = np.asarray(positions)
    if positions.size == 0:
        return float("inf"), float("-inf")
    heights = positions[:, 1]
    return float(heights.min()), float(heights.max())


def normalize_heights(heights, min_height, max_height):
    """Map heights to 0..1 relative to the given range.

    A degenerate range (``max_height <= min_height``) uses a denominator
    of one, so the result is always finite.
    """
    heights = np.asarray(heights, dtype=np.float64)
    span = max_height - min_height
    if not np.isfinite(span) or span <= 0:
        span = 1.0
    if not np.isfinite(min_height):
        min_height = 0.0
    return (heights - min_height) / span
