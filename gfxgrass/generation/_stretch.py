import numpy as np

from ..utils import make_rng
from ._heights import normalize_heights


# The factor at the center of a reduction zone
MIN_TRAMPLE_FACTOR = 0.1

# Limit the size of the (blades x points) distance matrix
_MAX_PAIRS = 2**22


def _nearest_distances(positions, points):
    """Brute-force distance from each position to its nearest point."""
    result = np.empty((len(positions),), np.float64)
    chunk_size = max(1, _MAX_PAIRS // len(points))
    for i in range(0, len(positions), chunk_size):
        chunk = positions[i : i + chunk_size]
        distances = np.linalg.norm(chunk[:, None, :] - points[None, :, :], axis=-1)
        result[i : i + chunk_size] = distances.min(axis=1)
    return result


def trample_curve(t):
    """The reduction factor as a function of the normalized distance (0..1)."""
    t = np.asarray(t, dtype=np.float64)
    ease = 0.5 * (1.0 - np.cos(np.pi * t * 0.25))
    return MIN_TRAMPLE_FACTOR + (1.0 - MIN_TRAMPLE_FACTOR) * ease


def reduction_factors(positions, reduction_points, reduction_radius):
    """Get the reduction factor for each position.

    Positions closer than ``reduction_radius`` to their nearest reduction
    point get a factor that starts at 0.1 at the point and rises smoothly
    towards the edge of the zone. All other positions get zero.
    """
    positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    points = np.asarray(reduction_points, dtype=np.float64).reshape(-1, 3)
    factors = np.zeros((len(positions),), np.float64)
    if len(positions) == 0 or len(points) == 0 or reduction_radius <= 0:
        return factors

    distances = _nearest_distances(positions, points)
    inside = distances < reduction_radius
    factors[inside] = trample_curve(distances[inside] / reduction_radius)
    return factors


def apply_height_reduction(
    positions,
    reduction_points,
    reduction_radius,
    min_height,
    max_height,
    *,
    rng=None,
):
    """Compute the per-blade stretch from height and trample proximity.

    The stretch is a random amount, weighted by the reduction factor, and
    larger at lower heights. Blades outside all reduction zones get zero.

    Parameters
    ----------
    positions : ndarray
        The (N, 3) blade positions.
    reduction_points : ndarray
        The (P, 3) centers of the reduction zones. May be empty.
    reduction_radius : float
        The radius shared by all reduction zones.
    min_height : float
        The minimum height of the surface.
    max_height : float
        The maximum height of the surface.
    rng : numpy.random.Generator | None
        The source of randomness.

    Returns
    -------
    stretches : ndarray
        The (N,) stretch values, finite and non-negative.

    """
    rng = make_rng(rng)
    positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    n = len(positions)

    factors = reduction_factors(positions, reduction_points, reduction_radius)
    heights = normalize_heights(positions[:, 1], min_height, max_height)
    # Positions are expected on the surface, but do not go negative if not
    height_term = np.clip(1.2 - heights, 0.0, None)

    return rng.random(n) * height_term * factors + rng.random(n) * 0.3 * factors
