import numpy as np

from ..utils import make_rng
from ._heights import normalize_heights


def uniform_density(normalized_heights):
    """The baseline placement density: every draw is accepted.

    A density function receives an array of normalized heights (0..1) and
    returns the probability of placing a blade at each of them. Replace
    this to e.g. thin out the grass at higher elevations.
    """
    return np.ones_like(normalized_heights)


def select_grass_vertices(
    positions, min_height, max_height, target_count, *, density=None, rng=None
):
    """Select surface vertices to place blades at.

    Vertex indices are drawn uniformly at random and accepted with the
    probability given by ``density`` at the vertex' normalized height.
    Selection stops when ``target_count`` sites are accepted, or when as
    many draws have been made as there are vertices. The latter bounds the
    work even when the density is zero everywhere.

    Parameters
    ----------
    positions : ndarray
        The (N, 3) surface vertex positions.
    min_height : float
        The minimum height of the surface, see ``calculate_height_range()``.
    max_height : float
        The maximum height of the surface.
    target_count : int
        The number of sites to select.
    density : callable | None
        The placement density. Default ``uniform_density``.
    rng : numpy.random.Generator | None
        The source of randomness.

    Returns
    -------
    indices : ndarray
        The selected vertex indices (int64). The same vertex may be
        selected more than once. The length is at most
        ``min(target_count, N)``.

    """
    target_count = int(target_count)
    if target_count < 0:
        raise ValueError(f"target_count must be >= 0, not {target_count}")
    density = density or uniform_density
    rng = make_rng(rng)

    positions = np.asarray(positions)
    total_vertices = len(positions)
    max_attempts = total_vertices
    heights = positions[:, 1] if total_vertices else np.zeros((0,), np.float32)

    chunks = []
    n_accepted = 0
    n_attempts = 0
    batch_size = max(1024, 2 * target_count)

    while n_accepted < target_count and n_attempts < max_attempts:
        n = min(batch_size, max_attempts - n_attempts)
        candidates = rng.integers(0, total_vertices, size=n)
        normalized = normalize_heights(heights[candidates], min_height, max_height)
        probabilities = np.broadcast_to(density(normalized), (n,))
        accepted = candidates[rng.random(n) < probabilities]
        # Draws after the one that completes the target are not made
        accepted = accepted[: target_count - n_accepted]
        chunks.append(accepted)
        n_accepted += len(accepted)
        n_attempts += n

    if not chunks:
        return np.zeros((0,), np.int64)
    return np.concatenate(chunks).astype(np.int64, copy=False)
