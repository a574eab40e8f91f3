import numpy as np

from pygfx import WorldObject

from ..utils import logger, as_array


def sample_surface(surface):
    """Extract vertex positions and (optional) normals from a surface.

    Parameters
    ----------
    surface : Geometry | WorldObject | object | None
        The surface to populate. A world object contributes its geometry.
        Any other object is expected to expose ``positions`` and optionally
        ``normals``, as arrays or buffers.

    Returns
    -------
    positions : ndarray
        The (N, 3) float32 vertex positions. Empty when the surface has
        no usable position data. Vertices with non-finite positions are
        skipped.
    normals : ndarray | None
        The (N, 3) float32 vertex normals, or None if not available.

    """
    empty = np.zeros((0, 3), np.float32)

    if isinstance(surface, WorldObject):
        surface = surface.geometry
    if surface is None:
        logger.warning("No surface given, grass will have no blades.")
        return empty, None

    positions = getattr(surface, "positions", None)
    normals = getattr(surface, "normals", None)

    if positions is None:
        logger.warning("Surface has no position data, grass will have no blades.")
        return empty, None

    try:
        positions = as_array(positions, 3)
    except ValueError as err:
        logger.warning(f"Surface positions are not usable: {err}")
        return empty, None
    try:
        normals = as_array(normals, 3)
    except ValueError as err:
        logger.warning(f"Surface normals are not usable, ignoring normals: {err}")
        normals = None

    if normals is not None and len(normals) != len(positions):
        logger.warning(
            f"Surface has {len(normals)} normals for {len(positions)} positions, ignoring normals."
        )
        normals = None

    finite = np.isfinite(positions).all(axis=-1)
    if not finite.all():
        logger.warning(
            f"Surface has {np.count_nonzero(~finite)} non-finite positions, skipping these vertices."
        )
        positions = positions[finite]
        if normals is not None:
            normals = normals[finite]
    if normals is not None and not np.isfinite(normals).all():
        logger.warning("Surface has non-finite normals, these blades will point up.")

    return positions, normals
