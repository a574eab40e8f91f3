import numpy as np

from ..utils import logger, make_rng
from ._heights import calculate_height_range
from ._sites import select_grass_vertices
from ._orientation import orientations_from_normals, random_orientations
from ._stretch import apply_height_reduction


class InstanceAttributes:
    """The per-blade attributes of a grass field, in columnar form.

    All five columns are index-aligned: entry ``i`` of each column belongs
    to blade ``i``. The arrays are float32 and read-only; a new set of
    attributes is created on each rebuild rather than updating one in place.

    Parameters
    ----------
    offsets : ndarray
        The (N, 3) positions of the blade roots.
    orientations : ndarray
        The (N, 4) unit quaternions (x, y, z, w) of the blades.
    stretches : ndarray
        The (N,) stretch factors.
    half_root_angle_sin : ndarray
        The (N,) sines of half the root angle.
    half_root_angle_cos : ndarray
        The (N,) cosines of half the root angle.

    """

    _columns = (
        ("offsets", 3),
        ("orientations", 4),
        ("stretches", None),
        ("half_root_angle_sin", None),
        ("half_root_angle_cos", None),
    )

    def __init__(
        self,
        offsets,
        orientations,
        stretches,
        half_root_angle_sin,
        half_root_angle_cos,
    ):
        given = dict(
            offsets=offsets,
            orientations=orientations,
            stretches=stretches,
            half_root_angle_sin=half_root_angle_sin,
            half_root_angle_cos=half_root_angle_cos,
        )
        count = None
        for name, ncols in self._columns:
            array = np.array(given[name], dtype=np.float32)
            shape = (-1,) if ncols is None else (-1, ncols)
            array = array.reshape(shape)
            if count is None:
                count = len(array)
            elif len(array) != count:
                raise ValueError(
                    f"InstanceAttributes.{name} has {len(array)} items, expected {count}."
                )
            array.flags.writeable = False
            setattr(self, "_" + name, array)
        self._count = count

    @classmethod
    def empty(cls):
        """Create an attribute set without any blades."""
        return cls(
            np.zeros((0, 3)), np.zeros((0, 4)), np.zeros(0), np.zeros(0), np.zeros(0)
        )

    def __repr__(self):
        return f"<gfxgrass.InstanceAttributes with {self._count} blades at {hex(id(self))}>"

    def __len__(self):
        return self._count

    @property
    def count(self):
        """The number of blades."""
        return self._count

    @property
    def offsets(self):
        """The (N, 3) positions of the blade roots."""
        return self._offsets

    @property
    def orientations(self):
        """The (N, 4) unit quaternions (x, y, z, w) of the blades."""
        return self._orientations

    @property
    def stretches(self):
        """The (N,) stretch factors, used to scale the blade length."""
        return self._stretches

    @property
    def half_root_angle_sin(self):
        """The (N,) sines of half the root angle."""
        return self._half_root_angle_sin

    @property
    def half_root_angle_cos(self):
        """The (N,) cosines of half the root angle."""
        return self._half_root_angle_cos


def build_instance_attributes(
    positions,
    normals=None,
    *,
    target_count,
    random_offset=0.02,
    reduction_points=(),
    reduction_radius=0.0,
    density=None,
    rng=None,
):
    """Generate the attributes of all blades for the given surface.

    This samples blade sites from the surface vertices, orients each blade
    along the surface normal (or randomly if there are no normals), computes
    the stretch field, and jitters the blade roots horizontally.

    Parameters
    ----------
    positions : ndarray
        The (N, 3) surface vertex positions.
    normals : ndarray | None
        The (N, 3) surface vertex normals, if available.
    target_count : int
        The number of blades to place.
    random_offset : float
        The magnitude of the horizontal jitter of the blade roots.
    reduction_points : ndarray
        The (P, 3) centers of the zones where the grass is trampled.
    reduction_radius : float
        The radius of the trample zones.
    density : callable | None
        The placement density, see ``select_grass_vertices()``.
    rng : numpy.random.Generator | None
        The source of randomness.

    Returns
    -------
    attributes : InstanceAttributes
        The generated attributes.

    """
    rng = make_rng(rng)
    positions = np.asarray(positions, dtype=np.float32).reshape(-1, 3)

    min_height, max_height = calculate_height_range(positions)
    sites = select_grass_vertices(
        positions, min_height, max_height, target_count, density=density, rng=rng
    )
    n = len(sites)
    if n == 0:
        return InstanceAttributes.empty()

    roots = positions[sites].astype(np.float64)

    offsets = roots.copy()
    offsets[:, 0] += (rng.random(n) - 0.5) * random_offset
    offsets[:, 2] += (rng.random(n) - 0.5) * random_offset

    if normals is not None:
        normals = np.asarray(normals).reshape(-1, 3)
        orientations, half_sin, half_cos = orientations_from_normals(
            normals[sites], rng=rng
        )
    else:
        orientations, half_sin, half_cos = random_orientations(n, rng=rng)

    # The stretch field is evaluated at the surface vertex, without jitter
    stretches = apply_height_reduction(
        roots, reduction_points, reduction_radius, min_height, max_height, rng=rng
    )

    logger.debug(f"Generated {n} grass blades from {len(positions)} vertices.")
    return InstanceAttributes(offsets, orientations, stretches, half_sin, half_cos)
