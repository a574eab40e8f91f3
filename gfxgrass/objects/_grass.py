import numpy as np
import pylinalg as la

from pygfx import WorldObject, Buffer

from ..utils import logger, make_rng, as_integer
from ..generation import sample_surface, build_instance_attributes, InstanceAttributes
from ..geometries import blade_geometry
from ..materials import GrassMaterial


class Grass(WorldObject):
    """A field of grass blades growing on a surface.

    All blades share one template geometry (see ``blade_geometry()``), and
    are placed, oriented and stretched by per-instance attributes that are
    generated from the surface's vertices. The ``GrassMaterial`` animates
    the blades in the wind.

    Changing any of the options below (or the surface) marks the object
    as dirty. A dirty object regenerates its template geometry and all
    instance attributes on the next call to ``rebuild()``, which the
    renderer does automatically right before the object is drawn. A
    rebuild always replaces the full set of blades.

    Parameters
    ----------
    surface : Geometry | WorldObject | None
        The surface to grow the grass on. Its positions are used as
        candidate blade sites, its normals (if present) to orient the blades.
        The positions are interpreted in the local space of the grass, so
        it's easiest to make the grass a child of the surface mesh.
    material : GrassMaterial
        The material to render the grass with. Default a new ``GrassMaterial``.
    blade_width : float
        The width of a blade. Default 0.01.
    blade_height : float
        The length of a blade. Default 0.025.
    blade_joints : int
        The number of segments along the length of a blade. Default 3.
    target_count : int
        The number of blades to place. The actual count is at most the
        number of vertices in the surface. Default 25000.
    random_offset : float
        The magnitude of the random horizontal displacement of the blades.
        Default 0.02.
    reduction_points : ndarray
        The (P, 3) centers of zones where the grass is trampled.
    reduction_radius : float
        The radius of the trample zones. Default 0.
    density : callable | None
        The placement density as a function of normalized height. See
        ``select_grass_vertices()``.
    seed : int | None
        The seed for the random generator. Ignored if ``rng`` is given.
    rng : numpy.random.Generator | None
        The source of randomness for the generation.
    kwargs : Any
        Additional kwargs are passed to the :class:`base class <pygfx.WorldObject>`.

    """

    uniform_type = dict(
        WorldObject.uniform_type,
        blade_height="f4",
    )

    def __init__(
        self,
        surface=None,
        material=None,
        *,
        blade_width=0.01,
        blade_height=0.025,
        blade_joints=3,
        target_count=25000,
        random_offset=0.02,
        reduction_points=(),
        reduction_radius=0.0,
        density=None,
        seed=None,
        rng=None,
        **kwargs,
    ):
        if material is None:
            material = GrassMaterial()
        super().__init__(None, material, **kwargs)

        self._dirty = True
        self._rng = make_rng(rng, seed)
        self._instance_attributes = InstanceAttributes.empty()
        self._set_instance_buffers(self._instance_attributes)

        self.surface = surface
        self.blade_width = blade_width
        self.blade_height = blade_height
        self.blade_joints = blade_joints
        self.target_count = target_count
        self.random_offset = random_offset
        self.reduction_points = reduction_points
        self.reduction_radius = reduction_radius
        self.density = density

    def _update_object(self):
        # Called by the renderer right before drawing
        if self._dirty:
            self.rebuild()
        super()._update_object()

    # %% The state machine

    @property
    def dirty(self):
        """Whether the options changed since the last ``rebuild()``."""
        return self._dirty

    def _mark_dirty(self):
        self._dirty = True

    def rebuild(self, force=False):
        """Regenerate the blade geometry and all blade instances.

        Does nothing if the object is not dirty, unless ``force`` is set,
        in which case new random blades are generated. All buffers are
        replaced at once; nothing is updated in place.
        """
        if not (self._dirty or force):
            return

        positions, normals = sample_surface(self._surface)
        geometry = blade_geometry(self._blade_width, self._blade_height, self._blade_joints)
        attributes = build_instance_attributes(
            positions,
            normals,
            target_count=self._target_count,
            random_offset=self._random_offset,
            reduction_points=self._reduction_points,
            reduction_radius=self._reduction_radius,
            density=self._density,
            rng=self._rng,
        )

        # Swap the new state in
        self._instance_attributes = attributes
        self.geometry = geometry
        self._set_instance_buffers(attributes)
        self.uniform_buffer.data["blade_height"] = self._blade_height
        self.uniform_buffer.update_full()
        self._dirty = False

        logger.debug(f"Rebuilt grass with {attributes.count} blades.")

    def _set_instance_buffers(self, attributes):
        n = attributes.count
        offsets = attributes.offsets
        orientations = attributes.orientations
        stretches = attributes.stretches
        half_angles = np.column_stack(
            [attributes.half_root_angle_sin, attributes.half_root_angle_cos]
        )
        if n == 0:
            # A buffer cannot be empty, so use one dummy item that's never drawn
            offsets = np.zeros((1, 3), np.float32)
            orientations = np.array([[0, 0, 0, 1]], np.float32)
            stretches = np.zeros((1,), np.float32)
            half_angles = np.array([[0, 1]], np.float32)
        self._store.offset_buffer = Buffer(np.array(offsets, np.float32))
        self._store.orientation_buffer = Buffer(np.array(orientations, np.float32))
        self._store.stretch_buffer = Buffer(np.array(stretches, np.float32))
        self._store.half_angle_buffer = Buffer(np.array(half_angles, np.float32))
        self._store.instance_count = n

    # %% The generated state

    @property
    def instance_attributes(self):
        """The attributes of the blades, as generated by the last rebuild."""
        return self._instance_attributes

    @property
    def instance_count(self):
        """The number of blades that are drawn."""
        return self._store.instance_count

    @property
    def offset_buffer(self):
        """The buffer with the (N, 3) blade offsets."""
        return self._store.offset_buffer

    @property
    def orientation_buffer(self):
        """The buffer with the (N, 4) blade orientations."""
        return self._store.orientation_buffer

    @property
    def stretch_buffer(self):
        """The buffer with the (N,) blade stretches."""
        return self._store.stretch_buffer

    @property
    def half_angle_buffer(self):
        """The buffer with the (N, 2) sine and cosine of half the root angle."""
        return self._store.half_angle_buffer

    def get_bounding_box(self):
        """Axis-aligned bounding box, spanning all blades and the children."""
        aabbs = []
        attributes = self._instance_attributes
        if attributes.count > 0:
            # Blades can bend in any direction, from their root
            reach = self._blade_height * (1.0 + float(attributes.stretches.max()))
            offsets = attributes.offsets.astype(np.float64)
            aabbs.append(
                np.stack([offsets.min(axis=0) - reach, offsets.max(axis=0) + reach])
            )
        for child in self.children:
            aabb = child.get_bounding_box()
            if aabb is not None:
                aabbs.append(la.aabb_transform(aabb, child.local.matrix))
        if not aabbs:
            return None
        aabbs = np.stack(aabbs)
        return np.stack([aabbs[:, 0].min(axis=0), aabbs[:, 1].max(axis=0)])

    # %% The options

    @property
    def surface(self):
        """The surface that the grass grows on."""
        return self._surface

    @surface.setter
    def surface(self, surface):
        self._surface = surface
        self._mark_dirty()

    @property
    def blade_width(self):
        """The width of a blade."""
        return self._blade_width

    @blade_width.setter
    def blade_width(self, value):
        value = float(value)
        if not (np.isfinite(value) and value > 0):
            raise ValueError(
                f"Grass.blade_width must be a finite number larger than zero, not {value}"
            )
        self._blade_width = value
        self._mark_dirty()

    @property
    def blade_height(self):
        """The length of a blade, before it is stretched."""
        return self._blade_height

    @blade_height.setter
    def blade_height(self, value):
        value = float(value)
        if not (np.isfinite(value) and value > 0):
            raise ValueError(
                f"Grass.blade_height must be a finite number larger than zero, not {value}"
            )
        self._blade_height = value
        self._mark_dirty()

    @property
    def blade_joints(self):
        """The number of segments along the length of a blade."""
        return self._blade_joints

    @blade_joints.setter
    def blade_joints(self, value):
        value = as_integer(value, "Grass.blade_joints")
        if value < 1:
            raise ValueError(f"Grass.blade_joints must be at least 1, not {value}")
        self._blade_joints = value
        self._mark_dirty()

    @property
    def target_count(self):
        """The number of blades to place."""
        return self._target_count

    @target_count.setter
    def target_count(self, value):
        value = as_integer(value, "Grass.target_count")
        if value < 0:
            raise ValueError(f"Grass.target_count must be >= 0, not {value}")
        self._target_count = value
        self._mark_dirty()

    @property
    def random_offset(self):
        """The magnitude of the random horizontal displacement of the blades."""
        return self._random_offset

    @random_offset.setter
    def random_offset(self, value):
        value = float(value)
        if not np.isfinite(value):
            raise ValueError(f"Grass.random_offset must be finite, not {value}")
        self._random_offset = value
        self._mark_dirty()

    @property
    def reduction_points(self):
        """The (P, 3) centers of the zones where the grass is trampled."""
        return self._reduction_points

    @reduction_points.setter
    def reduction_points(self, points):
        points = np.array(points if points is not None else (), dtype=np.float64)
        if points.size == 0:
            points = np.zeros((0, 3), np.float64)
        elif points.ndim == 1 and points.shape[0] == 3:
            points = points.reshape(1, 3)
        if points.ndim != 2 or points.shape[1] != 3:
            raise ValueError(
                f"Grass.reduction_points must be an (N, 3) array, not shape {points.shape}"
            )
        if not np.isfinite(points).all():
            raise ValueError("Grass.reduction_points must be finite")
        points.flags.writeable = False
        self._reduction_points = points
        self._mark_dirty()

    @property
    def reduction_radius(self):
        """The radius of the zones around the reduction points."""
        return self._reduction_radius

    @reduction_radius.setter
    def reduction_radius(self, value):
        value = float(value)
        if not value >= 0 or not np.isfinite(value):
            raise ValueError(f"Grass.reduction_radius must be >= 0, not {value}")
        self._reduction_radius = value
        self._mark_dirty()

    @property
    def density(self):
        """The placement density function, or None for uniform placement."""
        return self._density

    @density.setter
    def density(self, density):
        if density is not None and not callable(density):
            raise TypeError("Grass.density must be a callable or None")
        self._density = density
        self._mark_dirty()
