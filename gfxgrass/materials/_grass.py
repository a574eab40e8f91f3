import numpy as np

from pygfx import Material, Texture, TextureMap, Color


def _as_texture_map(name, map):
    if map is None or isinstance(map, TextureMap):
        return map
    elif isinstance(map, Texture):
        return TextureMap(map, wrap="clamp")
    raise TypeError(
        f"GrassMaterial.{name} must be a Texture or TextureMap, not {map.__class__.__name__}"
    )


class GrassMaterial(Material):
    """The material for animated grass blades.

    The blades are colored by a diffuse texture (or a uniform color), cut
    out by an alpha texture, darkened towards the root, and lit with a
    simple ambient plus directional term. Both sides of a blade are visible.
    The wind animation is driven by ``time``.

    Parameters
    ----------
    map : Texture | TextureMap
        The diffuse color texture of a blade. Optional.
    alpha_map : Texture | TextureMap
        The texture whose red channel is the cutout mask of a blade. Optional.
    color : Color
        The color of the blades, used when no ``map`` is set.
    root_color : Color
        The color that the blades fade into at their root.
    alpha_cutoff : float
        Fragments with a mask value below this are discarded. Default 0.15.
    ambient : float
        The strength of the ambient light term. Default 0.6.
    diffuse : float
        The strength of the directional light term. Default 0.5.
    light_direction : tuple
        The direction (in world space) in which the light travels.
    wind_strength : float
        The half angle (in radians) of the largest wind bend. Default 0.15.
    wind_frequency : float
        The spatial frequency of the wind pattern. Default 1/50.
    kwargs : Any
        Additional kwargs will be passed to the :class:`material base class
        <pygfx.Material>`.

    """

    uniform_type = dict(
        Material.uniform_type,
        color="4xf4",
        root_color="4xf4",
        light_direction="4xf4",
        time="f4",
        alpha_cutoff="f4",
        ambient="f4",
        diffuse="f4",
        wind_strength="f4",
        wind_frequency="f4",
    )

    def __init__(
        self,
        map=None,
        alpha_map=None,
        *,
        color="#4c9a2a",
        root_color="#001a00",
        alpha_cutoff=0.15,
        ambient=0.6,
        diffuse=0.5,
        light_direction=(-1, -1, -1),
        wind_strength=0.15,
        wind_frequency=1 / 50,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.map = map
        self.alpha_map = alpha_map
        self.color = color
        self.root_color = root_color
        self.alpha_cutoff = alpha_cutoff
        self.ambient = ambient
        self.diffuse = diffuse
        self.light_direction = light_direction
        self.wind_strength = wind_strength
        self.wind_frequency = wind_frequency
        self.time = 0

    @property
    def map(self):
        """The diffuse color texture of a blade. Sampled with the blade's texcoords."""
        return self._store.map

    @map.setter
    def map(self, map):
        self._store.map = _as_texture_map("map", map)

    @property
    def alpha_map(self):
        """The cutout mask of a blade. Its first channel is compared to ``alpha_cutoff``."""
        return self._store.alpha_map

    @alpha_map.setter
    def alpha_map(self, map):
        self._store.alpha_map = _as_texture_map("alpha_map", map)

    @property
    def color(self):
        """The uniform color of the blades. Ignored if a ``map`` is set."""
        return Color(self.uniform_buffer.data["color"])

    @color.setter
    def color(self, color):
        self.uniform_buffer.data["color"] = Color(color)
        self.uniform_buffer.update_full()

    @property
    def root_color(self):
        """The color that the blades fade into towards their root."""
        return Color(self.uniform_buffer.data["root_color"])

    @root_color.setter
    def root_color(self, color):
        self.uniform_buffer.data["root_color"] = Color(color)
        self.uniform_buffer.update_full()

    @property
    def alpha_cutoff(self):
        """Fragments with an alpha mask value below this value are discarded."""
        return float(self.uniform_buffer.data["alpha_cutoff"])

    @alpha_cutoff.setter
    def alpha_cutoff(self, value):
        value = float(value)
        if not 0 <= value <= 1:
            raise ValueError(f"GrassMaterial.alpha_cutoff must be in 0..1, not {value}")
        self.uniform_buffer.data["alpha_cutoff"] = value
        self.uniform_buffer.update_full()

    @property
    def ambient(self):
        """The strength of the ambient light term."""
        return float(self.uniform_buffer.data["ambient"])

    @ambient.setter
    def ambient(self, value):
        value = float(value)
        if value < 0:
            raise ValueError(f"GrassMaterial.ambient must be >= 0, not {value}")
        self.uniform_buffer.data["ambient"] = value
        self.uniform_buffer.update_full()

    @property
    def diffuse(self):
        """The strength of the directional light term."""
        return float(self.uniform_buffer.data["diffuse"])

    @diffuse.setter
    def diffuse(self, value):
        value = float(value)
        if value < 0:
            raise ValueError(f"GrassMaterial.diffuse must be >= 0, not {value}")
        self.uniform_buffer.data["diffuse"] = value
        self.uniform_buffer.update_full()

    @property
    def light_direction(self):
        """The (normalized) direction in which the light travels, in world space."""
        return tuple(float(v) for v in self.uniform_buffer.data["light_direction"][:3])

    @light_direction.setter
    def light_direction(self, value):
        value = np.asarray(value, dtype=np.float64).reshape(-1)
        if value.shape != (3,):
            raise ValueError("GrassMaterial.light_direction must be a 3-element vector")
        length = np.linalg.norm(value)
        if length == 0:
            raise ValueError("GrassMaterial.light_direction cannot be a zero vector")
        self.uniform_buffer.data["light_direction"] = (*(value / length), 0)
        self.uniform_buffer.update_full()

    @property
    def wind_strength(self):
        """The half angle (in radians) by which the wind bends the blades at most."""
        return float(self.uniform_buffer.data["wind_strength"])

    @wind_strength.setter
    def wind_strength(self, value):
        self.uniform_buffer.data["wind_strength"] = float(value)
        self.uniform_buffer.update_full()

    @property
    def wind_frequency(self):
        """The spatial frequency of the wind, relative to the blade offsets."""
        return float(self.uniform_buffer.data["wind_frequency"])

    @wind_frequency.setter
    def wind_frequency(self, value):
        self.uniform_buffer.data["wind_frequency"] = float(value)
        self.uniform_buffer.update_full()

    @property
    def time(self):
        """The animation time, usually advanced by a ``GrassDriver``."""
        return float(self.uniform_buffer.data["time"])

    @time.setter
    def time(self, value):
        self.uniform_buffer.data["time"] = float(value)
        self.uniform_buffer.update_full()
