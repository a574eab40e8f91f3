import numpy as np

from pygfx import Clock

from ..utils import logger
from ..objects import Grass


class GrassDriver:
    """A helper to render and animate grass.

    The driver holds the renderer, scene and camera, and the grass objects to
    animate. Its ``animate()`` method is the draw function: it rebuilds grass
    objects with changed options, advances the wind time, renders the scene,
    and requests a new draw.

    Parameters
    ----------
    renderer : gfx.Renderer
        The renderer to draw the scene with.
    scene : gfx.WorldObject
        The scene to render.
    camera : gfx.Camera
        The camera to render the scene with.
    grass : Grass | list | None
        The grass object(s) to animate. If None, all grass objects in the
        scene are used (the scene is searched on each frame).
    time_scale : float
        The factor from elapsed seconds to wind time. Default 0.1.
    clock : gfx.Clock
        The clock that measures the elapsed time. Default a new clock.
    frame_step : float | None
        If given, each frame advances the time by this many seconds, instead
        of reading the clock. Useful for recording and tests.
    before_render : Callable
        A callback that will be executed during each draw call before a new
        render is made.
    after_render : Callable
        A callback that will be executed during each draw call after a new
        render is made.

    """

    def __init__(
        self,
        renderer,
        scene,
        camera,
        grass=None,
        *,
        time_scale=0.1,
        clock=None,
        frame_step=None,
        before_render=None,
        after_render=None,
    ):
        self.renderer = renderer
        self.scene = scene
        self.camera = camera
        self.before_render = before_render
        self.after_render = after_render

        if grass is None:
            self._grass = None
        elif isinstance(grass, Grass):
            self._grass = [grass]
        else:
            self._grass = list(grass)
            for ob in self._grass:
                if not isinstance(ob, Grass):
                    raise TypeError(f"GrassDriver can only animate Grass, not {ob!r}")

        self.time_scale = time_scale
        self.frame_step = frame_step
        self._clock = clock if clock is not None else Clock()
        self._elapsed = 0.0
        self._time = 0.0

    @property
    def grass(self):
        """The list of grass objects that are animated."""
        if self._grass is not None:
            return list(self._grass)
        if self.scene is None:
            return []
        return list(self.scene.iter(lambda ob: isinstance(ob, Grass)))

    @property
    def clock(self):
        """The clock that measures the elapsed time."""
        return self._clock

    @property
    def time_scale(self):
        """The factor from elapsed seconds to wind time."""
        return self._time_scale

    @time_scale.setter
    def time_scale(self, value):
        value = float(value)
        if not (np.isfinite(value) and value >= 0):
            raise ValueError(f"GrassDriver.time_scale must be >= 0, not {value}")
        self._time_scale = value

    @property
    def frame_step(self):
        """The fixed time step per frame, or None to use the clock."""
        return self._frame_step

    @frame_step.setter
    def frame_step(self, value):
        if value is not None:
            value = float(value)
            if not (np.isfinite(value) and value >= 0):
                raise ValueError(f"GrassDriver.frame_step must be >= 0, not {value}")
        self._frame_step = value

    @property
    def time(self):
        """The current wind time, as set on the grass materials."""
        return self._time

    def advance(self):
        """Advance the time by one frame, and pass it to the grass materials.

        The time never decreases, except through ``reset()``.
        """
        if self._frame_step is not None:
            self._elapsed += self._frame_step
        else:
            self._elapsed = max(self._elapsed, self._clock.get_elapsed_time())
        self._time = max(self._time, self._elapsed * self._time_scale)
        self._apply_time()
        return self._time

    def reset(self):
        """Set the time back to zero, and restart the clock."""
        self._clock.start()
        self._elapsed = 0.0
        self._time = 0.0
        self._apply_time()

    def _apply_time(self):
        materials = []
        for ob in self.grass:
            if ob.material is not None and ob.material not in materials:
                materials.append(ob.material)
        for material in materials:
            material.time = self._time

    def rebuild(self):
        """Rebuild the grass objects whose options have changed."""
        for ob in self.grass:
            if ob.dirty:
                logger.debug(f"Rebuilding dirty grass {ob!r}.")
                ob.rebuild()

    def animate(self):
        """Draw one frame, and schedule the next one.

        Use this as the draw function, e.g. ``renderer.request_draw(driver.animate)``.
        """
        self.rebuild()
        self.advance()

        if self.before_render is not None:
            self.before_render()

        self.renderer.render(self.scene, self.camera)

        if self.after_render is not None:
            self.after_render()

        self.renderer.request_draw()

    def start(self):
        """Reset the time and register ``animate()`` as the draw function."""
        self.reset()
        self.renderer.request_draw(self.animate)
