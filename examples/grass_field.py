"""
Grass Field
===========

A rolling landscape covered with wind-animated grass.

The landscape is a height field; the blades grow on its vertices, follow
its normals, and are more sparse on the hill tops. Around a few trample
points the blades are stretched into tufts. The blade color and shape come
from two small procedural textures.

Press "r" to regrow the grass with a new random layout, and "1" to "3" to
change the number of blades.

"""

# sphinx_gallery_pygfx_docs = 'screenshot'
# sphinx_gallery_pygfx_test = 'run'

import numpy as np
from wgpu.gui.auto import WgpuCanvas, run
import pygfx as gfx
import gfxgrass


def landscape_geometry(size=4.0, n=300):
    """A rolling height field in the xz plane, with +y up."""
    xs = np.linspace(-size / 2, size / 2, n, dtype=np.float32)
    x, z = np.meshgrid(xs, xs)
    y = 0.15 * np.sin(1.3 * x) * np.cos(0.9 * z) + 0.05 * np.sin(3.1 * x + 2.0 * z)

    positions = np.column_stack([x.ravel(), y.ravel(), z.ravel()]).astype(np.float32)

    i = np.arange(n - 1)
    row, col = np.meshgrid(i, i, indexing="ij")
    a = (row * n + col).ravel()
    b, c, d = a + 1, a + n, a + n + 1
    # Counter-clockwise when seen from above
    indices = np.concatenate(
        [np.column_stack([a, c, b]), np.column_stack([b, c, d])]
    ).astype(np.int32)

    normals = gfx.utils.normals_from_vertices(positions, indices).astype(np.float32)
    return gfx.Geometry(indices=indices, positions=positions, normals=normals)


def blade_textures(width=16, height=64):
    """A color gradient and a tapering cutout mask for the blades."""
    # Texcoord v is 0 at the tip and 1 at the root
    v = np.linspace(0, 1, height, dtype=np.float32)[:, None]
    u = np.linspace(0, 1, width, dtype=np.float32)[None, :]

    tip = np.array([164, 200, 80], np.float32)
    base = np.array([60, 120, 40], np.float32)
    rgb = tip * (1 - v[..., None]) + base * v[..., None]
    rgb = np.broadcast_to(rgb, (height, width, 3))
    color = np.concatenate([rgb, np.full((height, width, 1), 255, np.float32)], 2)

    half_width = 0.5 * np.sqrt(v)
    mask = (np.abs(u - 0.5) < half_width).astype(np.float32) * 255
    mask = np.repeat(mask[..., None], 4, 2)

    return (
        gfx.Texture(color.astype(np.uint8), dim=2),
        gfx.Texture(mask.astype(np.uint8), dim=2, colorspace="physical"),
    )


def height_density(normalized_heights):
    """Fewer blades on the hill tops."""
    return 1.0 - 0.6 * normalized_heights


canvas = WgpuCanvas(title="Grass field")
renderer = gfx.renderers.WgpuRenderer(canvas)
scene = gfx.Scene()
scene.add(gfx.Background.from_color("#8fb8de", "#dde8f0"))
scene.add(gfx.AmbientLight(intensity=0.6))
sun = gfx.DirectionalLight(intensity=2.5)
sun.local.position = (1, 2, 1)
scene.add(sun)

geometry = landscape_geometry()
ground = gfx.Mesh(geometry, gfx.MeshPhongMaterial(color="#3d2b17"))
scene.add(ground)

color_map, alpha_map = blade_textures()
material = gfxgrass.GrassMaterial(
    color_map,
    alpha_map,
    root_color="#0b2004",
    light_direction=(-1, -2, -1),
)
grass = gfxgrass.Grass(
    geometry,
    material,
    blade_width=0.02,
    blade_height=0.08,
    target_count=60000,
    random_offset=0.02,
    reduction_points=[(0.5, 0.0, 0.5), (-0.8, 0.0, 0.3), (0.2, 0.0, -0.9)],
    reduction_radius=0.4,
    density=height_density,
    seed=0,
)
ground.add(grass)

camera = gfx.PerspectiveCamera(60, 16 / 9)
camera.local.position = (0, 1.5, 3)
camera.look_at((0, 0, 0))
controller = gfx.OrbitController(camera, register_events=renderer)

driver = gfxgrass.GrassDriver(renderer, scene, camera, grass)


@renderer.add_event_handler("key_down")
def handle_event(event):
    if event.key == "r":
        grass.rebuild(force=True)
    elif event.key in ("1", "2", "3"):
        grass.target_count = {"1": 10000, "2": 60000, "3": 200000}[event.key]


if __name__ == "__main__":
    driver.start()
    run()
