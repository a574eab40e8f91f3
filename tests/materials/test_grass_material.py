import numpy as np
import pygfx as gfx
from pytest import raises

from gfxgrass import GrassMaterial


def test_uniform_type_includes_material():
    m = GrassMaterial()
    for key, val in gfx.Material.uniform_type.items():
        assert key in m.uniform_type
        assert m.uniform_type[key] == val
    for key in ("color", "root_color", "time", "alpha_cutoff", "wind_strength"):
        assert key in m.uniform_type


def test_grass_material_defaults():
    m = GrassMaterial()
    assert m.map is None
    assert m.alpha_map is None
    assert np.isclose(m.alpha_cutoff, 0.15)
    assert np.isclose(m.wind_strength, 0.15)
    assert np.isclose(m.wind_frequency, 1 / 50)
    assert m.time == 0
    assert m.color == gfx.Color("#4c9a2a")
    assert np.isclose(np.linalg.norm(m.light_direction), 1)


def test_grass_material_props():
    m = GrassMaterial(color="red", root_color="#000", alpha_cutoff=0.5, ambient=1)
    assert m.color == gfx.Color("red")
    assert m.root_color == gfx.Color("#000")
    assert m.alpha_cutoff == 0.5
    assert m.ambient == 1

    m.time = 2.5
    assert m.time == 2.5
    assert m.uniform_buffer.data["time"] == 2.5

    m.light_direction = (0, -2, 0)
    assert np.allclose(m.light_direction, (0, -1, 0))

    m.wind_strength = 0
    assert m.wind_strength == 0


def test_grass_material_maps():
    tex = gfx.Texture(np.zeros((8, 4, 4), np.uint8), dim=2)

    m = GrassMaterial(tex, tex)
    assert isinstance(m.map, gfx.TextureMap)
    assert m.map.texture is tex
    assert isinstance(m.alpha_map, gfx.TextureMap)

    tex_map = gfx.TextureMap(tex)
    m.map = tex_map
    assert m.map is tex_map

    m.map = None
    assert m.map is None

    with raises(TypeError):
        m.map = np.zeros((4, 4))
    with raises(TypeError):
        m.alpha_map = "texture"


def test_grass_material_fails():
    m = GrassMaterial()
    with raises(ValueError):
        m.alpha_cutoff = 1.5
    with raises(ValueError):
        m.alpha_cutoff = -0.1
    with raises(ValueError):
        m.ambient = -1
    with raises(ValueError):
        m.diffuse = -1
    with raises(ValueError):
        m.light_direction = (0, 0, 0)
    with raises(ValueError):
        m.light_direction = (0, 1)
