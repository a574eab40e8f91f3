import logging

import numpy as np
import pygfx as gfx
from pytest import raises

from gfxgrass import Grass, GrassMaterial


def make_surface(n=20):
    return gfx.plane_geometry(1, 1, n, n)


def test_grass_defaults():
    grass = Grass()
    assert isinstance(grass.material, GrassMaterial)
    assert grass.dirty
    assert grass.blade_width == 0.01
    assert grass.blade_height == 0.025
    assert grass.blade_joints == 3
    assert grass.target_count == 25000
    assert grass.random_offset == 0.02
    assert grass.reduction_points.shape == (0, 3)
    assert grass.reduction_radius == 0
    assert grass.density is None
    assert "blade_height" in grass.uniform_type
    for key in gfx.WorldObject.uniform_type:
        assert key in grass.uniform_type

    # Before the first rebuild there are no blades
    assert grass.instance_count == 0
    assert grass.instance_attributes.count == 0


def test_grass_rebuild(rng):
    surface = make_surface()  # 441 vertices
    grass = Grass(surface, target_count=100, rng=rng)
    assert grass.dirty

    grass.rebuild()
    assert not grass.dirty
    assert grass.instance_count == 100
    assert grass.instance_attributes.count == 100
    assert grass.offset_buffer.nitems == 100
    assert grass.orientation_buffer.nitems == 100
    assert grass.stretch_buffer.nitems == 100
    assert grass.half_angle_buffer.nitems == 100
    assert grass.half_angle_buffer.data.shape == (100, 2)
    assert np.all(grass.offset_buffer.data == grass.instance_attributes.offsets)

    # The template blade
    assert grass.geometry.positions.nitems == 8
    assert np.isclose(grass.uniform_buffer.data["blade_height"], 0.025)


def test_grass_rebuild_is_idempotent(rng):
    grass = Grass(make_surface(), target_count=50, rng=rng)
    grass.rebuild()
    attributes = grass.instance_attributes
    buffer = grass.offset_buffer

    # A clean object is left untouched
    grass.rebuild()
    assert grass.instance_attributes is attributes
    assert grass.offset_buffer is buffer

    # Unless forced, which generates a new layout of the same size
    grass.rebuild(force=True)
    assert grass.instance_attributes is not attributes
    assert grass.offset_buffer is not buffer
    assert grass.instance_count == 50


def test_grass_rebuild_replaces(rng):
    grass = Grass(make_surface(), target_count=60, rng=rng)
    for _ in range(3):
        grass.rebuild(force=True)
        assert grass.instance_count == 60
        assert grass.offset_buffer.nitems == 60


def test_grass_blade_height_change_replaces(rng):
    grass = Grass(make_surface(), target_count=50, rng=rng)
    for height in (0.025, 0.05, 0.1, 0.04):
        grass.blade_height = height
        assert grass.dirty
        grass.rebuild()
        assert not grass.dirty

        # The blades are replaced, never added to
        assert grass.instance_count == 50
        assert grass.instance_attributes.count == 50
        for buffer in (
            grass.offset_buffer,
            grass.orientation_buffer,
            grass.stretch_buffer,
            grass.half_angle_buffer,
        ):
            assert buffer.nitems == 50

        assert np.isclose(grass.uniform_buffer.data["blade_height"], height)
        assert np.isclose(grass.geometry.positions.data[:, 1].max(), height)


def test_grass_options_mark_dirty(rng):
    grass = Grass(make_surface(), target_count=10, rng=rng)
    new_values = dict(
        surface=make_surface(5),
        blade_width=0.02,
        blade_height=0.05,
        blade_joints=5,
        target_count=20,
        random_offset=0.1,
        reduction_points=[(0, 0, 0)],
        reduction_radius=0.2,
        density=lambda h: 1 - h,
    )
    for name, value in new_values.items():
        grass.rebuild()
        assert not grass.dirty
        setattr(grass, name, value)
        assert grass.dirty, name

    grass.rebuild()
    # The density thins out the 36 vertices of the new surface
    assert 0 < grass.instance_count <= 20
    assert grass.geometry.positions.nitems == 12
    assert np.isclose(grass.uniform_buffer.data["blade_height"], 0.05)


def test_grass_change_surface(rng):
    grass = Grass(make_surface(20), target_count=1000, rng=rng)
    grass.rebuild()
    assert grass.instance_count == 441

    # Switching to a smaller surface limits the blade count
    grass.surface = make_surface(3)
    grass.rebuild()
    assert grass.instance_count == 16


def test_grass_without_surface(caplog):
    grass = Grass(None)
    with caplog.at_level(logging.WARNING, logger="gfxgrass"):
        grass.rebuild()
    assert "No surface" in caplog.text
    assert not grass.dirty
    assert grass.instance_count == 0

    # Buffers cannot be empty, but nothing is drawn
    assert grass.offset_buffer.nitems == 1
    assert grass.half_angle_buffer.nitems == 1


def test_grass_zero_target(rng):
    grass = Grass(make_surface(), target_count=0, rng=rng)
    grass.rebuild()
    assert grass.instance_count == 0
    assert grass.get_bounding_box() is None


def test_grass_with_mesh_surface(rng):
    mesh = gfx.Mesh(make_surface(), gfx.MeshBasicMaterial())
    grass = Grass(mesh, target_count=30, rng=rng)
    mesh.add(grass)
    grass.rebuild()
    assert grass.instance_count == 30


def test_grass_seed():
    grass1 = Grass(make_surface(), target_count=30, seed=12)
    grass2 = Grass(make_surface(), target_count=30, seed=12)
    grass1.rebuild()
    grass2.rebuild()
    assert np.all(grass1.instance_attributes.offsets == grass2.instance_attributes.offsets)


def test_grass_update_object_rebuilds(rng):
    grass = Grass(make_surface(), target_count=10, rng=rng)
    # This is what the renderer calls before drawing the object
    grass._update_object()
    assert not grass.dirty
    assert grass.instance_count == 10


def test_grass_bounding_box(rng):
    grass = Grass(make_surface(), target_count=200, random_offset=0, rng=rng)
    grass.rebuild()
    aabb = grass.get_bounding_box()
    assert aabb.shape == (2, 3)
    offsets = grass.instance_attributes.offsets
    assert np.all(aabb[0] <= offsets.min(axis=0))
    assert np.all(aabb[1] >= offsets.max(axis=0))
    # The blades reach beyond their roots
    assert np.all(aabb[1] - offsets.max(axis=0) >= 0.025 - 1e-6)
    assert grass.get_bounding_sphere() is not None


def test_grass_fails():
    with raises(ValueError):
        Grass(blade_width=0)
    with raises(ValueError):
        Grass(blade_height=-1)
    with raises(ValueError):
        Grass(blade_joints=0)
    with raises(TypeError):
        Grass(blade_joints=1.5)
    with raises(ValueError):
        Grass(target_count=-1)
    with raises(TypeError):
        Grass(target_count=True)
    with raises(ValueError):
        Grass(random_offset=float("nan"))
    with raises(ValueError):
        Grass(reduction_points=[(0, 0)])
    with raises(ValueError):
        Grass(reduction_radius=-1)
    with raises(TypeError):
        Grass(density=0.5)
    with raises(TypeError):
        Grass(rng=42)
    with raises(ValueError):
        Grass(blade_width=float("inf"))
    with raises(ValueError):
        Grass(blade_height=float("inf"))
    with raises(ValueError):
        Grass(blade_height=float("nan"))
    with raises(TypeError):
        Grass(blade_joints=float("inf"))
    with raises(TypeError):
        Grass(target_count=float("inf"))
    with raises(TypeError):
        Grass(target_count=float("nan"))

    grass = Grass()
    grass.rebuild()
    with raises(ValueError):
        grass.blade_width = -0.1
    # A rejected value leaves the object as it was
    assert grass.blade_width == 0.01
    assert not grass.dirty
