import numpy as np
import pygfx as gfx
from pytest import raises

from gfxgrass.generation import InstanceAttributes, build_instance_attributes


def test_instance_attributes():
    n = 3
    attributes = InstanceAttributes(
        np.zeros((n, 3)),
        np.tile([0, 0, 0, 1], (n, 1)),
        np.zeros(n),
        np.zeros(n),
        np.ones(n),
    )
    assert attributes.count == 3
    assert len(attributes) == 3
    assert "3 blades" in repr(attributes)
    for name in ("offsets", "orientations", "stretches"):
        array = getattr(attributes, name)
        assert array.dtype == np.float32
        assert not array.flags.writeable
    assert attributes.offsets.shape == (3, 3)
    assert attributes.orientations.shape == (3, 4)
    assert attributes.half_root_angle_sin.shape == (3,)
    assert attributes.half_root_angle_cos.shape == (3,)

    with raises(ValueError):
        attributes.offsets[0, 0] = 1


def test_instance_attributes_empty():
    attributes = InstanceAttributes.empty()
    assert attributes.count == 0
    assert attributes.offsets.shape == (0, 3)
    assert attributes.orientations.shape == (0, 4)


def test_instance_attributes_fails():
    with raises(ValueError):
        InstanceAttributes(
            np.zeros((3, 3)), np.zeros((3, 4)), np.zeros(2), np.zeros(3), np.zeros(3)
        )


def test_build_instance_attributes(rng):
    geo = gfx.plane_geometry(2, 2, 20, 20)  # 441 vertices
    positions = geo.positions.data
    normals = geo.normals.data

    attributes = build_instance_attributes(
        positions, normals, target_count=100, random_offset=0.02, rng=rng
    )
    assert attributes.count == 100

    # Blades stay within the jitter distance of the surface
    offsets = attributes.offsets
    assert np.all(np.abs(offsets[:, 0]) <= 1 + 0.01 + 1e-6)
    assert np.all(np.abs(offsets[:, 1]) <= 1 + 1e-6)
    assert np.all(np.abs(offsets[:, 2]) <= 0.01 + 1e-6)

    assert np.allclose(np.linalg.norm(attributes.orientations, axis=1), 1, atol=1e-5)
    # No reduction points, no stretch
    assert np.all(attributes.stretches == 0)


def test_build_instance_attributes_jitter_is_horizontal(rng):
    # A flat grid in the xz plane, with normals pointing up
    x, z = np.meshgrid(np.arange(10, dtype=np.float32), np.arange(10, dtype=np.float32))
    positions = np.column_stack([x.ravel(), np.full(100, 2, np.float32), z.ravel()])
    normals = np.tile(np.array([0, 1, 0], np.float32), (100, 1))

    attributes = build_instance_attributes(
        positions, normals, target_count=50, random_offset=0.5, rng=rng
    )
    offsets = attributes.offsets
    assert np.all(offsets[:, 1] == 2)
    # Each blade is within the jitter of a grid vertex
    assert np.all(np.abs(offsets[:, 0] - np.round(offsets[:, 0])) <= 0.25 + 1e-6)
    assert np.all(np.abs(offsets[:, 2] - np.round(offsets[:, 2])) <= 0.25 + 1e-6)
    # Upward normals give a zero root angle
    assert np.allclose(attributes.half_root_angle_sin, 0)
    assert np.allclose(attributes.half_root_angle_cos, 1)


def test_build_instance_attributes_without_normals(rng):
    positions = rng.random((200, 3)).astype(np.float32)
    attributes = build_instance_attributes(positions, None, target_count=50, rng=rng)
    assert attributes.count == 50
    sin, cos = attributes.half_root_angle_sin, attributes.half_root_angle_cos
    assert np.allclose(sin**2 + cos**2, 1, atol=1e-5)


def test_build_instance_attributes_with_reduction(rng):
    x, z = np.meshgrid(np.linspace(-1, 1, 30), np.linspace(-1, 1, 30))
    positions = np.column_stack([x.ravel(), np.zeros(900), z.ravel()])

    attributes = build_instance_attributes(
        positions,
        None,
        target_count=900,
        random_offset=0,
        reduction_points=[(0, 0, 0)],
        reduction_radius=0.5,
        rng=rng,
    )
    distances = np.linalg.norm(attributes.offsets, axis=1)
    stretches = attributes.stretches
    assert np.all(stretches >= 0)
    assert np.all(stretches[distances >= 0.5 + 1e-6] == 0)
    assert np.any(stretches[distances < 0.5 - 1e-6] > 0)


def test_build_instance_attributes_empty(rng):
    attributes = build_instance_attributes(
        np.zeros((0, 3), np.float32), None, target_count=100, rng=rng
    )
    assert attributes.count == 0

    positions = rng.random((10, 3))
    attributes = build_instance_attributes(positions, None, target_count=0, rng=rng)
    assert attributes.count == 0


def test_build_instance_attributes_reproducible():
    positions = np.random.random((100, 3))
    a1 = build_instance_attributes(
        positions, None, target_count=20, rng=np.random.default_rng(7)
    )
    a2 = build_instance_attributes(
        positions, None, target_count=20, rng=np.random.default_rng(7)
    )
    assert np.all(a1.offsets == a2.offsets)
    assert np.all(a1.orientations == a2.orientations)
