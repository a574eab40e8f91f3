import numpy as np

from pygfx import Geometry

from ..utils import as_integer


def _check_blade_shape(width, height, joints):
    width, height = float(width), float(height)
    joints = as_integer(joints, "Blade joints")
    if not (np.isfinite(width) and width > 0):
        raise ValueError(f"Blade width must be a finite number larger than zero, not {width}")
    if not (np.isfinite(height) and height > 0):
        raise ValueError(f"Blade height must be a finite number larger than zero, not {height}")
    if joints < 1:
        raise ValueError(f"Blade joints must be at least 1, not {joints}")
    return width, height, joints


def generate_blade(width, height, joints):
    """Generate the arrays for a single grass blade.

    The blade is a narrow quad strip in the local xy-plane, with its base
    centered at the origin and its tip at ``y = height``. It is divided
    into ``joints`` segments along its length so that it can bend.

    Returns positions, normals, texcoords and indices.
    """
    width, height, joints = _check_blade_shape(width, height, joints)
    nx, ny = 2, joints + 1

    x = np.linspace(-width / 2, width / 2, nx, dtype=np.float32)
    y = np.linspace(0, height, ny, dtype=np.float32)
    xx, yy = np.meshgrid(x, y)
    xx, yy = xx.flatten(), yy.flatten()
    positions = np.column_stack([xx, yy, np.zeros_like(xx)])

    # The texture's top row is at the tip of the blade
    texcoords = np.column_stack([(xx + width / 2) / width, 1 - yy / height])
    texcoords = texcoords.astype(np.float32)

    # Two triangles per segment, counter-clockwise as seen from +z
    base = np.arange(joints, dtype=np.int32) * nx
    indices = np.empty((joints, 2, 3), dtype=np.int32)
    indices[:, 0, 0] = base
    indices[:, 0, 1] = base + 1
    indices[:, 0, 2] = base + nx
    indices[:, 1, 0] = base + nx + 1
    indices[:, 1, 1] = base + nx
    indices[:, 1, 2] = base + 1

    normals = np.tile(np.array([0, 0, 1], dtype=np.float32), (ny * nx, 1))

    return positions, normals, texcoords, indices.reshape((-1, 3))


def blade_geometry(width=0.01, height=0.025, joints=3):
    """Generate the template geometry shared by all blades of a grass field.

    Parameters
    ----------
    width : float
        The width of the blade, measured along the x-axis.
    height : float
        The length of the blade, measured along the y-axis.
    joints : int
        The number of segments along the length of the blade. More joints
        give a smoother bend.

    Returns
    -------
    blade : Geometry
        A geometry with positions, normals, texcoords and indices.

    """
    positions, normals, texcoords, indices = generate_blade(width, height, joints)

    return Geometry(
        indices=indices,
        positions=positions,
        normals=normals,
        texcoords=texcoords,
    )
