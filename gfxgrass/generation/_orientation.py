import numpy as np
import pylinalg as la

from ..utils import make_rng


# Jitter applied on top of the normal-aligned rotation
NORMAL_TILT_JITTER = 0.2  # total range on x and z (radians)
NORMAL_YAW_JITTER = 2 * np.pi  # total range around y

# Tilt range for surfaces without normals, 18 degrees in total
RANDOM_TILT_RANGE = np.pi / 10


def _quat_from_up(directions):
    """Get the minimal rotation from +Y to each of the given unit vectors."""
    n = len(directions)
    x, y, z = directions[:, 0], directions[:, 1], directions[:, 2]
    # The half-way construction: cross(up, d) as the vector part, and
    # 1 + dot(up, d) as the scalar part, then normalize.
    w = 1.0 + y
    quats = np.column_stack([z, np.zeros(n), -x, w])
    # Anti-parallel to up: any half turn around a horizontal axis will do
    opposite = w < 1e-6
    quats[opposite] = (0.0, 0.0, 1.0, 0.0)
    return quats / np.linalg.norm(quats, axis=-1, keepdims=True)


def _quat_about_axis(axis, angles):
    """Get rotations around one of the principal axes (0, 1, 2 for x, y, z)."""
    angles = np.asarray(angles, dtype=np.float64)
    quats = np.zeros((len(angles), 4))
    quats[:, axis] = np.sin(0.5 * angles)
    quats[:, 3] = np.cos(0.5 * angles)
    return quats


def _quat_mul(a, b):
    """The Hamilton product of two arrays of quaternions (x, y, z, w)."""
    # la.quat_mul only handles a single pair of quaternions
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    xyz = (
        a[..., 3:] * b[..., :3]
        + b[..., 3:] * a[..., :3]
        + np.cross(a[..., :3], b[..., :3])
    )
    w = a[..., 3] * b[..., 3] - (a[..., :3] * b[..., :3]).sum(axis=-1)
    return np.concatenate([xyz, w[..., None]], axis=-1)


def _quat_from_euler_xyz(angles):
    """Intrinsic XYZ Euler angles (N, 3) to quaternions."""
    qx = _quat_about_axis(0, angles[:, 0])
    qy = _quat_about_axis(1, angles[:, 1])
    qz = _quat_about_axis(2, angles[:, 2])
    return _quat_mul(_quat_mul(qx, qy), qz)


def _renormalize(quats):
    quats = np.asarray(quats, dtype=np.float64)
    return quats / np.linalg.norm(quats, axis=-1, keepdims=True)


def _half_angles(angles):
    angles = np.asarray(angles, dtype=np.float64)
    return np.sin(0.5 * angles), np.cos(0.5 * angles)


def _empty_result():
    return np.zeros((0, 4)), np.zeros((0,)), np.zeros((0,))


def orientations_from_normals(normals, *, rng=None):
    """Get blade orientations that follow the surface normals.

    Each blade is rotated from +Y onto its (normalized) normal, and then
    slightly jittered so that blades on flat areas do not all look the same.

    Parameters
    ----------
    normals : ndarray
        The (N, 3) surface normals at the blade sites.
    rng : numpy.random.Generator | None
        The source of randomness for the jitter.

    Returns
    -------
    quaternions : ndarray
        The (N, 4) unit quaternions (x, y, z, w).
    half_sin : ndarray
        The sine of half the root angle, i.e. the angle between +Y and the
        normal, before jitter.
    half_cos : ndarray
        The cosine of half the root angle.

    """
    rng = make_rng(rng)
    normals = np.asarray(normals, dtype=np.float64).reshape(-1, 3)
    n = len(normals)
    if n == 0:
        return _empty_result()

    # Degenerate normals point up
    normals = normals.copy()
    normals[~np.isfinite(normals).all(axis=-1)] = 0.0
    lengths = np.linalg.norm(normals, axis=-1)
    normals[lengths < 1e-12] = (0.0, 1.0, 0.0)
    normals = la.vec_normalize(normals)

    jitter = np.column_stack(
        [
            (rng.random(n) - 0.5) * NORMAL_TILT_JITTER,
            (rng.random(n) - 0.5) * NORMAL_YAW_JITTER,
            (rng.random(n) - 0.5) * NORMAL_TILT_JITTER,
        ]
    )
    quats = _quat_mul(_quat_from_up(normals), _quat_from_euler_xyz(jitter))

    angles = np.arccos(np.clip(normals[:, 1], -1.0, 1.0))
    half_sin, half_cos = _half_angles(angles)
    return _renormalize(quats), half_sin, half_cos


def random_orientations(n, *, rng=None):
    """Get random blade orientations, for surfaces without normals.

    Each blade gets a random yaw around +Y, combined with a small random
    pitch and roll. The root angle is drawn independently in [-pi, pi].

    Returns
    -------
    quaternions : ndarray
        The (n, 4) unit quaternions (x, y, z, w).
    half_sin : ndarray
        The sine of half the random root angle.
    half_cos : ndarray
        The cosine of half the random root angle.

    """
    rng = make_rng(rng)
    n = int(n)
    if n <= 0:
        return _empty_result()

    yaw = rng.random(n) * 2 * np.pi
    pitch = (rng.random(n) - 0.5) * RANDOM_TILT_RANGE
    roll = (rng.random(n) - 0.5) * RANDOM_TILT_RANGE

    quats = _quat_mul(
        _quat_mul(_quat_about_axis(1, yaw), _quat_about_axis(0, pitch)),
        _quat_about_axis(2, roll),
    )

    angles = np.pi - rng.random(n) * 2 * np.pi
    half_sin, half_cos = _half_angles(angles)
    return _renormalize(quats), half_sin, half_cos
