"""Quaternion and Euler angle helpers.

Quaternions are numpy arrays in (w, x, y, z) order. Euler triples are
stored per axis as (x, y, z) in degrees, independent of the order in which
they are composed; the composition order is passed separately as a string
of axis letters such as "ZXY" and is always intrinsic (Z, then X about the
rotated frame, then Y).
"""

import numpy as np
from scipy.spatial.transform import Rotation

from mocap_stitch.core import AXIS_INDEX


IDENTITY = np.array([1.0, 0.0, 0.0, 0.0])


def normalize(v: np.ndarray) -> np.ndarray:
    """Normalize vector, return zero vector if length is zero."""
    length = np.linalg.norm(v)
    if length < 1e-12:
        return np.zeros_like(v)
    return v / length


def identity_quaternion() -> np.ndarray:
    return IDENTITY.copy()


def quaternion_multiply(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Multiply two quaternions."""
    w1, x1, y1, z1 = q1
    w2, x2, y2, z2 = q2
    return np.array([
        w1*w2 - x1*x2 - y1*y2 - z1*z2,
        w1*x2 + x1*w2 + y1*z2 - z1*y2,
        w1*y2 - x1*z2 + y1*w2 + z1*x2,
        w1*z2 + x1*y2 - y1*x2 + z1*w2
    ])


def quaternion_inverse(q: np.ndarray) -> np.ndarray:
    """Inverse of a unit quaternion."""
    return np.array([q[0], -q[1], -q[2], -q[3]])


def quaternion_from_axis_angle(axis: np.ndarray, angle: float) -> np.ndarray:
    """Create quaternion from axis and angle (radians)."""
    axis = normalize(np.asarray(axis, dtype=np.float64))
    half_angle = angle / 2
    s = np.sin(half_angle)
    return np.array([np.cos(half_angle), axis[0] * s, axis[1] * s, axis[2] * s])


def rotate_vector(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate a 3-vector by a unit quaternion."""
    p = np.array([0.0, v[0], v[1], v[2]])
    rotated = quaternion_multiply(quaternion_multiply(q, p), quaternion_inverse(q))
    return rotated[1:]


def quaternion_angle(q: np.ndarray) -> float:
    """Rotation angle of a unit quaternion in radians, in [0, pi]."""
    w = min(abs(float(q[0])), 1.0)
    return 2.0 * np.arccos(w)


def _to_rotation(q: np.ndarray) -> Rotation:
    w, x, y, z = q
    return Rotation.from_quat([x, y, z, w])


def _from_rotation(rotation: Rotation) -> np.ndarray:
    x, y, z, w = rotation.as_quat()
    return np.array([w, x, y, z])


def euler_to_quaternion(angles: np.ndarray, order: str) -> np.ndarray:
    """
    Compose per-axis Euler angles into a quaternion.

    Args:
        angles: (x, y, z) angles in degrees
        order: Intrinsic composition order, e.g. "ZXY"; empty means identity

    Returns:
        Unit quaternion (w, x, y, z)
    """
    if not order:
        return identity_quaternion()

    ordered = [angles[AXIS_INDEX[axis]] for axis in order]
    return _from_rotation(Rotation.from_euler(order.upper(), ordered, degrees=True))


def quaternion_to_euler(q: np.ndarray, order: str) -> np.ndarray:
    """
    Decompose a quaternion into per-axis Euler angles.

    Args:
        q: Unit quaternion (w, x, y, z)
        order: Intrinsic composition order with three distinct axes

    Returns:
        (x, y, z) angles in degrees
    """
    ordered = _to_rotation(q).as_euler(order.upper(), degrees=True)
    angles = np.zeros(3)
    for axis, value in zip(order, ordered):
        angles[AXIS_INDEX[axis]] = value
    return angles


def yaw_quaternion(q: np.ndarray) -> np.ndarray:
    """Heading-only part of a rotation (about +Y), pitch and roll dropped."""
    yaw = _to_rotation(q).as_euler("YXZ")[0]
    return quaternion_from_axis_angle(np.array([0.0, 1.0, 0.0]), yaw)


def slerp(q0: np.ndarray, q1: np.ndarray, t: float) -> np.ndarray:
    """Spherical linear interpolation along the shorter arc."""
    q0 = normalize(np.asarray(q0, dtype=np.float64))
    q1 = normalize(np.asarray(q1, dtype=np.float64))

    dot = float(np.dot(q0, q1))
    if dot < 0.0:
        q1 = -q1
        dot = -dot

    if dot > 0.9995:
        # Nearly parallel, fall back to normalized lerp
        return normalize(q0 + t * (q1 - q0))

    theta_0 = np.arccos(dot)
    sin_theta_0 = np.sin(theta_0)
    theta = theta_0 * t
    s0 = np.sin(theta_0 - theta) / sin_theta_0
    s1 = np.sin(theta) / sin_theta_0
    return s0 * q0 + s1 * q1


def quaternions_close(q1: np.ndarray, q2: np.ndarray, atol: float = 1e-6) -> bool:
    """True if two unit quaternions describe the same rotation (q and -q match)."""
    return bool(abs(abs(float(np.dot(q1, q2))) - 1.0) < atol)
