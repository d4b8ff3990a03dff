"""Homogeneous 4x4 affine transforms.

All rotations are right-handed and take their angle in degrees, the unit used
by body segments. Everything is computed in single precision, so printed
vertices carry the same rounding as the legacy viewer. Transforms are
composed by right-multiplication, so ``parent @ local`` applies ``local``
inside the parent's frame.
"""

import numpy as np
import numpy.typing as npt

from lathe_mesh.models import SegmentAction

Matrix = npt.NDArray[np.float32]


def identity() -> Matrix:
    return np.eye(4, dtype=np.float32)


def translation(x: float, y: float, z: float) -> Matrix:
    T = identity()
    T[:3, 3] = (x, y, z)
    return T


def rotation_x(degrees: float) -> Matrix:
    c, s = _cos_sin(degrees)
    return np.array(
        [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, c, -s, 0.0],
            [0.0, s, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype=np.float32,
    )


def rotation_y(degrees: float) -> Matrix:
    c, s = _cos_sin(degrees)
    return np.array(
        [
            [c, 0.0, s, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [-s, 0.0, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype=np.float32,
    )


def rotation_z(degrees: float) -> Matrix:
    c, s = _cos_sin(degrees)
    return np.array(
        [
            [c, -s, 0.0, 0.0],
            [s, c, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype=np.float32,
    )


def _cos_sin(degrees: float) -> tuple[np.float32, np.float32]:
    radians = np.radians(np.float32(degrees))
    return np.cos(radians), np.sin(radians)


def action_transform(action: int, value: float) -> Matrix | None:
    """Local transform for a body-segment action, or None if the code is unknown."""
    if action in (SegmentAction.SHIFT, SegmentAction.SHIFT_ALT):
        return translation(0.0, 0.0, value)
    if action == SegmentAction.ROTATE_X:
        return rotation_x(value)
    if action == SegmentAction.ROTATE_Y:
        return rotation_y(value)
    if action == SegmentAction.ROTATE_Z:
        return rotation_z(value)
    return None


def scale_xy(points: npt.ArrayLike, scale: tuple[float, float]) -> Matrix:
    scaled = np.array(points, dtype=np.float32).reshape(-1, 3)
    scaled[:, 0] *= scale[0]
    scaled[:, 1] *= scale[1]
    return scaled


def transform_points(xform: Matrix, points: npt.ArrayLike) -> Matrix:
    """Apply ``xform`` to an (N, 3) array of points."""
    pts = np.asarray(points, dtype=np.float32).reshape(-1, 3)
    return pts @ xform[:3, :3].T + xform[:3, 3]
