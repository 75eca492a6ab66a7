# Copyright 2024 Gergely Bencsik
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#     http://www.apache.org/licenses/LICENSE-2.0
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import numpy as np
from gearprofile.defs import *
from scipy.spatial.transform import Rotation as scp_Rotation


def rotation_matrix(angle):
    """Homogeneous 3x3 matrix of a planar rotation around the origin.

    A rotation around z leaves the last row and column untouched,
    so the 3D rotation matrix doubles as the 2D homogeneous one."""
    return scp_Rotation.from_euler("z", angles=angle).as_matrix()


def translation_matrix(v):
    mat = np.eye(3)
    mat[:2, 2] = v
    return mat


def scale_matrix(sx, sy=None):
    if sy is None:
        sy = sx
    return np.diag([sx, sy, 1.0])


def apply_transform(points: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """
    Apply a homogeneous 3x3 transformation to a set of 2D points.

    Parameters
    ----------
    points : np.ndarray
        Point or array of points, shape (2) or (N,2).
    matrix : np.ndarray
        Homogeneous transformation matrix, shape (3,3).

    Returns
    -------
    np.ndarray
        The transformed points as an array of the same shape as the input.
    """
    return points @ matrix[:2, :2].transpose() + matrix[:2, 2]


def normalize_vector(v):
    return v / np.linalg.norm(v)


def vector_length(v):
    """Length of a vector, or lengths of an array of vectors."""
    return np.linalg.norm(v, axis=-1)


def cross2d(v1, v2):
    """Scalar (z component) of the cross product of planar vectors."""
    return v1[..., 0] * v2[..., 1] - v1[..., 1] * v2[..., 0]


def polar_angle(v):
    return np.arctan2(v[..., 1], v[..., 0])


def involute(alpha):
    """Involute function, inv(a) = tan(a) - a."""
    return np.tan(alpha) - alpha


def polar_to_xy(radius, angle):
    angle = np.asarray(angle)
    return np.stack([np.cos(angle), np.sin(angle)], axis=-1) * np.asarray(radius)[
        ..., np.newaxis
    ]


def arc_points(radius, angle_start, angle_end, step):
    """Points of an arc around the origin, sampled from angle_start
    (inclusive) with a fixed angle step while below angle_end."""
    angles = np.arange(angle_start, angle_end, step)
    return polar_to_xy(np.full(angles.shape, radius), angles).reshape(-1, VSHAPE)


def bezierdc(t, points):
    """
    Bezier curve evaluation using decasteljau algorithm. Works faster for arrays of t
    than iterating naive Bezier algorithm with bernstein polynomials.
    t: float or np 1darray
    points: 2d array of control points
    """

    def decasteljau(t, points):
        t_shape = t.shape + (1,) * (points.ndim - 1)
        t_expanded = t.reshape(t_shape)
        return (1 - t_expanded) * points[:, :-1] + (t_expanded) * points[:, 1:]

    if hasattr(t, "__iter__"):
        t = np.asarray(t)
        points2 = np.repeat(np.expand_dims(points, 0), t.shape[0], axis=0)
        while points2.shape[1] > 1:
            points2 = decasteljau(t, points2)
        return points2.squeeze(1)
    else:
        points2 = np.expand_dims(points, 0)
        while points2.shape[1] > 1:
            points2 = decasteljau(np.array([t]), points2)
        return points2.squeeze((0, 1))


def bezier_derivative_points(points):
    """Control points of the derivative (hodograph) of a Bezier curve."""
    n = points.shape[0] - 1
    return n * (points[1:] - points[:-1])
