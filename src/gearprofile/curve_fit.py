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

"""Least squares fitting of cubic Bezier chains to point paths.

Follows the well known algorithm of Philip J. Schneider (Graphics Gems, 1990):
fit one cubic with fixed end tangents, improve the parametrization with
Newton-Raphson steps, split at the worst point if the error stays too large.
"""

from typing import List
import numpy as np
from gearprofile.defs import *
from gearprofile.function_generators import (
    bezierdc,
    bezier_derivative_points,
    normalize_vector,
)

MAX_ITERATIONS = 20


def fit_curve(points: np.ndarray, max_error: float = FIT_TOLERANCE) -> List[np.ndarray]:
    """
    Fit a chain of cubic Bezier segments to a list of points.

    Parameters
    ----------
    points : np.ndarray
        Ordered points, shape (N,2).
    max_error : float, optional
        Maximum allowed distance of the input points from the fitted curve.

    Returns
    -------
    list of np.ndarray
        Control points of the segments, each of shape (4,2). Consecutive segments
        share their end and start points. Empty if there are less than 2 distinct
        points.
    """
    points = np.asarray(points, dtype=float).reshape(-1, VSHAPE)
    if len(points) < 2:
        return []
    keep = np.ones(len(points), dtype=bool)
    keep[1:] = np.any(points[1:] != points[:-1], axis=1)
    points = points[keep]
    if len(points) < 2:
        return []

    left_tangent = normalize_vector(points[1] - points[0])
    right_tangent = normalize_vector(points[-2] - points[-1])
    error_sq = max_error**2

    # explicit stack instead of recursion, long paths could split deep
    result = []
    stack = [(points, left_tangent, right_tangent)]
    while stack:
        span, t_left, t_right = stack.pop()
        bez, split = fit_cubic(span, t_left, t_right, error_sq)
        if bez is not None:
            result.append(bez)
            continue
        center = span[split - 1] - span[split + 1]
        if not np.any(center):
            center = span[split - 1] - span[split]
            center = np.array((-center[1], center[0]))
        to_center = normalize_vector(center)
        # right half is pushed first so the left one is finished first
        stack.append((span[split:], -to_center, t_right))
        stack.append((span[: split + 1], t_left, to_center))
    return result


def fit_cubic(points, left_tangent, right_tangent, error_sq):
    """Fit a single cubic to the points.

    Returns the control points and None when the fit is within the error,
    otherwise None and the index where the span should be split."""
    if len(points) == 2:
        dist = np.linalg.norm(points[0] - points[1]) / 3
        return (
            np.array(
                [
                    points[0],
                    points[0] + left_tangent * dist,
                    points[1] + right_tangent * dist,
                    points[1],
                ]
            ),
            None,
        )

    u = chord_length_parameterize(points)
    bez = generate_bezier(points, u, left_tangent, right_tangent)
    max_err, split = compute_max_error(points, bez, u)
    if max_err < error_sq:
        return bez, None

    # close enough to try improving the parametrization
    if max_err < 4 * error_sq:
        u_prime = u
        for _ in range(MAX_ITERATIONS):
            u_prime = reparameterize(bez, points, u_prime)
            bez = generate_bezier(points, u_prime, left_tangent, right_tangent)
            max_err, split = compute_max_error(points, bez, u_prime)
            if max_err < error_sq:
                return bez, None
    return None, split


def chord_length_parameterize(points):
    dists = np.linalg.norm(points[1:] - points[:-1], axis=1)
    u = np.concatenate([[0.0], np.cumsum(dists)])
    return u / u[-1]


def generate_bezier(points, u, left_tangent, right_tangent):
    """Least squares solution for the inner control points along the fixed
    end tangents."""
    p0, p3 = points[0], points[-1]
    uu = u[:, np.newaxis]
    b0 = (1 - uu) ** 3
    b1 = 3 * uu * (1 - uu) ** 2
    b2 = 3 * uu**2 * (1 - uu)
    b3 = uu**3
    a1 = left_tangent * b1
    a2 = right_tangent * b2

    c = np.array(
        [
            [np.sum(a1 * a1), np.sum(a1 * a2)],
            [np.sum(a1 * a2), np.sum(a2 * a2)],
        ]
    )
    tmp = points - (p0 * (b0 + b1) + p3 * (b2 + b3))
    x = np.array([np.sum(a1 * tmp), np.sum(a2 * tmp)])

    det_c0_c1 = c[0, 0] * c[1, 1] - c[1, 0] * c[0, 1]
    det_c0_x = c[0, 0] * x[1] - c[1, 0] * x[0]
    det_x_c1 = x[0] * c[1, 1] - x[1] * c[0, 1]
    alpha_l = 0.0 if det_c0_c1 == 0 else det_x_c1 / det_c0_c1
    alpha_r = 0.0 if det_c0_c1 == 0 else det_c0_x / det_c0_c1

    seg_length = np.linalg.norm(p0 - p3)
    epsilon = 1.0e-6 * seg_length
    if alpha_l < epsilon or alpha_r < epsilon:
        # degenerate solution, fall back to the heuristic of Wu/Barsky
        alpha_l = alpha_r = seg_length / 3.0

    return np.array(
        [p0, p0 + left_tangent * alpha_l, p3 + right_tangent * alpha_r, p3]
    )


def reparameterize(bez, points, u):
    """One Newton-Raphson step towards the nearest curve parameter of each point."""
    d1 = bezier_derivative_points(bez)
    d2 = bezier_derivative_points(d1)
    q = bezierdc(u, bez)
    q1 = bezierdc(u, d1)
    q2 = bezierdc(u, d2)
    diff = q - points
    numerator = np.sum(diff * q1, axis=1)
    denominator = np.sum(q1 * q1, axis=1) + np.sum(diff * q2, axis=1)
    safe = denominator != 0
    u_new = u.copy()
    u_new[safe] = u[safe] - numerator[safe] / denominator[safe]
    return u_new


def compute_max_error(points, bez, u):
    """Largest squared distance between the points and the curve, and the index
    of the point where it occurs (never an endpoint)."""
    dist_sq = np.sum((bezierdc(u, bez) - points) ** 2, axis=1)
    split = int(np.argmax(dist_sq[1:-1])) + 1
    return float(dist_sq[split]), split
