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

import dataclasses
from typing import List, Optional, Tuple
import numpy as np
from gearprofile.defs import *


class BoundingBox:
    """Axis aligned rectangle in the x-y plane.

    Coordinates are kept as plain floats, the overlap test runs in the inner loop
    of every spatial query.

    Parameters
    ----------
    min : np.ndarray
        Lower left corner.
    max : np.ndarray
        Upper right corner.

    Raises
    ------
    ValueError
        If min is greater than max along any axis.
    """

    __slots__ = ("x_min", "y_min", "x_max", "y_max")

    def __init__(self, min, max):
        self.x_min, self.y_min = float(min[0]), float(min[1])
        self.x_max, self.y_max = float(max[0]), float(max[1])
        if self.x_min > self.x_max or self.y_min > self.y_max:
            raise ValueError(
                f"Bounding box min {tuple(min)} is greater than max {tuple(max)}"
            )

    @property
    def min(self):
        return np.array((self.x_min, self.y_min))

    @property
    def max(self):
        return np.array((self.x_max, self.y_max))

    @property
    def mid(self):
        return (self.min + self.max) / 2

    def overlaps(self, other: "BoundingBox") -> bool:
        # touching edges do not count as overlap
        return _ranges_overlap(
            self.x_min, self.x_max, other.x_min, other.x_max
        ) and _ranges_overlap(self.y_min, self.y_max, other.y_min, other.y_max)

    @staticmethod
    def merge(boxes: List["BoundingBox"]) -> Optional["BoundingBox"]:
        if len(boxes) == 0:
            return None
        return BoundingBox(
            (min(bb.x_min for bb in boxes), min(bb.y_min for bb in boxes)),
            (max(bb.x_max for bb in boxes), max(bb.y_max for bb in boxes)),
        )

    @staticmethod
    def from_points(p1, p2) -> "BoundingBox":
        return BoundingBox(
            (min(p1[0], p2[0]), min(p1[1], p2[1])),
            (max(p1[0], p2[0]), max(p1[1], p2[1])),
        )

    def __repr__(self):
        return (
            f"BoundingBox(min=({self.x_min}, {self.y_min}), "
            f"max=({self.x_max}, {self.y_max}))"
        )


def _ranges_overlap(r1_min, r1_max, r2_min, r2_max):
    return not (r1_max <= r2_min or r2_max <= r1_min)


@dataclasses.dataclass(frozen=True)
class LineSegIntersection:
    """Data class for the crossing of two (infinite) lines.

    Attributes
    ----------
    in_range : bool
        True if the crossing is strictly between the endpoints of both segments.
    t1 : float
        Parameter of the crossing along the first segment.
    t2 : float
        Parameter of the crossing along the second segment.
    p : np.ndarray
        The crossing point.
    """

    in_range: bool
    t1: float
    t2: float
    p: np.ndarray


class Line:
    """Line segment in the x-y plane."""

    __slots__ = ("start", "end", "_bounds")

    def __init__(self, start, end):
        self.start = np.asarray(start, dtype=float)
        self.end = np.asarray(end, dtype=float)
        self._bounds = None

    @property
    def bounds(self) -> BoundingBox:
        if self._bounds is None:
            self._bounds = BoundingBox.from_points(self.start, self.end)
        return self._bounds

    @property
    def length(self):
        return np.linalg.norm(self.end - self.start)

    def __repr__(self):
        return f"Line(start={self.start.tolist()}, end={self.end.tolist()})"

    @staticmethod
    def line_equation(p1, p2) -> Tuple[float, float, float]:
        """Coefficients (a, b, c) of the line ax+by+c=0 through p1 and p2."""
        return (
            p1[1] - p2[1],
            p2[0] - p1[0],
            p1[0] * p2[1] - p1[1] * p2[0],
        )

    @staticmethod
    def point_to_line(p, a, b, c) -> np.ndarray:
        """Foot of the normal from p onto the line ax+by+c=0."""
        x, y = p[0], p[1]
        den = a * a + b * b
        return np.array(
            ((b * (b * x - a * y) - a * c) / den, (a * (-b * x + a * y) - b * c) / den)
        )

    @staticmethod
    def point_to_segment_dist(point, start, end) -> float:
        """
        Shortest distance between a point and a line segment.

        If the normal from the point falls outside the segment, the distance to the
        closest endpoint is returned.
        """
        if start[0] == end[0] and start[1] == end[1]:
            return float(np.linalg.norm(point - start))
        a, b, c = Line.line_equation(start, end)
        q = Line.point_to_line(point, a, b, c)
        if abs(start[0] - end[0]) > 1e-8:
            t = (q[0] - start[0]) / (end[0] - start[0])
        else:
            t = (q[1] - start[1]) / (end[1] - start[1])
        if t <= 0:
            return float(np.linalg.norm(point - start))
        elif t >= 1:
            return float(np.linalg.norm(point - end))
        else:
            return float(np.linalg.norm(point - q))

    @staticmethod
    def line2line(seg1, seg2) -> Optional[LineSegIntersection]:
        """
        Find the crossing point of two line segments.

        Parameters
        ----------
        seg1, seg2 : tuple of points
            Segments given by their (start, end) points.

        Returns
        -------
        LineSegIntersection or None
            None if the segments are parallel (or collinear). Endpoint touches are
            not in range, only crossings strictly inside both segments are.
        """
        (ax, ay), (bx, by) = seg1
        (cx, cy), (dx, dy) = seg2
        d1x, d1y = bx - ax, by - ay
        d2x, d2y = dx - cx, dy - cy
        det = d1x * d2y - d1y * d2x
        if abs(det) < LINE_EPSILON:
            return None
        t1 = (d2y * (cx - ax) - d2x * (cy - ay)) / det
        t2 = (d1y * (cx - ax) - d1x * (cy - ay)) / det
        return LineSegIntersection(
            in_range=bool(0 < t1 < 1 and 0 < t2 < 1),
            t1=float(t1),
            t2=float(t2),
            p=np.array((ax + d1x * t1, ay + d1y * t1)),
        )

    @staticmethod
    def points_to_segment_dist(points: np.ndarray, start, end) -> np.ndarray:
        """Array version of point_to_segment_dist for points of shape (N,2)."""
        points = np.asarray(points, dtype=float)
        start = np.asarray(start, dtype=float)
        end = np.asarray(end, dtype=float)
        d = end - start
        len_sq = np.dot(d, d)
        if len_sq == 0:
            return np.linalg.norm(points - start, axis=1)
        t = np.clip((points - start) @ d / len_sq, 0, 1)
        return np.linalg.norm(points - (start + t[:, np.newaxis] * d), axis=1)
