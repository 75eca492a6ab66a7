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

from typing import List, NamedTuple, Sequence, Union
import numpy as np
from gearprofile.defs import *
from gearprofile.function_generators import *
from gearprofile.geometry import BoundingBox, Line
import gearprofile.curve_fit as cfit


class PointPath:
    """
    An ordered sequence of points in the x-y plane, eg. a polyline.

    Point paths are values: transformations return new objects and the stored
    point array is read-only.

    Parameters
    ----------
    points : array-like
        Points of the path, shape (N,2).

    Raises
    ------
    ValueError
        If there are less than 2 points.
    """

    def __init__(self, points):
        points = np.array(points, dtype=float).reshape(-1, VSHAPE)
        if len(points) < 2:
            raise ValueError(
                f"{self.__class__.__name__} needs at least two points, "
                f"got {len(points)}"
            )
        points.flags.writeable = False
        self._points = points
        self._lines = None
        self._bounds = None

    @property
    def points(self) -> np.ndarray:
        return self._points

    @property
    def start(self) -> np.ndarray:
        return self._points[0]

    @property
    def end(self) -> np.ndarray:
        return self._points[-1]

    def __len__(self):
        return len(self._points)

    @property
    def lines(self) -> List[Line]:
        if self._lines is None:
            self._lines = [
                Line(p0, p1) for p0, p1 in zip(self._points[:-1], self._points[1:])
            ]
        return list(self._lines)

    @property
    def bounds(self) -> BoundingBox:
        if self._bounds is None:
            self._bounds = BoundingBox(
                np.min(self._points, axis=0), np.max(self._points, axis=0)
            )
        return self._bounds

    def transform(self, matrix: np.ndarray):
        """Return a copy transformed by a homogeneous 3x3 matrix."""
        return self.__class__(apply_transform(self._points, matrix))

    def rotate(self, angle):
        return self.transform(rotation_matrix(angle))

    def translate(self, v):
        return self.transform(translation_matrix(v))

    def scale(self, sx, sy=None):
        return self.transform(scale_matrix(sx, sy))

    def reverse(self):
        return self.__class__(self._points[::-1])

    @staticmethod
    def concat(a: "PointPath", b: "PointPath") -> "PointPath":
        return PointPath(np.concatenate([a.points, b.points]))

    def to_fitted_bezier(self, tolerance: float = FIT_TOLERANCE) -> "CubicBezier":
        """
        Approximate the path with a chain of cubic Bezier segments.

        Parameters
        ----------
        tolerance : float, optional
            Maximum distance of the path points from the fitted curve.
        """
        return CubicBezier(cfit.fit_curve(self._points, tolerance))

    def simplify(self, tolerance: float) -> "PointPath":
        """Ramer-Douglas-Peucker simplification, keeps first and last point."""
        return self.__class__(self._points[rdp_mask(self._points, tolerance)])


def rdp_mask(points: np.ndarray, tolerance: float) -> np.ndarray:
    """Boolean mask of the points kept by the Ramer-Douglas-Peucker algorithm."""
    keep = np.zeros(len(points), dtype=bool)
    keep[0] = keep[-1] = True
    spans = [(0, len(points) - 1)]
    while spans:
        i0, i1 = spans.pop()
        if i1 - i0 < 2:
            continue
        dists = Line.points_to_segment_dist(
            points[i0 + 1 : i1], points[i0], points[i1]
        )
        # argmax picks the first of equal maximums
        imax = int(np.argmax(dists))
        if dists[imax] > tolerance:
            imid = i0 + 1 + imax
            keep[imid] = True
            spans.append((imid, i1))
            spans.append((i0, imid))
    return keep


class Polygon(PointPath):
    """
    A closed path of points, the last point connects back to the first.

    Positive area means counter-clockwise orientation.
    """

    def __init__(self, points):
        super().__init__(points)
        self._area = None

    @staticmethod
    def closed(path: PointPath) -> "Polygon":
        return Polygon(path.points)

    @staticmethod
    def from_lines(lines: Sequence[Line]) -> "Polygon":
        return Polygon([line.start for line in lines])

    @property
    def lines(self) -> List[Line]:
        return super().lines + [Line(self.end, self.start)]

    @property
    def area(self) -> float:
        """Signed area (shoelace formula)."""
        if self._area is None:
            p = self._points
            self._area = float(np.sum(cross2d(p, np.roll(p, -1, axis=0))) / 2)
        return self._area

    @property
    def is_ccw(self) -> bool:
        return self.area > 0

    def oriented(self, ccw: bool) -> "Polygon":
        return self if ccw == (self.area > 0) else self.reverse()


class CubicBezierSegment(NamedTuple):
    c1: np.ndarray
    c2: np.ndarray
    c3: np.ndarray
    c4: np.ndarray


class CubicBezier:
    """
    A path of cubic Bezier segments.

    Segments are connected: the end point of each segment and the start point of
    the next one are replaced by their average at construction.

    Parameters
    ----------
    segments : list of CubicBezierSegment or array-like
        Segments given by 4 control points each, total shape (N,4,2).
    """

    def __init__(
        self, segments: Union[Sequence[CubicBezierSegment], Sequence[np.ndarray]]
    ):
        ctrl = np.array(segments, dtype=float).reshape(-1, 4, VSHAPE)
        if len(ctrl) > 1:
            mid = (ctrl[:-1, 3] + ctrl[1:, 0]) / 2
            ctrl[:-1, 3] = mid
            ctrl[1:, 0] = mid
        ctrl.flags.writeable = False
        self._ctrl = ctrl

    @property
    def points(self) -> np.ndarray:
        """Control points, shape (N,4,2)."""
        return self._ctrl

    @property
    def segments(self) -> List[CubicBezierSegment]:
        return [CubicBezierSegment(*seg) for seg in self._ctrl]

    def __len__(self):
        return len(self._ctrl)

    def close(self) -> "CubicBezier":
        """Return a copy with the end of the last segment joined to the start
        of the first."""
        if len(self._ctrl) == 0:
            raise ValueError("Cannot close a CubicBezier without segments")
        ctrl = self._ctrl.copy()
        mid = (ctrl[-1, 3] + ctrl[0, 0]) / 2
        ctrl[0, 0] = mid
        ctrl[-1, 3] = mid
        return CubicBezier(ctrl)

    @property
    def is_closed(self) -> bool:
        return len(self._ctrl) > 0 and np.array_equal(
            self._ctrl[0, 0], self._ctrl[-1, 3]
        )

    def transform(self, matrix: np.ndarray) -> "CubicBezier":
        return CubicBezier(apply_transform(self._ctrl, matrix))

    def rotate(self, angle) -> "CubicBezier":
        return self.transform(rotation_matrix(angle))

    def evaluate(self, n_points: int = 10) -> np.ndarray:
        """Sample each segment at n_points evenly spaced parameters
        (end of each segment excluded, end of the last one included)."""
        if len(self._ctrl) == 0:
            return np.zeros((0, VSHAPE))
        t = np.linspace(0, 1, n_points, endpoint=False)
        samples = [bezierdc(t, seg) for seg in self._ctrl]
        samples.append(self._ctrl[-1, 3][np.newaxis, :])
        return np.concatenate(samples)
