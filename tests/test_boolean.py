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
import pytest as pytest
import shapely as shp
from gearprofile.defs import *
from gearprofile.boolean_ops import BooleanPolygonOperation
from gearprofile.function_generators import arc_points
from gearprofile.path import Polygon


def square(x0, y0, x1, y1):
    return Polygon([(x0, y0), (x1, y0), (x1, y1), (x0, y1)])


def test_union_of_overlapping_squares():
    a = square(0, 0, 2, 2)
    b = square(1, 1, 3, 3)
    result = BooleanPolygonOperation.combine(a, b)
    assert result.area == pytest.approx(7)
    assert result.is_ccw
    assert len(result) == 8
    union = shp.geometry.Polygon(a.points).union(shp.geometry.Polygon(b.points))
    assert result.area == pytest.approx(union.area)


def test_clockwise_operand_is_subtracted():
    a = square(0, 0, 4, 4)
    b = square(2, 1, 6, 3).oriented(False)
    result = BooleanPolygonOperation.combine(a, b)
    assert result.area == pytest.approx(12)
    diff = shp.geometry.Polygon(a.points).difference(shp.geometry.Polygon(b.points))
    assert result.area == pytest.approx(diff.area)


def test_combine_with_itself():
    a = square(0, 0, 2, 1)
    result = BooleanPolygonOperation.combine(a, a)
    assert result.area == pytest.approx(a.area)


@pytest.mark.parametrize("swap", [False, True])
def test_disjoint_keeps_larger(swap):
    small = square(0, 0, 1, 1)
    large = square(10, 10, 12, 12)
    a, b = (large, small) if swap else (small, large)
    result = BooleanPolygonOperation.combine(a, b)
    assert result.area == pytest.approx(4)
    assert result.bounds.min == pytest.approx(np.array([10, 10]))


def test_contained_keeps_outer():
    outer = square(0, 0, 10, 10)
    inner = square(2, 2, 3, 3)
    assert BooleanPolygonOperation.combine(outer, inner).area == pytest.approx(100)
    assert BooleanPolygonOperation.combine(inner, outer).area == pytest.approx(100)


def test_crossings_are_found():
    op = BooleanPolygonOperation(square(0, 0, 2, 2), square(1, 1, 3, 3))
    op.find_crossings()
    points = sorted(tuple(np.round(c.p, 9)) for c in op.crossings)
    assert points == [(1, 2), (2, 1)]
    for c in op.crossings:
        assert c.t_a == pytest.approx(0.5)
        assert c.t_b == pytest.approx(0.5)


def test_split_distributes_crossings():
    # a single long edge of a crossed by two edges of b
    op = BooleanPolygonOperation(square(0, 0, 4, 4), square(2, 1, 6, 3))
    op.find_crossings()
    assert len(op.crossings) == 2
    seg = op.crossings[0].seg_a
    assert sorted(op.segs[seg].crossings) == [0, 1]
    t0 = op.crossings[0].t_a
    left, right = op.split(seg, 0)
    assert op.segs[left].line.end == pytest.approx(op.crossings[0].p)
    assert op.segs[right].line.start == pytest.approx(op.crossings[0].p)
    other = op.crossings[1]
    if other.t_a < t0:
        assert op.segs[left].crossings == [1]
        assert other.seg_a == left
    else:
        assert op.segs[right].crossings == [1]
        assert other.seg_a == right


@pytest.mark.parametrize("offset", [(1, 0.3), (0.5, -0.7), (-1.2, 0.1)])
def test_union_of_circles(offset, enable_plotting=False):
    """Polygon union compared against shapely."""
    circle = Polygon(arc_points(1, 0, 2 * PI - 0.01, 2 * PI / 64))
    other = circle.scale(1.3).translate(offset)
    result = BooleanPolygonOperation.combine(circle, other)

    if enable_plotting:
        import matplotlib.pyplot as plt

        ax = plt.axes()
        ax.plot(result.points[:, 0], result.points[:, 1], marker=".")
        ax.axis("equal")
        plt.show()

    union = shp.geometry.Polygon(circle.points).union(
        shp.geometry.Polygon(other.points)
    )
    assert result.area == pytest.approx(union.area, rel=1e-9)


def test_combine_chain_of_shifted_shapes():
    """Reducing many overlapping shapes gives their union, as used for cutting."""
    base = Polygon(arc_points(1, 0, 2 * PI - 0.01, 2 * PI / 40))
    shapes = [base.translate((0.1 * k, 0.05 * k)) for k in range(20)]
    result = shapes[0]
    for shape in shapes[1:]:
        result = BooleanPolygonOperation.combine(result, shape)
    union = shp.unary_union([shp.geometry.Polygon(s.points) for s in shapes])
    assert result.area == pytest.approx(union.area, rel=1e-9)
