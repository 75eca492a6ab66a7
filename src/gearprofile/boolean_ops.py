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
import functools
import logging
from typing import List, Tuple
import numpy as np
from gearprofile.geometry import BoundingBox, Line
from gearprofile.path import Polygon
from gearprofile.quadtree import QuadTree


@dataclasses.dataclass
class LinkedSeg:
    """Line segment record of the segment arena.

    Attributes
    ----------
    line : Line
        The segment.
    next : int
        Arena index of the successor segment.
    taken : bool
        Set when the segment has been collected into a result loop.
    crossings : list of int
        Indices of the crossings lying on this segment.
    """

    line: Line
    next: int
    taken: bool = False
    crossings: List[int] = dataclasses.field(default_factory=list)


@dataclasses.dataclass
class SegCrossing:
    """Crossing of a segment of polygon A with a segment of polygon B.
    Segments are referred to by arena index, t values are measured along the
    original (unsplit) segments."""

    seg_a: int
    seg_b: int
    t_a: float
    t_b: float
    p: np.ndarray

    def t_of(self, seg: int) -> float:
        return self.t_a if seg == self.seg_a else self.t_b


class BooleanPolygonOperation:
    """
    Boolean combination of two polygons by splicing their boundaries at the
    crossing points.

    Counter-clockwise operands are added, clockwise ones are subtracted.
    Only the resulting loop with the largest signed area is returned, holes and
    secondary loops are dropped.
    """

    def __init__(self, poly_a: Polygon, poly_b: Polygon):
        self.poly_a = poly_a
        self.poly_b = poly_b
        self.segs: List[LinkedSeg] = []
        self.crossings: List[SegCrossing] = []
        self.a_segs = self._link(poly_a)
        self.b_segs = self._link(poly_b)

    @staticmethod
    def combine(poly_a: Polygon, poly_b: Polygon) -> Polygon:
        return BooleanPolygonOperation(poly_a, poly_b).run()

    def run(self) -> Polygon:
        self.find_crossings()
        for index in range(len(self.crossings)):
            self.splice(index)
        shapes = self.collect_loops()
        logging.debug(
            f"Polygon combine: {len(self.crossings)} crossings, "
            f"{len(shapes)} candidate loops"
        )
        # on equal area the later loop wins
        return functools.reduce(lambda s1, s2: s1 if s1.area > s2.area else s2, shapes)

    def _link(self, poly: Polygon) -> range:
        """Append the segments of a polygon to the arena as a circular chain."""
        offset = len(self.segs)
        lines = poly.lines
        for k, line in enumerate(lines):
            self.segs.append(LinkedSeg(line=line, next=offset + (k + 1) % len(lines)))
        return range(offset, len(self.segs))

    def find_crossings(self):
        qt = QuadTree(
            BoundingBox.merge([self.poly_a.bounds, self.poly_b.bounds]), capacity=2
        )
        for ia in self.a_segs:
            qt.add(ia, self.segs[ia].line.bounds)

        for ib in self.b_segs:
            b_line = self.segs[ib].line
            for ia in qt.find_matches(b_line.bounds):
                a_line = self.segs[ia].line
                isect = Line.line2line(
                    (a_line.start, a_line.end), (b_line.start, b_line.end)
                )
                if isect is not None and isect.in_range:
                    self.crossings.append(
                        SegCrossing(
                            seg_a=ia, seg_b=ib, t_a=isect.t1, t_b=isect.t2, p=isect.p
                        )
                    )
                    k = len(self.crossings) - 1
                    self.segs[ia].crossings.append(k)
                    self.segs[ib].crossings.append(k)

    def split(self, seg_index: int, crossing_index: int) -> Tuple[int, int]:
        """Split a segment at a crossing point.

        The segment itself becomes the left part, the right part is appended to
        the arena with the original successor. Remaining crossings are
        distributed by their t value."""
        seg = self.segs[seg_index]
        crossing = self.crossings[crossing_index]
        t = crossing.t_of(seg_index)
        left_crossings = [
            c for c in seg.crossings if self.crossings[c].t_of(seg_index) < t
        ]
        right_crossings = [
            c for c in seg.crossings if self.crossings[c].t_of(seg_index) > t
        ]
        right_index = len(self.segs)
        self.segs.append(
            LinkedSeg(
                line=Line(crossing.p, seg.line.end),
                next=seg.next,
                taken=seg.taken,
                crossings=right_crossings,
            )
        )
        seg.line = Line(seg.line.start, crossing.p)
        seg.crossings = left_crossings

        for c in right_crossings:
            other = self.crossings[c]
            if other.seg_a == seg_index:
                other.seg_a = right_index
            else:
                other.seg_b = right_index
        return seg_index, right_index

    def splice(self, crossing_index: int):
        """Split both segments of a crossing and swap their successors."""
        crossing = self.crossings[crossing_index]
        a1, a2 = self.split(crossing.seg_a, crossing_index)
        b1, b2 = self.split(crossing.seg_b, crossing_index)
        self.segs[a1].next = b2
        self.segs[b1].next = a2

    def collect_loops(self) -> List[Polygon]:
        shapes = []
        for start in range(len(self.segs)):
            current = []
            index = start
            while not self.segs[index].taken:
                self.segs[index].taken = True
                current.append(self.segs[index].line)
                index = self.segs[index].next
            # a single segment can not form a polygon
            if len(current) > 1:
                shapes.append(Polygon.from_lines(current))
        return shapes
