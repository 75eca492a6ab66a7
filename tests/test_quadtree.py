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

import itertools
import numpy as np
import pytest as pytest
from gearprofile.geometry import BoundingBox
from gearprofile.quadtree import QuadTree


def random_boxes(n, seed, size=100, max_width=10):
    rng = np.random.default_rng(seed)
    corners = rng.uniform(0, size - max_width, (n, 2))
    widths = rng.uniform(0.01, max_width, (n, 2))
    return [BoundingBox(c, c + w) for c, w in zip(corners, widths)]


def build_tree(boxes, capacity):
    qt = QuadTree(BoundingBox((0, 0), (100, 100)), capacity=capacity)
    for index, bb in enumerate(boxes):
        qt.add(index, bb)
    return qt


@pytest.mark.parametrize("capacity", [1, 4, 20])
@pytest.mark.parametrize("seed", [0, 1, 2])
def test_for_each_match(capacity, seed):
    """
    Queries must report exactly the items a brute force search finds,
    in particular no overlapping item may be missed.
    """
    boxes = random_boxes(300, seed)
    qt = build_tree(boxes, capacity)
    queries = random_boxes(50, seed + 100, max_width=30)
    for query in queries:
        found = []
        qt.for_each_match(query, found.append)
        expected = [i for i, bb in enumerate(boxes) if query.overlaps(bb)]
        assert sorted(found) == expected
        assert sorted(qt.find_matches(query)) == expected


@pytest.mark.parametrize("capacity", [1, 4, 20])
@pytest.mark.parametrize("seed", [3, 4])
def test_for_each_matching_pair(capacity, seed):
    """Every overlapping pair is reported, and only once."""
    boxes = random_boxes(200, seed)
    qt = build_tree(boxes, capacity)
    found = []
    qt.for_each_matching_pair(lambda a, b: found.append(frozenset((a, b))))
    expected = {
        frozenset((i, j))
        for i, j in itertools.combinations(range(len(boxes)), 2)
        if boxes[i].overlaps(boxes[j])
    }
    assert len(found) == len(set(found))
    assert set(found) == expected


def test_size():
    boxes = random_boxes(123, 5)
    qt = build_tree(boxes, 4)
    assert qt.size() == 123
    assert len(qt) == 123
    assert len(build_tree([], 4)) == 0


def test_straddling_item_stays_on_parent():
    qt = QuadTree(BoundingBox((0, 0), (10, 10)), capacity=1)
    qt.add("a", BoundingBox((1, 1), (2, 2)))
    qt.add("b", BoundingBox((4, 4), (6, 6)))
    assert not qt.root.is_leaf
    assert [item.data for item in qt.root.items] == ["b"]
    nw, ne, sw, se = qt.root.children
    assert [item.data for item in sw.items] == ["a"]
    assert nw.items == [] and ne.items == [] and se.items == []


def test_touching_boxes_do_not_match():
    qt = QuadTree(BoundingBox((0, 0), (10, 10)))
    qt.add(0, BoundingBox((0, 0), (1, 1)))
    qt.add(1, BoundingBox((1, 0), (2, 1)))
    assert qt.find_matches(BoundingBox((2, 0), (3, 1))) == []
    pairs = []
    qt.for_each_matching_pair(lambda a, b: pairs.append((a, b)))
    assert pairs == []
