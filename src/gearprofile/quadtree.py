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
from typing import Callable, Generic, List, NamedTuple, Optional, Tuple, TypeVar
from gearprofile.defs import *
from gearprofile.geometry import BoundingBox

T = TypeVar("T")


class QuadTreeItem(NamedTuple):
    data: object
    bounds: BoundingBox


@dataclasses.dataclass
class QuadTreeNode:
    """Node of the quad tree.

    Attributes
    ----------
    bounds : BoundingBox
        Region covered by the node.
    items : list of QuadTreeItem
        Items that are fully inside this node but do not fit into a single child.
    children : tuple of QuadTreeNode or None
        Child quadrants in (nw, ne, sw, se) order, None for leaf nodes.
    """

    bounds: BoundingBox
    items: List[QuadTreeItem] = dataclasses.field(default_factory=list)
    children: Optional[Tuple["QuadTreeNode", ...]] = None

    @property
    def is_leaf(self):
        return self.children is None

    def split(self):
        bb = self.bounds
        xm, ym = (bb.x_min + bb.x_max) / 2, (bb.y_min + bb.y_max) / 2
        self.children = (
            QuadTreeNode(BoundingBox((bb.x_min, ym), (xm, bb.y_max))),  # nw
            QuadTreeNode(BoundingBox((xm, ym), (bb.x_max, bb.y_max))),  # ne
            QuadTreeNode(BoundingBox((bb.x_min, bb.y_min), (xm, ym))),  # sw
            QuadTreeNode(BoundingBox((xm, bb.y_min), (bb.x_max, ym))),  # se
        )
        items_to_keep = []
        for item in self.items:
            child = self.child_for(item.bounds)
            if child is not None:
                child.items.append(item)
            else:
                items_to_keep.append(item)
        self.items = items_to_keep

    def child_for(self, bounds: BoundingBox) -> Optional["QuadTreeNode"]:
        """Child node that can accommodate the given bounds entirely.

        Returns None for leaf nodes and for bounds touching or straddling
        a mid axis."""
        if self.children is None:
            return None
        bb = self.bounds
        xm, ym = (bb.x_min + bb.x_max) / 2, (bb.y_min + bb.y_max) / 2
        nw, ne, sw, se = self.children
        if bounds.x_max < xm:
            if bounds.y_min > ym:
                return nw
            elif bounds.y_max < ym:
                return sw
        elif bounds.x_min > xm:
            if bounds.y_min > ym:
                return ne
            elif bounds.y_max < ym:
                return se
        return None


class QuadTree(Generic[T]):
    """
    Quad tree for finding data items with overlapping rectangular bounds.

    The tree does not own any geometry, it stores opaque data along with a
    bounding box. Queries prune by bounding boxes only, the caller has to check
    the exact geometric predicate of the matches.

    Parameters
    ----------
    bounds : BoundingBox
        Region of the root node.
    capacity : int, optional
        Number of items a node holds before it is split into 4 quadrants.
        Default is 20.
    """

    def __init__(self, bounds: BoundingBox, capacity: int = QUADTREE_CAPACITY):
        self.capacity = capacity
        self.root = QuadTreeNode(bounds)

    def add(self, data: T, bounds: BoundingBox):
        self._insert(self.root, QuadTreeItem(data, bounds))

    def _insert(self, node: QuadTreeNode, item: QuadTreeItem):
        while True:
            if len(node.items) >= self.capacity and node.is_leaf:
                node.split()
            child = node.child_for(item.bounds)
            if child is None:
                node.items.append(item)
                return
            node = child

    def size(self) -> int:
        return self._size(self.root)

    def __len__(self):
        return self.size()

    def _size(self, node: QuadTreeNode) -> int:
        if node.is_leaf:
            return len(node.items)
        return len(node.items) + sum(self._size(child) for child in node.children)

    def for_each_match(self, bounds: BoundingBox, callback: Callable[[T], None]):
        """Call callback with every data item whose bounds overlap the given bounds."""
        self._for_each_match(self.root, bounds, callback)

    def _for_each_match(self, node: QuadTreeNode, bounds: BoundingBox, callback):
        for item in node.items:
            if bounds.overlaps(item.bounds):
                callback(item.data)
        if not node.is_leaf:
            child = node.child_for(bounds)
            if child is not None:
                self._for_each_match(child, bounds, callback)
            else:
                for child in node.children:
                    self._for_each_match(child, bounds, callback)

    def find_matches(self, bounds: BoundingBox) -> List[T]:
        result = []
        self.for_each_match(bounds, result.append)
        return result

    def for_each_matching_pair(self, callback: Callable[[T, T], None]):
        """Call callback once with every (unordered) pair of data items having
        overlapping bounds."""
        self._for_each_matching_pair(self.root, callback)

    def _for_each_matching_pair(self, node: QuadTreeNode, callback):
        items = node.items
        for index, item in enumerate(items):
            # pairs on the same level
            for other in items[index + 1 :]:
                if other.bounds.overlaps(item.bounds):
                    callback(item.data, other.data)
            # pairs with items further down
            if not node.is_leaf:
                for child in node.children:
                    if child.bounds.overlaps(item.bounds):
                        self._for_each_match(
                            child,
                            item.bounds,
                            lambda data2, data1=item.data: callback(data1, data2),
                        )
        if not node.is_leaf:
            for child in node.children:
                self._for_each_matching_pair(child, callback)
