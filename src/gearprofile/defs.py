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

DEG2RAD = np.pi / 180
RAD2DEG = 180 / np.pi
PI = np.pi

# numerical differentiation global 'small step'
# Below this determinant two segments are treated as parallel
LINE_EPSILON = 1e-9

# Default number of items a quad tree node holds before it splits
QUADTREE_CAPACITY = 20

# Default maximum deviation of fitted Bezier curves from their point paths
FIT_TOLERANCE = 1e-3

# Dimension and shape conventions
# Everything is planar: vectors are row vectors of shape (2),
# point lists are arrays of shape (N,2).
VSHAPE = 2
# Transformation Matrices: homogeneous 3x3, numpy shape (3,3)

# Geometry: directions
ORIGIN = np.array((0.0, 0.0))
"""The center of the coordinate system."""
UP = np.array((0.0, 1.0))
"""One unit step in the positive Y direction."""
DOWN = np.array((0.0, -1.0))
"""One unit step in the negative Y direction."""
RIGHT = np.array((1.0, 0.0))
"""One unit step in the positive X direction."""
LEFT = np.array((-1.0, 0.0))
"""One unit step in the negative X direction."""
