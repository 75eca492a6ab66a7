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

import functools
import logging
import time
import numpy as np
from gearprofile.defs import *
from gearprofile.function_generators import *
from gearprofile.boolean_ops import BooleanPolygonOperation
from gearprofile.involute_gear import InvoluteGear
from gearprofile.path import CubicBezier, PointPath, Polygon


class RingGear:
    """Class for internal (ring) gear profiles meshing with a pinion.

    The tooth gap of the ring is cut by rolling the pinion tooth inside the ring
    pitch circle and taking the union of all tooth positions, the same way a
    shaping tool would.

    Parameters
    ----------
    pinion : InvoluteGear
        The mating gear, expected without backlash.
    number_of_teeth : int
        Number of teeth of the ring gear.
    backlash : float, optional
        Backlash of the ring gear as length on its pitch circle. Default is 0.
    """

    def __init__(self, pinion: InvoluteGear, number_of_teeth: int, backlash=0.0):
        self.pinion = pinion
        self.number_of_teeth = number_of_teeth
        self.backlash = backlash
        self.pitch_radius = (
            pinion.pitch_radius / pinion.number_of_teeth * self.number_of_teeth
        )

    @property
    def rp(self):
        return self.pitch_radius

    @property
    def pitch_angle(self):
        return 2 * PI / self.number_of_teeth

    def calculate_cut_piece(self) -> Polygon:
        """Union of the pinion tooth rolled through the mesh, ie. the cavity
        between two ring teeth."""
        start = time.time()
        module = self.pinion.module
        pinion_rp = self.pinion.pitch_radius

        tooth_profile = self.pinion.generate_tooth_profile().simplify(module / 400)
        tooth_shape = Polygon.closed(tooth_profile).oriented(True)
        lift_tooth = translation_matrix((self.pitch_radius - pinion_rp, 0))

        limit = pinion_rp * PI * 2 / self.number_of_teeth * 100 / module
        min_reach = self.pitch_radius - self.pinion.dedendum
        masks = []
        for d in np.arange(-limit, limit, 0.05 * module):
            roll = (
                rotation_matrix(-d / self.pitch_radius)
                @ lift_tooth
                @ rotation_matrix(d / pinion_rp)
            )
            mask = tooth_shape.transform(roll)
            if mask.bounds.x_max >= min_reach:
                masks.append(mask)

        if len(masks) == 0:
            return tooth_shape
        cut_piece = functools.reduce(BooleanPolygonOperation.combine, masks)
        logging.info(
            f"Ring gear cut piece of {len(masks)} masks generated in "
            f"{time.time()-start:.5f} seconds"
        )
        return cut_piece

    def calculate_flank(self) -> PointPath:
        """One flank of the ring tooth gap, from the gap center at the x axis up
        to the half-tooth angle."""
        module = self.pinion.module
        cut_piece = self.calculate_cut_piece()

        # start the loop below the x axis, the flank above it stays contiguous
        points = np.roll(
            cut_piece.points, -int(np.argmin(cut_piece.points[:, 1])), axis=0
        )
        # averaging point pairs smooths the corners left by the union
        pair_index = np.arange(0, len(points), 2)
        averaged = (points[pair_index] + points[(pair_index + 1) % len(points)]) / 2

        radii = vector_length(averaged)
        averaged = averaged[(radii > self.pitch_radius - self.pinion.dedendum)]
        averaged = averaged[averaged[:, 1] >= 0]
        # remove ripples, radius must decrease along the flank
        radii = vector_length(averaged)
        ripple_free = np.concatenate([[True], radii[1:] < radii[:-1]])
        path = self.apply_backlash(
            PointPath(averaged[ripple_free]).simplify(0.005 * module)
        )

        # extend to the gap center at the bottom
        sp = path.start
        first_angle = np.arctan2(sp[1], sp[0])
        prefix = arc_points(np.linalg.norm(sp), 0, first_angle, 0.001)

        # extend to the tooth center at the top
        ep = path.end
        last_angle = np.arctan2(ep[1], ep[0])
        suffix = arc_points(
            max(self.pitch_radius - self.pinion.dedendum, np.linalg.norm(ep)),
            last_angle + 0.001,
            PI / self.number_of_teeth,
            0.01,
        )
        return PointPath(np.concatenate([prefix, path.points, suffix]))

    def calculate_tooth(self) -> PointPath:
        flank = self.calculate_flank()
        rev_flank = flank.scale(1, -1).reverse()
        return PointPath.concat(rev_flank, flank)

    def calculate_gear(self) -> CubicBezier:
        """Fit the tooth and repeat it around the ring, closing the loop."""
        tooth_curve = self.calculate_tooth().to_fitted_bezier()
        teeth = [
            tooth_curve.rotate(self.pitch_angle * i).points
            for i in range(self.number_of_teeth)
        ]
        return CubicBezier(np.concatenate(teeth)).close()

    def apply_backlash(self, path: PointPath) -> PointPath:
        """Rotate the flank by the backlash angle, then trim whatever got beyond
        the half-tooth angle."""
        backlash_rotated = path.rotate(self.backlash / self.pitch_radius / 2)
        half_tooth_rotated = backlash_rotated.rotate(-PI / self.number_of_teeth)
        pts = half_tooth_rotated.points
        trimmed = PointPath(pts[pts[:, 1] <= 0])
        return trimmed.rotate(PI / self.number_of_teeth)
