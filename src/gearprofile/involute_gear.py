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

from typing import List
import numpy as np
from gearprofile.defs import *
from gearprofile.function_generators import *
from gearprofile.base_classes import InvoluteGearParam, GearDimensions
from gearprofile.geometry import BoundingBox, Line
from gearprofile.path import PointPath, CubicBezier
from gearprofile.quadtree import QuadTree


class InvoluteGear:
    """Class for external involute spur gear profiles.

    Parameters
    ----------
    number_of_teeth: int
        Number of teeth of the gear. Default is 20.
    module: float, optional
        Module of the gear. Default is 2.0.
    pressure_angle: float, optional
        Pressure angle in degrees. Default is 20.
    addendum_coefficient: float, optional
        Addendum height coefficient. Default is 1.0.
    dedendum_coefficient: float, optional
        Dedendum height coefficient. Default is 1.25.
    backlash: float, optional
        Backlash as length on the pitch circle. Default is 0.
    shaft_diameter: float, optional
        Shaft hole diameter, reported in the dimensions. Default is 8.

    Notes
    -----
    The tooth profile is traced as point paths: the root fillet by rolling the
    corner of the generating rack around the pitch circle, the flank as the
    involute of the base circle. The two are merged at their outermost crossing.
    The whole gear is the fitted Bezier curve of one tooth repeated around the
    center, the result is closed only by symmetry.
    """

    def __init__(
        self,
        number_of_teeth: int = 20,
        module: float = 2.0,
        pressure_angle: float = 20.0,
        addendum_coefficient: float = 1.0,
        dedendum_coefficient: float = 1.25,
        backlash: float = 0.0,
        shaft_diameter: float = 8.0,
    ):
        self.inputparam = InvoluteGearParam(
            number_of_teeth=number_of_teeth,
            module=module,
            pressure_angle=pressure_angle,
            addendum_coefficient=addendum_coefficient,
            dedendum_coefficient=dedendum_coefficient,
            backlash=backlash,
            shaft_diameter=shaft_diameter,
        )
        self.calc_params()

    @classmethod
    def from_param(cls, param: InvoluteGearParam):
        return cls(
            number_of_teeth=param.number_of_teeth,
            module=param.module,
            pressure_angle=param.pressure_angle,
            addendum_coefficient=param.addendum_coefficient,
            dedendum_coefficient=param.dedendum_coefficient,
            backlash=param.backlash,
            shaft_diameter=param.shaft_diameter,
        )

    def calc_params(self):
        p = self.inputparam
        self.pitch_radius = p.module * p.number_of_teeth / 2
        self.base_radius = self.pitch_radius * np.cos(p.pressure_angle * DEG2RAD)
        self.outside_radius = self.pitch_radius + p.addendum_coefficient * p.module
        self.root_radius = self.pitch_radius - p.dedendum_coefficient * p.module

    @property
    def number_of_teeth(self):
        return self.inputparam.number_of_teeth

    @property
    def module(self):
        return self.inputparam.module

    @property
    def backlash(self):
        return self.inputparam.backlash

    @property
    def alpha(self):
        """Pressure angle in radians."""
        return self.inputparam.pressure_angle * DEG2RAD

    @property
    def rp(self):
        return self.pitch_radius

    @property
    def pitch_angle(self):
        return 2 * PI / self.number_of_teeth

    @property
    def dedendum(self):
        return self.module * self.inputparam.dedendum_coefficient

    @property
    def dimensions(self) -> GearDimensions:
        return GearDimensions(
            pitch_radius=self.pitch_radius,
            base_radius=self.base_radius,
            outside_radius=self.outside_radius,
            root_radius=self.root_radius,
            module=self.module,
            number_of_teeth=self.number_of_teeth,
            shaft_diameter=self.inputparam.shaft_diameter,
        )

    def trace_fillet(self) -> PointPath:
        """Trace one side of the root fillet.

        The corner of the mating rack tooth is rolled along the pitch circle. The
        trace is cut at its first turning point (closest approach to the center),
        which is where the usable fillet starts.
        """
        m = self.module
        rp = self.pitch_radius
        tooth_width = m * PI / 2
        m_down = self.dedendum
        # corner of the mating rack tooth
        te = np.array((rp - m_down, tooth_width / 2 - m_down * np.tan(self.alpha)))

        limit = tooth_width * 3
        shifts = np.linspace(limit, -limit, 601)
        x = te[0]
        y = te[1] - shifts
        angles = shifts / rp
        trace = np.stack(
            [
                x * np.cos(angles) - y * np.sin(angles),
                x * np.sin(angles) + y * np.cos(angles),
            ],
            axis=1,
        )

        radii = vector_length(trace)
        turning = np.nonzero(radii[:-1] < radii[1:])[0]
        if len(turning) > 0:
            trace = trace[turning[0] :]
        return PointPath(trace)

    def trace_involute(self) -> PointPath:
        """Trace one side of the involute flank, from the root (or base) circle
        towards the outside circle."""
        m = self.module
        z = self.number_of_teeth
        a = self.alpha
        rb = self.base_radius
        tooth_thickness_at_base = m * np.cos(a) / 2 * (PI + 2 * z * involute(a))
        base_sector_dist = rb * 2 * PI / z
        half_gap_dist = (base_sector_dist - tooth_thickness_at_base) / 2
        involute_start_angle = half_gap_dist / rb

        inv_angles = np.arange(0, 2 * PI / 5, 0.01 / z)
        angles = involute_start_angle + involute(inv_angles)
        radii = rb / np.cos(inv_angles)
        stop = (angles > PI * z) | (radii > self.outside_radius)
        if np.any(stop):
            n = int(np.argmax(stop))
            angles, radii = angles[:n], radii[:n]
        traced = polar_to_xy(radii, angles)

        rr = self.root_radius
        crossing = np.nonzero((radii[:-1] < rr) & (radii[1:] > rr))[0]
        if len(crossing) > 0:
            # the trace starts inside the root circle, cut it at the crossing
            k = crossing[0]
            s, e = traced[k], traced[k + 1]
            adj_start = s + (e - s) * (rr - radii[k]) / (radii[k + 1] - radii[k])
            return PointPath(np.concatenate([adj_start[np.newaxis, :], traced[k + 1 :]]))
        else:
            return PointPath(traced[radii >= rr])

    def merge_curves(self, fillet: PointPath, involute_path: PointPath) -> PointPath:
        """
        Join the fillet and the involute at their crossing farthest from the center.

        Parameters
        ----------
        fillet : PointPath
            Fillet trace, starting at the root.
        involute_path : PointPath
            Involute trace, ending at the outside circle.

        Returns
        -------
        PointPath
            Fillet up to the crossing, the crossing point, the involute after it.
            The involute alone if the two do not cross.
        """
        fillet_segs = fillet.lines
        involute_segs = involute_path.lines

        qt = QuadTree(BoundingBox.merge([fillet.bounds, involute_path.bounds]))
        for index, seg in enumerate(involute_segs):
            qt.add(index, seg.bounds)

        cross_point = None
        cross_radius = -1.0
        cross_fillet_index = None
        cross_involute_index = None
        for f_ind, f_seg in enumerate(fillet_segs):
            for i_ind in sorted(qt.find_matches(f_seg.bounds)):
                i_seg = involute_segs[i_ind]
                cp = Line.line2line((f_seg.start, f_seg.end), (i_seg.start, i_seg.end))
                if cp is not None and cp.in_range:
                    radius = np.linalg.norm(cp.p)
                    if cross_point is None or radius > cross_radius:
                        cross_point = cp.p
                        cross_radius = radius
                        cross_fillet_index = f_ind
                        cross_involute_index = i_ind

        if cross_point is None:
            return involute_path
        return PointPath(
            np.concatenate(
                [
                    fillet.points[: cross_fillet_index + 1],
                    cross_point[np.newaxis, :],
                    involute_path.points[cross_involute_index + 1 :],
                ]
            )
        )

    def generate_tooth_profile(self) -> PointPath:
        """
        Generate the point path of one full tooth.

        The path starts at the middle of the gap below the x axis
        (angle -pi/z), goes over the tooth tip (centered on the x axis) and ends
        at the middle of the next gap (angle pi/z).
        """
        z = self.number_of_teeth
        # tiny pre-rotation, the fillet and the involute must not share points
        fillet = self.trace_fillet().rotate(PI / 2 / z / 1000)
        involute_path = self.trace_involute()
        merged = self.apply_backlash(self.merge_curves(fillet, involute_path))

        # extend along the root circle down to the gap center
        sp = merged.start
        first_angle = np.arctan2(sp[1], sp[0])
        prefix = arc_points(self.root_radius, 0, first_angle, 0.001)

        # extend along the outside circle up to the tooth center
        ep = merged.end
        last_angle = np.arctan2(ep[1], ep[0])
        suffix = arc_points(self.outside_radius, last_angle + 0.001, PI / z, 0.001)

        complete_flank = np.concatenate([prefix, merged.points, suffix])

        # rotate the flank below the x axis so it can be mirrored
        oriented = apply_transform(complete_flank, rotation_matrix(-PI / z))
        oriented_flank = PointPath(oriented[oriented[:, 1] <= 0])
        other_side = oriented_flank.scale(1, -1)
        return PointPath.concat(oriented_flank, other_side.reverse())

    def apply_backlash(self, path: PointPath) -> PointPath:
        if self.backlash > 0:
            return path.rotate(self.backlash / self.pitch_radius / 2)
        return path

    def generate_gear_profile(self) -> List[CubicBezier]:
        """Fit the tooth profile and repeat it around the gear.

        Returns
        -------
        list of CubicBezier
            A single curve of all teeth, open at the seam of the first and last
            tooth.
        """
        fitted_tooth = self.generate_tooth_profile().to_fitted_bezier()
        teeth = [
            fitted_tooth.rotate(self.pitch_angle * k).points
            for k in range(self.number_of_teeth)
        ]
        return [CubicBezier(np.concatenate(teeth))]
