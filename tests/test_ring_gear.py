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

import matplotlib.pyplot as plt
import numpy as np
import pytest as pytest
import shapely as shp
from gearprofile.defs import *
from gearprofile.function_generators import *
from gearprofile.involute_gear import InvoluteGear
from gearprofile.path import PointPath
from gearprofile.ring_gear import RingGear

RING_TEETH = 50


@pytest.fixture(scope="module")
def ring_gear():
    return RingGear(InvoluteGear(number_of_teeth=20, module=2), RING_TEETH)


@pytest.fixture(scope="module")
def cut_piece(ring_gear):
    return ring_gear.calculate_cut_piece()


@pytest.fixture(scope="module")
def ring_curve(ring_gear):
    return ring_gear.calculate_gear()


def test_ring_pitch_radius(ring_gear):
    assert ring_gear.pitch_radius == pytest.approx(50)
    assert ring_gear.pitch_angle == pytest.approx(2 * PI / RING_TEETH)
    ring = RingGear(InvoluteGear(number_of_teeth=12, module=1.5), 33)
    assert ring.rp == pytest.approx(1.5 * 33 / 2)


def test_cut_piece(ring_gear, cut_piece):
    pinion = ring_gear.pinion
    tooth_area = shp.geometry.Polygon(pinion.generate_tooth_profile().points).area
    assert cut_piece.is_ccw
    assert cut_piece.area > tooth_area
    radii = vector_length(cut_piece.points)
    # reaches from the ring tooth tips to the pinion tip at full engagement
    assert np.max(radii) == pytest.approx(
        ring_gear.pitch_radius + pinion.outside_radius - pinion.pitch_radius, abs=0.01
    )
    assert np.min(radii) < ring_gear.pitch_radius - pinion.dedendum


def test_ring_tooth(ring_gear):
    tooth = ring_gear.calculate_tooth()
    points = tooth.points
    assert points == pytest.approx(points[::-1] * np.array([1, -1]))
    angles = polar_angle(points)
    assert np.max(np.abs(angles)) <= PI / RING_TEETH + 1e-12


def test_ring_gear(ring_gear, ring_curve, enable_plotting=False):
    assert ring_curve.is_closed
    assert len(ring_curve) % RING_TEETH == 0

    ctrl = ring_curve.points.reshape(RING_TEETH, -1, 4, 2)
    for k in range(RING_TEETH):
        rotated = apply_transform(ctrl[k], rotation_matrix(ring_gear.pitch_angle))
        assert rotated == pytest.approx(ctrl[(k + 1) % RING_TEETH], abs=1e-6)

    samples = ring_curve.evaluate(20)
    if enable_plotting:
        ax = plt.axes()
        ax.plot(samples[:, 0], samples[:, 1], marker=".")
        ax.axis("equal")
        plt.show()

    radii = vector_length(samples)
    pinion = ring_gear.pinion
    tip_radius = ring_gear.pitch_radius - pinion.dedendum
    assert np.min(radii) > tip_radius - 0.01
    # teeth point inward
    assert np.min(radii) > pinion.outside_radius
    assert np.max(radii) < ring_gear.pitch_radius + pinion.module + 0.01
    assert np.max(radii) > ring_gear.pitch_radius + pinion.module / 2


def test_ring_backlash_trims_flank(ring_gear):
    flank = PointPath(arc_points(49, 0, PI / RING_TEETH, 0.001))
    shifted = RingGear(ring_gear.pinion, RING_TEETH, backlash=1).apply_backlash(flank)
    angles = polar_angle(shifted.points)
    assert angles[0] == pytest.approx(1 / 50 / 2)
    assert np.max(angles) <= PI / RING_TEETH + 1e-12
    assert len(shifted) < len(flank)


def test_pinion_fits_into_ring(enable_plotting=False):
    """
    The pinion in meshing position is inside the ring, while rotating it around
    its own center makes it collide with the ring teeth.
    """
    backlash = 0.2
    pinion = InvoluteGear(number_of_teeth=20, module=2, backlash=backlash)
    ring = RingGear(InvoluteGear(number_of_teeth=20, module=2), RING_TEETH, backlash)
    ring_hole = shp.geometry.Polygon(ring.calculate_gear().evaluate(10))

    pinion_center = (ring.pitch_radius - pinion.pitch_radius, 0)
    pinion_points = pinion.generate_gear_profile()[0].evaluate(10)
    pinion_poly = shp.geometry.Polygon(
        apply_transform(pinion_points, translation_matrix(pinion_center))
    )
    rotated = shp.affinity.rotate(pinion_poly, 2, origin=pinion_center)

    if enable_plotting:
        ax = plt.axes()
        ax.plot(ring_hole.exterior.xy[0], ring_hole.exterior.xy[1], marker=".")
        ax.plot(pinion_poly.exterior.xy[0], pinion_poly.exterior.xy[1], marker=".")
        ax.axis("equal")
        plt.show()

    assert pinion_poly.difference(ring_hole).area < 0.01
    assert rotated.difference(ring_hole).area > 0.1


if __name__ == "__main__":

    test_pinion_fits_into_ring(enable_plotting=True)
