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

from gearprofile import *
import matplotlib.pyplot as plt
import numpy as np
import time
import logging

# These examples are meant to showcase the functionality of the library,
# and serve as manual testing templates for the developer.

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)


def plot_curve(ax, curve: CubicBezier, **kwargs):
    points = curve.evaluate(20)
    ax.plot(points[:, 0], points[:, 1], **kwargs)


def plot_control_points(ax, curve: CubicBezier):
    ctrl = curve.points.reshape(-1, 2)
    ax.plot(ctrl[:, 0], ctrl[:, 1], linestyle="", marker=".", markersize=2)


def spur_gears():
    gear1 = InvoluteGear(number_of_teeth=12, module=2)
    gear2 = InvoluteGear(number_of_teeth=24, module=2, backlash=0.1)

    start = time.time()
    curve1 = gear1.generate_gear_profile()[0]
    curve2 = gear2.generate_gear_profile()[0]
    print(f"gear build time: {time.time()-start}")

    # move gear2 into mesh along the x axis, gap facing the tooth of gear1
    curve2 = curve2.transform(
        translation_matrix((gear1.pitch_radius + gear2.pitch_radius, 0))
        @ rotation_matrix(PI + PI / gear2.number_of_teeth)
    )
    return [curve1, curve2]


def single_tooth():
    gear = InvoluteGear(number_of_teeth=9, module=1)
    tooth = gear.generate_tooth_profile()
    fitted = tooth.to_fitted_bezier()
    print(f"tooth points: {len(tooth)}, bezier segments: {len(fitted)}")
    return fitted


def ring_gear():
    param = InvoluteGearParam(
        number_of_teeth=15, module=1, create_ring=True, number_of_ring_teeth=42
    )
    data = generate_gear_data(param)
    print(f"{data.export_file_name}: {data.dimensions}")
    return data.beziers


if __name__ == "__main__":

    fig, (ax1, ax2) = plt.subplots(1, 2)
    for curve in ring_gear():
        plot_curve(ax1, curve)
    ax1.axis("equal")
    tooth = single_tooth()
    plot_curve(ax2, tooth)
    plot_control_points(ax2, tooth)
    ax2.axis("equal")
    plt.show()
