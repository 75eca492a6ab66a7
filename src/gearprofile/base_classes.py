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
from typing import List
from gearprofile.path import CubicBezier

# If a dataclass tends to be user input, it should be named param.
# If a dataclass tends to be generated or manipulated by functions,
# it should be named data.


@dataclasses.dataclass(frozen=True)
class InvoluteGearParam:
    """Input parameters of an involute gear (and optionally its ring gear).

    Attributes
    ----------
    number_of_teeth : int
        Number of teeth of the (pinion) gear.
    module : float
        Module of the gear.
    pressure_angle : float
        Pressure angle in degrees.
    addendum_coefficient : float
        Addendum height coefficient.
    dedendum_coefficient : float
        Dedendum height coefficient.
    backlash : float
        Backlash, given as a length on the pitch circle.
    shaft_diameter : float
        Diameter of the shaft hole, only reported in the dimensions.
    create_ring : bool
        If True, the matching ring gear is generated as well.
    number_of_ring_teeth : int
        Number of teeth of the ring gear.
    """

    number_of_teeth: int = 20
    module: float = 2.0
    pressure_angle: float = 20.0
    addendum_coefficient: float = 1.0
    dedendum_coefficient: float = 1.25
    backlash: float = 0.0
    shaft_diameter: float = 8.0
    create_ring: bool = False
    number_of_ring_teeth: int = 50


@dataclasses.dataclass(frozen=True)
class GearDimensions:
    """Reference dimensions of a gear."""

    pitch_radius: float
    base_radius: float
    outside_radius: float
    root_radius: float
    module: float
    number_of_teeth: int
    shaft_diameter: float

    @classmethod
    def empty(cls):
        return cls(
            pitch_radius=0,
            base_radius=0,
            outside_radius=0,
            root_radius=0,
            module=0,
            number_of_teeth=0,
            shaft_diameter=0,
        )


@dataclasses.dataclass
class GearData:
    """Output of a gear generation, as consumed by renderers and exporters.

    Attributes
    ----------
    beziers : list of CubicBezier
        Outline curves, the gear first and the ring gear (if any) second.
    dimensions : GearDimensions
        Dimensions of the gear.
    export_file_name : str
        Suggested file name (without extension).
    params : InvoluteGearParam
        The parameters the data was generated from.
    """

    beziers: List[CubicBezier]
    dimensions: GearDimensions
    export_file_name: str
    params: InvoluteGearParam

    @property
    def is_empty(self):
        return len(self.beziers) == 0
