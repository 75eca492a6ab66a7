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
import logging
import time
from typing import Dict, List, Tuple
from gearprofile.defs import *
from gearprofile.function_generators import translation_matrix
from gearprofile.base_classes import GearData, GearDimensions, InvoluteGearParam
from gearprofile.involute_gear import InvoluteGear
from gearprofile.ring_gear import RingGear

# Accepted (min, max) range of each parameter, inclusive.
PARAM_LIMITS: Dict[str, Tuple[float, float]] = {
    "number_of_teeth": (6, 1000),
    "module": (0.01, 200),
    "pressure_angle": (1, 32),
    "addendum_coefficient": (0.5, 2),
    "dedendum_coefficient": (0.5, 2),
    "backlash": (0, 10),
    "shaft_diameter": (0.1, 1000),
    "number_of_ring_teeth": (7, 1000),
}


def find_invalid_params(param: InvoluteGearParam) -> List[str]:
    """Names of the parameters that are out of their accepted range.

    With ring generation enabled, the ring must have more teeth than the gear.
    """
    invalids = [
        name
        for name, (vmin, vmax) in PARAM_LIMITS.items()
        if not vmin <= getattr(param, name) <= vmax
    ]
    if param.create_ring and param.number_of_ring_teeth <= param.number_of_teeth:
        if "number_of_ring_teeth" not in invalids:
            invalids.append("number_of_ring_teeth")
    return invalids


def empty_gear_data(param: InvoluteGearParam) -> GearData:
    return GearData(
        beziers=[],
        dimensions=GearDimensions.empty(),
        export_file_name="",
        params=param,
    )


def export_file_name(param: InvoluteGearParam) -> str:
    return f"gear_T{param.number_of_teeth}_M{param.module:g}"


def generate_gear_data(param: InvoluteGearParam = None) -> GearData:
    """
    Generate all outline curves and reference data for a set of parameters.

    The call is all-or-nothing: invalid parameters or any failure during the
    computation result in an empty GearData.

    Parameters
    ----------
    param : InvoluteGearParam, optional
        Gear parameters, defaults are used if omitted.

    Returns
    -------
    GearData
        Gear outline first, then the ring gear outline if requested. The ring
        gear is placed so that it meshes with the gear along the x axis.
    """
    if param is None:
        param = InvoluteGearParam()
    invalids = find_invalid_params(param)
    if invalids:
        logging.warning(f"Invalid gear parameters: {', '.join(invalids)}")
        return empty_gear_data(param)

    try:
        start = time.time()
        gear = InvoluteGear.from_param(param)
        parts = gear.generate_gear_profile()

        if param.create_ring:
            gear_without_backlash = InvoluteGear.from_param(
                dataclasses.replace(param, backlash=0)
            )
            ring_gear = RingGear(
                gear_without_backlash, param.number_of_ring_teeth, param.backlash
            )
            ring_gear_part = ring_gear.calculate_gear()
            rp = gear.pitch_radius
            ring_offset = rp * (1 - param.number_of_ring_teeth / param.number_of_teeth)
            parts.append(ring_gear_part.transform(translation_matrix((ring_offset, 0))))

        logging.info(f"Gear data generated in {time.time()-start:.5f} seconds")
        return GearData(
            beziers=parts,
            dimensions=gear.dimensions,
            export_file_name=export_file_name(param),
            params=param,
        )
    except Exception:
        logging.exception("Gear generation failed")
        return empty_gear_data(param)
