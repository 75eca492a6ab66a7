from importlib.metadata import version, PackageNotFoundError
from gearprofile.defs import *
from gearprofile.function_generators import *
from gearprofile.geometry import *
from gearprofile.quadtree import *
from gearprofile.path import *
from gearprofile.boolean_ops import *
from gearprofile.base_classes import *
from gearprofile.involute_gear import *
from gearprofile.ring_gear import *
from gearprofile.wrapper import *


try:
    __version__ = version("gearprofile")
except PackageNotFoundError:
    __version__ = "unknown version"
