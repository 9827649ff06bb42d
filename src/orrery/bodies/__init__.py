from .body import REVOLUTION, Body
from .frames import parent_position, position_relative_to
from .systems import load_system, system_from_dict
from .universe import Universe

__all__ = [
    "Body",
    "REVOLUTION",
    "Universe",
    "position_relative_to",
    "parent_position",
    "load_system",
    "system_from_dict",
]
