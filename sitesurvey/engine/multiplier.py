from typing import Optional, Union

from ..core.floor import Floor
from ..core.room import Room


def _repeat_factor(node: Union[Floor, Room]) -> int:
    # counts below 1 behave like 1
    if node.is_typical and node.repeat_count and node.repeat_count >= 1:
        return node.repeat_count
    return 1


def floor_multiplier(floor: Optional[Floor]) -> int:
    """Multiplicador de un piso típico (1 para pisos normales o el rack central)"""
    if floor is None:
        return 1
    return _repeat_factor(floor)


def room_multiplier(room: Optional[Room]) -> int:
    """Multiplicador de una habitación típica"""
    if room is None:
        return 1
    return _repeat_factor(room)


def effective_multiplier(floor: Optional[Floor], room: Optional[Room] = None) -> int:
    """Multiplicador total: piso × habitación"""
    return floor_multiplier(floor) * room_multiplier(room)
