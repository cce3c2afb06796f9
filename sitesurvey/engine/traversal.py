from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from ..core.building import Building
from ..core.device import LeafNode
from ..core.floor import Floor
from ..core.rack import RACK_COLLECTIONS, Rack
from ..core.room import ROOM_COLLECTIONS, Room


@dataclass(frozen=True)
class LeafVisit:
    """Un nodo hoja junto con sus ancestros"""

    building: Building
    floor: Optional[Floor]
    rack: Optional[Rack]
    room: Optional[Room]
    collection: str
    leaf: LeafNode

    @property
    def is_central(self) -> bool:
        return self.floor is None


def _iter_rack(building: Building, floor: Optional[Floor], rack: Rack) -> Iterator[LeafVisit]:
    for collection in RACK_COLLECTIONS:
        for leaf in getattr(rack, collection):
            yield LeafVisit(building, floor, rack, None, collection, leaf)


def iter_leaves(buildings: List[Building]) -> Iterator[LeafVisit]:
    """Recorre en profundidad todas las hojas asignables en orden determinista"""
    for building in buildings:
        if building.central_rack is not None:
            yield from _iter_rack(building, None, building.central_rack)
        for floor in building.floors:
            for rack in floor.racks:
                yield from _iter_rack(building, floor, rack)
            for room in floor.rooms:
                for collection in ROOM_COLLECTIONS:
                    for leaf in getattr(room, collection):
                        yield LeafVisit(building, floor, None, room, collection, leaf)


LeafMapper = Callable[[LeafVisit], LeafNode]


def _map_rack(building: Building, floor: Optional[Floor], rack: Rack, fn: LeafMapper) -> Rack:
    update = {
        collection: [fn(LeafVisit(building, floor, rack, None, collection, leaf))
                     for leaf in getattr(rack, collection)]
        for collection in RACK_COLLECTIONS
    }
    return rack.model_copy(update=update)


def _map_room(building: Building, floor: Floor, room: Room, fn: LeafMapper) -> Room:
    update = {
        collection: [fn(LeafVisit(building, floor, None, room, collection, leaf))
                     for leaf in getattr(room, collection)]
        for collection in ROOM_COLLECTIONS
    }
    return room.model_copy(update=update)


def map_leaves(buildings: List[Building], fn: LeafMapper) -> List[Building]:
    """Reconstruye el árbol completo reemplazando cada hoja por fn(visita)"""
    result = []
    for building in buildings:
        central_rack = None
        if building.central_rack is not None:
            central_rack = _map_rack(building, None, building.central_rack, fn)
        floors = [
            floor.model_copy(update={
                "racks": [_map_rack(building, floor, rack, fn) for rack in floor.racks],
                "rooms": [_map_room(building, floor, room, fn) for room in floor.rooms],
            })
            for floor in building.floors
        ]
        result.append(building.model_copy(update={"central_rack": central_rack, "floors": floors}))
    return result
