"""Operaciones inmutables sobre el árbol de edificios.

Cada operación recibe la lista raíz de edificios y devuelve una lista nueva.
Nunca se modifica un objeto existente. Una ruta que no existe es un no-op:
se devuelve la misma lista recibida.
"""
import logging
from typing import Any, Dict, List, Optional, Set, Union

from pydantic import BaseModel

from ..core.assignments import ProductAssignment, ServiceAssignment
from ..core.building import Building
from ..core.device import (
    CableTermination, Connection, Device, LeafNode, Outlet, Pbx, Router, Server, Switch,
)
from ..core.floor import Floor
from ..core.ids import generate_id
from ..core.rack import RACK_COLLECTIONS, Rack
from ..core.room import ROOM_COLLECTIONS, Room
from .errors import TreeStructureError
from .lens import (
    Path, append_in, building_path, central_rack_path, floor_path, floor_rack_path,
    get_in, leaf_path, over_in, remove_in, room_path,
)

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (Copy)"
DEFAULT_RACK_UNITS = 42

COLLECTION_TYPES = {
    "cable_terminations": CableTermination,
    "switches": Switch,
    "routers": Router,
    "servers": Server,
    "pbx": Pbx,
    "devices": Device,
    "outlets": Outlet,
    "connections": Connection,
}

ID_PREFIXES = {
    "cable_termination": "termination",
    "switch": "switch",
    "router": "router",
    "server": "server",
    "pbx": "pbx",
    "device": "device",
    "outlet": "outlet",
    "connection": "connection",
}

Buildings = List[Building]


def _apply_updates(node: BaseModel, updates: Optional[Dict[str, Any]]) -> BaseModel:
    """Aplica una actualización parcial validándola con el modelo del nodo"""
    if not updates:
        return node
    updates = dict(updates)
    if "id" in updates:
        logger.warning(f"Ignoring attempt to change id of {type(node).__name__} {node.id}")
        updates.pop("id")
    data = node.model_dump()
    data.update(updates)
    return type(node).model_validate(data)


def _update_at(buildings: Buildings, path: Path, updates: Optional[Dict[str, Any]]) -> Buildings:
    return over_in(buildings, path, lambda node: _apply_updates(node, updates))


# --- Buildings ---
def add_building(buildings: Buildings, name: str, **fields: Any) -> Buildings:
    building = Building.model_validate({"id": generate_id("building"), "name": name, **fields})
    logger.debug(f"Adding building {building.id}")
    return [*buildings, building]


def update_building(buildings: Buildings, building_id: str, updates: Dict[str, Any]) -> Buildings:
    return _update_at(buildings, building_path(building_id), updates)


def delete_building(buildings: Buildings, building_id: str) -> Buildings:
    return remove_in(buildings, building_path(building_id))


# --- Floors ---
def add_floor(buildings: Buildings, building_id: str, name: Optional[str] = None, **fields: Any) -> Buildings:
    """Añade un piso al final del edificio con nombre y nivel consecutivos"""
    building = get_in(buildings, building_path(building_id))
    if building is None:
        logger.debug(f"add_floor: building {building_id} not found")
        return buildings
    number = len(building.floors) + 1
    floor = Floor.model_validate({
        "id": generate_id("floor"),
        "name": name or f"Floor {number}",
        "level": number,
        **fields,
    })
    return append_in(buildings, building_path(building_id), "floors", floor)


def update_floor(buildings: Buildings, building_id: str, floor_id: str, updates: Dict[str, Any]) -> Buildings:
    return _update_at(buildings, floor_path(building_id, floor_id), updates)


def delete_floor(buildings: Buildings, building_id: str, floor_id: str) -> Buildings:
    return remove_in(buildings, floor_path(building_id, floor_id))


def copy_floor(buildings: Buildings, building_id: str, floor_id: str) -> Buildings:
    """Copia un piso con todos sus racks, habitaciones y hojas al final del edificio"""
    building = get_in(buildings, building_path(building_id))
    floor = get_in(buildings, floor_path(building_id, floor_id))
    if building is None or floor is None:
        logger.debug(f"copy_floor: floor {floor_id} not found in building {building_id}")
        return buildings

    copied = _copy_floor(floor, level=len(building.floors) + 1)
    _assert_fresh_ids(floor, copied)
    logger.info(f"Floor {floor.id} copied as {copied.id}")
    return append_in(buildings, building_path(building_id), "floors", copied)


# --- Central rack ---
def _default_central_rack() -> Rack:
    return Rack(id=generate_id("central-rack"), name="Central Rack", units=DEFAULT_RACK_UNITS)


def ensure_central_rack(buildings: Buildings, building_id: str) -> Buildings:
    """Crea el rack central por defecto si el edificio aún no tiene uno"""
    building = get_in(buildings, building_path(building_id))
    if building is None or building.central_rack is not None:
        return buildings
    rack = _default_central_rack()
    return over_in(buildings, building_path(building_id),
                   lambda b: b.model_copy(update={"central_rack": rack}))


def update_central_rack(buildings: Buildings, building_id: str, updates: Dict[str, Any]) -> Buildings:
    buildings = ensure_central_rack(buildings, building_id)
    return _update_at(buildings, central_rack_path(building_id), updates)


def delete_central_rack(buildings: Buildings, building_id: str) -> Buildings:
    return remove_in(buildings, central_rack_path(building_id))


# --- Floor racks ---
def add_floor_rack(buildings: Buildings, building_id: str, floor_id: str,
                   name: Optional[str] = None, **fields: Any) -> Buildings:
    floor = get_in(buildings, floor_path(building_id, floor_id))
    if floor is None:
        logger.debug(f"add_floor_rack: floor {floor_id} not found")
        return buildings
    rack = Rack.model_validate({
        "id": generate_id("rack"),
        "name": name or f"Rack {len(floor.racks) + 1}",
        "units": DEFAULT_RACK_UNITS,
        **fields,
    })
    return append_in(buildings, floor_path(building_id, floor_id), "racks", rack)


def update_floor_rack(buildings: Buildings, building_id: str, floor_id: str, rack_id: str,
                      updates: Dict[str, Any]) -> Buildings:
    return _update_at(buildings, floor_rack_path(building_id, floor_id, rack_id), updates)


def delete_floor_rack(buildings: Buildings, building_id: str, floor_id: str, rack_id: str) -> Buildings:
    return remove_in(buildings, floor_rack_path(building_id, floor_id, rack_id))


# --- Rooms ---
def add_room(buildings: Buildings, building_id: str, floor_id: str, name: str = "", **fields: Any) -> Buildings:
    room = Room.model_validate({"id": generate_id("room"), "name": name, **fields})
    return append_in(buildings, floor_path(building_id, floor_id), "rooms", room)


def update_room(buildings: Buildings, building_id: str, floor_id: str, room_id: str,
                updates: Dict[str, Any]) -> Buildings:
    return _update_at(buildings, room_path(building_id, floor_id, room_id), updates)


def delete_room(buildings: Buildings, building_id: str, floor_id: str, room_id: str) -> Buildings:
    return remove_in(buildings, room_path(building_id, floor_id, room_id))


def copy_room(buildings: Buildings, building_id: str, floor_id: str, room_id: str) -> Buildings:
    """Copia una habitación con sus tomas, dispositivos y conexiones en el mismo piso"""
    room = get_in(buildings, room_path(building_id, floor_id, room_id))
    if room is None:
        logger.debug(f"copy_room: room {room_id} not found")
        return buildings
    copied = _copy_room(room)
    _assert_fresh_ids(room, copied)
    return append_in(buildings, floor_path(building_id, floor_id), "rooms", copied)


# --- Leaves ---
def add_leaf(buildings: Buildings, container: Path, collection: str,
             leaf: Union[LeafNode, Dict[str, Any]]) -> Buildings:
    """Añade una hoja (switch, dispositivo, toma...) a una colección de un rack o habitación"""
    leaf_type = COLLECTION_TYPES.get(collection)
    if leaf_type is None:
        raise TreeStructureError(f"Unknown leaf collection '{collection}'")
    if isinstance(leaf, dict):
        prefix = ID_PREFIXES[leaf_type.model_fields["kind"].default]
        leaf = leaf_type.model_validate({"id": generate_id(prefix), **leaf})
    if not isinstance(leaf, leaf_type):
        raise TreeStructureError(
            f"Cannot add {type(leaf).__name__} to '{collection}' (expected {leaf_type.__name__})"
        )
    return append_in(buildings, container, collection, leaf)


def update_leaf(buildings: Buildings, path: Path, updates: Dict[str, Any]) -> Buildings:
    return _update_at(buildings, path, updates)


def delete_leaf(buildings: Buildings, path: Path) -> Buildings:
    return remove_in(buildings, path)


def duplicate_device(buildings: Buildings, room: Path, device_id: str) -> Buildings:
    """Duplica un dispositivo en la misma habitación, sin IP"""
    device = get_in(buildings, leaf_path(room, "devices", device_id))
    if device is None:
        return buildings
    return append_in(buildings, room, "devices", _copy_leaf(device, suffix=False))


def duplicate_outlet(buildings: Buildings, room: Path, outlet_id: str) -> Buildings:
    """Duplica una toma en la misma habitación, sin etiqueta de puerto"""
    outlet = get_in(buildings, leaf_path(room, "outlets", outlet_id))
    if outlet is None:
        return buildings
    return append_in(buildings, room, "outlets", _copy_leaf(outlet))


# --- Assignments ---
def assign_product(buildings: Buildings, path: Path, product_id: str, quantity: float = 1) -> Buildings:
    """Asigna un producto a una hoja; si ya estaba asignado suma la cantidad"""
    def _assign(leaf):
        products = list(leaf.products)
        for index, assignment in enumerate(products):
            if assignment.product_id == product_id:
                products[index] = assignment.model_copy(update={"quantity": assignment.quantity + quantity})
                break
        else:
            products.append(ProductAssignment(product_id=product_id, quantity=quantity))
        return leaf.model_copy(update={"products": products})

    return over_in(buildings, path, _assign)


def unassign_product(buildings: Buildings, path: Path, product_id: str) -> Buildings:
    return over_in(buildings, path, lambda leaf: leaf.model_copy(
        update={"products": [p for p in leaf.products if p.product_id != product_id]}
    ))


def add_service_assignment(buildings: Buildings, path: Path, service_id: str,
                           quantity: float = 1, notes: Optional[str] = None) -> Buildings:
    assignment = ServiceAssignment(
        id=generate_id("service"), service_id=service_id, quantity=quantity, notes=notes
    )
    return over_in(buildings, path, lambda leaf: leaf.model_copy(
        update={"services": [*leaf.services, assignment]}
    ))


def remove_service_assignment(buildings: Buildings, path: Path, assignment_id: str) -> Buildings:
    return over_in(buildings, path, lambda leaf: leaf.model_copy(
        update={"services": [s for s in leaf.services if s.id != assignment_id]}
    ))


# --- Deep copy helpers ---
def _copy_leaf(leaf: LeafNode, suffix: bool = True) -> LeafNode:
    update: Dict[str, Any] = {
        "id": generate_id(ID_PREFIXES[leaf.kind]),
        "services": [s.model_copy(update={"id": generate_id("service")}) for s in leaf.services],
    }
    if "ip" in type(leaf).model_fields:
        update["ip"] = ""
    if isinstance(leaf, Outlet):
        update["label"] = f"{leaf.label}{COPY_SUFFIX}" if suffix else leaf.label
        if leaf.connection is not None:
            update["connection"] = leaf.connection.model_copy(
                update={"id": generate_id("connection"), "from_device": ""}
            )
    elif isinstance(leaf, Switch):
        update["ports"] = [p.model_copy(update={"id": generate_id("port")}) for p in leaf.ports]
    elif isinstance(leaf, Router):
        update["interfaces"] = [i.model_copy(update={"id": generate_id("interface")}) for i in leaf.interfaces]
    elif isinstance(leaf, Server):
        update["virtual_machines"] = [vm.model_copy(update={"id": generate_id("vm")})
                                      for vm in leaf.virtual_machines]
    return leaf.model_copy(update=update, deep=True)


def _copy_rack(rack: Rack) -> Rack:
    update: Dict[str, Any] = {"id": generate_id("rack"), "name": f"{rack.name}{COPY_SUFFIX}"}
    for collection in RACK_COLLECTIONS:
        update[collection] = [_copy_leaf(leaf) for leaf in getattr(rack, collection)]
    return rack.model_copy(update=update)


def _copy_room(room: Room) -> Room:
    update: Dict[str, Any] = {"id": generate_id("room"), "name": f"{room.name}{COPY_SUFFIX}"}
    for collection in ROOM_COLLECTIONS:
        update[collection] = [_copy_leaf(leaf) for leaf in getattr(room, collection)]
    return room.model_copy(update=update)


def _copy_floor(floor: Floor, level: int) -> Floor:
    return floor.model_copy(update={
        "id": generate_id("floor"),
        "name": f"{floor.name}{COPY_SUFFIX}",
        "level": level,
        "racks": [_copy_rack(rack) for rack in floor.racks],
        "rooms": [_copy_room(room) for room in floor.rooms],
    })


def collect_ids(node: Any) -> Set[str]:
    """Todos los identificadores de un subárbol"""
    ids: Set[str] = set()
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, list):
            stack.extend(current)
        elif isinstance(current, BaseModel):
            node_id = getattr(current, "id", None)
            if node_id:
                ids.add(node_id)
            stack.extend(getattr(current, name) for name in type(current).model_fields)
    return ids


def _assert_fresh_ids(source: BaseModel, copied: BaseModel) -> None:
    shared = collect_ids(source) & collect_ids(copied)
    if shared:
        raise TreeStructureError(f"Copy of {source.id} reuses ids: {sorted(shared)}")
