"""Combinadores get/set/over sobre rutas del árbol de edificios.

Una ruta es una tupla de pasos ``(atributo, id)``. El primer paso siempre
apunta a la lista raíz de edificios (``("buildings", building_id)``); un paso
con ``id=None`` apunta a un atributo singular como ``central_rack``.

Todas las funciones devuelven árboles nuevos: cada ancestro del nodo tocado
se reconstruye con ``model_copy`` y los hermanos no tocados se comparten.
Si la ruta no existe se devuelve la raíz recibida sin cambios.
"""
import logging
from typing import Any, Callable, List, Optional, Tuple

from pydantic import BaseModel

Step = Tuple[str, Optional[str]]
Path = Tuple[Step, ...]

logger = logging.getLogger(__name__)


class _DanglingPath(Exception):
    pass


def building_path(building_id: str) -> Path:
    return (("buildings", building_id),)


def central_rack_path(building_id: str) -> Path:
    return building_path(building_id) + (("central_rack", None),)


def floor_path(building_id: str, floor_id: str) -> Path:
    return building_path(building_id) + (("floors", floor_id),)


def floor_rack_path(building_id: str, floor_id: str, rack_id: str) -> Path:
    return floor_path(building_id, floor_id) + (("racks", rack_id),)


def room_path(building_id: str, floor_id: str, room_id: str) -> Path:
    return floor_path(building_id, floor_id) + (("rooms", room_id),)


def leaf_path(container: Path, collection: str, leaf_id: str) -> Path:
    return container + ((collection, leaf_id),)


def _sequence(parent: Any, attr: str) -> List[Any]:
    if isinstance(parent, list):
        return parent
    seq = getattr(parent, attr, None)
    if not isinstance(seq, list):
        raise _DanglingPath(attr)
    return seq


def _index_of(seq: List[Any], node_id: str) -> int:
    for index, node in enumerate(seq):
        if getattr(node, "id", None) == node_id:
            return index
    raise _DanglingPath(node_id)


def _child(parent: Any, step: Step) -> Any:
    attr, node_id = step
    if node_id is None:
        value = getattr(parent, attr, None) if isinstance(parent, BaseModel) else None
        if value is None:
            raise _DanglingPath(attr)
        return value
    seq = _sequence(parent, attr)
    return seq[_index_of(seq, node_id)]


def _with_child(parent: Any, step: Step, child: Any) -> Any:
    attr, node_id = step
    if node_id is None:
        return parent.model_copy(update={attr: child})
    seq = list(_sequence(parent, attr))
    seq[_index_of(seq, node_id)] = child
    if isinstance(parent, list):
        return seq
    return parent.model_copy(update={attr: seq})


def _without_child(parent: Any, step: Step) -> Any:
    attr, node_id = step
    if node_id is None:
        if getattr(parent, attr, None) is None:
            raise _DanglingPath(attr)
        return parent.model_copy(update={attr: None})
    seq = list(_sequence(parent, attr))
    del seq[_index_of(seq, node_id)]
    if isinstance(parent, list):
        return seq
    return parent.model_copy(update={attr: seq})


def _over(node: Any, path: Path, fn: Callable[[Any], Any]) -> Any:
    if not path:
        return fn(node)
    step = path[0]
    return _with_child(node, step, _over(_child(node, step), path[1:], fn))


def get_in(root: List[Any], path: Path) -> Optional[Any]:
    """Obtiene el nodo en la ruta, o None si no existe"""
    node: Any = root
    try:
        for step in path:
            node = _child(node, step)
    except _DanglingPath:
        return None
    return node


def over_in(root: List[Any], path: Path, fn: Callable[[Any], Any]) -> List[Any]:
    """Reemplaza el nodo en la ruta por fn(nodo)"""
    try:
        return _over(root, path, fn)
    except _DanglingPath as e:
        logger.debug(f"Path {path} does not resolve ({e}); tree left unchanged")
        return root


def set_in(root: List[Any], path: Path, value: Any) -> List[Any]:
    """Reemplaza el nodo en la ruta por value"""
    return over_in(root, path, lambda _node: value)


def append_in(root: List[Any], path: Path, attr: str, node: Any) -> List[Any]:
    """Añade un nodo al final de la colección `attr` del nodo en la ruta"""
    def _append(parent: Any) -> Any:
        if isinstance(parent, list):
            return [*parent, node]
        return parent.model_copy(update={attr: [*_sequence(parent, attr), node]})

    return over_in(root, path, _append)


def remove_in(root: List[Any], path: Path) -> List[Any]:
    """Elimina el nodo en la ruta de la colección de su padre"""
    if not path:
        return root
    return over_in(root, path[:-1], lambda parent: _without_child(parent, path[-1]))
