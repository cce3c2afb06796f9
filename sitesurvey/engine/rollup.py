"""Agregación de productos y servicios asignados en todo el árbol.

Recorre cada hoja asignable (ver ``traversal.iter_leaves``) y suma las
cantidades por id de catálogo, ponderadas por el multiplicador de pisos y
habitaciones típicas. El resultado es una proyección pura: no se guarda nada
entre llamadas y la misma entrada produce siempre la misma salida.
"""
import logging
from typing import Dict, List, Optional

from pydantic import Field

from ..catalog.catalog import CatalogLookup, NullCatalog
from ..core.base import SurveyModel
from ..core.building import Building
from ..core.device import (
    PRODUCT_CATEGORIES, SERVICE_CATEGORIES, CableTermination, Device, LeafNode,
)
from .multiplier import effective_multiplier, floor_multiplier, room_multiplier
from .traversal import LeafVisit, iter_leaves

logger = logging.getLogger(__name__)

GENERIC_BRAND = "Generic"


class RollupRecord(SurveyModel):
    id: str
    name: str
    brand: Optional[str] = None
    category: str = ""
    quantity: float = 0
    locations: List[str] = Field(default_factory=list)


class AssignedItems(SurveyModel):
    products: List[RollupRecord] = Field(default_factory=list)
    services: List[RollupRecord] = Field(default_factory=list)

    def product(self, product_id: str) -> Optional[RollupRecord]:
        return next((r for r in self.products if r.id == product_id), None)

    def service(self, service_id: str) -> Optional[RollupRecord]:
        return next((r for r in self.services if r.id == service_id), None)


def describe_location(visit: LeafVisit) -> str:
    """Texto de ubicación legible para una hoja, anotado con su multiplicador"""
    if visit.floor is None:
        return visit.rack.name or "Central Rack"

    floor_name = visit.floor.name or f"Floor {visit.floor.level}"
    floor_factor = floor_multiplier(visit.floor)
    if visit.room is None:
        text = f"{floor_name} - {visit.rack.name or visit.rack.id}"
        if floor_factor > 1:
            text += f" (×{floor_factor})"
        return text

    room_factor = room_multiplier(visit.room)
    total = floor_factor * room_factor
    text = f"{floor_name} - {visit.room.name or visit.room.number or visit.room.id}"
    if floor_factor > 1 and room_factor > 1:
        text += f" (×{floor_factor} floors × {room_factor} rooms = ×{total})"
    elif floor_factor > 1:
        text += f" (×{floor_factor} floors)"
    elif room_factor > 1:
        text += f" (×{room_factor} rooms)"
    return text


def _fallback_brand(leaf: LeafNode) -> str:
    if isinstance(leaf, CableTermination):
        # CAT6_UTP -> CAT6
        return leaf.cable_type.split("_")[0] or GENERIC_BRAND
    return getattr(leaf, "brand", "") or GENERIC_BRAND


def _fallback_category(leaf: LeafNode) -> str:
    if isinstance(leaf, Device) and leaf.type:
        return leaf.type
    return PRODUCT_CATEGORIES[leaf.kind]


def _product_record(product_id: str, visit: LeafVisit, catalog: CatalogLookup) -> Dict:
    info = catalog.resolve_product(product_id)
    if info is None:
        logger.debug(f"Product {product_id} not found in catalog, using fallback record")
    return {
        "id": product_id,
        "name": info.name if info else product_id,
        "brand": (info.brand if info and info.brand else _fallback_brand(visit.leaf)),
        "category": (info.category if info and info.category else _fallback_category(visit.leaf)),
        "quantity": 0,
        "locations": [],
    }


def _service_record(service_id: str, visit: LeafVisit, catalog: CatalogLookup) -> Dict:
    info = catalog.resolve_service(service_id)
    if info is None:
        logger.debug(f"Service {service_id} not found in catalog, using fallback record")
    return {
        "id": service_id,
        "name": info.name if info else service_id,
        "brand": None,
        "category": (info.category if info and info.category else SERVICE_CATEGORIES[visit.leaf.kind]),
        "quantity": 0,
        "locations": [],
    }


def collect_assigned_items(
    buildings: List[Building],
    catalog: Optional[CatalogLookup] = None
) -> AssignedItems:
    """Agrupa todos los productos y servicios asignados, sumando cantidades por id"""
    catalog = catalog or NullCatalog()
    products: Dict[str, Dict] = {}
    services: Dict[str, Dict] = {}

    for visit in iter_leaves(buildings):
        leaf = visit.leaf
        if not leaf.products and not leaf.services:
            continue
        multiplier = effective_multiplier(visit.floor, visit.room)
        location = describe_location(visit)

        for assignment in leaf.products:
            record = products.get(assignment.product_id)
            if record is None:
                record = products[assignment.product_id] = _product_record(
                    assignment.product_id, visit, catalog
                )
            record["quantity"] += assignment.quantity * multiplier
            record["locations"].append(location)

        for assignment in leaf.services:
            record = services.get(assignment.service_id)
            if record is None:
                record = services[assignment.service_id] = _service_record(
                    assignment.service_id, visit, catalog
                )
            record["quantity"] += assignment.quantity * multiplier
            record["locations"].append(location)

    logger.debug(f"Rollup collected {len(products)} products and {len(services)} services")
    return AssignedItems(
        products=[RollupRecord.model_validate(r) for r in products.values()],
        services=[RollupRecord.model_validate(r) for r in services.values()],
    )
