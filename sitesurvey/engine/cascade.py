import logging
from typing import List, Optional

from ..core.building import Building
from ..pricing.overlay import PricingOverlay
from .errors import UnknownCatalogKindError
from .traversal import LeafVisit, map_leaves

logger = logging.getLogger(__name__)

CATALOG_KINDS = ("product", "service")


def _check_kind(kind: str) -> None:
    if kind not in CATALOG_KINDS:
        raise UnknownCatalogKindError(f"Unknown catalog kind '{kind}', expected one of {CATALOG_KINDS}")


def remove_catalog_reference(buildings: List[Building], kind: str, catalog_id: str) -> List[Building]:
    """Elimina todas las referencias a un producto o servicio del árbol"""
    _check_kind(kind)
    removed = 0

    def _strip(visit: LeafVisit):
        nonlocal removed
        leaf = visit.leaf
        if kind == "product":
            kept = [p for p in leaf.products if p.product_id != catalog_id]
            removed += len(leaf.products) - len(kept)
            return leaf.model_copy(update={"products": kept})
        kept = [s for s in leaf.services if s.service_id != catalog_id]
        removed += len(leaf.services) - len(kept)
        return leaf.model_copy(update={"services": kept})

    result = map_leaves(buildings, _strip)
    logger.info(f"Removed {removed} {kind} reference(s) to {catalog_id}")
    return result


def remove_catalog_item(
    buildings: List[Building],
    kind: str,
    catalog_id: str,
    pricing: Optional[PricingOverlay] = None
) -> List[Building]:
    """Elimina las referencias del árbol y el precio asociado en el overlay"""
    result = remove_catalog_reference(buildings, kind, catalog_id)
    if pricing is not None:
        pricing.evict(kind, catalog_id)
    return result
