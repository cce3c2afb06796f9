from typing import Any, Callable, Dict, List, Optional
import logging
import uuid

import pandas as pd

from ..catalog.catalog import CatalogLookup, NullCatalog
from ..core.building import Building
from ..pricing.bom import bom_frame, bom_totals
from ..pricing.overlay import PricingOverlay
from .cascade import remove_catalog_item
from .rollup import AssignedItems, collect_assigned_items


class SurveySession:
    """Mantiene la última instantánea del árbol, el catálogo y los precios de un levantamiento.

    Las operaciones del motor son funciones puras; la sesión solo guarda la
    referencia a la instantánea más reciente devuelta por ellas.
    """

    def __init__(
        self,
        buildings: Optional[List[Building]] = None,
        catalog: Optional[CatalogLookup] = None,
        pricing: Optional[PricingOverlay] = None
    ):
        self.session_id = str(uuid.uuid4())
        self.buildings: List[Building] = list(buildings or [])
        self.catalog = catalog or NullCatalog()
        self.pricing = pricing or PricingOverlay()
        self.logger = logging.getLogger(__name__)
        self.logger.info(f"SurveySession {self.session_id} started with {len(self.buildings)} building(s)")

    @classmethod
    def from_document(cls, document: Dict[str, Any], catalog: Optional[CatalogLookup] = None) -> "SurveySession":
        """Crea una sesión desde el documento serializado del levantamiento"""
        buildings = [Building.model_validate(b) for b in document.get("buildings") or []]
        return cls(buildings, catalog, PricingOverlay.from_document(document))

    def to_document(self) -> Dict[str, Any]:
        return {
            "buildings": [b.to_dict() for b in self.buildings],
            **self.pricing.to_document(),
        }

    def replace(self, buildings: List[Building]) -> None:
        """Sustituye la instantánea actual por una más reciente"""
        self.buildings = list(buildings)

    def apply(self, operation: Callable[..., List[Building]], *args: Any, **kwargs: Any) -> List[Building]:
        """Aplica una operación de mutación a la instantánea actual"""
        result = operation(self.buildings, *args, **kwargs)
        if result is self.buildings:
            name = getattr(operation, "__name__", repr(operation))
            self.logger.debug(f"{name} left the tree unchanged")
        self.buildings = result
        return result

    def rollup(self) -> AssignedItems:
        return collect_assigned_items(self.buildings, self.catalog)

    def priced_bom(self) -> pd.DataFrame:
        return bom_frame(self.rollup(), self.pricing)

    def totals(self) -> Dict[str, float]:
        return bom_totals(self.priced_bom())

    def remove_catalog_item(self, kind: str, catalog_id: str) -> List[Building]:
        """Elimina un producto o servicio del árbol y su precio"""
        self.buildings = remove_catalog_item(self.buildings, kind, catalog_id, self.pricing)
        return self.buildings
