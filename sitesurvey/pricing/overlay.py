import logging
from typing import Any, Dict, Optional

from pydantic import AliasChoices, Field, computed_field

from ..core.base import SurveyModel
from ..engine.errors import PricingError, UnknownCatalogKindError

logger = logging.getLogger(__name__)


def gross_up(cost: float, margin_percent: float) -> float:
    """Precio de venta a partir del costo y un margen objetivo (no markup)"""
    if margin_percent < 0 or margin_percent >= 100:
        raise PricingError(f"Margin must be in [0, 100), got {margin_percent}")
    if cost <= 0:
        return 0.0
    return cost / (1 - margin_percent / 100)


def markup_price(cost: float, markup_percent: float) -> float:
    """Precio de venta aplicando un markup sobre el costo"""
    if cost <= 0:
        return 0.0
    return cost * (1 + markup_percent / 100)


def markup_percent(cost: float, selling_price: float) -> float:
    if cost <= 0:
        return 0.0
    return (selling_price - cost) / cost * 100


def margin_percent(cost: float, selling_price: float) -> float:
    if selling_price <= 0:
        return 0.0
    return (selling_price - cost) / selling_price * 100


class PriceEntry(SurveyModel):
    unit_price: float = Field(default=0, ge=0)
    margin_percent: float = Field(
        default=0,
        ge=0,
        lt=100,
        validation_alias=AliasChoices("marginPercent", "margin_percent", "margin"),
    )

    @computed_field
    @property
    def total_price(self) -> float:
        return gross_up(self.unit_price, self.margin_percent)


class PricingOverlay:
    """Precios por id de catálogo aplicados sobre el resultado de la agregación"""

    def __init__(
        self,
        products: Optional[Dict[str, Any]] = None,
        services: Optional[Dict[str, Any]] = None
    ):
        self.products: Dict[str, PriceEntry] = {
            key: PriceEntry.model_validate(value) for key, value in (products or {}).items()
        }
        self.services: Dict[str, PriceEntry] = {
            key: PriceEntry.model_validate(value) for key, value in (services or {}).items()
        }

    def _prices(self, kind: str) -> Dict[str, PriceEntry]:
        if kind == "product":
            return self.products
        if kind == "service":
            return self.services
        raise UnknownCatalogKindError(f"Unknown catalog kind '{kind}'")

    def set(self, kind: str, catalog_id: str, unit_price: float, margin: float = 0) -> PriceEntry:
        """Guarda el precio de un producto o servicio"""
        entry = PriceEntry(unit_price=unit_price, margin_percent=margin)
        self._prices(kind)[catalog_id] = entry
        logger.debug(f"Pricing for {kind} {catalog_id} set to {entry.total_price:.2f}")
        return entry

    def get(self, kind: str, catalog_id: str) -> Optional[PriceEntry]:
        return self._prices(kind).get(catalog_id)

    def evict(self, kind: str, catalog_id: str) -> bool:
        """Elimina el precio de un id; devuelve True si existía"""
        removed = self._prices(kind).pop(catalog_id, None) is not None
        if removed:
            logger.info(f"Pricing for {kind} {catalog_id} evicted")
        return removed

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "PricingOverlay":
        """Crea el overlay desde el documento del levantamiento (productPricing/servicePricing)"""
        return cls(document.get("productPricing"), document.get("servicePricing"))

    def to_document(self) -> Dict[str, Any]:
        return {
            "productPricing": {k: v.to_dict() for k, v in self.products.items()},
            "servicePricing": {k: v.to_dict() for k, v in self.services.items()},
        }
