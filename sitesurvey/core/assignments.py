from typing import Any, List, Optional

from pydantic import Field, field_validator, model_validator

from .base import SurveyModel


class ProductAssignment(SurveyModel):
    product_id: str
    quantity: float = 1


class ServiceAssignment(SurveyModel):
    id: Optional[str] = None
    service_id: str
    quantity: float = 1
    notes: Optional[str] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def _default_quantity(cls, value: Any) -> Any:
        # 0 o null cuentan como una unidad
        return value or 1


class AssignableNode(SurveyModel):
    """Nodo hoja que puede llevar productos y servicios del catálogo"""

    id: str
    products: List[ProductAssignment] = Field(default_factory=list)
    services: List[ServiceAssignment] = Field(default_factory=list)
    is_future_proposal: bool = False

    @model_validator(mode="before")
    @classmethod
    def _normalize_legacy_assignment(cls, data: Any) -> Any:
        """Convierte el formato antiguo `productId`/`quantity` a la lista `products`"""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        legacy_id = data.pop("productId", None)
        legacy_snake = data.pop("product_id", None)
        legacy_id = legacy_id or legacy_snake

        if data.get("products") is None:
            data["products"] = []
            if legacy_id:
                data["products"] = [
                    {"productId": legacy_id, "quantity": data.get("quantity") or 1}
                ]
        if data.get("services") is None:
            data["services"] = []
        return data

    def product_ids(self) -> List[str]:
        return [p.product_id for p in self.products]

    def service_ids(self) -> List[str]:
        return [s.service_id for s in self.services]
