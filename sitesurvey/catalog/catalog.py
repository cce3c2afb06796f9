from pathlib import Path
from typing import Any, Dict, Optional, Union
import logging

import yaml

from ..core.base import SurveyModel


class ProductInfo(SurveyModel):
    name: str
    brand: Optional[str] = None
    category: Optional[str] = None


class ServiceInfo(SurveyModel):
    name: str
    category: Optional[str] = None


class CatalogLookup:
    """Consulta externa de productos y servicios del catálogo"""

    def resolve_product(self, product_id: str) -> Optional[ProductInfo]:
        raise NotImplementedError("Subclasses must implement resolve_product()")

    def resolve_service(self, service_id: str) -> Optional[ServiceInfo]:
        raise NotImplementedError("Subclasses must implement resolve_service()")


class NullCatalog(CatalogLookup):
    """Catálogo vacío: todas las consultas devuelven None"""

    def resolve_product(self, product_id: str) -> Optional[ProductInfo]:
        return None

    def resolve_service(self, service_id: str) -> Optional[ServiceInfo]:
        return None


class InMemoryCatalog(CatalogLookup):
    def __init__(
        self,
        products: Optional[Dict[str, Any]] = None,
        services: Optional[Dict[str, Any]] = None
    ):
        self.products: Dict[str, ProductInfo] = {
            key: ProductInfo.model_validate(value) for key, value in (products or {}).items()
        }
        self.services: Dict[str, ServiceInfo] = {
            key: ServiceInfo.model_validate(value) for key, value in (services or {}).items()
        }
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "InMemoryCatalog":
        """Carga el catálogo desde un archivo YAML con secciones products/services"""
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        catalog = cls(data.get("products"), data.get("services"))
        catalog.logger.info(
            f"Catalog loaded from {path}: {len(catalog.products)} products, {len(catalog.services)} services"
        )
        return catalog

    def resolve_product(self, product_id: str) -> Optional[ProductInfo]:
        return self.products.get(product_id)

    def resolve_service(self, service_id: str) -> Optional[ServiceInfo]:
        return self.services.get(service_id)
