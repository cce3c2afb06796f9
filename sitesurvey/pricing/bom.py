from typing import Any, Dict, List, Optional

import pandas as pd

from ..engine.rollup import AssignedItems, RollupRecord
from .overlay import PricingOverlay

BOM_COLUMNS = [
    "type", "id", "name", "brand", "category", "quantity",
    "unit_price", "margin_percent", "total_price", "line_cost", "line_total", "locations",
]


def _bom_rows(kind: str, records: List[RollupRecord], overlay: PricingOverlay) -> List[Dict[str, Any]]:
    rows = []
    for record in records:
        entry = overlay.get(kind, record.id)
        unit_price = entry.unit_price if entry else 0.0
        margin = entry.margin_percent if entry else 0.0
        total_price = entry.total_price if entry else 0.0
        rows.append({
            "type": kind,
            "id": record.id,
            "name": record.name,
            "brand": record.brand,
            "category": record.category,
            "quantity": record.quantity,
            "unit_price": unit_price,
            "margin_percent": margin,
            "total_price": total_price,
            "line_cost": unit_price * record.quantity,
            "line_total": total_price * record.quantity,
            "locations": "; ".join(record.locations),
        })
    return rows


def bom_frame(items: AssignedItems, overlay: Optional[PricingOverlay] = None) -> pd.DataFrame:
    """Tabla de materiales valorada: una fila por producto o servicio agregado"""
    overlay = overlay or PricingOverlay()
    rows = _bom_rows("product", items.products, overlay) + _bom_rows("service", items.services, overlay)
    return pd.DataFrame(rows, columns=BOM_COLUMNS)


def products_by_brand(items: AssignedItems) -> Dict[str, List[RollupRecord]]:
    """Agrupa los productos agregados por marca, en orden de aparición"""
    grouped: Dict[str, List[RollupRecord]] = {}
    for record in items.products:
        grouped.setdefault(record.brand or "Generic", []).append(record)
    return grouped


def bom_totals(frame: pd.DataFrame) -> Dict[str, float]:
    """Subtotal (costo), total de venta, margen y margen medio de la tabla"""
    subtotal = float(frame["line_cost"].sum()) if not frame.empty else 0.0
    total = float(frame["line_total"].sum()) if not frame.empty else 0.0
    margin_amount = total - subtotal
    return {
        "subtotal": subtotal,
        "total": total,
        "margin_amount": margin_amount,
        "average_margin_percent": (margin_amount / total * 100) if total > 0 else 0.0,
    }
