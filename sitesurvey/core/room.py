from typing import Any, List, Optional

from pydantic import Field, model_validator

from .base import SurveyModel
from .device import Connection, Device, Outlet

ROOM_COLLECTIONS = ("devices", "outlets", "connections")


class Room(SurveyModel):
    id: str
    name: str = ""
    number: Optional[str] = None
    type: Optional[str] = None
    notes: Optional[str] = None
    is_typical: bool = False
    repeat_count: int = 1
    outlets: List[Outlet] = Field(default_factory=list)
    devices: List[Device] = Field(default_factory=list)
    connections: List[Connection] = Field(default_factory=list)
    is_future_proposal: bool = False

    @model_validator(mode="before")
    @classmethod
    def _normalize_room(cls, data: Any) -> Any:
        """Normaliza habitaciones típicas y colecciones vacías"""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("repeatCount", data.get("repeat_count", 1)) is None:
            data.pop("repeatCount", None)
            data["repeat_count"] = 1
        # rooms typed as TYPICAL predate the explicit flag
        if "isTypical" not in data and "is_typical" not in data and data.get("type") == "TYPICAL":
            data["is_typical"] = True
        for key in ROOM_COLLECTIONS:
            if key in data and data[key] is None:
                data[key] = []
        return data

    def get_device(self, device_id: str) -> Optional[Device]:
        """Obtiene un dispositivo específico"""
        return next((d for d in self.devices if d.id == device_id), None)

    def get_outlet(self, outlet_id: str) -> Optional[Outlet]:
        """Obtiene una toma específica"""
        return next((o for o in self.outlets if o.id == outlet_id), None)
