from typing import Any, List, Optional

from pydantic import Field, model_validator

from .base import SurveyModel
from .rack import Rack
from .room import Room


class Floor(SurveyModel):
    id: str
    name: str = ""
    level: int = 0
    is_typical: bool = False
    repeat_count: int = 1
    notes: Optional[str] = None
    racks: List[Rack] = Field(default_factory=list)
    rooms: List[Room] = Field(default_factory=list)
    is_future_proposal: bool = False

    @model_validator(mode="before")
    @classmethod
    def _normalize_floor(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("repeatCount", data.get("repeat_count", 1)) is None:
            data.pop("repeatCount", None)
            data["repeat_count"] = 1
        for key in ("racks", "rooms"):
            if key in data and data[key] is None:
                data[key] = []
        return data

    def get_room(self, room_id: str) -> Optional[Room]:
        """Obtiene una habitación específica"""
        return next((r for r in self.rooms if r.id == room_id), None)

    def get_rack(self, rack_id: str) -> Optional[Rack]:
        """Obtiene un rack de piso específico"""
        return next((r for r in self.racks if r.id == rack_id), None)
