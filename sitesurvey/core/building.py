from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator

from .base import SurveyModel
from .floor import Floor
from .rack import RACK_COLLECTIONS, Rack
from .room import ROOM_COLLECTIONS


class Building(SurveyModel):
    """Raíz del árbol: un edificio con su rack central y sus pisos"""

    id: str
    name: str = ""
    code: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    central_rack: Optional[Rack] = None
    floors: List[Floor] = Field(default_factory=list)
    is_future_proposal: bool = False

    @model_validator(mode="before")
    @classmethod
    def _normalize_building(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("floors", []) is None:
            data = {**data, "floors": []}
        return data

    def get_floor(self, floor_id: str) -> Optional[Floor]:
        """Obtiene un piso específico"""
        return next((f for f in self.floors if f.id == floor_id), None)

    def get_building_stats(self) -> Dict[str, Any]:
        """Obtiene estadísticas del edificio"""
        racks = [self.central_rack] if self.central_rack else []
        racks += [rack for floor in self.floors for rack in floor.racks]
        rooms = [room for floor in self.floors for room in floor.rooms]

        rack_leaves = sum(len(getattr(rack, c)) for rack in racks for c in RACK_COLLECTIONS)
        room_leaves = sum(len(getattr(room, c)) for room in rooms for c in ROOM_COLLECTIONS)

        return {
            "total_floors": len(self.floors),
            "typical_floors": sum(1 for f in self.floors if f.is_typical),
            "total_racks": len(racks),
            "total_rooms": len(rooms),
            "total_leaves": rack_leaves + room_leaves,
        }
