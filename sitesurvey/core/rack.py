from typing import Any, List, Optional

from pydantic import AliasChoices, Field, model_validator

from .base import SurveyModel
from .device import CableTermination, Connection, Pbx, Router, Server, Switch

# Orden fijo de recorrido de las colecciones de un rack
RACK_COLLECTIONS = (
    "cable_terminations",
    "switches",
    "routers",
    "servers",
    "pbx",
    "connections",
)


class Rack(SurveyModel):
    """Rack central del edificio o rack de piso"""

    id: str
    name: str = ""
    code: Optional[str] = None
    location: str = ""
    units: int = 42
    cable_terminations: List[CableTermination] = Field(default_factory=list)
    switches: List[Switch] = Field(default_factory=list)
    routers: List[Router] = Field(default_factory=list)
    servers: List[Server] = Field(default_factory=list)
    pbx: List[Pbx] = Field(
        default_factory=list,
        validation_alias=AliasChoices("pbx", "voipPbx"),
    )
    connections: List[Connection] = Field(default_factory=list)
    is_future_proposal: bool = False

    @model_validator(mode="before")
    @classmethod
    def _normalize_collections(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        # older surveys stored a single PBX object instead of a list
        for key in ("pbx", "voipPbx"):
            if isinstance(data.get(key), dict):
                data[key] = [data[key]]
        for key in ("cableTerminations", "cable_terminations", "switches", "routers",
                    "servers", "pbx", "voipPbx", "connections"):
            if key in data and data[key] is None:
                data[key] = []
        return data
