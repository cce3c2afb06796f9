from typing import List, Literal, Optional, Union

from pydantic import Field

from .assignments import AssignableNode
from .base import SurveyModel


class SwitchPort(SurveyModel):
    id: str
    number: int = 0
    label: str = ""
    vlan: Optional[str] = None
    poe: bool = False


class RouterInterface(SurveyModel):
    id: str
    name: str = ""
    type: str = "LAN"
    speed: str = ""


class VirtualMachine(SurveyModel):
    id: str
    name: str = ""
    os: str = ""
    cpu: int = 0
    memory: int = 0
    storage: int = 0


class OutletConnection(SurveyModel):
    """Cableado de una toma hacia el rack (from_device es la etiqueta del puerto)"""

    id: str
    from_device: str = ""
    to_device: str = ""
    connection_type: str = ""
    cable_type: str = ""


class CableTermination(AssignableNode):
    kind: Literal["cable_termination"] = "cable_termination"
    cable_type: str = "CAT6"
    quantity: float = 0
    total_fibers: Optional[int] = None
    terminated_fibers: Optional[int] = None
    from_location: Optional[str] = None
    to_location: Optional[str] = None


class Switch(AssignableNode):
    kind: Literal["switch"] = "switch"
    name: str = ""
    brand: str = ""
    model: str = ""
    ip: str = ""
    ports: List[SwitchPort] = Field(default_factory=list)
    poe_enabled: bool = False
    poe_ports_count: int = 0


class Router(AssignableNode):
    kind: Literal["router"] = "router"
    name: str = ""
    brand: str = ""
    model: str = ""
    ip: str = ""
    interfaces: List[RouterInterface] = Field(default_factory=list)


class Server(AssignableNode):
    kind: Literal["server"] = "server"
    name: str = ""
    brand: str = ""
    model: str = ""
    ip: str = ""
    is_virtualized: bool = False
    virtual_machines: List[VirtualMachine] = Field(default_factory=list)


class Pbx(AssignableNode):
    kind: Literal["pbx"] = "pbx"
    brand: str = ""
    model: str = ""
    pbx_type: str = "SIP"
    ip: str = ""
    extensions: Optional[int] = None


class Device(AssignableNode):
    kind: Literal["device"] = "device"
    type: str = "OTHER"
    brand: str = ""
    model: str = ""
    ip: str = ""
    quantity: float = 1


class Outlet(AssignableNode):
    kind: Literal["outlet"] = "outlet"
    label: str = ""
    type: str = ""
    brand: str = ""
    quantity: float = 1
    connection: Optional[OutletConnection] = None


class Connection(AssignableNode):
    kind: Literal["connection"] = "connection"
    from_device: str = ""
    to_device: str = ""
    connection_type: str = ""
    cable_type: str = ""
    length: float = 0
    quantity: Optional[float] = None


LeafNode = Union[CableTermination, Switch, Router, Server, Pbx, Device, Outlet, Connection]

# Etiquetas de categoría usadas cuando el catálogo no tiene datos
PRODUCT_CATEGORIES = {
    "cable_termination": "Cable Termination",
    "switch": "Network Switch",
    "router": "Network Router",
    "server": "Server",
    "pbx": "VoIP PBX",
    "device": "Device",
    "outlet": "Network Outlet",
    "connection": "Network Connection",
}

SERVICE_CATEGORIES = {
    "cable_termination": "Cable Termination Service",
    "switch": "Switch Service",
    "router": "Router Service",
    "server": "Server Service",
    "pbx": "PBX Service",
    "device": "Device Service",
    "outlet": "Outlet Service",
    "connection": "Connection Service",
}
