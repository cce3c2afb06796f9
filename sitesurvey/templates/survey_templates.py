from typing import Dict, List, Any, Optional, Union
import yaml
from pathlib import Path
import logging

from pydantic.alias_generators import to_camel

from ..core.building import Building
from ..core.device import Device, Outlet
from ..core.floor import Floor
from ..core.ids import generate_id
from ..core.rack import RACK_COLLECTIONS, Rack
from ..core.room import Room
from ..engine.mutations import COLLECTION_TYPES, ID_PREFIXES


def buildings_from_document(document: Dict[str, Any]) -> List[Building]:
    """Valida la lista de edificios de un documento de levantamiento"""
    return [Building.model_validate(b) for b in document.get("buildings") or []]


def buildings_to_document(buildings: List[Building]) -> Dict[str, Any]:
    return {"buildings": [b.to_dict() for b in buildings]}


def read_survey_document(path: Union[str, Path]) -> Dict[str, Any]:
    """Lee un documento de levantamiento en YAML o JSON"""
    with open(path, 'r') as f:
        return yaml.safe_load(f) or {}


def write_survey_document(document: Dict[str, Any], path: Union[str, Path]) -> None:
    with open(path, 'w') as f:
        yaml.safe_dump(document, f, sort_keys=False, allow_unicode=True)


class SurveyTemplateManager:
    def __init__(self, templates_dir: str = "config/templates"):
        self.templates_dir = Path(templates_dir)
        self.templates_dir.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger(__name__)

    def save_template(self, template: Dict[str, Any], name: str) -> None:
        """Guarda una plantilla de edificio"""
        template_path = self.templates_dir / f"{name}.yaml"
        with open(template_path, 'w') as f:
            yaml.safe_dump(template, f)

    def load_template(self, name: str) -> Dict[str, Any]:
        """Carga una plantilla de edificio"""
        template_path = self.templates_dir / f"{name}.yaml"
        with open(template_path, 'r') as f:
            return yaml.safe_load(f)

    def list_templates(self) -> List[str]:
        """Lista todas las plantillas disponibles"""
        return sorted(
            f.stem for f in self.templates_dir.glob("*.yaml") if not f.name.endswith(".survey.yaml")
        )

    def save_survey(self, buildings: List[Building], name: str,
                    pricing_document: Optional[Dict[str, Any]] = None) -> Path:
        """Guarda una instantánea del levantamiento junto con sus precios"""
        path = self.templates_dir / f"{name}.survey.yaml"
        write_survey_document({**buildings_to_document(buildings), **(pricing_document or {})}, path)
        self.logger.info(f"Survey snapshot with {len(buildings)} building(s) saved to {path}")
        return path

    def load_survey(self, name: str) -> List[Building]:
        """Carga una instantánea del levantamiento"""
        return buildings_from_document(read_survey_document(self.templates_dir / f"{name}.survey.yaml"))

    def create_building_from_template(
        self,
        template_name: str,
        building_name: str,
        overrides: Optional[Dict[str, Any]] = None
    ) -> Building:
        """Crea un nuevo edificio basado en una plantilla"""
        template = self.load_template(template_name)
        config = {**template.get("config", {}), **(overrides or {})}
        floor_templates = template.get("floors", {})
        room_templates = template.get("room_templates", {})
        total_floors = int(config.get("floors", 1))

        # Determina qué plantilla de piso usar
        typical = floor_templates["typical_floor"]
        ground = floor_templates.get("ground_floor", typical)
        top = floor_templates.get("top_floor", typical)

        floors = [self._build_floor(ground, room_templates, "Ground Floor", 1)]
        if total_floors > 2:
            floors.append(self._build_floor(
                typical, room_templates, f"Typical Floor (2-{total_floors - 1})", 2,
                repeat_count=total_floors - 2
            ))
        if total_floors > 1:
            floors.append(self._build_floor(top, room_templates, f"Floor {total_floors}", total_floors))

        central_rack = None
        if template.get("central_rack"):
            central_rack = self._build_rack({"name": "Central Rack", **template["central_rack"]})

        building = Building(
            id=generate_id("building"),
            name=building_name,
            code=config.get("code"),
            address=config.get("address"),
            central_rack=central_rack,
            floors=floors
        )
        self.logger.info(f"Building '{building_name}' created from template {template_name} "
                         f"({total_floors} floors, {len(floors)} modelled)")
        return building

    def _build_floor(
        self,
        floor_template: Dict[str, Any],
        room_templates: Dict[str, Any],
        name: str,
        level: int,
        repeat_count: int = 1
    ) -> Floor:
        rooms = []
        # Una habitación repetida se modela una vez como habitación típica
        for room_type, count in (floor_template.get("rooms") or {}).items():
            rooms.append(self._build_room(room_type, room_templates[room_type], int(count)))

        racks = [self._build_rack(rack) for rack in floor_template.get("racks") or []]
        return Floor(
            id=generate_id("floor"),
            name=name,
            level=level,
            is_typical=repeat_count > 1,
            repeat_count=repeat_count,
            racks=racks,
            rooms=rooms
        )

    def _build_room(self, room_type: str, room_template: Dict[str, Any], count: int) -> Room:
        devices = [
            Device.model_validate({"id": generate_id("device"), **entry})
            for entry in room_template.get("devices") or []
        ]
        outlets = [
            Outlet.model_validate({"id": generate_id("outlet"), **entry})
            for entry in room_template.get("outlets") or []
        ]
        return Room(
            id=generate_id("room"),
            name=room_template.get("name", room_type.replace("_", " ").title()),
            type=room_template.get("type", room_type.upper()),
            is_typical=count > 1,
            repeat_count=max(count, 1),
            devices=devices,
            outlets=outlets
        )

    def _build_rack(self, rack_template: Dict[str, Any]) -> Rack:
        data = {"id": generate_id("rack"), "name": "Rack 1", **rack_template}
        for collection in RACK_COLLECTIONS:
            leaf_type = COLLECTION_TYPES[collection]
            prefix = ID_PREFIXES[leaf_type.model_fields["kind"].default]
            # las plantillas pueden usar camelCase o snake_case
            entries = data.pop(to_camel(collection), None) or data.pop(collection, None) or []
            data[collection] = [{"id": generate_id(prefix), **entry} for entry in entries]
        return Rack.model_validate(data)
