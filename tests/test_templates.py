import pytest

from sitesurvey.engine.rollup import collect_assigned_items
from sitesurvey.templates.survey_templates import (
    SurveyTemplateManager,
    buildings_from_document,
    buildings_to_document,
    read_survey_document,
)

HOTEL_TEMPLATE = {
    "config": {"floors": 5, "address": "Av. Principal 100"},
    "central_rack": {
        "switches": [{"name": "Core", "brand": "Aruba", "products": [{"productId": "P-CORE"}]}],
    },
    "floors": {
        "ground_floor": {
            "rooms": {"lobby": 1},
            "racks": [{"name": "IDF-G", "cableTerminations": [{"cableType": "CAT6A", "quantity": 48}]}],
        },
        "typical_floor": {"rooms": {"guest_room": 10}},
    },
    "room_templates": {
        "lobby": {
            "devices": [{"type": "AP", "quantity": 2, "products": [{"productId": "P-AP", "quantity": 2}]}],
        },
        "guest_room": {
            "type": "GUEST",
            "devices": [{"type": "TV", "productId": "P-TV"}],
            "outlets": [{"type": "DATA", "quantity": 2, "products": [{"productId": "P-JACK", "quantity": 2}]}],
        },
    },
}


@pytest.fixture
def manager(tmp_path):
    manager = SurveyTemplateManager(str(tmp_path / "templates"))
    manager.save_template(HOTEL_TEMPLATE, "hotel")
    return manager


class TestSurveyTemplateManager:
    def test_list_and_load(self, manager):
        assert manager.list_templates() == ["hotel"]
        assert manager.load_template("hotel")["config"]["floors"] == 5

    def test_floor_layout(self, manager):
        building = manager.create_building_from_template("hotel", "Hotel Central")
        floors = building.floors
        assert [f.name for f in floors] == ["Ground Floor", "Typical Floor (2-4)", "Floor 5"]
        assert floors[1].is_typical
        assert floors[1].repeat_count == 3
        assert not floors[0].is_typical
        assert building.address == "Av. Principal 100"
        assert building.central_rack.name == "Central Rack"

    def test_repeated_room_is_typical(self, manager):
        building = manager.create_building_from_template("hotel", "Hotel Central")
        guest = building.floors[1].rooms[0]
        assert guest.is_typical
        assert guest.repeat_count == 10
        assert guest.type == "GUEST"
        assert guest.name == "Guest Room"
        lobby = building.floors[0].rooms[0]
        assert not lobby.is_typical
        assert lobby.type == "LOBBY"

    def test_rollup_from_template(self, manager):
        building = manager.create_building_from_template("hotel", "Hotel Central")
        items = collect_assigned_items([building])
        # piso típico ×3 más el último piso, cada uno con 10 habitaciones
        assert items.product("P-TV").quantity == 40
        assert items.product("P-JACK").quantity == 80
        assert items.product("P-AP").quantity == 2
        assert items.product("P-CORE").quantity == 1

    def test_override_floor_count(self, manager):
        building = manager.create_building_from_template("hotel", "Small", {"floors": 2})
        assert len(building.floors) == 2
        assert all(not f.is_typical for f in building.floors)

    def test_single_floor(self, manager):
        building = manager.create_building_from_template("hotel", "Tiny", {"floors": 1})
        assert [f.name for f in building.floors] == ["Ground Floor"]

    def test_ids_are_generated(self, manager):
        building = manager.create_building_from_template("hotel", "Hotel Central")
        rack = building.floors[0].racks[0]
        assert rack.id.startswith("rack-")
        assert rack.cable_terminations[0].id.startswith("termination-")
        assert building.floors[1].rooms[0].outlets[0].id.startswith("outlet-")

    def test_missing_template(self, manager):
        with pytest.raises(FileNotFoundError):
            manager.load_template("office")


class TestSurveyDocuments:
    def test_save_and_load_survey(self, manager, sample_buildings):
        path = manager.save_survey(sample_buildings, "hq", {"productPricing": {"P-AP": {"unitPrice": 1}}})
        assert path.exists()
        assert manager.load_survey("hq") == sample_buildings
        assert read_survey_document(path)["productPricing"]["P-AP"]["unitPrice"] == 1

    def test_document_helpers(self, sample_buildings):
        document = buildings_to_document(sample_buildings)
        assert document["buildings"][0]["centralRack"]["name"] == "Main Rack"
        assert buildings_from_document(document) == sample_buildings

    def test_empty_document(self):
        assert buildings_from_document({}) == []
