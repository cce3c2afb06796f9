from sitesurvey.core.device import Device
from sitesurvey.engine.lens import (
    append_in, building_path, central_rack_path, floor_path, floor_rack_path,
    get_in, leaf_path, over_in, remove_in, room_path, set_in,
)


class TestGetIn:
    def test_resolves_nested_nodes(self, sample_buildings):
        assert get_in(sample_buildings, building_path("b1")).name == "HQ"
        assert get_in(sample_buildings, central_rack_path("b1")).name == "Main Rack"
        assert get_in(sample_buildings, floor_rack_path("b1", "f1", "r1")).name == "IDF-1"
        device = get_in(sample_buildings, leaf_path(room_path("b1", "f1", "room-lobby"), "devices", "d1"))
        assert device.ip == "10.0.1.5"

    def test_dangling_path_returns_none(self, sample_buildings):
        assert get_in(sample_buildings, floor_path("b1", "nope")) is None
        assert get_in(sample_buildings, building_path("missing")) is None
        assert get_in(sample_buildings, leaf_path(room_path("b1", "f1", "room-lobby"), "wires", "x")) is None


class TestOverIn:
    def test_rebuilds_ancestors_and_shares_siblings(self, sample_buildings):
        path = floor_path("b1", "f1")
        result = over_in(sample_buildings, path, lambda f: f.model_copy(update={"name": "Lobby Level"}))

        assert result is not sample_buildings
        assert result[0] is not sample_buildings[0]
        assert result[0].floors[0].name == "Lobby Level"
        assert sample_buildings[0].floors[0].name == "Ground"
        # el piso no tocado se comparte
        assert result[0].floors[1] is sample_buildings[0].floors[1]
        assert result[0].central_rack is sample_buildings[0].central_rack

    def test_dangling_path_returns_same_root(self, sample_buildings):
        result = over_in(sample_buildings, room_path("b1", "f1", "missing"), lambda r: r)
        assert result is sample_buildings

    def test_set_in_replaces_node(self, sample_buildings):
        path = leaf_path(room_path("b1", "f1", "room-lobby"), "devices", "d1")
        result = set_in(sample_buildings, path, Device(id="d1", type="CAMERA"))
        assert get_in(result, path).type == "CAMERA"


class TestAppendRemove:
    def test_append_to_root(self, sample_buildings):
        from sitesurvey.core.building import Building
        result = append_in(sample_buildings, (), "buildings", Building(id="b2"))
        assert [b.id for b in result] == ["b1", "b2"]
        assert len(sample_buildings) == 1

    def test_append_to_room_collection(self, sample_buildings):
        room = room_path("b1", "f1", "room-lobby")
        result = append_in(sample_buildings, room, "devices", Device(id="d9"))
        assert [d.id for d in get_in(result, room).devices] == ["d1", "d9"]

    def test_remove_leaf(self, sample_buildings):
        room = room_path("b1", "f1", "room-lobby")
        result = remove_in(sample_buildings, leaf_path(room, "outlets", "o1"))
        assert get_in(result, room).outlets == []

    def test_remove_singular_attribute_clears_it(self, sample_buildings):
        result = remove_in(sample_buildings, central_rack_path("b1"))
        assert result[0].central_rack is None

    def test_remove_dangling_is_noop(self, sample_buildings):
        assert remove_in(sample_buildings, floor_path("b1", "zzz")) is sample_buildings
