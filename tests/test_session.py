import pytest

from sitesurvey.engine import mutations as m
from sitesurvey.engine.lens import leaf_path, room_path
from sitesurvey.engine.session import SurveySession


@pytest.fixture
def session(sample_document, catalog):
    return SurveySession.from_document(sample_document, catalog)


class TestSurveySession:
    def test_from_document(self, session):
        assert len(session.buildings) == 1
        assert session.pricing.get("product", "P-AP").unit_price == 100

    def test_apply_replaces_snapshot(self, session):
        before = session.buildings
        result = session.apply(m.add_floor, "b1")
        assert session.buildings is result
        assert len(result[0].floors) == 3
        assert len(before[0].floors) == 2

    def test_apply_noop_keeps_snapshot(self, session):
        before = session.buildings
        session.apply(m.delete_floor, "b1", "missing")
        assert session.buildings is before

    def test_rollup_reflects_latest_snapshot(self, session):
        device = leaf_path(room_path("b1", "f1", "room-lobby"), "devices", "d1")
        session.apply(m.assign_product, device, "P-AP", 1)
        assert session.rollup().product("P-AP").quantity == 8

    def test_totals(self, session):
        assert session.totals()["total"] == pytest.approx(1023)
        assert len(session.priced_bom()) == 5

    def test_remove_catalog_item(self, session):
        session.remove_catalog_item("service", "S-INSTALL")
        assert session.rollup().services == []
        assert session.pricing.get("service", "S-INSTALL") is None

    def test_to_document_round_trip(self, session, catalog):
        again = SurveySession.from_document(session.to_document(), catalog)
        assert again.buildings == session.buildings
        assert again.totals() == session.totals()

    def test_replace(self, session):
        session.replace([])
        assert session.rollup().products == []
