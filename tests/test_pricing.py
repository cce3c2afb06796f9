import pytest
from pydantic import ValidationError

from sitesurvey.engine.errors import PricingError, UnknownCatalogKindError
from sitesurvey.engine.rollup import collect_assigned_items
from sitesurvey.pricing.bom import BOM_COLUMNS, bom_frame, bom_totals, products_by_brand
from sitesurvey.pricing.overlay import (
    PriceEntry, PricingOverlay, gross_up, margin_percent, markup_percent, markup_price,
)


class TestPriceHelpers:
    def test_gross_up(self):
        assert gross_up(100, 20) == pytest.approx(125)
        assert gross_up(100, 0) == 100

    def test_gross_up_non_positive_cost(self):
        assert gross_up(0, 30) == 0
        assert gross_up(-5, 30) == 0

    @pytest.mark.parametrize("margin", [100, 150, -1])
    def test_invalid_margin_raises(self, margin):
        with pytest.raises(PricingError):
            gross_up(100, margin)

    def test_markup(self):
        assert markup_price(100, 25) == pytest.approx(125)
        assert markup_percent(100, 125) == pytest.approx(25)
        assert margin_percent(100, 125) == pytest.approx(20)
        assert markup_percent(0, 10) == 0
        assert margin_percent(10, 0) == 0


class TestPricingOverlay:
    def test_set_and_get(self):
        overlay = PricingOverlay()
        entry = overlay.set("product", "P-1", 80, margin=20)
        assert entry.total_price == pytest.approx(100)
        assert overlay.get("product", "P-1") == entry
        assert overlay.get("service", "P-1") is None

    def test_entry_rejects_margin_of_100(self):
        with pytest.raises(ValidationError):
            PriceEntry(unit_price=10, margin_percent=100)

    def test_unknown_kind(self):
        with pytest.raises(UnknownCatalogKindError):
            PricingOverlay().get("bundle", "x")

    def test_evict(self):
        overlay = PricingOverlay(services={"S-1": {"unitPrice": 10}})
        assert overlay.evict("service", "S-1")
        assert not overlay.evict("service", "S-1")

    def test_document_round_trip(self, sample_document):
        overlay = PricingOverlay.from_document(sample_document)
        document = overlay.to_document()
        assert document["productPricing"]["P-AP"]["marginPercent"] == 20
        assert document["productPricing"]["P-AP"]["totalPrice"] == pytest.approx(125)
        again = PricingOverlay.from_document(document)
        assert again.get("product", "P-AP") == overlay.get("product", "P-AP")

    def test_margin_alias(self):
        overlay = PricingOverlay(products={"P": {"unitPrice": 50, "margin": 50}})
        assert overlay.get("product", "P").total_price == pytest.approx(100)


class TestBom:
    @pytest.fixture
    def items(self, sample_buildings, catalog):
        return collect_assigned_items(sample_buildings, catalog)

    @pytest.fixture
    def overlay(self, sample_document):
        return PricingOverlay.from_document(sample_document)

    def test_frame_columns_and_rows(self, items, overlay):
        frame = bom_frame(items, overlay)
        assert list(frame.columns) == BOM_COLUMNS
        assert list(frame["id"]) == ["P-SW", "P-CAT6", "P-AP", "P-JACK", "S-INSTALL"]
        assert list(frame["type"]) == ["product"] * 4 + ["service"]

    def test_line_totals(self, items, overlay):
        frame = bom_frame(items, overlay).set_index("id")
        assert frame.loc["P-AP", "line_cost"] == pytest.approx(700)
        assert frame.loc["P-AP", "line_total"] == pytest.approx(875)
        assert frame.loc["P-SW", "unit_price"] == 0

    def test_totals(self, items, overlay):
        totals = bom_totals(bom_frame(items, overlay))
        assert totals["subtotal"] == pytest.approx(798)
        assert totals["total"] == pytest.approx(1023)
        assert totals["margin_amount"] == pytest.approx(225)
        assert totals["average_margin_percent"] == pytest.approx(225 / 1023 * 100)

    def test_empty_totals(self):
        totals = bom_totals(bom_frame(collect_assigned_items([])))
        assert totals == {"subtotal": 0.0, "total": 0.0, "margin_amount": 0.0, "average_margin_percent": 0.0}

    def test_products_by_brand(self, items):
        grouped = products_by_brand(items)
        assert list(grouped) == ["Cisco", "CAT6", "Ubiquiti", "Generic"]
        assert [r.id for r in grouped["Generic"]] == ["P-JACK"]
