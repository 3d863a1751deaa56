"""
Tests for solarquote/core/models.py and core/defaults.py: camelCase
(de)serialization, number coercion, effective cost and the built-in defaults.
"""
from solarquote.core.defaults import ID_SEQUENCE_FLOOR, default_settings, initial_state
from solarquote.core.models import (BOMTemplate, CompanyConfig, PricingConfig,
                                    ProductDescription, ProductPricing,
                                    Quotation, Term, User)


# ═══════════════════════════════════════════════════════════════════════════════
# Pricing
# ═══════════════════════════════════════════════════════════════════════════════

class TestPricingConfig:

    def test_effective_cost(self):
        p = PricingConfig(on_grid_system_cost=185000, subsidy_amount=78000)
        assert p.effective_cost == 107000

    def test_effective_cost_not_clamped(self):
        p = PricingConfig(on_grid_system_cost=73000, subsidy_amount=78000)
        assert p.effective_cost == -5000

    def test_from_camel_case(self):
        p = PricingConfig.from_dict({"onGridSystemCost": "185000", "subsidyAmount": 78000})
        assert p.on_grid_system_cost == 185000
        assert p.subsidy_amount == 78000
        assert p.kseb_charges == 0

    def test_blank_and_junk_are_zero(self):
        p = PricingConfig.from_dict({"onGridSystemCost": "", "ksebCharges": "abc"})
        assert p.on_grid_system_cost == 0
        assert p.kseb_charges == 0

    def test_keeps_fractions(self):
        p = PricingConfig.from_dict({"onGridSystemCost": "1000.5"})
        assert p.on_grid_system_cost == 1000.5

    def test_to_dict_uses_stored_keys(self):
        d = PricingConfig(on_grid_system_cost=1).to_dict()
        assert d["onGridSystemCost"] == 1
        assert set(d) == {"onGridSystemCost", "rooftopPlantCost", "subsidyAmount",
                          "ksebCharges", "additionalMaterialCost", "customizedStructureCost"}


class TestProductPricing:

    def test_flat_shape(self):
        p = ProductPricing.from_dict({"id": "p1", "name": "3kW", "onGridSystemCost": 185000})
        assert p.pricing.on_grid_system_cost == 185000

    def test_nested_shape(self):
        p = ProductPricing.from_dict({"id": "p1", "name": "3kW",
                                      "pricing": {"onGridSystemCost": 295000}})
        assert p.pricing.on_grid_system_cost == 295000

    def test_stored_flat(self):
        d = ProductPricing.from_dict({"id": "p1", "name": "x", "subsidyAmount": 5}).to_dict()
        assert d["subsidyAmount"] == 5
        assert "pricing" not in d


# ═══════════════════════════════════════════════════════════════════════════════
# Entities
# ═══════════════════════════════════════════════════════════════════════════════

class TestEntities:

    def test_quotation_dict_keys(self, sample_quotation):
        d = sample_quotation.to_dict()
        assert d["customerName"] == "Ravi Menon"
        assert d["discomNumber"] == "1156789012345"
        assert d["createdByName"] == "Anil Kumar"
        assert d["pricing"]["onGridSystemCost"] == 185000
        assert [i["id"] for i in d["bom"]] == ["b1", "b2", "b3"]

    def test_quotation_missing_fields_are_empty(self):
        q = Quotation.from_dict({"id": "KAPL-1001/01-24"})
        assert q.customer_name == ""
        assert q.bom == []
        assert q.pricing.effective_cost == 0

    def test_quotation_from_dict_back(self, sample_quotation):
        assert Quotation.from_dict(sample_quotation.to_dict()) == sample_quotation

    def test_user_unknown_role_falls_back(self):
        assert User.from_dict({"id": "1", "role": "superuser"}).role == "user"
        assert User.from_dict({"id": "1", "role": "TL"}).role == "TL"

    def test_term_bad_order(self):
        t = Term.from_dict({"id": "1", "text": "x", "order": "first"})
        assert t.order == 0
        assert t.enabled is True

    def test_company_accepts_snake_case(self):
        c = CompanyConfig.from_dict({"head_office": "Kochi"})
        assert c.head_office == "Kochi"

    def test_description_links(self):
        d = ProductDescription.from_dict({"id": "1", "name": "3kW", "defaultPricingId": "p3kw"})
        assert d.default_pricing_id == "p3kw"
        assert d.default_bom_template_id == ""

    def test_template_items(self):
        t = BOMTemplate.from_dict({"id": "t", "name": "T", "items": [{"id": "1", "product": "Panel"}]})
        assert t.items[0].product == "Panel"


# ═══════════════════════════════════════════════════════════════════════════════
# Defaults
# ═══════════════════════════════════════════════════════════════════════════════

class TestDefaults:

    def test_every_section_present(self):
        s = default_settings()
        for key in ("company", "bank", "pricing", "warranty", "terms",
                    "bom_templates", "product_descriptions", "users"):
            assert s[key], key

    def test_fresh_copies(self):
        a = default_settings()
        a["company"]["name"] = "changed"
        assert default_settings()["company"]["name"] != "changed"

    def test_initial_state(self):
        state = initial_state()
        assert state.quotations == []
        assert state.next_id == ID_SEQUENCE_FLOOR + 1 == 1001
        assert state.find_user("admin").role == "admin"

    def test_default_links_resolve(self):
        state = initial_state()
        pricing_ids = {p.id for p in state.product_pricing}
        template_ids = {t.id for t in state.bom_templates}
        for d in state.product_descriptions:
            assert d.default_pricing_id in pricing_ids | {""}
            assert d.default_bom_template_id in template_ids | {""}
