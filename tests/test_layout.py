"""
Tests for solarquote/forms: assembler, four-page layout, rupee formatting and
the HTML renderer.
"""
from dataclasses import replace

import pytest

from solarquote.core.models import Term
from solarquote.forms.assembler import active_terms, assemble_document
from solarquote.forms.html_render import render_html
from solarquote.forms.layout import (BankBlock, Columns, CustomerBlock,
                                     Highlight, Motto, NumberedList,
                                     Signatures, Table, format_deduction,
                                     format_inr, format_long_date,
                                     group_indian, render_document,
                                     round_rupees)


def _layout(quotation, state):
    return render_document(assemble_document(quotation, state))


def _first(page, cls):
    return next(b for b in page.blocks if isinstance(b, cls))


# ═══════════════════════════════════════════════════════════════════════════════
# Currency formatting
# ═══════════════════════════════════════════════════════════════════════════════

class TestCurrency:

    @pytest.mark.parametrize("value,expected", [
        (107000, "₹1,07,000"),
        (185000, "₹1,85,000"),
        (12345678, "₹1,23,45,678"),
        (999, "₹999"),
        (0, "₹0"),
        ("", "₹0"),
        (-5000, "₹-5,000"),
    ])
    def test_format_inr(self, value, expected):
        assert format_inr(value) == expected

    def test_half_up(self):
        assert round_rupees(1000.5) == 1001
        assert round_rupees(1000.49) == 1000
        assert round_rupees("junk") == 0

    def test_grouping(self):
        assert group_indian(1234567) == "12,34,567"
        assert group_indian(-100000) == "-1,00,000"

    def test_deduction(self):
        assert format_deduction(78000) == "(-) ₹ 78,000"

    def test_long_date(self):
        assert format_long_date("2024-02-14") == "14 February 2024"
        assert format_long_date("soon") == "soon"


# ═══════════════════════════════════════════════════════════════════════════════
# Assembler
# ═══════════════════════════════════════════════════════════════════════════════

class TestAssembler:

    def test_terms_ordered_and_filtered(self):
        terms = [Term(id="a", text="A", order=3), Term(id="b", text="B", order=1),
                 Term(id="c", text="C", order=2, enabled=False), Term(id="d", text="D", order=1)]
        assert [t.id for t in active_terms(terms)] == ["b", "d", "a"]

    def test_snapshot_isolated_from_settings(self, sample_quotation, sample_state):
        model = assemble_document(sample_quotation, sample_state)
        sample_state.company.name = "Renamed Later"
        sample_quotation.customer_name = "Edited Later"
        assert model.company.name == "Kondaas Automation Pvt Ltd"
        assert model.quotation.customer_name == "Ravi Menon"


# ═══════════════════════════════════════════════════════════════════════════════
# Layout
# ═══════════════════════════════════════════════════════════════════════════════

class TestLayout:

    def test_four_pages_with_footer(self, sample_quotation, sample_state):
        layout = _layout(sample_quotation, sample_state)
        assert layout.page_count == 4
        for n, page in enumerate(layout.pages, start=1):
            assert page.footer_page == f"Page {n} of 4"
            assert page.footer_ref == "Kondaas Automation Pvt Ltd // Ref: KAPL-1005/02-24"
        assert layout.title == "Quotation KAPL-1005/02-24 - Ravi Menon"

    def test_four_pages_even_when_empty(self, sample_quotation, sample_state):
        empty = replace(sample_quotation, bom=[])
        state = replace(sample_state, terms=[])
        assert _layout(empty, state).page_count == 4

    def test_pricing_page(self, sample_quotation, sample_state):
        page = _layout(sample_quotation, sample_state).pages[0]
        assert _first(page, Highlight).amount == "₹1,07,000"
        pricing = _first(page, Table)
        assert pricing.rows[0][2] == "₹1,85,000"
        assert pricing.rows[1][2] == "(-) ₹ 78,000"
        assert "3kW ON-GRID" in pricing.rows[0][1]

    def test_customer_details(self, sample_quotation, sample_state):
        cust = _first(_layout(sample_quotation, sample_state).pages[0], CustomerBlock)
        assert cust.quote_date == "14 February 2024"
        assert dict(cust.details)["Consumer No"] == "1156789012345"
        no_discom = replace(sample_quotation, discom_number="")
        cust = _first(_layout(no_discom, sample_state).pages[0], CustomerBlock)
        assert dict(cust.details)["Consumer No"] == "N/A"

    def test_negative_effective_cost_shown(self, sample_quotation, sample_state):
        q = replace(sample_quotation, pricing=replace(sample_quotation.pricing,
                                                      on_grid_system_cost=73000))
        assert _first(_layout(q, sample_state).pages[0], Highlight).amount == "₹-5,000"

    def test_bom_rows_verbatim(self, sample_quotation, sample_state):
        table = _first(_layout(sample_quotation, sample_state).pages[1], Table)
        assert table.columns == ("#", "Products", "Qty", "UOM", "Specification/Type", "Make")
        assert table.rows[2] == ("3", "DC Cable", "30-40", "Mtrs", "4sqmm multi strand", "Polycab")

    def test_terms_page(self, sample_quotation, sample_state):
        terms = [Term(id="x", text="Second", order=2), Term(id="y", text="First", order=1),
                 Term(id="z", text="Hidden", order=0, enabled=False)]
        page = _layout(sample_quotation, replace(sample_state, terms=terms)).pages[2]
        assert _first(page, NumberedList).items == (("1.", "First"), ("2.", "Second"))
        assert _first(page, Motto).watermark == "KONDAAS"

    def test_execution_page(self, sample_quotation, sample_state):
        page = _layout(sample_quotation, sample_state).pages[3]
        bank = _first(page, Columns).left
        assert isinstance(bank, BankBlock)
        assert dict(bank.rows)["IFSC Code"] == "HDFC0000123"
        assert bank.upi == "kondaas@hdfc"
        sig = _first(page, Signatures)
        assert sig.seal == ""
        assert sig.seal_placeholder == "Kondaas Official Seal"

    def test_images_only_from_data_urls(self, sample_quotation, sample_state, png_data_url):
        company = replace(sample_state.company, logo="http://example.com/logo.png", seal=png_data_url)
        layout = _layout(sample_quotation, replace(sample_state, company=company))
        assert all(p.logo == "" for p in layout.pages)
        assert _first(layout.pages[3], Signatures).seal == png_data_url

    def test_deterministic(self, sample_quotation, sample_state):
        assert _layout(sample_quotation, sample_state) == _layout(sample_quotation, sample_state)


# ═══════════════════════════════════════════════════════════════════════════════
# HTML
# ═══════════════════════════════════════════════════════════════════════════════

class TestRenderHtml:

    def test_four_a4_pages(self, sample_quotation, sample_state):
        html = render_html(_layout(sample_quotation, sample_state))
        assert html.count('class="a4-page"') == 4
        assert "₹1,07,000" in html
        assert "Page 4 of 4" in html
        assert "window.print" not in html

    def test_print_mode(self, sample_quotation, sample_state):
        html = render_html(_layout(sample_quotation, sample_state), print_mode=True)
        assert "window.print()" in html

    def test_escapes_customer_input(self, sample_quotation, sample_state):
        q = replace(sample_quotation, customer_name="<script>alert(1)</script>")
        html = render_html(_layout(q, sample_state))
        assert "<script>alert(1)" not in html
        assert "&lt;script&gt;" in html

    def test_logo_on_every_page(self, sample_quotation, sample_state, png_data_url):
        state = replace(sample_state, company=replace(sample_state.company, logo=png_data_url))
        html = render_html(_layout(sample_quotation, state))
        assert html.count('class="logo"') == 4
