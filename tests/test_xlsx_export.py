"""
Tests for solarquote/forms/xlsx_export.py: per-quotation workbook and the
admin master report.
"""
import io
from dataclasses import replace
from datetime import datetime

from openpyxl import load_workbook

from solarquote.forms.xlsx_export import (BOM_HEADERS, INR_NUMBER_FORMAT,
                                          MASTER_COLUMNS, export_master_report,
                                          export_quotation_xlsx,
                                          master_report_filename,
                                          xlsx_filename)


def _load(data: bytes):
    return load_workbook(io.BytesIO(data))


# ═══════════════════════════════════════════════════════════════════════════════
# Quotation workbook
# ═══════════════════════════════════════════════════════════════════════════════

class TestQuotationWorkbook:

    def test_sheets_and_filename(self, sample_quotation):
        res = export_quotation_xlsx(sample_quotation)
        assert res["ok"]
        assert res["filename"] == "KAPL-1005/02-24_Solar_Quotation.xlsx"
        assert _load(res["xlsx"]).sheetnames == ["Pricing", "Bill of Materials"]

    def test_pricing_sheet(self, sample_quotation):
        ws = _load(export_quotation_xlsx(sample_quotation)["xlsx"])["Pricing"]
        assert ws["B1"].value == "KAPL-1005/02-24"
        assert ws["B2"].value == "Ravi Menon"
        assert ws["A6"].value == "ONGRID SOLAR POWER GENERATING SYSTEM COST"
        assert ws["B6"].value == 185000
        assert ws["B7"].value == 78000
        assert ws["C7"].value == "(-) ₹ 78,000"
        assert ws["A8"].value == "Effective Cost"
        assert ws["B8"].value == 107000
        assert ws["C8"].value == "₹1,07,000"
        assert ws["B8"].number_format == INR_NUMBER_FORMAT
        assert ws["B9"].value == 2500

    def test_negative_effective_cost(self, sample_quotation):
        q = replace(sample_quotation, pricing=replace(sample_quotation.pricing,
                                                      on_grid_system_cost=73000))
        ws = _load(export_quotation_xlsx(q)["xlsx"])["Pricing"]
        assert ws["B8"].value == -5000
        assert ws["C8"].value == "₹-5,000"

    def test_large_negative_keeps_printed_grouping(self, sample_quotation):
        q = replace(sample_quotation, pricing=replace(sample_quotation.pricing,
                                                      on_grid_system_cost=0,
                                                      subsidy_amount=150000))
        ws = _load(export_quotation_xlsx(q)["xlsx"])["Pricing"]
        assert ws["B8"].value == -150000
        assert ws["B8"].number_format == INR_NUMBER_FORMAT
        assert ws["C8"].value == "₹-1,50,000"
        assert ws["C7"].value == "(-) ₹ 1,50,000"

    def test_bom_sheet(self, sample_quotation):
        ws = _load(export_quotation_xlsx(sample_quotation)["xlsx"])["Bill of Materials"]
        rows = list(ws.iter_rows(values_only=True))
        assert list(rows[0]) == BOM_HEADERS
        assert rows[1] == (1, "Solar Panels", "Nos", "6", "550Wp Mono PERC", "Adani")
        assert rows[3][3] == "30-40"
        assert len(rows) == 4

    def test_empty_bom(self, sample_quotation):
        ws = _load(export_quotation_xlsx(replace(sample_quotation, bom=[]))["xlsx"])["Bill of Materials"]
        assert ws.max_row == 1

    def test_filename_helper(self, sample_quotation):
        assert xlsx_filename(sample_quotation).endswith("_Solar_Quotation.xlsx")


# ═══════════════════════════════════════════════════════════════════════════════
# Master report
# ═══════════════════════════════════════════════════════════════════════════════

class TestMasterReport:

    NOW = datetime(2024, 3, 5, 14, 7)

    def test_filename(self):
        assert master_report_filename(self.NOW) == "Master_Solar_Quotes_Report_2024-03-05_1407.xlsx"

    def test_rows(self, sample_state):
        res = export_master_report(sample_state.quotations, self.NOW, sample_state.users)
        assert res["ok"]
        assert res["filename"] == "Master_Solar_Quotes_Report_2024-03-05_1407.xlsx"
        ws = _load(res["xlsx"])["All Quotations"]
        assert "2024-03-05 14:07" in ws["A1"].value
        headers = [c.value for c in ws[3]]
        assert headers[:len(MASTER_COLUMNS)] == [h for h, _ in MASTER_COLUMNS]
        assert headers[-1] == "Created By Name"

        effective = headers.index("Effective Cost") + 1
        assert ws.cell(row=4, column=effective).value == 107000
        assert ws.cell(row=4, column=1).value == "KAPL-1005/02-24"
        assert ws.cell(row=5, column=3).value == "Sara Thomas"
        assert ws.cell(row=4, column=len(headers)).value == "Anil Kumar"
        # name not stored on the quotation, resolved from the user list
        assert ws.cell(row=5, column=len(headers)).value == "Beena Joseph"

    def test_unknown_creator(self, sample_quotation):
        q = replace(sample_quotation, created_by="gone", created_by_name="")
        ws = _load(export_master_report([q], self.NOW)["xlsx"])["All Quotations"]
        assert ws.cell(row=4, column=len(MASTER_COLUMNS) + 1).value == "Unknown"

    def test_empty(self):
        ws = _load(export_master_report([], self.NOW)["xlsx"])["All Quotations"]
        assert ws.max_row == 3
