"""
Spreadsheet exports (openpyxl).

Per-quotation workbook, built straight from the Quotation (no layout pass):
    Pricing            id / customer / date, then the pricing table
    Bill of Materials  #, Product, UOM, Quantity, Specification, Make

Master report: every quotation flattened to one row, admin download.

Amount cells hold the number (Indian-grouped ₹ number format) and the next
column holds the same figure as printed on the proposal, so the sheet reads
the same in any spreadsheet program.

A number format carries at most two conditional sections, and both go to the
lakh and crore tiers. Negative amounts therefore fall through to the plain
section and display with Western grouping (-150,000). The "As Printed" column
is the authoritative Indian-grouped figure for every value, negatives included.
"""

import io
import logging
from datetime import datetime
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill

from ..core.models import Quotation, User
from .layout import format_deduction, format_inr

log = logging.getLogger("solarquote.xlsx")

# ₹1,23,45,678 / ₹1,07,000 / ₹5,000; negatives use the last section
INR_NUMBER_FORMAT = r'[>=10000000]"₹"##\,##\,##\,##0;[>=100000]"₹"##\,##\,##0;"₹"##,##0'

HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill(start_color="FEE2E2", end_color="FEE2E2", fill_type="solid")
TITLE_FONT = Font(bold=True, size=12)

BOM_HEADERS = ["#", "Product", "UOM", "Quantity", "Specification", "Make"]

MASTER_COLUMNS = [
    ("Quotation ID", lambda q: q.id),
    ("Date", lambda q: q.date),
    ("Customer Name", lambda q: q.customer_name),
    ("DISCOM No.", lambda q: q.discom_number),
    ("Address", lambda q: q.address),
    ("Mobile", lambda q: q.mobile),
    ("Email", lambda q: q.email),
    ("Location", lambda q: q.location),
    ("System Description", lambda q: q.system_description),
    ("On-Grid System Cost", lambda q: q.pricing.on_grid_system_cost),
    ("Rooftop Plant Cost", lambda q: q.pricing.rooftop_plant_cost),
    ("Subsidy Amount", lambda q: q.pricing.subsidy_amount),
    ("Effective Cost", lambda q: q.pricing.effective_cost),
    ("KSEB Charges", lambda q: q.pricing.kseb_charges),
    ("Customized Structure Cost", lambda q: q.pricing.customized_structure_cost),
    ("Additional Material Cost", lambda q: q.pricing.additional_material_cost),
    ("BOM Items", lambda q: len(q.bom)),
    ("Created By", lambda q: q.created_by),
]
MONEY_COLUMNS = {"On-Grid System Cost", "Rooftop Plant Cost", "Subsidy Amount",
                 "Effective Cost", "KSEB Charges", "Customized Structure Cost",
                 "Additional Material Cost"}


def xlsx_filename(q: Quotation) -> str:
    return f"{q.id}_Solar_Quotation.xlsx"


def master_report_filename(now: datetime) -> str:
    return f"Master_Solar_Quotes_Report_{now.strftime('%Y-%m-%d')}_{now.strftime('%H%M')}.xlsx"


def _header_row(ws, row: int, headers):
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=row, column=col, value=header)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL


def _to_bytes(wb: Workbook) -> bytes:
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def build_quotation_workbook(q: Quotation) -> Workbook:
    p = q.pricing
    wb = Workbook()
    ws = wb.active
    ws.title = "Pricing"

    for label, value in (("Quotation ID", q.id), ("Customer", q.customer_name), ("Date", q.date)):
        ws.append([label, value])
        ws.cell(row=ws.max_row, column=1).font = HEADER_FONT
    ws.append([])

    _header_row(ws, 5, ["Description", "Amount (INR)", "As Printed"])
    amounts = [
        ("ONGRID SOLAR POWER GENERATING SYSTEM COST", p.on_grid_system_cost, format_inr(p.on_grid_system_cost)),
        ("Subsidy Amount", p.subsidy_amount, format_deduction(p.subsidy_amount)),
        ("Effective Cost", p.effective_cost, format_inr(p.effective_cost)),
        ("KSEB Charges", p.kseb_charges, format_inr(p.kseb_charges)),
        ("Customized Structure Cost", p.customized_structure_cost, format_inr(p.customized_structure_cost)),
        ("Additional Material Cost", p.additional_material_cost, format_inr(p.additional_material_cost)),
    ]
    for row, (label, value, shown) in enumerate(amounts, start=6):
        ws.cell(row=row, column=1, value=label)
        ws.cell(row=row, column=2, value=value).number_format = INR_NUMBER_FORMAT
        ws.cell(row=row, column=3, value=shown).alignment = Alignment(horizontal="right")
    ws.cell(row=8, column=1).font = HEADER_FONT
    ws.cell(row=8, column=2).font = HEADER_FONT

    ws.column_dimensions["A"].width = 45
    ws.column_dimensions["B"].width = 18
    ws.column_dimensions["C"].width = 18

    bom = wb.create_sheet("Bill of Materials")
    _header_row(bom, 1, BOM_HEADERS)
    for idx, item in enumerate(q.bom, start=1):
        bom.append([idx, item.product, item.uom, item.quantity, item.specification, item.make])
    for col, width in zip("ABCDEF", (6, 28, 10, 12, 36, 24)):
        bom.column_dimensions[col].width = width
    return wb


def export_quotation_xlsx(q: Quotation) -> dict:
    """{"ok", "xlsx", "filename"} or {"ok": False, "error"}."""
    try:
        data = _to_bytes(build_quotation_workbook(q))
    except Exception as e:
        log.error("XLSX export failed for %s: %s", q.id, e, exc_info=True)
        return {"ok": False, "error": f"Spreadsheet export failed: {e}"}
    log.info("XLSX %s: %d BOM rows, %d bytes", q.id, len(q.bom), len(data))
    return {"ok": True, "xlsx": data, "filename": xlsx_filename(q)}


def build_master_workbook(quotations: Iterable[Quotation], now: datetime = None,
                          users: Iterable[User] = ()) -> Workbook:
    names = {u.id: u.name for u in users}
    wb = Workbook()
    ws = wb.active
    ws.title = "All Quotations"
    ws["A1"] = f"Master Solar Quotes Report - {(now or datetime.now()).strftime('%Y-%m-%d %H:%M')}"
    ws["A1"].font = TITLE_FONT

    headers = [h for h, _ in MASTER_COLUMNS] + ["Created By Name"]
    _header_row(ws, 3, headers)
    row = 4
    for q in quotations:
        for col, (header, get) in enumerate(MASTER_COLUMNS, 1):
            cell = ws.cell(row=row, column=col, value=get(q))
            if header in MONEY_COLUMNS:
                cell.number_format = INR_NUMBER_FORMAT
        creator = q.created_by_name or names.get(q.created_by, "") or "Unknown"
        ws.cell(row=row, column=len(headers), value=creator)
        row += 1

    for idx, header in enumerate(headers):
        ws.column_dimensions[ws.cell(row=3, column=idx + 1).column_letter].width = \
            max(12, min(40, len(header) + 4))
    ws.freeze_panes = "B4"
    return wb


def export_master_report(quotations: Iterable[Quotation], now: datetime = None,
                         users: Iterable[User] = ()) -> dict:
    now = now or datetime.now()
    quotations = list(quotations)
    try:
        data = _to_bytes(build_master_workbook(quotations, now, users))
    except Exception as e:
        log.error("Master report failed: %s", e, exc_info=True)
        return {"ok": False, "error": f"Report export failed: {e}"}
    log.info("Master report: %d quotations", len(quotations))
    return {"ok": True, "xlsx": data, "filename": master_report_filename(now)}
