"""
solarquote/forms/layout.py — Four-Page Proposal Layout

render_document(model) turns a DocumentModel into a DocumentLayout: four pages,
each a tuple of typed blocks plus the running footer. The HTML renderer and
the PDF renderer both walk the same blocks, so screen, print and PDF never
diverge.

    Page 1  Summary & Pricing      letterhead, customer, system, pricing,
                                   customer-scope charges, quality assurance
    Page 2  Bill of Materials
    Page 3  Terms & Conditions
    Page 4  Execution & Compliance bank details, roadmap, documents, signatures

Amounts are rounded only here, when they become text (format_inr).
Everything in this module is deterministic: same model in, equal layout out.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import ClassVar, Tuple

from .assembler import DocumentModel

PAGE_COUNT = 4
RUPEE = "₹"

TAGLINE = "ADANI SOLAR AUTHORIZED CHANNEL PARTNER"
MOTTO = "Truly DEPENDABLE; PROMPT Always; QUALITY First; HIGH on ENERGY"

ROADMAP = (
    ("01", "Delivery", "7-10 Days After Advance Payment & KSEB Feasibility Approval"),
    ("02", "Payment", "10% Advance, 90% at the time of Material delivery"),
    ("03", "Installation", "7-10 Days from 90% Payment Clearance after material delivery"),
)

REQUIRED_DOCUMENTS = (
    "Mobile Number",
    "Aadhar Card",
    "Email ID",
    "Cancelled Cheque / Bank Passbook Front Page",
    "Google Map Location (Longitude and Latitude)",
    "KSEB Bill Copy",
    "Passport Size Photo",
)

DOCUMENT_NOTES = (
    "All documents should belong to the KSEB consumer number owner's name.",
    "The KSEB consumer number owner's name and the bank passbook account holder's "
    "name must be the same for the consumer to receive MNRE subsidy.",
    "The bank loan can only be applied for under the name of the KSEB consumer",
    "Vendor-side bank loan documents will be provided only after MNRE registration, "
    "Jansamarth portal registration, and a 10% advance payment",
    "KSEB charges and structure cost are not included in the loan amount. The customer "
    "must pay the balance amount beyond the sanctioned loan, along with KSEB charges "
    "and structure cost, separately.",
)

SUBSIDY_LINE = ("Subsidy Amount as Per PM Surya Ghar Approved Guidelines "
                "Directly Credit to Customer Bank Account")
EFFECTIVE_TITLE = "Customer Effective Cost After Subsidy As Per the Current Slab"
EFFECTIVE_NOTES = (
    "Inclusive of GST, Transportation & Standard Installation",
    "Consumer Need to Pay Total Plant Cost, MNRE Subsidy Will Directly Reach "
    "the Customer's Account Within 1-3 Month",
)


# ═══════════════════════════════════════════════════════════════════════════════
# Currency
# ═══════════════════════════════════════════════════════════════════════════════

def round_rupees(value) -> int:
    """Half-up to a whole rupee. Blank or junk is 0."""
    try:
        d = Decimal(str(value if value not in (None, "") else 0))
    except InvalidOperation:
        return 0
    if not d.is_finite():
        return 0
    return int(d.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def group_indian(n: int) -> str:
    """1234567 → 12,34,567 (last three digits, then pairs)."""
    digits = str(abs(n))
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        pairs = []
        while len(head) > 2:
            pairs.insert(0, head[-2:])
            head = head[:-2]
        if head:
            pairs.insert(0, head)
        digits = ",".join(pairs + [tail])
    return ("-" if n < 0 else "") + digits


def format_inr(value) -> str:
    """₹1,07,000. Negative amounts are shown, not clamped: ₹-5,000."""
    return f"{RUPEE}{group_indian(round_rupees(value))}"


def format_deduction(value) -> str:
    return f"(-) {RUPEE} {group_indian(round_rupees(value))}"


def format_long_date(value: str) -> str:
    """2024-02-14 → 14 February 2024; anything unparseable passes through."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").strftime("%d %B %Y")
    except (TypeError, ValueError):
        return value or ""


def _image(data_url: str) -> str:
    return data_url if (data_url or "").startswith("data:image/") else ""


# ═══════════════════════════════════════════════════════════════════════════════
# Blocks
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Letterhead:
    kind: ClassVar[str] = "letterhead"
    name: str
    tagline: str
    office_label: str
    office: str
    contact: Tuple[str, ...]          # website, email, phone
    branches_label: str
    branches: Tuple[str, ...]
    gstin: str = ""


@dataclass(frozen=True)
class CustomerBlock:
    kind: ClassVar[str] = "customer"
    name: str
    quote_label: str
    quote_id: str
    quote_date: str
    details: Tuple[Tuple[str, str], ...]


@dataclass(frozen=True)
class Banner:
    kind: ClassVar[str] = "banner"
    label: str
    text: str


@dataclass(frozen=True)
class Heading:
    kind: ClassVar[str] = "heading"
    text: str
    accent: bool = False


@dataclass(frozen=True)
class Table:
    kind: ClassVar[str] = "table"
    columns: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
    widths: Tuple[float, ...]          # fractions of the content width
    align: Tuple[str, ...]             # "l" | "c" | "r" per column
    accent_rows: Tuple[int, ...] = ()
    compact: bool = False


@dataclass(frozen=True)
class Highlight:
    kind: ClassVar[str] = "highlight"
    title: str
    notes: Tuple[str, ...]
    amount: str


@dataclass(frozen=True)
class Cards:
    kind: ClassVar[str] = "cards"
    items: Tuple[Tuple[str, str], ...]


@dataclass(frozen=True)
class NumberedList:
    kind: ClassVar[str] = "numbered"
    items: Tuple[Tuple[str, str], ...]   # (marker, text)


@dataclass(frozen=True)
class Motto:
    kind: ClassVar[str] = "motto"
    watermark: str
    text: str


@dataclass(frozen=True)
class BankBlock:
    kind: ClassVar[str] = "bank"
    title: str
    rows: Tuple[Tuple[str, str], ...]
    upi_label: str
    upi: str


@dataclass(frozen=True)
class Roadmap:
    kind: ClassVar[str] = "roadmap"
    title: str
    steps: Tuple[Tuple[str, str, str], ...]


@dataclass(frozen=True)
class Checklist:
    kind: ClassVar[str] = "checklist"
    title: str
    items: Tuple[str, ...]
    note_title: str
    notes: Tuple[str, ...]


@dataclass(frozen=True)
class Signatures:
    kind: ClassVar[str] = "signatures"
    customer_title: str
    customer_caption: str
    company_title: str
    company_caption: str
    seal: str                 # data URL or ""
    seal_placeholder: str


@dataclass(frozen=True)
class Columns:
    kind: ClassVar[str] = "columns"
    left: object
    right: object
    split: float = 0.6


@dataclass(frozen=True)
class Page:
    number: int
    title: str
    blocks: tuple
    footer_ref: str
    footer_page: str
    logo: str = ""


@dataclass(frozen=True)
class DocumentLayout:
    title: str
    quotation_id: str
    pages: Tuple[Page, ...]

    @property
    def page_count(self) -> int:
        return len(self.pages)


# ═══════════════════════════════════════════════════════════════════════════════
# Pages
# ═══════════════════════════════════════════════════════════════════════════════

def _summary_blocks(m: DocumentModel) -> tuple:
    q, co, w = m.quotation, m.company, m.warranty
    p = q.pricing
    return (
        Letterhead(
            name=co.name, tagline=TAGLINE,
            office_label="Head Office", office=co.head_office,
            contact=(co.website, co.email, co.phone),
            branches_label="Regional Branches",
            branches=(co.regional_office1, co.regional_office2),
            gstin=co.gstin,
        ),
        CustomerBlock(
            name=q.customer_name,
            quote_label="Quotation No & Date",
            quote_id=q.id,
            quote_date=format_long_date(q.date),
            details=(
                ("Consumer No", q.discom_number or "N/A"),
                ("Mobile", q.mobile),
                ("Email", q.email or "N/A"),
                ("Location", q.location),
                ("Address", q.address),
            ),
        ),
        Banner(label="PRODUCT NAME / PROPOSED SYSTEM", text=q.system_description),
        Heading("PRICING AND ESTIMATION", accent=True),
        Table(
            columns=("SL No", "Description", "Rate (INR)"),
            rows=(
                ("01", f"Total plant cost of {q.system_description}", format_inr(p.on_grid_system_cost)),
                ("02", SUBSIDY_LINE, format_deduction(p.subsidy_amount)),
            ),
            widths=(0.12, 0.62, 0.26),
            align=("c", "l", "r"),
            accent_rows=(1,),
        ),
        Highlight(title=EFFECTIVE_TITLE, notes=EFFECTIVE_NOTES,
                  amount=format_inr(p.effective_cost)),
        Table(
            columns=("SL No", "Description (Customer Scope Charges)", "Rate (INR)"),
            rows=(
                ("01", "KSEB Charges", format_inr(p.kseb_charges)),
                ("02", "Customized Structure Cost", format_inr(p.customized_structure_cost)),
                ("03", "Additional Material Cost - If Applicable",
                 format_inr(p.additional_material_cost)),
            ),
            widths=(0.12, 0.62, 0.26),
            align=("c", "l", "r"),
            compact=True,
        ),
        Heading("Quality Assurance"),
        Cards(items=(
            ("Modules", w.panel_warranty),
            ("Inverter", w.inverter_warranty),
            ("Service", w.system_warranty),
            ("Monitor", w.monitoring_system),
        )),
    )


def _bom_blocks(m: DocumentModel) -> tuple:
    q = m.quotation
    rows = tuple(
        (str(idx), item.product, item.quantity, item.uom, item.specification, item.make)
        for idx, item in enumerate(q.bom, start=1)
    )
    return (
        Heading("Technical Specifications (BOM)"),
        Banner(label="Fixed Bill of Materials", text=q.system_description),
        Table(
            columns=("#", "Products", "Qty", "UOM", "Specification/Type", "Make"),
            rows=rows,
            widths=(0.05, 0.20, 0.10, 0.10, 0.275, 0.275),
            align=("l",) * 6,
            compact=True,
        ),
    )


def _terms_blocks(m: DocumentModel) -> tuple:
    return (
        Heading("Terms and Conditions"),
        NumberedList(items=tuple((f"{idx}.", t.text) for idx, t in enumerate(m.terms, start=1))),
        Motto(watermark=(m.company.name.split() or [""])[0].upper(), text=MOTTO),
    )


def _execution_blocks(m: DocumentModel) -> tuple:
    b, co = m.bank, m.company
    bank_rows = [("Account Holder", b.company_name),
                 ("Banking Partner", " / ".join(x for x in (b.bank_name, b.branch) if x)),
                 ("Account Number", b.account_number),
                 ("IFSC Code", b.ifsc)]
    # optional lines only appear when filled in
    for label, val in (("PAN Number", b.pan), ("GSTIN", b.gst_number), ("Bank Address", b.address)):
        if val:
            bank_rows.append((label, val))
    return (
        Heading("Execution & Compliance"),
        Columns(
            left=BankBlock(title="Company Bank Account Details", rows=tuple(bank_rows),
                           upi_label="UPI ID", upi=b.upi_id),
            right=Roadmap(title="Project Roadmap", steps=ROADMAP),
        ),
        Checklist(title="REQUIRED DOCUMENTS FOR APPLY SUBSIDY", items=REQUIRED_DOCUMENTS,
                  note_title="Note:", notes=DOCUMENT_NOTES),
        Signatures(
            customer_title="Authorized Customer",
            customer_caption="Signature & Full Name",
            company_title=f"For {co.name}",
            company_caption="Authorized Signatory",
            seal=_image(co.seal),
            seal_placeholder=f"{(co.name.split() or ['Company'])[0]} Official Seal",
        ),
    )


PAGE_BUILDERS = (
    ("Summary & Pricing", _summary_blocks),
    ("Bill of Materials", _bom_blocks),
    ("Terms & Conditions", _terms_blocks),
    ("Execution & Compliance", _execution_blocks),
)


def render_document(model: DocumentModel) -> DocumentLayout:
    """Exactly four pages, each with the running footer and the pinned logo."""
    q, co = model.quotation, model.company
    logo = _image(co.logo)
    pages = tuple(
        Page(
            number=n,
            title=title,
            blocks=build(model),
            footer_ref=f"{co.name} // Ref: {q.id}",
            footer_page=f"Page {n} of {PAGE_COUNT}",
            logo=logo,
        )
        for n, (title, build) in enumerate(PAGE_BUILDERS, start=1)
    )
    return DocumentLayout(title=f"Quotation {q.id} - {q.customer_name}".strip(" -"),
                          quotation_id=q.id, pages=pages)
