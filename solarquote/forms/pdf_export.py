"""
Solar Quote PDF Export
======================
Draws a DocumentLayout onto A4 portrait pages with the reportlab canvas.

  - One canvas page per layout page, always four
  - A page whose blocks would overflow is scaled down as a whole, never split
  - Logo and seal images are decoded from their data URLs and resampled to
    PDF_RENDER_SCALE × their drawn size before embedding
  - Trailing pages with no text and no images are dropped (pypdf). Every
    page render_pdf draws carries its footer, so this pass only ever trims
    pages a canvas leaves behind after its last showPage; the four-page count
    itself is held by the scale-to-fit above
  - Any failure comes back as {"ok": False, "error": PDF_FAILURE_MESSAGE};
    the caller offers the browser print path instead

Coordinates below are measured from the TOP of the page, like the HTML;
_Pen converts to reportlab's bottom-up space.
"""

import base64
import binascii
import glob
import io
import logging
import os

from PIL import Image
from pypdf import PdfReader, PdfWriter
from reportlab.lib.colors import Color, HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from ..core.models import Quotation
from .layout import RUPEE, DocumentLayout, Page

log = logging.getLogger("solarquote.pdf")

PDF_FAILURE_MESSAGE = "Failed to generate PDF. Please use the Print button instead."

PAGE_W, PAGE_H = A4
MARGIN_X = 14 * mm
BODY_TOP = 20 * mm          # page padding + clearance under the pinned logo
FOOTER_ZONE = 20 * mm       # reserved for the running footer
BLOCK_GAP = 8
PDF_RENDER_SCALE = 2        # image pixels per drawn point
JPEG_QUALITY = 80

# ═══════════════════════════════════════════════════════════════════════════════
# Palette (matches the screen stylesheet)
# ═══════════════════════════════════════════════════════════════════════════════
BLACK    = HexColor("#000000")
INK      = HexColor("#111111")
WHITE    = HexColor("#FFFFFF")
RED      = HexColor("#DC2626")
RED_DARK = HexColor("#B91C1C")
RED_TINT = HexColor("#FEF2F2")
RED_PALE = HexColor("#FECACA")
GRAY     = HexColor("#6B7280")
GRAY_LT  = HexColor("#9CA3AF")
GRAY_DK  = HexColor("#374151")
PANEL    = HexColor("#F9FAFB")
RULE     = HexColor("#F3F4F6")
WATERMARK = Color(0, 0, 0, alpha=0.05)

# ═══════════════════════════════════════════════════════════════════════════════
# Fonts: a TTF with the rupee glyph when one is installed, else Helvetica
# ═══════════════════════════════════════════════════════════════════════════════
_FONT_CANDIDATES = [
    ("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
     "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"),
    ("/usr/share/fonts/dejavu/DejaVuSans.ttf",
     "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf"),
    ("/usr/share/fonts/TTF/DejaVuSans.ttf",
     "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf"),
]
_fonts = None


def _find_font_pair():
    env_dir = os.environ.get("SOLARQUOTE_PDF_FONT_DIR", "")
    if env_dir:
        regular = glob.glob(os.path.join(env_dir, "*Sans.ttf"))
        bold = glob.glob(os.path.join(env_dir, "*Sans-Bold.ttf"))
        if regular and bold:
            return regular[0], bold[0]
    for regular, bold in _FONT_CANDIDATES:
        if os.path.exists(regular) and os.path.exists(bold):
            return regular, bold
    return None


def _get_fonts() -> dict:
    """{"regular", "bold", "rupee"}; registered once per process."""
    global _fonts
    if _fonts is not None:
        return _fonts
    pair = _find_font_pair()
    if pair:
        try:
            pdfmetrics.registerFont(TTFont("SQSans", pair[0]))
            pdfmetrics.registerFont(TTFont("SQSans-Bold", pair[1]))
            _fonts = {"regular": "SQSans", "bold": "SQSans-Bold", "rupee": True}
            log.info("PDF font: %s", pair[0])
            return _fonts
        except Exception as e:
            log.warning("TTF registration failed (%s), using Helvetica", e)
    _fonts = {"regular": "Helvetica", "bold": "Helvetica-Bold", "rupee": False}
    return _fonts


# ═══════════════════════════════════════════════════════════════════════════════
# Images
# ═══════════════════════════════════════════════════════════════════════════════

def decode_data_url(data_url: str) -> Image.Image:
    """data:image/...;base64,... → PIL image. Raises ValueError on bad input."""
    head, sep, payload = (data_url or "").partition(",")
    if not sep or not head.startswith("data:image/") or ";base64" not in head:
        raise ValueError("not a base64 image data URL")
    try:
        raw = base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"bad base64 payload: {e}")
    img = Image.open(io.BytesIO(raw))
    img.load()
    return img


def _raster(img: Image.Image, draw_w: float, draw_h: float) -> ImageReader:
    """Resample to PDF_RENDER_SCALE × the drawn size; JPEG unless transparent."""
    px = (max(1, round(draw_w * PDF_RENDER_SCALE)), max(1, round(draw_h * PDF_RENDER_SCALE)))
    has_alpha = img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info)
    img = img.convert("RGBA" if has_alpha else "RGB").resize(px, Image.LANCZOS)
    if has_alpha:
        return ImageReader(img)
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=JPEG_QUALITY)
    buf.seek(0)
    return ImageReader(buf)


# ═══════════════════════════════════════════════════════════════════════════════
# Pen: top-down drawing helpers; dry=True only measures
# ═══════════════════════════════════════════════════════════════════════════════

class _Pen:
    def __init__(self, c, fonts: dict, dry: bool = False):
        self.c = c
        self.fonts = fonts
        self.dry = dry

    def font(self, bold=False):
        return self.fonts["bold" if bold else "regular"]

    def clean(self, s) -> str:
        s = "" if s is None else str(s)
        if not self.fonts["rupee"]:
            s = s.replace(RUPEE + " ", "Rs. ").replace(RUPEE, "Rs.")
        return s

    def width(self, s, size, bold=False) -> float:
        return pdfmetrics.stringWidth(self.clean(s), self.font(bold), size)

    def lines(self, s, size, bold, width) -> list:
        s = self.clean(s)
        if not s:
            return []
        return simpleSplit(s, self.font(bold), size, max(width, 1))

    def text(self, x, y, s, size=9, bold=False, color=INK, align="left"):
        """Baseline at y (from top)."""
        if self.dry:
            return
        c = self.c
        c.setFont(self.font(bold), size)
        c.setFillColor(color)
        s = self.clean(s)
        rl_y = PAGE_H - y
        if align == "right":
            c.drawRightString(x, rl_y, s)
        elif align == "center":
            c.drawCentredString(x, rl_y, s)
        else:
            c.drawString(x, rl_y, s)

    def para(self, x, y, s, width, size=9, bold=False, color=INK, align="left",
             leading=1.3) -> float:
        """Wrapped text whose first line's top sits at y. Returns height used."""
        step = size * leading
        out = self.lines(s, size, bold, width)
        for i, line in enumerate(out):
            ax = x + width if align == "right" else x + width / 2 if align == "center" else x
            self.text(ax, y + size + i * step, line, size, bold, color, align)
        return len(out) * step

    def rect(self, x, y, w, h, fill=None, stroke=None, line_width=0.5, radius=0):
        if self.dry:
            return
        c = self.c
        if fill is not None:
            c.setFillColor(fill)
        if stroke is not None:
            c.setStrokeColor(stroke)
            c.setLineWidth(line_width)
        args = (x, PAGE_H - y - h, w, h)
        kw = {"fill": int(fill is not None), "stroke": int(stroke is not None)}
        if radius:
            c.roundRect(*args, radius, **kw)
        else:
            c.rect(*args, **kw)

    def line(self, x1, y1, x2, y2, color=BLACK, line_width=0.5):
        if self.dry:
            return
        self.c.setStrokeColor(color)
        self.c.setLineWidth(line_width)
        self.c.line(x1, PAGE_H - y1, x2, PAGE_H - y2)

    def image(self, data_url, x, y, max_w, max_h, align="left"):
        """Fit inside max_w × max_h; returns the drawn (w, h) or (0, 0)."""
        try:
            img = decode_data_url(data_url)
        except (ValueError, OSError) as e:
            log.warning("Image skipped: %s", e)
            return 0, 0
        iw, ih = img.size
        scale = min(max_w / iw, max_h / ih)
        dw, dh = iw * scale, ih * scale
        if align == "center":
            x += (max_w - dw) / 2
        if not self.dry:
            self.c.drawImage(_raster(img, dw, dh), x, PAGE_H - y - dh, width=dw, height=dh,
                             mask="auto")
        return dw, dh


# ═══════════════════════════════════════════════════════════════════════════════
# Block drawers: (pen, block, x, y, w) → height
# ═══════════════════════════════════════════════════════════════════════════════

def _draw_letterhead(pen, b, x, y, w):
    lw, rw = w * 0.58, w * 0.38
    h = 0
    pen.text(x, y + 14, b.name.upper(), 14, True, BLACK)
    h += 18
    pen.text(x, y + h + 8, b.tagline, 7.5, True, RED)
    h += 14
    pen.text(x, y + h + 6, b.office_label.upper(), 5.5, True, BLACK)
    h += 8
    h += pen.para(x, y + h, b.office.upper(), lw, 7, True, GRAY)
    if b.gstin:
        h += pen.para(x, y + h, f"GSTIN: {b.gstin}", lw, 7, True, GRAY)

    rx = x + w - rw
    r = pen.para(rx, y, b.contact[0].upper() if b.contact else "", rw, 8, True, BLACK, "right")
    for line in b.contact[1:]:
        r += pen.para(rx, y + r, line, rw, 7, False, GRAY, "right")
    r += 4
    pen.line(rx, y + r, rx + rw, y + r, RULE)
    r += 4
    pen.text(rx, y + r + 6, b.branches_label.upper(), 5.5, True, BLACK)
    r += 8
    for branch in b.branches:
        r += pen.para(rx, y + r, branch.upper(), rw, 7, False, GRAY)

    h = max(h, r) + 8
    pen.line(x, y + h, x + w, y + h, BLACK, 2)
    return h + 2


def _draw_customer(pen, b, x, y, w):
    pen.text(x, y + 8, "CUSTOMER DETAILS", 6, True, GRAY_LT)
    name_h = pen.para(x, y + 12, b.name.upper(), w * 0.55, 14, True, BLACK, leading=1.1)

    label_w = pen.width(b.quote_label.upper(), 7, True) + 14
    pen.rect(x + w - label_w, y, label_w, 12, fill=BLACK, radius=3)
    pen.text(x + w - 7, y + 8.5, b.quote_label.upper(), 7, True, WHITE, "right")
    pen.text(x + w, y + 30, b.quote_id, 14, True, RED, "right")
    pen.text(x + w, y + 42, b.quote_date.upper(), 8, True, GRAY_LT, "right")
    h = max(12 + name_h, 46) + 8

    # details strip: two columns of "LABEL: value"
    pad, col_w, step = 8, (w - 24) / 2, 8 * 1.3
    cells = [f"{label.upper()}: {val}" for label, val in b.details]
    rows = [cells[i:i + 2] for i in range(0, len(cells), 2)]
    row_hs = [max(len(pen.lines(cell, 8, True, col_w - 8)) for cell in row) * step for row in rows]
    box_h = 2 * pad + sum(row_hs) + 3 * max(len(rows) - 1, 0)
    pen.rect(x, y + h, w, box_h, fill=PANEL, stroke=RULE, radius=8)
    cy = y + h + pad
    for row, rh in zip(rows, row_hs):
        for col, cell in enumerate(row):
            pen.para(x + 12 + col * col_w, cy, cell, col_w - 8, 8, True, INK)
        cy += rh + 3
    return h + box_h


def _draw_banner(pen, b, x, y, w):
    text_h = len(pen.lines(b.text.upper(), 11, True, w - 24)) * 14.3
    h = 15 + max(text_h, 14.3) + 8
    pen.rect(x, y, w, h, fill=RED_TINT)
    pen.rect(x, y, 3, h, fill=RED)
    pen.text(x + 12, y + 11, b.label.upper(), 6.5, True, HexColor("#F87171"))
    pen.para(x + 12, y + 15, b.text.upper(), w - 24, 11, True, RED_DARK)
    return h


def _draw_heading(pen, b, x, y, w):
    color = RED if b.accent else BLACK
    pen.text(x, y + 11, b.text.upper(), 9.5, True, color)
    pen.line(x, y + 16, x + w, y + 16, color, 2)
    return 18


_ALIGN = {"l": "left", "c": "center", "r": "right"}


def _draw_table(pen, b, x, y, w):
    size = 8.5 if b.compact else 9.5
    pad = 4 if b.compact else 7
    step = size * 1.3
    col_w = [w * f for f in b.widths]
    col_x = [x + sum(col_w[:i]) for i in range(len(col_w))]
    last = len(b.columns) - 1

    head_h = 8 * 1.3 + 2 * pad
    pen.rect(x, y, w, head_h, fill=BLACK)
    for i, label in enumerate(b.columns):
        pen.para(col_x[i] + pad, y + pad - 1, label.upper(), col_w[i] - 2 * pad, 8, True, WHITE,
                 _ALIGN[b.align[i]])
    h = head_h

    for ri, row in enumerate(b.rows):
        # the amount column of the pricing tables is bold
        bold = [i == last and not b.compact for i in range(len(row))]
        row_h = max([1] + [len(pen.lines(cell, size, bold[i], col_w[i] - 2 * pad))
                           for i, cell in enumerate(row)]) * step + 2 * pad
        accent = ri in b.accent_rows
        if accent:
            pen.rect(x, y + h, w, row_h, fill=RED_TINT)
        for i, cell in enumerate(row):
            pen.para(col_x[i] + pad, y + h + pad, cell, col_w[i] - 2 * pad, size, bold[i],
                     RED_DARK if accent else INK, _ALIGN[b.align[i]])
        h += row_h
        pen.line(x, y + h, x + w, y + h, RULE)
    return h


def _draw_highlight(pen, b, x, y, w):
    tw = w * 0.62
    pad = 12
    text_h = len(pen.lines(b.title.upper(), 9, True, tw)) * 11.7
    for note in b.notes:
        text_h += 3 + len(pen.lines(note.upper(), 6, False, tw)) * 7.8
    h = max(text_h, 26) + 2 * pad
    pen.rect(x, y, w, h, fill=BLACK, radius=8)
    ty = y + pad
    ty += pen.para(x + pad, ty, b.title.upper(), tw, 9, True, WHITE)
    for note in b.notes:
        ty += 3
        ty += pen.para(x + pad, ty, note.upper(), tw, 6, False, GRAY_LT)
    pen.text(x + w - pad, y + h / 2 + 8, b.amount, 22, True, WHITE, "right")
    return h


def _draw_cards(pen, b, x, y, w):
    n = max(len(b.items), 1)
    gap = 6
    cw = (w - gap * (n - 1)) / n
    inner = cw - 12
    body = max(len(pen.lines(text, 7, True, inner)) * 9.1 for _, text in b.items) if b.items else 0
    h = 8 + 8 + body + 8
    for i, (label, text) in enumerate(b.items):
        cx = x + i * (cw + gap)
        pen.rect(cx, y, cw, h, fill=PANEL, stroke=RULE, radius=6)
        pen.text(cx + cw / 2, y + 13, label.upper(), 6, True, RED, "center")
        pen.para(cx + 6, y + 16, text, inner, 7, True, INK, "center")
    return h


def _draw_numbered(pen, b, x, y, w):
    h = 0
    for marker, text in b.items:
        pen.text(x + 12, y + h + 9, marker, 9, True, INK)
        h += max(pen.para(x + 36, y + h, text, w - 48, 9, False, GRAY_DK), 11.7) + 5
    return h


def _draw_motto(pen, b, x, y, w):
    pen.text(x + w / 2, y + 56, b.watermark, 60, True, WATERMARK, "center")
    pen.line(x + w * 0.125, y + 70, x + w * 0.875, y + 70, RULE)
    th = pen.para(x + w * 0.125, y + 74, b.text.upper(), w * 0.75, 7, True, GRAY_LT, "center")
    return 74 + th + 4


def _draw_columns(pen, b, x, y, w):
    gap = 14
    lw = w * b.split - gap / 2
    rw = w - lw - gap
    return max(_draw_block(pen, b.left, x, y, lw), _draw_block(pen, b.right, x + lw + gap, y, rw))


def _draw_bank(pen, b, x, y, w):
    pad = 10
    pen.rect(x, y, w, 4, fill=RED)
    h = 4 + pad
    pen.text(x + w / 2, y + h + 7, b.title.upper(), 7, True, RED, "center")
    h += 16
    for label, val in b.rows:
        pen.text(x + pad, y + h + 9, label.upper(), 7.5, True, GRAY_LT)
        vh = pen.para(x + w * 0.4, y + h, val, w * 0.6 - pad, 9.5, True, BLACK, "right")
        h += max(vh, 12.35) + 3
        pen.line(x + pad, y + h, x + w - pad, y + h, RULE)
        h += 2
    h += 4
    pen.text(x + w / 2, y + h + 8, b.upi_label.upper(), 7.5, True, GRAY_LT, "center")
    pen.text(x + w / 2, y + h + 22, b.upi, 11, True, BLACK, "center")
    return h + 28


def _draw_roadmap(pen, b, x, y, w):
    pad = 12
    tx, tw = x + pad + 38, w - 2 * pad - 38
    body = 0
    for _, title, desc in b.steps:
        body += 13 + len(pen.lines(desc, 8, True, tw)) * 10.4 + 14
    h = pad + 22 + body + pad
    pen.rect(x, y, w, h, fill=BLACK, radius=8)
    pen.text(x + w / 2, y + pad + 9, b.title.upper(), 8.5, True, RED, "center")
    sy = y + pad + 22
    for num, title, desc in b.steps:
        pen.text(x + pad, sy + 20, num, 22, True, GRAY_DK)
        pen.text(tx, sy + 10.5, title.upper(), 10.5, True, WHITE)
        sy += 13 + pen.para(tx, sy + 13, desc, tw, 8, True, GRAY_LT) + 14
    return h


def _draw_checklist(pen, b, x, y, w):
    pad = 16
    inner = w - 2 * pad
    col_w = (inner - 24) / 2
    rows = [b.items[i:i + 2] for i in range(0, len(b.items), 2)]
    row_hs = [max(len(pen.lines(it, 9, True, col_w - 12)) for it in r) * 11.7 + 4 for r in rows]
    notes_h = sum(len(pen.lines(n, 7.5, False, inner - 12)) * 9.75 + 2 for n in b.notes)
    h = pad + 20 + sum(row_hs) + 10 + 14 + notes_h + pad
    pen.rect(x, y, w, h, fill=PANEL, stroke=RULE, radius=14)
    pen.text(x + w / 2, y + pad + 10, b.title, 10, True, RED, "center")
    cy = y + pad + 20
    for r, rh in zip(rows, row_hs):
        for col, item in enumerate(r):
            cx = x + pad + col * (col_w + 24)
            if not pen.dry:
                pen.c.setFillColor(HexColor("#EF4444"))
                pen.c.circle(cx + 3, PAGE_H - (cy + 6), 2, fill=1, stroke=0)
            pen.para(cx + 12, cy, item, col_w - 12, 9, True, GRAY_DK)
        cy += rh
    cy += 6
    pen.line(x + pad, cy, x + w - pad, cy, HexColor("#E5E7EB"))
    cy += 4
    pen.text(x + pad, cy + 8, b.note_title.upper(), 8, True, GRAY)
    cy += 14
    for note in b.notes:
        pen.text(x + pad + 2, cy + 7.5, "•", 7.5, True, RED)
        cy += pen.para(x + pad + 12, cy, note, inner - 12, 7.5, False, GRAY, leading=1.3) + 2
    return h


def _draw_signatures(pen, b, x, y, w):
    box_w = 60 * mm
    space = 24 * mm
    lx, rx = x + 24, x + w - 24 - box_w
    if b.seal:
        pen.image(b.seal, rx, y, box_w, space - 2 * mm, align="center")
    else:
        pen.text(rx + box_w / 2, y + space - 6, b.seal_placeholder.upper(), 7, True, RED_PALE, "center")
    pen.line(lx, y + space, lx + box_w, y + space, BLACK, 2)
    pen.line(rx, y + space, rx + box_w, y + space, RED, 2)
    th = max(pen.para(lx, y + space + 4, b.customer_title.upper(), box_w, 10.5, True, BLACK, "center"),
             pen.para(rx, y + space + 4, b.company_title.upper(), box_w, 10.5, True, RED, "center"))
    cy = y + space + 4 + th + 4
    pen.text(lx + box_w / 2, cy + 7.5, b.customer_caption.upper(), 7.5, True, GRAY_LT, "center")
    pen.text(rx + box_w / 2, cy + 7.5, b.company_caption.upper(), 7.5, True, GRAY_LT, "center")
    return cy + 10 - y


DRAWERS = {
    "letterhead": _draw_letterhead,
    "customer": _draw_customer,
    "banner": _draw_banner,
    "heading": _draw_heading,
    "table": _draw_table,
    "highlight": _draw_highlight,
    "cards": _draw_cards,
    "numbered": _draw_numbered,
    "motto": _draw_motto,
    "columns": _draw_columns,
    "bank": _draw_bank,
    "roadmap": _draw_roadmap,
    "checklist": _draw_checklist,
    "signatures": _draw_signatures,
}

# Pushed to the bottom of the page when they are the last block
BOTTOM_ANCHORED = {"motto", "signatures"}


def _draw_block(pen, block, x, y, w) -> float:
    return DRAWERS[block.kind](pen, block, x, y, w)


def _blocks_height(pen, blocks, w) -> float:
    measure = _Pen(pen.c, pen.fonts, dry=True)
    total = 0
    for i, b in enumerate(blocks):
        total += _draw_block(measure, b, MARGIN_X, 0, w) + (BLOCK_GAP if i else 0)
    return total


# ═══════════════════════════════════════════════════════════════════════════════
# Pages
# ═══════════════════════════════════════════════════════════════════════════════

def _draw_page(c, page: Page, fonts: dict):
    pen = _Pen(c, fonts)
    width = PAGE_W - 2 * MARGIN_X
    avail = PAGE_H - BODY_TOP - FOOTER_ZONE
    needed = _blocks_height(pen, page.blocks, width)
    scale = min(1.0, avail / needed) if needed else 1.0
    if scale < 1.0:
        log.debug("Page %d content %.0fpt > %.0fpt, scaling %.3f", page.number, needed, avail, scale)

    # scale about the top-left corner of the body area
    c.saveState()
    c.translate(MARGIN_X, PAGE_H - BODY_TOP)
    c.scale(scale, scale)
    c.translate(-MARGIN_X, -(PAGE_H - BODY_TOP))
    room = avail / scale
    y = BODY_TOP
    for i, b in enumerate(page.blocks):
        if i:
            y += BLOCK_GAP
        last = i == len(page.blocks) - 1
        if last and b.kind in BOTTOM_ANCHORED:
            h = _draw_block(_Pen(c, fonts, dry=True), b, MARGIN_X, 0, width)
            y = max(y, BODY_TOP + room - h)
        y += _draw_block(pen, b, MARGIN_X, y, width)
    c.restoreState()

    if page.logo:
        pen.image(page.logo, 5 * mm, 4 * mm, 45 * mm, 12 * mm)

    fy = PAGE_H - 10 * mm
    pen.line(MARGIN_X, fy - 10, PAGE_W - MARGIN_X, fy - 10, RULE)
    pen.text(MARGIN_X, fy, page.footer_ref.upper(), 7, True, GRAY_LT)
    pen.text(PAGE_W - MARGIN_X, fy, page.footer_page.upper(), 7, True, HexColor("#D1D5DB"), "right")


def _is_blank(page) -> bool:
    if (page.extract_text() or "").strip():
        return False
    return len(page.images) == 0


def strip_blank_trailing_pages(pdf_bytes: bytes) -> bytes:
    reader = PdfReader(io.BytesIO(pdf_bytes))
    keep = len(reader.pages)
    while keep > 1 and _is_blank(reader.pages[keep - 1]):
        keep -= 1
    if keep == len(reader.pages):
        return pdf_bytes
    log.info("Dropping %d blank trailing page(s)", len(reader.pages) - keep)
    writer = PdfWriter()
    for page in reader.pages[:keep]:
        writer.add_page(page)
    if reader.metadata:
        writer.add_metadata({k: str(v) for k, v in reader.metadata.items()})
    out = io.BytesIO()
    writer.write(out)
    return out.getvalue()


def pdf_filename(q: Quotation) -> str:
    return f"{q.customer_name}_{q.discom_number or 'NA'}_{q.id}.pdf"


def render_pdf(layout: DocumentLayout) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    c.setTitle(layout.title)
    c.setSubject(f"Solar quotation {layout.quotation_id}")
    c.setCreator("Solar Quote Pro")
    fonts = _get_fonts()
    for page in layout.pages:
        _draw_page(c, page, fonts)
        c.showPage()
    c.save()
    return strip_blank_trailing_pages(buf.getvalue())


def export_pdf(layout: DocumentLayout, quotation: Quotation) -> dict:
    """{"ok", "pdf", "filename", "pages"} or {"ok": False, "error"}."""
    try:
        data = render_pdf(layout)
        pages = len(PdfReader(io.BytesIO(data)).pages)
    except Exception as e:
        log.error("PDF export failed for %s: %s", quotation.id, e, exc_info=True)
        return {"ok": False, "error": PDF_FAILURE_MESSAGE}
    log.info("PDF %s: %d pages, %d bytes", quotation.id, pages, len(data))
    return {"ok": True, "pdf": data, "filename": pdf_filename(quotation), "pages": pages}
