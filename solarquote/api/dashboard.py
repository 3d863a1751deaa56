"""
Solar Quote Pro Dashboard
Quotation dashboard, editor, proposal exports (view / print / PDF / XLSX) and
the settings panel. Password protected (HTTP Basic); every request re-reads
state from the store, so the store is the only source of truth between requests.
"""
import base64
import copy
import functools
import io
import logging
import mimetypes
import re
import sqlite3
import time
from dataclasses import replace
from datetime import datetime

from flask import (Blueprint, Response, current_app, flash, g, jsonify, redirect,
                   render_template_string, request, send_file, url_for)

from .. import __version__
from ..core import db
from ..core.auth import LOGIN_HINT, authenticate, create_user
from ..core.catalog import (add_template, apply_product_defaults, copy_items,
                            create_description, create_pricing, create_template,
                            create_term, delete_template, duplicate_template,
                            find_pricing, find_template, template_from_items,
                            update_template)
from ..core.config import load_config
from ..core.models import (ROLES, BankConfig, BOMItem, CompanyConfig,
                           PricingConfig, ProductDescription, ProductPricing,
                           Quotation, Term, User, WarrantyConfig)
from ..core.paths import validate_paths
from ..core.quotes import (can_delete, can_edit, can_export_report,
                           can_manage_settings, can_see_all, is_quotation_id,
                           new_bom_item_id, new_quotation, search_rows,
                           visible_quotations)
from ..forms.assembler import assemble_document
from ..forms.html_render import render_html
from ..forms.layout import format_inr, render_document
from ..forms.pdf_export import export_pdf
from ..forms.xlsx_export import export_master_report, export_quotation_xlsx
from .templates import (BASE_CSS, PAGE_DASHBOARD, PAGE_EDITOR, PAGE_ERROR,
                        PAGE_SETTINGS)

log = logging.getLogger("dashboard")
bp = Blueprint("dashboard", __name__)

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

PRICING_FIELDS = [
    ("onGridSystemCost", "On-Grid System Cost"),
    ("subsidyAmount", "Subsidy Amount"),
    ("ksebCharges", "KSEB Charges"),
    ("customizedStructureCost", "Customized Structure Cost"),
    ("additionalMaterialCost", "Additional Material Cost"),
]

SETTINGS_SECTIONS = [
    ("company", "Company Profile"),
    ("bank", "Bank Details"),
    ("warranty", "Warranty"),
    ("terms", "Terms & Conditions"),
    ("pricing", "Pricing Packages"),
    ("templates", "BOM Templates"),
    ("descriptions", "Product Descriptions"),
    ("users", "Users"),
]

FIELD_LABELS = {
    "company": [("name", "Company Name"), ("headOffice", "Head Office"),
                ("regionalOffice1", "Regional Office 1"), ("regionalOffice2", "Regional Office 2"),
                ("phone", "Phone"), ("email", "Email"), ("website", "Website"), ("gstin", "GSTIN")],
    "bank": [("companyName", "Account Holder"), ("bankName", "Bank Name"),
             ("accountNumber", "Account Number"), ("branch", "Branch"), ("ifsc", "IFSC Code"),
             ("address", "Bank Address"), ("pan", "PAN Number"), ("upiId", "UPI ID"),
             ("gstNumber", "GST Number")],
    "warranty": [("panelWarranty", "Solar Modules"), ("inverterWarranty", "Inverter"),
                 ("systemWarranty", "Service"), ("monitoringSystem", "Monitoring")],
}


# ── Request-level structured logging ────────────────────────────────────────
@bp.before_request
def _log_request_start():
    g._start_time = time.time()


@bp.after_request
def _log_request_end(response):
    if hasattr(g, "_start_time"):
        duration_ms = round((time.time() - g._start_time) * 1000, 1)
        if request.path != "/api/health":
            log.info("%s %s → %d (%.0fms)",
                     request.method, request.path, response.status_code, duration_ms,
                     extra={"route": request.path, "method": request.method,
                            "status": response.status_code, "duration_ms": duration_ms,
                            "user": getattr(g.get("user"), "username", None)})
    return response


# ═══════════════════════════════════════════════════════════════════════
# Config, state & password protection
# ═══════════════════════════════════════════════════════════════════════
def _cfg() -> dict:
    cfg = current_app.config.get("SOLARQUOTE")
    if cfg is None:
        cfg = current_app.config["SOLARQUOTE"] = load_config()
    return cfg


def _load_state():
    cfg = _cfg()
    return db.load_all_state(cfg["id_prefix"], cfg["legacy_prefixes"])


def auth_required(f):
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        state = _load_state()
        auth = request.authorization
        user = None
        if auth and auth.password:
            user = authenticate(state, auth.username, auth.password, _cfg()["admin_password"])
        if user is None:
            body = "🔒 Solar Quote Pro — Login Required"
            if auth:
                body += "\n" + LOGIN_HINT
            return Response(body, 401, {"WWW-Authenticate": 'Basic realm="Solar Quote Pro"'})
        g.state, g.user = state, user
        return f(*args, **kwargs)
    return decorated


# ═══════════════════════════════════════════════════════════════════════
# Rendering & download helpers
# ═══════════════════════════════════════════════════════════════════════
PAGE_HEAD = """<!DOCTYPE html><html><head><meta charset="utf-8"><meta name="viewport" content="width=device-width,initial-scale=1">
<title>{{ page_title or 'Solar Quote Pro' }}</title>
<link href="https://fonts.googleapis.com/css2?family=DM+Sans:wght@400;500;600;700&family=JetBrains+Mono:wght@400;500&display=swap" rel="stylesheet">
<style>{{ base_css|safe }}</style></head><body>
<div class="hdr"><h1><a href="{{ url_for('dashboard.home') }}" style="color:inherit;text-decoration:none"><span>Solar</span> Quote Pro</a></h1>
<div class="hdr-right">
 <a href="{{ url_for('dashboard.home') }}" class="hdr-btn">🏠 Dashboard</a>
 <a href="{{ url_for('dashboard.quote_new') }}" class="hdr-btn">➕ New Quotation</a>
 {% if show_settings %}<a href="{{ url_for('dashboard.settings', section='company') }}" class="hdr-btn">⚙️ Settings</a>{% endif %}
 <div>{{ current_user.name }} <span class="badge b-{{ current_user.role }}">{{ current_user.role }}</span></div>
</div></div>
<div class="ctr">
{% with messages = get_flashed_messages(with_categories=true) %}
 {% for cat, msg in messages %}<div class="alert al-{{ {'success': 's', 'error': 'e', 'warning': 'w'}.get(cat, 'i') }}">{% if cat=='success' %}✅{% elif cat=='error' %}❌{% elif cat=='warning' %}⚠️{% else %}ℹ️{% endif %} {{ msg }}</div>{% endfor %}
{% endwith %}
"""
PAGE_FOOT = "\n</div></body></html>"


def render(content, **kw):
    user = g.get("user")
    return render_template_string(PAGE_HEAD + content + PAGE_FOOT, base_css=BASE_CSS,
                                  current_user=user, inr=format_inr,
                                  show_settings=can_manage_settings(user), **kw)


def _error_page(title, message, status, back=None):
    return render(PAGE_ERROR, title=title, message=message,
                  back=back or url_for("dashboard.home")), status


_UNSAFE_FILENAME = re.compile(r'[\\/:*?"<>|\r\n\t]')


def safe_download_name(name: str) -> str:
    """File name fit for a Content-Disposition header."""
    return _UNSAFE_FILENAME.sub("_", name or "").strip() or "download"


def _send_bytes(data: bytes, filename: str, mimetype: str):
    return send_file(io.BytesIO(data), mimetype=mimetype, as_attachment=True,
                     download_name=safe_download_name(filename))


def _get_visible_quote(quote_id):
    """(quotation, None) or (None, error response) for the signed-in user."""
    q = g.state.find_quotation(quote_id)
    if q is None:
        return None, _error_page("Not Found", f"Quotation {quote_id} not found", 404)
    if not can_see_all(g.user) and q.created_by != g.user.id:
        return None, _error_page("Not Allowed", "You can only open your own quotations.", 403)
    return q, None


def _layout_for(q: Quotation):
    return render_document(assemble_document(q, g.state))


# ═══════════════════════════════════════════════════════════════════════
# Form parsing
# ═══════════════════════════════════════════════════════════════════════
def _pricing_from_values(values: dict) -> PricingConfig:
    d = {key: values.get(key) for key, _ in PRICING_FIELDS}
    # Rooftop plant cost mirrors the system cost whenever it is edited here
    d["rooftopPlantCost"] = d["onGridSystemCost"]
    return PricingConfig.from_dict(d)


def _bom_from_form(form) -> list:
    """BOM rows from the editor table, minus rows ticked for removal."""
    cols = [form.getlist(f"bom_{k}") for k in
            ("id", "product", "uom", "quantity", "specification", "make")]
    removed = set(form.getlist("bom_remove"))
    items, seen = [], set()
    for iid, product, uom, qty, spec, make in zip(*cols):
        if iid and iid in removed:
            continue
        if not iid or iid in seen:
            iid = new_bom_item_id()
        seen.add(iid)
        items.append(BOMItem(id=iid, product=product.strip(), uom=uom.strip(),
                             quantity=qty.strip(), specification=spec.strip(),
                             make=make.strip()))
    return items


def _quotation_from_form(form, base: Quotation) -> Quotation:
    """Editable fields from the form over `base` (id and creator stay base's)."""
    return replace(
        base,
        date=form.get("date", base.date).strip() or base.date,
        customer_name=form.get("customerName", "").strip(),
        discom_number=form.get("discomNumber", "").strip(),
        address=form.get("address", "").strip(),
        mobile=form.get("mobile", "").strip(),
        email=form.get("email", "").strip(),
        location=form.get("location", "").strip(),
        system_description=form.get("systemDescription", base.system_description),
        pricing=_pricing_from_values(form),
        bom=_bom_from_form(form),
    )


def _image_data_url(upload):
    """Uploaded image as a data: URL, or None for non-image files."""
    mimetype = upload.mimetype or mimetypes.guess_type(upload.filename)[0] or ""
    if not mimetype.startswith("image/"):
        return None
    encoded = base64.b64encode(upload.read()).decode("ascii")
    return f"data:{mimetype};base64,{encoded}"


# ═══════════════════════════════════════════════════════════════════════
# Dashboard
# ═══════════════════════════════════════════════════════════════════════
@bp.route("/")
@auth_required
def home():
    q = request.args.get("q", "").strip()
    rows = search_rows(visible_quotations(g.state, g.user), q)
    rows = sorted(rows, key=lambda r: r.quotation.id, reverse=True)
    return render(PAGE_DASHBOARD, rows=rows, q=q, can_report=can_export_report(g.user))


# ═══════════════════════════════════════════════════════════════════════
# Quotation editor
# ═══════════════════════════════════════════════════════════════════════
def _render_editor(quote: Quotation, is_new: bool):
    action_url = (url_for("dashboard.quote_new") if is_new
                  else url_for("dashboard.quote_edit", quote_id=quote.id))
    state = g.state
    return render(PAGE_EDITOR, quote=quote, is_new=is_new, action_url=action_url,
                  page_title=f"Quotation {quote.id}",
                  descriptions=state.product_descriptions,
                  description_names=[d.name for d in state.product_descriptions],
                  pricings=state.product_pricing, templates=state.bom_templates,
                  pricing_fields=PRICING_FIELDS, pricing=quote.pricing.to_dict(),
                  bom_items=quote.bom)


def _save_quotation(quote: Quotation, is_new: bool):
    res = db.save_quotation(quote, create=is_new)
    if is_new and res.get("conflict"):
        cfg = _cfg()
        new_id = db.allocate_quotation_id(cfg["id_prefix"], cfg["legacy_prefixes"])
        if new_id is not None:
            log.warning("Quotation id %s taken, retrying as %s", quote.id, new_id)
            quote = replace(quote, id=new_id)
            res = db.save_quotation(quote, create=True)
            if res.get("ok"):
                flash(f"Quotation number was already taken; saved as {new_id}.", "info")
    if not res.get("ok"):
        flash(res.get("error", "Save failed"), "error")
        return _render_editor(quote, is_new)
    flash(f"Quotation {quote.id} saved", "success")
    return redirect(url_for("dashboard.home"))


def _handle_editor_post(base: Quotation, is_new: bool):
    state = g.state
    form = request.form
    quote = _quotation_from_form(form, base)
    action = form.get("action", "save")

    if action == "save":
        return _save_quotation(quote, is_new)

    if action == "apply_description":
        quote, outcome = apply_product_defaults(quote, form.get("systemDescription", ""), state)
        for w in outcome.warnings:
            flash(w, "warning")
    elif action == "apply_pricing":
        pkg = find_pricing(state, form.get("pricingPackage", ""))
        if pkg is None:
            flash("Pricing package not found", "error")
        else:
            quote = replace(quote, pricing=copy.deepcopy(pkg.pricing))
    elif action == "apply_template":
        tpl = find_template(state, form.get("bomTemplate", ""))
        if tpl is None:
            flash("BOM template not found", "error")
        else:
            quote = replace(quote, bom=copy_items(tpl.items), system_description=tpl.name)
    elif action == "add_item":
        quote = replace(quote, bom=quote.bom + [BOMItem(id=new_bom_item_id())])
    elif action == "save_template":
        name = form.get("templateName", "").strip()
        if not name:
            flash("Enter a name for the new BOM template", "error")
        elif not quote.bom:
            flash("The bill of materials is empty", "error")
        else:
            res = db.save_settings(add_template(state, template_from_items(name, quote.bom)))
            if res.get("ok"):
                flash(f"BOM saved as template: {name}", "success")
                g.state = _load_state()
            else:
                flash(res.get("error", "Save failed"), "error")
    return _render_editor(quote, is_new)


@bp.route("/quotes/new", methods=["GET", "POST"])
@auth_required
def quote_new():
    cfg = _cfg()
    base = new_quotation(g.state, g.user, cfg["id_prefix"])
    if request.method == "POST":
        # Keep the number shown while the form was being filled in
        form_id = request.form.get("id", "").strip()
        if is_quotation_id(form_id, cfg["id_prefix"]):
            base = replace(base, id=form_id)
        return _handle_editor_post(base, is_new=True)
    return _render_editor(base, is_new=True)


@bp.route("/quotes/<path:quote_id>/edit", methods=["GET", "POST"])
@auth_required
def quote_edit(quote_id):
    q, err = _get_visible_quote(quote_id)
    if err:
        return err
    if not can_edit(g.user, q):
        return _error_page("Not Allowed", "You cannot edit this quotation.", 403)
    if request.method == "POST":
        return _handle_editor_post(q, is_new=False)
    return _render_editor(q, is_new=False)


@bp.route("/quotes/<path:quote_id>/delete", methods=["POST"])
@auth_required
def quote_delete(quote_id):
    q = g.state.find_quotation(quote_id)
    if q is not None and not can_delete(g.user, q):
        return _error_page("Not Allowed", "Only a team lead or admin can delete quotations.", 403)
    res = db.delete_quotation(quote_id)
    if res.get("ok"):
        flash(f"Quotation {quote_id} deleted", "success")
    else:
        flash(res.get("error", "Delete failed"), "error")
    return redirect(url_for("dashboard.home"))


@bp.route("/api/quotes/autofill", methods=["POST"])
@auth_required
def api_quote_autofill():
    """Preview of what choosing a system description fills in."""
    payload = request.get_json(silent=True) or {}
    description = str(payload.get("description") or payload.get("systemDescription") or "")
    base = Quotation.from_dict(payload.get("quotation") or {"id": ""})
    updated, outcome = apply_product_defaults(base, description, g.state)
    return jsonify({
        "ok": True,
        "found": outcome.description is not None,
        "pricing_found": outcome.pricing_found,
        "bom_found": outcome.bom_found,
        "warnings": outcome.warnings,
        "quotation": updated.to_dict(),
    })


# ═══════════════════════════════════════════════════════════════════════
# Document exports
# ═══════════════════════════════════════════════════════════════════════
@bp.route("/quotes/<path:quote_id>/view")
@auth_required
def quote_view(quote_id):
    q, err = _get_visible_quote(quote_id)
    if err:
        return err
    return render_html(_layout_for(q))


@bp.route("/quotes/<path:quote_id>/print")
@auth_required
def quote_print(quote_id):
    q, err = _get_visible_quote(quote_id)
    if err:
        return err
    return render_html(_layout_for(q), print_mode=True)


@bp.route("/quotes/<path:quote_id>/pdf")
@auth_required
def quote_pdf(quote_id):
    q, err = _get_visible_quote(quote_id)
    if err:
        return err
    res = export_pdf(_layout_for(q), q)
    if not res.get("ok"):
        return _error_page("PDF Export", res["error"], 500,
                           back=url_for("dashboard.quote_print", quote_id=q.id))
    return _send_bytes(res["pdf"], res["filename"], "application/pdf")


@bp.route("/quotes/<path:quote_id>/xlsx")
@auth_required
def quote_xlsx(quote_id):
    q, err = _get_visible_quote(quote_id)
    if err:
        return err
    res = export_quotation_xlsx(q)
    if not res.get("ok"):
        return _error_page("Spreadsheet Export", res["error"], 500)
    return _send_bytes(res["xlsx"], res["filename"], XLSX_MIME)


@bp.route("/reports/master.xlsx")
@auth_required
def master_report():
    if not can_export_report(g.user):
        return _error_page("Not Allowed", "Only an admin can export the master report.", 403)
    res = export_master_report(g.state.quotations, datetime.now(), g.state.users)
    if not res.get("ok"):
        return _error_page("Master Report", res["error"], 500)
    return _send_bytes(res["xlsx"], res["filename"], XLSX_MIME)


# ═══════════════════════════════════════════════════════════════════════
# Settings
# ═══════════════════════════════════════════════════════════════════════
def _int(val, default=0) -> int:
    try:
        return int(float(val))
    except (TypeError, ValueError):
        return default


def _merge_fields(current, section, form):
    d = current.to_dict()
    for key, _ in FIELD_LABELS[section]:
        if key in form:
            d[key] = form.get(key, "").strip()
    return d


def _apply_company(state, form, files):
    d = _merge_fields(state.company, "company", form)
    for key in ("logo", "seal"):
        if form.get(f"clear_{key}"):
            d[key] = ""
        upload = files.get(key)
        if upload and upload.filename:
            data_url = _image_data_url(upload)
            if data_url is None:
                flash(f"{key.title()} must be an image file; kept the previous one.", "error")
            else:
                d[key] = data_url
    return replace(state, company=CompanyConfig.from_dict(d)), {}


def _apply_terms(state, form, action):
    removed = set(form.getlist("term_remove"))
    enabled = set(form.getlist("term_enabled"))
    terms = [
        Term(id=tid, text=text.strip(), enabled=tid in enabled, order=_int(order))
        for tid, text, order in zip(form.getlist("term_id"), form.getlist("term_text"),
                                    form.getlist("term_order"))
        if tid not in removed
    ]
    state = replace(state, terms=terms)
    if action == "add_term":
        state = replace(state, terms=terms + [create_term(state)])
    return state, {}


def _apply_pricing(state, form, action):
    removed = set(form.getlist("pkg_remove"))
    keys = [key for key, _ in PRICING_FIELDS]
    columns = [form.getlist(f"pkg_{key}") for key in keys]
    pkgs = []
    for pid, name, *vals in zip(form.getlist("pkg_id"), form.getlist("pkg_name"), *columns):
        if pid in removed:
            continue
        pkgs.append(ProductPricing(id=pid, name=name.strip(),
                                   pricing=_pricing_from_values(dict(zip(keys, vals)))))
    if action == "add_pricing":
        pkgs.append(create_pricing())
    return replace(state, product_pricing=pkgs), {}


def _apply_templates(state, form, action, selected_id):
    if action == "add_template":
        tpl = create_template()
        return add_template(state, tpl), {"t": tpl.id}
    selected = find_template(state, selected_id)
    if selected is None:
        return state, {}
    if action == "delete_template":
        return delete_template(state, selected.id), {}
    items = _bom_from_form(form)
    if action == "add_item":
        items.append(BOMItem(id=new_bom_item_id()))
    tpl = replace(selected, name=form.get("tpl_name", "").strip() or selected.name, items=items)
    return update_template(state, tpl), {"t": tpl.id}


def _apply_descriptions(state, form, action):
    removed = set(form.getlist("desc_remove"))
    descs = [
        ProductDescription(id=did, name=name.strip(), default_pricing_id=pricing_id,
                           default_bom_template_id=template_id)
        for did, name, pricing_id, template_id in zip(
            form.getlist("desc_id"), form.getlist("desc_name"),
            form.getlist("desc_pricing"), form.getlist("desc_template"))
        if did not in removed
    ]
    if action == "add_description":
        descs.append(create_description())
    return replace(state, product_descriptions=descs), {}


def _apply_users(state, form, action):
    removed = set(form.getlist("user_remove"))
    users = [
        User.from_dict({"id": uid, "name": name.strip(), "username": username.strip(),
                        "password": password, "role": role})
        for uid, name, username, password, role in zip(
            form.getlist("user_id"), form.getlist("user_name"), form.getlist("user_username"),
            form.getlist("user_password"), form.getlist("user_role"))
        if uid not in removed
    ]
    if action == "add_user":
        users.append(create_user())
    return replace(state, users=users), {}


def apply_settings_form(section, state, form, files, selected_id=None):
    """New state for a settings POST, plus extra query args for the redirect."""
    action = form.get("action", "save")
    if section == "company":
        return _apply_company(state, form, files)
    if section == "bank":
        return replace(state, bank=BankConfig.from_dict(_merge_fields(state.bank, "bank", form))), {}
    if section == "warranty":
        d = _merge_fields(state.warranty, "warranty", form)
        return replace(state, warranty=WarrantyConfig.from_dict(d)), {}
    if section == "terms":
        return _apply_terms(state, form, action)
    if section == "pricing":
        return _apply_pricing(state, form, action)
    if section == "templates":
        return _apply_templates(state, form, action, selected_id)
    if section == "descriptions":
        return _apply_descriptions(state, form, action)
    if section == "users":
        return _apply_users(state, form, action)
    raise ValueError(f"unknown settings section: {section}")


def _render_settings(section, state, selected_id=None):
    labels = dict(SETTINGS_SECTIONS)
    selected = find_template(state, selected_id)
    sections = [(k, v) for k, v in SETTINGS_SECTIONS if can_manage_settings(g.user, k)]
    fields = []
    if section in FIELD_LABELS:
        current = getattr(state, section).to_dict()
        fields = [(key, label, current.get(key, "")) for key, label in FIELD_LABELS[section]]
    return render(PAGE_SETTINGS, section=section, section_label=labels[section],
                  sections=sections, version=state.settings_version, fields=fields,
                  images={"logo": state.company.logo, "seal": state.company.seal},
                  terms=sorted(state.terms, key=lambda t: t.order),
                  pricings=state.product_pricing, pricing_fields=PRICING_FIELDS,
                  templates=state.bom_templates,
                  selected=selected, bom_items=selected.items if selected else [],
                  descriptions=state.product_descriptions,
                  users=state.users, roles=ROLES,
                  page_title=f"Settings · {labels[section]}")


@bp.route("/settings")
@auth_required
def settings_index():
    return redirect(url_for("dashboard.settings", section="company"))


@bp.route("/settings/<section>", methods=["GET", "POST"])
@auth_required
def settings(section):
    if section not in dict(SETTINGS_SECTIONS):
        return _error_page("Not Found", f"Unknown settings section: {section}", 404)
    if not can_manage_settings(g.user, section):
        return _error_page("Not Allowed", "You do not have access to this settings section.", 403)
    selected_id = request.args.get("t")
    if request.method == "GET":
        return _render_settings(section, g.state, selected_id)

    state = replace(g.state, settings_version=_int(request.form.get("version"),
                                                   g.state.settings_version))
    new_state, args = apply_settings_form(section, state, request.form, request.files, selected_id)
    res = db.save_settings(new_state)
    if not res.get("ok"):
        flash(res.get("error", "Save failed"), "error")
        return _render_settings(section, new_state, args.get("t", selected_id))
    flash(f"{dict(SETTINGS_SECTIONS)[section]} saved", "success")
    return redirect(url_for("dashboard.settings", section=section, **args))


@bp.route("/settings/templates/<template_id>/duplicate", methods=["POST"])
@auth_required
def template_duplicate(template_id):
    if not can_manage_settings(g.user, "templates"):
        return _error_page("Not Allowed", "You do not have access to BOM templates.", 403)
    tpl = find_template(g.state, template_id)
    if tpl is None:
        flash("BOM template not found", "error")
        return redirect(url_for("dashboard.settings", section="templates"))
    state = replace(g.state, settings_version=_int(request.form.get("version"),
                                                   g.state.settings_version))
    copy_tpl = duplicate_template(tpl)
    res = db.save_settings(add_template(state, copy_tpl))
    if not res.get("ok"):
        flash(res.get("error", "Save failed"), "error")
        return redirect(url_for("dashboard.settings", section="templates", t=template_id))
    flash(f"Template duplicated as {copy_tpl.name}", "success")
    return redirect(url_for("dashboard.settings", section="templates", t=copy_tpl.id))


# ═══════════════════════════════════════════════════════════════════════
# Health
# ═══════════════════════════════════════════════════════════════════════
@bp.route("/api/health")
def api_health():
    paths = validate_paths()
    try:
        stats = db.get_db_stats()
        db_ok = True
    except sqlite3.Error as e:
        log.error("Health check: %s", e)
        stats, db_ok = {"error": str(e)}, False
    return jsonify({"ok": db_ok and paths["ok"], "version": __version__,
                    "db": stats, "errors": paths["errors"]})
