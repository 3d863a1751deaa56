"""
Route tests for solarquote/api/dashboard.py: login gate, role-scoped dashboard,
editor actions, document downloads, settings panel and health.
"""
import io
import json
import sqlite3
from urllib.parse import unquote

from solarquote.core import db
from solarquote.forms import pdf_export

RAVI = "KAPL-1005/02-24"
SARA = "KAPL-1003/01-24"


def _editor_form(**overrides):
    """A filled-in editor form for the sample quotation's fields."""
    form = {
        "action": "save",
        "customerName": "Ravi Menon",
        "discomNumber": "1156789012345",
        "mobile": "9847012345",
        "email": "ravi@example.com",
        "location": "Aluva",
        "address": "12/345, Temple Road, Aluva",
        "date": "2024-02-14",
        "systemDescription": "3kW ON-GRID SOLAR POWER GENERATING SYSTEM",
        "onGridSystemCost": "185000",
        "subsidyAmount": "78000",
        "ksebCharges": "2500",
        "customizedStructureCost": "12000",
        "additionalMaterialCost": "0",
        "bom_id": ["b1", "b2"],
        "bom_product": ["Solar Panels", "On-Grid Inverter"],
        "bom_uom": ["Nos", "No"],
        "bom_quantity": ["6", "1"],
        "bom_specification": ["550Wp Mono PERC", "3kW String Inverter"],
        "bom_make": ["Adani", "Growatt"],
    }
    form.update(overrides)
    return form


def _stored(quote_id):
    return db.load_all_state().find_quotation(quote_id)


# ═══════════════════════════════════════════════════════════════════════════════
# Login gate
# ═══════════════════════════════════════════════════════════════════════════════

class TestLogin:

    def test_anonymous_gets_401(self, anon_client):
        r = anon_client.get("/")
        assert r.status_code == 401
        assert "Basic" in r.headers["WWW-Authenticate"]
        assert "Login Required" in r.get_data(as_text=True)
        assert "Hint" not in r.get_data(as_text=True)

    def test_wrong_password_shows_hint(self, anon_client):
        from conftest import basic_auth_header
        r = anon_client.get("/", headers=basic_auth_header("admin", "nope"))
        assert r.status_code == 401
        assert "Invalid password! Hint: admin123" in r.get_data(as_text=True)

    def test_admin_password(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert "Solar" in r.get_data(as_text=True)

    def test_user_record_login(self, client_as):
        assert client_as("anil").get("/").status_code == 200

    def test_health_needs_no_login(self, anon_client):
        r = anon_client.get("/api/health")
        assert r.status_code == 200
        data = r.get_json()
        assert data["ok"] is True
        assert data["version"] == "1.0.0"
        assert data["db"]["quotations"] == 0


# ═══════════════════════════════════════════════════════════════════════════════
# Dashboard
# ═══════════════════════════════════════════════════════════════════════════════

class TestDashboard:

    def test_empty(self, client):
        assert "No quotations yet" in client.get("/").get_data(as_text=True)

    def test_admin_sees_all(self, client, seed_users, seed_quotes):
        html = client.get("/").get_data(as_text=True)
        assert "Ravi Menon" in html and "Sara Thomas" in html
        assert "₹1,07,000" in html
        assert "Master Report (XLSX)" in html
        assert "Beena Joseph" in html

    def test_user_sees_own_only(self, client_as, seed_quotes):
        html = client_as("anil").get("/").get_data(as_text=True)
        assert "Ravi Menon" in html
        assert "Sara Thomas" not in html
        assert "Master Report" not in html

    def test_search(self, client, seed_users, seed_quotes):
        html = client.get("/?q=sara").get_data(as_text=True)
        assert "Sara Thomas" in html
        assert "Ravi Menon" not in html

    def test_store_error_still_renders(self, client, monkeypatch):
        def broken():
            raise sqlite3.OperationalError("disk I/O error")
        monkeypatch.setattr(db, "get_db", broken)
        r = client.get("/")
        assert r.status_code == 200
        assert "No quotations yet" in r.get_data(as_text=True)

    def test_malformed_row_still_renders(self, client_as, seed_quotes):
        with db.get_db() as conn:
            conn.execute("UPDATE quotations SET data=? WHERE id=?",
                         (json.dumps({"id": RAVI, "customerName": "Ravi Menon",
                                      "pricing": "x", "bom": "y"}), RAVI))
        r = client_as("asha").get("/")
        assert r.status_code == 200
        assert "Sara Thomas" in r.get_data(as_text=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Editor
# ═══════════════════════════════════════════════════════════════════════════════

class TestEditor:

    def test_new_form(self, client):
        html = client.get("/quotes/new").get_data(as_text=True)
        assert "KAPL-1001/" in html
        assert "New Quotation" in html

    def test_create(self, client):
        r = client.post("/quotes/new", data=_editor_form(onGridSystemCost="200000"))
        assert r.status_code == 302
        quotes = db.load_all_state().quotations
        assert len(quotes) == 1
        q = quotes[0]
        assert q.id.startswith("KAPL-1001/")
        assert q.customer_name == "Ravi Menon"
        assert q.created_by == "admin"
        assert q.pricing.on_grid_system_cost == 200000
        assert q.pricing.rooftop_plant_cost == 200000
        assert [i.product for i in q.bom] == ["Solar Panels", "On-Grid Inverter"]

    def test_create_with_taken_number_retries(self, client, seed_users, seed_quotes):
        r = client.post("/quotes/new", data=_editor_form(id=RAVI, customerName="Latecomer"),
                        follow_redirects=True)
        assert r.status_code == 200
        assert "already taken" in r.get_data(as_text=True)
        assert _stored(RAVI).customer_name == "Ravi Menon"
        late = [q for q in db.load_all_state().quotations if q.customer_name == "Latecomer"]
        assert len(late) == 1
        assert late[0].id.startswith("KAPL-1006/")

    def test_edit_keeps_rooftop_in_step(self, client_as, seed_quotes):
        r = client_as("thomas").post(f"/quotes/{RAVI}/edit",
                                     data=_editor_form(customerName="R. Menon",
                                                       onGridSystemCost="190000"))
        assert r.status_code == 302
        q = _stored(RAVI)
        assert q.customer_name == "R. Menon"
        assert q.pricing.on_grid_system_cost == 190000
        assert q.pricing.rooftop_plant_cost == 190000
        assert q.created_by == "u-anil"

    def test_remove_bom_row(self, client, seed_users, seed_quotes):
        client.post(f"/quotes/{RAVI}/edit", data=_editor_form(bom_remove="b1"))
        assert [i.id for i in _stored(RAVI).bom] == ["b2"]

    def test_other_users_quote_forbidden(self, client_as, seed_quotes):
        beena = client_as("beena")
        assert beena.get(f"/quotes/{RAVI}/edit").status_code == 403
        assert beena.get(f"/quotes/{RAVI}/view").status_code == 403
        assert beena.post(f"/quotes/{RAVI}/edit", data=_editor_form()).status_code == 403
        assert _stored(RAVI).customer_name == "Ravi Menon"

    def test_tl_edits_any(self, client_as, seed_quotes):
        assert client_as("thomas").get(f"/quotes/{SARA}/edit").status_code == 200

    def test_creator_views_but_cannot_edit(self, client_as, seed_quotes):
        anil = client_as("anil")
        assert anil.get(f"/quotes/{RAVI}/view").status_code == 200
        assert anil.get(f"/quotes/{RAVI}/edit").status_code == 403
        assert anil.post(f"/quotes/{RAVI}/edit", data=_editor_form(customerName="X")).status_code == 403
        assert _stored(RAVI).customer_name == "Ravi Menon"
        assert ">Edit</a>" not in anil.get("/").get_data(as_text=True)

    def test_create_ignores_malformed_number(self, client):
        client.post("/quotes/new", data=_editor_form(id="../../hacked"))
        quotes = db.load_all_state().quotations
        assert len(quotes) == 1
        assert quotes[0].id.startswith("KAPL-1001/")

    def test_missing_quote(self, client):
        assert client.get("/quotes/KAPL-9999/01-24/edit").status_code == 404

    def test_apply_description(self, client):
        r = client.post("/quotes/new", data=_editor_form(
            action="apply_description", onGridSystemCost="", subsidyAmount="",
            bom_id=[], bom_product=[], bom_uom=[], bom_quantity=[],
            bom_specification=[], bom_make=[]))
        assert r.status_code == 200
        html = r.get_data(as_text=True)
        assert "₹1,07,000" in html
        assert "Lightning Arrester" in html
        assert db.load_all_state().quotations == []

    def test_apply_description_dangling_link_warns(self, client):
        state = db.load_all_state()
        state.product_descriptions[0].default_pricing_id = "gone"
        assert db.save_settings(state)["ok"]
        r = client.post("/quotes/new", data=_editor_form(action="apply_description"))
        html = r.get_data(as_text=True)
        assert "no longer exists" in html
        assert "₹1,07,000" in html

    def test_apply_template(self, client):
        r = client.post("/quotes/new", data=_editor_form(action="apply_template",
                                                          bomTemplate="3kw-std"))
        assert "Lightning Arrester" in r.get_data(as_text=True)

    def test_save_as_template(self, client, seed_users, seed_quotes):
        r = client.post(f"/quotes/{RAVI}/edit",
                        data=_editor_form(action="save_template", templateName="Ravi 3kW"))
        assert r.status_code == 200
        assert "BOM saved as template: Ravi 3kW" in r.get_data(as_text=True)
        names = [t.name for t in db.load_all_state().bom_templates]
        assert "Ravi 3kW" in names

    def test_autofill_api(self, client):
        r = client.post("/api/quotes/autofill",
                        json={"description": "3kW ON-GRID SOLAR POWER GENERATING SYSTEM"})
        data = r.get_json()
        assert data["found"] and data["pricing_found"] and data["bom_found"]
        assert data["quotation"]["pricing"]["onGridSystemCost"] == 185000
        assert len(data["quotation"]["bom"]) == 6

    def test_autofill_unknown(self, client):
        data = client.post("/api/quotes/autofill", json={"description": "Custom"}).get_json()
        assert data["found"] is False
        assert data["warnings"] == []


class TestDelete:

    def test_user_cannot_delete(self, client_as, seed_quotes):
        r = client_as("anil").post(f"/quotes/{RAVI}/delete")
        assert r.status_code == 403
        assert _stored(RAVI) is not None

    def test_admin_deletes(self, client, seed_users, seed_quotes):
        r = client.post(f"/quotes/{RAVI}/delete")
        assert r.status_code == 302
        assert _stored(RAVI) is None
        assert _stored(SARA) is not None


# ═══════════════════════════════════════════════════════════════════════════════
# Documents
# ═══════════════════════════════════════════════════════════════════════════════

class TestDocuments:

    def test_view(self, client, seed_users, seed_quotes):
        html = client.get(f"/quotes/{RAVI}/view").get_data(as_text=True)
        assert html.count('class="a4-page"') == 4
        assert "window.print" not in html

    def test_print(self, client, seed_users, seed_quotes):
        assert "window.print()" in client.get(f"/quotes/{RAVI}/print").get_data(as_text=True)

    def test_pdf(self, client, seed_users, seed_quotes):
        r = client.get(f"/quotes/{RAVI}/pdf")
        assert r.status_code == 200
        assert r.mimetype == "application/pdf"
        assert r.data.startswith(b"%PDF")
        disposition = unquote(r.headers["Content-Disposition"])
        assert "Ravi Menon_1156789012345_KAPL-1005_02-24.pdf" in disposition

    def test_pdf_failure_page(self, client, seed_users, seed_quotes, monkeypatch):
        def boom(layout):
            raise RuntimeError("no fonts")
        monkeypatch.setattr(pdf_export, "render_pdf", boom)
        r = client.get(f"/quotes/{RAVI}/pdf")
        assert r.status_code == 500
        assert "Please use the Print button instead" in r.get_data(as_text=True)

    def test_xlsx(self, client, seed_users, seed_quotes):
        r = client.get(f"/quotes/{RAVI}/xlsx")
        assert r.status_code == 200
        assert "spreadsheetml" in r.mimetype
        assert "KAPL-1005_02-24_Solar_Quotation.xlsx" in unquote(r.headers["Content-Disposition"])

    def test_master_report_admin_only(self, client, client_as, seed_quotes):
        r = client.get("/reports/master.xlsx")
        assert r.status_code == 200
        assert "Master_Solar_Quotes_Report_" in r.headers["Content-Disposition"]
        assert client_as("thomas").get("/reports/master.xlsx").status_code == 403
        assert client_as("anil").get("/reports/master.xlsx").status_code == 403


# ═══════════════════════════════════════════════════════════════════════════════
# Settings
# ═══════════════════════════════════════════════════════════════════════════════

class TestSettings:

    def test_index_redirects(self, client):
        r = client.get("/settings")
        assert r.status_code == 302
        assert r.headers["Location"].endswith("/settings/company")

    def test_company_save(self, client):
        r = client.post("/settings/company", data={"version": "0", "name": "Sunrise Solar"},
                        follow_redirects=True)
        assert r.status_code == 200
        assert "Company Profile saved" in r.get_data(as_text=True)
        state = db.load_all_state()
        assert state.company.name == "Sunrise Solar"
        assert state.company.head_office.startswith("123, Solar Plaza")
        assert state.settings_version == 1

    def test_stale_version_rejected(self, client):
        client.post("/settings/bank", data={"version": "0", "ifsc": "SBIN0000001"})
        r = client.post("/settings/bank", data={"version": "0", "ifsc": "FDRL0000002"})
        assert r.status_code == 200
        assert "changed by someone else" in r.get_data(as_text=True)
        assert db.load_all_state().bank.ifsc == "SBIN0000001"

    def test_logo_upload(self, client):
        from PIL import Image
        buf = io.BytesIO()
        Image.new("RGB", (10, 10), (0, 0, 0)).save(buf, format="PNG")
        buf.seek(0)
        client.post("/settings/company", data={"version": "0", "logo": (buf, "logo.png")},
                    content_type="multipart/form-data")
        assert db.load_all_state().company.logo.startswith("data:image/png;base64,")

    def test_non_image_upload_rejected(self, client):
        r = client.post("/settings/company",
                        data={"version": "0", "seal": (io.BytesIO(b"hello"), "notes.txt")},
                        content_type="multipart/form-data", follow_redirects=True)
        assert "must be an image file" in r.get_data(as_text=True)
        assert db.load_all_state().company.seal == ""

    def test_add_term(self, client):
        state = db.load_all_state()
        form = {"version": "0", "action": "add_term",
                "term_id": [t.id for t in state.terms],
                "term_text": [t.text for t in state.terms],
                "term_order": [str(t.order) for t in state.terms],
                "term_enabled": [t.id for t in state.terms if t.id != "2"]}
        client.post("/settings/terms", data=form)
        terms = db.load_all_state().terms
        assert len(terms) == 7
        assert [t.enabled for t in terms if t.id == "2"] == [False]

    def test_duplicate_template(self, client):
        r = client.post("/settings/templates/3kw-std/duplicate", data={"version": "0"})
        assert r.status_code == 302
        templates = db.load_all_state().bom_templates
        assert [t.name for t in templates] == ["3kW Standard On-Grid", "3kW Standard On-Grid (Copy)"]
        assert len(templates[1].items) == len(templates[0].items)

    def test_tl_cannot_manage_users(self, client_as):
        tl = client_as("thomas")
        assert tl.get("/settings/company").status_code == 200
        assert tl.get("/settings/users").status_code == 403

    def test_user_has_no_settings(self, client_as):
        assert client_as("anil").get("/settings/terms").status_code == 403

    def test_unknown_section(self, client):
        assert client.get("/settings/nowhere").status_code == 404
