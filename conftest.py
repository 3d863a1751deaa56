"""
Shared pytest fixtures for the Solar Quote Pro test suite.

IMPORTANT: SOLARQUOTE_DATA_DIR is pointed at a throwaway directory BEFORE the
package is imported, so importing app.py (which builds an app at import time,
gunicorn style) never touches a real database. Each test then gets its own
database file under tmp_path.
"""
import base64
import io
import os
import sys
import tempfile
from dataclasses import replace

import pytest

_PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

os.environ["SOLARQUOTE_DATA_DIR"] = tempfile.mkdtemp(prefix="solarquote-test-")

from solarquote.core import db, paths  # noqa: E402
from solarquote.core.defaults import initial_state  # noqa: E402
from solarquote.core.models import (BOMItem, PricingConfig, Quotation,  # noqa: E402
                                    User)

TEST_CONFIG = {
    "secret_key": "test-secret",
    "id_prefix": "KAPL",
    "legacy_prefixes": ["KAS"],
    "admin_password": "admin123",
    "json_logs": False,
}


# ── Temp data directory (per-test isolation) ──────────────────────────────────

@pytest.fixture(autouse=True)
def temp_data_dir(tmp_path, monkeypatch):
    """Redirect the store and every path constant to an isolated tmp directory."""
    data = str(tmp_path / "data")
    os.makedirs(data, exist_ok=True)
    monkeypatch.setattr(paths, "DATA_DIR", data)
    monkeypatch.setattr(paths, "LOG_DIR", os.path.join(data, "logs"))
    monkeypatch.setattr(paths, "DB_PATH", os.path.join(data, "solarquote.db"))
    monkeypatch.setattr(db, "DB_PATH", os.path.join(data, "solarquote.db"))
    db.init_db()
    return data


# ── Flask test client ─────────────────────────────────────────────────────────

def basic_auth_header(user="admin", pw="admin123"):
    creds = base64.b64encode(f"{user}:{pw}".encode()).decode()
    return {"Authorization": f"Basic {creds}"}


class AuthenticatedClient:
    """Wraps Flask test client to add Basic Auth headers to every request."""
    def __init__(self, client, headers):
        self._client = client
        self._headers = headers

    def get(self, *args, **kwargs):
        kwargs.setdefault("headers", {}).update(self._headers)
        return self._client.get(*args, **kwargs)

    def post(self, *args, **kwargs):
        kwargs.setdefault("headers", {}).update(self._headers)
        return self._client.post(*args, **kwargs)


@pytest.fixture
def app(temp_data_dir):
    """Create Flask app configured for testing."""
    from app import create_app
    application = create_app(dict(TEST_CONFIG))
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    """Admin test client (HTTP Basic Auth on every request)."""
    with app.test_client() as c:
        yield AuthenticatedClient(c, basic_auth_header())


@pytest.fixture
def anon_client(app):
    """Unauthenticated test client."""
    with app.test_client() as c:
        yield c


@pytest.fixture
def client_as(app, seed_users):
    """Factory: client_as("anil") → client signed in as that seeded user."""
    def _make(username):
        user = next(u for u in seed_users if u.username == username)
        return AuthenticatedClient(app.test_client(),
                                   basic_auth_header(user.username, user.password))
    return _make


# ── Sample data factories ─────────────────────────────────────────────────────

@pytest.fixture
def sample_users():
    return [
        User(id="u-admin", name="Asha Admin", username="asha", password="asha-pw", role="admin"),
        User(id="u-tl", name="Thomas Lead", username="thomas", password="thomas-pw", role="TL"),
        User(id="u-anil", name="Anil Kumar", username="anil", password="anil-pw", role="user"),
        User(id="u-beena", name="Beena Joseph", username="beena", password="beena-pw", role="user"),
    ]


@pytest.fixture
def sample_quotation():
    """3 kW quotation matching the ₹1,07,000 effective-cost scenario."""
    return Quotation(
        id="KAPL-1005/02-24",
        date="2024-02-14",
        customer_name="Ravi Menon",
        discom_number="1156789012345",
        address="12/345, Temple Road, Aluva",
        mobile="9847012345",
        email="ravi@example.com",
        location="Aluva",
        pricing=PricingConfig(on_grid_system_cost=185000, rooftop_plant_cost=185000,
                              subsidy_amount=78000, kseb_charges=2500,
                              additional_material_cost=0, customized_structure_cost=12000),
        bom=[
            BOMItem(id="b1", product="Solar Panels", uom="Nos", quantity="6",
                    specification="550Wp Mono PERC", make="Adani"),
            BOMItem(id="b2", product="On-Grid Inverter", uom="No", quantity="1",
                    specification="3kW String Inverter", make="Growatt"),
            BOMItem(id="b3", product="DC Cable", uom="Mtrs", quantity="30-40",
                    specification="4sqmm multi strand", make="Polycab"),
        ],
        system_description="3kW ON-GRID SOLAR POWER GENERATING SYSTEM",
        created_by="u-anil",
        created_by_name="Anil Kumar",
    )


@pytest.fixture
def sample_state(sample_users, sample_quotation):
    """Built-in defaults plus users and one quotation per plain user."""
    other = replace(sample_quotation, id="KAPL-1003/01-24", customer_name="Sara Thomas",
                    location="Kakkanad", created_by="u-beena", created_by_name="")
    return replace(initial_state(), users=list(sample_users),
                   quotations=[sample_quotation, other])


@pytest.fixture
def seed_users(temp_data_dir, sample_users):
    """Store the sample users in the settings row."""
    state = db.load_all_state()
    res = db.save_settings(replace(state, users=list(sample_users)))
    assert res["ok"], res
    return sample_users


@pytest.fixture
def seed_quotes(temp_data_dir, sample_state):
    """Store the sample quotations, return their ids."""
    for q in sample_state.quotations:
        assert db.save_quotation(q, create=True)["ok"]
    return [q.id for q in sample_state.quotations]


@pytest.fixture
def png_data_url():
    """Small opaque PNG as a data: URL."""
    from PIL import Image
    buf = io.BytesIO()
    Image.new("RGB", (40, 20), (220, 38, 38)).save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")
