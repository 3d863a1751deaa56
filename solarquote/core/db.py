"""
solarquote/core/db.py — Persistent SQLite Configuration Store

TABLES:
  settings    — one row (singleton_key='global'); each settings section is a
                JSON column, plus an integer version for optimistic writes
  quotations  — one row per quotation; the full document lives in `data`

INTERFACE (consumed by the dashboard):
  load_all_state()          → AppState, built-in defaults for empty settings
  save_settings(state)      → {"ok", "version"} | {"ok": False, "error", "conflict"}
  save_quotation(q, create) → {"ok"} | {"ok": False, "error", "conflict"}
  delete_quotation(id)      → {"ok"}
  allocate_quotation_id()   → next id derived from what is actually stored

Settings documents written by older releases are mapped to the current shape
by normalize_settings() before anything else sees them.
"""

import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime

from . import paths
from .defaults import default_settings, initial_state
from .models import (AppState, BankConfig, BOMTemplate, CompanyConfig,
                     ProductDescription, ProductPricing, Quotation, Term, User,
                     WarrantyConfig)
from .quotes import compute_next_id, format_quotation_id

log = logging.getLogger("solarquote.db")

DB_PATH = paths.DB_PATH
SINGLETON_KEY = "global"

# Bumped whenever normalize_settings learns a new legacy shape
SETTINGS_SCHEMA_VERSION = 2

_db_lock = threading.Lock()


# ── Connection factory ────────────────────────────────────────────────────────
@contextmanager
def get_db():
    """Serialized SQLite connection (WAL) that commits on success."""
    with _db_lock:
        conn = sqlite3.connect(DB_PATH, timeout=30, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()


# ── Schema ────────────────────────────────────────────────────────────────────
SCHEMA = """
CREATE TABLE IF NOT EXISTS settings (
    singleton_key         TEXT PRIMARY KEY,
    company               TEXT,
    bank                  TEXT,
    pricing               TEXT,       -- JSON array of pricing packages
    warranty              TEXT,
    terms                 TEXT,
    bom_templates         TEXT,
    product_descriptions  TEXT,
    users                 TEXT,
    version               INTEGER DEFAULT 0,
    updated_at            TEXT
);

CREATE TABLE IF NOT EXISTS quotations (
    id              TEXT PRIMARY KEY,
    customer_name   TEXT,
    created_by      TEXT,
    data            TEXT NOT NULL,   -- full quotation document (JSON)
    created_at      TEXT NOT NULL,
    updated_at      TEXT
);

CREATE INDEX IF NOT EXISTS idx_quote_creator ON quotations(created_by);
"""

SETTINGS_COLUMNS = ("company", "bank", "pricing", "warranty", "terms",
                    "bom_templates", "product_descriptions", "users")

# Columns added after the first release; init_db() adds them to old files
_LATE_COLUMNS = {
    "settings": [("users", "TEXT"), ("version", "INTEGER DEFAULT 0"), ("updated_at", "TEXT")],
    "quotations": [("created_by", "TEXT"), ("updated_at", "TEXT")],
}


def init_db():
    """Create tables and add any columns an older database is missing."""
    with get_db() as conn:
        conn.executescript(SCHEMA)
        for table, cols in _LATE_COLUMNS.items():
            have = {r["name"] for r in conn.execute(f"PRAGMA table_info({table})")}
            for name, decl in cols:
                if name not in have:
                    conn.execute(f"ALTER TABLE {table} ADD COLUMN {name} {decl}")
                    log.info("Schema: added %s.%s", table, name)
    log.info("DB ready at %s", DB_PATH)


# ── JSON helpers ──────────────────────────────────────────────────────────────
def _jl(val, default=None):
    """Parse a JSON column; bad or missing data gives `default`."""
    if val is None or val == "":
        return default
    if isinstance(val, (dict, list)):
        return val
    try:
        return json.loads(val)
    except (TypeError, ValueError):
        log.warning("Unparseable JSON column: %.60r", val)
        return default


def _jd(val) -> str:
    return json.dumps(val, ensure_ascii=False, default=str)


def _is_empty(val) -> bool:
    return not val


def describe_store_error(e: Exception) -> str:
    """User-facing hint naming the likely cause of a failed write."""
    msg = str(e)
    low = msg.lower()
    if "no such column" in low or "has no column named" in low:
        return (f"Save failed: the database schema is missing a column ({msg}). "
                "Run the schema migration and try again.")
    if "no such table" in low:
        return (f"Save failed: the database schema is missing a table ({msg}). "
                "Run the schema migration and try again.")
    if "locked" in low or "busy" in low:
        return "Save failed: the database is busy. Please try again in a moment."
    if "readonly" in low or "unable to open" in low:
        return f"Save failed: the database file is not writable ({msg})."
    return f"Save failed: {msg}"


# ═══════════════════════════════════════════════════════════════════════════════
# Legacy-shape adapter
# ═══════════════════════════════════════════════════════════════════════════════

def _as_list(val) -> list:
    return val if isinstance(val, list) else []


def _unique_item_ids(items: list, owner_id: str) -> list:
    """Give id-less or duplicate BOM items ids unique within their list."""
    seen = set()
    out = []
    for idx, item in enumerate(items):
        item = dict(item) if isinstance(item, dict) else {}
        iid = str(item.get("id") or "")
        if not iid or iid in seen:
            iid = f"{owner_id or 'item'}-{idx}"
            while iid in seen:
                iid += "x"
            item["id"] = iid
        seen.add(iid)
        out.append(item)
    return out


def normalize_settings(raw: dict) -> dict:
    """Map every known legacy settings shape to the current stored shape.

    v1 → v2, per element so partly migrated lists load too:
      product_descriptions: ["3kW ..."]     → [{id: legacy-N, name, links ""}]
      users:                ["anil"]        → [{id: legacy-user-N, role: user}]
      terms:                ["text", ...]   → [{id, text, enabled, order}]
      bom_templates[].items without ids     → per-list unique ids
    Entries that are neither strings nor objects are dropped. Empty sections
    are left empty; default substitution happens afterwards.
    """
    out = dict(raw or {})

    descs = out.get("product_descriptions")
    if isinstance(descs, list):
        out["product_descriptions"] = [
            {"id": f"legacy-{idx}", "name": d,
             "defaultPricingId": "", "defaultBomTemplateId": ""} if isinstance(d, str) else d
            for idx, d in enumerate(descs) if isinstance(d, (str, dict))
        ]

    users = out.get("users")
    if isinstance(users, list):
        out["users"] = [
            {"id": f"legacy-user-{idx}", "name": u, "username": u,
             "password": "", "role": "user"} if isinstance(u, str) else u
            for idx, u in enumerate(users) if isinstance(u, (str, dict))
        ]

    terms = out.get("terms")
    if isinstance(terms, list):
        out["terms"] = [
            {"id": str(idx + 1), "text": t, "enabled": True, "order": idx + 1}
            if isinstance(t, str) else t
            for idx, t in enumerate(terms) if isinstance(t, (str, dict))
        ]

    templates = out.get("bom_templates")
    if isinstance(templates, list):
        out["bom_templates"] = [
            dict(t, items=_unique_item_ids(_as_list(t.get("items")), str(t.get("id") or "")))
            for t in templates if isinstance(t, dict)
        ]

    return out


def _settings_from_row(row) -> dict:
    if row is None:
        return {}
    return {col: _jl(row[col]) for col in SETTINGS_COLUMNS if col in row.keys()}


def build_state(settings: dict, quotations: list, version: int = 0,
                prefix: str = "KAPL", legacy_prefixes=()) -> AppState:
    """Normalize, substitute defaults per section, and derive next_id."""
    s = normalize_settings(settings)
    d = default_settings()
    pick = {col: (d[col] if _is_empty(s.get(col)) else s[col]) for col in SETTINGS_COLUMNS}

    return AppState(
        company=CompanyConfig.from_dict(pick["company"]),
        bank=BankConfig.from_dict(pick["bank"]),
        product_pricing=[ProductPricing.from_dict(p) for p in pick["pricing"]],
        warranty=WarrantyConfig.from_dict(pick["warranty"]),
        terms=[Term.from_dict(t) for t in pick["terms"]],
        bom_templates=[BOMTemplate.from_dict(t) for t in pick["bom_templates"]],
        product_descriptions=[ProductDescription.from_dict(p) for p in pick["product_descriptions"]],
        users=[User.from_dict(u) for u in pick["users"]],
        quotations=quotations,
        next_id=compute_next_id([q.id for q in quotations], prefix, legacy_prefixes),
        settings_version=version,
    )


def _quotation_from_row(row):
    data = _jl(row["data"])
    if not isinstance(data, dict):
        log.warning("Skipping quotation row %s: unreadable document", row["id"])
        return None
    data.setdefault("id", row["id"])
    data["bom"] = _unique_item_ids(_as_list(data.get("bom")), row["id"])
    try:
        return Quotation.from_dict(data)
    except (AttributeError, TypeError, ValueError) as e:
        log.warning("Skipping quotation row %s: malformed document (%s)", row["id"], e)
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# Interface
# ═══════════════════════════════════════════════════════════════════════════════

def load_all_state(prefix: str = "KAPL", legacy_prefixes=()) -> AppState:
    """Settings + every quotation. Store failures fall back to defaults."""
    settings, version, quotations = {}, 0, []
    try:
        with get_db() as conn:
            row = conn.execute("SELECT * FROM settings WHERE singleton_key=?",
                               (SINGLETON_KEY,)).fetchone()
            settings = _settings_from_row(row)
            if row is not None and "version" in row.keys():
                version = int(row["version"] or 0)
    except sqlite3.Error as e:
        log.error("Error fetching settings: %s", e)

    try:
        with get_db() as conn:
            rows = conn.execute("SELECT id, data FROM quotations ORDER BY created_at, id").fetchall()
        for r in rows:
            q = _quotation_from_row(r)
            if q is not None:
                quotations.append(q)
    except sqlite3.Error as e:
        log.error("Error fetching quotations: %s", e)

    try:
        state = build_state(settings, quotations, version, prefix, legacy_prefixes)
    except Exception as e:
        log.error("Unexpected error building settings: %s", e, exc_info=True)
        # settings fall back to defaults; the quotation collection never does
        return replace(initial_state(), quotations=quotations, settings_version=version,
                       next_id=compute_next_id([q.id for q in quotations], prefix, legacy_prefixes))
    log.info("Loaded state: %d quotations, next_id=%d, settings v%d",
             len(state.quotations), state.next_id, state.settings_version)
    return state


def save_settings(state: AppState) -> dict:
    """Full-replace upsert of the settings row, guarded by settings_version."""
    now = datetime.now().isoformat()
    cols = state.settings_dict()
    try:
        with get_db() as conn:
            row = conn.execute("SELECT version FROM settings WHERE singleton_key=?",
                               (SINGLETON_KEY,)).fetchone()
            stored = int(row["version"] or 0) if row is not None else 0
            if stored != state.settings_version:
                log.warning("Settings write rejected: stored v%d, editing v%d",
                            stored, state.settings_version)
                return {"ok": False, "conflict": True,
                        "error": "Settings were changed by someone else. "
                                 "Reload the page and re-apply your edit."}
            new_version = stored + 1
            conn.execute(f"""
                INSERT INTO settings (singleton_key, {", ".join(SETTINGS_COLUMNS)}, version, updated_at)
                VALUES (?, {", ".join("?" for _ in SETTINGS_COLUMNS)}, ?, ?)
                ON CONFLICT(singleton_key) DO UPDATE SET
                  {", ".join(f"{c}=excluded.{c}" for c in SETTINGS_COLUMNS)},
                  version=excluded.version, updated_at=excluded.updated_at
            """, (SINGLETON_KEY, *[_jd(cols[c]) for c in SETTINGS_COLUMNS], new_version, now))
        log.info("Settings saved (v%d)", new_version)
        return {"ok": True, "version": new_version}
    except sqlite3.Error as e:
        log.error("Error saving settings: %s", e)
        return {"ok": False, "conflict": False, "error": describe_store_error(e)}


def save_quotation(q: Quotation, create: bool = False) -> dict:
    """Upsert keyed by id. With create=True an existing id is a conflict."""
    now = datetime.now().isoformat()
    params = (q.id, q.customer_name, q.created_by, _jd(q.to_dict()), now, now)
    try:
        with get_db() as conn:
            if create:
                conn.execute("""
                    INSERT INTO quotations (id, customer_name, created_by, data, created_at, updated_at)
                    VALUES (?,?,?,?,?,?)
                """, params)
            else:
                conn.execute("""
                    INSERT INTO quotations (id, customer_name, created_by, data, created_at, updated_at)
                    VALUES (?,?,?,?,?,?)
                    ON CONFLICT(id) DO UPDATE SET
                      customer_name=excluded.customer_name, data=excluded.data,
                      updated_at=excluded.updated_at
                """, params)
        log.info("Quotation %s saved (%s)", q.id, "insert" if create else "upsert")
        return {"ok": True}
    except sqlite3.IntegrityError as e:
        log.warning("Quotation id collision on %s: %s", q.id, e)
        return {"ok": False, "conflict": True,
                "error": f"Quotation number {q.id} is already taken."}
    except sqlite3.Error as e:
        log.error("Error saving quotation %s: %s", q.id, e)
        return {"ok": False, "conflict": False, "error": describe_store_error(e)}


def delete_quotation(quote_id: str) -> dict:
    try:
        with get_db() as conn:
            conn.execute("DELETE FROM quotations WHERE id=?", (quote_id,))
        log.info("Quotation %s deleted", quote_id)
        return {"ok": True}
    except sqlite3.Error as e:
        log.error("Error deleting quotation %s: %s", quote_id, e)
        return {"ok": False, "error": describe_store_error(e)}


def allocate_quotation_id(prefix: str = "KAPL", legacy_prefixes=(), now: datetime = None):
    """Next id computed from the stored rows, not from a session's cached state.

    None when the store cannot be read.
    """
    try:
        with get_db() as conn:
            ids = [r["id"] for r in conn.execute("SELECT id FROM quotations")]
    except sqlite3.Error as e:
        log.error("Error allocating quotation id: %s", e)
        return None
    seq = compute_next_id(ids, prefix, legacy_prefixes)
    return format_quotation_id(prefix, seq, now or datetime.now())


def get_db_stats() -> dict:
    """Row counts for the health endpoint."""
    stats = {}
    with get_db() as conn:
        for table in ("settings", "quotations"):
            try:
                stats[table] = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
            except sqlite3.Error:
                stats[table] = -1
    return stats
