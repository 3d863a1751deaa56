"""
Runtime configuration.

Environment variables win; an optional solarquote_config.json at the project
root can supply the same keys for local installs.

    SECRET_KEY                  Flask session/flash signing key
    SOLARQUOTE_DATA_DIR         where solarquote.db and logs live
    SOLARQUOTE_ID_PREFIX        organization code in quotation ids (KAPL)
    SOLARQUOTE_LEGACY_PREFIXES  comma-separated older codes still counted
    SOLARQUOTE_ADMIN_PASSWORD   shared admin password for the login gate
    SOLARQUOTE_JSON_LOGS        "true" for JSON log lines
"""

import json
import logging
import os

from .paths import CONFIG_PATH

log = logging.getLogger("solarquote.config")

DEFAULTS = {
    "secret_key": "solarquote-dev-key",
    "id_prefix": "KAPL",
    "legacy_prefixes": ["KAS"],
    "admin_password": "admin123",
    "json_logs": False,
}

_ENV = {
    "secret_key": "SECRET_KEY",
    "id_prefix": "SOLARQUOTE_ID_PREFIX",
    "legacy_prefixes": "SOLARQUOTE_LEGACY_PREFIXES",
    "admin_password": "SOLARQUOTE_ADMIN_PASSWORD",
    "json_logs": "SOLARQUOTE_JSON_LOGS",
}


def _from_file(path: str) -> dict:
    try:
        with open(path) as f:
            return json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, json.JSONDecodeError) as e:
        log.warning("Ignoring unreadable config %s: %s", path, e)
        return {}


def load_config(path: str = None) -> dict:
    cfg = dict(DEFAULTS)
    cfg["legacy_prefixes"] = list(DEFAULTS["legacy_prefixes"])
    for key, val in _from_file(path or CONFIG_PATH).items():
        if key in cfg:
            cfg[key] = val

    for key, env in _ENV.items():
        raw = os.environ.get(env)
        if raw is None or raw == "":
            continue
        if key == "legacy_prefixes":
            cfg[key] = [p.strip() for p in raw.split(",") if p.strip()]
        elif key == "json_logs":
            cfg[key] = raw.lower() in ("1", "true", "yes")
        else:
            cfg[key] = raw

    if isinstance(cfg["legacy_prefixes"], str):
        cfg["legacy_prefixes"] = [p.strip() for p in cfg["legacy_prefixes"].split(",") if p.strip()]
    return cfg
