"""
solarquote/core/paths.py — Centralized Path Configuration

Single source of truth for directory paths. Every module imports from here
instead of computing its own DATA_DIR.

Priority for DATA_DIR: SOLARQUOTE_DATA_DIR env → mounted /data volume (when
running in a container) → project data/ folder.
"""

import os
import logging

log = logging.getLogger("solarquote.paths")

# ── Project Root ──────────────────────────────────────────────────────────────
_THIS_FILE = os.path.abspath(__file__)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(_THIS_FILE)))

_LOCAL_DATA_DIR = os.path.join(PROJECT_ROOT, "data")


def _resolve_data_dir() -> str:
    """Find the best persistent data directory."""
    env_dir = os.environ.get("SOLARQUOTE_DATA_DIR", "")
    if env_dir:
        return env_dir

    if os.environ.get("SOLARQUOTE_CONTAINER") and os.path.isdir("/data"):
        try:
            test_f = os.path.join("/data", ".vol_test")
            with open(test_f, "w") as f:
                f.write("ok")
            os.remove(test_f)
            return "/data"
        except OSError:
            log.warning("/data is mounted but not writable, using %s", _LOCAL_DATA_DIR)

    return _LOCAL_DATA_DIR


DATA_DIR = _resolve_data_dir()
LOG_DIR = os.path.join(DATA_DIR, "logs")
DB_PATH = os.path.join(DATA_DIR, "solarquote.db")
CONFIG_PATH = os.path.join(PROJECT_ROOT, "solarquote_config.json")


def ensure_dirs():
    """Create DATA_DIR and LOG_DIR. Called once from the app factory."""
    for d in (DATA_DIR, LOG_DIR):
        os.makedirs(d, exist_ok=True)


def validate_paths() -> dict:
    """Runtime validation — call at app startup to catch path issues early.

    Returns:
        {"ok": bool, "errors": [str], "resolved": {name: path}}
    """
    result = {"ok": True, "errors": [], "resolved": {
        "PROJECT_ROOT": PROJECT_ROOT, "DATA_DIR": DATA_DIR, "DB_PATH": DB_PATH,
    }}
    test_file = os.path.join(DATA_DIR, ".write_test")
    try:
        os.makedirs(DATA_DIR, exist_ok=True)
        with open(test_file, "w") as f:
            f.write("ok")
        os.remove(test_file)
    except OSError as e:
        result["errors"].append(f"DATA_DIR not writable: {e}")
        result["ok"] = False
    return result
