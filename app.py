#!/usr/bin/env python3
"""
Solar Quote Pro — Application Entry Point
Creates Flask app and registers the dashboard Blueprint.
"""

import os
import logging
from flask import Flask

from logging_config import setup_logging


def create_app(config: dict = None):
    """Application factory."""
    from solarquote.core.config import load_config
    cfg = load_config()
    if config:
        cfg.update(config)

    setup_logging(json_logs=cfg.get("json_logs") or None)
    log = logging.getLogger("solarquote")

    app = Flask(__name__)
    app.secret_key = cfg["secret_key"]
    app.config["SOLARQUOTE"] = cfg
    app.config["MAX_CONTENT_LENGTH"] = 8 * 1024 * 1024   # logo / seal uploads

    # ── Persistent database init ──────────────────────────────────────────────
    from solarquote.core import db, paths
    paths.ensure_dirs()
    checks = paths.validate_paths()
    if not checks["ok"]:
        log.error("STARTUP: path checks failed: %s", "; ".join(checks["errors"]))
    try:
        db.init_db()
        log.info("DB: %s | %s", db.DB_PATH, db.get_db_stats())
    except Exception as e:
        log.error("DB init failed, running on built-in defaults: %s", e)

    # Register the dashboard blueprint (all routes)
    from solarquote.api.dashboard import bp
    app.register_blueprint(bp)

    return app


# For gunicorn: gunicorn app:app
app = create_app()

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=False)
