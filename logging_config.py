"""
Logging for Solar Quote Pro: console plus a rotating JSON file.

    setup_logging()                       once, from the app factory
    log.info("...", extra={"quote_id": q.id})   extras land in JSON lines

The console speaks JSON when SOLARQUOTE_JSON_LOGS is set (hosted runs
where a collector reads stdout), otherwise short colored lines.
"""
import json
import logging
import logging.handlers
import os
from datetime import datetime, timezone

from solarquote.core.paths import LOG_DIR

LOG_FILE = "solarquote.log"
MAX_LOG_BYTES = 5_000_000
LOG_BACKUPS = 5

# Third-party loggers and the floor each is held to
LIBRARY_LEVELS = {
    "werkzeug": logging.WARNING,
    "PIL": logging.WARNING,
    "reportlab": logging.WARNING,
    "pypdf": logging.ERROR,
}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, timestamped from the record itself."""

    EXTRA_FIELDS = ("route", "method", "status", "duration_ms", "user",
                    "quote_id", "pages")

    def format(self, record):
        when = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry = {
            "ts": when.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update({k: getattr(record, k) for k in self.EXTRA_FIELDS if hasattr(record, k)})
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class HumanFormatter(logging.Formatter):
    """HH:MM:SS [I] logger: message, colored by level on a terminal."""

    COLORS = {"D": "\033[36m", "I": "\033[32m", "W": "\033[33m",
              "E": "\033[31m", "C": "\033[35m"}

    def __init__(self, color=False):
        super().__init__("%(asctime)s [%(levelchar)s] %(name)s: %(message)s",
                         datefmt="%H:%M:%S")
        self.color = color

    def format(self, record):
        record.levelchar = record.levelname[:1]
        line = super().format(record)
        if self.color and record.levelchar in self.COLORS:
            line = f"{self.COLORS[record.levelchar]}{line}\033[0m"
        return line


def _env_flag(name):
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


def _file_handler(log_dir):
    os.makedirs(log_dir, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, LOG_FILE),
        maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(level=None, json_logs=None, log_dir=None):
    """
    Replace the root logger's handlers with console + rotating file.

    Args:
        level: Level name; defaults to SOLARQUOTE_LOG_LEVEL, then LOG_LEVEL, then INFO
        json_logs: JSON on the console; defaults to the SOLARQUOTE_JSON_LOGS flag
        log_dir: Directory for solarquote.log (default: DATA_DIR/logs)
    """
    level = (level or os.environ.get("SOLARQUOTE_LOG_LEVEL")
             or os.environ.get("LOG_LEVEL") or "INFO").upper()
    if json_logs is None:
        json_logs = _env_flag("SOLARQUOTE_JSON_LOGS")
    log_dir = log_dir or LOG_DIR

    console = logging.StreamHandler()
    console.setFormatter(JSONFormatter() if json_logs
                         else HumanFormatter(color=console.stream.isatty()))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    root.handlers.clear()
    root.addHandler(console)
    try:
        root.addHandler(_file_handler(log_dir))
    except OSError as e:
        root.warning("File logging disabled, %s not writable: %s", log_dir, e)

    for name, floor in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(floor)

    logging.getLogger("solarquote").info("Logging initialized (%s, %s console)", level,
                                         "json" if json_logs else "human")
