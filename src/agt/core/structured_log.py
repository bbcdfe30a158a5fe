"""Structured JSON-lines logging to a rotating file under the user's home.

Each record is one JSON object per line:
    {"timestamp": ..., "level": ..., "logger": ..., "message": ..., <fields>}

Extra structured fields are attached with ``extra={"fields": {...}}``.
"""

import json
import logging
import os
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "agt"
MAX_LOG_BYTES = 10 * 1024 * 1024
MAX_BACKUP_FILES = 3
DEFAULT_TAIL_LINES = 50


def default_log_path() -> Path:
    override = os.environ.get("AGT_LOG_FILE")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".agt" / "agt.log"


def debug_enabled() -> bool:
    return os.environ.get("AGT_DEBUG", "").strip().lower() in {"1", "true", "yes"}


class JsonLinesFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        fields = getattr(record, "fields", None)
        if isinstance(fields, dict):
            for key, value in fields.items():
                entry.setdefault(key, value)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


def configure_logging(
    log_path: Path | None = None,
    *,
    debug: bool = False,
) -> logging.Logger:
    """Install the rotating JSON-lines handler on the ``agt`` logger.

    Safe to call more than once: existing handlers installed by a previous call
    are replaced. When the log directory cannot be created the file handler is
    skipped and records only reach stderr in debug mode.

    Args:
        log_path: Destination file; defaults to ~/.agt/agt.log
        debug: Also mirror records to stderr

    Returns:
        The configured ``agt`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    path = log_path if log_path is not None else default_log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=MAX_LOG_BYTES,
            backupCount=MAX_BACKUP_FILES,
            encoding="utf-8",
        )
    except OSError:
        file_handler = None

    if file_handler is not None:
        file_handler.setFormatter(JsonLinesFormatter())
        file_handler.setLevel(logging.INFO)
        logger.addHandler(file_handler)

    if debug or debug_enabled():
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(
            logging.Formatter("[%(levelname)s %(name)s] %(message)s")
        )
        stream_handler.setLevel(logging.DEBUG)
        logger.addHandler(stream_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


def tail_log(log_path: Path, lines: int = DEFAULT_TAIL_LINES) -> list[dict[str, object]]:
    """Return the last ``lines`` parsed records from a JSON-lines log file.

    Lines that are not valid JSON are skipped and do not count toward ``lines``.
    """
    if not log_path.exists():
        return []
    records: list[dict[str, object]] = []
    # a torn multibyte write must not break the whole tail
    for line in log_path.read_text(encoding="utf-8", errors="replace").splitlines():
        if not line.strip():
            continue
        try:
            parsed = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            records.append(parsed)
    return records[-lines:]
