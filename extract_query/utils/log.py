"""Logging setup for the extract query engine.

Modules log through `logging.getLogger(__name__)`, all under the
"extract_query" namespace. `configure_logging` attaches a single stream
handler with a compact format.
"""

import logging
from typing import Dict, Optional

_LEVEL_ABBREV: Dict[int, str] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "ERRO",
}

log = logging.getLogger("extract_query")


class _AbbrevLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        return super().format(record)


def configure_logging(level: str = "INFO", handler: Optional[logging.Handler] = None) -> logging.Logger:
    """Configure the package logger.

    Uses format: mm-dd HH:MM:SS [<LVL>] <name>: <message>

    Args:
        level: Logging level name (e.g. INFO, DEBUG).
        handler: Handler to install, defaults to a stream handler on stderr.

    Returns:
        The configured "extract_query" logger.
    """
    resolved_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    handler = handler or logging.StreamHandler()
    handler.setFormatter(
        _AbbrevLevelFormatter(
            fmt="%(asctime)s [%(levelabbr)s] %(name)s: %(message)s",
            datefmt="%m-%d %H:%M:%S",
        )
    )

    log.handlers.clear()
    log.addHandler(handler)
    log.setLevel(resolved_level)
    log.propagate = False
    return log
