"""Logging setup for the dashboard process.

The spreadsheet gateway gets its own level (``LOG_LEVEL_GATEWAY``) so sheet
fetches and script submissions can be traced at DEBUG without turning on
httpx wire logging, which stays at ``LOG_LEVEL_HTTP``.
"""

import logging
import sys

from tile_dashboard.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# settings field -> loggers it controls
_LEVEL_SOURCES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("log_level_http", ("httpx", "httpcore")),
    ("log_level_uvicorn", ("uvicorn", "uvicorn.access", "uvicorn.error")),
    ("log_level_gateway", ("tile_dashboard.infrastructure.sheets",)),
)


def setup_logging(settings: Settings | None = None) -> None:
    """Apply the configured levels; installs a stderr handler if the root has none."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    for field_name, logger_names in _LEVEL_SOURCES:
        level = _parse_level(getattr(settings, field_name))
        for name in logger_names:
            logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).debug(
        "Log levels: root=%s http=%s uvicorn=%s gateway=%s",
        settings.log_level,
        settings.log_level_http,
        settings.log_level_uvicorn,
        settings.log_level_gateway,
    )


def _parse_level(raw: str) -> int:
    """Level name to logging constant; unknown names fall back to INFO."""
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO
