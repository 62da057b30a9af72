from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Tile Sample Dashboard"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:8030"]

    # Spreadsheet export (read) and Apps Script web app (write)
    sheet_csv_url: str = (
        "https://docs.google.com/spreadsheets/d/"
        "14-ZggYhORtlQOp2e4Xp2fONWKBAdf_p_4LyCSU1tpKs/gviz/tq?tqx=out:csv&sheet=Sheet1"
    )
    script_url: str = ""

    # None = wait indefinitely for the remote endpoints
    gateway_timeout: float | None = None

    # Dashboard behaviour
    page_size: int = 10
    active_status: str = "Sampel Aktif"

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore: outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_gateway: str = "INFO"          # spreadsheet gateway

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance: reads .env once."""
    return Settings()
