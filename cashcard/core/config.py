"""
Configuration helpers for the Cash Card backend.

Settings are read once from environment variables (database URL, principal
registry location, paging bounds, logging) so that routers/services do not
fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    principals_file: str
    required_role: str
    page_size_default: int
    page_size_max: int
    log_level: str
    log_format: str
    auto_create_schema: bool

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    page_size_max = max(1, _int(os.getenv("CASHCARD_PAGE_SIZE_MAX", "2000"), 2000))
    page_size_default = _int(os.getenv("CASHCARD_PAGE_SIZE_DEFAULT", "20"), 20)
    return Settings(
        app_env=app_env,
        database_url=(os.getenv("DATABASE_URL") or "sqlite:///./cashcard.db").strip(),
        principals_file=(os.getenv("CASHCARD_PRINCIPALS_FILE") or "").strip(),
        required_role=(os.getenv("CASHCARD_REQUIRED_ROLE") or "CARD-OWNER").strip(),
        page_size_default=min(max(1, page_size_default), page_size_max),
        page_size_max=page_size_max,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_format=(os.getenv("LOG_FORMAT") or "text").lower(),
        auto_create_schema=_bool(os.getenv("AUTO_CREATE_SCHEMA"), app_env != "prod"),
    )
