from __future__ import annotations

import logging
import secrets
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    App settings.

    Notes:
    - Defaults are local and deterministic (SQLite file next to the repo).
    - Every value can be overridden with an `APP_`-prefixed env var.
    - The seeded root password is a placeholder; rotate it outside this service.
    """

    model_config = SettingsConfigDict(env_prefix="APP_", extra="ignore")

    db_url: str | None = None
    security_config_path: str | None = None
    log_level: str = "INFO"

    jwt_secret: str | None = None
    token_ttl_hours: int = 24

    root_admin_username: str = "superadmin"
    root_admin_password: str = "password123"
    seed_departments: list[str] = Field(
        default_factory=lambda: ["Academic Affairs", "Logistics Support", "Student Affairs"]
    )

    def resolved_db_url(self) -> str:
        if self.db_url:
            return self.db_url

        repo_root = Path(__file__).resolve().parents[1]
        db_path = repo_root / "app.db"
        return f"sqlite:///{db_path}"

    def resolved_security_config_path(self) -> Path:
        if self.security_config_path:
            return Path(self.security_config_path)

        repo_root = Path(__file__).resolve().parents[1]
        return repo_root / "config" / "security_config.yaml"

    def resolved_jwt_secret(self) -> str:
        if self.jwt_secret:
            return self.jwt_secret

        logger.warning("APP_JWT_SECRET not set; using an ephemeral signing key (tokens will not survive restarts)")
        return secrets.token_urlsafe(48)


@lru_cache
def get_settings() -> Settings:
    return Settings()
