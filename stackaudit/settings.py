"""Runtime settings (STACKAUDIT_* environment variables)."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import DEFAULT_CONFIG_FILE


class Settings(BaseSettings):
    """Настройки запуска, не входящие в stackAudit.config.json."""

    model_config = SettingsConfigDict(env_prefix="STACKAUDIT_", env_file=".env", extra="ignore")

    config_file: str = DEFAULT_CONFIG_FILE

    # Timeouts
    port_timeout_ms: int = 3000
    command_timeout_ms: int = 10_000
    checker_timeout_seconds: float = 60.0

    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    return Settings()
