"""Application settings (read from environment variables / .env file) and logging setup."""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """Every field can be overridden with an environment variable, ex. CHESS_DATABASE_URL=postgresql://..."""

    model_config = SettingsConfigDict(env_prefix="CHESS_", env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./chess_together.db"
    echo_sql: bool = False

    # Join codes: 36^5 ~ 60 million options, so a handful of attempts is plenty.
    code_length: int = 5
    code_max_attempts: int = 5

    # How often a conflicting write gets replayed before giving up.
    max_transaction_retries: int = 5

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Call once at process start."""
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
    if not settings.echo_sql:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
