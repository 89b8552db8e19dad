# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Application configuration via environment variables and .env files."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from digdb.config import ConnectionConfig
from digdb.core.constants import (
    DEFAULT_MIGRATIONS_DIR,
    DEFAULT_MIGRATIONS_TABLE,
    DEFAULT_SEEDERS_DIR,
    DatabaseType,
)
from digdb.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DIG_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
    )

    # Database
    db_type: DatabaseType = DatabaseType.POSTGRESQL
    db_host: str = "localhost"
    db_port: int = 0  # 0 selects the backend default
    db_database: str = ""
    db_username: str = ""
    db_password: str = ""
    db_ssl: bool = False

    # Migrations
    migrations_dir: Path = Path(DEFAULT_MIGRATIONS_DIR)
    migrations_table: str = DEFAULT_MIGRATIONS_TABLE

    # Seeders
    seeders_dir: Path = Path(DEFAULT_SEEDERS_DIR)

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # "text" or "json"

    @field_validator("db_type", mode="before")
    @classmethod
    def _normalise_db_type(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip().lower()
            # Accept the common short aliases.
            return {"postgres": "postgresql", "pg": "postgresql"}.get(v, v)
        return v

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("text", "json"):
            msg = f"log_format must be 'text' or 'json', got {v!r}"
            raise ValueError(msg)
        return v

    def to_connection_config(self) -> ConnectionConfig:
        """Build the :class:`ConnectionConfig` these settings describe.

        Raises:
            ConfigurationError: If a real backend is selected without a
                database name or username.
        """
        if self.db_type is not DatabaseType.MOCK:
            required = {"DIG_DB_DATABASE": self.db_database, "DIG_DB_USERNAME": self.db_username}
            missing = [env for env, value in required.items() if not value]
            if missing:
                msg = f"Missing required setting(s) for {self.db_type.value}: {', '.join(missing)}"
                raise ConfigurationError(msg)
        return ConnectionConfig(
            database_type=self.db_type,
            host=self.db_host,
            port=self.db_port,
            database=self.db_database,
            username=self.db_username,
            password=self.db_password,
            ssl=self.db_ssl,
        )


def get_settings() -> Settings:
    return Settings()
