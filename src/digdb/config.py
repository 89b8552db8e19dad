# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Connection configuration passed to :meth:`Connection.connect`."""

from __future__ import annotations

from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationInfo, field_validator

from digdb.core.constants import DEFAULT_PORTS, DatabaseType


class ConnectionConfig(BaseModel):
    """Immutable description of one backend session.

    A ``port`` of ``0`` selects the backend's default port.  ``extras`` is
    passed through as keyword arguments to the native client library.
    """

    model_config = ConfigDict(frozen=True)

    database_type: DatabaseType
    host: str = "localhost"
    port: int = Field(default=0, ge=0, le=65535, validate_default=True)
    database: str = ""
    username: str = ""
    password: SecretStr = SecretStr("")
    ssl: bool = False
    extras: dict[str, str] = Field(default_factory=dict)

    @field_validator("port")
    @classmethod
    def _default_port(cls, v: int, info: ValidationInfo) -> int:
        if v:
            return v
        db_type = info.data.get("database_type")
        if db_type is None:
            return v
        return DEFAULT_PORTS[db_type]

    def to_connection_string(self) -> str:
        return self._render(quote(self.password.get_secret_value(), safe=""))

    def redacted_connection_string(self) -> str:
        return self._render("***" if self.password.get_secret_value() else "")

    def _render(self, secret: str) -> str:
        if self.database_type is DatabaseType.MOCK:
            return f"mock://{self.host}:{self.port}/{self.database}"
        user = quote(self.username, safe="")
        return f"{self.database_type.value}://{user}:{secret}@{self.host}:{self.port}/{self.database}"
