"""
Runtime configuration read from environment variables.

    PRESENCE_HOST                 bind host (default 127.0.0.1)
    PRESENCE_PORT                 bind port (default 3000)
    PRESENCE_WS_PATH              WebSocket route (default /ws)
    LOG_LEVEL                     loguru level (default INFO)
    HISTORY_REQUIRES_FRIENDSHIP   "1" to refuse get_conversation between non-friends (default 1)
    MAX_AVATAR_BYTES              largest accepted avatar payload (default 262144)
"""

import os
from collections.abc import Mapping

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_flag(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"{name} must be one of {sorted(_TRUE | _FALSE)}, got {value!r}")


class Settings(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=0, le=65535)
    ws_path: str = "/ws"
    log_level: str = "INFO"
    history_requires_friendship: bool = True
    max_avatar_bytes: int = Field(default=256 * 1024, gt=0)

    @field_validator("ws_path")
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("ws_path must start with '/'")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        try:
            logger.level(level)
        except ValueError as exc:
            raise ValueError(f"log_level {value!r} is not a loguru level") from exc
        return level

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from 'environ' (os.environ by default).

        Raises ValueError naming the offending variable when a value is invalid.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for field_name, variable in (
            ("host", "PRESENCE_HOST"),
            ("port", "PRESENCE_PORT"),
            ("ws_path", "PRESENCE_WS_PATH"),
            ("log_level", "LOG_LEVEL"),
            ("max_avatar_bytes", "MAX_AVATAR_BYTES"),
        ):
            if env.get(variable):
                values[field_name] = env[variable]
        if env.get("HISTORY_REQUIRES_FRIENDSHIP"):
            values["history_requires_friendship"] = _parse_flag(
                "HISTORY_REQUIRES_FRIENDSHIP", env["HISTORY_REQUIRES_FRIENDSHIP"]
            )

        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise ValueError(f"Invalid presence server configuration:\n{exc}") from exc
