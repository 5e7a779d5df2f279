"""Settings for the server process, read from environment variables."""

import os
from dataclasses import dataclass, field


def _int_from_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _origins_from_env() -> list[str]:
    return [
        origin.strip()
        for origin in os.getenv("TOWERS_CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]


@dataclass(frozen=True)
class Settings:
    host: str = field(default_factory=lambda: os.getenv("TOWERS_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _int_from_env("TOWERS_PORT", 3000))
    log_level: str = field(
        default_factory=lambda: os.getenv("TOWERS_LOG_LEVEL", "INFO").upper()
    )
    room_code_length: int = field(
        default_factory=lambda: _int_from_env("TOWERS_ROOM_CODE_LENGTH", 6)
    )
    cors_origins: list[str] = field(default_factory=_origins_from_env)
