import os
import logging
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

DEFAULT_DB_URL = "sqlite:///./todos.db"
DEFAULT_PORT = 3000

# names both logging and uvicorn accept
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}


def _split_origins(raw: str) -> List[str]:
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def _parse_port(raw: str) -> int:
    try:
        port = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_PORT
    if not 0 < port < 65536:
        return DEFAULT_PORT
    return port


def resolve_log_level(raw: str) -> str:
    """Map a LOG_LEVEL value onto one of ``LOG_LEVELS``, defaulting to INFO."""
    level = (raw or "").strip().upper()
    level = _LEVEL_ALIASES.get(level, level)
    return level if level in LOG_LEVELS else "INFO"


@dataclass
class Settings:
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    database_url: str = DEFAULT_DB_URL
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        """Read settings from the environment, after loading a local ``.env``."""
        if load_env_file:
            load_dotenv(override=False)
        _env_url = (os.getenv("DATABASE_URL", "") or "").strip()
        return cls(
            host=(os.getenv("HOST", "") or "").strip() or "0.0.0.0",
            port=_parse_port(os.getenv("PORT", str(DEFAULT_PORT))),
            database_url=_env_url or DEFAULT_DB_URL,
            log_level=resolve_log_level(os.getenv("LOG_LEVEL", "INFO")),
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*") or "*"),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, resolve_log_level(level)),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
