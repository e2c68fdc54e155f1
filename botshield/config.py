"""
botshield configuration

Settings are read from environment variables.
"""

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_TRUE = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE


def _env_number(name: str, default, cast=int):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Invalid value for %s: %r, using %r", name, raw, default)
        return default


def _valid_level(level: str) -> bool:
    return isinstance(logging.getLevelName(level), int)


def _env_log_level(name: str, default: str) -> str:
    raw = (os.getenv(name) or "").strip().upper()
    if not raw:
        return default
    if not _valid_level(raw):
        logger.warning("Invalid value for %s: %r, using %r", name, raw, default)
        return default
    return raw


@dataclass
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    cors_origins: Optional[List[str]] = None
    mask_prefix: int = 8
    store_challenges: bool = False
    challenge_ttl: float = 300.0
    seed_known_threats: bool = True

    def __post_init__(self):
        if self.cors_origins is None:
            self.cors_origins = ["*"]

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.getenv("BOTSHIELD_CORS_ORIGINS", "*")
        return cls(
            host=os.getenv("BOTSHIELD_HOST", "0.0.0.0"),
            port=_env_number("BOTSHIELD_PORT", _env_number("PORT", 3000)),
            log_level=_env_log_level("BOTSHIELD_LOG_LEVEL", "INFO"),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()] or ["*"],
            mask_prefix=_env_number("BOTSHIELD_MASK_PREFIX", 8),
            store_challenges=_env_bool("BOTSHIELD_STORE_CHALLENGES", False),
            challenge_ttl=_env_number("BOTSHIELD_CHALLENGE_TTL", 300.0, float),
            seed_known_threats=_env_bool("BOTSHIELD_SEED_KNOWN_THREATS", True),
        )


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a console handler to the botshield logger (once)."""
    root = logging.getLogger("botshield")
    level = str(level).upper()
    if not _valid_level(level):
        logger.warning("Unknown log level %r, using INFO", level)
        level = "INFO"
    root.setLevel(level)
    if not any(getattr(h, "_botshield", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._botshield = True
        root.addHandler(handler)
    return root
