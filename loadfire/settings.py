import logging
import os
from typing import Optional

from dotenv import load_dotenv

from loadfire.errors import ConfigError

load_dotenv()


def _optional_float(name: str, raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number of seconds, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


class Settings:
    """Environment driven defaults (a local .env file is honoured)."""

    LOG_LEVEL: str = os.getenv("LOADFIRE_LOG_LEVEL", "WARNING")
    REQUEST_TIMEOUT: Optional[str] = os.getenv("LOADFIRE_REQUEST_TIMEOUT")
    PROGRESS: bool = os.getenv("LOADFIRE_PROGRESS", "1") == "1"

    @classmethod
    def get_log_level(cls, override: Optional[str] = None) -> int:
        name = (override or cls.LOG_LEVEL).upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")
        return level

    @classmethod
    def get_request_timeout(cls) -> Optional[float]:
        """Parsed LOADFIRE_REQUEST_TIMEOUT; raises ConfigError when it is not a positive number."""
        return _optional_float("LOADFIRE_REQUEST_TIMEOUT", cls.REQUEST_TIMEOUT)


settings = Settings()
