# quorumsig/config.py
"""
Runtime settings, loaded from QUORUMSIG_* environment variables.

QUORUMSIG_VERIFY_ON_MERGE   verify every subsignature while merging (default: off)
QUORUMSIG_LOG_LEVEL         log level used by the CLI (default: WARNING)
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None else default


def _parse_bool(name: str, val: Optional[str], default: bool) -> bool:
    if val is None:
        return default
    s = val.strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got: {val!r}")


def _parse_level(val: str) -> str:
    level = val.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"unknown log level: {val!r}")
    return level


@dataclass(frozen=True)
class Settings:
    verify_on_merge: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, prefix: str = "QUORUMSIG_") -> "Settings":
        verify = _parse_bool(
            f"{prefix}VERIFY_ON_MERGE", _env(f"{prefix}VERIFY_ON_MERGE"), False
        )
        level = _parse_level(_env(f"{prefix}LOG_LEVEL", "WARNING") or "WARNING")
        return cls(verify_on_merge=verify, log_level=level)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget the cached settings so the next get_settings() rereads the environment."""
    global _settings
    _settings = None
