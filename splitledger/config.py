"""
Application settings read from the environment.

A ``.env`` file in the working directory is honoured via python-dotenv.
"""

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv


def _get_bool(name: str, default: bool) -> bool:
    """Parse boolean environment variable."""
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


def _get_int(name: str, default: int) -> int:
    """Parse integer environment variable."""
    try:
        return int(os.getenv(name, str(default)))
    except (ValueError, TypeError):
        return default


def _get_list(name: str, default: List[str], separator: str = ",") -> List[str]:
    """Parse comma-separated list environment variable."""
    val = os.getenv(name, "")
    if not val.strip():
        return list(default)
    return [item.strip() for item in val.split(separator) if item.strip()]


@dataclass
class AppConfig:
    host: str = "127.0.0.1"
    port: int = 5000
    debug: bool = False
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "AppConfig":
        load_dotenv()
        return cls(
            host=os.getenv("SPLITLEDGER_HOST", "127.0.0.1"),
            port=_get_int("SPLITLEDGER_PORT", 5000),
            debug=_get_bool("SPLITLEDGER_DEBUG", False),
            cors_origins=_get_list("SPLITLEDGER_CORS_ORIGINS", ["*"]),
        )
