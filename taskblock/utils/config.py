"""
Configuration utilities for taskblock.

Settings come from the environment, optionally seeded from ``.taskblock.env``
files (see :func:`load_env_vars`).
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_FILE_NAME = ".taskblock.env"

DEFAULT_BACKEND = "things"
DEFAULT_OSASCRIPT = "osascript"


def load_env_vars() -> None:
    """
    Load environment variables from .env files in the following order:
    1. .taskblock.env in the current directory
    2. .taskblock.env in the user's home directory

    Variables already present in the environment are never overridden, so the
    current directory wins over the home directory.
    """
    if os.path.exists(ENV_FILE_NAME):
        load_dotenv(ENV_FILE_NAME)

    home_env = Path.home() / ENV_FILE_NAME
    if home_env.exists():
        load_dotenv(home_env)


def get_config(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get configuration value from environment variables."""
    return os.getenv(key, default)


def get_default_backend() -> str:
    return (get_config("TASKBLOCK_BACKEND") or DEFAULT_BACKEND).strip().lower()


def get_osascript_path() -> str:
    return get_config("TASKBLOCK_OSASCRIPT") or DEFAULT_OSASCRIPT


def get_inline_threshold() -> int:
    """Scripts up to this many characters are passed with ``-e`` instead of a temp file."""
    raw = get_config("TASKBLOCK_INLINE_MAX_CHARS", "0")
    try:
        return max(0, int(raw))
    except (TypeError, ValueError):
        return 0


def get_timeout() -> Optional[float]:
    """Seconds to wait for ``osascript``; ``None`` waits forever."""
    raw = get_config("TASKBLOCK_TIMEOUT")
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def keep_scripts() -> bool:
    return get_config("TASKBLOCK_KEEP_SCRIPTS") == "1"
