"""Runtime configuration: where the vault lives and environment overrides.

Environment variables
---------------------
PWGEN_STORAGE             Full path to the vault file.
PWGEN_CLIPBOARD_TIMEOUT   Seconds before a copied password is cleared (0 = never).
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

from .errors import PlatformUnsupportedError

STORAGE_ENV = "PWGEN_STORAGE"
CLIPBOARD_TIMEOUT_ENV = "PWGEN_CLIPBOARD_TIMEOUT"

APP_DIR = "pwgen"
STORAGE_FILENAME = "storage.cpwgen"


def config_dir() -> Path:
    """Return the per-user config directory for this platform."""
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    if sys.platform == "darwin" or sys.platform.startswith("linux"):
        return Path.home() / ".config"
    raise PlatformUnsupportedError(f"Unsupported operating system: {sys.platform}")


def default_storage_path() -> Path:
    return config_dir() / APP_DIR / STORAGE_FILENAME


def storage_path(override: Optional[Path] = None) -> Path:
    """Resolve the vault path: explicit *override*, then env, then default."""
    if override is not None:
        return override
    env = os.environ.get(STORAGE_ENV)
    if env:
        return Path(env).expanduser()
    return default_storage_path()


def clipboard_timeout(override: Optional[int] = None) -> int:
    if override is not None:
        return max(override, 0)
    raw = os.environ.get(CLIPBOARD_TIMEOUT_ENV, "")
    try:
        return max(int(raw), 0)
    except ValueError:
        return 0
