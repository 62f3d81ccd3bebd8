"""
Path and executable configuration.

Settings are read from the environment at call time:
- CARGO_PLAY_TEMP_DIR: root for staging directories (default: platform temp dir)
- CARGO_PLAY_CARGO: cargo executable to invoke (default: "cargo")
"""

import os
import tempfile
from pathlib import Path

STAGING_PREFIX = "cargo-play"
MANIFEST_FILENAME = "Cargo.toml"
ENTRY_FILENAME = "main.rs"


def get_temp_root() -> Path:
    """Determine the directory that holds staging projects.

    Priority: CARGO_PLAY_TEMP_DIR > tempfile.gettempdir().
    """
    temp_env = os.environ.get("CARGO_PLAY_TEMP_DIR")
    if temp_env:
        return Path(temp_env).resolve()
    return Path(tempfile.gettempdir())


def get_cargo_executable() -> str:
    """Return the cargo executable name or path."""
    return os.environ.get("CARGO_PLAY_CARGO") or "cargo"
