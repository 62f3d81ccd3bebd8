"""Build cache keyed by the set of input files.

Each distinct set of source paths maps to one staging directory,
``<temp-root>/cargo-play.<key>``, which is never removed implicitly so that
cargo's own target/ directory can be reused across invocations. The key is
a SHA-1 over the sorted canonical paths, encoded as URL-safe base64 without
padding, so it is stable regardless of argument order.
"""

from __future__ import annotations

import base64
import hashlib
import logging
import shutil
import sys
from pathlib import Path
from typing import Iterable, Optional

from cargo_play.errors import PlayIOError
from cargo_play.options import CargoAction
from cargo_play.paths import STAGING_PREFIX

logger = logging.getLogger(__name__)


def src_hash(paths: Iterable[Path]) -> str:
    """Compute the cache key for a set of source paths.

    Paths are resolved and de-duplicated first, so ordering, repetition and
    relative or absolute spelling of the same files yield the same key.

    Args:
        paths: Source paths

    Returns:
        URL-safe base64 SHA-1 digest without padding
    """
    sha1 = hashlib.sha1()
    for path in sorted({Path(p).resolve() for p in paths}):
        sha1.update(str(path).encode("utf-8"))
    return base64.urlsafe_b64encode(sha1.digest()).rstrip(b"=").decode("ascii")


def binary_name(key: str) -> str:
    """Name of the executable cargo produces for a staged package."""
    name = key.lower()
    if sys.platform == "win32":
        name += ".exe"
    return name


class BuildCache:
    """Locates, creates and clears staging directories under a temp root."""

    def __init__(self, temp_root: Path, prefix: str = STAGING_PREFIX):
        """Initialize the cache.

        Args:
            temp_root: Directory that holds staging projects
            prefix: Staging directory name prefix
        """
        self.temp_root = temp_root
        self.prefix = prefix

    def dirname(self, key: str) -> str:
        return f"{self.prefix}.{key}"

    def staging_dir(self, key: str) -> Path:
        return self.temp_root / self.dirname(key)

    def binary_path(self, key: str, action: CargoAction) -> Optional[Path]:
        """Where a previous ``cargo run`` left the executable.

        Test builds produce hashed test executables, so they have no
        predictable cached binary and None is returned.
        """
        if action.is_test:
            return None
        return self.staging_dir(key) / "target" / str(action.profile) / binary_name(key)

    def lookup(self, key: str, action: CargoAction) -> Optional[Path]:
        """Return the cached binary for this key and action, or None on a miss."""
        staging = self.staging_dir(key)
        if not staging.exists():
            logger.debug(f"Cache miss: {staging} does not exist")
            return None

        binary = self.binary_path(key, action)
        if binary is None or not binary.exists():
            logger.debug(f"Cache miss: no {action} binary in {staging}")
            return None

        logger.debug(f"Cache hit: {binary}")
        return binary

    def clean(self, staging: Path) -> None:
        """Recursively delete a staging directory.

        Failures are logged and ignored; the directory is recreated or
        reused afterwards either way.
        """
        logger.debug(f"Cleaning temporary folder at: {staging}")
        try:
            shutil.rmtree(staging)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to clean {staging}: {e}")

    def prepare(self, key: str, clean: bool = False) -> Path:
        """Return the staging directory for ``key``, creating it if needed.

        Args:
            key: Cache key
            clean: Delete any previous staging directory first

        Raises:
            PlayIOError: If the directory cannot be created
        """
        staging = self.staging_dir(key)
        if clean:
            self.clean(staging)

        logger.debug(f"Creating temporary building folder at: {staging}")
        if staging.is_dir():
            logger.debug("Temporary directory already exists.")
            return staging
        try:
            staging.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PlayIOError(staging, e) from e
        return staging
