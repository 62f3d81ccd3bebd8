"""Staging project assembly.

Materializes a throwaway cargo project:

    <staging>/Cargo.toml
    <staging>/src/main.rs          <- first input file
    <staging>/src/<rel>/<file>.rs  <- other inputs, relative to main's directory
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable

from cargo_play.errors import DiffPathError, PlayIOError
from cargo_play.manifest import CargoManifest
from cargo_play.options import Dependency, RustEdition
from cargo_play.output import log_warning
from cargo_play.paths import ENTRY_FILENAME, MANIFEST_FILENAME

logger = logging.getLogger(__name__)


def write_cargo_toml(
    directory: Path,
    name: str,
    dependencies: list[Dependency],
    edition: RustEdition,
    infers: Iterable[str],
) -> CargoManifest:
    """Synthesize the manifest and write it to ``<directory>/Cargo.toml``.

    The manifest is validated before the file is opened, so a malformed
    header never leaves a partial Cargo.toml behind.

    Args:
        directory: Staging directory
        name: Package name
        dependencies: Header dependencies
        edition: Rust edition
        infers: Inferred crate names (may be empty)

    Returns:
        The manifest that was written

    Raises:
        ManifestParseError: If a dependency declaration is malformed
        PlayIOError: If the file cannot be written
    """
    manifest = CargoManifest.new(name, dependencies, edition)
    manifest.add_infers(infers)
    content = manifest.to_toml()

    manifest_path = directory / MANIFEST_FILENAME
    try:
        manifest_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise PlayIOError(manifest_path, e) from e

    logger.debug(f"Wrote {manifest_path} ({len(manifest.dependencies)} dependencies, {len(manifest.dev_dependencies)} dev-dependencies)")
    return manifest


def relative_to_base(file: Path, base: Path) -> Path:
    """Express ``file`` relative to ``base``, allowing ``..`` components.

    Raises:
        DiffPathError: If no relative path exists (e.g. different drives)
    """
    try:
        return Path(os.path.relpath(file, base))
    except ValueError as e:
        raise DiffPathError(file) from e


def _copy(src: Path, dst: Path) -> None:
    logger.debug(f"Copying {src} => {dst}")
    try:
        # copy2 keeps mtimes so cargo can reuse a previous build
        shutil.copy2(src, dst)
    except OSError as e:
        raise PlayIOError(src, e) from e


def copy_sources(temp: Path, sources: list[Path]) -> None:
    """Copy all sources into ``<temp>/src``.

    The first source becomes main.rs; the rest keep their location relative
    to the first source's directory.

    Raises:
        DiffPathError: If a source cannot be relativized against the entry file
        PlayIOError: If a directory cannot be created or a file copied
    """
    destination = temp / "src"
    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PlayIOError(destination, e) from e

    if not sources:
        return

    entry, *others = sources
    _copy(entry, destination / ENTRY_FILENAME)

    base = entry.parent
    for file in others:
        relative = relative_to_base(file, base)
        if ".." in relative.parts:
            # Lands outside src/, so cargo will not see it as a module
            log_warning(f"{file} is outside the directory of {entry.name} and is staged at src/{relative.as_posix()}")
        dst = destination / relative
        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PlayIOError(dst.parent, e) from e
        _copy(file, dst)
