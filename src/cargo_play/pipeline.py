"""The cargo-play pipeline.

Flow:
1. Compute the cache key from the input file set
2. On a cache hit (--cached and a built binary exists), run it directly
3. Otherwise extract header dependencies and, with --infer, inferred ones
4. Prepare the staging directory (cleaning it first with --clean)
5. Write Cargo.toml and copy the sources into src/
6. Export the project (--save) or run the cargo action on it
"""

import logging
from pathlib import Path
from typing import Optional

from cargo_play import infer
from cargo_play.cache import BuildCache, src_hash
from cargo_play.headers import extract_headers, read_sources
from cargo_play.options import CargoAction, PlayOptions
from cargo_play.output import log, log_detail
from cargo_play.paths import get_temp_root
from cargo_play.project import copy_sources, write_cargo_toml
from cargo_play.runner import copy_project, run_cached_binary, run_cargo_action

logger = logging.getLogger(__name__)


def play(options: PlayOptions, temp_root: Optional[Path] = None) -> int:
    """Run one cargo-play invocation.

    Args:
        options: Parsed invocation options
        temp_root: Root for staging directories (default: from configuration)

    Returns:
        Return code of cargo, the cached binary, or the export (0)

    Raises:
        PlayError: On any fatal error; nothing is run in that case
    """
    cache = BuildCache(temp_root if temp_root is not None else get_temp_root())
    key = src_hash(options.src)
    action = options.cargo_action or CargoAction.default()

    if options.cached and not options.clean and options.save is None:
        binary = cache.lookup(key, action)
        if binary is not None:
            log(f"Running cached binary {binary}", verbose_only=True)
            return run_cached_binary(binary, options.args)

    dependencies = extract_headers(read_sources(options.src))
    infers = infer.analyze_sources(options.src) if options.infer else set()

    staging = cache.prepare(key, clean=options.clean)
    log(f"Staging project at {staging}", verbose_only=True)

    manifest = write_cargo_toml(staging, key, dependencies, options.edition, infers)
    log_detail(f"Cargo.toml: {len(manifest.dependencies)} dependencies, {len(manifest.dev_dependencies)} dev-dependencies")
    copy_sources(staging, options.src)

    if options.save is not None:
        return copy_project(staging, options.save)

    return run_cargo_action(options.toolchain, staging, action, options.cargo_option, options.args)
