"""Toolchain actions against a staged project.

Runs ``cargo run``/``cargo test`` on the staged manifest, executes a cached
binary directly, or exports the staged project instead of running it.
"""

import logging
import shlex
import shutil
from pathlib import Path
from typing import Optional

from cargo_play.errors import PathExistsError, PlayIOError
from cargo_play.options import CargoAction, CargoProfile
from cargo_play.output import log
from cargo_play.paths import MANIFEST_FILENAME, get_cargo_executable
from cargo_play.subprocess_utils import run_inherited

logger = logging.getLogger(__name__)

# Exit status used when the child terminated without an exit code
SIGNALED_EXIT_CODE = 255


def cargo_command(
    toolchain: Optional[str],
    project: Path,
    action: CargoAction,
    cargo_option: Optional[str],
    program_args: list[str],
) -> list[str]:
    """Build the cargo argv for an action.

    Layout: cargo [+toolchain] run|test [--release] --manifest-path <toml>
    [custom flags...] -- [program args...]
    """
    cmd = [get_cargo_executable()]

    if toolchain:
        cmd.append(f"+{toolchain}")

    if action.is_test:
        cmd.append("test")
    else:
        cmd.append("run")
        if action.profile is CargoProfile.RELEASE:
            cmd.append("--release")

    cmd.extend(["--manifest-path", str(project / MANIFEST_FILENAME)])

    if cargo_option:
        cmd.extend(shlex.split(cargo_option))

    cmd.append("--")
    cmd.extend(program_args)
    return cmd


def run_cargo_action(
    toolchain: Optional[str],
    project: Path,
    action: CargoAction,
    cargo_option: Optional[str],
    program_args: list[str],
) -> int:
    """Run cargo against the staged project with inherited stdio.

    Returns:
        cargo's return code

    Raises:
        ToolchainLaunchError: If cargo cannot be started
    """
    cmd = cargo_command(toolchain, project, action, cargo_option, program_args)
    return run_inherited(cmd)


def run_cargo_build(
    toolchain: Optional[str],
    project: Path,
    release: bool,
    cargo_option: Optional[str],
    program_args: list[str],
) -> int:
    profile = CargoProfile.RELEASE if release else CargoProfile.DEBUG
    return run_cargo_action(toolchain, project, CargoAction.run(profile), cargo_option, program_args)


def run_cargo_test(
    toolchain: Optional[str],
    project: Path,
    cargo_option: Optional[str],
    program_args: list[str],
) -> int:
    return run_cargo_action(toolchain, project, CargoAction.test(), cargo_option, program_args)


def run_cached_binary(binary: Path, program_args: list[str]) -> int:
    """Execute a previously built binary directly, skipping cargo."""
    return run_inherited([str(binary), *program_args])


def copy_project(source: Path, destination: Path) -> int:
    """Export the staged project to a permanent location.

    Args:
        source: Staging directory
        destination: Target path; must not be an existing directory

    Returns:
        0 on success

    Raises:
        PathExistsError: If destination is already a directory
        PlayIOError: If the copy fails
    """
    if destination.is_dir():
        raise PathExistsError(destination)

    logger.debug(f"Copying project {source} => {destination}")
    try:
        shutil.copytree(source, destination, symlinks=True)
    except OSError as e:
        raise PlayIOError(destination, e) from e

    log(f"Generated project at {destination.resolve()}")
    return 0


def exit_code_for(returncode: Optional[int]) -> int:
    """Map a child return code to our exit status.

    A normal exit code is passed through; a signal termination (negative
    code) or a missing code becomes SIGNALED_EXIT_CODE.
    """
    if returncode is None or returncode < 0:
        return SIGNALED_EXIT_CODE
    return returncode
