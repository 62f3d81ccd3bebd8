"""Subprocess utilities for running the toolchain and played programs.

Child processes inherit stdin/stdout/stderr from cargo-play so that the
played program behaves as if it were started directly from the terminal.
"""

import logging
import subprocess
from typing import Any

from cargo_play.errors import ToolchainLaunchError

logger = logging.getLogger(__name__)


def run_inherited(cmd: list[str], **kwargs: Any) -> int:
    """Run a command with inherited standard streams and wait for it.

    Args:
        cmd: Command and arguments
        **kwargs: Additional arguments passed to subprocess.run

    Returns:
        The process return code (negative if killed by a signal on POSIX)

    Raises:
        ToolchainLaunchError: If the process cannot be started

    Note:
        - Output is never captured; 'stdout'/'stderr' in kwargs override that.
        - check is always False; a non-zero exit is a result, not an error.
    """
    kwargs["check"] = False
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, **kwargs)
    except OSError as e:
        raise ToolchainLaunchError(cmd, e) from e

    logger.debug(f"{cmd[0]} exited with {result.returncode}")
    return result.returncode
