"""Error types raised by the cargo-play pipeline.

Every failure that aborts an invocation derives from PlayError so the CLI
can report it uniformly.
"""

from pathlib import Path
from typing import Union


class PlayError(Exception):
    """Base class for all cargo-play errors."""

    pass


class PlayIOError(PlayError):
    """Raised when reading, writing or copying a file fails.

    Undecodable source text counts as a read failure.
    """

    def __init__(self, path: Path, cause: Union[OSError, UnicodeDecodeError]):
        self.path = path
        self.cause = cause
        super().__init__(f"I/O error on {path}: {cause}")


class ManifestParseError(PlayError):
    """Raised when an embedded dependency fragment is not valid TOML."""

    pass


class InvalidCargoProfileError(PlayError):
    """Raised for a profile token other than release or debug."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Invalid cargo profile: {token!r}")


class InvalidCargoActionError(PlayError):
    """Raised for an action token that is neither run nor test."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Invalid cargo action: {token!r}")


class InvalidEditionError(PlayError):
    """Raised for an unknown Rust edition token."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Invalid Rust edition: {token!r}")


class DiffPathError(PlayError):
    """Raised when a source file cannot be expressed relative to the entry file."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Cannot compute path of {path} relative to the main source file")


class PathExistsError(PlayError):
    """Raised when the export destination is already a directory."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Destination already exists: {path}")


class ToolchainLaunchError(PlayError):
    """Raised when the external toolchain process cannot be started."""

    def __init__(self, command: list[str], cause: OSError):
        self.command = command
        self.cause = cause
        super().__init__(f"Failed to launch {command[0]!r}: {cause}")
