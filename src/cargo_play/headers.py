"""Dependency header extraction.

Dependencies are declared in a contiguous block of ``//#`` comment lines at
the top of each source file:

    #!/usr/bin/env cargo-play
    //# serde = { version = "1.0", features = ["derive"] }
    //# dev: criterion = "*"

    fn main() { ... }

Only the first block is scanned; ``//#`` lines after ordinary code or
comments are ignored.
"""

import logging
from pathlib import Path

from cargo_play.errors import PlayIOError
from cargo_play.options import Dependency

logger = logging.getLogger(__name__)

HEADER_MARKER = "//#"
SHEBANG = "#!"


def read_sources(inputs: list[Path]) -> list[str]:
    """Read every source file as text, preserving input order.

    Raises:
        PlayIOError: If any file cannot be read
    """
    contents: list[str] = []
    for path in inputs:
        try:
            contents.append(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise PlayIOError(path, e) from e
    return contents


def extract_file_headers(text: str) -> list[Dependency]:
    """Extract the dependencies declared in one file's leading header block."""
    # Only \n and \r\n end a line
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    index = 0

    # Skip shebang and blank lines before the block
    while index < len(lines) and (lines[index].startswith(SHEBANG) or not lines[index]):
        index += 1

    dependencies: list[Dependency] = []
    while index < len(lines) and lines[index].startswith(HEADER_MARKER):
        stripped = lines[index][len(HEADER_MARKER) :].lstrip()
        if stripped:
            dependencies.append(Dependency.from_line(stripped))
        index += 1

    return dependencies


def extract_headers(files: list[str]) -> list[Dependency]:
    """Extract dependencies from every file, in file order then line order.

    Args:
        files: Full text of each source file

    Returns:
        Classified dependencies from all files
    """
    dependencies: list[Dependency] = []
    for text in files:
        found = extract_file_headers(text)
        logger.debug(f"Found {len(found)} header dependencies")
        dependencies.extend(found)
    return dependencies
