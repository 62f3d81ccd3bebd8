"""[experimental] Dependency inference from source usage.

Scans Rust sources for crate roots used in ``use`` declarations,
``extern crate`` items and fully qualified paths, and proposes them as
dependencies. Built-in crates, path keywords and modules that belong to
the played program itself are excluded. This is a textual scan, not a
parser; strings and comments are stripped first so they do not produce
false positives.
"""

import logging
import re
from pathlib import Path

from cargo_play.headers import read_sources

logger = logging.getLogger(__name__)

BUILTIN_CRATES = frozenset({"std", "core", "alloc", "proc_macro", "test"})
PATH_KEYWORDS = frozenset({"crate", "self", "super", "Self"})
PRIMITIVES = frozenset(
    {"bool", "char", "str", "f32", "f64", "i8", "i16", "i32", "i64", "i128", "isize", "u8", "u16", "u32", "u64", "u128", "usize"}
)

EXCLUDED = BUILTIN_CRATES | PATH_KEYWORDS | PRIMITIVES

_IDENT = r"[A-Za-z_][A-Za-z0-9_]*"

_NOISE = re.compile(
    r'(?P<comment>//[^\n]*|/\*.*?\*/)|(?P<string>"(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])\')',
    re.DOTALL,
)

_USE = re.compile(rf"\buse\s+(?:::)?\s*({_IDENT})\s*(?:::|;|\s+as\b)")
_USE_GROUP = re.compile(r"\buse\s+(?:::)?\s*\{([^}]*)\}")
_USE_TREE = re.compile(r"\buse\s+([^;]+);")
_USE_SELF = re.compile(rf"({_IDENT})\s*::\s*\{{\s*self\b")
_USE_ALIAS = re.compile(rf"\bas\s+({_IDENT})$")
_EXTERN_CRATE = re.compile(rf"\bextern\s+crate\s+({_IDENT})")
_QUALIFIED_PATH = re.compile(rf"(?<![A-Za-z0-9_:.])(?:::)?({_IDENT})::(?:{_IDENT}|<|\{{|\*)")
_MOD = re.compile(rf"\bmod\s+({_IDENT})\s*[;{{]")
_LOCAL_ITEM = re.compile(rf"\b(?:struct|enum|trait|type|union)\s+({_IDENT})")


def _strip_noise(source: str) -> str:
    # One left-to-right pass so "//" in strings and quotes in comments are handled
    return _NOISE.sub(lambda m: " " if m.group("comment") else '""', source)


def use_bindings(tree: str) -> set[str]:
    """Names a ``use`` tree brings into scope other than crate roots.

    ``std::io`` binds ``io``, ``a::b as c`` binds ``c`` and ``std::{fmt, io::Read}``
    binds ``fmt`` and ``Read``. A bare ``use rand;`` binds nothing here since
    ``rand`` is the crate itself.
    """
    bindings = set(_USE_SELF.findall(tree))
    nested = "{" in tree
    for item in re.split(r"[{},]", tree):
        item = item.strip()
        if not item or item.endswith("::") or item.endswith("*") or item == "self":
            continue
        alias = _USE_ALIAS.search(item)
        if alias:
            bindings.add(alias.group(1))
            continue
        segments = [s.strip() for s in item.split("::")]
        if len(segments) > 1 or nested:
            bindings.add(segments[-1])
    return bindings


def analyze_source(source: str) -> tuple[set[str], set[str]]:
    """Collect candidate crate roots and locally defined names from one file.

    Roots of ``use`` trees and ``extern crate`` items are always candidates.
    Roots of other qualified paths are candidates unless the file bound that
    name with ``use`` (``use std::io; io::stdin()``).

    Returns:
        (candidates, local_names)
    """
    code = _strip_noise(source)

    candidates: set[str] = set()
    candidates.update(_USE.findall(code))
    candidates.update(_EXTERN_CRATE.findall(code))
    for group in _USE_GROUP.findall(code):
        for item in group.split(","):
            match = re.match(rf"\s*({_IDENT})\s*::", item)
            if match:
                candidates.add(match.group(1))

    bindings: set[str] = set()
    for tree in _USE_TREE.findall(code):
        bindings |= use_bindings(tree)
    candidates.update(set(_QUALIFIED_PATH.findall(code)) - bindings)

    local_names = set(_MOD.findall(code)) | set(_LOCAL_ITEM.findall(code))
    return candidates, local_names


def analyze_sources(paths: list[Path]) -> set[str]:
    """Infer external crate names used by the given sources.

    Args:
        paths: Source files, entry file first

    Returns:
        Crate names that look like external dependencies

    Raises:
        PlayIOError: If a source cannot be read
    """
    candidates: set[str] = set()
    local_names = {path.stem for path in paths}

    for source in read_sources(paths):
        found, local = analyze_source(source)
        candidates |= found
        local_names |= local

    infers = {name for name in candidates if name not in EXCLUDED and name not in local_names and not name[0].isupper()}
    logger.debug(f"Inferred dependencies: {sorted(infers)}")
    return infers
