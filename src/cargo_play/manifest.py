"""Cargo.toml synthesis.

Builds the manifest of the staged project from header dependencies and,
optionally, names proposed by the inference engine. This is the only place
where dependency fragments are validated: each one must parse as a TOML
mapping such as ``rand = "0.7"`` or ``serde = { features = ["derive"] }``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

import toml

from cargo_play.errors import ManifestParseError
from cargo_play.options import Dependency, DependencyKind, RustEdition

PACKAGE_VERSION = "0.1.0"
INFERRED_VERSION = "*"


@dataclass
class CargoPackage:
    """The [package] table."""

    name: str
    edition: RustEdition
    version: str = PACKAGE_VERSION

    def __post_init__(self) -> None:
        # Cargo package names are case-insensitive; normalize to lower case
        self.name = self.name.lower()

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "version": self.version, "edition": str(self.edition)}


def _parse_fragments(dependencies: Iterable[Dependency], kind: DependencyKind) -> dict[str, Any]:
    """Parse all fragments of one kind and merge them into a single table.

    Raises:
        ManifestParseError: If a fragment is not valid TOML or not a mapping
    """
    table: dict[str, Any] = {}
    for dep in dependencies:
        if dep.kind is not kind:
            continue
        try:
            value = toml.loads(dep.declaration)
        except toml.TomlDecodeError as e:
            raise ManifestParseError(f"Invalid dependency declaration {dep.declaration!r}: {e}") from e
        if not isinstance(value, dict):
            raise ManifestParseError("format error!")
        table.update(value)
    return table


def normalize_crate_name(name: str) -> str:
    """Fold hyphens to underscores so manifest names match ``use`` paths."""
    return name.replace("-", "_")


@dataclass
class CargoManifest:
    """In-memory Cargo.toml of a staged project."""

    package: CargoPackage
    dependencies: dict[str, Any] = field(default_factory=dict)
    dev_dependencies: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def new(cls, name: str, dependencies: list[Dependency], edition: RustEdition) -> CargoManifest:
        """Synthesize a manifest from header dependencies.

        Args:
            name: Package name (lower-cased)
            dependencies: Classified header dependencies
            edition: Rust edition

        Returns:
            The manifest

        Raises:
            ManifestParseError: If any declaration is malformed
        """
        return cls(
            package=CargoPackage(name=name, edition=edition),
            dependencies=_parse_fragments(dependencies, DependencyKind.BUILD),
            dev_dependencies=_parse_fragments(dependencies, DependencyKind.TEST),
        )

    def normalized_dependencies(self) -> set[str]:
        return {normalize_crate_name(key) for key in self.dependencies}

    def add_infers(self, infers: Iterable[str]) -> None:
        """Add inferred crate names with a wildcard version.

        Names already declared (compared after hyphen folding) are left
        untouched. Inferred names come from ``use`` paths, so they never
        contain hyphens themselves.
        """
        existing = self.normalized_dependencies()
        for name in sorted(infers):
            if name not in existing:
                self.dependencies[name] = INFERRED_VERSION
                existing.add(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "package": self.package.to_dict(),
            "dependencies": _tables_last(self.dependencies),
            "dev-dependencies": _tables_last(self.dev_dependencies),
        }

    def to_toml(self) -> str:
        return toml.dumps(self.to_dict())

    @classmethod
    def from_toml(cls, text: str) -> CargoManifest:
        """Parse a manifest previously produced by to_toml()."""
        try:
            data = toml.loads(text)
        except toml.TomlDecodeError as e:
            raise ManifestParseError(f"Invalid manifest: {e}") from e
        package = data.get("package", {})
        return cls(
            package=CargoPackage(
                name=package.get("name", ""),
                edition=RustEdition.parse(str(package.get("edition", RustEdition.default().value))),
                version=package.get("version", PACKAGE_VERSION),
            ),
            dependencies=dict(data.get("dependencies", {})),
            dev_dependencies=dict(data.get("dev-dependencies", {})),
        )


def _tables_last(table: dict[str, Any]) -> dict[str, Any]:
    """Order simple values before table values, preserving relative order."""
    simple = {k: v for k, v in table.items() if not isinstance(v, dict)}
    tables = {k: v for k, v in table.items() if isinstance(v, dict)}
    return {**simple, **tables}
