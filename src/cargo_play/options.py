"""Value types shared across the cargo-play pipeline.

Dependency declarations, Rust editions, cargo profiles and actions, and the
options bag that the CLI hands to the pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from cargo_play.errors import (
    InvalidCargoActionError,
    InvalidCargoProfileError,
    InvalidEditionError,
)

TEST_MARKER = "dev:"


class DependencyKind(Enum):
    """Which manifest table a dependency belongs to."""

    BUILD = "dependencies"
    TEST = "dev-dependencies"


@dataclass(frozen=True)
class Dependency:
    """A raw dependency declaration taken from a source header.

    The declaration is kept as written (e.g. ``rand = "0.7"``); it is only
    validated when the manifest is synthesized.
    """

    kind: DependencyKind
    declaration: str

    @classmethod
    def build(cls, declaration: str) -> "Dependency":
        return cls(DependencyKind.BUILD, declaration)

    @classmethod
    def test(cls, declaration: str) -> "Dependency":
        return cls(DependencyKind.TEST, declaration)

    @classmethod
    def from_line(cls, line: str) -> "Dependency":
        """Classify a stripped header line.

        ``dev: <fragment>`` is a test-only dependency; anything else,
        including lines shorter than the marker, is a build dependency.
        """
        if len(line) >= len(TEST_MARKER) and line[: len(TEST_MARKER)] == TEST_MARKER:
            return cls.test(line[len(TEST_MARKER) :].lstrip())
        return cls.build(line)

    @property
    def is_test(self) -> bool:
        return self.kind is DependencyKind.TEST


class RustEdition(Enum):
    """Rust language edition written into the manifest."""

    E2015 = "2015"
    E2018 = "2018"
    E2021 = "2021"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, token: str) -> "RustEdition":
        for edition in cls:
            if edition.value == token:
                return edition
        raise InvalidEditionError(token)

    @classmethod
    def default(cls) -> "RustEdition":
        return cls.E2018


class CargoProfile(Enum):
    """Build profile; selects both the cargo flag and the target subdirectory."""

    RELEASE = "release"
    DEBUG = "debug"

    def __str__(self) -> str:
        """Return the string value for directory names and display."""
        return self.value

    @classmethod
    def parse(cls, token: str) -> "CargoProfile":
        for profile in cls:
            if profile.value == token:
                return profile
        raise InvalidCargoProfileError(token)


class ActionKind(Enum):
    RUN = "run"
    TEST = "test"


@dataclass(frozen=True)
class CargoAction:
    """What cargo should do with the staged project.

    ``Run`` carries a profile; ``Test`` always runs with cargo's test profile,
    so its ``profile`` field is left at the default and ignored.
    """

    kind: ActionKind
    profile: CargoProfile = CargoProfile.DEBUG

    @classmethod
    def run(cls, profile: CargoProfile = CargoProfile.DEBUG) -> "CargoAction":
        return cls(ActionKind.RUN, profile)

    @classmethod
    def test(cls) -> "CargoAction":
        return cls(ActionKind.TEST)

    @classmethod
    def default(cls) -> "CargoAction":
        return cls.run(CargoProfile.DEBUG)

    @classmethod
    def parse(cls, token: str) -> "CargoAction":
        """Parse ``run``, ``run-<profile>``, ``run:<profile>`` or ``test``.

        Raises:
            InvalidCargoActionError: If the token names no known action
            InvalidCargoProfileError: If a run profile is not recognized
        """
        if token == "test":
            return cls.test()
        if token == "run":
            return cls.run()
        if token.startswith("run") and len(token) > 4 and token[3] in "-:":
            return cls.run(CargoProfile.parse(token[4:]))
        raise InvalidCargoActionError(token)

    @property
    def is_test(self) -> bool:
        return self.kind is ActionKind.TEST

    def __str__(self) -> str:
        if self.is_test:
            return "test"
        return f"run-{self.profile}"


@dataclass
class PlayOptions:
    """Options for one cargo-play invocation.

    ``src`` holds absolute, canonical paths in the order given by the user;
    the first one is the entry file.
    """

    src: list[Path]
    debug: bool = False
    clean: bool = False
    toolchain: Optional[str] = None
    edition: RustEdition = RustEdition.E2018
    cached: bool = False
    cargo_action: Optional[CargoAction] = None
    cargo_option: Optional[str] = None
    save: Optional[Path] = None
    infer: bool = False
    args: list[str] = field(default_factory=list)
