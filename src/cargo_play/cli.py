"""
Command-line interface for cargo-play.

Usage:
    cargo-play [options] <files>... [-- <program args>...]
    cargo play [options] <files>... [-- <program args>...]
    cargo-play +nightly main.rs

Examples:
    cargo-play hello.rs                       # Run a single file
    cargo-play main.rs util/helpers.rs        # Multi-file program
    cargo-play --cargo-action run-release x.rs
    cargo-play --cargo-action test x.rs       # Run #[test] functions
    cargo-play --save ./hello hello.rs        # Export as a cargo project
    cargo-play -i hello.rs                    # Infer dependencies from `use`
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from cargo_play import __version__
from cargo_play.errors import PlayError
from cargo_play.options import CargoAction, PlayOptions, RustEdition
from cargo_play.output import log_error, set_verbose
from cargo_play.pipeline import play
from cargo_play.runner import exit_code_for

PROGRAM_ARGS_SEPARATOR = "--"


def _existing_file(value: str) -> Path:
    """argparse type: an existing file, resolved to an absolute path."""
    path = Path(value)
    if not path.is_file():
        raise argparse.ArgumentTypeError(f"input file does not exist: {value!r}")
    return path.resolve()


def _edition(value: str) -> RustEdition:
    try:
        return RustEdition.parse(value)
    except PlayError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _cargo_action(value: str) -> CargoAction:
    try:
        return CargoAction.parse(value)
    except PlayError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cargo-play",
        description="Run your Rust program without Cargo.toml",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"cargo-play {__version__}",
    )
    parser.add_argument(
        "src",
        nargs="+",
        type=_existing_file,
        help="Paths to your source code files",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help=argparse.SUPPRESS,
    )
    parser.add_argument(
        "-c",
        "--clean",
        action="store_true",
        help="Rebuild the cargo project without the cache from previous run",
    )
    parser.add_argument(
        "-t",
        "--toolchain",
        default=None,
        help=argparse.SUPPRESS,
    )
    parser.add_argument(
        "-e",
        "--edition",
        type=_edition,
        default=RustEdition.default(),
        metavar="{" + ",".join(e.value for e in RustEdition) + "}",
        help=f"Specify Rust edition (default: {RustEdition.default()})",
    )
    parser.add_argument(
        "--cached",
        action="store_true",
        help=argparse.SUPPRESS,
    )
    parser.add_argument(
        "--cargo-action",
        type=_cargo_action,
        default=None,
        help="Cargo action: run, run-release, run-debug or test (default: run)",
    )
    parser.add_argument(
        "--cargo-option",
        default=None,
        help="Custom flags passing to cargo",
    )
    parser.add_argument(
        "--save",
        type=Path,
        default=None,
        help="Generate a Cargo project based on inputs",
    )
    parser.add_argument(
        "-i",
        "--infer",
        action="store_true",
        help="[experimental] Automatically infers dependency",
    )
    return parser


def parse_args(argv: list[str]) -> Optional[PlayOptions]:
    """Parse command-line arguments (without the program name).

    Handles the cargo subcommand form (``cargo play ...`` passes ``play``
    first), ``+toolchain`` selectors and ``--`` program arguments.

    Returns:
        PlayOptions, or None if there was nothing to do (help was printed)
    """
    parser = build_parser()

    if not argv:
        parser.print_help()
        return None

    if argv[0] == "play":
        argv = argv[1:]

    if PROGRAM_ARGS_SEPARATOR in argv:
        split = argv.index(PROGRAM_ARGS_SEPARATOR)
        own_args, program_args = argv[:split], argv[split + 1 :]
    else:
        own_args, program_args = argv, []

    toolchain = next((arg[1:] for arg in own_args if arg.startswith("+")), None)
    own_args = [arg for arg in own_args if not arg.startswith("+")]

    parsed = parser.parse_args(own_args)

    return PlayOptions(
        src=parsed.src,
        debug=parsed.debug,
        clean=parsed.clean,
        toolchain=toolchain or parsed.toolchain,
        edition=parsed.edition,
        cached=parsed.cached,
        cargo_action=parsed.cargo_action,
        cargo_option=parsed.cargo_option,
        save=parsed.save,
        infer=parsed.infer,
        args=program_args,
    )


def main(argv: Optional[list[str]] = None) -> None:
    """cargo-play entry point; exits with the played program's exit code."""
    options = parse_args(sys.argv[1:] if argv is None else argv)
    if options is None:
        sys.exit(0)

    if options.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
        set_verbose(True)

    try:
        returncode = play(options)
    except PlayError as e:
        log_error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        log_error("Interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    sys.exit(exit_code_for(returncode))


if __name__ == "__main__":
    main()
