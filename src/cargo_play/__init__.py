"""cargo-play - Run loose Rust source files without writing a Cargo.toml."""

__version__ = "0.4.0"
