"""Pytest configuration and fixtures for cargo-play tests."""

import pytest

from cargo_play import output


@pytest.fixture(autouse=True)
def _reset_output():
    """Restore output module state after each test."""
    yield
    output._output_stream = None
    output._verbose = False


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path):
    """Keep configuration from the developer's environment out of tests."""
    monkeypatch.delenv("CARGO_PLAY_CARGO", raising=False)
    monkeypatch.setenv("CARGO_PLAY_TEMP_DIR", str(tmp_path / "temp-root"))


@pytest.fixture
def write_source(tmp_path):
    """Factory writing a source file under tmp_path/sources and returning its resolved path."""

    def _write(relative: str, content: str = "fn main() {}\n"):
        path = tmp_path / "sources" / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path.resolve()

    return _write
