"""Pytest configuration and shared fixtures for binview tests."""

import pytest

import binview.core.palette
import binview.io.logging_setup
from binview.core.ranges import ByteRange


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep settings and logs inside tmp_path; undo global setup afterwards."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("BINVIEW_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("BINVIEW_LOG_FILE", str(tmp_path / "logs" / "binview.log"))
    monkeypatch.delenv("BINVIEW_LOG_LEVEL", raising=False)
    monkeypatch.delenv("BINVIEW_SEED_HUE", raising=False)
    yield
    binview.io.logging_setup.reset()
    binview.core.palette.init_palette(190.0)


@pytest.fixture
def data():
    """64 bytes counting up from 0."""
    return bytes(range(64))


@pytest.fixture
def buffer(data):
    return ByteRange.of(data)
