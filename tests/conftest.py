"""
Shared test fixtures and configuration for the httpreq test suite.
"""

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from aioresponses import aioresponses

from httpreq.config import EngineSettings, GlobalConfig, config_manager
from httpreq.logging import logging_manager


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep every test independent of HTTPREQ_* variables and config files."""
    for name in list(os.environ):
        if name.startswith("HTTPREQ_"):
            monkeypatch.delenv(name)
    config_manager.set_config(GlobalConfig())
    yield
    config_manager.reset()
    logging_manager.cleanup()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def settings() -> EngineSettings:
    """Default engine settings."""
    return EngineSettings()


@pytest.fixture
def mock_aiohttp() -> Generator[aioresponses, None, None]:
    """Mock aiohttp responses for testing."""
    with aioresponses() as m:
        yield m


@pytest.fixture
def sample_files(temp_dir: Path) -> dict:
    """Two small files to upload."""
    report = temp_dir / "report.txt"
    report.write_bytes(b"quarterly numbers")
    image = temp_dir / "logo.bin"
    image.write_bytes(b"\x89PNG\r\n\x1a\n")
    return {"report": report, "logo": image}
