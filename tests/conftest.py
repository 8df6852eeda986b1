"""
Pytest configuration and shared fixtures for pyembedkit tests.
"""

import pytest

# Import test fixtures to make them available to all tests
# ruff: noqa: F401
from tests.fixtures.caches import (
    tool_cache_root,
    populated_tool_cache_root,
    embed_zip,
)
from tests.fixtures.fakes import (
    FakeDownloader,
    FakeExtractor,
    RecordingReporter,
)
from pyembedkit.core.platform import clear_platform_cache


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests that use the real filesystem collaborators"
    )


@pytest.fixture(autouse=True)
def _reset_platform_cache():
    """Platform detection is cached per process; reset it around each test."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove pyembedkit and CI variables and run from an empty directory."""
    for name in (
        "PYEMBEDKIT_VERSION",
        "INPUT_VERSION",
        "PYEMBEDKIT_TOOL_CACHE",
        "RUNNER_TOOL_CACHE",
        "PYEMBEDKIT_TEMP",
        "RUNNER_TEMP",
        "GITHUB_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


@pytest.fixture
def events():
    """Shared collaborator call log."""
    return []


@pytest.fixture
def reporter(events):
    return RecordingReporter(events)


@pytest.fixture
def downloader(events):
    return FakeDownloader(events)


@pytest.fixture
def extractor(events):
    return FakeExtractor(events)
