"""Shared pytest configuration and fixtures for tests."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from typer.testing import CliRunner

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from taskflow.core.storage import MemoryBackend  # noqa: E402
from taskflow.core.store import TaskStore  # noqa: E402

START = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock. Returns ``now`` and then moves it forward by ``step``."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(0)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.now
        self.now = self.now + self.step
        return value

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    """Frozen clock at 2024-01-15 09:30 UTC (advance it explicitly)."""
    return FakeClock()


@pytest.fixture
def backend():
    """Empty in-memory persistence slot."""
    return MemoryBackend()


@pytest.fixture
def store(backend, clock):
    """TaskStore over an in-memory slot with a frozen clock."""
    return TaskStore(backend, clock=clock)


@pytest.fixture
def cli_env(monkeypatch, tmp_path):
    """Point the CLI at a temporary data directory with seeding turned off."""
    monkeypatch.setenv("TASKFLOW_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKFLOW_SEED_SAMPLES", "0")
    monkeypatch.delenv("TASKFLOW_STORAGE_KEY", raising=False)
    monkeypatch.delenv("TASKFLOW_LOG_FILE", raising=False)
    monkeypatch.delenv("TASKFLOW_LOG_LEVEL", raising=False)
    yield tmp_path


@pytest.fixture
def runner():
    return CliRunner()
