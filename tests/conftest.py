"""Common test fixtures for wwtt."""

import datetime
import logging
from datetime import timezone

import pytest

from wwtt.config import config
from wwtt.models.schema import Note, NoteCollection, Tag
from wwtt.observability import ROOT_LOGGER_NAME, metrics
from wwtt.services.session_service import NoteSession
from wwtt.storage.note_store import NoteStore


def at(minutes: int) -> datetime.datetime:
    """A fixed UTC timestamp ``minutes`` after 2024-01-01 09:00."""
    base = datetime.datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
    return base + datetime.timedelta(minutes=minutes)


@pytest.fixture
def notes_path(tmp_path):
    """Path of a notes file inside a temporary directory."""
    return tmp_path / "wwtt.json"


@pytest.fixture
def test_config(tmp_path, notes_path, monkeypatch):
    """Point the global config at temporary paths (auto-restored)."""
    monkeypatch.setattr(config, "base_dir", tmp_path)
    monkeypatch.setattr(config, "storage_path", notes_path)
    monkeypatch.setattr(config, "log_dir", tmp_path / "logs")
    monkeypatch.setattr(config, "log_level", "INFO")
    monkeypatch.setattr(config, "create_if_missing", True)
    for name in ("WWTT_STORAGE_PATH", "WWTT_LOG_DIR", "WWTT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield config


@pytest.fixture
def store(notes_path):
    """An empty store that saves to a temporary notes file."""
    return NoteStore(path=notes_path)


@pytest.fixture
def populated_store(notes_path):
    """A store with tags [b, a, b, c] in creation order and distinct timestamps."""
    collection = NoteCollection(
        notes=[
            Note(name="alpha", content="first", tag=Tag(name="b"), updated_at=at(1)),
            Note(name="Beta note", content="second", tag=Tag(name="a"), updated_at=at(4)),
            Note(name="gamma", content="", tag=Tag(name="b"), updated_at=at(2)),
            Note(name="delta", content="fourth", tag=Tag(name="c"), updated_at=at(3)),
        ]
    )
    return NoteStore(collection, path=notes_path)


@pytest.fixture
def session(populated_store):
    """A browsing session over the populated store."""
    return NoteSession(populated_store)


@pytest.fixture
def clean_metrics():
    """Start from empty operation metrics."""
    metrics.reset()
    yield metrics
    metrics.reset()


@pytest.fixture
def clean_logging():
    """Remove handlers that configure_logging attached to the wwtt logger."""
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    before = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    for handler in list(root_logger.handlers):
        if handler not in before:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)


@pytest.fixture
def clock():
    """Helper building fixed timestamps, see ``at``."""
    return at
