"""Pytest fixtures for nutrisprout tests."""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest

from nutrisprout.config import Settings, set_settings
from nutrisprout.config.settings import DatabaseConfig, StorageConfig
from nutrisprout.db.connection import DatabaseConnection
from nutrisprout.profiles.models import UserMetrics
from nutrisprout.storage.local import LocalKeyValueStore, LocalStore
from nutrisprout.storage.sqlite import SqliteStore
from nutrisprout.tracking.models import Consumption


@pytest.fixture
def temp_db():
    """Create a temporary database with schema."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    db = DatabaseConnection(db_path)
    db.initialize_schema()

    yield db

    # Cleanup
    db_path.unlink(missing_ok=True)


@pytest.fixture
def local_kv(tmp_path):
    """Key-value storage in a temporary directory."""
    return LocalKeyValueStore(tmp_path / "local")


@pytest.fixture
def guest_store(local_kv):
    """Local store for the guest session."""
    return LocalStore(local_kv)


@pytest.fixture
def sqlite_store(temp_db):
    """SQLite store for a signed-in user."""
    return SqliteStore(temp_db, "alice")


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at temporary storage, installed globally."""
    settings = Settings(
        database=DatabaseConfig(path=tmp_path / "nutrisprout.db"),
        storage=StorageConfig(local_dir=tmp_path / "local"),
    )
    set_settings(settings)

    yield settings

    set_settings(None)


@pytest.fixture
def today():
    return date(2025, 4, 14)


@pytest.fixture
def reference_metrics():
    """70 kg, 170 cm, 30 year old moderately active male maintaining weight."""
    return UserMetrics(
        weight=70,
        height=170,
        age=30,
        gender="male",
        activity_level="moderate",
        goal="maintain",
    )


@pytest.fixture
def all_goals_met():
    """Consumption meeting all five default goals."""
    return Consumption(calories=2000, protein=120, carbs=250, fat=65, water=8)


@pytest.fixture
def no_goals_met():
    """Consumption missing all five default goals."""
    return Consumption(calories=5000, protein=10, carbs=900, fat=300, water=0)
