"""Session mode and the per-session choice of store."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from nutrisprout.config import Settings, get_settings
from nutrisprout.db.connection import DatabaseConnection
from nutrisprout.errors import SessionError
from nutrisprout.storage.base import Store
from nutrisprout.storage.local import GUEST_USER_ID, LocalKeyValueStore, LocalStore
from nutrisprout.storage.resilient import ResilientStore
from nutrisprout.storage.sqlite import SqliteStore
from nutrisprout.tracking.models import NutritionGoals
from nutrisprout.tracking.progress import GrowthPolicy, ProgressTracker

logger = logging.getLogger(__name__)


class SessionMode(Enum):
    """Who the current session acts for."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    GUEST = "guest"


@dataclass(frozen=True)
class Session:
    """Current session. Authenticated sessions carry a user id."""

    mode: SessionMode = SessionMode.UNAUTHENTICATED
    user_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.mode == SessionMode.AUTHENTICATED and not self.user_id:
            raise SessionError("An authenticated session needs a user id")

    @classmethod
    def for_user(cls, user_id: str) -> "Session":
        return cls(SessionMode.AUTHENTICATED, user_id)

    @classmethod
    def guest(cls) -> "Session":
        return cls(SessionMode.GUEST, GUEST_USER_ID)

    @property
    def is_guest(self) -> bool:
        return self.mode == SessionMode.GUEST

    @property
    def label(self) -> str:
        if self.mode == SessionMode.AUTHENTICATED:
            return f"user {self.user_id}"
        return self.mode.value


def open_store(
    session: Session,
    settings: Optional[Settings] = None,
    db: Optional[DatabaseConnection] = None,
) -> Store:
    """Pick the store for a session. Called once when the session starts.

    Authenticated sessions use the SQLite store with local storage as the
    fallback, or local storage alone if the database cannot be opened.
    Guest sessions use local storage only.

    Raises:
        SessionError: If the session is unauthenticated
    """
    settings = settings or get_settings()
    kv = LocalKeyValueStore(settings.storage.local_dir)

    if session.mode == SessionMode.GUEST:
        logger.debug("Opening local store for guest session")
        return LocalStore(kv, GUEST_USER_ID)

    if session.mode != SessionMode.AUTHENTICATED:
        raise SessionError("Sign in or continue as a guest first")

    try:
        db = db or DatabaseConnection(settings.database.path)
        db.initialize_schema()
    except (sqlite3.Error, OSError) as e:
        if db is None:
            logger.warning(
                "Could not open database at %s, using local storage: %s",
                settings.database.path,
                e,
            )
            return LocalStore(kv, session.user_id)
        # Reads and writes will fall back to local storage
        logger.warning("Could not initialize database at %s: %s", db.db_path, e)

    return ResilientStore(
        SqliteStore(db, session.user_id),
        LocalStore(kv, session.user_id),
    )


def open_tracker(store: Store, settings: Optional[Settings] = None) -> ProgressTracker:
    """ProgressTracker using the configured default goals and growth policy."""
    settings = settings or get_settings()
    goals = settings.goals
    try:
        policy = GrowthPolicy(settings.progress.growth_policy)
    except ValueError:
        logger.warning(
            "Unknown growth policy '%s', using per_day", settings.progress.growth_policy
        )
        policy = GrowthPolicy.PER_DAY

    return ProgressTracker(
        store,
        default_goals=NutritionGoals(
            calories=goals.calories,
            protein=goals.protein,
            carbs=goals.carbs,
            fat=goals.fat,
            water=goals.water,
        ),
        policy=policy,
    )
