"""Application settings and configuration management."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".nutrisprout"


def _default_db_path() -> Path:
    """Return the default database path."""
    return _default_config_dir() / "nutrisprout.db"


def _default_local_dir() -> Path:
    """Return the default on-device key-value storage directory."""
    return _default_config_dir() / "local"


@dataclass
class DatabaseConfig:
    """Relational store configuration."""

    path: Path = field(default_factory=_default_db_path)


@dataclass
class StorageConfig:
    """Local key-value storage configuration."""

    local_dir: Path = field(default_factory=_default_local_dir)


@dataclass
class GoalsConfig:
    """Fallback daily goals used when a profile sets no override."""

    calories: float = 2000
    protein: float = 120
    carbs: float = 250
    fat: float = 65
    water: float = 8


@dataclass
class ProgramsConfig:
    """Program recommendation configuration."""

    limit: int = 3


@dataclass
class ProgressConfig:
    """Progress accumulator configuration."""

    growth_policy: str = "per_day"  # "per_day" or "per_update"


@dataclass
class VisionConfig:
    """Image labeling API configuration."""

    api_key: Optional[str] = None
    endpoint: str = "https://vision.googleapis.com/v1/images:annotate"
    max_results: int = 15


@dataclass
class SessionConfig:
    """Session defaults for the CLI."""

    default_user: Optional[str] = None


@dataclass
class Settings:
    """Main application settings."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    goals: GoalsConfig = field(default_factory=GoalsConfig)
    programs: ProgramsConfig = field(default_factory=ProgramsConfig)
    progress: ProgressConfig = field(default_factory=ProgressConfig)
    vision: VisionConfig = field(default_factory=VisionConfig)
    session: SessionConfig = field(default_factory=SessionConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        The vision API key may also come from NUTRISPROUT_VISION_API_KEY,
        which takes precedence over the file.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.nutrisprout/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        settings = cls()

        data: dict = {}
        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}

        # Parse database config
        if "database" in data:
            db_data = data["database"] or {}
            if "path" in db_data:
                settings.database.path = Path(db_data["path"]).expanduser()

        # Parse storage config
        if "storage" in data:
            storage_data = data["storage"] or {}
            if "local_dir" in storage_data:
                settings.storage.local_dir = Path(storage_data["local_dir"]).expanduser()

        # Parse goal defaults
        if "goals" in data:
            goals_data = data["goals"] or {}
            for name in ("calories", "protein", "carbs", "fat", "water"):
                if name in goals_data:
                    setattr(settings.goals, name, float(goals_data[name]))

        # Parse programs config
        if "programs" in data:
            programs_data = data["programs"] or {}
            if "limit" in programs_data:
                settings.programs.limit = int(programs_data["limit"])

        # Parse progress config
        if "progress" in data:
            progress_data = data["progress"] or {}
            if "growth_policy" in progress_data:
                settings.progress.growth_policy = progress_data["growth_policy"]

        # Parse vision config
        if "vision" in data:
            vision_data = data["vision"] or {}
            if "api_key" in vision_data:
                settings.vision.api_key = vision_data["api_key"]
            if "endpoint" in vision_data:
                settings.vision.endpoint = vision_data["endpoint"]
            if "max_results" in vision_data:
                settings.vision.max_results = int(vision_data["max_results"])

        # Parse session config
        if "session" in data:
            session_data = data["session"] or {}
            if "default_user" in session_data:
                settings.session.default_user = session_data["default_user"]

        env_key = os.environ.get("NUTRISPROUT_VISION_API_KEY")
        if env_key:
            settings.vision.api_key = env_key

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.nutrisprout/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "database": {
                "path": str(self.database.path),
            },
            "storage": {
                "local_dir": str(self.storage.local_dir),
            },
            "goals": {
                "calories": self.goals.calories,
                "protein": self.goals.protein,
                "carbs": self.goals.carbs,
                "fat": self.goals.fat,
                "water": self.goals.water,
            },
            "programs": {
                "limit": self.programs.limit,
            },
            "progress": {
                "growth_policy": self.progress.growth_policy,
            },
            "vision": {
                "api_key": self.vision.api_key,
                "endpoint": self.vision.endpoint,
                "max_results": self.vision.max_results,
            },
            "session": {
                "default_user": self.session.default_user,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load()
    return _settings


def set_settings(settings: Optional[Settings]) -> None:
    """Replace the global settings instance; None reloads from disk on next use."""
    global _settings
    _settings = settings
