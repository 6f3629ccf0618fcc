"""Configuration management for the dashboard."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Mapping, Optional

ENV_PREFIX = "TASKDASH_"

DEFAULT_CATEGORIES = ("work", "home", "errand", "idea")


def _int_or(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


@dataclass(frozen=True)
class Config:
    """Configuration settings for the dashboard."""

    # Task file; created empty on first start
    db_path: Path = Path("data") / "db.json"

    # Event cadence
    tick_rate_ms: int = 200

    # Logging
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    # New tasks get the default title and a category drawn from this pool
    categories: tuple[str, ...] = DEFAULT_CATEGORIES
    default_title: str = "New task"

    def __post_init__(self) -> None:
        # New tasks always need a category to draw from
        if not self.categories:
            object.__setattr__(self, "categories", DEFAULT_CATEGORIES)

    @property
    def tick_rate(self) -> float:
        """Tick interval in seconds."""
        return self.tick_rate_ms / 1000

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Config":
        """Build a config from TASKDASH_* environment variables."""
        env = os.environ if environ is None else environ
        defaults = {f.name: f.default for f in fields(cls)}

        categories = tuple(
            c.strip()
            for c in env.get(ENV_PREFIX + "CATEGORIES", "").split(",")
            if c.strip()
        )

        return cls(
            db_path=Path(env.get(ENV_PREFIX + "DB", str(defaults["db_path"]))),
            tick_rate_ms=_int_or(env.get(ENV_PREFIX + "TICK_MS"), defaults["tick_rate_ms"]),
            log_level=env.get(ENV_PREFIX + "LOG_LEVEL", defaults["log_level"]),
            log_file=env.get(ENV_PREFIX + "LOG_FILE") or None,
            categories=categories,
            default_title=env.get(ENV_PREFIX + "DEFAULT_TITLE", defaults["default_title"]),
        )
