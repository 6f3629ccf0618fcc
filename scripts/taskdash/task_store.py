"""
TaskStore implementation backed by a flat JSON file.

The file holds a JSON array of task records:

    [{"id": 1, "task": "Water plants", "category": "home",
      "created_at": "2024-05-01T09:30:00+00:00"}]

Every call reads the whole file; mutations rewrite it atomically.
"""

from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jsonschema import ValidationError, validate

from taskdash.errors import StoreParseError, StoreReadError
from taskdash.logging_setup import get_logger
from taskdash.providers import Task

logger = get_logger(__name__)

TASKS_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "array",
    "items": {
        "type": "object",
        "required": ["id", "category", "created_at"],
        "properties": {
            "id": {"type": "integer", "minimum": 0},
            "task": {"type": "string"},
            "title": {"type": "string"},
            "category": {"type": "string"},
            "created_at": {"type": "string"},
        },
        "anyOf": [{"required": ["task"]}, {"required": ["title"]}],
    },
}


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(s: str) -> datetime:
    """Parse ISO datetime string, accepting a trailing Z."""
    try:
        parsed = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except (ValueError, TypeError) as e:
        raise StoreParseError(f"Invalid created_at timestamp: {s!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _task_from_dict(data: dict) -> Task:
    """Convert a stored record to Task."""
    return Task(
        id=data["id"],
        title=data.get("task", data.get("title", "")),
        category=data["category"],
        created_at=_parse_datetime(data["created_at"]),
    )


def _task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "task": task.title,
        "category": task.category,
        "created_at": task.created_at.isoformat(),
    }


def _atomic_write(path: Path, records: list[dict[str, Any]]) -> None:
    """Write JSON atomically via temp file + rename."""
    tmp_fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    try:
        with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, str(path))
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


class JsonTaskStore:
    """TaskStore implementation that reads and writes a JSON array file."""

    def __init__(self, path: Path | str):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def open(self) -> tuple[Task, ...]:
        """Create an empty task file if none exists, then load it once."""
        if not self._path.exists():
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                _atomic_write(self._path, [])
            except OSError as e:
                raise StoreReadError(f"Cannot create {self._path}: {e}") from e
            logger.info("Created empty task file at %s", self._path)
        return self.load()

    def _read_records(self) -> list[dict[str, Any]]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise StoreParseError(f"{self._path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StoreReadError(f"Cannot read {self._path}: {e}") from e

        try:
            records = json.loads(text)
        except json.JSONDecodeError as e:
            raise StoreParseError(f"Invalid JSON in {self._path}: {e}") from e

        try:
            validate(instance=records, schema=TASKS_SCHEMA)
        except ValidationError as e:
            path = " -> ".join(str(p) for p in e.absolute_path) if e.absolute_path else "root"
            raise StoreParseError(
                f"Validation error in {self._path} at '{path}': {e.message}"
            ) from e
        return records

    def _write_records(self, records: list[dict[str, Any]]) -> None:
        try:
            _atomic_write(self._path, records)
        except OSError as e:
            raise StoreReadError(f"Cannot write {self._path}: {e}") from e

    def load(self) -> tuple[Task, ...]:
        """Load every task in stored order."""
        return tuple(_task_from_dict(r) for r in self._read_records())

    def append(self, title: str, category: str) -> Task:
        """Append a task, assigning the next id and the current time."""
        records = self._read_records()
        next_id = max((r["id"] for r in records), default=0) + 1
        task = Task(id=next_id, title=title, category=category, created_at=now_utc())
        records.append(_task_to_dict(task))
        self._write_records(records)
        logger.info("Added task %d (%s)", task.id, category)
        return task

    def remove(self, task_id: int) -> bool:
        """Remove the task with the given id."""
        records = self._read_records()
        kept = [r for r in records if r["id"] != task_id]
        if len(kept) == len(records):
            return False
        self._write_records(kept)
        logger.info("Removed task %d", task_id)
        return True
