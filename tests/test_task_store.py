"""Tests for task_store.py - JSON file backed task storage."""

import json
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add scripts to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from taskdash.errors import StoreParseError, StoreReadError
from taskdash.providers import Task
from taskdash.task_store import JsonTaskStore


@pytest.fixture
def db_file(tmp_path: Path) -> Path:
    """Task file with two records."""
    path = tmp_path / "db.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": 1,
                    "task": "Water plants",
                    "category": "home",
                    "created_at": "2024-05-01T09:30:00Z",
                },
                {
                    "id": 4,
                    "title": "Write report",
                    "category": "work",
                    "created_at": "2024-05-02T14:00:00+00:00",
                },
            ]
        )
    )
    return path


class TestLoad:
    """Tests for JsonTaskStore.load."""

    def test_loads_records_in_order(self, db_file: Path) -> None:
        tasks = JsonTaskStore(db_file).load()

        assert [t.id for t in tasks] == [1, 4]
        assert tasks[0] == Task(
            id=1,
            title="Water plants",
            category="home",
            created_at=datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
        )

    def test_accepts_title_field(self, db_file: Path) -> None:
        tasks = JsonTaskStore(db_file).load()
        assert tasks[1].title == "Write report"

    def test_returns_tuple_snapshot(self, db_file: Path) -> None:
        assert isinstance(JsonTaskStore(db_file).load(), tuple)

    def test_naive_timestamp_is_utc(self, tmp_path: Path) -> None:
        path = tmp_path / "db.json"
        path.write_text(
            json.dumps(
                [{"id": 1, "task": "x", "category": "c", "created_at": "2024-01-01T00:00:00"}]
            )
        )
        (task,) = JsonTaskStore(path).load()
        assert task.created_at.tzinfo == timezone.utc

    def test_missing_file_raises_read_error(self, tmp_path: Path) -> None:
        with pytest.raises(StoreReadError):
            JsonTaskStore(tmp_path / "missing.json").load()

    def test_invalid_json_raises_parse_error(self, tmp_path: Path) -> None:
        path = tmp_path / "db.json"
        path.write_text("[{not json")
        with pytest.raises(StoreParseError):
            JsonTaskStore(path).load()

    def test_schema_violation_raises_parse_error(self, tmp_path: Path) -> None:
        path = tmp_path / "db.json"
        path.write_text(json.dumps([{"id": "one", "task": "x", "category": "c", "created_at": "2024-01-01"}]))
        with pytest.raises(StoreParseError) as exc_info:
            JsonTaskStore(path).load()
        assert "0 -> id" in str(exc_info.value)

    def test_record_without_title_raises_parse_error(self, tmp_path: Path) -> None:
        path = tmp_path / "db.json"
        path.write_text(json.dumps([{"id": 1, "category": "c", "created_at": "2024-01-01"}]))
        with pytest.raises(StoreParseError):
            JsonTaskStore(path).load()

    def test_bad_timestamp_raises_parse_error(self, tmp_path: Path) -> None:
        path = tmp_path / "db.json"
        path.write_text(json.dumps([{"id": 1, "task": "x", "category": "c", "created_at": "yesterday"}]))
        with pytest.raises(StoreParseError):
            JsonTaskStore(path).load()

    def test_invalid_utf8_raises_parse_error(self, tmp_path: Path) -> None:
        path = tmp_path / "db.json"
        path.write_bytes(b"\xff\xfe[{}]")
        with pytest.raises(StoreParseError) as exc_info:
            JsonTaskStore(path).load()
        assert "not valid UTF-8" in str(exc_info.value)

    def test_non_ascii_titles_round_trip(self, tmp_path: Path) -> None:
        store = JsonTaskStore(tmp_path / "db.json")
        store.open()

        store.append("Café order ☕", "errand")

        assert store.load()[0].title == "Café order ☕"

    def test_top_level_object_raises_parse_error(self, tmp_path: Path) -> None:
        path = tmp_path / "db.json"
        path.write_text(json.dumps({"tasks": []}))
        with pytest.raises(StoreParseError):
            JsonTaskStore(path).load()


class TestOpen:
    """Tests for JsonTaskStore.open."""

    def test_creates_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "data" / "db.json"

        tasks = JsonTaskStore(path).open()

        assert tasks == ()
        assert json.loads(path.read_text()) == []

    def test_existing_file_is_loaded(self, db_file: Path) -> None:
        assert len(JsonTaskStore(db_file).open()) == 2

    def test_malformed_file_is_not_overwritten(self, tmp_path: Path) -> None:
        path = tmp_path / "db.json"
        path.write_text("garbage")
        with pytest.raises(StoreParseError):
            JsonTaskStore(path).open()
        assert path.read_text() == "garbage"


class TestAppend:
    """Tests for JsonTaskStore.append."""

    def test_first_task_gets_id_one(self, tmp_path: Path) -> None:
        store = JsonTaskStore(tmp_path / "db.json")
        store.open()

        task = store.append("Buy milk", "errand")

        assert task.id == 1
        assert task.title == "Buy milk"
        assert task.category == "errand"
        assert task.created_at.tzinfo is not None

    def test_id_follows_highest_existing(self, db_file: Path) -> None:
        task = JsonTaskStore(db_file).append("New", "idea")
        assert task.id == 5

    def test_appended_at_end_and_persisted(self, db_file: Path) -> None:
        store = JsonTaskStore(db_file)
        task = store.append("New", "idea")

        tasks = store.load()
        assert tasks[-1] == task

        raw = json.loads(db_file.read_text())
        assert raw[-1]["task"] == "New"
        assert set(raw[-1]) == {"id", "task", "category", "created_at"}

    def test_no_temp_files_left_behind(self, db_file: Path) -> None:
        JsonTaskStore(db_file).append("New", "idea")
        assert list(db_file.parent.glob("*.tmp")) == []


class TestRemove:
    """Tests for JsonTaskStore.remove."""

    def test_removes_existing_task(self, db_file: Path) -> None:
        store = JsonTaskStore(db_file)

        assert store.remove(1) is True
        assert [t.id for t in store.load()] == [4]

    def test_unknown_id_returns_false(self, db_file: Path) -> None:
        store = JsonTaskStore(db_file)
        before = db_file.read_text()

        assert store.remove(99) is False
        assert db_file.read_text() == before

    def test_next_id_follows_highest_remaining(self, db_file: Path) -> None:
        store = JsonTaskStore(db_file)
        store.remove(4)
        assert store.append("Again", "work").id == 2
