"""
taskdash application.

Main entry point and render loop: draw a frame, block on the next event,
dispatch it to the state machine, fulfil any store intent, repeat until
the user quits.
"""

from __future__ import annotations

import random
import sys
from typing import Optional, Protocol

from rich.console import RenderableType

from taskdash.config import Config
from taskdash.errors import StoreError, TerminalError
from taskdash.events import Event, EventSource
from taskdash.logging_setup import get_logger, setup_logging
from taskdash.providers import Task, TaskStore
from taskdash.state import (
    AddTask,
    AppState,
    DeleteTask,
    Intent,
    initial_state,
    on_added,
    on_removed,
    reconcile,
    transition,
    with_error,
)
from taskdash.task_store import JsonTaskStore
from taskdash.terminal import Terminal
from taskdash.views import compose_view

logger = get_logger(__name__)


class Screen(Protocol):
    """What the render loop needs from a terminal."""

    def __enter__(self) -> "Screen": ...

    def __exit__(self, exc_type, exc, tb) -> None: ...

    def draw(self, renderable: RenderableType) -> None: ...

    def poll_key(self, timeout: float) -> Optional[str]: ...


class TaskDashApp:
    """Render loop owning the application state."""

    def __init__(
        self,
        store: TaskStore,
        terminal: Screen,
        config: Config | None = None,
        events: EventSource | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._store = store
        self._terminal = terminal
        self._config = config or Config()
        self._events = events or EventSource(terminal.poll_key, self._config.tick_rate)
        self._rng = rng or random.Random()
        self._snapshot: tuple[Task, ...] = ()
        self._state = AppState()

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def snapshot(self) -> tuple[Task, ...]:
        return self._snapshot

    def run(self) -> int:
        """Run until the user quits. Returns the process exit code."""
        self._snapshot = self._store.load()
        self._state = initial_state(len(self._snapshot))
        logger.info("Starting with %d task(s)", len(self._snapshot))

        with self._terminal:
            self._events.start()
            try:
                while self._state.running:
                    self._refresh_snapshot()
                    self._terminal.draw(compose_view(self._state, self._snapshot))
                    self.dispatch(self._events.next())
            finally:
                self._events.stop()

        logger.info("Shutting down")
        return 0

    def dispatch(self, event: Event) -> None:
        """Feed one event to the state machine and fulfil its intent."""
        result = transition(self._state, event, self._snapshot)
        self._state = result.state
        if result.intent is not None:
            self._fulfill(result.intent)

    def _refresh_snapshot(self) -> None:
        try:
            self._snapshot = self._store.load()
        except StoreError as e:
            self._recover("load tasks", e)
        self._state = reconcile(self._state, len(self._snapshot))

    def _fulfill(self, intent: Intent) -> None:
        if isinstance(intent, AddTask):
            self._add_task()
        elif isinstance(intent, DeleteTask):
            self._delete_task(intent.task_id)

    def _add_task(self) -> None:
        category = self._rng.choice(self._config.categories)
        try:
            task = self._store.append(self._config.default_title, category)
            self._snapshot = self._store.load()
        except StoreError as e:
            self._recover("add task", e)
            return

        index = next(
            (i for i, t in enumerate(self._snapshot) if t.id == task.id),
            len(self._snapshot) - 1,
        )
        self._state = on_added(self._state, index, len(self._snapshot))

    def _delete_task(self, task_id: int) -> None:
        try:
            removed = self._store.remove(task_id)
            self._snapshot = self._store.load()
        except StoreError as e:
            self._recover("delete task", e)
            return

        self._state = on_removed(self._state, len(self._snapshot))
        if not removed:
            logger.warning("Task %d was already gone", task_id)
            self._state = with_error(self._state, f"Task {task_id} no longer exists")

    def _recover(self, operation: str, error: StoreError) -> None:
        """Keep the last good snapshot and show the failure in the banner."""
        logger.warning("Failed to %s: %s", operation, error)
        self._state = with_error(self._state, str(error))


def run(config: Config | None = None) -> int:
    """Run the dashboard. Returns the process exit code."""
    config = config or Config.from_env()
    try:
        setup_logging(config.log_level, config.log_file)
    except OSError as e:
        print(f"Cannot open log file: {e}", file=sys.stderr)
        return 1

    store = JsonTaskStore(config.db_path)
    try:
        store.open()
    except StoreError as e:
        logger.error("Cannot open task store: %s", e)
        print(f"Cannot open task store: {e}", file=sys.stderr)
        return 1

    app = TaskDashApp(store, Terminal(), config)
    try:
        return app.run()
    except TerminalError as e:
        logger.error("Terminal failure: %s", e)
        print(f"Terminal error: {e}", file=sys.stderr)
        return 1
    except StoreError as e:
        logger.error("Cannot load tasks: %s", e)
        print(f"Cannot load tasks: {e}", file=sys.stderr)
        return 1


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
