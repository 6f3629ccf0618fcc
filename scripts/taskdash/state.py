"""
Menu/selection state machine.

transition() is pure: it maps (state, event, snapshot) to a new state and
an optional intent. Intents are fulfilled by the render loop against the
task store, which then reports back through on_added() / on_removed().
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Union

from taskdash.events import Event, Input
from taskdash.providers import Task


class Menu(Enum):
    HOME = "home"
    TASKS = "tasks"


MENU_TITLES: tuple[str, ...] = ("HOME", "TASK", "ADD", "DELETE", "QUIT")

# Tab highlighted for each menu
MENU_INDEX: dict[Menu, int] = {
    Menu.HOME: 0,
    Menu.TASKS: 1,
}

QUIT_KEY = "q"
HOME_KEY = "h"
TASKS_KEY = "t"
ADD_KEY = "a"
DELETE_KEY = "d"
DOWN_KEYS = frozenset({"down", "j"})
UP_KEYS = frozenset({"up", "k"})


@dataclass(frozen=True)
class AddTask:
    """Request to append a new task."""


@dataclass(frozen=True)
class DeleteTask:
    """Request to remove the task with this id."""

    task_id: int


Intent = Union[AddTask, DeleteTask]


@dataclass(frozen=True)
class AppState:
    """Complete application state for one frame."""

    menu: Menu = Menu.HOME
    selection: Optional[int] = None
    running: bool = True
    error: Optional[str] = None


@dataclass(frozen=True)
class Transition:
    state: AppState
    intent: Optional[Intent] = None


def clamp_selection(selection: Optional[int], task_count: int) -> Optional[int]:
    """Clamp a selection into [0, task_count - 1], or None for no tasks."""
    if task_count <= 0:
        return None
    if selection is None:
        return 0
    return max(0, min(selection, task_count - 1))


def initial_state(task_count: int) -> AppState:
    return AppState(selection=0 if task_count > 0 else None)


def reconcile(state: AppState, task_count: int) -> AppState:
    """Re-clamp the selection against a freshly loaded snapshot."""
    selection = clamp_selection(state.selection, task_count)
    if selection == state.selection:
        return state
    return replace(state, selection=selection)


def on_added(state: AppState, index: int, task_count: int) -> AppState:
    """Select the task the store just appended."""
    return replace(state, selection=clamp_selection(index, task_count))


def on_removed(state: AppState, task_count: int) -> AppState:
    """Keep the selection valid after the store removed a task."""
    return replace(state, selection=clamp_selection(state.selection, task_count))


def with_error(state: AppState, message: str) -> AppState:
    return replace(state, error=message)


def _move(state: AppState, delta: int, task_count: int) -> AppState:
    if state.selection is None:
        return reconcile(state, task_count)
    return replace(state, selection=clamp_selection(state.selection + delta, task_count))


def transition(state: AppState, event: Event, snapshot: Sequence[Task]) -> Transition:
    """Apply one event to the state."""
    if not state.running or not isinstance(event, Input):
        return Transition(state)

    # Any key press dismisses the error banner
    if state.error is not None:
        state = replace(state, error=None)

    key = event.key
    task_count = len(snapshot)

    if key == QUIT_KEY:
        return Transition(replace(state, running=False))
    if key == HOME_KEY:
        return Transition(replace(state, menu=Menu.HOME))
    if key == TASKS_KEY:
        return Transition(
            replace(
                state,
                menu=Menu.TASKS,
                selection=clamp_selection(state.selection, task_count),
            )
        )

    if state.menu is not Menu.TASKS:
        return Transition(state)

    if key == ADD_KEY:
        return Transition(state, AddTask())
    if key == DELETE_KEY:
        selection = clamp_selection(state.selection, task_count)
        if selection is None:
            return Transition(state)
        return Transition(state, DeleteTask(snapshot[selection].id))
    if key in DOWN_KEYS:
        return Transition(_move(state, 1, task_count))
    if key in UP_KEYS:
        return Transition(_move(state, -1, task_count))
    return Transition(state)
