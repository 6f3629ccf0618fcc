"""Frame composition: a pure function of state and task snapshot."""

from typing import Sequence

from rich.layout import Layout

from taskdash.providers import Task
from taskdash.state import MENU_INDEX, AppState, Menu
from taskdash.views.widgets import (
    TaskList,
    footer_panel,
    home_panel,
    tabs_panel,
    task_detail_panel,
)

TABS_HEIGHT = 3
FOOTER_HEIGHT = 3
LIST_RATIO = 20
DETAIL_RATIO = 80


def _task_body(state: AppState, snapshot: Sequence[Task]) -> Layout:
    selection = state.selection
    if selection is not None and not 0 <= selection < len(snapshot):
        selection = None
    current = snapshot[selection] if selection is not None else None

    body = Layout(name="body")
    body.split_row(
        Layout(TaskList(snapshot, selection), name="list", ratio=LIST_RATIO),
        Layout(task_detail_panel(current), name="detail", ratio=DETAIL_RATIO),
    )
    return body


def compose_view(state: AppState, snapshot: Sequence[Task]) -> Layout:
    """Build the layout tree for one frame.

    Rows: menu tabs, body (home text or task list + detail), footer.
    """
    if state.menu is Menu.TASKS:
        body = _task_body(state, snapshot)
    else:
        body = Layout(home_panel(), name="body")
    body.minimum_size = 2

    root = Layout(name="root")
    root.split_column(
        Layout(tabs_panel(MENU_INDEX[state.menu]), name="tabs", size=TABS_HEIGHT),
        body,
        Layout(footer_panel(state.error), name="footer", size=FOOTER_HEIGHT),
    )
    return root
