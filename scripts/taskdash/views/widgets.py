"""Reusable renderables for the dashboard panels."""

from typing import Optional, Sequence

from rich.align import Align
from rich.box import ROUNDED
from rich.console import Console, ConsoleOptions, RenderResult
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from taskdash.providers import Task
from taskdash.state import MENU_TITLES

HIGHLIGHT_SYMBOL = ">> "
EMPTY_STATE = "No tasks yet, press 'a' to add"
FOOTER_HINT = "h home | t tasks | a add | d delete | j/k move | q quit"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


def tabs_panel(active_index: int) -> Panel:
    """Menu tabs with the shortcut letter underlined and the active tab highlighted."""
    text = Text()
    for index, title in enumerate(MENU_TITLES):
        if index:
            text.append(" | ", style="white")
        first, rest = title[:1], title[1:]
        rest_style = "bold yellow" if index == active_index else "white"
        text.append(first, style="underline yellow")
        text.append(rest, style=rest_style)
    return Panel(text, title="Menu", title_align="left", style="white")


def home_panel() -> Panel:
    """Placeholder shown in the Home view."""
    body = Text(justify="center")
    body.append("Welcome\n\n")
    body.append("to\n\n")
    body.append("taskdash\n\n", style="bold magenta")
    body.append("Press 't' to browse tasks, 'a' to add and 'd' to delete the selected one.")
    return Panel(
        Align.center(body, vertical="middle"),
        title="Home",
        box=ROUNDED,
        style="white",
    )


def list_offset(selection: Optional[int], visible: int) -> int:
    """First row to draw so the selected row stays on screen."""
    if selection is None or visible <= 0:
        return 0
    return max(0, selection - visible + 1)


class TaskList:
    """Selectable list of task titles, scrolled to keep the selection visible.

    The number of rows comes from the height rich gives the renderable,
    which inside a Layout is the height of its region.
    """

    def __init__(self, tasks: Sequence[Task], selection: Optional[int]) -> None:
        self._tasks = tasks
        self._selection = selection

    def _rows(self, offset: int, count: int) -> Text:
        text = Text(no_wrap=True, overflow="ellipsis")
        pad = " " * len(HIGHLIGHT_SYMBOL)
        for index in range(offset, min(offset + count, len(self._tasks))):
            if index > offset:
                text.append("\n")
            title = self._tasks[index].title
            if index == self._selection:
                text.append(HIGHLIGHT_SYMBOL + title, style="bold black on yellow")
            else:
                text.append(pad + title)
        return text

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        if options.height is None:
            visible = len(self._tasks)
        else:
            # Panel borders take two rows
            visible = max(1, options.height - 2)
        offset = list_offset(self._selection, visible)
        yield Panel(self._rows(offset, visible), title="Tasks", box=ROUNDED, style="white")


def task_detail_panel(task: Optional[Task]) -> Panel:
    """Table with the fields of the selected task, or an empty-state row."""
    table = Table(expand=True, box=ROUNDED, header_style="bold")
    table.add_column("ID", ratio=5)
    table.add_column("Title", ratio=35)
    table.add_column("Category", ratio=20)
    table.add_column("Created At", ratio=20)

    if task is None:
        table.add_row("", Text(EMPTY_STATE, style="dim"), "", "")
    else:
        table.add_row(
            str(task.id),
            task.title,
            task.category,
            task.created_at.strftime(TIMESTAMP_FORMAT),
        )
    return Panel(table, title="Detail", box=ROUNDED, style="white")


def footer_panel(error: Optional[str] = None) -> Panel:
    """Key hints, or a one-line error banner when a store call failed."""
    if error:
        content = Text(f"Error: {error}", style="bold red", no_wrap=True, overflow="ellipsis")
    else:
        content = Text(FOOTER_HINT, style="green", justify="center")
    return Panel(content, title="Keys", style="white")
