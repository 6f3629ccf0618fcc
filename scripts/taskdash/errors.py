"""Exception hierarchy shared by the store, terminal and render loop."""


class TaskDashError(Exception):
    """Base class for all taskdash errors."""


class StoreError(TaskDashError):
    """The task store could not be read or written."""


class StoreReadError(StoreError):
    """The task file is missing or unreadable."""


class StoreParseError(StoreError):
    """The task file exists but its contents are malformed."""


class TerminalError(TaskDashError):
    """Raw-mode setup or drawing failed."""
