"""
Terminal driver: fullscreen rendering plus cbreak keyboard polling.

Rendering goes through a rich Live display on the alternate screen;
keyboard input is read straight from the stdin file descriptor.
"""

from __future__ import annotations

import os
import select
import sys
import termios
import tty
from typing import IO, Optional

from rich.console import Console, RenderableType
from rich.live import Live
from rich.text import Text

from taskdash.errors import TerminalError
from taskdash.logging_setup import get_logger

logger = get_logger(__name__)

ESCAPE_SEQUENCES = {
    "[A": "up",
    "[B": "down",
    "[C": "right",
    "[D": "left",
    "OA": "up",
    "OB": "down",
    "OC": "right",
    "OD": "left",
}

SINGLE_KEYS = {
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    "\x7f": "backspace",
    "\b": "backspace",
}


class Terminal:
    """Owns the screen and the keyboard for the duration of a session."""

    def __init__(self, console: Console | None = None, stdin: IO[str] | None = None) -> None:
        self._console = console or Console()
        self._stdin = stdin or sys.stdin
        self._live: Optional[Live] = None
        self._old_settings: Optional[list] = None
        self._fd: Optional[int] = None

    @property
    def active(self) -> bool:
        return self._live is not None

    def enter(self) -> None:
        """Switch to cbreak input and the alternate screen."""
        try:
            self._fd = self._stdin.fileno()
            if not os.isatty(self._fd):
                raise TerminalError("stdin is not a terminal")
            self._old_settings = termios.tcgetattr(self._fd)
            tty.setcbreak(self._fd)
        except (termios.error, AttributeError, ValueError, OSError) as e:
            self._old_settings = None
            raise TerminalError(f"Cannot enable raw keyboard input: {e}") from e

        try:
            self._live = Live(
                Text(""),
                console=self._console,
                screen=True,
                auto_refresh=False,
                transient=True,
            )
            self._live.start()
        except Exception as e:
            self._live = None
            self._restore_input()
            raise TerminalError(f"Cannot start fullscreen display: {e}") from e

    def leave(self) -> None:
        """Undo enter(). Safe to call more than once."""
        # Restore input before leaving the screen so the shell gets a sane tty
        self._restore_input()
        if self._live is not None:
            live, self._live = self._live, None
            live.stop()

    def _restore_input(self) -> None:
        if self._old_settings is None or self._fd is None:
            return
        try:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._old_settings)
        except (termios.error, ValueError) as e:
            logger.warning("Could not restore terminal settings: %s", e)
        self._old_settings = None

    def __enter__(self) -> "Terminal":
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.leave()

    def draw(self, renderable: RenderableType) -> None:
        """Render one frame."""
        if self._live is None:
            raise TerminalError("Terminal is not active")
        try:
            self._live.update(renderable, refresh=True)
        except OSError as e:
            raise TerminalError(f"Draw failed: {e}") from e

    def poll_key(self, timeout: float) -> Optional[str]:
        """Wait up to timeout seconds for a key press and return its name."""
        if self._fd is None:
            self._fd = self._stdin.fileno()
        ready, _, _ = select.select([self._fd], [], [], timeout)
        if not ready:
            return None
        ch = os.read(self._fd, 1).decode("utf-8", errors="ignore")
        if not ch:
            return None
        if ch == "\x1b":
            return self._read_escape()
        return SINGLE_KEYS.get(ch, ch)

    def _read_escape(self) -> str:
        sequence = ""
        while len(sequence) < 6 and select.select([self._fd], [], [], 0.01)[0]:
            sequence += os.read(self._fd, 1).decode("utf-8", errors="ignore")
            if len(sequence) > 1 and (sequence[-1].isalpha() or sequence.endswith("~")):
                break
        return ESCAPE_SEQUENCES.get(sequence, "esc")
