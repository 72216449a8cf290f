"""curses-backed terminal surface.

One :class:`TerminalSurface` wraps the full-screen window.  The list
renderer, the spinner thread and the password prompt all draw through it
and hold :attr:`TerminalSurface.lock` for a complete draw-and-refresh, so
no two writers ever interleave partial frames.
"""

from __future__ import annotations

import curses
import locale
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

logger = logging.getLogger(__name__)

ERR = -1            # getch() result when no input is available
PROMPT_WIDTH = 50
PROMPT_HEIGHT = 3

# Style color name -> curses color pair number
COLOR_PAIRS: dict[str, int] = {
    "weak": 1,
    "medium": 2,
    "strong": 3,
    "info": 4,
    "title": 5,
}

_PAIR_COLORS = {
    1: "COLOR_RED",
    2: "COLOR_YELLOW",
    3: "COLOR_GREEN",
    4: "COLOR_CYAN",
    5: "COLOR_MAGENTA",
}


@dataclass(frozen=True)
class Style:
    """Text attributes for one draw call."""

    color: str | None = None    # key of COLOR_PAIRS
    bold: bool = False
    reverse: bool = False


PLAIN = Style()


class TerminalSurface:
    """The shared drawable window plus its lock."""

    def __init__(self, window: Any, *, colors: bool = True) -> None:
        self._win = window
        self._colors = colors
        self.lock = threading.Lock()

    # -- drawing primitives (callers hold ``lock``) --

    def size(self) -> tuple[int, int]:
        """Return ``(rows, cols)`` of the window."""
        return self._win.getmaxyx()

    def erase(self) -> None:
        self._win.erase()

    def refresh(self) -> None:
        self._win.refresh()

    def addstr(self, y: int, x: int, text: str, style: Style = PLAIN) -> None:
        try:
            self._win.addstr(y, x, text, self._attr(style))
        except curses.error:
            # Raised for text running past the bottom-right cell; the
            # visible part has been drawn already.
            pass

    def hline(self, y: int, x: int, width: int, style: Style = PLAIN) -> None:
        if width <= 0:
            return
        attr = self._attr(style)
        self._win.attron(attr)
        try:
            self._win.hline(y, x, curses.ACS_HLINE, width)
        except curses.error:
            pass
        finally:
            self._win.attroff(attr)

    def clear(self) -> None:
        """Erase and refresh the whole window."""
        with self.lock:
            self._win.erase()
            self._win.refresh()

    # -- input --

    def getch(self) -> int:
        """Block until a key code is available (``ERR`` at end of input)."""
        return self._win.getch()

    def getch_nowait(self) -> int:
        """Return the next pending key code, or ``ERR`` if there is none."""
        self._win.nodelay(True)
        try:
            return self._win.getch()
        finally:
            self._win.nodelay(False)

    # -- modal prompt --

    @contextmanager
    def prompt(self, title: str, width: int = PROMPT_WIDTH) -> Iterator["Prompt"]:
        """Open a centred boxed one-line prompt; it is removed on exit."""
        rows, cols = self.size()
        width = max(len(title) + 4, min(width, cols))
        height = PROMPT_HEIGHT
        win = curses.newwin(height, width, max(0, (rows - height) // 2), max(0, (cols - width) // 2))
        prompt = Prompt(win, self.lock, width, field_x=1 + len(title))
        with self.lock:
            win.box()
            win.addstr(1, 1, title)
            win.refresh()
        try:
            yield prompt
        finally:
            with self.lock:
                win.erase()
                win.refresh()
                self._win.touchwin()
                self._win.refresh()
            del win

    def _attr(self, style: Style) -> int:
        attr = 0
        if style.color and self._colors:
            attr |= curses.color_pair(COLOR_PAIRS[style.color])
        if style.bold:
            attr |= curses.A_BOLD
        if style.reverse:
            attr |= curses.A_REVERSE
        return attr


class Prompt:
    """A temporary input window created by :meth:`TerminalSurface.prompt`."""

    def __init__(self, window: Any, lock: threading.Lock, width: int, field_x: int = 1) -> None:
        self._win = window
        self._lock = lock
        self._field_x = field_x
        # Cells between the title and the right border
        self.capacity = max(0, width - 1 - field_x)

    def getch(self) -> int:
        return self._win.getch()

    def show_masks(self, count: int, mask: str = "o") -> None:
        """Redraw the input field as *count* mask characters.

        Input longer than the field is still accepted; the masks stop at
        the border and the cursor stays on it.
        """
        shown = max(0, min(count, self.capacity))
        with self._lock:
            self._win.addstr(1, self._field_x, mask * shown + " " * (self.capacity - shown))
            self._win.move(1, self._field_x + shown)
            self._win.refresh()


# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------

def _init_colors() -> bool:
    if not curses.has_colors():
        return False
    curses.start_color()
    curses.use_default_colors()
    for pair, name in _PAIR_COLORS.items():
        curses.init_pair(pair, getattr(curses, name), -1)
    return True


@contextmanager
def open_surface() -> Iterator[TerminalSurface]:
    """Start a curses session and yield its surface.

    The terminal is restored with ``endwin`` on every exit path,
    including exceptions and KeyboardInterrupt.
    """
    locale.setlocale(locale.LC_ALL, "")
    stdscr = curses.initscr()
    try:
        colors = _init_colors()
        try:
            curses.curs_set(0)
        except curses.error:
            logger.debug("terminal: cursor visibility not supported")
        curses.noecho()
        curses.nonl()
        curses.raw()
        yield TerminalSurface(stdscr, colors=colors)
    finally:
        curses.noraw()
        curses.echo()
        curses.nl()
        curses.endwin()
