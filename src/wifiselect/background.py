"""Run a blocking call while a spinner overlay animates on the surface.

:func:`run_in_background` starts two threads, the operation and the
spinner, and joins both before returning, so neither outlives the call.
The spinner is told to stop only after the operation has returned.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Any, Callable, TypeVar

from wifiselect.terminal import Style, TerminalSurface

logger = logging.getLogger(__name__)

T = TypeVar("T")

SPINNER_INTERVAL = 0.05  # seconds between frames
SPINNER_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")

_OVERLAY_STYLE = Style(color="title")


class Spinner:
    """Overlay loop drawing ``"<message> <frame>"`` until stopped.

    Args:
        surface: Shared terminal surface.
        message: Text shown before the spinner frame.
        interval: Seconds between frames.
    """

    def __init__(
        self,
        surface: TerminalSurface,
        message: str,
        interval: float = SPINNER_INTERVAL,
    ) -> None:
        self._surface = surface
        self._message = message
        self._interval = interval
        self._stop = threading.Event()
        self._frames = itertools.cycle(SPINNER_FRAMES)
        self._thread: threading.Thread | None = None
        self.frames_drawn = 0

    def draw_frame(self) -> None:
        """Draw one overlay frame under the surface lock."""
        frame = next(self._frames)
        with self._surface.lock:
            _, width = self._surface.size()
            self._surface.erase()
            self._surface.addstr(1, 1, f"{self._message} {frame}", _OVERLAY_STYLE)
            self._surface.hline(2, 1, width - 2, _OVERLAY_STYLE)
            self._surface.refresh()
        self.frames_drawn += 1

    def start(self) -> None:
        self._thread = threading.Thread(target=self._loop, name="spinner", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Signal the loop and wait until it has exited."""
        self._stop.set()
        if self._thread:
            self._thread.join()
            self._thread = None

    def _loop(self) -> None:
        # At least one frame is drawn even if the operation is instant
        while True:
            self.draw_frame()
            if self._stop.wait(self._interval):
                break
        logger.debug("background: overlay stopped after %d frame(s)", self.frames_drawn)


def run_in_background(
    surface: TerminalSurface,
    message: str,
    operation: Callable[[], T],
    *,
    interval: float = SPINNER_INTERVAL,
) -> T:
    """Run *operation* on a worker thread with a spinner showing *message*.

    Returns the operation's result.  If it raised, the exception is
    re-raised here once both threads have been joined.  The overlay is
    left on screen; the caller redraws afterwards.
    """
    outcome: dict[str, Any] = {}

    def _work() -> None:
        try:
            outcome["result"] = operation()
        except BaseException as exc:  # re-raised in the calling thread
            outcome["error"] = exc

    spinner = Spinner(surface, message, interval)
    worker = threading.Thread(target=_work, name="background-op", daemon=True)

    logger.debug("background: %s", message)
    spinner.start()
    worker.start()
    try:
        worker.join()
        logger.debug("background: operation finished")
    finally:
        spinner.stop()
        # No-op unless the join above was interrupted
        worker.join()

    if "error" in outcome:
        raise outcome["error"]
    return outcome["result"]
