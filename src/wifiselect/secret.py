"""Masked password entry.

The passphrase is accumulated in a :class:`SecretBuffer`, a ``bytearray``
that is overwritten with zeros when it is cleared or when its ``with``
block ends.  Python may still hold copies elsewhere (the ``str`` handed
to the nmcli argument list, for one), so this is best effort only.
"""

from __future__ import annotations

import curses
import logging

from wifiselect.terminal import TerminalSurface

logger = logging.getLogger(__name__)

PROMPT_TITLE = "Enter password:"
MASK = "o"

KEY_ENTER_CODES = (10, 13, curses.KEY_ENTER)
KEY_ESCAPE = 27
KEY_BACKSPACE_CODES = (curses.KEY_BACKSPACE, 127, 8)
ERR = -1


class SecretBuffer:
    """A mutable, scrubbable byte buffer for one credential."""

    def __init__(self) -> None:
        self._data = bytearray()

    def __len__(self) -> int:
        return len(self._data)

    def __bool__(self) -> bool:
        return bool(self._data)

    def __repr__(self) -> str:
        return f"SecretBuffer(<{len(self._data)} bytes>)"

    def __enter__(self) -> "SecretBuffer":
        return self

    def __exit__(self, *exc: object) -> None:
        self.clear()

    def append(self, code: int) -> None:
        self._data.append(code)

    def pop(self) -> None:
        if self._data:
            self._data[-1] = 0
            del self._data[-1]

    def clear(self) -> None:
        """Overwrite every byte before dropping them."""
        for i in range(len(self._data)):
            self._data[i] = 0
        self._data.clear()

    def reveal(self) -> str:
        """Return the contents as text (ASCII only, see :func:`is_printable`)."""
        return self._data.decode("ascii")


def is_printable(code: int) -> bool:
    """True for the non-control ASCII codes accepted into a passphrase."""
    return 32 <= code <= 126


def capture_secret(surface: TerminalSurface, title: str = PROMPT_TITLE) -> SecretBuffer:
    """Read a masked passphrase from a modal prompt.

    Enter returns what was typed; Escape (or end of input) scrubs the
    buffer and returns it empty.  The caller owns the returned buffer and
    should use it as a context manager so it is scrubbed afterwards.
    """
    secret = SecretBuffer()
    try:
        with surface.prompt(title) as prompt:
            while True:
                code = prompt.getch()
                if code in KEY_ENTER_CODES:
                    break
                if code in (KEY_ESCAPE, ERR):
                    secret.clear()
                    break
                if code in KEY_BACKSPACE_CODES:
                    if secret:
                        secret.pop()
                        prompt.show_masks(len(secret), MASK)
                elif is_printable(code):
                    secret.append(code)
                    prompt.show_masks(len(secret), MASK)
    except BaseException:
        secret.clear()
        raise
    logger.debug("secret: prompt closed, empty=%s", not secret)
    return secret
