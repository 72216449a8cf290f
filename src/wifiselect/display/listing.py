"""Scrollable network list for the curses surface.

:func:`layout_networks` is a pure function from the current list state to
a flat list of draw instructions; :func:`draw` applies them to a
:class:`~wifiselect.terminal.TerminalSurface`.  Keeping the two apart lets
the layout (windowing, truncation, styling) be tested without a terminal.

Screen layout for a window of ``height`` rows::

    row 0            (blank)
    row 1            title
    row 2            ────────────
    rows 3..h-2      visible entries (height - 4 of them)
    row h-1          ──[legend]──
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from wifiselect.terminal import Style, TerminalSurface
from wifiselect.wifi_common import Network, signal_tier

TITLE = "Available Networks"
LEGEND = "[r: Rescan, d: Disconnect, f: Forget, enter: Connect, q: Quit]"
PLACEHOLDER = "---"
ELLIPSIS = "..."
MIN_NAME_WIDTH = 6
RESERVED_ROWS = 4      # blank + title + rule above, footer below
RESERVED_COLS = 6      # marker, border and trailing padding

_TITLE_STYLE = Style(color="title")


@dataclass(frozen=True)
class Text:
    y: int
    x: int
    text: str
    style: Style


@dataclass(frozen=True)
class Rule:
    y: int
    x: int
    width: int
    style: Style


DrawOp = Union[Text, Rule]


# ---------------------------------------------------------------------------
# Layout helpers
# ---------------------------------------------------------------------------

def visible_window(count: int, highlight: int, height: int) -> tuple[int, int]:
    """Return ``(start, end)`` of the entries shown in a *height*-row window.

    Scrolls just enough to keep *highlight* on the last visible row; it is
    never centred.
    """
    rows = max(0, height - RESERVED_ROWS)
    start = max(0, highlight - rows + 1)
    end = min(count, start + rows)
    return start, end


def fit_name(name: str, width: int) -> str:
    """Return *name* (or the placeholder) cut to at most *width* characters."""
    if not name:
        return PLACEHOLDER
    if len(name) > width:
        return name[: width - len(ELLIPSIS)] + ELLIPSIS
    return name


def column_widths(networks: list[Network], width: int) -> tuple[int, int]:
    """Return ``(name_width, security_width)`` for a *width*-column window."""
    security_width = max([len(PLACEHOLDER)] + [len(n.security) for n in networks])
    name_width = max(MIN_NAME_WIDTH, width - security_width - RESERVED_COLS)
    return name_width, security_width


def row_style(network: Network, highlighted: bool) -> Style:
    return Style(
        color=signal_tier(network.signal),
        bold=network.in_use,
        reverse=highlighted,
    )


def format_row(network: Network, name_width: int, security_width: int) -> str:
    marker = "> " if network.in_use else "  "
    name = fit_name(network.ssid, name_width)
    security = network.security or PLACEHOLDER
    return f"{marker}{name:<{name_width}}{security:<{security_width}}  "


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

def layout_networks(
    networks: list[Network],
    highlight: int,
    height: int,
    width: int,
) -> list[DrawOp]:
    """Lay out the header, the visible rows and the footer.

    Returns no instructions at all for an empty list.
    """
    if not networks:
        return []

    name_width, security_width = column_widths(networks, width)
    start, end = visible_window(len(networks), highlight, height)

    ops: list[DrawOp] = [
        Text(1, 3, TITLE, _TITLE_STYLE),
        Rule(2, 1, width - 2, _TITLE_STYLE),
        Rule(height - 1, 1, width - 2, _TITLE_STYLE),
        Text(height - 1, 3, LEGEND, _TITLE_STYLE),
    ]

    for i in range(start, end):
        net = networks[i]
        ops.append(Text(
            i - start + 3,
            1,
            format_row(net, name_width, security_width),
            row_style(net, i == highlight),
        ))

    return ops


def draw(surface: TerminalSurface, ops: list[DrawOp]) -> None:
    """Erase the surface, apply *ops* and refresh, all under the surface lock."""
    with surface.lock:
        surface.erase()
        for op in ops:
            if isinstance(op, Rule):
                surface.hline(op.y, op.x, op.width, op.style)
            else:
                surface.addstr(op.y, op.x, op.text, op.style)
        surface.refresh()


def render_networks(surface: TerminalSurface, networks: list[Network], highlight: int) -> None:
    """Lay out *networks* for the surface's current size and draw them."""
    height, width = surface.size()
    draw(surface, layout_networks(networks, highlight, height, width))
