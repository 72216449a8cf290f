"""Interactive network selection loop.

The :class:`Controller` owns the scanned network list and the highlighted
row.  Keys are read one logical key at a time (escape sequences are
consumed whole), decoded into an :class:`Action`, and applied.  Anything
that shells out to nmcli runs through
:func:`~wifiselect.background.run_in_background` so the spinner keeps
moving while it waits.
"""

from __future__ import annotations

import curses
import enum
import logging

from wifiselect.background import run_in_background
from wifiselect.credentials import (
    connect_saved_nmcli,
    connect_wifi_nmcli,
    disconnect_nmcli,
    forget_nmcli,
    is_password_cached,
)
from wifiselect.display.listing import render_networks
from wifiselect.scanning.nmcli import scan_wifi_nmcli
from wifiselect.secret import capture_secret
from wifiselect.terminal import ERR, TerminalSurface
from wifiselect.wifi_common import CommandRunner, Network, ScanStatus

logger = logging.getLogger(__name__)

KEY_ESCAPE = 27
UNKNOWN_SEQUENCE = -2   # an escape sequence we do not handle

SCAN_MESSAGE = "Scanning for networks..."


class Action(enum.Enum):
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    RESCAN = "rescan"
    CONNECT = "connect"
    DISCONNECT = "disconnect"
    FORGET = "forget"
    CONFIRM = "confirm"
    CANCEL = "cancel"
    UNKNOWN = "unknown"


_KEY_ACTIONS: dict[int, Action] = {
    10: Action.CONFIRM,
    13: Action.CONFIRM,
    curses.KEY_ENTER: Action.CONFIRM,
    ord("q"): Action.CANCEL,
    KEY_ESCAPE: Action.CANCEL,
    ERR: Action.CANCEL,
    curses.KEY_UP: Action.MOVE_UP,
    curses.KEY_DOWN: Action.MOVE_DOWN,
    ord("r"): Action.RESCAN,
    ord("c"): Action.CONNECT,
    ord("d"): Action.DISCONNECT,
    ord("f"): Action.FORGET,
}

# Final byte of CSI / SS3 cursor sequences (ESC [ A, ESC O A, ...)
_SEQUENCE_KEYS: dict[int, int] = {
    ord("A"): curses.KEY_UP,
    ord("B"): curses.KEY_DOWN,
    ord("C"): curses.KEY_RIGHT,
    ord("D"): curses.KEY_LEFT,
    ord("H"): curses.KEY_HOME,
    ord("F"): curses.KEY_END,
}


def decode_key(code: int) -> Action:
    """Map one logical key code to its Action."""
    return _KEY_ACTIONS.get(code, Action.UNKNOWN)


def read_key(surface: TerminalSurface) -> int:
    """Read one user key, consuming a whole escape sequence if one starts.

    Returns ``ERR`` at end of input, ``KEY_ESCAPE`` for a lone Escape,
    the following byte for an Alt chord, a ``curses.KEY_*`` code for a
    known cursor sequence and ``UNKNOWN_SEQUENCE`` for any other one.
    """
    code = surface.getch()
    if code != KEY_ESCAPE:
        return code

    follow = surface.getch_nowait()
    if follow == ERR:
        return KEY_ESCAPE
    if follow not in (ord("["), ord("O")):
        return follow

    # Parameter bytes run until a final byte in 0x40-0x7e
    final = surface.getch_nowait()
    while final != ERR and not 0x40 <= final <= 0x7E:
        final = surface.getch_nowait()
    if final == ERR:
        return KEY_ESCAPE
    return _SEQUENCE_KEYS.get(final, UNKNOWN_SEQUENCE)


class Controller:
    """Owns the network list and the highlighted row.

    Args:
        surface: The terminal surface to draw on.
        interface: Optional wireless interface for scanning and connecting.
        runner: Optional CommandRunner for nmcli calls (testing seam).
    """

    def __init__(
        self,
        surface: TerminalSurface,
        *,
        interface: str | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self.surface = surface
        self.networks: list[Network] = []
        self.highlight = 0
        self._interface = interface
        self._runner = runner

    # -- state --

    def _highlighted(self) -> Network | None:
        if 0 <= self.highlight < len(self.networks):
            return self.networks[self.highlight]
        return None

    def initialize(self) -> ScanStatus:
        """Clear the screen and run the first scan."""
        self.surface.clear()
        return self.scan()

    def scan(self) -> ScanStatus:
        """Rescan in the background, replacing the list and resetting the highlight."""
        self.surface.clear()
        networks, status = run_in_background(
            self.surface,
            SCAN_MESSAGE,
            lambda: scan_wifi_nmcli(self._interface, runner=self._runner),
        )
        self.networks = networks
        self.highlight = 0
        logger.debug("controller: scan %s, %d network(s)", status.value, len(networks))
        return status

    def render(self) -> None:
        render_networks(self.surface, self.networks, self.highlight)

    # -- input --

    def read_key(self) -> int:
        return read_key(self.surface)

    def handle_key(self, code: int) -> Action:
        """Decode *code*, apply it to the list state and return the Action."""
        action = decode_key(code)

        if action is Action.MOVE_UP:
            if self.highlight > 0:
                self.highlight -= 1
        elif action is Action.MOVE_DOWN:
            if self.highlight < len(self.networks) - 1:
                self.highlight += 1
        elif action is Action.RESCAN:
            self.scan()
        elif action is Action.CONNECT:
            if self.connect(self.highlight):
                self.scan()
        elif action is Action.DISCONNECT:
            net = self._highlighted()
            if net is not None and net.in_use:
                self.disconnect(net.ssid)
        elif action is Action.FORGET:
            net = self._highlighted()
            if net is not None:
                self.forget(net.ssid)

        return action

    def select(self) -> int | None:
        """Run the key loop until the user confirms a row or quits.

        Returns the highlighted index on Enter, ``None`` on quit, Escape,
        end of input, or straight away if there is nothing to select.
        """
        if not self.networks:
            return None

        while True:
            action = self.handle_key(self.read_key())
            if action is Action.CONFIRM and self.networks:
                return self.highlight
            if action is Action.CANCEL:
                return None
            self.render()

    # -- nmcli actions --

    def connect(self, index: int) -> bool:
        """Connect to the network at *index*.

        Uses the saved profile when NetworkManager has one, otherwise asks
        for a passphrase first.  Returns False without running anything
        if the entry is missing, has no BSSID or is already in use.
        """
        if not 0 <= index < len(self.networks):
            return False
        net = self.networks[index]
        if not net.bssid or net.in_use:
            return False

        message = f"Connecting to {net.ssid}..."
        if is_password_cached(net.ssid, runner=self._runner):
            self.surface.clear()
            run_in_background(
                self.surface,
                message,
                lambda: connect_saved_nmcli(net.ssid, runner=self._runner),
            )
            return True

        self.surface.clear()
        with capture_secret(self.surface) as secret:
            self.surface.clear()
            run_in_background(
                self.surface,
                message,
                lambda: connect_wifi_nmcli(
                    net.bssid,
                    secret.reveal(),
                    self._interface,
                    runner=self._runner,
                ),
            )
        return True

    def disconnect(self, ssid: str) -> bool:
        """Bring down the connection *ssid*, then rescan."""
        if not ssid:
            return False
        self.surface.clear()
        run_in_background(
            self.surface,
            f"Disconnecting from {ssid}...",
            lambda: disconnect_nmcli(ssid, runner=self._runner),
        )
        self.scan()
        return True

    def forget(self, ssid: str) -> bool:
        """Delete the saved profile for *ssid*, then rescan.

        Does nothing unless NetworkManager has a saved password for it.
        """
        if not ssid or not is_password_cached(ssid, runner=self._runner):
            return False
        self.surface.clear()
        run_in_background(
            self.surface,
            f"Forgetting password for {ssid}...",
            lambda: forget_nmcli(ssid, runner=self._runner),
        )
        self.scan()
        return True

    # -- session --

    def run(self) -> None:
        """Scan, then select and connect until the user quits."""
        self.initialize()
        self.render()
        while True:
            index = self.select()
            if index is None:
                break
            self.connect(index)
            self.scan()
            self.render()
