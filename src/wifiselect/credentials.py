"""Saved-credential lookup and nmcli connection requests.

Every request here discards nmcli's own output and reports only whether
the command exited successfully.  A failed request is not fatal: the next
scan shows what actually happened.
"""

from __future__ import annotations

import logging

from wifiselect.wifi_common import (
    CommandRunner,
    SubprocessRunner,
    _minimal_env,
)

logger = logging.getLogger(__name__)

_DEFAULT_RUNNER = SubprocessRunner()

PSK_FIELD = "802-11-wireless-security.psk"


def _redact(cmd: list[str]) -> str:
    """Join *cmd* for logging with any ``password`` argument masked."""
    shown: list[str] = []
    hide_next = False
    for arg in cmd:
        shown.append("***" if hide_next else arg)
        hide_next = arg == "password"
    return " ".join(shown)


def _run_quiet(cmd: list[str], runner: CommandRunner | None) -> bool:
    """Run *cmd*, discard its output, return True on exit status 0."""
    runner = runner or _DEFAULT_RUNNER
    logger.debug("nmcli: %s", _redact(cmd))
    try:
        result = runner.run(cmd, capture_output=True, text=True, env=_minimal_env())
    except (FileNotFoundError, OSError) as exc:
        logger.debug("nmcli: failed to start: %s", exc)
        return False
    if result.returncode != 0:
        logger.debug("nmcli: exited with %s", result.returncode)
    return result.returncode == 0


# ---------------------------------------------------------------------------
# Cached credentials
# ---------------------------------------------------------------------------

def is_password_cached(ssid: str, *, runner: CommandRunner | None = None) -> bool:
    """Return True if NetworkManager has a saved profile with a PSK for *ssid*.

    nmcli exits non-zero when no connection profile by that name exists.
    """
    if not ssid:
        return False
    return _run_quiet(
        ["nmcli", "-t", "-f", PSK_FIELD, "connection", "show", ssid],
        runner,
    )


# ---------------------------------------------------------------------------
# Connection requests
# ---------------------------------------------------------------------------

def connect_saved_nmcli(ssid: str, *, runner: CommandRunner | None = None) -> bool:
    """Bring up the existing connection profile named *ssid*."""
    return _run_quiet(["nmcli", "con", "up", "id", ssid], runner)


def connect_wifi_nmcli(
    bssid: str,
    passphrase: str,
    interface: str | None = None,
    *,
    runner: CommandRunner | None = None,
) -> bool:
    """Create and activate a connection to the access point *bssid*.

    Args:
        bssid: The access point to connect to.
        passphrase: The network passphrase (empty string for open networks).
        interface: Optional wireless interface name.
        runner: Optional CommandRunner for subprocess calls (testing seam).

    Returns:
        True if nmcli reported success, False otherwise.
    """
    cmd = ["nmcli", "dev", "wifi", "connect", bssid]

    if passphrase:
        cmd += ["password", passphrase]

    if interface:
        cmd += ["ifname", interface]

    return _run_quiet(cmd, runner)


def disconnect_nmcli(ssid: str, *, runner: CommandRunner | None = None) -> bool:
    """Bring down the connection profile named *ssid*."""
    return _run_quiet(["nmcli", "con", "down", "id", ssid], runner)


def forget_nmcli(ssid: str, *, runner: CommandRunner | None = None) -> bool:
    """Delete the connection profile (and its saved password) for *ssid*."""
    return _run_quiet(["nmcli", "connection", "delete", ssid], runner)
