"""WiFi network listing via nmcli (NetworkManager CLI).

Requests the multiline terse report::

    nmcli -f IN-USE,SSID,BSSID,SECURITY,SIGNAL --mode multiline --terse dev wifi list

which prints one ``KEY:value`` line per field, five lines per access
point, and consumes it line by line as nmcli streams it.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Iterable

from wifiselect.wifi_common import (
    CommandRunner,
    Network,
    ScanStatus,
    SubprocessRunner,
    _minimal_env,
)

logger = logging.getLogger(__name__)

_DEFAULT_RUNNER = SubprocessRunner()

LIST_FIELDS = "IN-USE,SSID,BSSID,SECURITY,SIGNAL"


# ---------------------------------------------------------------------------
# nmcli output parsing
# ---------------------------------------------------------------------------

def _unescape(value: str) -> str:
    """Undo nmcli terse-mode escaping (``\\:`` and ``\\\\``)."""
    return value.replace("\\:", ":").replace("\\\\", "\\")


def _parse_signal(value: str) -> int:
    """Parse a SIGNAL value, clamped to 0-100; garbage becomes 0."""
    try:
        pct = int(value)
    except ValueError:
        return 0
    return max(0, min(100, pct))


def parse_nmcli_multiline(lines: Iterable[str]) -> list[Network]:
    """Parse nmcli multiline terse output into Networks sorted by signal.

    Fields accumulate into the current record, which is emitted when its
    ``SIGNAL`` line arrives.  A record whose SIGNAL line never shows up is
    dropped.  Unknown keys are ignored; missing fields stay empty.
    """
    networks: list[Network] = []
    current = Network()
    pending = False

    for raw in lines:
        key, sep, value = raw.rstrip("\r\n").partition(":")
        if not sep:
            continue
        value = _unescape(value.strip())

        if key == "IN-USE":
            current.in_use = value == "*"
        elif key == "SSID":
            current.ssid = value
        elif key == "BSSID":
            current.bssid = value
        elif key == "SECURITY":
            current.security = value
        elif key == "SIGNAL":
            current.signal = _parse_signal(value)
            networks.append(current)
            current = Network()
            pending = False
            continue
        else:
            continue
        pending = True

    if pending:
        logger.debug("nmcli: dropped trailing record without SIGNAL: %s", current.ssid or "<hidden>")

    # list.sort is stable, so equal signals keep report order
    networks.sort(key=lambda n: n.signal, reverse=True)
    return networks


# ---------------------------------------------------------------------------
# Live listing (requires nmcli on the system)
# ---------------------------------------------------------------------------

def scan_wifi_nmcli(
    interface: str | None = None,
    *,
    runner: CommandRunner | None = None,
) -> tuple[list[Network], ScanStatus]:
    """List nearby WiFi networks using nmcli.

    Returns ``(networks, status)``.  If nmcli cannot be started the list is
    empty and the status is ``ScanStatus.FAILED``; a run that reports no
    access points gives ``ScanStatus.EMPTY``.  A non-zero exit is logged
    but whatever was parsed is still returned.

    Args:
        interface: Optional wireless interface name.
        runner: Optional CommandRunner for subprocess calls (testing seam).
    """
    runner = runner or _DEFAULT_RUNNER
    cmd = [
        "nmcli",
        "-f", LIST_FIELDS,
        "--mode", "multiline",
        "--terse",
        "dev", "wifi", "list",
    ]
    if interface:
        cmd += ["ifname", interface]

    logger.debug("nmcli list: %s", " ".join(cmd))
    try:
        proc = runner.popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            errors="replace",
            env=_minimal_env(),
        )
    except (FileNotFoundError, OSError) as exc:
        logger.debug("nmcli list: failed to start: %s", exc)
        return [], ScanStatus.FAILED

    try:
        networks = parse_nmcli_multiline(proc.stdout)
    except UnicodeDecodeError as exc:
        logger.debug("nmcli list: undecodable output: %s", exc)
        networks = []
    finally:
        returncode = proc.wait()

    if returncode != 0:
        logger.debug("nmcli list: exited with %s", returncode)

    logger.debug("nmcli list: %d network(s)", len(networks))
    if not networks:
        return networks, ScanStatus.EMPTY
    return networks, ScanStatus.OK
