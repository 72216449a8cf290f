"""Shared data structures and helpers for wifiselect."""

from __future__ import annotations

import enum
import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Any, IO, Protocol

logger = logging.getLogger(__name__)

# Signal tiers (nmcli percentage, 0-100)
STRONG_SIGNAL = 66
MEDIUM_SIGNAL = 33


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Network:
    """A WiFi network as reported by ``nmcli dev wifi list``."""

    in_use: bool = False
    ssid: str = ""          # empty for hidden networks
    bssid: str = ""         # empty means not connectable
    security: str = ""      # empty for open networks
    signal: int = 0         # percent, 0-100


class ScanStatus(enum.Enum):
    """Outcome of a list request.

    ``EMPTY`` means nmcli ran and reported nothing; ``FAILED`` means it
    could not be started at all.
    """

    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Command runner protocol (subprocess injection seam)
# ---------------------------------------------------------------------------

class CommandRunner(Protocol):
    """Protocol for running external commands.

    Provides an injection seam so callers can substitute a fake runner in
    tests instead of patching ``subprocess`` globally.
    """

    def run(
        self,
        cmd: list[str],
        *,
        capture_output: bool = True,
        text: bool = True,
        timeout: int | None = None,
        env: dict[str, str] | None = None,
    ) -> subprocess.CompletedProcess[Any]:
        """Run *cmd* and return a CompletedProcess."""
        ...  # pragma: no cover

    def popen(
        self,
        cmd: list[str],
        *,
        stdout: int | None = None,
        stderr: int | None | IO[Any] = None,
        text: bool = True,
        errors: str | None = None,
        env: dict[str, str] | None = None,
    ) -> subprocess.Popen[Any]:
        """Launch *cmd* asynchronously and return a Popen handle."""
        ...  # pragma: no cover


class SubprocessRunner:
    """Default CommandRunner that delegates to the real ``subprocess`` module."""

    def run(
        self,
        cmd: list[str],
        *,
        capture_output: bool = True,
        text: bool = True,
        timeout: int | None = None,
        env: dict[str, str] | None = None,
    ) -> subprocess.CompletedProcess[Any]:
        """Run *cmd* via ``subprocess.run``."""
        return subprocess.run(
            cmd,
            capture_output=capture_output,
            text=text,
            timeout=timeout,
            env=env,
        )

    def popen(
        self,
        cmd: list[str],
        *,
        stdout: int | None = None,
        stderr: int | None | IO[Any] = None,
        text: bool = True,
        errors: str | None = None,
        env: dict[str, str] | None = None,
    ) -> subprocess.Popen[Any]:
        """Launch *cmd* via ``subprocess.Popen``."""
        return subprocess.Popen(
            cmd,
            stdout=stdout,
            stderr=stderr,
            text=text,
            errors=errors,
            env=env,
        )


def _minimal_env() -> dict[str, str]:
    """Build a minimal environment for subprocess calls.

    Only passes PATH, LC_ALL, and HOME so nmcli output stays in the C
    locale and the full user environment is not leaked to children.
    """
    return {
        "PATH": os.environ.get("PATH", "/usr/bin:/bin"),
        "LC_ALL": "C",
        "HOME": os.environ.get("HOME", ""),
    }


# ---------------------------------------------------------------------------
# Signal helpers
# ---------------------------------------------------------------------------

def signal_tier(signal_pct: int) -> str:
    """Return ``"strong"``, ``"medium"`` or ``"weak"`` for a signal percentage."""
    if signal_pct >= STRONG_SIGNAL:
        return "strong"
    if signal_pct >= MEDIUM_SIGNAL:
        return "medium"
    return "weak"


# Tier name -> Rich color name (used outside curses)
TIER_TO_RICH: dict[str, str] = {
    "strong": "green",
    "medium": "yellow",
    "weak": "red",
}
