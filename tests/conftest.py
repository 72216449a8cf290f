"""Shared fakes: a scripted nmcli runner and an in-memory terminal surface."""

from __future__ import annotations

import subprocess
import threading
from contextlib import contextmanager

import pytest

from wifiselect.terminal import PLAIN

ERR = -1

SAMPLE_LIST_OUTPUT = "\n".join([
    "IN-USE:",
    "SSID:CoffeeShop",
    r"BSSID:AA\:BB\:CC\:DD\:EE\:02",
    "SECURITY:",
    "SIGNAL:42",
    "IN-USE:*",
    "SSID:HomeNetwork",
    r"BSSID:AA\:BB\:CC\:DD\:EE\:01",
    "SECURITY:WPA2",
    "SIGNAL:85",
    "IN-USE:",
    "SSID:",
    r"BSSID:AA\:BB\:CC\:DD\:EE\:04",
    "SECURITY:WPA2",
    "SIGNAL:30",
    "IN-USE:",
    "SSID:Office 5G",
    r"BSSID:AA\:BB\:CC\:DD\:EE\:05",
    "SECURITY:WPA3",
    "SIGNAL:65",
]) + "\n"


# ---------------------------------------------------------------------------
# nmcli runner
# ---------------------------------------------------------------------------

class _FakePopen:
    def __init__(self, output: str, returncode: int = 0):
        self.stdout = output.splitlines(keepends=True)
        self.returncode = returncode

    def wait(self):
        return self.returncode


class FakeRunner:
    """A CommandRunner answering nmcli requests from canned data.

    ``list_outputs`` are handed out one per list request; the last one
    repeats.  ``cached`` holds SSIDs with a saved profile.
    """

    def __init__(self, list_outputs=(SAMPLE_LIST_OUTPUT,), cached=(), spawn_error=None):
        self.list_outputs = list(list_outputs)
        self.cached = set(cached)
        self.spawn_error = spawn_error
        self.run_calls: list[list[str]] = []
        self.popen_calls: list[list[str]] = []

    def run(self, cmd, **kwargs):
        self.run_calls.append(cmd)
        if self.spawn_error:
            raise self.spawn_error
        returncode = 0
        if cmd[-2:-1] == ["show"] and cmd[-1] not in self.cached:
            returncode = 10
        return subprocess.CompletedProcess(args=cmd, returncode=returncode, stdout="", stderr="")

    def popen(self, cmd, **kwargs):
        self.popen_calls.append(cmd)
        if self.spawn_error:
            raise self.spawn_error
        output = self.list_outputs.pop(0) if len(self.list_outputs) > 1 else self.list_outputs[0]
        return _FakePopen(output)

    def commands(self, *verb):
        """Return run() calls whose arguments contain *verb* in order."""
        n = len(verb)
        return [c for c in self.run_calls if any(c[i:i + n] == list(verb) for i in range(len(c)))]


# ---------------------------------------------------------------------------
# Terminal surface
# ---------------------------------------------------------------------------

class FakePrompt:
    def __init__(self, keys, capacity=33):
        self._keys = keys
        self.capacity = capacity
        self.cells: list[str] = []

    def getch(self):
        code = self._keys.pop(0) if self._keys else ERR
        if isinstance(code, BaseException):
            raise code
        return code

    def show_masks(self, count, mask="o"):
        self.cells = [mask] * min(count, self.capacity)


class FakeSurface:
    """Records draw calls; serves key codes from ``keys`` then ERR."""

    def __init__(self, keys=(), rows=24, cols=80, prompt_keys=()):
        self.lock = threading.Lock()
        self.keys = list(keys)
        self.prompt_keys = list(prompt_keys)
        self.rows = rows
        self.cols = cols
        self.calls: list[tuple] = []
        self.unlocked_draws = 0
        self.prompts: list[FakePrompt] = []
        self.prompts_closed = 0

    def _record(self, *call):
        if not self.lock.locked():
            self.unlocked_draws += 1
        self.calls.append(call)

    def size(self):
        return (self.rows, self.cols)

    def erase(self):
        self._record("erase")

    def refresh(self):
        self._record("refresh")

    def addstr(self, y, x, text, style=PLAIN):
        self._record("addstr", y, x, text, style)

    def hline(self, y, x, width, style=PLAIN):
        self._record("hline", y, x, width, style)

    def clear(self):
        with self.lock:
            self.erase()
            self.refresh()

    def getch(self):
        return self.keys.pop(0) if self.keys else ERR

    def getch_nowait(self):
        return self.keys.pop(0) if self.keys else ERR

    @contextmanager
    def prompt(self, title, width=50):
        prompt = FakePrompt(self.prompt_keys)
        self.prompts.append(prompt)
        try:
            yield prompt
        finally:
            self.prompts_closed += 1

    def texts(self):
        return [c[3] for c in self.calls if c[0] == "addstr"]


def keys(text: str) -> list[int]:
    return [ord(ch) for ch in text]


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def surface():
    return FakeSurface()
