"""Command-line entry point for wifiselect.

Usage:
    wifiselect                       # interactive network picker
    wifiselect -i wlan1              # scan/connect on a specific interface
    wifiselect --list                # scan once, print a table, exit
    wifiselect --debug               # log to /tmp/wifiselect_debug.log
"""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console

from wifiselect import __version__
from wifiselect.controller import Controller
from wifiselect.display.tables import build_table
from wifiselect.scanning.nmcli import scan_wifi_nmcli
from wifiselect.terminal import open_surface
from wifiselect.wifi_common import ScanStatus

DEBUG_LOG = "/tmp/wifiselect_debug.log"
LOG_FORMAT = "%(name)s: %(levelname)s: %(message)s"

_LOGGER = logging.getLogger("wifiselect")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="wifiselect",
        description="Pick, connect to, disconnect from and forget WiFi networks via nmcli.",
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-i", "--interface",
        help="wireless interface name (e.g. wlan0)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="scan once, print the networks as a table and exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="write debug logging to --log-file",
    )
    parser.add_argument(
        "--log-file",
        metavar="FILE",
        default=DEBUG_LOG,
        help=f"debug log path (default: {DEBUG_LOG})",
    )
    return parser.parse_args(argv)


def _setup_logging(args: argparse.Namespace) -> None:
    """Send debug logging to a file; the terminal belongs to curses."""
    if not args.debug:
        logging.getLogger().addHandler(logging.NullHandler())
        return
    try:
        logging.basicConfig(
            level=logging.DEBUG,
            format=LOG_FORMAT,
            filename=args.log_file,
            filemode="a",
            encoding="utf-8",
        )
    except OSError as exc:
        print(f"WARNING: cannot open log file {args.log_file}: {exc}", file=sys.stderr)
        return
    _LOGGER.debug("CLI: interface=%s list=%s", args.interface, args.list)


def _print_list(console: Console, interface: str | None) -> int:
    """Scan once and print the results; return the process exit code."""
    networks, status = scan_wifi_nmcli(interface)
    if status is ScanStatus.FAILED:
        console.print("[bold magenta]wifiselect[/bold magenta]: [yellow]nmcli not found or not runnable[/yellow]")
        return 1
    if status is ScanStatus.EMPTY:
        console.print("[bold magenta]wifiselect[/bold magenta]: no networks found.")
        return 0
    console.print(build_table(networks))
    return 0


def main(argv: list[str] | None = None) -> None:
    """Run the interactive picker (or ``--list``).

    Handles KeyboardInterrupt so the terminal is left clean on Ctrl+C.
    """
    args = _parse_args(argv)
    _setup_logging(args)
    console = Console()

    if args.list:
        sys.exit(_print_list(console, args.interface))

    try:
        with open_surface() as surface:
            Controller(surface, interface=args.interface).run()
    except KeyboardInterrupt:
        _LOGGER.debug("interrupted")
    sys.exit(0)


if __name__ == "__main__":
    main()
