"""Rich table builder for the non-interactive ``--list`` output."""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table

from wifiselect.wifi_common import TIER_TO_RICH, Network, signal_tier


def _bar_string(signal_pct: int) -> str:
    """Build a 4-char signal-bar string like '▂▄▆ '."""
    chars = ["▂", "▄", "▆", "█"]
    bars = max(0, min(4, (signal_pct + 24) // 25))
    return "".join(chars[i] if i < bars else " " for i in range(4))


def build_table(networks: list[Network], caption_override: str | None = None) -> Table:
    """Build a Rich Table displaying the scanned networks.

    Args:
        networks: Networks already sorted by signal.
        caption_override: Optional caption to use instead of the count.
    """
    caption = caption_override if caption_override is not None else f"{len(networks)} networks found"
    table = Table(
        title="Available Networks",
        title_style="bold magenta",
        caption=caption,
        caption_style="grey50",
        expand=True,
        show_lines=False,
        padding=(0, 1),
    )
    table.add_column("#", style="grey50", width=3, justify="right")
    table.add_column("Use", justify="center", width=3)
    table.add_column("SSID", style="white", min_width=15, max_width=32)
    table.add_column("BSSID", style="grey50", width=17)
    table.add_column("Security", min_width=8)
    table.add_column("Sig", justify="right", width=4)
    table.add_column("", width=5)

    for i, net in enumerate(networks, 1):
        color = TIER_TO_RICH[signal_tier(net.signal)]
        table.add_row(
            str(i),
            "[green]●[/green]" if net.in_use else "",
            escape(net.ssid) if net.ssid else "[dim]<hidden>[/dim]",
            escape(net.bssid),
            escape(net.security) if net.security else "[dim]open[/dim]",
            f"[{color}]{net.signal}[/{color}]",
            f"[{color}]{_bar_string(net.signal)}[/{color}]",
            style="bold" if net.in_use else "",
        )

    return table
