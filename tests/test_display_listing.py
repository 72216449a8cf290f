"""Tests for wifiselect.display.listing: the scrollable curses list layout."""

from __future__ import annotations

import pytest

from conftest import FakeSurface
from wifiselect.display.listing import (
    LEGEND,
    TITLE,
    Rule,
    Text,
    column_widths,
    draw,
    fit_name,
    format_row,
    layout_networks,
    render_networks,
    row_style,
    visible_window,
)
from wifiselect.wifi_common import Network


def _networks(n, **kwargs):
    return [Network(ssid=f"net{i}", bssid=f"b{i}", signal=100 - i, **kwargs) for i in range(n)]


def _rows(ops):
    """Entry rows only (y >= 3, excluding the footer)."""
    return [op for op in ops if isinstance(op, Text) and op.text not in (TITLE, LEGEND)]


# ---------------------------------------------------------------------------
# fit_name
# ---------------------------------------------------------------------------

class TestFitName:
    def test_long_name_truncated_with_ellipsis(self):
        result = fit_name("VeryLongNetworkName", 10)
        assert result == "VeryLon..."
        assert len(result) == 10

    def test_exact_width_unchanged(self):
        assert fit_name("TenCharsOK", 10) == "TenCharsOK"

    def test_short_name_unchanged(self):
        assert fit_name("Home", 10) == "Home"

    def test_empty_name_placeholder(self):
        assert fit_name("", 10) == "---"


# ---------------------------------------------------------------------------
# visible_window
# ---------------------------------------------------------------------------

class TestVisibleWindow:
    @pytest.mark.parametrize("count, highlight, height, expected", [
        (3, 0, 24, (0, 3)),       # everything fits
        (20, 0, 10, (0, 6)),      # 6 visible rows
        (20, 5, 10, (0, 6)),      # last visible row, no scroll yet
        (20, 6, 10, (1, 7)),      # scrolls by one
        (20, 19, 10, (14, 20)),   # bottom of the list
        (20, 3, 4, (4, 4)),       # no room for rows at all
        (5, 0, 2, (1, 1)),        # tiny terminal, nothing shown
    ])
    def test_window_bounds(self, count, highlight, height, expected):
        assert visible_window(count, highlight, height) == expected

    @pytest.mark.parametrize("highlight", range(30))
    def test_highlight_always_visible(self, highlight):
        start, end = visible_window(30, highlight, 12)
        assert start <= highlight < end


# ---------------------------------------------------------------------------
# column widths and row formatting
# ---------------------------------------------------------------------------

class TestColumns:
    def test_security_width_minimum_three(self):
        assert column_widths([Network(security="")], 80)[1] == 3

    def test_security_width_from_longest(self):
        nets = [Network(security="WPA2"), Network(security="WPA1 WPA2 802.1X")]
        assert column_widths(nets, 80)[1] == len("WPA1 WPA2 802.1X")

    def test_name_width_fills_remaining_columns(self):
        assert column_widths([Network(security="WPA2")], 80)[0] == 80 - 4 - 6

    def test_name_width_floored_on_narrow_terminal(self):
        assert column_widths([Network(security="WPA2")], 8)[0] == 6


class TestFormatRow:
    def test_in_use_marker(self):
        row = format_row(Network(in_use=True, ssid="Home", security="WPA2"), 10, 4)
        assert row.startswith("> Home")

    def test_not_in_use_marker(self):
        assert format_row(Network(ssid="Home"), 10, 4).startswith("  Home")

    def test_fixed_width_columns(self):
        row = format_row(Network(ssid="Home", security="WPA2"), 10, 6)
        assert row == "  Home      WPA2    "

    def test_placeholders_for_empty_fields(self):
        row = format_row(Network(), 10, 3)
        assert row == "  ---       ---  "

    def test_truncated_name_fills_column(self):
        row = format_row(Network(ssid="VeryLongNetworkName", security="WPA2"), 10, 4)
        assert row[2:12] == "VeryLon..."


class TestRowStyle:
    @pytest.mark.parametrize("signal, color", [(90, "strong"), (66, "strong"), (50, "medium"), (10, "weak")])
    def test_signal_color(self, signal, color):
        assert row_style(Network(signal=signal), False).color == color

    def test_in_use_bold(self):
        assert row_style(Network(in_use=True), False).bold is True

    def test_highlight_reverse(self):
        style = row_style(Network(), True)
        assert style.reverse is True
        assert style.bold is False


# ---------------------------------------------------------------------------
# layout_networks
# ---------------------------------------------------------------------------

class TestLayoutNetworks:
    def test_empty_list_draws_nothing(self):
        assert layout_networks([], 0, 24, 80) == []

    def test_header_and_footer(self):
        ops = layout_networks(_networks(2), 0, 24, 80)
        assert Text(1, 3, TITLE, ops[0].style) in ops
        assert any(isinstance(op, Rule) and op.y == 2 for op in ops)
        assert any(isinstance(op, Rule) and op.y == 23 for op in ops)
        assert any(isinstance(op, Text) and op.y == 23 and op.text == LEGEND for op in ops)

    def test_rows_start_at_three(self):
        rows = _rows(layout_networks(_networks(3), 0, 24, 80))
        assert [r.y for r in rows] == [3, 4, 5]
        assert all(r.x == 1 for r in rows)

    def test_only_visible_rows_drawn(self):
        rows = _rows(layout_networks(_networks(20), 0, 10, 80))
        assert len(rows) == 6

    def test_scrolled_highlight_on_last_row(self):
        rows = _rows(layout_networks(_networks(20), 15, 10, 80))
        assert "net15" in rows[-1].text
        assert rows[-1].y == 8
        assert rows[-1].style.reverse is True
        assert sum(r.style.reverse for r in rows) == 1

    def test_rows_fit_window_width(self):
        nets = [Network(ssid="x" * 200, security="WPA2", signal=50)]
        row = _rows(layout_networks(nets, 0, 24, 80))[0]
        assert len(row.text) + row.x <= 80


# ---------------------------------------------------------------------------
# draw / render_networks
# ---------------------------------------------------------------------------

class TestDraw:
    def test_empty_ops_still_clear_and_refresh(self):
        surface = FakeSurface()
        draw(surface, [])
        assert surface.calls == [("erase",), ("refresh",)]

    def test_draws_under_lock(self):
        surface = FakeSurface()
        render_networks(surface, _networks(3), 0)
        assert surface.unlocked_draws == 0
        assert not surface.lock.locked()

    def test_render_uses_surface_size(self):
        surface = FakeSurface(rows=10, cols=60)
        render_networks(surface, _networks(20), 0)
        rows = [c for c in surface.calls if c[0] == "addstr" and c[1] >= 3 and c[1] < 9]
        assert len(rows) == 6
        assert surface.calls[-1] == ("refresh",)
