"""WiFi scanning backend (nmcli)."""

from wifiselect.scanning.nmcli import scan_wifi_nmcli  # noqa: F401
