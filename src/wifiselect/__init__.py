"""wifiselect: pick and manage WiFi networks from the terminal via nmcli."""

__version__ = "0.1.0"
