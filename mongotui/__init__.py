"""mongotui - a terminal UI for browsing MongoDB."""

__version__ = "0.1.0"
