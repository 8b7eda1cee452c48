"""junkcar - vehicle inventory search, saved searches and dashboard stats."""

__version__ = "0.1.0"
