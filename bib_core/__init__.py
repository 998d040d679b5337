"""Bibliography lookup and dispatch tools."""

__version__ = "0.1.0"
