"""SyndrDB wire protocol codec."""

__version__ = "0.1.0"
