"""Live metrics dashboard for the shareholders' meeting operations console."""

__version__ = "0.1.0"
