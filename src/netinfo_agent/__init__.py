"""Network interface statistics agent."""

__version__ = "0.1.0"
