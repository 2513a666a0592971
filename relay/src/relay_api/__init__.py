"""Real-time message relay with offline queueing."""

__version__ = "0.1.0"
