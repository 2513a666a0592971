"""Client session handling."""

from .handler import RelaySession, SessionState

__all__ = ["RelaySession", "SessionState"]
