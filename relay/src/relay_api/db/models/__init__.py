"""Database model package."""

from .message import MessageRecord

__all__ = ["MessageRecord"]
