"""Durable message storage."""

from .base import MessageStore
from .sql import SqlMessageStore

__all__ = ["MessageStore", "SqlMessageStore"]
