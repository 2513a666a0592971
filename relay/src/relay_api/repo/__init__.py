from .messages import MessageRepository

__all__ = ["MessageRepository"]
