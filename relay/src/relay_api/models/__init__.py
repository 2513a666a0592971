"""Relay domain models."""

from .message import Message, MessageDecodeError, create_message, decode_message, encode_message

__all__ = ["Message", "MessageDecodeError", "create_message", "decode_message", "encode_message"]
