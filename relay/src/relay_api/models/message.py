"""Chat message value type and its JSON wire codec."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class MessageDecodeError(ValueError):
    """Raised when an inbound frame cannot be turned into a Message."""


class Message(BaseModel):
    """A single text message from one user to another."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    sender: str = Field(min_length=1)
    receiver: str = Field(min_length=1)
    content: str
    timestamp: datetime = Field(alias="time")

    @field_validator("timestamp")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_message(
    sender: str,
    receiver: str,
    content: str,
    *,
    timestamp: Optional[datetime] = None,
) -> Message:
    return Message(sender=sender, receiver=receiver, content=content, time=timestamp or _utcnow())


def decode_message(frame: str | bytes, *, received_at: Optional[datetime] = None) -> Message:
    """Parse a wire frame; a missing ``time`` is stamped with ``received_at``."""

    if isinstance(frame, bytes):
        try:
            frame = frame.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MessageDecodeError(f"frame is not valid UTF-8: {exc}") from exc
    try:
        payload: Any = json.loads(frame)
    except json.JSONDecodeError as exc:
        raise MessageDecodeError(f"frame is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise MessageDecodeError("frame must be a JSON object")
    if payload.get("time") is None:
        payload["time"] = received_at or _utcnow()
    try:
        return Message.model_validate(payload)
    except ValidationError as exc:
        raise MessageDecodeError(str(exc)) from exc


def encode_message(message: Message) -> str:
    data = message.model_dump(by_alias=True, mode="json")
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


__all__ = ["Message", "MessageDecodeError", "create_message", "decode_message", "encode_message"]
