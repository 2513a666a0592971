"""Prometheus metrics for the relay.

Metrics are created once at module level to avoid duplicate registration.
Every ``record_*`` helper swallows its own failures: metrics are
fire-and-forget and never change control flow.
"""

from __future__ import annotations

import logging

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, generate_latest

LOGGER = logging.getLogger(__name__)

connection_attempts_total = Counter(
    "relay_connection_attempts_total",
    "Inbound connection attempts by handshake method and outcome.",
    ["method", "outcome"],
)

messages_total = Counter(
    "relay_messages_total",
    "Messages processed by the relay, by delivery outcome.",
    ["outcome"],
)

store_failures_total = Counter(
    "relay_store_failures_total",
    "Durable-store appends that failed or timed out.",
)

active_sessions = Gauge(
    "relay_active_sessions",
    "Users currently bound to a live connection.",
)

pending_messages = Gauge(
    "relay_pending_messages",
    "Messages waiting in offline queues.",
)


def record_connection_attempt(method: str, outcome: str) -> None:
    try:
        connection_attempts_total.labels(method=method, outcome=outcome).inc()
    except Exception:  # noqa: BLE001
        LOGGER.debug("Failed to record connection attempt", exc_info=True)


def record_message(outcome: str) -> None:
    try:
        messages_total.labels(outcome=outcome).inc()
    except Exception:  # noqa: BLE001
        LOGGER.debug("Failed to record message outcome", exc_info=True)


def record_store_failure() -> None:
    try:
        store_failures_total.inc()
    except Exception:  # noqa: BLE001
        LOGGER.debug("Failed to record store failure", exc_info=True)


def update_gauges(*, sessions: int, pending: int) -> None:
    try:
        active_sessions.set(sessions)
        pending_messages.set(pending)
    except Exception:  # noqa: BLE001
        LOGGER.debug("Failed to update gauges", exc_info=True)


def render_latest() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
