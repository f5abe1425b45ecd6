"""
Prometheus metrics for the signaling WebSocket endpoint.

This module defines metrics for tracking connections, signaling message
rates, dropped messages and failed sends.
"""

from signaling.utils.metrics._helpers import (
    _get_or_create_counter,
    _get_or_create_gauge,
    _get_or_create_histogram,
)

# WebSocket Connection Metrics
ws_connections_active = _get_or_create_gauge(
    "ws_connections_active", "Number of registered signaling connections"
)

ws_connections_total = _get_or_create_counter(
    "ws_connections_total",
    "Total signaling connections",
    ["status"],  # accepted, rejected_duplicate
)

# Signaling Message Metrics
ws_messages_received_total = _get_or_create_counter(
    "ws_messages_received_total",
    "Total signaling messages received",
    ["type"],
)

ws_messages_sent_total = _get_or_create_counter(
    "ws_messages_sent_total",
    "Total signaling messages sent",
    ["type"],
)

ws_messages_dropped_total = _get_or_create_counter(
    "ws_messages_dropped_total",
    "Total inbound signaling messages dropped",
    ["reason"],  # invalid, unknown_target, unhandled
)

ws_send_failures_total = _get_or_create_counter(
    "ws_send_failures_total", "Total failed sends to a signaling connection"
)

ws_message_processing_duration_seconds = _get_or_create_histogram(
    "ws_message_processing_duration_seconds",
    "Signaling message processing duration in seconds",
    ["type"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)


__all__ = [
    "ws_connections_active",
    "ws_connections_total",
    "ws_messages_received_total",
    "ws_messages_sent_total",
    "ws_messages_dropped_total",
    "ws_send_failures_total",
    "ws_message_processing_duration_seconds",
]
