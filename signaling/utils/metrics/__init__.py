"""
Prometheus metrics definitions.

All metrics are re-exported here so callers can import them directly:

    from signaling.utils.metrics import ws_connections_active
"""

from signaling.utils.metrics.websocket import (
    ws_connections_active,
    ws_connections_total,
    ws_message_processing_duration_seconds,
    ws_messages_dropped_total,
    ws_messages_received_total,
    ws_messages_sent_total,
    ws_send_failures_total,
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
