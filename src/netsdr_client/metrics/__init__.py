"""Metrics module."""

from .registry import (
    record_control_request,
    record_control_request_latency,
    record_decode_error,
    record_frame_received,
    record_frame_sent,
    record_samples_written,
    record_session_state,
    record_sink_queue_drop,
    record_unsolicited_message,
    start_metrics_server,
)

__all__ = [
    "record_control_request",
    "record_control_request_latency",
    "record_decode_error",
    "record_frame_received",
    "record_frame_sent",
    "record_samples_written",
    "record_session_state",
    "record_sink_queue_drop",
    "record_unsolicited_message",
    "start_metrics_server",
]
