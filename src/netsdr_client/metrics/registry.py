"""Prometheus metrics registry for the NetSDR client."""

import threading
from typing import Final

from prometheus_client import (  # type: ignore[import-untyped]
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

# Metric definitions
netsdr_frames_sent_total: Final = Counter(  # type: ignore[assignment]
    "netsdr_frames_sent_total",
    "Total frames sent",
    ["channel", "outcome"],
)

netsdr_frames_received_total: Final = Counter(  # type: ignore[assignment]
    "netsdr_frames_received_total",
    "Total frames received",
    ["channel", "outcome"],
)

netsdr_decode_errors_total: Final = Counter(  # type: ignore[assignment]
    "netsdr_decode_errors_total",
    "Total frame decode errors",
    ["channel", "reason"],
)

# Control request metrics
netsdr_control_requests_total: Final = Counter(  # type: ignore[assignment]
    "netsdr_control_requests_total",
    "Total control requests",
    ["control_item", "outcome"],
)

netsdr_control_request_latency_seconds: Final = Histogram(  # type: ignore[assignment]
    "netsdr_control_request_latency_seconds",
    "Control request round-trip latency in seconds",
    ["control_item"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

netsdr_unsolicited_messages_total: Final = Counter(  # type: ignore[assignment]
    "netsdr_unsolicited_messages_total",
    "Total control messages received with no request pending",
)

# Sample sink metrics
netsdr_samples_written_total: Final = Counter(  # type: ignore[assignment]
    "netsdr_samples_written_total",
    "Total samples appended to the sink",
)

netsdr_sink_queue_dropped_total: Final = Counter(  # type: ignore[assignment]
    "netsdr_sink_queue_dropped_total",
    "Total stream frames dropped because the sink queue was full",
)

# Session metrics
netsdr_session_state: Final = Gauge(  # type: ignore[assignment]
    "netsdr_session_state",
    "Current session state flags",
    ["state"],
)

_server_state = {"started": False}
_server_lock = threading.Lock()


def start_metrics_server(port: int = 9400) -> None:
    """Start Prometheus HTTP metrics server (idempotent)."""
    with _server_lock:
        if not _server_state["started"]:
            start_http_server(port)  # type: ignore[no-untyped-call]
            _server_state["started"] = True


def record_frame_sent(channel: str, outcome: str) -> None:
    """Record a sent frame."""
    netsdr_frames_sent_total.labels(channel=channel, outcome=outcome).inc()  # type: ignore[no-untyped-call]


def record_frame_received(channel: str, outcome: str) -> None:
    """Record a received frame."""
    netsdr_frames_received_total.labels(channel=channel, outcome=outcome).inc()  # type: ignore[no-untyped-call]


def record_decode_error(channel: str, reason: str) -> None:
    """Record a decode error."""
    netsdr_decode_errors_total.labels(channel=channel, reason=reason).inc()  # type: ignore[no-untyped-call]


def record_control_request(control_item: str, outcome: str) -> None:
    """Record a control request outcome."""
    netsdr_control_requests_total.labels(control_item=control_item, outcome=outcome).inc()  # type: ignore[no-untyped-call]


def record_control_request_latency(control_item: str, latency_seconds: float) -> None:
    """Record control request latency."""
    netsdr_control_request_latency_seconds.labels(control_item=control_item).observe(latency_seconds)  # type: ignore[no-untyped-call]


def record_unsolicited_message() -> None:
    """Record a control message that arrived with nothing pending."""
    netsdr_unsolicited_messages_total.inc()  # type: ignore[no-untyped-call]


def record_samples_written(count: int) -> None:
    """Record samples appended to the sink."""
    netsdr_samples_written_total.inc(count)  # type: ignore[no-untyped-call]


def record_sink_queue_drop() -> None:
    """Record a stream frame dropped on a full sink queue."""
    netsdr_sink_queue_dropped_total.inc()  # type: ignore[no-untyped-call]


def record_session_state(connected: bool, streaming: bool) -> None:
    """Record session state flags."""
    # Set gauge to 1 for each active flag, 0 otherwise
    netsdr_session_state.labels(state="connected").set(1 if connected else 0)  # type: ignore[no-untyped-call]
    netsdr_session_state.labels(state="streaming").set(1 if streaming else 0)  # type: ignore[no-untyped-call]
