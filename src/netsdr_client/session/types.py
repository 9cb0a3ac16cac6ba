"""Core dataclasses for the NetSDR session layer.

This module defines the data structures used by the session orchestrator to
track the pending control request, session state, and handshake settings.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from netsdr_client.protocol.message_types import ControlItemCode
from netsdr_client.protocol.netsdr_protocol import NetSdrProtocol


@dataclass(frozen=True)
class SessionState:
    """Snapshot of the session flags.

    Attributes:
        connected: Mirrors the control transport's connection
        streaming: Client-asserted; set after a successful start/stop reply
    """

    connected: bool = False
    streaming: bool = False


@dataclass
class PendingRequest:
    """Tracks the control request awaiting its reply.

    Attributes:
        frame: Encoded control frame that was (or is about to be) sent
        correlation_id: UUID v7 for observability and event tracing
        sent_at: Timestamp when the request was registered (time.perf_counter())
        future: Resolved with the raw reply bytes, or failed on close
    """

    frame: bytes
    correlation_id: str  # UUID v7 for observability
    sent_at: float  # Timestamp for latency metrics
    future: asyncio.Future[bytes]  # Set when the reply arrives


@dataclass(frozen=True)
class HandshakeConfig:
    """Control items sent in order right after the control channel connects.

    Attributes:
        sample_rate_hz: IQ output data sample rate
        rf_filter_mode: RF filter selection (0 = automatic)
        ad_modes: Raw A/D modes parameter bytes
    """

    sample_rate_hz: int = 100_000
    rf_filter_mode: int = 0
    ad_modes: bytes = field(default=b"\x00\x03")

    def items(self) -> list[tuple[ControlItemCode, bytes]]:
        """Return the (control item, parameters) pairs in send order."""
        return [
            (ControlItemCode.IQ_OUTPUT_SAMPLE_RATE, NetSdrProtocol.sample_rate_args(self.sample_rate_hz)),
            (ControlItemCode.RF_FILTER, NetSdrProtocol.rf_filter_args(self.rf_filter_mode)),
            (ControlItemCode.AD_MODES, bytes(self.ad_modes)),
        ]
