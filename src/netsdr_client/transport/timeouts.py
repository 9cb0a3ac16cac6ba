"""Timeout configuration for the NetSDR control and stream channels."""

from __future__ import annotations

from netsdr_client.const import (
    NETSDR_CONNECT_TIMEOUT,
    NETSDR_IO_TIMEOUT,
    NETSDR_REQUEST_TIMEOUT,
)


class TimeoutConfig:
    """Timeout configuration shared by the transports and the session.

    Defaults come from the NETSDR_*_TIMEOUT environment variables.
    """

    def __init__(
        self,
        request_timeout_seconds: float = NETSDR_REQUEST_TIMEOUT,
        connect_timeout_seconds: float = NETSDR_CONNECT_TIMEOUT,
        io_timeout_seconds: float = NETSDR_IO_TIMEOUT,
    ):
        """Initialize timeout configuration.

        Args:
            request_timeout_seconds: Wait for one control reply
            connect_timeout_seconds: TCP connect timeout
            io_timeout_seconds: Socket write timeout
        """
        self.request_timeout_seconds = request_timeout_seconds
        self.connect_timeout_seconds = connect_timeout_seconds
        self.io_timeout_seconds = io_timeout_seconds

    def __repr__(self) -> str:
        """String representation showing all timeouts."""
        return (
            f"TimeoutConfig(request={self.request_timeout_seconds:.3f}s, "
            f"connect={self.connect_timeout_seconds:.3f}s, "
            f"io={self.io_timeout_seconds:.3f}s)"
        )
