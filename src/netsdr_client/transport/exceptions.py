"""Custom exception types for NetSDR transport and session errors.

This module defines the exception hierarchy for connection and request
errors, extending the protocol exceptions.
"""

from __future__ import annotations

from netsdr_client.protocol.exceptions import NetSdrProtocolError


class NetSdrConnectionError(NetSdrProtocolError):
    """Connection state error (not connected, send failed).

    Raised when:
    - Sending a control request while disconnected
    - The control transport rejects a send

    Note: Named NetSdrConnectionError to avoid shadowing Python's built-in ConnectionError.

    Attributes:
        reason: Specific failure reason
        state: Session state when error occurred
    """

    def __init__(self, reason: str, state: str = "unknown"):
        self.reason = reason
        self.state = state
        super().__init__(f"Connection error: {reason} (state: {state})")


class ConnectionClosedError(NetSdrProtocolError):
    """Pending control request cancelled because the connection closed.

    Attributes:
        reason: What closed the connection ("disconnect", "remote_closed")
    """

    def __init__(self, reason: str = "disconnect"):
        self.reason = reason
        super().__init__(f"Connection closed while awaiting reply: {reason}")


class RequestInFlightError(NetSdrProtocolError):
    """A control request is already awaiting its reply.

    The session allows a single outstanding control request. The pending
    request is left untouched.

    Attributes:
        correlation_id: Correlation ID of the request already in flight
    """

    def __init__(self, correlation_id: str = ""):
        self.correlation_id = correlation_id
        super().__init__(f"Control request already in flight ({correlation_id})")


class ReplyTimeoutError(NetSdrProtocolError):
    """Reply not received within timeout period.

    Attributes:
        timeout_seconds: Timeout value that was exceeded
        correlation_id: Correlation ID for observability
    """

    def __init__(self, timeout_seconds: float, correlation_id: str = ""):
        self.timeout_seconds = timeout_seconds
        self.correlation_id = correlation_id
        super().__init__(f"Reply timeout after {timeout_seconds}s")
