"""NetSDR transport package - control and stream channels.

Public API:
- Channel capabilities (ControlChannel, StreamChannel)
- Socket channels (TcpControlChannel, UdpStreamChannel)
- In-memory doubles (InMemoryControlChannel, InMemoryStreamChannel)
- Timeout configuration (TimeoutConfig)
"""

from netsdr_client.transport.base import (
    CloseHandler,
    ControlChannel,
    HandlerRegistry,
    MessageHandler,
    StreamChannel,
)
from netsdr_client.transport.exceptions import (
    ConnectionClosedError,
    NetSdrConnectionError,
    ReplyTimeoutError,
    RequestInFlightError,
)
from netsdr_client.transport.memory import InMemoryControlChannel, InMemoryStreamChannel
from netsdr_client.transport.tcp_channel import DEFAULT_CONTROL_PORT, TcpControlChannel
from netsdr_client.transport.timeouts import TimeoutConfig
from netsdr_client.transport.udp_channel import DEFAULT_DATA_PORT, UdpStreamChannel

__all__ = [
    # Capabilities
    "ControlChannel",
    "StreamChannel",
    "HandlerRegistry",
    "MessageHandler",
    "CloseHandler",
    # Channels
    "TcpControlChannel",
    "UdpStreamChannel",
    "InMemoryControlChannel",
    "InMemoryStreamChannel",
    "DEFAULT_CONTROL_PORT",
    "DEFAULT_DATA_PORT",
    # Configuration
    "TimeoutConfig",
    # Exceptions
    "NetSdrConnectionError",
    "ConnectionClosedError",
    "RequestInFlightError",
    "ReplyTimeoutError",
]
