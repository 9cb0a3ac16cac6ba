"""Fixtures for integration tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest

from netsdr_client.session import NetSdrClient
from netsdr_client.sink import MemorySampleSink, SampleSinkAdapter
from netsdr_client.transport import TcpControlChannel, TimeoutConfig, UdpStreamChannel
from tests.helpers.mock_netsdr_server import MockNetSdrServer, ResponseMode
from tests.helpers.netsdr import LoopbackSession


@pytest.fixture
async def mock_netsdr_server() -> AsyncGenerator[MockNetSdrServer]:
    """Fixture providing a mock receiver that acknowledges every item."""
    server = MockNetSdrServer()
    await server.start()
    yield server
    await server.stop()


@pytest.fixture
async def mock_netsdr_server_timeout() -> AsyncGenerator[MockNetSdrServer]:
    """Fixture providing a mock receiver that never responds."""
    server = MockNetSdrServer(response_mode=ResponseMode.TIMEOUT)
    await server.start()
    yield server
    await server.stop()


@pytest.fixture
async def loopback_session(mock_netsdr_server: MockNetSdrServer) -> AsyncGenerator[LoopbackSession]:
    """Client wired to the mock receiver over real TCP and UDP sockets."""
    control = TcpControlChannel(mock_netsdr_server.host, mock_netsdr_server.port, connect_timeout=1.0, io_timeout=1.0)
    stream = UdpStreamChannel("127.0.0.1", 0)
    sink = MemorySampleSink()
    client = NetSdrClient(
        control,
        stream,
        SampleSinkAdapter(sink, sample_bits=16, sink_sample_bits=16, queue_size=64),
        timeout_config=TimeoutConfig(request_timeout_seconds=1.0),
    )
    yield LoopbackSession(client=client, control=control, stream=stream, sink=sink)
    await client.aclose()
