"""Session builders and containers shared by the unit and integration tests."""

from __future__ import annotations

from dataclasses import dataclass

from netsdr_client.protocol import MessageKind, NetSdrProtocol
from netsdr_client.session import NetSdrClient
from netsdr_client.sink import MemorySampleSink, SampleSinkAdapter
from netsdr_client.transport import (
    InMemoryControlChannel,
    InMemoryStreamChannel,
    TcpControlChannel,
    TimeoutConfig,
    UdpStreamChannel,
)
from netsdr_client.transport.memory import Responder

# Short enough to keep timeout tests fast
TEST_REQUEST_TIMEOUT = 0.05


def ack_responder(frame: bytes) -> bytes:
    """Device behaviour for set requests: echo the control item back."""
    return frame


def data_frame(samples: bytes, sequence_number: int = 0) -> bytes:
    """Build a DATA_ITEM_0 frame carrying ``samples``."""
    return NetSdrProtocol.encode_data_item(MessageKind.DATA_ITEM_0, sequence_number, samples)


@dataclass
class InMemorySession:
    client: NetSdrClient
    control: InMemoryControlChannel
    stream: InMemoryStreamChannel
    sink: MemorySampleSink
    adapter: SampleSinkAdapter


@dataclass
class LoopbackSession:
    client: NetSdrClient
    control: TcpControlChannel
    stream: UdpStreamChannel
    sink: MemorySampleSink


def make_session(
    responder: Responder | None = ack_responder,
    *,
    sample_bits: int = 16,
    sink_sample_bits: int = 16,
    queue_size: int = 64,
    request_timeout: float = TEST_REQUEST_TIMEOUT,
) -> InMemorySession:
    control = InMemoryControlChannel(responder=responder)
    stream = InMemoryStreamChannel()
    sink = MemorySampleSink()
    adapter = SampleSinkAdapter(
        sink,
        sample_bits=sample_bits,
        sink_sample_bits=sink_sample_bits,
        queue_size=queue_size,
    )
    client = NetSdrClient(
        control,
        stream,
        adapter,
        timeout_config=TimeoutConfig(request_timeout_seconds=request_timeout),
    )
    return InMemorySession(client=client, control=control, stream=stream, sink=sink, adapter=adapter)
