"""Unit tests for UdpStreamChannel on the loopback interface."""

from __future__ import annotations

import asyncio
import socket

import pytest

from netsdr_client.transport import UdpStreamChannel

DATAGRAM = b"\x08\x80\x01\x00\x01\x00\x02\x00"


def _send_datagram(port: int, data: bytes) -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        _ = sock.sendto(data, ("127.0.0.1", port))


async def _wait_for(received: list[bytes], count: int) -> None:
    for _ in range(100):
        if len(received) >= count:
            return
        await asyncio.sleep(0.01)


@pytest.fixture
def udp_channel() -> UdpStreamChannel:
    return UdpStreamChannel(host="127.0.0.1", port=0)


@pytest.mark.asyncio
async def test_datagram_delivered_as_is(udp_channel: UdpStreamChannel) -> None:
    received: list[bytes] = []
    udp_channel.add_message_handler(received.append)
    await udp_channel.start_listening()
    try:
        assert udp_channel.is_listening is True
        assert udp_channel.local_port != 0

        _send_datagram(udp_channel.local_port, DATAGRAM)
        await _wait_for(received, 1)

        assert received == [DATAGRAM]
    finally:
        await udp_channel.close()


@pytest.mark.asyncio
async def test_start_listening_is_idempotent(udp_channel: UdpStreamChannel) -> None:
    await udp_channel.start_listening()
    port = udp_channel.local_port
    await udp_channel.start_listening()
    try:
        assert udp_channel.local_port == port
    finally:
        await udp_channel.close()


@pytest.mark.asyncio
async def test_stop_listening(udp_channel: UdpStreamChannel) -> None:
    await udp_channel.start_listening()
    await udp_channel.stop_listening()
    await udp_channel.stop_listening()

    assert udp_channel.is_listening is False
    assert udp_channel.local_port == 0


@pytest.mark.asyncio
async def test_bind_failure_raises() -> None:
    first = UdpStreamChannel(host="127.0.0.1", port=0)
    await first.start_listening()
    try:
        second = UdpStreamChannel(host="127.0.0.1", port=first.local_port)
        with pytest.raises(OSError):
            await second.start_listening()
        assert second.is_listening is False
    finally:
        await first.close()


def test_repr(udp_channel: UdpStreamChannel) -> None:
    assert repr(udp_channel) == "UdpStreamChannel(127.0.0.1:0, idle)"
