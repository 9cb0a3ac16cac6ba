"""Asyncio UDP stream channel for NetSDR sample data."""

from __future__ import annotations

import asyncio
import logging
from typing import override

from netsdr_client.const import NETSDR_DATA_HOST
from netsdr_client.metrics import registry
from netsdr_client.transport.base import HandlerRegistry

logger = logging.getLogger(__name__)

DEFAULT_DATA_PORT = 60000
_CHANNEL = "stream"


class _DatagramReceiver(asyncio.DatagramProtocol):
    """Forwards each datagram to the owning channel."""

    def __init__(self, channel: UdpStreamChannel) -> None:
        self.channel = channel

    @override
    def datagram_received(self, data: bytes, addr: tuple[str | int, ...]) -> None:
        self.channel._on_datagram(data, addr)

    @override
    def error_received(self, exc: Exception) -> None:
        logger.warning(
            "UDP receive error: %s",
            exc,
            extra={"error": str(exc), "error_type": type(exc).__name__},
        )
        registry.record_frame_received(_CHANNEL, "error")


class UdpStreamChannel(HandlerRegistry):
    """Listens for NetSDR data items on a UDP port.

    Each datagram is one complete data frame and is delivered as-is to the
    registered message handlers. start_listening() and stop_listening() are
    idempotent; stopping closes the datagram endpoint so it returns promptly.
    """

    def __init__(self, host: str = NETSDR_DATA_HOST, port: int = DEFAULT_DATA_PORT):
        """
        Initialize UDP channel parameters.

        Args:
            host: Local address to bind
            port: Local port to bind (0 picks a free port)
        """
        super().__init__()
        self.host = host
        self.port = port
        self._transport: asyncio.DatagramTransport | None = None

    async def start_listening(self) -> None:
        """Bind the UDP endpoint and start delivering datagrams."""
        if self._transport is not None:
            return

        loop = asyncio.get_running_loop()
        try:
            transport, _ = await loop.create_datagram_endpoint(
                lambda: _DatagramReceiver(self),
                local_addr=(self.host, self.port),
            )
        except OSError as e:
            logger.exception(
                "Failed to bind UDP %s:%d",
                self.host,
                self.port,
                extra={"host": self.host, "port": self.port, "error": str(e)},
            )
            raise

        self._transport = transport
        logger.info(
            "Listening for sample data on %s:%d",
            self.host,
            self.local_port,
            extra={"host": self.host, "port": self.local_port},
        )

    async def stop_listening(self) -> None:
        """Close the UDP endpoint."""
        transport = self._transport
        if transport is None:
            return
        self._transport = None
        transport.close()
        logger.info(
            "Stopped listening on %s:%d",
            self.host,
            self.port,
            extra={"host": self.host, "port": self.port},
        )

    async def close(self) -> None:
        """Stop listening and drop all handlers."""
        await self.stop_listening()
        self._message_handlers.clear()

    def _on_datagram(self, data: bytes, addr: tuple[str | int, ...]) -> None:
        registry.record_frame_received(_CHANNEL, "success")
        logger.debug(
            "Received %d byte datagram from %s",
            len(data),
            addr,
            extra={"bytes": len(data)},
        )
        self._dispatch_message(data)

    @property
    def is_listening(self) -> bool:
        """Check if the endpoint is bound."""
        return self._transport is not None

    @property
    def local_port(self) -> int:
        """Bound local port, or the configured port when not listening."""
        if self._transport is None:
            return self.port
        sockname = self._transport.get_extra_info("sockname")
        return int(sockname[1]) if sockname else self.port

    def __repr__(self) -> str:
        """String representation."""
        status = "listening" if self.is_listening else "idle"
        return f"UdpStreamChannel({self.host}:{self.port}, {status})"
