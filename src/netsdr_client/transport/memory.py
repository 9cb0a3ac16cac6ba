"""In-memory channel doubles for tests and dry runs.

Both channels satisfy the ControlChannel / StreamChannel capabilities
without touching the network. The control channel records every frame it
is asked to send and can answer through a responder callback.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from netsdr_client.transport.base import HandlerRegistry

logger = logging.getLogger(__name__)

Responder = Callable[[bytes], bytes | None]


class InMemoryControlChannel(HandlerRegistry):
    """Control channel that keeps sent frames in memory.

    Attributes:
        sent: Every frame passed to a successful send(), in order
        responder: Called with each sent frame; a non-None return value is
            delivered back as the inbound reply on the next loop iteration
        accept_connect: connect() result
        accept_send: send() result while connected
    """

    def __init__(self, responder: Responder | None = None) -> None:
        super().__init__()
        self.responder = responder
        self.sent: list[bytes] = []
        self.accept_connect = True
        self.accept_send = True
        self.connect_calls = 0
        self.disconnect_calls = 0
        self._connected = False

    async def connect(self) -> bool:
        self.connect_calls += 1
        if self.accept_connect:
            self._connected = True
        return self._connected

    async def disconnect(self) -> None:
        self.disconnect_calls += 1
        self._connected = False

    async def send(self, data: bytes) -> bool:
        if not self._connected or not self.accept_send:
            return False
        frame = bytes(data)
        self.sent.append(frame)
        if self.responder is not None:
            reply = self.responder(frame)
            if reply is not None:
                asyncio.get_running_loop().call_soon(self.deliver, reply)
        return True

    def deliver(self, data: bytes) -> None:
        """Inject an inbound control message."""
        if not self._connected:
            logger.debug("Dropping injected message, channel closed", extra={"bytes": len(data)})
            return
        self._dispatch_message(bytes(data))

    def simulate_remote_close(self) -> None:
        """Drop the connection as if the device closed it."""
        self._connected = False
        self._dispatch_close()

    @property
    def is_connected(self) -> bool:
        return self._connected

    def __repr__(self) -> str:
        status = "connected" if self._connected else "disconnected"
        return f"InMemoryControlChannel({status}, sent={len(self.sent)})"


class InMemoryStreamChannel(HandlerRegistry):
    """Stream channel fed by deliver(); messages only flow while listening."""

    def __init__(self) -> None:
        super().__init__()
        self._listening = False
        self.start_calls = 0
        self.stop_calls = 0

    async def start_listening(self) -> None:
        self.start_calls += 1
        self._listening = True

    async def stop_listening(self) -> None:
        self.stop_calls += 1
        self._listening = False

    async def close(self) -> None:
        await self.stop_listening()
        self._message_handlers.clear()

    def deliver(self, data: bytes) -> bool:
        """Inject one datagram; returns False when not listening."""
        if not self._listening:
            return False
        self._dispatch_message(bytes(data))
        return True

    @property
    def is_listening(self) -> bool:
        return self._listening

    def __repr__(self) -> str:
        status = "listening" if self._listening else "idle"
        return f"InMemoryStreamChannel({status})"
