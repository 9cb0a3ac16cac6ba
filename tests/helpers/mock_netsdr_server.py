"""Loopback NetSDR receiver for integration tests."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from netsdr_client.protocol import ControlItemCode, FrameAssembler, NetSdrProtocol
from netsdr_client.protocol.netsdr_protocol import RECEIVER_STATE_RUN

logger = logging.getLogger(__name__)


class ResponseMode(Enum):
    """Response mode for the mock receiver."""

    ACK = "ack"  # Echo every control item back
    TIMEOUT = "timeout"  # Never respond
    REJECT = "reject"  # Close right after accepting


class MockNetSdrServer:
    """Control-port server that acknowledges control items and streams samples.

    Every received frame is recorded. When a receiver-state "run" request
    arrives and ``data_address`` is set, the queued ``stream_frames`` are
    sent to it over UDP right after the acknowledgement.
    """

    def __init__(
        self,
        response_mode: ResponseMode = ResponseMode.ACK,
        host: str = "127.0.0.1",
        port: int = 0,
    ):
        self.response_mode = response_mode
        self.host = host
        self.port = port
        self.server: asyncio.Server | None = None
        self.received_frames: list[bytes] = []
        self.connection_count = 0
        self.close_after: int | None = None
        self.data_address: tuple[str, int] | None = None
        self.stream_frames: list[bytes] = []
        self._writers: list[asyncio.StreamWriter] = []

    async def start(self) -> None:
        """Start the mock server."""
        self.server = await asyncio.start_server(self._handle_client, self.host, self.port)
        # Get the actual port assigned
        if self.port == 0:
            self.port = self.server.sockets[0].getsockname()[1]
        logger.info("Mock NetSDR server started on %s:%d", self.host, self.port)

    async def stop(self) -> None:
        """Stop the mock server and drop open connections."""
        for writer in self._writers:
            writer.close()
        self._writers.clear()
        if self.server:
            self.server.close()
            await self.server.wait_closed()
            self.server = None
            logger.info("Mock NetSDR server stopped")

    async def _handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.connection_count += 1
        if self.response_mode == ResponseMode.REJECT:
            writer.close()
            await writer.wait_closed()
            return

        self._writers.append(writer)
        assembler = FrameAssembler()
        try:
            while data := await reader.read(65536):
                for frame in assembler.feed(data):
                    self.received_frames.append(frame)
                    if self.close_after is not None and len(self.received_frames) > self.close_after:
                        logger.info("Closing after %d frames", self.close_after)
                        return
                    await self._respond(frame, writer)
        except (ConnectionError, OSError) as e:
            logger.warning("Mock server connection error: %s", e)
        finally:
            if writer in self._writers:
                self._writers.remove(writer)
            writer.close()

    async def _respond(self, frame: bytes, writer: asyncio.StreamWriter) -> None:
        if self.response_mode == ResponseMode.TIMEOUT:
            return
        writer.write(frame)
        await writer.drain()

        decoded = NetSdrProtocol.decode_frame(frame)
        if decoded.code == ControlItemCode.RECEIVER_STATE and decoded.body == RECEIVER_STATE_RUN:
            await self._push_stream()

    async def _push_stream(self) -> None:
        if self.data_address is None or not self.stream_frames:
            return
        loop = asyncio.get_running_loop()
        transport, _ = await loop.create_datagram_endpoint(
            asyncio.DatagramProtocol,
            remote_addr=self.data_address,
        )
        try:
            for datagram in self.stream_frames:
                transport.sendto(datagram)
        finally:
            transport.close()
