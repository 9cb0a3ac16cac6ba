"""Asyncio TCP control channel with deadlines and instrumentation."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time

from netsdr_client.const import NETSDR_CONNECT_TIMEOUT, NETSDR_IO_TIMEOUT
from netsdr_client.metrics import registry
from netsdr_client.protocol.exceptions import FrameAssemblyError
from netsdr_client.protocol.frame_assembler import FrameAssembler
from netsdr_client.transport.base import HandlerRegistry

logger = logging.getLogger(__name__)

DEFAULT_CONTROL_PORT = 50000
_CHANNEL = "control"


class TcpControlChannel(HandlerRegistry):
    """Async TCP control channel with timeouts and instrumentation.

    A background listen task reads the socket, splits the byte stream into
    frames with a FrameAssembler, and delivers each frame to the registered
    message handlers. Close handlers fire only when the remote side closes
    the connection or a read fails, not on a local disconnect().
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_CONTROL_PORT,
        connect_timeout: float = NETSDR_CONNECT_TIMEOUT,
        io_timeout: float = NETSDR_IO_TIMEOUT,
        max_read_size: int = 65536,
    ):
        """
        Initialize TCP channel parameters.

        Args:
            host: Target host
            port: Target port
            connect_timeout: Connection timeout in seconds
            io_timeout: Write timeout in seconds
            max_read_size: Maximum bytes to read in one operation
        """
        super().__init__()
        self.host = host
        self.port = port
        self.connect_timeout = connect_timeout
        self.io_timeout = io_timeout
        self.max_read_size = max_read_size
        self.reader: asyncio.StreamReader | None = None
        self.writer: asyncio.StreamWriter | None = None
        self.assembler = FrameAssembler()
        self._listen_task: asyncio.Task[None] | None = None
        self._connected = False

    async def connect(self) -> bool:
        """
        Establish TCP connection with timeout and start the listen task.

        Returns:
            True if connected successfully (or already connected), False otherwise
        """
        if self._connected:
            return True

        start_time = time.perf_counter()
        try:
            logger.info(
                "Connecting to %s:%d (timeout: %.1fs)",
                self.host,
                self.port,
                self.connect_timeout,
                extra={"host": self.host, "port": self.port, "timeout": self.connect_timeout},
            )
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port),
                timeout=self.connect_timeout,
            )
        except TimeoutError:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                "Connection to %s:%d timed out after %.1fms",
                self.host,
                self.port,
                elapsed_ms,
                extra={
                    "host": self.host,
                    "port": self.port,
                    "elapsed_ms": elapsed_ms,
                    "error": "timeout",
                },
            )
            return False
        except OSError as e:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                "Connection to %s:%d failed after %.1fms",
                self.host,
                self.port,
                elapsed_ms,
                extra={
                    "host": self.host,
                    "port": self.port,
                    "elapsed_ms": elapsed_ms,
                    "error": str(e),
                },
            )
            return False

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        self._connected = True
        self.assembler.reset()
        self._listen_task = asyncio.create_task(self._listen_loop())
        logger.info(
            "Connected to %s:%d in %.1fms",
            self.host,
            self.port,
            elapsed_ms,
            extra={"host": self.host, "port": self.port, "elapsed_ms": elapsed_ms},
        )
        return True

    async def send(self, data: bytes) -> bool:
        """
        Send data with timeout.

        Args:
            data: Bytes to send

        Returns:
            True if sent successfully, False otherwise
        """
        if not self._connected or not self.writer:
            logger.error(
                "Cannot send: not connected",
                extra={"host": self.host, "port": self.port},
            )
            registry.record_frame_sent(_CHANNEL, "not_connected")
            return False

        start_time = time.perf_counter()
        try:
            self.writer.write(data)
            await asyncio.wait_for(self.writer.drain(), timeout=self.io_timeout)
        except TimeoutError:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                "Send to %s:%d timed out after %.1fms",
                self.host,
                self.port,
                elapsed_ms,
                extra={
                    "host": self.host,
                    "port": self.port,
                    "elapsed_ms": elapsed_ms,
                    "error": "timeout",
                },
            )
            registry.record_frame_sent(_CHANNEL, "timeout")
            return False
        except OSError as e:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                "Send to %s:%d failed after %.1fms",
                self.host,
                self.port,
                elapsed_ms,
                extra={
                    "host": self.host,
                    "port": self.port,
                    "elapsed_ms": elapsed_ms,
                    "error": str(e),
                },
            )
            registry.record_frame_sent(_CHANNEL, "error")
            return False

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            "Sent %d bytes to %s:%d in %.1fms",
            len(data),
            self.host,
            self.port,
            elapsed_ms,
            extra={
                "bytes": len(data),
                "host": self.host,
                "port": self.port,
                "elapsed_ms": elapsed_ms,
            },
        )
        registry.record_frame_sent(_CHANNEL, "success")
        return True

    async def _listen_loop(self) -> None:
        """Read the socket until EOF, error, or cancellation."""
        reader = self.reader
        if reader is None:
            return

        reason = "remote_closed"
        try:
            while True:
                data = await reader.read(self.max_read_size)
                if not data:
                    logger.warning(
                        "Connection closed by %s:%d",
                        self.host,
                        self.port,
                        extra={"host": self.host, "port": self.port},
                    )
                    break

                try:
                    frames = self.assembler.feed(data)
                except FrameAssemblyError as e:
                    registry.record_decode_error(_CHANNEL, e.reason)
                    logger.warning(
                        "Dropped %d buffered bytes from %s:%d",
                        e.buffer_size,
                        self.host,
                        self.port,
                        extra={"reason": e.reason, "buffer_size": e.buffer_size},
                    )
                    continue

                for frame in frames:
                    registry.record_frame_received(_CHANNEL, "success")
                    logger.debug(
                        "Received %d byte frame from %s:%d",
                        len(frame),
                        self.host,
                        self.port,
                        extra={"bytes": len(frame), "host": self.host, "port": self.port},
                    )
                    self._dispatch_message(frame)
        except asyncio.CancelledError:
            # Clean cancellation from disconnect()
            logger.debug("Listen loop cancelled (clean shutdown)")
            raise
        except OSError as e:
            reason = "read_error"
            logger.exception(
                "Receive from %s:%d failed",
                self.host,
                self.port,
                extra={"host": self.host, "port": self.port, "error": str(e)},
            )

        logger.info(
            "Control channel lost",
            extra={"host": self.host, "port": self.port, "reason": reason},
        )
        await self._close_writer()
        self._dispatch_close()

    async def _close_writer(self) -> None:
        writer = self.writer
        self._connected = False
        self.writer = None
        self.reader = None
        if writer is None:
            return
        try:
            writer.close()
            await writer.wait_closed()
        except (OSError, ConnectionError) as e:
            logger.warning(
                "Error closing connection: %s",
                e,
                extra={
                    "host": self.host,
                    "port": self.port,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )

    async def disconnect(self) -> None:
        """Cancel the listen task and close the connection."""
        if self.writer:
            logger.info(
                "Closing connection to %s:%d",
                self.host,
                self.port,
                extra={"host": self.host, "port": self.port},
            )

        task = self._listen_task
        self._listen_task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            _ = task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        await self._close_writer()
        self.assembler.reset()

    @property
    def is_connected(self) -> bool:
        """Check if connection is active."""
        return self._connected

    def __repr__(self) -> str:
        """String representation."""
        status = "connected" if self._connected else "disconnected"
        return f"TcpControlChannel({self.host}:{self.port}, {status})"
