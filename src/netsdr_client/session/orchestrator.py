"""NetSDR session orchestration: handshake, control requests, and streaming.

This module implements the NetSdrClient class which owns the session state,
correlates each control request with the next inbound control message, and
starts/stops the sample stream.
"""

from __future__ import annotations

import asyncio
import logging
import time

from netsdr_client.correlation import correlation_context
from netsdr_client.metrics import registry
from netsdr_client.protocol.exceptions import NetSdrProtocolError
from netsdr_client.protocol.message_types import ControlItemCode, DecodedFrame, MessageKind
from netsdr_client.protocol.netsdr_protocol import NetSdrProtocol
from netsdr_client.session.pending import PendingRequestSlot
from netsdr_client.session.types import HandshakeConfig, SessionState
from netsdr_client.sink.adapter import SampleSinkAdapter
from netsdr_client.transport.base import ControlChannel, StreamChannel
from netsdr_client.transport.exceptions import (
    ConnectionClosedError,
    NetSdrConnectionError,
    ReplyTimeoutError,
)
from netsdr_client.transport.timeouts import TimeoutConfig

logger = logging.getLogger(__name__)


class NetSdrClient:
    """Control-and-streaming session for a NetSDR receiver.

    **Request correlation**: the control protocol carries no request IDs, so
    the next inbound control message is taken as the reply to the single
    outstanding request. A second request while one is pending is rejected
    with RequestInFlightError. Inbound control messages with nothing pending
    are dropped.

    **State**: ``connected`` mirrors the control channel; ``streaming`` is
    client-asserted and only changes after a start/stop reply arrives. It is
    left alone by disconnect().

    **Streaming**: stream channel messages go straight to the sink adapter,
    which queues them and writes samples on its own worker task.
    """

    def __init__(
        self,
        control: ControlChannel,
        stream: StreamChannel,
        sink_adapter: SampleSinkAdapter,
        timeout_config: TimeoutConfig | None = None,
        handshake: HandshakeConfig | None = None,
    ) -> None:
        """Initialize the session and subscribe to both channels.

        Args:
            control: Control channel (TCP on a real device)
            stream: Stream channel (UDP on a real device)
            sink_adapter: Consumer for stream channel messages
            timeout_config: Timeout configuration (defaults to TimeoutConfig() if None)
            handshake: Items sent after connect (defaults to HandshakeConfig() if None)

        """
        self.control: ControlChannel = control
        self.stream: StreamChannel = stream
        self.sink_adapter: SampleSinkAdapter = sink_adapter
        self.timeout_config: TimeoutConfig = timeout_config or TimeoutConfig()
        self.handshake: HandshakeConfig = handshake or HandshakeConfig()
        self._slot = PendingRequestSlot()
        self._streaming = False

        self.control.add_message_handler(self._on_control_message)
        self.control.add_close_handler(self._on_control_closed)
        self.stream.add_message_handler(self.sink_adapter.handle_message)

    @property
    def connected(self) -> bool:
        return self.control.is_connected

    @property
    def streaming(self) -> bool:
        return self._streaming

    @property
    def state(self) -> SessionState:
        """Snapshot of the session flags."""
        return SessionState(connected=self.connected, streaming=self._streaming)

    def _state_label(self) -> str:
        if not self.connected:
            return "disconnected"
        return "streaming" if self._streaming else "connected"

    def _record_state(self) -> None:
        registry.record_session_state(self.connected, self._streaming)

    async def connect(self) -> bool:
        """Connect the control channel and run the handshake.

        Returns:
            True if connected (or already connected), False if the transport
            refused the connection or the handshake failed

        """
        if self.connected:
            logger.debug("Already connected, skipping connect")
            return True

        logger.info("→ Connecting control channel")
        if not await self.control.connect():
            logger.error("✗ Control channel connect failed")
            self._record_state()
            return False

        try:
            for code, args in self.handshake.items():
                frame = NetSdrProtocol.encode_control_frame(MessageKind.SET_CONTROL_ITEM, code, args)
                _ = await self.send_control_request(frame)
        except NetSdrProtocolError as e:
            logger.exception(
                "✗ Handshake failed",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            await self.control.disconnect()
            self._record_state()
            return False

        self._record_state()
        logger.info(
            "✓ Connected",
            extra={"handshake_items": len(self.handshake.items())},
        )
        return True

    async def disconnect(self) -> None:
        """Disconnect the control channel and fail any pending request."""
        logger.info("Disconnecting...")
        await self.control.disconnect()
        _ = self._slot.fail(ConnectionClosedError("disconnect"))
        self._record_state()
        logger.info("Disconnect complete")

    async def send_control_request(self, frame: bytes, timeout: float | None = None) -> bytes:
        """Send a control frame and wait for the next inbound control message.

        Args:
            frame: Encoded control frame
            timeout: Reply timeout override in seconds

        Returns:
            Raw reply bytes

        Raises:
            NetSdrConnectionError: If not connected or the send failed
            RequestInFlightError: If another request is awaiting its reply
            ReplyTimeoutError: If no reply arrived in time
            ConnectionClosedError: If the connection closed while waiting

        """
        if not self.connected:
            error_reason = "not_connected"
            raise NetSdrConnectionError(error_reason, state=self._state_label())

        pending = self._slot.register(frame)
        control_item = self._control_item_label(frame)
        wait_seconds = self.timeout_config.request_timeout_seconds if timeout is None else timeout

        with correlation_context(pending.correlation_id):
            try:
                logger.debug(
                    "→ Sending control request",
                    extra={"control_item": control_item, "bytes": len(frame)},
                )
                if not await self.control.send(frame):
                    registry.record_control_request(control_item, "send_failed")
                    error_reason = "send_failed"
                    raise NetSdrConnectionError(error_reason, state=self._state_label())

                try:
                    reply = await asyncio.wait_for(pending.future, timeout=wait_seconds)
                except TimeoutError as e:
                    registry.record_control_request(control_item, "timeout")
                    logger.warning(
                        "✗ Control reply timeout (%.2fs)",
                        wait_seconds,
                        extra={"control_item": control_item, "timeout": wait_seconds},
                    )
                    raise ReplyTimeoutError(wait_seconds, pending.correlation_id) from e
                except ConnectionClosedError:
                    registry.record_control_request(control_item, "closed")
                    raise
            finally:
                self._slot.release(pending)

            latency = time.perf_counter() - pending.sent_at
            registry.record_control_request(control_item, "success")
            registry.record_control_request_latency(control_item, latency)
            logger.debug(
                "✓ Control reply received in %.1fms",
                latency * 1000,
                extra={"control_item": control_item, "bytes": len(reply)},
            )
            return reply

    async def start_streaming(self) -> bool:
        """Put the receiver in run state and start consuming the stream.

        Returns:
            False without sending anything when not connected, True otherwise

        """
        if not self.connected:
            logger.warning("Cannot start streaming: not connected")
            return False

        frame = NetSdrProtocol.encode_control_frame(
            MessageKind.SET_CONTROL_ITEM,
            ControlItemCode.RECEIVER_STATE,
            NetSdrProtocol.receiver_state_args(run=True),
        )
        _ = await self.send_control_request(frame)
        self._streaming = True
        await self.sink_adapter.start()
        await self.stream.start_listening()
        self._record_state()
        logger.info("✓ Streaming started")
        return True

    async def stop_streaming(self) -> bool:
        """Put the receiver in idle state and stop consuming the stream.

        Returns:
            False without sending anything when not connected, True otherwise

        """
        if not self.connected:
            logger.warning("Cannot stop streaming: not connected")
            return False

        frame = NetSdrProtocol.encode_control_frame(
            MessageKind.SET_CONTROL_ITEM,
            ControlItemCode.RECEIVER_STATE,
            NetSdrProtocol.receiver_state_args(run=False),
        )
        _ = await self.send_control_request(frame)
        self._streaming = False
        await self.stream.stop_listening()
        await self.sink_adapter.stop()
        self._record_state()
        logger.info("✓ Streaming stopped")
        return True

    async def change_frequency(self, hz: int, channel: int = 0) -> bool:
        """Tune a receiver channel; the reply content is ignored.

        Returns:
            False without sending anything when not connected, True otherwise

        Raises:
            ValueError: If hz or channel does not fit its wire field

        """
        if not self.connected:
            logger.warning("Cannot change frequency: not connected")
            return False

        frame = NetSdrProtocol.encode_control_frame(
            MessageKind.SET_CONTROL_ITEM,
            ControlItemCode.RECEIVER_FREQUENCY,
            NetSdrProtocol.frequency_args(hz, channel),
        )
        _ = await self.send_control_request(frame)
        logger.info(
            "Frequency set to %d Hz on channel %d",
            hz,
            channel,
            extra={"hz": hz, "channel": channel},
        )
        return True

    async def query_control_item(self, code: ControlItemCode, args: bytes = b"") -> DecodedFrame:
        """Request the current value of a control item and decode the reply.

        Raises:
            FrameDecodeError: If the reply is malformed
            NetSdrConnectionError: If not connected

        """
        frame = NetSdrProtocol.encode_control_frame(MessageKind.CURRENT_CONTROL_ITEM, code, args)
        reply = await self.send_control_request(frame)
        decoded = NetSdrProtocol.decode_frame(reply)
        if not decoded.ok:
            registry.record_decode_error("control", decoded.reason or "malformed")
            logger.warning(
                "Malformed reply to %s query",
                code.name,
                extra={"reason": decoded.reason, "bytes": len(reply)},
            )
        return decoded.raise_for_error(reply)

    async def aclose(self) -> None:
        """Stop the stream listener, drain the sink, and disconnect."""
        await self.stream.stop_listening()
        await self.sink_adapter.stop()
        await self.disconnect()
        await self.stream.close()

    def _on_control_message(self, data: bytes) -> None:
        pending = self._slot.resolve(data)
        if pending is None:
            registry.record_unsolicited_message()
            logger.debug(
                "Dropping control message with no request pending",
                extra={"bytes": len(data)},
            )

    def _on_control_closed(self) -> None:
        logger.warning("Control channel closed by remote side")
        _ = self._slot.fail(ConnectionClosedError("remote_closed"))
        self._record_state()

    @staticmethod
    def _control_item_label(frame: bytes) -> str:
        decoded = NetSdrProtocol.decode_frame(frame)
        return decoded.code.name.lower() if decoded.code is not None else "unknown"

    def __repr__(self) -> str:
        return f"NetSdrClient({self._state_label()})"
