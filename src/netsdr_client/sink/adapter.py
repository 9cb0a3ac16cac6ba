"""Stream frame consumer that writes narrowed samples to a sink.

The stream channel calls handle_message() for every datagram. That call only
enqueues; a worker task decodes, extracts, narrows, and appends, so a slow
sink never stalls the transport or the control channel.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from netsdr_client.const import NETSDR_SAMPLE_BITS, NETSDR_SINK_QUEUE_SIZE, NETSDR_SINK_SAMPLE_BITS
from netsdr_client.metrics import registry
from netsdr_client.protocol.exceptions import SampleWidthError
from netsdr_client.protocol.netsdr_protocol import MAX_SAMPLE_BITS, NetSdrProtocol
from netsdr_client.sink.sample_sink import SampleSink

logger = logging.getLogger(__name__)

_CHANNEL = "stream"


class SampleSinkAdapter:
    """Decodes stream frames and appends their samples to a sink.

    Samples are read ``sample_bits`` wide and narrowed to ``sink_sample_bits``
    with wrap-around (the low bits are kept, like a C integer cast), then
    packed little-endian. Frames that fail to decode are dropped.
    """

    def __init__(
        self,
        sink: SampleSink,
        sample_bits: int = NETSDR_SAMPLE_BITS,
        sink_sample_bits: int = NETSDR_SINK_SAMPLE_BITS,
        queue_size: int = NETSDR_SINK_QUEUE_SIZE,
    ) -> None:
        """Initialize the adapter.

        Args:
            sink: Destination for packed samples
            sample_bits: Width of each sample in the data frames (1-32)
            sink_sample_bits: Width written to the sink (8, 16, 24 or 32)
            queue_size: Maximum frames waiting for the worker

        Raises:
            SampleWidthError: If either width is unsupported

        """
        if not 1 <= sample_bits <= MAX_SAMPLE_BITS:
            raise SampleWidthError(sample_bits)
        if sink_sample_bits % 8 or not 8 <= sink_sample_bits <= MAX_SAMPLE_BITS:
            raise SampleWidthError(sink_sample_bits)

        self.sink: SampleSink = sink
        self.sample_bits: int = sample_bits
        self.sink_sample_bits: int = sink_sample_bits
        self._sample_width = (sample_bits + 7) // 8
        self._sink_width = sink_sample_bits // 8
        self._sink_mask = (1 << sink_sample_bits) - 1
        self._queue: asyncio.Queue[bytes] = asyncio.Queue(maxsize=queue_size)
        self._worker_task: asyncio.Task[None] | None = None

    def handle_message(self, data: bytes) -> None:
        """Queue one stream frame; drop it if the queue is full."""
        try:
            self._queue.put_nowait(bytes(data))
        except asyncio.QueueFull:
            registry.record_sink_queue_drop()
            logger.warning(
                "Sample queue full, frame dropped",
                extra={"bytes": len(data), "queue_size": self._queue.qsize()},
            )

    def convert_frame(self, data: bytes) -> bytes | None:
        """Decode one data frame and return its narrowed, packed samples.

        Returns:
            Packed samples, or None when the frame is malformed or not a data frame

        """
        decoded = NetSdrProtocol.decode_frame(data)
        if not decoded.ok:
            registry.record_decode_error(_CHANNEL, decoded.reason or "malformed")
            logger.debug(
                "Dropping malformed stream frame",
                extra={"reason": decoded.reason, "bytes": len(data)},
            )
            return None
        if decoded.kind is None or not decoded.kind.is_data:
            registry.record_decode_error(_CHANNEL, "not_data_item")
            logger.debug("Dropping control frame on stream channel", extra={"bytes": len(data)})
            return None

        samples = NetSdrProtocol.extract_samples(self.sample_bits, decoded.body)
        if self._sample_width == self._sink_width:
            # Same byte width: wrap-around narrowing leaves the bytes unchanged
            return decoded.body[: len(samples) * self._sink_width]

        mask = self._sink_mask
        width = self._sink_width
        return b"".join((sample & mask).to_bytes(width, "little") for sample in samples)

    async def start(self) -> None:
        """Start the worker task (idempotent)."""
        if self._worker_task is not None and not self._worker_task.done():
            return
        self._worker_task = asyncio.create_task(self._run())
        logger.debug(
            "Sample worker started",
            extra={"sample_bits": self.sample_bits, "sink_sample_bits": self.sink_sample_bits},
        )

    async def stop(self) -> None:
        """Drain queued frames, then stop the worker task (idempotent)."""
        task = self._worker_task
        if task is None:
            return
        if not task.done():
            await self._queue.join()
            _ = task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._worker_task = None
        logger.debug("Sample worker stopped")

    @property
    def is_running(self) -> bool:
        return self._worker_task is not None and not self._worker_task.done()

    @property
    def pending_frames(self) -> int:
        return self._queue.qsize()

    async def _run(self) -> None:
        while True:
            data = await self._queue.get()
            try:
                await self._write_frame(data)
            except OSError as e:
                logger.exception(
                    "Sample sink append failed",
                    extra={"error": str(e), "error_type": type(e).__name__},
                )
            except Exception as e:
                logger.exception(
                    "Unexpected error in sample worker",
                    extra={"error": str(e), "error_type": type(e).__name__},
                )
            finally:
                self._queue.task_done()

    async def _write_frame(self, data: bytes) -> None:
        payload = self.convert_frame(data)
        if not payload:
            return
        await asyncio.to_thread(self.sink.append, payload)
        registry.record_samples_written(len(payload) // self._sink_width)
