"""TCP stream frame assembly with buffer overflow protection.

This module provides FrameAssembler for extracting complete NetSDR frames from
a TCP byte stream, handling partial frames, multi-frame reads, and protecting
against buffer exhaustion.
"""

from __future__ import annotations

import logging

from netsdr_client.protocol.exceptions import FrameAssemblyError
from netsdr_client.protocol.message_types import MessageKind
from netsdr_client.protocol.netsdr_protocol import (
    HEADER_LENGTH,
    KIND_SHIFT,
    MAX_FRAME_LENGTH,
    SENTINEL_LENGTH,
    STREAM_DATA_FRAME_LENGTH,
)

logger = logging.getLogger(__name__)


class FrameAssembler:
    r"""Extract complete frames from a TCP byte stream.

    TCP reads may return partial frames, multiple frames, or exact boundaries.
    FrameAssembler buffers incoming bytes and extracts complete frames based
    on the 13-bit header length field.

    Length rules:
    - Non-zero length field: frame is exactly that many bytes
    - Zero length field on a data item: frame is 8194 bytes
    - Zero length field on a control item, or a length of 1: invalid, skip the
      2 header bytes and rescan

    Recovery Loop Protection:
    - Rescans at most min(1000, max(100, buffer_size // 2)) headers before
      clearing the buffer
    - Buffer is cleared (and FrameAssemblyError raised) once it grows past
      MAX_BUFFER_SIZE

    Example:
        assembler = FrameAssembler()
        frames = assembler.feed(b'\\x05\\x00\\x18')  # partial
        assert frames == []
        frames = assembler.feed(b'\\x00\\x01')
        assert frames == [b'\\x05\\x00\\x18\\x00\\x01']

    """

    MAX_BUFFER_SIZE: int = 65536

    def __init__(self) -> None:
        """Initialize frame assembler with empty buffer."""
        self.buffer: bytearray = bytearray()

    def feed(self, data: bytes) -> list[bytes]:
        """Add data to buffer and return list of complete frames.

        Raises:
            FrameAssemblyError: If the buffer grew past MAX_BUFFER_SIZE; the
                buffer has already been cleared, so feeding may continue

        """
        self.buffer.extend(data)
        if len(self.buffer) > self.MAX_BUFFER_SIZE:
            buffer_size = len(self.buffer)
            logger.error(
                "Frame buffer overflow, clearing %d bytes",
                buffer_size,
                extra={"buffer_size": buffer_size, "max_buffer_size": self.MAX_BUFFER_SIZE},
            )
            self.buffer = bytearray()
            error_reason = "buffer_overflow"
            raise FrameAssemblyError(error_reason, buffer_size)
        return self._extract_frames()

    def reset(self) -> None:
        """Drop any buffered partial frame."""
        self.buffer = bytearray()

    @staticmethod
    def frame_length(header: bytes) -> int | None:
        """Return total frame length from a header, or None if invalid."""
        value = header[0] | (header[1] << 8)
        kind = MessageKind(value >> KIND_SHIFT)
        length_field = value & MAX_FRAME_LENGTH
        if length_field == SENTINEL_LENGTH:
            return STREAM_DATA_FRAME_LENGTH if kind.is_data else None
        if length_field < HEADER_LENGTH:
            return None
        return length_field

    def _extract_frames(self) -> list[bytes]:
        """Extract all complete frames from buffer."""
        frames: list[bytes] = []
        recovery_attempts = 0
        max_recovery_attempts = min(1000, max(100, len(self.buffer) // HEADER_LENGTH))

        while len(self.buffer) >= HEADER_LENGTH:
            if recovery_attempts > max_recovery_attempts:
                logger.error(
                    "Buffer cleared after max recovery attempts",
                    extra={
                        "max_attempts": max_recovery_attempts,
                        "buffer_size": len(self.buffer),
                    },
                )
                self.buffer = bytearray()
                break

            total_length = self.frame_length(self.buffer[:HEADER_LENGTH])
            if total_length is None:
                logger.warning(
                    "Invalid frame header 0x%s, advancing %d bytes (attempt %d/%d)",
                    self.buffer[:HEADER_LENGTH].hex(),
                    HEADER_LENGTH,
                    recovery_attempts + 1,
                    max_recovery_attempts,
                    extra={"buffer_size": len(self.buffer)},
                )
                self.buffer = self.buffer[HEADER_LENGTH:]
                recovery_attempts += 1
                continue

            recovery_attempts = 0

            if len(self.buffer) < total_length:
                # Incomplete frame, wait for more data
                break

            frames.append(bytes(self.buffer[:total_length]))
            self.buffer = self.buffer[total_length:]

        return frames
