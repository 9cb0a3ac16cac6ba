"""NetSDR message kind and control item definitions.

Frame layout overview:
- Bytes 0-1: header (little-endian u16). Bits 15-13 carry the message kind,
  bits 12-0 the total frame length including the header (0 = sentinel for
  oversized data frames).
- Control frames: bytes 2-3 control item code, then parameters.
- Data frames: bytes 2-3 sequence number, then sample payload.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import overload

from netsdr_client.protocol.exceptions import FrameDecodeError


class MessageKind(IntEnum):
    """Three-bit message kind tag from the frame header."""

    # Control family
    SET_CONTROL_ITEM = 0  # Host → Target: set item / Target → Host: response
    CURRENT_CONTROL_ITEM = 1  # Host → Target: request current value
    CONTROL_ITEM_RANGE = 2  # Host → Target: request item range
    ACK = 3  # Data item acknowledgement

    # Data family
    DATA_ITEM_0 = 4
    DATA_ITEM_1 = 5
    DATA_ITEM_2 = 6
    DATA_ITEM_3 = 7

    @property
    def is_control(self) -> bool:
        """Whether frames of this kind carry a control item code."""
        return self < MessageKind.DATA_ITEM_0

    @property
    def is_data(self) -> bool:
        """Whether frames of this kind carry a sequence number and samples."""
        return self >= MessageKind.DATA_ITEM_0


class ControlItemCode(IntEnum):
    """Recognised 16-bit control item codes."""

    TARGET_NAME = 0x0001
    SERIAL_NUMBER = 0x0002
    INTERFACE_VERSION = 0x0003
    HARDWARE_FIRMWARE_VERSION = 0x0004
    STATUS = 0x0005
    RECEIVER_STATE = 0x0018
    RECEIVER_FREQUENCY = 0x0020
    RF_GAIN = 0x0038
    RF_FILTER = 0x0044
    AD_MODES = 0x008A
    IQ_OUTPUT_SAMPLE_RATE = 0x00B8
    DATA_OUTPUT_PACKET_SIZE = 0x00C4


@dataclass(frozen=True)
class DecodedFrame:
    """Result of decoding one NetSDR frame.

    Decoding never raises for malformed input. ``ok`` is False when any
    structural check failed and ``reason`` names the first failure; the other
    fields still hold whatever could be parsed.

    Attributes:
        kind: Message kind from the header (None if fewer than 2 bytes)
        code: Control item code (None for data frames or unknown codes)
        sequence_number: Data frame sequence number (0 for control frames)
        body: Bytes after the code / sequence number field
        ok: Whether every structural check passed
        reason: First failure reason, None when ok
        length_field: Raw 13-bit length field from the header

    """

    kind: MessageKind | None
    code: ControlItemCode | None
    sequence_number: int
    body: bytes
    ok: bool
    reason: str | None = None
    length_field: int = 0

    @property
    def is_sentinel_length(self) -> bool:
        """Whether the header used the 0 length sentinel."""
        return self.kind is not None and self.length_field == 0

    def raise_for_error(self, raw: bytes = b"") -> DecodedFrame:
        """Return self when ok, raise FrameDecodeError otherwise."""
        if not self.ok:
            raise FrameDecodeError(self.reason or "malformed", raw)
        return self


class SampleSequence(Sequence[int]):
    """Lazy, restartable view of signed samples packed in a frame body.

    Each sample is ``byte_width`` little-endian bytes, sign-extended from the
    top bit of its byte group. A trailing group shorter than ``byte_width``
    is not part of the sequence.
    """

    def __init__(self, body: bytes, byte_width: int):
        self._body = memoryview(bytes(body))
        self.byte_width = byte_width
        self._count = len(self._body) // byte_width

    def __len__(self) -> int:
        return self._count

    @overload
    def __getitem__(self, index: int) -> int: ...

    @overload
    def __getitem__(self, index: slice) -> list[int]: ...

    def __getitem__(self, index: int | slice) -> int | list[int]:
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(self._count))]
        if index < 0:
            index += self._count
        if not 0 <= index < self._count:
            raise IndexError("sample index out of range")
        start = index * self.byte_width
        return int.from_bytes(self._body[start : start + self.byte_width], "little", signed=True)

    def __iter__(self) -> Iterator[int]:
        width = self.byte_width
        body = self._body
        for start in range(0, self._count * width, width):
            yield int.from_bytes(body[start : start + width], "little", signed=True)

    def __repr__(self) -> str:
        return f"SampleSequence(count={self._count}, byte_width={self.byte_width})"
