"""NetSDR protocol encoder/decoder implementation.

This module implements header packing, control and data frame encoding,
frame decoding, sample extraction, and the control item argument formats
used by the session layer.
"""

from __future__ import annotations

import logging
import struct

from netsdr_client.protocol.exceptions import (
    FrameDecodeError,
    LengthExceededError,
    SampleWidthError,
)
from netsdr_client.protocol.message_types import (
    ControlItemCode,
    DecodedFrame,
    MessageKind,
    SampleSequence,
)

# Protocol constants
HEADER_LENGTH = 2
CONTROL_ITEM_LENGTH = 2
SEQUENCE_NUMBER_LENGTH = 2
MAX_FRAME_LENGTH = 0x1FFF  # 13-bit length field (8191)
STREAM_DATA_FRAME_LENGTH = 8194  # Data item size implied by the 0 sentinel on TCP
SENTINEL_LENGTH = 0
KIND_SHIFT = 13
MAX_SAMPLE_BITS = 32
MAX_FREQUENCY_HZ = (1 << 40) - 1  # 5-byte frequency field
FREQUENCY_FIELD_LENGTH = 5

# Receiver state arguments: [data type, run/idle, capture mode, count]
RECEIVER_STATE_RUN = bytes([0x80, 0x02, 0x01, 0x01])
RECEIVER_STATE_IDLE = bytes([0x00, 0x01, 0x00, 0x00])

_HEADER = struct.Struct("<H")

logger = logging.getLogger(__name__)


class NetSdrProtocol:
    """NetSDR protocol encoder/decoder.

    Provides static methods for encoding and decoding NetSDR frames.
    All methods are stateless - no instance state maintained.
    """

    @staticmethod
    def encode_header(kind: MessageKind, length_with_header: int) -> bytes:
        """Encode 2-byte header.

        Header value = length_with_header | (kind << 13), little-endian.

        Args:
            kind: Message kind tag
            length_with_header: Total frame length including the header, or 0
                for the data frame sentinel

        Returns:
            2-byte header

        Raises:
            LengthExceededError: If length does not fit in 13 bits

        Example:
            >>> NetSdrProtocol.encode_header(MessageKind.SET_CONTROL_ITEM, 8).hex()
            '0800'
            >>> NetSdrProtocol.encode_header(MessageKind.DATA_ITEM_0, 0).hex()
            '0080'

        """
        if length_with_header < 0 or length_with_header > MAX_FRAME_LENGTH:
            raise LengthExceededError(length_with_header, MAX_FRAME_LENGTH)
        return _HEADER.pack(length_with_header | (int(kind) << KIND_SHIFT))

    @staticmethod
    def parse_header(data: bytes) -> tuple[MessageKind, int]:
        """Parse 2-byte header and return (kind, length_field).

        Raises:
            FrameDecodeError: If data is shorter than the header

        """
        if len(data) < HEADER_LENGTH:
            error_reason = "too_short"
            raise FrameDecodeError(error_reason, data)

        (value,) = _HEADER.unpack_from(data)
        return MessageKind(value >> KIND_SHIFT), value & MAX_FRAME_LENGTH

    @staticmethod
    def encode_control_frame(kind: MessageKind, code: ControlItemCode, body: bytes = b"") -> bytes:
        """Encode a control frame: header + item code + body.

        Args:
            kind: Control-family message kind
            code: Control item code
            body: Item parameters

        Returns:
            Complete control frame

        Raises:
            ValueError: If kind is a data-family kind
            LengthExceededError: If 4 + len(body) exceeds 8191

        """
        if not kind.is_control:
            error_msg = f"{kind.name} is not a control message kind"
            raise ValueError(error_msg)

        length_with_header = HEADER_LENGTH + CONTROL_ITEM_LENGTH + len(body)
        if length_with_header > MAX_FRAME_LENGTH:
            raise LengthExceededError(length_with_header, MAX_FRAME_LENGTH)

        frame = bytearray(NetSdrProtocol.encode_header(kind, length_with_header))
        frame.extend(struct.pack("<H", int(code)))
        frame.extend(body)

        logger.debug(
            "Encoded control frame: kind=%s, code=0x%04x, length=%d",
            kind.name,
            int(code),
            length_with_header,
        )
        return bytes(frame)

    @staticmethod
    def encode_data_frame(kind: MessageKind, body: bytes) -> bytes:
        """Encode a data frame: header + body.

        ``body`` already starts with the 2-byte sequence number. Frames longer
        than 8191 bytes get the 0 length sentinel; their true length is the
        size of the datagram that carries them.

        Raises:
            ValueError: If kind is a control-family kind

        """
        if not kind.is_data:
            error_msg = f"{kind.name} is not a data message kind"
            raise ValueError(error_msg)

        length_with_header = HEADER_LENGTH + len(body)
        length_field = length_with_header if length_with_header <= MAX_FRAME_LENGTH else SENTINEL_LENGTH

        logger.debug(
            "Encoded data frame: kind=%s, length=%d, sentinel=%s",
            kind.name,
            length_with_header,
            length_field == SENTINEL_LENGTH,
        )
        return NetSdrProtocol.encode_header(kind, length_field) + bytes(body)

    @staticmethod
    def encode_data_item(kind: MessageKind, sequence_number: int, payload: bytes) -> bytes:
        """Encode a data frame from a sequence number and sample payload."""
        return NetSdrProtocol.encode_data_frame(
            kind,
            struct.pack("<H", sequence_number & 0xFFFF) + bytes(payload),
        )

    @staticmethod
    def decode_frame(data: bytes) -> DecodedFrame:
        """Decode any NetSDR frame.

        Steps:
        1. Require the 2-byte header
        2. Check the length field against the received size (0 = sentinel,
           only valid for data frames)
        3. Control frames: read and validate the item code
        4. Data frames: read the sequence number
        5. Report ok only when every check passed

        Malformed input never raises; see ``DecodedFrame.ok`` and ``reason``.

        Example:
            >>> frame = NetSdrProtocol.encode_control_frame(
            ...     MessageKind.SET_CONTROL_ITEM, ControlItemCode.RECEIVER_STATE, b"\\x01")
            >>> decoded = NetSdrProtocol.decode_frame(frame)
            >>> decoded.ok, decoded.code == ControlItemCode.RECEIVER_STATE, decoded.body
            (True, True, b'\\x01')

        """
        data = bytes(data)
        if len(data) < HEADER_LENGTH:
            return DecodedFrame(
                kind=None,
                code=None,
                sequence_number=0,
                body=b"",
                ok=False,
                reason="too_short",
            )

        kind, length_field = NetSdrProtocol.parse_header(data)
        reason: str | None = None

        if length_field == SENTINEL_LENGTH:
            if kind.is_control:
                reason = "invalid_length"
        elif length_field != len(data):
            reason = "length_mismatch"

        if len(data) < HEADER_LENGTH + CONTROL_ITEM_LENGTH:
            logger.debug("Frame too short: kind=%s, bytes=%d", kind.name, len(data))
            return DecodedFrame(
                kind=kind,
                code=None,
                sequence_number=0,
                body=data[HEADER_LENGTH:],
                ok=False,
                reason=reason or "too_short",
                length_field=length_field,
            )

        (field,) = struct.unpack_from("<H", data, HEADER_LENGTH)
        body = data[HEADER_LENGTH + 2 :]

        code: ControlItemCode | None = None
        sequence_number = 0
        if kind.is_control:
            try:
                code = ControlItemCode(field)
            except ValueError:
                reason = reason or "unknown_control_item"
        else:
            sequence_number = field

        if reason is not None:
            logger.debug(
                "Frame decode failed: kind=%s, reason=%s, bytes=%d",
                kind.name,
                reason,
                len(data),
            )

        return DecodedFrame(
            kind=kind,
            code=code,
            sequence_number=sequence_number,
            body=body,
            ok=reason is None,
            reason=reason,
            length_field=length_field,
        )

    @staticmethod
    def extract_samples(sample_bits: int, body: bytes) -> SampleSequence:
        """Return the signed samples packed in a data frame body.

        Byte width is ceil(sample_bits / 8); each byte group is read
        little-endian and sign-extended from its top bit.

        Raises:
            SampleWidthError: If sample_bits is outside 1..32

        Example:
            >>> list(NetSdrProtocol.extract_samples(16, bytes([0x01, 0x00, 0xFF, 0xFF])))
            [1, -1]

        """
        if sample_bits < 1 or sample_bits > MAX_SAMPLE_BITS:
            raise SampleWidthError(sample_bits)
        return SampleSequence(body, (sample_bits + 7) // 8)

    @staticmethod
    def receiver_state_args(*, run: bool) -> bytes:
        """Return receiver state parameters for run or idle."""
        return RECEIVER_STATE_RUN if run else RECEIVER_STATE_IDLE

    @staticmethod
    def frequency_args(hz: int, channel: int) -> bytes:
        """Encode receiver frequency parameters: channel (1 byte) + hz (5 bytes LE).

        Raises:
            ValueError: If channel or hz does not fit its field

        """
        if not 0 <= channel <= 0xFF:
            error_msg = f"Channel must fit in one byte, got {channel}"
            raise ValueError(error_msg)
        if not 0 <= hz <= MAX_FREQUENCY_HZ:
            error_msg = f"Frequency must fit in {FREQUENCY_FIELD_LENGTH} bytes, got {hz}"
            raise ValueError(error_msg)
        return bytes([channel]) + hz.to_bytes(FREQUENCY_FIELD_LENGTH, "little")

    @staticmethod
    def decode_frequency_args(body: bytes) -> tuple[int, int]:
        """Decode receiver frequency parameters into (channel, hz).

        Raises:
            FrameDecodeError: If body is shorter than 6 bytes

        """
        if len(body) < 1 + FREQUENCY_FIELD_LENGTH:
            error_reason = "too_short"
            raise FrameDecodeError(error_reason, body)
        return body[0], int.from_bytes(body[1 : 1 + FREQUENCY_FIELD_LENGTH], "little")

    @staticmethod
    def sample_rate_args(rate_hz: int) -> bytes:
        """Encode IQ output sample rate parameters (5 bytes LE)."""
        return rate_hz.to_bytes(5, "little")

    @staticmethod
    def rf_filter_args(mode: int) -> bytes:
        """Encode RF filter mode parameters (2 bytes LE, 0 = automatic)."""
        return struct.pack("<H", mode)
