"""Custom exception types for NetSDR protocol errors.

This module defines the exception hierarchy for codec-related errors. Frame
decoding itself reports failures through ``DecodedFrame.ok``; these types are
raised by encoders, sample extraction, and callers that want decode failures
as exceptions.
"""

from __future__ import annotations


class NetSdrProtocolError(Exception):
    """Base exception for all NetSDR protocol errors.

    All protocol and session exceptions inherit from this base class,
    enabling catch-all error handling when needed while maintaining
    specific exception types for detailed handling.
    """


class LengthExceededError(NetSdrProtocolError):
    """Encoded frame does not fit in the 13-bit header length field.

    Raised at encode time for control frames only. Data frames switch to the
    sentinel length instead.

    Attributes:
        length: Requested frame length including the header
        limit: Maximum length the header can carry
    """

    def __init__(self, length: int, limit: int):
        self.length = length
        self.limit = limit
        super().__init__(f"Frame length {length} exceeds maximum {limit}")


class FrameDecodeError(NetSdrProtocolError):
    """Frame cannot be decoded.

    Raised by ``DecodedFrame.raise_for_error()`` and ``parse_header()`` when
    a frame is too short, its length field disagrees with the received size,
    or its control item code is unknown.

    Attributes:
        reason: Specific failure reason (e.g., "too_short", "length_mismatch")
        data_preview: First 16 bytes of frame data
    """

    def __init__(self, reason: str, data: bytes = b""):
        self.reason = reason
        # Only keep a short preview so large IQ frames never end up in tracebacks
        self.data_preview = data[:16] if data else b""
        super().__init__(f"Frame decode failed: {reason}")


class FrameAssemblyError(NetSdrProtocolError):
    """TCP stream framing error.

    Attributes:
        reason: Specific failure reason (e.g., "invalid_length", "buffer_overflow")
        buffer_size: Size of buffer when error occurred
    """

    def __init__(self, reason: str, buffer_size: int = 0):
        self.reason = reason
        self.buffer_size = buffer_size
        super().__init__(f"Frame assembly failed: {reason}")


class SampleWidthError(NetSdrProtocolError):
    """Sample width is outside the supported 1-32 bit range.

    Attributes:
        sample_bits: Requested sample width in bits
    """

    def __init__(self, sample_bits: int):
        self.sample_bits = sample_bits
        super().__init__(f"Sample width must be between 1 and 32 bits, got {sample_bits}")
