"""NetSDR protocol package - frame encoding, decoding, and stream framing.

Public API:
- Message kind and control item enums (MessageKind, ControlItemCode)
- Decode result and sample view (DecodedFrame, SampleSequence)
- Protocol encoder/decoder (NetSdrProtocol)
- TCP stream framing (FrameAssembler)
"""

from netsdr_client.protocol.exceptions import (
    FrameAssemblyError,
    FrameDecodeError,
    LengthExceededError,
    NetSdrProtocolError,
    SampleWidthError,
)
from netsdr_client.protocol.frame_assembler import FrameAssembler
from netsdr_client.protocol.message_types import (
    ControlItemCode,
    DecodedFrame,
    MessageKind,
    SampleSequence,
)
from netsdr_client.protocol.netsdr_protocol import MAX_FRAME_LENGTH, NetSdrProtocol

__all__ = [
    # Protocol encoder/decoder
    "NetSdrProtocol",
    "FrameAssembler",
    "MAX_FRAME_LENGTH",
    # Enums and results
    "MessageKind",
    "ControlItemCode",
    "DecodedFrame",
    "SampleSequence",
    # Exceptions
    "NetSdrProtocolError",
    "LengthExceededError",
    "FrameDecodeError",
    "FrameAssemblyError",
    "SampleWidthError",
]
