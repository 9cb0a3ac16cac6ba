"""Unit tests for message kinds, DecodedFrame, and SampleSequence."""

from __future__ import annotations

import pytest

from netsdr_client.protocol import ControlItemCode, DecodedFrame, MessageKind, SampleSequence

CONTROL_KINDS = [MessageKind.SET_CONTROL_ITEM, MessageKind.CURRENT_CONTROL_ITEM, MessageKind.CONTROL_ITEM_RANGE, MessageKind.ACK]
DATA_KINDS = [MessageKind.DATA_ITEM_0, MessageKind.DATA_ITEM_1, MessageKind.DATA_ITEM_2, MessageKind.DATA_ITEM_3]


class TestMessageKind:
    def test_kind_tags_are_three_bits(self) -> None:
        assert [int(kind) for kind in MessageKind] == list(range(8))

    @pytest.mark.parametrize("kind", CONTROL_KINDS)
    def test_control_family(self, kind: MessageKind) -> None:
        assert kind.is_control is True
        assert kind.is_data is False

    @pytest.mark.parametrize("kind", DATA_KINDS)
    def test_data_family(self, kind: MessageKind) -> None:
        assert kind.is_data is True
        assert kind.is_control is False


class TestControlItemCode:
    def test_known_codes(self) -> None:
        assert ControlItemCode(0x0018) is ControlItemCode.RECEIVER_STATE
        assert ControlItemCode(0x0020) is ControlItemCode.RECEIVER_FREQUENCY
        assert ControlItemCode(0x00B8) is ControlItemCode.IQ_OUTPUT_SAMPLE_RATE

    def test_zero_is_not_a_code(self) -> None:
        with pytest.raises(ValueError):
            _ = ControlItemCode(0)


class TestDecodedFrame:
    def test_raise_for_error_returns_self_when_ok(self) -> None:
        frame = DecodedFrame(MessageKind.ACK, ControlItemCode.STATUS, 0, b"", ok=True)
        assert frame.raise_for_error() is frame

    def test_sentinel_requires_kind(self) -> None:
        frame = DecodedFrame(None, None, 0, b"", ok=False, reason="too_short")
        assert frame.is_sentinel_length is False

    def test_frozen(self) -> None:
        frame = DecodedFrame(MessageKind.ACK, None, 0, b"", ok=True)
        with pytest.raises(AttributeError):
            frame.ok = False  # type: ignore[misc]


class TestSampleSequence:
    def test_indexing(self) -> None:
        samples = SampleSequence(bytes([0x01, 0x00, 0xFE, 0xFF, 0x03, 0x00]), 2)
        assert samples[0] == 1
        assert samples[1] == -2
        assert samples[-1] == 3

    def test_slice(self) -> None:
        samples = SampleSequence(bytes([1, 2, 3, 4]), 1)
        assert samples[1:3] == [2, 3]
        assert samples[::-1] == [4, 3, 2, 1]

    def test_index_out_of_range(self) -> None:
        samples = SampleSequence(bytes([1, 0]), 2)
        with pytest.raises(IndexError):
            _ = samples[1]
        with pytest.raises(IndexError):
            _ = samples[-2]

    def test_sequence_protocol_helpers(self) -> None:
        samples = SampleSequence(bytes([5, 6, 5]), 1)
        assert 6 in samples
        assert samples.count(5) == 2
        assert samples.index(6) == 1

    def test_source_buffer_is_copied(self) -> None:
        body = bytearray([1, 0])
        samples = SampleSequence(body, 2)
        body[0] = 9
        assert list(samples) == [1]

    def test_repr(self) -> None:
        assert repr(SampleSequence(b"\x00" * 6, 3)) == "SampleSequence(count=2, byte_width=3)"
