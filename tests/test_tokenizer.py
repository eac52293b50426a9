"""
Tests for traffic line tokenization.
"""

import pytest

from cectraffic.parser.tokenizer import Packet, TrafficTokenizer


@pytest.fixture
def tokenizer():
    return TrafficTokenizer()


class TestTrafficTokenizer:
    """Test packet extraction from traffic lines."""

    def test_full_frame(self, tokenizer):
        packet = tokenizer.parse_line("TRAFFIC: [          3475]\t>> 04:82:10:00")

        assert packet.tokens == ["04", "82", "10", "00"]
        # Header nibbles stay characters
        assert packet.source == "0"
        assert packet.target == "4"
        assert packet.opcode == 0x82
        assert packet.args == [16, 0]
        assert not packet.is_polling

    def test_opcode_without_arguments(self, tokenizer):
        packet = tokenizer.parse_line("TRAFFIC: [  12]\t<< 01:36")

        assert packet.tokens == ["01", "36"]
        assert packet.opcode == 0x36
        assert packet.args == []

    def test_polling_frame(self, tokenizer):
        packet = tokenizer.parse_line("TRAFFIC: [  12]\t<< 10")

        assert packet.tokens == ["10"]
        assert packet.source == "1"
        assert packet.target == "0"
        assert packet.opcode is None
        assert packet.args is None
        assert packet.is_polling

    def test_empty_command_region(self, tokenizer):
        packet = tokenizer.parse_line("TRAFFIC: [  12]\t>> ")

        assert packet.tokens == [""]
        assert packet.source is None
        assert packet.target is None
        assert packet.is_polling

    def test_uppercase_hex(self, tokenizer):
        packet = tokenizer.parse_line("TRAFFIC: [  1]\t>> 4F:84:1A:FF")
        assert packet.source == "4"
        assert packet.target == "F"
        assert packet.opcode == 0x84
        assert packet.args == [0x1A, 0xFF]

    def test_undecodable_tokens(self, tokenizer):
        packet = tokenizer.parse_line("TRAFFIC: [  1]\t>> 0f:zz:10:q1")

        assert packet.opcode is None
        assert packet.args == [0x10, None]
        assert tokenizer.get_stats()["errors"] == 2

    @pytest.mark.parametrize("token", ["ffffff", "-1", "100", "0x1", " 1", ""])
    def test_tokens_wider_than_a_byte_are_undefined(self, tokenizer, token):
        packet = tokenizer.parse_line(f"TRAFFIC: [  1]\t>> 40:47:48:{token}")

        assert packet.opcode == 0x47
        assert packet.args == [0x48, None]

    def test_missing_marker_starts_after_first_character(self, tokenizer):
        # Region becomes "> 0f:36", the direction marker is then dropped
        packet = tokenizer.parse_line(">> 0f:36")
        assert packet.tokens == ["0f", "36"]
        assert packet.opcode == 0x36

    def test_missing_direction_marker(self, tokenizer):
        packet = tokenizer.parse_line("TRAFFIC: [  1]\t0f:36")
        assert packet.tokens == ["0f", "36"]

    def test_stats(self, tokenizer):
        tokenizer.parse_line("TRAFFIC: [  1]\t>> 0f:36")
        tokenizer.parse_line("TRAFFIC: [  2]\t>> 0f:36")
        stats = tokenizer.get_stats()
        assert stats["lines_processed"] == 2
        assert stats["errors"] == 0

    def test_packet_to_dict(self):
        packet = Packet(tokens=["01", "36"], source="0", target="1", opcode=0x36, args=[])
        assert packet.to_dict() == {
            "tokens": ["01", "36"],
            "source": "0",
            "target": "1",
            "opcode": 0x36,
            "args": [],
        }
