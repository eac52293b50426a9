"""
Tests for the command-line interface.
"""

import json
import logging
import pytest
from click.testing import CliRunner

from cectraffic.cli import cli, describe_event
from cectraffic.parser.events import OsdNameEvent, RoutingChangeEvent
from cectraffic.parser.tokenizer import Packet


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("CEC_EVALUATE_ALL_HANDLERS", raising=False)
    return CliRunner()


@pytest.fixture
def log_file(tmp_path, sample_adapter_lines):
    path = tmp_path / "capture.log"
    path.write_text("\n".join(sample_adapter_lines) + "\n")
    return path


class TestDecodeCommand:
    """Test replaying a captured log."""

    def test_json_with_all_handlers(self, runner, log_file):
        result = runner.invoke(cli, ["decode", str(log_file), "--format", "json", "--all-handlers"])

        assert result.exit_code == 0, result.output
        events = [json.loads(line) for line in result.output.splitlines() if line.startswith("{")]
        types = [e["event_type"] for e in events]
        assert types.count("line") == 9
        assert types.count("packet") == 7
        osd = next(e for e in events if e["event_type"] == "SET_OSD_NAME")
        assert osd["name"] == "HDMI"

    def test_json_first_handler_only(self, runner, log_file):
        result = runner.invoke(cli, ["decode", str(log_file), "--format", "json", "--chunk-size", "7"])

        assert result.exit_code == 0, result.output
        types = {json.loads(line)["event_type"] for line in result.output.splitlines() if line.startswith("{")}
        assert types == {"line", "ready"}

    def test_json_to_file(self, runner, log_file, tmp_path):
        output = tmp_path / "events.jsonl"
        result = runner.invoke(
            cli, ["decode", str(log_file), "--format", "json", "--all-handlers", "-o", str(output)]
        )

        assert result.exit_code == 0, result.output
        assert len(output.read_text().splitlines()) == 23

    def test_summary(self, runner, log_file):
        result = runner.invoke(cli, ["decode", str(log_file), "--all-handlers"])

        assert result.exit_code == 0, result.output
        assert "Decoding Complete" in result.output
        assert "STANDBY" in result.output

    def test_events_table(self, runner, log_file):
        result = runner.invoke(cli, ["decode", str(log_file), "--format", "events", "--all-handlers"])

        assert result.exit_code == 0, result.output
        assert "ROUTING_CHANGE" in result.output

    def test_config_file_enables_all_handlers(self, runner, log_file, tmp_path):
        config_file = tmp_path / "cec_config.yaml"
        config_file.write_text("evaluate_all_handlers: true\n")

        result = runner.invoke(cli, ["--config", str(config_file), "decode", str(log_file), "--format", "json"])

        assert result.exit_code == 0, result.output
        assert '"event_type": "packet"' in result.output


class TestEncodeCommand:
    """Test the transmit line helper."""

    def test_hex_values(self, runner):
        result = runner.invoke(cli, ["encode", "0x10", "0x82", "0x10", "0x00"])
        assert result.exit_code == 0
        assert result.output.strip() == "tx 10:82:10:00"

    def test_bare_values_are_hex(self, runner):
        result = runner.invoke(cli, ["encode", "4f", "10", "010", "0a"])
        assert result.exit_code == 0
        assert result.output.strip() == "tx 4f:10:10:0a"

    def test_out_of_range(self, runner):
        result = runner.invoke(cli, ["encode", "300"])
        assert result.exit_code == 2


def test_verbose_logs_configuration(runner, caplog):
    with caplog.at_level(logging.INFO):
        result = runner.invoke(cli, ["-v", "encode", "36"])

    assert result.exit_code == 0
    assert "Decoder Configuration" in caplog.text


def test_opcodes(runner):
    result = runner.invoke(cli, ["opcodes"])
    assert result.exit_code == 0
    assert "SET_OSD_NAME" in result.output


def test_describe_event():
    packet = Packet(tokens=["40", "47", "48"], source="4", target="0", opcode=0x47, args=[0x48])
    assert describe_event(OsdNameEvent(packet=packet, name="H")) == "PLAYBACK_DEVICE_1 -> TV: name 'H'"

    packet = Packet(tokens=["0f", "80"], source="0", target="f", opcode=0x80, args=[])
    event = RoutingChangeEvent(packet=packet, from_address=0x1000, to_address=0x2000)
    assert describe_event(event) == "TV -> BROADCAST: 1.0.0.0 => 2.0.0.0"
