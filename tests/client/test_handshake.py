"""Tests for the gpsd handshake state machine."""

import io
import itertools
import json
from unittest.mock import MagicMock

import pytest

from gpsd_proto import (
    ENABLE_WATCH_CMD,
    DecodeError,
    GpsdIOError,
    Handshake,
    HandshakeState,
    UnexpectedReply,
    UnsupportedProtocolVersion,
    Watch,
    WatchNegotiationFailed,
    handshake,
)
from gpsd_proto.client import watch_accepted

# ---------------------------------------------------------------------------
# gpsd JSON lines
# ---------------------------------------------------------------------------

_VERSION = (
    b'{"class":"VERSION","release":"3.25","rev":"3.25",'
    b'"proto_major":3,"proto_minor":15}\r\n'
)
_OLD_VERSION = (
    b'{"class":"VERSION","release":"2.96","rev":"2.96",'
    b'"proto_major":2,"proto_minor":0}\r\n'
)
_DEVICES = (
    b'{"class":"DEVICES","devices":[{"class":"DEVICE","path":"/dev/ttyACM0",'
    b'"activated":"2024-01-10T11:36:48.480Z"}]}\r\n'
)
_WATCH = b'{"class":"WATCH","enable":true,"json":true,"nmea":false,"raw":0}\r\n'


def _watch_line(**flags: bool) -> bytes:
    return (json.dumps({"class": "WATCH", **flags}) + "\r\n").encode()


def _streams(*lines: bytes) -> tuple[io.BytesIO, io.BytesIO]:
    return io.BytesIO(b"".join(lines)), io.BytesIO()


# ---------------------------------------------------------------------------
# Successful exchange
# ---------------------------------------------------------------------------


class TestHandshakeSuccess:
    def test_returns_handshake_messages(self):
        reader, writer = _streams(_VERSION, _DEVICES, _WATCH)
        result = handshake(reader, writer)
        assert result.version.release == "3.25"
        assert result.version.proto_major == 3
        assert result.devices.devices[0].path == "/dev/ttyACM0"
        assert result.watch == Watch(enable=True, json=True, nmea=False, raw=0)

    def test_writes_exactly_the_watch_command(self):
        reader, writer = _streams(_VERSION, _DEVICES, _WATCH)
        handshake(reader, writer)
        assert writer.getvalue() == b'?WATCH={"enable":true,"json":true};\r\n'
        assert writer.getvalue() == ENABLE_WATCH_CMD

    def test_leaves_payload_lines_unread(self):
        tpv = b'{"class":"TPV","mode":3}\n'
        reader, writer = _streams(_VERSION, _DEVICES, _WATCH, tpv)
        handshake(reader, writer)
        assert reader.readline() == tpv

    def test_accepts_newer_protocol_major(self):
        version = _VERSION.replace(b'"proto_major":3', b'"proto_major":4')
        reader, writer = _streams(version, _DEVICES, _WATCH)
        assert handshake(reader, writer).version.proto_major == 4

    def test_state_is_complete(self):
        reader, writer = _streams(_VERSION, _DEVICES, _WATCH)
        machine = Handshake(reader, writer)
        assert machine.state is HandshakeState.START
        machine.run()
        assert machine.state is HandshakeState.COMPLETE

    def test_cannot_run_twice(self):
        reader, writer = _streams(_VERSION, _DEVICES, _WATCH)
        machine = Handshake(reader, writer)
        machine.run()
        with pytest.raises(RuntimeError, match="complete"):
            machine.run()

    def test_on_line_sees_every_handshake_line(self):
        seen = []
        reader, writer = _streams(_VERSION, _DEVICES, _WATCH)
        handshake(reader, writer, on_line=lambda raw, outcome: seen.append((raw, outcome)))
        assert [raw for raw, _ in seen] == [_VERSION, _DEVICES, _WATCH]
        assert seen[2][1] == Watch(enable=True, json=True, nmea=False, raw=0)


# ---------------------------------------------------------------------------
# Refused exchanges
# ---------------------------------------------------------------------------


class TestHandshakeFailure:
    def test_old_protocol_is_rejected_before_writing(self):
        reader, writer = _streams(_OLD_VERSION, _DEVICES, _WATCH)
        with pytest.raises(UnsupportedProtocolVersion) as exc_info:
            handshake(reader, writer)
        assert exc_info.value.version.proto_major == 2
        assert exc_info.value.minimum == 3
        assert writer.getvalue() == b""

    def test_devices_before_version_is_unexpected(self):
        reader, writer = _streams(_DEVICES, _VERSION, _WATCH)
        with pytest.raises(UnexpectedReply) as exc_info:
            handshake(reader, writer)
        assert exc_info.value.expected == "VERSION"
        assert "DEVICES" in exc_info.value.raw
        assert writer.getvalue() == b""

    def test_watch_before_devices_is_unexpected(self):
        reader, writer = _streams(_VERSION, _WATCH, _DEVICES)
        with pytest.raises(UnexpectedReply) as exc_info:
            handshake(reader, writer)
        assert exc_info.value.expected == "DEVICES"
        assert writer.getvalue() == ENABLE_WATCH_CMD

    def test_invalid_json_is_a_decode_error(self):
        reader, writer = _streams(b'{"class":broken\r\n')
        with pytest.raises(DecodeError, match="invalid JSON"):
            handshake(reader, writer)
        assert writer.getvalue() == b""

    def test_payload_class_is_a_decode_error(self):
        reader, writer = _streams(b'{"class":"TPV","mode":3}\r\n')
        with pytest.raises(DecodeError) as exc_info:
            handshake(reader, writer)
        assert exc_info.value.field == "class"

    def test_on_line_sees_decode_error(self):
        seen = []
        reader, writer = _streams(b"garbage\n")
        with pytest.raises(DecodeError):
            handshake(reader, writer, on_line=lambda raw, outcome: seen.append(outcome))
        assert len(seen) == 1
        assert isinstance(seen[0], DecodeError)

    def test_stream_ending_early_is_an_io_error(self):
        reader, writer = _streams(_VERSION, _DEVICES)
        with pytest.raises(GpsdIOError, match="ended"):
            handshake(reader, writer)

    def test_io_error_is_an_eof_error(self):
        reader, writer = _streams()
        with pytest.raises(EOFError):
            handshake(reader, writer)

    def test_write_failure_is_an_io_error(self):
        reader, _ = _streams(_VERSION, _DEVICES, _WATCH)
        writer = MagicMock()
        writer.write.side_effect = OSError("broken pipe")
        with pytest.raises(GpsdIOError) as exc_info:
            handshake(reader, writer)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_flush_failure_is_an_io_error(self):
        reader, _ = _streams(_VERSION, _DEVICES, _WATCH)
        writer = MagicMock()
        writer.flush.side_effect = OSError("broken pipe")
        with pytest.raises(GpsdIOError):
            handshake(reader, writer)
        writer.write.assert_called_once_with(ENABLE_WATCH_CMD)

    def test_read_failure_is_an_io_error(self):
        reader = MagicMock()
        reader.readline.side_effect = OSError("reset by peer")
        with pytest.raises(GpsdIOError, match="reset by peer"):
            handshake(reader, io.BytesIO())

    def test_failed_state_is_terminal(self):
        reader, writer = _streams(_OLD_VERSION)
        machine = Handshake(reader, writer)
        with pytest.raises(UnsupportedProtocolVersion):
            machine.run()
        assert machine.state is HandshakeState.FAILED
        with pytest.raises(RuntimeError):
            machine.run()


# ---------------------------------------------------------------------------
# Watch acknowledgment
# ---------------------------------------------------------------------------


class TestWatchAck:
    @pytest.mark.parametrize(
        ("enable", "json_flag", "nmea"),
        list(itertools.product([False, True], repeat=3)),
    )
    def test_truth_table(self, enable, json_flag, nmea):
        reader, writer = _streams(
            _VERSION, _DEVICES, _watch_line(enable=enable, json=json_flag, nmea=nmea)
        )
        if (enable, json_flag, nmea) == (False, False, True):
            with pytest.raises(WatchNegotiationFailed):
                handshake(reader, writer)
        else:
            result = handshake(reader, writer)
            assert result.watch.nmea is nmea

    def test_all_flags_absent_is_accepted(self):
        reader, writer = _streams(_VERSION, _DEVICES, _watch_line())
        assert handshake(reader, writer).watch == Watch()

    def test_nmea_only_is_rejected(self):
        reader, writer = _streams(_VERSION, _DEVICES, _watch_line(nmea=True))
        with pytest.raises(WatchNegotiationFailed) as exc_info:
            handshake(reader, writer)
        assert '"nmea": true' in exc_info.value.raw

    def test_watch_accepted_treats_missing_as_false(self):
        assert watch_accepted(Watch())
        assert watch_accepted(Watch(enable=True, nmea=True))
        assert not watch_accepted(Watch(nmea=True))
