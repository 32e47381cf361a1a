"""Tests for line reading and GpsdStream."""

import io
from unittest.mock import MagicMock

import pytest

from gpsd_proto import (
    DecodeError,
    GpsdIOError,
    GpsdStream,
    Mode,
    Sky,
    Tpv,
    get_data,
    read_line,
)

_VERSION = (
    b'{"class":"VERSION","release":"3.25","rev":"3.25",'
    b'"proto_major":3,"proto_minor":15}\r\n'
)
_DEVICES = b'{"class":"DEVICES","devices":[]}\r\n'
_WATCH = b'{"class":"WATCH","enable":true,"json":true}\r\n'
_TPV = b'{"class":"TPV","mode":3,"lat":66.123}\r\n'
_SKY = b'{"class":"SKY","hdop":0.9}\r\n'


class TestReadLine:
    def test_returns_raw_line(self):
        assert read_line(io.BytesIO(_TPV + _SKY)) == _TPV

    def test_end_of_stream(self):
        with pytest.raises(GpsdIOError, match="ended"):
            read_line(io.BytesIO())

    def test_os_error_is_chained(self):
        reader = MagicMock()
        reader.readline.side_effect = TimeoutError("timed out")
        with pytest.raises(GpsdIOError) as exc_info:
            read_line(reader)
        assert isinstance(exc_info.value.__cause__, TimeoutError)


class TestGetData:
    def test_reads_one_message(self):
        reader = io.BytesIO(_TPV + _SKY)
        assert get_data(reader) == Tpv(mode=Mode.FIX_3D, lat=66.123)
        assert get_data(reader) == Sky(hdop=0.9)

    def test_stream_survives_decode_error(self):
        reader = io.BytesIO(b'{"class":broken\n' + _TPV)
        with pytest.raises(DecodeError):
            get_data(reader)
        assert get_data(reader).lat == pytest.approx(66.123)

    def test_stream_survives_hostile_json(self):
        oversized = b'{"class":"TPV","mode":3,"lat":' + b"1" * 5000 + b"}\n"
        nested = b"[" * 100000 + b"\n"
        reader = io.BytesIO(oversized + nested + _TPV)
        with pytest.raises(DecodeError):
            get_data(reader)
        with pytest.raises(DecodeError):
            get_data(reader)
        assert get_data(reader).lat == pytest.approx(66.123)

    def test_handshake_class_after_handshake_is_rejected(self):
        with pytest.raises(DecodeError):
            get_data(io.BytesIO(_VERSION))

    def test_on_line_receives_raw_and_message(self):
        hook = MagicMock()
        message = get_data(io.BytesIO(_TPV), on_line=hook)
        hook.assert_called_once_with(_TPV, message)

    def test_on_line_receives_decode_error(self):
        hook = MagicMock()
        with pytest.raises(DecodeError) as exc_info:
            get_data(io.BytesIO(b"garbage\n"), on_line=hook)
        hook.assert_called_once_with(b"garbage\n", exc_info.value)


class TestGpsdStream:
    def _open(self, *lines: bytes, **kwargs) -> GpsdStream:
        stream = GpsdStream(
            io.BytesIO(_VERSION + _DEVICES + _WATCH + b"".join(lines)),
            io.BytesIO(),
            **kwargs,
        )
        stream.open()
        return stream

    def test_read_before_open_raises(self):
        stream = GpsdStream(io.BytesIO(_TPV), io.BytesIO())
        with pytest.raises(RuntimeError, match="opened"):
            stream.read()

    def test_open_twice_raises(self):
        stream = self._open()
        with pytest.raises(RuntimeError, match="already open"):
            stream.open()

    def test_session_holds_handshake(self):
        stream = self._open()
        assert stream.session.version.release == "3.25"
        assert stream.session.devices.devices == ()

    def test_iteration_skips_invalid_lines(self):
        stream = self._open(_TPV, b"not-json\n", b'{"class":"TPV","mode":"x"}\n', _SKY)
        messages = []
        with pytest.raises(GpsdIOError):
            for message in stream:
                messages.append(message)
        assert messages == [Tpv(mode=Mode.FIX_3D, lat=66.123), Sky(hdop=0.9)]

    def test_iteration_skips_hostile_json(self):
        oversized = b'{"class":"TPV","mode":3,"lat":' + b"1" * 5000 + b"}\n"
        stream = self._open(oversized, _TPV)
        assert next(iter(stream)) == Tpv(mode=Mode.FIX_3D, lat=66.123)

    def test_iteration_raises_when_not_skipping(self):
        stream = self._open(_TPV, b"not-json\n", _SKY, skip_invalid=False)
        iterator = iter(stream)
        assert next(iterator).mode is Mode.FIX_3D
        with pytest.raises(DecodeError):
            next(iterator)
