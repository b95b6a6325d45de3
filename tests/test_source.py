"""Tests for RewindableSource and open_source."""

import io
import sys

import pytest

from flowmodel_io.core import RewindableSource, SourceError, open_source


class OneShotStream(io.RawIOBase):
    """A stream that can be read once and cannot seek, like a pipe."""

    def __init__(self, data: bytes):
        self._data = data
        self.reads = 0

    def readable(self):
        return True

    def read(self, size=-1):
        self.reads += 1
        data, self._data = self._data, b""
        if size is not None and size >= 0:
            data, self._data = data[:size], data[size:]
        return data


class TestFileSource:

    def test_every_view_starts_at_the_beginning(self, tmp_path):
        path = tmp_path / "log.xes"
        path.write_bytes(b"<log/>")
        source = RewindableSource.from_path(path)

        with source.get_fresh_view() as first:
            assert first.read(2) == b"<l"
        with source.get_fresh_view() as second:
            assert second.read() == b"<log/>"

    def test_missing_file(self, tmp_path):
        source = RewindableSource.from_path(tmp_path / "nope.xes")

        with pytest.raises(SourceError, match="nope.xes") as info:
            source.get_fresh_view()

        assert info.value.location.endswith("nope.xes")
        assert isinstance(info.value.__cause__, OSError)

    def test_location(self, tmp_path):
        assert RewindableSource.from_path(tmp_path / "a.lpn").location == str(tmp_path / "a.lpn")


class TestStdinSource:

    def test_buffers_on_first_read(self):
        stream = OneShotStream(b"a b\n")
        source = RewindableSource.from_stdin(stream)

        views = [source.get_fresh_view().read() for _ in range(3)]

        assert views == [b"a b\n"] * 3
        assert stream.reads == 1

    def test_nothing_read_before_first_view(self):
        stream = OneShotStream(b"data")
        RewindableSource.from_stdin(stream)

        assert stream.reads == 0

    def test_reads_sys_stdin_by_default(self, monkeypatch):
        fake = io.TextIOWrapper(io.BytesIO(b"from stdin"))
        monkeypatch.setattr(sys, "stdin", fake)

        source = RewindableSource.from_stdin()

        assert source.get_fresh_view().read() == b"from stdin"
        assert source.location == "standard input"

    def test_size_limit(self):
        source = RewindableSource.from_stdin(OneShotStream(b"0123456789"), max_bytes=4)

        with pytest.raises(SourceError, match="4 bytes"):
            source.get_fresh_view()

    def test_size_limit_not_reached(self):
        source = RewindableSource.from_stdin(OneShotStream(b"0123"), max_bytes=4)

        assert source.get_fresh_view().read() == b"0123"


class TestBytesSource:

    def test_views_are_independent(self):
        source = RewindableSource.from_bytes(b"xyz")
        first = source.get_fresh_view()
        first.read()

        assert source.get_fresh_view().read() == b"xyz"
        assert source.location == "memory"


class TestOpenSource:

    def test_dash_means_stdin(self, monkeypatch):
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"piped")))

        source = open_source("-")

        assert source.location == "standard input"
        assert source.get_fresh_view().read() == b"piped"

    def test_path(self, tmp_path):
        path = tmp_path / "model.pnml"
        path.write_bytes(b"<pnml/>")

        assert open_source(path).get_fresh_view().read() == b"<pnml/>"

    def test_missing_file_reported_on_first_view(self, tmp_path):
        source = open_source(tmp_path / "absent.pnml")

        with pytest.raises(SourceError):
            source.get_fresh_view()
