"""Shared fixtures: stub importers and a clean process-wide catalog."""

from __future__ import annotations

import pytest

from flowmodel_io.core import catalog as catalog_module
from flowmodel_io.core.errors import FormatParseError


def accepting(prefix: bytes, result):
    """Importer that succeeds when the stream starts with ``prefix``."""
    def importer(stream):
        data = stream.read()
        if not data.startswith(prefix):
            raise FormatParseError(f"expected {prefix!r} at the start")
        return result
    return importer


def failing(message: str):
    """Importer that reads everything and then rejects it with ``message``."""
    def importer(stream):
        stream.read()
        raise FormatParseError(message)
    return importer


class RecordingImporter:
    """Importer that records the bytes it saw and returns a fixed result."""

    def __init__(self, result=None, fail: str | None = None):
        self.result = result
        self.fail = fail
        self.seen: list[bytes] = []

    def __call__(self, stream):
        self.seen.append(stream.read())
        if self.fail is not None:
            raise FormatParseError(self.fail)
        return self.result


@pytest.fixture
def clean_catalog(monkeypatch):
    """Start with no registered handlers and an unbuilt process catalog."""
    monkeypatch.setattr(catalog_module, "_pending", [])
    monkeypatch.setattr(catalog_module, "_catalog", None)
    return catalog_module
