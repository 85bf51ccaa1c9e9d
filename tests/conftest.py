"""Pytest configuration and shared fixtures for service-loader tests."""

import importlib
import io
import sys
import textwrap
from collections.abc import Iterator
from pathlib import Path

import pytest

from service_loader import LoadingContext
from service_loader import MappingResolver


class MemoryResource:
    """Declaration file held in memory; records whether its stream was closed."""

    def __init__(self, uri: str, data: bytes | str, fail_after: int | None = None, fail_on_open: bool = False):
        self.uri = uri
        self.data = data.encode("utf-8") if isinstance(data, str) else data
        self.fail_after = fail_after
        self.fail_on_open = fail_on_open
        self.streams: list[io.BytesIO] = []

    def open(self):
        if self.fail_on_open:
            raise OSError(f"cannot open {self.uri}")
        stream = _FailingStream(self.data, self.fail_after) if self.fail_after is not None else io.BytesIO(self.data)
        self.streams.append(stream)
        return stream

    @property
    def closed(self) -> bool:
        return all(s.closed for s in self.streams)


class _FailingStream(io.BytesIO):
    """Stream that raises OSError after yielding a number of lines."""

    def __init__(self, data: bytes, fail_after: int):
        super().__init__(data)
        self.fail_after = fail_after
        self.lines_read = 0

    def __iter__(self):
        return self

    def __next__(self):
        if self.lines_read >= self.fail_after:
            raise OSError("disk went away")
        self.lines_read += 1
        return super().__next__()


class MemoryLocator:
    """Locator over a fixed capability-id -> resources table."""

    def __init__(self, resources: dict[str, list[MemoryResource]], fail_after: int | None = None):
        self.resources = resources
        self.fail_after = fail_after
        self.calls: list[str] = []

    def locate(self, capability_id: str) -> Iterator[MemoryResource]:
        self.calls.append(capability_id)
        for i, resource in enumerate(self.resources.get(capability_id, [])):
            if self.fail_after is not None and i >= self.fail_after:
                raise OSError("resource enumeration failed")
            yield resource


class RecordingResolver(MappingResolver):
    """MappingResolver that records every name it is asked for."""

    def __init__(self, entries):
        super().__init__(entries)
        self.calls: list[str] = []

    def resolve(self, name, context=None):
        self.calls.append(name)
        return super().resolve(name, context)


@pytest.fixture
def memory_context():
    """Factory: build a LoadingContext from in-memory files and a name table."""

    def _make(files: dict[str, list[MemoryResource]], entries: dict, fail_after: int | None = None):
        locator = MemoryLocator(files, fail_after=fail_after)
        resolver = RecordingResolver(entries)
        return LoadingContext(locator=locator, resolver=resolver)

    return _make


@pytest.fixture
def resource():
    """Factory for MemoryResource."""
    return MemoryResource


def write_declaration(root: Path, capability_id: str, content: str, prefix: str = "META-INF/services") -> Path:
    """Write a declaration file under a search root."""
    path = root / prefix / capability_id
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


@pytest.fixture
def declare():
    """Write a declaration file: declare(root, capability_id, content)."""
    return write_declaration


PROVIDER_PACKAGE = '''
"""Importable providers used by integration tests."""

import abc


class Codec(abc.ABC):
    """Encodes bytes."""

    @abc.abstractmethod
    def encode(self, data: bytes) -> bytes: ...


class IdentityCodec(Codec):
    """Returns input unchanged."""

    def encode(self, data):
        return data


class UpperCodec(Codec):
    """Upper-cases input."""

    def encode(self, data):
        return data.upper()


class AbstractCodec(Codec):
    pass


class ConfiguredCodec(Codec):
    def __init__(self, level):
        self.level = level

    def encode(self, data):
        return data


class BrokenCodec(Codec):
    def __init__(self):
        raise RuntimeError("no codec today")

    def encode(self, data):
        return data


class NotACodec:
    pass


class Outer:
    class InnerCodec(Codec):
        def encode(self, data):
            return data
'''


LAZY_MODULE = '''
def __getattr__(name):
    raise ImportError(f"optional backend for {name} is not installed")
'''


@pytest.fixture
def provider_package(tmp_path, monkeypatch):
    """Create an importable ``sample_providers`` package on sys.path.

    Returns the directory holding the package, usable as a search root.
    """
    root = tmp_path / "site"
    package = root / "sample_providers"
    package.mkdir(parents=True)
    (package / "__init__.py").write_text(PROVIDER_PACKAGE, encoding="utf-8")
    (package / "broken_import.py").write_text("import definitely_not_installed_xyz\n", encoding="utf-8")
    (package / "lazy.py").write_text(LAZY_MODULE, encoding="utf-8")

    monkeypatch.syspath_prepend(str(root))
    importlib.invalidate_caches()
    yield root

    for name in list(sys.modules):
        if name == "sample_providers" or name.startswith("sample_providers."):
            del sys.modules[name]
