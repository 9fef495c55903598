"""Filesystem views over a registry: embedded, local passthrough, prefixed."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import BinaryIO, Protocol

from assetfs.registry import Registry
from assetfs.vfile import VirtualFile


class Filesystem(Protocol):
    def open(self, path: str) -> BinaryIO | VirtualFile: ...


class EmbeddedFS:
    """Serve assets from the in-memory, lazily decompressed registry."""

    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    def __repr__(self) -> str:
        return f"EmbeddedFS({len(self.registry)} assets)"

    def open(self, path: str) -> VirtualFile:
        record = self.registry.lookup(path)
        return VirtualFile(record, record.materialize())


class LocalFS:
    """Open the files the registry was built from, straight from disk.

    The registry is only used as the index of known paths, so size and
    modification time come from the OS and reflect the current disk state.
    """

    def __init__(self, registry: Registry, root: Path | None = None) -> None:
        self.registry = registry
        self.root = root

    def __repr__(self) -> str:
        return f"LocalFS(root={str(self.root or Path.cwd())!r})"

    def resolve(self, path: str) -> Path:
        record = self.registry.lookup(path)
        local = Path(*PurePosixPath(record.local_path).parts)
        return (self.root or Path.cwd()) / local

    def open(self, path: str) -> BinaryIO:
        # unbuffered, so local handles are raw files like VirtualFile
        return open(self.resolve(path), "rb", buffering=0)


class PrefixFS:
    """Prepend a fixed prefix to every lookup before delegating."""

    def __init__(self, inner: Filesystem, prefix: str) -> None:
        self.inner = inner
        self.prefix = prefix

    def __repr__(self) -> str:
        return f"PrefixFS({self.inner!r}, {self.prefix!r})"

    def open(self, path: str) -> BinaryIO | VirtualFile:
        return self.inner.open(self.prefix + path)
