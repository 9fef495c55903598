"""Asset records, the immutable registry, and one-time payload materialization."""

from __future__ import annotations

import base64
import gzip
import posixpath
import threading
import zlib
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import cast

from assetfs.errors import AssetNotFoundError, MaterializationError

# ── Payload codec ──────────────────────────────────────────────────


def encode_payload(data: bytes) -> str:
    """gzip then base64-encode ``data``. Inverse of :func:`decode_payload`."""
    return base64.b64encode(gzip.compress(data, mtime=0)).decode("ascii")


def decode_payload(payload: str) -> bytes:
    return gzip.decompress(base64.b64decode(payload, validate=True))


# binascii.Error is a ValueError; truncated streams raise EOFError
_DECODE_ERRORS = (ValueError, OSError, EOFError, zlib.error)


# ── Paths ──────────────────────────────────────────────────────────


def clean_path(name: str) -> str:
    """Lexically normalize a forward-slash path (``//``, ``.``, ``..``).

    ``..`` never climbs above ``/``; an empty path cleans to ``.``.
    """
    if not name:
        return "."
    cleaned = posixpath.normpath(name)
    if cleaned.startswith("//"):
        # POSIX keeps a leading double slash; registry keys never have one
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


# ── Records ────────────────────────────────────────────────────────


@dataclass(eq=False)
class AssetRecord:
    """One embedded file.

    ``size`` is the decompressed length recorded at embed time; 0 marks an
    empty file whose payload is never decoded. ``name`` and ``data`` are set
    by the first :meth:`materialize` call and never change afterwards.
    """

    path: str
    local_path: str
    size: int
    mod_time: int
    payload: str = field(default="", repr=False)
    name: str = field(default="", init=False)
    data: bytes | None = field(default=None, init=False, repr=False)
    _done: bool = field(default=False, init=False, repr=False)
    _cause: BaseException | None = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def materialized(self) -> bool:
        return self._done

    def materialize(self) -> bytes:
        """Decode the payload once (thread-safe, double-checked) and return it.

        Decoded content whose length differs from ``size`` is a failure too.
        A failure is remembered: every call re-raises
        :class:`MaterializationError` without decoding again.
        """
        if not self._done:
            with self._lock:
                if not self._done:
                    self._decode()
        if self._cause is not None:
            raise MaterializationError(self.path, str(self._cause)) from self._cause
        return cast(bytes, self.data)

    def _decode(self) -> None:
        self.name = posixpath.basename(self.path)
        if self.size == 0:
            self.data = b""
        else:
            try:
                data = decode_payload(self.payload)
            except _DECODE_ERRORS as exc:
                self._cause = exc
            else:
                if len(data) == self.size:
                    self.data = data
                else:
                    self._cause = ValueError(
                        f"decoded {len(data)} bytes, recorded size is {self.size}"
                    )
        self._done = True


# ── Registry ───────────────────────────────────────────────────────


class Registry(Mapping[str, AssetRecord]):
    """Read-only mapping of canonical path (``/js/main.js``) to record."""

    def __init__(self, records: Iterable[AssetRecord] = ()) -> None:
        entries: dict[str, AssetRecord] = {}
        for record in records:
            key = record.path
            if not key.startswith("/") or clean_path(key) != key:
                raise ValueError(f"registry key must be a clean absolute path: {key!r}")
            if key in entries:
                raise ValueError(f"duplicate registry key: {key!r}")
            entries[key] = record
        self._entries = MappingProxyType(entries)

    def __getitem__(self, key: str) -> AssetRecord:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, name: str) -> AssetRecord:
        """Clean ``name`` and return its record or raise AssetNotFoundError."""
        record = self._entries.get(clean_path(name))
        if record is None:
            raise AssetNotFoundError(name)
        return record
