"""Read-only file object over a materialized asset."""

from __future__ import annotations

import io
import stat
from datetime import datetime, timezone
from typing import Any

from assetfs.registry import AssetRecord

# regular file, read-only; per-file permission bits are not embedded
FILE_MODE = stat.S_IFREG | 0o444


class VirtualFile(io.RawIOBase):
    """Binary, seekable raw file for one ``open()`` call.

    Each handle owns its cursor; the bytes belong to the record and are never
    copied or mutated. The handle is also its own metadata object
    (:meth:`stat` returns ``self``).
    """

    def __init__(self, record: AssetRecord, data: bytes, *, is_dir: bool = False) -> None:
        super().__init__()
        self._record = record
        self._reader = io.BytesIO(data)
        self._is_dir = is_dir

    def __repr__(self) -> str:
        return f"<VirtualFile {self._record.path!r} size={self.size}>"

    # ── File handle ────────────────────────────────────────────────

    def read(self, size: int | None = -1) -> bytes:
        return self._reader.read(size)

    def readall(self) -> bytes:
        return self._reader.read()

    def readinto(self, buffer: Any) -> int:
        return self._reader.readinto(buffer)

    def readline(self, size: int | None = -1) -> bytes:
        return self._reader.readline(size)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._reader.seek(offset, whence)

    def tell(self) -> int:
        return self._reader.tell()

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def writable(self) -> bool:
        return False

    def close(self) -> None:
        # The content lives in the registry; closing releases nothing and
        # the handle stays readable.
        pass

    def stat(self) -> VirtualFile:
        return self

    # ── File info ──────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._record.name

    @property
    def size(self) -> int:
        return self._record.size

    @property
    def mode(self) -> int:
        return FILE_MODE

    @property
    def mod_time(self) -> datetime:
        return datetime.fromtimestamp(self._record.mod_time, tz=timezone.utc)

    @property
    def is_dir(self) -> bool:
        return self._is_dir

    @property
    def sys(self) -> None:
        return None

    def readdir(self, count: int = 0) -> list[VirtualFile]:
        """Directory listing is not supported: always empty, for any count."""
        return []
