"""Public accessors for one registry of embedded assets."""

from __future__ import annotations

import importlib
import importlib.util
from collections.abc import Iterable
from pathlib import Path

from assetfs.errors import AssetPanic
from assetfs.fs import EmbeddedFS, Filesystem, LocalFS, PrefixFS
from assetfs.registry import AssetRecord, Registry


class AssetBundle:
    """Entry point of a generated assets module.

    ``use_local`` selects between serving the embedded copies and opening the
    original files below ``root`` (default: the current directory).
    """

    def __init__(
        self,
        records: Iterable[AssetRecord] | Registry = (),
        *,
        root: Path | None = None,
    ) -> None:
        self.registry = records if isinstance(records, Registry) else Registry(records)
        self.root = root
        self._embedded = EmbeddedFS(self.registry)

    def __repr__(self) -> str:
        return f"AssetBundle({len(self.registry)} assets)"

    def filesystem(self, use_local: bool = False) -> EmbeddedFS | LocalFS:
        if use_local:
            return LocalFS(self.registry, self.root)
        return self._embedded

    def dir_filesystem(self, use_local: bool, prefix: str) -> PrefixFS:
        return PrefixFS(self.filesystem(use_local), prefix)

    def get_bytes(self, use_local: bool, path: str) -> bytes:
        if use_local:
            fs: Filesystem = self.filesystem(True)
            with fs.open(path) as f:
                return f.read()
        return self.registry.lookup(path).materialize()

    def get_string(self, use_local: bool, path: str) -> str:
        return self.get_bytes(use_local, path).decode("utf-8")

    def must_get_bytes(self, use_local: bool, path: str) -> bytes:
        """Like :meth:`get_bytes` but any failure raises :class:`AssetPanic`.

        Only for assets that are guaranteed to be packaged; a failure here is
        a build bug, not something to recover from.
        """
        try:
            return self.get_bytes(use_local, path)
        except (OSError, UnicodeDecodeError) as exc:
            raise AssetPanic(f"asset {path!r}: {exc}") from exc

    def must_get_string(self, use_local: bool, path: str) -> str:
        try:
            return self.get_string(use_local, path)
        except (OSError, UnicodeDecodeError) as exc:
            raise AssetPanic(f"asset {path!r}: {exc}") from exc


def load_bundle(target: str) -> AssetBundle:
    """Import a generated module (dotted name or ``.py`` path) and return its bundle."""
    if target.endswith(".py"):
        path = Path(target).resolve()
        if not path.exists():
            raise FileNotFoundError(f"bundle module not found: {path}")
        spec = importlib.util.spec_from_file_location(path.stem, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"cannot load bundle module from {path}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
    else:
        module = importlib.import_module(target)

    bundle = getattr(module, "bundle", None)
    if not isinstance(bundle, AssetBundle):
        raise ImportError(f"{target} has no 'bundle' attribute of type AssetBundle")
    return bundle
