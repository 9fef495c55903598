"""Embedded static asset filesystem."""

from assetfs.bundle import AssetBundle, load_bundle
from assetfs.errors import AssetNotFoundError, AssetPanic, MaterializationError
from assetfs.fs import EmbeddedFS, Filesystem, LocalFS, PrefixFS
from assetfs.registry import AssetRecord, Registry, clean_path, decode_payload, encode_payload
from assetfs.vfile import VirtualFile

__version__ = "0.1.0"

__all__ = [
    "AssetBundle",
    "AssetNotFoundError",
    "AssetPanic",
    "AssetRecord",
    "EmbeddedFS",
    "Filesystem",
    "LocalFS",
    "MaterializationError",
    "PrefixFS",
    "Registry",
    "VirtualFile",
    "clean_path",
    "decode_payload",
    "encode_payload",
    "load_bundle",
]
