"""Exceptions raised by assetfs."""

from __future__ import annotations

import errno
import os


class AssetNotFoundError(FileNotFoundError):
    """Raised when a path is not in the asset registry.

    Subclasses ``FileNotFoundError`` so callers handle a missing asset the same
    way in embedded and local mode.
    """

    def __init__(self, path: str) -> None:
        super().__init__(errno.ENOENT, os.strerror(errno.ENOENT), path)


class MaterializationError(OSError):
    """Raised when an embedded payload cannot be decoded (corrupted bundle)."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(errno.EIO, f"cannot materialize asset: {reason}", path)


class AssetPanic(RuntimeError):
    """Raised by the ``must_*`` accessors. Not meant to be caught."""


class ConfigError(ValueError):
    """Invalid assetfs configuration."""


__all__ = ["AssetNotFoundError", "AssetPanic", "ConfigError", "MaterializationError"]
