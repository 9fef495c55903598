"""Embed settings from ``[tool.assetfs]`` in pyproject.toml or ``assetfs.toml``."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from assetfs.errors import ConfigError

CONFIG_FILENAME = "assetfs.toml"


@dataclass
class EmbedConfig:
    sources: list[str] = field(default_factory=list)
    output: str | None = None
    strip_prefix: str = ""
    include: str | None = None
    ignore: str | None = None
    mod_time: int | None = None

    def merged(self, **overrides: Any) -> EmbedConfig:
        """Return a copy where every override that is not None replaces the file value."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for key, value in overrides.items():
            if key not in values:
                raise ConfigError(f"unknown setting: {key}")
            if value is not None:
                values[key] = value
        return EmbedConfig(**values)


def _from_table(table: dict[str, Any], origin: Path) -> EmbedConfig:
    known = {f.name for f in fields(EmbedConfig)}
    unknown = sorted(set(table) - known)
    if unknown:
        raise ConfigError(f"{origin}: unknown keys: {', '.join(unknown)}")

    sources = table.get("sources", [])
    if isinstance(sources, str):
        sources = [sources]
    if not isinstance(sources, list) or not all(isinstance(s, str) for s in sources):
        raise ConfigError(f"{origin}: 'sources' must be a list of paths")

    mod_time = table.get("mod_time")
    if mod_time is not None and (isinstance(mod_time, bool) or not isinstance(mod_time, int)):
        raise ConfigError(f"{origin}: 'mod_time' must be an integer Unix timestamp")

    for key in ("output", "strip_prefix", "include", "ignore"):
        value = table.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"{origin}: '{key}' must be a string")

    return EmbedConfig(
        sources=list(sources),
        output=table.get("output"),
        strip_prefix=table.get("strip_prefix", ""),
        include=table.get("include"),
        ignore=table.get("ignore"),
        mod_time=mod_time,
    )


def load_config(path: Path | None = None, root: Path | None = None) -> EmbedConfig:
    """Load embed settings.

    With an explicit ``path`` that file is read (a pyproject.toml is read from
    its ``[tool.assetfs]`` table). Otherwise ``assetfs.toml`` and then
    ``pyproject.toml`` are looked up in ``root`` (default: cwd). Missing files
    yield the defaults.
    """
    if path is None:
        base = root or Path.cwd()
        for candidate in (base / CONFIG_FILENAME, base / "pyproject.toml"):
            if candidate.exists():
                path = candidate
                break
        else:
            return EmbedConfig()

    try:
        doc = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e

    if path.name == "pyproject.toml":
        table = doc.get("tool", {}).get("assetfs", {})
    else:
        table = doc
    if not isinstance(table, dict):
        raise ConfigError(f"{path}: [tool.assetfs] must be a table")
    return _from_table(table, path)
