"""Build step: pack files into a generated Python module.

Each file is gzip-compressed, base64-encoded and emitted as a string literal
inside an ``AssetRecord``, keyed by its forward-slash path.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from pathlib import Path

from assetfs.registry import AssetRecord, clean_path, encode_payload

_log = logging.getLogger("assetfs")

PAYLOAD_LINE_WIDTH = 76


# ── Collection ─────────────────────────────────────────────────────


def _iter_files(sources: Iterable[Path]) -> Iterable[Path]:
    for src in sources:
        if src.is_dir():
            yield from sorted(p for p in src.rglob("*") if p.is_file())
        elif src.is_file():
            yield src
        else:
            raise FileNotFoundError(f"source not found: {src}")


def asset_key(local_path: str, strip_prefix: str = "") -> str:
    """Registry key for a forward-slash local path: ``/`` + path minus prefix."""
    rel = local_path
    if strip_prefix and rel.startswith(strip_prefix):
        rel = rel[len(strip_prefix) :]
    return clean_path("/" + rel)


def collect(
    sources: Iterable[Path | str],
    *,
    strip_prefix: str = "",
    include: str | None = None,
    ignore: str | None = None,
    mod_time: int | None = None,
) -> list[AssetRecord]:
    """Read and encode every file under ``sources`` (files or directories).

    ``include``/``ignore`` are regular expressions searched in the
    forward-slash local path. ``mod_time`` overrides every file's timestamp.
    """
    include_re = re.compile(include) if include else None
    ignore_re = re.compile(ignore) if ignore else None

    records: list[AssetRecord] = []
    seen: dict[str, str] = {}
    for path in _iter_files(Path(s) for s in sources):
        local = path.as_posix()
        if include_re and not include_re.search(local):
            continue
        if ignore_re and ignore_re.search(local):
            _log.debug("Ignoring %s", local)
            continue

        key = asset_key(local, strip_prefix)
        if key in seen:
            _log.warning("Skipping %s: %s already embedded from %s", local, key, seen[key])
            continue
        seen[key] = local

        data = path.read_bytes()
        records.append(
            AssetRecord(
                path=key,
                local_path=local,
                size=len(data),
                mod_time=mod_time if mod_time is not None else int(path.stat().st_mtime),
                payload=encode_payload(data) if data else "",
            )
        )
    return records


# ── Rendering ──────────────────────────────────────────────────────

_MODULE_HEADER = '''"""Code generated by assetfs; DO NOT EDIT."""

from assetfs import AssetBundle, AssetRecord

bundle = AssetBundle(
    [
'''

_MODULE_FOOTER = """    ]
)

filesystem = bundle.filesystem
dir_filesystem = bundle.dir_filesystem
get_bytes = bundle.get_bytes
get_string = bundle.get_string
must_get_bytes = bundle.must_get_bytes
must_get_string = bundle.must_get_string
"""


def _render_payload(payload: str) -> str:
    if not payload:
        return '""'
    chunks = [
        payload[i : i + PAYLOAD_LINE_WIDTH] for i in range(0, len(payload), PAYLOAD_LINE_WIDTH)
    ]
    lines = "".join(f'                "{chunk}"\n' for chunk in chunks)
    return f"(\n{lines}            )"


def render_module(records: Iterable[AssetRecord]) -> str:
    parts = [_MODULE_HEADER]
    for record in records:
        parts.append(
            "        AssetRecord(\n"
            f"            path={json.dumps(record.path)},\n"
            f"            local_path={json.dumps(record.local_path)},\n"
            f"            size={record.size},\n"
            f"            mod_time={record.mod_time},\n"
            f"            payload={_render_payload(record.payload)},\n"
            "        ),\n"
        )
    parts.append(_MODULE_FOOTER)
    return "".join(parts)


def write_module(records: list[AssetRecord], output: Path) -> int:
    """Write the generated module to ``output`` and return its size in bytes."""
    source = render_module(records).encode("utf-8")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(source)
    raw = sum(r.size for r in records)
    packed = sum(len(r.payload) for r in records)
    _log.info(
        "Embedded %d assets (%d bytes, %d bytes encoded) into %s",
        len(records),
        raw,
        packed,
        output,
    )
    return len(source)
