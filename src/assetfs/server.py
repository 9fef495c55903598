"""Preview server: serve any assetfs filesystem over HTTP with Bottle."""

from __future__ import annotations

import gzip
import logging
import mimetypes
import os
import platform
import subprocess
import webbrowser
from html import escape
from typing import Any, Callable, cast

import bottle  # type: ignore

from assetfs.fs import Filesystem
from assetfs.vfile import VirtualFile

Bottle = cast(Any, bottle.Bottle)
request = cast(Any, bottle.request)
response = cast(Any, bottle.response)
HTTPResponse = cast(Any, bottle.HTTPResponse)
http_date = cast(Any, bottle.http_date)

_log = logging.getLogger("assetfs")

try:
    import brotli  # type: ignore

    HAS_BROTLI = True
except ImportError:
    HAS_BROTLI = False

try:
    import zstandard as zstd  # type: ignore

    HAS_ZSTD = True
except ImportError:
    HAS_ZSTD = False

INDEX_NAME = "index.html"

_COMPRESSIBLE_TYPES = {
    "application/javascript",
    "application/json",
    "application/xml",
    "image/svg+xml",
    "text/javascript",
}


# ── Compression ────────────────────────────────────────────────────


def _best_encoding(accept_encoding: str) -> str:
    if HAS_ZSTD and "zstd" in accept_encoding:
        return "zstd"
    if HAS_BROTLI and "br" in accept_encoding:
        return "br"
    if "gzip" in accept_encoding:
        return "gzip"
    return ""


_ENCODERS: dict[str, Callable[[bytes], bytes]] = {"gzip": gzip.compress}
if HAS_BROTLI:
    _ENCODERS["br"] = brotli.compress  # type: ignore
if HAS_ZSTD:
    _ENCODERS["zstd"] = lambda body: zstd.ZstdCompressor(level=3).compress(body)  # type: ignore


def compress_payload(body: bytes, accept_encoding: str) -> tuple[bytes, str]:
    """Compress payload using the best algorithm the client accepts."""
    encoding = _best_encoding(accept_encoding)
    if not encoding:
        return body, ""
    return _ENCODERS[encoding](body), encoding


def _is_compressible(content_type: str) -> bool:
    base = content_type.split(";", 1)[0].strip()
    return base.startswith("text/") or base in _COMPRESSIBLE_TYPES


# ── Response helpers ───────────────────────────────────────────────


def content_type_for(path: str) -> str:
    guessed = mimetypes.guess_type(path)[0] or "application/octet-stream"
    if guessed.startswith("text/") or guessed == "application/javascript":
        return f"{guessed}; charset=utf-8"
    return guessed


def _modified_time(handle: Any) -> float:
    if isinstance(handle, VirtualFile):
        return handle.mod_time.timestamp()
    return os.fstat(handle.fileno()).st_mtime


def _not_found(path: str) -> Any:
    resp = HTTPResponse(status=404, body=f"Not found: {escape(path)}")
    resp.content_type = "text/plain; charset=utf-8"
    return resp


def serve_path(filesystem: Filesystem, path: str) -> Any:
    """Answer the current request with ``path`` read from ``filesystem``."""
    if path.endswith("/"):
        path += INDEX_NAME
    try:
        with filesystem.open(path) as handle:
            body = handle.read()
            mtime = _modified_time(handle)
    except FileNotFoundError:
        return _not_found(path)
    except OSError as e:
        _log.warning("Cannot serve %s: %s", path, e)
        return HTTPResponse(status=500, body="Internal Server Error")

    etag = f'W/"{int(mtime)}-{len(body)}"'
    if request.headers.get("If-None-Match") == etag:
        resp = HTTPResponse(status=304)
        resp.set_header("ETag", etag)
        return resp

    content_type = content_type_for(path)
    encoding = ""
    if _is_compressible(content_type):
        body, encoding = compress_payload(body, request.headers.get("Accept-Encoding", ""))
        response.set_header("Vary", "Accept-Encoding")

    response.content_type = content_type
    if encoding:
        response.set_header("Content-Encoding", encoding)
    response.set_header("Content-Length", str(len(body)))
    response.set_header("Last-Modified", http_date(mtime))
    response.set_header("ETag", etag)
    response.set_header("Cache-Control", "no-cache")
    return body


# ── Bottle app ─────────────────────────────────────────────────────


def make_app(filesystem: Filesystem, *, cors: bool = False) -> Any:
    """Build a Bottle app that serves every GET path from ``filesystem``."""
    app = Bottle()

    if cors:

        @app.hook("after_request")
        def _cors_headers() -> None:
            response.set_header("Access-Control-Allow-Origin", "*")
            response.set_header("Access-Control-Allow-Methods", "GET, HEAD, OPTIONS")
            response.set_header("Access-Control-Allow-Headers", "Content-Type")

    @app.get("/")
    @app.get("/<filepath:path>")
    def serve_asset(filepath: str = "") -> Any:
        return serve_path(filesystem, "/" + filepath)

    return app


# ── Browser opener ─────────────────────────────────────────────────


_OPENERS: dict[str, list[str]] = {
    "Linux": ["xdg-open"],
    "Darwin": ["open"],
    "Windows": ["cmd", "/c", "start", ""],
}


def open_browser(url: str) -> None:
    """Open ``url`` with the platform opener, falling back to :mod:`webbrowser`."""
    opener = _OPENERS.get(platform.system())
    if opener is None:
        webbrowser.open(url)
        return
    try:
        subprocess.Popen([*opener, url], stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError:
        webbrowser.open(url)
