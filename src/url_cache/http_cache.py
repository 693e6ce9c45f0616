"""Cache layout for remote (http/https) and inline (data) locators.

Remote resources are stored as

    <scheme>/<host>[_PORT<port>]/<sha256(path[?query])>

next to a `<hash>.metadata.json` file holding the response headers and the
original URL. Hashing the path keeps file names short and free of characters
that some filesystems reject.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Optional

import orjson

from url_cache.common.hashing import sha256_hex
from url_cache.locator import Locator, Scheme, as_locator

if TYPE_CHECKING:
    from url_cache.disk_cache import CacheStore

logger = logging.getLogger(__name__)

# owner read/write, everyone else read-only
CACHE_PERM = 0o644


def host_port_component(locator: Locator) -> str:
    # Windows doesn't support ":" in filenames, so the port gets its own marker.
    if locator.port is not None:
        return f"{locator.host}_PORT{locator.port}"
    return str(locator.host)


def base_url_to_filename(locator: Locator) -> Optional[Path]:
    scheme = Scheme.parse(locator.scheme)
    if scheme in (Scheme.HTTP, Scheme.HTTPS):
        if locator.host is None:
            return None
        return Path(locator.scheme, host_port_component(locator))
    if scheme is Scheme.DATA:
        return Path(locator.scheme)
    logger.debug("Don't know how to create cache name for scheme: %s", locator.scheme)
    return None


def url_to_filename(locator: Locator) -> Optional[Path]:
    """Map a remote/data locator to its cache path, or None when not applicable."""
    base = base_url_to_filename(locator)
    if base is None:
        return None
    rest = locator.path
    if locator.query is not None:
        rest += "?" + locator.query
    # the fragment only addresses part of a document, it is not part of the key
    return base / sha256_hex(rest.encode("utf-8"))


def metadata_filename(filename: Path) -> Path:
    return filename.with_suffix(".metadata.json")


@dataclass
class CachedUrlMetadata:
    url: str
    headers: dict[str, str] = field(default_factory=dict)


class HttpCache:
    def __init__(self, store: "CacheStore"):
        self.store = store

    def _filename(self, url: Locator | str) -> Path:
        locator = as_locator(url)
        filename = url_to_filename(locator)
        if filename is None:
            raise ValueError(f"Can't convert url to cache filename: {locator}")
        return filename

    def get_cache_filename(self, url: Locator | str) -> Optional[Path]:
        return url_to_filename(as_locator(url))

    def set(self, url: Locator | str, headers: Mapping[str, str], content: bytes) -> Path:
        locator = as_locator(url)
        filename = self._filename(locator)
        self.store.set(filename, content)
        meta = CachedUrlMetadata(url=str(locator), headers=dict(headers))
        self.store.set(metadata_filename(filename), orjson.dumps(meta.__dict__))
        return filename

    def get_metadata(self, url: Locator | str) -> CachedUrlMetadata:
        raw = self.store.get(metadata_filename(self._filename(url)))
        return CachedUrlMetadata(**orjson.loads(raw))

    def get(self, url: Locator | str) -> tuple[bytes, dict[str, str]]:
        filename = self._filename(url)
        meta = self.get_metadata(url)
        return self.store.get(filename), meta.headers
