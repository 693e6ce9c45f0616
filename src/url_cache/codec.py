from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from url_cache.encoders import LocalPathEncoder, build_path_encoder
from url_cache.http_cache import host_port_component, url_to_filename
from url_cache.locator import Locator, Scheme

logger = logging.getLogger(__name__)

_SUFFIX_FORBIDDEN = ("/", "\\", "\0")


def derive_base_path(locator: Locator, encoder: Optional[LocalPathEncoder] = None) -> Optional[Path]:
    """
    Derive the cache path of a locator, relative to the cache root.

    Layout: <scheme>/<authority-or-host>/<segments...>

    Returns None when no cache entry is possible for the locator
    (unknown scheme, file URL without a local path, ...).
    """
    scheme = Scheme.parse(locator.scheme)

    if scheme is Scheme.WASM:
        return _wasm_path(locator)
    if scheme in (Scheme.HTTP, Scheme.HTTPS, Scheme.DATA):
        return url_to_filename(locator)
    if scheme is Scheme.FILE:
        return _file_path(locator, encoder or build_path_encoder())

    logger.debug("no cache path for scheme %r", locator.scheme)
    return None


def derive_path_with_extension(
    locator: Locator,
    extension: str,
    encoder: Optional[LocalPathEncoder] = None,
) -> Optional[Path]:
    """
    Like derive_base_path, with `extension` appended.

    An existing extension is kept as an infix: bar.ts + "js" -> bar.ts.js
    An extension that is not a plain file-name suffix gives None.
    """
    base = derive_base_path(locator, encoder)
    if base is None:
        return None
    extension = extension.lstrip(".")
    if not extension:
        return base
    if any(c in extension for c in _SUFFIX_FORBIDDEN):
        return None
    if not base.suffix:
        return base.with_suffix(f".{extension}")
    return base.with_suffix(f"{base.suffix}.{extension}")


def _wasm_path(locator: Locator) -> Optional[Path]:
    if locator.host in (None, ".", ".."):
        return None
    segments = locator.path_segments() or []
    return Path(locator.scheme, host_port_component(locator), *(s for s in segments if s))


def _file_path(locator: Locator, encoder: LocalPathEncoder) -> Optional[Path]:
    path = encoder.to_file_path(locator)
    if path is None:
        logger.debug("file locator has no local path: %s", locator)
        return None
    components = encoder.encode_local_path(path)
    if components is None:
        return None
    return Path(locator.scheme, *components)
