# src/url_cache/locator.py
from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import urlsplit

# Schemes with a hierarchical authority and (optionally) a default port.
SPECIAL_SCHEMES: dict[str, Optional[int]] = {
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
    "ftp": 21,
    "file": None,
}

_DOT_SEGMENTS = {".", "%2e"}
_DOUBLE_DOT_SEGMENTS = {"..", ".%2e", "%2e.", "%2e%2e"}


class Scheme(str, Enum):
    """Schemes the cache knows how to lay out on disk."""

    WASM = "wasm"
    HTTP = "http"
    HTTPS = "https"
    DATA = "data"
    FILE = "file"

    @classmethod
    def parse(cls, value: str) -> Optional["Scheme"]:
        try:
            return cls(value.lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class Locator:
    """Absolute, normalized resource identifier used as a cache key."""

    scheme: str
    host: Optional[str] = None
    port: Optional[int] = None
    path: str = ""
    query: Optional[str] = None
    fragment: Optional[str] = None
    opaque: bool = False

    def __post_init__(self) -> None:
        # a locator is never a relative reference
        if not self.scheme or not self.scheme[0].isalpha():
            raise ValueError(f"locator needs a scheme, got {self.scheme!r}")

    @classmethod
    def parse(cls, url: str) -> "Locator":
        """
        Parse an absolute URL string.

        Raises ValueError for relative references, malformed ports and
        malformed IPv6 hosts.
        """
        u = url.strip()
        parts = urlsplit(u)
        if not parts.scheme:
            raise ValueError(f"locator must be absolute, got relative reference: {url!r}")

        scheme = parts.scheme.lower()
        rest = u[len(parts.scheme) + 1 :]
        # only non-special schemes can be opaque; "http:h/a" means "http://h/a"
        # and "file:a" means "file:///a"
        opaque = scheme not in SPECIAL_SCHEMES and not rest.startswith("/")
        if scheme in SPECIAL_SCHEMES and not rest.startswith("//"):
            if scheme == "file":
                u = "file:///" + rest.lstrip("/")
            else:
                u = f"{scheme}://" + rest.lstrip("/")
            parts = urlsplit(u)

        host, port = _split_authority(parts.netloc)
        if scheme in SPECIAL_SCHEMES:
            if host is not None:
                host = host.lower()
            if port is not None and port == SPECIAL_SCHEMES[scheme]:
                port = None
        if scheme == "file" and host == "localhost":
            host = None

        path = parts.path
        if not opaque:
            if scheme in SPECIAL_SCHEMES and not path:
                path = "/"
            path = _remove_dot_segments(path)

        before_fragment, has_fragment, _ = u.partition("#")
        return cls(
            scheme=scheme,
            host=host,
            port=port,
            path=path,
            query=parts.query if "?" in before_fragment else None,
            fragment=parts.fragment if has_fragment else None,
            opaque=opaque,
        )

    def path_segments(self) -> Optional[list[str]]:
        """`/`-separated path segments (still percent-encoded); None for opaque URLs."""
        if self.opaque:
            return None
        if not self.path:
            return []
        return self.path[1:].split("/") if self.path.startswith("/") else self.path.split("/")

    def __str__(self) -> str:
        out = f"{self.scheme}:"
        if not self.opaque:
            out += "//"
            if self.host is not None:
                out += self.host
            if self.port is not None:
                out += f":{self.port}"
        out += self.path
        if self.query is not None:
            out += f"?{self.query}"
        if self.fragment is not None:
            out += f"#{self.fragment}"
        return out


def as_locator(value: Locator | str) -> Locator:
    return value if isinstance(value, Locator) else Locator.parse(value)


def _split_authority(netloc: str) -> tuple[Optional[str], Optional[int]]:
    hostport = netloc.rpartition("@")[2]
    if hostport.startswith("["):
        end = hostport.find("]")
        if end == -1:
            raise ValueError(f"unterminated IPv6 host: {netloc!r}")
        host = "[" + ipaddress.IPv6Address(hostport[1:end]).compressed + "]"
        tail = hostport[end + 1 :]
        if tail and not tail.startswith(":"):
            raise ValueError(f"invalid authority: {netloc!r}")
        port_str = tail[1:]
    else:
        host, _, port_str = hostport.partition(":")

    port: Optional[int] = None
    if port_str:
        if not port_str.isdigit() or int(port_str) > 65535:
            raise ValueError(f"invalid port in {netloc!r}")
        port = int(port_str)
    return (host or None), port


def _remove_dot_segments(path: str) -> str:
    if not path.startswith("/"):
        return path
    segments = path.split("/")[1:]
    out: list[str] = []
    for i, seg in enumerate(segments):
        last = i == len(segments) - 1
        lowered = seg.lower()
        if lowered in _DOUBLE_DOT_SEGMENTS:
            if out:
                out.pop()
            if last:
                out.append("")
        elif lowered in _DOT_SEGMENTS:
            if last:
                out.append("")
        else:
            out.append(seg)
    return "/" + "/".join(out)
