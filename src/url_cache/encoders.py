from __future__ import annotations

import ipaddress
import os
from abc import ABC, abstractmethod
from pathlib import PurePath, PurePosixPath, PureWindowsPath
from typing import Optional
from urllib.parse import unquote

from url_cache.locator import Locator

PATH_STYLES = ("auto", "posix", "windows")


class LocalPathEncoder(ABC):
    """Turns `file:` locators into OS paths and OS paths into cache components."""

    @abstractmethod
    def to_file_path(self, locator: Locator) -> Optional[PurePath]: ...

    @abstractmethod
    def encode_local_path(self, path: PurePath) -> Optional[list[str]]: ...


class PosixPathEncoder(LocalPathEncoder):
    def to_file_path(self, locator: Locator) -> Optional[PurePath]:
        # only local files have a POSIX path
        if locator.host is not None:
            return None
        segments = locator.path_segments()
        if segments is None:
            return None
        decoded = _decode_segments(segments)
        if decoded is None:
            return None
        return PurePosixPath("/" + "/".join(decoded))

    def encode_local_path(self, path: PurePath) -> Optional[list[str]]:
        path = PurePosixPath(path)
        parts = list(path.parts)
        # must be relative, so strip the root
        if path.anchor:
            parts = parts[1:]
        return _checked(parts)


class WindowsPathEncoder(LocalPathEncoder):
    """
    Windows does not allow ":" in file names, so prefixes are re-encoded:

      C:\\deno\\main.ts             -> C / deno / main.ts
      \\\\server\\share\\main.ts    -> UNC / server / share / main.ts
    """

    def to_file_path(self, locator: Locator) -> Optional[PurePath]:
        segments = locator.path_segments()
        if segments is None:
            return None
        decoded = _decode_segments(segments)
        if decoded is None or any("\\" in s for s in decoded):
            return None

        if locator.host is None:
            if not decoded or not _is_drive(decoded[0]):
                return None
            return PureWindowsPath(decoded[0][0] + ":\\" + "\\".join(decoded[1:]))

        # UNC path needs at least a share name
        if not decoded or not decoded[0]:
            return None
        return PureWindowsPath("\\\\" + locator.host + "\\" + "\\".join(decoded))

    def encode_local_path(self, path: PurePath) -> Optional[list[str]]:
        path = PureWindowsPath(path)
        out: list[str] = []
        drive = path.drive
        if drive.startswith("\\\\"):
            server, _, share = drive[2:].partition("\\")
            if not server or not share or server in ("?", "."):
                raise ValueError(f"unsupported Windows path prefix: {drive!r}")
            out += ["UNC", sanitize_host(server), share]
        elif drive:
            out.append(drive[0])

        parts = list(path.parts)
        if path.anchor:
            parts = parts[1:]
        return _checked(out + parts)


def sanitize_host(server: str) -> str:
    host = server.lower()
    if host.startswith("[") and host.endswith("]"):
        host = "[" + ipaddress.IPv6Address(host[1:-1]).compressed + "]"
    return host.replace(":", "_")


def build_path_encoder(style: str = "auto") -> LocalPathEncoder:
    style = (style or "auto").lower()
    if style == "auto":
        style = "windows" if os.name == "nt" else "posix"
    if style == "posix":
        return PosixPathEncoder()
    if style == "windows":
        return WindowsPathEncoder()
    raise ValueError(f"Unsupported path_style: {style!r} (expected one of {PATH_STYLES})")


def _is_drive(segment: str) -> bool:
    return len(segment) == 2 and segment[0].isascii() and segment[0].isalpha() and segment[1] in ":|"


def _decode_segments(segments: list[str]) -> Optional[list[str]]:
    # undecodable bytes are kept as surrogates, like os.fsdecode
    decoded = [unquote(s, errors="surrogateescape") for s in segments]
    # an encoded "/" or NUL would change how many components the path has
    if any("/" in s or "\0" in s for s in decoded):
        return None
    return decoded


def _checked(parts: list[str]) -> Optional[list[str]]:
    if any(p == ".." for p in parts):
        return None
    return parts
