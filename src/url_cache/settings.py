# src/url_cache/settings.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
import yaml

from url_cache.encoders import PATH_STYLES


@dataclass
class Cfg:
    cache_root: Path    # absolute
    path_style: str     # auto / posix / windows
    log_level: str


def default_cache_root() -> Path:
    return Path.home() / ".cache" / "url-cache"


def _as_rooted_path(root: Path, p: str | Path) -> Path:
    """Resolve a possibly-relative path under root."""
    pp = Path(p).expanduser()
    return pp if pp.is_absolute() else (root / pp)


def _section(obj: dict[str, Any], name: str) -> dict[str, Any]:
    sec = obj.get(name, {}) or {}
    if not isinstance(sec, dict):
        raise ValueError(f"{name} must be a mapping")
    return sec


def load_cfg(path: str | Path) -> Cfg:
    """
    Load the cache YAML config.

    Example:
      cache:
        root: "/var/cache/url-cache"   # relative -> next to this file
        path_style: "auto"
      logging:
        level: "INFO"
    """
    path = Path(path)
    try:
        obj: Any = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"invalid config YAML: {path}: {e}") from e
    if not isinstance(obj, dict):
        raise ValueError("config root must be a mapping (YAML dict)")

    cache = _section(obj, "cache")
    log = _section(obj, "logging")

    root = cache.get("root")
    if not root:
        raise ValueError("cache.root is required")

    path_style = str(cache.get("path_style", "auto")).lower()
    if path_style not in PATH_STYLES:
        raise ValueError(f"cache.path_style must be one of {PATH_STYLES}, got {path_style!r}")

    return Cfg(
        cache_root=_as_rooted_path(path.resolve().parent, str(root)),
        path_style=path_style,
        log_level=str(log.get("level", "INFO")).upper(),
    )
