from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from url_cache.codec import derive_base_path, derive_path_with_extension
from url_cache.common.fs_util import atomic_write_file, io_error_like, with_io_context
from url_cache.encoders import LocalPathEncoder, build_path_encoder
from url_cache.http_cache import CACHE_PERM
from url_cache.locator import Locator, as_locator

logger = logging.getLogger(__name__)


class CacheStore:
    """Byte store rooted at an absolute directory; paths come from the codec."""

    def __init__(self, root: str | Path, encoder: Optional[LocalPathEncoder] = None) -> None:
        root = Path(root)
        # `root` must be an absolute path
        if not root.is_absolute():
            raise ValueError(f"cache root must be an absolute path, got {str(root)!r}")
        self.root = root
        self.encoder = encoder or build_path_encoder()

    def ensure_dir_exists(self, path: str | Path) -> None:
        path = Path(path)
        if path.is_dir():
            return
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise io_error_like(
                e, f"Could not create cache location: {path}\nCheck the permission of the directory."
            ) from e
        logger.debug("created cache directory %s", path)

    def get_cache_filename(self, url: Locator | str) -> Optional[Path]:
        return derive_base_path(as_locator(url), self.encoder)

    def get_cache_filename_with_extension(self, url: Locator | str, extension: str) -> Optional[Path]:
        return derive_path_with_extension(as_locator(url), extension, self.encoder)

    def exists(self, filename: str | Path) -> bool:
        return (self.root / filename).is_file()

    def get(self, filename: str | Path) -> bytes:
        return (self.root / filename).read_bytes()

    def set(self, filename: str | Path, data: bytes) -> None:
        path = self.root / filename
        try:
            if path.parent != path:
                self.ensure_dir_exists(path.parent)
            atomic_write_file(path, data, CACHE_PERM)
        except OSError as e:
            raise with_io_context(e, str(path)) from e
