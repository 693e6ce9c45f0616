"""url-cache - URL-keyed disk cache."""

from .codec import derive_base_path, derive_path_with_extension
from .disk_cache import CacheStore
from .encoders import LocalPathEncoder, PosixPathEncoder, WindowsPathEncoder, build_path_encoder
from .http_cache import CACHE_PERM, CachedUrlMetadata, HttpCache, url_to_filename
from .locator import Locator, Scheme

__version__ = "0.1.0"

__all__ = [
    # keys
    "Locator",
    "Scheme",

    # path derivation
    "derive_base_path",
    "derive_path_with_extension",
    "url_to_filename",
    "LocalPathEncoder",
    "PosixPathEncoder",
    "WindowsPathEncoder",
    "build_path_encoder",

    # storage
    "CacheStore",
    "HttpCache",
    "CachedUrlMetadata",
    "CACHE_PERM",
]
