from __future__ import annotations

import logging
import os
import secrets
from pathlib import Path

logger = logging.getLogger(__name__)


def io_error_like(err: OSError, message: str) -> OSError:
    """New OSError of the same kind as `err` (OSError picks the subclass from errno)."""
    if err.errno is None:
        return OSError(message)
    return OSError(err.errno, message)


def with_io_context(err: OSError, context: str) -> OSError:
    return io_error_like(err, f"{err.strerror or err} (for '{context}')")


def atomic_write_file(path: str | Path, data: bytes, mode: int) -> None:
    """
    Write `data` to `path` so readers never see a partial file.

    Pattern: write <stem>.<rand>.tmp next to the target -> fsync -> rename.
    The temp file is removed if anything fails before the rename completes.
    """
    path = Path(path)
    tmp = path.with_name(f"{path.stem}.{secrets.token_hex(4)}.tmp")

    flags = os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0)
    fd = os.open(tmp, flags, mode)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        _discard(tmp)
        raise
    logger.debug("wrote %d bytes to %s", len(data), path)


def _discard(tmp: Path) -> None:
    try:
        tmp.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("could not remove temp file %s: %s", tmp, e)
