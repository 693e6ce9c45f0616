from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

import orjson

from url_cache.disk_cache import CacheStore
from url_cache.encoders import build_path_encoder
from url_cache.http_cache import HttpCache
from url_cache.locator import Locator, Scheme
from url_cache.logging_config import setup_logging
from url_cache.settings import Cfg, default_cache_root, load_cfg


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="url-cache", description="URL-keyed disk cache")
    p.add_argument("--config", default=None, help="Path to config YAML")
    p.add_argument("--root", default=None, help="Cache root directory (overrides config)")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("path", help="Print the cache path of a URL, relative to the root")
    sp.add_argument("url")
    sp.add_argument("--ext", default=None, help="Extension to append (e.g. js)")

    sp = sub.add_parser("put", help="Store a file's bytes under a URL")
    sp.add_argument("url")
    sp.add_argument("src", help="File to store")
    sp.add_argument("--ext", default=None)
    sp.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="NAME:VALUE",
        help="Response header recorded in the metadata of http(s) entries (repeatable)",
    )

    sp = sub.add_parser("get", help="Write the cached bytes of a URL to stdout")
    sp.add_argument("url")
    sp.add_argument("--ext", default=None)

    sp = sub.add_parser("meta", help="Print the metadata recorded for an http(s) URL")
    sp.add_argument("url")
    return p


def _load(args: argparse.Namespace) -> CacheStore:
    if args.config:
        cfg = load_cfg(args.config)
    else:
        cfg = Cfg(cache_root=default_cache_root(), path_style="auto", log_level="WARNING")
    setup_logging(cfg.log_level)
    root = Path(args.root).expanduser().resolve() if args.root else cfg.cache_root
    return CacheStore(root, build_path_encoder(cfg.path_style))


def _cache_filename(store: CacheStore, locator: Locator, ext: Optional[str]) -> Optional[Path]:
    if ext:
        return store.get_cache_filename_with_extension(locator, ext)
    return store.get_cache_filename(locator)


def _parse_headers(values: list[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for v in values:
        name, sep, value = v.partition(":")
        if not sep or not name.strip():
            raise ValueError(f"header must look like NAME:VALUE, got {v!r}")
        out[name.strip().lower()] = value.strip()
    return out


def run(args: argparse.Namespace) -> int:
    store = _load(args)
    locator = Locator.parse(args.url)

    if args.cmd == "meta":
        meta = HttpCache(store).get_metadata(locator)
        print(orjson.dumps(meta.__dict__, option=orjson.OPT_INDENT_2).decode("utf-8"))
        return 0

    filename = _cache_filename(store, locator, args.ext)
    if filename is None:
        print(f"[NOT CACHEABLE] {locator}", file=sys.stderr)
        return 1

    if args.cmd == "path":
        print(filename)
    elif args.cmd == "put":
        data = Path(args.src).read_bytes()
        headers = _parse_headers(args.header)
        is_http = Scheme.parse(locator.scheme) in (Scheme.HTTP, Scheme.HTTPS)
        if is_http and not args.ext:
            HttpCache(store).set(locator, headers, data)
        elif headers:
            raise ValueError("--header is only supported for http(s) URLs without --ext")
        else:
            store.set(filename, data)
        print(store.root / filename)
    elif args.cmd == "get":
        sys.stdout.buffer.write(store.get(filename))
        sys.stdout.flush()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except FileNotFoundError as e:
        print(f"[NOT FOUND] {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"[IO ERROR] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
