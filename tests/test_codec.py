from __future__ import annotations

from pathlib import Path

import pytest

from url_cache.codec import derive_base_path, derive_path_with_extension
from url_cache.common.hashing import sha256_hex
from url_cache.encoders import PosixPathEncoder, WindowsPathEncoder
from url_cache.locator import Locator

POSIX = PosixPathEncoder()
WINDOWS = WindowsPathEncoder()


def _base(url: str, encoder=POSIX):
    return derive_base_path(Locator.parse(url), encoder)


def _with_ext(url: str, ext: str, encoder=POSIX):
    return derive_path_with_extension(Locator.parse(url), ext, encoder)


def test_file_url_strips_leading_slash():
    assert _base("file:///a/b/c") == Path("file", "a", "b", "c")


def test_file_root_maps_to_scheme_dir():
    assert _base("file:///") == Path("file")


def test_windows_drive_letter():
    assert _base("file:///C:/a/b", WINDOWS) == Path("file", "C", "a", "b")


def test_windows_unc_share():
    assert _base("file://192.168.0.1/c$/deno/main.ts", WINDOWS) == Path(
        "file", "UNC", "192.168.0.1", "c$", "deno", "main.ts"
    )


def test_file_url_with_remote_host_is_not_applicable_on_posix():
    assert _base("file://server/share/a.ts") is None


def test_wasm_host_and_segments():
    assert _base("wasm://wasm/d1c677ea") == Path("wasm", "wasm", "d1c677ea")


def test_wasm_port_is_mangled():
    assert _base("wasm://wasm:8080/a/b") == Path("wasm", "wasm_PORT8080", "a", "b")


def test_wasm_without_host_is_not_applicable():
    assert _base("wasm:d1c677ea") is None


def test_http_path_is_hashed_under_host_port():
    got = _base("http://localhost:8000/std/http/file_server.ts")
    assert got == Path("http", "localhost_PORT8000", sha256_hex(b"/std/http/file_server.ts"))


def test_https_query_is_part_of_key_fragment_is_not():
    with_query = _base("https://deno.land/x/mod.ts?v=1")
    assert with_query == Path("https", "deno.land", sha256_hex(b"/x/mod.ts?v=1"))
    assert _base("https://deno.land/x/mod.ts#top") == _base("https://deno.land/x/mod.ts")
    assert with_query != _base("https://deno.land/x/mod.ts")


def test_data_url_is_hashed():
    assert _base("data:text/plain,hello") == Path("data", sha256_hex(b"text/plain,hello"))


@pytest.mark.parametrize("url", ["foo://bar", "blob:https://example.com/1", "ftp://example.com/a"])
def test_unknown_scheme_is_not_applicable(url):
    assert _base(url) is None


def test_derivation_is_deterministic():
    url = "https://example.com/a/b.js?x=1"
    assert _base(url) == _base(url)
    assert _base("file:///a/b") == _base("file:///a/b")


def test_different_schemes_differ_in_first_component():
    a = _base("http://example.com/a")
    b = _base("https://example.com/a")
    assert a is not None and b is not None
    assert a.parts[0] != b.parts[0]


def test_extension_is_set_when_missing():
    assert _with_ext("file:///home/foo/bar", "json") == Path("file", "home", "foo", "bar.json")


def test_extension_is_appended_to_existing_one():
    assert _with_ext("file:///home/foo/bar.ts", "js") == Path("file", "home", "foo", "bar.ts.js")


def test_extension_on_hashed_http_name():
    got = _with_ext("http://localhost:8000/std/http/file_server.ts", "js")
    assert got == Path("http", "localhost_PORT8000", sha256_hex(b"/std/http/file_server.ts") + ".js")


def test_extension_accepts_leading_dot():
    assert _with_ext("file:///a/b.ts", ".map") == Path("file", "a", "b.ts.map")


def test_extension_not_applicable_propagates():
    assert _with_ext("foo://bar", "js") is None


def test_default_encoder_is_used_when_none_given():
    assert derive_base_path(Locator.parse("wasm://wasm/x")) == Path("wasm", "wasm", "x")


def test_encoded_slash_does_not_collide_with_real_slash():
    assert _base("file:///a/b") == Path("file", "a", "b")
    assert _base("file:///a%2Fb") is None


@pytest.mark.parametrize(
    "url, encoder",
    [
        ("file:///x/..%2F..%2F..%2Fescaped", POSIX),
        ("file:///C:/a/..%2F..%2F..%2Fevil", WINDOWS),
    ],
)
def test_file_path_never_climbs_out_of_scheme_dir(url, encoder):
    assert _base(url, encoder) is None


@pytest.mark.parametrize("url", ["wasm://../x", "wasm://./x"])
def test_wasm_dot_host_is_not_applicable(url):
    assert _base(url) is None


def test_undecodable_file_bytes_give_distinct_paths():
    assert _base("file:///x/%FF") != _base("file:///x/%FE")


def test_special_scheme_without_slashes_is_hierarchical():
    assert _base("file:foo") == Path("file", "foo")
    assert _base("http:example.com/a") == _base("http://example.com/a")


@pytest.mark.parametrize("ext", ["x/y", "x\\y", "x\0y"])
def test_extension_with_separator_is_not_applicable(ext):
    assert _with_ext("file:///a/b.ts", ext) is None
