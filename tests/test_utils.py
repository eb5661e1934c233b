"""Tests for path mapping, content classification and artifact copy."""

import io
import tempfile
from pathlib import Path

import pytest

from vaultsync.errors import ConfigError
from vaultsync.tree.models import Artifact
from vaultsync.utils.copy import (
    LINE_SEPARATORS,
    copy_artifact,
    line_separator,
    normalize_line_endings,
    render_artifact,
)
from vaultsync.utils.mime import MimeTypes, guess_content_type
from vaultsync.utils.paths import (
    child_path,
    join_logical,
    platform_name,
    platform_path,
    repository_name,
    split_platform_path,
)


# --- Path Tests ---


def test_child_path_splits_segments():
    base = Path("/base")
    assert child_path(base, "a/b/c.txt") == base / "a" / "b" / "c.txt"
    assert child_path(base, "single") == base / "single"
    assert child_path(base, "a//b/") == base / "a" / "b"
    assert child_path(base, "") == base


def test_child_path_does_not_touch_filesystem():
    with tempfile.TemporaryDirectory() as tmpdir:
        result = child_path(tmpdir, "x/y/z")
        assert not result.exists()
        assert not (Path(tmpdir) / "x").exists()


def test_split_platform_path():
    assert split_platform_path("/a/b/") == ["a", "b"]


def test_join_logical():
    assert join_logical("/content/site", "a.txt") == "/content/site/a.txt"
    assert join_logical("/content/site/", "a.txt") == "/content/site/a.txt"
    assert join_logical("/", "a.txt") == "/a.txt"


def test_platform_name_escapes_namespaces_and_reserved_chars():
    assert platform_name("jcr:content") == "_jcr_content"
    assert platform_name("plain") == "plain"
    assert platform_name("_private") == "__private"
    assert platform_name("a:b:c") == "_a_b%3ac"
    assert platform_name("what?") == "what%3f"


def test_repository_name_reverses_platform_name():
    for name in ["jcr:content", "plain", "_private", "__x_y", "a:b:c", "100%", "a*b"]:
        assert repository_name(platform_name(name)) == name


def test_platform_path_maps_each_segment():
    assert platform_path("site/jcr:content/a.txt") == "site/_jcr_content/a.txt"


# --- Mime Tests ---


def test_text_types_are_not_binary():
    mime = MimeTypes()
    assert not mime.is_binary("text/plain")
    assert not mime.is_binary("text/html; charset=utf-8")
    assert not mime.is_binary("application/json")
    assert not mime.is_binary("application/xml")
    assert not mime.is_binary("image/svg+xml")


def test_binary_and_unknown_types():
    mime = MimeTypes()
    assert mime.is_binary("image/png")
    assert mime.is_binary("application/octet-stream")
    assert mime.is_binary(None)
    assert mime.is_binary("")


def test_configured_types():
    mime = MimeTypes(text_types=["application/x-custom"], binary_types=["text/x-blob"])
    assert mime.is_text("application/x-custom")
    assert mime.is_binary("text/x-blob")


def test_guess_content_type():
    assert guess_content_type("index.html") == "text/html"
    assert guess_content_type("logo.png") == "image/png"
    assert guess_content_type("no-extension") == "application/octet-stream"


# --- Copy Tests ---


def test_normalize_line_endings():
    assert normalize_line_endings(b"a\r\nb\nc\rd", b"\n") == b"a\nb\nc\nd"
    assert normalize_line_endings(b"a\nb", b"\r\n") == b"a\r\nb"


def test_line_separator_names():
    assert line_separator("lf") == b"\n"
    assert line_separator("CRLF") == b"\r\n"
    assert line_separator("native") == LINE_SEPARATORS["native"]
    with pytest.raises(ConfigError):
        line_separator("mac")


def test_render_artifact_from_sources():
    with tempfile.TemporaryDirectory() as tmpdir:
        source = Path(tmpdir) / "src.bin"
        source.write_bytes(b"\x00\r\n\x01")

        assert render_artifact(Artifact("a", source=source)) == b"\x00\r\n\x01"
        assert render_artifact(Artifact("a", loader=lambda: b"x\r\n"), b"\n") == b"x\n"
        assert render_artifact(Artifact("a")) == b""


def test_copy_artifact_skips_identical_content():
    with tempfile.TemporaryDirectory() as tmpdir:
        target = Path(tmpdir) / "a.txt"
        artifact = Artifact("a.txt", "text/plain", data=b"line\r\n")

        assert copy_artifact(artifact, target, b"\n") is True
        assert target.read_bytes() == b"line\n"
        assert copy_artifact(artifact, target, b"\n") is False
        assert copy_artifact(artifact, target, b"\r\n") is True


def test_artifact_open_returns_stream():
    stream = Artifact("a", data=b"abc").open()
    assert isinstance(stream, io.BytesIO)
    assert stream.read() == b"abc"
