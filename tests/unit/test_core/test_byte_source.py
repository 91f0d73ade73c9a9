"""Unit tests for byte sources."""

import io
import pytest
from uranium_sdk.core.byte_source import (
    BytesSource,
    PathByteSource,
    guess_mime_type,
    to_byte_source,
)
from uranium_sdk.core.exceptions import ErrorKind, UraniumError


def test_bytes_source_ranges():
    """Ranges are half-open and clipped to the data."""
    source = BytesSource(b"0123456789", "image/png")

    assert source.length() == 10
    assert source.mime_type() == "image/png"
    assert source.read_range(0, 4) == b"0123"
    assert source.read_range(8, 12) == b"89"


def test_path_source_reads_ranges(tmp_path):
    """Path sources read only the requested range."""
    path = tmp_path / "photo.jpg"
    path.write_bytes(b"abcdefghij")

    source = PathByteSource(path)

    assert source.length() == 10
    assert source.mime_type() == "image/jpeg"
    assert source.read_range(3, 6) == b"def"


def test_guess_mime_type_defaults_to_binary():
    """Unknown extensions fall back to application/octet-stream."""
    assert guess_mime_type("clip.mp4") == "video/mp4"
    assert guess_mime_type("animation.gif") == "image/gif"
    assert guess_mime_type(None) == "application/octet-stream"


def test_to_byte_source_variants(tmp_path):
    """Bytes, paths, file objects and sources are accepted."""
    path = tmp_path / "image.png"
    path.write_bytes(b"png")

    assert to_byte_source(b"raw", "image/png").read_range(0, 3) == b"raw"
    assert to_byte_source(bytearray(b"raw")).length() == 3
    assert to_byte_source(str(path)).mime_type() == "image/png"
    assert to_byte_source(path, "image/webp").mime_type() == "image/webp"

    existing = BytesSource(b"x")
    assert to_byte_source(existing) is existing

    with open(path, "rb") as fh:
        source = to_byte_source(fh)
    assert source.mime_type() == "image/png"
    assert source.read_range(0, 3) == b"png"


def test_to_byte_source_rejects_missing_file(tmp_path):
    """A path that does not exist is a validation failure."""
    with pytest.raises(UraniumError) as exc_info:
        to_byte_source(tmp_path / "missing.png")

    assert exc_info.value.kind == ErrorKind.VALIDATION
    assert exc_info.value.code == "INVALID_FILE"


def test_to_byte_source_rejects_text_and_unknown_payloads():
    """Text streams and arbitrary objects are rejected."""
    with pytest.raises(UraniumError) as exc_info:
        to_byte_source(io.StringIO("text"))
    assert exc_info.value.code == "INVALID_FILE_TYPE"

    with pytest.raises(UraniumError) as exc_info:
        to_byte_source(12345)
    assert exc_info.value.code == "INVALID_FILE_TYPE"
