"""
Byte sources for uploads.

The orchestrator only sees the ByteSource protocol. Concrete payload types
(bytes, filesystem paths, binary file objects) are dispatched once, in
``to_byte_source``, at the boundary where callers hand over their payload.
"""

import mimetypes
import os
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable
from .exceptions import UraniumError
from ..utils.constants import BINARY_CONTENT_TYPE


@runtime_checkable
class ByteSource(Protocol):
    """Addressable payload with a known length and MIME type."""

    def length(self) -> int: ...

    def mime_type(self) -> str: ...

    def read_range(self, start: int, end: int) -> bytes: ...


class BytesSource:
    """In-memory payload."""

    def __init__(self, data: bytes, mime_type: Optional[str] = None):
        self._data = bytes(data)
        self._mime_type = mime_type or BINARY_CONTENT_TYPE

    def length(self) -> int:
        return len(self._data)

    def mime_type(self) -> str:
        return self._mime_type

    def read_range(self, start: int, end: int) -> bytes:
        return self._data[start:end]


class PathByteSource:
    """Payload read from a file on disk."""

    def __init__(self, path: os.PathLike, mime_type: Optional[str] = None):
        self.path = Path(path)
        self._mime_type = mime_type or guess_mime_type(self.path.name)

    def length(self) -> int:
        return self.path.stat().st_size

    def mime_type(self) -> str:
        return self._mime_type

    def read_range(self, start: int, end: int) -> bytes:
        with self.path.open("rb") as fh:
            fh.seek(start)
            return fh.read(max(0, end - start))


def guess_mime_type(filename: Optional[str]) -> str:
    """Guess MIME type from a filename extension."""
    if not filename:
        return BINARY_CONTENT_TYPE
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type or BINARY_CONTENT_TYPE


def to_byte_source(payload: Any, mime_type: Optional[str] = None) -> ByteSource:
    """
    Convert a caller-supplied payload into a ByteSource.
    Args:
        payload: bytes-like object, filesystem path, binary file object or ByteSource
        mime_type: MIME type override
    Returns:
        ByteSource for the payload
    """
    if isinstance(payload, ByteSource):
        return payload

    if isinstance(payload, (bytes, bytearray, memoryview)):
        return BytesSource(bytes(payload), mime_type)

    if isinstance(payload, (str, os.PathLike)):
        path = Path(payload)
        if not path.is_file():
            raise UraniumError.validation(f"File not found: {path}", "INVALID_FILE", path=str(path))
        return PathByteSource(path, mime_type)

    read = getattr(payload, "read", None)
    if callable(read):
        data = read()
        if not isinstance(data, (bytes, bytearray)):
            raise UraniumError.validation("File object must be opened in binary mode", "INVALID_FILE_TYPE")
        name = getattr(payload, "name", None)
        return BytesSource(data, mime_type or guess_mime_type(name if isinstance(name, str) else None))

    raise UraniumError.validation("Invalid file type", "INVALID_FILE_TYPE", payload_type=type(payload).__name__)
