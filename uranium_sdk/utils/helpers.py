"""Helper functions for common upload operations."""

import re
import uuid
from typing import Any, Mapping, Optional
from .constants import MIME_TYPE_PATTERN, MINTED_STATUSES, UPLOAD_STATUS_TEXT, FileType, UploadStatus

_SURROUNDING_QUOTES = re.compile(r"^[\"']|[\"']$")
_MIME_TYPE = re.compile(MIME_TYPE_PATTERN)


def detect_file_type(mime_type: Optional[str]) -> FileType:
    """
    Detect content category from MIME type.
    image/gif is its own category and is checked before generic images.
    """
    if not mime_type:
        return FileType.UNKNOWN

    normalized = mime_type.lower()
    if normalized == "image/gif":
        return FileType.GIF
    if normalized.startswith("image/"):
        return FileType.IMAGE
    if normalized.startswith("video/"):
        return FileType.VIDEO
    return FileType.UNKNOWN


def normalize_mime_type(mime_type: Optional[str]) -> Optional[str]:
    """
    Reduce a MIME type to its bare lowercase type/subtype.
    Parameters such as ";codecs=vp8" are dropped. Returns None when what is
    left is not a valid type/subtype.
    """
    if not mime_type:
        return None
    bare = mime_type.split(";", 1)[0].strip().lower()
    return bare if _MIME_TYPE.match(bare) else None


def extract_etag_from_headers(headers: Mapping[str, Any]) -> str:
    """
    Extract the ETag from response headers.
    Key lookup is case-insensitive; one layer of surrounding quotes is stripped.
    Returns an empty string when the header is absent.
    """
    etag = ""
    for key, value in headers.items():
        if key.lower() == "etag":
            etag = value or ""
            break
    return _SURROUNDING_QUOTES.sub("", str(etag))


def generate_device_id() -> str:
    """Generate a new device ID in the format sdk-{uuid}."""
    return f"sdk-{uuid.uuid4()}"


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format."""
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_bytes < 1024.0:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.2f} PB"


def is_asset_minted(status: Optional[str]) -> bool:
    """Check whether a backend mint status means the NFT is on chain."""
    try:
        return UploadStatus(status) in MINTED_STATUSES
    except ValueError:
        return False


def get_upload_status_text(status: Optional[str]) -> str:
    """Get display text for a backend mint status."""
    try:
        return UPLOAD_STATUS_TEXT[UploadStatus(status)]
    except ValueError:
        return "Unknown status"
