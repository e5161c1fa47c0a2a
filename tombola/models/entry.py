"""Uploaded media and numbered board entries."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RawMedia:
    """An upload before it is registered with the media store."""
    name: str
    data: bytes
    content_type: Optional[str] = None


@dataclass(frozen=True)
class MediaRef:
    """Handle to a playable file owned by the media store."""
    handle: str
    path: str
    filename: str


@dataclass
class Entry:
    """One numbered clip; id is both call number and 1-based list position."""
    id: int
    media_ref: MediaRef
    display_name: str
