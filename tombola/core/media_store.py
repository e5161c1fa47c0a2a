"""Write uploaded clips to the media directory and delete them on release."""
import logging
import threading
import uuid
from pathlib import Path
from typing import Dict, Optional

from tombola.config import AUDIO_EXTENSIONS, MEDIA_DIR
from tombola.models.entry import MediaRef, RawMedia

logger = logging.getLogger(__name__)


def is_audio(name: str, content_type: Optional[str] = None) -> bool:
    """True if the upload looks like an audio clip (by content type or extension)."""
    if content_type and content_type.lower().startswith("audio/"):
        return True
    return Path(name or "").suffix.lower() in AUDIO_EXTENSIONS


class MediaStore:
    """Owns the files behind MediaRefs. register() on add, release() on remove/clear."""

    def __init__(self, media_dir: Path = MEDIA_DIR) -> None:
        self._media_dir = Path(media_dir)
        self._live: Dict[str, MediaRef] = {}
        self._lock = threading.Lock()

    @property
    def media_dir(self) -> Path:
        return self._media_dir

    def register(self, raw: RawMedia) -> MediaRef:
        """Store the upload on disk and return a handle to it."""
        self._media_dir.mkdir(parents=True, exist_ok=True)
        handle = uuid.uuid4().hex
        suffix = Path(raw.name or "").suffix.lower()
        path = self._media_dir / f"{handle}{suffix}"
        path.write_bytes(raw.data)
        ref = MediaRef(handle=handle, path=str(path), filename=raw.name)
        with self._lock:
            self._live[handle] = ref
        logger.debug("Registered %s as %s", raw.name, path.name)
        return ref

    def release(self, ref: MediaRef) -> None:
        """Delete the file behind ref. Idempotent: releasing twice is a no-op."""
        with self._lock:
            if self._live.pop(ref.handle, None) is None:
                return
        try:
            Path(ref.path).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Release %s: %s", ref.path, e)
            return
        logger.debug("Released %s", ref.filename)

    def is_live(self, ref: MediaRef) -> bool:
        with self._lock:
            return ref.handle in self._live

    def live_count(self) -> int:
        with self._lock:
            return len(self._live)

    def release_all(self) -> int:
        """Release every handle still registered (shutdown cleanup). Returns how many."""
        with self._lock:
            refs = list(self._live.values())
        for ref in refs:
            self.release(ref)
        return len(refs)
