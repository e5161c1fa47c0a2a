"""Ordered, capacity-bounded list of clips with dense 1..N numbering."""
import logging
from typing import List, Optional, Sequence, Tuple

from tombola.config import MAX_ENTRIES
from tombola.models.entry import Entry, RawMedia
from tombola.models.game import DIRECTION_DOWN, DIRECTION_UP

logger = logging.getLogger(__name__)


class Registry:
    """Numbered clip list. Position i always carries id i + 1.

    The media store passed in is called to register each accepted upload and
    to release the handle of every entry that leaves the list.
    """

    def __init__(self, media_store, capacity: int = MAX_ENTRIES) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._media = media_store
        self._capacity = capacity
        self._entries: List[Entry] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def remaining(self) -> int:
        return max(0, self._capacity - len(self._entries))

    @property
    def is_full(self) -> bool:
        return self.remaining == 0

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def ids(self) -> List[int]:
        return [e.id for e in self._entries]

    def get(self, entry_id: int) -> Optional[Entry]:
        """Return entry by id or None."""
        if 1 <= entry_id <= len(self._entries):
            return self._entries[entry_id - 1]
        return None

    def _renumber(self) -> None:
        for i, entry in enumerate(self._entries):
            entry.id = i + 1

    def add(self, items: Sequence[RawMedia]) -> int:
        """Append as many items as fit; the rest are dropped. Returns how many were accepted."""
        remaining = self._capacity - len(self._entries)
        if remaining <= 0:
            logger.info("Registry full (%d), ignoring %d item(s)", self._capacity, len(items))
            return 0
        accepted = list(items)[:remaining]
        start = len(self._entries)
        for offset, raw in enumerate(accepted):
            ref = self._media.register(raw)
            self._entries.append(Entry(id=start + offset + 1, media_ref=ref, display_name=raw.name))
        dropped = len(items) - len(accepted)
        if dropped:
            logger.info("Registry capacity reached, dropped %d item(s)", dropped)
        return len(accepted)

    def remove(self, entry_id: int) -> bool:
        """Remove entry by id and release its media. Returns False if no such id."""
        entry = self.get(entry_id)
        if entry is None:
            return False
        self._media.release(entry.media_ref)
        self._entries.pop(entry_id - 1)
        self._renumber()
        return True

    def move_adjacent(self, index: int, direction: str) -> bool:
        """Swap the entry at index with its neighbour. 'up' is toward index 0.

        Returns False when the swap would leave the list.
        """
        if direction == DIRECTION_UP:
            other = index - 1
        elif direction == DIRECTION_DOWN:
            other = index + 1
        else:
            raise ValueError(f"direction must be '{DIRECTION_UP}' or '{DIRECTION_DOWN}', got {direction!r}")
        n = len(self._entries)
        if not (0 <= index < n and 0 <= other < n):
            return False
        self._entries[index], self._entries[other] = self._entries[other], self._entries[index]
        self._renumber()
        return True

    def clear(self) -> int:
        """Release every entry's media, then empty the list. Returns how many were dropped."""
        entries, self._entries = self._entries, []
        for entry in entries:
            self._media.release(entry.media_ref)
        return len(entries)
