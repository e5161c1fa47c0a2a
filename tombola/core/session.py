"""Game session: setup phase edits the registry, draw phase runs a DrawEngine."""
import logging
import random
import threading
from typing import Any, Callable, Optional, Sequence

from tombola.config import MAX_ENTRIES
from tombola.core.draw_engine import DrawEngine
from tombola.core.registry import Registry
from tombola.models.entry import Entry, RawMedia
from tombola.models.game import PHASE_DRAW, PHASE_SETUP, STATE_IDLE

logger = logging.getLogger(__name__)


class PhaseError(RuntimeError):
    """Operation not allowed in the current phase."""


def entry_to_dict(e: Entry) -> dict:
    return {
        "id": e.id,
        "name": e.display_name,
        "filename": e.media_ref.filename,
    }


class GameSession:
    """Owns the Registry and, during the draw phase, the DrawEngine."""

    def __init__(
        self,
        media_store,
        player,
        capacity: int = MAX_ENTRIES,
        uniform_int: Callable[[int], int] = random.randrange,
    ) -> None:
        self._player = player
        self._uniform_int = uniform_int
        self._lock = threading.RLock()
        self.registry = Registry(media_store, capacity=capacity)
        self._engine: Optional[DrawEngine] = None
        self._phase = PHASE_SETUP

    @property
    def phase(self) -> str:
        return self._phase

    @property
    def engine(self) -> Optional[DrawEngine]:
        return self._engine

    def _require_setup(self) -> None:
        if self._phase != PHASE_SETUP:
            raise PhaseError("entries cannot change once the draw has started")

    def _require_engine(self) -> DrawEngine:
        if self._phase != PHASE_DRAW or self._engine is None:
            raise PhaseError("the draw has not started")
        return self._engine

    # Setup phase

    def add_media(self, items: Sequence[RawMedia]) -> int:
        with self._lock:
            self._require_setup()
            return self.registry.add(items)

    def remove_entry(self, entry_id: int) -> bool:
        with self._lock:
            self._require_setup()
            return self.registry.remove(entry_id)

    def move_entry(self, index: int, direction: str) -> bool:
        with self._lock:
            self._require_setup()
            return self.registry.move_adjacent(index, direction)

    def start_draw(self) -> DrawEngine:
        """Freeze the registry and start a fresh game over its numbers."""
        with self._lock:
            self._require_setup()
            if len(self.registry) == 0:
                raise PhaseError("add at least one clip before starting")
            media = {e.id: e.media_ref for e in self.registry.entries}
            self._engine = DrawEngine(media, self._player, uniform_int=self._uniform_int)
            self._phase = PHASE_DRAW
            logger.info("Draw started with %d numbers", len(media))
            return self._engine

    # Draw phase

    def draw(self) -> Optional[int]:
        with self._lock:
            return self._require_engine().draw()

    def replay(self) -> bool:
        with self._lock:
            return self._require_engine().replay()

    def restart_game(self) -> None:
        with self._lock:
            self._require_engine().restart()

    def back_to_setup(self) -> None:
        """Discard the game and unfreeze the registry; entries are kept."""
        with self._lock:
            self._require_engine()
            self._discard_engine()
            logger.info("Back to setup with %d entries", len(self.registry))

    # Either phase

    def reset_all(self) -> None:
        """Stop playback, release all media, empty the registry, return to setup."""
        with self._lock:
            self._discard_engine()
            dropped = self.registry.clear()
            logger.info("Session reset, released %d clip(s)", dropped)

    def _discard_engine(self) -> None:
        if self._engine is not None:
            self._engine.close()
        self._engine = None
        self._phase = PHASE_SETUP

    def snapshot(self) -> dict[str, Any]:
        """Session state for the API."""
        with self._lock:
            engine = self._engine
            entries = []
            for e in self.registry.entries:
                item = entry_to_dict(e)
                # Board cell state: number already called in this game
                item["drawn"] = engine.is_drawn(e.id) if engine is not None else False
                entries.append(item)
            if engine is None:
                game = {
                    "state": STATE_IDLE,
                    "drawn_order": [],
                    "current": None,
                    "current_name": None,
                    "busy": False,
                    "terminal": False,
                    "total": len(entries),
                    "drawn": 0,
                    "remaining": len(entries),
                }
            else:
                stats = engine.stats
                current = engine.current
                current_entry = self.registry.get(current) if current is not None else None
                game = {
                    "state": engine.state,
                    "drawn_order": engine.drawn_order,
                    "current": current,
                    "current_name": current_entry.display_name if current_entry else None,
                    "busy": engine.busy,
                    "terminal": engine.is_terminal,
                    "total": stats.total,
                    "drawn": stats.drawn,
                    "remaining": stats.remaining,
                }
            return {
                "phase": self._phase,
                "capacity": self.registry.capacity,
                "has_media": len(entries) > 0,
                "entries": entries,
                "game": game,
            }
