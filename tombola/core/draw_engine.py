"""Draw numbers without replacement and play the matching clip, one at a time."""
import logging
import random
import threading
from typing import Callable, Dict, List, Optional

from tombola.models.entry import MediaRef
from tombola.models.game import (
    STATE_DRAWING,
    STATE_IDLE,
    STATE_SETTLED,
    STATE_TERMINAL,
    GameStats,
)

logger = logging.getLogger(__name__)


class DrawEngine:
    """Draw state for one game: universe, drawn order, current pick, busy flag.

    media maps every id in the universe to its clip and is fixed for the
    lifetime of the engine. uniform_int(n) must return an int in [0, n).
    While busy (a clip is playing) draw() and replay() are ignored.
    """

    def __init__(
        self,
        media: Dict[int, MediaRef],
        player,
        uniform_int: Callable[[int], int] = random.randrange,
    ) -> None:
        self._media = dict(media)
        self._universe = frozenset(self._media)
        self._player = player
        self._uniform_int = uniform_int
        self._lock = threading.RLock()
        self._drawn: List[int] = []
        self._current: Optional[int] = None
        self._busy = False
        # Bumped on every play request and on restart/close; stale callbacks compare against it.
        self._generation = 0
        self._playing_ref: Optional[MediaRef] = None

    @property
    def universe(self) -> frozenset:
        return self._universe

    @property
    def drawn_order(self) -> List[int]:
        with self._lock:
            return list(self._drawn)

    @property
    def current(self) -> Optional[int]:
        return self._current

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def is_terminal(self) -> bool:
        with self._lock:
            return len(self._drawn) == len(self._universe)

    @property
    def state(self) -> str:
        with self._lock:
            if self._busy:
                return STATE_DRAWING
            if len(self._drawn) == len(self._universe):
                return STATE_TERMINAL
            if self._current is None:
                return STATE_IDLE
            return STATE_SETTLED

    @property
    def stats(self) -> GameStats:
        with self._lock:
            drawn = len(self._drawn)
            return GameStats(total=len(self._universe), drawn=drawn, remaining=len(self._universe) - drawn)

    def is_drawn(self, entry_id: int) -> bool:
        with self._lock:
            return entry_id in self._drawn

    def available(self) -> List[int]:
        """Ids not yet drawn, ascending."""
        with self._lock:
            drawn = set(self._drawn)
            return sorted(self._universe - drawn)

    def draw(self) -> Optional[int]:
        """Pick a random undrawn id and play its clip. Returns None when busy or finished."""
        with self._lock:
            if self._busy or len(self._drawn) >= len(self._universe):
                return None
            available = self.available()
            if not available:
                return None
            index = self._uniform_int(len(available))
            if not 0 <= index < len(available):
                raise ValueError(f"random source returned {index}, expected [0, {len(available)})")
            picked = available[index]
            self._drawn.append(picked)
            self._current = picked
            logger.info("Drew %d (%d/%d)", picked, len(self._drawn), len(self._universe))
            self._play(picked)
            return picked

    def replay(self) -> bool:
        """Play the current pick again without drawing. Returns False when busy or nothing drawn."""
        with self._lock:
            if self._busy or self._current is None:
                return False
            self._play(self._current)
            return True

    def restart(self) -> None:
        """Stop playback and forget every draw; the universe is kept."""
        with self._lock:
            ref = self._detach_playback()
            self._drawn = []
            self._current = None
        if ref is not None:
            self._player.stop(ref)
        logger.info("Game restarted (%d numbers)", len(self._universe))

    def close(self) -> None:
        """Stop playback before the engine is discarded."""
        with self._lock:
            ref = self._detach_playback()
        if ref is not None:
            self._player.stop(ref)

    def _detach_playback(self) -> Optional[MediaRef]:
        """Supersede the clip in flight and return it so the caller stops it outside the lock."""
        self._generation += 1
        ref, self._playing_ref = self._playing_ref, None
        self._busy = False
        return ref

    def _play(self, entry_id: int) -> None:
        ref = self._media[entry_id]
        self._generation += 1
        generation = self._generation
        self._busy = True
        self._playing_ref = ref
        self._player.play(
            ref,
            lambda: self._settle(generation, None),
            lambda reason: self._settle(generation, reason),
        )

    def _settle(self, generation: int, error: Optional[str]) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug("Ignoring playback report from a superseded clip")
                return
            self._busy = False
            self._playing_ref = None
        if error is not None:
            logger.warning("Playback of %s failed: %s", self._current, error)
