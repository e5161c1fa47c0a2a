"""Shared application state (injected into routes)."""
from tombola.config import MAX_ENTRIES
from tombola.core.media_store import MediaStore
from tombola.core.player import get_player
from tombola.core.session import GameSession


class AppState:
    def __init__(self, media_store: MediaStore | None = None, player=None, capacity: int = MAX_ENTRIES) -> None:
        self.media_store = media_store if media_store is not None else MediaStore()
        self._player = player
        self._capacity = capacity
        self._session: GameSession | None = None

    @property
    def player(self):
        if self._player is None:
            self._player = get_player()
        return self._player

    @property
    def session(self) -> GameSession:
        if self._session is None:
            self._session = GameSession(self.media_store, self.player, capacity=self._capacity)
        return self._session

    def shutdown(self) -> None:
        """Stop playback and delete every stored clip."""
        if self._session is not None:
            self._session.reset_all()
        self.media_store.release_all()


_state = AppState()


def get_state() -> AppState:
    return _state
