"""Core services: registry, draw engine, session, media store, players."""
from tombola.core.draw_engine import DrawEngine
from tombola.core.media_store import MediaStore
from tombola.core.registry import Registry
from tombola.core.session import GameSession, PhaseError

__all__ = ["DrawEngine", "GameSession", "MediaStore", "PhaseError", "Registry"]
