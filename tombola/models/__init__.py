"""Data models for entries, media and game state."""
from tombola.models.entry import Entry, MediaRef, RawMedia
from tombola.models.game import GameStats

__all__ = [
    "Entry",
    "GameStats",
    "MediaRef",
    "RawMedia",
]
