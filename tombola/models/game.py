"""Session phase and draw state names, game counters."""
from dataclasses import dataclass

PHASE_SETUP = "setup"
PHASE_DRAW = "draw"

STATE_IDLE = "idle"
STATE_DRAWING = "drawing"
STATE_SETTLED = "settled"
STATE_TERMINAL = "terminal"

DIRECTION_UP = "up"
DIRECTION_DOWN = "down"


@dataclass
class GameStats:
    """Counters shown in the game header."""
    total: int
    drawn: int
    remaining: int
