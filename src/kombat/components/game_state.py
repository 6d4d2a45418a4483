"""Game state resource describing the active high-level mode."""
from dataclasses import dataclass
from enum import Enum, auto


class GameMode(Enum):
    """Encounter lifecycle; only PLAYING accepts board commands."""
    IDLE = auto()
    PLAYING = auto()
    LEVEL_COMPLETE = auto()
    WON = auto()
    LOST = auto()


@dataclass
class GameState:
    """Singleton component storing the currently active game mode."""
    mode: GameMode = GameMode.IDLE
