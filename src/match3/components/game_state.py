"""Game state resource describing whether a game is running."""
from dataclasses import dataclass
from enum import Enum, auto


class GameMode(Enum):
    """High-level lifecycle of a board game."""
    NOT_STARTED = auto()
    PLAYING = auto()
    GAME_OVER = auto()


@dataclass
class GameState:
    """Singleton component storing the current game mode."""
    mode: GameMode = GameMode.NOT_STARTED
