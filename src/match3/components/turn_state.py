from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple


class TurnPhase(Enum):
    """Steps of the match -> drop -> refill loop run after a committed swap."""
    IDLE = auto()
    MATCH_OR_POSSIBLE_GET = auto()
    ITEM_GENERATE_AND_DROP = auto()
    GAME_OVER = auto()


@dataclass(slots=True)
class TurnState:
    """Tracks orchestration state shared across systems."""

    phase: TurnPhase = TurnPhase.IDLE
    cascade_depth: int = 0
    hint: Optional[Tuple[int, int]] = None
    pending_animations: int = 0
