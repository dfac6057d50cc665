from dataclasses import dataclass

from match3.constants import SCORE_MULTIPLIER


@dataclass(slots=True)
class Score:
    """Running score; lives on the same entity as GameState."""
    value: int = 0
    multiplier: int = SCORE_MULTIPLIER

    def add_cells(self, count: int) -> int:
        delta = count * self.multiplier
        self.value += delta
        return delta
