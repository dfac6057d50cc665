from dataclasses import dataclass
from enum import Enum, auto

from match3.constants import BONUS_RADIUS_X, BONUS_RADIUS_Y


class BonusShape(Enum):
    """Area shapes a bonus item can destroy when it is triggered."""
    CROSS = auto()


@dataclass(frozen=True, slots=True)
class Bonus:
    """Bonus descriptor attached to an item at generation time.

    radius_x/radius_y count the cells affected on each side of the bonus's own
    position. Expansion behaviour is looked up per shape in
    ``match3.systems.bonus_effects``.
    """
    shape: BonusShape = BonusShape.CROSS
    radius_x: int = BONUS_RADIUS_X
    radius_y: int = BONUS_RADIUS_Y
