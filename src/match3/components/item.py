from dataclasses import dataclass
from typing import Optional

from match3.components.bonus import Bonus


@dataclass(slots=True)
class Item:
    """Content of one board cell.

    destroyed is a soft flag: the item keeps occupying its cell until
    compaction moves it to the top of the column and regeneration replaces it.
    """
    type: int
    destroyed: bool = False
    bonus: Optional[Bonus] = None

    @property
    def is_bonus(self) -> bool:
        return self.bonus is not None
