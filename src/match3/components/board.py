from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

from match3.components.item import Item

Point = Tuple[int, int]


@dataclass(slots=True)
class Board:
    """Fixed-size grid of items stored as a flat list (``x + y * width``).

    ``y == 0`` is the bottom row; gravity pulls items towards it.
    """
    width: int
    height: int
    item_count: int
    items: List[Item] = field(default_factory=list)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def index(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            raise IndexError(f"Point ({x}, {y}) outside {self.width}x{self.height} board")
        return x + y * self.width

    def item_at(self, x: int, y: int) -> Item:
        return self.items[self.index(x, y)]

    def set_item(self, x: int, y: int, item: Item) -> None:
        self.items[self.index(x, y)] = item

    def swap(self, a: Point, b: Point) -> None:
        ia = self.index(*a)
        ib = self.index(*b)
        self.items[ia], self.items[ib] = self.items[ib], self.items[ia]

    def points(self) -> Iterator[Point]:
        """Row-major iteration: bottom row first, left to right."""
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y)
