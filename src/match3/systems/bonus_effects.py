from __future__ import annotations

from typing import Callable, Dict, List, Tuple

from match3.components.board import Board
from match3.components.bonus import Bonus, BonusShape

Point = Tuple[int, int]
BonusExpansion = Callable[[Board, Bonus, int, int], List[Point]]

_registry: Dict[BonusShape, BonusExpansion] = {}


def register_bonus_shape(shape: BonusShape, expansion: BonusExpansion) -> None:
    """Register the destroy behaviour for a bonus shape."""

    if shape in _registry:
        raise ValueError(f"Bonus shape '{shape.name}' already registered")
    _registry[shape] = expansion


def expansion_for(shape: BonusShape) -> BonusExpansion:
    try:
        return _registry[shape]
    except KeyError as exc:
        raise KeyError(f"Bonus shape '{shape.name}' is not registered") from exc


def apply_bonus(board: Board, bonus: Bonus, x: int, y: int) -> List[Point]:
    """Destroy the cells covered by ``bonus`` centred on (x, y).

    Returns only the points that were newly destroyed; cells already flagged
    are left alone so nothing is scored twice.
    """

    return expansion_for(bonus.shape)(board, bonus, x, y)


def _destroy(board: Board, x: int, y: int, destroyed: List[Point]) -> None:
    item = board.item_at(x, y)
    if not item.destroyed:
        item.destroyed = True
        destroyed.append((x, y))


def destroy_cross(board: Board, bonus: Bonus, center_x: int, center_y: int) -> List[Point]:
    destroyed: List[Point] = []
    # Horizontal arm, then vertical arm; both clipped to the board.
    for x in range(center_x - bonus.radius_x, center_x + bonus.radius_x + 1):
        if 0 <= x < board.width:
            _destroy(board, x, center_y, destroyed)
    for y in range(center_y - bonus.radius_y, center_y + bonus.radius_y + 1):
        if 0 <= y < board.height:
            _destroy(board, center_x, y, destroyed)
    return destroyed


register_bonus_shape(BonusShape.CROSS, destroy_cross)
