from __future__ import annotations

import random
from typing import Dict, Sequence, Tuple

from esper import World

from match3.systems.board_ops import get_board
from match3.utils.board_text import load_layout
from match3.world import create_world

Position = Tuple[int, int]


def diagonal_layout(width: int, height: int, types: str = "ABC") -> list[str]:
    """Rows (top first) where type = (x + y) % len(types): no runs and no possible moves."""

    return [
        "".join(types[(x + y) % len(types)] for x in range(width))
        for y in reversed(range(height))
    ]


def make_world(layout: Sequence[str], *, seed: int = 0, item_count: int | None = None) -> World:
    """Create a seeded world whose board is loaded from ``layout``."""

    world = create_world(rng=random.Random(seed))
    load_layout(world, layout, item_count=item_count)
    return world


def set_types(world: World, types: Dict[Position, int]) -> None:
    board = get_board(world)
    for (x, y), item_type in types.items():
        board.item_at(x, y).type = item_type
    board.item_count = max(board.item_count, max(types.values()) + 1)


# Horizontal run of four on the bottom row sharing (0, 0) with a vertical run of three.
L_SHAPE = [
    "BCDB",
    "ACBC",
    "ADCD",
    "AAAA",
]
