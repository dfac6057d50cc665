"""Text form of a board for fixtures and console dumps.

One string per row, top row first. ``A``..``Z`` stand for item types 0..25;
a lower-case letter is the same type carrying a default cross bonus.
"""
from __future__ import annotations

import string
from typing import List, Sequence

from esper import World

from match3.components.bonus import Bonus
from match3.components.game_state import GameMode
from match3.components.item import Item
from match3.systems.board_ops import ensure_board, get_board
from match3.utils.game_state import get_state_components

_LETTERS = string.ascii_uppercase


def parse_cell(char: str) -> Item:
    upper = char.upper()
    if len(char) != 1 or upper not in _LETTERS:
        raise ValueError(f"Invalid board cell '{char}'")
    bonus = Bonus() if char.islower() else None
    return Item(type=_LETTERS.index(upper), bonus=bonus)


def format_cell(item: Item) -> str:
    char = _LETTERS[item.type] if item.type < len(_LETTERS) else "?"
    return char.lower() if item.bonus is not None else char


def load_layout(world: World, rows: Sequence[str], *, item_count: int | None = None) -> None:
    """Replace the board with ``rows`` and mark the game as playing.

    ``item_count`` defaults to one more than the highest type on the layout;
    it bounds the types regeneration can produce.
    """
    if not rows or not rows[0]:
        raise ValueError("Layout must contain at least one cell")
    width = len(rows[0])
    if any(len(row) != width for row in rows):
        raise ValueError("Layout rows must all have the same length")
    height = len(rows)
    parsed: List[List[Item]] = [[parse_cell(char) for char in row] for row in rows]
    highest = max(item.type for row in parsed for item in row)
    count = item_count if item_count is not None else highest + 1
    if count <= highest:
        raise ValueError(f"item_count {count} too small for type {highest}")
    board = ensure_board(world, width, height, count)
    # Text rows run top to bottom, the board's y axis runs bottom to top.
    board.items = [item for row in reversed(parsed) for item in row]
    state, _ = get_state_components(world)
    state.mode = GameMode.PLAYING


def format_board(world: World) -> str:
    board = get_board(world)
    lines = []
    for y in reversed(range(board.height)):
        lines.append("".join(format_cell(board.item_at(x, y)) for x in range(board.width)))
    return "\n".join(lines)
