from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Sequence, Tuple

from esper import World

from match3.components.board import Board
from match3.components.bonus import Bonus
from match3.components.game_state import GameMode
from match3.components.item import Item
from match3.constants import BONUS_PROBABILITY, MAX_BOARD_ATTEMPTS, MIN_RUN_LENGTH
from match3.systems.bonus_effects import apply_bonus
from match3.utils.game_state import get_state_components

logger = logging.getLogger(__name__)

Position = Tuple[int, int]
Run = List[Position]
Offsets = Tuple[Position, ...]

# Latent run patterns relative to an anchor cell: every "must-have" offset has
# to share the anchor's type, and the first "need-one" offset that does is the
# item that can be swapped in to complete the run.
POSSIBLE_MOVE_PATTERNS: Tuple[Tuple[Offsets, Offsets], ...] = (
    # Pair with the anchor on its left end (left or right edge of the run).
    (((1, 0),), ((-2, 0), (-1, -1), (-1, 1), (2, -1), (2, 1), (3, 0))),
    # Pair with the anchor on its bottom end (top or bottom edge of the run).
    (((0, 1),), ((0, -2), (-1, -1), (1, -1), (-1, 2), (1, 2), (0, 3))),
    # Gap in the middle, horizontal.
    (((2, 0),), ((1, -1), (1, 1))),
    # Gap in the middle, vertical.
    (((0, 2),), ((-1, 1), (1, 1))),
)


@dataclass(slots=True)
class DropSwap:
    source: Position
    target: Position


def world_random(world: World) -> random.Random:
    candidate = getattr(world, "random", None)
    if isinstance(candidate, random.Random):
        return candidate
    rng = random.Random()
    setattr(world, "random", rng)
    return rng


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board not initialised")


def ensure_board(world: World, width: int, height: int, item_count: int) -> Board:
    """Return the board component resized to the given dimensions, creating it if absent."""
    for _, board in world.get_component(Board):
        board.width = width
        board.height = height
        board.item_count = item_count
        board.items = []
        return board
    board = Board(width=width, height=height, item_count=item_count)
    world.create_entity(board)
    return board


def generate_item(
    rng: random.Random,
    item_count: int,
    bonus_probability: float = BONUS_PROBABILITY,
) -> Item:
    """Uniformly random item type with an independent chance of a cross bonus."""
    item_type = rng.randrange(item_count)
    bonus = Bonus() if rng.random() < bonus_probability else None
    return Item(type=item_type, bonus=bonus)


# ---------------------------------------------------------------------------
# Board generation
# ---------------------------------------------------------------------------

def make_new_board(
    world: World,
    width: int,
    height: int,
    item_count: int,
    *,
    bonus_probability: float = BONUS_PROBABILITY,
    max_attempts: int = MAX_BOARD_ATTEMPTS,
    rng: random.Random | None = None,
) -> Board:
    """Fill a fresh board that has no runs and at least one possible move.

    Uniform random boards are drawn first. If none qualifies within
    ``max_attempts`` a constrained fill (no type that completes a run with
    the two cells to the left or below) is tried for another ``max_attempts``
    before giving up with RuntimeError.

    Candidates are built on a detached board; the world's board, score and
    mode only change once a candidate qualifies.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Board dimensions must be positive, got {width}x{height}")
    if item_count < 1:
        raise ValueError(f"Item type count must be positive, got {item_count}")
    rng = rng or world_random(world)
    candidate = Board(width=width, height=height, item_count=item_count)

    cell_count = width * height
    for attempt in range(max_attempts):
        candidate.items = [generate_item(rng, item_count, bonus_probability) for _ in range(cell_count)]
        if _is_playable(candidate):
            logger.debug("Board re-generated: %dx", attempt)
            return _commit_board(world, candidate)

    logger.warning(
        "No playable %dx%d board with %d item types after %d random fills; using constrained fill",
        width, height, item_count, max_attempts,
    )
    for _ in range(max_attempts):
        items = _constrained_fill(width, height, item_count, rng, bonus_probability)
        if items is None:
            continue
        candidate.items = items
        if _is_playable(candidate):
            return _commit_board(world, candidate)

    raise RuntimeError("Unable to generate board without matches and with a possible move")


def _commit_board(world: World, candidate: Board) -> Board:
    board = ensure_board(world, candidate.width, candidate.height, candidate.item_count)
    board.items = candidate.items
    state, score = get_state_components(world)
    score.value = 0
    state.mode = GameMode.PLAYING
    return board


def _constrained_fill(
    width: int,
    height: int,
    item_count: int,
    rng: random.Random,
    bonus_probability: float,
) -> Optional[List[Item]]:
    items: List[Item] = []
    for y in range(height):
        for x in range(width):
            available = list(range(item_count))
            if x >= 2:
                left1 = items[x - 1 + y * width].type
                left2 = items[x - 2 + y * width].type
                if left1 == left2 and left1 in available:
                    available.remove(left1)
            if y >= 2:
                down1 = items[x + (y - 1) * width].type
                down2 = items[x + (y - 2) * width].type
                if down1 == down2 and down1 in available:
                    available.remove(down1)
            if not available:
                return None
            bonus = Bonus() if rng.random() < bonus_probability else None
            items.append(Item(type=rng.choice(available), bonus=bonus))
    return items


def _is_playable(board: Board) -> bool:
    if find_runs(board, all_matches=False):
        return False
    return bool(find_possible_points(board, all_moves=False))


# ---------------------------------------------------------------------------
# Match detection
# ---------------------------------------------------------------------------

def _run_from(board: Board, x: int, y: int, dx: int, dy: int) -> Run:
    run: Run = [(x, y)]
    item_type = board.item_at(x, y).type
    nx, ny = x + dx, y + dy
    while board.in_bounds(nx, ny) and board.item_at(nx, ny).type == item_type:
        run.append((nx, ny))
        nx += dx
        ny += dy
    return run


def find_runs(board: Board, *, all_matches: bool = True) -> List[Run]:
    """Detect horizontal then vertical runs of MIN_RUN_LENGTH or more equal types.

    Rows are scanned bottom to top, each left to right; then columns left to
    right, each bottom to top. Destroyed flags are ignored. With
    ``all_matches=False`` the scan stops at the first run.
    """
    runs: List[Run] = []
    span = MIN_RUN_LENGTH - 1
    # Horizontal runs
    for y in range(board.height):
        x = 0
        while x < board.width - span:
            run = _run_from(board, x, y, 1, 0)
            if len(run) >= MIN_RUN_LENGTH:
                runs.append(run)
                if not all_matches:
                    return runs
                x += len(run)
            else:
                x += 1
    # Vertical runs
    for x in range(board.width):
        y = 0
        while y < board.height - span:
            run = _run_from(board, x, y, 0, 1)
            if len(run) >= MIN_RUN_LENGTH:
                runs.append(run)
                if not all_matches:
                    return runs
                y += len(run)
            else:
                y += 1
    return runs


def find_matches(world: World, *, all_matches: bool = True) -> List[Run]:
    return find_runs(get_board(world), all_matches=all_matches)


def check_move(world: World, a: Position, b: Position) -> bool:
    """Swap two cells and keep the swap only if it produced a run."""
    board = get_board(world)
    board.swap(a, b)
    if find_runs(board, all_matches=False):
        return True
    board.swap(a, b)
    return False


def get_matches(world: World) -> List[Run]:
    """Destroy every run, trigger bonuses and update the score.

    Bonus expansion is a single row-major pass after the runs are flagged:
    a bonus destroyed by an earlier expansion fires when the scan reaches it,
    one destroyed by a later expansion does not.
    """
    board = get_board(world)
    _, score = get_state_components(world)
    matches = find_runs(board)
    for run in matches:
        score.add_cells(len(run))
        for x, y in run:
            board.item_at(x, y).destroyed = True
    for x, y in board.points():
        item = board.item_at(x, y)
        if not item.is_bonus or not item.destroyed:
            continue
        expanded = apply_bonus(board, item.bonus, x, y)
        if expanded:
            score.add_cells(len(expanded))
            matches.append(expanded)
    if matches:
        logger.debug("Resolved %d runs, score now %d", len(matches), score.value)
    return matches


# ---------------------------------------------------------------------------
# Gravity and refill
# ---------------------------------------------------------------------------

def get_drop_swaps(world: World) -> List[DropSwap]:
    """Let surviving items fall into destroyed slots below them.

    Each column keeps a FIFO queue of destroyed positions; a surviving item
    swaps with the oldest one, so survivors keep their relative order and
    destroyed items bubble to the top of the column.
    """
    board = get_board(world)
    swaps: List[DropSwap] = []
    for x in range(board.width):
        destroyed: Deque[Position] = deque()
        for y in range(board.height):
            if board.item_at(x, y).destroyed:
                destroyed.append((x, y))
            elif destroyed:
                target = destroyed.popleft()
                board.swap((x, y), target)
                swaps.append(DropSwap(source=(x, y), target=target))
                destroyed.append((x, y))
    return swaps


def get_destroyed_items_and_generate_new(
    world: World,
    *,
    bonus_probability: float = BONUS_PROBABILITY,
    rng: random.Random | None = None,
) -> List[Position]:
    """Replace every destroyed item with a fresh one, column by column."""
    board = get_board(world)
    rng = rng or world_random(world)
    spawned: List[Position] = []
    for x in range(board.width):
        for y in range(board.height):
            if board.item_at(x, y).destroyed:
                board.set_item(x, y, generate_item(rng, board.item_count, bonus_probability))
                spawned.append((x, y))
    return spawned


def refill_spawn_offsets(positions: Sequence[Position], height: int) -> List[int]:
    """Rows above the visible board each new item should enter from.

    ``positions`` is the column-major output of regeneration; every column
    is shifted by the distance from its lowest new cell to the board top, so
    new items stack above the board in their final order.
    """
    offsets: List[int] = []
    last_x: int | None = None
    first_y = 0
    for x, y in positions:
        if x != last_x:
            first_y = y
            last_x = x
        offsets.append(height - first_y)
    return offsets


# ---------------------------------------------------------------------------
# Possible moves
# ---------------------------------------------------------------------------

def _match_type(board: Board, x: int, y: int, item_type: int) -> bool:
    return board.in_bounds(x, y) and board.item_at(x, y).type == item_type


def _match_pattern(
    board: Board,
    x: int,
    y: int,
    must_have: Offsets,
    need_one: Offsets,
) -> Optional[Position]:
    item_type = board.item_at(x, y).type
    for dx, dy in must_have:
        if not _match_type(board, x + dx, y + dy, item_type):
            return None
    for dx, dy in need_one:
        if _match_type(board, x + dx, y + dy, item_type):
            return (x + dx, y + dy)
    return None


def find_possible_points(board: Board, *, all_moves: bool = True) -> List[Position]:
    """Positions of items that can be swapped into a run, per the pattern catalog."""
    possibles: List[Position] = []
    for x, y in board.points():
        for must_have, need_one in POSSIBLE_MOVE_PATTERNS:
            point = _match_pattern(board, x, y, must_have, need_one)
            if point is None:
                continue
            possibles.append(point)
            if not all_moves:
                return possibles
    return possibles


def find_possible_moves(world: World, *, all_moves: bool = True) -> List[Position]:
    return find_possible_points(get_board(world), all_moves=all_moves)


def get_possible_moves(world: World) -> List[Position]:
    """Collect every hint position; an empty result ends the game."""
    possibles = find_possible_moves(world)
    if not possibles:
        state, score = get_state_components(world)
        state.mode = GameMode.GAME_OVER
        logger.info("No possible moves left, game over with score %d", score.value)
    return possibles


def _has_line_match(board: Board, pos: Position) -> bool:
    """Return True if a horizontal or vertical run passes through pos."""
    x, y = pos
    item_type = board.item_at(x, y).type
    for dx, dy in ((1, 0), (0, 1)):
        length = 1
        nx, ny = x + dx, y + dy
        while _match_type(board, nx, ny, item_type):
            length += 1
            nx += dx
            ny += dy
        nx, ny = x - dx, y - dy
        while _match_type(board, nx, ny, item_type):
            length += 1
            nx -= dx
            ny -= dy
        if length >= MIN_RUN_LENGTH:
            return True
    return False


def predict_swap_creates_match(board: Board, src: Position, dst: Position) -> bool:
    """Return True if swapping src/dst would create a run through either cell."""
    board.swap(src, dst)
    try:
        return _has_line_match(board, src) or _has_line_match(board, dst)
    finally:
        board.swap(src, dst)


def find_valid_swaps(world: World) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps that would produce a run.

    Only lines through the two swapped cells are checked, so on a settled
    board (no runs) the result matches what ``check_move`` would accept.
    """
    board = get_board(world)
    swaps: List[Tuple[Position, Position]] = []
    for x, y in board.points():
        for neighbour in ((x + 1, y), (x, y + 1)):
            if not board.in_bounds(*neighbour):
                continue
            if predict_swap_creates_match(board, (x, y), neighbour):
                swaps.append(((x, y), neighbour))
    return swaps


def is_adjacent(a: Position, b: Position) -> bool:
    ax, ay = a
    bx, by = b
    return (abs(ax - bx) == 1 and ay == by) or (abs(ay - by) == 1 and ax == bx)
