import random

from match3.systems.board_ops import (
    DropSwap,
    get_board,
    get_destroyed_items_and_generate_new,
    get_drop_swaps,
    make_new_board,
    refill_spawn_offsets,
)
from match3.world import create_world
from tests.helpers import make_world


def _column_world():
    # Bottom to top: A* B C* D E (starred cells destroyed).
    world = make_world(["E", "D", "C", "B", "A"])
    board = get_board(world)
    board.item_at(0, 0).destroyed = True
    board.item_at(0, 2).destroyed = True
    return world


def test_drop_swaps_fill_lowest_destroyed_slot_first():
    world = _column_world()
    swaps = get_drop_swaps(world)
    assert swaps == [
        DropSwap(source=(0, 1), target=(0, 0)),
        DropSwap(source=(0, 3), target=(0, 1)),
        DropSwap(source=(0, 4), target=(0, 2)),
    ]
    board = get_board(world)
    assert [board.item_at(0, y).type for y in range(3)] == [1, 3, 4]
    assert [board.item_at(0, y).destroyed for y in range(5)] == [False, False, False, True, True]


def test_drop_swaps_empty_when_nothing_destroyed():
    world = make_world(["AB", "BA"])
    assert get_drop_swaps(world) == []


def test_compaction_preserves_survivor_order_per_column():
    rng = random.Random(99)
    world = create_world(rng=random.Random(5))
    make_new_board(world, 6, 7, 5)
    board = get_board(world)
    for x, y in board.points():
        if rng.random() < 0.4:
            board.item_at(x, y).destroyed = True
    survivors = {
        x: [board.item_at(x, y).type for y in range(board.height) if not board.item_at(x, y).destroyed]
        for x in range(board.width)
    }

    get_drop_swaps(world)

    for x in range(board.width):
        column = [board.item_at(x, y) for y in range(board.height)]
        count = len(survivors[x])
        assert [item.type for item in column[:count]] == survivors[x]
        assert all(not item.destroyed for item in column[:count])
        assert all(item.destroyed for item in column[count:])


def test_regeneration_replaces_exactly_the_destroyed_cells():
    world = make_world(["ABCA", "BCAB", "CABC"], item_count=3)
    board = get_board(world)
    for point in [(3, 2), (1, 2), (1, 1), (0, 2)]:
        board.item_at(*point).destroyed = True

    spawned = get_destroyed_items_and_generate_new(world)

    # Column-major order: all of column 0, then column 1, ...
    assert spawned == [(0, 2), (1, 1), (1, 2), (3, 2)]
    assert not any(board.item_at(*point).destroyed for point in board.points())
    assert all(0 <= board.item_at(*point).type < 3 for point in spawned)


def test_refill_spawn_offsets_stack_new_items_above_board():
    positions = [(0, 3), (0, 4), (2, 1), (2, 2), (2, 3), (2, 4)]
    assert refill_spawn_offsets(positions, 5) == [2, 2, 4, 4, 4, 4]
    assert refill_spawn_offsets([], 5) == []


def test_full_resolution_leaves_no_destroyed_cells():
    world = _column_world()
    get_drop_swaps(world)
    spawned = get_destroyed_items_and_generate_new(world)
    assert spawned == [(0, 3), (0, 4)]
    board = get_board(world)
    assert not any(board.item_at(*point).destroyed for point in board.points())
