import random

from match3.components.game_state import GameMode
from match3.components.turn_state import TurnPhase
from match3.constants import SCORE_MULTIPLIER
from match3.events.bus import (
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_START,
    EVENT_CASCADE_COMPLETE,
    EVENT_GAME_MODE_CHANGED,
    EVENT_GAME_OVER,
    EVENT_GRAVITY_APPLIED,
    EVENT_HINT_AVAILABLE,
    EVENT_MATCH_FOUND,
    EVENT_NEW_GAME_REQUEST,
    EVENT_REFILL_COMPLETED,
    EVENT_TICK,
    EVENT_TILE_SWAP_REQUEST,
    EventBus,
)
from match3.systems.board import BoardSystem
from match3.systems.board_ops import get_board
from match3.systems.match_resolution import MatchResolutionSystem
from match3.systems.turn_state_utils import get_or_create_turn_state
from match3.utils.game_state import get_game_mode, get_score
from match3.world import create_world
from tests.helpers import diagonal_layout, make_world, set_types

RESOLUTION_EVENTS = (
    EVENT_MATCH_FOUND,
    EVENT_GRAVITY_APPLIED,
    EVENT_REFILL_COMPLETED,
    EVENT_CASCADE_COMPLETE,
    EVENT_HINT_AVAILABLE,
    EVENT_GAME_OVER,
)


def _record(bus, *names):
    events = []
    for name in names:
        bus.subscribe(name, lambda sender, _name=name, **payload: events.append((_name, payload)))
    return events


def drive_ticks(bus, count=10, dt=0.02):
    for _ in range(count):
        bus.emit(EVENT_TICK, dt=dt)


def _systems(world):
    bus = EventBus()
    BoardSystem(world, bus)
    resolution = MatchResolutionSystem(world, bus)
    return bus, resolution


def test_swap_runs_full_resolution_chain():
    world = make_world(diagonal_layout(5, 5), seed=21)
    set_types(world, {(0, 0): 3, (1, 0): 3, (2, 1): 3})
    bus, resolution = _systems(world)
    events = _record(bus, *RESOLUTION_EVENTS)

    bus.emit(EVENT_TILE_SWAP_REQUEST, src=(2, 1), dst=(2, 0))
    steps = resolution.resolve()

    names = [name for name, _ in events]
    assert names[:3] == [EVENT_MATCH_FOUND, EVENT_GRAVITY_APPLIED, EVENT_REFILL_COMPLETED]
    first_match = events[0][1]
    assert first_match['matches'][0] == [(0, 0), (1, 0), (2, 0)]
    assert first_match['depth'] == 1
    assert first_match['delta'] >= 3 * SCORE_MULTIPLIER
    gravity = events[1][1]['swaps']
    assert {'from': (0, 1), 'to': (0, 0)} in gravity
    refill = events[2][1]
    assert len(refill['new_tiles']) == len(refill['spawn_offsets'])
    assert len(refill['new_tiles']) >= 3

    depth = max(payload['depth'] for name, payload in events if name == EVENT_MATCH_FOUND)
    assert (EVENT_CASCADE_COMPLETE, {'depth': depth}) in events
    assert names[-1] in (EVENT_HINT_AVAILABLE, EVENT_GAME_OVER)
    assert steps == 2 * depth + 1
    board = get_board(world)
    assert not any(board.item_at(*point).destroyed for point in board.points())
    assert get_score(world) >= 3 * SCORE_MULTIPLIER
    assert get_or_create_turn_state(world).phase in (TurnPhase.IDLE, TurnPhase.GAME_OVER)


def test_new_game_publishes_opening_hint_on_tick():
    world = create_world(rng=random.Random(8))
    bus, _ = _systems(world)
    hints = _record(bus, EVENT_HINT_AVAILABLE)

    bus.emit(EVENT_NEW_GAME_REQUEST, width=6, height=6, item_count=5)
    drive_ticks(bus, 1)

    assert len(hints) == 1
    payload = hints[0][1]
    assert payload['position'] in payload['moves']
    turn = get_or_create_turn_state(world)
    assert turn.phase == TurnPhase.IDLE
    assert turn.hint == payload['position']


def test_pending_animation_holds_resolution():
    world = create_world(rng=random.Random(9))
    bus, _ = _systems(world)
    hints = _record(bus, EVENT_HINT_AVAILABLE)
    bus.emit(EVENT_NEW_GAME_REQUEST, width=6, height=6, item_count=5)

    bus.emit(EVENT_ANIMATION_START, kind='fall', items=[])
    drive_ticks(bus, 5)
    assert hints == []

    bus.emit(EVENT_ANIMATION_COMPLETE, kind='fall', items=[])
    drive_ticks(bus, 1)
    assert len(hints) == 1


def test_stalemate_ends_game():
    world = make_world(diagonal_layout(5, 5))
    bus, resolution = _systems(world)
    events = _record(bus, EVENT_GAME_OVER, EVENT_GAME_MODE_CHANGED, EVENT_HINT_AVAILABLE)
    get_or_create_turn_state(world).phase = TurnPhase.MATCH_OR_POSSIBLE_GET

    assert resolution.step() is True

    assert events == [
        (EVENT_GAME_MODE_CHANGED, {'previous_mode': GameMode.PLAYING, 'new_mode': GameMode.GAME_OVER}),
        (EVENT_GAME_OVER, {'score': 0}),
    ]
    assert get_game_mode(world) == GameMode.GAME_OVER
    assert get_or_create_turn_state(world).phase == TurnPhase.GAME_OVER
    assert resolution.step() is False


def test_idle_turn_does_nothing():
    world = make_world(diagonal_layout(5, 5))
    bus, resolution = _systems(world)
    events = _record(bus, *RESOLUTION_EVENTS)
    drive_ticks(bus, 3)
    assert resolution.resolve() == 0
    assert events == []
