from __future__ import annotations

from typing import Tuple

from esper import World

from match3.components.game_state import GameMode, GameState
from match3.components.score import Score
from match3.events.bus import EVENT_GAME_MODE_CHANGED, EventBus


def get_state_components(world: World) -> Tuple[GameState, Score]:
    """Return the singleton GameState/Score pair, creating it if absent."""
    for _, (state, score) in world.get_components(GameState, Score):
        return state, score
    state = GameState()
    score = Score()
    world.create_entity(state, score)
    return state, score


def get_game_mode(world: World) -> GameMode:
    return get_state_components(world)[0].mode


def get_score(world: World) -> int:
    return get_state_components(world)[1].value


def announce_mode_change(
    event_bus: EventBus,
    previous_mode: GameMode | None,
    new_mode: GameMode,
) -> bool:
    """Emit a mode change event when the mode actually differs."""

    if previous_mode == new_mode:
        return False
    event_bus.emit(
        EVENT_GAME_MODE_CHANGED,
        previous_mode=previous_mode,
        new_mode=new_mode,
    )
    return True
