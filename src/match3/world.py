import random

from esper import World

from match3.components.game_state import GameMode, GameState
from match3.components.score import Score
from match3.components.turn_state import TurnState
from match3.constants import SCORE_MULTIPLIER


def create_world(
    *,
    rng: random.Random | None = None,
    score_multiplier: int = SCORE_MULTIPLIER,
) -> World:
    """Create a world holding the game state resources.

    The board itself is created by ``make_new_board`` (or ``load_layout`` for
    fixtures); until then the game mode is NOT_STARTED.
    """
    world = World()
    setattr(world, "random", rng or random.Random())

    # Global game state and score live on one entity.
    world.create_entity(
        GameState(mode=GameMode.NOT_STARTED),
        Score(value=0, multiplier=score_multiplier),
    )
    world.create_entity(TurnState())
    return world
