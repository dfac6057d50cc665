"""Headless entry point: wires the systems and lets the random agent play.

Sets up the ECS world, event bus and systems, then drives ticks until the
game is over or the move cap is reached, printing the final board.
"""
from __future__ import annotations

import argparse
import logging
import random
import sys

from match3.components.random_agent import RandomAgent
from match3.components.turn_state import TurnPhase
from match3.constants import AI_DECISION_DELAY, GRID_HEIGHT, GRID_WIDTH, ITEM_TYPE_COUNT
from match3.events.bus import EVENT_GAME_OVER, EVENT_NEW_GAME_REQUEST, EVENT_TICK, EventBus
from match3.systems.board import BoardSystem
from match3.systems.match_resolution import MatchResolutionSystem
from match3.systems.random_ai_system import RandomAISystem
from match3.systems.turn_state_utils import get_or_create_turn_state
from match3.utils.board_text import format_board
from match3.utils.game_state import get_score
from match3.world import create_world

logger = logging.getLogger(__name__)

TICK_DT = 1 / 60


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )


def run_autoplay(
    width: int = GRID_WIDTH,
    height: int = GRID_HEIGHT,
    item_count: int = ITEM_TYPE_COUNT,
    *,
    seed: int | None = None,
    max_moves: int = 100,
) -> tuple[int, int, bool, str]:
    """Play one game with the random agent.

    Returns (score, moves made, game over reached, final board text).
    """
    event_bus = EventBus()
    world = create_world(rng=random.Random(seed))
    world.create_entity(RandomAgent(seed=seed, decision_delay=AI_DECISION_DELAY))
    BoardSystem(world, event_bus)
    resolution = MatchResolutionSystem(world, event_bus)
    agent = RandomAISystem(world, event_bus)

    finished = {}
    event_bus.subscribe(EVENT_GAME_OVER, lambda sender, **payload: finished.update(payload))
    event_bus.emit(EVENT_NEW_GAME_REQUEST, width=width, height=height, item_count=item_count)

    turn = get_or_create_turn_state(world)
    while not finished and agent.moves_made < max_moves:
        event_bus.emit(EVENT_TICK, dt=TICK_DT)
        if turn.phase == TurnPhase.IDLE and not agent.awaiting_move:
            # Settled board and no pending decision: nothing else can happen.
            break
    # Let the last move's cascade settle before reporting.
    resolution.resolve()
    return get_score(world), agent.moves_made, bool(finished), format_board(world)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="match3-autoplay",
        description="Play a headless match-3 game with a random agent",
    )
    parser.add_argument("--width", type=int, default=GRID_WIDTH, help="Board width")
    parser.add_argument("--height", type=int, default=GRID_HEIGHT, help="Board height")
    parser.add_argument("--items", type=int, default=ITEM_TYPE_COUNT, help="Number of item types")
    parser.add_argument("--seed", type=int, default=None, help="Seed for board and agent randomness")
    parser.add_argument("--max-moves", type=int, default=100, help="Stop after N moves")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        score, moves, game_over, board_text = run_autoplay(
            args.width,
            args.height,
            args.items,
            seed=args.seed,
            max_moves=args.max_moves,
        )
    except (ValueError, RuntimeError) as exc:
        logger.error("Cannot play: %s", exc)
        return 2

    print(board_text)
    status = "Game Over!" if game_over else "Stopped"
    print(f"{status} Score: {score} after {moves} moves")
    return 0


if __name__ == "__main__":
    sys.exit(main())
