from __future__ import annotations

import random
from typing import Optional, Tuple

from esper import World

from match3.components.game_state import GameMode
from match3.components.random_agent import RandomAgent
from match3.components.turn_state import TurnPhase
from match3.events.bus import (
    EventBus,
    EVENT_HINT_AVAILABLE,
    EVENT_TICK,
    EVENT_TILE_SWAP_REQUEST,
)
from match3.systems.board_ops import find_valid_swaps
from match3.systems.turn_state_utils import get_or_create_turn_state
from match3.utils.game_state import get_game_mode

Position = Tuple[int, int]


class RandomAISystem:
    """Issues a random valid swap whenever a RandomAgent is waiting for its move."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        agent = self._agent()
        if rng is None and agent is not None and agent.seed is not None:
            rng = random.Random(agent.seed)
        self.random = rng or random.Random()
        self.awaiting_move = False
        self.delay_remaining: float = 0.0
        self.moves_made = 0
        event_bus.subscribe(EVENT_HINT_AVAILABLE, self.on_hint_available)
        event_bus.subscribe(EVENT_TICK, self.on_tick)

    def on_hint_available(self, sender, **payload) -> None:
        agent = self._agent()
        if agent is None:
            return
        self.awaiting_move = True
        self.delay_remaining = agent.decision_delay

    def on_tick(self, sender, **payload) -> None:
        if not self.awaiting_move:
            return
        if get_game_mode(self.world) != GameMode.PLAYING:
            self.awaiting_move = False
            return
        if get_or_create_turn_state(self.world).phase != TurnPhase.IDLE:
            return
        dt = float(payload.get("dt", 0.0))
        if self.delay_remaining > 0.0:
            self.delay_remaining = max(0.0, self.delay_remaining - dt)
            if self.delay_remaining > 0.0:
                return
        swap = self.choose_swap()
        self.awaiting_move = False
        if swap is None:
            return
        src, dst = swap
        self.moves_made += 1
        self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=dst)

    def choose_swap(self) -> Optional[Tuple[Position, Position]]:
        swaps = find_valid_swaps(self.world)
        if not swaps:
            return None
        return self.random.choice(swaps)

    def _agent(self) -> Optional[RandomAgent]:
        for _, agent in self.world.get_component(RandomAgent):
            return agent
        return None
