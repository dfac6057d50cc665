import logging

from esper import World

from match3.components.turn_state import TurnPhase
from match3.events.bus import (EventBus, EVENT_MATCH_FOUND, EVENT_GRAVITY_APPLIED,
                               EVENT_REFILL_COMPLETED, EVENT_CASCADE_COMPLETE, EVENT_HINT_AVAILABLE,
                               EVENT_GAME_OVER, EVENT_ANIMATION_START, EVENT_ANIMATION_COMPLETE,
                               EVENT_TICK)
from match3.systems.board_ops import (get_board, get_matches, get_drop_swaps,
                                      get_destroyed_items_and_generate_new, get_possible_moves,
                                      refill_spawn_offsets, world_random)
from match3.systems.turn_state_utils import get_or_create_turn_state
from match3.utils.game_state import announce_mode_change, get_state_components

logger = logging.getLogger(__name__)


class MatchResolutionSystem:
    """Runs the match -> drop -> refill loop after a committed swap.

    Each ``step`` performs one phase and publishes its result on the bus so a
    presentation layer can animate it. ``on_tick`` steps once per tick while
    no animation reported via EVENT_ANIMATION_START is still running;
    ``resolve`` runs the whole chain synchronously.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_ANIMATION_START, self.on_animation_start)
        self.event_bus.subscribe(EVENT_ANIMATION_COMPLETE, self.on_animation_complete)

    def on_animation_start(self, sender, **kwargs):
        get_or_create_turn_state(self.world).pending_animations += 1

    def on_animation_complete(self, sender, **kwargs):
        turn = get_or_create_turn_state(self.world)
        turn.pending_animations = max(0, turn.pending_animations - 1)

    def on_tick(self, sender, **kwargs):
        if get_or_create_turn_state(self.world).pending_animations:
            return
        self.step()

    def resolve(self) -> int:
        """Step until the turn is idle or the game is over; returns steps taken."""
        steps = 0
        while self.step():
            steps += 1
        return steps

    def step(self) -> bool:
        """Advance one phase. Returns False when there was nothing to do."""
        turn = get_or_create_turn_state(self.world)
        if turn.phase == TurnPhase.MATCH_OR_POSSIBLE_GET:
            self._match_or_possible_get()
            return True
        if turn.phase == TurnPhase.ITEM_GENERATE_AND_DROP:
            self._generate_and_drop()
            return True
        return False

    def _match_or_possible_get(self):
        turn = get_or_create_turn_state(self.world)
        state, score = get_state_components(self.world)
        before = score.value
        matches = get_matches(self.world)
        if matches:
            turn.cascade_depth += 1
            positions = sorted({pos for run in matches for pos in run})
            logger.debug("Cascade step %d cleared %d cells", turn.cascade_depth, len(positions))
            self.event_bus.emit(
                EVENT_MATCH_FOUND,
                matches=matches,
                positions=positions,
                score=score.value,
                delta=score.value - before,
                depth=turn.cascade_depth,
            )
            turn.phase = TurnPhase.ITEM_GENERATE_AND_DROP
            return
        if turn.cascade_depth:
            self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=turn.cascade_depth)
        turn.cascade_depth = 0
        previous_mode = state.mode
        moves = get_possible_moves(self.world)
        if moves:
            turn.hint = world_random(self.world).choice(moves)
            turn.phase = TurnPhase.IDLE
            self.event_bus.emit(EVENT_HINT_AVAILABLE, position=turn.hint, moves=moves)
            return
        turn.hint = None
        turn.phase = TurnPhase.GAME_OVER
        announce_mode_change(self.event_bus, previous_mode, state.mode)
        self.event_bus.emit(EVENT_GAME_OVER, score=score.value)

    def _generate_and_drop(self):
        turn = get_or_create_turn_state(self.world)
        swaps = get_drop_swaps(self.world)
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, swaps=[
            {'from': swap.source, 'to': swap.target} for swap in swaps
        ])
        new_tiles = get_destroyed_items_and_generate_new(self.world)
        offsets = refill_spawn_offsets(new_tiles, get_board(self.world).height)
        self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=new_tiles, spawn_offsets=offsets)
        turn.phase = TurnPhase.MATCH_OR_POSSIBLE_GET
