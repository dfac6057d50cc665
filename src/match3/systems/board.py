import logging
from typing import Optional, Tuple

from esper import World

from match3.components.board import Board
from match3.components.game_state import GameMode
from match3.components.turn_state import TurnPhase
from match3.constants import GRID_HEIGHT, GRID_WIDTH, ITEM_TYPE_COUNT
from match3.events.bus import (EventBus, EVENT_NEW_GAME_REQUEST, EVENT_BOARD_READY,
                               EVENT_TILE_SWAP_REQUEST, EVENT_TILE_SWAP_VALID,
                               EVENT_TILE_SWAP_INVALID, EVENT_TURN_ACTION_STARTED)
from match3.systems.board_ops import check_move, get_board, is_adjacent, make_new_board
from match3.systems.turn_state_utils import get_or_create_turn_state
from match3.utils.game_state import announce_mode_change, get_state_components

logger = logging.getLogger(__name__)


class BoardSystem:
    """Owns board creation and turns swap requests into committed moves."""

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_NEW_GAME_REQUEST, self.on_new_game_request)
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    def on_new_game_request(self, sender, **kwargs):
        width = kwargs.get('width', GRID_WIDTH)
        height = kwargs.get('height', GRID_HEIGHT)
        item_count = kwargs.get('item_count', ITEM_TYPE_COUNT)
        self.new_game(width, height, item_count)

    def new_game(self, width: int = GRID_WIDTH, height: int = GRID_HEIGHT,
                 item_count: int = ITEM_TYPE_COUNT) -> Board:
        state, _ = get_state_components(self.world)
        previous_mode = state.mode
        board = make_new_board(self.world, width, height, item_count)
        logger.info("New %dx%d game with %d item types", width, height, item_count)
        turn = get_or_create_turn_state(self.world)
        turn.cascade_depth = 0
        turn.hint = None
        turn.pending_animations = 0
        # First pass of the resolution loop publishes the opening hint.
        turn.phase = TurnPhase.MATCH_OR_POSSIBLE_GET
        self.event_bus.emit(EVENT_BOARD_READY, width=width, height=height, item_count=item_count)
        announce_mode_change(self.event_bus, previous_mode, state.mode)
        return board

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        src = tuple(src)
        dst = tuple(dst)
        reason = self._rejection_reason(src, dst)
        if reason is None and not check_move(self.world, src, dst):
            reason = 'no_match'
        if reason is not None:
            logger.debug("Swap %s <-> %s rejected: %s", src, dst, reason)
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason=reason)
            return
        turn = get_or_create_turn_state(self.world)
        turn.phase = TurnPhase.MATCH_OR_POSSIBLE_GET
        turn.cascade_depth = 0
        turn.hint = None
        self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst)
        self.event_bus.emit(EVENT_TURN_ACTION_STARTED, src=src, dst=dst)

    def _rejection_reason(self, src: Tuple[int, int], dst: Tuple[int, int]) -> Optional[str]:
        state, _ = get_state_components(self.world)
        if state.mode != GameMode.PLAYING:
            return 'not_playing'
        if get_or_create_turn_state(self.world).phase != TurnPhase.IDLE:
            return 'turn_in_progress'
        board = get_board(self.world)
        if not (board.in_bounds(*src) and board.in_bounds(*dst)):
            return 'out_of_bounds'
        if not is_adjacent(src, dst):
            return 'not_adjacent'
        return None
