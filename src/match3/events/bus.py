from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references keep systems alive even when the caller drops them.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# GAME FLOW & STATE
# ============================================================================
EVENT_NEW_GAME_REQUEST = "new_game_request"        # payload: width=int, height=int, item_count=int
EVENT_BOARD_READY = "board_ready"                  # payload: width=int, height=int, item_count=int
EVENT_GAME_MODE_CHANGED = "game_mode_changed"      # payload: previous_mode=GameMode|None, new_mode=GameMode
EVENT_GAME_OVER = "game_over"                      # payload: score=int


# ============================================================================
# TILE & BOARD MECHANICS
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(x,y), dst=(x,y)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(x,y), dst=(x,y)
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(x,y), dst=(x,y), reason=str
EVENT_TURN_ACTION_STARTED = "turn_action_started"  # payload: src=(x,y), dst=(x,y)
EVENT_MATCH_FOUND = "match_found"                  # payload: matches=[[(x,y),...]], positions=[(x,y),...], score=int, delta=int, depth=int
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: swaps=[{'from': (x,y), 'to': (x,y)},...]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(x,y),...], spawn_offsets=[int,...]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int
EVENT_HINT_AVAILABLE = "hint_available"            # payload: position=(x,y), moves=[(x,y),...]


# ============================================================================
# ANIMATION
# ============================================================================
EVENT_ANIMATION_START = "animation_start"          # payload: kind=str, items=list
EVENT_ANIMATION_COMPLETE = "animation_complete"    # payload: kind=str, items=list
