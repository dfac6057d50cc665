from esper import World

from match3.components.turn_state import TurnState


def get_or_create_turn_state(world: World) -> TurnState:
    """Return the turn bookkeeping for the running game, creating it on first use."""
    for _, turn in world.get_component(TurnState):
        return turn
    turn = TurnState()
    world.create_entity(turn)
    return turn
