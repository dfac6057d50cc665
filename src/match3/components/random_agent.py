from dataclasses import dataclass


@dataclass(slots=True)
class RandomAgent:
    """Lets ``RandomAISystem`` play: it answers each published hint with a random valid swap.

    ``seed`` makes the agent's choices reproducible; ``decision_delay`` is the
    tick time (seconds) it waits after a hint before swapping.
    """

    seed: int | None = None
    decision_delay: float = 0.0
