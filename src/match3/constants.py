GRID_WIDTH = 8
GRID_HEIGHT = 8
ITEM_TYPE_COUNT = 6

# Score added per destroyed cell (runs and bonus expansions alike).
SCORE_MULTIPLIER = 50

# Chance that a freshly generated item carries a bonus.
BONUS_PROBABILITY = 0.02
# Cells affected on each side of a triggered cross bonus (12 in total).
BONUS_RADIUS_X = 3
BONUS_RADIUS_Y = 3

MIN_RUN_LENGTH = 3

# Full-board regeneration attempts per phase (uniform fill, then constrained fill).
MAX_BOARD_ATTEMPTS = 1000

# Delay (seconds of tick dt) before the autoplay agent issues its swap.
AI_DECISION_DELAY = 0.0
