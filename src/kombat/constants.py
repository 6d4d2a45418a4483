GRID_ROWS = 8
GRID_COLS = 8

# Runs of at least this many identical pieces count as a match.
MATCH_THRESHOLD = 3

# Canonical piece kinds; each one is also a playable character.
PIECE_TYPES = ['scorpion', 'subzero', 'reptile', 'kano', 'raiden', 'liukang']

PLAYER_MAX_HEALTH = 100
ABILITY_METER_MAX = 18  # pieces to clear before the ability is ready

# Damage model
OWN_KIND_MULTIPLIER = 1.5
BASE_PIECE_DAMAGE = 1.0
SPECIAL_ACTIVATION_DAMAGE = 15

# Combo depth that triggers the streak notice.
COMBO_STREAK_THRESHOLD = 4

# Number of ladder rungs offered to a new run.
LADDER_LENGTH = 5

# Rejection sampling bound for full board generation.
MAX_GENERATION_ATTEMPTS = 200

# Pacing (seconds) between resolve phases; purely for presentation.
ANIMATION_DELAY = 0.15
POST_SWAP_DELAY = ANIMATION_DELAY * 2
POST_CLEAR_DELAY = ANIMATION_DELAY * 3
POST_REFILL_DELAY = ANIMATION_DELAY * 2
POST_ABILITY_DELAY = ANIMATION_DELAY * 2
REGENERATE_DELAY = 0.5
