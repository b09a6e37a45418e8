from errors import ConfigurationError

# --- Window Settings ---
SCREEN_WIDTH, SCREEN_HEIGHT = 1600, 900
FPS = 60

# --- Image Source ---
IMAGES_DIR = "images"
IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg')

# --- Puzzle Settings ---
DIFFICULTY = 4
MIN_DIFFICULTY = 2
MAX_DIFFICULTY = 6

# --- World Space ---
# Half the visible height, in world units.
ORTHO_SIZE = 5.0
# Puzzle-local units to world units. The board sits at the world origin.
BOARD_SCALE = (7.0, 7.0)
PIECE_Z = -1.0
# Added to a piece's depth while it is dragged (smaller z is closer).
DRAG_Z_NUDGE = -1.0
BORDER_Z = 0.0
BORDER_WIDTH = 0.1

SNAP_SOUND = "snap.mp3"


def validate_difficulty(difficulty):
    """Raise ConfigurationError unless difficulty is an int in the allowed range."""
    if isinstance(difficulty, bool) or not isinstance(difficulty, int):
        raise ConfigurationError(f"Difficulty must be an integer, got {difficulty!r}")
    if not MIN_DIFFICULTY <= difficulty <= MAX_DIFFICULTY:
        raise ConfigurationError(
            f"Difficulty must be between {MIN_DIFFICULTY} and {MAX_DIFFICULTY}, got {difficulty}")
    return difficulty


def clamp_difficulty(difficulty):
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, int(difficulty)))


def viewport_half_extents(screen_width=SCREEN_WIDTH, screen_height=SCREEN_HEIGHT, ortho_size=ORTHO_SIZE):
    """Visible half-width and half-height in world units for an orthographic view."""
    return ortho_size * screen_width / screen_height, ortho_size
