import math
import random

import layout
import settings
from errors import ConfigurationError, SessionStateError
from scatter import scatter

# --- Session States ---
IDLE = "idle"
SELECTING = "selecting"
PLAYING = "playing"
COMPLETED = "completed"


class PuzzleSession:
    """
    Owns the pieces of one played puzzle and its progress.

    Positions in piece["pos"] are world space; targets are puzzle-local and the
    board holder maps one to the other with board_scale.
    """

    def __init__(self, difficulty=settings.DIFFICULTY, viewport=None, board_scale=settings.BOARD_SCALE,
                 rng=None, on_started=None, on_reset=None, on_completed=None, on_snapped=None):
        self.difficulty = settings.validate_difficulty(difficulty)
        self.viewport = viewport or settings.viewport_half_extents()
        self.board_scale = board_scale
        self.rng = rng or random.Random()
        self.on_started = on_started
        self.on_reset = on_reset
        self.on_completed = on_completed
        self.on_snapped = on_snapped

        self.state = IDLE
        self.image = None
        self.pieces = []
        self.dimensions = None
        self.piece_size = None
        self.correct_count = 0
        self.border = None

    @property
    def piece_count(self):
        return len(self.pieces)

    def set_viewport(self, half_width, half_height):
        self.viewport = (half_width, half_height)

    def set_difficulty(self, difficulty):
        self.difficulty = settings.validate_difficulty(difficulty)

    def world_piece_size(self):
        width, height = self.piece_size
        return width * self.board_scale[0], height * self.board_scale[1]

    def to_local(self, world_pos):
        return world_pos[0] / self.board_scale[0], world_pos[1] / self.board_scale[1]

    def to_world(self, local_pos):
        return local_pos[0] * self.board_scale[0], local_pos[1] * self.board_scale[1]

    # --- Lifecycle ---
    def open_selection(self):
        if self.state != IDLE:
            raise SessionStateError("open the image selection", self.state)
        self.state = SELECTING
        self._notify(self.on_reset)

    def start(self, image, difficulty=None):
        if self.state != SELECTING:
            raise SessionStateError("start a puzzle", self.state)
        width, height = image["width"], image["height"]
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"Image {image.get('name', '?')} has degenerate size {width}x{height}")
        if difficulty is not None:
            self.set_difficulty(difficulty)

        self.image = image
        self.dimensions = layout.derive_dimensions(width, height, self.difficulty)
        self.piece_size = layout.compute_piece_size(self.dimensions, width, height)
        self.pieces = layout.build_pieces(self.dimensions, self.piece_size, z=settings.PIECE_Z)

        piece_width, piece_height = self.world_piece_size()
        scatter(self.pieces, self.viewport[0], self.viewport[1], piece_width, piece_height,
                rng=self.rng, z=settings.PIECE_Z)

        self.border = {
            "corners": layout.border_corners(self.piece_size, self.dimensions, z=settings.BORDER_Z),
            "width": settings.BORDER_WIDTH,
        }
        self.correct_count = 0
        self.state = PLAYING
        cols, rows = self.dimensions
        print(f"Started {image.get('name', 'puzzle')}: {cols} x {rows} = {cols * rows} pieces")
        self._notify(self.on_started)

    def restart(self):
        if self.state not in (PLAYING, COMPLETED):
            raise SessionStateError("restart", self.state)
        self.pieces = []
        self.image = None
        self.dimensions = None
        self.piece_size = None
        self.correct_count = 0
        self.border = None
        self.state = SELECTING
        print("Puzzle reset")
        self._notify(self.on_reset)

    # --- Snapping ---
    def snap_distance(self, piece):
        x, y = self.to_local(piece["pos"])
        tx, ty = piece["target_pos"]
        return math.hypot(x - tx, y - ty)

    def evaluate_snap(self, piece):
        """
        Lock the piece into its slot if it was dropped within half a piece
        width of it. Returns True when the piece snapped.
        """
        if self.state != PLAYING or piece["locked"]:
            return False
        if piece["index"] >= len(self.pieces) or self.pieces[piece["index"]] is not piece:
            return False
        # Tolerance is width based on both axes.
        if not self.snap_distance(piece) < self.piece_size[0] / 2:
            return False

        piece["pos"] = self.to_world(piece["target_pos"])
        piece["locked"] = True
        self.correct_count += 1
        if self.on_snapped is not None:
            self.on_snapped(self, piece)
        if self.correct_count == self.piece_count:
            self.state = COMPLETED
            print(f"Puzzle completed with {self.piece_count} pieces")
            self._notify(self.on_completed)
        return True

    def _notify(self, callback):
        if callback is not None:
            callback(self)
