import settings
from session import PLAYING

# --- Hit Testing ---
def piece_contains(piece, point, board_scale=settings.BOARD_SCALE):
    half_w = piece["size"][0] * board_scale[0] / 2
    half_h = piece["size"][1] * board_scale[1] / 2
    x, y = piece["pos"]
    return x - half_w <= point[0] <= x + half_w and y - half_h <= point[1] <= y + half_h

def hit_test(pieces, point, board_scale=settings.BOARD_SCALE):
    """
    Top-most unlocked piece under a world point, or None. Smaller z is closer
    to the viewer; among equal depths the later piece is drawn on top.
    """
    hits = [p for p in pieces if not p["locked"] and piece_contains(p, point, board_scale)]
    if not hits:
        return None
    return min(hits, key=lambda p: (p["z"], -p["index"]))

def draw_order(pieces):
    """Back to front."""
    return sorted(pieces, key=lambda p: (-p["z"], p["index"]))


class InteractionController:
    """Drags one piece at a time and hands it to the session on release."""

    def __init__(self, session, hit_test_fn=None):
        self.session = session
        self.hit_test_fn = hit_test_fn or self._default_hit_test
        self.dragging_piece = None
        self.offset = (0.0, 0.0)

    def _default_hit_test(self, point):
        return hit_test(self.session.pieces, point, self.session.board_scale)

    @property
    def dragging(self):
        return self.dragging_piece is not None

    def pointer_down(self, world_pos):
        if self.dragging_piece is not None or self.session.state != PLAYING:
            return None
        piece = self.hit_test_fn(world_pos)
        if piece is None or piece["locked"]:
            return None
        self.dragging_piece = piece
        self.offset = (piece["pos"][0] - world_pos[0], piece["pos"][1] - world_pos[1])
        piece["z"] = settings.PIECE_Z + settings.DRAG_Z_NUDGE
        return piece

    def pointer_move(self, world_pos):
        piece = self.dragging_piece
        if piece is None:
            return
        piece["pos"] = (world_pos[0] + self.offset[0], world_pos[1] + self.offset[1])

    def pointer_up(self):
        """Returns True if the released piece snapped into place."""
        piece = self.dragging_piece
        if piece is None:
            return False
        snapped = self.session.evaluate_snap(piece)
        piece["z"] = settings.PIECE_Z
        self.dragging_piece = None
        self.offset = (0.0, 0.0)
        return snapped

    def cancel(self):
        """Drop the current drag without evaluating a snap."""
        if self.dragging_piece is not None:
            self.dragging_piece["z"] = settings.PIECE_Z
        self.dragging_piece = None
        self.offset = (0.0, 0.0)
