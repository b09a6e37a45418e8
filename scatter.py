import random

from settings import PIECE_Z

def scatter_bounds(viewport_half_width, viewport_half_height, piece_width, piece_height):
    """Half extents of the area piece centres may land in, inset by one piece."""
    return viewport_half_width - piece_width, viewport_half_height - piece_height

def scatter(pieces, viewport_half_width, viewport_half_height, piece_width, piece_height, rng=None, z=PIECE_Z):
    """
    Place every piece at a random world position inside the visible area.
    Pieces may overlap each other or their own slot.
    """
    rng = rng or random
    half_x, half_y = scatter_bounds(viewport_half_width, viewport_half_height, piece_width, piece_height)
    for p in pieces:
        x = rng.uniform(-half_x, half_x)
        y = rng.uniform(-half_y, half_y)
        p["pos"] = (x, y)
        p["z"] = z
