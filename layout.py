# --- Grid Layout ---
# Puzzle-local space has unit height and is centred on (0, 0). Row 0 sits at
# the bottom of the y axis; the renderer is responsible for any vertical flip.

def derive_dimensions(image_width, image_height, difficulty):
    """
    Returns (columns, rows). Difficulty is the number of pieces along the
    image's shorter side, which keeps the pieces close to square.
    """
    if image_width < image_height:
        cols = difficulty
        rows = (difficulty * image_height) // image_width
    else:
        # Square images land here too: columns get the scaled value.
        cols = (difficulty * image_width) // image_height
        rows = difficulty
    return cols, rows

def compute_piece_size(dimensions, image_width, image_height):
    cols, rows = dimensions
    height = 1 / rows
    aspect = image_width / image_height
    width = aspect / cols
    return width, height

def grid_position(index, dimensions):
    """Returns (row, col) for a row-major piece index."""
    cols = dimensions[0]
    return index // cols, index % cols

def compute_target_position(index, dimensions, piece_size):
    cols, rows = dimensions
    width, height = piece_size
    row, col = grid_position(index, dimensions)
    x = (-width * cols / 2) + (width * col) + (width / 2)
    y = (-height * rows / 2) + (height * row) + (height / 2)
    return x, y

def compute_texture_region(index, dimensions):
    """
    UV corners for a piece, in the order the renderer reads them:
    bottom-left, bottom-right, top-left, top-right.
    """
    cols, rows = dimensions
    uv_width = 1 / cols
    uv_height = 1 / rows
    row, col = grid_position(index, dimensions)
    return [
        (uv_width * col, uv_height * row),
        (uv_width * (col + 1), uv_height * row),
        (uv_width * col, uv_height * (row + 1)),
        (uv_width * (col + 1), uv_height * (row + 1)),
    ]

def border_half_extents(piece_size, dimensions):
    return piece_size[0] * dimensions[0] / 2, piece_size[1] * dimensions[1] / 2

def border_corners(piece_size, dimensions, z=0.0):
    """Outline of the whole puzzle, starting top left and going clockwise."""
    half_width, half_height = border_half_extents(piece_size, dimensions)
    return [
        (-half_width, half_height, z),
        (half_width, half_height, z),
        (half_width, -half_height, z),
        (-half_width, -half_height, z),
    ]

def build_pieces(dimensions, piece_size, z=0.0):
    """Fresh, unlocked piece records for every grid cell, in index order."""
    cols, rows = dimensions
    pieces = []
    for index in range(cols * rows):
        target = compute_target_position(index, dimensions, piece_size)
        pieces.append({
            "index": index,
            "size": piece_size,
            "target_pos": target,
            "pos": (0.0, 0.0),
            "z": z,
            "uv": compute_texture_region(index, dimensions),
            "locked": False,
        })
    return pieces
