import pygame, sys, random, argparse, numpy as np

import settings
from settings import SCREEN_WIDTH, SCREEN_HEIGHT, FPS, ORTHO_SIZE
from errors import ConfigurationError, SessionStateError
from images import load_image_list
from interaction import InteractionController, draw_order
from session import PuzzleSession, SELECTING, PLAYING, COMPLETED

PIXELS_PER_UNIT = SCREEN_HEIGHT / (2 * ORTHO_SIZE)

screen = None
clock = None
snap_sound = None

# --- Game State ---
image_list = []
session = None
controller = None
show_menu = False
show_play_again = False

# --- Global Caches for Performance ---
FONTS = {}          # Cache for fonts keyed by size.
IMAGE_CACHE = {}    # Cache for loaded images keyed by path.
THUMB_CACHE = {}    # Cache for (thumbnail, frame color) keyed by (path, size).
PIECE_CACHE = {}    # Cache for piece surfaces keyed by (path, index).

def get_font(size):
    """Return a cached font of the given size."""
    if size not in FONTS:
        FONTS[size] = pygame.font.SysFont("arial", size)
    return FONTS[size]

def load_image_cached(path):
    """Return a cached loaded image (with convert_alpha) for the given path."""
    if path not in IMAGE_CACHE:
        IMAGE_CACHE[path] = pygame.image.load(path).convert_alpha()
    return IMAGE_CACHE[path]

# --- Coordinate Conversion ---
# World y points up, screen y points down.
def world_to_screen(pos):
    return (SCREEN_WIDTH / 2 + pos[0] * PIXELS_PER_UNIT,
            SCREEN_HEIGHT / 2 - pos[1] * PIXELS_PER_UNIT)

def screen_to_world(pos):
    return ((pos[0] - SCREEN_WIDTH / 2) / PIXELS_PER_UNIT,
            (SCREEN_HEIGHT / 2 - pos[1]) / PIXELS_PER_UNIT)

def uv_crop_rect(uv, image_width, image_height):
    """
    Pixel rect (top-origin) for a piece's UV corners. v = 0 is the bottom of
    the image, so the rect's top comes from the top-left corner's v.
    """
    u0, v0 = uv[0]
    u1, v1 = uv[3]
    left = int(round(u0 * image_width))
    right = int(round(u1 * image_width))
    top = int(round((1 - v1) * image_height))
    bottom = int(round((1 - v0) * image_height))
    return pygame.Rect(left, top, right - left, bottom - top)

# --- Helper Functions ---
def draw_text(text, pos, font_size=30, color=(255,255,255), shadow_color=(0,0,0), shadow_offset=(2,2)):
    """Draws text with a subtle drop shadow for improved legibility."""
    font = get_font(font_size)
    shadow_surface = font.render(text, True, shadow_color)
    shadow_rect = shadow_surface.get_rect(center=(pos[0]+shadow_offset[0], pos[1]+shadow_offset[1]))
    screen.blit(shadow_surface, shadow_rect)
    text_surface = font.render(text, True, color)
    text_rect = text_surface.get_rect(center=pos)
    screen.blit(text_surface, text_rect)

def draw_rounded_button(button, mouse_pos=None):
    """Draws a button with a border and a subtle text shadow."""
    rect = button["rect"]
    base_color = button["color"]
    # Lighten on hover:
    if mouse_pos and rect.collidepoint(mouse_pos):
        color = tuple(min(255, c + 30) for c in base_color)
    else:
        color = base_color
    border_rect = rect.inflate(4, 4)
    pygame.draw.rect(screen, (0, 0, 0), border_rect, border_radius=8)
    pygame.draw.rect(screen, color, rect, border_radius=8)
    if button.get("label"):
        draw_text(button["label"], rect.center, font_size=28, shadow_offset=(1, 1))

def get_mouse_pos():
    return pygame.mouse.get_pos()

def average_color(surface):
    arr = pygame.surfarray.array3d(surface)
    avg = np.mean(arr, axis=(0,1))
    return (int(avg[0]), int(avg[1]), int(avg[2]))

def darken_color(color, amount=50):
    return (max(color[0]-amount,0), max(color[1]-amount,0), max(color[2]-amount,0))

# --- Fade Transition ---
def fade_in(duration=250):
    fade = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT))
    fade.fill((0,0,0))
    for alpha in range(255, -1, -5):
        fade.set_alpha(alpha)
        redraw_all()
        screen.blit(fade, (0,0))
        pygame.display.update()
        pygame.time.delay(duration // 51)

def scale_image_preserve_aspect(image, target_rect):
    orig_width, orig_height = image.get_width(), image.get_height()
    scale_factor = min(target_rect.width / orig_width, target_rect.height / orig_height)
    new_width = max(1, int(orig_width * scale_factor))
    new_height = max(1, int(orig_height * scale_factor))
    scaled_image = pygame.transform.smoothscale(image, (new_width, new_height))
    new_x = target_rect.x + (target_rect.width - new_width) // 2
    new_y = target_rect.y + (target_rect.height - new_height) // 2
    return scaled_image, pygame.Rect(new_x, new_y, new_width, new_height)

def get_thumbnail(image, target_rect):
    key = (image["path"], target_rect.size)
    if key not in THUMB_CACHE:
        thumb, _ = scale_image_preserve_aspect(load_image_cached(image["path"]), target_rect)
        THUMB_CACHE[key] = (thumb, darken_color(average_color(thumb)))
    thumb, frame_color = THUMB_CACHE[key]
    return thumb, frame_color

# --- Session Callbacks ---
def on_started(s):
    global show_menu, show_play_again
    show_menu = False
    show_play_again = False

def on_reset(s):
    global show_menu, show_play_again
    PIECE_CACHE.clear()
    show_menu = True
    show_play_again = False

def on_completed(s):
    global show_play_again
    show_play_again = True

def on_snapped(s, piece):
    if snap_sound is not None:
        snap_sound.play(fade_ms=1)

# --- Drawing ---
def redraw_all():
    if show_menu:
        return draw_select_menu()
    return draw_puzzle()

def draw_background_gradient():
    """Draws a vertical gradient background for a more polished look."""
    color_top = (30, 30, 30)
    color_bottom = (60, 60, 60)
    for y in range(SCREEN_HEIGHT):
        ratio = y / SCREEN_HEIGHT
        r = int(color_top[0] * (1 - ratio) + color_bottom[0] * ratio)
        g = int(color_top[1] * (1 - ratio) + color_bottom[1] * ratio)
        b = int(color_top[2] * (1 - ratio) + color_bottom[2] * ratio)
        pygame.draw.line(screen, (r, g, b), (0, y), (SCREEN_WIDTH, y))

def draw_header(text, pos, font_size, main_color, outline_color, outline_thickness=2):
    """
    Draws a header with a bold outline to give it a polished, official look.
    """
    font = get_font(font_size)
    for dx in range(-outline_thickness, outline_thickness + 1):
        for dy in range(-outline_thickness, outline_thickness + 1):
            if dx == 0 and dy == 0:
                continue
            outline_surface = font.render(text, True, outline_color)
            outline_rect = outline_surface.get_rect(center=(pos[0] + dx, pos[1] + dy))
            screen.blit(outline_surface, outline_rect)
    main_surface = font.render(text, True, main_color)
    main_rect = main_surface.get_rect(center=pos)
    screen.blit(main_surface, main_rect)

def draw_select_menu():
    """Draws the image selection menu with difficulty controls and one thumbnail per image."""
    draw_background_gradient()
    center_x = SCREEN_WIDTH // 2
    draw_header("Jigsaw Puzzle", (center_x, 70), font_size=80, main_color=(255, 215, 0), outline_color=(0, 0, 0), outline_thickness=3)
    buttons = {}
    diff_y = 140
    buttons["difficulty_dec"] = {"label": "-", "rect": pygame.Rect(center_x - 150, diff_y, 40, 40), "color": (100, 100, 100)}
    buttons["difficulty_inc"] = {"label": "+", "rect": pygame.Rect(center_x + 110, diff_y, 40, 40), "color": (100, 100, 100)}
    draw_rounded_button(buttons["difficulty_dec"], get_mouse_pos())
    draw_rounded_button(buttons["difficulty_inc"], get_mouse_pos())
    draw_text(f"Difficulty: {session.difficulty}", (center_x, diff_y + 20), font_size=36)
    # Thumbnails:
    thumb_size = 220
    spacing = 30
    per_row = max(1, (SCREEN_WIDTH - 2 * spacing) // (thumb_size + spacing))
    total_width = min(per_row, len(image_list)) * (thumb_size + spacing) - spacing
    start_x = center_x - total_width // 2
    start_y = diff_y + 90
    for i, image in enumerate(image_list):
        col = i % per_row
        row = i // per_row
        rect = pygame.Rect(start_x + col * (thumb_size + spacing), start_y + row * (thumb_size + spacing), thumb_size, thumb_size)
        thumb, frame_color = get_thumbnail(image, rect.inflate(-12, -12))
        btn = {"label": "", "rect": rect, "color": frame_color, "image": image}
        draw_rounded_button(btn, get_mouse_pos())
        screen.blit(thumb, thumb.get_rect(center=rect.center))
        buttons[f"image_{i}"] = btn
    return buttons

def get_piece_surface(piece):
    key = (session.image["path"], piece["index"])
    if key not in PIECE_CACHE:
        texture = load_image_cached(session.image["path"])
        crop = uv_crop_rect(piece["uv"], texture.get_width(), texture.get_height())
        crop = crop.clip(texture.get_rect())
        world_w, world_h = session.world_piece_size()
        size = (max(1, round(world_w * PIXELS_PER_UNIT)), max(1, round(world_h * PIXELS_PER_UNIT)))
        PIECE_CACHE[key] = pygame.transform.smoothscale(texture.subsurface(crop), size)
    return PIECE_CACHE[key]

def draw_border():
    border = session.border
    if border is None:
        return
    points = [world_to_screen(session.to_world(corner[:2])) for corner in border["corners"]]
    width = max(1, round(border["width"] * PIXELS_PER_UNIT))
    pygame.draw.lines(screen, (255, 255, 255), True, points, width)

def draw_puzzle():
    """Draws the board outline, the pieces back to front and the puzzle buttons."""
    draw_background_gradient()
    buttons = {}
    if session.state not in (PLAYING, COMPLETED):
        return buttons
    draw_border()
    for p in draw_order(session.pieces):
        surface = get_piece_surface(p)
        screen.blit(surface, surface.get_rect(center=world_to_screen(p["pos"])))
    buttons["menu"] = {"label": "Main Menu", "rect": pygame.Rect(20, 20, 150, 40), "color": (128, 128, 128)}
    draw_rounded_button(buttons["menu"], get_mouse_pos())
    if show_play_again:
        draw_header("Congratulations!", (SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2 - 60), font_size=72, main_color=(255, 215, 0), outline_color=(0, 0, 0))
        buttons["play_again"] = {"label": "Play Again", "rect": pygame.Rect(SCREEN_WIDTH // 2 - 100, SCREEN_HEIGHT // 2, 200, 50), "color": (34, 139, 34)}
        draw_rounded_button(buttons["play_again"], get_mouse_pos())
    return buttons

# --- Event Handling ---
def request_restart():
    controller.cancel()
    try:
        session.restart()
    except SessionStateError as e:
        print(e)

def handle_select_events(buttons, event):
    if event.type != pygame.MOUSEBUTTONDOWN or event.button != 1:
        return
    # buttons may still belong to the puzzle screen for the rest of this frame
    if "difficulty_dec" not in buttons:
        return
    pos = event.pos
    if buttons["difficulty_dec"]["rect"].collidepoint(pos):
        session.set_difficulty(settings.clamp_difficulty(session.difficulty - 1))
        return
    if buttons["difficulty_inc"]["rect"].collidepoint(pos):
        session.set_difficulty(settings.clamp_difficulty(session.difficulty + 1))
        return
    for key, btn in buttons.items():
        if key.startswith("image_") and btn["rect"].collidepoint(pos):
            try:
                session.start(btn["image"])
            except (SessionStateError, ConfigurationError) as e:
                print(e)
            return

def handle_puzzle_events(buttons, event):
    if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
        pos = event.pos
        if "menu" in buttons and buttons["menu"]["rect"].collidepoint(pos):
            request_restart()
            return
        if "play_again" in buttons and buttons["play_again"]["rect"].collidepoint(pos):
            request_restart()
            return
        controller.pointer_down(screen_to_world(pos))
    elif event.type == pygame.MOUSEBUTTONUP and event.button == 1 and controller.dragging:
        controller.pointer_up()
    elif event.type == pygame.MOUSEMOTION:
        controller.pointer_move(screen_to_world(event.pos))

def main_loop():
    buttons = redraw_all()
    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if show_menu:
                handle_select_events(buttons, event)
            elif session.state in (PLAYING, COMPLETED):
                handle_puzzle_events(buttons, event)
        buttons = redraw_all()
        pygame.display.flip()
        clock.tick(FPS)

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Drag the pieces of a picture back into place.")
    parser.add_argument("--difficulty", type=int, default=settings.DIFFICULTY,
                        help=f"Pieces along the image's shorter side ({settings.MIN_DIFFICULTY}-{settings.MAX_DIFFICULTY})")
    parser.add_argument("--images", default=settings.IMAGES_DIR, help="Folder holding the puzzle images")
    parser.add_argument("--seed", type=int, default=None, help="Optional random seed for repeatable scatters")
    return parser.parse_args(argv)

def main(argv=None):
    global screen, clock, snap_sound, image_list, session, controller
    args = parse_args(argv)
    try:
        image_list = load_image_list(args.images)
        session = PuzzleSession(difficulty=args.difficulty,
                                viewport=settings.viewport_half_extents(SCREEN_WIDTH, SCREEN_HEIGHT, ORTHO_SIZE),
                                rng=random.Random(args.seed),
                                on_started=on_started, on_reset=on_reset,
                                on_completed=on_completed, on_snapped=on_snapped)
    except ConfigurationError as e:
        print(e)
        sys.exit(1)
    controller = InteractionController(session)

    pygame.init()
    try:
        snap_sound = pygame.mixer.Sound(settings.SNAP_SOUND)
    except (pygame.error, FileNotFoundError):
        snap_sound = None
    screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
    pygame.display.set_caption("Jigsaw Puzzle")
    clock = pygame.time.Clock()

    session.open_selection()
    fade_in()
    main_loop()

if __name__=="__main__":
    main()
