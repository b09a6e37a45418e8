import random

import pytest

import settings
from interaction import InteractionController, draw_order, hit_test, piece_contains
from session import COMPLETED, PuzzleSession

SQUARE = {"name": "square.png", "path": "square.png", "width": 100, "height": 100}


def make_playing_session(**kwargs):
    s = PuzzleSession(difficulty=2, viewport=(10.0, 6.0), board_scale=(1.0, 1.0),
                      rng=random.Random(5), **kwargs)
    s.open_selection()
    s.start(SQUARE)
    return s


def spread_out(s):
    """Put every piece in its own spot, well apart from the others."""
    for i, p in enumerate(s.pieces):
        p["pos"] = (-6.0 + 3.0 * i, 4.0)


def test_piece_contains_uses_world_size():
    piece = {"size": (0.5, 0.5), "pos": (1.0, 1.0)}
    assert piece_contains(piece, (1.2, 1.2), (1.0, 1.0))
    assert not piece_contains(piece, (1.3, 1.0), (1.0, 1.0))
    assert piece_contains(piece, (1.9, 1.0), (4.0, 4.0))


def test_hit_test_prefers_front_piece():
    s = make_playing_session()
    a, b = s.pieces[0], s.pieces[1]
    a["pos"] = b["pos"] = (0.0, 0.0)
    for p in s.pieces[2:]:
        p["pos"] = (8.0, 5.0)
    # equal depth: the later piece is drawn on top
    assert hit_test(s.pieces, (0.1, 0.1), s.board_scale) is b
    a["z"] = settings.PIECE_Z + settings.DRAG_Z_NUDGE
    assert hit_test(s.pieces, (0.1, 0.1), s.board_scale) is a
    assert draw_order(s.pieces)[-1] is a


def test_hit_test_skips_locked_pieces():
    s = make_playing_session()
    spread_out(s)
    target = s.pieces[2]
    assert hit_test(s.pieces, target["pos"], s.board_scale) is target
    target["locked"] = True
    assert hit_test(s.pieces, target["pos"], s.board_scale) is None
    assert hit_test(s.pieces, (-9.5, -5.5), s.board_scale) is None


def test_drag_follows_pointer_with_grab_offset():
    s = make_playing_session()
    spread_out(s)
    c = InteractionController(s)
    piece = s.pieces[1]
    x, y = piece["pos"]
    assert c.pointer_down((x + 0.1, y - 0.05)) is piece
    assert c.dragging
    assert piece["z"] == settings.PIECE_Z + settings.DRAG_Z_NUDGE

    c.pointer_move((2.0, 2.0))
    assert piece["pos"] == pytest.approx((1.9, 2.05))
    c.pointer_move((3.0, -1.0))
    assert piece["pos"] == pytest.approx((2.9, -0.95))
    assert piece["z"] == settings.PIECE_Z + settings.DRAG_Z_NUDGE

    assert not c.pointer_up()
    assert not c.dragging
    assert not piece["locked"]
    assert piece["z"] == settings.PIECE_Z
    assert piece["pos"] == pytest.approx((2.9, -0.95))


def test_release_near_target_snaps():
    s = make_playing_session()
    spread_out(s)
    c = InteractionController(s)
    piece = s.pieces[0]
    x, y = piece["pos"]
    c.pointer_down((x, y))
    tx, ty = piece["target_pos"]
    c.pointer_move((tx + 0.1, ty))
    assert c.pointer_up()
    assert piece["locked"]
    assert piece["pos"] == (tx, ty)
    assert piece["z"] == settings.PIECE_Z
    assert s.correct_count == 1
    # locked pieces can no longer be picked up
    assert c.pointer_down((tx, ty)) is None


def test_solving_every_piece_completes_the_puzzle():
    done = []
    s = make_playing_session(on_completed=lambda session: done.append(session))
    spread_out(s)
    c = InteractionController(s)
    for piece in list(s.pieces):
        x, y = piece["pos"]
        assert c.pointer_down((x, y)) is piece
        c.pointer_move(piece["target_pos"])
        assert c.pointer_up()
    assert s.state == COMPLETED
    assert done == [s]


def test_pointer_up_without_drag_is_a_noop():
    s = make_playing_session()
    c = InteractionController(s)
    assert c.pointer_up() is False
    c.pointer_move((1.0, 1.0))
    assert s.correct_count == 0


def test_locked_hit_is_not_dragged():
    s = make_playing_session()
    piece = s.pieces[0]
    piece["locked"] = True
    c = InteractionController(s, hit_test_fn=lambda point: piece)
    assert c.pointer_down((0.0, 0.0)) is None
    assert not c.dragging


def test_second_pointer_down_is_ignored():
    s = make_playing_session()
    spread_out(s)
    c = InteractionController(s)
    first, second = s.pieces[0], s.pieces[3]
    c.pointer_down(first["pos"])
    assert c.pointer_down(second["pos"]) is None
    assert c.dragging_piece is first


def test_no_drag_outside_play():
    s = make_playing_session()
    spread_out(s)
    s.restart()
    c = InteractionController(s, hit_test_fn=lambda point: {"locked": False, "pos": (0.0, 0.0)})
    assert c.pointer_down((0.0, 0.0)) is None


def test_cancel_restores_depth_without_snapping():
    s = make_playing_session()
    spread_out(s)
    c = InteractionController(s)
    piece = s.pieces[2]
    c.pointer_down(piece["pos"])
    c.pointer_move(piece["target_pos"])
    c.cancel()
    assert not c.dragging
    assert not piece["locked"]
    assert piece["z"] == settings.PIECE_Z
