import pytest

from wizplatformer.geometry import Rect, check_collision


def test_rect_edges():
    r = Rect(2, 3, 10, 20)
    assert (r.left, r.top) == (2, 3)
    assert r.right == r.x + r.w
    assert r.bottom == r.y + r.h


def test_overlapping_rects_collide():
    a = Rect(0, 0, 10, 10)
    b = Rect(5, 5, 10, 10)
    assert check_collision(a, b) is True
    assert a.intersects(b) is True


@pytest.mark.parametrize(
    "b",
    [
        Rect(10, 0, 10, 10),
        Rect(-10, 0, 10, 10),
        Rect(0, 10, 10, 10),
        Rect(0, -10, 10, 10),
    ],
)
def test_touching_edges_do_not_collide(b):
    a = Rect(0, 0, 10, 10)
    assert check_collision(a, b) is False
    assert a.intersects(b) is False


def test_separated_rects_do_not_collide():
    assert check_collision(Rect(0, 0, 4, 4), Rect(100, 100, 4, 4)) is False


@pytest.mark.parametrize(
    "a,b",
    [
        (Rect(0, 0, 10, 10), Rect(3, 3, 2, 2)),
        (Rect(0, 0, 10, 10), Rect(20, 20, 1, 1)),
        (Rect(-5, -5, 7, 7), Rect(0, 0, 3, 3)),
    ],
)
def test_collision_is_symmetric(a, b):
    assert check_collision(a, b) == check_collision(b, a)
    assert a.intersects(b) == b.intersects(a)


def test_empty_rect_never_intersects_but_box_test_counts_it():
    line = Rect(5, 5, 0, 10)
    box = Rect(0, 0, 10, 10)
    assert line.intersects(box) is False
    assert check_collision(line, box) is True


def test_moved_returns_shifted_copy():
    r = Rect(1, 2, 3, 4)
    m = r.moved(10, -2)
    assert m == Rect(r.x + 10, r.y - 2, r.w, r.h)
    assert r == Rect(1, 2, 3, 4)


def test_moved_back_is_identity():
    r = Rect(7, 8, 9, 10)
    assert r.moved(4, 5).moved(-4, -5) == r


def test_rect_is_immutable():
    r = Rect(0, 0, 1, 1)
    with pytest.raises(AttributeError):
        r.x = 5
    assert r.x == 0
    assert r == Rect(0, 0, 1, 1)