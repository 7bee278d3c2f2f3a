"""Screen constants and axis-aligned rectangles."""

from __future__ import annotations

from dataclasses import dataclass, replace

SCREEN_WIDTH = 960
SCREEN_HEIGHT = 700


@dataclass(frozen=True)
class Rect:
    """An integer axis-aligned rectangle with its top-left corner at (x, y)."""

    x: int
    y: int
    w: int
    h: int

    @property
    def left(self) -> int:
        return self.x

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def top(self) -> int:
        return self.y

    @property
    def bottom(self) -> int:
        return self.y + self.h

    @property
    def is_empty(self) -> bool:
        return self.w <= 0 or self.h <= 0

    def intersects(self, other: Rect) -> bool:
        """True if both rectangles have area and their interiors overlap."""
        if self.is_empty or other.is_empty:
            return False
        return check_collision(self, other)

    def moved(self, dx: int, dy: int) -> Rect:
        """Return a copy shifted by (dx, dy)."""
        return replace(self, x=self.x + dx, y=self.y + dy)


def check_collision(a: Rect, b: Rect) -> bool:
    """Bounding-box test: rectangles that only share an edge do not collide."""
    if a.bottom <= b.top:
        return False
    if a.top >= b.bottom:
        return False
    if a.right <= b.left:
        return False
    if a.left >= b.right:
        return False
    return True