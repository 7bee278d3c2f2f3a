"""Tile-based collision queries for a rectangle moving through a map."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .geometry import Rect
from .tilemap import Tile, TileMap

CORNER_OVERLAP_THRESHOLD = 4  # overlap needed before a wall blocks
STEP_HEIGHT = 8               # tallest ledge the body can walk onto
SINK_TOLERANCE = 1            # overlaps this small are ignored


@dataclass
class CollisionResult:
    """Which sides of the body touch solid tiles."""

    floor: bool = False
    left_wall: bool = False
    right_wall: bool = False
    ceiling: bool = False
    overlapping: bool = False


def _tdiv(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def vertical_overlap(a: Rect, b: Rect) -> int:
    """Height of the band that both rectangles share, or 0."""
    return max(0, min(a.bottom, b.bottom) - max(a.top, b.top))


def tile_collides(tile: Optional[Tile], test_rect: Rect, tile_px: int, tile_py: int) -> bool:
    """True if any collision object of ``tile`` placed at (tile_px, tile_py) hits ``test_rect``."""
    if tile is None:
        return False
    return any(
        test_rect.intersects(
            Rect(tile_px + int(obj.x), tile_py + int(obj.y), int(obj.width), int(obj.height))
        )
        for obj in tile.collision
    )


def is_solid_at(tile_map: TileMap, tx: int, ty: int, test_rect: Rect) -> bool:
    """True if a visible tile layer has a tile at (tx, ty) whose colliders hit ``test_rect``."""
    px, py = tx * tile_map.tile_width, ty * tile_map.tile_height
    return any(
        tile_collides(tile_map.tile_at(layer, tx, ty), test_rect, px, py)
        for layer in tile_map.layers
        if layer.visible and layer.kind == "tile"
    )


def _wall_hit(tile_map: TileMap, tile_x: int, foot: Rect, future: Rect) -> bool:
    tw, th = tile_map.tile_width, tile_map.tile_height
    rows = dict.fromkeys(_tdiv(foot.y + dy, th) for dy in range(foot.h))
    for tile_y in rows:
        if not is_solid_at(tile_map, tile_x, tile_y, future):
            continue
        tile_rect = Rect(tile_x * tw, tile_y * th, tw, th)
        step = tile_rect.top - future.bottom
        if -STEP_HEIGHT <= step <= 0:
            continue
        overlap = vertical_overlap(future, tile_rect)
        if overlap <= SINK_TOLERANCE:
            continue
        if overlap > CORNER_OVERLAP_THRESHOLD:
            return True
    return False


def _row_hit(tile_map: TileMap, tile_y: int, future: Rect) -> bool:
    tw = tile_map.tile_width
    return any(
        is_solid_at(tile_map, _tdiv(future.x + dx, tw), tile_y, future)
        for dx in range(1, future.w, max(1, tw // 2))
    )


def check_collisions(tile_map: TileMap, player_rect: Rect,
                     vel_x: float, vel_y: float) -> CollisionResult:
    """Predict where ``player_rect`` moves with the given velocity and report contacts."""
    tw, th = tile_map.tile_width, tile_map.tile_height
    result = CollisionResult()
    future = player_rect.moved(int(vel_x), int(vel_y))
    foot = Rect(future.x, future.bottom - STEP_HEIGHT, future.w, STEP_HEIGHT)

    if vel_x < 0:
        result.left_wall = _wall_hit(tile_map, _tdiv(future.x, tw), foot, future)
    if vel_x > 0:
        result.right_wall = _wall_hit(tile_map, _tdiv(future.right - 1, tw), foot, future)

    if vel_y > 0:
        result.floor = _row_hit(tile_map, _tdiv(future.bottom - 1, th), future)
    elif vel_y < 0:
        result.ceiling = _row_hit(tile_map, _tdiv(future.y, th), future)

    left, right = _tdiv(player_rect.x, tw), _tdiv(player_rect.right - 1, tw)
    top, bottom = _tdiv(player_rect.y, th), _tdiv(player_rect.bottom - 1, th)
    result.overlapping = any(
        is_solid_at(tile_map, tx, ty, player_rect)
        for tx in range(left, right + 1)
        for ty in range(top, bottom + 1)
    )
    return result