"""Drawing of tile maps, image layers and object groups onto a surface."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import pygame

from .tilemap import FLIP_BITS_REMOVAL, Layer, TileMap

OBJECT_SCALE = 4.0

Point = tuple
Segment = tuple


def polyline_segments(points: Sequence[Point], x: float, y: float) -> list:
    """Line segments joining consecutive points, each offset by (x, y)."""
    shifted = [(x + px, y + py) for px, py in points]
    return list(zip(shifted, shifted[1:]))


def polygon_segments(points: Sequence[Point], x: float, y: float) -> list:
    """Polyline segments plus a closing segment when there are more than two points."""
    segments = polyline_segments(points, x, y)
    if len(points) > 2:
        first, last = points[0], points[-1]
        segments.append(((x + first[0], y + first[1]), (x + last[0], y + last[1])))
    return segments


def render_map(surface: pygame.Surface, tile_map: TileMap, camera: Any) -> None:
    """Draw every visible layer of ``tile_map`` as seen through ``camera``."""
    draw_layers(surface, tile_map, tile_map.layers, camera)


def draw_layers(surface: pygame.Surface, tile_map: TileMap,
                layers: Iterable[Layer], camera: Any) -> None:
    """Draw visible layers in order, descending into groups."""
    for layer in layers:
        if not layer.visible:
            continue
        if layer.kind == "group":
            draw_layers(surface, tile_map, layer.children, camera)
        elif layer.kind == "objects":
            draw_objects(surface, layer, camera)
        elif layer.kind == "image":
            draw_image_layer(surface, layer)
        elif layer.kind == "tile":
            draw_layer(surface, tile_map, layer, camera)


def draw_image_layer(surface: pygame.Surface, layer: Layer) -> None:
    """Blit the layer's image at the surface origin."""
    if layer.image is not None:
        surface.blit(layer.image, (0, 0))


def draw_layer(surface: pygame.Surface, tile_map: TileMap, layer: Layer, camera: Any) -> int:
    """Draw a tile layer, bottom row first; returns the number of tiles drawn."""
    width = tile_map.width
    rows = [layer.gids[r * width:(r + 1) * width] for r in range(tile_map.height)]
    cam_x, cam_y = int(camera.x), int(camera.y)
    drawn = 0
    for row_index, row in reversed(list(enumerate(rows))):
        for col_index, raw_gid in enumerate(row):
            tile = tile_map.tiles.get(raw_gid & FLIP_BITS_REMOVAL)
            if tile is None:
                continue
            tileset = tile.tileset
            image = tile.image if tile.image is not None else tileset.image
            if image is None:
                continue
            tw, th = tileset.tile_width, tileset.tile_height
            src = pygame.Rect(tile.ul_x, tile.ul_y, tw, th)
            dest = (col_index * tw - cam_x, row_index * th - cam_y)
            surface.blit(image, dest, area=src)
            drawn += 1
    return drawn


def _draw_segments(surface: pygame.Surface, color: tuple, segments: Iterable[Segment]) -> None:
    for start, end in segments:
        pygame.draw.line(surface, color, (int(start[0]), int(start[1])), (int(end[0]), int(end[1])))


def draw_objects(surface: pygame.Surface, group: Layer, camera: Any) -> None:
    """Outline the visible objects of an object layer in the layer's colour."""
    color = group.color
    for obj in group.objects:
        if not obj.visible:
            continue
        if obj.kind == "square":
            rect = pygame.Rect(
                int((obj.x - camera.x) * OBJECT_SCALE),
                int((obj.y - camera.y) * OBJECT_SCALE),
                int(obj.width * OBJECT_SCALE),
                int(obj.height * OBJECT_SCALE),
            )
            pygame.draw.rect(surface, color, rect, 1)
        elif obj.kind == "polygon":
            _draw_segments(surface, color, polygon_segments(obj.points, obj.x, obj.y))
        elif obj.kind == "polyline":
            _draw_segments(surface, color, polyline_segments(obj.points, obj.x, obj.y))