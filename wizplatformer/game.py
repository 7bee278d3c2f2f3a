"""Window setup, camera and the main game loop."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import pygame

from .geometry import SCREEN_HEIGHT, SCREEN_WIDTH
from .player import Player
from .render import render_map
from .texture import SpriteSheet
from .tilemap import load_map
from .timer import Timer

logger = logging.getLogger(__name__)

SCALE = 4.0
DEFAULT_MAP = "levels/2.tmx"
BACKGROUND = "bg.png"
IDLE_SPRITE = "sprites/wizard/wizard_idle.png"
RUN_SPRITE = "sprites/wizard/wizard_run.png"
FRAME_MS = 16
JUMP_FRAMES = 5


@dataclass
class Camera:
    """The visible part of the map, in map pixels."""

    x: int = 0
    y: int = 0
    w: int = SCREEN_WIDTH
    h: int = SCREEN_HEIGHT

    def follow(self, x: float, y: float, width: int, height: int,
               map_width: int, map_height: int, follow_y: bool) -> None:
        """Centre on a body at (x, y) of the given size, kept inside the map."""
        view_w = int(SCREEN_WIDTH / SCALE)
        view_h = int(SCREEN_HEIGHT / SCALE)
        if follow_y:
            self.y = int(y + height // 2 - view_h // 2)
        self.x = int(x + width // 2 - view_w // 2)
        if self.x < 0:
            self.x = 0
        if self.y < 0:
            self.y = 0
        if self.x > map_width - self.w:
            self.x = map_width - self.w
        if self.y > map_height - self.h:
            self.y = map_height - self.h
        self.w = view_w
        self.h = view_h


def next_jump(jump_index: int) -> tuple:
    """Whether this frame jumps, and the jump counter for the next frame."""
    if jump_index > 0:
        return True, (jump_index + 1) % JUMP_FRAMES
    return False, 0


def init_display() -> pygame.Surface:
    """Start video, fonts and image support and open the game window."""
    try:
        pygame.display.init()
        pygame.font.init()
    except pygame.error as exc:
        raise RuntimeError(f"cannot initialise video: {exc}") from exc
    if not pygame.image.get_extended():
        raise RuntimeError("PNG image support is unavailable")
    try:
        window = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
    except pygame.error as exc:
        raise RuntimeError(f"cannot create window: {exc}") from exc
    pygame.display.set_caption("wiz")
    return window


def _load_texture(path: str) -> pygame.Surface:
    image = pygame.image.load(path)
    return image.convert_alpha()


def _set_sprite(sheet: SpriteSheet, path: str, cells: int, cols: int) -> None:
    try:
        sheet.load(path)
    except OSError as exc:
        logger.error("%s", exc)
    sheet.cells = cells
    sheet.cols = cols


def run(map_path: str) -> bool:
    """Play the level at ``map_path`` until the window is closed."""
    window = pygame.display.get_surface()
    if window is None:
        raise RuntimeError("display is not initialised")
    tile_map = load_map(map_path, _load_texture)

    player = Player(tile_map=tile_map)
    player.sprite.fps = 30
    _set_sprite(player.sprite, IDLE_SPRITE, 5, 5)
    player.width = 16
    player.height = 16
    player.sprite.fps = 4

    try:
        background = pygame.image.load(BACKGROUND).convert_alpha()
    except (pygame.error, OSError) as exc:
        raise OSError(f"failed to load background texture: {exc}") from exc
    bg_w, bg_h = background.get_size()
    bg_scale = SCREEN_HEIGHT / bg_h
    background = pygame.transform.scale(background, (int(bg_w * bg_scale), SCREEN_HEIGHT))

    canvas = pygame.Surface((int(SCREEN_WIDTH / SCALE), int(SCREEN_HEIGHT / SCALE)))
    camera = Camera()
    move_left = move_right = jump = False
    jump_index = 0

    frame_timer = Timer(pygame.time.get_ticks)
    frame_timer.start()
    running = True
    while running:
        jump, jump_index = next_jump(jump_index)

        delta = frame_timer.ticks() / 1000.0
        frame_timer.start()

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_LEFT:
                    move_left = True
                    _set_sprite(player.sprite, RUN_SPRITE, 4, 4)
                    player.flip_x = True
                elif event.key == pygame.K_RIGHT:
                    move_right = True
                    _set_sprite(player.sprite, RUN_SPRITE, 4, 4)
                    player.flip_x = False
                elif event.key == pygame.K_SPACE and jump_index < 10:
                    jump_index = 1
                    jump = True
            elif event.type == pygame.KEYUP:
                if event.key == pygame.K_LEFT:
                    move_left = False
                    player.flip_x = False
                    _set_sprite(player.sprite, IDLE_SPRITE, 5, 5)
                elif event.key == pygame.K_RIGHT:
                    move_right = False
                    player.flip_x = False
                    _set_sprite(player.sprite, IDLE_SPRITE, 5, 5)

        camera.follow(player.x, player.y, player.width, player.height,
                      tile_map.pixel_width, tile_map.pixel_height, not jump)
        player.update(delta)

        canvas.blit(background, (int(-camera.x / 2), 0))
        render_map(canvas, tile_map, camera)
        player.step(move_right, move_left, jump)
        player.draw(canvas, camera)

        pygame.transform.scale(canvas, window.get_size(), window)
        pygame.display.flip()

        elapsed = frame_timer.ticks()
        if elapsed < FRAME_MS:
            pygame.time.delay(FRAME_MS - elapsed)
    return True


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Open the window and play a level; returns the process exit status."""
    parser = argparse.ArgumentParser(prog="wiz", description="Side-scrolling wizard game.")
    parser.add_argument("map", nargs="?", default=DEFAULT_MAP, help="TMX level to play")
    args = parser.parse_args(argv)
    try:
        try:
            init_display()
        except RuntimeError as exc:
            print(exc)
            print("Error initializing subsystems!")
            return -1
        try:
            run(args.map)
        except (OSError, ValueError, RuntimeError) as exc:
            print(exc)
            print("Error running the game loop!")
            return -1
        return 0
    finally:
        pygame.quit()