"""Sprite sheets: images cut into animation frames."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import pygame

from .geometry import Rect
from .timer import Timer

logger = logging.getLogger(__name__)


class SpriteSheet:
    """An image holding ``cells`` frames laid out ``cols`` to a row."""

    def __init__(self, cols: int = 1, cells: int = 1, fps: int = 1,
                 clock: Optional[Callable[[], int]] = None) -> None:
        self.image: Optional[pygame.Surface] = None
        self.width = 0
        self.height = 0
        self.cols = cols
        self.cells = cells
        self.fps = fps
        self.frame = 0
        self._timer = Timer(clock)

    def free(self) -> None:
        """Drop the image and reset its size."""
        self.image = None
        self.width = 0
        self.height = 0

    def _set_image(self, image: pygame.Surface) -> None:
        self.image = image
        self.width, self.height = image.get_size()

    def load(self, path: str) -> None:
        """Replace the image with the one at ``path``; raises OSError on failure."""
        self.free()
        try:
            image = pygame.image.load(str(path))
        except pygame.error as exc:
            raise OSError(f"cannot load image {path}: {exc}") from exc
        if pygame.display.get_surface() is not None:
            image = image.convert_alpha()
        self._set_image(image)

    def from_text(self, text: str, font: Any, color: Any) -> None:
        """Replace the image with ``text`` rendered in ``font``."""
        if font is None:
            raise ValueError("no font given")
        self.free()
        try:
            image = font.render(text, True, color)
        except pygame.error as exc:
            raise ValueError(f"cannot render text {text!r}: {exc}") from exc
        self._set_image(image)

    def frame_rect(self, frame: int) -> Rect:
        """Source rectangle of ``frame`` within the sheet."""
        if self.cols <= 0:
            raise ValueError("sprite sheet needs at least one column")
        rows = self.cells // self.cols
        if rows <= 0:
            raise ValueError("sprite sheet needs at least one full row of cells")
        frame_w = self.width // self.cols
        frame_h = self.height // rows
        return Rect((frame % self.cols) * frame_w, (frame // self.cols) * frame_h,
                    frame_w, frame_h)

    def animate(self, surface: pygame.Surface, dest: Rect, angle: float = 0.0,
                flip_x: bool = False) -> None:
        """Advance the frame when its time is up and draw it into ``dest``."""
        if self.fps <= 0:
            raise ValueError("frames per second must be positive")
        if self.cells <= 0:
            raise ValueError("sprite sheet needs at least one cell")
        if not self._timer.is_started():
            self._timer.start()
        if self._timer.ticks() >= 1000 // self.fps:
            self.frame = (self.frame + 1) % self.cells
            self._timer.start()
        self.render(surface, self.frame_rect(self.frame), dest, angle, flip_x)

    def render(self, surface: pygame.Surface, src: Rect, dest: Rect, angle: float = 0.0,
               flip_x: bool = False) -> None:
        """Draw the ``src`` part of the image stretched into ``dest``.

        ``angle`` turns the image clockwise in degrees about the centre of ``dest``.
        """
        if self.image is None:
            return
        area = pygame.Rect(src.x, src.y, src.w, src.h).clip(self.image.get_rect())
        if area.width <= 0 or area.height <= 0 or dest.w <= 0 or dest.h <= 0:
            return
        piece = self.image.subsurface(area)
        if piece.get_size() != (dest.w, dest.h):
            piece = pygame.transform.scale(piece, (dest.w, dest.h))
        if flip_x:
            piece = pygame.transform.flip(piece, True, False)
        target = pygame.Rect(dest.x, dest.y, dest.w, dest.h)
        if angle:
            piece = pygame.transform.rotate(piece, -angle)
            target = piece.get_rect(center=target.center)
        surface.blit(piece, target)