"""The player character: input-driven forces, tile collisions and drawing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import pygame

from .collisions import CollisionResult, check_collisions
from .geometry import Rect
from .kinematics import Kinematics
from .texture import SpriteSheet
from .tilemap import TileMap

logger = logging.getLogger(__name__)

OVERLAP_PUSH_SPEED = 1.0  # pixels per frame used to push the body out of a tile
JUMP_FORCE = -3500.0
RUN_FORCE = 1000.0
CEILING_PUSH_FORCE = 3000.0
GROUND_FRICTION = 0.6
STOP_SPEED = 0.01


@dataclass(eq=False)
class Player(Kinematics):
    """A movable body with a sprite, stepped once per frame."""

    width: int = 20
    height: int = 20
    weight: float = 1000.0
    max_vel: float = 3.0
    atk: float = 10.0
    health: int = 0
    lives: int = 9
    x_pos: int = 0
    y_pos: int = 0
    x_vel: int = 0
    y_vel: int = 0
    gravity_vel: float = 0.0
    flip_x: bool = False
    rotate: float = 0.0
    jump_power: float = -100.0
    tile_map: Optional[TileMap] = None
    grounded: bool = False
    jumping: bool = False
    frame_dt: float = 0.0
    rect: Optional[Rect] = None
    sprite: SpriteSheet = field(default_factory=SpriteSheet, repr=False)
    outline_color: tuple = (255, 255, 255, 255)

    def __post_init__(self) -> None:
        super().__post_init__()
        self.gravity_vel = (self.weight / self.gravity) * self.frame_dt * 10
        self.y_vel = int(self.gravity_vel)
        if self.rect is None:
            self.rect = Rect(self.x_pos, self.y_pos, self.width, self.height)

    def collider(self) -> Rect:
        """The rectangle the player occupies in map pixels."""
        return self.rect

    def update(self, dt: float) -> None:
        """Set the frame time used by the next step."""
        self.frame_dt = dt

    def jump(self) -> None:
        """Add the jump impulse to the vertical velocity unless already jumping."""
        if not self.jumping:
            self.y_vel = int(self.y_vel + self.jump_power)
            self.jumping = True

    def _contacts(self) -> CollisionResult:
        if self.tile_map is None:
            return CollisionResult()
        return check_collisions(self.tile_map, self.rect, self.raw_vx, self.raw_vy)

    def step(self, move_right: bool, move_left: bool, jump: bool) -> CollisionResult:
        """Advance one frame from the given input; returns the contacts found."""
        self.jumping = jump
        self.dt = self.frame_dt
        self.x = float(self.x_pos)
        self.y = float(self.y_pos)
        logger.debug("pos=(%s, %s) grounded=%s left=%s right=%s jump=%s",
                     self.x_pos, self.y_pos, self.grounded, move_left, move_right, jump)

        hit = self._contacts()

        self.apply_force(0.0, self.gravity * self.weight * self.dt)
        if hit.floor:
            self.vy = 0.0

        if hit.overlapping:
            if hit.floor:
                self.y -= OVERLAP_PUSH_SPEED
                self.vy = 0.0
                self.grounded = True
            elif hit.ceiling:
                self.y += OVERLAP_PUSH_SPEED
                self.vy = 0.0
            else:
                self.y -= OVERLAP_PUSH_SPEED * 0.5
        else:
            if hit.floor:
                self.vy = 0.0
            self.grounded = hit.floor

        if jump and hit.floor:
            self.apply_force(0.0, JUMP_FORCE)

        if hit.right_wall:
            self.vx = 0.0
            self.fx = min(self.fx, 0.0)

        if move_right:
            self.apply_force(RUN_FORCE, 0.0)
        if move_left:
            self.apply_force(-RUN_FORCE, 0.0)

        if not move_left and not move_right:
            self.vx *= GROUND_FRICTION
            if abs(self.vx) < STOP_SPEED:
                self.vx = 0.0

        if hit.left_wall:
            self.vx = 0.0
            self.fx = self.fx if self.fx > 0 else 0.0
            self.x += 1
        if hit.right_wall:
            self.vx = 0.0
            self.fx = min(self.fx, 0.0)
            self.x -= 1

        if hit.ceiling and not hit.floor:
            self.apply_force(0.0, CEILING_PUSH_FORCE)

        self.move()

        self.rect = Rect(int(self.x), int(self.y), self.width, self.height)
        self.x_pos, self.y_pos = self.rect.x, self.rect.y
        return hit

    def draw(self, surface: pygame.Surface, camera: Any) -> None:
        """Draw the animated sprite and its outline as seen through ``camera``."""
        screen = self.rect.moved(-int(camera.x), -int(camera.y))
        self.sprite.animate(surface, screen, self.rotate, self.flip_x)
        pygame.draw.rect(surface, self.outline_color,
                         pygame.Rect(screen.x, screen.y, screen.w, screen.h), 1)