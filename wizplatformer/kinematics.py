"""Force-driven point-mass motion with per-axis velocity caps."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

GRAVITY = 9.8
DEFAULT_MASS = 40.0
MAX_SPEED_X = 3.0
MAX_FALL_SPEED = 3.0
MAX_RISE_SPEED = 60.0


@dataclass
class Kinematics:
    """Accumulates forces for a frame and integrates them on :meth:`move`.

    Velocities are in pixels per frame and are added to the position directly.
    ``raw_vx`` and ``raw_vy`` hold the velocity from the last step before
    capping; collision prediction uses them.
    """

    mass: float = DEFAULT_MASS
    gravity: float = GRAVITY
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    ax: float = 0.0
    ay: float = field(default=None)  # type: ignore[assignment]
    fx: float = 0.0
    fy: float = 0.0
    dt: float = 0.0
    raw_vx: float = 0.0
    raw_vy: float = 0.0

    def __post_init__(self) -> None:
        if self.ay is None:
            self.ay = self.gravity

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    def apply_force(self, fx: float, fy: float) -> None:
        """Add a force to be applied on the next step."""
        self.fx += fx
        self.fy += fy

    def move(self) -> None:
        """Integrate accumulated forces over ``dt`` and clear them."""
        logger.debug(
            "mass=%s a=(%s, %s) v=(%s, %s) g=%s dt=%s pos=(%s, %s) f=(%s, %s)",
            self.mass, self.ax, self.ay, self.vx, self.vy, self.gravity,
            self.dt, self.x, self.y, self.fx, self.fy,
        )
        self.ax = self.fx / self.mass
        self.ay = self.fy / self.mass

        self.vx += self.ax * self.dt
        self.vy += self.ay * self.dt
        self.raw_vx = self.vx
        self.raw_vy = self.vy

        self.vx = max(-MAX_SPEED_X, min(MAX_SPEED_X, self.vx))
        self.vy = max(-MAX_RISE_SPEED, min(MAX_FALL_SPEED, self.vy))

        self.x += self.vx
        self.y += self.vy

        self.fx = 0.0
        self.fy = 0.0