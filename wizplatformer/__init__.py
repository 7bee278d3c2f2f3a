"""A tile-map platformer with force-based movement and tile collisions."""

__version__ = "0.1.0"