# wizplatformer

A small side-scrolling platformer. A wizard runs and jumps across a level
drawn from a Tiled (`.tmx`) map. The collision shapes on the map's tiles
decide where the wizard can stand. Movement comes from forces: gravity,
running and jumping push on the wizard, and his velocity is capped every
frame.

## Installation

```
pip install .
```

This also installs `pygame`.

## Running

Start the game from a directory that holds the game's assets:

```
wizplatformer
```

The game looks for these files, relative to the current directory:

- `levels/2.tmx` — the level. Tileset files and images named in it are resolved relative to the map file.
- `bg.png` — the background. It is scaled to the window height and scrolls at half the camera's horizontal speed.
- `sprites/wizard/wizard_idle.png` — the idle sprite sheet, 5 frames in 5 columns.
- `sprites/wizard/wizard_run.png` — the run sprite sheet, 4 frames in 4 columns.

To play a different map, give its path:

```
wizplatformer path/to/level.tmx
```

The command exits with status 0 when the window is closed. If the display
cannot be set up, or the map or background cannot be loaded, it prints the
error and exits with status -1. A sprite sheet that fails to load is logged
and play goes on.

### Controls

| Key        | Action     |
|------------|------------|
| Left       | run left   |
| Right      | run right  |
| Space      | jump       |

Close the window to quit.

## Using the pieces

The modules also work on their own.

- `wizplatformer.geometry` has `Rect` (with `intersects` and `moved`) and `check_collision` for axis-aligned boxes, plus the screen size constants.
- `wizplatformer.kinematics` has `Kinematics`. It collects forces with `apply_force` and advances one frame with `move`.
- `wizplatformer.timer` has `Timer`, a millisecond stopwatch that can be paused and resumed. It takes an optional clock function, which makes it easy to drive in tests.
- `wizplatformer.tilemap` loads TMX maps with `load_map` and `parse_map`, and provides `TileMap`, `Layer`, `Tileset`, `Tile`, `TileObject` and `parse_color`. Tile layers may be stored as XML, CSV or base64 (plain, zlib or gzip). External tileset files are read.
- `wizplatformer.collisions` has `check_collisions`. It predicts where a rectangle moves with a given velocity and returns a `CollisionResult`, which reports floor, ceiling, left-wall, right-wall and overlap contacts.
- `wizplatformer.render` draws tile layers, image layers and object outlines onto a pygame surface.
- `wizplatformer.texture` has `SpriteSheet`, for animated sprites.
- `wizplatformer.player` has `Player`. It ties collisions and kinematics together: `update` sets the frame time, `step` advances one frame from the input, and `draw` draws the sprite.
- `wizplatformer.game` has `Camera`, `next_jump`, `init_display`, the main loop `run`, and `main`.

For example:

```python
from wizplatformer.geometry import Rect, check_collision

a = Rect(0, 0, 10, 10)
b = Rect(5, 5, 10, 10)
assert check_collision(a, b)
assert not check_collision(a, Rect(10, 0, 5, 5))  # touching edges do not collide
```

## What it does not do

The game is a single level with one player. There are no menus, enemies,
sound, scoring, or saving. `Player` has health, lives and attack values, but
nothing in the game uses them. Infinite (chunked) Tiled maps cannot be loaded,
and ellipse, point and text objects are not drawn.

## Tests

```
pip install .[test]
pytest
```