"""Tiled (TMX) map model and loader."""

from __future__ import annotations

import base64
import gzip
import logging
import struct
import xml.etree.ElementTree as ET
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, Union

logger = logging.getLogger(__name__)

FLIPPED_HORIZONTALLY = 0x80000000
FLIPPED_VERTICALLY = 0x40000000
FLIPPED_DIAGONALLY = 0x20000000
FLIP_BITS_REMOVAL = 0x1FFFFFFF

NO_COLOR = (0, 0, 0, 0)

ImageLoader = Callable[[str], Any]
Color = tuple


@dataclass
class TileObject:
    """A map or collision object.

    ``kind`` is one of ``square``, ``polygon``, ``polyline``, ``ellipse``,
    ``point``, ``text`` or ``tile``.
    """

    kind: str = "square"
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    points: list = field(default_factory=list)
    visible: bool = True
    id: int = 0
    name: str = ""
    gid: int = 0
    properties: dict = field(default_factory=dict)


@dataclass
class Tile:
    """One tile of a tileset, addressed on the map by its global id."""

    id: int
    gid: int
    tileset: "Tileset" = field(repr=False, compare=False)
    image: Any = None
    image_source: Optional[str] = None
    ul_x: int = 0
    ul_y: int = 0
    collision: list = field(default_factory=list)
    properties: dict = field(default_factory=dict)


@dataclass
class Tileset:
    """A set of tiles cut from one image or collected from several."""

    first_gid: int
    name: str = ""
    tile_width: int = 0
    tile_height: int = 0
    tile_count: int = 0
    columns: int = 0
    spacing: int = 0
    margin: int = 0
    image: Any = None
    image_source: Optional[str] = None
    image_width: int = 0
    image_height: int = 0
    tiles: list = field(default_factory=list)


@dataclass
class Layer:
    """A map layer; ``kind`` is ``tile``, ``objects``, ``image`` or ``group``."""

    name: str
    kind: str
    visible: bool = True
    opacity: float = 1.0
    gids: list = field(default_factory=list)
    objects: list = field(default_factory=list)
    color: tuple = NO_COLOR
    image: Any = None
    image_source: Optional[str] = None
    children: list = field(default_factory=list)
    properties: dict = field(default_factory=dict)


@dataclass
class TileMap:
    """An orthogonal tile map with its tilesets and layers."""

    width: int
    height: int
    tile_width: int
    tile_height: int
    background_color: tuple = NO_COLOR
    layers: list = field(default_factory=list)
    tilesets: list = field(default_factory=list)
    tiles: dict = field(default_factory=dict)

    @property
    def pixel_width(self) -> int:
        return self.width * self.tile_width

    @property
    def pixel_height(self) -> int:
        return self.height * self.tile_height

    def tile_index(self, tx: int, ty: int) -> Optional[int]:
        """Row-major cell index, or None when (tx, ty) lies outside the map."""
        if not (0 <= tx < self.width and 0 <= ty < self.height):
            return None
        return ty * self.width + tx

    def tile_at(self, layer: Layer, tx: int, ty: int) -> Optional[Tile]:
        """The tile placed at (tx, ty) in ``layer``, ignoring flip bits."""
        index = self.tile_index(tx, ty)
        if index is None:
            return None
        return self.tiles.get(layer.gids[index] & FLIP_BITS_REMOVAL)


def parse_color(value: str) -> tuple:
    """Parse ``#RRGGBB`` or ``#AARRGGBB`` into an (r, g, b, a) tuple."""
    digits = value.strip().lstrip("#")
    if len(digits) not in (6, 8) or any(c not in "0123456789abcdefABCDEF" for c in digits):
        raise ValueError(f"invalid colour: {value!r}")
    argb = int(digits, 16)
    if len(digits) == 6:
        argb |= 0xFF000000
    return ((argb >> 16) & 0xFF, (argb >> 8) & 0xFF, argb & 0xFF, (argb >> 24) & 0xFF)


def _int_attr(elem: ET.Element, name: str, default: Optional[int] = None) -> int:
    raw = elem.get(name)
    if raw is None:
        if default is None:
            raise ValueError(f"<{elem.tag}> lacks required attribute {name!r}")
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"<{elem.tag}> attribute {name!r} is not an integer: {raw!r}") from exc


def _float_attr(elem: ET.Element, name: str, default: float = 0.0) -> float:
    raw = elem.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"<{elem.tag}> attribute {name!r} is not a number: {raw!r}") from exc


def _is_visible(elem: ET.Element) -> bool:
    return elem.get("visible", "1") != "0"


def _properties(elem: ET.Element) -> dict:
    container = elem.find("properties")
    if container is None:
        return {}
    props = {}
    for prop in container.findall("property"):
        value = prop.get("value")
        if value is None:
            value = prop.text or ""
        kind = prop.get("type", "string")
        if kind == "bool":
            props[prop.get("name", "")] = value == "true"
        elif kind == "int":
            props[prop.get("name", "")] = int(value)
        elif kind == "float":
            props[prop.get("name", "")] = float(value)
        else:
            props[prop.get("name", "")] = value
    return props


def _load_image(loader: Optional[ImageLoader], path: str) -> Any:
    if loader is None:
        return None
    logger.info("Loading tileset image: %s", path)
    try:
        return loader(path)
    except (OSError, ValueError, RuntimeError) as exc:
        logger.error("Image load failed for %s: %s", path, exc)
        return None


def _parse_points(raw: str) -> list:
    points = []
    for pair in raw.split():
        px, _, py = pair.partition(",")
        points.append((float(px), float(py)))
    return points


def _parse_object(elem: ET.Element) -> TileObject:
    obj = TileObject(
        x=_float_attr(elem, "x"),
        y=_float_attr(elem, "y"),
        width=_float_attr(elem, "width"),
        height=_float_attr(elem, "height"),
        visible=_is_visible(elem),
        id=_int_attr(elem, "id", 0),
        name=elem.get("name", ""),
        gid=_int_attr(elem, "gid", 0),
        properties=_properties(elem),
    )
    polygon = elem.find("polygon")
    polyline = elem.find("polyline")
    if obj.gid:
        obj.kind = "tile"
    elif elem.find("ellipse") is not None:
        obj.kind = "ellipse"
    elif polygon is not None:
        obj.kind = "polygon"
        obj.points = _parse_points(polygon.get("points", ""))
    elif polyline is not None:
        obj.kind = "polyline"
        obj.points = _parse_points(polyline.get("points", ""))
    elif elem.find("point") is not None:
        obj.kind = "point"
    elif elem.find("text") is not None:
        obj.kind = "text"
    return obj


def _parse_tileset(elem: ET.Element, first_gid: int, base_dir: Path,
                   loader: Optional[ImageLoader]) -> Tileset:
    tileset = Tileset(
        first_gid=first_gid,
        name=elem.get("name", ""),
        tile_width=_int_attr(elem, "tilewidth", 0),
        tile_height=_int_attr(elem, "tileheight", 0),
        tile_count=_int_attr(elem, "tilecount", 0),
        columns=_int_attr(elem, "columns", 0),
        spacing=_int_attr(elem, "spacing", 0),
        margin=_int_attr(elem, "margin", 0),
    )
    image_elem = elem.find("image")
    if image_elem is not None and image_elem.get("source"):
        tileset.image_source = str(base_dir / image_elem.get("source", ""))
        tileset.image_width = _int_attr(image_elem, "width", 0)
        tileset.image_height = _int_attr(image_elem, "height", 0)
        tileset.image = _load_image(loader, tileset.image_source)
        step = tileset.tile_width + tileset.spacing
        if not tileset.columns and tileset.image_width and step:
            tileset.columns = (tileset.image_width - 2 * tileset.margin + tileset.spacing) // step

    tile_elems = {_int_attr(t, "id"): t for t in elem.findall("tile")}
    ids = sorted(set(range(tileset.tile_count)) | set(tile_elems))
    for tile_id in ids:
        tile = Tile(id=tile_id, gid=first_gid + tile_id, tileset=tileset)
        if tileset.columns:
            row, col = divmod(tile_id, tileset.columns)
            tile.ul_x = tileset.margin + col * (tileset.tile_width + tileset.spacing)
            tile.ul_y = tileset.margin + row * (tileset.tile_height + tileset.spacing)
        tile_elem = tile_elems.get(tile_id)
        if tile_elem is not None:
            own_image = tile_elem.find("image")
            if own_image is not None and own_image.get("source"):
                tile.image_source = str(base_dir / own_image.get("source", ""))
                tile.image = _load_image(loader, tile.image_source)
                tile.ul_x = tile.ul_y = 0
            group = tile_elem.find("objectgroup")
            if group is not None:
                tile.collision = [_parse_object(o) for o in group.findall("object")]
            tile.properties = _properties(tile_elem)
        tileset.tiles.append(tile)
    if not tileset.tile_count:
        tileset.tile_count = len(tileset.tiles)
    return tileset


def _decode_data(data: ET.Element, expected: int) -> list:
    if data.find("chunk") is not None:
        raise ValueError("infinite maps are not supported")
    encoding = data.get("encoding")
    text = (data.text or "").strip()
    if encoding is None:
        gids = [_int_attr(t, "gid", 0) for t in data.findall("tile")]
    elif encoding == "csv":
        try:
            gids = [int(v) for v in text.replace("\n", "").split(",") if v.strip()]
        except ValueError as exc:
            raise ValueError("malformed CSV layer data") from exc
    elif encoding == "base64":
        try:
            raw = base64.b64decode(text, validate=False)
            compression = data.get("compression")
            if compression == "zlib":
                raw = zlib.decompress(raw)
            elif compression == "gzip":
                raw = gzip.decompress(raw)
            elif compression is not None:
                raise ValueError(f"unsupported compression: {compression!r}")
        except (zlib.error, OSError, EOFError) as exc:
            raise ValueError("corrupt layer data") from exc
        if len(raw) % 4:
            raise ValueError("layer data is not a whole number of 32-bit ids")
        gids = [gid for (gid,) in struct.iter_unpack("<I", raw)]
    else:
        raise ValueError(f"unsupported layer encoding: {encoding!r}")
    if len(gids) != expected:
        raise ValueError(f"layer holds {len(gids)} tiles, expected {expected}")
    return gids


def _parse_layers(parent: ET.Element, tile_map: TileMap, base_dir: Path,
                  loader: Optional[ImageLoader]) -> list:
    layers = []
    for child in parent:
        common = dict(
            name=child.get("name", ""),
            visible=_is_visible(child),
            opacity=_float_attr(child, "opacity", 1.0),
            properties=_properties(child),
        )
        if child.tag == "layer":
            data = child.find("data")
            if data is None:
                raise ValueError(f"tile layer {common['name']!r} has no data")
            gids = _decode_data(data, tile_map.width * tile_map.height)
            layers.append(Layer(kind="tile", gids=gids, **common))
        elif child.tag == "objectgroup":
            color = parse_color(child.get("color")) if child.get("color") else NO_COLOR
            objects = [_parse_object(o) for o in child.findall("object")]
            layers.append(Layer(kind="objects", objects=objects, color=color, **common))
        elif child.tag == "imagelayer":
            layer = Layer(kind="image", **common)
            image_elem = child.find("image")
            if image_elem is not None and image_elem.get("source"):
                layer.image_source = str(base_dir / image_elem.get("source", ""))
                layer.image = _load_image(loader, layer.image_source)
            layers.append(layer)
        elif child.tag == "group":
            children = _parse_layers(child, tile_map, base_dir, loader)
            layers.append(Layer(kind="group", children=children, **common))
    return layers


def _parse_xml(text: Union[str, bytes]) -> ET.Element:
    try:
        return ET.fromstring(text)
    except ET.ParseError as exc:
        raise ValueError(f"malformed XML: {exc}") from exc


def parse_map(text: Union[str, bytes], base_dir: Union[str, Path, None] = None,
              image_loader: Optional[ImageLoader] = None) -> TileMap:
    """Build a :class:`TileMap` from TMX text.

    Relative image and tileset paths are resolved against ``base_dir``;
    ``image_loader`` is called with each image path and its result stored.
    """
    base = Path(base_dir) if base_dir is not None else Path(".")
    root = _parse_xml(text)
    if root.tag != "map":
        raise ValueError(f"expected <map> root, found <{root.tag}>")
    background = root.get("backgroundcolor")
    tile_map = TileMap(
        width=_int_attr(root, "width"),
        height=_int_attr(root, "height"),
        tile_width=_int_attr(root, "tilewidth"),
        tile_height=_int_attr(root, "tileheight"),
        background_color=parse_color(background) if background else NO_COLOR,
    )
    for ts_elem in root.findall("tileset"):
        first_gid = _int_attr(ts_elem, "firstgid")
        source = ts_elem.get("source")
        if source:
            ts_path = base / source
            ts_root = _parse_xml(ts_path.read_bytes())
            if ts_root.tag != "tileset":
                raise ValueError(f"{ts_path} is not a tileset")
            tileset = _parse_tileset(ts_root, first_gid, ts_path.parent, image_loader)
        else:
            tileset = _parse_tileset(ts_elem, first_gid, base, image_loader)
        tile_map.tilesets.append(tileset)
        tile_map.tiles.update((tile.gid, tile) for tile in tileset.tiles)
    tile_map.layers = _parse_layers(root, tile_map, base, image_loader)
    return tile_map


def load_map(path: Union[str, Path], image_loader: Optional[ImageLoader] = None) -> TileMap:
    """Read and parse a TMX file; paths inside it are relative to its folder."""
    map_path = Path(path)
    return parse_map(map_path.read_bytes(), map_path.parent, image_loader)