import base64
import gzip
import struct
import zlib

import pytest

from wizplatformer.tilemap import (
    FLIPPED_HORIZONTALLY,
    NO_COLOR,
    load_map,
    parse_color,
    parse_map,
)

TILESET = """
<tileset firstgid="1" name="blocks" tilewidth="16" tileheight="16" tilecount="4" columns="2">
  <image source="blocks.png" width="32" height="32"/>
  <tile id="0">
    <properties><property name="solid" type="bool" value="true"/></properties>
    <objectgroup><object id="1" x="0" y="0" width="16" height="16"/></objectgroup>
  </tile>
</tileset>
"""


def make_map(data_xml, extra="", tileset=TILESET, width=2, height=2):
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<map version="1.10" orientation="orthogonal" width="{width}" height="{height}"
     tilewidth="16" tileheight="16" backgroundcolor="#336699">
{tileset}
<layer id="1" name="ground" width="{width}" height="{height}">{data_xml}</layer>
{extra}
</map>"""


CSV = '<data encoding="csv">1,2,\n3,4</data>'


def test_parse_color_rgb_gets_opaque_alpha():
    assert parse_color("#336699") == (0x33, 0x66, 0x99, 0xFF)


def test_parse_color_argb():
    assert parse_color("#80112233") == (0x11, 0x22, 0x33, 0x80)


@pytest.mark.parametrize("bad", ["", "#12345", "#zzzzzz", "#1234567"])
def test_parse_color_rejects_garbage(bad):
    with pytest.raises(ValueError):
        parse_color(bad)


def test_map_header_and_background():
    tile_map = parse_map(make_map(CSV))
    assert (tile_map.width, tile_map.height) == (2, 2)
    assert (tile_map.tile_width, tile_map.tile_height) == (16, 16)
    assert tile_map.pixel_width == 32
    assert tile_map.background_color == parse_color("#336699")


def test_csv_layer_gids():
    tile_map = parse_map(make_map(CSV))
    assert tile_map.layers[0].kind == "tile"
    assert tile_map.layers[0].gids == [1, 2, 3, 4]


@pytest.mark.parametrize("compression", [None, "zlib", "gzip"])
def test_base64_layer_round_trip(compression):
    gids = [4, 3, 2, 1]
    raw = struct.pack("<4I", *gids)
    if compression == "zlib":
        raw = zlib.compress(raw)
    elif compression == "gzip":
        raw = gzip.compress(raw)
    attr = f' compression="{compression}"' if compression else ""
    data = f'<data encoding="base64"{attr}>{base64.b64encode(raw).decode()}</data>'
    tile_map = parse_map(make_map(data))
    assert tile_map.layers[0].gids == gids


def test_xml_tile_elements():
    data = '<data><tile gid="2"/><tile/><tile gid="1"/><tile gid="4"/></data>'
    assert parse_map(make_map(data)).layers[0].gids == [2, 0, 1, 4]


def test_wrong_tile_count_rejected():
    with pytest.raises(ValueError):
        parse_map(make_map('<data encoding="csv">1,2,3</data>'))


def test_unknown_encoding_rejected():
    with pytest.raises(ValueError):
        parse_map(make_map('<data encoding="hex">00</data>'))


def test_malformed_xml_rejected():
    with pytest.raises(ValueError):
        parse_map("<map width='1'")


def test_non_map_root_rejected():
    with pytest.raises(ValueError):
        parse_map("<tileset/>")


def test_tile_index_bounds():
    tile_map = parse_map(make_map(CSV))
    assert tile_map.tile_index(0, 0) == 0
    assert tile_map.tile_index(1, 1) == 3
    assert tile_map.tile_index(-1, 0) is None
    assert tile_map.tile_index(2, 0) is None
    assert tile_map.tile_index(0, 2) is None


def test_tile_at_follows_layer_gids():
    tile_map = parse_map(make_map(CSV))
    layer = tile_map.layers[0]
    assert tile_map.tile_at(layer, 1, 0).gid == 2
    assert tile_map.tile_at(layer, 1, 1).id == 3
    assert tile_map.tile_at(layer, 5, 5) is None


def test_tile_at_empty_cell():
    tile_map = parse_map(make_map('<data encoding="csv">0,0,0,1</data>'))
    assert tile_map.tile_at(tile_map.layers[0], 0, 0) is None


def test_tile_at_ignores_flip_bits():
    data = f'<data encoding="csv">{FLIPPED_HORIZONTALLY | 1},0,0,0</data>'
    tile_map = parse_map(make_map(data))
    assert tile_map.tile_at(tile_map.layers[0], 0, 0).gid == 1


def test_tile_source_corners():
    tile_map = parse_map(make_map(CSV))
    corners = {t.id: (t.ul_x, t.ul_y) for t in tile_map.tilesets[0].tiles}
    assert corners[0] == (0, 0)
    assert corners[1] == (16, 0)
    assert corners[2] == (0, 16)
    assert corners[3] == (16, 16)


def test_tile_collision_and_properties():
    tile_map = parse_map(make_map(CSV))
    first = tile_map.tiles[1]
    assert [(o.x, o.y, o.width, o.height) for o in first.collision] == [(0, 0, 16, 16)]
    assert first.properties == {"solid": True}
    assert tile_map.tiles[2].collision == []
    assert first.tileset is tile_map.tilesets[0]


def test_image_loader_receives_resolved_path(tmp_path):
    seen = []

    def loader(path):
        seen.append(path)
        return "image:" + path

    tile_map = parse_map(make_map(CSV), tmp_path, loader)
    expected = str(tmp_path / "blocks.png")
    assert seen == [expected]
    assert tile_map.tilesets[0].image == "image:" + expected


def test_failing_image_loader_leaves_no_image(tmp_path):
    def loader(path):
        raise OSError("missing")

    tile_map = parse_map(make_map(CSV), tmp_path, loader)
    assert tile_map.tilesets[0].image is None
    assert tile_map.tilesets[0].image_source == str(tmp_path / "blocks.png")


def test_object_group_and_shapes():
    extra = """
<objectgroup name="things" color="#ff0000" visible="0">
  <object id="1" x="1" y="2" width="3" height="4"/>
  <object id="2" x="5" y="6"><polygon points="0,0 10,0 10,10"/></object>
  <object id="3" x="0" y="0"><polyline points="0,0 4,4"/></object>
  <object id="4" x="0" y="0" width="8" height="8"><ellipse/></object>
</objectgroup>"""
    tile_map = parse_map(make_map(CSV, extra))
    group = tile_map.layers[1]
    assert group.kind == "objects"
    assert group.visible is False
    assert group.color == (255, 0, 0, 255)
    assert [o.kind for o in group.objects] == ["square", "polygon", "polyline", "ellipse"]
    assert group.objects[1].points == [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0)]
    assert group.objects[2].points == [(0.0, 0.0), (4.0, 4.0)]


def test_group_and_image_layers(tmp_path):
    extra = """
<group name="outer" opacity="0.5">
  <imagelayer name="sky"><image source="sky.png"/></imagelayer>
  <layer name="inner" width="2" height="2"><data encoding="csv">0,0,0,0</data></layer>
</group>"""
    tile_map = parse_map(make_map(CSV, extra), tmp_path)
    group = tile_map.layers[1]
    assert group.kind == "group"
    assert group.opacity == 0.5
    assert [c.kind for c in group.children] == ["image", "tile"]
    assert group.children[0].image_source == str(tmp_path / "sky.png")
    assert group.children[0].image is None


def test_default_object_colour():
    extra = '<objectgroup name="plain"/>'
    assert parse_map(make_map(CSV, extra)).layers[1].color == NO_COLOR


def test_external_tileset_and_load_map(tmp_path):
    sets = tmp_path / "sets"
    sets.mkdir()
    (sets / "blocks.tsx").write_text(
        '<tileset name="ext" tilewidth="16" tileheight="16" tilecount="4" columns="2">'
        '<image source="ext.png" width="32" height="32"/></tileset>'
    )
    map_file = tmp_path / "level.tmx"
    map_file.write_text(make_map(CSV, tileset='<tileset firstgid="1" source="sets/blocks.tsx"/>'))
    seen = []
    tile_map = load_map(map_file, lambda p: seen.append(p) or p)
    assert tile_map.tilesets[0].name == "ext"
    assert seen == [str(sets / "ext.png")]
    assert sorted(tile_map.tiles) == [1, 2, 3, 4]


def test_load_map_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_map(tmp_path / "nope.tmx")