import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from blocks import AIR, Block, is_passable, is_solid, type_of
from palettes import default_styles
from recorder import BlockRecorder
from rng import SeededRandom
from shapes import (BuildContext, carve_box, carve_cylinder, carve_doorway, carve_staircase,
                    decay_chance, disc_offsets, extrude_corridor, find_floor, place_chest,
                    place_spawner)
from util import Coordinate, coerce_position, rotate_offset


def _ctx(kind='test', seed=1, style='dungeon'):
    rec = BlockRecorder()
    styles = default_styles()
    ctx = BuildContext(kind, (0, 10, 0), rec, SeededRandom(seed), palette=styles[style],
                       seed=seed, styles=styles)
    return ctx, rec


def test_block_is_immutable_and_compares_by_value():
    a = Block('chest', {'loot': 'dungeon', 'items': [{'type': 'bone'}]})
    b = Block('chest', loot='dungeon', items=[{'type': 'bone'}])
    assert a == b and hash(a) == hash(b)
    with pytest.raises(AttributeError):
        a.type = 'stone'
    with pytest.raises(TypeError):
        a.metadata['loot'] = 'other'
    c = a.with_metadata(facing='west')
    assert c.metadata['facing'] == 'west'
    assert 'facing' not in a.metadata
    assert Block.from_dict(a.to_dict()) == a


def test_passability():
    assert is_passable(AIR)
    assert is_passable(Block('rail'))
    assert not is_passable(Block('stone'))
    assert not is_solid(Block('lava'))
    assert type_of(None) == 'air'


def test_carve_box_shell_and_interior():
    ctx, rec = _ctx()
    carve_box(ctx, (0, 0, 0), 5, 4, 5, Block('stone'), floor=Block('dirt'))
    assert len(rec) == 5 * 4 * 5
    assert type_of(rec.get((2, 0, 2))) == 'dirt'
    assert type_of(rec.get((2, 1, 2))) == 'air'
    assert type_of(rec.get((0, 1, 2))) == 'stone'
    assert type_of(rec.get((2, 3, 2))) == 'stone'


def test_carve_cylinder_ring_membership():
    ctx, rec = _ctx()
    carve_cylinder(ctx, (0, 0, 0), 4, 3, Block('stone'))
    assert type_of(rec.get((4, 1, 0))) == 'stone'
    assert type_of(rec.get((3, 1, 0))) == 'air'
    assert rec.get((4, 1, 4)) is None


def test_disc_offsets_cover_the_radius_in_order():
    cells = disc_offsets(2)
    assert len(cells) == 13
    assert cells[0] == (-2, 0, 2.0)
    assert all(d <= 2 for _, _, d in cells)
    assert cells == sorted(cells, key=lambda c: (c[0], c[1]))
    assert disc_offsets(0) == [(0, 0, 0.0)]


def test_doorway_survives_later_solid_writes():
    ctx, rec = _ctx()
    door = carve_doorway(ctx, (3, 1, 0), axis='x')
    assert door in ctx.doorways
    assert not ctx.put((3, 1, 0), Block('stone'))
    assert not ctx.put((4, 2, 0), Block('stone'))
    assert ctx.put((3, 1, 0), Block('rail'))
    assert ctx.set((3, 1, 0), Block('stone'), force=True)
    assert ctx.skipped == 2


def test_extrude_corridor_protects_centre_and_records():
    ctx, rec = _ctx()
    corr = extrude_corridor(ctx, (0, 5, 0), (10, 5, 0), width=3)
    assert corr in ctx.corridors
    assert corr.length == 11
    for x in range(11):
        assert type_of(rec.get((x, 5, 0))) == 'air'
        assert ctx.is_protected((x, 5, 0))
        assert type_of(rec.get((x, 5, 2))) != 'air'
    assert not ctx.put((5, 5, 0), Block('stone'))


def test_extrude_corridor_snaps_diagonal_to_dominant_axis():
    ctx, rec = _ctx()
    corr = extrude_corridor(ctx, (0, 5, 0), (8, 5, 3), width=1, light=None)
    assert corr.end == Coordinate(8, 5, 0)


def test_reservations_reject_overlap():
    ctx, _ = _ctx()
    assert ctx.reserve('a', 0, 0, 4, 4)
    assert not ctx.reserve('b', 5, 0, 8, 4)
    assert ctx.reserve('b', 5, 0, 8, 4, ignore=('a',))
    assert ctx.reserve('c', 20, 20, 22, 22)
    assert ctx.is_reserved(21, 21)
    assert not ctx.is_reserved(30, 30)


def test_decay_chance_is_monotone_and_clamped():
    assert decay_chance(0.0, 1.0, 1.0) == 0.0
    assert decay_chance(1.0, 1.0, 1.0) == 1.0
    assert decay_chance(0.2) < decay_chance(0.2, edge=1.0) < decay_chance(0.2, edge=1.0, height=1.0)


def test_keep_is_positional():
    ctx_a, _ = _ctx(seed=5)
    ctx_b, _ = _ctx(seed=5)
    cells = [(x, 0, z) for x in range(10) for z in range(10)]
    low = [ctx_a.keep(c, 0.2) for c in cells]
    high = [ctx_b.keep(c, 0.6) for c in cells]
    assert all(lo or not hi for lo, hi in zip(low, high))
    assert sum(low) > sum(high)


def test_staircase_descends_and_clears_headroom():
    ctx, rec = _ctx(style='stronghold')
    bottom = carve_staircase(ctx, (0, 10, 0), 4, 'east', 'stairs', 'wall')
    assert bottom == Coordinate(5, 6, 0)
    for i in range(1, 5):
        assert type_of(rec.get((i, 10 - i - 1, 0))) == 'stone_brick_stairs'
        assert type_of(rec.get((i, 10 - i, 0))) == 'air'


def test_find_floor_uses_reader():
    rec = BlockRecorder()
    for y in range(0, 20):
        rec((0, y, 0), Block('stone'))
    assert find_floor(rec.get, (0, 30, 0)) == 20
    assert find_floor(None, (0, 30, 0)) == 30


def test_place_chest_records_only_written_chests():
    ctx, rec = _ctx()
    carve_doorway(ctx, (0, 1, 0))
    assert place_chest(ctx, (0, 1, 0), loot='dungeon') is None
    chest = place_chest(ctx, (2, 1, 0), loot='dungeon', facing='west')
    assert chest.metadata['structureType'] == 'test'
    assert ctx.loot == [Coordinate(2, 1, 0)]


def test_coerce_position_rejects_malformed():
    assert coerce_position({'x': 1, 'y': 2.4, 'z': 3}) == Coordinate(1, 2, 3)
    assert coerce_position((1, 2, 3)) == Coordinate(1, 2, 3)
    assert coerce_position({'x': 1, 'y': 2}) is None
    assert coerce_position((1, 2)) is None
    assert coerce_position((1, float('nan'), 3)) is None
    assert coerce_position((True, 2, 3)) is None
    assert coerce_position("0,0,0") is None


def test_rotate_offset_turns_south_authored_offsets():
    assert rotate_offset(0, 3, 'south') == (0, 3)
    assert rotate_offset(0, 3, 'north') == (0, -3)
    assert rotate_offset(0, 3, 'east') == (3, 0)
    assert rotate_offset(0, 3, 'west') == (-3, 0)


def test_chest_and_spawner_follow_the_palette():
    ctx, rec = _ctx()
    ctx.palette = ctx.palette.with_overrides(chest='barrel', spawner='trial_spawner')
    chest = place_chest(ctx, (1, 1, 1), loot='dungeon')
    assert chest.type == 'barrel'
    assert place_spawner(ctx, (2, 1, 1), 'zombie')
    assert type_of(rec.get((2, 1, 1))) == 'trial_spawner'
    assert rec.get((2, 1, 1)).metadata['entityType'] == 'zombie'
    assert ctx.spawners == [Coordinate(2, 1, 1)]

    # an explicit type wins, and a palette without the slot falls back
    assert place_chest(ctx, (3, 1, 1), block_type='chest_minecart').type == 'chest_minecart'
    ctx.palette = None
    assert place_chest(ctx, (4, 1, 1)).type == 'chest'
