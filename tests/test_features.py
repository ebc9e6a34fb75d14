import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import config
from blocks import Block, type_of
from recorder import BlockRecorder
from structgen import BUILTIN_STRUCTURES, StructureGenerator


def _generate(kind, position=(0, 64, 0), options=None, seed=12345, reader=None):
    gen = StructureGenerator(seed=seed)
    rec = BlockRecorder()
    result = gen.generate(kind, position, options or {}, rec, reader=reader)
    return result, rec


@pytest.mark.parametrize("kind", [name for name, _ in BUILTIN_STRUCTURES])
def test_every_write_is_inside_the_reported_bounds(kind):
    result, rec = _generate(kind, (8, 40, -8))
    assert result is not None
    assert result.type == kind
    assert len(rec.writes) > 0
    assert tuple(result.bounds) == rec.bounds()
    for c, _ in rec.writes:
        assert result.contains(c)


def _non_air(kind, degradation, **options):
    opts = dict(options)
    opts['degradation'] = degradation
    _, rec = _generate(kind, (0, 50, 0), opts, seed=4242)
    return rec.count_non_air()


@pytest.mark.parametrize("kind, options", [
    ('small_ruin', {}),
    ('ocean_ruins', {'style': 'warm'}),
    ('ocean_ruins', {'style': 'cold'}),
    ('ruined_portal', {'tilted': False, 'buried': True, 'has_chest': False}),
    ('ruined_portal', {'tilted': True, 'buried': False, 'has_chest': True}),
    ('stronghold', {}),
])
def test_more_degradation_never_adds_blocks(kind, options):
    counts = [_non_air(kind, d, **options) for d in (0.0, 0.25, 0.5, 0.75, 1.0)]
    assert counts == sorted(counts, reverse=True)
    assert counts[0] > counts[-1]


def test_degradation_aliases():
    a = _non_air('small_ruin', 0.8)
    _, rec = _generate('small_ruin', (0, 50, 0), {'ruinLevel': 0.8}, seed=4242)
    assert rec.count_non_air() == a


def test_desert_well():
    result, rec = _generate('desert_well', (0, 64, 0))
    assert type_of(rec.get((0, 64, 0))) == 'water'
    assert rec.types()['sandstone_wall'] == 8
    assert result.size == {'width': 5, 'height': 8, 'depth': 5}


def test_boulder_pile_material_and_count():
    result, rec = _generate('boulder_pile', (0, 64, 0), {'count': 3, 'material': 'granite'})
    assert set(rec.types()) == {'granite'}
    assert result.extra['count'] == 3
    assert min(c.y for c, _ in rec.writes) >= 64


def test_fallen_tree_variant():
    _, rec = _generate('fallen_tree', (0, 64, 0), {'variant': 'birch', 'length': 6})
    logs = rec.find('birch_log')
    assert len(logs) >= 7
    assert rec.types()['oak_log'] == 0


def test_witch_hut_spawns():
    result, _ = _generate('witch_hut')
    assert result.spawn_count('witch') == 1
    assert result.spawn_count('black_cat') == 1
    assert len(result.rooms_of_kind('hut')) == 1


def test_dungeon_spawner_and_chests():
    result, rec = _generate('dungeon', (0, 30, 0), {'type': 'skeleton'})
    spawners = rec.find('mob_spawner')
    assert len(spawners) == 1
    assert rec.get(spawners[0]).metadata['entityType'] == 'skeleton'
    chests = rec.find('chest')
    assert 1 <= len(chests) <= 2
    assert all(rec.get(c).metadata['loot'] == 'dungeon' for c in chests)
    assert sorted(result.loot) == sorted(chests)

    result, rec = _generate('dungeon', (0, 30, 0), {'type': 'ender_dragon'})
    spawner = rec.get(rec.find('mob_spawner')[0])
    assert spawner.metadata['entityType'] == 'zombie'


def test_ocean_ruins_chest_is_waterlogged():
    found = 0
    for seed in range(20):
        _, rec = _generate('ocean_ruins', (0, 40, 0), {'degradation': 0.0}, seed=seed)
        for c in rec.find('chest'):
            found += 1
            meta = rec.get(c).metadata
            assert meta['waterlogged'] is True
            assert meta['loot'] == 'ocean_ruins'
    assert found > 0


def test_desert_temple_trap():
    for kind in ('desert_temple', 'desert_pyramid'):
        result, rec = _generate(kind, (0, 64, 0))
        types = rec.types()
        assert types['tnt'] == 9
        assert types['stone_pressure_plate'] == 1
        chests = rec.find('chest')
        assert len(chests) == 4
        assert all(rec.get(c).metadata['loot'] == 'desert_pyramid' for c in chests)
        plate = rec.find('stone_pressure_plate')[0]
        assert all(type_of(rec.get((plate.x + dx, plate.y - 2, plate.z + dz))) == 'tnt'
                   for dx in (-1, 0, 1) for dz in (-1, 0, 1))
        assert len(result.rooms_of_kind('treasure_room')) == 1


def test_jungle_temple_traps():
    result, rec = _generate('jungle_temple', (0, 64, 0))
    types = rec.types()
    assert types['tripwire_hook'] == 2
    assert types['tripwire'] > 0
    assert types['lever'] == 3
    assert types['sticky_piston'] == 1
    assert types['chest'] == 2
    dispenser = rec.get(rec.find('dispenser')[0])
    items = dispenser.metadata['items']
    assert items[0]['type'] == 'arrow' and items[0]['count'] >= 2
    assert [r.kind for r in result.rooms] == ['hall', 'trap_hall']


def test_monument_footprint_and_guardians():
    result, rec = _generate('ocean_monument', (0, 64, 0))
    assert result.size == {'width': 21, 'height': 18, 'depth': 21}
    assert result.bounds[1].y < config.WATER_LEVEL
    assert result.spawn_count('elder_guardian') == 3
    assert result.spawn_count('guardian') == config.MONUMENT_GUARDIANS
    chambers = result.rooms_of_kind('guardian_chamber')
    assert len(chambers) == 3
    assert len(set(r.origin.y for r in chambers)) == 3
    for spawn in result.spawns:
        if spawn.kind == 'guardian':
            assert not any(r.contains(spawn.position) for r in chambers)


def test_monument_settles_on_reader_floor():
    floor = BlockRecorder()
    for x in range(-12, 13):
        for z in range(-12, 13):
            floor((x, 30, z), Block('sand'))
    result, _ = _generate('ocean_monument', (0, 40, 0), reader=floor.get)
    assert result.bounds[0].y == 31


def test_ruined_portal_frame_and_dimension_palettes():
    result, rec = _generate('ruined_portal', (0, 64, 0),
                            {'degradation': 0.0, 'tilted': False, 'buried': False,
                             'has_chest': False, 'dimension': 'overworld'})
    types = rec.types()
    assert types['obsidian'] + types['crying_obsidian'] == 18
    assert types['netherrack'] > 0
    assert types['blackstone'] == 0
    assert result.extra['dimension'] == 'overworld'
    assert not result.loot

    _, rec = _generate('ruined_portal', (0, 64, 0),
                       {'degradation': 0.0, 'dimension': 'nether', 'has_chest': True})
    types = rec.types()
    assert types['blackstone'] > 0
    assert types['magma_block'] >= 1
    assert types['chest'] == 1


def test_ruined_portal_buried_adds_overburden():
    base = {'degradation': 0.0, 'tilted': False, 'has_chest': False}
    _, open_rec = _generate('ruined_portal', (0, 64, 0), dict(base, buried=False))
    _, buried_rec = _generate('ruined_portal', (0, 64, 0), dict(base, buried=True))
    assert buried_rec.count_non_air() > open_rec.count_non_air()
    assert buried_rec.types()['dirt'] > 0
