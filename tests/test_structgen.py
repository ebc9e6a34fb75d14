import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import config
from blocks import Block
from recorder import BlockRecorder
from structgen import BUILTIN_STRUCTURES, StructureGenerator
from util import Coordinate, sectorize


def _run(gen, kind, position=(0, 64, 0), options=None, **kw):
    rec = BlockRecorder()
    result = gen.generate(kind, position, options, rec, **kw)
    return result, rec


def test_builtin_ids_are_registered():
    gen = StructureGenerator(seed=1)
    ids = gen.structure_ids()
    for name, _ in BUILTIN_STRUCTURES:
        assert name in ids
    assert 'desert_pyramid' in ids and 'ancient_city' in ids


def test_unknown_id_returns_none_without_writes(capsys):
    gen = StructureGenerator(seed=1)
    result, rec = _run(gen, 'castle')
    assert result is None
    assert len(rec.writes) == 0
    assert 'unknown structure' in capsys.readouterr().out


def test_malformed_position_and_missing_writer():
    gen = StructureGenerator(seed=1)
    rec = BlockRecorder()
    assert gen.generate('dungeon', {'x': 0, 'y': 64}, {}, rec) is None
    assert gen.generate('dungeon', 'here', {}, rec) is None
    assert gen.generate('dungeon', (0, 64, 0), {}, None) is None
    assert len(rec.writes) == 0


def test_non_dict_options_fall_back_to_defaults():
    gen = StructureGenerator(seed=1)
    a, rec_a = _run(gen, 'dungeon', options='nonsense')
    b, rec_b = _run(gen, 'dungeon', options={})
    assert a is not None
    assert rec_a.writes == rec_b.writes


def test_register_first_wins():
    gen = StructureGenerator(seed=1)

    def marker(ctx, position, options):
        ctx.set(position, Block('beacon'))
        return ctx.result()

    assert gen.register('marker', marker)
    assert not gen.register('marker', lambda ctx, position, options: None)
    assert not gen.register('dungeon', marker)
    result, rec = _run(gen, 'marker', (3, 70, 4))
    assert result.type == 'marker'
    assert rec.find('beacon') == [Coordinate(3, 70, 4)]
    assert result.size == {'width': 1, 'height': 1, 'depth': 1}


def test_same_inputs_same_writes():
    for kind in ('dungeon', 'mineshaft', 'village', 'ruined_portal'):
        _, rec_a = _run(StructureGenerator(seed=77), kind, (10, 40, -20))
        _, rec_b = _run(StructureGenerator(seed=77), kind, (10, 40, -20))
        assert rec_a.writes == rec_b.writes, kind


def test_call_order_does_not_change_output():
    gen = StructureGenerator(seed=5)
    _run(gen, 'dungeon', (100, 30, 100))
    _run(gen, 'mineshaft', (-50, 30, 0))
    _, after = _run(gen, 'village', (0, 64, 0))
    _, fresh = _run(StructureGenerator(seed=5), 'village', (0, 64, 0))
    assert after.writes == fresh.writes


def test_seed_option_overrides_dispatcher_seed():
    _, with_option = _run(StructureGenerator(seed=1), 'mineshaft', (0, 40, 0), {'seed': 99})
    _, with_ctor = _run(StructureGenerator(seed=99), 'mineshaft', (0, 40, 0))
    _, other = _run(StructureGenerator(seed=1), 'mineshaft', (0, 40, 0))
    assert with_option.writes == with_ctor.writes
    assert with_option.writes != other.writes


def test_default_seed_comes_from_config():
    assert StructureGenerator().seed == config.DEFAULT_SEED


def test_y_is_clamped_into_world():
    gen = StructureGenerator(seed=1)
    result, _ = _run(gen, 'desert_well', (0, -40, 0))
    assert result.position.y == config.MIN_Y
    result, _ = _run(gen, 'boulder_pile', (0, 10000, 0))
    assert result.position.y == config.MAX_Y


def test_spawns_without_a_spawner_are_descriptive_records():
    gen = StructureGenerator(seed=3)
    result, _ = _run(gen, 'witch_hut')
    kinds = sorted(s.kind for s in result.spawns)
    assert kinds == ['black_cat', 'witch']
    assert all(not s.live for s in result.spawns)
    data = result.to_dict()
    assert set(data['mobSpawns']) == {'witch', 'black_cat'}
    assert data['spawns'][0]['type'] in ('witch', 'black_cat')
    assert set(data['spawns'][0]['position']) == {'x', 'y', 'z'}


def test_live_spawner_receives_requests():
    calls = []

    def spawner(kind, position, options):
        calls.append((kind, tuple(position), options))
        return len(calls)

    gen = StructureGenerator(seed=3, spawner=spawner)
    result, _ = _run(gen, 'witch_hut')
    assert [c[0] for c in calls] == [s.kind for s in result.spawns]
    assert all(s.live for s in result.spawns)
    assert calls[0][2]['persistent'] is True

    # a per-call spawner wins over the installed one
    other = []
    gen.set_entity_spawner(None)
    result, _ = _run(gen, 'witch_hut', spawner=lambda k, p, o: other.append(k) or k)
    assert sorted(other) == ['black_cat', 'witch']


def test_result_dict_shape():
    gen = StructureGenerator(seed=8)
    result, _ = _run(gen, 'dungeon', (0, 30, 0), {'type': 'skeleton'})
    data = result.to_dict()
    for key in ('type', 'position', 'size', 'rooms', 'corridors', 'loot', 'entrance'):
        assert key in data
    assert data['type'] == 'dungeon'
    assert data['position'] == {'x': 0, 'y': 30, 'z': 0}
    assert data['rooms'][0]['kind'] == 'dungeon'
    assert data['mob'] == 'skeleton'


def test_sectors_cover_the_bounds():
    gen = StructureGenerator(seed=8)
    result, rec = _run(gen, 'mineshaft', (30, 40, -5))
    sectors = set(result.sectors())
    for c in rec.blocks:
        assert sectorize(c) in sectors
    assert all(s[1] == 0 for s in sectors)


def test_custom_styles_override_palettes():
    from palettes import default_styles
    table = default_styles()['dungeon'].with_overrides(wall='obsidian', floor='obsidian')
    gen = StructureGenerator(seed=2, styles={'dungeon': table})
    _, rec = _run(gen, 'dungeon', (0, 30, 0))
    types = rec.types()
    assert types['obsidian'] > 0
    assert types['cobblestone'] == 0 and types['mossy_cobblestone'] == 0


def test_non_finite_seed_option_falls_back_to_dispatcher_seed():
    _, plain = _run(StructureGenerator(seed=1), 'dungeon', (0, 30, 0))
    for bad in (float('nan'), float('inf'), float('-inf')):
        result, rec = _run(StructureGenerator(seed=1), 'dungeon', (0, 30, 0), {'seed': bad})
        assert result is not None
        assert rec.writes == plain.writes


def test_palette_chest_and_spawner_slots_are_used():
    from palettes import default_styles
    table = default_styles()['dungeon'].with_overrides(chest='trapped_chest', spawner='trial_spawner')
    gen = StructureGenerator(seed=2, styles={'dungeon': table})
    result, rec = _run(gen, 'dungeon', (0, 30, 0), {'type': 'spider'})
    chests = rec.find('trapped_chest')
    assert chests and rec.types()['chest'] == 0
    assert all(rec.get(c).metadata['loot'] == 'dungeon' for c in chests)
    spawners = rec.find('trial_spawner')
    assert len(spawners) == 1 and rec.types()['mob_spawner'] == 0
    assert rec.get(spawners[0]).metadata['entityType'] == 'spider'
    assert all(c in result.loot for c in chests)
