import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import config
from blocks import type_of
from features.village import BUILDINGS
from recorder import BlockRecorder
from structgen import StructureGenerator
from util import facing_toward


def _generate(kind, position, options=None, seed=12345, spawner=None):
    gen = StructureGenerator(seed=seed)
    rec = BlockRecorder()
    result = gen.generate(kind, position, options or {}, rec, spawner=spawner)
    return result, rec


def _unreachable_rooms(result, rec):
    mask = rec.reachable(result.entrance, [c for room in result.rooms for c in room.interior()])
    out = []
    for room in result.rooms:
        if not any(mask[c] for c in room.interior()):
            out.append(room)
    return out


@pytest.mark.parametrize("kind, position", [
    ('dungeon', (0, 30, 0)),
    ('mineshaft', (0, 40, 0)),
    ('stronghold', (0, 40, 0)),
    ('ancient_city', (0, 25, 0)),
    ('jungle_temple', (0, 64, 0)),
])
@pytest.mark.parametrize("seed", [1, 42, 12345])
def test_every_room_is_reachable_from_the_entrance(kind, position, seed):
    result, rec = _generate(kind, position, {'seed': seed})
    assert result.entrance is not None
    assert type_of(rec.get(result.entrance)) in ('air', 'rail')
    assert _unreachable_rooms(result, rec) == []


def test_corridors_end_on_rooms_or_doorways():
    for kind, position in (('mineshaft', (0, 40, 0)), ('stronghold', (0, 40, 0)),
                           ('ancient_city', (0, 25, 0))):
        result, _ = _generate(kind, position, {'seed': 9})
        doorways = set(result.doorways)
        for corr in result.corridors:
            for end in (corr.start, corr.end):
                on_room = any(r.on_boundary(end) for r in result.rooms)
                assert on_room or end in doorways, (kind, corr)


def test_mineshaft_scenario():
    result, rec = _generate('mineshaft', (0, 40, 0), {'seed': 42})
    main = result.corridors[0]
    span = abs(main.end.x - main.start.x) + abs(main.end.z - main.start.z)
    assert span == config.MINESHAFT_LENGTH[config.DEFAULT_SIZE]
    assert main.start.x == main.end.x or main.start.z == main.end.z
    for c in main.cells():
        assert type_of(rec.get(c)) in ('rail', 'chest_minecart')
    carts = rec.find('chest_minecart')
    assert len(carts) == 1
    assert carts[0] in [corr.end for corr in result.corridors]
    assert rec.get(carts[0]).metadata['loot'] == 'mineshaft'
    assert 2 <= result.extra['branches'] <= 4
    assert len(result.corridors) == 1 + result.extra['branches']
    assert rec.types()['oak_fence'] > 0


def test_mineshaft_branches_are_clamped_to_the_main_length():
    result, _ = _generate('mineshaft', (0, 40, 0), {'seed': 3, 'length': 20})
    main = result.corridors[0]
    for corr in result.corridors[1:]:
        assert corr.length - 1 <= 2 + main.length


def test_stronghold_rooms_and_portal():
    result, rec = _generate('stronghold', (0, 40, 0), {'seed': 5})
    kinds = [r.kind for r in result.rooms]
    assert kinds == ['entrance', 'stairs', 'library', 'portal_room']
    assert len(result.corridors) == 3
    assert len(rec.find('end_portal_frame')) == 12
    assert rec.types()['bookshelf'] > 0
    assert rec.types()['lectern'] == 1
    spawner = rec.find('mob_spawner')
    assert len(spawner) == 1
    assert rec.get(spawner[0]).metadata['entityType'] == 'silverfish'
    assert type_of(rec.get(spawner[0].offset(dy=1))) == 'lava'
    assert 0.15 <= result.extra['cracked'] <= 0.25
    assert 0.15 <= result.extra['mossy'] <= 0.25
    stairs = result.rooms_of_kind('stairs')[0]
    steps = [c for c in rec.find('stone_brick_stairs') if stairs.contains(c)]
    assert len(steps) == 5 * 3


def test_village_scenario():
    spawned = []

    def spawner(kind, position, options):
        spawned.append((kind, options))
        return {'id': len(spawned)}

    result, rec = _generate('village', {'x': 0, 'y': 64, 'z': 0},
                            {'seed': 7, 'biome': 'plains', 'size': 5}, spawner=spawner)
    centres = [r for r in result.rooms if r.tags.get('center')]
    buildings = [r for r in result.rooms if not r.tags.get('center')]
    assert len(centres) == 1
    assert centres[0].kind in ('well', 'meeting_point')
    assert len(buildings) == 4
    beds = sum(len(r.tags['beds']) for r in buildings)
    villagers = result.spawn_count('villager')
    assert villagers <= beds
    assert len(spawned) == villagers
    assert result.extra['buildings'] == 5
    for kind, options in spawned:
        assert kind == 'villager'
        assert options['villageId'] == result.extra['villageId']
        assert 1 <= options['level'] <= 3
        assert set(options['bedPosition']) == {'x', 'y', 'z'}


def test_village_buildings_face_the_centre_on_the_first_ring():
    result, rec = _generate('village', (0, 64, 0), {'seed': 7, 'size': 5})
    for room in result.rooms:
        if room.tags.get('center'):
            continue
        cx = room.origin.x + room.width // 2
        cz = room.origin.z + room.depth // 2
        dist = (cx * cx + cz * cz) ** 0.5
        assert 14 <= dist <= 18
        assert room.tags['facing'] == facing_toward((cx, 64, cz), (0, 64, 0))
        assert room.kind in BUILDINGS
        assert room.tags['professions'] == list(BUILDINGS[room.kind][5])
    assert len(result.roads) >= 4
    assert all(r.width == 3 for r in result.roads)
    assert rec.types()['gravel'] > 0


def test_village_children_need_two_beds():
    for seed in range(10):
        result, _ = _generate('village', (0, 64, 0), {'seed': seed, 'size': 8})
        for spawn in result.spawns:
            if spawn.options['isChild']:
                assert spawn.options['level'] == 1
        for room in result.rooms:
            if room.tags.get('center'):
                continue
            inside = [s for s in result.spawns if room.contains(s.position)]
            assert len(inside) <= len(room.tags['beds'])


@pytest.mark.parametrize("size, expected", [(2, 2), (0, 2), ('small', 4), (3.7, 3)])
def test_village_size_option(size, expected):
    result, _ = _generate('village', (0, 64, 0), {'seed': 11, 'size': size})
    assert len(result.rooms) == expected


def test_village_biome_styles():
    _, rec = _generate('village', (0, 64, 0), {'seed': 7, 'biome': 'desert', 'size': 5})
    types = rec.types()
    assert types['sand'] > 0
    assert types['oak_planks'] == 0
    result, _ = _generate('village', (0, 64, 0), {'seed': 7, 'biome': 'swamp', 'size': 3})
    assert result.extra['biome'] == 'plains'


def test_ancient_city_scenario():
    result, rec = _generate('ancient_city', {'x': 0, 'y': 25, 'z': 0}, {'seed': 12345})
    treasure = result.rooms_of_kind('treasure_room')
    assert 2 <= len(treasure) <= 3
    for room in treasure:
        items = room.loot['items']
        shards = [i for i in items if i['type'] == 'echo_shard']
        assert len(shards) == 1 and 1 <= shards[0]['count'] <= 3
        assert any(i['type'] == 'music_disc_otherside' for i in items)
        assert any(i.get('enchantment') == 'swift_sneak' for i in items)
        inside = [c for c, b in rec.blocks.items() if room.contains(c)]
        inside_types = [type_of(rec.get(c)) for c in inside]
        assert 'sculk_sensor' in inside_types
        assert 'sculk_shrieker' in inside_types
        assert 'chest' in inside_types
        cx = room.origin.x + room.width // 2
        cz = room.origin.z + room.depth // 2
        assert min(abs(cx), abs(cz)) >= 8


def test_ancient_city_layout():
    result, rec = _generate('ancient_city', (0, 60, 0), {'seed': 2})
    assert result.bounds[0].y == config.ANCIENT_CITY_MAX_Y - 1
    assert result.size['width'] == config.ANCIENT_CITY_PLATFORM
    assert result.size['depth'] == config.ANCIENT_CITY_PLATFORM
    assert len(result.rooms_of_kind('central_chamber')) == 1
    assert len(result.rooms_of_kind('room')) >= 4
    assert len(result.corridors) == 4 + len(result.rooms_of_kind('treasure_room'))
    types = rec.types()
    assert types['sculk'] > 0
    assert types['sculk_catalyst'] >= 1
    assert types['reinforced_deepslate'] > 0
    shrieker = rec.get(rec.find('sculk_shrieker')[0])
    assert shrieker.metadata['can_summon'] is True
    assert result.spawn_count('warden') == 0

    result, _ = _generate('ancient_city', (0, 20, 0), {'seed': 2, 'spawn_warden': True})
    assert result.spawn_count('warden') == 1
