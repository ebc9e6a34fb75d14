"""
Ancient city: a deepslate platform around a circular altar chamber.

Four corridors leave the chamber through doorways in its ring and run out
to a room at the far end. One or two side rooms hang off each corridor
wall. Two or three treasure rooms sit at a fixed radius, on bearings kept
away from the corridors, each joined to the nearest corridor by a spur.
Sculk, columns and braziers are scattered over the open platform last,
and only on cells no room or corridor has claimed.
"""
import math

import config
from results import Room
from shapes import (carve_box, carve_cylinder, carve_doorway, disc_offsets, extrude_corridor,
                    fill_box, place_chest)
from util import Coordinate, HORIZONTAL, DIRECTIONS, option_bool

CORRIDOR_WIDTH = 5
CORRIDOR_HEIGHT = 4
END_ROOM = 7
TREASURE_ROOM = 7


class _Axis(object):
    """One cardinal corridor: maps (along, lateral) to world x/z."""

    def __init__(self, name, center):
        self.name = name
        ex, _, ez = DIRECTIONS[name]
        self.e = (ex, ez)
        self.p = (-ez, ex)
        self.center = center

    def at(self, along, lateral, y):
        ex, ez = self.e
        px, pz = self.p
        return Coordinate(self.center.x + ex * along + px * lateral, y,
                          self.center.z + ez * along + pz * lateral)

    def rect(self, a0, l0, a1, l1):
        c0 = self.at(a0, l0, 0)
        c1 = self.at(a1, l1, 0)
        return (min(c0.x, c1.x), min(c0.z, c1.z), max(c0.x, c1.x), max(c0.z, c1.z))


def _room_from_rect(kind, rect, y, height, **kw):
    x0, z0, x1, z1 = rect
    return Room(kind, (x0, y, z0), (x1 - x0 + 1, height, z1 - z0 + 1), **kw)


def _treasure_angles(ctx, count):
    gap = getattr(config, 'ANCIENT_CITY_TREASURE_AXIS_GAP', math.radians(15))
    quarter = math.pi / 2
    base = ctx.rng.next_float(0.0, 2 * math.pi)
    out = []
    for i in range(count):
        a = (base + i * 2 * math.pi / count) % (2 * math.pi)
        q = int(a // quarter)
        phi = min(max(a - q * quarter, gap), quarter - gap)
        out.append(q * quarter + phi)
    return out


def _treasure_items(ctx):
    return [
        {'type': 'echo_shard', 'count': ctx.rng.next_int(1, 3)},
        {'type': 'music_disc_otherside', 'count': ctx.rng.next_int(0, 1)},
        {'type': 'enchanted_book', 'count': 1, 'enchantment': 'swift_sneak'},
    ]


def _sculk_patch(ctx, center, radius, floor_y):
    for dx, dz, d in disc_offsets(radius):
        soft = d > radius * 0.6
        roll = ctx.rng.next()
        if soft and roll > 1.0 - (d - radius * 0.6) / (radius * 0.4):
            continue
        x, z = center[0] + dx, center[1] + dz
        ctx.put((x, floor_y, z), 'sculk')
        if not ctx.is_reserved(x, z) and ctx.rng.chance(0.15):
            ctx.put((x, floor_y + 1, z), 'vein')


def generate_ancient_city(ctx, position, options):
    ctx.palette = ctx.style('ancient_city')
    ax, y, az = position
    y = max(getattr(config, 'MIN_Y', 1) + 1, min(y, getattr(config, 'ANCIENT_CITY_MAX_Y', 25)))
    center = Coordinate(ax, y, az)
    walk = y + 1
    half = getattr(config, 'ANCIENT_CITY_PLATFORM', 108) // 2
    radius = getattr(config, 'ANCIENT_CITY_CHAMBER_RADIUS', 15)
    length = getattr(config, 'ANCIENT_CITY_CORRIDOR_LENGTH', 30)
    t_radius = getattr(config, 'ANCIENT_CITY_TREASURE_RADIUS', 40)
    corridor_end = radius + length
    axes = [_Axis(name, center) for name in HORIZONTAL]
    hw = CORRIDOR_WIDTH // 2

    # plan: chamber, corridors and their end rooms, treasure rooms and spurs
    ctx.reserve('chamber', ax - radius, az - radius, ax + radius, az + radius, padding=0)
    end_rooms = []
    for axis in axes:
        ctx.reserve('main:' + axis.name, *axis.rect(radius, -hw - 1, corridor_end - 1, hw + 1),
                    padding=0, ignore=('chamber',))
        rect = axis.rect(corridor_end, -END_ROOM // 2, corridor_end + END_ROOM - 1, END_ROOM // 2)
        ctx.reserve('end:' + axis.name, *rect, padding=0)
        end_rooms.append(_room_from_rect('room', rect, y, CORRIDOR_HEIGHT + 2,
                                         doorways=[axis.at(corridor_end, 0, walk)]))

    treasures = []
    for angle in _treasure_angles(ctx, ctx.rng.next_int(2, 3)):
        tx = ax + int(round(math.cos(angle) * t_radius))
        tz = az + int(round(math.sin(angle) * t_radius))
        # nearest corridor and which side of it the room is on
        best = None
        for axis in axes:
            along = (tx - ax) * axis.e[0] + (tz - az) * axis.e[1]
            across = (tx - ax) * axis.p[0] + (tz - az) * axis.p[1]
            if along > 0 and (best is None or abs(across) < abs(best[2])):
                best = (axis, along, across)
        axis, along, across = best
        side = 1 if across > 0 else -1
        hr = TREASURE_ROOM // 2
        rect = axis.rect(along - hr, across - hr, along + hr, across + hr)
        if not ctx.reserve('treasure', *rect, padding=1):
            continue
        spur_start = axis.at(along, side * (hw + 1), walk)
        spur_end = axis.at(along, across - side * hr, walk)
        ctx.reserve('spur', *axis.rect(along - 2, side * (hw + 1), along + 2, across - side * (hr + 1)),
                    padding=0, ignore=('main:' + axis.name, 'treasure'))
        room = _room_from_rect('treasure_room', rect, y, 5)
        treasures.append((room, axis, side, spur_start, spur_end))

    side_rooms = []
    for axis in axes:
        for _ in range(ctx.rng.next_int(1, 2)):
            w = ctx.rng.next_int(5, 8) + 2
            h = ctx.rng.next_int(4, 5) + 1
            d = ctx.rng.next_int(5, 8) + 2
            for _attempt in range(10):
                along = ctx.rng.next_int(radius + w // 2 + 3, corridor_end - w // 2 - 3)
                side = ctx.rng.choice((-1, 1))
                l0 = side * (hw + 1)
                l1 = side * (hw + d)
                rect = axis.rect(along - w // 2, l0, along - w // 2 + w - 1, l1)
                if ctx.reserve('side', *rect, padding=0, ignore=('main:' + axis.name,)):
                    door = axis.at(along, l0, walk)
                    side_rooms.append((_room_from_rect('room', rect, y, h), axis, door))
                    break

    # platform
    for x in range(ax - half, ax + half):
        for z in range(az - half, az + half):
            ctx.put((x, y - 1, z), 'base')
            ctx.put((x, y, z), 'floor')

    # rooms
    carve_cylinder(ctx, center, radius, 12, 'wall', floor='floor', ceiling='base')
    for room in end_rooms + [r for r, _, _ in side_rooms] + [t[0] for t in treasures]:
        carve_box(ctx, room.origin, room.width, room.height, room.depth, 'wall', floor='floor')

    # altar
    fill_box(ctx, (ax - 2, walk, az - 2), (ax + 2, walk, az + 2), 'accent')
    fill_box(ctx, (ax - 1, walk + 1, az - 1), (ax + 1, walk + 1, az + 1), 'accent')
    ctx.put((ax, walk + 2, az), 'catalyst')
    for dx, dz in ((-2, -2), (2, -2), (-2, 2), (2, 2)):
        ctx.put((ax + dx, walk + 1, az + dz), 'fire')
    for dx, dz in ((-4, 0), (4, 0)):
        ctx.put((ax + dx, walk, az + dz), 'sensor')
    for dx, dz in ((0, -4), (0, 4)):
        ctx.put((ax + dx, walk, az + dz), 'shrieker')

    # corridors: main runs first so spurs can open their walls
    mains = []
    for axis in axes:
        mains.append(extrude_corridor(ctx, axis.at(radius, 0, walk), axis.at(corridor_end, 0, walk),
                                      width=CORRIDOR_WIDTH, height=CORRIDOR_HEIGHT, ceiling='base'))
    spurs = []
    for room, axis, side, start, end in treasures:
        spurs.append(extrude_corridor(ctx, start, end, width=3, height=3, ceiling='base'))

    # doorways
    for axis, corr in zip(axes, mains):
        ax_tag = 'x' if axis.e[0] else 'z'
        carve_doorway(ctx, corr.start, height=3, axis=ax_tag)
        carve_doorway(ctx, corr.end, height=3, axis=ax_tag)
    for (room, axis, side, start, end), corr in zip(treasures, spurs):
        ax_tag = 'x' if axis.p[0] else 'z'
        carve_doorway(ctx, start, axis=ax_tag)
        carve_doorway(ctx, end, axis=ax_tag)
    for room, axis, door in side_rooms:
        carve_doorway(ctx, door, axis='x' if axis.p[0] else 'z')

    # pillars along the corridors, never on a doorway approach
    for axis in axes:
        for along in range(radius + 8, corridor_end, 8):
            for lat in (-hw, hw):
                for dy in range(CORRIDOR_HEIGHT):
                    ctx.put(axis.at(along, lat, walk + dy), 'column')

    # room contents
    for room, axis, side, start, end in treasures:
        tc = Coordinate(room.origin.x + room.width // 2, walk, room.origin.z + room.depth // 2)
        ex, ez = axis.e
        sx, sz = axis.p[0] * side, axis.p[1] * side
        hr = TREASURE_ROOM // 2 - 1
        for corner in ((-1, -1), (1, -1), (-1, 1), (1, 1)):
            cx = tc.x + corner[0] * hr
            cz = tc.z + corner[1] * hr
            for dy in range(3):
                ctx.put((cx, walk + dy, cz), 'accent')
        items = _treasure_items(ctx)
        chest = place_chest(ctx, (tc.x + sx * 2, walk, tc.z + sz * 2),
                            loot='ancient_city_treasure', items=items)
        ctx.put((tc.x + ex * 2, walk, tc.z + ez * 2), 'sensor')
        ctx.put((tc.x - ex * 2, walk, tc.z - ez * 2), 'shrieker')
        ctx.put((tc.x + sx * 2 + ex, walk, tc.z + sz * 2 + ez), 'candle')
        loot = dict(chest.metadata) if chest is not None else {'loot': 'ancient_city_treasure', 'items': items}
        ctx.add_room(Room('treasure_room', room.origin, room.size, loot=loot, doorways=[end]))
    for room, axis, door in side_rooms + [(r, None, r.doorways[0]) for r in end_rooms]:
        tc = room.center
        if ctx.rng.chance(0.4):
            place_chest(ctx, tc, loot='ancient_city')
        ctx.put(tc.offset(dx=1), 'candle')
        ctx.add_room(Room('room', room.origin, room.size, doorways=[door]))

    ctx.add_room(Room('central_chamber', (ax - radius, y, az - radius),
                      (2 * radius + 1, 12, 2 * radius + 1),
                      doorways=[m.start for m in mains]))

    # open platform decoration, only on unclaimed cells
    for _ in range(ctx.rng.next_int(15, 25)):
        r = ctx.rng.next_int(3, 7)
        # patches stay on the platform
        cx = ax + ctx.rng.next_int(-half + r, half - 1 - r)
        cz = az + ctx.rng.next_int(-half + r, half - 1 - r)
        _sculk_patch(ctx, (cx, cz), r, y)
        if not ctx.is_reserved(cx, cz):
            ctx.put((cx, y, cz), 'catalyst')
    for _ in range(ctx.rng.next_int(20, 29)):
        cx = ax + ctx.rng.next_int(-half + 2, half - 3)
        cz = az + ctx.rng.next_int(-half + 2, half - 3)
        tall = ctx.rng.next_int(3, 8)
        if ctx.is_reserved(cx, cz):
            continue
        for dy in range(tall):
            ctx.put((cx, walk + dy, cz), 'column')
    for _ in range(ctx.rng.next_int(5, 9)):
        cx = ax + ctx.rng.next_int(-half + 2, half - 3)
        cz = az + ctx.rng.next_int(-half + 2, half - 3)
        if ctx.is_reserved(cx, cz):
            continue
        ctx.put((cx, walk, cz), 'base')
        ctx.put((cx, walk + 1, cz), 'fire')

    if option_bool(options, 'spawn_warden', False):
        ctx.spawn('warden', (ax + 6, walk, az))

    ctx.entrance = Coordinate(ax + 6, walk, az)
    return ctx.result(treasure_rooms=len(treasures), side_rooms=len(side_rooms))
