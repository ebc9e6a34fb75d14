"""
Abandoned mineshaft: one long main corridor with 2-4 side branches, an
optional intersection room and cave-spider spawner room hanging off the
corridor walls, collapse damage every ~12 blocks and a single chest
minecart at the end of the main corridor or of one branch.

Geometry is planned in a local frame (u along the main corridor, v across
it) and every corridor ends in a room wall, so nothing stops in solid
rock. Build order: rooms, corridors, doorways, then decoration.
"""
import config
import logutil
from results import Room
from shapes import (carve_box, carve_doorway, extrude_corridor, place_chest,
                    place_spawner)
from util import Coordinate, option_int, option_size


class _Frame(object):
    """Maps (u, v) offsets onto world x/z for the chosen main axis."""

    def __init__(self, origin, axis):
        self.origin = origin
        self.axis = axis

    def at(self, u, v, dy=0):
        o = self.origin
        if self.axis == 'x':
            return Coordinate(o.x + u, o.y + dy, o.z + v)
        return Coordinate(o.x + v, o.y + dy, o.z + u)

    def rect(self, u0, v0, u1, v1):
        a = self.at(u0, v0)
        b = self.at(u1, v1)
        return (min(a.x, b.x), min(a.z, b.z), max(a.x, b.x), max(a.z, b.z))

    def room(self, kind, u0, v0, u1, v1, y0, height, **kw):
        x0, z0, x1, z1 = self.rect(u0, v0, u1, v1)
        return Room(kind, (x0, y0, z0), (x1 - x0 + 1, height, z1 - z0 + 1), **kw)


def _support_positions(length, interval):
    return [t for t in range(interval, length, interval)]


def _plan_branches(ctx, length, interval):
    count = ctx.rng.next_int(getattr(config, 'MINESHAFT_MIN_BRANCHES', 2),
                             getattr(config, 'MINESHAFT_MAX_BRANCHES', 4))
    # branch mouths sit halfway between supports
    slots = [u for u in range(6, length - 4) if u % interval == interval // 2]
    branches = []
    for _ in range(count):
        side = ctx.rng.choice((-1, 1))
        free = [u for u in slots
                if all(abs(u - b[0]) >= 8 or b[1] != side for b in branches)
                and all(u != b[0] for b in branches)]
        if not free:
            break
        u = ctx.rng.choice(free)
        want = ctx.rng.next_int(8, 24)
        span = length - u
        blen = max(4, min(want, span))
        if blen != want:
            logutil.log("MINESHAFT", f"branch at u={u} clamped {want}->{blen}", "DEBUG")
        branches.append((u, side, blen))
    return branches


def _supports(ctx, corridor, interval, lateral):
    """Fence posts and a plank beam every `interval` steps, clear of the centre line."""
    cells = list(corridor.cells())
    for t in _support_positions(len(cells) - 1, interval):
        c = cells[t]
        px, pz = lateral
        for s in (-1, 1):
            side = c.offset(dx=px * s, dz=pz * s)
            ctx.put(side, 'fence')
            ctx.put(side.offset(dy=1), 'fence')
            ctx.put(side.offset(dy=2), 'planks')
        ctx.put(c.offset(dy=2), 'planks')


def _rails(ctx, corridor, axis_name):
    rail = ctx.palette['rail'].with_metadata(shape=axis_name)
    for c in corridor.cells():
        ctx.set(c, rail)


def _collapse(ctx, corridor, interval, lateral):
    """Gravel holes, broken supports and cobwebs roughly every `interval` blocks."""
    cells = list(corridor.cells())
    px, pz = lateral
    support = getattr(config, 'MINESHAFT_SUPPORT_INTERVAL', 4)
    for base in range(interval // 2, len(cells) - 2, interval):
        t = min(len(cells) - 2, base + ctx.rng.next_int(0, 3))
        c = cells[t]
        kind = ctx.rng.choice(('gravel', 'broken_support', 'cobweb'))
        s = ctx.rng.choice((-1, 1))
        side = c.offset(dx=px * s, dz=pz * s)
        if kind == 'gravel':
            ctx.put(c.offset(dy=3), 'gravel')
            ctx.put(side, 'gravel')
        elif kind == 'broken_support':
            st = max(support, (t // support) * support)
            if st < len(cells) - 1:
                post = cells[st].offset(dx=px * s, dz=pz * s)
                ctx.clear(post.offset(dy=1))
                ctx.clear(post.offset(dy=2))
        else:
            ctx.put(side.offset(dy=1), 'cobweb')
            ctx.put(side.offset(dy=2), 'cobweb')
            ctx.put(c.offset(dy=2), 'cobweb')


def _attach_room(ctx, kind, corridors, width, depth, height, floor_y, attempts=12):
    """
    Find a spot beside one of the corridors for a width x depth room whose
    near wall is the corridor wall. Returns (room, doorway, axis) or None.
    """
    for _ in range(attempts):
        corr, lateral, _ = ctx.rng.choice(corridors)
        cells = list(corr.cells())
        if len(cells) < width + 4:
            continue
        t = ctx.rng.next_int(width // 2 + 1, len(cells) - width // 2 - 2)
        s = ctx.rng.choice((-1, 1))
        px, pz = lateral
        c = cells[t]
        door = c.offset(dx=px * s * 2, dz=pz * s * 2)
        far = c.offset(dx=px * s * (depth + 1), dz=pz * s * (depth + 1))
        ux = (corr.end.x > corr.start.x) - (corr.end.x < corr.start.x)
        uz = (corr.end.z > corr.start.z) - (corr.end.z < corr.start.z)
        h = width // 2
        a = door.offset(dx=-ux * h, dz=-uz * h)
        b = far.offset(dx=ux * h, dz=uz * h)
        x0, x1 = min(a.x, b.x), max(a.x, b.x)
        z0, z1 = min(a.z, b.z), max(a.z, b.z)
        if not ctx.reserve(kind, x0, z0, x1, z1, padding=0):
            continue
        room = Room(kind, (x0, floor_y, z0), (x1 - x0 + 1, height, z1 - z0 + 1), doorways=[door])
        return room, door, ('z' if px == 0 else 'x')
    logutil.log("MINESHAFT", f"no room for {kind}; skipped", "DEBUG")
    return None


def generate_mineshaft(ctx, position, options):
    pal = ctx.palette = ctx.style('mineshaft')
    size = option_size(options)
    length = option_int(options, 'length', config.MINESHAFT_LENGTH[size], 16, 96)
    support = getattr(config, 'MINESHAFT_SUPPORT_INTERVAL', 4)
    collapse = getattr(config, 'MINESHAFT_COLLAPSE_INTERVAL', 12)
    axis = ctx.rng.choice(('x', 'z'))
    frame = _Frame(Coordinate(*position), axis)
    y = frame.origin.y
    floor_y = y - 1
    main_lat = (0, 1) if axis == 'x' else (1, 0)
    main_shape = 'east_west' if axis == 'x' else 'north_south'
    branch_lat = (1, 0) if axis == 'x' else (0, 1)
    branch_shape = 'north_south' if axis == 'x' else 'east_west'

    # plan
    branches = _plan_branches(ctx, length, support)
    entrance_room = frame.room('entrance', -4, -2, 0, 2, floor_y, 5,
                               doorways=[frame.at(0, 0)])
    end_room = frame.room('alcove', length, -2, length + 4, 2, floor_y, 5,
                          doorways=[frame.at(length, 0)])
    ctx.reserve('entrance', *frame.rect(-4, -2, 0, 2), padding=0)
    ctx.reserve('main', *frame.rect(1, -1, length - 1, 1), padding=0)
    ctx.reserve('alcove', *frame.rect(length, -2, length + 4, 2), padding=0)
    branch_rooms = []
    for u, side, blen in branches:
        v_end = side * (2 + blen)
        ctx.reserve('branch', *frame.rect(u - 1, side * 2, u + 1, v_end - side), padding=0)
        ctx.reserve('alcove', *frame.rect(u - 2, v_end, u + 2, v_end + side * 4), padding=0)
        branch_rooms.append(frame.room('alcove', u - 2, v_end, u + 2, v_end + side * 4,
                                       floor_y, 5, doorways=[frame.at(u, v_end)]))

    # rooms
    for room in [entrance_room, end_room] + branch_rooms:
        carve_box(ctx, room.origin, room.width, room.height, room.depth, 'wall', floor='planks')
        ctx.add_room(room)

    # corridors
    main = extrude_corridor(ctx, frame.at(0, 0), frame.at(length, 0), width=3,
                            wall='wall', floor='floor', ceiling='planks', light='light')
    runs = [(main, main_lat, main_shape)]
    for (u, side, blen), room in zip(branches, branch_rooms):
        corr = extrude_corridor(ctx, frame.at(u, side * 2), room.doorways[0], width=3,
                                wall='wall', floor='floor', ceiling='planks', light='light')
        runs.append((corr, branch_lat, branch_shape))

    extra_rooms = []
    for kind in ('intersection', 'spawner_room'):
        if kind == 'intersection' and not ctx.rng.chance(0.6):
            continue
        placed = _attach_room(ctx, kind, runs, 7, 7, 5, floor_y)
        if placed is None:
            continue
        room, door, axis_tag = placed
        carve_box(ctx, room.origin, room.width, room.height, room.depth, 'wall', floor='planks',
                  ceiling='planks')
        extra_rooms.append((room, door, axis_tag))
        ctx.add_room(room)

    # doorways
    carve_doorway(ctx, main.start, axis=axis)
    carve_doorway(ctx, main.end, axis=axis)
    for corr, _, _ in runs[1:]:
        baxis = 'z' if axis == 'x' else 'x'
        carve_doorway(ctx, corr.start, axis=baxis)
        carve_doorway(ctx, corr.end, axis=baxis)
    for room, door, axis_tag in extra_rooms:
        carve_doorway(ctx, door, axis=axis_tag)

    # decoration
    for corr, lat, shape in runs:
        _rails(ctx, corr, shape)
        _supports(ctx, corr, support, lat)
        _collapse(ctx, corr, collapse, lat)
    for room, door, _ in extra_rooms:
        c = room.center
        if room.kind == 'spawner_room':
            place_spawner(ctx, c, 'cave_spider')
            for cell in room.interior():
                if cell.y == c.y + 1 and cell != c and not ctx.is_protected(cell) \
                        and ctx.rng.chance(0.35):
                    ctx.put(cell, 'cobweb')
        else:
            for dx, dz in ((-2, -2), (2, -2), (-2, 2), (2, 2)):
                post = c.offset(dx=dx, dz=dz)
                if ctx.is_protected(post):
                    continue
                ctx.put(post, 'fence')
                ctx.put(post.offset(dy=1), 'fence')
            ctx.set(c.offset(dy=2), pal['light'].with_metadata(facing='down'))

    # one loot cart at the far end of the main corridor or one branch
    pick = ctx.rng.next_int(0, len(runs) - 1)
    cart_at = runs[pick][0].end
    place_chest(ctx, cart_at, loot='mineshaft', block_type=pal['cart'].type)

    ctx.entrance = entrance_room.center
    return ctx.result(axis=axis, length=length, branches=len(branches))
