"""
Stronghold: a fixed room graph.

    entrance --corridor--> stairs room (upper landing, 5 steps down)
    stairs room (lower level) --corridor--> library
    stairs room (lower level) --corridor--> portal room

Only materials (cracked / mossy substitution, 15-25% each) and the minor
decoration vary between seeds; decoration goes through decay sampling.
"""
import config
from results import Room
from shapes import (carve_box, carve_cylinder, carve_doorway, carve_staircase,
                    extrude_corridor, fill_box, height_factor, place_chest,
                    place_spawner)
from util import Coordinate, option_degradation

CORRIDOR_LENGTH = 8
STAIR_STEPS = 5
PORTAL_RADIUS = 6


def _palette(ctx):
    base = ctx.style('stronghold')
    lo = getattr(config, 'STRONGHOLD_DECAY_MIN', 0.15)
    hi = getattr(config, 'STRONGHOLD_DECAY_MAX', 0.25)
    cracked = ctx.rng.next_float(lo, hi)
    mossy = ctx.rng.next_float(lo, hi)
    mix = [(base['wall'], 1.0 - cracked - mossy), (base['cracked'], cracked), (base['mossy'], mossy)]
    return base.with_overrides(wall=mix, floor=mix), cracked, mossy


def _bookshelves(ctx, room):
    lo = room.origin
    w, h, d = room.size
    for dy in range(1, 4):
        for dx in range(1, w - 1):
            for dz in range(1, d - 1):
                if dx in (1, w - 2) or dz in (1, d - 2):
                    c = (lo.x + dx, lo.y + dy, lo.z + dz)
                    if not ctx.is_protected(c):
                        ctx.put(c, 'shelf')
    # two free-standing rows
    cx, cz = lo.x + w // 2, lo.z + d // 2
    for dx in range(-2, 3):
        for row in (-2, 2):
            for dy in (1, 2):
                ctx.put((cx + dx, lo.y + dy, cz + row), 'shelf')


def _portal_frame(ctx, center, walk_y):
    """Twelve frame blocks around a 3x3 pool, each facing inward."""
    cx, cz = center.x, center.z
    frames = []
    for i in (-1, 0, 1):
        frames.append(((cx + i, walk_y, cz - 2), 'south'))
        frames.append(((cx + i, walk_y, cz + 2), 'north'))
        frames.append(((cx - 2, walk_y, cz + i), 'east'))
        frames.append(((cx + 2, walk_y, cz + i), 'west'))
    eyes = 0
    frame = ctx.palette['frame']
    for c, facing in frames:
        eye = ctx.rng.chance(0.1)
        eyes += eye
        ctx.set(c, frame.with_metadata(facing=facing, eye=eye))
    return eyes


def generate_stronghold(ctx, position, options):
    pal, cracked, mossy = _palette(ctx)
    ctx.palette = pal
    decay = option_degradation(options, 0.2)
    x, y, z = position
    low = y - STAIR_STEPS

    # rooms
    entrance = Room('entrance', (x - 3, y - 1, z - 3), (7, 5, 7))
    sx0 = x + 3 + CORRIDOR_LENGTH
    stairs = Room('stairs', (sx0, low - 1, z - 3), (13, STAIR_STEPS + 5, 7))
    lx0 = sx0 + 12 + CORRIDOR_LENGTH
    library = Room('library', (lx0, low - 1, z - 5), (11, 7, 11))
    pcx = sx0 + 10
    pcz = z + 3 + CORRIDOR_LENGTH + PORTAL_RADIUS
    portal_center = Coordinate(pcx, low - 1, pcz)
    portal = Room('portal_room', (pcx - PORTAL_RADIUS, low - 1, pcz - PORTAL_RADIUS),
                  (2 * PORTAL_RADIUS + 1, 8, 2 * PORTAL_RADIUS + 1))

    for room in (entrance, stairs, library):
        carve_box(ctx, room.origin, room.width, room.height, room.depth, 'wall', floor='floor')
    carve_cylinder(ctx, portal_center, PORTAL_RADIUS, portal.height, 'wall', floor='floor')

    # stairs room: upper landing, five steps, lower floor
    fill_box(ctx, (sx0 + 1, low, z - 2), (sx0 + 3, y - 1, z + 2), 'wall')
    carve_staircase(ctx, (sx0 + 3, y, z - 1), STAIR_STEPS, 'east', 'stairs', None, width=3)
    for i in range(1, STAIR_STEPS):
        for dz in (-1, 0, 1):
            for sy in range(low, y - i - 1):
                ctx.put((sx0 + 3 + i, sy, z + dz), 'wall')

    # corridors
    c1 = extrude_corridor(ctx, (x + 3, y, z), (sx0, y, z), width=3)
    c2 = extrude_corridor(ctx, (sx0 + 12, low, z), (lx0, low, z), width=3)
    c3 = extrude_corridor(ctx, (pcx, low, z + 3), (pcx, low, pcz - PORTAL_RADIUS), width=3)

    # doorways
    doors = {
        'entrance': [carve_doorway(ctx, c1.start, axis='x')],
        'stairs': [carve_doorway(ctx, c1.end, axis='x'),
                   carve_doorway(ctx, c2.start, axis='x'),
                   carve_doorway(ctx, c3.start, axis='z')],
        'library': [carve_doorway(ctx, c2.end, axis='x')],
        'portal_room': [carve_doorway(ctx, c3.end, axis='z')],
    }

    # library
    _bookshelves(ctx, library)
    lib_center = library.center
    ctx.set(lib_center, pal['lectern'].with_metadata(facing='west'))
    place_chest(ctx, (library.origin.x + 8, low, library.origin.z + 8), loot='stronghold_library',
                facing='west')

    # portal room: frame ring over a lava pool with the spawner buried under it
    eyes = _portal_frame(ctx, portal_center, low)
    for dx in (-1, 0, 1):
        for dz in (-1, 0, 1):
            ctx.put((pcx + dx, low - 1, pcz + dz), 'lava')
            if dx or dz:
                ctx.put((pcx + dx, low - 2, pcz + dz), 'wall')
    place_spawner(ctx, (pcx, low - 2, pcz), 'silverfish')
    place_chest(ctx, (pcx + 4, low, pcz + 2), loot='stronghold_corridor', facing='west')

    # decoration
    for room in (entrance, library):
        top = room.origin.y + room.height - 2
        lo = room.origin
        for cx, cz in ((lo.x + 1, lo.z + 1), (lo.x + room.width - 2, lo.z + 1),
                       (lo.x + 1, lo.z + room.depth - 2),
                       (lo.x + room.width - 2, lo.z + room.depth - 2)):
            ctx.place_decayed((cx, top, cz), 'cobweb', decay, edge=1.0,
                              height=height_factor(top, lo.y, room.height))
    for room in (entrance, stairs):
        torch = pal['light'].with_metadata(facing='south')
        ctx.place_decayed((room.origin.x + room.width // 2, y + 1, room.origin.z + 1), torch, decay)
    bars_z = entrance.origin.z
    for dx in (-1, 1):
        ctx.place_decayed((x + dx, y + 1, bars_z), 'bars', decay, edge=1.0)

    for room in (entrance, stairs, library, portal):
        ctx.add_room(Room(room.kind, room.origin, room.size, doorways=doors[room.kind]))
    ctx.entrance = entrance.center
    return ctx.result(cracked=round(cracked, 4), mossy=round(mossy, 4), eyes=eyes)
