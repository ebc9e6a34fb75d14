"""
Primitive placement routines shared by every structure family.

All routines take a BuildContext, which wraps the host's block writer and
keeps the per-call bookkeeping: bounds of everything written, protected
cells (doorways and corridor centre lines), footprint reservations, rooms,
corridors, spawn requests and loot containers.

Block arguments accept either a Block or a slot name looked up on the
context's palette; weighted slots draw from the context's SeededRandom.
"""
import math

import numpy as np

import config
import logutil
from blocks import Block, AIR, is_passable, is_solid
from entity import SpawnerAdapter
from results import Corridor, StructureResult
from rng import hash_unit
from util import Coordinate, DIRECTIONS, clamp, rects_overlap


class BuildContext(object):

    def __init__(self, kind, anchor, writer, rng, palette=None, spawner=None, reader=None,
                 seed=0, styles=None):
        self.kind = kind
        self.anchor = Coordinate(*anchor)
        self.writer = writer
        self.rng = rng
        self.palette = palette
        self.styles = styles or {}
        self.spawner = spawner if isinstance(spawner, SpawnerAdapter) else SpawnerAdapter(spawner)
        self.reader = reader
        self.seed = seed
        self.bounds_min = None
        self.bounds_max = None
        self.protected = set()
        self.reservations = []
        self.rooms = []
        self.corridors = []
        self.doorways = []
        self.roads = []
        self.spawns = []
        self.mob_spawns = {}
        self.loot = []
        self.spawners = []
        self.entrance = None
        self.extra = {}
        self.write_count = 0
        self.skipped = 0

    # -- writes -------------------------------------------------------

    def set(self, coord, block, force=False):
        """Write one block. Solid blocks never land on protected cells unless forced."""
        c = Coordinate(int(coord[0]), int(coord[1]), int(coord[2]))
        if not force and c in self.protected and not is_passable(block):
            self.skipped += 1
            return False
        self.writer(c, block)
        self.write_count += 1
        if self.bounds_min is None:
            self.bounds_min = [c.x, c.y, c.z]
            self.bounds_max = [c.x, c.y, c.z]
        else:
            lo, hi = self.bounds_min, self.bounds_max
            if c.x < lo[0]: lo[0] = c.x
            if c.y < lo[1]: lo[1] = c.y
            if c.z < lo[2]: lo[2] = c.z
            if c.x > hi[0]: hi[0] = c.x
            if c.y > hi[1]: hi[1] = c.y
            if c.z > hi[2]: hi[2] = c.z
        return True

    def clear(self, coord):
        return self.set(coord, AIR)

    def resolve(self, spec, table=None):
        """Block for `spec` (a Block, or a slot name on `table`/the palette)."""
        if spec is None or isinstance(spec, Block):
            return spec
        table = table or self.palette
        return table.pick(spec, self.rng)

    def put(self, coord, spec, table=None, force=False):
        return self.set(coord, self.resolve(spec, table), force=force)

    def protect(self, coord):
        self.protected.add(Coordinate(int(coord[0]), int(coord[1]), int(coord[2])))

    def is_protected(self, coord):
        return Coordinate(*coord) in self.protected

    # -- degradation --------------------------------------------------

    def keep(self, coord, base, edge=0.0, height=0.0, salt='decay'):
        """True when a block at `coord` survives decay. Rolls are positional, not drawn."""
        p = decay_chance(base, edge, height)
        if p <= 0.0:
            return True
        return hash_unit(self.seed, coord[0], coord[1], coord[2], salt) >= p

    def place_decayed(self, coord, spec, base, edge=0.0, height=0.0, table=None, salt='decay'):
        # Draw first so the stream advances the same way at every decay level.
        blk = self.resolve(spec, table)
        if not self.keep(coord, base, edge, height, salt):
            return False
        return self.set(coord, blk)

    # -- footprints ---------------------------------------------------

    def reserve(self, name, x0, z0, x1, z1, padding=1, ignore=()):
        """Claim an (inclusive) xz rectangle; False if it overlaps an earlier claim."""
        rect = (min(x0, x1) - padding, min(z0, z1) - padding,
                max(x0, x1) + padding, max(z0, z1) + padding)
        for other_name, other in self.reservations:
            if other_name in ignore:
                continue
            if rects_overlap(rect, other):
                return False
        self.reservations.append((name, rect))
        return True

    def is_reserved(self, x, z, ignore=()):
        for name, (x0, z0, x1, z1) in self.reservations:
            if name in ignore:
                continue
            if x0 <= x <= x1 and z0 <= z <= z1:
                return True
        return False

    # -- bookkeeping --------------------------------------------------

    def add_room(self, room):
        self.rooms.append(room)
        return room

    def add_loot(self, coord):
        self.loot.append(Coordinate(*coord))

    def spawn(self, kind, coord, **options):
        record = self.spawner(kind, coord, options)
        self.spawns.append(record)
        self.mob_spawns.setdefault(kind, []).append(record.position)
        return record

    def style(self, name):
        return self.styles[name]

    def result(self, nominal=None, **extra):
        """Build the StructureResult. `nominal` is an optional (min, max) footprint to include."""
        if self.bounds_min is None:
            lo = list(self.anchor)
            hi = list(self.anchor)
        else:
            lo = list(self.bounds_min)
            hi = list(self.bounds_max)
        if nominal is not None:
            nlo, nhi = nominal
            lo = [min(a, b) for a, b in zip(lo, nlo)]
            hi = [max(a, b) for a, b in zip(hi, nhi)]
        data = dict(self.extra)
        data.update(extra)
        return StructureResult(
            self.kind, self.anchor, (lo, hi),
            rooms=self.rooms, corridors=self.corridors, spawns=self.spawns,
            mob_spawns=self.mob_spawns, loot=self.loot, entrance=self.entrance,
            doorways=self.doorways, roads=self.roads, spawners=self.spawners, extra=data)


def decay_chance(base, edge=0.0, height=0.0):
    """
    Removal probability for one block. `base` is the structure's degradation
    (0..1); `edge` and `height` are 0..1 factors for how close the block is to
    the rim and to the top of the structure.
    """
    base = clamp(float(base), 0.0, 1.0)
    if base <= 0.0:
        return 0.0
    edge = clamp(float(edge), 0.0, 1.0)
    height = clamp(float(height), 0.0, 1.0)
    weight = (getattr(config, 'DECAY_CORE', 0.4)
              + getattr(config, 'DECAY_EDGE', 0.8) * edge
              + getattr(config, 'DECAY_HEIGHT', 0.8) * height)
    return clamp(base * weight, 0.0, 1.0)


def edge_factor(x, z, x0, z0, x1, z1):
    """0 at the middle of the rectangle, 1 on its rim."""
    hx = max((x1 - x0) / 2.0, 0.5)
    hz = max((z1 - z0) / 2.0, 0.5)
    cx = (x0 + x1) / 2.0
    cz = (z0 + z1) / 2.0
    return clamp(max(abs(x - cx) / hx, abs(z - cz) / hz), 0.0, 1.0)


def height_factor(y, y0, height):
    if height <= 1:
        return 0.0
    return clamp((y - y0) / float(height - 1), 0.0, 1.0)


def fill_box(ctx, lo, hi, spec, table=None):
    """Solid fill of the inclusive box lo..hi."""
    for x in range(min(lo[0], hi[0]), max(lo[0], hi[0]) + 1):
        for y in range(min(lo[1], hi[1]), max(lo[1], hi[1]) + 1):
            for z in range(min(lo[2], hi[2]), max(lo[2], hi[2]) + 1):
                ctx.put((x, y, z), spec, table)


def carve_box(ctx, origin, width, height, depth, wall, floor=None, ceiling=None,
              interior=AIR, table=None):
    """
    Hollow box with its minimum corner at `origin`. The bottom face gets
    `floor`, the top face `ceiling` (both default to `wall`), the other faces
    `wall` and everything inside `interior`. Pass interior=None to leave the
    inside untouched.
    """
    ox, oy, oz = origin
    width = max(1, int(width))
    height = max(1, int(height))
    depth = max(1, int(depth))
    floor = wall if floor is None else floor
    ceiling = wall if ceiling is None else ceiling
    for dx in range(width):
        for dy in range(height):
            for dz in range(depth):
                c = (ox + dx, oy + dy, oz + dz)
                if dy == 0:
                    ctx.put(c, floor, table)
                elif dy == height - 1:
                    ctx.put(c, ceiling, table)
                elif dx in (0, width - 1) or dz in (0, depth - 1):
                    ctx.put(c, wall, table)
                elif interior is not None:
                    ctx.put(c, interior, table)


def carve_cylinder(ctx, center, radius, height, wall, floor=None, ceiling=None,
                   interior=AIR, table=None):
    """
    Radial shell standing on `center` (bottom layer at center.y). Membership
    is Euclidean distance <= radius; the outermost unit ring is wall.
    """
    cx, cy, cz = center
    floor = wall if floor is None else floor
    ceiling = wall if ceiling is None else ceiling
    for dx, dz, d in disc_offsets(radius):
        ring = d > radius - 1
        for dy in range(height):
            c = (cx + dx, cy + dy, cz + dz)
            if dy == 0:
                ctx.put(c, floor, table)
            elif dy == height - 1:
                ctx.put(c, ceiling, table)
            elif ring:
                ctx.put(c, wall, table)
            elif interior is not None:
                ctx.put(c, interior, table)


def _snap_axis(start, end):
    if start[0] == end[0] or start[2] == end[2]:
        return Coordinate(end[0], start[1], end[2])
    logutil.log("SHAPES", f"corridor {tuple(start)}->{tuple(end)} not axis aligned; snapping", "DEBUG")
    if abs(end[0] - start[0]) >= abs(end[2] - start[2]):
        return Coordinate(end[0], start[1], start[2])
    return Coordinate(start[0], start[1], end[2])


def extrude_corridor(ctx, start, end, width=3, wall='wall', floor='floor', light='light',
                     light_interval=None, height=None, ceiling=None, table=None, record=True):
    """
    Straight corridor between two coordinates that share x or z. `start`
    and `end` are walk-level centre cells. Carves a width x height air
    section with floor below, walls either side and a ceiling above, and
    mounts a light in the wall every `light_interval` steps. The centre
    line is protected from later solid writes. Returns the Corridor.
    """
    if light_interval is None:
        light_interval = getattr(config, 'CORRIDOR_LIGHT_INTERVAL', 8)
    if height is None:
        height = getattr(config, 'CORRIDOR_HEIGHT', 3)
    start = Coordinate(*start)
    end = _snap_axis(start, end)
    width = max(1, int(width))
    ceiling = wall if ceiling is None else ceiling
    ux = (end.x > start.x) - (end.x < start.x)
    uz = (end.z > start.z) - (end.z < start.z)
    if ux == 0 and uz == 0:
        ux = 1
    # lateral axis
    px, pz = -uz, ux
    lo = -(width // 2)
    hi = lo + width - 1
    steps = abs(end.x - start.x) + abs(end.z - start.z)
    y = start.y
    for i in range(steps + 1):
        bx = start.x + ux * i
        bz = start.z + uz * i
        for lat in range(lo - 1, hi + 2):
            x = bx + px * lat
            z = bz + pz * lat
            inside = lo <= lat <= hi
            ctx.put((x, y - 1, z), floor if inside else wall, table)
            for dy in range(height):
                ctx.put((x, y + dy, z), AIR if inside else wall, table)
            ctx.put((x, y + height, z), ceiling, table)
        if light is not None and light_interval and i % light_interval == light_interval // 2:
            side = hi + 1 if (i // light_interval) % 2 == 0 else lo - 1
            facing = _facing_name(-px * (1 if side > 0 else -1), -pz * (1 if side > 0 else -1))
            lb = ctx.resolve(light, table)
            if lb is not None:
                ctx.set((bx + px * side, y + 1, bz + pz * side), lb.with_metadata(facing=facing))
        ctx.protect((bx, y, bz))
        ctx.protect((bx, y + 1, bz))
    corridor = Corridor(start, end, width)
    if record:
        ctx.corridors.append(corridor)
    return corridor


def _facing_name(dx, dz):
    for name, (ux, _, uz) in DIRECTIONS.items():
        if (ux, uz) == (dx, dz) and name not in ('up', 'down'):
            return name
    return 'south'


def carve_doorway(ctx, coord, height=2, fill=AIR, axis=None):
    """
    Opening `height` tall at `coord`. Always written, never decayed. The
    opening and, when `axis` ('x' or 'z') is given, the cells directly in
    front of and behind it stay protected for the rest of the build.
    """
    c = Coordinate(*coord)
    for dy in range(height):
        cell = c.offset(dy=dy)
        ctx.set(cell, fill, force=True)
        ctx.protect(cell)
        if axis == 'x':
            ctx.protect(cell.offset(dx=1))
            ctx.protect(cell.offset(dx=-1))
        elif axis == 'z':
            ctx.protect(cell.offset(dz=1))
            ctx.protect(cell.offset(dz=-1))
        elif axis == 'y':
            ctx.protect(cell.offset(dy=1))
            ctx.protect(cell.offset(dy=-1))
    if c not in ctx.doorways:
        ctx.doorways.append(c)
    return c


def carve_staircase(ctx, top, steps, direction, stair, support, headroom=3, width=1, table=None):
    """
    Straight staircase descending from walk-level cell `top` one block per
    step along `direction`. Returns the walk-level cell at the bottom.
    """
    ux, _, uz = DIRECTIONS[direction]
    px, pz = -uz, ux
    facing = _facing_name(-ux, -uz)
    top = Coordinate(*top)
    for i in range(1, steps + 1):
        x = top.x + ux * i
        z = top.z + uz * i
        stand = top.y - i
        for lat in range(width):
            cx = x + px * lat
            cz = z + pz * lat
            blk = ctx.resolve(stair, table)
            ctx.set((cx, stand - 1, cz), blk.with_metadata(facing=facing, half='bottom'))
            if support is not None:
                ctx.put((cx, stand - 2, cz), support, table)
            for dy in range(headroom + 1):
                ctx.set((cx, stand + dy, cz), AIR, force=True)
            ctx.protect((cx, stand, cz))
            ctx.protect((cx, stand + 1, cz))
    return Coordinate(top.x + ux * (steps + 1), top.y - steps, top.z + uz * (steps + 1))


def find_floor(reader, coord, max_depth=None):
    """
    Walk down from `coord` through the read capability and return the first
    air cell sitting on a solid one. Without a reader `coord.y` is used.
    """
    if reader is None:
        return int(coord[1])
    if max_depth is None:
        max_depth = getattr(config, 'FLOOR_SEARCH_DEPTH', 24)
    x, y, z = int(coord[0]), int(coord[1]), int(coord[2])
    for dy in range(max_depth + 1):
        below = reader(Coordinate(x, y - dy - 1, z))
        here = reader(Coordinate(x, y - dy, z))
        if is_solid(below) and not is_solid(here):
            return y - dy
    return y


def _slot_type(ctx, slot, default):
    # the slot's first entry, so no draw is taken from the stream
    pal = ctx.palette
    if pal is not None and slot in pal:
        return pal[slot].type
    return default


def place_chest(ctx, coord, loot=None, items=None, facing=None, block_type=None, **meta):
    """
    Loot container; recorded in the result only if it was actually written.
    The block type defaults to the palette's `chest` slot.
    """
    if block_type is None:
        block_type = _slot_type(ctx, 'chest', 'chest')
    data = dict(meta)
    if loot is not None:
        data['loot'] = loot
    if items is not None:
        data['items'] = items
    if facing is not None:
        data['facing'] = facing
    data.setdefault('structureType', ctx.kind)
    blk = Block(block_type, data)
    if ctx.set(coord, blk):
        ctx.add_loot(coord)
        return blk
    return None


def place_spawner(ctx, coord, entity_type, **meta):
    data = {'entityType': entity_type}
    data.update(meta)
    if ctx.set(coord, Block(_slot_type(ctx, 'spawner', 'mob_spawner'), data)):
        ctx.spawners.append(Coordinate(*coord))
        return True
    return False


def disc_offsets(radius):
    """(dx, dz, distance) for every cell within `radius`, in a fixed order."""
    r = int(math.ceil(radius))
    span = np.arange(-r, r + 1)
    dx, dz = np.meshgrid(span, span, indexing='ij')
    dist = np.hypot(dx, dz)
    mask = dist <= radius
    return [(int(a), int(b), float(d)) for a, b, d in zip(dx[mask], dz[mask], dist[mask])]
