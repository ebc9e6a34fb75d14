"""
Villages.

A centre piece (well or meeting point) sits on the anchor. The remaining
buildings go on concentric rings: ring r has radius r * VILLAGE_RING_SPACING
and holds up to 8r buildings at equal angles with a little jitter. A plot
that collides with an earlier one is pushed further out along its bearing.
Every building faces the centre, is joined to it by an L-shaped road, and
may get a second road to its closest unconnected neighbour.
"""
import math

import config
import logutil
from blocks import Block
from palettes import VILLAGE_STYLES
from results import Corridor, Room
from shapes import carve_box, carve_doorway, fill_box, find_floor
from util import Coordinate, OPPOSITE, distance_xz, facing_toward, option_choice, rotate_offset

# type: (weight, (width, depth) facing south, wall height, beds, workstation, professions)
BUILDINGS = {
    'house_small': (3, (5, 5), 3, 1, None, ('nitwit', 'librarian', 'butcher')),
    'house_medium': (2, (7, 7), 3, 2, None, ('farmer', 'shepherd', 'fletcher')),
    'blacksmith': (1, (7, 7), 3, 1, 'smithing_table', ('armorer', 'weaponsmith', 'toolsmith')),
    'farm': (2, (9, 9), 0, 0, 'composter', ('farmer',)),
    'library': (1, (9, 7), 4, 1, 'lectern', ('librarian',)),
    'church': (1, (7, 9), 5, 1, 'brewing_stand', ('cleric',)),
    'butcher_shop': (1, (7, 7), 3, 1, 'smoker', ('butcher',)),
}

BUILDING_WEIGHTS = [(name, spec[0]) for name, spec in BUILDINGS.items()]


class Plot(object):
    """One building's footprint, facing and derived cells."""

    def __init__(self, kind, cx, cz, y, facing):
        _, (w, d), height, beds, workstation, professions = BUILDINGS[kind]
        self.kind = kind
        self.cx, self.cz, self.y = cx, cz, y
        self.facing = facing
        self.height = height
        self.beds = beds
        self.workstation = workstation
        self.professions = professions
        if facing in ('east', 'west'):
            w, d = d, w
        self.w, self.d = w, d
        self.x0 = cx - w // 2
        self.z0 = cz - d // 2
        self.x1 = self.x0 + w - 1
        self.z1 = self.z0 + d - 1
        self.door = None
        self.bed_cells = []
        self.workstation_cell = None

    def cell(self, dx, dz, dy=0):
        """World cell for an offset authored with the door on the +z wall."""
        rx, rz = rotate_offset(dx, dz, self.facing)
        return Coordinate(self.cx + rx, self.y + dy, self.cz + rz)

    @property
    def half(self):
        w, d = BUILDINGS[self.kind][1]
        return w // 2, d // 2

    def front(self):
        """Road cell just outside the door."""
        hw, hd = self.half
        return self.cell(0, hd + 1)

    def contains_xz(self, x, z):
        return self.x0 <= x <= self.x1 and self.z0 <= z <= self.z1


def _building_count(ctx, options):
    lo, hi = 2, getattr(config, 'VILLAGE_MAX_BUILDINGS', 24)
    value = options.get('size')
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        return max(lo, min(hi, int(value)))
    sizes = getattr(config, 'VILLAGE_SIZE', {'small': 4, 'medium': 8, 'large': 12})
    if isinstance(value, str) and value.lower() in sizes:
        return sizes[value.lower()]
    return ctx.rng.next_int(4, 12)


def _plan(ctx, center, y, count):
    spacing = getattr(config, 'VILLAGE_RING_SPACING', 16)
    jitter = getattr(config, 'VILLAGE_ANGLE_JITTER', 0.1)
    plots = []
    remaining = count - 1
    ring = 1
    while remaining > 0:
        n = min(remaining, ring * 8)
        step = 2 * math.pi / n
        for i in range(n):
            angle = i * step + ctx.rng.next_float(-jitter, jitter)
            kind = ctx.rng.weighted_choice(BUILDING_WEIGHTS)
            radius = ring * spacing
            for _attempt in range(32):
                bx = center.x + int(round(math.sin(angle) * radius))
                bz = center.z + int(round(math.cos(angle) * radius))
                plot = Plot(kind, bx, bz, y, facing_toward((bx, y, bz), center))
                if ctx.reserve('building', plot.x0, plot.z0, plot.x1, plot.z1):
                    plots.append(plot)
                    break
                radius += 2
            else:
                logutil.log("VILLAGE", f"no room for {kind} on ring {ring}", "DEBUG")
        remaining -= n
        ring += 1
    return plots


def _centre(ctx, center, y):
    well = ctx.rng.chance(getattr(config, 'VILLAGE_WELL_CHANCE', 0.7))
    x, z = center.x, center.z
    if well:
        fill_box(ctx, (x - 2, y - 3, z - 2), (x + 2, y - 1, z + 2), 'foundation')
        fill_box(ctx, (x - 1, y - 2, z - 1), (x + 1, y - 1, z + 1), 'water')
        for dx in range(-2, 3):
            for dz in range(-2, 3):
                if abs(dx) == 2 or abs(dz) == 2:
                    ctx.put((x + dx, y, z + dz), 'foundation')
        for dx, dz in ((-2, -2), (2, -2), (-2, 2), (2, 2)):
            for dy in (1, 2):
                ctx.put((x + dx, y + dy, z + dz), 'fence')
        fill_box(ctx, (x - 2, y + 3, z - 2), (x + 2, y + 3, z + 2), 'slab')
        kind = 'well'
    else:
        fill_box(ctx, (x - 2, y - 1, z - 2), (x + 2, y - 1, z + 2), 'path')
        ctx.set((x, y, z), Block('bell', {'attachment': 'floor'}))
        for dx, dz in ((-2, -2), (2, -2), (-2, 2), (2, 2)):
            ctx.put((x + dx, y, z + dz), 'fence')
            ctx.put((x + dx, y + 1, z + dz), 'light')
        kind = 'meeting_point'
    return Room(kind, (x - 2, y - 1, z - 2), (5, 5 if well else 3, 5), tags={'center': True})


def _build_house(ctx, plot):
    hw, hd = plot.half
    h = plot.height
    carve_box(ctx, (plot.x0, plot.y - 1, plot.z0), plot.w, h + 2, plot.d, 'planks',
              floor='foundation', ceiling='planks')
    for x in (plot.x0, plot.x1):
        for z in (plot.z0, plot.z1):
            for dy in range(h):
                ctx.put((x, plot.y + dy, z), 'log')
    # roof
    roof_y = plot.y + h + 1
    for x in range(plot.x0, plot.x1 + 1):
        for z in range(plot.z0, plot.z1 + 1):
            rim = x in (plot.x0, plot.x1) or z in (plot.z0, plot.z1)
            ctx.put((x, roof_y, z), 'roof' if rim else 'slab')
    # windows on the side walls
    for side in (-hw, hw):
        ctx.put(plot.cell(side, 0, 1), 'glass')
    ctx.put(plot.cell(0, -hd, 1), 'glass')
    ctx.put(plot.cell(0, 0, h - 1), 'light')

    beds = []
    for i in range(plot.beds):
        c = plot.cell(-hw + 1 if i == 0 else hw - 1, -hd + 1)
        ctx.set(c, ctx.resolve('bed').with_metadata(facing=OPPOSITE[plot.facing], part='head'))
        beds.append(c)
    plot.bed_cells = beds
    if plot.workstation:
        c = plot.cell(0, -hd + 1)
        ctx.set(c, Block(plot.workstation, {'facing': plot.facing}))
        plot.workstation_cell = c
    if plot.kind == 'library':
        for dz in range(-hd + 1, hd - 1):
            ctx.set(plot.cell(hw - 1, dz), Block('bookshelf'))
    elif plot.kind == 'blacksmith':
        ctx.set(plot.cell(hw - 1, 0), Block('anvil', {'facing': plot.facing}))
    elif plot.kind == 'church':
        ctx.set(plot.cell(1, -hd + 1), Block('bell', {'attachment': 'floor'}))

    door_block = ctx.resolve('door').with_metadata(facing=plot.facing)
    plot.door = carve_doorway(ctx, plot.cell(0, hd), fill=door_block,
                              axis='z' if plot.facing in ('north', 'south') else 'x')


def _build_farm(ctx, plot):
    hw, hd = plot.half
    for x in range(plot.x0, plot.x1 + 1):
        for z in range(plot.z0, plot.z1 + 1):
            rim = x in (plot.x0, plot.x1) or z in (plot.z0, plot.z1)
            if rim:
                ctx.put((x, plot.y - 1, z), 'foundation')
                ctx.put((x, plot.y, z), 'fence')
    for dx in range(-hw + 1, hw):
        for dz in range(-hd + 1, hd):
            soil = plot.cell(dx, dz, -1)
            if dz == 0:
                ctx.put(soil, 'water')
                continue
            ctx.set(soil, ctx.resolve('farmland').with_metadata(moisture=7))
            ctx.set(soil.offset(dy=1), ctx.resolve('crop').with_metadata(age=ctx.rng.next_int(0, 7)))
    c = plot.cell(hw - 1, hd - 1)
    ctx.set(c.offset(dy=-1), ctx.resolve('foundation'))
    ctx.set(c, Block(plot.workstation))
    plot.workstation_cell = c
    plot.door = carve_doorway(ctx, plot.cell(0, hd), axis='z' if plot.facing in ('north', 'south') else 'x')


def _road(ctx, a, b, y, footprints):
    """L-shaped 3-wide road from a to b (x leg first); footprints are left alone."""
    legs = []
    corner = Coordinate(b[0], y, a[2])
    if corner.x != a[0]:
        legs.append(Corridor((a[0], y, a[2]), corner, 3))
    if corner.z != b[2]:
        legs.append(Corridor(corner, (b[0], y, b[2]), 3))
    for leg in legs:
        for c in leg.cells():
            for lat in (-1, 0, 1):
                if leg.direction in ('east', 'west'):
                    x, z = c.x, c.z + lat
                else:
                    x, z = c.x + lat, c.z
                if any(f(x, z) for f in footprints):
                    continue
                ctx.put((x, y - 1, z), 'path')
    ctx.roads.extend(legs)
    return legs


def _villagers(ctx, plot, village_id):
    if plot.beds < 1:
        return 0
    inside = plot.cell(0, 0)
    ws = plot.workstation_cell.to_dict() if plot.workstation_cell is not None else None
    bed = plot.bed_cells[0]
    ctx.spawn('villager', inside, profession=ctx.rng.choice(plot.professions),
              level=ctx.rng.next_int(1, 3), isChild=False, homePosition=bed.to_dict(),
              villageId=village_id, workstation=ws, bedPosition=bed.to_dict())
    spawned = 1
    if plot.beds >= 2 and ctx.rng.chance(getattr(config, 'VILLAGE_CHILD_CHANCE', 0.3)):
        bed = plot.bed_cells[1]
        ctx.spawn('villager', inside, profession=ctx.rng.choice(plot.professions),
                  level=1, isChild=True, homePosition=bed.to_dict(),
                  villageId=village_id, workstation=ws, bedPosition=bed.to_dict())
        spawned += 1
    return spawned


def generate_village(ctx, position, options):
    biome = option_choice(options, 'biome', tuple(VILLAGE_STYLES), 'plains')
    ctx.palette = ctx.style('village:' + biome)
    village_id = ctx.rng.uuid()
    count = _building_count(ctx, options)
    y = find_floor(ctx.reader, position)
    center = Coordinate(position[0], y, position[2])

    ctx.reserve('centre', center.x - 2, center.z - 2, center.x + 2, center.z + 2)
    plots = _plan(ctx, center, y, count)
    centre_room = _centre(ctx, center, y)
    ctx.add_room(centre_room)

    for plot in plots:
        if plot.kind == 'farm':
            _build_farm(ctx, plot)
        else:
            _build_house(ctx, plot)

    footprints = [plot.contains_xz for plot in plots]
    footprints.append(lambda x, z: abs(x - center.x) <= 2 and abs(z - center.z) <= 2)
    for plot in plots:
        _road(ctx, plot.front(), center, y, footprints)

    # links to the closest unconnected neighbour
    link_distance = getattr(config, 'VILLAGE_LINK_DISTANCE', 30)
    link_chance = getattr(config, 'VILLAGE_LINK_CHANCE', 0.7)
    linked = set()
    links = 0
    for i, plot in enumerate(plots):
        best = None
        for j, other in enumerate(plots):
            if i == j or (min(i, j), max(i, j)) in linked:
                continue
            dist = distance_xz((plot.cx, y, plot.cz), (other.cx, y, other.cz))
            if dist < link_distance and (best is None or dist < best[0]):
                best = (dist, j)
        if best is None:
            continue
        if ctx.rng.chance(link_chance):
            j = best[1]
            linked.add((min(i, j), max(i, j)))
            _road(ctx, plot.front(), plots[j].front(), y, footprints)
            links += 1

    villagers = 0
    for plot in plots:
        villagers += _villagers(ctx, plot, village_id)
        tags = {
            'professions': list(plot.professions),
            'workstation': plot.workstation_cell.to_dict() if plot.workstation_cell else None,
            'beds': [b.to_dict() for b in plot.bed_cells],
            'facing': plot.facing,
        }
        height = plot.height + 3 if plot.height else 2
        ctx.add_room(Room(plot.kind, (plot.x0, y - 1, plot.z0), (plot.w, height, plot.d),
                          tags=tags, doorways=[plot.door]))

    ctx.entrance = Coordinate(center.x, y, center.z + 3)
    return ctx.result(villageId=village_id, biome=biome, style=ctx.palette.name,
                      buildings=len(plots) + 1, villagers=villagers, links=links)
