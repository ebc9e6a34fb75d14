import math

from blocks import Block
from results import Room
from shapes import (carve_box, carve_doorway, edge_factor, fill_box, find_floor,
                    height_factor, place_chest)
from util import Coordinate, option_choice, option_degradation, option_int, option_size


def generate_desert_well(ctx, position, options):
    """5x5 sandstone well: slab rim, walled basin, water shaft, four posts and a slab roof."""
    ctx.palette = ctx.style('desert_well')
    x, y, z = position
    # foundation and shaft
    for dx in range(-2, 3):
        for dz in range(-2, 3):
            for dy in range(-4, 0):
                if dx == 0 and dz == 0:
                    ctx.put((x, y + dy, z), 'fluid')
                else:
                    ctx.put((x + dx, y + dy, z + dz), 'wall')
    for dx in range(-2, 3):
        for dz in range(-2, 3):
            ring = max(abs(dx), abs(dz))
            c = (x + dx, y, z + dz)
            if ring == 2:
                ctx.put(c, 'base')
            elif ring == 1:
                ctx.put(c, 'wall')
            else:
                ctx.put(c, 'fluid')
    for dx in (-1, 1):
        for dz in (-1, 1):
            for dy in (1, 2):
                ctx.put((x + dx, y + dy, z + dz), 'post')
    fill_box(ctx, (x - 1, y + 3, z - 1), (x + 1, y + 3, z + 1), 'roof')
    return ctx.result(water=Coordinate(x, y, z).to_dict())


def generate_boulder_pile(ctx, position, options):
    count = option_int(options, 'count', 5, 1, 16)
    material = options.get('material')
    pal = ctx.palette = ctx.style('boulder')
    stone = Block(material) if isinstance(material, str) and material else None
    x, y, z = position
    for _ in range(count):
        bx = x + ctx.rng.next_int(-4, 4)
        bz = z + ctx.rng.next_int(-4, 4)
        r = ctx.rng.next_int(1, 2)
        by = y + r - 1
        for dx in range(-r, r + 1):
            for dy in range(-r, r + 1):
                for dz in range(-r, r + 1):
                    if dx * dx + dy * dy + dz * dz > r * r + 0.5:
                        continue
                    if by + dy < y:
                        continue
                    ctx.put((bx + dx, by + dy, bz + dz), stone or 'stone', pal)
    return ctx.result(count=count)


def generate_fallen_tree(ctx, position, options):
    length = option_int(options, 'length', 5, 3, 12)
    variant = option_choice(options, 'variant', ('oak', 'birch'), None)
    if variant is None:
        variant = ctx.rng.choice(('oak', 'birch'))
    pal = ctx.palette = ctx.style('fallen_tree:' + variant)
    x, y, z = position
    axis = ctx.rng.choice(('x', 'z'))
    sign = ctx.rng.choice((-1, 1))
    # stump
    stump_h = ctx.rng.next_int(1, 2)
    for dy in range(stump_h):
        ctx.set((x, y + dy, z), pal['log'].with_metadata(axis='y'))
    log = pal['log'].with_metadata(axis=axis)
    for i in range(length):
        step = (i + 2) * sign
        c = (x + step, y, z) if axis == 'x' else (x, y, z + step)
        ctx.set(c, log)
        if ctx.rng.chance(0.3):
            ctx.put((c[0], y + 1, c[2]), 'decor')
    return ctx.result(variant=variant, length=length)


def generate_witch_hut(ctx, position, options):
    """Swamp hut on four stilts with a porch; houses a witch and her cat."""
    pal = ctx.palette = ctx.style('witch_hut')
    x, base_y, z = position
    x0, z0 = x - 3, z - 4
    floor_y = base_y + 3
    for sx in (x0 + 1, x0 + 5):
        for sz in (z0 + 1, z0 + 7):
            ground = find_floor(ctx.reader, (sx, base_y, sz))
            for sy in range(min(ground, base_y), floor_y):
                ctx.put((sx, sy, sz), 'stilt')
    # porch
    for dx in range(1, 6):
        for dz in range(0, 2):
            ctx.put((x0 + dx, floor_y, z0 + dz), 'planks')
            for dy in (1, 2):
                ctx.clear((x0 + dx, floor_y + dy, z0 + dz))
    for dz in range(0, 2):
        ctx.put((x0 + 1, floor_y + 1, z0 + dz), 'fence')
        ctx.put((x0 + 5, floor_y + 1, z0 + dz), 'fence')
    room = Room('hut', (x0 + 1, floor_y, z0 + 2), (5, 5, 7))
    carve_box(ctx, room.origin, 5, 5, 7, 'planks')
    door = carve_doorway(ctx, (x0 + 3, floor_y + 1, z0 + 2), axis='z')
    for wz in (z0 + 4, z0 + 6):
        ctx.put((x0 + 1, floor_y + 2, wz), 'glass')
        ctx.put((x0 + 5, floor_y + 2, wz), 'glass')
    # roof
    roof_y = floor_y + 5
    for dx in range(0, 7):
        for dz in range(0, 9):
            if dx in (0, 6):
                ctx.set((x0 + dx, roof_y - 1, z0 + dz),
                        pal['roof_edge'].with_metadata(facing='east' if dx == 0 else 'west'))
            else:
                ctx.put((x0 + dx, roof_y, z0 + dz), 'roof')
    ctx.put((x0 + 2, floor_y + 1, z0 + 6), 'cauldron')
    ctx.put((x0 + 4, floor_y + 1, z0 + 7), 'table')
    ctx.put((x0 + 4, floor_y + 1, z0 + 6), 'shelf')
    ctx.put((x0 + 2, floor_y + 1, z0 + 7), 'pot')
    ctx.add_room(Room('hut', room.origin, room.size, doorways=[door]))
    ctx.entrance = Coordinate(x0 + 3, floor_y + 1, z0)
    ctx.spawn('witch', (x0 + 3, floor_y + 1, z0 + 4), persistent=True)
    ctx.spawn('black_cat', (x0 + 3, floor_y + 1, z0 + 5), persistent=True)
    return ctx.result()


_RUIN_SIZES = {'small': (5, 4, 5), 'medium': (7, 5, 7), 'large': (9, 5, 9)}


def generate_small_ruin(ctx, position, options):
    """
    Crumbling walled enclosure. Foundation decays at half the rate of the
    walls; wall blocks go faster toward the top and the corners.
    """
    size = option_size(options)
    decay = option_degradation(options, 0.5, 'ruinLevel', 'decay')
    material = options.get('material')
    pal = ctx.style('small_ruin')
    if isinstance(material, str) and material:
        pal = pal.with_overrides(wall=material, floor=material)
    ctx.palette = pal
    width, height, depth = _RUIN_SIZES[size]
    x, y, z = position
    x0, z0 = x - width // 2, z - depth // 2
    x1, z1 = x0 + width - 1, z0 + depth - 1
    for dx in range(width):
        for dz in range(depth):
            c = (x0 + dx, y, z0 + dz)
            edge = edge_factor(c[0], c[2], x0, z0, x1, z1)
            ctx.place_decayed(c, 'floor', decay * 0.5, edge=edge * 0.5)
    door = Coordinate(x, y + 1, z0)
    for dy in range(1, height):
        hf = height_factor(dy, 0, height)
        for dx in range(width):
            for dz in range(depth):
                if dx not in (0, width - 1) and dz not in (0, depth - 1):
                    continue
                c = (x0 + dx, y + dy, z0 + dz)
                corner = 1.0 if dx in (0, width - 1) and dz in (0, depth - 1) else 0.5
                ctx.place_decayed(c, 'wall', decay, edge=corner, height=hf)
    # windows on the side walls
    ctx.clear((x0, y + 2, z))
    ctx.clear((x1, y + 2, z))
    carve_doorway(ctx, door, axis='z')
    for dx in range(1, width - 1):
        for dz in range(1, depth - 1):
            for dy in range(1, height):
                c = (x0 + dx, y + dy, z0 + dz)
                if not ctx.is_protected(c):
                    ctx.clear(c)
    debris = ctx.rng.next_int(2, 4 + width // 2)
    for _ in range(debris):
        c = (ctx.rng.next_int(x0 + 1, x1 - 1), y + 1, ctx.rng.next_int(z0 + 1, z1 - 1))
        ctx.place_decayed(c, 'debris', decay, salt='debris')
    ctx.add_room(Room('ruin', (x0, y, z0), (width, height, depth), doorways=[door]))
    ctx.entrance = door
    return ctx.result(degradation=decay, material=pal['wall'].type)


def _in_l(dx, dz):
    return (0 <= dx < 7 and 0 <= dz < 4) or (0 <= dx < 4 and 0 <= dz < 9)


def generate_ocean_ruins(ctx, position, options):
    """
    L-shaped sunken ruin on the sea floor. Warm ruins are sandstone with
    coral, cold ones stone brick with seagrass.
    """
    style = option_choice(options, 'style', ('warm', 'cold'), None)
    if style is None:
        style = 'warm' if ctx.rng.chance(0.5) else 'cold'
    decay = option_degradation(options, 0.3)
    pal = ctx.palette = ctx.style('ocean_ruins:' + style)
    x, y, z = position
    y = find_floor(ctx.reader, (x, y, z))
    x0, z0 = x - 3, z - 4
    wall_h = ctx.rng.next_int(2, 3)
    for dx in range(7):
        for dz in range(9):
            if not _in_l(dx, dz):
                continue
            c = (x0 + dx, y, z0 + dz)
            ctx.place_decayed(c, 'floor', decay * 0.5, edge=edge_factor(dx, dz, 0, 0, 6, 8) * 0.5)
            outline = any(not _in_l(dx + ox, dz + oz) for ox, oz in ((1, 0), (-1, 0), (0, 1), (0, -1)))
            for dy in range(1, wall_h + 1):
                cc = (x0 + dx, y + dy, z0 + dz)
                if outline:
                    ctx.place_decayed(cc, 'wall', decay, edge=edge_factor(dx, dz, 0, 0, 6, 8),
                                      height=height_factor(dy, 1, wall_h))
                else:
                    ctx.put(cc, 'fluid')
    door = carve_doorway(ctx, (x0 + 5, y + 1, z0), fill=pal['fluid'], axis='z')
    has_chest = ctx.rng.chance(0.4)
    chest_at = (x0 + 1, y + 1, z0 + 7)
    if has_chest:
        place_chest(ctx, chest_at, loot='ocean_ruins', waterlogged=True)
    for _ in range(ctx.rng.next_int(4, 8)):
        ang = ctx.rng.next_float(0, 2 * math.pi)
        dist = ctx.rng.next_float(5.5, 8.0)
        c = (int(round(x + math.cos(ang) * dist)), y + 1, int(round(z + math.sin(ang) * dist)))
        ctx.place_decayed(c, 'decor', decay, salt='decor')
    ctx.add_room(Room('ruin', (x0, y, z0), (7, wall_h + 1, 9), doorways=[door]))
    ctx.entrance = door
    return ctx.result(style=style, degradation=decay, waterlogged=True)
