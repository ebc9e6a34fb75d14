import math

from shapes import disc_offsets, place_chest
from util import Coordinate, option_bool, option_choice, option_degradation, option_size

# inner opening (width, height) of the frame
FRAME_SIZES = {'small': (2, 3), 'medium': (3, 4), 'large': (4, 5)}


def _frame_cells(w_in, h_in, angle):
    """
    Frame cells as {(u, dy, dz): (edge, height)} for a frame leaning back by
    `angle` radians. u runs along x, v up the frame.
    """
    cells = {}
    cu = (w_in + 1) / 2.0
    cv = (h_in + 1) / 2.0
    for u in range(w_in + 2):
        for v in range(h_in + 2):
            if u not in (0, w_in + 1) and v not in (0, h_in + 1):
                continue
            dy = int(round(v * math.cos(angle)))
            dz = int(round(v * math.sin(angle)))
            edge = max(abs(u - cu) / cu, abs(v - cv) / cv)
            cells[(u, dy, dz)] = (min(edge, 1.0), v / float(h_in + 1))
    return cells


def generate_ruined_portal(ctx, position, options):
    """
    Broken obsidian frame, possibly leaning, on a patchy stone (or
    blackstone) apron with netherrack, magma and fire. Decay bites hardest
    at the frame corners and the rim of the apron. Optionally buried under
    a decayed mound, optionally with a chest.
    """
    dimension = option_choice(options, 'dimension', ('overworld', 'nether'), 'overworld')
    pal = ctx.palette = ctx.style('ruined_portal:' + dimension)
    size = option_size(options)
    decay = option_degradation(options, 0.4, 'decay')
    w_in, h_in = FRAME_SIZES[size]

    tilted = option_bool(options, 'tilted')
    tilt_roll = ctx.rng.next()
    if tilted is None:
        tilted = tilt_roll < 0.3
    angle = ctx.rng.next_float(0.15, 0.35) if tilted else 0.0
    buried = option_bool(options, 'buried')
    bury_roll = ctx.rng.next()
    if buried is None:
        buried = bury_roll < 0.2
    has_chest = option_bool(options, 'has_chest')
    if has_chest is None:
        has_chest = option_bool(options, 'hasChest')
    chest_roll = ctx.rng.next()
    if has_chest is None:
        has_chest = chest_roll < 0.5

    ax, y0, az = position
    fx = ax - (w_in + 2) // 2
    radius = w_in + 3

    # apron with netherrack patches; patch centres always survive
    patches = []
    for _ in range(ctx.rng.next_int(2, 4)):
        patches.append((ax + ctx.rng.next_int(-radius + 1, radius - 1),
                        az + ctx.rng.next_int(-radius + 1, radius - 1)))
    for dx, dz, d in disc_offsets(radius):
        c = (ax + dx, y0, az + dz)
        near_patch = any(abs(c[0] - px) + abs(c[2] - pz) <= 1 for px, pz in patches)
        slot = 'patch' if near_patch else 'ground'
        if (c[0], c[2]) in patches:
            ctx.put(c, slot)
        else:
            ctx.place_decayed(c, slot, decay, edge=d / radius, salt='apron')
    for px, pz in patches:
        if ctx.rng.chance(0.5):
            ctx.put((px, y0 + 1, pz), 'fire')
    magma_spots = ctx.rng.next_int(1, 3)
    for i in range(magma_spots):
        mx = ax + ctx.rng.next_int(-radius + 2, radius - 2)
        mz = az + ctx.rng.next_int(-radius + 2, radius - 2)
        if dimension == 'nether' and i == 0:
            ctx.put((mx, y0, mz), 'magma')
        else:
            ctx.place_decayed((mx, y0, mz), 'magma', decay, salt='magma')
    if ctx.rng.chance(0.3):
        ctx.place_decayed((ax + ctx.rng.next_int(-2, 2), y0, az + radius - 1), 'gold', decay,
                          edge=1.0, salt='gold')

    # frame
    frame = _frame_cells(w_in, h_in, angle)
    occupied = set()
    for (u, dy, dz), (edge, height) in sorted(frame.items()):
        blk = pal['crying'] if ctx.rng.chance(0.15) else pal['frame']
        c = Coordinate(fx + u, y0 + 1 + dy, az + dz)
        occupied.add(c)
        # the bottom row carries the frame, so it only loses its corners
        base = decay if dy > 0 else decay * 0.5
        ctx.place_decayed(c, blk, base, edge=edge, height=height, salt='frame')

    top = max(dy for (_, dy, _) in frame) + 1
    if buried:
        for dx, dz, d in disc_offsets(radius):
            for dy in range(1, top + 1):
                c = Coordinate(ax + dx, y0 + dy, az + dz)
                if c in occupied:
                    continue
                ctx.place_decayed(c, 'overburden', decay, edge=d / radius,
                                  height=dy / float(top), salt='overburden')

    if has_chest:
        place_chest(ctx, (ax + radius - 2, y0 + 1, az + 1), loot='ruined_portal', facing='west')

    return ctx.result(dimension=dimension, tilted=bool(tilted), angle=round(math.degrees(angle), 2),
                      buried=bool(buried), hasChest=bool(has_chest), degradation=decay)
