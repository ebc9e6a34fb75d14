from results import Room
from shapes import carve_box, carve_doorway, fill_box, place_chest
from util import Coordinate


def generate_desert_temple(ctx, position, options):
    """
    Sandstone temple: a 21x21 hall under a stepped cap with a terracotta
    floor star. A shaft under the centre of the hall drops into a hidden
    treasure chamber whose pressure plate is wired to nine TNT below it.
    """
    pal = ctx.palette = ctx.style('desert_temple')
    ax, y, az = position
    x0, z0 = ax - 10, az - 10

    hall = Room('hall', (x0, y, z0), (21, 10, 21))
    carve_box(ctx, hall.origin, 21, 10, 21, 'wall', floor='floor')
    # stepped cap
    for k in range(1, 5):
        fill_box(ctx, (x0 + 2 * k, y + 9 + k, z0 + 2 * k), (x0 + 20 - 2 * k, y + 9 + k, z0 + 20 - 2 * k),
                 'wall' if k % 2 else 'accent')
    # corner towers
    for tx, tz in ((x0 - 2, z0 - 2), (x0 + 17, z0 - 2)):
        fill_box(ctx, (tx, y, tz), (tx + 5, y + 11, tz + 5), 'wall')
        fill_box(ctx, (tx, y + 12, tz), (tx + 5, y + 12, tz + 5), 'chiseled')
        for ty in (y + 3, y + 7, y + 11):
            for d in range(1, 5):
                ctx.put((tx + d, ty, tz), 'terracotta')
                ctx.put((tx, ty, tz + d), 'terracotta')
    # pillars
    for dx in (-5, 5):
        for dz in (-5, 5):
            for dy in range(1, 9):
                ctx.put((ax + dx, y + dy, az + dz), 'accent')
    # floor star
    for dx in range(-3, 4):
        for dz in range(-3, 4):
            if abs(dx) == abs(dz) or dx == 0 or dz == 0:
                ctx.put((ax + dx, y, az + dz), 'terracotta')
    ctx.put((ax, y, az), 'centre')
    # front steps
    for dx in (-1, 0, 1):
        ctx.set((ax + dx, y, z0 - 1), pal['stairs'].with_metadata(facing='south'))

    # hidden chamber
    chamber = Room('treasure_room', (ax - 4, y - 13, az - 4), (9, 6, 9))
    carve_box(ctx, chamber.origin, 9, 6, 9, 'wall', floor='floor')
    for dy in range(-7, 0):
        for dx in (-1, 0, 1):
            for dz in (-1, 0, 1):
                if dx or dz:
                    ctx.put((ax + dx, y + dy, az + dz), 'wall')
    trap_floor = y - 13
    for dx in (-1, 0, 1):
        for dz in (-1, 0, 1):
            ctx.put((ax + dx, trap_floor - 1, az + dz), 'trap')
            ctx.put((ax + dx, trap_floor - 2, az + dz), 'wall')
    walk = trap_floor + 1
    for (cx, cz), facing in (((ax, az - 3), 'south'), ((ax, az + 3), 'north'),
                             ((ax - 3, az), 'east'), ((ax + 3, az), 'west')):
        place_chest(ctx, (cx, walk, cz), loot='desert_pyramid', facing=facing)

    # doorways last: front entrance and the shaft into the chamber
    door = carve_doorway(ctx, (ax, y + 1, z0), height=3, axis='z')
    shaft = carve_doorway(ctx, (ax, y - 8, az), height=9, axis='y')
    ctx.set((ax, walk, az), pal['plate'])

    ctx.add_room(Room('hall', hall.origin, hall.size, doorways=[door, shaft]))
    ctx.add_room(Room('treasure_room', chamber.origin, chamber.size, doorways=[shaft],
                      tags={'trap': 'tnt'}))
    ctx.entrance = door
    return ctx.result()


def generate_jungle_temple(ctx, position, options):
    """
    Mossy cobblestone temple. The front hall hides a chest under a lever
    puzzle; the back hall is crossed by a tripwire wired to a dispenser of
    arrows, with the second chest beyond it.
    """
    pal = ctx.palette = ctx.style('jungle_temple')
    ax, y, az = position
    x0, z0 = ax - 6, az - 7
    width, height, depth = 12, 7, 15

    carve_box(ctx, (x0, y, z0), width, height, depth, 'wall', floor='floor')
    split = z0 + 7
    for dx in range(1, width - 1):
        for dy in range(1, height - 1):
            ctx.put((x0 + dx, y + dy, split), 'wall')
    # roof
    fill_box(ctx, (x0 + 1, y + height, z0 + 1), (x0 + width - 2, y + height, z0 + depth - 2), 'wall')
    for dx in range(3, width - 3):
        for dz in range(3, depth - 3):
            edge = dx in (3, width - 4) or dz in (3, depth - 4)
            ctx.put((x0 + dx, y + height + 1, z0 + dz), 'accent' if edge else 'wall')

    # lever puzzle with a chest under the floor in front of it
    levers = []
    for i, dz in enumerate((2, 3, 4)):
        c = Coordinate(x0 + 1, y + 2, z0 + dz)
        ctx.set(c, pal['lever'].with_metadata(facing='east', powered=False, index=i))
        levers.append(c)
    ctx.set((x0 + 1, y + 1, z0 + 3), pal['piston'].with_metadata(facing='up'))
    place_chest(ctx, (x0 + 2, y, z0 + 3), loot='jungle_temple', hidden=True)

    # tripwire trap
    trip_z = split + 3
    ctx.set((x0 + 1, y + 1, trip_z), pal['hook'].with_metadata(facing='east', attached=True))
    ctx.set((x0 + width - 2, y + 1, trip_z), pal['hook'].with_metadata(facing='west', attached=True))
    for dx in range(2, width - 2):
        ctx.set((x0 + dx, y + 1, trip_z), pal['tripwire'].with_metadata(attached=True))
    for dz in range(trip_z + 1, z0 + depth - 1):
        ctx.put((x0 + width - 2, y + 1, dz), 'wire')
    arrows = ctx.rng.next_int(2, 8)
    dispenser = pal['dispenser'].with_metadata(facing='north', items=[{'type': 'arrow', 'count': arrows}])
    ctx.set((ax, y + 1, z0 + depth - 1), dispenser)
    place_chest(ctx, (x0 + 1, y + 1, z0 + depth - 2), loot='jungle_temple', facing='east')

    front = Room('hall', (x0, y, z0), (width, height, split - z0 + 1))
    back = Room('trap_hall', (x0, y, split), (width, height, z0 + depth - split))
    door = carve_doorway(ctx, (ax, y + 1, z0), axis='z')
    inner = carve_doorway(ctx, (ax, y + 1, split), axis='z')

    # vines down the outer walls
    for dz in range(depth):
        for wx in (x0 - 1, x0 + width):
            if ctx.rng.chance(0.25):
                for dy in range(1, ctx.rng.next_int(2, height)):
                    ctx.put((wx, y + height - dy, z0 + dz), 'vine')

    ctx.add_room(Room('hall', front.origin, front.size, doorways=[door, inner],
                      tags={'levers': len(levers)}))
    ctx.add_room(Room('trap_hall', back.origin, back.size, doorways=[inner], tags={'trap': 'dispenser'}))
    ctx.entrance = door
    return ctx.result(arrows=arrows)
