from results import Room
from shapes import carve_box, carve_doorway, extrude_corridor, place_chest, place_spawner
from util import HORIZONTAL, DIRECTIONS, Coordinate, option_int, option_size

# outer shell (width, height, depth)
DUNGEON_SIZES = {'small': (7, 5, 7), 'medium': (9, 6, 9), 'large': (11, 6, 11)}

DUNGEON_MOBS = ('zombie', 'skeleton', 'spider')


def generate_dungeon(ctx, position, options):
    """
    Mossy cobblestone room around a mob spawner with one or two chests
    against the walls, opened on one side by a short tunnel that ends at
    the structure entrance.
    """
    ctx.palette = ctx.style('dungeon')
    size = option_size(options)
    width, height, depth = DUNGEON_SIZES[size]
    mob = options.get('type', options.get('entityType', 'zombie'))
    if mob not in DUNGEON_MOBS:
        mob = 'zombie'
    tunnel = option_int(options, 'tunnel', 4, 2, 12)

    x, y, z = position
    origin = Coordinate(x - width // 2, y, z - depth // 2)
    carve_box(ctx, origin, width, height, depth, 'wall', floor='floor')

    side = ctx.rng.choice(HORIZONTAL)
    ux, _, uz = DIRECTIONS[side]
    walk_y = y + 1
    # doorway sits in the middle of the chosen wall
    door = Coordinate(x + ux * (width // 2), walk_y, z + uz * (depth // 2))
    end = Coordinate(door.x + ux * tunnel, walk_y, door.z + uz * tunnel)
    extrude_corridor(ctx, door, end, width=1, light=None)
    carve_doorway(ctx, door, axis='x' if ux else 'z')
    ctx.entrance = end

    place_spawner(ctx, (x, walk_y, z), mob)

    spots = []
    for dx in range(1, width - 1):
        for dz in range(1, depth - 1):
            if dx in (1, width - 2) or dz in (1, depth - 2):
                c = Coordinate(origin.x + dx, walk_y, origin.z + dz)
                if not ctx.is_protected(c) and (c.x, c.z) != (x, z):
                    spots.append(c)
    chests = ctx.rng.next_int(1, 2)
    for c in ctx.rng.sample(spots, chests):
        if c.x == origin.x + 1:
            facing = 'east'
        elif c.x == origin.x + width - 2:
            facing = 'west'
        elif c.z == origin.z + 1:
            facing = 'south'
        else:
            facing = 'north'
        place_chest(ctx, c, loot='dungeon', facing=facing)

    ctx.add_room(Room('dungeon', origin, (width, height, depth), doorways=[door],
                      tags={'spawner': mob}))
    return ctx.result(mob=mob)
