import config
from results import Room
from shapes import carve_box, carve_cylinder, carve_doorway, find_floor

# (dx, dz, tier) of the guardian chambers, relative to the monument centre
CHAMBERS = ((-5, -5, 1), (5, -5, 4), (0, 5, 7))


def _chamber_door(cx, cz, ax, az, ty):
    """Doorway in the chamber wall that faces the monument centre."""
    if cz == az:
        return (cx - 3 if cx > ax else cx + 3, ty + 1, cz), 'x'
    if cx == ax:
        return (cx, ty + 1, cz - 3 if cz > az else cz + 3), 'z'
    return (cx + 3 if cx < ax else cx - 3, ty + 1, cz), 'x'


def generate_ocean_monument(ctx, position, options):
    """
    21x18x21 prismarine monument: solid base, windowed walls, roof with
    corner spires and a central dome. The inside is flooded; three walled
    guardian chambers on different tiers each hold an elder guardian and
    six guardians roam the main hall.
    """
    pal = ctx.palette = ctx.style('ocean_monument')
    width, height, depth = getattr(config, 'MONUMENT_SIZE', (21, 18, 21))
    ax, y, az = position
    y = find_floor(ctx.reader, position)
    y = min(y, getattr(config, 'WATER_LEVEL', 63) - height)
    x0, z0 = ax - width // 2, az - depth // 2
    fluid = pal['fluid']
    shell_h = 13

    hall = Room('hall', (x0, y, z0), (width, shell_h, depth))
    carve_box(ctx, hall.origin, width, shell_h, depth, 'wall', floor='base', ceiling='accent',
              interior=fluid)
    # window bands
    for wy in (y + 4, y + 8):
        for i in range(1, width - 1, 3):
            ctx.put((x0 + i, wy, z0), 'light')
            ctx.put((x0 + i, wy, z0 + depth - 1), 'light')
        for i in range(1, depth - 1, 3):
            ctx.put((x0, wy, z0 + i), 'light')
            ctx.put((x0 + width - 1, wy, z0 + i), 'light')
    # corner spires
    roof_y = y + shell_h - 1
    for sx in (x0, x0 + width - 1):
        for sz in (z0, z0 + depth - 1):
            for dy in range(1, 4):
                ctx.put((sx, roof_y + dy, sz), 'accent')
            ctx.put((sx, roof_y + 4, sz), 'light')
    dome_h = height - shell_h + 1
    carve_cylinder(ctx, (ax, roof_y, az), 4, dome_h, 'wall', floor='accent', ceiling='light',
                   interior=fluid)
    dome = Room('dome', (ax - 4, roof_y, az - 4), (9, dome_h, 9))

    chambers = []
    for dx, dz, tier in CHAMBERS:
        cx, cz = ax + dx, az + dz
        ty = y + tier
        room = Room('guardian_chamber', (cx - 3, ty, cz - 3), (7, 5, 7), tags={'tier': tier})
        carve_box(ctx, room.origin, 7, 5, 7, 'accent', floor='base', ceiling='accent', interior=fluid)
        ctx.put((cx, ty, cz), 'gold')
        for sx, sz in ((cx - 2, cz - 2), (cx + 2, cz + 2)):
            ctx.put((sx, ty + 3, sz), 'sponge')
        chambers.append(room)

    # doorways
    entrance = carve_doorway(ctx, (ax, y + 1, z0), height=3, fill=fluid, axis='z')
    dome_door = carve_doorway(ctx, (ax, roof_y, az), height=1, fill=fluid, axis='y')
    ctx.add_room(Room('hall', hall.origin, hall.size, doorways=[entrance, dome_door]))
    ctx.add_room(Room('dome', dome.origin, dome.size, doorways=[dome_door]))
    for room in chambers:
        cx, cz = room.origin.x + 3, room.origin.z + 3
        door, axis = _chamber_door(cx, cz, ax, az, room.origin.y)
        d = carve_doorway(ctx, door, fill=fluid, axis=axis)
        ctx.add_room(Room(room.kind, room.origin, room.size, tags=room.tags, doorways=[d]))
        ctx.spawn('elder_guardian', room.center.offset(dy=1))

    # guardians roam the hall outside the chambers
    placed = 0
    attempts = 0
    count = getattr(config, 'MONUMENT_GUARDIANS', 6)
    while placed < count and attempts < count * 20:
        attempts += 1
        gx = ctx.rng.next_int(x0 + 1, x0 + width - 2)
        gy = ctx.rng.next_int(y + 1, roof_y - 1)
        gz = ctx.rng.next_int(z0 + 1, z0 + depth - 2)
        if any(r.contains((gx, gy, gz)) for r in chambers):
            continue
        ctx.spawn('guardian', (gx, gy, gz))
        placed += 1

    ctx.entrance = entrance
    return ctx.result(fluid=fluid.type)
