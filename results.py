from types import MappingProxyType

from config import SECTOR_SIZE
from util import Coordinate, direction_between


def _coord_dict(c):
    return {'x': int(c[0]), 'y': int(c[1]), 'z': int(c[2])}


class Room(object):
    """
    An axis-aligned room. `origin` is the minimum corner and `size` is
    (width, height, depth) including the shell. Village rooms carry their
    professions, workstations and beds in `tags`; rooms that own a chest
    carry its metadata in `loot`.
    """
    __slots__ = ('kind', 'origin', 'size', 'tags', 'loot', 'doorways')

    def __init__(self, kind, origin, size, tags=None, loot=None, doorways=()):
        self.kind = kind
        self.origin = Coordinate(*origin)
        self.size = tuple(int(v) for v in size)
        self.tags = MappingProxyType(dict(tags or {}))
        self.loot = MappingProxyType(dict(loot)) if loot else None
        self.doorways = tuple(Coordinate(*d) for d in doorways)

    @property
    def width(self):
        return self.size[0]

    @property
    def height(self):
        return self.size[1]

    @property
    def depth(self):
        return self.size[2]

    @property
    def max_corner(self):
        return self.origin.offset(self.size[0] - 1, self.size[1] - 1, self.size[2] - 1)

    @property
    def center(self):
        """Floor-level centre of the walkable interior."""
        return Coordinate(self.origin.x + self.size[0] // 2,
                          self.origin.y + 1,
                          self.origin.z + self.size[2] // 2)

    def contains(self, coord):
        lo, hi = self.origin, self.max_corner
        return (lo.x <= coord[0] <= hi.x and lo.y <= coord[1] <= hi.y
                and lo.z <= coord[2] <= hi.z)

    def on_boundary(self, coord):
        if not self.contains(coord):
            return False
        lo, hi = self.origin, self.max_corner
        return coord[0] in (lo.x, hi.x) or coord[1] in (lo.y, hi.y) or coord[2] in (lo.z, hi.z)

    def interior(self):
        lo = self.origin
        w, h, d = self.size
        for x in range(lo.x + 1, lo.x + w - 1):
            for y in range(lo.y + 1, lo.y + h - 1):
                for z in range(lo.z + 1, lo.z + d - 1):
                    yield Coordinate(x, y, z)

    def to_dict(self):
        out = {
            'kind': self.kind,
            'origin': _coord_dict(self.origin),
            'size': {'width': self.size[0], 'height': self.size[1], 'depth': self.size[2]},
        }
        for key, value in self.tags.items():
            out[key] = value
        if self.loot is not None:
            out['loot'] = dict(self.loot)
        if self.doorways:
            out['doorways'] = [_coord_dict(d) for d in self.doorways]
        return out

    def __eq__(self, other):
        if not isinstance(other, Room):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Room({self.kind!r}, {tuple(self.origin)}, {self.size})"


class Corridor(object):
    __slots__ = ('start', 'end', 'width')

    def __init__(self, start, end, width):
        self.start = Coordinate(*start)
        self.end = Coordinate(*end)
        self.width = int(width)

    @property
    def direction(self):
        return direction_between(self.start, self.end)

    @property
    def length(self):
        return (abs(self.end.x - self.start.x) + abs(self.end.y - self.start.y)
                + abs(self.end.z - self.start.z) + 1)

    def cells(self):
        """Centre-line coordinates from start to end inclusive."""
        dx = (self.end.x > self.start.x) - (self.end.x < self.start.x)
        dz = (self.end.z > self.start.z) - (self.end.z < self.start.z)
        for i in range(self.length):
            yield Coordinate(self.start.x + dx * i, self.start.y, self.start.z + dz * i)

    def to_dict(self):
        return {
            'start': _coord_dict(self.start),
            'end': _coord_dict(self.end),
            'width': self.width,
            'direction': self.direction,
        }

    def __eq__(self, other):
        if not isinstance(other, Corridor):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Corridor({tuple(self.start)} -> {tuple(self.end)}, w={self.width})"


class StructureResult(object):
    """
    What a generator placed: bounds, rooms, corridors, spawn requests and
    loot containers. This plus the writer calls is everything a caller sees.
    """

    def __init__(self, type, position, bounds, rooms=(), corridors=(), spawns=(),
                 mob_spawns=None, loot=(), entrance=None, doorways=(), roads=(),
                 spawners=(), extra=None):
        self.type = type
        self.position = Coordinate(*position)
        lo, hi = bounds
        self.bounds = (Coordinate(*lo), Coordinate(*hi))
        self.rooms = list(rooms)
        self.corridors = list(corridors)
        self.spawns = list(spawns)
        self.mob_spawns = {k: list(v) for k, v in (mob_spawns or {}).items()}
        self.loot = list(loot)
        self.entrance = Coordinate(*entrance) if entrance is not None else None
        self.doorways = list(doorways)
        self.roads = list(roads)
        self.spawners = list(spawners)
        self.extra = dict(extra or {})

    @property
    def size(self):
        lo, hi = self.bounds
        return {'width': hi.x - lo.x + 1, 'height': hi.y - lo.y + 1, 'depth': hi.z - lo.z + 1}

    def contains(self, coord):
        lo, hi = self.bounds
        return (lo.x <= coord[0] <= hi.x and lo.y <= coord[1] <= hi.y
                and lo.z <= coord[2] <= hi.z)

    def rooms_of_kind(self, kind):
        return [r for r in self.rooms if r.kind == kind]

    def spawn_count(self, kind=None):
        if kind is None:
            return len(self.spawns)
        return sum(1 for s in self.spawns if s.kind == kind)

    def sectors(self):
        """Sector origins (as util.sectorize returns them) touched by the bounds."""
        lo, hi = self.bounds
        out = []
        for sx in range(lo.x // SECTOR_SIZE, hi.x // SECTOR_SIZE + 1):
            for sz in range(lo.z // SECTOR_SIZE, hi.z // SECTOR_SIZE + 1):
                out.append((sx * SECTOR_SIZE, 0, sz * SECTOR_SIZE))
        return out

    def to_dict(self):
        lo, hi = self.bounds
        out = {
            'type': self.type,
            'position': _coord_dict(self.position),
            'size': self.size,
            'bounds': {'min': _coord_dict(lo), 'max': _coord_dict(hi)},
        }
        if self.rooms:
            out['rooms'] = [r.to_dict() for r in self.rooms]
        if self.corridors:
            out['corridors'] = [c.to_dict() for c in self.corridors]
        if self.mob_spawns:
            out['mobSpawns'] = {k: [_coord_dict(c) for c in v] for k, v in self.mob_spawns.items()}
        if self.spawns:
            out['spawns'] = [s.to_network_dict() for s in self.spawns]
        if self.loot:
            out['loot'] = [_coord_dict(c) for c in self.loot]
        if self.spawners:
            out['spawners'] = [_coord_dict(c) for c in self.spawners]
        if self.entrance is not None:
            out['entrance'] = _coord_dict(self.entrance)
        if self.doorways:
            out['doorways'] = [_coord_dict(c) for c in self.doorways]
        if self.roads:
            out['roads'] = [c.to_dict() for c in self.roads]
        out.update(self.extra)
        return out

    def __eq__(self, other):
        if not isinstance(other, StructureResult):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"StructureResult({self.type!r}, at={tuple(self.position)}, size={self.size})"
