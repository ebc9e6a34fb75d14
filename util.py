import math
from collections import namedtuple

import numpy as np

import config
from config import SECTOR_SIZE


class Coordinate(namedtuple('Coordinate', ('x', 'y', 'z'))):
    """Integer block position. Hashable, so it is used directly as a dict/set key."""
    __slots__ = ()

    def offset(self, dx=0, dy=0, dz=0):
        return Coordinate(self.x + dx, self.y + dy, self.z + dz)

    def to_dict(self):
        return {'x': self.x, 'y': self.y, 'z': self.z}


# horizontal unit steps by compass name
DIRECTIONS = {
    'east': (1, 0, 0),
    'west': (-1, 0, 0),
    'south': (0, 0, 1),
    'north': (0, 0, -1),
    'up': (0, 1, 0),
    'down': (0, -1, 0),
}
HORIZONTAL = ('north', 'east', 'south', 'west')
OPPOSITE = {'east': 'west', 'west': 'east', 'north': 'south', 'south': 'north',
            'up': 'down', 'down': 'up'}


def normalize(position):
    """ Accepts `position` of arbitrary precision and returns the block
    containing that position.

    """
    x, y, z = position
    return Coordinate(int(round(x)), int(round(y)), int(round(z)))


def sectorize(position):
    """ Returns a tuple representing the sector for the given `position`.

    """
    x, y, z = normalize(position)
    x, y, z = x // SECTOR_SIZE, y // SECTOR_SIZE, z // SECTOR_SIZE
    return (x*SECTOR_SIZE, 0, z*SECTOR_SIZE)


def coerce_position(position):
    """Turn a dict/tuple/Coordinate into a Coordinate, or None when malformed."""
    if isinstance(position, dict):
        try:
            values = (position['x'], position['y'], position['z'])
        except KeyError:
            return None
    elif isinstance(position, (tuple, list, np.ndarray)):
        if len(position) != 3:
            return None
        values = tuple(position)
    else:
        return None
    out = []
    for v in values:
        if isinstance(v, bool):
            return None
        try:
            f = float(v)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(f):
            return None
        out.append(f)
    return normalize(out)


def direction_between(start, end):
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    dz = end[2] - start[2]
    if dx == 0 and dz == 0:
        if dy == 0:
            return None
        return 'up' if dy > 0 else 'down'
    if abs(dx) >= abs(dz):
        return 'east' if dx > 0 else 'west'
    return 'south' if dz > 0 else 'north'


def rotate_offset(dx, dz, facing):
    """Rotate a (dx, dz) offset authored facing south into `facing`."""
    if facing == 'south':
        return dx, dz
    if facing == 'north':
        return -dx, -dz
    if facing == 'east':
        return dz, -dx
    return -dz, dx


def facing_toward(src, dst):
    """Horizontal compass direction from src that best points at dst."""
    dx = dst[0] - src[0]
    dz = dst[2] - src[2]
    if abs(dx) > abs(dz):
        return 'east' if dx > 0 else 'west'
    return 'south' if dz >= 0 else 'north'


def distance_xz(a, b):
    return math.hypot(a[0] - b[0], a[2] - b[2])


def rects_overlap(a, b):
    """a and b are (x0, z0, x1, z1) inclusive rectangles."""
    return not (a[2] < b[0] or b[2] < a[0] or a[3] < b[1] or b[3] < a[1])


def clamp(value, lo, hi):
    return max(lo, min(hi, value))


# Option readers. Bad values fall back to the default (numbers are clamped)
# so a request never fails because of an option.

def option_float(options, key, default, lo=None, hi=None):
    value = options.get(key, default)
    if isinstance(value, bool):
        value = default
    try:
        value = float(value)
    except (TypeError, ValueError):
        value = float(default)
    if not math.isfinite(value):
        value = float(default)
    if lo is not None:
        value = max(lo, value)
    if hi is not None:
        value = min(hi, value)
    return value


def option_int(options, key, default, lo=None, hi=None):
    return int(round(option_float(options, key, default, lo, hi)))


def option_bool(options, key, default=None):
    value = options.get(key, default)
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return default


def option_choice(options, key, choices, default):
    value = options.get(key, default)
    if isinstance(value, str) and value.lower() in choices:
        return value.lower()
    return default


def option_size(options, default=None):
    if default is None:
        default = getattr(config, 'DEFAULT_SIZE', 'medium')
    return option_choice(options, 'size', getattr(config, 'SIZE_CLASSES', ('small', 'medium', 'large')), default)


def option_degradation(options, default=0.0, *aliases):
    """The `degradation` option, falling back to any older alias keys."""
    for key in ('degradation',) + aliases:
        if key in options:
            return option_float(options, key, default, 0.0, 1.0)
    return clamp(float(default), 0.0, 1.0)
