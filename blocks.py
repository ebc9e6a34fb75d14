import copy
from types import MappingProxyType


class Block(object):
    """
    A block descriptor: a type id plus an open metadata bag (facing,
    waterlogged, loot table, item list, ...). Descriptors are immutable;
    writing a new one at a coordinate fully replaces the old one.
    """
    __slots__ = ('_type', '_metadata')

    def __init__(self, type, metadata=None, **kwargs):
        meta = copy.deepcopy(dict(metadata)) if metadata else {}
        if kwargs:
            meta.update(copy.deepcopy(kwargs))
        object.__setattr__(self, '_type', str(type))
        object.__setattr__(self, '_metadata', MappingProxyType(meta))

    def __setattr__(self, name, value):
        raise AttributeError("Block descriptors are immutable")

    @property
    def type(self):
        return self._type

    @property
    def metadata(self):
        return self._metadata

    def with_metadata(self, **kwargs):
        meta = dict(self._metadata)
        meta.update(kwargs)
        return Block(self._type, meta)

    def to_dict(self):
        out = {'type': self._type}
        if self._metadata:
            out['metadata'] = copy.deepcopy(dict(self._metadata))
        return out

    @classmethod
    def from_dict(cls, data):
        return cls(data['type'], data.get('metadata'))

    def __eq__(self, other):
        if not isinstance(other, Block):
            return NotImplemented
        return self._type == other._type and dict(self._metadata) == dict(other._metadata)

    def __ne__(self, other):
        eq = self.__eq__(other)
        return eq if eq is NotImplemented else not eq

    def __hash__(self):
        return hash(self._type)

    # immutable, so copies can share
    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return (Block, (self._type, dict(self._metadata)))

    def __repr__(self):
        if self._metadata:
            return f"Block({self._type!r}, {dict(self._metadata)!r})"
        return f"Block({self._type!r})"


AIR = Block('air')
WATER = Block('water')
LAVA = Block('lava')

# Types a creature (or a flood fill standing in for one) can move through.
AIR_TYPES = {'air', 'cave_air', 'void_air'}
PASSABLE_TYPES = AIR_TYPES | {
    'water', 'rail', 'cobweb', 'torch', 'wall_torch', 'soul_torch', 'ladder',
    'sculk_vein', 'seagrass', 'tall_seagrass', 'kelp', 'tripwire', 'tripwire_hook',
    'stone_pressure_plate', 'lever', 'candle', 'fire', 'soul_fire', 'redstone_wire',
    'brain_coral', 'bubble_coral', 'fire_coral', 'horn_coral', 'tube_coral',
    'red_mushroom', 'brown_mushroom', 'vine', 'string', 'carpet', 'white_carpet',
    'red_carpet', 'oak_door', 'spruce_door', 'acacia_door', 'iron_door',
    'minecart', 'chest_minecart', 'moss_carpet', 'oak_pressure_plate',
}


def type_of(value):
    if value is None:
        return 'air'
    if isinstance(value, Block):
        return value.type
    if isinstance(value, dict):
        return value.get('type', 'air')
    return str(value)


def is_air(value):
    return type_of(value) in AIR_TYPES


def is_passable(value):
    return type_of(value) in PASSABLE_TYPES


def is_solid(value):
    t = type_of(value)
    return t not in PASSABLE_TYPES and t != 'lava'
