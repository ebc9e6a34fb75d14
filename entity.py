import copy

import logutil
from util import Coordinate


class SpawnRecord:
    """
    One entity placement requested by a structure. `handle` is whatever the
    host spawner returned, or None when no live spawner is configured.
    """
    def __init__(self, kind, position=(0, 0, 0), options=None, handle=None):
        self.kind = kind
        self.position = Coordinate(*position)
        self.options = copy.deepcopy(dict(options or {}))
        self.handle = handle

    @property
    def live(self):
        return self.handle is not None

    def to_network_dict(self):
        """
        Flat dictionary of the request: type, position, then the options.
        """
        data = {
            'type': self.kind,
            'position': {'x': self.position.x, 'y': self.position.y, 'z': self.position.z},
        }
        for key, value in self.options.items():
            if key not in data:
                data[key] = copy.deepcopy(value)
        return data

    def __eq__(self, other):
        if not isinstance(other, SpawnRecord):
            return NotImplemented
        return self.to_network_dict() == other.to_network_dict()

    def __repr__(self):
        return f"SpawnRecord({self.kind!r}, {tuple(self.position)})"


class SpawnerAdapter:
    """
    Wraps the host's entity spawner. Without one, spawn requests still
    produce descriptive records; nothing is placed in the world.
    """
    def __init__(self, spawner=None):
        self.spawner = spawner

    @property
    def live(self):
        return self.spawner is not None

    def __call__(self, kind, position, options=None):
        record = SpawnRecord(kind, position, options)
        if self.spawner is None:
            return record
        record.handle = self.spawner(kind, record.position, copy.deepcopy(record.options))
        if record.handle is None:
            logutil.log("SPAWN", f"spawner returned nothing for {kind} at {tuple(record.position)}", "DEBUG")
        return record
