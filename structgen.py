#std/external libs
import math
import time

#local libs
import config
import logutil
from entity import SpawnerAdapter
from palettes import default_styles
from rng import SeededRandom, derive_seed
from shapes import BuildContext
from util import Coordinate, coerce_position

from features.small import (generate_desert_well, generate_boulder_pile, generate_fallen_tree,
                            generate_witch_hut, generate_small_ruin, generate_ocean_ruins)
from features.dungeon import generate_dungeon
from features.mineshaft import generate_mineshaft
from features.stronghold import generate_stronghold
from features.village import generate_village
from features.ancient_city import generate_ancient_city
from features.monument import generate_ocean_monument
from features.temples import generate_desert_temple, generate_jungle_temple
from features.ruined_portal import generate_ruined_portal

BUILTIN_STRUCTURES = (
    ('desert_well', generate_desert_well),
    ('boulder_pile', generate_boulder_pile),
    ('fallen_tree', generate_fallen_tree),
    ('witch_hut', generate_witch_hut),
    ('small_ruin', generate_small_ruin),
    ('ocean_ruins', generate_ocean_ruins),
    ('dungeon', generate_dungeon),
    ('mineshaft', generate_mineshaft),
    ('stronghold', generate_stronghold),
    ('village', generate_village),
    ('ancient_city', generate_ancient_city),
    ('ocean_monument', generate_ocean_monument),
    ('desert_temple', generate_desert_temple),
    ('desert_pyramid', generate_desert_temple),
    ('jungle_temple', generate_jungle_temple),
    ('ruined_portal', generate_ruined_portal),
)


def _seed_option(options, default):
    value = options.get('seed')
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not math.isfinite(value):
        return default
    return int(value)


class StructureGenerator(object):
    """
    Entry point for structure placement. A generator is a callable
    `fn(ctx, position, options)` returning a StructureResult; the dispatcher
    builds the BuildContext (sub-seeded stream, palettes, spawn adapter) and
    hands it over. Each call draws from its own stream, so the order of calls
    never changes what a given (seed, id, position) produces.
    """
    def __init__(self, seed=None, spawner=None, styles=None):
        self.seed = int(getattr(config, 'DEFAULT_SEED', 12345) if seed is None else seed)
        self.rng = SeededRandom(self.seed)
        self.spawner = SpawnerAdapter(spawner)
        merged = dict(default_styles())
        merged.update(styles or {})
        self.styles = merged
        self.generators = {}
        for name, fn in BUILTIN_STRUCTURES:
            self.generators[name] = fn

    def register(self, structure_id, fn):
        if structure_id in self.generators:
            logutil.log("STRUCTGEN", f"structure '{structure_id}' already registered; keeping the first", "WARN")
            return False
        self.generators[structure_id] = fn
        return True

    def structure_ids(self):
        return sorted(self.generators)

    def set_entity_spawner(self, spawner):
        self.spawner = SpawnerAdapter(spawner)

    def generate(self, structure_id, position, options=None, writer=None, spawner=None, reader=None):
        fn = self.generators.get(structure_id)
        if fn is None:
            logutil.log("STRUCTGEN", f"unknown structure '{structure_id}'", "WARN")
            return None
        pos = coerce_position(position)
        if pos is None:
            logutil.log("STRUCTGEN", f"malformed position {position!r} for {structure_id}", "WARN")
            return None
        if writer is None:
            logutil.log("STRUCTGEN", f"no block writer for {structure_id}; nothing generated", "WARN")
            return None
        if not isinstance(options, dict):
            options = {}
        lo = getattr(config, 'MIN_Y', 1)
        hi = getattr(config, 'MAX_Y', config.SECTOR_HEIGHT - 2)
        if not lo <= pos.y <= hi:
            logutil.log("STRUCTGEN", f"clamping y={pos.y} into [{lo}, {hi}] for {structure_id}", "DEBUG")
            pos = Coordinate(pos.x, min(max(pos.y, lo), hi), pos.z)

        seed = _seed_option(options, self.seed)
        sub_seed = derive_seed(seed, structure_id, pos)
        adapter = self.spawner if spawner is None else SpawnerAdapter(spawner)
        ctx = BuildContext(structure_id, pos, writer, SeededRandom(sub_seed), spawner=adapter,
                           reader=reader, seed=sub_seed, styles=self.styles)
        logutil.set_structure(structure_id)
        t0 = time.perf_counter()
        try:
            result = fn(ctx, pos, options)
        finally:
            logutil.set_structure(None)
        elapsed = (time.perf_counter() - t0) * 1000.0
        logutil.log("STRUCTURE",
                    f"{structure_id} at {tuple(pos)} seed={seed}: {ctx.write_count} writes, "
                    f"{len(ctx.rooms)} rooms, {len(ctx.spawns)} spawns, {len(ctx.loot)} chests "
                    f"({elapsed:.1f} ms)")
        return result
