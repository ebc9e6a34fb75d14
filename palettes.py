from types import MappingProxyType

from blocks import Block, LAVA, WATER


class StyleTable(object):
    """
    Read-only mapping from a semantic slot ('wall', 'floor', 'light', ...) to
    either one Block or a weighted list of (Block, weight) pairs.
    """

    def __init__(self, name, slots):
        self.name = name
        table = {}
        for slot, entry in slots.items():
            table[slot] = self._normalize(entry)
        self._slots = MappingProxyType(table)

    @staticmethod
    def _normalize(entry):
        if isinstance(entry, Block):
            return entry
        if isinstance(entry, str):
            return Block(entry)
        out = []
        for item in entry:
            if isinstance(item, tuple):
                blk, weight = item
            else:
                blk, weight = item, 1.0
            if isinstance(blk, str):
                blk = Block(blk)
            out.append((blk, float(weight)))
        return tuple(out)

    def __contains__(self, slot):
        return slot in self._slots

    def __getitem__(self, slot):
        entry = self._slots[slot]
        if isinstance(entry, Block):
            return entry
        return entry[0][0]

    def get(self, slot, default=None):
        if slot not in self._slots:
            return default
        return self[slot]

    def pick(self, slot, rng):
        """Draw a block for `slot`. Weighted slots consume one draw from `rng`."""
        entry = self._slots[slot]
        if isinstance(entry, Block):
            return entry
        return rng.weighted_choice(entry)

    def with_overrides(self, name=None, **slots):
        merged = dict(self._slots)
        merged.update(slots)
        return StyleTable(name or self.name, merged)


def _t(name, **slots):
    return StyleTable(name, slots)


VILLAGE_STYLES = {
    'plains': _t('plains',
        log='oak_log', planks='oak_planks', stairs='oak_stairs', path='gravel',
        door='oak_door', foundation='cobblestone', glass='glass_pane', fence='oak_fence',
        light='lantern', bed='red_bed', roof='oak_stairs', slab='oak_slab',
        crop=[('wheat', 3), ('carrots', 1), ('potatoes', 1)], farmland='farmland', water=WATER),
    'desert': _t('desert',
        log='acacia_log', planks='sandstone', stairs='sandstone_stairs', path='sand',
        door='acacia_door', foundation='cut_sandstone', glass='glass_pane', fence='acacia_fence',
        light='lantern', bed='green_bed', roof='sandstone_slab', slab='sandstone_slab',
        crop=[('wheat', 2), ('cactus', 1)], farmland='farmland', water=WATER),
    'taiga': _t('taiga',
        log='spruce_log', planks='spruce_planks', stairs='spruce_stairs', path='coarse_dirt',
        door='spruce_door', foundation='cobblestone', glass='glass_pane', fence='spruce_fence',
        light='lantern', bed='blue_bed', roof='spruce_stairs', slab='spruce_slab',
        crop=[('potatoes', 2), ('sweet_berry_bush', 1)], farmland='farmland', water=WATER),
    'savanna': _t('savanna',
        log='acacia_log', planks='acacia_planks', stairs='acacia_stairs', path='dirt',
        door='acacia_door', foundation='cobblestone', glass='glass_pane', fence='acacia_fence',
        light='lantern', bed='orange_bed', roof='acacia_stairs', slab='acacia_slab',
        crop=[('wheat', 2), ('melon', 1)], farmland='farmland', water=WATER),
}

STRUCTURE_STYLES = {
    'desert_well': _t('desert_well',
        base='sandstone_slab', wall='sandstone', post='sandstone_wall', roof='sandstone_slab',
        fluid=WATER),
    'boulder': _t('boulder',
        stone=[('stone', 3), ('cobblestone', 2), ('andesite', 1)]),
    'fallen_tree:oak': _t('fallen_tree:oak',
        log='oak_log', decor=[('red_mushroom', 1), ('brown_mushroom', 1)], moss='moss_carpet'),
    'fallen_tree:birch': _t('fallen_tree:birch',
        log='birch_log', decor=[('red_mushroom', 1), ('brown_mushroom', 1)], moss='moss_carpet'),
    'witch_hut': _t('witch_hut',
        stilt='oak_log', planks='oak_planks', roof='spruce_planks', roof_edge='spruce_stairs',
        fence='oak_fence', glass='glass_pane', cauldron='cauldron', table='crafting_table',
        shelf='bookshelf', pot='flower_pot'),
    'small_ruin': _t('small_ruin',
        wall='cobblestone', debris=[('mossy_cobblestone', 1), ('cracked_stone_bricks', 1)],
        floor='cobblestone'),
    'ocean_ruins:warm': _t('ocean_ruins:warm',
        wall=[('sandstone', 2), ('cut_sandstone', 1)], floor='sandstone',
        decor=[('brain_coral', 1), ('bubble_coral', 1), ('fire_coral', 1), ('horn_coral', 1),
               ('tube_coral', 1)],
        fluid=WATER),
    'ocean_ruins:cold': _t('ocean_ruins:cold',
        wall=[('stone_bricks', 2), ('mossy_stone_bricks', 1)], floor='stone_bricks',
        decor=[('seagrass', 3), ('tall_seagrass', 1)],
        fluid=WATER),
    'dungeon': _t('dungeon',
        wall=[('cobblestone', 6), ('mossy_cobblestone', 4)], floor=[('cobblestone', 6), ('mossy_cobblestone', 4)],
        spawner='mob_spawner', chest='chest'),
    'mineshaft': _t('mineshaft',
        wall=[('stone', 8), ('andesite', 1), ('granite', 1)], floor=[('stone', 3), ('oak_planks', 1)],
        planks='oak_planks', fence='oak_fence', rail='rail', light='wall_torch',
        gravel='gravel', cobweb='cobweb', cart='chest_minecart', spawner='mob_spawner'),
    'stronghold': _t('stronghold',
        wall='stone_bricks', cracked='cracked_stone_bricks', mossy='mossy_stone_bricks',
        floor='stone_bricks', light='wall_torch', stairs='stone_brick_stairs',
        shelf='bookshelf', lectern='lectern', bars='iron_bars', cobweb='cobweb',
        frame='end_portal_frame', lava=LAVA, spawner='mob_spawner', chest='chest'),
    'ancient_city': _t('ancient_city',
        base='cobbled_deepslate', floor='deepslate_tiles',
        wall=[('deepslate_bricks', 6), ('cracked_deepslate_bricks', 2), ('deepslate_tiles', 2)],
        accent='reinforced_deepslate', column=[('deepslate_bricks', 3), ('polished_deepslate', 1)],
        sculk='sculk', vein='sculk_vein', sensor='sculk_sensor',
        shrieker=Block('sculk_shrieker', {'can_summon': True}), catalyst='sculk_catalyst',
        fire='soul_fire', candle='candle', chest='chest'),
    'ocean_monument': _t('ocean_monument',
        base='prismarine', wall='prismarine_bricks', accent='dark_prismarine', light='sea_lantern',
        fluid=WATER, sponge='wet_sponge', gold='gold_block'),
    'desert_temple': _t('desert_temple',
        wall='sandstone', accent='cut_sandstone', chiseled='chiseled_sandstone',
        floor='sandstone', stairs='sandstone_stairs', terracotta='orange_terracotta',
        centre='blue_terracotta', trap='tnt', plate='stone_pressure_plate', chest='chest'),
    'jungle_temple': _t('jungle_temple',
        wall=[('cobblestone', 6), ('mossy_cobblestone', 4)], accent='chiseled_stone_bricks',
        floor=[('cobblestone', 1), ('mossy_cobblestone', 1)],
        tripwire='tripwire', hook='tripwire_hook', dispenser='dispenser', lever='lever',
        wire='redstone_wire', piston='sticky_piston', chest='chest', vine='vine'),
    'ruined_portal:overworld': _t('ruined_portal:overworld',
        frame='obsidian', crying='crying_obsidian',
        ground=[('stone', 4), ('cobblestone', 3), ('mossy_cobblestone', 2), ('stone_bricks', 1)],
        patch='netherrack', magma='magma_block', fire='fire', gold='gold_block',
        overburden=[('dirt', 3), ('gravel', 1), ('stone', 1)], chest='chest'),
    'ruined_portal:nether': _t('ruined_portal:nether',
        frame='obsidian', crying='crying_obsidian',
        ground=[('blackstone', 3), ('basalt', 2), ('polished_blackstone_bricks', 1)],
        patch='netherrack', magma='magma_block', fire='fire', gold='gold_block',
        overburden=[('blackstone', 2), ('basalt', 1), ('soul_sand', 1)], chest='chest'),
}


def default_styles():
    styles = dict(STRUCTURE_STYLES)
    for biome, table in VILLAGE_STYLES.items():
        styles['village:' + biome] = table
    return MappingProxyType(styles)


