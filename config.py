import math

# Size of sectors used to ease block loading.
SECTOR_SIZE = 16 #width and depth (x and z)
SECTOR_HEIGHT = 256 #height of world (y)

# Vertical limits of the world; structure anchors are clamped into this range.
MIN_Y = 1
MAX_Y = SECTOR_HEIGHT - 2

# Sea surface. Ocean monuments sit so their roof stays below it.
WATER_LEVEL = 63

# Seed used by a StructureGenerator built without one.
DEFAULT_SEED = 12345

# Size classes shared by most structure families.
SIZE_CLASSES = ('small', 'medium', 'large')
DEFAULT_SIZE = 'medium'

# Corridors
CORRIDOR_HEIGHT = 3
CORRIDOR_LIGHT_INTERVAL = 8

# Mineshaft layout
MINESHAFT_LENGTH = {'small': 32, 'medium': 48, 'large': 64}
MINESHAFT_SUPPORT_INTERVAL = 4
MINESHAFT_COLLAPSE_INTERVAL = 12
MINESHAFT_MIN_BRANCHES = 2
MINESHAFT_MAX_BRANCHES = 4

# Stronghold material substitution (each drawn per structure in this range).
STRONGHOLD_DECAY_MIN = 0.15
STRONGHOLD_DECAY_MAX = 0.25

# Village layout
VILLAGE_RING_SPACING = 16
VILLAGE_ANGLE_JITTER = 0.1
VILLAGE_LINK_DISTANCE = 30
VILLAGE_LINK_CHANCE = 0.7
VILLAGE_CHILD_CHANCE = 0.3
VILLAGE_WELL_CHANCE = 0.7
VILLAGE_SIZE = {'small': 4, 'medium': 8, 'large': 12}
VILLAGE_MAX_BUILDINGS = 24

# Ancient city layout
ANCIENT_CITY_MAX_Y = 25
ANCIENT_CITY_PLATFORM = 108
ANCIENT_CITY_CHAMBER_RADIUS = 15
ANCIENT_CITY_CORRIDOR_LENGTH = 30
ANCIENT_CITY_TREASURE_RADIUS = 40
# Treasure rooms keep this far (radians) off the cardinal corridors.
ANCIENT_CITY_TREASURE_AXIS_GAP = math.radians(15)

# Ocean monument footprint (width, height, depth).
MONUMENT_SIZE = (21, 18, 21)
MONUMENT_GUARDIANS = 6

# Decay weights: removal chance = base * (DECAY_CORE + edge*DECAY_EDGE + height*DECAY_HEIGHT)
DECAY_CORE = 0.4
DECAY_EDGE = 0.8
DECAY_HEIGHT = 0.8

# How far down floor detection probes through the optional reader.
FLOOR_SEARCH_DEPTH = 24

# Logging
LOG_COLOR = True
# One of DEBUG, INFO, WARN, ERROR.
LOG_LEVEL = 'INFO'
# Log a one-line summary for every generated structure.
LOG_STRUCTURES = True
