import uuid as _uuid

import numpy as np

_MASK64 = (1 << 64) - 1


def _mix64(h):
    # Splitmix64 finalizer.
    h &= _MASK64
    h = (h ^ (h >> 30)) * 0xbf58476d1ce4e5b9 & _MASK64
    h = (h ^ (h >> 27)) * 0x94d049bb133111eb & _MASK64
    h ^= (h >> 31)
    return h


def _salt_int(salt):
    if isinstance(salt, int):
        return salt & _MASK64
    h = 0xcbf29ce484222325
    for ch in str(salt).encode('utf-8'):
        h = ((h ^ ch) * 0x100000001b3) & _MASK64
    return h


def hash64(seed, x=0, y=0, z=0, salt=0):
    h = (int(x) * 0x632BE59BD9B4E019) ^ (int(z) * 0x9E3779B97F4A7C15) \
        ^ (int(y) * 0xD6E8FEB86659FD93) ^ (_salt_int(salt) * 0x94D049BB133111EB) ^ int(seed)
    return _mix64(h)


def hash_unit(seed, x=0, y=0, z=0, salt=0):
    """Deterministic float in [0,1) for a position; does not touch any stream."""
    return (hash64(seed, x, y, z, salt) & ((1 << 53) - 1)) / float(1 << 53)


def derive_seed(seed, kind, position):
    """Sub-seed for one structure: same (seed, kind, position) always gives the same value."""
    x, y, z = position
    return hash64(seed, x, y, z, salt=kind) & 0x7FFFFFFFFFFFFFFF


class SeededRandom(object):
    """
    Reproducible random stream. Two instances built from the same seed
    produce identical sequences; there is no way to reseed one mid-stream.
    """

    def __init__(self, seed):
        self.seed = int(seed) & _MASK64
        self._gen = np.random.Generator(np.random.PCG64(self.seed))

    def next(self):
        return float(self._gen.random())

    def next_int(self, lo, hi):
        """Integer in [lo, hi], both ends inclusive."""
        lo = int(lo)
        hi = int(hi)
        if hi < lo:
            lo, hi = hi, lo
        return int(self._gen.integers(lo, hi + 1))

    def next_float(self, lo=0.0, hi=1.0):
        return lo + (hi - lo) * self.next()

    def chance(self, p):
        return self.next() < p

    def choice(self, seq):
        seq = list(seq)
        if not seq:
            return None
        return seq[self.next_int(0, len(seq) - 1)]

    def weighted_choice(self, pairs):
        """pairs: iterable of (item, weight)."""
        pairs = [(item, float(w)) for item, w in pairs if w > 0]
        if not pairs:
            return None
        total = sum(w for _, w in pairs)
        roll = self.next() * total
        for item, w in pairs:
            roll -= w
            if roll < 0:
                return item
        return pairs[-1][0]

    def shuffle(self, items):
        # Fisher-Yates so the draw order is ours rather than numpy's.
        for i in range(len(items) - 1, 0, -1):
            j = self.next_int(0, i)
            items[i], items[j] = items[j], items[i]
        return items

    def sample(self, seq, k):
        items = list(seq)
        self.shuffle(items)
        return items[:max(0, k)]

    def uuid(self):
        bits = int(self._gen.integers(0, 1 << 62)) << 66 | int(self._gen.integers(0, 1 << 62)) << 4
        return str(_uuid.UUID(int=bits & ((1 << 128) - 1), version=4))

    def spawn(self, salt):
        """Independent child stream; consumes one draw from this stream."""
        return SeededRandom(hash64(self.seed, salt=salt) ^ int(self._gen.integers(0, 1 << 62)))
