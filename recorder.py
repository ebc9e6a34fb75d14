from collections import Counter

import numpy as np

from blocks import is_air, is_passable, type_of
from util import Coordinate


class BlockRecorder(object):
    """
    In-memory block writer. Keeps every write in issue order plus the final
    block per coordinate, and doubles as a read capability through get().
    """

    def __init__(self):
        self.writes = []
        self.blocks = {}

    def __call__(self, coord, block):
        c = Coordinate(int(coord[0]), int(coord[1]), int(coord[2]))
        self.writes.append((c, block))
        self.blocks[c] = block

    def get(self, coord):
        return self.blocks.get(Coordinate(*coord))

    def __len__(self):
        return len(self.blocks)

    def types(self):
        return Counter(type_of(b) for b in self.blocks.values())

    def find(self, block_type):
        return [c for c, b in self.blocks.items() if type_of(b) == block_type]

    def count_non_air(self):
        return sum(1 for b in self.blocks.values() if not is_air(b))

    def bounds(self):
        if not self.blocks:
            return None
        arr = np.array(list(self.blocks.keys()), dtype=np.int64)
        return Coordinate(*arr.min(axis=0).tolist()), Coordinate(*arr.max(axis=0).tolist())

    def passable_volume(self, passable=is_passable):
        """
        Boolean grid (x, y, z) of written cells a mob could move through.
        Unwritten cells count as solid. Returns (grid, origin).
        """
        lo, hi = self.bounds()
        shape = (hi.x - lo.x + 1, hi.y - lo.y + 1, hi.z - lo.z + 1)
        grid = np.zeros(shape, dtype=bool)
        coords = [c for c, b in self.blocks.items() if passable(b)]
        if coords:
            idx = np.array(coords, dtype=np.int64) - np.array(lo, dtype=np.int64)
            grid[idx[:, 0], idx[:, 1], idx[:, 2]] = True
        return grid, lo

    def reachable_mask(self, start, passable=is_passable):
        """Cells connected to `start` through passable written cells (6-neighbour)."""
        grid, lo = self.passable_volume(passable)
        seen = np.zeros_like(grid)
        sx, sy, sz = start[0] - lo.x, start[1] - lo.y, start[2] - lo.z
        if not (0 <= sx < grid.shape[0] and 0 <= sy < grid.shape[1] and 0 <= sz < grid.shape[2]):
            return seen, lo
        if not grid[sx, sy, sz]:
            return seen, lo
        seen[sx, sy, sz] = True
        while True:
            neighbor = np.zeros_like(seen)
            neighbor[:-1, :, :] |= seen[1:, :, :]
            neighbor[1:, :, :] |= seen[:-1, :, :]
            neighbor[:, :-1, :] |= seen[:, 1:, :]
            neighbor[:, 1:, :] |= seen[:, :-1, :]
            neighbor[:, :, :-1] |= seen[:, :, 1:]
            neighbor[:, :, 1:] |= seen[:, :, :-1]
            spread = grid & neighbor & ~seen
            if not spread.any():
                break
            seen |= spread
        return seen, lo

    def reachable(self, start, targets, passable=is_passable):
        """Map each target coordinate to whether it can be reached from `start`."""
        mask, lo = self.reachable_mask(start, passable)
        out = {}
        for t in targets:
            x, y, z = t[0] - lo.x, t[1] - lo.y, t[2] - lo.z
            inside = 0 <= x < mask.shape[0] and 0 <= y < mask.shape[1] and 0 <= z < mask.shape[2]
            out[Coordinate(*t)] = bool(inside and mask[x, y, z])
        return out
