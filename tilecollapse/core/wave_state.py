"""
Tile Collapse - Wave State

Per-cell tile domains, per-tile support counters and the aggregate
statistics used by the cell-selection heuristics. All statistics are
maintained incrementally on every ban.
"""

import math
from collections.abc import Sequence

import numpy as np

from .directions import DIRECTIONS, OPPOSITE
from .tileset_builder import Propagator


class WaveState:
    """
    Mutable per-attempt state of a grid of cells.

    Attributes:
        wave: bool array (cells, tiles); True while a tile is still possible
        compatible: int array (cells, tiles, 4); supporters left per direction
        observed: int array (cells,); committed tile or -1
        sums_of_ones: remaining tile count per cell
        sums_of_weights: remaining weight per cell
        sums_of_weight_log_weights: remaining sum of w*ln(w) per cell
        entropies: entropy per cell
        stack: pending (cell, tile) bans not yet propagated
    """

    def __init__(
        self,
        width: int,
        height: int,
        weights: Sequence[float],
        propagator: Propagator,
    ):
        self.width = width
        self.height = height
        self.tile_count = len(weights)
        self.total_cells = width * height
        self.propagator = propagator

        self.weights = np.asarray(weights, dtype=np.float64)
        self.weight_log_weights = np.array(
            [w * math.log(w) if w > 0 else 0.0 for w in weights], dtype=np.float64
        )
        self.sum_of_weights = float(self.weights.sum())
        self.sum_of_weight_log_weights = float(self.weight_log_weights.sum())
        self.starting_entropy = entropy_of(
            self.sum_of_weights, self.sum_of_weight_log_weights
        )

        # Starting support: number of tiles allowed on the opposite side
        self._initial_compatible = np.zeros((self.tile_count, 4), dtype=np.int32)
        for tile in range(self.tile_count):
            for direction in DIRECTIONS:
                self._initial_compatible[tile, direction] = len(
                    propagator[OPPOSITE[direction]][tile]
                )

        self.wave = np.ones((self.total_cells, self.tile_count), dtype=bool)
        self.compatible = np.empty(
            (self.total_cells, self.tile_count, 4), dtype=np.int32
        )
        self.observed = np.full(self.total_cells, -1, dtype=np.int64)
        self.sums_of_ones = np.zeros(self.total_cells, dtype=np.int64)
        self.sums_of_weights = np.zeros(self.total_cells, dtype=np.float64)
        self.sums_of_weight_log_weights = np.zeros(self.total_cells, dtype=np.float64)
        self.entropies = np.zeros(self.total_cells, dtype=np.float64)
        self.stack: list[tuple[int, int]] = []

        self.reset()

    def reset(self) -> None:
        """Make every tile possible in every cell again."""
        self.wave.fill(True)
        self.compatible[:] = self._initial_compatible
        self.observed.fill(-1)
        self.sums_of_ones.fill(self.tile_count)
        self.sums_of_weights.fill(self.sum_of_weights)
        self.sums_of_weight_log_weights.fill(self.sum_of_weight_log_weights)
        self.entropies.fill(self.starting_entropy)
        self.stack.clear()

    def sample_distribution(self, cell: int) -> np.ndarray:
        """Return a fresh weight vector for a cell, 0 for banned tiles."""
        return np.where(self.wave[cell], self.weights, 0.0)

    def remaining_tiles(self, cell: int) -> list[int]:
        """Ids of the tiles still possible in a cell, ascending."""
        return [int(t) for t in np.flatnonzero(self.wave[cell])]

    def has_pending(self) -> bool:
        return bool(self.stack)

    def pop_pending(self) -> tuple[int, int]:
        return self.stack.pop()

    def ban(self, cell: int, tile: int) -> bool:
        """
        Remove a tile from a cell's domain.

        Zeroes the tile's support counters, updates the cell statistics and
        pushes the ban onto the pending stack. Banning an absent tile is a
        no-op.

        Returns:
            True if the cell's domain is now empty (contradiction)
        """
        if not self.wave[cell, tile]:
            return False

        self.wave[cell, tile] = False
        self.compatible[cell, tile, :] = 0
        self.stack.append((cell, tile))

        self.sums_of_ones[cell] -= 1
        self.sums_of_weights[cell] -= self.weights[tile]
        self.sums_of_weight_log_weights[cell] -= self.weight_log_weights[tile]

        if self.sums_of_ones[cell] == 0:
            self.entropies[cell] = 0.0
            return True

        self.entropies[cell] = entropy_of(
            self.sums_of_weights[cell], self.sums_of_weight_log_weights[cell]
        )
        return False

    def recompute_entropy(self, cell: int) -> float:
        """Entropy of a cell derived from scratch from its current domain."""
        mask = self.wave[cell]
        return entropy_of(
            float(self.weights[mask].sum()),
            float(self.weight_log_weights[mask].sum()),
        )


def entropy_of(sum_of_weights: float, sum_of_weight_log_weights: float) -> float:
    """ln(W) - sum(w ln w) / W, or 0 for an empty weight sum."""
    if sum_of_weights <= 0:
        return 0.0
    return math.log(sum_of_weights) - sum_of_weight_log_weights / sum_of_weights
