"""
Tile Collapse - Contextual Weighting

Biases a cell's distribution toward tiles that are frequently compatible
with what its neighbours can still be.

Algorithm:
    1. Once per model, average the propagator into frequency rows:
       freq[d][t][n] = 1 / |allowed(d, t)| for every n allowed in direction d
    2. For each neighbour with a partially narrowed domain, score each
       candidate tile by the weighted frequency of the neighbour's tiles
    3. Multiply by (1 + bias * ratio) on a match, by `penalty` otherwise
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from ..core.config import ContextualOptions
from ..core.heuristics import neighbors_of
from ..core.tileset_builder import Propagator

if TYPE_CHECKING:
    from ..core.model import Model


def build_normalized_frequencies(propagator: Propagator) -> np.ndarray:
    """Expected adjacency frequency, shape (4, tiles, tiles)."""
    tile_count = len(propagator[0])
    frequencies = np.zeros((len(propagator), tile_count, tile_count))
    for direction, rows in enumerate(propagator):
        for tile, allowed in enumerate(rows):
            if allowed:
                frequencies[direction, tile, list(allowed)] += 1.0 / len(allowed)
    return frequencies


class ContextualAdjuster:
    """Distribution adjuster driven by the neighbours' current domains."""

    def __init__(self, model: Model, options: ContextualOptions | None = None):
        options = options or ContextualOptions()
        self.model = model
        self.bias = options.bias
        self.penalty = options.penalty
        self.frequencies = build_normalized_frequencies(model.definition.propagator)

    def gather_contexts(self, cell: int) -> list[tuple[int, np.ndarray, float]]:
        """
        Collect (direction, neighbour weight vector, weight sum) per neighbour.

        Neighbours that are empty or still hold every tile carry no context.
        """
        state = self.model.state
        contexts = []
        for direction, neighbor in neighbors_of(self.model, cell):
            possible = state.wave[neighbor]
            count = int(possible.sum())
            if count == 0 or count == state.tile_count:
                continue
            weights = np.where(possible, state.weights, 0.0)
            weight_sum = float(weights.sum())
            contexts.append((direction, weights, weight_sum if weight_sum > 0 else count))
        return contexts

    def __call__(self, cell: int, distribution: np.ndarray) -> np.ndarray:
        contexts = self.gather_contexts(cell)
        if not contexts:
            return distribution

        modifier = np.ones_like(distribution)
        for direction, weights, weight_sum in contexts:
            match = self.frequencies[direction] @ weights
            ratio = match / weight_sum
            modifier *= np.where(ratio > 0, 1.0 + self.bias * ratio, self.penalty)

        return np.where(distribution > 0, distribution * modifier, 0.0)
