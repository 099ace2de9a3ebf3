"""
Tile Collapse - Coherence Tracking

Keeps the running share of each tile close to its weight-proportional
target share. The tracker is the only adjuster state that lives across
calls; it is reset with the wave state at the start of every attempt.
"""

from collections.abc import Sequence

import numpy as np

from ..core.config import CoherenceOptions


class CoherenceTracker:
    """Counts the tiles chosen so far in the current run."""

    def __init__(self, weights: Sequence[float], tolerance: float = 0.12):
        self.counts = np.zeros(len(weights), dtype=np.int64)
        self.decisions = 0
        total = float(sum(weights)) or 1.0
        self.target_shares = np.asarray(weights, dtype=np.float64) / total
        self.tolerance = tolerance

    def reset(self) -> None:
        self.counts.fill(0)
        self.decisions = 0

    def register(self, tile: int) -> None:
        if tile < 0 or tile >= len(self.counts):
            return
        self.counts[tile] += 1
        self.decisions += 1

    def shares(self) -> np.ndarray:
        """Empirical share of each tile (zeros before the first decision)."""
        if self.decisions == 0:
            return np.zeros_like(self.target_shares)
        return self.counts / self.decisions


class CoherenceAdjuster:
    """
    Nudges tiles back toward their target share.

    Outside the tolerance band, an over-represented tile is multiplied by
    max(floor, 1 - excess * strength) and an under-represented one by
    min(cap, 1 + deficit * strength).
    """

    def __init__(self, tracker: CoherenceTracker, options: CoherenceOptions | None = None):
        options = options or CoherenceOptions()
        self.tracker = tracker
        self.strength = options.strength
        self.penalty_floor = options.penalty_floor
        self.boost_cap = options.boost_cap

    def modifiers(self) -> np.ndarray:
        tracker = self.tracker
        delta = tracker.shares() - tracker.target_shares
        excess = delta - tracker.tolerance
        deficit = -delta - tracker.tolerance

        modifier = np.ones_like(delta)
        over = excess > 0
        under = deficit > 0
        modifier[over] = np.maximum(self.penalty_floor, 1.0 - excess[over] * self.strength)
        modifier[under] = np.minimum(self.boost_cap, 1.0 + deficit[under] * self.strength)
        return modifier

    def __call__(self, cell: int, distribution: np.ndarray) -> np.ndarray:
        if self.tracker.decisions == 0:
            return distribution
        return np.where(distribution > 0, distribution * self.modifiers(), 0.0)
