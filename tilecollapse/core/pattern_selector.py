"""
Tile Collapse - Pattern Selector

Turns a (possibly adjusted) weight vector into one chosen tile.
"""

import random
from collections.abc import Sequence
from enum import Enum

from .rng import weighted_pick


class PatternStrategy(str, Enum):
    WEIGHTED = "weighted"
    LEAST_USED = "least-used"


def select_pattern(
    strategy: PatternStrategy,
    distribution: Sequence[float],
    rng: random.Random,
    usage: Sequence[int],
    availability: Sequence[bool],
) -> int:
    """
    Choose a tile for a cell.

    Args:
        strategy: Selection strategy
        distribution: Non-negative weight per tile
        rng: Random stream of the current attempt
        usage: How many times each tile has been chosen so far this run
        availability: Whether each tile is still in the cell's domain

    Returns:
        The chosen tile id, or -1 if no tile qualifies
    """
    if strategy == PatternStrategy.LEAST_USED:
        return pick_least_used(distribution, usage, availability, rng)
    return weighted_pick(distribution, rng)


def pick_least_used(
    distribution: Sequence[float],
    usage: Sequence[int],
    availability: Sequence[bool],
    rng: random.Random,
) -> int:
    """Uniform pick among available tiles sharing the smallest usage count."""
    min_usage = None
    candidates: list[int] = []

    for tile, weight in enumerate(distribution):
        if not availability[tile] or weight <= 0:
            continue
        count = usage[tile]
        if min_usage is None or count < min_usage:
            min_usage = count
            candidates = [tile]
        elif count == min_usage:
            candidates.append(tile)

    if not candidates:
        return -1

    return candidates[int(rng.random() * len(candidates))]
