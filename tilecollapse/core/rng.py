"""
Tile Collapse - Random Source

Seeded pseudorandom stream and roulette-wheel sampling. The same seed
always yields the same sequence, which is what makes runs reproducible.
"""

import random
from collections.abc import Sequence


def make_rng(seed: int) -> random.Random:
    """Create a private, seeded random stream for one attempt."""
    return random.Random(seed)


def weighted_pick(weights: Sequence[float], rng: random.Random) -> int:
    """
    Pick an index with probability proportional to its weight.

    Negative weights count as zero. Zero-weight entries are never returned.

    Args:
        weights: Non-negative weight per index
        rng: Random stream to draw from (consumes exactly one value)

    Returns:
        The chosen index, or -1 if the total weight is not positive
    """
    total = 0.0
    for value in weights:
        if value > 0:
            total += value

    if total <= 0:
        return -1

    threshold = rng.random() * total
    last_positive = -1
    for index, value in enumerate(weights):
        if value <= 0:
            continue
        last_positive = index
        threshold -= value
        if threshold <= 0:
            return index

    # Floating point leftovers land on the last eligible entry
    return last_positive
