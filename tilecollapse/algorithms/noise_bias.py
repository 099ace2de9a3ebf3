"""
Tile Collapse - Noise Bias

Gives every cell a fixed preferred tile group drawn from a 2D integer hash,
so regions of the output lean toward one group or another. A tile's group
is the part of its display name before the first space, which makes the
group of a variant its base tile.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from ..core.config import NoiseOptions

if TYPE_CHECKING:
    from ..core.model import Model

MASK32 = 0xFFFFFFFF


def hash2d(x: int, y: int, seed: int) -> float:
    """Deterministic hash of a grid position to [0, 1]."""
    h = (x * 374761393 + y * 668265263 + seed * 1597334677) & MASK32
    h = ((h ^ (h >> 13)) * 1274126177) & MASK32
    h ^= h >> 16
    return h / MASK32


def build_noise_field(width: int, height: int, group_count: int, seed: int) -> np.ndarray:
    """Preferred group per cell, row-major."""
    field = np.zeros(width * height, dtype=np.int64)
    for y in range(height):
        for x in range(width):
            field[x + y * width] = int(hash2d(x, y, seed) * group_count) % group_count
    return field


def tile_groups(tile_names: tuple[str, ...]) -> tuple[list[str], np.ndarray]:
    """Unique groups in first-seen order, and the group index of every tile."""
    groups = [name.split(" ")[0] for name in tile_names]
    unique = list(dict.fromkeys(groups))
    return unique, np.array([unique.index(g) for g in groups], dtype=np.int64)


class NoiseBiasAdjuster:
    """Multiplies preferred-group tiles by `boost` and the others by `bleed`."""

    def __init__(
        self,
        model: Model,
        group_index: np.ndarray,
        group_count: int,
        options: NoiseOptions,
    ):
        self.boost = options.boost
        self.bleed = options.bleed
        self.group_index = group_index
        self.field = build_noise_field(model.width, model.height, group_count, options.seed)

    def __call__(self, cell: int, distribution: np.ndarray) -> np.ndarray:
        preferred = self.group_index == self.field[cell]
        modifier = np.where(preferred, self.boost, self.bleed)
        return np.where(distribution > 0, distribution * modifier, 0.0)


def create_noise_bias_adjuster(
    model: Model, options: NoiseOptions | None = None
) -> NoiseBiasAdjuster | None:
    """Build the adjuster, or None when every tile belongs to one group."""
    unique, group_index = tile_groups(model.definition.tile_names)
    if len(unique) <= 1:
        return None
    return NoiseBiasAdjuster(model, group_index, len(unique), options or NoiseOptions())
