"""
Tile Collapse - Cell-Selection Heuristics

Policies choosing which undecided cell to collapse next. The policy is
chosen once per run by `create_cell_picker`; every picker exposes
`pick(rng) -> cell index or -1` and only considers cells with more than
one remaining tile.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import TYPE_CHECKING

from .directions import DIRECTIONS, travel

if TYPE_CHECKING:
    from .model import Model

# Tie-break jitter; small enough never to reorder distinct scores
JITTER = 1e-6


class Heuristic(str, Enum):
    ENTROPY = "entropy"
    MRV = "mrv"
    SCANLINE = "scanline"
    SPIRAL = "spiral"


class CellPicker:
    """Base class for cell pickers bound to one model for one run."""

    def __init__(self, model: Model):
        self.model = model

    def pick(self, rng: random.Random) -> int:
        raise NotImplementedError

    def _is_candidate(self, index: int) -> bool:
        model = self.model
        if model.state.sums_of_ones[index] <= 1:
            return False
        if not model.periodic and model.footprint > 1:
            x, y = model.coord_from_index(index)
            if x + model.footprint > model.width or y + model.footprint > model.height:
                return False
        return True


class EntropyPicker(CellPicker):
    """Lowest entropy first, jitter breaking ties."""

    def pick(self, rng: random.Random) -> int:
        state = self.model.state
        best = float("inf")
        argmin = -1
        for index in range(self.model.cell_count):
            if not self._is_candidate(index):
                continue
            score = state.entropies[index] + JITTER * rng.random()
            if score < best:
                best = score
                argmin = index
        return argmin


class MrvPicker(CellPicker):
    """Fewest remaining tiles first (minimum remaining values)."""

    def pick(self, rng: random.Random) -> int:
        state = self.model.state
        best = float("inf")
        argmin = -1
        for index in range(self.model.cell_count):
            if not self._is_candidate(index):
                continue
            score = state.sums_of_ones[index] + JITTER * rng.random()
            if score < best:
                best = score
                argmin = index
        return argmin


class ScanlinePicker(CellPicker):
    """Left-to-right, top-to-bottom, resuming after the last decided cell."""

    def __init__(self, model: Model):
        super().__init__(model)
        self.cursor = 0

    def pick(self, rng: random.Random) -> int:
        for index in range(self.cursor, self.model.cell_count):
            if self._is_candidate(index):
                self.cursor = index + 1
                return index
        self.cursor = self.model.cell_count
        return -1


class SpiralPicker(CellPicker):
    """Inward spiral from the top-left corner, cursor wrapping at the end."""

    def __init__(self, model: Model):
        super().__init__(model)
        self.order = build_spiral_order(model.width, model.height)
        self.cursor = 0

    def pick(self, rng: random.Random) -> int:
        total = len(self.order)
        for offset in range(total):
            position = (self.cursor + offset) % total
            index = self.order[position]
            if self._is_candidate(index):
                self.cursor = (position + 1) % total
                return index
        return -1


_PICKERS: dict[Heuristic, type[CellPicker]] = {
    Heuristic.ENTROPY: EntropyPicker,
    Heuristic.MRV: MrvPicker,
    Heuristic.SCANLINE: ScanlinePicker,
    Heuristic.SPIRAL: SpiralPicker,
}


def create_cell_picker(heuristic: Heuristic, model: Model) -> CellPicker:
    """Instantiate the picker for a heuristic, bound to a model."""
    return _PICKERS[Heuristic(heuristic)](model)


def build_spiral_order(width: int, height: int) -> list[int]:
    """
    Visit order of an inward clockwise spiral over a width x height grid.

    Returns:
        Every cell index exactly once, starting at the top-left corner
    """
    result = []
    left, right = 0, width - 1
    top, bottom = 0, height - 1

    while left <= right and top <= bottom:
        for x in range(left, right + 1):
            result.append(x + top * width)
        for y in range(top + 1, bottom + 1):
            result.append(right + y * width)
        if top != bottom:
            for x in range(right - 1, left - 1, -1):
                result.append(x + bottom * width)
        if left != right:
            for y in range(bottom - 1, top, -1):
                result.append(left + y * width)
        left += 1
        right -= 1
        top += 1
        bottom -= 1

    return result


def neighbors_of(model: Model, index: int):
    """Yield (direction, neighbour index) for each in-grid neighbour of a cell."""
    x, y = model.coord_from_index(index)
    for direction in DIRECTIONS:
        coords = travel(
            x, y, direction, model.width, model.height, model.periodic, model.footprint
        )
        if coords is None:
            continue
        yield direction, coords[0] + coords[1] * model.width
