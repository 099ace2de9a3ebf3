"""
Tile Collapse - Distribution Adjustment Pipeline

Composes the enabled adjusters in the order declared in ModelOptions.

Contract for every stage: take (cell, distribution), return a new array
or the input itself, never mutate the input, and keep every zero entry
at zero so a banned tile cannot come back.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import numpy as np

from ..core.config import AdjusterKind
from .coherence import CoherenceAdjuster, CoherenceTracker
from .contextual import ContextualAdjuster
from .noise_bias import create_noise_bias_adjuster

if TYPE_CHECKING:
    from ..core.model import Model

Adjuster = Callable[[int, np.ndarray], np.ndarray]


class DistributionPipeline:
    """Ordered chain of adjusters applied to a cell's base distribution."""

    def __init__(self, stages: Sequence[tuple[AdjusterKind, Adjuster]] = ()):
        self.stages = list(stages)

    @property
    def kinds(self) -> tuple[AdjusterKind, ...]:
        return tuple(kind for kind, _ in self.stages)

    def __len__(self) -> int:
        return len(self.stages)

    def apply(self, cell: int, distribution: np.ndarray) -> np.ndarray:
        for _, adjuster in self.stages:
            adjusted = adjuster(cell, distribution)
            if adjusted is not None:
                distribution = adjusted
        return distribution


def build_pipeline(model: Model) -> tuple[DistributionPipeline, CoherenceTracker | None]:
    """
    Instantiate the adjusters listed in the model's options.

    Returns:
        The pipeline and the coherence tracker (None when coherence is off)
    """
    options = model.options
    stages: list[tuple[AdjusterKind, Adjuster]] = []
    tracker = None

    for kind in options.adjusters:
        if kind == AdjusterKind.CONTEXTUAL:
            stages.append((kind, ContextualAdjuster(model, options.contextual)))
        elif kind == AdjusterKind.NOISE:
            adjuster = create_noise_bias_adjuster(model, options.noise)
            if adjuster is not None:
                stages.append((kind, adjuster))
        elif kind == AdjusterKind.COHERENCE:
            tracker = CoherenceTracker(
                model.definition.weights, options.coherence.tolerance
            )
            stages.append((kind, CoherenceAdjuster(tracker, options.coherence)))

    return DistributionPipeline(stages), tracker
