"""
Tile Collapse - Distribution Adjusters

Heuristic biases applied to a cell's tile weights before sampling.
"""

from .coherence import CoherenceAdjuster, CoherenceTracker
from .contextual import ContextualAdjuster
from .noise_bias import NoiseBiasAdjuster, create_noise_bias_adjuster
from .pipeline import DistributionPipeline, build_pipeline

__all__ = [
    "CoherenceAdjuster",
    "CoherenceTracker",
    "ContextualAdjuster",
    "NoiseBiasAdjuster",
    "create_noise_bias_adjuster",
    "DistributionPipeline",
    "build_pipeline",
]
