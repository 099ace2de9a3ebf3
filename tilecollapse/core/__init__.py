"""
Core constraint-propagation engine.

This package contains the tile/adjacency builder, the wave state, the
cell-selection heuristics and the pattern selector. The Model that drives
them lives in core.model, which also depends on the adjusters package.
"""

from .config import (
    AdjusterKind,
    CoherenceOptions,
    ContextualOptions,
    ModelOptions,
    NoiseOptions,
)
from .errors import (
    ConfigurationError,
    ExhaustedAttemptsError,
    GenerationCancelledError,
    SamplingError,
)
from .heuristics import Heuristic
from .pattern_selector import PatternStrategy
from .tileset_builder import TileDefinition, TileSpec, TileVariant, build_definition
from .wave_state import WaveState

__all__ = [
    "AdjusterKind",
    "CoherenceOptions",
    "ContextualOptions",
    "ModelOptions",
    "NoiseOptions",
    "ConfigurationError",
    "ExhaustedAttemptsError",
    "GenerationCancelledError",
    "SamplingError",
    "Heuristic",
    "PatternStrategy",
    "TileDefinition",
    "TileSpec",
    "TileVariant",
    "build_definition",
    "WaveState",
]
