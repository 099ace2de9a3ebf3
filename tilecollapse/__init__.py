"""
Tile Collapse

Wave Function Collapse (simple tiled model): fills a grid with tiles that
satisfy pairwise adjacency rules by repeatedly collapsing the most
constrained cell and propagating the consequences.
"""

from .core.config import AdjusterKind, ModelOptions
from .core.errors import (
    ConfigurationError,
    ExhaustedAttemptsError,
    GenerationCancelledError,
    SamplingError,
)
from .core.heuristics import Heuristic
from .core.model import Model, RunStatus, StepView
from .core.pattern_selector import PatternStrategy
from .core.tileset_builder import TileDefinition, TileSpec, build_definition
from .generator import GenerationResult, Generator

__all__ = [
    "AdjusterKind",
    "ModelOptions",
    "ConfigurationError",
    "ExhaustedAttemptsError",
    "GenerationCancelledError",
    "SamplingError",
    "Heuristic",
    "Model",
    "RunStatus",
    "StepView",
    "PatternStrategy",
    "TileDefinition",
    "TileSpec",
    "build_definition",
    "GenerationResult",
    "Generator",
]
