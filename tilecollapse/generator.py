"""
Tile Collapse - Generator

Restart orchestration around the engine: builds a fresh Model per attempt,
collects step frames (with rendered images when the tiles carry bitmaps),
and gives up after a fixed restart budget.
"""

import base64
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any

import numpy as np

from .core.config import ModelOptions
from .core.errors import ExhaustedAttemptsError, GenerationCancelledError
from .core.model import Model, RunStatus, StepView
from .core.tileset_builder import TileDefinition
from .rendering.pil_renderer import render_model_to_png

logger = logging.getLogger(__name__)

DEFAULT_RESTARTS = 120


def encode_constraint(remaining, tile_count: int) -> str:
    """
    Encode per-cell uncertainty as base64, one byte per cell.

    A cell with at most one tile left encodes as 0; otherwise the byte is
    the share of the other tiles still possible, scaled to 0-255.
    """
    counts = np.asarray(remaining, dtype=np.float64)
    scale = max(tile_count - 1, 1)
    normalized = np.where(counts <= 1, 0.0, np.minimum(1.0, (counts - 1) / scale))
    data = np.rint(normalized * 255).astype(np.uint8).tobytes()
    return base64.b64encode(data).decode("ascii")


def encode_image(model: Model) -> str:
    """Render a model as a PNG data URI."""
    data = base64.b64encode(render_model_to_png(model)).decode("ascii")
    return f"data:image/png;base64,{data}"


class FrameCollector:
    """
    Step recorder storing a compact frame per step.

    When a model is given, every frame also carries a rendered PNG of the
    grid as it stood after that step.
    """

    def __init__(self, tile_count: int, model: Model | None = None):
        self.tile_count = tile_count
        self.model = model
        self.frames: list[dict[str, Any]] = []

    def build_frame(self, view: StepView) -> dict[str, Any]:
        frame = {
            "step": view.step,
            "constraint": encode_constraint(view.remaining, self.tile_count),
            "observed": len(view.resolved),
        }
        if self.model is not None:
            frame["image"] = encode_image(self.model)
        return frame

    def __call__(self, view: StepView) -> None:
        self.frames.append(self.build_frame(view))

    def finish(self) -> None:
        """Append the final grid unless the last frame already shows it."""
        if self.model is None:
            return
        final = self.build_frame(self.model.snapshot())
        if not self.frames or self.frames[-1].get("image") != final["image"]:
            self.frames.append(final)



@dataclass
class GenerationResult:
    """A solved model and how it was obtained."""

    model: Model
    attempts: int
    seed: int
    frames: list[dict[str, Any]] = field(default_factory=list)


class Generator:
    """
    Runs attempts with consecutive seeds until one solves.

    The tile definition is shared by every attempt; each attempt gets its
    own Model, so nothing mutable crosses attempt boundaries.
    """

    def __init__(
        self,
        definition: TileDefinition,
        options: ModelOptions,
        restarts: int = DEFAULT_RESTARTS,
        limit: int = -1,
        frame_limit: int | None = None,
    ):
        self.definition = definition
        self.options = options
        self.restarts = max(restarts, 1)
        self.limit = limit
        self.frame_limit = (
            frame_limit if frame_limit is not None else options.width * options.height + 20
        )

    def build_model(self, seed: int) -> Model:
        """Fresh model for one attempt; the noise field follows the attempt seed."""
        options = replace(self.options, noise=replace(self.options.noise, seed=seed))
        return Model(self.definition, options)

    def generate(
        self, seed: int, should_cancel: Callable[[], bool] | None = None
    ) -> GenerationResult:
        """
        Generate a fully observed grid.

        Args:
            seed: Seed of the first attempt; attempt k uses seed + k
            should_cancel: Forwarded to Model.run

        Raises:
            ExhaustedAttemptsError: If no attempt within the budget solved
            GenerationCancelledError: If should_cancel asked to stop
        """
        run_seed = seed
        for attempt in range(self.restarts):
            run_seed = seed + attempt
            model = self.build_model(run_seed)

            collector = FrameCollector(
                model.tile_count, model if self.definition.has_pixels else None
            )
            if self.frame_limit > 0:
                model.set_step_recorder(collector, self.frame_limit)

            success = model.run(run_seed, self.limit, should_cancel)
            if model.status is RunStatus.CANCELLED:
                logger.info("Generation cancelled during attempt %d", attempt + 1)
                raise GenerationCancelledError(attempt + 1)

            if success and model.is_fully_observed():
                logger.info("Solved after %d attempt(s) (seed %d)", attempt + 1, run_seed)
                collector.finish()
                return GenerationResult(
                    model=model,
                    attempts=attempt + 1,
                    seed=run_seed,
                    frames=collector.frames,
                )

            logger.info(
                "Attempt %d/%d failed (seed %d, status %s)",
                attempt + 1,
                self.restarts,
                run_seed,
                model.status.value,
            )

        logger.warning("Giving up after %d attempt(s)", self.restarts)
        raise ExhaustedAttemptsError(self.restarts, run_seed)
