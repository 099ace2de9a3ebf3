"""
Tile Collapse - Propagation Engine

The Model owns one wave state and drives the observe/propagate loop:

    start(seed) -> step() ... step() -> SOLVED | CONTRADICTED

Each step asks the cell picker for the next undecided cell, samples a tile
for it through the adjuster pipeline and the pattern selector, bans every
other tile there, then drains the pending-ban stack into the neighbours.
A step either settles completely or fails; cancellation is only observed
between steps.
"""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import numpy as np

from ..algorithms.pipeline import build_pipeline
from .config import ModelOptions
from .errors import SamplingError
from .heuristics import CellPicker, create_cell_picker, neighbors_of
from .pattern_selector import select_pattern
from .rng import make_rng
from .tileset_builder import TileDefinition
from .wave_state import WaveState

logger = logging.getLogger(__name__)


class RunStatus(Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    SOLVED = "solved"
    CONTRADICTED = "contradicted"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class StepView:
    """Read-only snapshot of a model handed to step recorders."""

    step: int
    width: int
    height: int
    remaining: tuple[int, ...]
    observed: tuple[int, ...]
    resolved: frozenset[int]


StepRecorder = Callable[[StepView], None]


class Model:
    """
    Simple tiled model: a grid of cells collapsing over a tile definition.

    The definition is shared read-only; everything mutable (wave state,
    random stream, pending stack, coherence tracker, usage counters)
    belongs to this model alone.
    """

    def __init__(self, definition: TileDefinition, options: ModelOptions):
        self.definition = definition
        self.options = options
        self.width = options.width
        self.height = options.height
        self.periodic = options.periodic
        self.footprint = 1
        self.cell_count = self.width * self.height
        self.tile_count = definition.tile_count

        self.state = WaveState(
            self.width, self.height, definition.weights, definition.propagator
        )
        self.neighbors = [
            tuple(neighbors_of(self, index)) for index in range(self.cell_count)
        ]
        self.pipeline, self.coherence_tracker = build_pipeline(self)
        self.pattern_usage = np.zeros(self.tile_count, dtype=np.int64)

        self.status = RunStatus.UNINITIALIZED
        self.seed: int | None = None
        self.decisions = 0
        self._rng: random.Random | None = None
        self._picker: CellPicker | None = None

        self._step_recorder: StepRecorder | None = None
        self._step_recorder_limit: int | None = None
        self.recorded_steps = 0

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    def coord_from_index(self, index: int) -> tuple[int, int]:
        return index % self.width, index // self.width

    # -------------------------------------------------------------------------
    # Step recording
    # -------------------------------------------------------------------------

    def set_step_recorder(
        self, recorder: StepRecorder | None, limit: int | None = None
    ) -> None:
        """
        Register a callback fired after every step, including step 0.

        Args:
            recorder: Called with a StepView; None unregisters
            limit: Maximum number of calls per run (None or <= 0 for no cap)
        """
        self._step_recorder = recorder
        self._step_recorder_limit = limit if limit is not None and limit > 0 else None

    def snapshot(self) -> StepView:
        state = self.state
        return StepView(
            step=self.decisions,
            width=self.width,
            height=self.height,
            remaining=tuple(int(n) for n in state.sums_of_ones),
            observed=tuple(int(t) for t in state.observed),
            resolved=frozenset(int(i) for i in np.flatnonzero(state.sums_of_ones == 1)),
        )

    def _record_step(self) -> None:
        if self._step_recorder is None:
            return
        if (
            self._step_recorder_limit is not None
            and self.recorded_steps >= self._step_recorder_limit
        ):
            return
        self._step_recorder(self.snapshot())
        self.recorded_steps += 1

    # -------------------------------------------------------------------------
    # Running
    # -------------------------------------------------------------------------

    def clear(self) -> None:
        """Reset everything a run mutates."""
        self.state.reset()
        if self.coherence_tracker is not None:
            self.coherence_tracker.reset()
        self.pattern_usage.fill(0)
        self.decisions = 0
        self.recorded_steps = 0

    def start(self, seed: int) -> None:
        """Begin a new attempt: reset state, seed the random stream, record step 0."""
        self.clear()
        self.seed = seed
        self._rng = make_rng(seed)
        self._picker = create_cell_picker(self.options.heuristic, self)
        self.status = RunStatus.RUNNING
        logger.debug(
            "Starting run: seed=%s grid=%dx%d tiles=%d",
            seed,
            self.width,
            self.height,
            self.tile_count,
        )
        self._record_step()

    def step(self) -> RunStatus:
        """
        Perform one observe/propagate step.

        Returns:
            RUNNING while undecided cells remain, else SOLVED or CONTRADICTED

        Raises:
            RuntimeError: If no run is in progress
            SamplingError: If the chosen cell's distribution is all zeros
        """
        if self.status is not RunStatus.RUNNING:
            raise RuntimeError(f"Model is not running (status: {self.status.value})")

        node = self._picker.pick(self._rng)
        if node == -1:
            self.commit_observed()
            self.status = RunStatus.SOLVED
            self._record_step()
            return self.status

        self.observe(node)
        if not self.propagate():
            logger.debug(
                "Contradiction after %d decision(s) (seed=%s)", self.decisions, self.seed
            )
            self.status = RunStatus.CONTRADICTED
        self._record_step()
        return self.status

    def run(
        self,
        seed: int,
        limit: int = -1,
        should_cancel: Callable[[], bool] | None = None,
    ) -> bool:
        """
        Run one attempt to completion.

        Args:
            seed: Seed of the attempt's random stream
            limit: Maximum number of steps; negative means unbounded. When
                the limit is hit, every cell is committed to its first
                remaining tile.
            should_cancel: Polled between steps; returning True stops the
                run with status CANCELLED

        Returns:
            True if the run ended SOLVED
        """
        self.start(seed)
        steps = 0
        while self.status is RunStatus.RUNNING:
            if 0 <= limit <= steps:
                self.commit_observed()
                self.status = RunStatus.SOLVED
                self._record_step()
                break
            if should_cancel is not None and should_cancel():
                logger.debug("Run cancelled after %d step(s)", steps)
                self.status = RunStatus.CANCELLED
                break
            self.step()
            steps += 1

        return self.status is RunStatus.SOLVED

    def observe(self, node: int) -> int:
        """Collapse one cell to a sampled tile and ban the rest of its domain."""
        distribution = self.get_distribution_for_cell(node)
        availability = self.state.wave[node]
        choice = select_pattern(
            self.options.pattern_strategy,
            distribution,
            self._rng,
            self.pattern_usage,
            availability,
        )
        if choice == -1:
            raise SamplingError(node)

        for tile in self.state.remaining_tiles(node):
            if tile != choice:
                self.state.ban(node, tile)

        self.state.observed[node] = choice
        self.pattern_usage[choice] += 1
        if self.coherence_tracker is not None:
            self.coherence_tracker.register(choice)
        self.decisions += 1
        return choice

    def get_distribution_for_cell(self, cell: int) -> np.ndarray:
        """Base weights of the cell's domain, passed through the adjusters."""
        return self.pipeline.apply(cell, self.state.sample_distribution(cell))

    def propagate(self) -> bool:
        """
        Drain the pending-ban stack into neighbouring cells.

        Returns:
            False as soon as any cell's domain empties
        """
        state = self.state
        propagator = self.definition.propagator
        compatible = state.compatible

        while state.has_pending():
            source, tile = state.pop_pending()
            for direction, neighbor in self.neighbors[source]:
                for target in propagator[direction][tile]:
                    compatible[neighbor, target, direction] -= 1
                    if compatible[neighbor, target, direction] == 0:
                        if state.ban(neighbor, target):
                            return False

        return True

    def commit_observed(self) -> None:
        """Record every cell's first remaining tile as its observed tile."""
        state = self.state
        undecided = 0
        for index in range(self.cell_count):
            remaining = state.remaining_tiles(index)
            if len(remaining) > 1:
                undecided += 1
            state.observed[index] = remaining[0] if remaining else -1
        if undecided:
            logger.warning(
                "Committed %d cell(s) that still had several candidate tiles",
                undecided,
            )

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    def is_fully_observed(self) -> bool:
        return bool(np.all(self.state.observed >= 0))

    def observed_grid(self) -> list[list[int]]:
        """Observed tile id per cell as rows (-1 where nothing is committed)."""
        observed = self.state.observed
        return [
            [int(t) for t in observed[y * self.width : (y + 1) * self.width]]
            for y in range(self.height)
        ]

    def cell_options(self, index: int) -> list[tuple[int, float]]:
        """Still-possible tiles of a cell with their base weights."""
        weights = self.state.weights
        return [(t, float(weights[t])) for t in self.state.remaining_tiles(index)]
