"""
Tile Collapse - Error Types

Exceptions raised by the tileset builder, the engine and the generator.
A contradiction is not an error: it is reported as a run result.
"""


class ConfigurationError(ValueError):
    """Raised when a tile catalog, adjacency list or option set is unusable.

    Always fatal; retrying with a different seed cannot help.
    """


class SamplingError(RuntimeError):
    """Raised when a cell with remaining tiles produced an all-zero distribution."""

    def __init__(self, cell_index: int):
        self.cell_index = cell_index
        super().__init__(str(self))

    def __str__(self) -> str:
        return (
            f"Failed to sample a tile for cell {self.cell_index}: "
            f"all weights in the distribution are zero"
        )


class ExhaustedAttemptsError(RuntimeError):
    """Raised when every attempt in the restart budget contradicted."""

    def __init__(self, attempts: int, last_seed: int | None = None):
        self.attempts = attempts
        self.last_seed = last_seed
        super().__init__(str(self))

    def __str__(self) -> str:
        message = f"Failed to generate a valid output after {self.attempts} attempt(s)"
        if self.last_seed is not None:
            message += f" (last seed {self.last_seed})"
        return message + ". Try increasing the restart budget or reducing the grid size."


class GenerationCancelledError(RuntimeError):
    """Raised when the caller cancelled generation between steps."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Generation cancelled during attempt {attempts}")
