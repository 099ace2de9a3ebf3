"""
Tile Collapse - Result Files

Saves a generated grid as JSON: the tile name table and one row of tile
ids per grid row.
"""

from pathlib import Path
from typing import Any

from . import compact_json as json


def result_to_dict(result) -> dict[str, Any]:
    """Plain-data form of a GenerationResult."""
    model = result.model
    return {
        "width": model.width,
        "height": model.height,
        "seed": result.seed,
        "attempts": result.attempts,
        "tiles": list(model.definition.tile_names),
        "rows": model.observed_grid(),
    }


def save_result(path: str | Path, result) -> None:
    """Write a GenerationResult to a JSON file."""
    with open(path, "w") as f:
        json.dump(result_to_dict(result), f)


def load_result(path: str | Path) -> dict[str, Any]:
    """Read a result file back as a dictionary."""
    with open(path) as f:
        return json.load(f)
