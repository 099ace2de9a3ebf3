"""Shared pytest fixtures for tile catalogs, models and tile bitmaps."""

from pathlib import Path

import numpy as np
import pytest

from tilecollapse.core.config import ModelOptions
from tilecollapse.core.model import Model
from tilecollapse.core.tileset_builder import TileSpec, build_definition

COAST_COLORS = {
    "land": (0, 255, 0, 255),
    "coast": (255, 255, 0, 255),
    "sea": (0, 0, 255, 255),
}

COAST_XML = """<set>
  <tiles>
    <tile name="land" weight="1"/>
    <tile name="coast" weight="1"/>
    <tile name="sea" weight="2"/>
  </tiles>
  <neighbors>
    <neighbor left="land" right="land"/>
    <neighbor left="land" right="coast"/>
    <neighbor left="coast" right="coast"/>
    <neighbor left="coast" right="sea"/>
    <neighbor left="sea" right="sea"/>
  </neighbors>
</set>
"""


def solid_bitmap(color, size: int = 2) -> np.ndarray:
    """Square RGBA bitmap filled with one color."""
    bitmap = np.zeros((size, size, 4), dtype=np.uint8)
    bitmap[:] = color
    return bitmap


@pytest.fixture
def pipes_catalog_path():
    """Path to the sample pipe catalog."""
    return Path(__file__).parent.parent / "data" / "tilesets" / "pipes.xml"


@pytest.fixture
def open_definition():
    """Two X tiles that may sit next to each other in any arrangement.

    A has weight 1 and B weight 3.
    """
    specs = [TileSpec("A", "X", 1.0), TileSpec("B", "X", 3.0)]
    neighbors = [("A", "A"), ("A", "B"), ("B", "B")]
    return build_definition(specs, neighbors)


@pytest.fixture
def checkerboard_definition():
    """Two X tiles that must alternate; unsatisfiable on odd periodic grids."""
    specs = [TileSpec("A"), TileSpec("B")]
    return build_definition(specs, [("A", "B")])


@pytest.fixture
def coast_definition():
    """Land and sea separated by coast; coast fits anywhere, so runs never contradict."""
    specs = [TileSpec("land", "X", 1.0), TileSpec("coast", "X", 1.0), TileSpec("sea", "X", 2.0)]
    neighbors = [
        ("land", "land"),
        ("land", "coast"),
        ("coast", "coast"),
        ("coast", "sea"),
        ("sea", "sea"),
    ]
    return build_definition(specs, neighbors)


@pytest.fixture
def coast_bitmap_definition():
    """Coast catalog with 2x2 solid-color bitmaps."""
    specs = [TileSpec("land", "X", 1.0), TileSpec("coast", "X", 1.0), TileSpec("sea", "X", 2.0)]
    neighbors = [
        ("land", "land"),
        ("land", "coast"),
        ("coast", "coast"),
        ("coast", "sea"),
        ("sea", "sea"),
    ]
    bitmaps = {name: solid_bitmap(color) for name, color in COAST_COLORS.items()}
    return build_definition(specs, neighbors, bitmaps)


@pytest.fixture
def coast_catalog(tmp_path):
    """Write the coast catalog plus one PNG per tile; return (xml path, tiles dir)."""
    from PIL import Image

    xml_path = tmp_path / "coast.xml"
    xml_path.write_text(COAST_XML)

    tiles_dir = tmp_path / "tiles"
    tiles_dir.mkdir()
    for name, color in COAST_COLORS.items():
        Image.fromarray(solid_bitmap(color, size=4)).save(tiles_dir / f"{name}.png")

    return xml_path, tiles_dir


@pytest.fixture
def make_model():
    """Factory building a Model from a definition and option overrides."""

    def _make(definition, width=3, height=3, **kwargs):
        return Model(definition, ModelOptions(width=width, height=height, **kwargs))

    return _make


def _assert_adjacency_respected(model):
    propagator = model.definition.propagator
    observed = model.state.observed
    for index in range(model.cell_count):
        tile = int(observed[index])
        assert tile >= 0, f"cell {index} is not observed"
        for direction, neighbor in model.neighbors[index]:
            assert int(observed[neighbor]) in propagator[direction][tile], (
                f"cell {index} ({tile}) and neighbour {neighbor} "
                f"({observed[neighbor]}) break the rules in direction {direction}"
            )


@pytest.fixture
def assert_adjacency():
    """Checker asserting every pair of neighbouring observed tiles is allowed."""
    return _assert_adjacency_respected
