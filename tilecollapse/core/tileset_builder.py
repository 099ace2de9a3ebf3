"""
Tile Collapse - Tile & Adjacency Builder

Expands a tile catalog through its symmetry classes into a flat table of
oriented tile variants, and compiles the declared left/right neighbour
pairs into a sparse 4-direction propagator.

Algorithm:
    1. For each base tile, compute the transform table of each of its
       1/2/4/8 variants and give every variant a global id
    2. For each declared pair (left, right), mark `left` as allowed west of
       `right`, plus the reflected and 180°-rotated echoes of that rule
    3. Rotate both tiles of the pair 90° and repeat for the vertical axis
    4. Fill east/north by transposing west/south
    5. Compact every dense row to a sorted tuple of allowed ids, failing if
       any row is empty
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from .directions import DIRECTION_NAMES, EAST, NORTH, SOUTH, WEST
from .errors import ConfigurationError
from .symmetry import get_symmetry, transform_table

# propagator[direction][tile] -> ids allowed next to `tile` in `direction`
Propagator = tuple[tuple[tuple[int, ...], ...], ...]


@dataclass(frozen=True)
class TileSpec:
    """One base tile declared in a catalog."""

    name: str
    symmetry: str = "X"
    weight: float = 1.0


@dataclass(frozen=True)
class TileVariant:
    """One oriented variant of a base tile.

    `pixels` is an RGBA array of shape (size, size, 4) when the catalog came
    with bitmaps, otherwise None. The engine never looks at it.
    """

    id: int
    name: str
    weight: float
    pixels: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class TileDefinition:
    """Immutable builder output, safe to share between attempts."""

    tiles: tuple[TileVariant, ...]
    propagator: Propagator
    actions: tuple[tuple[int, ...], ...]
    first_occurrence: Mapping[str, int]
    tile_size: int = 0

    @property
    def tile_count(self) -> int:
        return len(self.tiles)

    @property
    def weights(self) -> tuple[float, ...]:
        return tuple(tile.weight for tile in self.tiles)

    @property
    def tile_names(self) -> tuple[str, ...]:
        return tuple(tile.name for tile in self.tiles)

    @property
    def has_pixels(self) -> bool:
        return bool(self.tiles) and self.tiles[0].pixels is not None

    def tile_id(self, spec: str) -> int:
        """Resolve a "name [transform]" reference to a global tile id."""
        return resolve_tile_reference(spec, self.actions, self.first_occurrence)


def resolve_tile_reference(
    spec: str,
    actions: Sequence[Sequence[int]],
    first_occurrence: Mapping[str, int],
) -> int:
    """
    Resolve "name" or "name transform" to a global tile id.

    The transform index selects a slot of the base tile's transform table
    (0-3 rotations, 4-7 reflections).

    Raises:
        ConfigurationError: If the name is unknown or the transform is invalid
    """
    parts = spec.split()
    if not parts:
        raise ConfigurationError("Empty tile reference in neighbor list")

    name = parts[0]
    transform = 0
    if len(parts) > 1:
        try:
            transform = int(parts[1])
        except ValueError:
            raise ConfigurationError(
                f"Invalid transform '{parts[1]}' for tile {name}"
            ) from None

    if name not in first_occurrence:
        raise ConfigurationError(f"Unknown tile referenced: {name}")

    variants = actions[first_occurrence[name]]
    if transform < 0 or transform >= len(variants):
        raise ConfigurationError(f"Invalid transform {transform} for tile {name}")

    return variants[transform]


def rotate_bitmap(pixels: np.ndarray) -> np.ndarray:
    """Rotate a square bitmap 90° counter-clockwise."""
    return np.ascontiguousarray(np.rot90(pixels))


def reflect_bitmap(pixels: np.ndarray) -> np.ndarray:
    """Mirror a square bitmap left-right."""
    return np.ascontiguousarray(np.fliplr(pixels))


def build_definition(
    tile_specs: Sequence[TileSpec],
    neighbors: Sequence[tuple[str, str]],
    bitmaps: Mapping[str, np.ndarray] | None = None,
) -> TileDefinition:
    """
    Build the flat tile table and propagator from a catalog.

    Args:
        tile_specs: Base tiles in catalog order
        neighbors: Declared (left, right) pairs; `right` may sit east of `left`
        bitmaps: Optional base-tile bitmaps keyed by tile name

    Returns:
        TileDefinition with one TileVariant per oriented variant

    Raises:
        ConfigurationError: On duplicate names, bad weights, bad bitmaps,
            unresolved references, or a tile with no allowed neighbour in
            some direction
    """
    if not tile_specs:
        raise ConfigurationError("Tile catalog is empty")

    actions: list[tuple[int, ...]] = []
    first_occurrence: dict[str, int] = {}
    variants: list[TileVariant] = []
    tile_size = 0

    for spec in tile_specs:
        if spec.name in first_occurrence:
            raise ConfigurationError(f"Duplicate tile name: {spec.name}")
        if not spec.weight > 0:
            raise ConfigurationError(
                f"Tile {spec.name} must have a positive weight, got {spec.weight}"
            )

        symmetry = get_symmetry(spec.symmetry)
        base_index = len(actions)
        first_occurrence[spec.name] = base_index

        for t in range(symmetry.cardinality):
            actions.append(
                tuple(slot + base_index for slot in transform_table(symmetry, t))
            )

        payloads: list[np.ndarray | None] = [None] * symmetry.cardinality
        if bitmaps is not None:
            base = _checked_bitmap(spec.name, bitmaps)
            if not tile_size:
                tile_size = base.shape[0]
            elif base.shape[0] != tile_size:
                raise ConfigurationError("All tiles must share the same dimensions.")

            payloads[0] = base
            for t in range(1, symmetry.cardinality):
                if t <= 3:
                    payloads[t] = rotate_bitmap(payloads[t - 1])
                else:
                    payloads[t] = reflect_bitmap(payloads[t - 4])
            for payload in payloads:
                payload.setflags(write=False)

        for t in range(symmetry.cardinality):
            variants.append(
                TileVariant(
                    id=base_index + t,
                    name=f"{spec.name} {t}",
                    weight=float(spec.weight),
                    pixels=payloads[t],
                )
            )

    propagator = _build_propagator(actions, first_occurrence, neighbors, variants)

    return TileDefinition(
        tiles=tuple(variants),
        propagator=propagator,
        actions=tuple(actions),
        first_occurrence=dict(first_occurrence),
        tile_size=tile_size,
    )


def _checked_bitmap(name: str, bitmaps: Mapping[str, np.ndarray]) -> np.ndarray:
    if name not in bitmaps:
        raise ConfigurationError(f"Tile bitmap missing for {name}")
    bitmap = np.array(bitmaps[name], copy=True)
    if bitmap.ndim < 2 or bitmap.shape[0] != bitmap.shape[1]:
        raise ConfigurationError(f"Tile {name} must be square.")
    return bitmap


def _build_propagator(
    actions: Sequence[tuple[int, ...]],
    first_occurrence: Mapping[str, int],
    neighbors: Sequence[tuple[str, str]],
    variants: Sequence[TileVariant],
) -> Propagator:
    """Compile declared pairs into the sparse per-direction table."""
    count = len(actions)
    dense = np.zeros((4, count, count), dtype=bool)

    for left_spec, right_spec in neighbors:
        left = resolve_tile_reference(left_spec, actions, first_occurrence)
        right = resolve_tile_reference(right_spec, actions, first_occurrence)
        down = actions[left][1]
        up = actions[right][1]

        dense[WEST, right, left] = True
        dense[WEST, actions[right][6], actions[left][6]] = True
        dense[WEST, actions[left][4], actions[right][4]] = True
        dense[WEST, actions[left][2], actions[right][2]] = True

        dense[SOUTH, up, down] = True
        dense[SOUTH, actions[down][6], actions[up][6]] = True
        dense[SOUTH, actions[up][4], actions[down][4]] = True
        dense[SOUTH, actions[down][2], actions[up][2]] = True

    dense[EAST] = dense[WEST].T
    dense[NORTH] = dense[SOUTH].T

    sparse = []
    for direction in range(4):
        rows = []
        for tile in range(count):
            allowed = tuple(int(t) for t in np.flatnonzero(dense[direction, tile]))
            if not allowed:
                raise ConfigurationError(
                    f"Tile {variants[tile].name} has no neighbors in direction "
                    f"{DIRECTION_NAMES[direction]}"
                )
            rows.append(allowed)
        sparse.append(tuple(rows))

    return tuple(sparse)
