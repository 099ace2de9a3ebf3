"""
Tile Collapse - Symmetry Classes

Each base tile belongs to a symmetry class that decides how many distinct
oriented variants it has and how rotation and reflection permute them.

Variant slots of a transform table:
    0: identity
    1-3: rotated 90°, 180°, 270° counter-clockwise
    4-7: slots 0-3 reflected left-right
"""

from collections.abc import Callable
from dataclasses import dataclass

from .errors import ConfigurationError

TRANSFORM_SLOTS = 8


@dataclass(frozen=True)
class SymmetryClass:
    """Cardinality and variant permutations for one symmetry class."""

    symbol: str
    cardinality: int
    rotate: Callable[[int], int]
    reflect: Callable[[int], int]


SYMMETRY_CLASSES: dict[str, SymmetryClass] = {
    "X": SymmetryClass("X", 1, lambda i: i, lambda i: i),
    "I": SymmetryClass("I", 2, lambda i: 1 - i, lambda i: i),
    "\\": SymmetryClass("\\", 2, lambda i: 1 - i, lambda i: 1 - i),
    "L": SymmetryClass(
        "L",
        4,
        lambda i: (i + 1) % 4,
        lambda i: i + 1 if i % 2 == 0 else i - 1,
    ),
    "T": SymmetryClass(
        "T",
        4,
        lambda i: (i + 1) % 4,
        lambda i: i if i % 2 == 0 else 4 - i,
    ),
    "F": SymmetryClass(
        "F",
        8,
        lambda i: (i + 1) % 4 if i < 4 else 4 + (i - 1) % 4,
        lambda i: i + 4 if i < 4 else i - 4,
    ),
}


def get_symmetry(symbol: str) -> SymmetryClass:
    """
    Look up a symmetry class by its catalog symbol.

    Raises:
        ConfigurationError: If the symbol is not one of X, I, \\, L, T, F
    """
    try:
        return SYMMETRY_CLASSES[symbol]
    except KeyError:
        raise ConfigurationError(
            f"Unknown symmetry '{symbol}' (expected one of "
            f"{', '.join(SYMMETRY_CLASSES)})"
        ) from None


def transform_table(symmetry: SymmetryClass, variant: int) -> tuple[int, ...]:
    """
    Compute the 8-slot transform table of one variant, relative to its base tile.

    Slot k holds the variant that results from applying transform k to
    the given variant.
    """
    rot1 = symmetry.rotate(variant)
    rot2 = symmetry.rotate(rot1)
    rot3 = symmetry.rotate(rot2)
    return (
        variant,
        rot1,
        rot2,
        rot3,
        symmetry.reflect(variant),
        symmetry.reflect(rot1),
        symmetry.reflect(rot2),
        symmetry.reflect(rot3),
    )
