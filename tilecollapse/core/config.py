"""
Tile Collapse - Model Configuration

Option records for the engine and its distribution adjusters, plus parsers
turning loose user input (CLI flags, query-style dicts) into the closed
enums. Invalid configuration is rejected when the options are built.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import ConfigurationError
from .heuristics import Heuristic
from .pattern_selector import PatternStrategy


class AdjusterKind(str, Enum):
    CONTEXTUAL = "contextual"
    NOISE = "noise"
    COHERENCE = "coherence"


DEFAULT_ADJUSTERS = (AdjusterKind.CONTEXTUAL, AdjusterKind.COHERENCE)


@dataclass(frozen=True)
class ContextualOptions:
    """Boost for tiles matching their neighbours, flat penalty otherwise."""

    bias: float = 1.0
    penalty: float = 0.2

    def __post_init__(self):
        if self.bias < 0:
            raise ConfigurationError(f"Contextual bias must be >= 0, got {self.bias}")
        if self.penalty <= 0:
            raise ConfigurationError(
                f"Contextual penalty must be > 0, got {self.penalty}"
            )


@dataclass(frozen=True)
class NoiseOptions:
    """Per-cell group preference multipliers."""

    boost: float = 1.4
    bleed: float = 0.85
    seed: int = 0

    def __post_init__(self):
        if self.boost <= 0 or self.bleed <= 0:
            raise ConfigurationError(
                f"Noise boost and bleed must be > 0, got {self.boost}/{self.bleed}"
            )


@dataclass(frozen=True)
class CoherenceOptions:
    """Tolerance band and modifier limits for the coherence tracker."""

    tolerance: float = 0.12
    strength: float = 0.6
    penalty_floor: float = 0.25
    boost_cap: float = 2.0

    def __post_init__(self):
        if self.tolerance < 0:
            raise ConfigurationError(
                f"Coherence tolerance must be >= 0, got {self.tolerance}"
            )
        for name in ("strength", "penalty_floor", "boost_cap"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(
                    f"Coherence {name} must be > 0, got {getattr(self, name)}"
                )


@dataclass(frozen=True)
class ModelOptions:
    """
    Grid shape and policy selection for one model.

    `adjusters` is the composition order of the distribution pipeline:
    each adjuster sees the output of the ones before it.
    """

    width: int
    height: int
    periodic: bool = False
    heuristic: Heuristic = Heuristic.ENTROPY
    pattern_strategy: PatternStrategy = PatternStrategy.WEIGHTED
    adjusters: tuple[AdjusterKind, ...] = DEFAULT_ADJUSTERS
    contextual: ContextualOptions = field(default_factory=ContextualOptions)
    noise: NoiseOptions = field(default_factory=NoiseOptions)
    coherence: CoherenceOptions = field(default_factory=CoherenceOptions)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"Grid dimensions must be positive, got {self.width}x{self.height}"
            )
        # Normalize plain strings to the enums
        object.__setattr__(self, "heuristic", parse_heuristic(self.heuristic))
        object.__setattr__(
            self, "pattern_strategy", parse_pattern_strategy(self.pattern_strategy)
        )
        object.__setattr__(self, "adjusters", parse_adjusters(self.adjusters))

    @classmethod
    def from_modes(
        cls, width: int, height: int, modes: Mapping[str, Any], **kwargs
    ) -> "ModelOptions":
        """
        Build options from a query-style mapping.

        Recognized keys: context, noise, coherence (booleans, defaults on/off/on),
        pattern, locator. Missing keys take their defaults.
        """
        adjusters = []
        if parse_boolean(modes.get("context"), True):
            adjusters.append(AdjusterKind.CONTEXTUAL)
        if parse_boolean(modes.get("noise"), False):
            adjusters.append(AdjusterKind.NOISE)
        if parse_boolean(modes.get("coherence"), True):
            adjusters.append(AdjusterKind.COHERENCE)

        return cls(
            width=width,
            height=height,
            heuristic=parse_heuristic(modes.get("locator") or Heuristic.ENTROPY),
            pattern_strategy=parse_pattern_strategy(
                modes.get("pattern") or PatternStrategy.WEIGHTED
            ),
            adjusters=tuple(adjusters),
            **kwargs,
        )


def parse_boolean(value: Any, default: bool) -> bool:
    """Interpret 1/true/yes (any case) as True; None gives the default."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes")


def parse_heuristic(value: Any) -> Heuristic:
    try:
        return Heuristic(_enum_text(value))
    except ValueError:
        raise ConfigurationError(
            f"Unknown heuristic '{value}' (expected one of "
            f"{', '.join(h.value for h in Heuristic)})"
        ) from None


def parse_pattern_strategy(value: Any) -> PatternStrategy:
    try:
        return PatternStrategy(_enum_text(value))
    except ValueError:
        raise ConfigurationError(
            f"Unknown pattern strategy '{value}' (expected one of "
            f"{', '.join(s.value for s in PatternStrategy)})"
        ) from None


def parse_adjusters(values: Iterable[Any] | str) -> tuple[AdjusterKind, ...]:
    """
    Parse an ordered adjuster list.

    Accepts enum members, names, or a comma-separated string. An empty
    string or "none" means no adjusters.

    Raises:
        ConfigurationError: On unknown names or duplicates
    """
    if isinstance(values, str):
        text = values.strip().lower()
        values = [] if text in ("", "none") else [v.strip() for v in text.split(",")]

    kinds: list[AdjusterKind] = []
    for value in values:
        try:
            kind = AdjusterKind(_enum_text(value))
        except ValueError:
            raise ConfigurationError(
                f"Unknown adjuster '{value}' (expected one of "
                f"{', '.join(k.value for k in AdjusterKind)})"
            ) from None
        if kind in kinds:
            raise ConfigurationError(f"Adjuster '{kind.value}' listed more than once")
        kinds.append(kind)

    return tuple(kinds)


def _enum_text(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    return str(value).strip().lower()
