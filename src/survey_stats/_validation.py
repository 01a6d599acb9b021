"""Small argument and rank helpers shared by the test modules."""

from __future__ import annotations

import numpy as np

from .exceptions import InvalidArgumentError


def _choice(value: str, name: str, allowed: tuple[str, ...]) -> str:
    """Normalise an option string and check it against *allowed*."""
    normalised = value.strip().lower()
    if normalised not in allowed:
        raise InvalidArgumentError(
            f"Unknown {name} '{value}'. Choose from: {', '.join(allowed)}."
        )
    return normalised


def _tie_sizes(values: np.ndarray) -> np.ndarray:
    """Sizes of the groups of equal values (1 for an untied value)."""
    _, counts = np.unique(values, return_counts=True)
    return counts.astype(float)
