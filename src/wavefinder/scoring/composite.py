"""
Shared scoring utilities.

This module contains small, reusable helpers used across scorers:
- `round_half_up`: rounding that sends .5 up (Python's `round` sends it to even)
- `normalize_weights`: rescale preference weights so they sum to 100
- `blend_weight`: apply one slider edit, then renormalize the whole set
"""

from __future__ import annotations

import math

from wavefinder.domain.models import PreferenceWeights, WeightName


def round_half_up(x: float, ndigits: int = 0) -> float:
    """Round with halves going up: 2.5 -> 3, -2.5 -> -2."""
    factor = 10**ndigits
    return math.floor(x * factor + 0.5) / factor


def normalize_weights(weights: PreferenceWeights) -> PreferenceWeights:
    """Rescale weights so they sum to 100, keeping proportions.

    Each value is rounded on its own, so the result may be off 100 by a few points.
    An all-zero input becomes an even split.
    """
    values = weights.model_dump()
    total = sum(values.values())
    if total <= 0:
        even = int(round_half_up(100 / len(values)))
        return PreferenceWeights(**{k: even for k in values})
    factor = 100 / total
    return PreferenceWeights(**{k: int(round_half_up(v * factor)) for k, v in values.items()})


def blend_weight(weights: PreferenceWeights, factor: WeightName, value: float) -> PreferenceWeights:
    """Set one weight (a slider move) and renormalize every weight around it."""
    updated = weights.model_copy(update={factor: max(0.0, float(value))})
    return normalize_weights(updated)
