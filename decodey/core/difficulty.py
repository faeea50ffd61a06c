from __future__ import annotations

import math
from typing import Literal, Union

Tier = Literal["easy", "medium", "hard"]

DEFAULT_TIER: Tier = "medium"

# Mistake budget per tier.
_MAX_MISTAKES = {
    "easy": 8,
    "medium": 5,
    "hard": 3,
}


def classify(value: float) -> Tier:
    """
    Map a numeric difficulty score onto a tier.

    Bands are half-open: [0, 1) easy, [1, 3) medium, [3, inf) hard.
    Negative scores count as easy; NaN falls back to medium.
    """
    if math.isnan(value):
        return DEFAULT_TIER
    if value < 1:
        return "easy"
    if value < 3:
        return "medium"
    return "hard"


def normalize_tier(name: str) -> Tier:
    """Return the canonical tier for `name`; unknown names become "medium"."""
    key = str(name or "").strip().lower()
    return key if key in _MAX_MISTAKES else DEFAULT_TIER  # type: ignore[return-value]


def resolve_tier(difficulty: Union[float, int, str]) -> Tier:
    """Accept either a numeric difficulty score or a tier name."""
    if isinstance(difficulty, str):
        return normalize_tier(difficulty)
    return classify(float(difficulty))


def max_mistakes(tier: str) -> int:
    """Mistake budget for `tier`: easy 8, medium 5, hard 3 (anything else 5)."""
    return _MAX_MISTAKES[normalize_tier(tier)]
