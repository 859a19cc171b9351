"""
Weighted random selection shared by the outcome tables and special plays
"""
import random
from typing import Hashable, Sequence


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def weighted_choice(items: Sequence[tuple[Hashable, float]], rng: random.Random):
    """
    Pick a key from [(key, weight), ...].

    Negative weights count as zero. A uniform draw in [0, total) is walked down
    the list; the first positive-weight item that takes it to zero or below
    wins. If the walk runs off the end (all weights zero, float rounding) the
    last item is returned.
    """
    if not items:
        raise ValueError("weighted_choice needs at least one item")

    total = sum(max(0.0, weight) for _, weight in items)
    remaining = rng.random() * total
    for key, weight in items:
        weight = max(0.0, weight)
        remaining -= weight
        if weight > 0 and remaining <= 0:
            return key
    return items[-1][0]


def roll(rng: random.Random, chance: float) -> bool:
    """True with the given probability (clamped to [0, 1])"""
    return rng.random() < clamp01(chance)
