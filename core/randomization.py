"""
Randomization Service
Seedable pseudo-random stream and shuffling used by every randomization step
"""

import math
import random
from typing import Callable, List, TypeVar

from config.design_config import MAX_RANDOM_SEED
from core.constants import MULBERRY32_INCREMENT, UINT32_MASK, UINT32_RANGE

T = TypeVar("T")


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply"""
    return (a * b) & UINT32_MASK


class Mulberry32:
    """
    Mulberry32 pseudo-random generator.

    Produces floats in [0, 1). The stream depends only on the seed and the
    number of draws taken so far, so the same seed gives the same design on
    every platform. Negative seeds wrap modulo 2**32.

    Examples:
        >>> rng = Mulberry32(42)
        >>> rng()
        0.6011037519201636
        >>> rng()
        0.44829055899754167
    """

    def __init__(self, seed: int):
        self.seed = int(seed)
        self._state = self.seed & UINT32_MASK
        self.draws = 0

    def __call__(self) -> float:
        return self.random()

    def random(self) -> float:
        """Advance the state and return the next float in [0, 1)"""
        self._state = (self._state + MULBERRY32_INCREMENT) & UINT32_MASK
        self.draws += 1

        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & UINT32_MASK
        return ((t ^ (t >> 14)) & UINT32_MASK) / UINT32_RANGE


def derive_location_seed(seed: int, location: int) -> int:
    """
    Seed of the PRNG stream for a 1-based location index.

    Location 1 uses the design seed unchanged; each further location is
    offset by one.

    Examples:
        >>> derive_location_seed(42, 1)
        42
        >>> derive_location_seed(42, 3)
        44
    """
    return int(seed) + (int(location) - 1)


def random_seed() -> int:
    """Draw a fresh seed for users who did not provide one"""
    return random.randrange(MAX_RANDOM_SEED)


def shuffle(items: List[T], rng: Callable[[], float]) -> List[T]:
    """
    Shuffle a list in place with the backward Fisher-Yates algorithm.

    Args:
        items: List to permute (mutated)
        rng: Callable returning floats in [0, 1)

    Returns:
        The same list, for chaining
    """
    for i in range(len(items) - 1, 0, -1):
        j = math.floor(rng() * (i + 1))
        items[i], items[j] = items[j], items[i]
    return items
