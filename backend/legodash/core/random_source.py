"""Seedable random source shared by every generation stage."""
import random
from typing import List, MutableSequence, Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomSource:
    """Wraps a private ``random.Random`` so seeded runs are reproducible."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    @classmethod
    def create(cls, seed: Optional[int] = None) -> "RandomSource":
        """Create a source; without a seed draws are organic."""
        return cls(seed)

    def next_float01(self) -> float:
        return self._rng.random()

    def next_int(self, min_inclusive: int, max_exclusive: int) -> int:
        if max_exclusive <= min_inclusive:
            raise ValueError(
                f"Empty range [{min_inclusive}, {max_exclusive})"
            )
        return self._rng.randrange(min_inclusive, max_exclusive)

    def chance(self, probability: float) -> bool:
        return self.next_float01() < probability

    def shuffle(self, items: MutableSequence[T]) -> MutableSequence[T]:
        """
        Fisher-Yates shuffle in place.

        Walks from the last index down to 1 and swaps each slot with a
        uniformly chosen index in [0, i].

        Returns:
            The same sequence, for chaining.
        """
        for i in range(len(items) - 1, 0, -1):
            j = self.next_int(0, i + 1)
            items[i], items[j] = items[j], items[i]
        return items

    def shuffled(self, items: Sequence[T]) -> List[T]:
        return self.shuffle(list(items))

    def choice(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        return items[self.next_int(0, len(items))]
