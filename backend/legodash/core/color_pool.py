"""Color pool selection per difficulty."""
from typing import List, Optional, Sequence

from ..models.level import BrickColor, Difficulty, PALETTE
from .random_source import RandomSource


class ColorPoolSelector:
    """Picks which distinct colors participate in a level."""

    EASY_POOL_SIZE = 3
    MEDIUM_POOL_SIZE = 4
    HARD_BASE_POOL_SIZE = 6
    # Hard levels gain one extra color per this many bricks
    HARD_BRICKS_PER_EXTRA_COLOR = 270

    def __init__(self, palette: Sequence[BrickColor] = PALETTE):
        self.palette = list(palette)

    def pool_size(
        self,
        difficulty: Difficulty,
        total_bricks: int = 0,
        pool_size_hint: Optional[int] = None,
    ) -> int:
        """Number of colors for a difficulty, clamped to the palette."""
        if pool_size_hint is not None:
            desired = pool_size_hint
        elif difficulty == Difficulty.EASY:
            desired = self.EASY_POOL_SIZE
        elif difficulty == Difficulty.MEDIUM:
            desired = self.MEDIUM_POOL_SIZE
        else:
            desired = self.HARD_BASE_POOL_SIZE + max(0, total_bricks) // self.HARD_BRICKS_PER_EXTRA_COLOR
            desired = max(self.HARD_BASE_POOL_SIZE, desired)

        return max(1, min(desired, len(self.palette)))

    def select(
        self,
        difficulty: Difficulty,
        rng: RandomSource,
        total_bricks: int = 0,
        pool_size_hint: Optional[int] = None,
    ) -> List[BrickColor]:
        """
        Select the color pool for a level.

        The whole palette is shuffled before truncating so every subset is
        equally likely across seeds.

        Args:
            difficulty: Difficulty tier.
            rng: Random source to draw from.
            total_bricks: Requested brick count (hard tier grows with it).
            pool_size_hint: Explicit pool size overriding the tier default.

        Returns:
            Distinct colors in draw order.
        """
        size = self.pool_size(difficulty, total_bricks, pool_size_hint)
        return rng.shuffled(self.palette)[:size]
