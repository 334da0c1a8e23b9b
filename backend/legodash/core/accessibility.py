"""Reachability of colors near the top of stands."""
from typing import Dict, Sequence

from ..models.level import BrickColor, Stand


class AccessibilityAnalyzer:
    """Counts how much of each color a player can reach right now."""

    def reachable_counts(
        self, stands: Sequence[Stand], window: int
    ) -> Dict[BrickColor, int]:
        """
        Count bricks per color within the top ``window`` bricks of each stand.

        A stand shorter than the window contributes all of its bricks, so a
        wider window never reports less of any color.

        Args:
            stands: Stands ordered bottom to top.
            window: Look-ahead depth, at least 1.

        Returns:
            Color -> reachable brick count (colors with none are omitted).
        """
        if window < 1:
            raise ValueError(f"Window must be at least 1, got {window}")

        counts: Dict[BrickColor, int] = {}
        for stand in stands:
            for color in stand[-window:]:
                counts[color] = counts.get(color, 0) + 1
        return counts

    def reachable(self, stands: Sequence[Stand], color: BrickColor, window: int) -> int:
        return self.reachable_counts(stands, window).get(color, 0)

    @staticmethod
    def top_run(stand: Stand, color: BrickColor) -> int:
        """Length of the contiguous run of ``color`` at the top of a stand."""
        run = 0
        for brick in reversed(stand):
            if brick != color:
                break
            run += 1
        return run

    def top_runs(self, stands: Sequence[Stand], color: BrickColor) -> list:
        return [self.top_run(stand, color) for stand in stands]
