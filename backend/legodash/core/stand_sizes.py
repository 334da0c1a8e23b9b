"""Stand size distribution."""
import math
from dataclasses import dataclass, field
from typing import List, Optional

from ..models.level import GeneratorConfig


@dataclass
class StandSizePlan:
    """Per-stand brick counts, plus the total they actually add up to."""
    sizes: List[int] = field(default_factory=list)
    requested_total: int = 0
    adjusted_total: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def was_adjusted(self) -> bool:
        return self.adjusted_total != self.requested_total


class StandSizeDistributor:
    """Turns a total brick count into per-stand brick counts."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()

    def normalize_total(self, total_bricks: int) -> int:
        """Round a total down to a whole number of task chunks (0 if invalid)."""
        if total_bricks <= 0:
            return 0
        chunk = self.config.task_chunk_size
        return total_bricks - total_bricks % chunk

    def stand_count(self, total_bricks: int, preferred_stand_count: Optional[int] = None) -> int:
        """Pick a stand count for a (normalized) total."""
        cfg = self.config
        count = math.ceil(total_bricks / max(1, cfg.max_bricks_per_stand))
        if preferred_stand_count is not None:
            count = max(count, preferred_stand_count)
        count = max(cfg.min_stand_count, min(count, cfg.max_stand_count))

        # Fewer, fuller stands when the average would fall below the minimum
        while count > cfg.min_stand_count and total_bricks < count * cfg.min_bricks_per_stand:
            count -= 1

        while count < cfg.max_stand_count and total_bricks > count * cfg.max_bricks_per_stand:
            count += 1

        return count

    def distribute(
        self,
        total_bricks: int,
        preferred_stand_count: Optional[int] = None,
    ) -> StandSizePlan:
        """
        Split a total across stands.

        The total is rounded down to a multiple of the task chunk size, then
        clamped to what the stands can hold. Callers must use
        ``adjusted_total`` for task generation so stand and task totals agree.

        Args:
            total_bricks: Requested brick count.
            preferred_stand_count: Optional stand count to aim for.

        Returns:
            StandSizePlan; ``error`` is set when the bounds cannot be met.
        """
        cfg = self.config
        plan = StandSizePlan(requested_total=total_bricks)

        problems = cfg.problems()
        if problems:
            plan.error = "Invalid configuration: " + "; ".join(problems)
            return plan

        if total_bricks <= 0:
            plan.error = "Total bricks must be greater than zero."
            return plan

        total = self.normalize_total(total_bricks)
        if total <= 0:
            plan.error = (
                f"Total bricks ({total_bricks}) is smaller than one task "
                f"({cfg.task_chunk_size} bricks)."
            )
            return plan

        count = self.stand_count(total, preferred_stand_count)

        capacity = count * cfg.max_bricks_per_stand
        if total > capacity:
            total = capacity - capacity % cfg.task_chunk_size

        if total < count * cfg.min_bricks_per_stand:
            plan.error = (
                f"Cannot satisfy constraints: {total} bricks cannot fill {count} stands "
                f"with at least {cfg.min_bricks_per_stand} bricks each."
            )
            return plan

        base, remainder = divmod(total, count)
        plan.sizes = [base + 1 if i < remainder else base for i in range(count)]
        plan.adjusted_total = total
        return plan
