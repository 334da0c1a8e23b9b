"""Task batch construction from stand accessibility."""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..models.level import (
    BrickColor,
    Difficulty,
    DifficultyProfile,
    GeneratorConfig,
    PALETTE,
    Stand,
    Task,
)
from .accessibility import AccessibilityAnalyzer
from .random_source import RandomSource

logger = logging.getLogger(__name__)


@dataclass
class BatchPlan:
    """Ordered tasks plus the stands settled into a top-only pop order."""
    tasks: List[Task] = field(default_factory=list)
    stands: List[Stand] = field(default_factory=list)
    complete: bool = False
    window_expansions: int = 0
    grouped_stands: int = 0  # multi-color stands left as one run per color
    shortfall_color: Optional[BrickColor] = None
    shortfall_reachable: int = 0
    shortfall_required: int = 0
    message: str = ""


class TaskBatchBuilder:
    """Orders task chunks so early tasks target colors near stand tops."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self.analyzer = AccessibilityAnalyzer()

    def build(
        self,
        stands: Sequence[Stand],
        difficulty: Difficulty,
        rng: RandomSource,
        max_window: Optional[int] = None,
    ) -> BatchPlan:
        """
        Build the task queue for a stand layout.

        Each color can supply ``total // chunk`` tasks. At every step the most
        exposed eligible color (within the difficulty window, widened when
        nothing is reachable) gets one chunk, claimed from the shallowest
        bricks of that color. Once every batch is placed the stands are
        settled: bricks claimed by earlier tasks are moved above bricks of
        later tasks within each stand, so the queue is playable top-only.

        Args:
            stands: Stands ordered bottom to top.
            difficulty: Difficulty tier (selects the profile).
            rng: Random source for priority noise.
            max_window: Widest window to fall back to (defaults to the tallest stand).

        Returns:
            BatchPlan; ``complete`` is False with shortfall details when some
            batch could not be placed or bricks would be stranded.
        """
        chunk = self.config.task_chunk_size
        profile = DifficultyProfile.for_difficulty(difficulty)
        tallest = max((len(s) for s in stands), default=0)
        widest = tallest if max_window is None else min(max_window, tallest)

        # remaining[i] holds (original position, color) bottom to top
        remaining: List[List[Tuple[int, BrickColor]]] = [
            list(enumerate(stand)) for stand in stands
        ]
        claimed: List[Dict[int, int]] = [{} for _ in stands]

        totals: Dict[BrickColor, int] = {}
        for stand in stands:
            for color in stand:
                totals[color] = totals.get(color, 0) + 1
        order = [c for c in PALETTE if c in totals]
        batches_left = {c: totals[c] // chunk for c in order}
        batch_count = sum(batches_left.values())

        plan = BatchPlan()
        window = max(1, profile.window)

        while len(plan.tasks) < batch_count:
            views = [[color for _, color in rem] for rem in remaining]
            reach = self.analyzer.reachable_counts(views, window)
            candidates = [c for c in order if batches_left[c] > 0 and reach.get(c, 0) >= chunk]

            if not candidates:
                if window >= widest:
                    short = max(order, key=lambda c: batches_left[c])
                    plan.shortfall_color = short
                    plan.shortfall_reachable = reach.get(short, 0)
                    plan.shortfall_required = chunk
                    plan.message = (
                        f"No color reachable for task {len(plan.tasks) + 1}: "
                        f"{short.value} has {plan.shortfall_reachable} of {chunk} "
                        f"bricks within the top {window}."
                    )
                    break
                window += 1
                plan.window_expansions += 1
                continue

            color = self._pick(candidates, reach, profile, rng, chunk)
            task_index = len(plan.tasks)
            self._claim(remaining, claimed, color, window, chunk, task_index, rng)
            plan.tasks.append(Task(color=color, required_count=chunk))
            batches_left[color] -= 1
            window = max(1, profile.window)

        stranded = sum(len(rem) for rem in remaining)
        if len(plan.tasks) == batch_count and stranded:
            worst = max(order, key=lambda c: totals[c] % chunk)
            plan.shortfall_color = worst
            plan.shortfall_reachable = totals[worst] % chunk
            plan.shortfall_required = chunk
            plan.message = (
                f"{stranded} bricks cannot form whole tasks "
                f"({worst.value} has {totals[worst] % chunk} left over)."
            )
        plan.complete = len(plan.tasks) == batch_count and not stranded

        plan.stands = [
            self._settle(stand, claims) for stand, claims in zip(stands, claimed)
        ]
        plan.grouped_stands = sum(1 for stand in plan.stands if is_grouped(stand))
        if not plan.complete:
            logger.debug("Partial task plan: %s", plan.message)
        return plan

    def _pick(
        self,
        candidates: List[BrickColor],
        reach: Dict[BrickColor, int],
        profile: DifficultyProfile,
        rng: RandomSource,
        chunk: int,
    ) -> BrickColor:
        preferred = [c for c in candidates if reach[c] >= profile.target_ratio * chunk]
        pool = preferred or candidates
        top = max(reach[c] for c in pool)

        best, best_score = pool[0], -1.0
        for color in pool:
            noise = rng.next_float01()
            score = profile.priority_weight * reach[color] / top + (1 - profile.priority_weight) * noise
            if score > best_score:
                best, best_score = color, score
        return best

    @staticmethod
    def _claim(
        remaining: List[List[Tuple[int, BrickColor]]],
        claimed: List[Dict[int, int]],
        color: BrickColor,
        window: int,
        chunk: int,
        task_index: int,
        rng: RandomSource,
    ) -> None:
        """Take ``chunk`` bricks of ``color`` from the top ``window`` of the stands."""
        stand_rank = {s: r for r, s in enumerate(rng.shuffled(range(len(remaining))))}
        exposed = []
        for s, rem in enumerate(remaining):
            for depth in range(min(window, len(rem))):
                position, brick = rem[len(rem) - 1 - depth]
                if brick == color:
                    exposed.append((depth, stand_rank[s], s, position))
        exposed.sort()

        taken: Dict[int, set] = {}
        for _, _, s, position in exposed[:chunk]:
            claimed[s][position] = task_index
            taken.setdefault(s, set()).add(position)

        for s, positions in taken.items():
            remaining[s] = [item for item in remaining[s] if item[0] not in positions]

    @staticmethod
    def _settle(stand: Stand, claims: Dict[int, int]) -> Stand:
        """Reorder so earlier tasks sit on top; unclaimed bricks sink to the bottom."""
        top_first = sorted(
            range(len(stand)),
            key=lambda pos: (claims.get(pos, float("inf")), -pos),
        )
        return [stand[pos] for pos in reversed(top_first)]


def is_grouped(stand: Stand) -> bool:
    """True when a stand of two or more colors holds each color in a single run."""
    runs = sum(1 for i, color in enumerate(stand) if i == 0 or stand[i - 1] != color)
    return 1 < len(set(stand)) == runs
