"""Structural level checks.

These mirror the composition rules the stand composer generates from, so a
generated level should always pass; hand-edited levels may not.
"""
import math
from collections import Counter
from typing import Dict, List, Optional, Sequence

from ..models.level import (
    BrickColor,
    Difficulty,
    GeneratorConfig,
    Stand,
    Task,
    ValidationResult,
)


EASY_DOMINANT_SHARE = 0.6
MEDIUM_MAX_SHARE = 0.5
HARD_MAX_SHARE = 0.4
EASY_MAX_COLORS = 3
MEDIUM_COLORS = 3
HARD_COLORS = 4


def required_color_count(difficulty: Difficulty, size: int, pool_size: int) -> int:
    """Distinct colors a stand must use on medium/hard (easy returns the minimum)."""
    if difficulty == Difficulty.EASY:
        # Below three bricks no two-color split has a 60% dominant color
        return 1 if size < 3 else min(2, pool_size)
    if difficulty == Difficulty.MEDIUM:
        return min(MEDIUM_COLORS, size, pool_size)
    return min(HARD_COLORS, size, pool_size)


def hard_color_cap(size: int) -> int:
    return max(1, math.ceil(size * HARD_MAX_SHARE))


def composition_error(
    difficulty: Difficulty,
    counts: Dict[BrickColor, int],
    pool_size: int,
) -> Optional[str]:
    """
    Check per-color counts of one stand against the difficulty rules.

    Args:
        difficulty: Difficulty tier.
        counts: Color -> brick count for the stand (zero counts ignored).
        pool_size: Number of colors available to the level.

    Returns:
        A description of the first broken rule, or None.
    """
    values = [v for v in counts.values() if v > 0]
    size = sum(values)
    if size == 0:
        return "stand is empty"

    distinct = len(values)
    largest = max(values)

    if difficulty == Difficulty.EASY:
        low = required_color_count(difficulty, size, pool_size)
        high = min(EASY_MAX_COLORS, size, pool_size)
        if distinct < low or distinct > high:
            expected = f"{low}" if low == high else f"{low}-{high}"
            return f"uses {distinct} colors; easy stands must use {expected} colors"
        if distinct > 1 and largest < EASY_DOMINANT_SHARE * size:
            return (
                f"dominant color has {largest}/{size} bricks; easy stands need "
                f"a dominant color of at least {int(EASY_DOMINANT_SHARE * 100)}%"
            )
        return None

    required = required_color_count(difficulty, size, pool_size)
    name = difficulty.value
    if distinct != required:
        return f"uses {distinct} colors; {name} stands must use exactly {required} colors"

    if max(values) - min(values) > 1:
        return f"color counts {sorted(values, reverse=True)} are not balanced within 1"

    if difficulty == Difficulty.MEDIUM:
        if distinct > 1 and largest > MEDIUM_MAX_SHARE * size:
            return (
                f"a color has {largest}/{size} bricks; medium stands allow at most "
                f"{int(MEDIUM_MAX_SHARE * 100)}% per color"
            )
    elif largest > hard_color_cap(size):
        return (
            f"a color has {largest}/{size} bricks; hard stands allow at most "
            f"{hard_color_cap(size)} per color"
        )
    return None


class LevelValidator:
    """Structural checks independent of solvability. Never raises."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()

    def check_stand(
        self,
        stand: Stand,
        difficulty: Difficulty,
        stand_index: int,
        pool_size: Optional[int] = None,
    ) -> ValidationResult:
        """Check capacity and composition of a single stand."""
        cfg = self.config
        label = f"Stand {stand_index + 1}"

        if not stand:
            return ValidationResult.fail(f"{label} is empty.", stand_index)
        if len(stand) > cfg.max_bricks_per_stand:
            return ValidationResult.fail(
                f"{label} holds {len(stand)} bricks; capacity is {cfg.max_bricks_per_stand}.",
                stand_index,
            )

        if pool_size is None:
            pool_size = len(cfg.palette)

        error = composition_error(difficulty, Counter(stand), pool_size)
        if error:
            return ValidationResult.fail(f"{label} {error}.", stand_index)
        return ValidationResult.ok()

    def check_stands(
        self,
        stands: Sequence[Stand],
        difficulty: Difficulty,
        pool_size: Optional[int] = None,
    ) -> List[ValidationResult]:
        """Check every stand; returns only failures (empty when all pass)."""
        if pool_size is None:
            pool_size = len({c for stand in stands for c in stand})
        failures = []
        for i, stand in enumerate(stands):
            result = self.check_stand(stand, difficulty, i, pool_size)
            if not result.success:
                failures.append(result)
        return failures

    def check_stand_count(self, stands: Sequence[Stand]) -> ValidationResult:
        cfg = self.config
        if not cfg.min_stand_count <= len(stands) <= cfg.max_stand_count:
            return ValidationResult.fail(
                f"Level has {len(stands)} stands; expected "
                f"{cfg.min_stand_count}-{cfg.max_stand_count}."
            )
        return ValidationResult.ok()

    def check_totals(
        self,
        stands: Sequence[Stand],
        tasks: Sequence[Task],
        expected_total: Optional[int] = None,
    ) -> ValidationResult:
        """Stand bricks, task demand and the expected total must all agree."""
        stand_total = sum(len(s) for s in stands)
        task_total = sum(t.required_count for t in tasks)

        if stand_total != task_total:
            return ValidationResult.fail(
                f"Total mismatch: stands hold {stand_total} bricks, tasks require {task_total}."
            )
        if expected_total is not None and stand_total != expected_total:
            return ValidationResult.fail(
                f"Total mismatch: level has {stand_total} bricks, expected {expected_total}."
            )
        return ValidationResult.ok()

    def check_tasks(self, tasks: Sequence[Task]) -> List[ValidationResult]:
        """Task colors must be in the palette and counts equal the chunk size."""
        cfg = self.config
        failures = []
        if not tasks:
            failures.append(ValidationResult.fail("Level has no tasks."))
        for i, task in enumerate(tasks):
            if task.color not in cfg.palette:
                failures.append(ValidationResult.fail(
                    f"Task {i + 1} uses {task.color.value}, which is not in the palette."
                ))
            if task.required_count != cfg.task_chunk_size:
                failures.append(ValidationResult.fail(
                    f"Task {i + 1} requires {task.required_count} bricks; "
                    f"tasks must require exactly {cfg.task_chunk_size}."
                ))
        return failures

    def check_color_totals(
        self,
        stands: Sequence[Stand],
        tasks: Sequence[Task],
    ) -> List[ValidationResult]:
        """Every color's bricks on stands must be exactly consumed by tasks."""
        supply = Counter(c for stand in stands for c in stand)
        demand: Counter = Counter()
        for task in tasks:
            demand[task.color] += task.required_count

        failures = []
        for color in self.config.palette:
            if supply[color] != demand[color]:
                failures.append(ValidationResult.fail(
                    f"{color.value}: stands hold {supply[color]} bricks, "
                    f"tasks require {demand[color]}."
                ))
        return failures
