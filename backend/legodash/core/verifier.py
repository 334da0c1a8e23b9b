"""Solvability verification by replaying stand pops against the task queue."""
import logging
from typing import List, Optional, Sequence, Set, Tuple

from ..models.level import (
    BrickColor,
    Difficulty,
    DifficultyProfile,
    GeneratorConfig,
    SolvabilityReport,
    Stand,
    Task,
)
from .accessibility import AccessibilityAnalyzer

logger = logging.getLogger(__name__)

Heights = Tuple[int, ...]


class SearchBudgetExceeded(Exception):
    """Raised internally when the pop search runs out of budget."""


class SolvabilityVerifier:
    """Checks that a task queue can be consumed by top-only pops."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self.analyzer = AccessibilityAnalyzer()

    def verify(
        self,
        stands: Sequence[Stand],
        tasks: Sequence[Task],
        difficulty: Difficulty = Difficulty.EASY,
        require_full_drain: Optional[bool] = None,
    ) -> SolvabilityReport:
        """
        Replay the task queue against the stands.

        For each task the player pops tops matching the task color until the
        requirement is met. A stand can give at most its top run of that
        color, and which stands a task drains decides what is exposed next,
        so the choices are searched depth-first (memoised on stand heights).
        Inputs are copied; the caller's stands and tasks are untouched.

        Args:
            stands: Stands ordered bottom to top.
            tasks: Ordered task queue.
            difficulty: Selects the reachability window used in diagnostics.
            require_full_drain: Treat leftover bricks as a failure
                (defaults to the config flag).

        Returns:
            SolvabilityReport with the deepest failure found, if any.
        """
        if require_full_drain is None:
            require_full_drain = self.config.require_full_drain

        search = _PopSearch(
            stands=[tuple(s) for s in stands],
            tasks=[(t.color, t.required_count) for t in tasks],
            window=DifficultyProfile.for_difficulty(difficulty).window,
            budget=self.config.search_budget,
            analyzer=self.analyzer,
        )

        try:
            solved = search.run()
        except SearchBudgetExceeded:
            logger.warning("Solvability search budget exhausted after %d nodes", search.nodes)
            report = search.failure_report()
            report.message = (
                f"Search budget of {self.config.search_budget} states exhausted; "
                f"solvability undetermined. {report.message}".strip()
            )
            return report

        if not solved:
            return search.failure_report()

        leftover = sum(len(s) for s in stands) - sum(t.required_count for t in tasks)
        if require_full_drain and leftover > 0:
            return SolvabilityReport(
                solvable=False,
                leftover_bricks=leftover,
                message=f"All tasks complete but {leftover} bricks are left on the stands.",
            )

        return SolvabilityReport(
            solvable=True,
            leftover_bricks=max(0, leftover),
            message="All tasks can be completed.",
        )


class _PopSearch:
    """Depth-first search over how much each stand gives to each task."""

    def __init__(self, stands, tasks, window, budget, analyzer):
        self.stands: List[Tuple[BrickColor, ...]] = stands
        self.tasks: List[Tuple[BrickColor, int]] = tasks
        self.window = window
        self.budget = budget
        self.analyzer = analyzer
        self.nodes = 0
        self.dead: Set[Tuple[int, Heights]] = set()
        self.failure: Optional[Tuple[int, BrickColor, int, int, int]] = None

    def run(self) -> bool:
        return self._solve(0, tuple(len(s) for s in self.stands))

    def _solve(self, index: int, heights: Heights) -> bool:
        if index == len(self.tasks):
            return True
        if (index, heights) in self.dead:
            return False

        self.nodes += 1
        if self.nodes > self.budget:
            raise SearchBudgetExceeded()

        color, need = self.tasks[index]
        if need <= 0:
            return self._solve(index + 1, heights)

        runs = [
            self.analyzer.top_run(stand[:h], color) for stand, h in zip(self.stands, heights)
        ]
        available = sum(runs)
        if available < need:
            self._record_failure(index, color, need, available, heights)
            self.dead.add((index, heights))
            return False

        # Drain the shortest runs first: long runs are worth keeping for later tasks
        order = sorted((i for i, r in enumerate(runs) if r > 0), key=lambda i: (runs[i], i))
        for taken in self._distributions(order, runs, need):
            after = list(heights)
            for i, count in taken:
                after[i] -= count
            if self._solve(index + 1, tuple(after)):
                return True

        self.dead.add((index, heights))
        return False

    def _distributions(self, order: List[int], runs: List[int], need: int):
        """Yield [(stand, count)] choices summing to ``need``, full takes first."""
        suffix = [0] * (len(order) + 1)
        for k in range(len(order) - 1, -1, -1):
            suffix[k] = suffix[k + 1] + runs[order[k]]

        def walk(k: int, left: int, picked: list):
            if left == 0:
                yield list(picked)
                return
            if k == len(order) or suffix[k] < left:
                return
            stand = order[k]
            for count in range(min(runs[stand], left), -1, -1):
                if suffix[k + 1] < left - count:
                    break
                if count:
                    picked.append((stand, count))
                yield from walk(k + 1, left - count, picked)
                if count:
                    picked.pop()

        yield from walk(0, need, [])

    def _record_failure(self, index, color, need, available, heights):
        if self.failure is not None and self.failure[0] >= index:
            return
        views = [list(s[:h]) for s, h in zip(self.stands, heights)]
        reachable = self.analyzer.reachable(views, color, self.window)
        self.failure = (index, color, need, available, reachable)

    def failure_report(self) -> SolvabilityReport:
        if self.failure is None:
            return SolvabilityReport(solvable=False, message="No task could be evaluated.")
        index, color, need, available, reachable = self.failure
        return SolvabilityReport(
            solvable=False,
            failed_task_index=index,
            failed_color=color,
            reachable_count=reachable,
            required_count=need,
            message=(
                f"Task {index + 1} ({color.value} x{need}) is stuck: "
                f"{available} matching bricks on top of stands, "
                f"{reachable} within the top {self.window}."
            ),
        )
