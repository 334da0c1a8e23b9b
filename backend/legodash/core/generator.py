"""Level generator: composition, task batching and solvability retries."""
import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Union

from ..models.level import (
    BrickColor,
    Difficulty,
    FailureKind,
    GenerationFailure,
    GenerationParams,
    GenerationResult,
    GeneratorConfig,
    Stand,
    Task,
    ValidationReport,
    ValidationResult,
)
from .color_pool import ColorPoolSelector
from .composer import StandColorComposer
from .random_source import RandomSource
from .stand_sizes import StandSizeDistributor
from .task_builder import TaskBatchBuilder
from .validator import LevelValidator
from .verifier import SolvabilityVerifier

logger = logging.getLogger(__name__)


class LevelGenerator:
    """Generates stand layouts and task queues that are jointly solvable."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self.pool_selector = ColorPoolSelector(self.config.palette)
        self.distributor = StandSizeDistributor(self.config)
        self.composer = StandColorComposer()
        self.builder = TaskBatchBuilder(self.config)
        self.verifier = SolvabilityVerifier(self.config)
        self.validator = LevelValidator(self.config)

    def generate(self, params: GenerationParams) -> Union[GenerationResult, GenerationFailure]:
        """
        Generate a level.

        Args:
            params: Total bricks, difficulty and optional seed.

        Returns:
            GenerationResult, or GenerationFailure when the inputs are
            invalid or the attempt ceiling is reached.
        """
        start_time = time.time()
        difficulty = params.difficulty
        chunk = self.config.task_chunk_size
        rng = RandomSource.create(params.seed)

        sizes = self.distributor.distribute(params.total_bricks, params.preferred_stand_count)
        if not sizes.ok:
            return GenerationFailure(kind=FailureKind.INPUT_INVALID, message=sizes.error)

        colors = self.pool_selector.select(
            difficulty, rng, sizes.adjusted_total, params.pool_size
        )

        for size in sorted(set(sizes.sizes)):
            if not self.composer.candidate_counts(difficulty, size, colors):
                return GenerationFailure(
                    kind=FailureKind.INPUT_INVALID,
                    message=(
                        f"Cannot satisfy constraints: a {difficulty.value} stand of {size} "
                        f"bricks cannot be composed from {len(colors)} colors."
                    ),
                )

        if self.composer.layout_feasible(difficulty, sizes.sizes, colors, chunk) is False:
            return GenerationFailure(
                kind=FailureKind.INPUT_INVALID,
                message=(
                    f"Cannot satisfy constraints: {len(sizes.sizes)} {difficulty.value} stands "
                    f"over {len(colors)} colors can never split {sizes.adjusted_total} bricks "
                    f"into whole {chunk}-brick tasks per color."
                ),
            )

        failure = GenerationFailure(
            kind=FailureKind.GENERATION_EXHAUSTED,
            message="No attempt was made.",
        )

        for attempt in range(1, self.config.max_attempts + 1):
            failure.attempts = attempt

            stands = self.composer.compose_layout(difficulty, sizes.sizes, colors, rng, chunk)
            if stands is None:
                failure.message = "Color totals could not be balanced into whole tasks."
                continue

            plan = self.builder.build(stands, difficulty, rng)
            if not plan.complete:
                self._note(failure, plan.message, plan.shortfall_color,
                           plan.shortfall_reachable, plan.shortfall_required)
                continue

            report = self.verifier.verify(plan.stands, plan.tasks, difficulty)
            if not report.solvable:
                self._note(failure, report.message, report.failed_color,
                           report.reachable_count, report.required_count)
                continue

            problems = self.structural_failures(
                plan.stands, plan.tasks, difficulty, sizes.adjusted_total, len(colors)
            )
            if problems:
                # Should be unreachable: composer output is built to these rules
                logger.warning("Generated level failed structural check: %s", problems[0].message)
                failure.message = problems[0].message
                continue

            result = GenerationResult(
                stands=plan.stands,
                tasks=plan.tasks,
                colors=colors,
                difficulty=difficulty,
                requested_total=params.total_bricks,
                adjusted_total=sizes.adjusted_total,
                attempts=attempt,
                seed=params.seed,
                generation_time_ms=int((time.time() - start_time) * 1000),
                solvability=report,
            )
            logger.info(
                "Generated %s level: %d bricks, %d stands (%d grouped), %d tasks in %d attempt(s)",
                difficulty.value, result.adjusted_total, len(result.stands),
                plan.grouped_stands, len(result.tasks), attempt,
            )
            return result

        failure.message = (
            f"Generation gave up after {failure.attempts} attempts. Last failure: {failure.message}"
        )
        logger.warning(failure.message)
        return failure

    @staticmethod
    def _note(failure, message, color, reachable, required):
        logger.debug("Attempt %d rejected: %s", failure.attempts, message)
        failure.message = message
        failure.failed_color = color
        failure.reachable_count = reachable
        failure.required_count = required

    def structural_failures(
        self,
        stands: Sequence[Stand],
        tasks: Sequence[Task],
        difficulty: Difficulty,
        expected_total: Optional[int] = None,
        pool_size: Optional[int] = None,
    ) -> List[ValidationResult]:
        """Run every structural check; returns failures only."""
        failures: List[ValidationResult] = []

        count = self.validator.check_stand_count(stands)
        if not count.success:
            failures.append(count)

        failures.extend(self.validator.check_stands(stands, difficulty, pool_size))

        totals = self.validator.check_totals(stands, tasks, expected_total)
        if not totals.success:
            failures.append(totals)

        failures.extend(self.validator.check_tasks(tasks))
        failures.extend(self.validator.check_color_totals(stands, tasks))
        return failures

    def validate(
        self,
        stands: Sequence[Stand],
        tasks: Sequence[Task],
        difficulty: Difficulty,
        expected_total: Optional[int] = None,
    ) -> ValidationReport:
        """
        Re-check an existing (possibly hand-edited) level.

        Args:
            stands: Stands ordered bottom to top.
            tasks: Ordered task queue.
            difficulty: Difficulty whose composition rules apply.
            expected_total: Brick total the level must match, if any.

        Returns:
            ValidationReport with structural failures and the solvability report.
        """
        difficulty = Difficulty(difficulty)
        failures = self.structural_failures(stands, tasks, difficulty, expected_total)
        solvability = self.verifier.verify(stands, tasks, difficulty)

        if failures:
            message = failures[0].message
        elif not solvability.solvable:
            message = solvability.message
        else:
            message = "Level is valid."

        return ValidationReport(
            success=not failures and solvability.solvable,
            structural=failures,
            solvability=solvability,
            message=message,
        )

    def preview(self, params: GenerationParams) -> Dict[str, Any]:
        """Color pool and stand sizes for the given inputs, without composing stands."""
        rng = RandomSource.create(params.seed)
        sizes = self.distributor.distribute(params.total_bricks, params.preferred_stand_count)
        if not sizes.ok:
            return {"success": False, "message": sizes.error}

        colors: List[BrickColor] = self.pool_selector.select(
            params.difficulty, rng, sizes.adjusted_total, params.pool_size
        )
        return {
            "success": True,
            "message": "Preview ready.",
            "colors": [c.value for c in colors],
            "stand_sizes": sizes.sizes,
            "requested_total": sizes.requested_total,
            "adjusted_total": sizes.adjusted_total,
            "task_count": sizes.adjusted_total // self.config.task_chunk_size,
        }


# Singleton instance
_generator = None


def get_generator() -> LevelGenerator:
    """Get or create generator singleton instance."""
    global _generator
    if _generator is None:
        from ..config import get_settings
        _generator = LevelGenerator(get_settings().generator_config())
    return _generator
