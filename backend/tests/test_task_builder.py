"""Tests for task batch construction."""
from collections import Counter

import pytest
from legodash.core.composer import StandColorComposer
from legodash.core.generator import LevelGenerator
from legodash.core.random_source import RandomSource
from legodash.core.task_builder import TaskBatchBuilder, is_grouped
from legodash.core.verifier import SolvabilityVerifier
from legodash.models.level import (
    BrickColor,
    Difficulty,
    GenerationParams,
    GenerationResult,
    PALETTE,
)

B = BrickColor.BLUE
R = BrickColor.RED
Y = BrickColor.YELLOW


@pytest.fixture
def builder(config):
    """Create builder instance."""
    return TaskBatchBuilder(config)


def compose(difficulty, sizes, pool_size, seed):
    """First composable layout at or after ``seed``."""
    composer = StandColorComposer()
    pool = list(PALETTE[:pool_size])
    for attempt in range(seed, seed + 50):
        stands = composer.compose_layout(difficulty, sizes, pool, RandomSource(attempt), 9)
        if stands is not None:
            return stands
    raise AssertionError("no composable layout")


class TestTaskBatchBuilder:
    """Test cases for TaskBatchBuilder."""

    @pytest.mark.parametrize("difficulty,sizes,pool_size", [
        (Difficulty.EASY, [9] * 6, 3),
        (Difficulty.MEDIUM, [10] * 9, 4),
        (Difficulty.HARD, [10] * 9 + [9], 6),
    ])
    def test_plan_is_complete_and_playable(self, builder, config, difficulty, sizes, pool_size):
        verifier = SolvabilityVerifier(config)
        for seed in range(0, 40, 8):
            stands = compose(difficulty, sizes, pool_size, seed)
            plan = builder.build(stands, difficulty, RandomSource(seed))

            assert plan.complete
            assert len(plan.tasks) == sum(sizes) // 9
            assert all(task.required_count == 9 for task in plan.tasks)

            demand = Counter()
            for task in plan.tasks:
                demand[task.color] += task.required_count
            assert demand == Counter(c for stand in stands for c in stand)

            # Settling only reorders bricks within a stand
            for before, after in zip(stands, plan.stands):
                assert Counter(before) == Counter(after)

            assert verifier.verify(plan.stands, plan.tasks, difficulty).solvable

    def test_input_stands_not_mutated(self, builder):
        stands = compose(Difficulty.EASY, [9] * 6, 3, 0)
        snapshot = [list(s) for s in stands]

        builder.build(stands, Difficulty.EASY, RandomSource(0))

        assert stands == snapshot

    def test_window_widens_for_buried_colors(self, builder):
        stands = [[B] * 9, [R] * 9]
        plan = builder.build(stands, Difficulty.EASY, RandomSource(4))

        assert plan.complete
        assert sorted(t.color.value for t in plan.tasks) == ["Blue", "Red"]
        assert plan.window_expansions > 0

    def test_capped_window_reports_shortfall(self, builder):
        stands = [[B] * 9, [R] * 9]
        plan = builder.build(stands, Difficulty.EASY, RandomSource(4), max_window=2)

        assert not plan.complete
        assert plan.tasks == []
        assert plan.shortfall_color in (B, R)
        assert plan.shortfall_required == 9
        assert plan.message

    def test_stranded_bricks_reported(self, builder):
        plan = builder.build([[R] * 10], Difficulty.EASY, RandomSource(1))

        assert not plan.complete
        assert len(plan.tasks) == 1
        assert plan.shortfall_color == R
        assert "cannot form whole tasks" in plan.message

    def test_same_seed_same_plan(self, builder):
        stands = compose(Difficulty.MEDIUM, [10] * 9, 4, 3)
        first = builder.build(stands, Difficulty.MEDIUM, RandomSource(7))
        second = builder.build(stands, Difficulty.MEDIUM, RandomSource(7))

        assert first.tasks == second.tasks
        assert first.stands == second.stands

    def test_grouped_count_matches_stands(self, builder):
        stands = compose(Difficulty.HARD, [10] * 9 + [9], 6, 5)
        plan = builder.build(stands, Difficulty.HARD, RandomSource(5))

        assert plan.complete
        assert plan.grouped_stands == sum(1 for s in plan.stands if is_grouped(s))


class TestIsGrouped:
    """Stands holding each color in one run."""

    def test_two_runs(self):
        assert is_grouped([R, R, B, B])

    def test_interleaved(self):
        assert not is_grouped([R, B, R])

    def test_single_color_is_not_grouped(self):
        assert not is_grouped([R, R])
        assert not is_grouped([])

    def test_three_colors(self):
        assert is_grouped([Y, R, R, B])
        assert not is_grouped([Y, R, Y, B])


class TestSettledInterleaving:
    """Settling keeps multi-color stands mostly interleaved."""

    @pytest.mark.parametrize("difficulty,total", [
        (Difficulty.MEDIUM, 90),
        (Difficulty.HARD, 99),
    ])
    def test_grouped_share_is_small(self, difficulty, total):
        generator = LevelGenerator()
        grouped = stands = 0
        for seed in range(20):
            result = generator.generate(
                GenerationParams(total_bricks=total, difficulty=difficulty, seed=seed)
            )
            assert isinstance(result, GenerationResult), result.message
            grouped += sum(1 for s in result.stands if is_grouped(s))
            stands += len(result.stands)

        assert grouped / stands < 0.15
