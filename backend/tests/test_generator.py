"""Tests for level generator."""
import time
from collections import Counter

import pytest
from legodash.core.generator import LevelGenerator, get_generator
from legodash.core.validator import composition_error
from legodash.models.level import (
    BrickColor,
    Difficulty,
    FailureKind,
    GenerationFailure,
    GenerationParams,
    GenerationResult,
    GeneratorConfig,
    Task,
)

B = BrickColor.BLUE
R = BrickColor.RED
Y = BrickColor.YELLOW
G = BrickColor.GREEN


def generate(generator, total, difficulty, seed):
    return generator.generate(GenerationParams(total_bricks=total, difficulty=difficulty, seed=seed))


def assert_conserved(result):
    """Stand bricks and task demand agree per color and in total."""
    supply = Counter(c for stand in result.stands for c in stand)
    demand = Counter()
    for task in result.tasks:
        demand[task.color] += task.required_count

    assert supply == demand
    assert sum(len(s) for s in result.stands) == result.adjusted_total


class TestLevelGenerator:
    """Test cases for LevelGenerator."""

    def test_easy_fifty_four(self, generator):
        result = generate(generator, 54, Difficulty.EASY, 1)

        assert isinstance(result, GenerationResult)
        assert result.success
        assert len(result.stands) == 6
        assert all(len(stand) == 9 for stand in result.stands)
        for stand in result.stands:
            counts = Counter(stand)
            assert 2 <= len(counts) <= 3
            assert max(counts.values()) >= 0.6 * len(stand)
        assert sum(t.required_count for t in result.tasks) == 54
        assert not result.was_adjusted
        assert result.solvability.solvable

    def test_medium_ninety(self, generator):
        result = generate(generator, 90, Difficulty.MEDIUM, 7)

        assert isinstance(result, GenerationResult)
        assert len(result.stands) == 9
        assert len(result.colors) == 4
        for stand in result.stands:
            counts = Counter(stand)
            assert len(stand) == 10
            assert len(counts) == 3
            assert max(counts.values()) <= 5
            assert max(counts.values()) - min(counts.values()) <= 1
        assert {t.color for t in result.tasks} <= set(result.colors)
        assert_conserved(result)

    def test_hard_total_is_adjusted(self, generator):
        result = generate(generator, 100, Difficulty.HARD, 3)

        assert isinstance(result, GenerationResult)
        assert result.requested_total == 100
        assert result.adjusted_total == 99
        assert result.was_adjusted
        assert len(result.stands) == 10
        assert all(len(stand) <= 10 for stand in result.stands)
        assert len(result.tasks) == 11
        assert_conserved(result)

    def test_invalid_input_fails_fast(self):
        generator = LevelGenerator(GeneratorConfig(min_bricks_per_stand=7))
        result = generate(generator, 5, Difficulty.EASY, 0)

        assert isinstance(result, GenerationFailure)
        assert result.kind == FailureKind.INPUT_INVALID
        assert not result.success
        assert result.attempts == 0

    @pytest.mark.parametrize("total", [0, -9])
    def test_non_positive_total(self, generator, total):
        result = generate(generator, total, Difficulty.MEDIUM, 0)

        assert isinstance(result, GenerationFailure)
        assert result.kind == FailureKind.INPUT_INVALID

    def test_uncomposable_pool(self, generator):
        params = GenerationParams(total_bricks=54, difficulty=Difficulty.HARD, seed=0, pool_size=1)
        result = generator.generate(params)

        # A single color cannot satisfy the hard per-color cap
        assert isinstance(result, GenerationFailure)
        assert result.kind == FailureKind.INPUT_INVALID
        assert "Cannot satisfy constraints" in result.message

    @pytest.mark.parametrize("total,difficulty,pool_size", [
        (54, Difficulty.HARD, 4),
        (99, Difficulty.HARD, 4),
        (99, Difficulty.MEDIUM, 3),
    ])
    def test_impossible_color_totals_fail_fast(self, generator, total, difficulty, pool_size):
        params = GenerationParams(
            total_bricks=total, difficulty=difficulty, seed=0, pool_size=pool_size
        )
        result = generator.generate(params)

        assert isinstance(result, GenerationFailure)
        assert result.kind == FailureKind.INPUT_INVALID
        assert result.attempts == 0
        assert "whole 9-brick tasks" in result.message

    def test_full_palette_easy_is_fast(self, generator):
        start = time.perf_counter()
        for seed in range(4):
            params = GenerationParams(
                total_bricks=99, difficulty=Difficulty.EASY, seed=seed, pool_size=7
            )
            result = generator.generate(params)

            assert isinstance(result, GenerationResult), result.message
            assert len(result.colors) == 7
            assert_conserved(result)
        assert time.perf_counter() - start < 8.0

    def test_same_seed_same_level(self, generator):
        first = generate(generator, 81, Difficulty.HARD, 42)
        second = generate(generator, 81, Difficulty.HARD, 42)

        assert first.stands == second.stands
        assert first.tasks == second.tasks
        assert first.colors == second.colors
        assert first.attempts == second.attempts

    def test_different_seeds_differ(self, generator):
        levels = {
            tuple(tuple(s) for s in generate(generator, 72, Difficulty.MEDIUM, seed).stands)
            for seed in range(5)
        }
        assert len(levels) > 1

    def test_unseeded_generation(self, generator):
        result = generator.generate(GenerationParams(total_bricks=63))

        assert isinstance(result, GenerationResult)
        assert result.seed is None
        assert_conserved(result)

    @pytest.mark.parametrize("difficulty", list(Difficulty))
    @pytest.mark.parametrize("total", [54, 72, 99])
    def test_generated_levels_pass_validation(self, generator, config, difficulty, total):
        for seed in range(4):
            result = generate(generator, total, difficulty, seed)

            assert isinstance(result, GenerationResult), result.message
            assert_conserved(result)
            assert all(t.required_count == config.task_chunk_size for t in result.tasks)
            assert all(
                config.min_bricks_per_stand <= len(s) <= config.max_bricks_per_stand
                for s in result.stands
            )
            for stand in result.stands:
                assert composition_error(difficulty, Counter(stand), len(result.colors)) is None

            report = generator.validate(result.stands, result.tasks, difficulty, result.adjusted_total)
            assert report.success, report.message

    def test_exhausted_attempts(self):
        # A one-node search budget can never confirm a multi-task level
        generator = LevelGenerator(GeneratorConfig(max_attempts=3, search_budget=1))
        result = generate(generator, 54, Difficulty.EASY, 0)

        assert isinstance(result, GenerationFailure)
        assert result.kind == FailureKind.GENERATION_EXHAUSTED
        assert result.attempts == 3
        assert "gave up after 3 attempts" in result.message

    def test_to_level_dict(self, generator):
        result = generate(generator, 54, Difficulty.EASY, 5)
        level = result.to_level_dict(level_name="Level_5")

        assert level["level_name"] == "Level_5"
        assert level["storage_capacity"] == 7
        assert level["stands"][0]["stand_id"] == "Stand_1"
        assert len(level["stands"]) == 6
        assert sum(t["required_count"] for t in level["tasks"]) == 54


class TestValidate:
    """Test cases for LevelGenerator.validate."""

    def test_medium_stand_with_four_colors(self, generator):
        good = [R, R, R, B, B, B, Y, Y, Y]
        bad = [R, R, B, B, Y, Y, G, G, G]
        stands = [list(good) for _ in range(8)] + [bad]
        tasks = [Task(R, 9)] * 3 + [Task(B, 9)] * 3 + [Task(Y, 9)] * 3

        report = generator.validate(stands, tasks, Difficulty.MEDIUM)

        assert not report.success
        stand_failures = [f for f in report.failures if f.stand_index == 8]
        assert len(stand_failures) == 1
        assert "medium stands must use exactly 3 colors" in stand_failures[0].message

    def test_unsolvable_level(self, generator):
        stands = [[R] * 9, [B] * 9, [Y] * 9, [R] * 9, [B] * 9, [Y] * 9]
        tasks = [Task(R, 9), Task(R, 9), Task(B, 9), Task(B, 9), Task(Y, 9), Task(Y, 9)]
        # Swap the bottom of the first stand so a red task finds a blue on top
        stands[0] = [R] * 8 + [B]
        stands[1] = [R] + [B] * 8

        report = generator.validate(stands, tasks, Difficulty.EASY)

        assert not report.success
        assert report.solvability is not None
        assert not report.solvability.solvable

    def test_generated_level_round_trip(self, generator):
        result = generate(generator, 90, Difficulty.MEDIUM, 11)
        report = generator.validate(result.stands, result.tasks, "medium", 90)

        assert report.success
        assert report.message == "Level is valid."
        data = report.to_dict()
        assert data["failures"] == []
        assert data["solvability"]["solvable"] is True


class TestPreview:
    """Test cases for LevelGenerator.preview."""

    def test_preview_matches_generation(self, generator):
        params = GenerationParams(total_bricks=100, difficulty=Difficulty.HARD, seed=9)
        preview = generator.preview(params)
        result = generator.generate(params)

        assert preview["success"]
        assert preview["adjusted_total"] == 99
        assert preview["stand_sizes"] == [len(s) for s in result.stands]
        assert preview["colors"] == [c.value for c in result.colors]
        assert preview["task_count"] == 11

    def test_preview_invalid(self, generator):
        preview = generator.preview(GenerationParams(total_bricks=3))

        assert not preview["success"]
        assert preview["message"]


class TestGetGenerator:
    """Tests for singleton getter."""

    def test_get_generator_returns_instance(self):
        assert isinstance(get_generator(), LevelGenerator)

    def test_get_generator_returns_same_instance(self):
        assert get_generator() is get_generator()
