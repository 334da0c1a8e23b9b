"""Tests for structural level checks."""
from collections import Counter

import pytest
from legodash.core.validator import LevelValidator, composition_error, hard_color_cap
from legodash.models.level import BrickColor, Difficulty, Task

B = BrickColor.BLUE
R = BrickColor.RED
Y = BrickColor.YELLOW
G = BrickColor.GREEN


@pytest.fixture
def validator(config):
    """Create validator instance."""
    return LevelValidator(config)


class TestCompositionError:
    """Test cases for composition_error."""

    def test_easy_dominant_color(self):
        assert composition_error(Difficulty.EASY, {R: 6, B: 3}, 3) is None

    def test_easy_without_dominant_color(self):
        error = composition_error(Difficulty.EASY, {R: 3, B: 3}, 3)
        assert "dominant" in error

    def test_easy_too_many_colors(self):
        error = composition_error(Difficulty.EASY, {R: 6, B: 1, Y: 1, G: 1}, 4)
        assert "easy stands must use" in error

    def test_medium_four_colors(self):
        error = composition_error(Difficulty.MEDIUM, Counter([R, R, B, B, Y, Y, G, G, G]), 4)
        assert "medium stands must use exactly 3 colors" in error

    def test_medium_unbalanced(self):
        error = composition_error(Difficulty.MEDIUM, {R: 5, B: 3, Y: 1}, 4)
        assert "not balanced" in error

    def test_hard_balanced(self):
        assert composition_error(Difficulty.HARD, {R: 3, B: 3, Y: 2, G: 2}, 6) is None

    def test_hard_cap_with_small_pool(self):
        error = composition_error(Difficulty.HARD, {R: 5, B: 5}, 2)
        assert "at most 4 per color" in error

    def test_hard_color_cap(self):
        assert hard_color_cap(10) == 4
        assert hard_color_cap(9) == 4
        assert hard_color_cap(1) == 1

    def test_empty_stand(self):
        assert composition_error(Difficulty.EASY, {}, 3) == "stand is empty"


class TestLevelValidator:
    """Test cases for LevelValidator."""

    def test_check_stand_reports_index(self, validator):
        result = validator.check_stand([R, R, B, B, Y, Y, G, G, G], Difficulty.MEDIUM, 4, 4)

        assert not result.success
        assert result.stand_index == 4
        assert result.message.startswith("Stand 5 ")

    def test_check_stand_capacity(self, validator):
        result = validator.check_stand([R] * 11, Difficulty.EASY, 0)

        assert not result.success
        assert "capacity" in result.message

    def test_check_stand_empty(self, validator):
        result = validator.check_stand([], Difficulty.EASY, 2)

        assert not result.success
        assert result.stand_index == 2

    def test_check_stands_returns_failures_only(self, validator):
        stands = [[R] * 6 + [B] * 3, [R] * 3 + [B] * 3]
        failures = validator.check_stands(stands, Difficulty.EASY)

        assert len(failures) == 1
        assert failures[0].stand_index == 1

    def test_check_stand_count(self, validator):
        assert validator.check_stand_count([[R]] * 6).success
        assert not validator.check_stand_count([[R]] * 5).success
        assert not validator.check_stand_count([[R]] * 11).success

    def test_check_totals(self, validator):
        stands = [[R] * 9]
        assert validator.check_totals(stands, [Task(R, 9)]).success
        assert validator.check_totals(stands, [Task(R, 9)], expected_total=9).success

        mismatch = validator.check_totals(stands, [Task(R, 9), Task(R, 9)])
        assert mismatch.message.startswith("Total mismatch")

        expected = validator.check_totals(stands, [Task(R, 9)], expected_total=18)
        assert expected.message.startswith("Total mismatch")

    def test_check_tasks(self, validator):
        assert validator.check_tasks([Task(R, 9), Task(B, 9)]) == []

        failures = validator.check_tasks([Task(R, 8)])
        assert len(failures) == 1
        assert "exactly 9" in failures[0].message

        assert validator.check_tasks([])[0].message == "Level has no tasks."

    def test_check_color_totals(self, validator):
        stands = [[R] * 9, [B] * 9]
        assert validator.check_color_totals(stands, [Task(R, 9), Task(B, 9)]) == []

        failures = validator.check_color_totals(stands, [Task(R, 9), Task(R, 9)])
        assert len(failures) == 2
