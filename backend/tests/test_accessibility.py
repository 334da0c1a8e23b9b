"""Tests for the accessibility analyzer."""
import pytest
from legodash.core.accessibility import AccessibilityAnalyzer
from legodash.core.random_source import RandomSource
from legodash.models.level import BrickColor, PALETTE

B = BrickColor.BLUE
R = BrickColor.RED
Y = BrickColor.YELLOW


@pytest.fixture
def analyzer():
    """Create analyzer instance."""
    return AccessibilityAnalyzer()


class TestReachableCounts:
    """Test cases for reachable_counts."""

    def test_window_of_one_sees_tops(self, analyzer):
        stands = [[R, R, B], [B, Y]]
        assert analyzer.reachable_counts(stands, 1) == {B: 1, Y: 1}

    def test_window_of_two(self, analyzer):
        stands = [[R, R, B], [B, Y]]
        assert analyzer.reachable_counts(stands, 2) == {R: 1, B: 2, Y: 1}

    def test_short_stand_contributes_everything(self, analyzer):
        stands = [[R, R, B], [B, Y]]
        assert analyzer.reachable_counts(stands, 5) == {R: 2, B: 2, Y: 1}

    def test_empty_stands(self, analyzer):
        assert analyzer.reachable_counts([[], []], 3) == {}

    @pytest.mark.parametrize("window", [0, -1])
    def test_invalid_window(self, analyzer, window):
        with pytest.raises(ValueError):
            analyzer.reachable_counts([[R]], window)

    def test_reachable_single_color(self, analyzer):
        assert analyzer.reachable([[R, B, R]], R, 2) == 1
        assert analyzer.reachable([[R, B, R]], Y, 3) == 0

    def test_wider_window_never_reports_less(self, analyzer):
        rng = RandomSource(11)
        for _ in range(50):
            stands = [
                [rng.choice(PALETTE) for _ in range(rng.next_int(0, 11))]
                for _ in range(rng.next_int(1, 8))
            ]
            for window in range(1, 10):
                narrow = analyzer.reachable_counts(stands, window)
                wide = analyzer.reachable_counts(stands, window + 1)
                for color, count in narrow.items():
                    assert wide[color] >= count


class TestTopRun:
    """Test cases for top_run."""

    def test_top_run(self, analyzer):
        stand = [B, R, R]
        assert analyzer.top_run(stand, R) == 2
        assert analyzer.top_run(stand, B) == 0
        assert analyzer.top_run([], R) == 0

    def test_top_runs(self, analyzer):
        assert analyzer.top_runs([[R], [R, B], [B, R, R]], R) == [1, 0, 2]
