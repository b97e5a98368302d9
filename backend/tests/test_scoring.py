"""Tests for the score arithmetic (pure functions, no DB)."""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from skillcheck.scoring import (
    attempt_score,
    blend,
    clamp,
    mean,
    position_contribution,
    round_half_up,
    round_score,
)


class TestRounding:
    def test_halves_round_up(self):
        assert round_half_up(62.5) == 63
        assert round_half_up(0.5) == 1
        assert round_half_up(2.4999) == 2

    def test_round_score_clamps(self):
        assert round_score(104.2) == 100
        assert round_score(-3) == 0

    def test_clamp_bounds(self):
        assert clamp(150) == 100
        assert clamp(-1) == 0
        assert clamp(42) == 42


class TestAttemptScore:
    def test_three_of_five(self):
        assert attempt_score(3, 5) == 60

    def test_no_questions_scores_zero(self):
        assert attempt_score(0, 0) == 0

    def test_two_of_three_rounds(self):
        assert attempt_score(2, 3) == 67

    def test_rejects_impossible_counts(self):
        with pytest.raises(ValueError):
            attempt_score(6, 5)
        with pytest.raises(ValueError):
            attempt_score(-1, 5)


class TestBlend:
    def test_first_observation_taken_as_is(self):
        assert blend(None, 73.4) == 73

    def test_weights_history_lightly(self):
        # 60 * 0.3 + 100 * 0.7 = 88
        assert blend(60, 100) == 88

    def test_result_between_old_and_new(self):
        """Blending never leaves the [min, max] band of its inputs."""
        for old in range(0, 101, 7):
            for new in range(0, 101, 9):
                result = blend(old, new)
                assert min(old, new) <= result <= max(old, new)


class TestPositionContribution:
    def test_first_skill_gets_full_score(self):
        assert position_contribution(60, 0) == 60

    def test_small_scores_decay_by_ratio(self):
        # max(30 - 10, 30 * 0.8) = 24
        assert position_contribution(30, 2) == pytest.approx(24)

    def test_large_scores_decay_by_step(self):
        # max(100 - 10, 100 * 0.8) = 90
        assert position_contribution(100, 2) == pytest.approx(90)

    def test_negative_position_rejected(self):
        with pytest.raises(ValueError):
            position_contribution(50, -1)


def test_mean_of_nothing_is_zero():
    assert mean([]) == 0.0
    assert mean([10, 20]) == 15.0
