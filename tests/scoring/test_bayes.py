"""Tests for the Bayes-factor estimate."""

import numpy as np
import pytest

from bootladder.scoring.bayes import (
    estimate_bayes_factor,
    odds_from_win_rate,
    win_indicators,
)
from bootladder.scoring.types import InvalidParameters


class TestWinIndicators:
    """Tests for per-draw wins."""

    def test_larger_is_better(self):
        wins = win_indicators(np.array([0.5, 0.2, 0.3]), np.array([0.4, 0.3, 0.3]))
        np.testing.assert_array_equal(wins, [True, False, False])

    def test_smaller_is_better(self):
        wins = win_indicators(np.array([0.5, 0.2, 0.3]), np.array([0.4, 0.3, 0.3]), larger_is_better=False)
        np.testing.assert_array_equal(wins, [False, True, False])

    def test_ties_are_not_wins(self):
        wins = win_indicators(np.ones(4), np.ones(4))
        assert not wins.any()

    def test_length_mismatch_raises(self):
        with pytest.raises(InvalidParameters, match="differ in length"):
            win_indicators(np.ones(3), np.ones(4))

    def test_empty_raises(self):
        with pytest.raises(InvalidParameters, match="empty"):
            win_indicators(np.array([]), np.array([]))

    def test_two_dimensional_raises(self):
        with pytest.raises(InvalidParameters, match="1-d"):
            win_indicators(np.ones((2, 2)), np.ones((2, 2)))


class TestOdds:
    """Tests for win-rate odds."""

    def test_even_odds(self):
        assert odds_from_win_rate(0.5, 100) == pytest.approx(1.0)

    def test_three_to_one(self):
        assert odds_from_win_rate(0.75, 100) == pytest.approx(3.0)

    def test_all_wins_clamped(self):
        """p = 1 clamps to n/(n+1), giving odds of n."""
        assert odds_from_win_rate(1.0, 9) == pytest.approx(9.0)

    def test_no_wins_clamped(self):
        assert odds_from_win_rate(0.0, 9) == pytest.approx(1.0 / 9.0)

    def test_invalid_draws_raise(self):
        with pytest.raises(InvalidParameters):
            odds_from_win_rate(0.5, 0)


class TestEstimateBayesFactor:
    """Tests for the Bayes-factor gate."""

    def test_clear_improvement_meets_cutoff(self):
        result = estimate_bayes_factor(np.full(100, 0.9), np.full(100, 0.1))
        assert result.win_rate == 1.0
        assert result.bayes_factor == pytest.approx(100.0)
        assert result.met_cutoff is True
        assert result.n_draws == 100

    def test_identical_distributions_fail_cutoff(self):
        dist = np.linspace(0.0, 1.0, 50)
        result = estimate_bayes_factor(dist, dist.copy())
        assert result.win_rate == 0.0
        assert result.met_cutoff is False

    def test_threshold_is_inclusive(self):
        """BF equal to the threshold meets it."""
        current = np.array([1.0, 1.0, 1.0, 0.0] * 25)
        prev = np.full(100, 0.5)
        result = estimate_bayes_factor(current, prev, threshold=3.0)
        assert result.bayes_factor == pytest.approx(3.0)
        assert result.met_cutoff is True

    def test_orientation_flips_winner(self):
        low = np.full(20, 0.1)
        high = np.full(20, 0.9)
        assert estimate_bayes_factor(low, high, larger_is_better=False).met_cutoff is True
        assert estimate_bayes_factor(low, high, larger_is_better=True).met_cutoff is False

    def test_bayes_factor_always_positive_and_finite(self):
        rng = np.random.default_rng(0)
        for _ in range(10):
            result = estimate_bayes_factor(rng.random(30), rng.random(30))
            assert 0 < result.bayes_factor < np.inf

    @pytest.mark.parametrize("threshold", [0.0, -1.0])
    def test_non_positive_threshold_raises(self, threshold):
        with pytest.raises(InvalidParameters, match="threshold"):
            estimate_bayes_factor(np.ones(3), np.ones(3), threshold=threshold)


class TestBayesFactorProperties:
    """Monotonicity and symmetry of the gate."""

    @pytest.fixture
    def distributions(self):
        rng = np.random.default_rng(11)
        return rng.normal(0.55, 0.1, 200), rng.normal(0.5, 0.1, 200)

    def test_raising_threshold_never_turns_cutoff_on(self, distributions):
        """Sweeping the threshold upward, met_cutoff only goes True -> False."""
        current, prev = distributions
        thresholds = np.geomspace(0.01, 500.0, 60)
        met = [estimate_bayes_factor(current, prev, threshold=t).met_cutoff for t in thresholds]
        for earlier, later in zip(met, met[1:]):
            assert not (later and not earlier)
        assert met[0] is True
        assert met[-1] is False

    def test_bayes_factor_non_decreasing_in_wins(self):
        """More draws won never lowers the Bayes factor."""
        n = 40
        prev = np.zeros(n)
        factors = []
        for k in range(n + 1):
            current = np.concatenate([np.ones(k), -np.ones(n - k)])
            factors.append(estimate_bayes_factor(current, prev).bayes_factor)
        assert all(b >= a for a, b in zip(factors, factors[1:]))
        assert factors[0] == pytest.approx(1.0 / n)
        assert factors[-1] == pytest.approx(float(n))

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_negating_scores_mirrors_orientation(self, seed):
        """Negated scores with smaller-is-better decide exactly as the originals."""
        rng = np.random.default_rng(seed)
        current = rng.normal(0.1 * seed, 1.0, 100)
        prev = rng.normal(0.0, 1.0, 100)
        # Shared values make ties, which must stay non-wins on both sides.
        current[:10] = prev[:10]

        direct = estimate_bayes_factor(current, prev, larger_is_better=True)
        mirrored = estimate_bayes_factor(-current, -prev, larger_is_better=False)
        assert mirrored.bayes_factor == direct.bayes_factor
        assert mirrored.win_rate == direct.win_rate
        assert mirrored.met_cutoff == direct.met_cutoff
