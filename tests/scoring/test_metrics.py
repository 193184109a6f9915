"""Tests for the score function library."""

import numpy as np
import pytest
from scipy import stats

from bootladder.scoring.metrics import (
    C_INDEX,
    NRMSE,
    PEARSON,
    RMSE,
    SCORE_FUNCTIONS,
    SPEARMAN,
    ScoreFunction,
    get_score_function,
    list_score_functions,
    register_score_function,
)
from bootladder.scoring.metrics.correlation import pearson_correlation, spearman_correlation
from bootladder.scoring.metrics.error import normalized_rmse, normalized_rmse_for_sample, rmse
from bootladder.scoring.metrics.survival import (
    NO_COMPARABLE_PAIRS_SCORE,
    concordance_counts,
    concordance_index,
)
from bootladder.scoring.metrics import registry
from bootladder.scoring.types import InvalidParameters, InvalidSubmission


def _pairwise_counts(time, event, risk):
    """Reference pair count by direct enumeration."""
    concordant = tied = comparable = 0
    for i in range(len(time)):
        for j in range(len(time)):
            if event[i] == 1 and time[i] < time[j]:
                comparable += 1
                if risk[i] > risk[j]:
                    concordant += 1
                elif risk[i] == risk[j]:
                    tied += 1
    return concordant, tied, comparable


class TestCorrelation:
    """Tests for Pearson and Spearman."""

    def test_pearson_perfect(self):
        x = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        assert pearson_correlation(x, x) == 1.0

    def test_pearson_linear_transform(self):
        """A positive linear transform keeps correlation at 1."""
        x = np.array([1.0, 2.0, 3.0, 4.0])
        assert pearson_correlation(x, 2 * x + 1) == pytest.approx(1.0)

    def test_pearson_inverse(self):
        x = np.array([1.0, 2.0, 3.0, 4.0])
        assert pearson_correlation(x, -x) == pytest.approx(-1.0)

    def test_spearman_monotone(self):
        """Any monotone transform has rank correlation 1."""
        x = np.array([0.1, 0.5, 2.0, 7.0, 30.0])
        assert spearman_correlation(x, np.exp(x)) == pytest.approx(1.0)

    def test_spearman_with_ties(self):
        """Ties get average ranks, matching scipy."""
        gold = np.array([1.0, 2.0, 2.0, 3.0, 4.0])
        pred = np.array([1.0, 3.0, 2.0, 2.0, 5.0])
        expected = stats.spearmanr(gold, pred).statistic
        assert spearman_correlation(gold, pred) == pytest.approx(expected)

    def test_zero_variance_scores_zero(self):
        """Constant predictions cannot be correlated."""
        gold = np.array([1.0, 2.0, 3.0])
        assert pearson_correlation(gold, np.full(3, 2.0)) == 0.0
        assert spearman_correlation(gold, np.full(3, 2.0)) == 0.0

    def test_identical_constant_scores_one(self):
        """A resample of one repeated perfect pair still scores 1."""
        x = np.full(4, 3.0)
        assert pearson_correlation(x, x) == 1.0
        assert spearman_correlation(x, x) == 1.0


class TestError:
    """Tests for RMSE and NRMSE."""

    def test_rmse_zero_for_perfect(self):
        x = np.array([1.0, 2.0])
        assert rmse(x, x) == 0.0

    def test_rmse_value(self):
        assert rmse(np.array([0.0, 0.0]), np.array([3.0, 4.0])) == pytest.approx(np.sqrt(12.5))

    def test_nrmse_divides_by_range(self):
        gold = np.array([0.0, 10.0])
        pred = np.array([1.0, 9.0])
        assert normalized_rmse(gold, pred) == pytest.approx(0.1)

    def test_nrmse_zero_range_is_nan(self):
        assert np.isnan(normalized_rmse(np.array([2.0, 2.0]), np.array([1.0, 3.0])))

    def test_sample_nrmse_uses_full_range(self):
        """Resamples are normalized by the full sample's range, not their own."""
        scorer = normalized_rmse_for_sample(np.array([0.0, 5.0, 10.0]), np.zeros(3))
        # A resample repeating one gold value still scores.
        assert scorer(np.array([5.0, 5.0]), np.array([4.0, 6.0])) == pytest.approx(0.1)

    def test_sample_nrmse_zero_range_raises(self):
        with pytest.raises(InvalidSubmission, match="gold values are equal"):
            normalized_rmse_for_sample(np.array([2.0]), np.array([1.0]))


class TestConcordance:
    """Tests for Harrell's C."""

    def test_perfect_ordering(self):
        """Higher risk for earlier events gives C = 1."""
        gold = np.column_stack([[1.0, 2.0, 3.0, 4.0], [1.0, 1.0, 1.0, 1.0]])
        assert concordance_index(gold, np.array([4.0, 3.0, 2.0, 1.0])) == 1.0

    def test_reversed_ordering(self):
        gold = np.column_stack([[1.0, 2.0, 3.0], [1.0, 1.0, 1.0]])
        assert concordance_index(gold, np.array([1.0, 2.0, 3.0])) == 0.0

    def test_tied_risk_counts_half(self):
        gold = np.column_stack([[1.0, 2.0], [1.0, 1.0]])
        assert concordance_index(gold, np.array([0.5, 0.5])) == 0.5

    def test_censored_subjects_not_anchors(self):
        """A censored subject never starts a comparable pair."""
        concordant, tied, comparable = concordance_counts(
            np.array([1.0, 2.0, 3.0]),
            np.array([0.0, 1.0, 0.0]),
            np.array([0.0, 1.0, 0.0]),
        )
        assert comparable == 1
        assert concordant == 1.0
        assert tied == 0.0

    def test_no_comparable_pairs_scores_chance(self):
        gold = np.column_stack([[1.0, 2.0], [0.0, 0.0]])
        assert concordance_index(gold, np.array([1.0, 2.0])) == NO_COMPARABLE_PAIRS_SCORE

    def test_single_subject_scores_chance(self):
        gold = np.array([[3.0, 1.0]])
        assert concordance_index(gold, np.array([0.2])) == 0.5

    def test_tied_times_not_comparable(self):
        """Two events at the same time form no pair."""
        _, _, comparable = concordance_counts(
            np.array([2.0, 2.0]), np.array([1.0, 1.0]), np.array([0.0, 1.0])
        )
        assert comparable == 0

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_counts_match_pairwise_enumeration(self, seed):
        """Sorted counting agrees with enumerating every pair, ties included."""
        rng = np.random.default_rng(seed)
        n = 80
        time = rng.integers(1, 15, size=n).astype(np.float64)
        event = rng.integers(0, 2, size=n).astype(np.float64)
        risk = rng.integers(0, 6, size=n).astype(np.float64)

        concordant, tied, comparable = concordance_counts(time, event, risk)
        assert (concordant, tied, comparable) == _pairwise_counts(time, event, risk)

    def test_empty_counts(self):
        assert concordance_counts(np.array([]), np.array([]), np.array([])) == (0.0, 0.0, 0)

    def test_bad_shape_raises(self):
        with pytest.raises(ValueError, match="time, event"):
            concordance_index(np.array([1.0, 2.0]), np.array([1.0, 2.0]))


@pytest.fixture
def clean_registry():
    """Restore the registry after a test registers functions."""
    functions = dict(SCORE_FUNCTIONS)
    aliases = dict(registry._ALIASES)
    yield
    SCORE_FUNCTIONS.clear()
    SCORE_FUNCTIONS.update(functions)
    registry._ALIASES.clear()
    registry._ALIASES.update(aliases)


class TestRegistry:
    """Tests for score function lookup."""

    def test_builtins_registered(self):
        assert list_score_functions() == ["c_index", "nrmse", "pearson", "rmse", "spearman"]

    def test_orientations(self):
        assert SPEARMAN.larger_is_better is True
        assert PEARSON.larger_is_better is True
        assert RMSE.larger_is_better is False
        assert NRMSE.larger_is_better is False
        assert C_INDEX.larger_is_better is True
        assert C_INDEX.kind == "survival"

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("spearman", "spearman"),
            ("Rank-Correlation", "spearman"),
            (" linear_correlation ", "pearson"),
            ("normalized-rmse", "nrmse"),
            ("survival-concordance", "c_index"),
            ("concordance", "c_index"),
        ],
    )
    def test_lookup_by_name_and_alias(self, name, expected):
        assert get_score_function(name).name == expected

    def test_unknown_name_raises(self):
        with pytest.raises(InvalidParameters, match="unknown score function"):
            get_score_function("accuracy")

    def test_non_callable_raises(self):
        with pytest.raises(InvalidParameters, match="name or callable"):
            get_score_function(42)

    def test_callable_wrapped(self):
        """Plain callables default to larger-is-better."""
        def mean_abs_error(gold, pred):
            return float(np.mean(np.abs(gold - pred)))

        sf = get_score_function(mean_abs_error)
        assert sf.name == "mean_abs_error"
        assert sf.larger_is_better is True
        assert sf(np.array([1.0]), np.array([3.0])) == 2.0

    def test_orientation_override(self):
        """Override returns a copy and leaves the registry untouched."""
        flipped = get_score_function("rmse", larger_is_better=True)
        assert flipped.larger_is_better is True
        assert RMSE.larger_is_better is False

    def test_bind_specialises_nrmse(self):
        gold = np.array([0.0, 10.0])
        bound = NRMSE.bind(gold, np.zeros(2))
        assert bound is not NRMSE
        assert bound.binder is None
        assert bound.name == "nrmse"
        assert bound(np.array([10.0, 10.0]), np.array([9.0, 9.0])) == pytest.approx(0.1)

    def test_bind_without_binder_is_identity(self):
        assert SPEARMAN.bind(np.array([1.0, 2.0]), np.array([2.0, 1.0])) is SPEARMAN

    def test_bind_keeps_orientation_override(self):
        flipped = NRMSE.with_orientation(True)
        assert flipped.bind(np.array([0.0, 1.0]), np.zeros(2)).larger_is_better is True

    def test_score_function_passes_through(self):
        assert get_score_function(PEARSON) is PEARSON

    def test_register_custom(self, clean_registry):
        sf = ScoreFunction("mae", lambda g, p: float(np.mean(np.abs(g - p))), larger_is_better=False)
        register_score_function(sf, aliases=("mean-absolute-error",))
        assert get_score_function("mean-absolute-error") is sf
        assert "mae" in list_score_functions()
