"""
Tests for the resampling strategies and their summary statistics.

Statistical checks use fixed seeds and wide tolerance bands; the balanced
designs are checked for an exact grand mean.
"""

import numpy as np
import pytest

from bootbench.bootstrap import (
    Strategy,
    estimate,
    get_strategy,
    percentile_interval,
    resolve_strategies,
    summarize,
    validate_sample,
)
from bootbench.errors import InvalidArgument

ALL_STRATEGIES = list(Strategy)
BALANCED = [s for s in Strategy if s.balanced]
UNBALANCED = [s for s in Strategy if not s.balanced]

FIVE = [1.0, 2.0, 3.0, 4.0, 5.0]


class TestContract:
    """Every strategy honours the same contract."""

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    def test_result_length(self, strategy):
        means = strategy.function(FIVE, 1000, rng=42)
        assert means.shape == (1000,)
        assert means.dtype == np.float64

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    def test_means_within_sample_range(self, strategy):
        sample = np.random.default_rng(0).normal(10.0, 3.0, size=40)
        means = strategy.function(sample, 300, rng=1)
        assert means.min() >= sample.min()
        assert means.max() <= sample.max()

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    def test_constant_sample_stays_in_range(self, strategy):
        # 0.1 + 0.1 + 0.1 rounds up, so a raw sum / 3 lands above 0.1
        means = strategy.function([0.1, 0.1, 0.1], 5, rng=0)
        assert means.max() <= 0.1
        assert means.min() >= 0.1
        assert means.tolist() == [0.1] * 5

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    def test_single_element_sample(self, strategy):
        means = strategy.function([5.0], 10, rng=3)
        assert means.tolist() == [5.0] * 10

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    def test_single_iteration(self, strategy):
        means = strategy.function(FIVE, 1, rng=3)
        assert len(means) == 1

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    def test_same_seed_same_result(self, strategy):
        a = strategy.function(FIVE, 200, rng=7)
        b = strategy.function(FIVE, 200, rng=7)
        np.testing.assert_array_equal(a, b)

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    def test_does_not_modify_sample(self, strategy):
        sample = np.array([3.0, 1.0, 4.0, 1.0, 5.0, 9.0])
        before = sample.copy()
        strategy.function(sample, 50, rng=0)
        np.testing.assert_array_equal(sample, before)
        assert sample.flags.writeable

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    def test_accepts_generator(self, strategy):
        rng = np.random.default_rng(11)
        means = strategy.function(FIVE, 20, rng=rng)
        assert len(means) == 20


class TestInvalidInput:
    """Invalid input fails the same way for every strategy."""

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    def test_empty_sample(self, strategy):
        with pytest.raises(InvalidArgument):
            strategy.function([], 10)

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    def test_zero_iterations(self, strategy):
        with pytest.raises(InvalidArgument):
            strategy.function(FIVE, 0)

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    @pytest.mark.parametrize("iterations", [-5, 2.5, True, "10"])
    def test_bad_iterations(self, strategy, iterations):
        with pytest.raises(InvalidArgument):
            strategy.function(FIVE, iterations)

    @pytest.mark.parametrize("sample", [[1.0, float("nan")], [1.0, float("inf")], [[1.0, 2.0]], ["a", "b"]])
    def test_bad_sample(self, sample):
        with pytest.raises(InvalidArgument):
            estimate(sample, 10)

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            estimate([], 10)

    def test_error_names_argument(self):
        with pytest.raises(InvalidArgument) as exc_info:
            estimate(FIVE, 0)
        assert exc_info.value.argument == "iterations"


class TestGrandMean:
    """Balanced designs reproduce the sample mean; independent ones approximate it."""

    @pytest.mark.parametrize("strategy", BALANCED)
    @pytest.mark.parametrize("iterations", [1, 2, 7, 1000])
    def test_balanced_grand_mean_exact(self, strategy, iterations):
        means = strategy.function(FIVE, iterations, rng=123)
        assert abs(means.mean() - 3.0) < 1e-9

    @pytest.mark.parametrize("strategy", BALANCED)
    def test_balanced_exact_for_irregular_sample(self, strategy):
        sample = np.random.default_rng(5).exponential(2.0, size=37)
        means = strategy.function(sample, 333, rng=9)
        assert abs(means.mean() - sample.mean()) < 1e-9

    @pytest.mark.parametrize("strategy", BALANCED)
    def test_balanced_single_iteration_is_sample_mean(self, strategy):
        means = strategy.function(FIVE, 1, rng=0)
        assert means[0] == pytest.approx(3.0, abs=1e-12)

    @pytest.mark.parametrize("strategy", UNBALANCED)
    def test_unbalanced_grand_mean_close(self, strategy):
        means = strategy.function(FIVE, 1000, rng=42)
        assert abs(means.mean() - 3.0) < 0.2

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    def test_spread_matches_theory(self, strategy):
        # sd of the mean of 5 draws from {1..5} is sqrt(2 / 5)
        means = strategy.function(FIVE, 4000, rng=2024)
        assert means.std() == pytest.approx(np.sqrt(2.0 / 5.0), rel=0.1)


class TestLoopEquivalence:
    """Loop-style strategies consume the random stream identically."""

    def test_loops_agree_under_same_seed(self):
        reference = Strategy.NAIVE_LOOP.function(FIVE, 100, rng=99)
        for strategy in (Strategy.SUM_COUNT_LOOP, Strategy.PREALLOCATED_LOOP, Strategy.MAP_BASED):
            np.testing.assert_allclose(strategy.function(FIVE, 100, rng=99), reference)

    def test_different_seeds_differ(self):
        a = Strategy.BATCH_MATRIX.function(FIVE, 100, rng=1)
        b = Strategy.BATCH_MATRIX.function(FIVE, 100, rng=2)
        assert not np.array_equal(a, b)


class TestDispatch:
    """Strategy lookup by name."""

    def test_canonical_order(self):
        assert [s.value for s in Strategy] == [
            "naive_loop",
            "sum_count_loop",
            "preallocated_loop",
            "batch_matrix",
            "map_based",
            "balanced_permutation",
            "balanced_labels",
        ]

    def test_balanced_flags(self):
        assert BALANCED == [Strategy.BALANCED_PERMUTATION, Strategy.BALANCED_LABELS]

    @pytest.mark.parametrize("name", ["batch-matrix", "BATCH_MATRIX", " batch_matrix "])
    def test_parse_variants(self, name):
        assert Strategy.parse(name) is Strategy.BATCH_MATRIX

    def test_get_strategy(self):
        assert get_strategy("map_based") is Strategy.MAP_BASED.function

    def test_unknown_strategy(self):
        with pytest.raises(InvalidArgument):
            estimate(FIVE, 10, strategy="bogus")

    def test_estimate_by_name(self):
        means = estimate(FIVE, 25, strategy="balanced_labels", rng=0)
        assert len(means) == 25

    def test_resolve_defaults_to_all(self):
        assert resolve_strategies() == ALL_STRATEGIES

    def test_resolve_empty_list(self):
        with pytest.raises(InvalidArgument):
            resolve_strategies([])

    def test_resolve_rejects_duplicates(self):
        with pytest.raises(InvalidArgument) as exc_info:
            resolve_strategies(["naive_loop", "batch_matrix", "NAIVE-LOOP"])
        assert "naive_loop" in str(exc_info.value)

    def test_validated_sample_is_read_only(self):
        values = validate_sample([1, 2, 3])
        assert values.dtype == np.float64
        assert not values.flags.writeable


class TestSummary:
    """Summary statistics of a distribution."""

    def test_balanced_summary_is_exact(self):
        means = estimate(FIVE, 500, strategy=Strategy.BALANCED_PERMUTATION, rng=4)
        summary = summarize(means, FIVE, Strategy.BALANCED_PERMUTATION)
        assert summary.balanced
        assert summary.is_exact
        assert summary.sample_mean == pytest.approx(3.0)
        assert summary.iterations == 500

    def test_interval_brackets_grand_mean(self):
        means = estimate(FIVE, 2000, strategy="batch_matrix", rng=4)
        summary = summarize(means, FIVE, "batch_matrix", confidence=0.9)
        assert summary.ci_lower < summary.grand_mean < summary.ci_upper
        assert not summary.balanced

    def test_bootstrap_se_close_to_analytical(self):
        sample = np.random.default_rng(8).normal(0.0, 1.0, size=60)
        means = estimate(sample, 3000, strategy="batch_matrix", rng=8)
        summary = summarize(means, sample, "batch_matrix")
        # the bootstrap uses the plug-in variance, smaller by sqrt((n-1)/n)
        assert summary.bootstrap_se == pytest.approx(summary.analytical_se, rel=0.1)

    def test_degenerate_cases(self):
        summary = summarize([5.0], [5.0], "naive_loop")
        assert summary.bootstrap_se == 0.0
        assert summary.analytical_se == 0.0
        assert summary.ci_lower == summary.ci_upper == 5.0

    @pytest.mark.parametrize("confidence", [0.0, 1.0, 1.5, -0.1])
    def test_bad_confidence(self, confidence):
        with pytest.raises(InvalidArgument):
            percentile_interval([1.0, 2.0], confidence)

    def test_to_dict(self):
        summary = summarize([2.0, 4.0], FIVE, "balanced_labels")
        data = summary.to_dict()
        assert data["strategy"] == "balanced_labels"
        assert data["is_exact"] is True
