"""Tests for the exact rank-statistic distributions."""

import itertools
import math

import pytest

import survey_stats._config as _cfg
from survey_stats.exceptions import InvalidArgumentError, ResourceLimitExceededError
from survey_stats.rank_distributions import (
    SignedRankMethod,
    mann_whitney_cdf,
    mann_whitney_counts,
    mann_whitney_pmf,
    signed_rank_cdf,
    signed_rank_counts,
    signed_rank_pmf,
    spearman_distribution,
    spearman_exact_pvalue,
)


class TestSignedRankCounts:
    """Tests for the Wilcoxon signed-rank frequencies."""

    def test_n3(self):
        assert signed_rank_counts(3) == [1, 1, 1, 2, 1, 1, 1]

    def test_n1(self):
        assert signed_rank_counts(1) == [1, 1]

    @pytest.mark.parametrize("n", range(1, 11))
    def test_sums_to_power_of_two(self, n):
        counts = signed_rank_counts(n)
        assert len(counts) == n * (n + 1) // 2 + 1
        assert sum(counts) == 2**n

    @pytest.mark.parametrize("n", range(1, 9))
    def test_methods_agree(self, n):
        shift = signed_rank_counts(n, "shift")
        assert signed_rank_counts(n, "recursive") == shift
        assert signed_rank_counts(n, SignedRankMethod.ENUMERATE) == shift

    @pytest.mark.parametrize("n", range(1, 9))
    def test_symmetric(self, n):
        counts = signed_rank_counts(n)
        assert counts == counts[::-1]

    def test_enumerate_respects_limit(self):
        with pytest.raises(ResourceLimitExceededError):
            signed_rank_counts(12, "enumerate", max_size=1000)

    def test_unknown_method(self):
        with pytest.raises(InvalidArgumentError, match="signed-rank method"):
            signed_rank_counts(4, "normal")

    def test_invalid_n(self):
        with pytest.raises(InvalidArgumentError):
            signed_rank_counts(0)


class TestSignedRankPmfCdf:
    def test_pmf_sums_to_one(self):
        n = 6
        total = sum(signed_rank_pmf(t, n) for t in range(n * (n + 1) // 2 + 1))
        assert total == pytest.approx(1.0)

    def test_cdf_lower_tail(self):
        # T <= 1 happens for the all-negative and the {1}-positive vectors
        assert signed_rank_cdf(1, 5) == pytest.approx(2 / 32)

    def test_cdf_at_maximum(self):
        assert signed_rank_cdf(15, 5) == pytest.approx(1.0)
        assert signed_rank_cdf(40, 5) == pytest.approx(1.0)

    def test_outside_support(self):
        assert signed_rank_cdf(-1, 5) == 0.0
        assert signed_rank_pmf(-1, 5) == 0.0
        assert signed_rank_pmf(16, 5) == 0.0

    def test_cdf_monotone(self):
        values = [signed_rank_cdf(t, 7) for t in range(29)]
        assert values == sorted(values)


class TestMannWhitneyCounts:
    """Tests for the Mann-Whitney U frequencies."""

    def test_two_by_two(self):
        assert mann_whitney_counts(2, 2) == [1, 1, 2, 1, 1]

    def test_one_by_n(self):
        assert mann_whitney_counts(1, 4) == [1, 1, 1, 1, 1]

    @pytest.mark.parametrize("n1, n2", [(1, 1), (3, 4), (5, 5), (2, 7), (6, 3)])
    def test_sums_to_binomial(self, n1, n2):
        counts = mann_whitney_counts(n1, n2)
        assert len(counts) == n1 * n2 + 1
        assert sum(counts) == math.comb(n1 + n2, n1)

    def test_order_of_groups_irrelevant(self):
        assert mann_whitney_counts(3, 5) == mann_whitney_counts(5, 3)

    def test_matches_enumeration(self):
        n1, n2 = 3, 4
        expected = [0] * (n1 * n2 + 1)
        for group1 in itertools.combinations(range(n1 + n2), n1):
            group2 = [r for r in range(n1 + n2) if r not in group1]
            u = sum(1 for a in group1 for b in group2 if a > b)
            expected[u] += 1
        assert mann_whitney_counts(n1, n2) == expected

    def test_pmf_and_cdf(self):
        assert mann_whitney_pmf(2, 2, 2) == pytest.approx(2 / 6)
        assert mann_whitney_cdf(1, 2, 2) == pytest.approx(2 / 6)
        assert mann_whitney_cdf(4, 2, 2) == pytest.approx(1.0)
        assert mann_whitney_cdf(-1, 2, 2) == 0.0
        assert mann_whitney_pmf(5, 2, 2) == 0.0

    def test_invalid_sizes(self):
        with pytest.raises(InvalidArgumentError):
            mann_whitney_counts(0, 3)


class TestSpearman:
    """Tests for the permutation distribution of Spearman's S."""

    def setup_method(self):
        _cfg._max_enumeration_override = "auto"

    def teardown_method(self):
        _cfg._max_enumeration_override = "auto"

    def test_distribution_n3(self):
        assert spearman_distribution(3) == {0: 1, 2: 2, 6: 2, 8: 1}

    def test_distribution_total(self):
        assert sum(spearman_distribution(6).values()) == math.factorial(6)

    def test_perfect_concordance(self):
        assert spearman_exact_pvalue(5, 1.0) == pytest.approx(2 / 120)

    def test_perfect_discordance(self):
        assert spearman_exact_pvalue(5, -1.0) == pytest.approx(2 / 120)

    def test_zero_correlation_capped(self):
        assert spearman_exact_pvalue(5, 0.0) == 1.0

    def test_symmetric_in_sign(self):
        assert spearman_exact_pvalue(6, 0.6) == pytest.approx(spearman_exact_pvalue(6, -0.6))

    def test_out_of_range(self):
        with pytest.raises(InvalidArgumentError):
            spearman_exact_pvalue(5, 1.5)

    def test_limit(self):
        with pytest.raises(ResourceLimitExceededError):
            spearman_exact_pvalue(9, 0.5, max_size=1000)
