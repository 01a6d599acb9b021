"""Tests for the exact Kendall-tau distribution."""

import itertools
import math

import pytest
from scipy import stats

from survey_stats.exceptions import InvalidArgumentError
from survey_stats.kendall import (
    concordant_pair_counts,
    concordant_pair_table,
    kendall_tau_exact_pvalue,
)


def _concordant(perm):
    return sum(
        1 for i, j in itertools.combinations(range(len(perm)), 2) if perm[i] < perm[j]
    )


class TestConcordantPairCounts:
    """Tests for concordant_pair_counts and concordant_pair_table."""

    def test_first_rows(self):
        assert concordant_pair_counts(1) == [1]
        assert concordant_pair_counts(2) == [1, 1]
        assert concordant_pair_counts(3) == [1, 2, 2, 1]
        assert concordant_pair_counts(4) == [1, 3, 5, 6, 5, 3, 1]

    def test_table_rows(self):
        assert list(concordant_pair_table(4)) == [
            [1],
            [1, 1],
            [1, 2, 2, 1],
            [1, 3, 5, 6, 5, 3, 1],
        ]

    @pytest.mark.parametrize("n", range(1, 13))
    def test_row_sums_to_factorial(self, n):
        row = concordant_pair_counts(n)
        assert len(row) == n * (n - 1) // 2 + 1
        assert sum(row) == math.factorial(n)

    @pytest.mark.parametrize("n", range(1, 10))
    def test_symmetric(self, n):
        row = concordant_pair_counts(n)
        assert row == row[::-1]

    def test_matches_enumeration(self):
        n = 6
        expected = [0] * (n * (n - 1) // 2 + 1)
        for perm in itertools.permutations(range(n)):
            expected[_concordant(perm)] += 1
        assert concordant_pair_counts(n) == expected

    def test_exact_integers_for_large_n(self):
        row = concordant_pair_counts(25)
        assert all(isinstance(v, int) for v in row)
        assert sum(row) == math.factorial(25)

    @pytest.mark.parametrize("n", [0, -1, 2.5])
    def test_invalid_n(self, n):
        with pytest.raises(InvalidArgumentError):
            concordant_pair_counts(n)
        with pytest.raises(InvalidArgumentError):
            concordant_pair_table(n)


class TestKendallTauExactPvalue:
    """Tests for kendall_tau_exact_pvalue."""

    def test_perfect_concordance(self):
        # 2 * 1 / 4!
        assert kendall_tau_exact_pvalue(4, 6) == pytest.approx(1 / 12)

    def test_perfect_discordance(self):
        assert kendall_tau_exact_pvalue(4, 0) == pytest.approx(1 / 12)

    def test_symmetric_in_c(self):
        n = 7
        max_c = n * (n - 1) // 2
        for c in range(max_c + 1):
            assert kendall_tau_exact_pvalue(n, c) == pytest.approx(
                kendall_tau_exact_pvalue(n, max_c - c)
            )

    def test_capped_at_one(self):
        assert kendall_tau_exact_pvalue(4, 3) == 1.0

    def test_single_observation(self):
        assert kendall_tau_exact_pvalue(1, 0) == 1.0

    def test_known_tail(self):
        # n=5: counts 1, 4, 9, ...; tail up to c=2 is 14 of 120
        assert kendall_tau_exact_pvalue(5, 2) == pytest.approx(28 / 120)

    def test_matches_scipy_exact(self):
        x = list(range(1, 9))
        y = [3, 1, 4, 2, 8, 5, 7, 6]
        c = _concordant(y)
        expected = stats.kendalltau(x, y, method="exact").pvalue
        assert kendall_tau_exact_pvalue(len(x), c) == pytest.approx(expected, rel=1e-9)

    def test_p_value_in_unit_interval(self):
        for c in range(0, 46):
            p = kendall_tau_exact_pvalue(10, c)
            assert 0.0 < p <= 1.0

    def test_c_above_maximum(self):
        with pytest.raises(InvalidArgumentError, match="cannot exceed"):
            kendall_tau_exact_pvalue(4, 7)

    def test_negative_c(self):
        with pytest.raises(InvalidArgumentError):
            kendall_tau_exact_pvalue(4, -1)

    def test_fractional_c(self):
        with pytest.raises(InvalidArgumentError):
            kendall_tau_exact_pvalue(4, 2.5)

    def test_invalid_n(self):
        with pytest.raises(InvalidArgumentError):
            kendall_tau_exact_pvalue(0, 0)
