"""Tests for the goodness-of-fit tests."""

import math

import numpy as np
import pandas as pd
import pytest
from scipy import stats

import survey_stats._config as _cfg
from survey_stats._results import HypothesisTestResult
from survey_stats.exceptions import InvalidArgumentError, ResourceLimitExceededError
from survey_stats.goodness_of_fit import (
    binomial_os_test,
    g_gof_test,
    multinomial_gof_test,
    pearson_gof_test,
)
from survey_stats.multinomial import multinomial_cdf, multinomial_pmf

# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #

DATA = ["a"] * 5 + ["b"] * 2 + ["c"] * 1
OBSERVED = [5, 2, 1]


@pytest.fixture()
def expected_counts():
    return pd.DataFrame({"category": ["a", "b", "c"], "expected": [2, 1, 1]})


class TestMultinomialGofTest:
    """Tests for multinomial_gof_test."""

    def setup_method(self):
        _cfg._max_enumeration_override = "auto"

    def teardown_method(self):
        _cfg._max_enumeration_override = "auto"

    def test_equal_proportions(self):
        result = multinomial_gof_test(DATA)
        assert isinstance(result, HypothesisTestResult)
        assert result.p_value == pytest.approx(multinomial_cdf(OBSERVED, [1 / 3] * 3))
        assert result["p_obs"] == pytest.approx(multinomial_pmf(OBSERVED, [1 / 3] * 3))
        assert result["n_combinations"] == 45
        assert result.n == 8

    def test_categories_reported_in_sorted_order(self):
        result = multinomial_gof_test(["z", "x", "y", "x"])
        assert result["categories"] == ["x", "y", "z"]

    def test_with_expected_counts(self, expected_counts):
        result = multinomial_gof_test(DATA, expected_counts)
        expected = multinomial_cdf(OBSERVED, [0.5, 0.25, 0.25])
        assert result.p_value == pytest.approx(expected)

    def test_expected_counts_restrict_categories(self, expected_counts):
        result = multinomial_gof_test(DATA + ["d", "d"], expected_counts)
        assert result.n == 8

    def test_expected_category_not_observed(self):
        table = pd.DataFrame({"category": ["a", "b", "c", "d"], "expected": [1, 1, 1, 1]})
        result = multinomial_gof_test(DATA, table)
        assert result.p_value == pytest.approx(multinomial_cdf([5, 2, 1, 0], [0.25] * 4))

    def test_missing_values_dropped(self):
        result = multinomial_gof_test(DATA + [None, np.nan])
        assert result.n == 8

    def test_method_does_not_change_result(self):
        a = multinomial_gof_test(DATA, method="loggamma").p_value
        b = multinomial_gof_test(DATA, method="factorial").p_value
        assert a == pytest.approx(b, rel=1e-9)

    def test_numeric_codes(self):
        result = multinomial_gof_test(np.array([1, 1, 1, 2, 3, 3]))
        assert result.p_value == pytest.approx(multinomial_cdf([3, 1, 2], [1 / 3] * 3))

    def test_single_category_rejected(self):
        with pytest.raises(InvalidArgumentError, match="two categories"):
            multinomial_gof_test(["a"] * 8)

    def test_empty_rejected(self):
        with pytest.raises(InvalidArgumentError):
            multinomial_gof_test([None, None])

    def test_bad_expected_counts(self):
        table = pd.DataFrame({"category": ["a", "b"], "expected": [1, -1]})
        with pytest.raises(InvalidArgumentError):
            multinomial_gof_test(DATA, table)

    def test_duplicate_expected_category(self):
        table = pd.DataFrame({"category": ["a", "a"], "expected": [1, 1]})
        with pytest.raises(InvalidArgumentError, match="more than once"):
            multinomial_gof_test(DATA, table)

    def test_expected_counts_needs_two_columns(self):
        with pytest.raises(InvalidArgumentError, match="two columns"):
            multinomial_gof_test(DATA, pd.DataFrame({"category": ["a", "b"]}))

    def test_expected_counts_must_be_a_frame(self):
        with pytest.raises(TypeError, match="expected_counts"):
            multinomial_gof_test(DATA, {"a": 1, "b": 2})

    def test_enumeration_limit(self):
        with pytest.raises(ResourceLimitExceededError):
            multinomial_gof_test(list("abcdefgh") * 5, max_size=1000)


class TestPearsonGofTest:
    """Tests for pearson_gof_test."""

    def test_matches_scipy(self):
        result = pearson_gof_test(DATA)
        expected = stats.chisquare(OBSERVED)
        assert result.statistic == pytest.approx(expected.statistic)
        assert result.p_value == pytest.approx(expected.pvalue)
        assert result.df == 2

    def test_with_expected_counts(self, expected_counts):
        result = pearson_gof_test(DATA, expected_counts)
        expected = stats.chisquare(OBSERVED, f_exp=[4, 2, 2])
        assert result.statistic == pytest.approx(expected.statistic)
        assert result.p_value == pytest.approx(expected.pvalue)

    def test_pearson_correction(self):
        plain = pearson_gof_test(DATA).statistic
        corrected = pearson_gof_test(DATA, cc="pearson").statistic
        assert corrected == pytest.approx(plain * 7 / 8)

    def test_williams_correction(self):
        plain = pearson_gof_test(DATA).statistic
        corrected = pearson_gof_test(DATA, cc="williams").statistic
        assert corrected == pytest.approx(plain / (1 + 8 / 96))

    def test_yates_correction(self):
        e = 8 / 3
        expected = sum((abs(o - e) - 0.5) ** 2 / e for o in OBSERVED)
        result = pearson_gof_test(DATA, cc="yates")
        assert result.statistic == pytest.approx(expected)
        assert "Yates" in result.test_used

    def test_expected_count_diagnostics(self):
        result = pearson_gof_test(DATA)
        assert result["min_exp"] == pytest.approx(8 / 3)
        assert result["prop_below_5"] == pytest.approx(1.0)
        assert result["k"] == 3

    def test_unknown_correction(self):
        with pytest.raises(InvalidArgumentError, match="continuity correction"):
            pearson_gof_test(DATA, cc="bonferroni")

    def test_zero_expected_count_rejected(self):
        table = pd.DataFrame({"category": ["a", "b", "c"], "expected": [1, 1, 0]})
        with pytest.raises(InvalidArgumentError, match="positive"):
            pearson_gof_test(DATA, table)


class TestGGofTest:
    """Tests for g_gof_test."""

    def test_matches_scipy(self):
        result = g_gof_test(DATA)
        expected = stats.power_divergence(OBSERVED, lambda_="log-likelihood")
        assert result.statistic == pytest.approx(expected.statistic)
        assert result.p_value == pytest.approx(expected.pvalue)

    def test_empty_category_contributes_zero(self):
        table = pd.DataFrame({"category": ["a", "b", "c", "d"], "expected": [1, 1, 1, 1]})
        result = g_gof_test(DATA, table)
        expected = 2 * sum(o * math.log(o / 2) for o in OBSERVED)
        assert result.statistic == pytest.approx(expected)
        assert result.df == 3

    def test_williams_correction(self):
        plain = g_gof_test(DATA).statistic
        result = g_gof_test(DATA, cc="williams")
        assert result.statistic == pytest.approx(plain / (1 + 8 / 96))
        assert "Williams" in result.test_used

    def test_yates_moves_counts_towards_expectation(self):
        e = 8 / 3
        adjusted = [4.5, 2.5, 1.5]
        expected = 2 * sum(o * math.log(o / e) for o in adjusted)
        assert g_gof_test(DATA, cc="yates").statistic == pytest.approx(expected)


class TestBinomialOsTest:
    """Tests for binomial_os_test."""

    DATA = ["a"] * 3 + ["b"] * 12

    @pytest.mark.parametrize("method", ["eqdist", "double", "smallp"])
    def test_symmetric_null_matches_scipy(self, method):
        result = binomial_os_test(self.DATA, two_sided_method=method)
        expected = stats.binomtest(3, 15, 0.5).pvalue
        assert result.p_value == pytest.approx(expected)

    def test_smallp_matches_scipy_asymmetric(self):
        data = ["a"] * 2 + ["b"] * 18
        result = binomial_os_test(data, codes=("a", "b"), p0=0.3, two_sided_method="smallp")
        expected = stats.binomtest(2, 20, 0.3).pvalue
        assert result.p_value == pytest.approx(expected, rel=1e-8)

    def test_double_is_twice_one_sided(self):
        data = ["a"] * 2 + ["b"] * 18
        result = binomial_os_test(data, codes=("a", "b"), p0=0.3, two_sided_method="double")
        one_sided = stats.binom.cdf(2, 20, 0.3)
        assert result["one_sided_p"] == pytest.approx(one_sided)
        assert result.p_value == pytest.approx(min(2 * one_sided, 1.0))

    def test_eqdist_uses_mirrored_count(self):
        data = ["a"] * 2 + ["b"] * 18
        result = binomial_os_test(data, codes=("a", "b"), p0=0.3)
        # expected 6, observed 2, mirrored count 10
        expected = stats.binom.cdf(2, 20, 0.3) + stats.binom.sf(9, 20, 0.3)
        assert result.p_value == pytest.approx(expected)
        assert "equal-distance" in result.test_used

    def test_counts_reported(self):
        result = binomial_os_test(self.DATA)
        assert result["n1"] == 3
        assert result["n2"] == 12
        assert result["category"] == "a"
        assert result.n == 15

    def test_large_p0_switches_category(self):
        result = binomial_os_test(self.DATA, p0=0.7)
        assert result["category"] == "b"
        assert "assuming p0 for b" in result.test_used

    def test_p_value_capped(self):
        result = binomial_os_test(["a"] * 5 + ["b"] * 5, two_sided_method="double")
        assert result.p_value == 1.0

    def test_single_category_present(self):
        result = binomial_os_test(["a"] * 6)
        assert result["n2"] == 0
        assert 0.0 < result.p_value <= 1.0

    def test_three_categories_need_codes(self):
        with pytest.raises(InvalidArgumentError, match="codes"):
            binomial_os_test(["a", "b", "c"])

    def test_codes_select_two_categories(self):
        result = binomial_os_test(["a", "b", "c", "a"], codes=["a", "b"])
        assert result.n == 3

    @pytest.mark.parametrize("p0", [0.0, 1.0, -0.2, 1.5])
    def test_invalid_p0(self, p0):
        with pytest.raises(InvalidArgumentError):
            binomial_os_test(self.DATA, p0=p0)

    def test_unknown_method(self):
        with pytest.raises(InvalidArgumentError, match="two-sided method"):
            binomial_os_test(self.DATA, two_sided_method="minlike")
