"""Edge-case tests for input validation and boundary conditions.

Covers: input containers accepted by the data-vector converter,
degenerate samples, boundary sizes of the exact distributions, and the
error hierarchy.
"""

import numpy as np
import pandas as pd
import pytest

import survey_stats
from survey_stats._compat import _ensure_pandas_series
from survey_stats._validation import _choice, _tie_sizes
from survey_stats.exceptions import InvalidArgumentError, ResourceLimitExceededError

# ------------------------------------------------------------------ #
# 1. Data-vector conversion
# ------------------------------------------------------------------ #


class TestEnsurePandasSeries:
    def test_series_passthrough(self):
        s = pd.Series([1, 2, 3])
        assert _ensure_pandas_series(s) is s

    def test_list(self):
        assert _ensure_pandas_series(["a", "b"]).tolist() == ["a", "b"]

    def test_tuple(self):
        assert _ensure_pandas_series((1, 2)).tolist() == [1, 2]

    def test_numpy(self):
        assert _ensure_pandas_series(np.array([1.5, 2.5])).tolist() == [1.5, 2.5]

    def test_single_column_frame(self):
        df = pd.DataFrame({"q1": [1, 2, 3]})
        assert _ensure_pandas_series(df).tolist() == [1, 2, 3]

    def test_multi_column_frame_rejected(self):
        with pytest.raises(TypeError, match="single column"):
            _ensure_pandas_series(pd.DataFrame({"a": [1], "b": [2]}))

    def test_two_dimensional_array_rejected(self):
        with pytest.raises(TypeError, match="one-dimensional"):
            _ensure_pandas_series(np.zeros((2, 2)))

    def test_nested_list_rejected(self):
        with pytest.raises(TypeError, match="one-dimensional"):
            _ensure_pandas_series([[1, 2], [3, 4]])

    def test_unsupported_type(self):
        with pytest.raises(TypeError, match="'scores'"):
            _ensure_pandas_series({"a": 1}, name="scores")


# ------------------------------------------------------------------ #
# 2. Error hierarchy
# ------------------------------------------------------------------ #


class TestErrorHierarchy:
    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            survey_stats.multinomial_pmf([1, 1], [0.9, 0.9])

    def test_resource_limit_is_runtime_error(self):
        with pytest.raises(RuntimeError):
            survey_stats.find_combinations(20, 10, max_size=10)

    def test_resource_limit_message(self):
        with pytest.raises(ResourceLimitExceededError, match="1,000"):
            survey_stats.generate_permutations(8, max_size=1000)


# ------------------------------------------------------------------ #
# 3. Boundary sizes
# ------------------------------------------------------------------ #


class TestBoundarySizes:
    def test_kendall_two_observations(self):
        assert survey_stats.concordant_pair_counts(2) == [1, 1]
        assert survey_stats.kendall_tau_exact_pvalue(2, 1) == 1.0

    def test_signed_rank_single_difference(self):
        assert survey_stats.signed_rank_cdf(0, 1) == pytest.approx(0.5)

    def test_mann_whitney_single_pair(self):
        assert survey_stats.mann_whitney_counts(1, 1) == [1, 1]

    def test_wilcoxon_exact_single_score(self):
        result = survey_stats.wilcoxon_os_test([3.0], mu=1.0, appr="none")
        assert result.p_value == 1.0

    def test_multinomial_gof_two_observations(self):
        result = survey_stats.multinomial_gof_test(["a", "b"])
        assert result.p_value == pytest.approx(1.0)

    def test_spearman_exact_two_pairs(self):
        assert survey_stats.spearman_exact_pvalue(2, 1.0) == 1.0


# ------------------------------------------------------------------ #
# 4. Degenerate samples
# ------------------------------------------------------------------ #


class TestDegenerateSamples:
    def test_all_missing(self):
        with pytest.raises(InvalidArgumentError):
            survey_stats.pearson_gof_test([np.nan, np.nan])

    def test_empty_wilcoxon(self):
        with pytest.raises(InvalidArgumentError, match="no observations"):
            survey_stats.wilcoxon_os_test([])

    def test_mann_whitney_constant_scores(self):
        with pytest.warns(UserWarning):
            with pytest.raises(InvalidArgumentError, match="equal"):
                survey_stats.mann_whitney_test([2, 2, 2, 2], ["a", "b", "a", "b"])

    def test_binomial_empty(self):
        with pytest.raises(InvalidArgumentError):
            survey_stats.binomial_os_test([None, None])


# ------------------------------------------------------------------ #
# 5. Shared option and tie helpers
# ------------------------------------------------------------------ #


class TestSharedHelpers:
    def test_choice_normalises(self):
        assert _choice(" Exact ", "method", ("exact", "approx")) == "exact"

    def test_choice_rejects_unknown(self):
        with pytest.raises(InvalidArgumentError, match="Unknown method 'x'"):
            _choice("x", "method", ("exact", "approx"))

    def test_tie_sizes(self):
        np.testing.assert_array_equal(_tie_sizes(np.array([3.0, 1.0, 3.0, 2.0, 3.0])), [1, 1, 3])

    def test_modules_share_helpers(self):
        from survey_stats import correlation, rank_tests

        assert correlation._choice is rank_tests._choice is _choice
        assert correlation._tie_sizes is rank_tests._tie_sizes is _tie_sizes
