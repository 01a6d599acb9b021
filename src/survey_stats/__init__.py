"""survey_stats — Exact small-sample tests for survey and questionnaire data.

Implements the exact multinomial goodness-of-fit test (with four
interchangeable pmf evaluators), the exact null distributions of
Kendall's tau, Spearman's rho, the Wilcoxon signed-rank sum and the
Mann–Whitney U, and the tests built on them: chi-square and G
goodness-of-fit, the one-sample binomial, the one-sample Wilcoxon and
Mann–Whitney tests, and Kendall / Spearman rank correlation.  The
enumerations behind the exact procedures grow exponentially or
factorially and are guarded by a configurable size limit.

Public API:
    .. autosummary::
        find_combinations
        count_combinations
        generate_permutations
        multinomial_pmf
        multinomial_cdf
        concordant_pair_counts
        concordant_pair_table
        kendall_tau_exact_pvalue
        signed_rank_counts
        signed_rank_pmf
        signed_rank_cdf
        mann_whitney_counts
        mann_whitney_pmf
        mann_whitney_cdf
        spearman_distribution
        spearman_exact_pvalue
        multinomial_gof_test
        pearson_gof_test
        g_gof_test
        binomial_os_test
        wilcoxon_os_test
        mann_whitney_test
        kendall_tau
        spearman_rho
        p_adjust
        format_p_value
        print_test_table
        print_adjustment_table
        get_pmf_method
        set_pmf_method
        get_max_enumeration
        set_max_enumeration
        PmfMethod
        SignedRankMethod
        HypothesisTestResult
        CorrelationResult
        InvalidArgumentError
        ResourceLimitExceededError
"""

from ._config import get_max_enumeration, get_pmf_method, set_max_enumeration, set_pmf_method
from ._results import CorrelationResult, HypothesisTestResult
from .combinatorics import count_combinations, find_combinations, generate_permutations
from .correlation import kendall_tau, spearman_rho
from .display import print_adjustment_table, print_test_table
from .exceptions import InvalidArgumentError, ResourceLimitExceededError
from .goodness_of_fit import binomial_os_test, g_gof_test, multinomial_gof_test, pearson_gof_test
from .kendall import concordant_pair_counts, concordant_pair_table, kendall_tau_exact_pvalue
from .multinomial import PmfMethod, multinomial_cdf, multinomial_pmf
from .pvalues import format_p_value, p_adjust
from .rank_distributions import (
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
from .rank_tests import mann_whitney_test, wilcoxon_os_test

__all__ = [
    "CorrelationResult",
    "HypothesisTestResult",
    "InvalidArgumentError",
    "ResourceLimitExceededError",
    "find_combinations",
    "count_combinations",
    "generate_permutations",
    "PmfMethod",
    "multinomial_pmf",
    "multinomial_cdf",
    "concordant_pair_counts",
    "concordant_pair_table",
    "kendall_tau_exact_pvalue",
    "SignedRankMethod",
    "signed_rank_counts",
    "signed_rank_pmf",
    "signed_rank_cdf",
    "mann_whitney_counts",
    "mann_whitney_pmf",
    "mann_whitney_cdf",
    "spearman_distribution",
    "spearman_exact_pvalue",
    "multinomial_gof_test",
    "pearson_gof_test",
    "g_gof_test",
    "binomial_os_test",
    "wilcoxon_os_test",
    "mann_whitney_test",
    "kendall_tau",
    "spearman_rho",
    "p_adjust",
    "format_p_value",
    "print_test_table",
    "print_adjustment_table",
    "get_pmf_method",
    "set_pmf_method",
    "get_max_enumeration",
    "set_max_enumeration",
]

__version__ = "0.1.0"
