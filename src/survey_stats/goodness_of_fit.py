"""Goodness-of-fit tests for a single nominal variable.

All tests ask whether the observed category frequencies are compatible
with a hypothesised set of proportions (equal proportions unless
``expected_counts`` is given).

* :func:`multinomial_gof_test` — exact; sums the multinomial pmf of
  every outcome at least as extreme as the observed one.  McDonald
  (2014) recommends it whenever n < 1000, computation permitting.
* :func:`pearson_gof_test` — Pearson's chi-square.
* :func:`g_gof_test` — likelihood-ratio (G / Wilks) chi-square.
* :func:`binomial_os_test` — exact one-sample binomial test for two
  categories, with three ways of forming the two-sided p-value.

``expected_counts`` is a two-column data frame: the first column lists
the categories to test (in order), the second their expected counts or
weights.  Only the listed categories are counted; their expected
counts are rescaled to the observed total.

Continuity corrections for the chi-square tests (``cc``):

* ``"pearson"`` — multiply the statistic by (n − 1)/n (E. Pearson).
* ``"williams"`` — divide by 1 + (k² − 1)/(6n(k − 1)) (Williams, 1976).
* ``"yates"`` — move each observed count 0.5 towards its expectation.

References:
    McDonald, J. H. (2014). *Handbook of biological statistics* (3rd
    ed.). Sparky House Publishing.

    Williams, D. A. (1976). Improved likelihood ratio tests for complete
    contingency tables. *Biometrika*, 63(1), 33–37.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
import pandas as pd
from scipy import special, stats

from ._compat import DataFrameLike, _ensure_pandas_df, _ensure_pandas_series
from ._results import HypothesisTestResult
from ._typing import ArrayLike
from .combinatorics import count_combinations
from .exceptions import InvalidArgumentError
from .multinomial import PMF_RELATIVE_TOLERANCE, PmfMethod, multinomial_cdf, multinomial_pmf

logger = logging.getLogger(__name__)

_CORRECTIONS = ("none", "pearson", "williams", "yates")
_TWO_SIDED_METHODS = ("eqdist", "double", "smallp")


# ------------------------------------------------------------------ #
# Shared helpers
# ------------------------------------------------------------------ #


def _observed_and_expected(
    data: ArrayLike,
    expected_counts: DataFrameLike | None,
) -> tuple[list[Any], np.ndarray, np.ndarray]:
    """Return ``(categories, observed counts, null proportions)``.

    Without *expected_counts* the categories are the sorted distinct
    values of *data* and all proportions are equal.
    """
    series = _ensure_pandas_series(data, name="data").dropna()

    if expected_counts is None:
        freq = series.value_counts(sort=False).sort_index()
        categories = list(freq.index)
        observed = freq.to_numpy(dtype=np.int64)
        props = np.full(len(categories), 1.0 / max(len(categories), 1))
    else:
        table = _ensure_pandas_df(expected_counts, name="expected_counts")
        if table.shape[1] < 2:
            raise InvalidArgumentError(
                "'expected_counts' needs two columns: category and expected count."
            )
        categories = table.iloc[:, 0].tolist()
        if len(set(categories)) != len(categories):
            raise InvalidArgumentError("'expected_counts' lists a category more than once.")
        weights = pd.to_numeric(table.iloc[:, 1], errors="raise").to_numpy(dtype=float)
        if np.any(~np.isfinite(weights)) or np.any(weights < 0) or weights.sum() <= 0:
            raise InvalidArgumentError(
                "'expected_counts' must be non-negative with a positive total."
            )
        observed = np.array([int((series == c).sum()) for c in categories], dtype=np.int64)
        props = weights / weights.sum()

    if len(categories) < 2:
        raise InvalidArgumentError(
            f"A goodness-of-fit test needs at least two categories, got {len(categories)}."
        )
    if observed.sum() == 0:
        raise InvalidArgumentError("'data' contains no observations in the tested categories.")

    return categories, observed, props


def _resolve_correction(cc: str | None) -> str:
    normalised = "none" if cc is None else cc.strip().lower()
    if normalised not in _CORRECTIONS:
        raise InvalidArgumentError(
            f"Unknown continuity correction '{cc}'. Choose from: {', '.join(_CORRECTIONS)}."
        )
    return normalised


def _correction_label(cc: str) -> str:
    return {
        "none": "",
        "pearson": ", with E. Pearson continuity correction",
        "williams": ", with Williams continuity correction",
        "yates": ", with Yates continuity correction",
    }[cc]


# ------------------------------------------------------------------ #
# Exact multinomial
# ------------------------------------------------------------------ #


def multinomial_gof_test(
    data: ArrayLike,
    expected_counts: DataFrameLike | None = None,
    *,
    method: PmfMethod | str | None = None,
    max_size: int | None = None,
) -> HypothesisTestResult:
    """Exact multinomial test of goodness-of-fit.

    Steps:
        1. Probability of the observed counts under the multinomial
           model (``p_obs``).
        2. All C(n+k−1, k−1) ways to distribute n over k categories.
        3. Probability of each of those.
        4. Sum of the probabilities not exceeding ``p_obs``.

    Args:
        data: Nominal observations; missing values are dropped.
        expected_counts: Optional two-column frame of categories and
            expected counts.  Equal proportions when omitted.
        method: Pmf evaluation strategy (see
            :func:`~survey_stats.multinomial_pmf`).
        max_size: Enumeration limit for step 2.

    Returns:
        :class:`HypothesisTestResult` with ``details`` keys ``p_obs``,
        ``n_combinations`` and ``categories``.

    Raises:
        InvalidArgumentError: On unusable data.
        ResourceLimitExceededError: If step 2 exceeds the limit.
    """
    categories, observed, props = _observed_and_expected(data, expected_counts)
    n = int(observed.sum())
    k = len(categories)

    p_obs = multinomial_pmf(observed.tolist(), props.tolist(), method)
    p_value = multinomial_cdf(observed.tolist(), props.tolist(), method, max_size=max_size)

    return HypothesisTestResult(
        test_used="one-sample multinomial exact goodness-of-fit test",
        p_value=p_value,
        n=n,
        details={
            "p_obs": p_obs,
            "n_combinations": count_combinations(n, k),
            "categories": categories,
        },
    )


# ------------------------------------------------------------------ #
# Chi-square family
# ------------------------------------------------------------------ #


def _chi_square_result(
    name: str,
    statistic: float,
    expected: np.ndarray,
    n: int,
    cc: str,
) -> HypothesisTestResult:
    k = len(expected)
    df = k - 1
    if cc == "pearson":
        statistic = (n - 1) / n * statistic
    elif cc == "williams":
        statistic = statistic / (1 + (k**2 - 1) / (6 * n * (k - 1)))

    p_value = float(stats.chi2.sf(statistic, df))
    return HypothesisTestResult(
        test_used=f"{name}{_correction_label(cc)}",
        p_value=p_value,
        statistic=float(statistic),
        df=df,
        n=n,
        details={
            "k": k,
            "min_exp": float(expected.min()),
            "prop_below_5": float(np.mean(expected < 5)),
        },
    )


def pearson_gof_test(
    data: ArrayLike,
    expected_counts: DataFrameLike | None = None,
    cc: str | None = "none",
) -> HypothesisTestResult:
    """Pearson chi-square test of goodness-of-fit.

    χ² = Σ (O − E)² / E with k − 1 degrees of freedom.  With
    ``cc="yates"`` each |O − E| is reduced by 0.5 first.

    Args:
        data: Nominal observations; missing values are dropped.
        expected_counts: Optional two-column frame of categories and
            expected counts.
        cc: ``"none"``, ``"pearson"``, ``"williams"`` or ``"yates"``.

    Returns:
        :class:`HypothesisTestResult`; ``details`` holds ``k``,
        ``min_exp`` (smallest expected count) and ``prop_below_5``
        (share of expected counts below five).
    """
    cc = _resolve_correction(cc)
    _, observed, props = _observed_and_expected(data, expected_counts)
    n = int(observed.sum())
    expected = props * n
    if np.any(expected == 0):
        raise InvalidArgumentError("Expected counts must be positive for a chi-square test.")

    if cc == "yates":
        statistic = float(np.sum((np.abs(observed - expected) - 0.5) ** 2 / expected))
    else:
        statistic = float(np.sum((observed - expected) ** 2 / expected))

    return _chi_square_result(
        "Pearson chi-square test of goodness-of-fit", statistic, expected, n, cc
    )


def g_gof_test(
    data: ArrayLike,
    expected_counts: DataFrameLike | None = None,
    cc: str | None = "none",
) -> HypothesisTestResult:
    """G (likelihood-ratio / Wilks) test of goodness-of-fit.

    G = 2 Σ O ln(O / E), compared with a chi-square distribution with
    k − 1 degrees of freedom.  Empty categories contribute zero.

    Args:
        data: Nominal observations; missing values are dropped.
        expected_counts: Optional two-column frame of categories and
            expected counts.
        cc: ``"none"``, ``"pearson"``, ``"williams"`` or ``"yates"``.
    """
    cc = _resolve_correction(cc)
    _, observed, props = _observed_and_expected(data, expected_counts)
    n = int(observed.sum())
    expected = props * n
    if np.any(expected == 0):
        raise InvalidArgumentError("Expected counts must be positive for a G test.")

    obs = observed.astype(float)
    if cc == "yates":
        obs = np.where(obs > expected, obs - 0.5, np.where(obs < expected, obs + 0.5, obs))

    statistic = 2.0 * float(np.sum(special.xlogy(obs, obs / expected)))

    return _chi_square_result("G test of goodness-of-fit", statistic, expected, n, cc)


# ------------------------------------------------------------------ #
# One-sample binomial
# ------------------------------------------------------------------ #


def binomial_os_test(
    data: ArrayLike,
    codes: tuple[Any, Any] | list[Any] | None = None,
    p0: float = 0.5,
    two_sided_method: str = "eqdist",
) -> HypothesisTestResult:
    """Exact one-sample binomial test.

    The one-sided p-value is the binomial tail beyond the smaller of the
    two counts.  The other tail is added according to
    *two_sided_method*:

    * ``"eqdist"`` — the tail beyond the count lying the same distance
      from the expected count on the other side.
    * ``"double"`` — the one-sided p-value again (i.e. doubling).
    * ``"smallp"`` — all outcomes on the other side whose probability
      does not exceed that of the observed count.

    Args:
        data: Observations of a binary variable; missing values are
            dropped.
        codes: The two categories to compare, the first being the one
            *p0* refers to.  When omitted the first category in sorted
            order is used (or the second when ``p0 > 0.5`` and the
            first is the less frequent).
        p0: Hypothesised proportion of the first category, in (0, 1).
        two_sided_method: ``"eqdist"``, ``"double"`` or ``"smallp"``.

    Returns:
        :class:`HypothesisTestResult`; ``details`` holds ``n1``, ``n2``,
        ``p0``, ``category`` and ``one_sided_p``.
    """
    method = two_sided_method.strip().lower()
    if method not in _TWO_SIDED_METHODS:
        raise InvalidArgumentError(
            f"Unknown two-sided method '{two_sided_method}'. Choose from: "
            f"{', '.join(_TWO_SIDED_METHODS)}."
        )
    if not 0 < p0 < 1:
        raise InvalidArgumentError(f"'p0' must lie strictly between 0 and 1, got {p0!r}.")

    series = _ensure_pandas_series(data, name="data").dropna()

    if codes is None:
        freq = series.value_counts(sort=False).sort_index()
        if len(freq) == 0:
            raise InvalidArgumentError("'data' contains no observations.")
        if len(freq) > 2:
            raise InvalidArgumentError(
                f"'data' has {len(freq)} categories; pass 'codes' to select two."
            )
        n1 = int(freq.iloc[0])
        n2 = int(freq.sum()) - n1
        p0_category = freq.index[0]
        if p0 > 0.5 and n1 < n2:
            n1, n2 = n2, n1
            p0_category = freq.index[1]
        category_note = f" (assuming p0 for {p0_category})"
    else:
        if len(codes) != 2:
            raise InvalidArgumentError(f"'codes' must name exactly two categories, got {codes!r}.")
        n1 = int((series == codes[0]).sum())
        n2 = int((series == codes[1]).sum())
        p0_category = codes[0]
        category_note = f" (with p0 for {codes[0]})"

    n = n1 + n2
    if n == 0:
        raise InvalidArgumentError("'data' contains no observations of the selected categories.")

    min_count, exp_prop, obs_prop = n1, p0, n1 / n
    if n2 < n1:
        min_count, exp_prop, obs_prop = n2, 1 - p0, n2 / n

    dist = stats.binom(n, exp_prop)
    above = exp_prop < obs_prop

    # ---- One-sided tail ----------------------------------------------
    sig1 = float(dist.sf(min_count - 1) if above else dist.cdf(min_count))

    # ---- Other tail --------------------------------------------------
    if method == "double":
        sig2 = sig1
        label = "double one-sided method"
    elif method == "eqdist":
        exp_count = n * exp_prop
        other_count = exp_count + (exp_count - min_count)
        sig2 = float(dist.cdf(other_count) if above else dist.sf(other_count - 1))
        label = "equal-distance method"
    else:
        p_small = dist.pmf(min_count) * (1.0 + PMF_RELATIVE_TOLERANCE)
        other = np.arange(0, min_count) if above else np.arange(min_count + 1, n + 1)
        other_pmf = dist.pmf(other)
        sig2 = float(other_pmf[other_pmf <= p_small].sum())
        label = "small p method"

    p_value = min(sig1 + sig2, 1.0)
    logger.debug("Binomial test: n=%d, k=%d, p0=%.4g, method=%s", n, min_count, exp_prop, method)

    return HypothesisTestResult(
        test_used=f"one-sample binomial, with {label}{category_note}",
        p_value=p_value,
        n=n,
        details={
            "n1": n1,
            "n2": n2,
            "p0": p0,
            "category": p0_category,
            "one_sided_p": sig1,
        },
    )
