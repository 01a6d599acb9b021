"""Rank correlation for two ordinal variables.

* :func:`kendall_tau` — Kendall's tau-a or tau-b, with the Kendall
  normal approximation, the Brown–Benedetti approximation or the exact
  permutation distribution.
* :func:`spearman_rho` — Spearman's rho, with a t, Fieller z, Olds z or
  exact permutation test.

Ordinal text categories are mapped to their position in *levels*
(``levels_x`` / ``levels_y``); values outside the listed levels count
as missing.  Pairs with a missing value on either side are dropped.

Pair counts for Kendall's tau
-----------------------------
With ``sx[i, j] = sign(x_i − x_j)`` and ``sy`` likewise, the product
``sx · sy`` is +1 for a concordant ordered pair, −1 for a discordant
one and 0 for a tie on either variable.  P and Q below count ordered
pairs, so the numbers of unordered concordant / discordant pairs are
P/2 and Q/2.

References:
    Brown, M. B. & Benedetti, J. K. (1977). Sampling behavior of tests
    for correlation in two-way contingency tables. *Journal of the
    American Statistical Association*, 72(358), 309–315.

    Fieller, E. C., Hartley, H. O. & Pearson, E. S. (1957). Tests for
    rank correlation coefficients. I. *Biometrika*, 44(3/4), 470–481.

    Zar, J. H. (1972). Significance testing of the Spearman rank
    correlation coefficient. *Journal of the American Statistical
    Association*, 67(339), 578–580.
"""

from __future__ import annotations

import logging
import math
import warnings
from collections.abc import Sequence
from typing import Any

import numpy as np
import pandas as pd
from scipy import stats

from ._compat import _ensure_pandas_series
from ._results import CorrelationResult
from ._typing import ArrayLike
from ._validation import _choice, _tie_sizes
from .exceptions import InvalidArgumentError
from .kendall import kendall_tau_exact_pvalue
from .rank_distributions import spearman_exact_pvalue

logger = logging.getLogger(__name__)

_KENDALL_TESTS = ("kendall-appr", "bb", "kendall-exact")
_SPEARMAN_TESTS = ("none", "t", "z-fieller", "z-olds", "exact")


# ------------------------------------------------------------------ #
# Input preparation
# ------------------------------------------------------------------ #


def _ordinal_codes(obj: Any, levels: Sequence[Any] | None, name: str) -> pd.Series:
    """Return *obj* as floats, coding categories by their rank in *levels*."""
    series = _ensure_pandas_series(obj, name=name).reset_index(drop=True)
    if levels is not None:
        codes = pd.Categorical(series, categories=list(levels), ordered=True).codes
        return pd.Series(np.where(codes < 0, np.nan, codes + 1.0))
    try:
        return pd.to_numeric(series, errors="raise").astype(float)
    except (ValueError, TypeError) as exc:
        raise InvalidArgumentError(
            f"'{name}' is not numeric; pass its ordered categories via levels."
        ) from exc


def _complete_pairs(
    x: ArrayLike,
    y: ArrayLike,
    levels_x: Sequence[Any] | None,
    levels_y: Sequence[Any] | None,
) -> tuple[np.ndarray, np.ndarray]:
    xs = _ordinal_codes(x, levels_x, "x")
    ys = _ordinal_codes(y, levels_y, "y")
    if len(xs) != len(ys):
        raise InvalidArgumentError(f"'x' and 'y' differ in length ({len(xs)} vs {len(ys)}).")

    frame = pd.DataFrame({"x": xs, "y": ys}).dropna()
    if len(frame) < 3:
        raise InvalidArgumentError(
            f"At least three complete pairs are required, got {len(frame)}."
        )
    return frame["x"].to_numpy(dtype=float), frame["y"].to_numpy(dtype=float)


def _signed(z: float, coefficient: float) -> float:
    return -abs(z) if coefficient < 0 else z


# ------------------------------------------------------------------ #
# Kendall's tau
# ------------------------------------------------------------------ #


def kendall_tau(
    x: ArrayLike,
    y: ArrayLike,
    levels_x: Sequence[Any] | None = None,
    levels_y: Sequence[Any] | None = None,
    version: str = "b",
    test: str = "kendall-appr",
    cc: bool = False,
    use_ranks: bool = False,
) -> CorrelationResult:
    """Kendall's rank correlation with a significance test.

    tau-a = (C − D) / (n(n−1)/2) ignores ties.  tau-b divides by
    sqrt((n² − Σt_x²)(n² − Σt_y²)) / 2 instead, where t are the tie
    group sizes.

    Tests:
        * ``"kendall-appr"`` — normal approximation with Kendall's
          (1962) tie-corrected variance of C − D.  For tau-a:
          z = 3·tau·sqrt(n(n − 1)) / sqrt(2(2n + 5)).
        * ``"bb"`` — Brown & Benedetti (1977) asymptotic standard error
          under H₀ (tau-b only).
        * ``"kendall-exact"`` — exact permutation distribution of C.
          Requires untied data; with ties a ``UserWarning`` is issued
          and the Kendall approximation is used.

    Args:
        x: First ordinal variable.
        y: Second ordinal variable.
        levels_x: Ordered categories of *x*, if it holds labels.
        levels_y: Ordered categories of *y*, if it holds labels.
        version: ``"a"`` or ``"b"``.
        test: See above.
        cc: Continuity correction.
        use_ranks: Replace the values by their (mid-)ranks first.

    Returns:
        :class:`CorrelationResult` with ``details`` keys
        ``concordant`` and ``discordant`` (unordered pair counts).

    Raises:
        InvalidArgumentError: For unknown options, fewer than three
            complete pairs, or a constant variable under tau-b.
    """
    version = _choice(version, "version", ("a", "b"))
    test = _choice(test, "test", _KENDALL_TESTS)
    if version == "a" and test == "bb":
        raise InvalidArgumentError("The Brown-Benedetti test is only defined for tau-b.")

    xv, yv = _complete_pairs(x, y, levels_x, levels_y)
    if use_ranks:
        xv, yv = stats.rankdata(xv), stats.rankdata(yv)
    n = xv.size

    sx = np.sign(xv[:, None] - xv[None, :])
    sy = np.sign(yv[:, None] - yv[None, :])
    prod = sx * sy
    p_ordered = int(np.sum(prod > 0))
    q_ordered = int(np.sum(prod < 0))
    ase0_sum = float(np.sum(prod.sum(axis=1) ** 2))
    concordant = p_ordered // 2
    discordant = q_ordered // 2

    t1 = _tie_sizes(xv)
    t2 = _tie_sizes(yv)
    has_ties = bool(t1.max() > 1 or t2.max() > 1)
    if test == "kendall-exact" and has_ties:
        warnings.warn(
            "Ties present, switching from the exact test to the Kendall approximation.",
            UserWarning,
            stacklevel=2,
        )
        test = "kendall-appr"

    details = {"concordant": concordant, "discordant": discordant}

    if version == "a":
        measure = "Kendall Tau-a"
        tau = (concordant - discordant) / (n * (n - 1) / 2)
    else:
        measure = "Kendall Tau-b"
        d_r = n**2 - float(np.sum(t1**2))
        d_c = n**2 - float(np.sum(t2**2))
        if d_r == 0 or d_c == 0:
            raise InvalidArgumentError("Tau-b is undefined when a variable is constant.")
        tau = (p_ordered - q_ordered) / math.sqrt(d_r * d_c)

    # ---- Exact ------------------------------------------------------
    if test == "kendall-exact":
        p_value = kendall_tau_exact_pvalue(n, concordant)
        return CorrelationResult(
            measure=measure,
            coefficient=tau,
            test_used="Kendall exact",
            p_value=p_value,
            statistic=concordant,
            n=n,
            details=details,
        )

    # ---- Approximations ---------------------------------------------
    tau_test = abs(tau) - 2 / (n * (n - 1)) if cc else tau

    if test == "bb":
        spread = ase0_sum - (p_ordered - q_ordered) ** 2 / n
        # Zero under perfect (dis)concordance; the limit is an infinite z.
        if spread <= 0:
            z = math.copysign(math.inf, tau_test)
        else:
            z = tau_test / (2 * math.sqrt(spread / (d_r * d_c)))
        test_used = "Brown and Benedetti approximation"
    elif version == "a":
        z = 3 * tau_test * math.sqrt(n * (n - 1)) / math.sqrt(2 * (2 * n + 5))
        test_used = "Kendall approximation"
    else:
        v0 = n * (n - 1) * (2 * n + 5)
        vt1 = float(np.sum(t1 * (t1 - 1) * (2 * t1 + 5)))
        vt2 = float(np.sum(t2 * (t2 - 1) * (2 * t2 + 5)))
        v1 = float(np.sum(t1 * (t1 - 1))) * float(np.sum(t2 * (t2 - 1))) / (2 * n * (n - 1))
        v2 = (
            float(np.sum(t1 * (t1 - 1) * (t1 - 2)))
            * float(np.sum(t2 * (t2 - 1) * (t2 - 2)))
            / (9 * n * (n - 1) * (n - 2))
        )
        v = (v0 - vt1 - vt2) / 18 + v1 + v2
        s = concordant - discordant
        z = (abs(s) - 1) / math.sqrt(v) if cc else s / math.sqrt(v)
        test_used = "Kendall approximation"

    if cc:
        test_used += ", with continuity correction"
    p_value = min(2.0 * float(stats.norm.sf(abs(z))), 1.0)

    return CorrelationResult(
        measure=measure,
        coefficient=tau,
        test_used=test_used,
        p_value=p_value,
        statistic=_signed(z, tau),
        n=n,
        details=details,
    )


# ------------------------------------------------------------------ #
# Spearman's rho
# ------------------------------------------------------------------ #


def spearman_rho(
    x: ArrayLike,
    y: ArrayLike,
    levels_x: Sequence[Any] | None = None,
    levels_y: Sequence[Any] | None = None,
    test: str = "t",
    cc: bool = False,
) -> CorrelationResult:
    """Spearman's rank correlation with a significance test.

    rs is the Pearson correlation of the (mid-)ranks.  With S =
    (n³ − n)(1 − rs)/6:

    * ``"t"`` — ts = rs·sqrt((n − 2)/(1 − rs²)), n − 2 df.
    * ``"z-fieller"`` — zs = atanh(rs) / sqrt(1.06/(n − 3)).
    * ``"z-olds"`` — z = (S/2 − (n³ − n)/12) / (sqrt(n − 1)·n(n + 1)/12).
    * ``"exact"`` — enumeration of all n! rank permutations; untied
      data only (ties warn and fall back to ``"t"``).
    * ``"none"`` — coefficient only.

    Args:
        x: First ordinal variable.
        y: Second ordinal variable.
        levels_x: Ordered categories of *x*, if it holds labels.
        levels_y: Ordered categories of *y*, if it holds labels.
        test: See above.
        cc: Zar's (1972) continuity correction, |rs| − 6/(n³ − n),
            applied to the value being tested (not the exact test).

    Returns:
        :class:`CorrelationResult`; ``coefficient`` is the uncorrected
        rs and ``details["rs_tested"]`` the value entering the test.

    Raises:
        InvalidArgumentError: For unknown options, too few pairs or a
            constant variable.
        ResourceLimitExceededError: If the exact test needs more
            permutations than the enumeration limit allows.
    """
    test = _choice(test, "test", _SPEARMAN_TESTS)
    xv, yv = _complete_pairs(x, y, levels_x, levels_y)
    n = xv.size

    rx = stats.rankdata(xv)
    ry = stats.rankdata(yv)
    ss_x = float(np.sum((rx - rx.mean()) ** 2))
    ss_y = float(np.sum((ry - ry.mean()) ** 2))
    if ss_x == 0 or ss_y == 0:
        raise InvalidArgumentError("Spearman's rho is undefined when a variable is constant.")
    rs = float(np.sum((rx - rx.mean()) * (ry - ry.mean()))) / math.sqrt(ss_x * ss_y)

    measure = "Spearman rho"
    if test == "none":
        return CorrelationResult(measure=measure, coefficient=rs, n=n)

    if test == "exact" and (np.unique(rx).size != n or np.unique(ry).size != n):
        warnings.warn(
            "Ties present, switching from the exact test to the t approximation.",
            UserWarning,
            stacklevel=2,
        )
        test = "t"

    rs_test = abs(rs) - 6 / (n**3 - n) if cc and test != "exact" else rs
    details = {"rs_tested": rs_test}

    if test == "exact":
        p_value = spearman_exact_pvalue(n, rs)
        return CorrelationResult(
            measure=measure,
            coefficient=rs,
            test_used="exact",
            p_value=p_value,
            n=n,
            details=details,
        )

    df: int | None = None
    if test == "t":
        df = n - 2
        if abs(rs_test) >= 1:
            statistic = math.copysign(math.inf, rs_test)
        else:
            statistic = rs_test * math.sqrt((n - 2) / (1 - rs_test**2))
        p_value = 2.0 * float(stats.t.sf(abs(statistic), df))
        test_used = "t approximation"
    elif test == "z-fieller":
        if n < 4:
            raise InvalidArgumentError("The Fieller z test needs at least four pairs.")
        if abs(rs_test) >= 1:
            statistic = math.copysign(math.inf, rs_test)
        else:
            statistic = math.atanh(rs_test) / math.sqrt(1.06 / (n - 3))
        p_value = 2.0 * float(stats.norm.sf(abs(statistic)))
        test_used = "Fieller z approximation"
    else:
        s = (n**3 - n) * (1 - rs_test) / 6
        statistic = (s / 2 - (n**3 - n) / 12) / (math.sqrt(n - 1) * (n * (n + 1) / 12))
        p_value = 2.0 * float(stats.norm.sf(abs(statistic)))
        test_used = "Olds z approximation"

    if cc:
        test_used += ", with continuity correction"
    logger.debug("Spearman rho: n=%d, rs=%.4f, test=%s", n, rs, test)

    return CorrelationResult(
        measure=measure,
        coefficient=rs,
        test_used=test_used,
        p_value=min(p_value, 1.0),
        statistic=statistic,
        df=df,
        n=n,
        details=details,
    )
