"""P-value adjustment and formatting.

Multiple-testing adjustment
---------------------------
When k tests are run together (pairwise comparisons, one test per
survey item) the chance of at least one false rejection grows with k.
:func:`p_adjust` rescales the raw p-values so that they can be compared
directly with the nominal α:

* ``bonferroni`` — ``min(1, k·p)``.
* ``sidak`` — ``1 − (1 − p)^k``.
* ``holm`` / ``holm-sidak`` — step-down versions of the two above.
* ``hochberg`` — step-up (Simes-based) counterpart of Holm.
* ``hommel`` — closed Simes procedure.
* ``bh`` / ``by`` — Benjamini–Hochberg and Benjamini–Yekutieli false
  discovery rate.
* ``none`` — p-values returned unchanged.

The computations are delegated to statsmodels'
:func:`~statsmodels.stats.multitest.multipletests`; this module maps the
method names used throughout the package onto statsmodels' names.

Formatting
----------
:func:`format_p_value` renders a p-value with a significance marker
(``(***)``, ``(**)``, ``(*)`` or ``(ns)``) for the ASCII tables.

References:
    Holm, S. (1979). A simple sequentially rejective multiple test
    procedure. *Scandinavian Journal of Statistics*, 6(2), 65–70.

    Benjamini, Y. & Hochberg, Y. (1995). Controlling the false
    discovery rate. *Journal of the Royal Statistical Society B*,
    57(1), 289–300.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from statsmodels.stats.multitest import multipletests

from .exceptions import InvalidArgumentError

_STATSMODELS_METHODS = {
    "bonferroni": "bonferroni",
    "sidak": "sidak",
    "holm": "holm",
    "holm-sidak": "holm-sidak",
    "hochberg": "simes-hochberg",
    "hommel": "hommel",
    "bh": "fdr_bh",
    "by": "fdr_by",
}

P_ADJUST_METHODS = ("none", *_STATSMODELS_METHODS)
"""Method names accepted by :func:`p_adjust`."""


def p_adjust(
    p_values: Sequence[float] | np.ndarray,
    method: str = "bonferroni",
    alpha: float = 0.05,
) -> np.ndarray:
    """Adjust p-values for multiple comparisons.

    Args:
        p_values: Raw p-values, each in ``[0, 1]``.
        method: One of :data:`P_ADJUST_METHODS` (case-insensitive).
        alpha: Family-wise error rate passed on to statsmodels (only
            affects the rejection decisions, not the adjusted values,
            for the methods offered here).

    Returns:
        Adjusted p-values in the original order.

    Raises:
        InvalidArgumentError: If *method* is unknown or a p-value lies
            outside ``[0, 1]``.
    """
    normalised = method.strip().lower()
    if normalised not in P_ADJUST_METHODS:
        raise InvalidArgumentError(
            f"Unknown adjustment method '{method}'. Choose from: "
            f"{', '.join(P_ADJUST_METHODS)}."
        )

    pvals = np.asarray(p_values, dtype=float)
    if pvals.ndim != 1:
        raise InvalidArgumentError(f"'p_values' must be one-dimensional, got shape {pvals.shape}.")
    if np.any(~np.isfinite(pvals)) or np.any((pvals < 0) | (pvals > 1)):
        raise InvalidArgumentError("'p_values' must lie in [0, 1].")

    if normalised == "none" or pvals.size == 0:
        return pvals.copy()

    _, adjusted, _, _ = multipletests(
        pvals, alpha=alpha, method=_STATSMODELS_METHODS[normalised]
    )
    return np.minimum(np.asarray(adjusted, dtype=float), 1.0)


def format_p_value(
    p: float,
    precision: int = 3,
    thresholds: tuple[float, float, float] = (0.05, 0.01, 0.001),
) -> str:
    """Format *p* with a significance marker.

    Args:
        p: The p-value.
        precision: Decimal places.
        thresholds: ``(one, two, three)`` significance levels, loosest
            first.

    Returns:
        E.g. ``"0.003 (**)"`` or ``"0.412 (ns)"``.
    """
    one, two, three = thresholds
    rounded = np.round(p, precision)
    val = f"{rounded:.{precision}f}"
    if p < three:
        return f"{val} (***)"
    if p < two:
        return f"{val} (**)"
    if p < one:
        return f"{val} (*)"
    return f"{val} (ns)"
