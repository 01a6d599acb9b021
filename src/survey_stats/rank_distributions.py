"""Exact null distributions of rank statistics.

Three distributions used by the exact rank tests:

* **Wilcoxon signed-rank sum** T — the sum of the ranks 1..n that
  carry a positive sign.  Under H₀ each of the 2^n sign assignments is
  equally likely.
* **Mann–Whitney U** — the number of (group 1, group 2) pairs in which
  the group-1 score is larger.  Under H₀ each of the C(n1+n2, n1)
  splits of the ranks is equally likely.
* **Spearman's S = Σ d²** — the squared rank differences between the
  identity and a uniformly random permutation of ``1..n``.  Obtained
  here by walking all n! permutations.

Distributions are returned as lists (or dicts) of exact integer
frequencies; probabilities divide by the total count at the very end.
"""

from __future__ import annotations

import functools
import itertools
import logging
import math
from collections import Counter
from enum import Enum

from .combinatorics import (
    _check_enumeration_size,
    _require_int,
    generate_permutations,
)
from .exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

# Slack when matching a floating-point statistic to an integer support.
_STAT_TOLERANCE = 1e-7


class SignedRankMethod(str, Enum):
    """Algorithm used to build the signed-rank distribution."""

    SHIFT = "shift"
    RECURSIVE = "recursive"
    ENUMERATE = "enumerate"

    @classmethod
    def resolve(cls, method: SignedRankMethod | str) -> SignedRankMethod:
        if isinstance(method, cls):
            return method
        try:
            return cls(str(method).strip().lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise InvalidArgumentError(
                f"Unknown signed-rank method {method!r}. Choose from: {valid}."
            ) from None


# ------------------------------------------------------------------ #
# Wilcoxon signed-rank sum
# ------------------------------------------------------------------ #
#
# shift:      start from [1, 0, 0, …] and, for each rank i, add a copy
#             of the frequency vector shifted right by i (rank i either
#             joins the positive sum or it does not).
# recursive:  srf(x, y) = srf(x − y, y − 1) + srf(x, y − 1), the same
#             recurrence expressed top-down.
# enumerate:  walk all 2^n sign vectors.  Exponential; for validation.


def _signed_rank_shift(n: int) -> list[int]:
    max_rank = n * (n + 1) // 2
    freqs = [1] + [0] * max_rank
    for i in range(1, n + 1):
        shifted = [0] * i + freqs[: max_rank + 1 - i]
        freqs = [a + b for a, b in zip(freqs, shifted, strict=True)]
    return freqs


def _signed_rank_recursive(n: int) -> list[int]:
    @functools.lru_cache(maxsize=None)
    def srf(x: int, y: int) -> int:
        if x < 0 or x > y * (y + 1) // 2:
            return 0
        if y == 1:
            return 1
        return srf(x - y, y - 1) + srf(x, y - 1)

    return [srf(t, n) for t in range(n * (n + 1) // 2 + 1)]


def _signed_rank_enumerate(n: int, max_size: int | None) -> list[int]:
    _check_enumeration_size(f"the sign vectors of n={n} ranks", 2**n, max_size)
    max_rank = n * (n + 1) // 2
    freqs = [0] * (max_rank + 1)
    ranks = range(1, n + 1)
    for signs in itertools.product((0, 1), repeat=n):
        freqs[sum(r for r, s in zip(ranks, signs) if s)] += 1
    return freqs


def signed_rank_counts(
    n: int,
    method: SignedRankMethod | str = SignedRankMethod.SHIFT,
    *,
    max_size: int | None = None,
) -> list[int]:
    """Frequency of each signed-rank sum T = 0..n(n+1)/2.

    Args:
        n: Number of non-zero differences (>= 1).
        method: ``"shift"`` (default), ``"recursive"`` or
            ``"enumerate"``.
        max_size: Enumeration limit for ``"enumerate"``; ``None`` uses
            the package-wide limit.

    Returns:
        List whose entry *t* counts the sign assignments with T = t.
        Sums to ``2**n``.
    """
    n = _require_int(n, "n", minimum=1)
    resolved = SignedRankMethod.resolve(method)
    if resolved is SignedRankMethod.SHIFT:
        return _signed_rank_shift(n)
    if resolved is SignedRankMethod.RECURSIVE:
        return _signed_rank_recursive(n)
    return _signed_rank_enumerate(n, max_size)


def signed_rank_pmf(
    t: int,
    n: int,
    method: SignedRankMethod | str = SignedRankMethod.SHIFT,
) -> float:
    """P(T = t) for the Wilcoxon signed-rank sum of *n* ranks."""
    t = _require_int(t, "t")
    counts = signed_rank_counts(n, method)
    if not 0 <= t < len(counts):
        return 0.0
    return counts[t] / 2**n


def signed_rank_cdf(
    t: int,
    n: int,
    method: SignedRankMethod | str = SignedRankMethod.SHIFT,
) -> float:
    """P(T <= t) for the Wilcoxon signed-rank sum of *n* ranks."""
    t = _require_int(t, "t")
    counts = signed_rank_counts(n, method)
    if t < 0:
        return 0.0
    return sum(counts[: t + 1]) / 2**n


# ------------------------------------------------------------------ #
# Mann–Whitney U
# ------------------------------------------------------------------ #
#
# f(u; i, j) = f(u − j; i − 1, j) + f(u; i, j − 1): the largest of the
# i + j ranks belongs either to group 1 (beating all j members of
# group 2) or to group 2 (beating nobody).  f(0; i, 0) = f(0; 0, j) = 1.


def mann_whitney_counts(n1: int, n2: int) -> list[int]:
    """Number of rank splits with each U = 0..n1·n2.

    Args:
        n1: Size of the first group (>= 1).
        n2: Size of the second group (>= 1).

    Returns:
        List whose entry *u* counts the splits with U = u.  Sums to
        ``C(n1 + n2, n1)``.
    """
    n1 = _require_int(n1, "n1", minimum=1)
    n2 = _require_int(n2, "n2", minimum=1)

    previous = [[1] for _ in range(n2 + 1)]  # i = 0
    for i in range(1, n1 + 1):
        current: list[list[int]] = [[1]]  # j = 0
        for j in range(1, n2 + 1):
            freqs = [0] * (i * j + 1)
            for u, v in enumerate(current[j - 1]):
                freqs[u] += v
            for u, v in enumerate(previous[j]):
                freqs[u + j] += v
            current.append(freqs)
        previous = current
    return previous[n2]


def mann_whitney_pmf(u: int, n1: int, n2: int) -> float:
    """P(U = u) for groups of size *n1* and *n2*."""
    u = _require_int(u, "u")
    counts = mann_whitney_counts(n1, n2)
    if not 0 <= u < len(counts):
        return 0.0
    return counts[u] / math.comb(n1 + n2, n1)


def mann_whitney_cdf(u: int, n1: int, n2: int) -> float:
    """P(U <= u) for groups of size *n1* and *n2*."""
    u = _require_int(u, "u")
    counts = mann_whitney_counts(n1, n2)
    if u < 0:
        return 0.0
    return sum(counts[: u + 1]) / math.comb(n1 + n2, n1)


# ------------------------------------------------------------------ #
# Spearman's rho by permutation
# ------------------------------------------------------------------ #


def spearman_distribution(n: int, *, max_size: int | None = None) -> dict[int, int]:
    """Exact distribution of S = Σ (p_i − i)² over all permutations of ``1..n``.

    Args:
        n: Number of ranks (>= 2).
        max_size: Enumeration limit; ``None`` uses the package-wide
            limit.

    Returns:
        Mapping from each attainable S to the number of permutations
        producing it (values sum to n!).

    Raises:
        ResourceLimitExceededError: If n! exceeds the limit.
    """
    n = _require_int(n, "n", minimum=2)
    freqs: Counter[int] = Counter()
    for perm in generate_permutations(n, max_size=max_size):
        freqs[sum((p - i) ** 2 for i, p in enumerate(perm, start=1))] += 1
    return dict(sorted(freqs.items()))


def spearman_exact_pvalue(n: int, rs: float, *, max_size: int | None = None) -> float:
    """Two-tailed exact p-value for Spearman's rho without ties.

    The observed coefficient is converted to ``S = (n³ − n)(1 − rs)/6``.
    When S lies above its null mean ``(n³ − n)/6`` the upper tail
    ``P(S' >= S)`` is used, otherwise the lower tail ``P(S' <= S)``;
    the tail probability is doubled and capped at 1.

    Args:
        n: Number of pairs (>= 2).
        rs: Observed Spearman correlation in ``[-1, 1]``.
        max_size: Enumeration limit; ``None`` uses the package-wide
            limit.

    Raises:
        InvalidArgumentError: If *rs* is outside ``[-1, 1]``.
        ResourceLimitExceededError: If n! exceeds the limit.
    """
    n = _require_int(n, "n", minimum=2)
    if not -1.0 - _STAT_TOLERANCE <= rs <= 1.0 + _STAT_TOLERANCE:
        raise InvalidArgumentError(f"'rs' must lie in [-1, 1], got {rs!r}.")

    s_obs = (n**3 - n) * (1.0 - rs) / 6.0
    mean = (n**3 - n) / 6.0
    distribution = spearman_distribution(n, max_size=max_size)

    if s_obs > mean:
        tail = sum(c for s, c in distribution.items() if s >= s_obs - _STAT_TOLERANCE)
    else:
        tail = sum(c for s, c in distribution.items() if s <= s_obs + _STAT_TOLERANCE)

    p_value = 2 * tail / math.factorial(n)
    logger.debug("Spearman exact: n=%d, S=%.4f, tail=%d", n, s_obs, tail)
    return min(p_value, 1.0)
