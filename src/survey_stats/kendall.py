"""Exact null distribution of Kendall's tau.

Under H₀ (no association) every one of the n! rankings of the second
variable is equally likely.  Kendall's tau is a linear function of the
number of concordant pairs C, so the exact p-value only needs the
number of permutations of ``1..n`` with each possible C — row *n* of
the Concordant-Pair Count Table (the Mahonian numbers).

Building the table
------------------
Take a permutation of ``1..m−1`` and insert the element *m*.  Placed at
the far right it is concordant with all m−1 earlier elements; every
step to the left trades one concordant pair for a discordant one.  The
m insertion positions therefore add 0, 1, …, m−1 concordant pairs, one
permutation each, and

    T(m, c) = Σ_{i=0}^{m−1} T(m−1, c−i),        T(1, 0) = 1.

Each row is a sliding-window sum over the previous one, computed in
O(1) per cell from prefix sums.  Rows are built bottom-up from m = 1
with exact Python integers, so row *n* sums to exactly n!.  Filling all
n rows costs O(n³) cells — polynomial, unlike enumerating the n!
permutations themselves.

P-value
-------
The distribution is symmetric (reversing a permutation maps C to
n(n−1)/2 − C).  The smaller tail ``c* = min(c, max_c − c)`` is summed,

    p = min(1, 2 · Σ_{j<=c*} T(n, j) / n!).

Only cells up to c* are needed for the tail, so the recurrence is
truncated there.

Reference:
    Kendall, M. G. (1970). *Rank correlation methods* (4th ed.).
    Griffin.
"""

from __future__ import annotations

import itertools
import logging
import math
from collections.abc import Iterator

from .combinatorics import _require_int
from .exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


def _count_rows(n: int, upto: int | None = None) -> Iterator[list[int]]:
    """Yield rows 1..n of the Concordant-Pair Count Table.

    Args:
        n: Largest sample size.
        upto: If given, each row is truncated after index *upto*.
    """
    row = [1]
    yield row
    for m in range(2, n + 1):
        max_c = m * (m - 1) // 2
        width = max_c + 1 if upto is None else min(max_c, upto) + 1
        prefix = list(itertools.accumulate(row))
        last = len(row) - 1
        new_row: list[int] = []
        for c in range(width):
            # Window row[c-m+1 .. c], clipped to the previous row.
            lo = c - m
            window = prefix[min(c, last)] - (prefix[lo] if lo >= 0 else 0)
            new_row.append(window)
        row = new_row
        yield row


def concordant_pair_table(n: int) -> Iterator[list[int]]:
    """Yield the Concordant-Pair Count Table row by row.

    Row *m* (for m = 1..n) is a list whose *c*-th entry is the number
    of permutations of ``1..m`` with exactly *c* concordant pairs.

    Raises:
        InvalidArgumentError: If ``n < 1``.
    """
    n = _require_int(n, "n", minimum=1)
    return _count_rows(n)


def concordant_pair_counts(n: int) -> list[int]:
    """Number of permutations of ``1..n`` with each concordant-pair count.

    Args:
        n: Sample size (>= 1).

    Returns:
        List of length ``n(n−1)/2 + 1``; entry *c* counts the
        permutations with *c* concordant pairs.  Sums to ``n!``.

    Raises:
        InvalidArgumentError: If ``n < 1``.
    """
    n = _require_int(n, "n", minimum=1)
    *_, row = _count_rows(n)
    return row


def kendall_tau_exact_pvalue(n: int, c: int) -> float:
    """Two-tailed exact p-value for *c* concordant pairs among *n* ranks.

    Args:
        n: Sample size (number of pairs, >= 1).
        c: Observed number of concordant pairs, ``0 <= c <= n(n−1)/2``.

    Returns:
        ``min(1, 2 · P(C <= c*))`` with ``c* = min(c, n(n−1)/2 − c)``.

    Raises:
        InvalidArgumentError: If *n* < 1, *c* is not an integer, or *c*
            lies outside ``[0, n(n−1)/2]``.

    Examples:
        A perfectly concordant ranking of four items:

        >>> kendall_tau_exact_pvalue(4, 6)
        0.08333333333333333
    """
    n = _require_int(n, "n", minimum=1)
    c = _require_int(c, "c", minimum=0)
    max_c = n * (n - 1) // 2
    if c > max_c:
        raise InvalidArgumentError(
            f"'c' cannot exceed the {max_c} pairs available for n={n}, got {c}."
        )

    tail_c = min(c, max_c - c)
    *_, row = _count_rows(n, upto=tail_c)
    tail = sum(row[: tail_c + 1])
    p_value = 2 * tail / math.factorial(n)

    logger.debug("Kendall exact: n=%d, c=%d, tail=%d/%d!", n, c, tail, n)
    return min(p_value, 1.0)
