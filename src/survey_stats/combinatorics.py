"""Exhaustive enumeration of compositions and permutations.

Exact small-sample tests need the complete reference set of outcomes
rather than a random sample of it.  Two such sets are enumerated here:

1. **Compositions** — every way to distribute *n* items over *k*
   ordered categories, i.e. every Count Vector of length *k* whose
   non-negative entries sum to *n*.  There are C(n+k-1, k-1) of them.
   The exact multinomial cdf sums a pmf over this set.

2. **Permutations** — every ordering of ``1..n``.  There are n! of
   them.  Exact rank procedures (e.g. Spearman's rho) evaluate their
   statistic once per permutation.

Both are returned as restartable lazy sequences: ``len()`` is known
up front, each ``iter()`` call starts a fresh generator, and nothing is
materialised.  The counts still grow exponentially (compositions) or
factorially (permutations), so every constructor checks the size
against an enumeration limit and fails fast with
:class:`~survey_stats.exceptions.ResourceLimitExceededError` before a
single element is produced.  The limit defaults to the package setting
(:func:`~survey_stats.get_max_enumeration`) and can be overridden per
call with ``max_size``.
"""

from __future__ import annotations

import itertools
import logging
import math
import numbers
from collections.abc import Iterator

from ._config import get_max_enumeration
from .exceptions import InvalidArgumentError, ResourceLimitExceededError

logger = logging.getLogger(__name__)


def _require_int(value: object, name: str, *, minimum: int | None = None) -> int:
    """Return *value* as an ``int`` or raise :class:`InvalidArgumentError`.

    Integral floats (``3.0``) and NumPy integers are accepted; booleans,
    fractional numbers and non-numbers are not.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidArgumentError(f"'{name}' must be an integer, got {value!r}.")
    if value != value or math.isinf(value) or int(value) != value:
        raise InvalidArgumentError(f"'{name}' must be an integer, got {value!r}.")
    result = int(value)
    if minimum is not None and result < minimum:
        raise InvalidArgumentError(f"'{name}' must be >= {minimum}, got {result}.")
    return result


def _check_enumeration_size(what: str, size: int, max_size: int | None) -> None:
    """Raise if an enumeration of *size* elements exceeds the limit.

    Args:
        what: Human-readable description used in the error message.
        size: Number of elements the enumeration would produce.
        max_size: Per-call limit; ``None`` falls back to the configured
            :func:`~survey_stats.get_max_enumeration`.
    """
    limit = get_max_enumeration() if max_size is None else max_size
    if limit is not None and size > limit:
        raise ResourceLimitExceededError(what, size, limit)


# ------------------------------------------------------------------ #
# Compositions
# ------------------------------------------------------------------ #
#
# The recursion fixes the first entry to each feasible value 0..n and
# recurses on the remainder over the remaining k-1 categories.  With
# k == 1 there is exactly one way left: put everything in the last
# category.  For n=2, k=3 the order is
#
#   (0,0,2) (0,1,1) (0,2,0) (1,0,1) (1,1,0) (2,0,0)
#
# i.e. lexicographic ascending.


def count_combinations(n: int, k: int) -> int:
    """Number of Count Vectors of length *k* summing to *n*.

    Args:
        n: Sample size (>= 0).
        k: Number of categories (>= 1).

    Returns:
        ``C(n + k - 1, k - 1)``.
    """
    n = _require_int(n, "n", minimum=0)
    k = _require_int(k, "k", minimum=1)
    return math.comb(n + k - 1, k - 1)


def _iter_compositions(n: int, k: int) -> Iterator[tuple[int, ...]]:
    if k == 1:
        yield (n,)
        return
    for first in range(n + 1):
        for rest in _iter_compositions(n - first, k - 1):
            yield (first, *rest)


class Compositions:
    """Lazy, restartable sequence of all compositions of *n* into *k* parts.

    Iterating yields tuples in lexicographic order.  ``len()`` returns
    the count without enumerating.
    """

    __slots__ = ("n", "k", "_size")

    def __init__(self, n: int, k: int) -> None:
        self.n = n
        self.k = k
        self._size = math.comb(n + k - 1, k - 1)

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[tuple[int, ...]]:
        return _iter_compositions(self.n, self.k)

    def __repr__(self) -> str:
        return f"Compositions(n={self.n}, k={self.k})"


def find_combinations(n: int, k: int, *, max_size: int | None = None) -> Compositions:
    """Return every way to distribute *n* items over *k* categories.

    Args:
        n: Sample size (non-negative integer).
        k: Number of categories (positive integer).
        max_size: Maximum number of compositions allowed.  ``None``
            uses the package-wide enumeration limit.

    Returns:
        A :class:`Compositions` sequence of ``C(n+k-1, k-1)`` tuples.

    Raises:
        InvalidArgumentError: If ``n < 0``, ``k < 1`` or either is not
            an integer.
        ResourceLimitExceededError: If the number of compositions
            exceeds the limit.
    """
    n = _require_int(n, "n", minimum=0)
    k = _require_int(k, "k", minimum=1)
    size = math.comb(n + k - 1, k - 1)
    _check_enumeration_size(f"the compositions of n={n} over k={k} categories", size, max_size)
    logger.debug("Enumerating %d compositions (n=%d, k=%d)", size, n, k)
    return Compositions(n, k)


# ------------------------------------------------------------------ #
# Lehmer code (factorial number system)
# ------------------------------------------------------------------ #
#
# Every permutation of [0, 1, …, n−1] has a unique "rank": its
# position in the lexicographic enumeration of all n! orderings.
# The factoradic representation decomposes that rank into a sequence
# of digits d₁, d₂, …, dₙ where the i-th digit is expressed in
# base (n−i)!:
#
#   k = d₁·(n−1)! + d₂·(n−2)! + ··· + dₙ·0!
#
# Each digit dᵢ ∈ [0, n−i] selects the dᵢ-th remaining element from
# a shrinking pool.  This gives O(n) random access into the
# enumeration without walking it.
#
# Example for n=3, k=4:
#   k=4 → digits [2, 0, 0] in factoradic
#   pool=[0,1,2] → pop(2)=2, pool=[0,1] → pop(0)=0, pool=[1] → pop(0)=1
#   result = [2, 0, 1]


def _unrank_permutation(k: int, n: int) -> list[int]:
    """Convert rank *k* to the *k*-th lexicographic permutation of ``[0..n-1]``.

    Args:
        k: Rank in ``[0, n!)``.
        n: Length of the permutation.

    Returns:
        List of *n* integers representing the permutation.
    """
    available = list(range(n))
    result: list[int] = []
    for i in range(n, 0, -1):
        f = math.factorial(i - 1)
        idx, k = divmod(k, f)
        result.append(available.pop(idx))
    return result


class Permutations:
    """Lazy, restartable sequence of all permutations of ``1..n``.

    Iteration yields tuples in lexicographic order (the identity
    first, the reversal last).  Indexing ``perms[k]`` returns the
    *k*-th permutation of that order via Lehmer-code unranking, so
    ``list(perms)[k] == perms[k]``.
    """

    __slots__ = ("n", "_size")

    def __init__(self, n: int) -> None:
        self.n = n
        self._size = math.factorial(n)

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[tuple[int, ...]]:
        # itertools walks a sorted pool in lexicographic order.
        return itertools.permutations(range(1, self.n + 1))

    def __getitem__(self, rank: int) -> tuple[int, ...]:
        rank = _require_int(rank, "rank")
        if rank < 0:
            rank += self._size
        if not 0 <= rank < self._size:
            raise IndexError(f"permutation rank out of range for n={self.n}")
        return tuple(i + 1 for i in _unrank_permutation(rank, self.n))

    def __repr__(self) -> str:
        return f"Permutations(n={self.n})"


def generate_permutations(n: int, *, max_size: int | None = None) -> Permutations:
    """Return all n! permutations of the integers ``1..n``.

    Args:
        n: Number of elements (positive integer).
        max_size: Maximum number of permutations allowed.  ``None``
            uses the package-wide enumeration limit.

    Returns:
        A :class:`Permutations` sequence.

    Raises:
        InvalidArgumentError: If ``n < 1`` or *n* is not an integer.
        ResourceLimitExceededError: If n! exceeds the limit.
    """
    n = _require_int(n, "n", minimum=1)
    size = math.factorial(n)
    _check_enumeration_size(f"the permutations of n={n}", size, max_size)
    logger.debug("Enumerating %d permutations (n=%d)", size, n)
    return Permutations(n)
