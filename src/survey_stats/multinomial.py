"""Exact multinomial probabilities.

Probability mass function
-------------------------
For a Count Vector F = (f_1, …, f_k) with n = Σ f_i and category
probabilities P = (p_1, …, p_k):

    mpmf(F, P) = n! / (f_1! ··· f_k!) · Π p_i^f_i

Four evaluation strategies are available through :class:`PmfMethod`:

* ``LOGGAMMA`` (default) — work in log space,

      ln mpmf = ln Γ(n+1) + Σ [f_i ln p_i − ln Γ(f_i+1)]

  and exponentiate at the end.  Never overflows (Arnold, 2018).
* ``FACTORIAL`` — exact integer multinomial coefficient times the
  floating-point probability product (Berry & Mielke, 1995).  Fails
  once the coefficient no longer fits in a float.
* ``GAMMA`` — the same formula with Γ(1+x) in place of x!.  Γ overflows
  for arguments above 171, so n is limited to 170.
* ``RECURSIVE`` — the MPROB algorithm of García-Pérez (1999): sort the
  counts in descending order and build the probability up one factor
  at a time, interleaving the binomial-coefficient growth with the
  shrinking probability powers so intermediate values stay in range.

All four agree to floating-point accuracy wherever they are all
defined; the alternatives exist to validate the default.

Cumulative distribution
-----------------------
The exact multinomial cdf is the total probability of every outcome
that is *at least as extreme* as the observed one, where "extreme"
means "no more probable":

    mcdf(F, P) = Σ_{G : Σg = n, mpmf(G) <= mpmf(F)} mpmf(G)

There is no closed form for general k, so every composition of n over
k categories is enumerated — C(n+k−1, k−1) pmf evaluations.  Use it for
small samples only; the enumeration limit
(:func:`~survey_stats.set_max_enumeration`) guards against runaway
inputs.

Two outcomes whose probabilities are mathematically equal can differ
in the last bits depending on the order of the floating-point
operations.  Candidates are therefore included when

    mpmf(G) <= mpmf(F) · (1 + PMF_RELATIVE_TOLERANCE)

with ``PMF_RELATIVE_TOLERANCE = 1e-7``, and the reference and every
candidate are evaluated by the same resolved pmf evaluator.

References:
    Arnold, J. (2018). Maximum likelihood for the multinomial
    distribution (bag of words).

    Berry, K. J. & Mielke, P. W. (1995). Exact cumulative probabilities
    for the multinomial distribution. *Educational and Psychological
    Measurement*, 55(5), 769–772.

    García-Pérez, M. A. (1999). MPROB: Computation of multinomial
    probabilities. *Behavior Research Methods, Instruments, &
    Computers*, 31(4), 701–705.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from enum import Enum

import numpy as np
from scipy import special

from ._config import get_pmf_method
from .combinatorics import _require_int, find_combinations
from .exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

PROB_SUM_TOLERANCE = 1e-8
"""Maximum allowed ``|Σ p_i − 1|`` for a probability vector."""

PMF_RELATIVE_TOLERANCE = 1e-7
"""Relative slack when comparing a candidate pmf with the observed one."""

# Γ(172) exceeds the largest double.
_GAMMA_MAX_N = 170

PmfFunction = Callable[[Sequence[int]], float]


class PmfMethod(str, Enum):
    """Evaluation strategy for :func:`multinomial_pmf`."""

    LOGGAMMA = "loggamma"
    FACTORIAL = "factorial"
    GAMMA = "gamma"
    RECURSIVE = "recursive"

    @classmethod
    def _missing_(cls, value: object) -> PmfMethod | None:
        if isinstance(value, str):
            normalised = value.strip().lower()
            if normalised == "mprob":
                return cls.RECURSIVE
            for member in cls:
                if member.value == normalised:
                    return member
        return None

    @classmethod
    def resolve(cls, method: PmfMethod | str | None) -> PmfMethod:
        """Turn a user-supplied method into an enum member.

        ``None`` selects the configured default
        (:func:`~survey_stats.get_pmf_method`).

        Raises:
            InvalidArgumentError: If *method* is not recognised.
        """
        if method is None:
            method = get_pmf_method()
        if isinstance(method, cls):
            return method
        try:
            return cls(method)
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise InvalidArgumentError(
                f"Unknown pmf method {method!r}. Choose from: {valid}."
            ) from None


# ------------------------------------------------------------------ #
# Validation
# ------------------------------------------------------------------ #


def _validate(counts: Sequence[int], probs: Sequence[float]) -> tuple[tuple[int, ...], list[float]]:
    """Check a Count Vector / Probability Vector pair.

    Returns:
        ``(counts, probs)`` as a tuple of ints and a list of floats.

    Raises:
        InvalidArgumentError: On empty or mismatched vectors, negative
            or non-integral counts, negative probabilities, or
            probabilities not summing to one.
    """
    counts_t = tuple(_require_int(f, "counts", minimum=0) for f in counts)
    probs_arr = np.asarray(probs, dtype=float)

    if probs_arr.ndim != 1:
        raise InvalidArgumentError(
            f"'probs' must be one-dimensional, got shape {probs_arr.shape}."
        )
    if len(counts_t) == 0:
        raise InvalidArgumentError("'counts' must contain at least one category.")
    if len(counts_t) != len(probs_arr):
        raise InvalidArgumentError(
            f"'counts' and 'probs' must have the same length, got "
            f"{len(counts_t)} and {len(probs_arr)}."
        )
    if not np.all(np.isfinite(probs_arr)) or np.any(probs_arr < 0):
        raise InvalidArgumentError("'probs' must contain finite, non-negative values.")
    total = float(probs_arr.sum())
    if abs(total - 1.0) > PROB_SUM_TOLERANCE:
        raise InvalidArgumentError(f"'probs' must sum to 1, got {total!r}.")

    return counts_t, probs_arr.tolist()


# ------------------------------------------------------------------ #
# Pmf evaluators
# ------------------------------------------------------------------ #
#
# Each builder precomputes everything that depends only on (P, n) and
# returns a closure over a single Count Vector.  The cdf calls the
# closure once per composition, so the method dispatch and the
# factorial / log-gamma tables are paid for once per call.


def _loggamma_pmf(probs: list[float], n: int) -> PmfFunction:
    log_fact = special.gammaln(np.arange(n + 1) + 1.0).tolist()
    log_p = [math.log(p) if p > 0 else -math.inf for p in probs]

    def pmf(counts: Sequence[int]) -> float:
        total = log_fact[n]
        for f, lp in zip(counts, log_p, strict=True):
            # 0 · ln 0 = 0
            if f:
                total += f * lp - log_fact[f]
        return math.exp(total)

    return pmf


def _factorial_pmf(probs: list[float], n: int) -> PmfFunction:
    fact = [math.factorial(i) for i in range(n + 1)]

    def pmf(counts: Sequence[int]) -> float:
        coefficient = fact[n]
        for f in counts:
            coefficient //= fact[f]
        prob = math.prod(p**f for p, f in zip(probs, counts, strict=True))
        try:
            return coefficient * prob
        except OverflowError as exc:
            raise InvalidArgumentError(
                f"The multinomial coefficient for n={n} overflows a float; "
                "use method='loggamma'."
            ) from exc

    return pmf


def _gamma_pmf(probs: list[float], n: int) -> PmfFunction:
    if n > _GAMMA_MAX_N:
        raise InvalidArgumentError(
            f"method='gamma' overflows for n > {_GAMMA_MAX_N} (got n={n}); "
            "use method='loggamma'."
        )
    gam = special.gamma(np.arange(n + 1) + 1.0).tolist()

    def pmf(counts: Sequence[int]) -> float:
        denominator = math.prod(gam[f] for f in counts)
        prob = math.prod(p**f for p, f in zip(probs, counts, strict=True))
        return gam[n] / denominator * prob

    return pmf


def _recursive_pmf(probs: list[float], n: int) -> PmfFunction:
    k = len(probs)

    def pmf(counts: Sequence[int]) -> float:
        order = sorted(range(k), key=lambda i: counts[i], reverse=True)
        f_s = [counts[i] for i in order]
        p_s = [probs[i] for i in order]

        result = 1.0
        t = p_s[0]
        x = 0
        m = f_s[0]
        for i in range(1, k):
            for r in range(1, f_s[i] + 1):
                x += 1
                # All f_1 factors of p_1 have been spent.
                if x > f_s[0]:
                    t = 1.0
                result *= t * p_s[i] * (r + m) / r
            m += f_s[i]

        for _ in range(x, f_s[0]):
            result *= p_s[0]
        return result

    return pmf


_PMF_BUILDERS: dict[PmfMethod, Callable[[list[float], int], PmfFunction]] = {
    PmfMethod.LOGGAMMA: _loggamma_pmf,
    PmfMethod.FACTORIAL: _factorial_pmf,
    PmfMethod.GAMMA: _gamma_pmf,
    PmfMethod.RECURSIVE: _recursive_pmf,
}


# ------------------------------------------------------------------ #
# Public API
# ------------------------------------------------------------------ #


def multinomial_pmf(
    counts: Sequence[int],
    probs: Sequence[float],
    method: PmfMethod | str | None = None,
) -> float:
    """Probability of one specific Count Vector under a multinomial model.

    Args:
        counts: Observed count per category.
        probs: Probability per category (must sum to 1).
        method: A :class:`PmfMethod` member or its name
            (``"loggamma"``, ``"factorial"``, ``"gamma"``,
            ``"recursive"`` / ``"mprob"``).  ``None`` uses the
            configured default.

    Returns:
        The probability ``n!/Π f_i! · Π p_i^f_i``.

    Raises:
        InvalidArgumentError: On malformed inputs or an unknown method.

    Examples:
        >>> multinomial_pmf([8, 0], [0.5, 0.5], method="factorial")
        0.00390625
    """
    counts_t, probs_l = _validate(counts, probs)
    resolved = PmfMethod.resolve(method)
    pmf = _PMF_BUILDERS[resolved](probs_l, sum(counts_t))
    return pmf(counts_t)


def multinomial_cdf(
    counts: Sequence[int],
    probs: Sequence[float],
    method: PmfMethod | str | None = None,
    *,
    max_size: int | None = None,
) -> float:
    """Exact probability of an outcome at least as extreme as *counts*.

    Sums the pmf of every composition of ``n = sum(counts)`` over
    ``k = len(counts)`` categories whose pmf does not exceed that of
    *counts*.  This is the two-sided p-value of the exact multinomial
    goodness-of-fit test.

    Warning:
        Cost grows as C(n+k−1, k−1).  For n=50, k=5 that is already
        316,251 pmf evaluations; n=100, k=8 is 26 billion.

    Args:
        counts: Observed count per category.
        probs: Probability per category under H₀.
        method: Pmf evaluation strategy (see :func:`multinomial_pmf`).
        max_size: Maximum number of compositions to enumerate.
            ``None`` uses the package-wide enumeration limit.

    Returns:
        A probability in ``[0, 1]``.

    Raises:
        InvalidArgumentError: On malformed inputs or an unknown method.
        ResourceLimitExceededError: If the composition set exceeds the
            limit.
    """
    counts_t, probs_l = _validate(counts, probs)
    resolved = PmfMethod.resolve(method)
    n = sum(counts_t)
    k = len(counts_t)

    compositions = find_combinations(n, k, max_size=max_size)
    pmf = _PMF_BUILDERS[resolved](probs_l, n)

    reference = pmf(counts_t)
    threshold = reference * (1.0 + PMF_RELATIVE_TOLERANCE)
    total = math.fsum(p for p in map(pmf, compositions) if p <= threshold)

    logger.debug(
        "Multinomial cdf over %d compositions (method=%s): %.6g",
        len(compositions),
        resolved.value,
        total,
    )
    return min(max(total, 0.0), 1.0)
