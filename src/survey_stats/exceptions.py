"""Exception types raised by survey_stats.

Two failure modes exist:

* :class:`InvalidArgumentError` — malformed shapes, out-of-range
  parameters, probability vectors that do not sum to one, negative
  counts.  Subclasses ``ValueError`` so that callers catching the
  built-in keep working.
* :class:`ResourceLimitExceededError` — an exhaustive enumeration
  (compositions, permutations, sign vectors) would exceed the
  configured size limit.  Raised *before* any element is produced.

Both are detected eagerly at the start of each operation.  Exact
computations are deterministic, so neither is ever retried.
"""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """An argument is malformed or outside its valid range."""


class ResourceLimitExceededError(RuntimeError):
    """An exhaustive enumeration would exceed the allowed size.

    Attributes:
        size: Number of elements the enumeration would produce.
        limit: The limit that was in force.
    """

    def __init__(self, what: str, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(
            f"Enumerating {what} would produce {size:,} elements, which "
            f"exceeds the limit of {limit:,}.  Reduce the input size or "
            f"raise the limit with survey_stats.set_max_enumeration()."
        )
