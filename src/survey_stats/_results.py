"""Typed result objects for hypothesis tests and correlations.

Every result reads like an object (``result.p_value``) and like a
mapping (``result["p_obs"]``, ``result.get("min_exp")``,
``"W" in result``).  ``.to_dict()`` gives a flat, JSON-ready
``dict`` with NumPy scalars and arrays turned into Python values.

Two concrete result types exist:

* :class:`HypothesisTestResult` — goodness-of-fit, binomial and rank
  tests.  Test-specific quantities (e.g. the probability of the
  observed sample in the exact multinomial test) live in ``details``
  and are reachable through bracket access as well.
* :class:`CorrelationResult` — rank correlation coefficients with an
  optional significance test.

Both types are frozen: a result is a snapshot of a completed
computation.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

import numpy as np

# ------------------------------------------------------------------ #
# Serialisation helper
# ------------------------------------------------------------------ #


def _numpy_to_python(obj: Any) -> Any:
    """Return *obj* with every NumPy value replaced by its Python equivalent.

    Arrays become lists; integer and boolean scalars become ``int``;
    floating scalars become ``float``.  Dicts, lists and tuples are
    walked recursively and keep their container type.
    """
    if isinstance(obj, dict):
        return {key: _numpy_to_python(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return type(obj)(_numpy_to_python(item) for item in obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, (np.integer, np.bool_)):
        return int(obj)
    return obj


# ------------------------------------------------------------------ #
# Dict-compatibility mixin
# ------------------------------------------------------------------ #

_MISSING = object()


class _DictAccessMixin:
    """Bracket, ``get`` and ``in`` access for result dataclasses.

    A key resolves to the dataclass field of that name, or failing that
    to the entry of the same name in ``details``.  Unknown keys raise
    ``KeyError`` from ``result[key]`` and give the default from
    ``result.get(key, default)``.
    """

    def _lookup(self, key: object) -> Any:
        if not isinstance(key, str):
            return _MISSING
        if key in self.__dataclass_fields__:  # type: ignore[attr-defined]
            return getattr(self, key)
        return (getattr(self, "details", None) or {}).get(key, _MISSING)

    def __getitem__(self, key: str) -> Any:
        value = self._lookup(key)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def get(self, key: str, default: Any = None) -> Any:
        value = self._lookup(key)
        return default if value is _MISSING else value

    def __contains__(self, key: object) -> bool:
        return self._lookup(key) is not _MISSING

    def to_dict(self) -> dict[str, Any]:
        """Flatten the result into a JSON-serialisable ``dict``.

        ``details`` entries are lifted to the top level next to the
        regular fields.
        """
        flat: dict[str, Any] = {}
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if f.name == "details":
                flat.update(value or {})
            else:
                flat[f.name] = value
        return _numpy_to_python(flat)


# ------------------------------------------------------------------ #
# HypothesisTestResult
# ------------------------------------------------------------------ #


@dataclass(frozen=True)
class HypothesisTestResult(_DictAccessMixin):
    """Result from a single hypothesis test.

    All fields are accessible both as attributes (``result.p_value``)
    and via dict syntax (``result["p_value"]``).
    """

    test_used: str
    """Description of the test, including corrections applied."""

    p_value: float
    """Two-sided p-value."""

    statistic: float | None = None
    """Test statistic (``None`` for purely exact tests)."""

    df: float | None = None
    """Degrees of freedom of the reference distribution, if any."""

    n: int | None = None
    """Sample size used after removing missing values."""

    details: dict[str, Any] = field(default_factory=dict)
    """Test-specific extras (e.g. ``p_obs``, ``min_exp``)."""


# ------------------------------------------------------------------ #
# CorrelationResult
# ------------------------------------------------------------------ #


@dataclass(frozen=True)
class CorrelationResult(_DictAccessMixin):
    """Result from a rank correlation coefficient and its test.

    When the coefficient is requested without a test, ``p_value``,
    ``statistic`` and ``df`` are ``None``.
    """

    measure: str
    """Name of the coefficient (e.g. ``"Kendall Tau-b"``)."""

    coefficient: float
    """The correlation coefficient."""

    test_used: str | None = None
    """Description of the significance test, if one was run."""

    p_value: float | None = None
    """Two-sided p-value of the test."""

    statistic: float | None = None
    """Test statistic."""

    df: float | None = None
    """Degrees of freedom of the reference distribution, if any."""

    n: int | None = None
    """Number of complete pairs."""

    details: dict[str, Any] = field(default_factory=dict)
    """Extras (e.g. concordant / discordant pair counts)."""
