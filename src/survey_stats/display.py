"""Formatted ASCII table display utilities for test results.

The tables follow the statsmodels summary style: an 80-column frame
with a centred title, a two-column header panel and a body, closed by
the significance legend used throughout the package.

* :func:`print_test_table` — one hypothesis-test or correlation result.
* :func:`print_adjustment_table` — raw and multiplicity-adjusted
  p-values side by side.
"""

from __future__ import annotations

import textwrap
from collections.abc import Sequence
from typing import Any

import numpy as np

from ._results import CorrelationResult, HypothesisTestResult
from .exceptions import InvalidArgumentError
from .pvalues import format_p_value, p_adjust

_WIDTH = 80
_THRESHOLDS = (0.05, 0.01, 0.001)


def _truncate(name: str, max_len: int) -> str:
    """Truncate *name* to *max_len*, appending ``'...'`` if needed."""
    if len(name) <= max_len:
        return name
    return name[: max_len - 3] + "..."


def _fmt_val(val: object) -> str:
    """Format a value for display.

    ``None`` and ``nan`` become ``'N/A'``; floats get four decimals.
    """
    if val is None:
        return "N/A"
    if isinstance(val, (float, np.floating)):
        if val != val:  # nan check
            return "N/A"
        return f"{val:.4f}"
    return str(val)


def _wrap(text: str, width: int = _WIDTH, indent: int = 2) -> str:
    """Word-wrap *text* to *width*, indenting continuation lines."""
    return textwrap.fill(
        text,
        width=width,
        initial_indent="",
        subsequent_indent=" " * indent,
    )


def _print_title(title: str) -> None:
    print("=" * _WIDTH)
    for line in textwrap.wrap(title, width=_WIDTH - 2):
        print(f"{line:^{_WIDTH}}")
    print("=" * _WIDTH)


def _print_legend() -> None:
    one, two, three = _THRESHOLDS
    print("=" * _WIDTH)
    print(
        f"(***) p < {three}   "
        f"(**) p < {two}   "
        f"(*) p < {one}   "
        f"(ns) p >= {one}"
    )
    print()


def _print_pairs(rows: list[tuple[str, Any, str, Any]]) -> None:
    """Print ``(left_label, left_value, right_label, right_value)`` rows.

    The left pair is flush-left in 40 columns, the right pair
    right-aligned in the remaining 40.
    """
    col1 = 40
    col2 = _WIDTH - col1
    for ll, lv, rl, rv in rows:
        left = f"{ll:<20}{_truncate(_fmt_val(lv), col1 - 20):<{col1 - 20}}" if ll else " " * col1
        right = f"{rl:>{col2 - 15}} {_truncate(_fmt_val(rv), 14):>14}" if rl else ""
        print(f"{left}{right}")


def print_test_table(
    result: HypothesisTestResult | CorrelationResult,
    *,
    title: str | None = None,
) -> None:
    """Print a single test result in a formatted ASCII table.

    Args:
        result: A :class:`HypothesisTestResult` or
            :class:`CorrelationResult`.
        title: Title for the output table.  Defaults to the
            correlation measure, or ``"Hypothesis Test Results"``.
    """
    if isinstance(result, CorrelationResult):
        default_title = result.measure
        rows: list[tuple[str, Any, str, Any]] = [
            ("Measure:", result.measure, "Coefficient:", result.coefficient),
            ("No. Pairs:", result.n, "Statistic:", result.statistic),
        ]
    else:
        default_title = "Hypothesis Test Results"
        rows = [
            ("No. Observations:", result.n, "Statistic:", result.statistic),
        ]
    if result.df is not None:
        rows.append(("", None, "Df:", result.df))

    _print_title(title or default_title)
    _print_pairs(rows)
    print("-" * _WIDTH)

    if result.test_used:
        print(_wrap(f"Test: {result.test_used}", indent=6))
    if result.p_value is not None:
        p_str = format_p_value(result.p_value, thresholds=_THRESHOLDS)
        print(f"{'P-value:':<20}{p_str}")

    scalar_details = [
        (key, val)
        for key, val in result.details.items()
        if isinstance(val, (int, float, np.integer, np.floating, str))
        and not isinstance(val, bool)
    ]
    if scalar_details:
        print("-" * _WIDTH)
        for key, val in scalar_details:
            print(f"{_truncate(key, 19) + ':':<20}{_fmt_val(val)}")

    _print_legend()


def print_adjustment_table(
    p_values: Sequence[float] | np.ndarray,
    method: str = "bonferroni",
    labels: Sequence[str] | None = None,
    *,
    title: str = "Multiple Comparison Adjustment",
) -> None:
    """Print raw and adjusted p-values side by side.

    Args:
        p_values: Raw p-values.
        method: Adjustment method accepted by
            :func:`~survey_stats.p_adjust`.
        labels: Row labels; defaults to ``Test 1``, ``Test 2``, ….
        title: Title for the output table.

    Raises:
        InvalidArgumentError: If *method* is unknown or *labels* does
            not match *p_values* in length.
    """
    raw = np.asarray(p_values, dtype=float)
    adjusted = p_adjust(raw, method=method)
    if labels is None:
        labels = [f"Test {i}" for i in range(1, raw.size + 1)]
    elif len(labels) != raw.size:
        raise InvalidArgumentError(
            f"'labels' has {len(labels)} entries for {raw.size} p-values."
        )

    _print_title(title)
    print(f"{'Method:':<20}{method}")
    print("-" * _WIDTH)

    # Label (30, left) | Raw (24, right) | 2-space gap | Adjusted (24, right)
    lc = 30
    print(f"{'Comparison':<{lc}}{'P (raw)':>24}  {'P (adj)':>24}")
    print("-" * _WIDTH)
    for label, p_raw, p_adj in zip(labels, raw, adjusted, strict=True):
        print(
            f"{_truncate(str(label), lc):<{lc}}"
            f"{format_p_value(p_raw, thresholds=_THRESHOLDS):>24}  "
            f"{format_p_value(p_adj, thresholds=_THRESHOLDS):>24}"
        )

    _print_legend()
