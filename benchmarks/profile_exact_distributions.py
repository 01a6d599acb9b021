"""Profile the exact null distributions across sample sizes.

Measures wall-clock time and peak memory for:

* ``multinomial_cdf`` under each pmf method over a (n, k) grid
* ``signed_rank_counts`` under each counting method
* ``concordant_pair_counts`` (Kendall recursion)
* ``spearman_distribution`` (permutation enumeration)

Usage::

    python benchmarks/profile_exact_distributions.py          # full grid
    python benchmarks/profile_exact_distributions.py --quick  # reduced grid

Outputs:
    benchmarks/results/exact_distributions.csv
"""

from __future__ import annotations

import argparse
import math
import platform
import sys
import time
import tracemalloc
from pathlib import Path

import pandas as pd

# Ensure the package is importable when running from the repo root.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))
from survey_stats import (  # noqa: E402
    concordant_pair_counts,
    multinomial_cdf,
    signed_rank_counts,
    spearman_distribution,
)

# ------------------------------------------------------------------ #
# Configuration
# ------------------------------------------------------------------ #

MULTINOMIAL_GRID_FULL = [(10, 3), (20, 3), (30, 4), (40, 5), (50, 5)]
MULTINOMIAL_GRID_QUICK = [(10, 3), (20, 3), (30, 4)]

SIGNED_RANK_N_FULL = [10, 15, 20, 25, 50, 100]
SIGNED_RANK_N_QUICK = [10, 15, 20]

KENDALL_N_FULL = [10, 20, 50, 100]
KENDALL_N_QUICK = [10, 20]

SPEARMAN_N_FULL = [5, 6, 7, 8, 9]
SPEARMAN_N_QUICK = [5, 6, 7]

PMF_METHODS = ["loggamma", "factorial", "gamma", "recursive"]
SIGNED_RANK_METHODS = ["shift", "recursive", "enumerate"]

# Enumeration of 2**n sign vectors is skipped beyond this n.
ENUMERATE_MAX_N = 20

REPEATS = 3

RESULTS_DIR = Path(__file__).resolve().parent / "results"


# ------------------------------------------------------------------ #
# Benchmark helpers
# ------------------------------------------------------------------ #


def _profile(func, *args, **kwargs) -> tuple[float, float]:
    """Return ``(median seconds, peak MiB)`` over ``REPEATS`` calls."""
    times = []
    peak = 0
    for _ in range(REPEATS):
        tracemalloc.start()
        t0 = time.perf_counter()
        func(*args, **kwargs)
        times.append(time.perf_counter() - t0)
        _, current_peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()
        peak = max(peak, current_peak)
    times.sort()
    return times[len(times) // 2], peak / 2**20


def _outcome(n: int, k: int) -> list[int]:
    """A lopsided outcome of *n* items over *k* categories."""
    counts = [n // k] * k
    counts[0] += n - sum(counts)
    counts[0] += 1
    counts[-1] -= 1
    return counts


def profile_multinomial(grid: list[tuple[int, int]]) -> list[dict]:
    rows = []
    for n, k in grid:
        probs = [1.0 / k] * k
        for method in PMF_METHODS:
            if method == "gamma" and n > 170:
                continue
            seconds, mib = _profile(
                multinomial_cdf, _outcome(n, k), probs, method, max_size=None
            )
            rows.append(
                {
                    "distribution": "multinomial",
                    "method": method,
                    "n": n,
                    "k": k,
                    "size": math.comb(n + k - 1, k - 1),
                    "seconds": seconds,
                    "peak_mib": mib,
                }
            )
            print(f"  multinomial n={n:>3} k={k} {method:<10} {seconds:8.3f}s")
    return rows


def profile_signed_rank(n_values: list[int]) -> list[dict]:
    rows = []
    for n in n_values:
        for method in SIGNED_RANK_METHODS:
            if method == "enumerate" and n > ENUMERATE_MAX_N:
                continue
            seconds, mib = _profile(signed_rank_counts, n, method, max_size=None)
            rows.append(
                {
                    "distribution": "signed_rank",
                    "method": method,
                    "n": n,
                    "k": None,
                    "size": 2**n,
                    "seconds": seconds,
                    "peak_mib": mib,
                }
            )
            print(f"  signed rank n={n:>3} {method:<10} {seconds:8.3f}s")
    return rows


def profile_kendall(n_values: list[int]) -> list[dict]:
    rows = []
    for n in n_values:
        seconds, mib = _profile(concordant_pair_counts, n)
        rows.append(
            {
                "distribution": "kendall",
                "method": "recursion",
                "n": n,
                "k": None,
                "size": math.factorial(n),
                "seconds": seconds,
                "peak_mib": mib,
            }
        )
        print(f"  kendall n={n:>3} {seconds:8.3f}s")
    return rows


def profile_spearman(n_values: list[int]) -> list[dict]:
    rows = []
    for n in n_values:
        seconds, mib = _profile(spearman_distribution, n, max_size=None)
        rows.append(
            {
                "distribution": "spearman",
                "method": "enumerate",
                "n": n,
                "k": None,
                "size": math.factorial(n),
                "seconds": seconds,
                "peak_mib": mib,
            }
        )
        print(f"  spearman n={n:>3} {seconds:8.3f}s")
    return rows


# ------------------------------------------------------------------ #
# Main
# ------------------------------------------------------------------ #


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--quick", action="store_true", help="reduced grid")
    args = parser.parse_args()

    print(f"Python {platform.python_version()} on {platform.machine()}")

    rows: list[dict] = []
    if args.quick:
        rows += profile_multinomial(MULTINOMIAL_GRID_QUICK)
        rows += profile_signed_rank(SIGNED_RANK_N_QUICK)
        rows += profile_kendall(KENDALL_N_QUICK)
        rows += profile_spearman(SPEARMAN_N_QUICK)
    else:
        rows += profile_multinomial(MULTINOMIAL_GRID_FULL)
        rows += profile_signed_rank(SIGNED_RANK_N_FULL)
        rows += profile_kendall(KENDALL_N_FULL)
        rows += profile_spearman(SPEARMAN_N_FULL)

    RESULTS_DIR.mkdir(parents=True, exist_ok=True)
    out = RESULTS_DIR / "exact_distributions.csv"
    pd.DataFrame(rows).to_csv(out, index=False)
    print(f"\nWrote {len(rows)} rows to {out}")


if __name__ == "__main__":
    main()
