"""Input compatibility layer for optional Polars support.

Survey data arrives as single response vectors (lists, NumPy arrays,
pandas Series) and, for goodness-of-fit tests with a custom null, as a
small category/expected-count table.  Internally everything is pandas.
When Polars is installed its ``Series``, ``DataFrame`` and
``LazyFrame`` objects are converted at the boundary; without it only
the pandas/NumPy/builtin paths exist.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeAlias

import numpy as np
import pandas as pd

if TYPE_CHECKING:
    import polars as pl

    DataFrameLike: TypeAlias = pd.DataFrame | pl.DataFrame | pl.LazyFrame
else:
    DataFrameLike: TypeAlias = pd.DataFrame

try:
    import polars as pl

    _HAS_POLARS = True
except ImportError:
    _HAS_POLARS = False


def _from_polars(obj: Any) -> pd.Series | pd.DataFrame | None:
    """Return the pandas form of a Polars object, or ``None`` for anything else."""
    if not _HAS_POLARS:
        return None
    if isinstance(obj, pl.LazyFrame):
        obj = obj.collect()
    if isinstance(obj, (pl.DataFrame, pl.Series)):
        return obj.to_pandas()
    return None


def _ensure_pandas_df(obj: DataFrameLike, *, name: str = "input") -> pd.DataFrame:
    """Return *obj* as a :class:`pandas.DataFrame`.

    pandas frames pass through unchanged; Polars ``DataFrame`` and
    ``LazyFrame`` objects (the latter collected first) are converted.

    Args:
        obj: The table.
        name: Argument name used in error messages (e.g.
            ``"expected_counts"``).

    Raises:
        TypeError: If *obj* is not a supported table type.
    """
    if isinstance(obj, pd.DataFrame):
        return obj
    converted = _from_polars(obj)
    if isinstance(converted, pd.DataFrame):
        return converted

    accepted = "a pandas DataFrame or Polars DataFrame/LazyFrame" if _HAS_POLARS else "a pandas DataFrame"
    raise TypeError(f"'{name}' must be {accepted}, got {type(obj).__name__}.")


def _ensure_pandas_series(obj: Any, *, name: str = "data") -> pd.Series:
    """Return a response vector as a :class:`pandas.Series`.

    Accepted types:
        * ``pandas.Series`` — returned as-is.
        * ``polars.Series`` — converted via ``.to_pandas()``.
        * single-column pandas/Polars tables — their only column.
        * lists, tuples and one-dimensional NumPy arrays.

    Args:
        obj: The data vector.
        name: Argument name used in error messages.

    Raises:
        TypeError: If *obj* cannot be read as a single vector.
    """
    if isinstance(obj, pd.Series):
        return obj

    converted = _from_polars(obj)
    if converted is not None:
        obj = converted
        if isinstance(obj, pd.Series):
            return obj

    if isinstance(obj, pd.DataFrame):
        if obj.shape[1] != 1:
            raise TypeError(f"'{name}' must be a single column, got {obj.shape[1]} columns.")
        return obj.iloc[:, 0]

    if isinstance(obj, (list, tuple, np.ndarray)):
        shape = np.shape(obj) if isinstance(obj, np.ndarray) else np.asarray(obj, dtype=object).shape
        if len(shape) != 1:
            raise TypeError(f"'{name}' must be one-dimensional, got shape {shape}.")
        return pd.Series(obj if isinstance(obj, np.ndarray) else list(obj))

    accepted = "a list, NumPy array or pandas Series" + (" or Polars Series" if _HAS_POLARS else "")
    raise TypeError(f"'{name}' must be {accepted}, got {type(obj).__name__}.")
