"""Package-wide configuration for survey_stats.

Two settings are configurable:

* the default evaluation strategy of the multinomial pmf
  (``"loggamma"``, ``"factorial"``, ``"gamma"`` or ``"recursive"``);
* the maximum number of elements an exhaustive enumeration may
  produce before :class:`~survey_stats.exceptions.ResourceLimitExceededError`
  is raised.

Resolution order (first match wins):
    1. Programmatic override via :func:`set_pmf_method` /
       :func:`set_max_enumeration`.
    2. The ``SURVEY_STATS_PMF_METHOD`` / ``SURVEY_STATS_MAX_ENUMERATION``
       environment variables.
    3. The built-in defaults (``"loggamma"`` and 5,000,000).

Examples:
    Use exact integer factorials from the shell::

        export SURVEY_STATS_PMF_METHOD=factorial

    Lift the enumeration guard programmatically::

        import survey_stats
        survey_stats.set_max_enumeration(None)

    Re-enable the default resolution::

        survey_stats.set_max_enumeration("auto")
"""

from __future__ import annotations

import os

_VALID_PMF_METHODS = {"loggamma", "factorial", "gamma", "recursive", "mprob", "auto"}
_DEFAULT_PMF_METHOD = "loggamma"
_DEFAULT_MAX_ENUMERATION = 5_000_000

# Sentinel indicating "no programmatic override has been set".
_AUTO = "auto"
_pmf_method_override: str | None = None
_max_enumeration_override: int | None | str = _AUTO


def get_pmf_method() -> str:
    """Return the active default pmf method name.

    Resolution order:
        1. Value set by :func:`set_pmf_method` (unless ``"auto"``).
        2. ``SURVEY_STATS_PMF_METHOD`` environment variable.
        3. ``"loggamma"``.

    Returns:
        One of ``"loggamma"``, ``"factorial"``, ``"gamma"``,
        ``"recursive"``.
    """
    if _pmf_method_override is not None and _pmf_method_override != _AUTO:
        return _pmf_method_override

    env = os.environ.get("SURVEY_STATS_PMF_METHOD", "").strip().lower()
    if env == "mprob":
        return "recursive"
    if env in _VALID_PMF_METHODS and env != _AUTO:
        return env

    return _DEFAULT_PMF_METHOD


def set_pmf_method(name: str) -> None:
    """Override the default pmf method.

    Args:
        name: One of ``"loggamma"``, ``"factorial"``, ``"gamma"``,
            ``"recursive"`` (alias ``"mprob"``) or ``"auto"``
            (case-insensitive).  ``"auto"`` restores the default
            resolution order.

    Raises:
        ValueError: If *name* is not a recognised method.
    """
    global _pmf_method_override
    normalised = name.strip().lower()
    if normalised not in _VALID_PMF_METHODS:
        raise ValueError(
            f"Unknown pmf method '{name}'. Choose from: {sorted(_VALID_PMF_METHODS)}"
        )
    _pmf_method_override = "recursive" if normalised == "mprob" else normalised


def get_max_enumeration() -> int | None:
    """Return the active enumeration limit (``None`` means unlimited).

    Resolution order:
        1. Value set by :func:`set_max_enumeration` (unless ``"auto"``).
        2. ``SURVEY_STATS_MAX_ENUMERATION`` environment variable — a
           positive integer, or ``none`` / ``unlimited``.
        3. 5,000,000.
    """
    if _max_enumeration_override != _AUTO:
        return _max_enumeration_override  # type: ignore[return-value]

    env = os.environ.get("SURVEY_STATS_MAX_ENUMERATION", "").strip().lower()
    if env in ("none", "unlimited"):
        return None
    if env:
        try:
            value = int(env.replace("_", ""))
        except ValueError:
            value = 0
        if value > 0:
            return value

    return _DEFAULT_MAX_ENUMERATION


def set_max_enumeration(limit: int | None | str) -> None:
    """Override the enumeration limit.

    Args:
        limit: A positive integer, ``None`` to disable the guard, or
            ``"auto"`` to restore the default resolution order.

    Raises:
        ValueError: If *limit* is not a positive integer, ``None`` or
            ``"auto"``.
    """
    global _max_enumeration_override
    if isinstance(limit, str):
        if limit.strip().lower() != _AUTO:
            raise ValueError(
                f"Unknown enumeration limit '{limit}'. Use a positive "
                "integer, None or 'auto'."
            )
        _max_enumeration_override = _AUTO
        return
    if limit is not None and (isinstance(limit, bool) or int(limit) != limit or limit < 1):
        raise ValueError(f"Enumeration limit must be a positive integer, got {limit!r}.")
    _max_enumeration_override = None if limit is None else int(limit)
