# presize/checks.py
from __future__ import annotations

import enum
from typing import Any, Dict, Optional, Tuple

import numpy as np

from presize.errors import InvalidArgument


class Solve(enum.Enum):
    """Which quantity a facade call determines."""

    FOR_WIDTH = "precision"
    FOR_COUNT = "sample size"


def _as_float_array(value: Any, name: str) -> np.ndarray:
    if isinstance(value, (bool, np.bool_)):
        raise InvalidArgument(f"'{name}' must be numeric")
    try:
        arr = np.asarray(value, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"'{name}' must be numeric") from e
    if arr.ndim > 1:
        raise InvalidArgument(f"'{name}' must be a scalar or a 1D sequence")
    if arr.size == 0:
        raise InvalidArgument(f"'{name}' must not be empty")
    return arr


def check_numeric(value: Any, name: str) -> np.ndarray:
    """Numeric scalar or 1D sequence, returned as a float array."""
    return _as_float_array(value, name)


def check_nonnegative(value: Any, name: str) -> np.ndarray:
    arr = _as_float_array(value, name)
    if np.any(np.isnan(arr)) or np.any(arr < 0):
        raise InvalidArgument(f"'{name}' must be non-negative")
    return arr


def check_positive(value: Any, name: str) -> np.ndarray:
    arr = _as_float_array(value, name)
    if np.any(np.isnan(arr)) or np.any(arr <= 0):
        raise InvalidArgument(f"'{name}' must be positive")
    return arr


def numrange_check(value: Any, name: str, lo: float = 0.0, hi: float = 1.0, closed: bool = False) -> np.ndarray:
    """
    Probability-like check: every element in (lo, hi), or [lo, hi] if closed.
    """
    arr = _as_float_array(value, name)
    if closed:
        ok = (arr >= lo) & (arr <= hi)
        bounds = f"[{lo:g}, {hi:g}]"
    else:
        ok = (arr > lo) & (arr < hi)
        bounds = f"({lo:g}, {hi:g})"
    if not np.all(ok):
        raise InvalidArgument(f"'{name}' must be numeric in {bounds}")
    return arr


def resolve_unknown(count: Optional[Any], conf_width: Optional[Any], count_name: str) -> Solve:
    """
    Exactly one of count / conf_width must be None; that one is solved for.
    """
    n_missing = sum(v is None for v in (count, conf_width))
    if n_missing != 1:
        raise InvalidArgument(f"exactly one of '{count_name}' and 'conf_width' must be None")
    return Solve.FOR_WIDTH if conf_width is None else Solve.FOR_COUNT


def broadcast_inputs(**arrays: np.ndarray) -> Tuple[Dict[str, np.ndarray], bool]:
    """
    Elementwise pairing of 1D inputs.

    Equal lengths are zipped positionally and length-1 inputs are repeated.
    Any other mismatch is an error rather than silent recycling.

    Returns (broadcast arrays, scalar) where scalar tells whether every input
    was a plain scalar.
    """
    scalar = all(np.ndim(a) == 0 for a in arrays.values())
    flat = {k: np.atleast_1d(np.asarray(v, dtype=float)) for k, v in arrays.items()}
    try:
        out = np.broadcast_arrays(*flat.values())
    except ValueError as e:
        lengths = ", ".join(f"{k}={v.size}" for k, v in flat.items())
        raise InvalidArgument(
            f"vector inputs must have equal lengths or length 1 (got {lengths})"
        ) from e
    return {k: np.array(v, dtype=float) for k, v in zip(flat, out)}, scalar
