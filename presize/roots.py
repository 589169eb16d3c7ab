# presize/roots.py
from __future__ import annotations

import logging
import warnings
from typing import Callable, Dict, Tuple

import numpy as np
from scipy.optimize import brentq

from presize.errors import RootNotBracketed, RootSearchWarning

logger = logging.getLogger(__name__)

DEFAULT_TOL = float(np.finfo(float).eps ** 0.25)
COUNT_BRACKET: Tuple[float, float] = (1.0, 1e7)
MEAN_BRACKET: Tuple[float, float] = (2.0, 1e7)


def find_root(
    width: Callable[[float], float],
    target: float,
    bracket: Tuple[float, float] = COUNT_BRACKET,
    tol: float = DEFAULT_TOL,
) -> float:
    """
    Count n in bracket with width(n) == target, to within tol on n.

    width must be monotone on the bracket. If width(lower) - target and
    width(upper) - target share a sign (or either is nan) the target is not
    reachable and RootNotBracketed is raised.
    """
    lower, upper = float(bracket[0]), float(bracket[1])
    target = float(target)
    if not (0.0 < tol):
        raise ValueError("tol must be > 0")

    def objective(n: float) -> float:
        return float(width(n)) - target

    f_lo = objective(lower)
    f_hi = objective(upper)
    logger.debug("bracket [%g, %g]: f=(%g, %g) for target %g", lower, upper, f_lo, f_hi, target)

    if np.isnan(f_lo) or np.isnan(f_hi):
        raise RootNotBracketed(
            lower, upper, target,
            f"width is undefined at the bracket ends [{lower:g}, {upper:g}]",
        )
    if f_lo == 0.0:
        return lower
    if f_hi == 0.0:
        return upper
    if np.sign(f_lo) == np.sign(f_hi):
        raise RootNotBracketed(lower, upper, target)

    root = brentq(objective, lower, upper, xtol=tol)
    logger.debug("root %g for target %g", root, target)
    return float(root)


def solve_elementwise(
    width: Callable[..., float],
    target: np.ndarray,
    params: Dict[str, np.ndarray],
    bracket: Tuple[float, float] = COUNT_BRACKET,
    tol: float = DEFAULT_TOL,
    errors: str = "raise",
) -> np.ndarray:
    """
    One root search per element, results in input order.

    width(n, **params_i) is the half-width at count n for element i. With
    errors="coerce" an element whose root is not bracketed becomes nan and
    a RootSearchWarning is issued; with errors="raise" the error propagates.
    """
    if errors not in ("raise", "coerce"):
        raise ValueError("errors must be 'raise' or 'coerce'")

    target = np.asarray(target, dtype=float)
    out = np.empty(target.shape, dtype=float)
    for i in range(target.size):
        kw = {k: v[i] for k, v in params.items()}
        try:
            out[i] = find_root(lambda n: width(n, **kw), target[i], bracket=bracket, tol=tol)
        except RootNotBracketed as e:
            if errors == "raise":
                raise
            warnings.warn(f"element {i}: {e}", RootSearchWarning, stacklevel=3)
            out[i] = np.nan
    return out
