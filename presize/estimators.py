# presize/estimators.py
"""
Sample size or precision for a mean, a rate and a proportion.

Each estimate_for_* function takes exactly one of the count and conf_width
as None and determines it from the other. conf_width is always the full
width of the confidence interval, i.e. twice the precision.

Inputs may be scalars or 1D sequences; sequences are handled elementwise
(see presize.checks.broadcast_inputs) and give array fields in the result.
"""
from __future__ import annotations

import logging
import warnings
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np

from presize.checks import (
    Solve,
    broadcast_inputs,
    check_nonnegative,
    check_numeric,
    check_positive,
    numrange_check,
    resolve_unknown,
)
from presize.errors import DegenerateIntervalWarning, InvalidArgument
from presize.methods import PROPORTION_METHODS, RATE_METHODS, resolve_method
from presize.results import MeanResult, ProportionResult, RateResult
from presize.roots import COUNT_BRACKET, DEFAULT_TOL, MEAN_BRACKET, solve_elementwise
from presize.theory import z_from_conf
from presize import widths

logger = logging.getLogger(__name__)

DEFAULT_CONF_LEVEL = 0.95

RATE_NOTE = "'x / r' units of time are needed to accumulate 'x' events."
PROPORTION_NOTE = "padj is the adjusted proportion, from which the ci is calculated."

MethodArg = Union[str, Sequence[str], None]


def _unbox(values: Dict[str, Any], scalar: bool) -> Dict[str, Any]:
    """Plain floats when every input was a scalar."""
    if not scalar:
        return values
    return {k: (float(np.asarray(v).ravel()[0]) if isinstance(v, np.ndarray) else v) for k, v in values.items()}


def _known_quantity(solve: Solve, count: Any, conf_width: Any, count_name: str) -> np.ndarray:
    if solve is Solve.FOR_WIDTH:
        return check_positive(count, count_name)
    return check_positive(conf_width, "conf_width")


def _check_tol(tol: float) -> float:
    tol = float(tol)
    if not tol > 0:
        raise InvalidArgument("'tol' must be positive")
    return tol


def _check_errors(errors: str) -> str:
    if errors not in ("raise", "coerce"):
        raise InvalidArgument("'errors' must be 'raise' or 'coerce'")
    return errors


# =============================================================================
# Mean
# =============================================================================

def estimate_for_mean(
    mu,
    sd,
    n=None,
    conf_width=None,
    conf_level=DEFAULT_CONF_LEVEL,
    tol: float = DEFAULT_TOL,
    errors: str = "raise",
) -> MeanResult:
    """
    Sample size or precision for a mean.

    The half-width is t(n - 1) * sd / sqrt(n) with t(n - 1) the quantile of
    the t-distribution with n - 1 degrees of freedom. Because the degrees of
    freedom depend on n, n is always found by root search on [2, 1e7].

    Example:
      estimate_for_mean(mu=5, sd=2.5, n=20)             # conf_width ~ 2.34
      estimate_for_mean(mu=5, sd=2.5, conf_width=2.34)  # n ~ 20
    """
    mu = check_numeric(mu, "mu")
    sd = check_nonnegative(sd, "sd")
    solve = resolve_unknown(n, conf_width, "n")
    conf_level = numrange_check(conf_level, "conf_level")
    tol = _check_tol(tol)
    errors = _check_errors(errors)
    known = _known_quantity(solve, n, conf_width, "n")
    if solve is Solve.FOR_WIDTH and np.any(known < 2):
        raise InvalidArgument("'n' must be at least 2 for a mean")

    v, scalar = broadcast_inputs(mu=mu, sd=sd, conf_level=conf_level, known=known)
    alpha = (1.0 - v["conf_level"]) / 2.0
    logger.debug("mean: solving for %s", solve.value)

    if solve is Solve.FOR_WIDTH:
        n = v["known"]
        prec = widths.mean_t_halfwidth(n, v["sd"], alpha)
    else:
        prec = v["known"] / 2.0
        n = solve_elementwise(
            widths.mean_t_halfwidth, prec, {"sd": v["sd"], "alpha": alpha},
            bracket=MEAN_BRACKET, tol=tol, errors=errors,
        )
        prec = np.where(np.isnan(n), np.nan, prec)

    out = _unbox(
        {
            "mu": v["mu"],
            "sd": v["sd"],
            "n": n,
            "conf_width": 2.0 * prec,
            "conf_level": v["conf_level"],
            "lwr": v["mu"] - prec,
            "upr": v["mu"] + prec,
        },
        scalar,
    )
    return MeanResult(**out, method=f"{solve.value} for mean")


# =============================================================================
# Rate
# =============================================================================

def estimate_for_rate(
    r,
    x=None,
    conf_width=None,
    conf_level=DEFAULT_CONF_LEVEL,
    method: MethodArg = "score",
    tol: float = DEFAULT_TOL,
    errors: str = "raise",
) -> RateResult:
    """
    Sample size (number of events x) or precision for a rate.

    Methods: score (default), vs (variance stabilizing), exact, wald. The
    exact method is recommended for few events (x < 5). Methods can be
    abbreviated; an unknown or ambiguous name falls back to score with a
    MethodResolutionWarning.

    x is found by root search on [1, 1e7] for score and exact; wald and vs
    have a closed-form inverse.

    Reference: Barker, L. (2002) A Comparison of Nine Confidence Intervals
    for a Poisson Parameter When the Expected Number of Events is <= 5,
    The American Statistician, 56:2, 85-89.
    """
    r = check_nonnegative(r, "r")
    solve = resolve_unknown(x, conf_width, "x")
    conf_level = numrange_check(conf_level, "conf_level")
    tol = _check_tol(tol)
    errors = _check_errors(errors)
    known = _known_quantity(solve, x, conf_width, "x")
    meth = resolve_method(method, RATE_METHODS)

    v, scalar = broadcast_inputs(r=r, conf_level=conf_level, known=known)
    r = v["r"]
    alpha = (1.0 - v["conf_level"]) / 2.0
    z = z_from_conf(v["conf_level"])
    logger.debug("rate: solving for %s with %s method", solve.value, meth)

    if solve is Solve.FOR_WIDTH:
        x = v["known"]
        prec = None
    else:
        prec = v["known"] / 2.0

    if meth in ("wald", "vs"):
        if solve is Solve.FOR_WIDTH:
            prec = widths.rate_wald_halfwidth(x, r, z)
        else:
            x = widths.rate_wald_count(prec, r, z)
        if meth == "vs":
            if np.any(r == 0):
                warnings.warn(
                    "The confidence interval is degenerate at z^2/(4t), if r is 0.",
                    DegenerateIntervalWarning,
                    stacklevel=2,
                )
            radj = widths.rate_vs_adjusted(x, r, z)
        else:
            radj = r

    elif meth == "score":
        if solve is Solve.FOR_WIDTH:
            prec = widths.rate_score_halfwidth(x, r, z)
        else:
            x = solve_elementwise(
                widths.rate_score_halfwidth, prec, {"r": r, "z": z},
                bracket=COUNT_BRACKET, tol=tol, errors=errors,
            )
        radj = widths.rate_score_adjusted(x, r, z)

    else:  # exact
        if solve is Solve.FOR_COUNT:
            x = solve_elementwise(
                widths.rate_exact_halfwidth, prec, {"r": r, "alpha": alpha},
                bracket=COUNT_BRACKET, tol=tol, errors=errors,
            )
        lwr, upr = widths.rate_exact_bounds(x, r, alpha)
        radj = r

    if meth == "exact":
        conf_width = upr - lwr if solve is Solve.FOR_WIDTH else np.where(np.isnan(x), np.nan, 2.0 * prec)
    else:
        prec = np.where(np.isnan(x), np.nan, prec)
        lwr = radj - prec
        upr = radj + prec
        conf_width = 2.0 * prec

    if np.any(np.asarray(lwr) < 0):
        warnings.warn(
            "The lower end of the confidence interval is numerically below 0 "
            "and non-sensible. Please choose another method.",
            DegenerateIntervalWarning,
            stacklevel=2,
        )

    with np.errstate(divide="ignore", invalid="ignore"):
        time = x / r

    out = _unbox(
        {
            "r": r,
            "radj": np.broadcast_to(radj, r.shape).astype(float),
            "x": x,
            "time": time,
            "conf_width": conf_width,
            "conf_level": v["conf_level"],
            "lwr": lwr,
            "upr": upr,
        },
        scalar,
    )
    return RateResult(
        **out,
        method=f"{solve.value} for a rate with {meth} confidence interval",
        note=RATE_NOTE,
    )


# =============================================================================
# Proportion
# =============================================================================

def estimate_for_proportion(
    p,
    n=None,
    conf_width=None,
    conf_level=DEFAULT_CONF_LEVEL,
    method: MethodArg = "wilson",
    tol: float = DEFAULT_TOL,
    errors: str = "raise",
) -> ProportionResult:
    """
    Sample size or precision for a proportion.

    Methods: wilson (default), agresti-coull (or ac), exact, wald. Wilson
    is suggested for small n (< 40) and agresti-coull for larger n; wald is
    provided for its widespread use only. Wilson and agresti-coull centre
    the interval on an adjusted proportion, returned as padj.

    n is found by root search on [1, 1e7] for wilson, agresti-coull and
    exact; wald has a closed-form inverse.

    Reference: Brown LD, Cai TT, DasGupta A (2001) Interval Estimation for
    a Binomial Proportion, Statistical Science, 16:2, 101-117.
    """
    p = numrange_check(p, "p", closed=True)
    solve = resolve_unknown(n, conf_width, "n")
    conf_level = numrange_check(conf_level, "conf_level")
    tol = _check_tol(tol)
    errors = _check_errors(errors)
    known = _known_quantity(solve, n, conf_width, "n")
    meth = resolve_method(method, PROPORTION_METHODS)

    v, scalar = broadcast_inputs(p=p, conf_level=conf_level, known=known)
    p = v["p"]
    alpha = (1.0 - v["conf_level"]) / 2.0
    z = z_from_conf(v["conf_level"])
    logger.debug("proportion: solving for %s with %s method", solve.value, meth)

    if solve is Solve.FOR_WIDTH:
        n = v["known"]
        prec = None
    else:
        prec = v["known"] / 2.0

    halfwidth = {
        "agresti-coull": widths.prop_ac_halfwidth,
        "wilson": widths.prop_wilson_halfwidth,
    }
    note: Optional[str] = None

    if meth == "wald":
        if solve is Solve.FOR_WIDTH:
            prec = widths.prop_wald_halfwidth(n, p, z)
        else:
            n = widths.prop_wald_count(prec, p, z)
        padj = p

    elif meth in halfwidth:
        if solve is Solve.FOR_WIDTH:
            prec = halfwidth[meth](n, p, z)
        else:
            n = solve_elementwise(
                halfwidth[meth], prec, {"p": p, "z": z},
                bracket=COUNT_BRACKET, tol=tol, errors=errors,
            )
        if meth == "wilson":
            padj = widths.prop_wilson_adjusted(n, p, z)
        else:
            padj = widths.prop_ac_adjusted(n, p, z)
        note = PROPORTION_NOTE

    else:  # exact
        if solve is Solve.FOR_COUNT:
            n = solve_elementwise(
                widths.prop_exact_halfwidth, prec, {"p": p, "alpha": alpha},
                bracket=COUNT_BRACKET, tol=tol, errors=errors,
            )
        lwr, upr = widths.prop_exact_bounds(n, p, alpha)
        padj = np.full(p.shape, np.nan)

    if meth == "exact":
        conf_width = upr - lwr if solve is Solve.FOR_WIDTH else np.where(np.isnan(n), np.nan, 2.0 * prec)
    else:
        prec = np.where(np.isnan(n), np.nan, prec)
        lwr = padj - prec
        upr = padj + prec
        conf_width = 2.0 * prec

    if np.any(np.asarray(lwr) < 0):
        warnings.warn(
            "The lower end of at least one confidence interval is below 0 and "
            "non-sensible. Please choose 'wilson' or 'exact' method.",
            DegenerateIntervalWarning,
            stacklevel=2,
        )
    if np.any(np.asarray(upr) > 1):
        warnings.warn(
            "The upper end of at least one confidence interval is above 1 and "
            "non-sensible. Please choose 'wilson' or 'exact' method.",
            DegenerateIntervalWarning,
            stacklevel=2,
        )

    out = _unbox(
        {
            "p": p,
            "padj": np.asarray(padj, dtype=float),
            "n": n,
            "conf_width": conf_width,
            "conf_level": v["conf_level"],
            "lwr": np.asarray(lwr, dtype=float),
            "upr": np.asarray(upr, dtype=float),
        },
        scalar,
    )
    return ProportionResult(
        **out,
        method=f"{solve.value} for a proportion with {meth} confidence interval",
        note=note,
    )
