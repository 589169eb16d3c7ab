# presize/widths.py
"""
Half-width formulas of the supported confidence intervals.

Every function takes all of its parameters explicitly and works on scalars
or numpy arrays alike. For a fixed estimate and confidence level each
half-width is decreasing in the count, which the root finder relies on.

Notation: z is the two-sided normal critical value, z2 = z * z, and
alpha = (1 - conf_level) / 2 is the tail probability on each side.
"""
from __future__ import annotations

from typing import Tuple

import numpy as np

from presize.theory import beta_quantile, gamma_quantile, t_quantile


# =============================================================================
# Mean
# =============================================================================

def mean_t_halfwidth(n, sd, alpha):
    """t_{1-alpha, n-1} * sd / sqrt(n)"""
    tval = t_quantile(1.0 - alpha, n - 1.0)
    return tval * sd / np.sqrt(n)


# =============================================================================
# Rate
# =============================================================================

def rate_wald_halfwidth(x, r, z):
    return z * r * np.sqrt(1.0 / x)


def rate_wald_count(prec, r, z):
    """Closed-form inverse of rate_wald_halfwidth in x."""
    return (z * r / prec) ** 2


def rate_score_halfwidth(x, r, z):
    z2 = z * z
    with np.errstate(divide="ignore", invalid="ignore"):
        return z * np.sqrt(r * (4.0 + z2 / x)) / np.sqrt(4.0 * x / r)


def rate_score_adjusted(x, r, z):
    return r + z * z * r / (2.0 * x)


def rate_vs_adjusted(x, r, z):
    """vs has the wald half-width, centred on this shrunk rate."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return r * (1.0 + z * z / (4.0 * x))


def rate_exact_bounds(x, r, alpha) -> Tuple[np.ndarray, np.ndarray]:
    """
    Gamma-based exact interval after x events observed over time x / r.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        time = x / r
        lwr = gamma_quantile(alpha, x) / time
        upr = gamma_quantile(1.0 - alpha, x + 1.0) / time
    return lwr, upr


def rate_exact_halfwidth(x, r, alpha):
    lwr, upr = rate_exact_bounds(x, r, alpha)
    return (upr - lwr) / 2.0


# =============================================================================
# Proportion
# =============================================================================

def prop_wald_halfwidth(n, p, z):
    return z * np.sqrt(p * (1.0 - p) / n)


def prop_wald_count(prec, p, z):
    """Closed-form inverse of prop_wald_halfwidth in n."""
    return p * (1.0 - p) / (prec / z) ** 2


def prop_ac_adjusted(n, p, z):
    z2 = z * z
    return (p * n + 0.5 * z2) / (n + z2)


def prop_ac_halfwidth(n, p, z):
    n_ = n + z * z
    padj = prop_ac_adjusted(n, p, z)
    return z * np.sqrt(padj * (1.0 - padj) / n_)


def prop_wilson_halfwidth(n, p, z):
    z2 = z * z
    return (z * np.sqrt(n) / (n + z2)) * np.sqrt(p * (1.0 - p) + z2 / (4.0 * n))


def prop_wilson_adjusted(n, p, z):
    z2 = z * z
    return (n * p + z2 / 2.0) / (n + z2)


def prop_exact_bounds(n, p, alpha) -> Tuple[np.ndarray, np.ndarray]:
    """
    Clopper-Pearson interval from beta quantiles with x = p * n successes.

    x = 0 pins the lower bound to 0 and x = n pins the upper bound to 1,
    where the beta parameters are undefined.
    """
    x = np.asarray(p * n, dtype=float)
    n = np.asarray(n, dtype=float)
    lwr = beta_quantile(alpha, x, n - x + 1.0)
    upr = beta_quantile(1.0 - alpha, x + 1.0, n - x)
    lwr = np.where(x == 0, 0.0, lwr)
    upr = np.where(x == n, 1.0, upr)
    if lwr.ndim == 0:
        return float(lwr), float(upr)
    return lwr, upr


def prop_exact_halfwidth(n, p, alpha):
    lwr, upr = prop_exact_bounds(n, p, alpha)
    return (upr - lwr) / 2.0
