# presize/theory.py
from __future__ import annotations

import numpy as np
from scipy.stats import beta, gamma, norm, t


def z_from_conf(conf):
    """
    Two-sided normal critical value z_{1-(1-conf)/2}.

    e.g. conf=0.95 -> 1.959963984540054
    """
    alpha = (1.0 - np.asarray(conf, dtype=float)) / 2.0
    return norm.ppf(1.0 - alpha)


def t_quantile(p, nu):
    return t.ppf(p, df=nu)


def gamma_quantile(p, shape):
    """Quantile of a unit-scale gamma distribution."""
    return gamma.ppf(p, shape)


def beta_quantile(p, a, b):
    """Quantile of Beta(a, b); nan where a or b is not positive."""
    with np.errstate(invalid="ignore"):
        return beta.ppf(p, a, b)
