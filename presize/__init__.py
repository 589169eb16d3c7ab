from presize.errors import (
    DegenerateIntervalWarning,
    InvalidArgument,
    MethodResolutionWarning,
    RootNotBracketed,
    RootSearchWarning,
)
from presize.estimators import estimate_for_mean, estimate_for_proportion, estimate_for_rate
from presize.results import MeanResult, ProportionResult, RateResult

__all__ = [
    "estimate_for_mean",
    "estimate_for_rate",
    "estimate_for_proportion",
    "MeanResult",
    "RateResult",
    "ProportionResult",
    "InvalidArgument",
    "RootNotBracketed",
    "MethodResolutionWarning",
    "DegenerateIntervalWarning",
    "RootSearchWarning",
]
