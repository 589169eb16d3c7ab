# presize/errors.py
from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised before any numeric work when the inputs cannot be used."""


class RootNotBracketed(ValueError):
    """
    The requested width is not attainable for any count inside the bracket.

    Carries the bracket and the target half-width so callers can report it.
    """

    def __init__(self, lower: float, upper: float, target: float, message: str | None = None):
        self.lower = float(lower)
        self.upper = float(upper)
        self.target = float(target)
        if message is None:
            message = (
                f"half-width {target:g} cannot be reached for a count in "
                f"[{lower:g}, {upper:g}]"
            )
        super().__init__(message)


class MethodResolutionWarning(UserWarning):
    """Method name was ambiguous, unknown or given more than once; default used."""


class DegenerateIntervalWarning(UserWarning):
    """An interval bound lies outside the natural domain of the statistic."""


class RootSearchWarning(UserWarning):
    """One element of a vectorized solve failed and was set to NaN."""
