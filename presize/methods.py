# presize/methods.py
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Dict, Sequence, Tuple, Union

import numpy as np

from presize.errors import MethodResolutionWarning

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MethodRegistry:
    """
    Valid method names of one statistic, in matching order, and the default.

    aliases map an accepted spelling to the canonical method name.
    """

    statistic: str
    names: Tuple[str, ...]
    default: str
    aliases: Dict[str, str] = field(default_factory=dict)

    def canonical(self, name: str) -> str:
        return self.aliases.get(name, name)


RATE_METHODS = MethodRegistry(
    statistic="rate",
    names=("score", "vs", "exact", "wald"),
    default="score",
)

PROPORTION_METHODS = MethodRegistry(
    statistic="proportion",
    names=("wald", "ac", "agresti-coull", "exact", "wilson"),
    default="wilson",
    aliases={"ac": "agresti-coull"},
)


def partial_match(name: str, choices: Sequence[str]) -> str | None:
    """
    Case-sensitive abbreviation matching.

    An exact match wins; otherwise the unique choice starting with name.
    Empty, ambiguous and unknown names give None.
    """
    if not name:
        return None
    if name in choices:
        return name
    hits = [c for c in choices if c.startswith(name)]
    if len(hits) == 1:
        return hits[0]
    return None


def resolve_method(method: Union[str, Sequence[str], None], registry: MethodRegistry) -> str:
    """
    Canonical method name for a user-supplied (possibly abbreviated) name.

    Never raises: several names, or a name matching no single entry, fall
    back to the registry default with a MethodResolutionWarning.
    """
    default = registry.default
    if method is None:
        return default

    if not isinstance(method, str):
        if not isinstance(method, (list, tuple, np.ndarray)):
            warnings.warn(
                f"Method {method!r} is not available, '{default}' will be used.",
                MethodResolutionWarning,
                stacklevel=3,
            )
            return default
        if isinstance(method, np.ndarray):
            method = method.ravel().tolist()
        names = [str(m) for m in method]
        if not names:
            return default
        if len(names) > 1:
            warnings.warn(
                f"more than one method was chosen, '{default}' will be used",
                MethodResolutionWarning,
                stacklevel=3,
            )
            return default
        method = names[0]

    hit = partial_match(str(method), registry.names)
    if hit is None:
        warnings.warn(
            f"Method '{method}' is not available, '{default}' will be used.",
            MethodResolutionWarning,
            stacklevel=3,
        )
        return default

    resolved = registry.canonical(hit)
    logger.debug("%s method '%s' resolved to '%s'", registry.statistic, method, resolved)
    return resolved
