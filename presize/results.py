# presize/results.py
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Union

import numpy as np
import pandas as pd

Value = Union[float, np.ndarray]


@dataclass(frozen=True, eq=False)
class _Result:
    """Conversions shared by the result records."""

    def as_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_frame(self) -> pd.DataFrame:
        """
        One row per element; method and note repeated on every row.
        """
        d = self.as_dict()
        size = max(np.size(v) for v in d.values() if not isinstance(v, str) and v is not None)
        cols = {}
        for k, v in d.items():
            if isinstance(v, str) or v is None:
                cols[k] = [v] * size
            else:
                cols[k] = np.broadcast_to(np.asarray(v, dtype=float), (size,))
        return pd.DataFrame(cols)


@dataclass(frozen=True, eq=False)
class MeanResult(_Result):
    mu: Value
    sd: Value
    n: Value
    conf_width: Value
    conf_level: Value
    lwr: Value
    upr: Value
    method: str
    note: Optional[str] = None


@dataclass(frozen=True, eq=False)
class RateResult(_Result):
    r: Value
    radj: Value
    x: Value
    time: Value
    conf_width: Value
    conf_level: Value
    lwr: Value
    upr: Value
    method: str
    note: Optional[str] = None


@dataclass(frozen=True, eq=False)
class ProportionResult(_Result):
    p: Value
    padj: Value
    n: Value
    conf_width: Value
    conf_level: Value
    lwr: Value
    upr: Value
    method: str
    note: Optional[str] = None
