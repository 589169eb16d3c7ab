from __future__ import annotations

import argparse
import glob
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

import pandas as pd
import yaml

from presize.estimators import (
    DEFAULT_CONF_LEVEL,
    estimate_for_mean,
    estimate_for_proportion,
    estimate_for_rate,
)
from presize.roots import DEFAULT_TOL

logger = logging.getLogger(__name__)


def load_config(path: str | Path) -> Dict[str, Any]:
    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config not found: {cfg_path}")
    cfg = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
    if not isinstance(cfg, dict):
        raise ValueError(f"Config must be a YAML mapping: {cfg_path}")
    return cfg


def run_config(cfg: Dict[str, Any]) -> pd.DataFrame:
    """
    Dispatch one config mapping to its estimator and tabulate the result.
    """
    statistic = cfg.get("statistic")
    common = dict(
        conf_width=cfg.get("conf_width"),
        conf_level=cfg.get("conf_level", DEFAULT_CONF_LEVEL),
        tol=float(cfg.get("tol", DEFAULT_TOL)),
        errors=str(cfg.get("errors", "raise")),
    )

    if statistic == "mean":
        res = estimate_for_mean(mu=cfg["mu"], sd=cfg["sd"], n=cfg.get("n"), **common)

    elif statistic == "rate":
        res = estimate_for_rate(
            r=cfg["r"],
            x=cfg.get("x"),
            method=cfg.get("method", "score"),
            **common,
        )

    elif statistic == "proportion":
        res = estimate_for_proportion(
            p=cfg["p"],
            n=cfg.get("n"),
            method=cfg.get("method", "wilson"),
            **common,
        )

    else:
        raise ValueError(f"Unknown statistic: {statistic}")

    logger.info("%s", res.method)
    df = res.to_frame()

    out = cfg.get("out")
    if out:
        out_path = Path(out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out_path, index=False)
        logger.info("wrote %s", out_path)
    return df


def expand_configs(patterns: Sequence[str]) -> List[Path]:
    """
    Config paths from literal paths or glob patterns, in sorted order per pattern.
    """
    files: List[Path] = []
    for pattern in patterns:
        if any(c in pattern for c in "*?["):
            matched = sorted(glob.glob(pattern))
            if not matched:
                raise FileNotFoundError(f"No YAML config files match: {pattern}")
            files.extend(Path(m) for m in matched)
        else:
            files.append(Path(pattern))
    return files


def run_all(
    files: Sequence[str | Path],
    stop_on_error: bool = False,
) -> Tuple[Dict[str, pd.DataFrame], Dict[str, Exception]]:
    """
    Run several configs in-process.

    A config that fails to load or whose estimate fails is recorded under its
    path and the remaining configs still run, unless stop_on_error is set.
    """
    frames: Dict[str, pd.DataFrame] = {}
    failures: Dict[str, Exception] = {}
    for path in files:
        key = str(path)
        try:
            frames[key] = run_config(load_config(path))
        except (OSError, ValueError, KeyError, yaml.YAMLError) as e:
            if stop_on_error:
                raise
            logger.error("%s failed: %s", key, e)
            failures[key] = e
    return frames, failures


def main(argv: Sequence[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Compute sample size or precision from YAML configs.")
    ap.add_argument("configs", nargs="+", help='Config paths or glob patterns, e.g. "configs/*.yml"')
    ap.add_argument("--stop-on-error", action="store_true", help="Stop at the first failing config")
    ap.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    args = ap.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    files = expand_configs(args.configs)
    frames, failures = run_all(files, stop_on_error=args.stop_on_error)

    for key, df in frames.items():
        if len(files) > 1:
            print(f"\n# {key}")
        print(df.to_string(index=False))

    if failures:
        print(f"\n{len(failures)} of {len(files)} config(s) failed:")
        for key, err in failures.items():
            print(f" - {key}: {err}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
