# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# config.py
# -----------------------------------------------------------------------------
# Purpose:
#   Load, merge and validate the nested config dict (YAML on disk) that
#   drives a run or a sweep.
#
# Design notes:
#   - DEFAULT_CFG mirrors config/baseline.yaml so library callers can run
#     without touching the filesystem.
#   - validate_cfg() fails fast with ConfigError before any run is built.
#
# Usage:
#   cfg = apply_overrides(load_cfg(), {"rates": {"arrival": 3.0}})
#   validate_cfg(cfg)
# -----------------------------------------------------------------------------

from __future__ import annotations
import copy, os
from typing import Dict, Optional
import yaml
from .errors import ConfigError

ROOT = os.path.dirname(os.path.dirname(__file__))
BASELINE_PATH = os.path.join(ROOT, "config", "baseline.yaml")

DEFAULT_CFG: Dict = {
    "sim": {
        "horizon_seconds": 1000.0,
        "seed": 0,
        "strict": True,
    },
    "rates": {
        "arrival": 2.0,   # customers per second
        "service": 1.0,   # customers per second, per cashier
    },
    "experiments": {
        "max_cashiers": 10,
        "min_utilization": 0.60,
        "max_utilization": 0.90,
        "replications": 1,
        "confidence_level": 0.95,
        "output_dir": os.path.join("experiments", "output"),
    },
}

def apply_overrides(cfg: Dict, overrides: Optional[Dict]) -> Dict:
    """Apply overrides (recursive merge) on top of a base config; returns a copy."""
    new = copy.deepcopy(cfg)

    def _merge(dst: Dict, src: Dict):
        for key, val in src.items():
            if isinstance(val, dict) and isinstance(dst.get(key), dict):
                _merge(dst[key], val)
            else:
                dst[key] = copy.deepcopy(val)

    _merge(new, overrides or {})
    return new

def load_cfg(path: Optional[str] = None) -> Dict:
    """Read a YAML config and layer it over DEFAULT_CFG."""
    path = path or BASELINE_PATH
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return apply_overrides(DEFAULT_CFG, raw)

def require_positive(value, name: str) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number (got {value!r})") from None
    if not v > 0:
        raise ConfigError(f"{name} must be > 0 (got {value!r})")
    return v

def _fraction(value, name: str) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number (got {value!r})") from None
    if isinstance(value, (bool, str)) or not 0.0 <= v <= 1.0:
        raise ConfigError(f"{name} must be a number in [0, 1] (got {value!r})")
    return v

def require_positive_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{name} must be a positive integer (got {value!r})")
    return value

def validate_cfg(cfg: Dict) -> Dict:
    """
    Reject configs the model cannot run.

    Checks rates and horizon are positive, cashier/replication counts are
    positive integers, and the utilization band is ordered inside [0, 1].
    Returns the cfg unchanged so calls can be chained.
    """
    sim = cfg.get("sim", {})
    rates = cfg.get("rates", {})
    exp = cfg.get("experiments", {})
    require_positive(sim.get("horizon_seconds"), "sim.horizon_seconds")
    require_positive(rates.get("arrival"), "rates.arrival")
    require_positive(rates.get("service"), "rates.service")
    require_positive_int(exp.get("max_cashiers"), "experiments.max_cashiers")
    require_positive_int(exp.get("replications", 1), "experiments.replications")
    seed = sim.get("seed", 0)
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise ConfigError(f"sim.seed must be an integer (got {seed!r})")
    lo = _fraction(exp.get("min_utilization", 0.60), "experiments.min_utilization")
    hi = _fraction(exp.get("max_utilization", 0.90), "experiments.max_utilization")
    if lo > hi:
        raise ConfigError(f"utilization band must satisfy 0 <= min <= max <= 1 (got [{lo}, {hi}])")
    level = _fraction(exp.get("confidence_level", 0.95), "experiments.confidence_level")
    if level in (0.0, 1.0):
        raise ConfigError(f"experiments.confidence_level must be in (0, 1) (got {level!r})")
    return cfg
