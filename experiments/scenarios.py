"""
experiments/scenarios.py

Holds scenario definitions (config overrides) to sweep during experiments.
Add arrival/service rates, horizons or seeds here.
"""

from __future__ import annotations

BASELINE = {
    "name": "baseline",
    "overrides": {},  # override config keys here per scenario
}

LIGHT_LOAD = {
    "name": "light_load",
    "overrides": {
        "rates": {
            "arrival": 0.5,
            "service": 1.0,
        },
        "experiments": {
            "max_cashiers": 4,
        },
    },
}

HEAVY_LOAD = {
    "name": "heavy_load",
    "overrides": {
        "rates": {
            "arrival": 6.0,
            "service": 1.0,
        },
        "sim": {
            "horizon_seconds": 2000.0,
        },
        "experiments": {
            "max_cashiers": 12,
        },
    },
}

SCENARIOS = [BASELINE, LIGHT_LOAD, HEAVY_LOAD]

def get_scenario(name: str) -> dict:
    for sc in SCENARIOS:
        if sc["name"] == name:
            return sc
    known = ", ".join(sc["name"] for sc in SCENARIOS)
    raise KeyError(f"unknown scenario {name!r} (known: {known})")
