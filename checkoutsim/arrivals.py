# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# arrivals.py
# -----------------------------------------------------------------------------
# Purpose:
#   Exponential variate sources for interarrival gaps (Poisson arrivals) and
#   service durations (exponential service).
#
# Design notes:
#   - Each source owns its random.Random so one run never shares RNG state
#     with another; make_sources() derives both streams from the run seed.
#
# Usage:
#   arrivals, services = make_sources(cfg["rates"], seed=0)
#   gap = arrivals.sample()
# -----------------------------------------------------------------------------

from __future__ import annotations
import random
from typing import Dict, Optional, Tuple

class ExponentialSource:
    """Draws non-negative durations with mean 1/rate."""
    def __init__(self, rate: float, rng: Optional[random.Random] = None):
        if rate <= 0:
            raise ValueError(f"rate must be > 0 (got {rate})")
        self.rate = float(rate)
        self.rng = rng or random.Random()

    @property
    def mean(self) -> float:
        return 1.0 / self.rate

    def sample(self) -> float:
        return self.rng.expovariate(self.rate)

def make_sources(rates: Dict[str, float], seed: int) -> Tuple[ExponentialSource, ExponentialSource]:
    """
    Build the (interarrival, service) pair for a single run.

    Parameters
    ----------
    rates : dict
        The config 'rates' section: {'arrival': λ, 'service': μ} per second.
    seed : int
        Run seed; the two streams get independent seeds derived from it.

    Returns
    -------
    tuple[ExponentialSource, ExponentialSource]
    """
    master = random.Random(seed)
    arrival_rng = random.Random(master.getrandbits(64))
    service_rng = random.Random(master.getrandbits(64))
    return (
        ExponentialSource(rates["arrival"], arrival_rng),
        ExponentialSource(rates["service"], service_rng),
    )
