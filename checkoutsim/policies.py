# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# policies.py
# -----------------------------------------------------------------------------
# Purpose:
#   Staffing recommendation: pick the cashier count that balances waiting
#   time against utilization from a list of ExperimentResult records.
#
# Design notes:
#   - Keep pure functions to ease testing (results -> decision).
#   - Inside the target utilization band the shortest average wait wins;
#     if nothing lands in the band the best efficiency score wins.
#   - Ties go to the first record in iteration order (strict comparisons).
#
# Usage:
#   from checkoutsim.policies import find_optimal_cashiers
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Optional, Sequence
from .metrics import ExperimentResult

def find_optimal_cashiers(
    results: Sequence[ExperimentResult],
    min_utilization: float = 0.60,
    max_utilization: float = 0.90,
) -> Optional[int]:
    """Return the recommended cashier count, or None when there are no results."""
    if not results:
        return None
    in_band = [r for r in results if min_utilization <= r.utilization <= max_utilization]
    if in_band:
        best = in_band[0]
        for r in in_band:
            if r.avg_waiting_time < best.avg_waiting_time:
                best = r
        return best.num_cashiers
    best = results[0]
    for r in results:
        if r.efficiency_score > best.efficiency_score:
            best = r
    return best.num_cashiers

def result_for(results: Sequence[ExperimentResult], num_cashiers: Optional[int]) -> Optional[ExperimentResult]:
    """Look up the first record for a cashier count."""
    for r in results:
        if r.num_cashiers == num_cashiers:
            return r
    return None
