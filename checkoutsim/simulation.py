# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# simulation.py
# -----------------------------------------------------------------------------
# Purpose:
#   Simulate a single replication for one cashier count (build sources and
#   model, run the event loop to the horizon, reconcile, return the result),
#   and sweep cashier counts 1..N collecting one result per count.
#
# Design notes:
#   - Every run builds its own Env, cashiers, queue and RNG streams; nothing
#     survives between runs except the results list the caller owns.
#   - All counts in one sweep share the sweep seed (common random numbers),
#     so differences between counts are not noise from different streams.
#
# Usage:
#   from checkoutsim.simulation import run_one, run_sweep
#   res = run_one(cfg, num_cashiers=3)
#   results = run_sweep(cfg)
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Dict, List, Optional
from .arrivals import make_sources
from .config import validate_cfg
from .metrics import ExperimentResult
from .network import Supermarket
from .queues import Env

def build_run(cfg: Dict, num_cashiers: int, seed: Optional[int] = None):
    """Create a fresh (model, env) pair with the first events already scheduled."""
    sim = cfg["sim"]
    seed = sim.get("seed", 0) if seed is None else seed
    arrivals, services = make_sources(cfg["rates"], seed)
    model = Supermarket(
        num_cashiers,
        arrivals=arrivals,
        services=services,
        horizon=sim["horizon_seconds"],
        strict=sim.get("strict", True),
    )
    env = Env(model)
    model.start(env)
    return model, env

def simulate(cfg: Dict, num_cashiers: int, seed: Optional[int] = None) -> Supermarket:
    """Run one replication to the horizon and return the reconciled model."""
    model, env = build_run(cfg, num_cashiers, seed)
    env.run()
    model.reconcile(env)
    return model

def run_one(cfg: Dict, num_cashiers: int, seed: Optional[int] = None) -> ExperimentResult:
    return simulate(cfg, num_cashiers, seed).result()

def run_sweep(cfg: Dict, seed: Optional[int] = None, results: Optional[List[ExperimentResult]] = None,
              verbose: bool = False) -> List[ExperimentResult]:
    """
    Run cashier counts 1..experiments.max_cashiers and append one
    ExperimentResult per count to `results` (a new list if not given).

    Parameters
    ----------
    cfg : dict
        Full config (validated here before the first run).
    seed : int, optional
        Overrides sim.seed for every run in this sweep.
    results : list, optional
        Caller-owned list to append to; returned for convenience.
    verbose : bool
        Print one progress line per run, including the queue diagnostics
        (mean service time, longest line, customers still queued at the horizon).
    """
    validate_cfg(cfg)
    results = [] if results is None else results
    max_c = cfg["experiments"]["max_cashiers"]
    for c in range(1, max_c + 1):
        model = simulate(cfg, c, seed)
        res = model.result()
        results.append(res)
        if verbose:
            diag = model.M.summary(model.cashiers)
            print(f"  cashiers={c:2d}: served={res.total_customers}, "
                  f"avg wait={res.avg_waiting_time:.2f}s, util={res.utilization * 100:.1f}%, "
                  f"score={res.efficiency_score:.3f}, avg service={diag['avg_service_time']:.2f}s, "
                  f"max queue={diag['max_queue_length']}, queued at end={diag['queued_at_horizon']}")
    return results
