"""
experiments/run_experiments.py

Experiment harness that loads the baseline config, applies scenario and
command-line overrides, sweeps the number of cashiers, prints the comparison
table and the staffing recommendation, and writes the plot artifacts.
With several replications it also reports per-count means with confidence
intervals across seeds.
"""

from __future__ import annotations
import argparse, math, os, sys
from typing import Dict, List, Optional, Sequence
from statistics import mean, stdev
from scipy.stats import t

from checkoutsim.config import BASELINE_PATH, DEFAULT_CFG, ROOT, apply_overrides, load_cfg, validate_cfg
from checkoutsim.metrics import ExperimentResult
from checkoutsim.policies import find_optimal_cashiers, result_for
from checkoutsim.simulation import run_sweep
from experiments.plots import plot_sweep, write_utilization_plot, write_waiting_time_plot
from experiments.scenarios import get_scenario

def mean_ci(values: List[float], confidence_level: float) -> tuple[float, float]:
    """
    Return (mean, half-width) using a Student t critical value.
    """
    if not values:
        return 0.0, 0.0
    mu = mean(values)
    n = len(values)
    if n < 2:
        return mu, 0.0
    level = min(max(confidence_level, 0.0), 0.999999)
    alpha = 1.0 - level
    tcrit = t.ppf(1 - alpha / 2.0, n - 1)
    half = tcrit * (stdev(values) / math.sqrt(n))
    return mu, half

def cli_overrides(args: argparse.Namespace) -> Dict:
    """Translate the CLI flags that were actually given into a config override dict."""
    out: Dict = {}
    def put(section: str, key: str, value):
        if value is not None:
            out.setdefault(section, {})[key] = value
    put("experiments", "max_cashiers", args.max_cashiers)
    put("rates", "arrival", args.arrival_rate)
    put("rates", "service", args.service_rate)
    put("sim", "horizon_seconds", args.horizon)
    put("sim", "seed", args.seed)
    put("experiments", "replications", args.replications)
    put("experiments", "output_dir", args.output_dir)
    return out

def build_cfg(args: argparse.Namespace) -> Dict:
    if args.config:
        cfg = load_cfg(args.config)
    elif os.path.exists(BASELINE_PATH):
        cfg = load_cfg(BASELINE_PATH)
    else:
        cfg = apply_overrides(DEFAULT_CFG, {})
    if args.scenario:
        cfg = apply_overrides(cfg, get_scenario(args.scenario)["overrides"])
    cfg = apply_overrides(cfg, cli_overrides(args))
    return validate_cfg(cfg)

def print_header(cfg: Dict):
    rates, sim = cfg["rates"], cfg["sim"]
    expected = int(rates["arrival"] * sim["horizon_seconds"])
    print("Supermarket M/M/c Queue Simulation")
    print(f"  Arrival rate: {rates['arrival']} customers/second")
    print(f"  Service rate: {rates['service']} customers/second")
    print(f"  Simulation time: {sim['horizon_seconds']} seconds")
    print(f"  Expected customers: ~{expected}")
    print(f"  Testing 1 to {cfg['experiments']['max_cashiers']} cashiers")
    print("-" * 60)

def print_table(results: Sequence[ExperimentResult]):
    print("\nComparison Table")
    print("Cashiers | Customers | Avg Wait Time | Utilization | Efficiency")
    print("---------|-----------|---------------|-------------|------------")
    for r in results:
        print(f"{r.num_cashiers:8d} | {r.total_customers:9d} | {r.avg_waiting_time:13.2f} | "
              f"{r.utilization * 100:10.1f}% | {r.efficiency_score:10.3f}")

def print_recommendation(cfg: Dict, results: Sequence[ExperimentResult]) -> Optional[int]:
    exp = cfg["experiments"]
    best = find_optimal_cashiers(results, exp["min_utilization"], exp["max_utilization"])
    chosen = result_for(results, best)
    if chosen is None:
        print("[warn] no results to recommend from", file=sys.stderr)
        return None
    expected = int(cfg["rates"]["arrival"] * cfg["sim"]["horizon_seconds"])
    print("\nRECOMMENDATION")
    print(f"  Optimal number of cashiers: {best}")
    print(f"  For {expected} expected customers:")
    print(f"    - Average waiting time: {chosen.avg_waiting_time:.2f} seconds")
    print(f"    - System utilization: {chosen.utilization * 100:.1f}%")
    print(f"    - Efficiency score: {chosen.efficiency_score:.3f}")
    return best

def report_replications(cfg: Dict, sweeps: List[List[ExperimentResult]]):
    """Per cashier count, mean ± CI half-width of wait and utilization across seeds."""
    confidence = float(cfg["experiments"].get("confidence_level", 0.95))
    level_pct = confidence * 100.0
    print(f"\nAcross {len(sweeps)} replications ({level_pct:.1f}% CI):")
    for idx in range(len(sweeps[0])):
        rows = [sweep[idx] for sweep in sweeps]
        wait = mean_ci([r.avg_waiting_time for r in rows], confidence)
        util = mean_ci([r.utilization * 100.0 for r in rows], confidence)
        print(f"  cashiers={rows[0].num_cashiers:2d}: avg wait {wait[0]:.2f} ± {wait[1]:.2f} s, "
              f"utilization {util[0]:.1f}% ± {util[1]:.1f}%")

def write_artifacts(cfg: Dict, results: Sequence[ExperimentResult]) -> List[str]:
    out_dir = cfg["experiments"]["output_dir"]
    if not os.path.isabs(out_dir):
        out_dir = os.path.join(os.getcwd(), out_dir)
    paths = [
        write_utilization_plot(results, out_dir),
        write_waiting_time_plot(results, out_dir),
        plot_sweep(results, out_dir),
    ]
    return [p for p in paths if p]

def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Supermarket checkout sizing - M/M/c cashier sweep")
    parser.add_argument("--config", default=None, help=f"YAML config (default: {os.path.relpath(BASELINE_PATH, ROOT)})")
    parser.add_argument("--scenario", default=None, help="named override set from experiments/scenarios.py")
    parser.add_argument("--max-cashiers", type=int, default=None, help="maximum number of cashiers to test")
    parser.add_argument("--arrival-rate", type=float, default=None, help="λ customers/second")
    parser.add_argument("--service-rate", type=float, default=None, help="μ customers/second per cashier")
    parser.add_argument("--horizon", type=float, default=None, help="simulation time in seconds")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--replications", type=int, default=None, help="sweeps with seeds seed..seed+R-1")
    parser.add_argument("--output-dir", default=None, help="where plot data/scripts are written")
    parser.add_argument("--no-plots", action="store_true", help="skip writing plot artifacts")
    parser.add_argument("-q", "--quiet", action="store_true", help="no per-run progress lines")
    return parser.parse_args(argv)

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point: sweep cashier counts, report KPIs and the recommendation."""
    args = parse_args(argv)
    cfg = build_cfg(args)
    print_header(cfg)

    base_seed = cfg["sim"]["seed"]
    replications = cfg["experiments"]["replications"]
    results = run_sweep(cfg, seed=base_seed, verbose=not args.quiet)
    print_table(results)
    print_recommendation(cfg, results)

    if replications > 1:
        sweeps = [results]
        for rep in range(1, replications):
            sweeps.append(run_sweep(cfg, seed=base_seed + rep))
        report_replications(cfg, sweeps)

    if not args.no_plots:
        paths = write_artifacts(cfg, results)
        for p in paths:
            print(f"  Plot artifact saved to: {p}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
