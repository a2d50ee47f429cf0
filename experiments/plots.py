"""
experiments/plots.py

Plot artifacts for a cashier sweep: two-column gnuplot data files plus the
gnuplot scripts that render them (utilization % and average wait against the
number of cashiers), and a matplotlib PNG with both series side by side.
"""

from __future__ import annotations
import os, sys
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from typing import List, Optional, Sequence, Tuple
from checkoutsim.metrics import ExperimentResult

GNUPLOT_HEADER = "# Generated by the checkout sizing sweep\n\n"

def _sorted(results: Sequence[ExperimentResult]) -> List[ExperimentResult]:
    return sorted(results, key=lambda r: r.num_cashiers)

def _write_series(path: str, header: str, rows: List[Tuple[int, str]]):
    with open(path, "w", encoding="utf-8") as f:
        f.write(header + "\n")
        for c, val in rows:
            f.write(f"{c} {val}\n")

def _gnuplot_script(title: str, ylabel: str, png: str, data_file: str, series_title: str,
                    color: str, yrange: str, extra: str = "") -> str:
    return (
        f"# GNUplot script for {series_title}\n"
        + GNUPLOT_HEADER
        + "set terminal pngcairo enhanced color font 'Arial,12' size 800,600\n"
        + f"set output '{png}'\n\n"
        + f"set title '{title}'\n"
        + "set xlabel 'Number of Cashiers'\n"
        + f"set ylabel '{ylabel}'\n"
        + "set grid linestyle 1 linecolor rgb '#cccccc'\n"
        + "set key top right\n"
        + "set xrange [0.5:*]\n"
        + f"set yrange {yrange}\n"
        + "set xtics 1\n"
        + extra
        + f"set style line 1 linecolor rgb '{color}' linewidth 2 pointtype 7 pointsize 1.5\n\n"
        + f"plot '{data_file}' using 1:2 with linespoints ls 1 title '{series_title}'\n"
    )

def write_utilization_plot(results: Sequence[ExperimentResult], out_dir: str,
                           filename: str = "utilization.plt") -> Optional[str]:
    """Write utilization_data.dat and its gnuplot script; returns the script path."""
    if not results:
        print("[warn] no results available for plotting utilization", file=sys.stderr)
        return None
    os.makedirs(out_dir, exist_ok=True)
    data_file = "utilization_data.dat"
    rows = [(r.num_cashiers, f"{r.utilization * 100.0:.2f}") for r in _sorted(results)]
    _write_series(os.path.join(out_dir, data_file), "# Cashiers Utilization(%)", rows)
    script = _gnuplot_script(
        title="Cashier Utilization vs Number of Cashiers",
        ylabel="Utilization (%)",
        png="utilization.png",
        data_file=data_file,
        series_title="Utilization",
        color="#0066cc",
        yrange="[0:105]",
        extra="set ytics 10\n",
    )
    out_path = os.path.join(out_dir, filename)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(script)
    return out_path

def write_waiting_time_plot(results: Sequence[ExperimentResult], out_dir: str,
                            filename: str = "waiting_time.plt") -> Optional[str]:
    """Write waiting_time_data.dat and its gnuplot script; returns the script path."""
    if not results:
        print("[warn] no results available for plotting waiting time", file=sys.stderr)
        return None
    os.makedirs(out_dir, exist_ok=True)
    data_file = "waiting_time_data.dat"
    rows = [(r.num_cashiers, f"{r.avg_waiting_time:.3f}") for r in _sorted(results)]
    _write_series(os.path.join(out_dir, data_file), "# Cashiers AvgWaitingTime(seconds)", rows)
    script = _gnuplot_script(
        title="Average Waiting Time vs Number of Cashiers",
        ylabel="Average Waiting Time (seconds)",
        png="waiting_time.png",
        data_file=data_file,
        series_title="Average Waiting Time",
        color="#cc0000",
        yrange="[0:*]",
        # Log scale helps when the 1-cashier wait dwarfs the rest
        extra="# set logscale y\n",
    )
    out_path = os.path.join(out_dir, filename)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(script)
    return out_path

def plot_sweep(results: Sequence[ExperimentResult], out_dir: str, title: str = "Checkout sweep") -> Optional[str]:
    """
    Persist a PNG with utilization (%) and average wait (s) against the number
    of cashiers. Returns None when there is nothing to plot.
    """
    if not results:
        return None
    rows = _sorted(results)
    x = [r.num_cashiers for r in rows]
    fig, (ax_u, ax_w) = plt.subplots(1, 2, figsize=(11, 4.5))
    ax_u.plot(x, [r.utilization * 100.0 for r in rows], marker="o", color="#0066cc")
    ax_u.set_xlabel("Number of Cashiers")
    ax_u.set_ylabel("Utilization (%)")
    ax_u.set_ylim(0, 105)
    ax_w.plot(x, [r.avg_waiting_time for r in rows], marker="o", color="#cc0000")
    ax_w.set_xlabel("Number of Cashiers")
    ax_w.set_ylabel("Average Waiting Time (seconds)")
    for ax in (ax_u, ax_w):
        ax.set_xticks(x)
        ax.grid(True, linestyle="--", alpha=0.4)
    fig.suptitle(title)
    os.makedirs(out_dir, exist_ok=True)
    safe_name = title.lower().replace(" ", "_")
    out_path = os.path.join(out_dir, f"{safe_name}.png")
    fig.tight_layout()
    fig.savefig(out_path, dpi=160)
    plt.close(fig)
    return out_path
