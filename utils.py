# utils.py
import numpy as np
import matplotlib.pyplot as plt
import matplotlib as mpl

from randomwalk.path import find_gaps, path_values
from randomwalk.results import sample_moments
from randomwalk.sampler import make_rng, sample_many


# ---------------------------------------------------------------------
# Global Matplotlib style (safe defaults for CLI + saved figures)
# ---------------------------------------------------------------------
mpl.rcParams.update({
    "font.size": 9,
    "axes.titlesize": 10,
    "axes.labelsize": 9,
    "legend.fontsize": 8,
    "xtick.labelsize": 8,
    "ytick.labelsize": 8,
})


# ---------------------------------------------------------------------
# CLI helpers
# ---------------------------------------------------------------------
def print_block(title: str, width: int = 90) -> None:
    print("\n" + "=" * width)
    print(title)
    print("=" * width)


def fmt_moment_result(res) -> str:
    return (
        f"mean={res.mean:.6f} (target {res.target_mean:.6f}) | "
        f"var={res.variance:.6f} (target {res.target_variance:.6f}) | "
        f"SE={res.std_error:.6f} | "
        f"95% CI=[{res.ci_low:.6f}, {res.ci_high:.6f}] | "
        f"N={res.n:,}"
    )


def fmt_path_summary(points) -> str:
    if len(points) == 0:
        return "empty path"
    x = path_values(points)
    gaps = find_gaps(points)
    gap_txt = ", ".join(f"{a}->{b}" for a, b in gaps) if gaps else "none"
    return (
        f"points={len(points)} | "
        f"t=[{points[0].time_index}, {points[-1].time_index}] | "
        f"min={x.min():.4f} | max={x.max():.4f} | "
        f"last={x[-1]:.4f} | gaps: {gap_txt}"
    )


# ---------------------------------------------------------------------
# Sampler convergence table builder
# ---------------------------------------------------------------------
def moment_convergence_rows(mean, variance, N_list, seed=1):
    rows = []
    for i, N in enumerate(N_list):
        rng = make_rng(int(seed) + i)
        res = sample_moments(sample_many(mean, variance, int(N), rng), mean, variance)
        rows.append((int(N), float(res.mean), float(res.ci_low), float(res.ci_high), float(res.std_error), float(res.variance)))
    return rows


def print_convergence_table(rows, target_mean: float, target_variance: float, label: str) -> None:
    print(f"\n{label}")
    print(f"Target: mean={target_mean:.6f} | variance={target_variance:.6f}")
    for (N, m, lo, hi, se, var) in rows:
        inside = (lo <= target_mean <= hi)
        print(f"N={N:>7d} | mean={m:.6f} | SE={se:.6f} | CI=[{lo:.6f}, {hi:.6f}] | var={var:.6f} | target in CI? {inside}")


# ---------------------------------------------------------------------
# Plotting (Matplotlib), returns fig
# ---------------------------------------------------------------------
def plot_moment_convergence(rows, target_mean: float, title: str):
    """
    Empirical mean vs N with its CI band and the target mean.

    Returns:
        fig (matplotlib Figure)
    """
    N = np.array([r[0] for r in rows], dtype=float)
    m = np.array([r[1] for r in rows], dtype=float)
    lo = np.array([r[2] for r in rows], dtype=float)
    hi = np.array([r[3] for r in rows], dtype=float)

    fig, ax = plt.subplots(figsize=(6.0, 3.4), dpi=110)

    ax.plot(N, m, marker="o", linewidth=1.4, markersize=4, label="Box–Muller sample mean")
    ax.fill_between(N, lo, hi, alpha=0.12)
    ax.axhline(target_mean, linestyle="--", linewidth=1.2, label="Target mean")

    ax.set_xscale("log")
    ax.set_xlabel("Number of draws N (log scale)")
    ax.set_ylabel("Sample mean")
    ax.set_title(title)

    ax.grid(True, which="both", linestyle="--", linewidth=0.4, alpha=0.6)
    ax.legend(fontsize=6, frameon=False, loc="upper right")

    fig.tight_layout(pad=0.6)
    return fig
