# etudes_convergence.py
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable, Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from scipy import stats

from randomwalk.bridge import in_snap_window
from randomwalk.engine import replicate_paths
from randomwalk.errors import InvalidParameter
from randomwalk.params import BridgeParameters, WalkVariant
from randomwalk.sampler import make_rng, sample_many

log = logging.getLogger(__name__)


# ============================================================
# Global plotting style (small fonts)
# ============================================================

DEFAULT_FIGSIZE = (4.5, 2.6)   # width, height in inches
FONT_BASE = 6                 # base font size for axes/ticks

# Derived sizes
TITLE_SIZE = FONT_BASE + 2
LABEL_SIZE = FONT_BASE + 1
TICK_SIZE = FONT_BASE
LEGEND_SIZE = FONT_BASE

GRID_LW = 0.4
LINE_LW = 1.0
MARKER_SIZE = 4


def _apply_small_style(ax: plt.Axes) -> None:
    """Apply consistent small-font styling to current axes."""
    ax.title.set_fontsize(TITLE_SIZE)
    ax.xaxis.label.set_size(LABEL_SIZE)
    ax.yaxis.label.set_size(LABEL_SIZE)
    ax.tick_params(axis="both", which="both", labelsize=TICK_SIZE)
    ax.grid(True, which="both", linestyle="--", linewidth=GRID_LW, alpha=0.8)


def _new_fig(figsize: Optional[tuple] = None) -> plt.Figure:
    fig = plt.figure(figsize=figsize or DEFAULT_FIGSIZE, dpi=130)
    return fig


# ============================
# Study 1: Sampler moments vs N
# ============================

@dataclass(frozen=True)
class MomentNStudyResult:
    N_grid: np.ndarray              # shape (m,)
    means: np.ndarray               # shape (m,)
    variances: np.ndarray           # shape (m,)
    abs_mean_error: np.ndarray      # |mean - target_mean|
    abs_var_error: np.ndarray       # |variance - target_variance|
    scaled_mean_error: np.ndarray   # abs_mean_error * sqrt(N)
    scaled_var_error: np.ndarray    # abs_var_error * sqrt(N)
    target_mean: float
    target_variance: float
    seed: int

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "N": self.N_grid,
                "mean": self.means,
                "variance": self.variances,
                "abs_mean_error": self.abs_mean_error,
                "abs_var_error": self.abs_var_error,
                "scaled_mean_error": self.scaled_mean_error,
                "scaled_var_error": self.scaled_var_error,
            }
        )


def study_sampler_moments_vs_N(
    mean: float,
    variance: float,
    N_grid: Iterable[int],
    seed: int = 1,
) -> MomentNStudyResult:
    """
    For a fixed seed, draw N Box–Muller deviates for each N in N_grid and compare
    the empirical mean/variance with the targets.

    Theory: errors shrink like 1/sqrt(N), so error * sqrt(N) should be roughly
    stable for large N.
    """
    N_list = sorted(set(int(n) for n in N_grid))
    if len(N_list) == 0:
        raise InvalidParameter("N_grid is empty")
    if any(n < 2 for n in N_list):
        raise InvalidParameter("All N must be >= 2")

    m = len(N_list)
    means = np.empty(m, dtype=float)
    variances = np.empty(m, dtype=float)

    for i, N in enumerate(N_list):
        x = sample_many(mean, variance, N, make_rng(int(seed)))
        means[i] = float(np.mean(x))
        variances[i] = float(np.var(x, ddof=1))
        log.info("Sampler study N=%d: mean=%.6f var=%.6f", N, means[i], variances[i])

    sqrt_N = np.sqrt(np.array(N_list, dtype=float))
    abs_mean_error = np.abs(means - float(mean))
    abs_var_error = np.abs(variances - float(variance))

    return MomentNStudyResult(
        N_grid=np.array(N_list, dtype=int),
        means=means,
        variances=variances,
        abs_mean_error=abs_mean_error,
        abs_var_error=abs_var_error,
        scaled_mean_error=abs_mean_error * sqrt_N,
        scaled_var_error=abs_var_error * sqrt_N,
        target_mean=float(mean),
        target_variance=float(variance),
        seed=int(seed),
    )


def plot_error_vs_N(
    res: MomentNStudyResult,
    title: Optional[str] = None,
    figsize: Optional[tuple] = None,
) -> plt.Figure:
    """
    Plot |mean error| and |variance error| vs N (log-log).
    Expect approx O(1/sqrt(N)).
    """
    fig = _new_fig(figsize)
    ax = plt.gca()

    ax.plot(res.N_grid, res.abs_mean_error, marker="o", linewidth=LINE_LW, markersize=MARKER_SIZE, label="|mean error|")
    ax.plot(res.N_grid, res.abs_var_error, marker="o", linewidth=LINE_LW, markersize=MARKER_SIZE, label="|variance error|")
    ax.set_xscale("log")
    ax.set_yscale("log")
    ax.set_xlabel("N (log)")
    ax.set_ylabel("Absolute error (log)")
    ax.legend(fontsize=LEGEND_SIZE, frameon=False)

    if title is None:
        title = f"Sampler error vs N (seed={res.seed})"
    ax.set_title(title)

    _apply_small_style(ax)
    fig.tight_layout(pad=0.6)
    return fig


def plot_scaled_error_vs_N(
    res: MomentNStudyResult,
    title: Optional[str] = None,
    figsize: Optional[tuple] = None,
) -> plt.Figure:
    """
    Plot error * sqrt(N) vs N (log x).
    For large N, should be ~flat if CLT scaling holds.
    """
    fig = _new_fig(figsize)
    ax = plt.gca()

    ax.plot(res.N_grid, res.scaled_mean_error, marker="o", linewidth=LINE_LW, markersize=MARKER_SIZE, label="mean")
    ax.plot(res.N_grid, res.scaled_var_error, marker="o", linewidth=LINE_LW, markersize=MARKER_SIZE, label="variance")
    ax.set_xscale("log")
    ax.set_xlabel("N (log)")
    ax.set_ylabel("|error| * sqrt(N)")
    ax.legend(fontsize=LEGEND_SIZE, frameon=False)

    if title is None:
        title = f"Scaled sampler error vs N (seed={res.seed})"
    ax.set_title(title)

    _apply_small_style(ax)
    fig.tight_layout(pad=0.6)
    return fig


# ============================
# Study 2: Normality of Box–Muller output
# ============================

@dataclass(frozen=True)
class NormalityStudyResult:
    draws: np.ndarray   # shape (N,)
    ks_stat: float
    p_value: float
    mean: float
    variance: float
    N: int
    seed: int


def study_sampler_normality(
    mean: float = 0.0,
    variance: float = 1.0,
    N: int = 20_000,
    seed: int = 1,
) -> NormalityStudyResult:
    """
    Kolmogorov–Smirnov test of N sampler draws against Normal(mean, variance).
    """
    if variance <= 0:
        raise InvalidParameter("variance must be > 0 for a normality test")
    if N < 2:
        raise InvalidParameter("N must be >= 2")

    draws = sample_many(mean, variance, int(N), make_rng(int(seed)))
    ks = stats.kstest(draws, "norm", args=(float(mean), float(np.sqrt(variance))))
    log.info("KS test N=%d: stat=%.5f p=%.4f", N, ks.statistic, ks.pvalue)

    return NormalityStudyResult(
        draws=draws,
        ks_stat=float(ks.statistic),
        p_value=float(ks.pvalue),
        mean=float(mean),
        variance=float(variance),
        N=int(N),
        seed=int(seed),
    )


def plot_sample_histogram(
    res: NormalityStudyResult,
    bins: int = 50,
    title: Optional[str] = None,
    figsize: Optional[tuple] = None,
) -> plt.Figure:
    """Histogram of the draws with the target Normal density."""
    fig = _new_fig(figsize)
    ax = plt.gca()

    ax.hist(res.draws, bins=int(bins), density=True, alpha=0.85)
    sd = float(np.sqrt(res.variance))
    grid = np.linspace(res.mean - 4.0 * sd, res.mean + 4.0 * sd, 400)
    ax.plot(grid, stats.norm.pdf(grid, loc=res.mean, scale=sd), linestyle="--", linewidth=LINE_LW)

    ax.set_xlabel("Sample value")
    ax.set_ylabel("Density")

    if title is None:
        title = f"Box–Muller draws (N={res.N:,}) | KS p={res.p_value:.3f}"
    ax.set_title(title)

    _apply_small_style(ax)
    fig.tight_layout(pad=0.6)
    return fig


# ============================
# Study 3: Bridge spread across replications
# ============================

def bridge_theoretical_moments(params: BridgeParameters) -> tuple[np.ndarray, np.ndarray]:
    """
    Mean and std of each generated point of the interpolated walk.

    Before the snap window the path is a Brownian bridge from (0, x0) to
    (A, a):  mean = x0 + (a - x0) t / A,  var = sigma^2 t (A - t) / A.
    Inside the window it is pinned. After the window it is a free walk
    restarted from a at time A + 1.
    """
    x0 = float(params.start_value)
    a = float(params.anchor_value)
    A = float(params.anchor_time)
    s2 = float(params.volatility) ** 2

    t = np.arange(1, int(params.step_count) + 1, dtype=float)
    mean = np.empty_like(t)
    var = np.empty_like(t)

    for k, tk in enumerate(t):
        if in_snap_window(tk, A):
            mean[k], var[k] = a, 0.0
        elif tk < A:
            mean[k] = x0 + (a - x0) * tk / A
            var[k] = s2 * tk * (A - tk) / A
        else:
            mean[k] = a
            var[k] = s2 * (tk - (A + 1.0))
    return mean, np.sqrt(var)


@dataclass(frozen=True)
class BridgeSpreadResult:
    time_index: np.ndarray      # shape (n_points,)
    mean_path: np.ndarray       # empirical mean across replications
    std_path: np.ndarray        # empirical std across replications
    theory_mean: np.ndarray
    theory_std: np.ndarray
    anchor_time: int
    anchor_value: float
    n_paths: int
    seed: int

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "time_index": self.time_index,
                "mean": self.mean_path,
                "std": self.std_path,
                "theory_mean": self.theory_mean,
                "theory_std": self.theory_std,
            }
        )


def study_bridge_spread(
    params: BridgeParameters,
    n_paths: int = 500,
    seed: int = 1,
) -> BridgeSpreadResult:
    """
    Replicate the interpolated walk and compare the per-index spread with the
    Brownian-bridge theory. The spread must collapse to 0 in the snap window.
    """
    if n_paths < 2:
        raise InvalidParameter("n_paths must be >= 2")

    values = replicate_paths(WalkVariant.BRIDGE, params, n_paths=int(n_paths), seed=int(seed))
    theory_mean, theory_std = bridge_theoretical_moments(params)

    return BridgeSpreadResult(
        time_index=np.arange(values.shape[1], dtype=int),
        mean_path=values.mean(axis=0),
        std_path=values.std(axis=0, ddof=1),
        theory_mean=theory_mean,
        theory_std=theory_std,
        anchor_time=int(params.anchor_time),
        anchor_value=float(params.anchor_value),
        n_paths=int(n_paths),
        seed=int(seed),
    )


def plot_bridge_spread(
    res: BridgeSpreadResult,
    title: Optional[str] = None,
    figsize: Optional[tuple] = None,
) -> plt.Figure:
    """Empirical mean +/- 2 std across replications, with the theoretical band dashed."""
    fig = _new_fig(figsize)
    ax = plt.gca()

    t = res.time_index
    ax.plot(t, res.mean_path, linewidth=LINE_LW, label="empirical mean")
    ax.fill_between(t, res.mean_path - 2.0 * res.std_path, res.mean_path + 2.0 * res.std_path, alpha=0.15)
    ax.plot(t, res.theory_mean + 2.0 * res.theory_std, linestyle="--", linewidth=LINE_LW, label="theory +/- 2 std")
    ax.plot(t, res.theory_mean - 2.0 * res.theory_std, linestyle="--", linewidth=LINE_LW)
    ax.axvline(res.anchor_time, linestyle=":", linewidth=LINE_LW)

    ax.set_xlabel("Time index")
    ax.set_ylabel("Value")
    ax.legend(fontsize=LEGEND_SIZE, frameon=False)

    if title is None:
        title = f"Bridge spread (n_paths={res.n_paths}, anchor {res.anchor_value:g} at t={res.anchor_time})"
    ax.set_title(title)

    _apply_small_style(ax)
    fig.tight_layout(pad=0.6)
    return fig
