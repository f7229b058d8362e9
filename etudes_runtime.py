# etudes_runtime.py
from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import List, Dict, Any

import pandas as pd
import matplotlib.pyplot as plt

from randomwalk.engine import generate_path
from randomwalk.errors import InvalidParameter
from randomwalk.params import BridgeParameters, JumpParameters, WalkParameters, WalkVariant
from randomwalk.sampler import make_rng

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeStudyResult:
    df: pd.DataFrame
    volatility: float
    seed: int


def _params_for(variant: WalkVariant, n_steps: int, volatility: float) -> WalkParameters:
    if variant == WalkVariant.JUMP:
        return JumpParameters(
            start_value=0.0,
            volatility=volatility,
            step_count=n_steps,
            jump_start_index=n_steps // 2,
            jump_duration=max(1, n_steps // 5),
        )
    if variant == WalkVariant.BRIDGE:
        return BridgeParameters(
            start_value=0.0,
            volatility=volatility,
            step_count=n_steps,
            anchor_value=5.0,
            anchor_time=max(1, n_steps // 2),
        )
    return WalkParameters(start_value=0.0, volatility=volatility, step_count=n_steps)


def study_runtime_vs_steps(
    step_grid: List[int],
    volatility: float = 0.5,
    seed: int = 1,
) -> RuntimeStudyResult:
    """
    Wall time of one path per generator (simple, jump, bridge) for each step count.

    Every generator consumes a fresh generator seeded with `seed`, so the three
    timings at a given step count draw the same uniforms.
    """
    if len(step_grid) == 0:
        raise InvalidParameter("step_grid is empty")
    if any(int(n) < 1 for n in step_grid):
        raise InvalidParameter("All step counts must be >= 1")

    rows: List[Dict[str, Any]] = []

    for n_steps in sorted(set(int(n) for n in step_grid)):
        row: Dict[str, Any] = {"n_steps": n_steps}
        for variant in WalkVariant:
            params = _params_for(variant, n_steps, float(volatility))
            rng = make_rng(int(seed))

            t0 = time.perf_counter()
            generate_path(variant, params, rng)
            row[f"time_{variant.value}_s"] = float(time.perf_counter() - t0)

        log.info(
            "Runtime n_steps=%d: simple=%.4fs jump=%.4fs bridge=%.4fs",
            n_steps,
            row["time_simple_s"],
            row["time_jump_s"],
            row["time_bridge_s"],
        )
        rows.append(row)

    df = pd.DataFrame(rows).sort_values("n_steps").reset_index(drop=True)
    return RuntimeStudyResult(df=df, volatility=float(volatility), seed=int(seed))


def plot_runtime_analysis(result: RuntimeStudyResult):
    """
    Single matplotlib figure:
      - X: step count (log)
      - Y: runtime per generator (log)
    """
    df = result.df
    n = df["n_steps"].values.astype(float)

    fig, ax = plt.subplots(figsize=(8, 5))

    for variant in WalkVariant:
        ax.plot(n, df[f"time_{variant.value}_s"].values, marker="o", linewidth=1, label=f"Runtime — {variant.value} (s)")

    ax.set_xscale("log")
    ax.set_yscale("log")
    ax.set_xlabel("Step count (log scale)")
    ax.set_ylabel("Runtime (seconds, log scale)")
    ax.grid(True, which="both", linestyle="--", linewidth=0.5)
    ax.legend(loc="best")

    ax.set_title(f"Runtime vs step count (sigma={result.volatility:g}, seed={result.seed})")
    fig.tight_layout()
    return fig
