# main_cli.py
import argparse
import logging
import sys
import time

import matplotlib.pyplot as plt

from randomwalk import (
    BridgeParameters,
    JumpParameters,
    WalkParameters,
    WalkVariant,
    generate_path,
    make_rng,
)

from utils import (
    print_block,
    fmt_path_summary,
    fmt_moment_result,
    moment_convergence_rows,
    print_convergence_table,
    plot_moment_convergence,
)

from etudes_convergence import (
    study_sampler_moments_vs_N,
    plot_error_vs_N,
    plot_scaled_error_vs_N,
    study_sampler_normality,
    plot_sample_histogram,
    study_bridge_spread,
    plot_bridge_spread,
)
from etudes_runtime import study_runtime_vs_steps, plot_runtime_analysis
from randomwalk.results import sample_moments
from randomwalk.sampler import sample_many

log = logging.getLogger(__name__)

# -------------------------
# Demo parameters
# -------------------------
SIMPLE_X0 = 0.0
SIMPLE_SIGMA = 0.5
SIMPLE_STEPS = 500

JUMP_START = 250
JUMP_DURATION = 100
JUMP_BOUND = 15.0

BRIDGE_SIGMA = 0.3
BRIDGE_ANCHOR_VALUE = 5.0
BRIDGE_ANCHOR_TIME = 300
BRIDGE_STEPS = 598

# Sampler study settings
N_LIST = [1_000, 2_000, 5_000, 10_000, 20_000, 50_000, 100_000]
BRIDGE_STUDY_PATHS = 300
RUNTIME_STEP_GRID = [100, 300, 1_000, 3_000, 10_000]


def _time_call(fn, *args, **kwargs):
    t0 = time.perf_counter()
    out = fn(*args, **kwargs)
    dt = time.perf_counter() - t0
    return out, dt


def build_params(variant: WalkVariant, steps=None, sigma=None):
    if variant == WalkVariant.SIMPLE:
        return WalkParameters(
            start_value=SIMPLE_X0,
            volatility=SIMPLE_SIGMA if sigma is None else sigma,
            step_count=SIMPLE_STEPS if steps is None else steps,
        )
    if variant == WalkVariant.JUMP:
        n = SIMPLE_STEPS if steps is None else steps
        return JumpParameters(
            start_value=SIMPLE_X0,
            volatility=SIMPLE_SIGMA if sigma is None else sigma,
            step_count=n,
            jump_start_index=min(JUMP_START, n // 2),
            jump_duration=JUMP_DURATION,
            bound=JUMP_BOUND,
        )
    return BridgeParameters(
        start_value=SIMPLE_X0,
        volatility=BRIDGE_SIGMA if sigma is None else sigma,
        step_count=BRIDGE_STEPS if steps is None else steps,
        anchor_value=BRIDGE_ANCHOR_VALUE,
        anchor_time=BRIDGE_ANCHOR_TIME,
    )


def run_paths(variants, seed: int, steps=None, sigma=None) -> None:
    print_block(f"RANDOM WALK PATHS (seed={seed})")
    for variant in variants:
        params = build_params(variant, steps=steps, sigma=sigma)
        points, dt = _time_call(generate_path, variant, params, make_rng(seed))
        print(f"{variant.value:>6}: {fmt_path_summary(points)} | time={dt:.4f}s")


def run_studies(seed: int, plots: bool) -> None:
    # -------------------------
    # PART A: Sampler convergence
    # -------------------------
    for mean, variance in [(0.0, 1.0), (5.0, 0.09)]:
        print_block(f"SAMPLER CONVERGENCE: Box–Muller vs target (mean={mean}, variance={variance})")

        rows = moment_convergence_rows(mean, variance, N_LIST, seed=seed)
        print_convergence_table(rows, mean, variance, label="Normal(mean, variance):")

        big = sample_moments(sample_many(mean, variance, N_LIST[-1], make_rng(seed)), mean, variance)
        print("Largest N:", fmt_moment_result(big))

        res_N = study_sampler_moments_vs_N(mean, variance, N_LIST, seed=seed)
        print(res_N.to_frame().to_string(index=False))

        if plots:
            plot_moment_convergence(rows, mean, title=f"Sample mean vs N (mean={mean}, variance={variance})")
            plot_error_vs_N(res_N)
            plot_scaled_error_vs_N(res_N)

    # -------------------------
    # PART B: Normality
    # -------------------------
    print_block("SAMPLER NORMALITY (Kolmogorov–Smirnov)")
    res_ks = study_sampler_normality(seed=seed)
    print(f"N={res_ks.N:,} | KS stat={res_ks.ks_stat:.5f} | p-value={res_ks.p_value:.4f}")
    if plots:
        plot_sample_histogram(res_ks)

    # -------------------------
    # PART C: Bridge spread
    # -------------------------
    print_block(f"BRIDGE SPREAD ({BRIDGE_STUDY_PATHS} replications)")
    bridge_params = build_params(WalkVariant.BRIDGE)
    res_bridge, dt = _time_call(study_bridge_spread, bridge_params, n_paths=BRIDGE_STUDY_PATHS, seed=seed)
    window = res_bridge.to_frame().iloc[BRIDGE_ANCHOR_TIME - 3:BRIDGE_ANCHOR_TIME + 2]
    print(window.to_string(index=False))
    print(f"Bridge study runtime = {dt:.4f}s")
    if plots:
        plot_bridge_spread(res_bridge)

    # -------------------------
    # PART D: Runtime
    # -------------------------
    print_block("RUNTIME vs STEP COUNT")
    res_rt = study_runtime_vs_steps(RUNTIME_STEP_GRID, seed=seed)
    print(res_rt.df.to_string(index=False))
    if plots:
        plot_runtime_analysis(res_rt)


def main():
    parser = argparse.ArgumentParser(description="Random walk sampling demo")
    parser.add_argument("--seed", type=int, default=1, help="Seed of the random source")
    parser.add_argument(
        "--variant",
        choices=[v.value for v in WalkVariant] + ["all"],
        default="all",
        help="Which generator to run",
    )
    parser.add_argument("--steps", type=int, default=None, help="Override the step count")
    parser.add_argument("--sigma", type=float, default=None, help="Override the volatility")
    parser.add_argument("--no-studies", action="store_true", help="Only generate paths")
    parser.add_argument("--no-plots", action="store_true", help="Do not open matplotlib windows")
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG-level logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    variants = list(WalkVariant) if args.variant == "all" else [WalkVariant(args.variant)]

    try:
        run_paths(variants, seed=args.seed, steps=args.steps, sigma=args.sigma)
        if not args.no_studies:
            run_studies(seed=args.seed, plots=not args.no_plots)
    except Exception:
        log.exception("Demo failed")
        sys.exit(1)

    if not args.no_plots and not args.no_studies:
        plt.show()


if __name__ == "__main__":
    main()
