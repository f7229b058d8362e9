# randomwalk/walk.py
from __future__ import annotations

import logging
from typing import Optional

from .errors import InvalidParameter
from .params import JumpParameters, WalkParameters
from .path import PathPoint
from .sampler import RandomSource, sample

log = logging.getLogger(__name__)


def step(x0: float, delta_time: float, sigma: float, rng: RandomSource) -> float:
    """
    One Wiener-process increment:

        X_{t + dt} ~ Normal(X_t, dt * sigma^2)
    """
    if delta_time <= 0:
        raise InvalidParameter("delta_time must be > 0")
    if sigma < 0:
        raise InvalidParameter("sigma must be >= 0")
    return sample(x0, delta_time * sigma * sigma, rng)


def generate_simple_walk(params: WalkParameters, rng: RandomSource) -> tuple[PathPoint, ...]:
    """
    Unit-step random walk from params.start_value.

    Returns
    -------
    tuple of PathPoint, time indices 0 .. step_count-1
    """
    sigma = float(params.volatility)
    x = float(params.start_value)

    points = []
    for i in range(int(params.step_count)):
        x = step(x, 1.0, sigma, rng)
        points.append(PathPoint(i, x))

    log.debug("Simple walk: %d points from x0=%.4f (sigma=%.4f)", len(points), params.start_value, sigma)
    return tuple(points)


def reflect(x: float, bound: Optional[float]) -> float:
    """
    Boundary rule of the jump walk: if |x| > bound then x = bound - x.

    This is not a mirror around zero and the result is not re-checked, so it
    can still land outside [-bound, bound].
    """
    if bound is not None and abs(x) > bound:
        return bound - x
    return x


def generate_jump_walk(params: JumpParameters, rng: RandomSource) -> tuple[PathPoint, ...]:
    """
    Unit-step walk except at params.jump_start_index, where a single step
    covers params.jump_duration time units.

    The jump consumes jump_duration loop indices: its point is labelled
    jump_start_index + jump_duration and the loop resumes after it, so
    indices in [jump_start_index, jump_start_index + jump_duration) carry
    no point. The loop stops at step_count; only the jump landing can sit
    at or past it.
    """
    sigma = float(params.volatility)
    jump_at = int(params.jump_start_index)
    duration = int(params.jump_duration)
    step_count = int(params.step_count)
    x = float(params.start_value)

    points = []
    i = 0
    while i < step_count:
        if i == jump_at:
            stepped = step(x, float(duration), sigma, rng)
            x = reflect(stepped, params.bound)
            if x != stepped:
                log.debug("Jump value %.4f outside bound %.4f, reflected to %.4f", stepped, params.bound, x)
            i += duration
        else:
            x = step(x, 1.0, sigma, rng)

        points.append(PathPoint(i, x))
        i += 1

    log.debug(
        "Jump walk: %d points, gap between %s and %d",
        len(points),
        params.gap_before_index,
        params.gap_after_index,
    )
    return tuple(points)
