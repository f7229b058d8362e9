# randomwalk/bridge.py
from __future__ import annotations

import logging

from .errors import InvalidParameter
from .params import BridgeParameters
from .path import PathPoint
from .sampler import RandomSource, sample
from .walk import step

log = logging.getLogger(__name__)

# Half-width (in time units) of the window around the anchor where the path
# is pinned to the anchor value instead of sampled.
SNAP_HALF_WIDTH = 1


def in_snap_window(t: float, anchor_time: float) -> bool:
    return abs(t - anchor_time) <= SNAP_HALF_WIDTH


def bridge_moments(
    x0: float,
    t0: float,
    anchor_value: float,
    anchor_time: float,
    t: float,
    sigma: float,
) -> tuple[float, float]:
    """
    Conditional law at time t of a Wiener process known to be x0 at t0 and
    anchor_value at anchor_time (t0 < t < anchor_time).

    Two Gaussian beliefs about X_t are combined by precision weighting:
      - forward from (t0, x0):                 precision p_f = 1 / ((t - t0) sigma^2)
      - backward from (anchor_time, anchor):   precision p_b = 1 / ((anchor_time - t) sigma^2)

        P        = p_f + p_b
        mean     = (x0 p_f + anchor_value p_b) / P
        variance = 1 / P

    Inside the snap window (|t - anchor_time| <= 1) the backward denominator
    goes to zero; the point is pinned and (anchor_value, 0.0) is returned.

    Returns
    -------
    (mean, variance)
    """
    if sigma <= 0:
        raise InvalidParameter("sigma must be > 0")
    if anchor_time <= 0:
        raise InvalidParameter("anchor_time must be > 0")
    if t <= t0:
        raise InvalidParameter("t must be > t0")

    if in_snap_window(t, anchor_time):
        return float(anchor_value), 0.0
    if t > anchor_time:
        raise InvalidParameter("t is past the anchor; the bridge no longer applies")

    s2 = sigma * sigma
    p_forward = 1.0 / ((t - t0) * s2)
    p_backward = 1.0 / ((anchor_time - t) * s2)
    precision = p_forward + p_backward

    mean = (x0 * p_forward + anchor_value * p_backward) / precision
    return mean, 1.0 / precision


def step_bridge(
    x0: float,
    t0: float,
    anchor_value: float,
    anchor_time: float,
    t: float,
    sigma: float,
    rng: RandomSource,
) -> float:
    mean, variance = bridge_moments(x0, t0, anchor_value, anchor_time, t, sigma)
    return sample(mean, variance, rng)


def generate_interpolated_walk(params: BridgeParameters, rng: RandomSource) -> tuple[PathPoint, ...]:
    """
    Walk conditioned to pass through (anchor_time, anchor_value).

    Point i is the value at time i+1:
      - pinned to anchor_value inside the snap window,
      - a bridge sample from (i, previous value) before the window,
      - an unconditioned unit step once time has passed the anchor.

    The snap window is taken on t = time_index + 1, not on time_index: for
    anchor_time 300 the pinned time indices are 298, 299 and 300, while 301
    is already an unconditioned step.
    """
    sigma = float(params.volatility)
    anchor_value = float(params.anchor_value)
    anchor_time = int(params.anchor_time)
    x = float(params.start_value)

    points = []
    for i in range(int(params.step_count)):
        t = i + 1
        if in_snap_window(t, anchor_time):
            x = anchor_value
            log.debug("Pinned t=%d to anchor %.4f", t, anchor_value)
        elif t < anchor_time:
            x = step_bridge(x, i, anchor_value, anchor_time, t, sigma, rng)
        else:
            x = step(x, 1.0, sigma, rng)
        points.append(PathPoint(i, x))

    if not params.anchor_in_range:
        log.debug("Anchor time %d is beyond the generated range (%d steps)", anchor_time, params.step_count)
    log.debug("Interpolated walk: %d points toward %.4f at t=%d", len(points), anchor_value, anchor_time)
    return tuple(points)
