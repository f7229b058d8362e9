# randomwalk/sampler.py
from __future__ import annotations

import math
from typing import Protocol, runtime_checkable

import numpy as np

from .errors import InvalidParameter


@runtime_checkable
class RandomSource(Protocol):
    """
    Provider of independent uniform draws in [0, 1).

    np.random.Generator and random.Random both satisfy this protocol.
    The caller owns it and threads it through every sampling call of a run.
    """

    def random(self) -> float:
        ...


def make_rng(seed: int | None = None) -> np.random.Generator:
    return np.random.default_rng(seed)


def _nonzero_uniform(rng: RandomSource) -> float:
    u = 0.0
    while u <= 0.0:
        u = float(rng.random())
    return u


def sample(mean: float, variance: float, rng: RandomSource) -> float:
    """
    Draw one Normal(mean, variance) deviate with the Box-Muller transform.

        z = sqrt(-2 ln u) * cos(2 pi v),   u, v ~ U(0, 1)

    Both u and v are redrawn until strictly positive so ln(u) is always finite.

    Parameters
    ----------
    mean : float
        Location of the distribution.
    variance : float
        Must be >= 0. variance == 0 is a point mass: `mean` is returned as is
        and no draws are consumed.
    rng : RandomSource
        Uniform source, e.g. np.random.default_rng(seed).
    """
    if variance < 0:
        raise InvalidParameter("variance must be >= 0")
    if variance == 0:
        return mean

    u = _nonzero_uniform(rng)
    v = _nonzero_uniform(rng)
    z = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
    return math.sqrt(variance) * z + mean


def sample_many(mean: float, variance: float, n: int, rng: RandomSource) -> np.ndarray:
    """n independent draws of sample(mean, variance, rng), shape (n,)."""
    if n < 0:
        raise InvalidParameter("n must be >= 0")
    if variance < 0:
        raise InvalidParameter("variance must be >= 0")

    out = np.empty(int(n), dtype=float)
    for i in range(int(n)):
        out[i] = sample(mean, variance, rng)
    return out
