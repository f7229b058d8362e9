# randomwalk/engine.py
from __future__ import annotations

import logging
from typing import Union

import numpy as np

from .bridge import generate_interpolated_walk
from .errors import InvalidParameter
from .params import BridgeParameters, JumpParameters, WalkParameters, WalkVariant
from .path import PathPoint, path_values
from .sampler import RandomSource, make_rng
from .walk import generate_jump_walk, generate_simple_walk

log = logging.getLogger(__name__)

_GENERATORS = {
    WalkVariant.SIMPLE: (WalkParameters, generate_simple_walk),
    WalkVariant.JUMP: (JumpParameters, generate_jump_walk),
    WalkVariant.BRIDGE: (BridgeParameters, generate_interpolated_walk),
}


def _variant(variant: Union[WalkVariant, str]) -> WalkVariant:
    try:
        return WalkVariant(variant)
    except ValueError:
        raise InvalidParameter(f"Unknown walk variant: {variant!r}") from None


def generate_path(
    variant: Union[WalkVariant, str],
    params: WalkParameters,
    rng: RandomSource,
) -> tuple[PathPoint, ...]:
    """
    Single entry point for the three generation modes.

    The parameter object must match the variant: WalkParameters for
    "simple", JumpParameters for "jump", BridgeParameters for "bridge".
    """
    v = _variant(variant)
    expected, generator = _GENERATORS[v]

    # JumpParameters / BridgeParameters are WalkParameters too, so SIMPLE
    # accepts any of them and only reads the base fields.
    if not isinstance(params, expected):
        raise InvalidParameter(
            f"{v.value} walk needs {expected.__name__}, got {type(params).__name__}"
        )
    return generator(params, rng)


def replicate_paths(
    variant: Union[WalkVariant, str],
    params: WalkParameters,
    n_paths: int,
    seed: int | None = None,
) -> np.ndarray:
    """
    Monte Carlo replications of one generator.

    Replication i uses its own generator seeded with seed + i, so every path is
    reproducible on its own and replications share no state.

    Returns
    -------
    values : (n_paths, n_points)
    """
    if n_paths <= 0:
        raise InvalidParameter("n_paths must be >= 1")

    v = _variant(variant)
    rows = []
    for i in range(int(n_paths)):
        rng = make_rng(None if seed is None else int(seed) + i)
        rows.append(path_values(generate_path(v, params, rng)))

    n_points = len(rows[0])
    log.info("Replicated %d %s paths (%d points each, seed=%s)", n_paths, v.value, n_points, seed)
    return np.vstack(rows) if n_points else np.empty((int(n_paths), 0), dtype=float)
