# randomwalk/path.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class PathPoint:
    time_index: int
    value: float


def path_values(points: Sequence[PathPoint]) -> np.ndarray:
    return np.array([p.value for p in points], dtype=float)


def path_times(points: Sequence[PathPoint]) -> np.ndarray:
    return np.array([p.time_index for p in points], dtype=int)


def path_to_frame(points: Sequence[PathPoint]) -> pd.DataFrame:
    """One row per point, columns (time_index, value), in time order."""
    return pd.DataFrame(
        {"time_index": path_times(points), "value": path_values(points)},
        columns=["time_index", "value"],
    )


def find_gaps(points: Sequence[PathPoint]) -> list[tuple[int, int]]:
    """
    Return (before, after) time indices for every place where consecutive
    points are not contiguous, e.g. around a jump.
    """
    gaps = []
    for prev, nxt in zip(points, points[1:]):
        if nxt.time_index - prev.time_index > 1:
            gaps.append((prev.time_index, nxt.time_index))
    return gaps
