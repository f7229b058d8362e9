# randomwalk/results.py
from __future__ import annotations

from dataclasses import dataclass, asdict
import math
import numpy as np
import pandas as pd


@dataclass(frozen=True)
class MomentResult:
    """Empirical moments of a batch of draws against their target values."""
    mean: float
    variance: float
    std_error: float
    ci_low: float
    ci_high: float
    n: int
    target_mean: float
    target_variance: float

    @property
    def mean_in_ci(self) -> bool:
        return self.ci_low <= self.target_mean <= self.ci_high

    def to_dict(self):
        return asdict(self)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame([self.to_dict()])


def confidence_interval(x: np.ndarray) -> tuple[float, float, float, float]:
    """Returns (mean, std_error, ci_low, ci_high) for a two-sided 95% normal approx CI."""
    x = np.asarray(x, dtype=float).reshape(-1)
    n = x.size
    if n < 2:
        m = float(x.mean()) if n == 1 else float("nan")
        return m, float("nan"), float("nan"), float("nan")
    m = float(np.mean(x))
    s = float(np.std(x, ddof=1))
    se = s / math.sqrt(n)
    z = 1.959963984540054  # N^{-1}(0.975)
    return m, se, m - z * se, m + z * se


def sample_moments(x: np.ndarray, target_mean: float, target_variance: float) -> MomentResult:
    x = np.asarray(x, dtype=float).reshape(-1)
    mean, se, lo, hi = confidence_interval(x)
    var = float(np.var(x, ddof=1)) if x.size > 1 else float("nan")
    return MomentResult(
        mean=mean,
        variance=var,
        std_error=se,
        ci_low=lo,
        ci_high=hi,
        n=int(x.size),
        target_mean=float(target_mean),
        target_variance=float(target_variance),
    )
