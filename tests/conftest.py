import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest


class ScriptedRandomSource:
    """Replays a fixed list of uniforms, cycling when exhausted."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        v = self.values[self.calls % len(self.values)]
        self.calls += 1
        return v


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def scripted():
    return ScriptedRandomSource
