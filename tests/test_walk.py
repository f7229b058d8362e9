"""Tests for the unit-step walk and the one-step increment."""

import dataclasses
import math

import numpy as np
import pytest

from randomwalk import (
    InvalidParameter,
    WalkParameters,
    generate_simple_walk,
    make_rng,
    step,
)
from randomwalk.path import path_values

U_ONE = math.exp(-0.5)


class TestStep:

    def test_zero_sigma_keeps_value(self, rng):
        assert step(4.5, 1.0, 0.0, rng) == 4.5

    def test_variance_scales_with_delta_time(self, scripted):
        # z = -1 so the move is -sqrt(dt) * sigma
        assert step(0.0, 9.0, 2.0, scripted([U_ONE, 0.5])) == pytest.approx(-6.0)

    @pytest.mark.parametrize("dt", [0.0, -1.0])
    def test_non_positive_delta_time_raises(self, rng, dt):
        with pytest.raises(InvalidParameter, match="delta_time"):
            step(0.0, dt, 1.0, rng)

    def test_negative_sigma_raises(self, rng):
        with pytest.raises(InvalidParameter, match="sigma"):
            step(0.0, 1.0, -0.1, rng)


class TestWalkParameters:

    def test_negative_step_count_raises(self):
        with pytest.raises(InvalidParameter, match="step_count"):
            WalkParameters(start_value=0.0, volatility=1.0, step_count=-1)

    def test_negative_volatility_raises(self):
        with pytest.raises(InvalidParameter, match="volatility"):
            WalkParameters(start_value=0.0, volatility=-1.0, step_count=3)

    def test_frozen(self):
        p = WalkParameters(start_value=0.0, volatility=1.0, step_count=3)
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.step_count = 4


class TestSimpleWalk:

    def test_zero_volatility_is_constant(self, rng):
        points = generate_simple_walk(WalkParameters(start_value=5, volatility=0, step_count=10), rng)
        assert len(points) == 10
        assert all(p.value == 5 for p in points)
        assert [p.time_index for p in points] == list(range(10))

    def test_empty_walk(self, rng):
        assert generate_simple_walk(WalkParameters(0.0, 1.0, 0), rng) == ()

    def test_negative_step_count_raises(self, rng):
        with pytest.raises(InvalidParameter):
            generate_simple_walk(WalkParameters(start_value=0.0, volatility=0.5, step_count=-1), rng)

    def test_threads_previous_value(self, scripted):
        points = generate_simple_walk(WalkParameters(0.0, 1.0, 3), scripted([U_ONE, 0.5]))
        np.testing.assert_allclose(path_values(points), [-1.0, -2.0, -3.0])
        assert points[0].time_index == 0

    def test_returns_immutable_sequence(self, rng):
        points = generate_simple_walk(WalkParameters(0.0, 1.0, 4), rng)
        assert isinstance(points, tuple)
        with pytest.raises(dataclasses.FrozenInstanceError):
            points[0].value = 1.0

    def test_deterministic_under_seed(self):
        params = WalkParameters(start_value=0.0, volatility=0.5, step_count=200)
        assert generate_simple_walk(params, make_rng(3)) == generate_simple_walk(params, make_rng(3))

    def test_different_seeds_differ(self):
        params = WalkParameters(start_value=0.0, volatility=0.5, step_count=50)
        assert generate_simple_walk(params, make_rng(1)) != generate_simple_walk(params, make_rng(2))

    def test_increment_variance(self):
        sigma = 0.5
        points = generate_simple_walk(WalkParameters(0.0, sigma, 20_000), make_rng(9))
        dx = np.diff(np.concatenate([[0.0], path_values(points)]))
        assert dx.var(ddof=1) == pytest.approx(sigma**2, rel=0.05)
        assert abs(dx.mean()) < 5.0 * sigma / math.sqrt(dx.size)
