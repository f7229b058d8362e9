"""Tests for the Brownian-bridge interpolation."""

import logging
import math

import numpy as np
import pytest

from randomwalk import (
    BridgeParameters,
    InvalidParameter,
    bridge_moments,
    generate_interpolated_walk,
    make_rng,
)
from randomwalk.bridge import in_snap_window, step_bridge
from randomwalk.path import path_values

U_ONE = math.exp(-0.5)
# v = 1/4 gives cos(pi/2) ~ 6e-17: each draw lands on the mean
Z_ZERO = [0.5, 0.25]


class TestBridgeMoments:

    def test_symmetric_midpoint(self):
        mean, var = bridge_moments(0.0, 0.0, 5.0, 10.0, 5.0, 1.0)
        assert mean == pytest.approx(2.5)
        assert var == pytest.approx(2.5)

    def test_matches_bridge_closed_form(self):
        x0, t0, a, A, t, sigma = 1.0, 0.0, 4.0, 4.0, 1.0, 2.0
        mean, var = bridge_moments(x0, t0, a, A, t, sigma)
        assert mean == pytest.approx(x0 + (a - x0) * (t - t0) / (A - t0))
        assert var == pytest.approx(sigma**2 * (t - t0) * (A - t) / (A - t0))

    @pytest.mark.parametrize("t", [9.0, 10.0, 11.0])
    def test_snap_window(self, t):
        assert bridge_moments(0.0, 0.0, 5.0, 10.0, t, 0.3) == (5.0, 0.0)

    def test_snap_sample_is_exact(self, rng):
        assert step_bridge(1.0, 8.0, -2.5, 10.0, 9.0, 0.3, rng) == -2.5

    def test_in_snap_window(self):
        assert in_snap_window(299, 300)
        assert in_snap_window(301, 300)
        assert not in_snap_window(298, 300)
        assert not in_snap_window(302, 300)

    def test_non_positive_sigma_raises(self):
        with pytest.raises(InvalidParameter, match="sigma"):
            bridge_moments(0.0, 0.0, 5.0, 10.0, 5.0, 0.0)

    def test_non_positive_anchor_time_raises(self):
        with pytest.raises(InvalidParameter, match="anchor_time"):
            bridge_moments(0.0, 0.0, 5.0, 0.0, 1.0, 1.0)

    def test_t_not_after_t0_raises(self):
        with pytest.raises(InvalidParameter, match="t0"):
            bridge_moments(0.0, 3.0, 5.0, 10.0, 3.0, 1.0)

    def test_t_past_anchor_raises(self):
        with pytest.raises(InvalidParameter, match="past the anchor"):
            bridge_moments(0.0, 0.0, 5.0, 10.0, 12.0, 1.0)


class TestBridgeParameters:

    def test_zero_anchor_time_raises(self):
        with pytest.raises(InvalidParameter, match="anchor_time"):
            BridgeParameters(start_value=0.0, volatility=0.3, step_count=10, anchor_value=5.0, anchor_time=0)

    def test_zero_volatility_raises(self):
        with pytest.raises(InvalidParameter, match="volatility"):
            BridgeParameters(start_value=0.0, volatility=0.0, step_count=10, anchor_value=5.0, anchor_time=5)

    def test_anchor_in_range(self):
        assert BridgeParameters(0.0, 0.3, 598, 5.0, 300).anchor_in_range
        assert BridgeParameters(0.0, 0.3, 10, 5.0, 11).anchor_in_range
        assert not BridgeParameters(0.0, 0.3, 10, 5.0, 50).anchor_in_range


class TestInterpolatedWalk:

    def test_hits_anchor_in_snap_window(self, rng):
        params = BridgeParameters(start_value=0, volatility=0.3, step_count=598, anchor_value=5, anchor_time=300)
        points = generate_interpolated_walk(params, rng)
        assert len(points) == 598
        for p in points:
            if in_snap_window(p.time_index + 1, 300):
                assert p.value == 5.0
        assert points[299].value == 5.0
        assert points[300].value == 5.0

    def test_snap_window_is_on_next_time(self, rng):
        params = BridgeParameters(start_value=0, volatility=0.3, step_count=598, anchor_value=5, anchor_time=300)
        points = generate_interpolated_walk(params, rng)
        pinned = [p.time_index for p in points if p.value == 5.0]
        assert pinned == [298, 299, 300]

    def test_step_after_window_is_unconditioned(self, scripted):
        # z = -1: the first step past the window moves 0.3 below the anchor
        params = BridgeParameters(start_value=0, volatility=0.3, step_count=302, anchor_value=5, anchor_time=300)
        points = generate_interpolated_walk(params, scripted([U_ONE, 0.5]))
        assert points[300].value == 5.0
        assert points[301].value == pytest.approx(4.7)

    def test_pinning_is_logged(self, rng, caplog):
        caplog.set_level(logging.DEBUG, logger="randomwalk.bridge")
        params = BridgeParameters(start_value=0, volatility=0.3, step_count=20, anchor_value=5, anchor_time=10)
        generate_interpolated_walk(params, rng)
        pinned = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Pinned")]
        assert pinned == [
            "Pinned t=9 to anchor 5.0000",
            "Pinned t=10 to anchor 5.0000",
            "Pinned t=11 to anchor 5.0000",
        ]

    def test_invalid_anchor_time_raises(self, rng):
        with pytest.raises(InvalidParameter):
            generate_interpolated_walk(
                BridgeParameters(start_value=0, volatility=0.3, step_count=598, anchor_value=5, anchor_time=0),
                rng,
            )

    def test_follows_bridge_mean(self, scripted):
        # with z ~ 0 every point is the bridge mean: a straight line to the anchor
        params = BridgeParameters(start_value=0.0, volatility=1.0, step_count=8, anchor_value=10.0, anchor_time=10)
        points = generate_interpolated_walk(params, scripted(Z_ZERO))
        np.testing.assert_allclose(path_values(points), np.arange(1.0, 9.0), atol=1e-9)

    def test_free_walk_after_anchor(self, scripted):
        params = BridgeParameters(start_value=0.0, volatility=1.0, step_count=5, anchor_value=0.0, anchor_time=2)
        points = generate_interpolated_walk(params, scripted([U_ONE, 0.5]))
        np.testing.assert_allclose(path_values(points), [0.0, 0.0, 0.0, -1.0, -2.0])

    def test_anchor_beyond_range(self, scripted):
        params = BridgeParameters(start_value=0.0, volatility=1.0, step_count=5, anchor_value=100.0, anchor_time=100)
        points = generate_interpolated_walk(params, scripted(Z_ZERO))
        x = path_values(points)
        assert len(points) == 5
        assert np.all(np.diff(x) > 0)
        assert np.all(x < 100.0)

    def test_time_indices_contiguous(self, rng):
        params = BridgeParameters(0.0, 0.3, 50, 5.0, 20)
        assert [p.time_index for p in generate_interpolated_walk(params, rng)] == list(range(50))

    def test_deterministic_under_seed(self):
        params = BridgeParameters(0.0, 0.3, 598, 5.0, 300)
        assert generate_interpolated_walk(params, make_rng(8)) == generate_interpolated_walk(params, make_rng(8))
