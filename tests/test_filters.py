"""Test the sliding lowpass and speed change.

Run: uv run pytest tests/test_filters.py

Key test: change_speed(1.0) gives back the input.
"""

import numpy as np
import os
import pytest
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from explosion.engine.buffer import SampleBuffer, allocate
from explosion.engine.filters import (
    change_speed, change_speed_in_place, interpolate, sliding_low_pass,
    sliding_low_pass_in_place,
)
from explosion.engine.ops import white_noise
from explosion.engine.params import SR


def make_noise(n=SR // 2, seed=3):
    return white_noise(n, np.random.default_rng(seed))


def reference_low_pass(x, alpha1, alpha2):
    n = len(x)
    out = np.zeros(n)
    out[0] = x[0]
    for i in range(1, n):
        alpha = (alpha1 + (i / n) * (alpha2 - alpha1)) ** 2
        out[i] = out[i - 1] + alpha * (x[i] - out[i - 1])
    return out


def hf_energy(x):
    """Energy of the first difference: a crude high-frequency meter."""
    return np.mean(np.diff(x) ** 2)


# ---------------------------------------------------------------------------
# Sliding lowpass
# ---------------------------------------------------------------------------
def test_low_pass_matches_recurrence():
    noise = make_noise(200)
    out = sliding_low_pass(noise, 0.9, 0.1)
    assert np.allclose(out.samples, reference_low_pass(noise.samples, 0.9, 0.1))


def test_low_pass_keeps_length_and_source():
    noise = make_noise(1000)
    before = noise.samples.copy()
    out = sliding_low_pass(noise, 0.5, 0.2)
    assert out.length == noise.length
    assert out is not noise
    assert np.array_equal(noise.samples, before)


def test_low_pass_extremes():
    noise = make_noise(500)
    # alpha 1 passes everything through
    assert np.allclose(sliding_low_pass(noise, 1.0, 1.0).samples, noise.samples)
    # alpha 0 holds the first sample forever
    held = sliding_low_pass(noise, 0.0, 0.0).samples
    assert np.allclose(held, noise.samples[0])


def test_low_pass_darkens_noise():
    noise = make_noise()
    bright = sliding_low_pass(noise, 0.9, 0.9)
    dark = sliding_low_pass(noise, 0.3, 0.3)
    assert hf_energy(dark.samples) < hf_energy(bright.samples) < hf_energy(noise.samples)


def test_low_pass_sweep_darkens_toward_end():
    noise = make_noise()
    out = sliding_low_pass(noise, 0.9, 0.2).samples
    quarter = len(out) // 4
    assert hf_energy(out[-quarter:]) < hf_energy(out[:quarter])


def test_low_pass_empty():
    out = sliding_low_pass(allocate(0), 0.5, 0.5)
    assert out.length == 0


def test_low_pass_in_place():
    noise = make_noise(300)
    expected = reference_low_pass(noise.samples, 0.5, 0.5)
    sliding_low_pass_in_place(noise, 0.5, 0.5)
    assert noise.length == 300
    assert np.allclose(noise.samples, expected)


# ---------------------------------------------------------------------------
# Interpolation
# ---------------------------------------------------------------------------
def test_interpolate_line():
    assert np.isclose(interpolate(0.5, 0.0, 0.0, 1.0, 2.0), 1.0)
    assert np.isclose(interpolate(2.25, 2.0, 1.0, 3.0, -1.0), 0.5)


def test_interpolate_coincident_points_average():
    assert interpolate(3.0, 3.0, 1.0, 3.0, 5.0) == 3.0
    assert interpolate(3.0, 3.0, 1.0, 3.001, 5.0) == 3.0


# ---------------------------------------------------------------------------
# Speed change
# ---------------------------------------------------------------------------
def test_change_speed_unity_is_identity():
    noise = make_noise(5000)
    out = change_speed(noise, 1.0)
    assert out.length == noise.length
    assert np.allclose(out.samples, noise.samples)


def test_change_speed_lengths():
    noise = make_noise(1000)
    assert change_speed(noise, 2.0).length == 500
    assert change_speed(noise, 4.0).length == 250
    assert change_speed(noise, 0.5).length == 2000
    assert change_speed(noise, 0.25).length == 4000


def test_change_speed_slow_ramp_interpolates():
    n = 100
    ramp = SampleBuffer.from_array(np.arange(n, dtype=np.float64))
    out = change_speed(ramp, 0.5).samples
    assert len(out) == 2 * n
    # Half speed: every other output sample lands between two inputs
    assert np.allclose(out[:2 * n - 1], np.arange(2 * n - 1) / 2.0)
    # Last sample reads past the end of the ramp: clamped to the last input
    assert out[-1] == n - 1
    assert np.all(np.isfinite(out))


def test_change_speed_fast_decimates():
    ramp = SampleBuffer.from_array(np.arange(100, dtype=np.float64))
    out = change_speed(ramp, 2.0).samples
    assert np.allclose(out, np.arange(0, 100, 2))


def test_change_speed_degenerate():
    assert change_speed(allocate(0), 2.0).length == 0
    assert change_speed(SampleBuffer.from_array([1.0, 2.0]), 10.0).length == 0
    with pytest.raises(ValueError):
        change_speed(make_noise(10), 0.0)
    with pytest.raises(ValueError):
        change_speed(make_noise(10), -1.0)


def test_change_speed_in_place():
    noise = make_noise(1000)
    first = noise.samples[0]
    change_speed_in_place(noise, 4.0)
    assert noise.length == 250
    assert noise.capacity == 250
    assert noise.samples[0] == first
