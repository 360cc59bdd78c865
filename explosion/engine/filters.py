"""Sliding one-pole lowpass and linear-interpolation speed change.

Both produce a new buffer; the *_in_place variants swap the result's storage
into the source buffer.
"""

import numpy as np
from numba import njit

from explosion.engine.buffer import SampleBuffer, allocate

# Two x positions closer than this are treated as the same point.
MIN_INTERP_SPAN = 0.01


# ---------------------------------------------------------------------------
# Sliding lowpass
# ---------------------------------------------------------------------------

@njit(cache=True)
def _sliding_low_pass(x, alpha1, alpha2):
    """y[i] = y[i-1] + a(i) * (x[i] - y[i-1]), a swept alpha1 -> alpha2, squared."""
    n = len(x)
    out = np.empty(n, dtype=np.float64)
    if n == 0:
        return out
    out[0] = x[0]
    for i in range(1, n):
        alpha = (i / n) * (alpha2 - alpha1) + alpha1
        alpha = alpha * alpha
        out[i] = out[i - 1] + alpha * (x[i] - out[i - 1])
    return out


def sliding_low_pass(buf: SampleBuffer, alpha1: float, alpha2: float) -> SampleBuffer:
    """One-pole lowpass whose coefficient slides from alpha1 to alpha2.

    The coefficient is squared before use, so the cutoff sweep spends more
    of the buffer at low cutoffs. alpha1 == alpha2 gives a plain one-pole.
    Higher alpha = brighter (1.0 passes the input through).
    """
    out = allocate(buf.length, buf.sr)
    out.data[:] = _sliding_low_pass(buf.samples, float(alpha1), float(alpha2))
    out.length = buf.length
    return out


def sliding_low_pass_in_place(buf: SampleBuffer, alpha1: float, alpha2: float):
    buf.take_storage(sliding_low_pass(buf, alpha1, alpha2))


# ---------------------------------------------------------------------------
# Speed change
# ---------------------------------------------------------------------------

@njit(cache=True)
def interpolate(x, x1, y1, x2, y2):
    """y on the line through (x1, y1) and (x2, y2) at x.

    Coincident x positions return the average of the two y values.
    """
    if abs(x2 - x1) < MIN_INTERP_SPAN:
        return (y1 + y2) / 2.0
    return (x - x1) * (y2 - y1) / (x2 - x1) + y1


@njit(cache=True)
def _change_speed(x, new_len):
    n = len(x)
    out = np.empty(new_len, dtype=np.float64)
    if new_len == 0:
        return out
    out[0] = x[0]
    for i in range(1, new_len):
        pos = i / new_len * n
        sp1 = int(pos)
        sp2 = min(sp1 + 1, n - 1)
        out[i] = interpolate(pos, float(sp1), x[sp1], float(sp2), x[sp2])
    return out


def change_speed(buf: SampleBuffer, factor: float) -> SampleBuffer:
    """Resample to len/factor samples. factor > 1 is faster (and shorter)."""
    if factor <= 0:
        raise ValueError(f"speed factor must be > 0, got {factor}")
    new_len = int(buf.length / factor) if buf.length else 0
    out = allocate(new_len, buf.sr)
    out.data[:] = _change_speed(buf.samples, new_len)
    out.length = new_len
    return out


def change_speed_in_place(buf: SampleBuffer, factor: float):
    buf.take_storage(change_speed(buf, factor))
