"""Buffer operations: mix, fade, delay, gain and trim.

Every function works on the valid region of a SampleBuffer. Functions that
combine two buffers return a new one; the rest mutate in place.
Sample-level loops that depend on processing order use Numba.
"""

import numpy as np
from numba import njit

from explosion.engine.buffer import SampleBuffer, allocate

# Anything quieter than this at the end of a buffer counts as silence.
SILENCE_THRESHOLD = 1e-5

# Normalize to just under full scale so the peak never sits exactly on +-1.0.
NORMALIZE_HEADROOM = 1.001


@njit(cache=True)
def _fade_out(x, n):
    for i in range(n):
        x[i] *= 1.0 - i / n


@njit(cache=True)
def _delay_shift(x, delay_samples):
    # Back to front: each source sample is read before it can be overwritten.
    for i in range(len(x) - 1, -1, -1):
        src = i - delay_samples
        if src >= 0:
            x[i] = x[src]
        else:
            x[i] = 0.0


def white_noise(n, rng):
    """`n` samples of uniform white noise in [-1, 1)."""
    buf = allocate(n)
    buf.data[:] = rng.uniform(-1.0, 1.0, n)
    buf.length = n
    return buf


def mix(a: SampleBuffer, b: SampleBuffer) -> SampleBuffer:
    """Sum of two buffers, as long as the longer one."""
    n = max(a.length, b.length)
    out = allocate(n, a.sr)
    out.data[:a.length] += a.samples
    out.data[:b.length] += b.samples
    out.length = n
    return out


def accumulate_in_place(acc: SampleBuffer, inc: SampleBuffer):
    """acc = acc + inc. `inc` is left untouched."""
    acc.take_storage(mix(acc, inc))


def fade_out_linear(buf: SampleBuffer, n: int):
    """Linear fade from 1.0 at sample 0 toward 0.0 at sample `n`.

    Samples past `n` are untouched. Calling it k times over the same span
    shapes the start of the buffer with (1 - i/n)**k.
    """
    n = min(int(n), buf.length)
    if n <= 0:
        return
    _fade_out(buf.samples, n)


def delay_shift(buf: SampleBuffer, delay_samples: int):
    """Shift the signal `delay_samples` later, dropping what runs off the end."""
    delay_samples = int(delay_samples)
    if delay_samples < 0:
        raise ValueError(f"delay must be >= 0, got {delay_samples}")
    if delay_samples == 0 or buf.length == 0:
        return
    _delay_shift(buf.samples, delay_samples)


def normalize(buf: SampleBuffer):
    """Scale so the peak sits at 1/1.001. Silent buffers are left alone."""
    x = buf.samples
    if len(x) == 0:
        return
    peak = np.max(np.abs(x))
    if peak > 0:
        x /= NORMALIZE_HEADROOM * peak


def amplify_clamp(buf: SampleBuffer, gain: float):
    """Multiply by `gain` and hard-clip to [-1, 1]."""
    x = buf.samples
    x *= gain
    np.clip(x, -1.0, 1.0, out=x)


def trim_trailing_silence(buf: SampleBuffer):
    """Shrink `length` past the trailing near-silent samples. Storage is kept."""
    loud = np.flatnonzero(np.abs(buf.samples) >= SILENCE_THRESHOLD)
    buf.length = int(loud[-1]) + 1 if len(loud) else 0
