"""Poor man's reverb: a tail built from delayed, filtered echoes.

Signal flow:
    Dry -> [Wet buffer, 2x length] -> + early echoes -> + late echoes -> Output

Per reflection:
    1. Lowpass a copy of the running echo source
    2. Attenuate the echo source itself (so later echoes get quieter)
    3. Delay the filtered copy by a random amount
    4. Add it into the wet buffer

Early reflections use a constant filter and short delays; late reflections a
darkening sweep and delays up to two seconds.
"""

import logging

from explosion.engine.buffer import SampleBuffer, allocate, copy_buffer
from explosion.engine.filters import sliding_low_pass
from explosion.engine.ops import accumulate_in_place, amplify_clamp, delay_shift

log = logging.getLogger(__name__)

# (alpha1, alpha2) of the echo lowpass
EARLY_FILTER = (0.5, 0.5)
LATE_FILTER = (0.5, 0.2)

# [low, high) gain applied to the echo source per reflection
EARLY_GAIN = (0.03, 0.06)
LATE_GAIN = (0.03, 0.04)

# Maximum echo delay in seconds
EARLY_MAX_DELAY = 0.3
LATE_MAX_DELAY = 2.0


def _reflect(wet, source, count, alphas, gain_range, max_delay, rng):
    max_delay_samples = int(max_delay * wet.sr)
    for i in range(count):
        echo = sliding_low_pass(source, *alphas)
        amplify_clamp(source, rng.uniform(*gain_range))
        delay = int(rng.integers(0, max_delay_samples)) if max_delay_samples > 0 else 0
        delay_shift(echo, delay)
        accumulate_in_place(wet, echo)
        log.debug("reflection %d/%d: delay %d samples", i + 1, count, delay)


def apply_reverb(dry: SampleBuffer, early_reflections: int, late_reflections: int,
                 rng) -> SampleBuffer:
    """Dry signal plus early and late echoes, in a buffer twice as long.

    Args:
        dry: input buffer (not modified)
        early_reflections: number of short, bright echoes
        late_reflections: number of long, darker echoes
        rng: numpy Generator for gains and delays

    Returns:
        new buffer of length 2 * len(dry); the second half holds the tail
    """
    n = dry.length
    wet = allocate(2 * n, dry.sr)
    wet.data[:n] = dry.samples
    wet.length = 2 * n
    source = copy_buffer(wet)

    log.info("reverb: %d early, %d late reflections over %.2fs",
             early_reflections, late_reflections, wet.seconds)
    _reflect(wet, source, early_reflections, EARLY_FILTER, EARLY_GAIN,
             EARLY_MAX_DELAY, rng)
    _reflect(wet, source, late_reflections, LATE_FILTER, LATE_GAIN,
             LATE_MAX_DELAY, rng)
    return wet
