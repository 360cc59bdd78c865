"""Explosion composer: runs the whole synth once.

Stages (strictly forward, one pass):
    IDLE -> PRE_EXPLOSIONS -> MAIN_EXPLOSION -> MERGE -> SPEED_CHANGE
         -> TRIM1 -> REVERB -> TRIM2 -> DONE

Pre-explosions are the "ka-" in "ka-BOOM!": half-length explosions scattered
over the first pre_explosion_delay seconds and darkened with a lowpass.
Any exception aborts the run; there is no partial result.
"""

import logging
import time
from enum import Enum

import numpy as np

from explosion.engine.buffer import SampleBuffer, allocate
from explosion.engine.filters import change_speed_in_place, sliding_low_pass_in_place
from explosion.engine.layers import make_explosion
from explosion.engine.ops import (
    accumulate_in_place, delay_shift, normalize, trim_trailing_silence,
)
from explosion.engine.params import ExplosionDef, SR, seconds_to_frames
from explosion.engine.reverb import apply_reverb

log = logging.getLogger(__name__)


class Stage(Enum):
    IDLE = 0
    PRE_EXPLOSIONS = 1
    MAIN_EXPLOSION = 2
    MERGE = 3
    SPEED_CHANGE = 4
    TRIM1 = 5
    REVERB = 6
    TRIM2 = 7
    DONE = 8


class ExplosionComposer:
    """Owns the random generator and walks an ExplosionDef through every stage.

    Usage:
        composer = ExplosionComposer(ExplosionDef(duration=2.0), seed=1234)
        out = composer.render()     # SampleBuffer, mono, SR
    """

    def __init__(self, explosion_def: ExplosionDef, seed=None):
        self.explosion_def = explosion_def
        if seed is None:
            seed = time.time_ns() % 2**32
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self.stage = Stage.IDLE

    def _enter(self, stage):
        self.stage = stage
        log.debug("stage %s", stage.name)

    def make_pre_explosions(self):
        """Build the pre-explosion bed, or None when there are none."""
        e = self.explosion_def
        if e.pre_explosion_count == 0:
            return None

        n = seconds_to_frames(e.duration)
        bed = allocate(n)
        bed.length = n
        max_offset = seconds_to_frames(e.pre_explosion_delay)
        for _ in range(e.pre_explosion_count):
            pre = make_explosion(e.duration / 2, e.layer_count, self.rng)
            delay_shift(pre, int(self.rng.integers(0, max_offset + 1)))
            accumulate_in_place(bed, pre)
            normalize(bed)

        factor = e.pre_explosion_lowpass_factor
        for _ in range(e.pre_explosion_lowpass_count):
            sliding_low_pass_in_place(bed, factor, factor)
        normalize(bed)
        return bed

    def render(self) -> SampleBuffer:
        if self.stage is not Stage.IDLE:
            raise RuntimeError(f"composer already ran (stage {self.stage.name})")
        e = self.explosion_def
        t0 = time.perf_counter()
        log.info("seed %d", self.seed)

        self._enter(Stage.PRE_EXPLOSIONS)
        bed = self.make_pre_explosions()

        self._enter(Stage.MAIN_EXPLOSION)
        out = make_explosion(e.duration, e.layer_count, self.rng)

        self._enter(Stage.MERGE)
        if bed is not None:
            accumulate_in_place(out, bed)
            normalize(out)

        self._enter(Stage.SPEED_CHANGE)
        change_speed_in_place(out, e.final_speed_factor)

        self._enter(Stage.TRIM1)
        trim_trailing_silence(out)

        self._enter(Stage.REVERB)
        out = apply_reverb(out, e.reverb_early_reflections,
                           e.reverb_late_reflections, self.rng)

        self._enter(Stage.TRIM2)
        trim_trailing_silence(out)

        self._enter(Stage.DONE)
        # Early echoes can sum past full scale; keep the result within [-1, 1].
        if out.length and np.max(np.abs(out.samples)) > 1.0:
            normalize(out)
        elapsed = time.perf_counter() - t0
        log.info("render %.1fs audio in %.3fs", out.length / SR, elapsed)
        return out


def render_explosion(params, seed=None) -> SampleBuffer:
    """The single entry point. The CLI, presets and scripts all call this.

    Args:
        params: ExplosionDef, or a params dict (see engine/params.py)
        seed: int for a reproducible run, None for a time-derived one

    Returns:
        mono SampleBuffer at SR
    """
    if not isinstance(params, ExplosionDef):
        params = ExplosionDef.from_params(params)
    return ExplosionComposer(params, seed).render()
