"""Blocking playback through sounddevice."""

import logging

import numpy as np
import sounddevice as sd

log = logging.getLogger(__name__)


def play(audio, sr=44100, device=None):
    """Play a mono float buffer and wait until it finishes."""
    audio = np.clip(np.asarray(audio, dtype=np.float64), -1.0, 1.0)
    if len(audio) == 0:
        log.info("nothing to play")
        return
    log.info("playing %.2fs", len(audio) / sr)
    sd.stop()
    sd.play(audio, sr, device=device)
    sd.wait()
