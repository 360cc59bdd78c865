"""Shared audio I/O utilities.

Provides load_wav and save_wav used by the CLI renderer and the tests.
"""

import numpy as np
from scipy.io import wavfile


def load_wav(path):
    """Read back a rendered 16-bit explosion for inspection.

    Returns (audio, sample_rate) with audio as float64 in [-1, 1).
    """
    sr, data = wavfile.read(path)
    if data.dtype != np.int16:
        raise ValueError(f"{path}: expected 16-bit PCM, got {data.dtype}")
    return data.astype(np.float64) / 32768.0, sr


def save_wav(path, audio, sr=44100):
    """Save audio to a 16-bit PCM WAV file, overwriting `path`.

    Reverb echoes can sum past full scale, so anything peaking above 1.0 is
    scaled back to 0.95 before conversion. OSError from the writer propagates.
    """
    audio = np.asarray(audio, dtype=np.float64)
    peak = np.max(np.abs(audio)) if len(audio) else 0.0
    if peak > 1.0:
        audio = audio / peak * 0.95
    out = (np.clip(audio, -1.0, 1.0) * 32767).astype(np.int16)
    wavfile.write(path, sr, out)
