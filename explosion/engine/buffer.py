"""Sample buffer: the container every stage of the synth reads and writes."""

import numpy as np

from explosion.engine.params import SR


class BufferAllocationError(MemoryError):
    """Raised when a sample buffer cannot be allocated. Fatal for the run."""


class SampleBuffer:
    """Fixed-capacity float64 array with an explicit valid length.

    Usage:
        buf = allocate(44100)       # capacity 44100, length 0
        buf.length = 44100          # mark samples valid
        buf.samples[:] = ...        # view of the valid region only

    Only `samples` (data[:length]) is meaningful. Capacity beyond `length`
    is spare storage, e.g. after trimming trailing silence.
    """

    def __init__(self, data: np.ndarray, length: int = 0, sr: int = SR):
        if not 0 <= length <= len(data):
            raise ValueError(f"length {length} outside capacity {len(data)}")
        self.data = data
        self._length = length
        self.sr = sr

    @classmethod
    def from_array(cls, audio, sr: int = SR) -> "SampleBuffer":
        """Wrap a copy of `audio` as a fully valid buffer."""
        data = np.array(audio, dtype=np.float64)
        return cls(data, len(data), sr)

    @property
    def length(self) -> int:
        return self._length

    @length.setter
    def length(self, n: int):
        if not 0 <= n <= len(self.data):
            raise ValueError(f"length {n} outside capacity {len(self.data)}")
        self._length = n

    @property
    def capacity(self) -> int:
        return len(self.data)

    @property
    def samples(self) -> np.ndarray:
        return self.data[:self._length]

    @property
    def seconds(self) -> float:
        return self._length / self.sr

    def take_storage(self, other: "SampleBuffer"):
        """Adopt `other`'s storage and length, releasing ours.

        This is how every in-place operation lands: the new content is fully
        computed in `other` before the swap.
        """
        self.data, self._length = other.data, other.length
        other.data = np.zeros(0)
        other._length = 0

    def __len__(self):
        return self._length

    def __repr__(self):
        return (f"SampleBuffer(length={self._length}, capacity={self.capacity}, "
                f"sr={self.sr})")


def allocate(n: int, sr: int = SR) -> SampleBuffer:
    """Zero-filled buffer of capacity `n`, length 0."""
    if n < 0:
        raise ValueError(f"cannot allocate {n} samples")
    try:
        data = np.zeros(n, dtype=np.float64)
    except MemoryError as exc:
        raise BufferAllocationError(f"cannot allocate {n} samples") from exc
    return SampleBuffer(data, 0, sr)


def copy_buffer(buf: SampleBuffer) -> SampleBuffer:
    """Independent duplicate of the valid region."""
    out = allocate(buf.length, buf.sr)
    out.data[:] = buf.samples
    out.length = buf.length
    return out
