"""
Sample buffers and the audio context that creates them.

A :class:`SampleBuffer` is a mono run of floating point samples in [-1, 1]
at a fixed sample rate. Buffers are created through an explicit
:class:`AudioContext` value owned by the caller rather than a process-wide
audio singleton.
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

# Samples are held as 32-bit floats
SAMPLE_DTYPE = np.float32

DEFAULT_SAMPLE_RATE = 44100


@dataclass
class SampleBuffer:
    """
    Mono floating point sample buffer.

    Attributes:
        samples: One-dimensional float32 array of samples
        sample_rate: Samples per second
    """

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self) -> None:
        self.samples = np.asarray(self.samples, dtype=SAMPLE_DTYPE)
        if self.samples.ndim != 1:
            raise ValueError(f"SampleBuffer must be mono, got shape {self.samples.shape}")
        if self.sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {self.sample_rate}")

    def __len__(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration(self) -> float:
        """Length of the buffer in seconds."""
        return len(self) / self.sample_rate

    def copy(self) -> "SampleBuffer":
        return SampleBuffer(self.samples.copy(), self.sample_rate)


@dataclass
class AudioContext:
    """
    Caller-owned factory for sample buffers.

    Attributes:
        sample_rate: Default rate for buffers created by this context
        buffers_created: Number of buffers handed out so far
    """

    sample_rate: int = DEFAULT_SAMPLE_RATE
    buffers_created: int = field(default=0, compare=False)

    def create_buffer(self, length: int, sample_rate: Optional[int] = None) -> SampleBuffer:
        """Return a silent buffer of ``length`` samples."""
        if length < 0:
            raise ValueError(f"Buffer length must not be negative, got {length}")
        self.buffers_created += 1
        return SampleBuffer(np.zeros(length, dtype=SAMPLE_DTYPE), sample_rate or self.sample_rate)

    def buffer_from_samples(self, samples: np.ndarray, sample_rate: Optional[int] = None) -> SampleBuffer:
        """Wrap already-decoded samples in a buffer."""
        self.buffers_created += 1
        return SampleBuffer(samples, sample_rate or self.sample_rate)
