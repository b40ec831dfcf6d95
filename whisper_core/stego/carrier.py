"""
Cover audio synthesis.

The carrier is a slowly frequency-modulated 440 Hz sine under a raised
cosine envelope. It carries no payload information; it only gives the
embedded frame a plausible audio file to live in. For sample ``i`` at time
``t = i / rate``:

    f(t) = 440 + sin(2*pi*0.5*t) * 20
    e(t) = 0.5 - 0.3 * cos(2*pi*t / duration)
    s(t) = sin(2*pi*f(t)*t) * e(t) * 0.5
"""

import logging
from typing import Optional

import numpy as np

from .buffer import AudioContext, SampleBuffer, SAMPLE_DTYPE

logger = logging.getLogger(__name__)

DEFAULT_DURATION = 8

CARRIER_FREQUENCY = 440.0
MODULATION_FREQUENCY = 0.5
MODULATION_DEPTH = 20.0
OUTPUT_GAIN = 0.5


class CarrierSynthesizer:
    """
    Deterministic cover waveform generator.

    Example:
        >>> synth = CarrierSynthesizer(AudioContext(sample_rate=8000))
        >>> buffer = synth.generate(duration=1)
        >>> len(buffer)
        8000
    """

    def __init__(self, context: Optional[AudioContext] = None):
        self._context = context or AudioContext()

    def generate(self, duration: float = DEFAULT_DURATION, sample_rate: Optional[int] = None) -> SampleBuffer:
        """
        Synthesize ``duration`` seconds of cover audio.

        Args:
            duration: Length in seconds, must be positive
            sample_rate: Rate in Hz; defaults to the context's rate

        Returns:
            A new SampleBuffer of ``duration * sample_rate`` samples
        """
        rate = sample_rate or self._context.sample_rate
        if duration <= 0:
            raise ValueError(f"Carrier duration must be positive, got {duration}")

        length = int(round(duration * rate))
        buffer = self._context.create_buffer(length, rate)

        t = np.arange(length, dtype=np.float64) / rate
        instant_freq = CARRIER_FREQUENCY + np.sin(2 * np.pi * MODULATION_FREQUENCY * t) * MODULATION_DEPTH
        envelope = 0.5 - 0.3 * np.cos(2 * np.pi * t / duration)
        buffer.samples[:] = (np.sin(2 * np.pi * instant_freq * t) * envelope * OUTPUT_GAIN).astype(SAMPLE_DTYPE)

        logger.debug(f"Synthesized {length} carrier samples at {rate} Hz")
        return buffer
