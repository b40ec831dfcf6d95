"""
Minimal WAV container for mono 16-bit PCM.

Serialization writes the canonical 44-byte header followed by little-endian
signed 16-bit samples:

    offset  size  field
    0       4     "RIFF"
    4       4     36 + data size
    8       4     "WAVE"
    12      4     "fmt "
    16      4     16 (fmt chunk size)
    20      2     1 (PCM)
    22      2     1 (mono)
    24      4     sample rate
    28      4     byte rate (rate * 2)
    32      2     block align (2)
    34      2     bits per sample (16)
    36      4     "data"
    40      4     data size (2 * N)
    44      ...   samples

Parsing reads the sample rate at offset 24 and the data size at offset 40
and assumes samples start at offset 44. Chunks are not walked: a file that
carries extra chunks (LIST, fact, ...) before ``data`` is read from the
wrong place. Only files produced by :func:`serialize` are guaranteed to
parse correctly.
"""

import logging
import struct
from typing import Any, Dict, Optional

import numpy as np

from .audio import AudioStegoError
from .buffer import AudioContext, SampleBuffer

logger = logging.getLogger(__name__)

HEADER_SIZE = 44
BITS_PER_SAMPLE = 16
BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8
NUM_CHANNELS = 1
PCM_FORMAT = 1

# Writers scale by 32767 and readers by 32768. Existing files depend on
# this asymmetry, so keep both.
WRITE_SCALE = 32767
READ_SCALE = 32768.0

_HEADER_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")


class FormatError(AudioStegoError):
    """Raised when bytes handed to :func:`parse` are not a usable WAV file."""

    def __init__(self, message: str, code: Optional[int] = 4001, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code, details)


def build_header(sample_count: int, sample_rate: int) -> bytes:
    """Return the 44-byte header for ``sample_count`` mono 16-bit samples."""
    data_size = sample_count * BYTES_PER_SAMPLE
    return _HEADER_STRUCT.pack(
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        16,
        PCM_FORMAT,
        NUM_CHANNELS,
        sample_rate,
        sample_rate * BYTES_PER_SAMPLE * NUM_CHANNELS,
        BYTES_PER_SAMPLE * NUM_CHANNELS,
        BITS_PER_SAMPLE,
        b"data",
        data_size,
    )


def serialize(buffer: SampleBuffer) -> bytes:
    """
    Serialize a sample buffer to WAV bytes.

    Samples are clamped to [-1, 1], scaled by 32767 and rounded half up to
    the nearest integer.
    """
    samples = np.clip(buffer.samples.astype(np.float64), -1.0, 1.0)
    pcm = np.floor(samples * WRITE_SCALE + 0.5).astype("<i2")

    header = build_header(len(buffer), buffer.sample_rate)
    logger.debug(f"Serialized {len(buffer)} samples at {buffer.sample_rate} Hz")
    return header + pcm.tobytes()


def parse(data: bytes, context: Optional[AudioContext] = None) -> SampleBuffer:
    """
    Parse WAV bytes produced by :func:`serialize` back into a sample buffer.

    Args:
        data: Complete WAV file contents
        context: Audio context that owns the new buffer

    Raises:
        FormatError: If the buffer is too short, lacks the RIFF/WAVE tags,
            declares a zero sample rate or a data size past its end
    """
    context = context or AudioContext()
    data = bytes(data)

    if len(data) < HEADER_SIZE:
        raise FormatError(
            f"WAV data too short: {len(data)} bytes",
            details={"size": len(data)},
        )
    if data[0:4] != b"RIFF" or data[8:12] != b"WAVE":
        raise FormatError("Missing RIFF/WAVE signature", code=4002)

    (sample_rate,) = struct.unpack_from("<I", data, 24)
    (data_size,) = struct.unpack_from("<I", data, 40)

    if sample_rate == 0:
        raise FormatError("WAV header declares a zero sample rate", code=4003)
    if HEADER_SIZE + data_size > len(data):
        raise FormatError(
            f"Data chunk size {data_size} exceeds file size {len(data)}",
            code=4004,
            details={"data_size": data_size, "size": len(data)},
        )

    count = data_size // BYTES_PER_SAMPLE
    if count:
        pcm = np.frombuffer(data, dtype="<i2", count=count, offset=HEADER_SIZE)
        samples = pcm.astype(np.float64) / READ_SCALE
    else:
        samples = np.zeros(0, dtype=np.float64)

    logger.debug(f"Parsed {count} samples at {sample_rate} Hz")
    return context.buffer_from_samples(samples, sample_rate)
