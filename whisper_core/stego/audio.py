"""
Audio Steganography Module.

This module hides a byte payload inside the sample data of a mono carrier
buffer and recovers it again. The payload travels inside a frame:

    +----------------+---------------------+---------------------------+
    | magic (8 bits) | length (32 bits BE) | payload (8 bits per byte) |
    +----------------+---------------------+---------------------------+

The magic pattern is ``10110010``. Every bit occupies two consecutive
samples starting at sample 0: the first sample is set to 0.7 for a one and
0.3 for a zero, the second to the first times 0.9. Samples past the end of
the frame keep the carrier's own values.

Reading a bit looks at the mean of its two samples (above 0.6 is a one,
below 0.4 a zero) and, when the mean is inconclusive, at the samples
individually. Anything else is ambiguous. The frame is located by sliding
over the buffer two samples at a time until the magic pattern reads cleanly.

None of this depends on the seed. A wrong seed recovers the frame
perfectly and only fails to decrypt it into readable text.

Usage:
    >>> from whisper_core.stego import StegoEncoder, StegoDecoder
    >>> carrier = StegoEncoder().embed(carrier, b"\\x12\\x34")
    >>> StegoDecoder().extract(carrier)
    b'\\x124'
"""

import logging
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .buffer import SampleBuffer

logger = logging.getLogger(__name__)

# Frame layout
MAGIC_HEADER = (1, 0, 1, 1, 0, 0, 1, 0)
LENGTH_FIELD_BITS = 32
SAMPLES_PER_BIT = 2
FRAME_OVERHEAD_BITS = len(MAGIC_HEADER) + LENGTH_FIELD_BITS

# Amplitude coding
HIGH_AMPLITUDE = 0.7
LOW_AMPLITUDE = 0.3
SECONDARY_SCALE = 0.9

# Bit detection thresholds
STRONG_HIGH = 0.6
STRONG_LOW = 0.4
SECONDARY_MIDPOINT = 0.5

MAX_PAYLOAD_LENGTH = 1_000_000

AMBIGUOUS = -1


class AudioStegoError(Exception):
    """Base exception for audio steganography errors."""

    def __init__(self, message: str, code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        base = f"{type(self).__name__}: {self.message}"
        if self.code:
            base += f" (Code: {self.code})"
        return base


class CapacityError(AudioStegoError):
    """The framed payload does not fit in the carrier."""


class HeaderNotFoundError(AudioStegoError):
    """No clean magic pattern anywhere in the buffer."""


class LengthReadError(AudioStegoError):
    """An ambiguous bit inside the 32-bit length field."""


class LengthInvalidError(AudioStegoError):
    """Length field outside 1..MAX_PAYLOAD_LENGTH."""


class TruncatedError(AudioStegoError):
    """The buffer ends before the declared payload does."""


class CorruptDataError(AudioStegoError):
    """An ambiguous bit inside the payload."""


def required_samples(payload_length: int) -> int:
    """Number of carrier samples needed to embed a payload of this many bytes."""
    return SAMPLES_PER_BIT * (FRAME_OVERHEAD_BITS + 8 * payload_length)


def max_payload_bytes(sample_count: int) -> int:
    """Largest payload, in bytes, that fits in ``sample_count`` samples."""
    return max(0, (sample_count // SAMPLES_PER_BIT - FRAME_OVERHEAD_BITS) // 8)


def bytes_to_bits(data: bytes) -> np.ndarray:
    """Unpack bytes into a uint8 array of bits, MSB first."""
    return np.unpackbits(np.frombuffer(bytes(data), dtype=np.uint8))


def build_frame_bits(payload: bytes) -> np.ndarray:
    """Return magic + 32-bit big-endian length + payload as a bit array."""
    magic = np.array(MAGIC_HEADER, dtype=np.uint8)
    length = bytes_to_bits(len(payload).to_bytes(LENGTH_FIELD_BITS // 8, "big"))
    return np.concatenate([magic, length, bytes_to_bits(payload)])


def classify_pairs(first: np.ndarray, second: np.ndarray) -> np.ndarray:
    """
    Read one bit from each (first, second) sample pair.

    Returns an int8 array holding 1, 0 or AMBIGUOUS per pair. The mean test
    takes precedence over the per-sample fallback.
    """
    first = np.asarray(first, dtype=np.float64)
    second = np.asarray(second, dtype=np.float64)
    avg = (first + second) / 2

    bits = np.full(first.shape, AMBIGUOUS, dtype=np.int8)
    bits[(first < STRONG_LOW) & (second < SECONDARY_MIDPOINT)] = 0
    bits[(first > STRONG_HIGH) & (second > SECONDARY_MIDPOINT)] = 1
    bits[avg < STRONG_LOW] = 0
    bits[avg > STRONG_HIGH] = 1
    return bits


class StegoEncoder:
    """
    Embeds a framed payload at the start of a carrier buffer.

    Example:
        >>> encoder = StegoEncoder()
        >>> encoder.capacity(carrier)
        22045
        >>> encoder.embed(carrier, payload)
    """

    def capacity(self, carrier: SampleBuffer) -> int:
        """Maximum payload bytes this carrier can hold."""
        return max_payload_bytes(len(carrier))

    def embed(self, carrier: SampleBuffer, payload: bytes) -> SampleBuffer:
        """
        Write the frame for ``payload`` into ``carrier`` in place.

        The capacity check runs before any sample is touched, so a failed
        call leaves the carrier exactly as it was.

        Args:
            carrier: Buffer to modify
            payload: Encrypted payload bytes

        Returns:
            The same carrier object

        Raises:
            CapacityError: If 2 * frame bits exceeds the carrier length
        """
        payload = bytes(payload)
        needed = required_samples(len(payload))
        if needed > len(carrier):
            raise CapacityError(
                f"Message too long for audio duration: needs {needed} samples, carrier has {len(carrier)}",
                code=3001,
                details={
                    "required_samples": needed,
                    "available_samples": len(carrier),
                    "payload_length": len(payload),
                    "capacity": self.capacity(carrier),
                },
            )

        bits = build_frame_bits(payload)
        amplitudes = np.where(bits == 1, HIGH_AMPLITUDE, LOW_AMPLITUDE)

        end = needed
        carrier.samples[0:end:SAMPLES_PER_BIT] = amplitudes
        carrier.samples[1:end:SAMPLES_PER_BIT] = amplitudes * SECONDARY_SCALE

        logger.info(f"Embedded {len(payload)} bytes ({len(bits)} bits) into {len(carrier)} samples")
        return carrier


class StegoDecoder:
    """
    Locates and reads back a frame written by :class:`StegoEncoder`.

    The decoder never modifies the buffer it is given.
    """

    def read_bit(self, samples: np.ndarray, index: int) -> Optional[int]:
        """
        Read the bit stored at ``samples[index:index + 2]``.

        Returns 1, 0, or None when the pair is ambiguous or runs past the
        end of the buffer. NaN samples read as 0.
        """
        if index < 0 or index + 1 >= len(samples):
            return None
        pair = np.nan_to_num(np.asarray(samples[index:index + 2], dtype=np.float64), nan=0.0)
        bit = int(classify_pairs(pair[:1], pair[1:])[0])
        return None if bit == AMBIGUOUS else bit

    def _pair_bits(self, samples: np.ndarray) -> np.ndarray:
        # Pair k covers samples 2k and 2k + 1
        pairs = len(samples) // SAMPLES_PER_BIT
        end = pairs * SAMPLES_PER_BIT
        return classify_pairs(samples[0:end:SAMPLES_PER_BIT], samples[1:end:SAMPLES_PER_BIT])

    def locate_header(self, samples: np.ndarray, pair_bits: Optional[np.ndarray] = None) -> int:
        """
        Return the sample index where the magic pattern starts.

        Start positions 0, 2, 4, ... up to ``len(samples) - 32`` are tried in
        order; the first one whose 8 bits read unambiguously as the magic
        pattern wins.

        Raises:
            HeaderNotFoundError: If no start position matches
        """
        if pair_bits is None:
            pair_bits = self._pair_bits(np.nan_to_num(np.asarray(samples, dtype=np.float64), nan=0.0))

        magic_len = len(MAGIC_HEADER)
        max_start = max(0, len(samples) - 32)
        last_pair = min(max_start // SAMPLES_PER_BIT, len(pair_bits) - magic_len)

        if last_pair >= 0:
            windows = np.lib.stride_tricks.sliding_window_view(pair_bits[:last_pair + magic_len], magic_len)
            matches = np.flatnonzero(np.all(windows == np.array(MAGIC_HEADER, dtype=np.int8), axis=1))
            if matches.size:
                header_index = int(matches[0]) * SAMPLES_PER_BIT
                logger.debug(f"Magic header found at sample {header_index}")
                return header_index

        raise HeaderNotFoundError(
            "Magic header not found - corrupted or invalid audio file",
            code=3101,
            details={"samples": len(samples)},
        )

    def extract(self, carrier: SampleBuffer) -> bytes:
        """
        Recover the payload bytes embedded in ``carrier``.

        Raises:
            HeaderNotFoundError: No magic pattern found
            LengthReadError: Ambiguous bit in the length field
            LengthInvalidError: Length is zero or above 1,000,000
            TruncatedError: Buffer shorter than the declared payload
            CorruptDataError: Ambiguous bit inside the payload
        """
        samples = np.nan_to_num(np.asarray(carrier.samples, dtype=np.float64), nan=0.0)
        pair_bits = self._pair_bits(samples)

        header_index = self.locate_header(samples, pair_bits)
        length, sample_index = self._read_length(pair_bits, header_index)

        remaining = len(samples) - sample_index
        if length <= 0 or length > MAX_PAYLOAD_LENGTH:
            raise LengthInvalidError(
                f"Invalid data length: {length}",
                code=3202,
                details={"length": length},
            )
        if length > remaining // (8 * SAMPLES_PER_BIT):
            raise TruncatedError(
                "Audio file too short for claimed data length",
                code=3301,
                details={"length": length, "remaining_samples": remaining},
            )

        data = self._read_payload(pair_bits, sample_index, length)
        logger.info(f"Extracted {len(data)} bytes from frame at sample {header_index}")
        return data

    def _read_length(self, pair_bits: np.ndarray, header_index: int) -> Tuple[int, int]:
        sample_index = header_index + len(MAGIC_HEADER) * SAMPLES_PER_BIT
        first_pair = sample_index // SAMPLES_PER_BIT
        field = pair_bits[first_pair:first_pair + LENGTH_FIELD_BITS]

        if len(field) < LENGTH_FIELD_BITS or np.any(field == AMBIGUOUS):
            raise LengthReadError(
                "Failed to read data length",
                code=3201,
                details={"sample_index": sample_index},
            )

        length = 0
        for bit in field:
            length = (length << 1) | int(bit)

        logger.debug(f"Frame declares {length} payload bytes")
        return length, sample_index + LENGTH_FIELD_BITS * SAMPLES_PER_BIT

    def _read_payload(self, pair_bits: np.ndarray, sample_index: int, length: int) -> bytes:
        first_pair = sample_index // SAMPLES_PER_BIT
        bits = pair_bits[first_pair:first_pair + 8 * length]

        if len(bits) < 8 * length:
            raise TruncatedError(
                "Audio file truncated - data incomplete",
                code=3302,
                details={"length": length, "bits_available": len(bits)},
            )

        ambiguous = np.flatnonzero(bits == AMBIGUOUS)
        if ambiguous.size:
            raise CorruptDataError(
                "Corrupted data - ambiguous bits detected",
                code=3401,
                details={"first_ambiguous_byte": int(ambiguous[0]) // 8, "ambiguous_bits": int(ambiguous.size)},
            )

        return np.packbits(bits.astype(np.uint8)).tobytes()
