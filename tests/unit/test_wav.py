"""
Unit Tests for the WAV Container

Tests byte-exact serialization of mono 16-bit PCM and the fixed-offset
parser, including its known limitation with extra chunks.
"""

import pytest
import struct
import numpy as np

from whisper_core.stego import wav
from whisper_core.stego.buffer import AudioContext, SampleBuffer
from whisper_core.stego.wav import FormatError


class TestSerialize:
    """Test cases for wav.serialize."""

    def test_header_layout(self):
        """Test every field of the 44-byte header."""
        data = wav.serialize(SampleBuffer(np.zeros(3), 44100))

        assert len(data) == 44 + 6
        fields = struct.unpack("<4sI4s4sIHHIIHH4sI", data[:44])
        assert fields == (
            b"RIFF", 42, b"WAVE", b"fmt ", 16, 1, 1,
            44100, 88200, 2, 16, b"data", 6,
        )

    def test_sample_conversion(self):
        """Test clamping, scaling by 32767 and half-up rounding."""
        buffer = SampleBuffer(np.array([0.0, 1.0, -1.0, 0.5, -0.5, 2.0, -3.0]), 8000)

        data = wav.serialize(buffer)
        pcm = struct.unpack("<7h", data[44:])

        assert pcm == (0, 32767, -32767, 16384, -16383, 32767, -32767)

    def test_empty_buffer(self):
        """Test that an empty buffer serializes to a bare header."""
        data = wav.serialize(SampleBuffer(np.zeros(0), 22050))

        assert len(data) == 44
        assert struct.unpack_from("<I", data, 40)[0] == 0

    def test_build_header_size(self):
        """Test header size helper."""
        assert len(wav.build_header(10, 8000)) == wav.HEADER_SIZE == 44


class TestParse:
    """Test cases for wav.parse."""

    def test_parse_serialized(self):
        """Test parsing reads rate and samples scaled by 1/32768."""
        buffer = SampleBuffer(np.array([0.0, 1.0, -1.0]), 16000)

        parsed = wav.parse(wav.serialize(buffer))

        assert parsed.sample_rate == 16000
        assert len(parsed) == 3
        np.testing.assert_allclose(parsed.samples, [0.0, 32767 / 32768, -32767 / 32768], atol=1e-7)

    def test_parse_uses_context(self):
        """Test that parsed buffers come from the supplied context."""
        context = AudioContext(sample_rate=8000)

        wav.parse(wav.serialize(SampleBuffer(np.zeros(4), 8000)), context)

        assert context.buffers_created == 1

    def test_parse_empty_data_chunk(self):
        """Test a header with no samples."""
        parsed = wav.parse(wav.build_header(0, 8000))

        assert len(parsed) == 0

    def test_too_short(self):
        """Test that fewer than 44 bytes is a FormatError."""
        with pytest.raises(FormatError):
            wav.parse(b"RIFF" + bytes(20))

    def test_missing_signature(self):
        """Test that non-RIFF data is a FormatError."""
        data = bytearray(wav.serialize(SampleBuffer(np.zeros(4), 8000)))
        data[0:4] = b"RIFX"

        with pytest.raises(FormatError) as exc_info:
            wav.parse(bytes(data))

        assert exc_info.value.code == 4002

    def test_zero_sample_rate(self):
        """Test that a zero sample rate is a FormatError."""
        data = bytearray(wav.serialize(SampleBuffer(np.zeros(4), 8000)))
        data[24:28] = struct.pack("<I", 0)

        with pytest.raises(FormatError):
            wav.parse(bytes(data))

    def test_data_size_past_end(self):
        """Test that a data chunk larger than the file is a FormatError."""
        data = wav.serialize(SampleBuffer(np.zeros(4), 8000))[:-2]

        with pytest.raises(FormatError) as exc_info:
            wav.parse(data)

        assert exc_info.value.details["data_size"] == 8

    def test_extra_chunk_is_not_walked(self):
        """Test that a chunk before 'data' is read as if it were samples."""
        samples = struct.pack("<4h", 100, 200, 300, 400)
        data = (
            wav.build_header(4, 8000)[:36]
            + b"LIST" + struct.pack("<I", 4) + b"INFO"
            + b"data" + struct.pack("<I", len(samples)) + samples
        )

        parsed = wav.parse(data)

        # Offset 40 holds the LIST size (4 bytes -> 2 samples) and offset 44
        # holds b"INFO", so the real samples are never reached.
        assert len(parsed) == 2
        expected = np.array(struct.unpack("<2h", b"INFO")) / 32768.0
        np.testing.assert_allclose(parsed.samples, expected, atol=1e-7)


class TestRoundTrip:
    """Test cases for serialize/parse round trips."""

    def test_quantization_error_bound(self):
        """Test that repeated round trips stay within one quantization step."""
        rng = np.random.default_rng(1234)
        buffer = SampleBuffer(rng.uniform(-1.0, 1.0, 5000), 44100)

        once = wav.parse(wav.serialize(buffer))
        twice = wav.parse(wav.serialize(once))

        np.testing.assert_allclose(twice.samples, once.samples, rtol=0, atol=1 / 32768 + 1e-6)
        np.testing.assert_allclose(once.samples, buffer.samples, rtol=0, atol=2 / 32768)

    def test_embedding_amplitudes_survive(self):
        """Test that the stego amplitude levels stay on the right side of the thresholds."""
        buffer = SampleBuffer(np.array([0.7, 0.63, 0.3, 0.27]), 44100)

        parsed = wav.parse(wav.serialize(buffer))

        assert (parsed.samples[0] + parsed.samples[1]) / 2 > 0.6
        assert (parsed.samples[2] + parsed.samples[3]) / 2 < 0.4
