"""
Whisper Me Steganography Module - Hidden Data Transmission.

This module hides encrypted payloads inside synthesized cover audio and
recovers them from 16-bit PCM WAV files.

Modules:
    buffer: Mono sample buffers and the audio context that creates them
    carrier: Deterministic cover waveform synthesis
    audio: Frame embedding and extraction (StegoEncoder, StegoDecoder)
    wav: Fixed-layout WAV serialization and parsing

Usage:
    >>> from whisper_core.stego import CarrierSynthesizer, StegoEncoder, StegoDecoder, wav
    >>> carrier = CarrierSynthesizer().generate()
    >>> StegoEncoder().embed(carrier, payload)
    >>> data = wav.serialize(carrier)
    >>> StegoDecoder().extract(wav.parse(data))
"""

from . import wav
from .audio import (
    AudioStegoError,
    CapacityError,
    CorruptDataError,
    HeaderNotFoundError,
    LengthInvalidError,
    LengthReadError,
    StegoDecoder,
    StegoEncoder,
    TruncatedError,
    max_payload_bytes,
    required_samples,
)
from .buffer import AudioContext, SampleBuffer
from .carrier import CarrierSynthesizer
from .wav import FormatError

__all__ = [
    "wav",
    "AudioContext",
    "SampleBuffer",
    "CarrierSynthesizer",
    "StegoEncoder",
    "StegoDecoder",
    "max_payload_bytes",
    "required_samples",
    "AudioStegoError",
    "CapacityError",
    "HeaderNotFoundError",
    "LengthReadError",
    "LengthInvalidError",
    "TruncatedError",
    "CorruptDataError",
    "FormatError",
]
