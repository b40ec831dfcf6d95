"""
Whisper Me Python Core Package

Hides short text messages inside synthesized audio. A message is encrypted
with a key derived from a shared seed, embedded into a cover waveform and
shipped as a 16-bit PCM WAV file; only someone who knows the seed can read
it back.

Subpackages:
    crypto: Seed key derivation and the XOR stream cipher
    stego: Cover synthesis, frame embedding/extraction, WAV container

Modules:
    config: Pipeline configuration
    manager: Send and receive pipelines
    cli: Command line interface

Version: 1.0.0
"""

from . import crypto
from . import stego
from .config import ConfigError, WhisperConfig
from .manager import GENERIC_FAILURE_MESSAGE, ReceiveResult, SendResult, WhisperError, WhisperManager

__all__ = [
    'crypto',
    'stego',
    'ConfigError',
    'WhisperConfig',
    'GENERIC_FAILURE_MESSAGE',
    'ReceiveResult',
    'SendResult',
    'WhisperError',
    'WhisperManager',
]

__version__ = "1.0.0"
