"""
Whisper Me Manager

This module ties key derivation, the XOR cipher, carrier synthesis,
embedding and the WAV container together into the two pipelines the
application exposes:

    send:    message, seed -> derive key -> encrypt -> synthesize carrier
             -> embed -> serialize -> WAV bytes
    receive: WAV bytes -> parse -> extract -> decrypt -> message

Reading the carrier from disk is the only blocking step and sits behind
``fetch_carrier`` / ``fetch_carrier_async``; the codec itself only ever
sees in-memory bytes.

A wrong seed is not an error. The frame is recovered regardless of the
seed, and decryption with the wrong key simply yields unreadable text.
"""

import asyncio
import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .config import WhisperConfig
from .crypto import CryptoError, SeedKeyDerivation, XorStreamCipher
from .stego import wav
from .stego.audio import AudioStegoError, StegoDecoder, StegoEncoder, max_payload_bytes
from .stego.buffer import AudioContext
from .stego.carrier import CarrierSynthesizer

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Incorrect seed or invalid audio file."


class WhisperError(Exception):
    """Exception raised for invalid send/receive inputs."""

    def __init__(self, message: str, code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        base = f"WhisperError: {self.message}"
        if self.code:
            base += f" (Code: {self.code})"
        return base


@dataclass
class SendResult:
    """
    Result of hiding a message in a new carrier.

    Attributes:
        wav_bytes: Serialized WAV file
        sample_rate: Carrier sample rate
        sample_count: Number of carrier samples
        capacity_used: Payload bytes embedded
        capacity_total: Maximum payload bytes the carrier could hold
        checksum: SHA-256 hex digest of wav_bytes
    """
    wav_bytes: bytes
    sample_rate: int
    sample_count: int
    capacity_used: int
    capacity_total: int
    checksum: str

    def to_dict(self) -> Dict[str, Any]:
        """Serializable summary, without the WAV payload itself."""
        return {
            'sample_rate': self.sample_rate,
            'sample_count': self.sample_count,
            'capacity_used': self.capacity_used,
            'capacity_total': self.capacity_total,
            'checksum': self.checksum,
        }


@dataclass
class ReceiveResult:
    """
    Result of a receive attempt as shown to a user.

    Attributes:
        success: Whether a message was recovered
        message: Decrypted text on success, the generic failure text otherwise
        error_kind: Exception class name on failure
    """
    success: bool
    message: str
    error_kind: Optional[str] = None


class WhisperManager:
    """
    Send and receive pipelines for hidden messages in audio.

    Example:
        >>> manager = WhisperManager()
        >>> data = manager.encode("Hi", "password123")
        >>> manager.decode(data, "password123")
        'Hi'
    """

    def __init__(
        self,
        config: Optional[WhisperConfig] = None,
        context: Optional[AudioContext] = None,
        kdf: Optional[SeedKeyDerivation] = None,
    ):
        self._config = config or WhisperConfig.default()
        self._context = context or AudioContext(sample_rate=self._config.sample_rate)
        self._kdf = kdf or SeedKeyDerivation()
        self._synthesizer = CarrierSynthesizer(self._context)
        self._encoder = StegoEncoder()
        self._decoder = StegoDecoder()

    @property
    def config(self) -> WhisperConfig:
        return self._config

    @property
    def context(self) -> AudioContext:
        return self._context

    def capacity(self, duration: Optional[float] = None, sample_rate: Optional[int] = None) -> int:
        """
        Maximum message size in UTF-8 bytes for a carrier of the given shape.

        Arguments left as None fall back to the configured carrier.

        Raises:
            ConfigError: If an override is not a valid duration or rate
        """
        config = self._config
        overrides = {}
        if duration is not None:
            overrides["duration_seconds"] = duration
        if sample_rate is not None:
            overrides["sample_rate"] = sample_rate
        if overrides:
            config = WhisperConfig.from_dict({**config.to_dict(), **overrides})
        return max_payload_bytes(config.sample_count)

    def _validate_send(self, message: str, seed: str) -> None:
        if not message:
            raise WhisperError("Please enter a message", code=6001)
        if not seed:
            raise WhisperError("Please enter a seed", code=6002)
        if len(seed) < self._config.min_seed_length:
            raise WhisperError(
                f"Seed must be at least {self._config.min_seed_length} characters long",
                code=6003,
                details={"min_seed_length": self._config.min_seed_length},
            )

    def send(self, message: str, seed: str) -> SendResult:
        """
        Hide ``message`` in a freshly synthesized carrier.

        Args:
            message: Text to hide; surrounding whitespace is stripped
            seed: Shared secret; surrounding whitespace is stripped

        Returns:
            SendResult with the WAV bytes and capacity figures

        Raises:
            WhisperError: Empty message or seed, or seed too short
            CapacityError: Message does not fit in the configured carrier
        """
        message = message.strip()
        seed = seed.strip()
        self._validate_send(message, seed)

        key = self._kdf.derive(seed)
        payload = XorStreamCipher(key).encrypt(message.encode("utf-8"))

        carrier = self._synthesizer.generate(self._config.duration_seconds, self._config.sample_rate)
        self._encoder.embed(carrier, payload)
        wav_bytes = wav.serialize(carrier)

        result = SendResult(
            wav_bytes=wav_bytes,
            sample_rate=carrier.sample_rate,
            sample_count=len(carrier),
            capacity_used=len(payload),
            capacity_total=self._encoder.capacity(carrier),
            checksum=hashlib.sha256(wav_bytes).hexdigest(),
        )
        logger.info(f"Generated {len(wav_bytes)}-byte WAV carrying {len(payload)} bytes")
        return result

    def encode(self, message: str, seed: str) -> bytes:
        """Hide ``message`` and return the WAV bytes."""
        return self.send(message, seed).wav_bytes

    def decode(self, carrier_bytes: bytes, seed: str) -> str:
        """
        Recover the message hidden in ``carrier_bytes``.

        Decoding errors surface with their distinct kinds. A wrong seed
        does not raise; it returns garbage text.

        Raises:
            WhisperError: Empty seed
            FormatError: Bytes are not a usable WAV file
            HeaderNotFoundError, LengthReadError, LengthInvalidError,
            TruncatedError, CorruptDataError: Frame could not be read
        """
        seed = seed.strip()
        if not seed:
            raise WhisperError("Please enter the seed", code=6002)

        buffer = wav.parse(carrier_bytes, self._context)
        payload = self._decoder.extract(buffer)

        key = self._kdf.derive(seed)
        plaintext = XorStreamCipher(key).decrypt(payload)
        return plaintext.decode("utf-8", errors="replace")

    def receive(self, carrier_bytes: bytes, seed: str) -> ReceiveResult:
        """
        Decode for display: every decode failure becomes one generic message.

        Input validation errors (empty seed) are still raised.
        """
        try:
            message = self.decode(carrier_bytes, seed)
        except (AudioStegoError, CryptoError) as e:
            logger.warning(f"Receive failed: {type(e).__name__}")
            return ReceiveResult(
                success=False,
                message=GENERIC_FAILURE_MESSAGE,
                error_kind=type(e).__name__,
            )
        return ReceiveResult(success=True, message=message)

    def fetch_carrier(self, path: Union[str, Path]) -> bytes:
        """Read carrier bytes from disk."""
        return Path(path).read_bytes()

    async def fetch_carrier_async(self, path: Union[str, Path]) -> bytes:
        """Read carrier bytes from disk without blocking the event loop."""
        return await asyncio.to_thread(self.fetch_carrier, path)

    async def receive_file(self, path: Union[str, Path], seed: str) -> ReceiveResult:
        """Fetch a carrier file, then run the receive pipeline on it."""
        carrier_bytes = await self.fetch_carrier_async(path)
        return self.receive(carrier_bytes, seed)

    def save(self, wav_bytes: bytes, path: Optional[Union[str, Path]] = None) -> Path:
        """Write WAV bytes to ``path`` (default: configured output filename)."""
        path = Path(path or self._config.output_filename)
        path.write_bytes(wav_bytes)
        logger.info(f"Wrote {len(wav_bytes)} bytes to {path}")
        return path
