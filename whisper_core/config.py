"""
Configuration for the Whisper Me send and receive pipelines.

Only operational settings live here. The embedding wire format (magic
pattern, amplitudes, thresholds, length limit) is fixed in
:mod:`whisper_core.stego.audio` and cannot be changed through config, since
sender and receiver must agree on it bit for bit.
"""

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Exception raised for invalid configuration."""

    def __init__(self, message: str, code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        base = f"ConfigError: {self.message}"
        if self.code:
            base += f" (Code: {self.code})"
        return base


@dataclass
class WhisperConfig:
    """Configuration for carrier generation and input validation."""
    duration_seconds: float
    sample_rate: int
    min_seed_length: int
    output_filename: str
    log_level: str

    def __post_init__(self) -> None:
        self.validate()

    @classmethod
    def default(cls) -> 'WhisperConfig':
        """Get default configuration."""
        return cls(
            duration_seconds=8,
            sample_rate=44100,
            min_seed_length=8,
            output_filename="whisper-me-message.wav",
            log_level="WARNING",
        )

    def validate(self) -> None:
        if not isinstance(self.duration_seconds, (int, float)) or self.duration_seconds <= 0:
            raise ConfigError(
                f"duration_seconds must be a positive number, got {self.duration_seconds!r}",
                code=5001,
            )
        if not isinstance(self.sample_rate, int) or self.sample_rate <= 0:
            raise ConfigError(
                f"sample_rate must be a positive integer, got {self.sample_rate}",
                code=5002,
            )
        if not isinstance(self.min_seed_length, int) or self.min_seed_length < 1:
            raise ConfigError(
                f"min_seed_length must be an integer of at least 1, got {self.min_seed_length!r}",
                code=5003,
            )
        if not isinstance(self.output_filename, str) or not self.output_filename:
            raise ConfigError(
                f"output_filename must be a non-empty string, got {self.output_filename!r}",
                code=5005,
            )
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level}",
                code=5004,
            )

    @property
    def sample_count(self) -> int:
        """Number of samples in a generated carrier."""
        return int(round(self.duration_seconds * self.sample_rate))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WhisperConfig':
        """
        Create configuration from a dictionary.

        Missing keys fall back to the defaults; unknown keys are rejected.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                code=5010,
                details={"unknown": unknown},
            )

        merged = cls.default().to_dict()
        merged.update(data)
        return cls(**merged)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'WhisperConfig':
        """Load configuration from a JSON file."""
        path = Path(path)
        try:
            with path.open('r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to load config {path}: {e}", code=5020)

        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must contain a JSON object", code=5021)

        logger.debug(f"Loaded configuration from {path}")
        return cls.from_dict(data)

    def save(self, path: Union[str, Path]) -> None:
        """Write configuration to a JSON file."""
        with Path(path).open('w') as f:
            json.dump(self.to_dict(), f, indent=2)
