# Whisper Me Test Configuration
# This file contains test settings and fixtures

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from whisper_core.config import WhisperConfig
from whisper_core.manager import WhisperManager
from whisper_core.stego.buffer import AudioContext
from whisper_core.stego.carrier import CarrierSynthesizer


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return os.path.dirname(os.path.dirname(__file__))


@pytest.fixture
def temp_directory(tmp_path):
    """Provide a temporary directory for test operations."""
    return tmp_path


@pytest.fixture
def audio_context():
    """Provide a low-rate audio context to keep buffers small."""
    return AudioContext(sample_rate=8000)


@pytest.fixture
def small_carrier(audio_context):
    """Provide a one second carrier at 8 kHz (8000 samples)."""
    return CarrierSynthesizer(audio_context).generate(duration=1)


@pytest.fixture
def small_config():
    """Configuration for a one second 8 kHz carrier."""
    return WhisperConfig.from_dict({"duration_seconds": 1, "sample_rate": 8000})


@pytest.fixture
def manager(small_config):
    """Provide a manager on the small carrier configuration."""
    return WhisperManager(small_config)


@pytest.fixture
def default_manager():
    """Provide a manager with the default 8 s / 44.1 kHz carrier."""
    return WhisperManager()
