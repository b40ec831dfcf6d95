"""
Whisper Me Key Derivation Module

This module turns the shared seed string into the fixed-size key used by the
XOR stream cipher. The derivation is a single SHA-256 pass over the UTF-8
bytes of the seed, truncated to the first 16 bytes of the digest.

There is no salt and no iteration count: the same seed must always produce
the same key on the sending and receiving side, and the seed is the only
secret the two parties share.

Example Usage:
    >>> from whisper_core.crypto.kdf import SeedKeyDerivation
    >>> kdf = SeedKeyDerivation()
    >>> key = kdf.derive("password123")
    >>> len(key)
    16

Dependencies:
- cryptography: SHA-256 digest primitive
"""

import logging

from cryptography.hazmat.primitives import hashes

from .cipher import CryptoError

logger = logging.getLogger(__name__)

# Length of the derived key in bytes
KEY_LENGTH = 16


class SeedKeyDerivation:
    """
    Seed to key derivation using a truncated SHA-256 digest.

    The class is stateless; instances exist so callers can inject an
    alternative derivation in tests without patching module functions.

    Attributes:
        key_length: Number of digest bytes kept as the key (always 16)
    """

    key_length = KEY_LENGTH

    def digest(self, seed: str) -> bytes:
        """Return the full 32-byte SHA-256 digest of the UTF-8 seed."""
        if not isinstance(seed, str):
            raise CryptoError(
                f"Seed must be a string, got {type(seed).__name__}",
                code=1101,
            )

        hasher = hashes.Hash(hashes.SHA256())
        hasher.update(seed.encode("utf-8"))
        return hasher.finalize()

    def derive(self, seed: str) -> bytes:
        """
        Derive the cipher key for a seed.

        Args:
            seed: Shared seed string. Any length is accepted here; the
                minimum length is enforced by the caller.

        Returns:
            The first 16 bytes of SHA-256(seed)

        Raises:
            CryptoError: If seed is not a string
        """
        key = self.digest(seed)[:self.key_length]
        logger.debug(f"Derived {len(key)}-byte key from seed")
        return key


_default_kdf = SeedKeyDerivation()


def derive_key(seed: str) -> bytes:
    """Derive the 16-byte cipher key for ``seed``."""
    return _default_kdf.derive(seed)
