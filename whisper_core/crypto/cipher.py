"""
Whisper Me XOR Stream Cipher.

The payload hidden in the carrier is the UTF-8 message XORed byte by byte
with the derived key, the key being cycled over the message:

    cipher[i] = plain[i] ^ key[i % len(key)]

XOR is its own inverse, so encryption and decryption share one
implementation. This is obfuscation keyed by the shared seed, not
authenticated encryption: a wrong key decrypts without error into garbage.
"""

import logging
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


class CryptoError(Exception):
    """
    Exception raised for key derivation and cipher misuse.

    Attributes:
        message: Human-readable error description
        code: Numeric error code
        details: Extra context for diagnostics
    """

    def __init__(self, message: str, code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        base = f"CryptoError: {self.message}"
        if self.code:
            base += f" (Code: {self.code})"
        return base


class XorStreamCipher:
    """
    Repeating-key XOR cipher bound to a single key.

    Example:
        >>> cipher = XorStreamCipher(b"\\x01\\x02")
        >>> cipher.apply(b"\\x00\\x00\\x00")
        b'\\x01\\x02\\x01'
    """

    def __init__(self, key: bytes):
        if not isinstance(key, (bytes, bytearray)):
            raise CryptoError(
                f"Key must be bytes, got {type(key).__name__}",
                code=1201,
            )
        if not key:
            raise CryptoError("Key must not be empty", code=1202)

        self._key = bytes(key)
        self._key_len = len(key)

    @property
    def key_length(self) -> int:
        return self._key_len

    def apply(self, data: Union[bytes, bytearray]) -> bytes:
        """
        XOR ``data`` with the cycled key.

        The same method encrypts and decrypts.

        Raises:
            CryptoError: If data is not bytes-like
        """
        if not isinstance(data, (bytes, bytearray)):
            raise CryptoError(
                f"Cipher expects bytes-like input, got {type(data).__name__}",
                code=1203,
            )

        result = bytearray(len(data))
        for i, byte in enumerate(data):
            result[i] = byte ^ self._key[i % self._key_len]

        return bytes(result)

    encrypt = apply
    decrypt = apply


def xor_encrypt(plaintext: bytes, key: bytes) -> bytes:
    """Encrypt ``plaintext`` with ``key``."""
    return XorStreamCipher(key).apply(plaintext)


def xor_decrypt(ciphertext: bytes, key: bytes) -> bytes:
    """Decrypt ``ciphertext`` with ``key``; identical to :func:`xor_encrypt`."""
    return XorStreamCipher(key).apply(ciphertext)
