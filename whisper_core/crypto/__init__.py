"""
Whisper Me Cryptographic Package.

Modules:
    kdf: Seed to 16-byte key derivation (truncated SHA-256)
    cipher: Repeating-key XOR stream cipher

Usage:
    >>> from whisper_core.crypto import derive_key, xor_encrypt, xor_decrypt
    >>> key = derive_key("password123")
    >>> xor_decrypt(xor_encrypt(b"Hi", key), key)
    b'Hi'
"""

from .cipher import CryptoError, XorStreamCipher, xor_encrypt, xor_decrypt
from .kdf import KEY_LENGTH, SeedKeyDerivation, derive_key

__all__ = [
    "CryptoError",
    "XorStreamCipher",
    "xor_encrypt",
    "xor_decrypt",
    "KEY_LENGTH",
    "SeedKeyDerivation",
    "derive_key",
]
