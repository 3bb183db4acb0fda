"""Encryption core for DocSeal.

This package provides the only compatibility-critical part of DocSeal:
- key material derivation from a single key string (no KDF)
- the marker-prefixed frame format (00 02 73 DB ++ ciphertext)
- AES-CBC/PKCS7 encrypt and decrypt over frames
- the four error kinds the core can raise

Everything here is pure and stateless; callers pass the key string on
every call.
"""

from .crypto import encrypt, decrypt, try_encrypt, try_decrypt
from .errors import (
    ErrorKind,
    CipherResult,
    CryptoError,
    KeyDerivationError,
    InvalidFrameError,
    EncryptionError,
    DecryptionError,
)
from .framing import MAGIC_MARKER, wrap, unwrap, has_marker
from .key_material import KeyMaterial, derive, generate_key_string, is_ascii_key

__all__ = [
    "encrypt",
    "decrypt",
    "try_encrypt",
    "try_decrypt",
    "ErrorKind",
    "CipherResult",
    "CryptoError",
    "KeyDerivationError",
    "InvalidFrameError",
    "EncryptionError",
    "DecryptionError",
    "MAGIC_MARKER",
    "wrap",
    "unwrap",
    "has_marker",
    "KeyMaterial",
    "derive",
    "generate_key_string",
    "is_ascii_key",
]
