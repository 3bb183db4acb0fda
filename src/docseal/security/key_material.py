"""Key material derivation from a single configured key string.

There is no KDF here. The IV is the UTF-8 encoding of characters [0, 16)
of the key string and the cipher key is the UTF-8 encoding of characters
[16, 48). Slicing happens on characters, not bytes, so non-ASCII key
strings change the derived byte lengths. This is kept as-is because
changing it would break every document sealed so far.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from docseal.core.hashing import calculate_sha256_text
from .errors import KeyDerivationError

logger = logging.getLogger(__name__)

IV_SIZE = 16
IV_SLICE = slice(0, 16)
KEY_SLICE = slice(16, 48)
# AES-128, AES-192, AES-256
VALID_KEY_SIZES = (16, 24, 32)


class KeyMaterial(NamedTuple):
    iv: bytes
    key: bytes


def is_ascii_key(key_string: str) -> bool:
    """True when every character the derivation reads is ASCII."""
    return key_string[: KEY_SLICE.stop].isascii()


def derive(key_string: str) -> KeyMaterial:
    """
    Derive ``(iv, key)`` from ``key_string``.

    Raises:
        KeyDerivationError: if ``key_string`` is not encodable text, the IV
            is not 16 bytes, or the key is not 16, 24 or 32 bytes long.
    """
    if not isinstance(key_string, str):
        raise KeyDerivationError(
            f"key string must be str, not {type(key_string).__name__}"
        )

    if not is_ascii_key(key_string):
        # Never include the key itself in the message.
        logger.warning(
            "Key string contains non-ASCII characters in its first %d characters; "
            "derived lengths may differ from the character count",
            KEY_SLICE.stop,
        )

    try:
        iv = key_string[IV_SLICE].encode("utf-8")
        key = key_string[KEY_SLICE].encode("utf-8")
    except UnicodeEncodeError as exc:
        # Lone surrogates, e.g. undecodable bytes from the environment.
        raise KeyDerivationError("key string is not valid UTF-8 text") from exc

    if len(iv) != IV_SIZE:
        raise KeyDerivationError(
            f"derived IV is {len(iv)} bytes, expected {IV_SIZE}"
        )
    if len(key) not in VALID_KEY_SIZES:
        raise KeyDerivationError(
            f"derived key is {len(key)} bytes, expected one of {VALID_KEY_SIZES}"
        )
    return KeyMaterial(iv=iv, key=key)


def generate_key_string(username: str, password: str) -> str:
    """
    Build a key string from a username and password.

    The result is the first 16 hex digits of SHA-256(username) followed by
    the full 64 hex digits of SHA-256(password). It is always ASCII, so the
    IV is 16 bytes and the key is 32 bytes (AES-256).
    """
    if not username or not username.strip() or not password or not password.strip():
        raise ValueError("username and password are required")
    return calculate_sha256_text(username)[:16] + calculate_sha256_text(password)[:64]
