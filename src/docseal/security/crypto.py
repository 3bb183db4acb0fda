"""AES-CBC encryption core producing marker-prefixed frames.

Both operations are pure: ``(bytes, key string) -> bytes``. There is no
session, no randomness and no I/O. The IV comes from the key string, so
encrypting the same plaintext with the same key always yields the same
frame.

This scheme is not authenticated. A wrong key is detected only through
PKCS7 padding validation, which a wrong key passes roughly once in 256
attempts, producing garbage instead of an error.
"""

from __future__ import annotations

import logging

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import (
    CipherResult,
    CryptoError,
    DecryptionError,
    EncryptionError,
)
from .framing import has_marker, unwrap, wrap
from .key_material import derive

logger = logging.getLogger(__name__)

BLOCK_SIZE = 16
_PADDING_BITS = algorithms.AES.block_size


def _cipher(key: bytes, iv: bytes) -> Cipher:
    return Cipher(algorithms.AES(key), modes.CBC(iv))


def encrypt(plaintext: bytes, key_string: str) -> bytes:
    """
    Encrypt ``plaintext`` and return a frame.

    Raises:
        KeyDerivationError: the key string yields unusable IV/key lengths.
        EncryptionError: the primitive rejected the input.
    """
    material = derive(key_string)
    try:
        padder = padding.PKCS7(_PADDING_BITS).padder()
        padded = padder.update(plaintext) + padder.finalize()
        encryptor = _cipher(material.key, material.iv).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
    except (TypeError, ValueError) as exc:
        raise EncryptionError(f"encryption failed: {exc}") from exc
    return wrap(ciphertext)


def decrypt(frame: bytes, key_string: str, allow_legacy: bool = False) -> bytes:
    """
    Decrypt a frame produced by :func:`encrypt`.

    With ``allow_legacy`` set, input without the marker is decrypted as
    bare ciphertext from the older marker-less format. Off by default.

    Raises:
        InvalidFrameError: input is not a frame of this format.
        KeyDerivationError: the key string yields unusable IV/key lengths.
        DecryptionError: padding or primitive rejection, typically a wrong key.
    """
    if allow_legacy and not has_marker(frame):
        logger.info("Decrypting marker-less input in legacy mode")
        ciphertext = bytes(frame)
    else:
        ciphertext = unwrap(frame)

    material = derive(key_string)

    if not ciphertext or len(ciphertext) % BLOCK_SIZE:
        raise DecryptionError(
            "decryption failed, check key correctness "
            f"(ciphertext length {len(ciphertext)} is not a positive multiple of {BLOCK_SIZE})"
        )

    try:
        decryptor = _cipher(material.key, material.iv).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(_PADDING_BITS).unpadder()
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise DecryptionError("decryption failed, check key correctness") from exc


def try_encrypt(plaintext: bytes, key_string: str) -> CipherResult:
    """Like :func:`encrypt` but returns a :class:`CipherResult`."""
    try:
        return CipherResult(value=encrypt(plaintext, key_string))
    except CryptoError as exc:
        return CipherResult(error=exc)


def try_decrypt(frame: bytes, key_string: str, allow_legacy: bool = False) -> CipherResult:
    """Like :func:`decrypt` but returns a :class:`CipherResult`."""
    try:
        return CipherResult(value=decrypt(frame, key_string, allow_legacy=allow_legacy))
    except CryptoError as exc:
        return CipherResult(error=exc)
