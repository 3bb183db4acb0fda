""" Utility for hashing operations. """

import hashlib


def calculate_sha256_bytes(data: bytes) -> str:
    # Calculates the SHA-256 hex digest of a byte string.
    return hashlib.sha256(data).hexdigest()


def calculate_sha256_text(text: str) -> str:
    # Hex digest of the UTF-8 encoding of text.
    return calculate_sha256_bytes(text.encode("utf-8"))
