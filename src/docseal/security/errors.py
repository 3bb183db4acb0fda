"""Error kinds raised by the DocSeal encryption core.

Every failure in the core surfaces as exactly one of four exception
classes. Each carries an :class:`ErrorKind` tag so callers can branch on
the kind without isinstance chains, and :class:`CipherResult` offers the
same information as a plain value for callers that prefer not to catch.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from docseal.core.exceptions import DocSealError


class ErrorKind(Enum):
    KEY_DERIVATION = "key_derivation"
    INVALID_FRAME = "invalid_frame"
    ENCRYPTION = "encryption"
    DECRYPTION = "decryption"


class CryptoError(DocSealError):
    """Base exception for the encryption core."""

    kind: ErrorKind


class KeyDerivationError(CryptoError):
    """Derived IV or key has a length the cipher cannot use."""

    kind = ErrorKind.KEY_DERIVATION


class InvalidFrameError(CryptoError):
    """Input is too short or lacks the magic marker."""

    kind = ErrorKind.INVALID_FRAME


class EncryptionError(CryptoError):
    """The cipher primitive rejected the plaintext."""

    kind = ErrorKind.ENCRYPTION


class DecryptionError(CryptoError):
    """Padding or primitive rejection, usually a wrong key."""

    kind = ErrorKind.DECRYPTION


@dataclass(frozen=True)
class CipherResult:
    """Outcome of a core call: either ``value`` or ``error`` is set."""

    value: Optional[bytes] = None
    error: Optional[CryptoError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> bytes:
        """Return the value or re-raise the captured error."""
        if self.error is not None:
            raise self.error
        assert self.value is not None
        return self.value
