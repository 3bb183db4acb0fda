"""Frame codec for sealed documents.

Frame layout:
- 4 bytes: magic marker 00 02 73 DB
- N bytes: AES-CBC ciphertext, PKCS7-padded to the 16-byte block size

The marker separates sealed content from arbitrary binary data and from
output of the older marker-less encoder.
"""

from .errors import InvalidFrameError


MAGIC_MARKER = b"\x00\x02\x73\xdb"
MARKER_SIZE = len(MAGIC_MARKER)


def wrap(ciphertext: bytes) -> bytes:
    return MAGIC_MARKER + bytes(ciphertext)


def unwrap(frame: bytes) -> bytes:
    """Strip the marker and return the ciphertext.

    Raises:
        InvalidFrameError: if the frame is shorter than the marker or does
            not start with it.
    """
    if len(frame) < MARKER_SIZE:
        raise InvalidFrameError("not valid ciphertext")
    if bytes(frame[:MARKER_SIZE]) != MAGIC_MARKER:
        raise InvalidFrameError("not valid ciphertext")
    return bytes(frame[MARKER_SIZE:])


def has_marker(data: bytes) -> bool:
    return len(data) >= MARKER_SIZE and bytes(data[:MARKER_SIZE]) == MAGIC_MARKER
