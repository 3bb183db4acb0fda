"""
Storage helpers for reading and replacing documents on disk.

Writes follow write-after-success: callers compute the full result buffer
first and only then hand it to :meth:`Storage.replace`, which writes a
temporary file in the same directory and moves it over the original with
``os.replace``. A failed transform therefore never touches the document,
and a crash mid-write leaves either the old or the new content.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from .exceptions import DocumentNotFoundError


class Storage:
    """Byte-level document access"""

    def read(self, path: Path | str) -> bytes:
        p = Path(path)
        if not p.is_file():
            raise DocumentNotFoundError(f"Document not found: {p}")
        return p.read_bytes()

    def replace(self, path: Path | str, data: bytes) -> None:
        p = Path(path)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{p.name}.", suffix=".tmp", dir=p.parent)
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            # Keep the original permission bits.
            if p.exists():
                os.chmod(tmp_path, p.stat().st_mode & 0o777)
            os.replace(tmp_path, p)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
