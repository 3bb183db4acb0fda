"""
DocumentManager for DocSeal: sealing and unsealing documents in place.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from ..security import DecryptionError, decrypt, encrypt, has_marker
from .exceptions import (
    DocSealError,
    EmptyDocumentError,
    InvalidPathError,
    KeyNotConfiguredError,
    SealConflictError,
)
from .models import Document, DocumentState
from .settings import Settings
from .storage import Storage

logger = logging.getLogger(__name__)

Failure = Tuple[Path, DocSealError]


class DocumentManager:
    """High-level document operations over storage and the encryption core."""

    def __init__(self, settings: Settings, storage: Optional[Storage] = None):
        self.settings = settings
        self.storage = storage or Storage()
        # Document currently open for editing (kept unsealed).
        self.active: Optional[Path] = None

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @property
    def document_root(self) -> Path:
        """Directory holding managed documents.

        ``document_directory`` is taken relative to ``working_directory``
        (or the current directory); an empty value manages everything
        under the base.
        """
        base = Path(self.settings.working_directory or os.getcwd()).expanduser()
        doc_dir = self.settings.document_directory.strip()
        root = base / Path(doc_dir).expanduser() if doc_dir else base
        return root.resolve()

    def is_managed(self, path: Path | str) -> bool:
        p = Path(path).expanduser().resolve()
        return p == self.document_root or self.document_root in p.parents

    def _resolve(self, path: Path | str) -> Path:
        p = Path(path).expanduser().resolve()
        if not self.is_managed(p):
            raise InvalidPathError(f"{p} is outside the document directory {self.document_root}")
        return p

    def _require_key(self) -> str:
        if not self.settings.has_key:
            raise KeyNotConfiguredError("No encryption key configured; set one first")
        return self.settings.encryption_key

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def describe(self, path: Path | str) -> Document:
        p = Path(path)
        stat = p.stat()
        if stat.st_size == 0:
            state = DocumentState.EMPTY
        else:
            with open(p, "rb") as f:
                head = f.read(4)
            state = DocumentState.SEALED if has_marker(head) else DocumentState.PLAIN
        return Document(
            path=p,
            size=stat.st_size,
            state=state,
            modified_at=datetime.fromtimestamp(stat.st_mtime),
        )

    def list_documents(self) -> List[Document]:
        """Return managed documents sorted by path, skipping hidden files."""
        root = self.document_root
        if not root.is_dir():
            return []
        docs = []
        for p in sorted(root.rglob("*")):
            rel = p.relative_to(root)
            if any(part.startswith(".") for part in rel.parts):
                continue
            if p.is_file():
                docs.append(self.describe(p))
        return docs

    # ------------------------------------------------------------------
    # Seal / unseal
    # ------------------------------------------------------------------

    def seal(self, path: Path | str) -> Document:
        """Encrypt a document in place.

        A document that already carries the frame marker is left alone
        when it decrypts with the current key. If it does not, it is either
        sealed under another key or plaintext that happens to start with
        the marker, and ``SealConflictError`` is raised without touching it.
        """
        key = self._require_key()
        p = self._resolve(path)
        content = self.storage.read(p)
        if not content:
            raise EmptyDocumentError(f"Document {p.name} is empty")
        if has_marker(content):
            try:
                decrypt(content, key)
            except DecryptionError as exc:
                logger.warning("Document %s looks sealed but does not open with the current key", p.name)
                raise SealConflictError(
                    f"Document {p.name} starts with the seal marker but does not decrypt "
                    f"with the current key; left unchanged ({exc})"
                ) from exc
            logger.info("Document %s is already sealed; skipping", p.name)
            return self.describe(p)

        sealed = encrypt(content, key)
        self.storage.replace(p, sealed)
        logger.info("Sealed %s", p.name)
        return self.describe(p)

    def unseal(self, path: Path | str, allow_legacy: bool = False) -> Document:
        """Decrypt a document in place; on failure the file is untouched."""
        key = self._require_key()
        p = self._resolve(path)
        content = self.storage.read(p)

        plain = decrypt(content, key, allow_legacy=allow_legacy)
        self.storage.replace(p, plain)
        logger.info("Unsealed %s", p.name)
        return self.describe(p)

    # ------------------------------------------------------------------
    # Active document tracking
    # ------------------------------------------------------------------

    def switch_to(self, path: Optional[Path | str]) -> List[Failure]:
        """
        Make ``path`` the active document.

        The newly opened document is unsealed first, then the previously
        active one is sealed again. Failures are logged and returned rather
        than raised so one bad document does not block the other; the
        active document is updated either way.
        """
        new = Path(path).expanduser().resolve() if path is not None else None
        if new == self.active:
            return []

        failures: List[Failure] = []
        if new is not None and self.is_managed(new):
            failures.extend(self._attempt(self._unseal_if_sealed, new))
        if self.active is not None:
            failures.extend(self._attempt(self.seal, self.active))

        self.active = new if new is not None and self.is_managed(new) else None
        return failures

    def close(self) -> List[Failure]:
        """Seal the active document, if any, and forget it."""
        failures: List[Failure] = []
        if self.active is not None:
            failures.extend(self._attempt(self.seal, self.active))
        self.active = None
        return failures

    def _unseal_if_sealed(self, path: Path) -> Document:
        doc = self.describe(path)
        if not doc.is_sealed:
            return doc
        return self.unseal(path)

    def _attempt(self, op, path: Path) -> List[Failure]:
        try:
            op(path)
        except DocSealError as exc:
            logger.warning("%s failed for %s: %s", op.__name__.lstrip("_"), path.name, exc)
            return [(path, exc)]
        except OSError as exc:
            logger.warning("%s failed for %s: %s", op.__name__.lstrip("_"), path.name, exc)
            return [(path, DocSealError(str(exc)))]
        return []
