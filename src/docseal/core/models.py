"""
Base data models for documents managed by DocSeal
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional


class DocumentState(Enum):
    # Whether a document on disk currently holds a sealed frame
    SEALED = "sealed"
    PLAIN = "plain"
    EMPTY = "empty"


@dataclass
class Document:
    """A file under the document directory."""

    path: Path
    size: int
    state: DocumentState
    modified_at: Optional[datetime] = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_sealed(self) -> bool:
        return self.state is DocumentState.SEALED

    def to_dict(self):
        """
        Convert document to dict
        """
        return {
            "path": str(self.path),
            "name": self.name,
            "size": self.size,
            "state": self.state.value,
            "modified_at": self.modified_at.isoformat() if self.modified_at else None,
        }
