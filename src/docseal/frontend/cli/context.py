"""Small helper to build a DocSeal app context for the CLI and TUI."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from docseal.core.file_manager import DocumentManager
from docseal.core.settings import Settings, SettingsStore

logger = logging.getLogger(__name__)

SETTINGS_ENV = "DOCSEAL_SETTINGS"
KEY_ENV = "DOCSEAL_KEY"


@dataclass
class AppContext:
    """Container for runtime objects the UI needs."""

    store: SettingsStore
    settings: Settings
    dm: DocumentManager
    # True while the active key came from the environment and not the file.
    key_from_env: bool = False
    stored_key: str = ""

    def save_settings(self) -> None:
        # An environment-supplied key is never written to disk.
        to_save = self.settings
        if self.key_from_env:
            to_save = replace(self.settings, encryption_key=self.stored_key)
        self.store.save(to_save)

    def set_key(self, key: str) -> None:
        self.settings.encryption_key = key
        self.stored_key = key
        self.key_from_env = False
        self.save_settings()

    def set_document_directory(self, directory: str) -> None:
        self.settings.document_directory = directory
        self.save_settings()


def build_context(settings_path: Optional[str | Path] = None) -> AppContext:
    """
    Load settings and build a DocumentManager over them.

    Configuration sources:

    - ``settings_path`` if given, else ``DOCSEAL_SETTINGS``, else
      ``~/.docseal/settings.json``.
    - If ``DOCSEAL_KEY`` is set it replaces the stored encryption key for
      this process only; it is not persisted by :meth:`AppContext.save_settings`.
    """
    path = settings_path or os.getenv(SETTINGS_ENV) or None
    store = SettingsStore(path)
    settings = store.load()
    stored_key = settings.encryption_key

    env_key = os.getenv(KEY_ENV)
    if env_key:
        logger.info("Using encryption key from %s for this session", KEY_ENV)
        settings.encryption_key = env_key

    return AppContext(
        store=store,
        settings=settings,
        dm=DocumentManager(settings),
        key_from_env=bool(env_key),
        stored_key=stored_key,
    )
