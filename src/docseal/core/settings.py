"""
Persisted settings for DocSeal.

Layout on disk (JSON):
    {
        "working_directory": "",
        "document_directory": "",
        "encryption_key": ""
    }

Missing fields fall back to defaults so older settings files keep loading.
The encryption key is only ever changed through an explicit user action
(``set-key``, ``generate-key`` or the settings dialog).
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

from .exceptions import SettingsError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path.home() / ".docseal" / "settings.json"


@dataclass
class Settings:
    working_directory: str = ""
    document_directory: str = ""
    encryption_key: str = ""

    @property
    def has_key(self) -> bool:
        return bool(self.encryption_key)


class SettingsStore:
    """Load and save :class:`Settings` as a JSON file."""

    def __init__(self, path: Optional[Path | str] = None):
        self.path = Path(path).expanduser() if path else DEFAULT_SETTINGS_PATH

    def load(self) -> Settings:
        if not self.path.exists():
            return Settings()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise SettingsError(f"Cannot read settings file {self.path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise SettingsError(f"Settings file {self.path} must contain a JSON object")

        known = {f.name for f in fields(Settings)}
        values = {}
        for name, value in raw.items():
            if name not in known:
                logger.debug("Ignoring unknown setting %r", name)
                continue
            if not isinstance(value, str):
                raise SettingsError(f"Setting {name!r} must be a string")
            values[name] = value
        return Settings(**values)

    def save(self, settings: Settings) -> None:
        # Write to a sibling temp file first so a crash never truncates settings.
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(asdict(settings), f, indent=2)
        os.replace(tmp_path, self.path)
        logger.info("Saved settings to %s", self.path)
