"""Desktop preferences persisted as YAML.

``SettingsStore`` is constructed explicitly and handed to whoever needs it;
reads return copies and every write happens under the store's lock.
"""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable

import yaml
from pydantic import ValidationError

from specdesk import config
from specdesk.models import DesktopConfig

logger = logging.getLogger("specdesk.settings")

_THEMES = {"light", "dark", "system"}
_CHANNELS = {"stable", "beta"}


def normalize_config(settings: DesktopConfig) -> DesktopConfig:
    if settings.appearance.theme not in _THEMES:
        settings.appearance.theme = "system"
    if settings.updates.channel not in _CHANNELS:
        settings.updates.channel = "stable"
    return settings


class SettingsStore:
    def __init__(self, path: Path = config.CONFIG_DIR / config.SETTINGS_FILE):
        self.path = path
        self._lock = threading.Lock()
        self._config = DesktopConfig()

    def load(self) -> DesktopConfig:
        """Read preferences from disk, falling back to defaults."""
        loaded = DesktopConfig()
        if self.path.exists():
            try:
                raw = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
                loaded = normalize_config(DesktopConfig.model_validate(raw))
            except (OSError, yaml.YAMLError, ValidationError) as exc:
                logger.warning("Failed to parse desktop config %s: %s", self.path, exc)
        with self._lock:
            self._config = loaded
            return loaded.model_copy(deep=True)

    def _persist_locked(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        serialized = yaml.safe_dump(self._config.model_dump(), sort_keys=False, allow_unicode=True)
        self.path.write_text(serialized, encoding="utf-8")

    def persist(self) -> None:
        with self._lock:
            self._persist_locked()

    def read(self) -> DesktopConfig:
        with self._lock:
            return self._config.model_copy(deep=True)

    def update(self, settings: DesktopConfig) -> DesktopConfig:
        with self._lock:
            self._config = normalize_config(settings.model_copy(deep=True))
            self._persist_locked()
            return self._config.model_copy(deep=True)

    def mutate(self, mutator: Callable[[DesktopConfig], None]) -> DesktopConfig:
        """Apply ``mutator`` to the live config and persist the result."""
        with self._lock:
            mutator(self._config)
            normalize_config(self._config)
            self._persist_locked()
            return self._config.model_copy(deep=True)
