"""Application context shared by the HTTP layer."""
from __future__ import annotations

from pathlib import Path

from specdesk import config
from specdesk.project_manager import ProjectStore
from specdesk.services.spec_commands import SpecCommands
from specdesk.settings import SettingsStore


class DesktopState:
    """Registry, preferences and spec commands for one config directory."""

    def __init__(self, config_dir: Path = config.CONFIG_DIR):
        self.project_store = ProjectStore(config_dir)
        self.settings = SettingsStore(config_dir / config.SETTINGS_FILE)
        self.settings.load()
        self.commands = SpecCommands(self.project_store)

    def set_active_project(self, project_id: str):
        project = self.project_store.set_active(project_id)
        if project is not None:
            self.settings.mutate(lambda s: setattr(s, "activeProjectId", project.id))
        return project
