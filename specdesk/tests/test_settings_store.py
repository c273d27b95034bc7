import tempfile
import unittest
from pathlib import Path

import yaml

from specdesk.models import DesktopConfig
from specdesk.settings import SettingsStore
from specdesk.state import DesktopState


class SettingsStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = Path(self.tmpdir.name) / "desktop.yaml"

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_missing_file_loads_defaults(self) -> None:
        loaded = SettingsStore(self.path).load()
        self.assertEqual(loaded, DesktopConfig())
        self.assertFalse(self.path.exists())

    def test_corrupt_file_loads_defaults(self) -> None:
        self.path.write_text("window: [unclosed\n", encoding="utf-8")
        with self.assertLogs("specdesk.settings", level="WARNING"):
            loaded = SettingsStore(self.path).load()
        self.assertEqual(loaded, DesktopConfig())

    def test_update_normalizes_and_persists(self) -> None:
        store = SettingsStore(self.path)
        store.load()

        settings = DesktopConfig()
        settings.appearance.theme = "neon"
        settings.updates.channel = "nightly"
        settings.window.width = 1024
        saved = store.update(settings)

        self.assertEqual(saved.appearance.theme, "system")
        self.assertEqual(saved.updates.channel, "stable")
        on_disk = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        self.assertEqual(on_disk["window"]["width"], 1024)

        reloaded = SettingsStore(self.path).load()
        self.assertEqual(reloaded.window.width, 1024)

    def test_read_returns_copy(self) -> None:
        store = SettingsStore(self.path)
        store.load()

        snapshot = store.read()
        snapshot.window.width = 1

        self.assertEqual(store.read().window.width, 1400)

    def test_mutate_persists(self) -> None:
        store = SettingsStore(self.path)
        store.load()

        result = store.mutate(lambda cfg: setattr(cfg, "activeProjectId", "abc"))

        self.assertEqual(result.activeProjectId, "abc")
        self.assertEqual(SettingsStore(self.path).load().activeProjectId, "abc")


class DesktopStateTests(unittest.TestCase):
    def test_set_active_project_records_preference(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            base = Path(tmpdir)
            (base / "proj" / "specs").mkdir(parents=True)
            state = DesktopState(base / "config")
            project = state.project_store.add_project(base / "proj")

            active = state.set_active_project(project.id)

            self.assertEqual(active.id, project.id)
            self.assertEqual(state.settings.read().activeProjectId, project.id)
            self.assertIsNone(state.set_active_project("missing"))


if __name__ == "__main__":
    unittest.main()
