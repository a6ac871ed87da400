from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from jjview.runtime import config
from jjview.runtime.commands import DEFAULT_REVSET
from jjview.view_model.build import DEFAULT_DESCRIPTION_WIDTH


class ConfigBehaviorTests(unittest.TestCase):
    def test_missing_config_yields_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("jjview.runtime.config.CONFIG_PATH", Path(tmp) / "config.json"):
                prefs = config.load_preferences()

        self.assertEqual(prefs, config.Preferences())
        self.assertEqual(prefs.revset, DEFAULT_REVSET)
        self.assertEqual(prefs.description_width, DEFAULT_DESCRIPTION_WIDTH)

    def test_save_preference_keeps_other_keys(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("jjview.runtime.config.CONFIG_PATH", config_path):
                config.save_preference("theme", "ocean")
                config.save_preference("full_mode", True)
                config.save_preference("collapse_depth", 2)

                saved = json.loads(config_path.read_text(encoding="utf-8"))
                prefs = config.load_preferences()

        self.assertEqual(saved, {"collapse_depth": 2, "full_mode": True, "theme": "ocean"})
        self.assertEqual(prefs.theme, "ocean")
        self.assertTrue(prefs.full_mode)
        self.assertEqual(prefs.collapse_depth, 2)

    def test_malformed_values_fall_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(
                json.dumps({"full_mode": "yes", "collapse_depth": True, "revset": "  ", "description_width": 0}),
                encoding="utf-8",
            )
            with mock.patch("jjview.runtime.config.CONFIG_PATH", config_path):
                prefs = config.load_preferences()

        self.assertFalse(prefs.full_mode)
        self.assertEqual(prefs.collapse_depth, 0)
        self.assertEqual(prefs.revset, DEFAULT_REVSET)
        self.assertEqual(prefs.description_width, DEFAULT_DESCRIPTION_WIDTH)

    def test_invalid_json_and_non_object_are_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("jjview.runtime.config.CONFIG_PATH", config_path):
                config_path.write_text("{not json", encoding="utf-8")
                self.assertEqual(config.load_config(), {})
                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config(), {})


if __name__ == "__main__":
    unittest.main()
