from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from vinyard import config


class ConfigBehaviorTests(unittest.TestCase):
    def test_missing_config_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("vinyard.config.CONFIG_PATH", Path(tmp) / "absent.json"):
                self.assertEqual(config.load_config(), {})
                self.assertEqual(config.load_editor_config(), config.EditorConfig())

    def test_valid_keys_override_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(
                json.dumps({"tab_stop": 4, "quit_times": 3, "message_ttl_seconds": 2.5, "leader_timeout_ms": 500}),
                encoding="utf-8",
            )
            with mock.patch("vinyard.config.CONFIG_PATH", config_path):
                loaded = config.load_editor_config()

        self.assertEqual(loaded.tab_stop, 4)
        self.assertEqual(loaded.quit_times, 3)
        self.assertEqual(loaded.message_ttl_seconds, 2.5)
        self.assertEqual(loaded.leader_timeout_ms, 500)
        self.assertEqual(loaded.escape_timeout_ms, 100)

    def test_invalid_values_fall_back_per_key(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(
                json.dumps({"tab_stop": 0, "quit_times": True, "poll_timeout_ms": "fast", "escape_timeout_ms": 50}),
                encoding="utf-8",
            )
            with mock.patch("vinyard.config.CONFIG_PATH", config_path):
                loaded = config.load_editor_config()

        self.assertEqual(loaded.tab_stop, 2)
        self.assertEqual(loaded.quit_times, 2)
        self.assertEqual(loaded.poll_timeout_ms, 100)
        self.assertEqual(loaded.escape_timeout_ms, 50)

    def test_malformed_or_non_object_config_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("vinyard.config.CONFIG_PATH", config_path):
                config_path.write_text("{not json", encoding="utf-8")
                self.assertEqual(config.load_config(), {})
                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config(), {})


if __name__ == "__main__":
    unittest.main()
