"""Tests for configuration loading and validation."""

from __future__ import annotations

import os
from pathlib import Path
import tempfile
import unittest
from unittest.mock import patch

from syncai_chat.config import DEFAULT_CONFIG, ensure_config_dir, load_config


class ConfigTests(unittest.TestCase):
    """Validate defaults, merging, and fallback behavior."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.config_path = Path(self._tmp.name) / "syncai" / "config.toml"
        env = patch.dict(os.environ, {}, clear=False)
        env.start()
        self.addCleanup(env.stop)
        os.environ.pop("SYNCAI_MODEL", None)

    def _write(self, text: str) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(text, encoding="utf-8")

    def test_missing_file_yields_defaults(self) -> None:
        config = load_config(self.config_path)
        self.assertEqual(config, DEFAULT_CONFIG)
        self.assertEqual(config["completion"]["model"], "gemini-1.5-flash")
        self.assertEqual(config["completion"]["api_key_env"], "GEMINI_API_KEY")
        self.assertEqual(config["ui"]["scroll_tolerance"], 1)
        self.assertEqual(len(config["ui"]["example_prompts"]), 3)
        self.assertTrue(self.config_path.parent.exists())

    def test_partial_override_is_merged(self) -> None:
        self._write(
            """
[completion]
model = "gemini-2.0-flash"
timeout_seconds = 30

[ui]
scroll_tolerance = 3
example_prompts = ["  one  ", "", "two"]
"""
        )
        config = load_config(self.config_path)
        self.assertEqual(config["completion"]["model"], "gemini-2.0-flash")
        self.assertEqual(config["completion"]["timeout_seconds"], 30)
        self.assertEqual(config["completion"]["api_key_env"], "GEMINI_API_KEY")
        self.assertEqual(config["ui"]["scroll_tolerance"], 3)
        self.assertEqual(config["ui"]["example_prompts"], ["one", "two"])
        self.assertEqual(config["keybinds"]["quit"], "ctrl+q")

    def test_app_class_alias_round_trips(self) -> None:
        self._write('[app]\nclass = "my-terminal"\n')
        config = load_config(self.config_path)
        self.assertEqual(config["app"]["class"], "my-terminal")

    def test_invalid_values_fall_back_to_defaults(self) -> None:
        self._write('[ui]\nuser_message_color = "blue"\n')
        with self.assertLogs("syncai_chat.config", level="WARNING"):
            config = load_config(self.config_path)
        self.assertEqual(config, DEFAULT_CONFIG)

    def test_invalid_api_key_env_name_falls_back(self) -> None:
        self._write('[completion]\napi_key_env = "not a var"\n')
        with self.assertLogs("syncai_chat.config", level="WARNING"):
            config = load_config(self.config_path)
        self.assertEqual(config["completion"]["api_key_env"], "GEMINI_API_KEY")

    def test_malformed_toml_falls_back(self) -> None:
        self._write("[completion\nmodel = ")
        with self.assertLogs("syncai_chat.config", level="WARNING"):
            config = load_config(self.config_path)
        self.assertEqual(config, DEFAULT_CONFIG)

    def test_log_level_is_normalized(self) -> None:
        self._write('[logging]\nlevel = "debug"\n')
        self.assertEqual(load_config(self.config_path)["logging"]["level"], "DEBUG")

    def test_model_env_override(self) -> None:
        self._write('[completion]\nmodel = "gemini-2.0-flash"\n')
        os.environ["SYNCAI_MODEL"] = "gemini-1.5-pro"
        self.assertEqual(
            load_config(self.config_path)["completion"]["model"], "gemini-1.5-pro"
        )

    def test_defaults_are_not_mutated(self) -> None:
        os.environ["SYNCAI_MODEL"] = "gemini-override"
        load_config(self.config_path)
        self.assertEqual(DEFAULT_CONFIG["completion"]["model"], "gemini-1.5-flash")

    def test_ensure_config_dir(self) -> None:
        target = Path(self._tmp.name) / "nested" / "dir"
        self.assertEqual(ensure_config_dir(target), target)
        self.assertTrue(target.is_dir())


if __name__ == "__main__":
    unittest.main()
