import os
import unittest
from pathlib import Path
from unittest import mock

from _support import FakeFileSystem
from twinpane.core import config as config_mod
from twinpane.filesystem.sorting import SortOrder

SAMPLE = """
[core]
tick_rate = 500
directory_first = true
sort_by_name = "asc"
sort_by_date = "sideways"
show_hidden = "no"
list_arrow = "=> "

[hotkey_commands_programs]
command_1 = "~/projects"
command_2 = "/var/log"

[file_associated_programs]
py = "vim"
default = "less"
"""


class ConfigTests(unittest.TestCase):
    def test_defaults(self):
        config = config_mod.AppConfig()

        self.assertEqual(config.tick_rate, 240)
        self.assertTrue(config.show_hidden)
        self.assertTrue(config.sort_policy().is_unordered)
        self.assertEqual(config.hotkey_path("command_1"), "")

    def test_parse_core_section(self):
        config = config_mod.parse_config(SAMPLE)

        self.assertEqual(config.tick_rate, 500)
        self.assertFalse(config.show_hidden)
        self.assertEqual(config.list_arrow, "=> ")
        policy = config.sort_policy()
        self.assertTrue(policy.directories_first)
        self.assertEqual(policy.by_name, SortOrder.ASC)
        self.assertEqual(policy.by_date, SortOrder.NONE)

    def test_hotkeys_expand_home(self):
        config = config_mod.parse_config(SAMPLE)

        self.assertEqual(config.hotkey_path("command_1"), os.path.expanduser("~/projects"))
        self.assertEqual(config.hotkey_path("command_2"), "/var/log")
        self.assertEqual(config.hotkey_path("command_9"), "")

    def test_file_associations_fall_back_to_default(self):
        config = config_mod.parse_config(SAMPLE)

        self.assertEqual(config.program_for("py"), "vim")
        self.assertEqual(config.program_for("txt"), "less")

    def test_keyboard_table_parses_bindings(self):
        with self.assertLogs("twinpane.core.config", level="WARNING"):
            config = config_mod.parse_config(
                "[keyboard_cfg]\n"
                "quit = {key = \"x\", modifier = \"control\"}\n"
                "move_down = \"down\"\n"
                "copy = [{key = \"f5\"}, \"y\"]\n"
                "delete = 3\n"
            )

        self.assertEqual(config.key_bindings, {
            "quit": (("x", "c"),),
            "move_down": (("down", ""),),
            "copy": (("f5", ""), ("y", "")),
        })

    def test_keyboard_table_defaults_to_no_overrides(self):
        self.assertEqual(config_mod.parse_config(SAMPLE).key_bindings, {})

    def test_invalid_toml_yields_defaults(self):
        with self.assertLogs("twinpane.core.config", level="WARNING"):
            config = config_mod.parse_config("[core\ntick_rate = ")

        self.assertEqual(config, config_mod.AppConfig())

    def test_bad_values_are_coerced(self):
        config = config_mod.parse_config('[core]\ntick_rate = "fast"\nshow_icons = "yes"\nlist_arrow = 3\n')

        self.assertEqual(config.tick_rate, 240)
        self.assertTrue(config.show_icons)
        self.assertEqual(config.list_arrow, "> ")

    def test_tick_rate_has_a_floor(self):
        self.assertEqual(config_mod.parse_config("[core]\ntick_rate = -5\n").tick_rate, 1)

    def test_with_sort_policy_round_trips(self):
        config = config_mod.AppConfig()
        policy = config.sort_policy().with_axis("attr", "desc")

        self.assertEqual(config.with_sort_policy(policy).sort_policy(), policy)

    def test_default_config_paths_honour_env_override(self):
        fake_home = Path("/tmp/fakehome")
        with mock.patch.dict(os.environ, {"TWINPANE_CONFIG": "/etc/twinpane.toml"}), \
                mock.patch.object(config_mod.Path, "home", return_value=fake_home):
            paths = config_mod.default_config_paths()

        self.assertEqual(paths, [Path("/etc/twinpane.toml"), fake_home / ".config" / "twinpane" / "config.toml"])

    def test_load_config_reads_first_existing_file_through_port(self):
        fs = FakeFileSystem()
        fs.texts["/second.toml"] = "[core]\ntick_rate = 99\n"

        config = config_mod.load_config(fs, paths=["/first.toml", "/second.toml"])

        self.assertEqual(config.tick_rate, 99)

    def test_load_config_without_files_returns_defaults(self):
        self.assertEqual(config_mod.load_config(FakeFileSystem(), paths=["/none.toml"]), config_mod.AppConfig())


if __name__ == "__main__":
    unittest.main()
