import stat
import unittest

from twinpane.filesystem.items import (
    FileSystemItem,
    ItemKind,
    describe_item,
    format_mode,
    format_size,
)


class FileSystemItemTests(unittest.TestCase):
    def test_name_defaults_to_basename(self):
        item = FileSystemItem.regular_file("/tmp/notes.TXT")

        self.assertEqual(item.name, "notes.TXT")
        self.assertEqual(item.extension, "txt")
        self.assertTrue(item.is_file)
        self.assertFalse(item.is_dir)

    def test_equality_and_hash_use_path_only(self):
        one = FileSystemItem.regular_file("/a/b", size=10)
        two = FileSystemItem.regular_file("/a/b", size=99)

        self.assertEqual(one, two)
        self.assertEqual(len({one, two}), 1)

    def test_kind_predicates(self):
        self.assertTrue(FileSystemItem.directory("/d", is_empty=True).is_dir)
        self.assertTrue(FileSystemItem.directory("/d", is_empty=True).is_empty)
        self.assertTrue(FileSystemItem.symlink("/l", "/d").is_symlink)
        self.assertTrue(FileSystemItem.unknown("/sock").is_unknown)
        self.assertEqual(FileSystemItem.unknown("/sock").kind, ItemKind.UNKNOWN)

    def test_hidden_detection(self):
        self.assertTrue(FileSystemItem.regular_file("/home/u/.bashrc").is_hidden)
        self.assertFalse(FileSystemItem.regular_file("/home/u/bashrc").is_hidden)

    def test_display_name_marks_directories_and_links(self):
        self.assertEqual(FileSystemItem.directory("/x/src").display_name, "src/")
        self.assertEqual(FileSystemItem.symlink("/x/l", "/y").display_name, "l -> /y")


class FormattingTests(unittest.TestCase):
    def test_format_size_units(self):
        self.assertEqual(format_size(512), "512B")
        self.assertEqual(format_size(2048), "2.0K")
        self.assertEqual(format_size(5 * 1048576), "5.0M")
        self.assertEqual(format_size(3 * 1073741824), "3.0G")

    def test_format_mode_infers_type_bits(self):
        item = FileSystemItem.directory("/d", mode=0o755)

        self.assertEqual(format_mode(item), "drwxr-xr-x")

    def test_format_mode_keeps_existing_type_bits(self):
        item = FileSystemItem.regular_file("/f", mode=stat.S_IFREG | 0o644)

        self.assertEqual(format_mode(item), "-rw-r--r--")

    def test_describe_item_lists_symlink_target(self):
        lines = describe_item(FileSystemItem.symlink("/l", "/target"))

        self.assertIn("Name: l", lines)
        self.assertIn("Target: /target", lines)


if __name__ == "__main__":
    unittest.main()
