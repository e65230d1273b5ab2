import unittest

from twinpane.filesystem.items import FileSystemItem
from twinpane.filesystem.sorting import SortAxis, SortOrder, SortPolicy, sort_items


def _names(items):
    return [item.name for item in items]


class SortOrderTests(unittest.TestCase):
    def test_parse_recognises_asc_and_desc(self):
        self.assertEqual(SortOrder.parse("asc"), SortOrder.ASC)
        self.assertEqual(SortOrder.parse(" DESC "), SortOrder.DESC)

    def test_parse_treats_anything_else_as_none(self):
        for value in ("", "ascending", None, 1):
            self.assertEqual(SortOrder.parse(value), SortOrder.NONE)


class SortItemsTests(unittest.TestCase):
    def setUp(self):
        self.items = [
            FileSystemItem.regular_file("/x/b.txt", size=5, modified=30.0),
            FileSystemItem.directory("/x/A"),
            FileSystemItem.regular_file("/x/a.txt", size=9, modified=10.0),
        ]

    def test_directories_first_then_name_ascending(self):
        policy = SortPolicy(by_name=SortOrder.ASC, directories_first=True)

        self.assertEqual(_names(sort_items(self.items, policy)), ["A", "a.txt", "b.txt"])

    def test_name_comparison_is_case_sensitive(self):
        policy = SortPolicy(by_name=SortOrder.ASC)

        self.assertEqual(_names(sort_items(self.items, policy)), ["A", "a.txt", "b.txt"])

    def test_descending_name(self):
        policy = SortPolicy(by_name=SortOrder.DESC)

        self.assertEqual(_names(sort_items(self.items, policy)), ["b.txt", "a.txt", "A"])

    def test_unordered_policy_keeps_listing_order(self):
        self.assertEqual(_names(sort_items(self.items, SortPolicy())), ["b.txt", "A", "a.txt"])
        self.assertEqual(_names(sort_items(self.items, None)), ["b.txt", "A", "a.txt"])

    def test_size_axis_breaks_name_ties_only(self):
        items = [
            FileSystemItem.regular_file("/x/same", size=9),
            FileSystemItem.regular_file("/y/same", size=1),
        ]
        policy = SortPolicy(by_name=SortOrder.ASC, by_attr=SortOrder.ASC)

        self.assertEqual([item.path for item in sort_items(items, policy)], ["/y/same", "/x/same"])

    def test_date_axis(self):
        policy = SortPolicy(by_date=SortOrder.ASC)

        self.assertEqual(_names(sort_items(self.items, policy)), ["A", "a.txt", "b.txt"])

    def test_stable_ties_keep_listing_order(self):
        items = [FileSystemItem.directory("/x/z"), FileSystemItem.directory("/x/y")]
        policy = SortPolicy(directories_first=True)

        self.assertEqual(_names(sort_items(items, policy)), ["z", "y"])

    def test_with_axis_changes_one_axis(self):
        policy = SortPolicy(by_name=SortOrder.ASC).with_axis(SortAxis.DATE, "desc")

        self.assertEqual(policy.by_name, SortOrder.ASC)
        self.assertEqual(policy.by_date, SortOrder.DESC)
        self.assertFalse(policy.is_unordered)


if __name__ == "__main__":
    unittest.main()
