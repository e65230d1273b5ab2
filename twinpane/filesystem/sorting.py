"""
Listing sort policy.

One composite comparator: an optional "non-files first" group, then name,
then size, then modification date. Each axis takes part only when its order
is not NONE. Python's sort is stable, so ties keep the order the directory
listing returned.
"""
from dataclasses import dataclass
from enum import Enum
from functools import cmp_to_key


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
    NONE = "none"

    @classmethod
    def parse(cls, value):
        """Map config strings to an order; anything unrecognised is NONE."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            lower = value.strip().lower()
            if lower == "asc":
                return cls.ASC
            if lower == "desc":
                return cls.DESC
        return cls.NONE


class SortAxis(str, Enum):
    NAME = "name"
    DATE = "date"
    ATTR = "attr"


@dataclass(frozen=True)
class SortPolicy:
    by_name: SortOrder = SortOrder.NONE
    by_date: SortOrder = SortOrder.NONE
    by_attr: SortOrder = SortOrder.NONE
    directories_first: bool = False

    def with_axis(self, axis, order):
        """Return a policy with one axis changed."""
        axis = SortAxis(axis)
        order = SortOrder.parse(order)
        if axis == SortAxis.NAME:
            return SortPolicy(order, self.by_date, self.by_attr, self.directories_first)
        if axis == SortAxis.DATE:
            return SortPolicy(self.by_name, order, self.by_attr, self.directories_first)
        return SortPolicy(self.by_name, self.by_date, order, self.directories_first)

    @property
    def is_unordered(self):
        return (
            not self.directories_first
            and self.by_name == SortOrder.NONE
            and self.by_date == SortOrder.NONE
            and self.by_attr == SortOrder.NONE
        )


def _cmp(left, right):
    return (left > right) - (left < right)


def _axes(policy):
    return (
        (policy.by_name, lambda item: item.name),
        (policy.by_attr, lambda item: item.size),
        (policy.by_date, lambda item: item.modified),
    )


def sort_items(items, policy):
    """Return ``items`` ordered by ``policy`` as a new list."""
    items = list(items)
    if policy is None or policy.is_unordered:
        return items

    active = [(order, key) for order, key in _axes(policy) if order != SortOrder.NONE]

    def compare(one, two):
        if policy.directories_first:
            grouped = _cmp(one.is_file, two.is_file)
            if grouped:
                return grouped
        for order, key in active:
            result = _cmp(key(one), key(two))
            if result:
                return result if order == SortOrder.ASC else -result
        return 0

    return sorted(items, key=cmp_to_key(compare))
