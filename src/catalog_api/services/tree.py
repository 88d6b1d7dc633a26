"""Name-based lookup and id assignment over a hydrated group tree.

Every lookup is a case-insensitive linear scan of one sibling list; the
catalogs are small enough that no index is kept. Callers resolve one level
at a time (group, then subgroup, then label) so the first missing segment
is the one reported.
"""

from collections.abc import Callable, Iterable
from typing import TypeVar

from catalog_api.entities import Group, Label, Subgroup
from catalog_api.exceptions import NotFoundError


T = TypeVar("T")


def index_of(items: list[T], name: str, key: Callable[[T], str]) -> int | None:
    """Return the position of the first item whose key matches ``name``, ignoring case."""
    wanted = name.lower()
    for index, item in enumerate(items):
        if key(item).lower() == wanted:
            return index
    return None


def group_index(groups: list[Group], groupname: str) -> int | None:
    return index_of(groups, groupname, lambda g: g.groupname)


def subgroup_index(group: Group, subgroupname: str) -> int | None:
    return index_of(group.subgroups, subgroupname, lambda s: s.subgroupname)


def label_index(labels: list[Label], key: str) -> int | None:
    return index_of(labels, key, lambda label: label.label)


def find_group(groups: list[Group], groupname: str) -> Group:
    index = group_index(groups, groupname)
    if index is None:
        raise NotFoundError("Group", groupname)
    return groups[index]


def find_subgroup(group: Group, subgroupname: str) -> Subgroup:
    index = subgroup_index(group, subgroupname)
    if index is None:
        raise NotFoundError("Subgroup", subgroupname)
    return group.subgroups[index]


def find_label_list(groups: list[Group], groupname: str, subgroupname: str | None) -> list[Label]:
    """Resolve the label collection at ``group`` or ``group/subgroup``."""
    group = find_group(groups, groupname)
    if subgroupname is None:
        return group.labels
    return find_subgroup(group, subgroupname).labels


def require_label_index(labels: list[Label], key: str) -> int:
    index = label_index(labels, key)
    if index is None:
        raise NotFoundError("Label", key)
    return index


def next_id(existing: Iterable[int], high_water: int = 0) -> int:
    """Return the next sibling id: one past the larger of the live max and the high-water mark.

    The high-water mark records the largest id ever issued under the parent,
    so deleting the newest node never frees its id for reuse.
    """
    return max(max(existing, default=0), high_water) + 1


def merge_labels(target: list[Label], incoming: Iterable[Label]) -> list[Label]:
    """Append labels whose key is not already in ``target``; return those appended."""
    seen = {label.label.lower() for label in target}
    added: list[Label] = []
    for label in incoming:
        key = label.label.lower()
        if key in seen:
            continue
        seen.add(key)
        target.append(label)
        added.append(label)
    return added
