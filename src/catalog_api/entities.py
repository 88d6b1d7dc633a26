"""Catalog tree entities.

Plain dataclasses for the nested product document (Group → Subgroup → Label).
Services hydrate the JSON stored on a Product row into these, mutate them,
and dump them back; nothing here knows about HTTP or the ORM.
"""

from dataclasses import dataclass, field
from typing import Any

from catalog_api.exceptions import MissingFieldError

# Required fields per record kind, with the primitive type each must carry.
REQUIRED_FIELDS: dict[str, dict[str, type]] = {
    "product": {"productid": int, "productname": str},
    "group": {"groupid": int, "groupname": str},
    "subgroup": {"subgroupid": int, "subgroupname": str},
    "label": {"label": str, "description": str},
}


def validate(record: dict[str, Any], kind: str) -> None:
    """Check that ``record`` carries every required field of ``kind``.

    Strings must not be empty or whitespace only, and ints must be real ints
    (not bools). ``displayName`` on labels is optional.

    Raises:
        MissingFieldError: naming the first field that is absent or invalid.
    """
    for name, expected in REQUIRED_FIELDS[kind].items():
        value = record.get(name)
        if expected is int and (not isinstance(value, int) or isinstance(value, bool)):
            raise MissingFieldError(kind, name)
        if expected is str and (not isinstance(value, str) or not value.strip()):
            raise MissingFieldError(kind, name)
    display_name = record.get("displayName")
    if display_name is not None and not isinstance(display_name, str):
        raise MissingFieldError(kind, "displayName")


@dataclass
class Label:
    label: str
    description: str
    display_name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Label":
        validate(data, "label")
        return cls(
            label=data["label"],
            description=data["description"],
            display_name=data.get("displayName") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "description": self.description,
            "displayName": self.display_name,
        }


@dataclass
class Subgroup:
    subgroupid: int
    subgroupname: str
    labels: list[Label] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Subgroup":
        validate(data, "subgroup")
        return cls(
            subgroupid=data["subgroupid"],
            subgroupname=data["subgroupname"],
            labels=[Label.from_dict(item) for item in data.get("labels") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "subgroupid": self.subgroupid,
            "subgroupname": self.subgroupname,
            "labels": [label.to_dict() for label in self.labels],
        }


@dataclass
class Group:
    groupid: int
    groupname: str
    subgroups: list[Subgroup] = field(default_factory=list)
    labels: list[Label] = field(default_factory=list)
    # Highest subgroupid ever issued in this group; stored, never serialized to clients.
    last_subgroupid: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Group":
        validate(data, "group")
        subgroups = [Subgroup.from_dict(item) for item in data.get("subgroups") or []]
        highest = max((s.subgroupid for s in subgroups), default=0)
        return cls(
            groupid=data["groupid"],
            groupname=data["groupname"],
            subgroups=subgroups,
            labels=[Label.from_dict(item) for item in data.get("labels") or []],
            last_subgroupid=max(data.get("last_subgroupid") or 0, highest),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "groupid": self.groupid,
            "groupname": self.groupname,
            "subgroups": [subgroup.to_dict() for subgroup in self.subgroups],
            "labels": [label.to_dict() for label in self.labels],
            "last_subgroupid": self.last_subgroupid,
        }


def load_groups(raw: list[dict[str, Any]] | None) -> list[Group]:
    """Hydrate a stored ``groups`` document into fresh entity objects."""
    return [Group.from_dict(item) for item in raw or []]


def dump_groups(groups: list[Group]) -> list[dict[str, Any]]:
    """Serialize entities back into a new JSON-ready ``groups`` document."""
    return [group.to_dict() for group in groups]
