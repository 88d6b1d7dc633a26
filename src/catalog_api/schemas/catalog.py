"""Catalog request and response schemas.

Field names on the wire follow the stored document (``productname``,
``groupid``, ``displayName``...). Python attributes are snake_case where the
wire name is camelCase; aliases map between the two.
"""

from pydantic import BaseModel, ConfigDict, Field

from catalog_api.entities import Label
from catalog_api.services.product import LabelChanges, SubgroupDraft

# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class LabelSchema(BaseModel):
    """A placeholder token definition."""

    model_config = ConfigDict(populate_by_name=True)

    label: str
    description: str
    display_name: str = Field("", alias="displayName")


class SubgroupSchema(BaseModel):
    subgroupid: int
    subgroupname: str
    labels: list[LabelSchema] = []


class GroupSchema(BaseModel):
    groupid: int
    groupname: str
    subgroups: list[SubgroupSchema] = []
    labels: list[LabelSchema] = []


class ProductResponse(BaseModel):
    """A product with its full group tree."""

    model_config = ConfigDict(from_attributes=True)

    productid: int
    productname: str
    groups: list[GroupSchema]


class MessageResponse(BaseModel):
    message: str


class GroupMutationResponse(BaseModel):
    message: str
    group: GroupSchema


class SubgroupMutationResponse(BaseModel):
    message: str
    subgroup: SubgroupSchema


class ProductMutationResponse(BaseModel):
    message: str
    product: ProductResponse


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class LabelCreate(BaseModel):
    """Body of POST .../labels; also used for labels nested in group/subgroup bodies."""

    model_config = ConfigDict(populate_by_name=True)

    label: str = Field(min_length=1)
    description: str = Field(min_length=1)
    display_name: str = Field("", alias="displayName")

    def to_entity(self) -> Label:
        return Label(self.label, self.description, self.display_name)


class SubgroupCreate(BaseModel):
    subgroupname: str = Field(min_length=1)
    labels: list[LabelCreate] = []

    def to_draft(self) -> SubgroupDraft:
        return SubgroupDraft(self.subgroupname, [label.to_entity() for label in self.labels])


class GroupCreate(BaseModel):
    groupname: str = Field(min_length=1)
    labels: list[LabelCreate] = []
    subgroups: list[SubgroupCreate] = []


class GroupRename(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_group_name: str = Field(min_length=1, alias="newGroupName")


class SubgroupRename(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_subgroup_name: str = Field(min_length=1, alias="newSubgroupName")


class LabelUpdate(BaseModel):
    """Partial label update; at least one field must be non-empty (checked by the service)."""

    model_config = ConfigDict(populate_by_name=True)

    new_label_name: str | None = Field(None, alias="newLabelName")
    new_description: str | None = Field(None, alias="newDescription")
    new_display_name: str | None = Field(None, alias="newDisplayName")

    def to_changes(self) -> LabelChanges:
        return LabelChanges(
            label=self.new_label_name,
            description=self.new_description,
            display_name=self.new_display_name,
        )
