"""Catalog business logic.

Each mutation follows the same shape: load the product row, hydrate its
``groups`` document into fresh entities, resolve the addressed path, apply
the change, then write the whole document back through the repository.
All lookups and validation run before anything is assigned to the row, so a
failed request never leaves a half-applied tree behind.
"""

from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.entities import Group, Label, Subgroup, dump_groups, load_groups, validate
from catalog_api.exceptions import (
    AlreadyInitializedError,
    ConflictError,
    InvalidBodyError,
    NotFoundError,
)
from catalog_api.logging import get_logger
from catalog_api.models import Product
from catalog_api.repositories.product import (
    count_products,
    get_product_by_name,
    insert_products,
    list_products,
    save_product,
)
from catalog_api.seed_data import initial_products
from catalog_api.services.tree import (
    find_group,
    find_label_list,
    find_subgroup,
    group_index,
    merge_labels,
    next_id,
    require_label_index,
    subgroup_index,
)

logger = get_logger(__name__)


@dataclass
class SubgroupDraft:
    """A subgroup supplied by a client, before the engine assigns its id."""

    subgroupname: str
    labels: list[Label] = field(default_factory=list)


@dataclass
class LabelChanges:
    """Partial label update. ``None``, empty and blank strings all mean "leave unchanged"."""

    label: str | None = None
    description: str | None = None
    display_name: str | None = None

    def is_empty(self) -> bool:
        return not (_given(self.label) or _given(self.description) or _given(self.display_name))


def _given(value: str | None) -> bool:
    return bool(value and value.strip())


@dataclass
class GroupResult:
    group: Group
    merged: bool


async def _load_product(db: AsyncSession, productname: str) -> Product:
    product = await get_product_by_name(db, productname)
    if product is None:
        raise NotFoundError("Product", productname)
    return product


async def _commit(db: AsyncSession, product: Product, groups: list[Group]) -> None:
    product.groups = dump_groups(groups)
    await save_product(db, product)


def _validate_labels(labels: list[Label]) -> None:
    for label in labels:
        validate(label.to_dict(), "label")


def _apply_subgroup_drafts(group: Group, drafts: list[SubgroupDraft]) -> None:
    """Add drafts to ``group``; a draft whose name is already present merges its labels."""
    for draft in drafts:
        existing = subgroup_index(group, draft.subgroupname)
        if existing is not None:
            merge_labels(group.subgroups[existing].labels, draft.labels)
            continue
        subgroupid = next_id((s.subgroupid for s in group.subgroups), group.last_subgroupid)
        group.subgroups.append(Subgroup(subgroupid, draft.subgroupname, list(draft.labels)))
        group.last_subgroupid = subgroupid


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
async def initialize_products(db: AsyncSession) -> list[Product]:
    """Insert the seed catalog; refuse when any product already exists."""
    if await count_products(db) > 0:
        raise AlreadyInitializedError()

    products: list[Product] = []
    for document in initial_products():
        validate(document, "product")
        groups = load_groups(document.get("groups"))
        products.append(
            Product(
                productid=document["productid"],
                productname=document["productname"],
                groups=dump_groups(groups),
                last_groupid=max((g.groupid for g in groups), default=0),
            )
        )
    await insert_products(db, products)
    logger.info("products_initialized", count=len(products))
    return products


async def get_products(db: AsyncSession) -> list[Product]:
    return await list_products(db)


async def get_product(db: AsyncSession, productname: str) -> Product:
    return await _load_product(db, productname)


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------
async def add_group(
    db: AsyncSession,
    productname: str,
    groupname: str,
    labels: list[Label] | None = None,
    subgroups: list[SubgroupDraft] | None = None,
) -> GroupResult:
    """Create a group, or merge into the existing group of the same name.

    A new group gets the next groupid and its subgroups are numbered from 1
    in the order given. When the name already exists, only labels whose key
    is not yet present are appended (per subgroup, matched by name), and
    unknown subgroups are added with fresh ids. Drafts repeating a subgroup
    name (ignoring case) fold into the first one either way.
    """
    labels = labels or []
    subgroups = subgroups or []
    if not groupname.strip():
        raise InvalidBodyError("groupname is required")
    for draft in subgroups:
        if not draft.subgroupname.strip():
            raise InvalidBodyError("subgroupname is required")
        _validate_labels(draft.labels)
    _validate_labels(labels)

    product = await _load_product(db, productname)
    groups = load_groups(product.groups)

    index = group_index(groups, groupname)
    if index is not None:
        group = groups[index]
        merge_labels(group.labels, labels)
        _apply_subgroup_drafts(group, subgroups)
        await _commit(db, product, groups)
        logger.info(
            "group_merged", productname=product.productname, groupname=group.groupname
        )
        return GroupResult(group=group, merged=True)

    groupid = next_id((g.groupid for g in groups), product.last_groupid)
    group = Group(groupid=groupid, groupname=groupname, labels=list(labels))
    _apply_subgroup_drafts(group, subgroups)
    groups.append(group)
    product.last_groupid = groupid
    await _commit(db, product, groups)
    logger.info(
        "group_added", productname=product.productname, groupname=groupname, groupid=groupid
    )
    return GroupResult(group=group, merged=False)


async def rename_group(
    db: AsyncSession, productname: str, groupname: str, new_groupname: str
) -> Product:
    if not new_groupname or not new_groupname.strip():
        raise InvalidBodyError("newGroupName is required")

    product = await _load_product(db, productname)
    groups = load_groups(product.groups)
    group = find_group(groups, groupname)

    clash = group_index(groups, new_groupname)
    if clash is not None and groups[clash] is not group:
        raise ConflictError(f"Group '{new_groupname}' already exists")

    group.groupname = new_groupname
    await _commit(db, product, groups)
    logger.info(
        "group_renamed",
        productname=product.productname,
        groupname=groupname,
        new_groupname=new_groupname,
    )
    return product


async def delete_group(db: AsyncSession, productname: str, groupname: str) -> Product:
    product = await _load_product(db, productname)
    groups = load_groups(product.groups)
    group = find_group(groups, groupname)

    groups.remove(group)
    await _commit(db, product, groups)
    logger.info("group_deleted", productname=product.productname, groupid=group.groupid)
    return product


# ---------------------------------------------------------------------------
# Subgroups
# ---------------------------------------------------------------------------
async def add_subgroup(
    db: AsyncSession,
    productname: str,
    groupname: str,
    subgroupname: str,
    labels: list[Label] | None = None,
) -> Subgroup:
    if not subgroupname.strip():
        raise InvalidBodyError("subgroupname is required")
    _validate_labels(labels or [])

    product = await _load_product(db, productname)
    groups = load_groups(product.groups)
    group = find_group(groups, groupname)

    if subgroup_index(group, subgroupname) is not None:
        raise ConflictError(
            f"Subgroup '{subgroupname}' already exists in group '{group.groupname}'"
        )

    subgroupid = next_id((s.subgroupid for s in group.subgroups), group.last_subgroupid)
    subgroup = Subgroup(subgroupid, subgroupname, list(labels or []))
    group.subgroups.append(subgroup)
    group.last_subgroupid = subgroupid
    await _commit(db, product, groups)
    logger.info(
        "subgroup_added",
        productname=product.productname,
        groupname=group.groupname,
        subgroupid=subgroupid,
    )
    return subgroup


async def rename_subgroup(
    db: AsyncSession,
    productname: str,
    groupname: str,
    subgroupname: str,
    new_subgroupname: str,
) -> Product:
    if not new_subgroupname or not new_subgroupname.strip():
        raise InvalidBodyError("newSubgroupName is required")

    product = await _load_product(db, productname)
    groups = load_groups(product.groups)
    group = find_group(groups, groupname)
    subgroup = find_subgroup(group, subgroupname)

    clash = subgroup_index(group, new_subgroupname)
    if clash is not None and group.subgroups[clash] is not subgroup:
        raise ConflictError(
            f"Subgroup '{new_subgroupname}' already exists in group '{group.groupname}'"
        )

    subgroup.subgroupname = new_subgroupname
    await _commit(db, product, groups)
    logger.info(
        "subgroup_renamed",
        productname=product.productname,
        groupname=group.groupname,
        subgroupname=subgroupname,
        new_subgroupname=new_subgroupname,
    )
    return product


async def delete_subgroup(
    db: AsyncSession, productname: str, groupname: str, subgroupname: str
) -> Product:
    product = await _load_product(db, productname)
    groups = load_groups(product.groups)
    group = find_group(groups, groupname)
    subgroup = find_subgroup(group, subgroupname)

    group.subgroups.remove(subgroup)
    await _commit(db, product, groups)
    logger.info(
        "subgroup_deleted",
        productname=product.productname,
        groupname=group.groupname,
        subgroupid=subgroup.subgroupid,
    )
    return product


# ---------------------------------------------------------------------------
# Labels (group level when subgroupname is None, else subgroup level)
# ---------------------------------------------------------------------------
async def add_label(
    db: AsyncSession,
    productname: str,
    groupname: str,
    subgroupname: str | None,
    label: Label,
) -> Label:
    """Append a label as given; duplicates by key are allowed on this path."""
    _validate_labels([label])

    product = await _load_product(db, productname)
    groups = load_groups(product.groups)
    labels = find_label_list(groups, groupname, subgroupname)

    labels.append(label)
    await _commit(db, product, groups)
    logger.info(
        "label_added",
        productname=product.productname,
        groupname=groupname,
        subgroupname=subgroupname,
        label=label.label,
    )
    return label


async def update_label(
    db: AsyncSession,
    productname: str,
    groupname: str,
    subgroupname: str | None,
    key: str,
    changes: LabelChanges,
) -> Product:
    if changes.is_empty():
        raise InvalidBodyError("At least one field to update is required")

    product = await _load_product(db, productname)
    groups = load_groups(product.groups)
    labels = find_label_list(groups, groupname, subgroupname)
    target = labels[require_label_index(labels, key)]

    if _given(changes.label):
        target.label = changes.label
    if _given(changes.description):
        target.description = changes.description
    if _given(changes.display_name):
        target.display_name = changes.display_name

    await _commit(db, product, groups)
    logger.info(
        "label_updated",
        productname=product.productname,
        groupname=groupname,
        subgroupname=subgroupname,
        label=key,
    )
    return product


async def delete_label(
    db: AsyncSession,
    productname: str,
    groupname: str,
    subgroupname: str | None,
    key: str,
) -> Product:
    product = await _load_product(db, productname)
    groups = load_groups(product.groups)
    labels = find_label_list(groups, groupname, subgroupname)

    del labels[require_label_index(labels, key)]
    await _commit(db, product, groups)
    logger.info(
        "label_deleted",
        productname=product.productname,
        groupname=groupname,
        subgroupname=subgroupname,
        label=key,
    )
    return product
