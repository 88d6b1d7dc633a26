"""Catalog endpoints.

Label routes exist at two depths: directly under a group and under a
subgroup. Both share the same service calls; the group-level variant passes
``subgroupname=None``.
"""

from fastapi import APIRouter, Depends

from catalog_api.auth import authenticate
from catalog_api.dependencies import DB
from catalog_api.models import Product
from catalog_api.schemas.catalog import (
    GroupCreate,
    GroupMutationResponse,
    GroupRename,
    GroupSchema,
    LabelCreate,
    LabelSchema,
    LabelUpdate,
    MessageResponse,
    ProductMutationResponse,
    ProductResponse,
    SubgroupCreate,
    SubgroupMutationResponse,
    SubgroupRename,
    SubgroupSchema,
)
from catalog_api.services import product as catalog

router = APIRouter(dependencies=[Depends(authenticate)])

GROUP = "/products/{productname}/groups/{groupname}"
SUBGROUP = GROUP + "/subgroups/{subgroupname}"


def _product_result(message: str, product: Product) -> ProductMutationResponse:
    return ProductMutationResponse(
        message=message, product=ProductResponse.model_validate(product)
    )


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
@router.post("/initialize-products", response_model=MessageResponse, status_code=201)
async def initialize_products(db: DB) -> MessageResponse:
    """Seed the starter catalog. 400 if any product already exists."""
    await catalog.initialize_products(db)
    return MessageResponse(message="Products added successfully")


@router.get("/products", response_model=list[ProductResponse], status_code=200)
async def list_products(db: DB) -> list[ProductResponse]:
    """All products with their full group trees."""
    products = await catalog.get_products(db)
    return [ProductResponse.model_validate(product) for product in products]


@router.get("/products/{productname}", response_model=ProductResponse, status_code=200)
async def get_product(productname: str, db: DB) -> ProductResponse:
    product = await catalog.get_product(db, productname)
    return ProductResponse.model_validate(product)


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------
@router.post(
    "/products/{productname}/groups", response_model=GroupMutationResponse, status_code=201
)
async def add_group(productname: str, body: GroupCreate, db: DB) -> GroupMutationResponse:
    """Create a group, or merge labels into an existing group with the same name."""
    result = await catalog.add_group(
        db,
        productname,
        body.groupname,
        labels=[label.to_entity() for label in body.labels],
        subgroups=[subgroup.to_draft() for subgroup in body.subgroups],
    )
    message = "Group merged successfully" if result.merged else "Group added successfully"
    return GroupMutationResponse(
        message=message, group=GroupSchema.model_validate(result.group.to_dict())
    )


@router.put(GROUP, response_model=ProductMutationResponse, status_code=200)
async def rename_group(
    productname: str, groupname: str, body: GroupRename, db: DB
) -> ProductMutationResponse:
    product = await catalog.rename_group(db, productname, groupname, body.new_group_name)
    return _product_result("Group name updated successfully", product)


@router.delete(GROUP, response_model=ProductMutationResponse, status_code=200)
async def delete_group(productname: str, groupname: str, db: DB) -> ProductMutationResponse:
    product = await catalog.delete_group(db, productname, groupname)
    return _product_result("Group deleted successfully", product)


# ---------------------------------------------------------------------------
# Subgroups
# ---------------------------------------------------------------------------
@router.post(GROUP + "/subgroups", response_model=SubgroupMutationResponse, status_code=201)
async def add_subgroup(
    productname: str, groupname: str, body: SubgroupCreate, db: DB
) -> SubgroupMutationResponse:
    draft = body.to_draft()
    subgroup = await catalog.add_subgroup(
        db, productname, groupname, draft.subgroupname, draft.labels
    )
    return SubgroupMutationResponse(
        message="Subgroup added successfully",
        subgroup=SubgroupSchema.model_validate(subgroup.to_dict()),
    )


@router.put(SUBGROUP, response_model=ProductMutationResponse, status_code=200)
async def rename_subgroup(
    productname: str, groupname: str, subgroupname: str, body: SubgroupRename, db: DB
) -> ProductMutationResponse:
    product = await catalog.rename_subgroup(
        db, productname, groupname, subgroupname, body.new_subgroup_name
    )
    return _product_result("Subgroup name updated successfully", product)


@router.delete(SUBGROUP, response_model=ProductMutationResponse, status_code=200)
async def delete_subgroup(
    productname: str, groupname: str, subgroupname: str, db: DB
) -> ProductMutationResponse:
    product = await catalog.delete_subgroup(db, productname, groupname, subgroupname)
    return _product_result("Subgroup deleted successfully", product)


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------
@router.post(GROUP + "/labels", response_model=LabelSchema, status_code=201)
async def add_group_label(
    productname: str, groupname: str, body: LabelCreate, db: DB
) -> LabelSchema:
    label = await catalog.add_label(db, productname, groupname, None, body.to_entity())
    return LabelSchema.model_validate(label.to_dict())


@router.post(SUBGROUP + "/labels", response_model=LabelSchema, status_code=201)
async def add_subgroup_label(
    productname: str, groupname: str, subgroupname: str, body: LabelCreate, db: DB
) -> LabelSchema:
    label = await catalog.add_label(
        db, productname, groupname, subgroupname, body.to_entity()
    )
    return LabelSchema.model_validate(label.to_dict())


@router.put(GROUP + "/labels/{label}", response_model=ProductMutationResponse, status_code=200)
async def update_group_label(
    productname: str, groupname: str, label: str, body: LabelUpdate, db: DB
) -> ProductMutationResponse:
    product = await catalog.update_label(
        db, productname, groupname, None, label, body.to_changes()
    )
    return _product_result("Label updated successfully", product)


@router.put(
    SUBGROUP + "/labels/{label}", response_model=ProductMutationResponse, status_code=200
)
async def update_subgroup_label(
    productname: str, groupname: str, subgroupname: str, label: str, body: LabelUpdate, db: DB
) -> ProductMutationResponse:
    product = await catalog.update_label(
        db, productname, groupname, subgroupname, label, body.to_changes()
    )
    return _product_result("Label updated successfully", product)


@router.delete(
    GROUP + "/labels/{label}", response_model=ProductMutationResponse, status_code=200
)
async def delete_group_label(
    productname: str, groupname: str, label: str, db: DB
) -> ProductMutationResponse:
    product = await catalog.delete_label(db, productname, groupname, None, label)
    return _product_result("Label deleted successfully", product)


@router.delete(
    SUBGROUP + "/labels/{label}", response_model=ProductMutationResponse, status_code=200
)
async def delete_subgroup_label(
    productname: str, groupname: str, subgroupname: str, label: str, db: DB
) -> ProductMutationResponse:
    product = await catalog.delete_label(db, productname, groupname, subgroupname, label)
    return _product_result("Label deleted successfully", product)
