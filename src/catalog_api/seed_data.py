"""Starter catalog inserted by POST /initialize-products."""

from typing import Any

_ADDRESS_LABELS: list[dict[str, str]] = [
    {
        "label": "Address 1",
        "description": "Description for Option 1",
        "displayName": "Address One",
    },
    {
        "label": "Firm Address",
        "description": "Description for Option 3",
        "displayName": "Firm Address",
    },
]

_POSTAL_LABELS: list[dict[str, str]] = [
    {
        "label": "Auditor's Postal Address",
        "description": "Description for Option 2",
        "displayName": "Auditor Address",
    },
]

_DATE_LABELS: list[dict[str, str]] = [
    {
        "label": "${DATE_IN_WORDS}",
        "description": "Dates in Words Without Comma",
        "displayName": "Date in Words",
    },
    {
        "label": "${DATE_WITH_SLASH}",
        "description": "Date with slash",
        "displayName": "Date with Slash",
    },
]

_FISCAL_DATE_LABELS: list[dict[str, str]] = [
    {"label": "${END_DATE}", "description": "End Date", "displayName": "End Date"},
    {"label": "${FY}", "description": "FY", "displayName": "Financial Year"},
    {
        "label": "${YEAR_END_DATE_IN_WORDS}",
        "description": "Year End Date in Words",
        "displayName": "Year End Date in Words",
    },
]


def _addresses() -> dict[str, Any]:
    return {
        "groupid": 1,
        "groupname": "Addresses",
        "subgroups": [
            {"subgroupid": 1, "subgroupname": "Primary Addresses", "labels": _ADDRESS_LABELS},
            {"subgroupid": 2, "subgroupname": "Secondary Addresses", "labels": _POSTAL_LABELS},
        ],
        "labels": [],
    }


def _dates(*, fiscal: bool = False) -> dict[str, Any]:
    subgroups = [{"subgroupid": 1, "subgroupname": "Standard Dates", "labels": _DATE_LABELS}]
    if fiscal:
        subgroups.append(
            {"subgroupid": 2, "subgroupname": "Fiscal Dates", "labels": _FISCAL_DATE_LABELS}
        )
    return {"groupid": 2, "groupname": "Dates", "subgroups": subgroups, "labels": []}


def initial_products() -> list[dict[str, Any]]:
    """Return the seed catalog as raw product documents."""
    return [
        {"productid": 1, "productname": "sorted", "groups": [_addresses(), _dates()]},
        {"productid": 2, "productname": "tax-sorted", "groups": [_addresses(), _dates(fiscal=True)]},
        {"productid": 3, "productname": "auditomation", "groups": [_addresses(), _dates()]},
    ]
