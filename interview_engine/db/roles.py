"""Company role reads: roles, their categories, contacts and org hierarchy."""

from typing import Any

from interview_engine.core.logging import get_logger
from interview_engine.core.org_hierarchy import OrgHierarchy, OrgLevel
from interview_engine.core.schemas_questionnaires import CompanyRole
from interview_engine.db import entities
from interview_engine.db.entities import EntityKind

logger = get_logger(__name__)

ORG_LEVEL_KINDS: dict[OrgLevel, EntityKind] = {
    OrgLevel.BUSINESS_UNIT: EntityKind.BUSINESS_UNITS,
    OrgLevel.REGION: EntityKind.REGIONS,
    OrgLevel.SITE: EntityKind.SITES,
    OrgLevel.ASSET_GROUP: EntityKind.ASSET_GROUPS,
    OrgLevel.WORK_GROUP: EntityKind.WORK_GROUPS,
}


def _to_company_roles(rows: list[dict[str, Any]]) -> list[CompanyRole]:
    shared_ids = sorted({r["shared_role_id"] for r in rows if r.get("shared_role_id") is not None})
    shared = {
        s["id"]: s
        for s in entities.list_rows(
            EntityKind.SHARED_ROLES, {"id": shared_ids}, columns="id, name, description"
        )
    }
    roles = []
    for row in rows:
        category = shared.get(row.get("shared_role_id")) or {}
        roles.append(
            CompanyRole(
                id=row["id"],
                company_id=row.get("company_id"),
                shared_role_id=row.get("shared_role_id"),
                work_group_id=row.get("work_group_id"),
                name=category.get("name"),
                description=category.get("description"),
            )
        )
    return roles


def list_company_roles(company_id: str) -> list[CompanyRole]:
    """
    List a company's active roles with their role category.

    Args:
        company_id: Company ID

    Returns:
        CompanyRole list ordered by ID
    """
    rows = entities.list_rows(EntityKind.ROLES, {"company_id": company_id}, order_by="id")
    return _to_company_roles(rows)


def get_roles(role_ids: list[int], company_id: str | None = None) -> list[CompanyRole]:
    """Active roles by ID, optionally restricted to one company."""
    filters: dict[str, Any] = {"id": role_ids}
    if company_id is not None:
        filters["company_id"] = company_id
    rows = entities.list_rows(EntityKind.ROLES, filters, order_by="id")
    return _to_company_roles(rows)


def role_category_map(roles: list[CompanyRole]) -> dict[int, int | None]:
    """Role ID → role category ID."""
    return {r.id: r.shared_role_id for r in roles}


def get_contact_roles(contact_ids: list[int]) -> dict[int, int]:
    """
    Map contacts to the role they hold.

    Returns:
        contact_id → role_id (contacts without a role are absent)
    """
    rows = entities.list_rows(
        EntityKind.ROLE_CONTACTS,
        {"contact_id": contact_ids},
        columns="contact_id, role_id",
    )
    return {r["contact_id"]: r["role_id"] for r in rows if r.get("role_id") is not None}


def load_org_hierarchy(company_id: str) -> OrgHierarchy:
    """Load every org node of a company into an adjacency structure."""
    rows_by_level = {
        level: entities.list_rows(kind, {"company_id": company_id})
        for level, kind in ORG_LEVEL_KINDS.items()
    }
    hierarchy = OrgHierarchy.from_rows(rows_by_level)
    logger.debug(f"Loaded {len(hierarchy)} org nodes for company {company_id}")
    return hierarchy


def get_contacts(contact_ids: list[int]) -> dict[int, dict[str, Any]]:
    """Contact ID → contact (id, full_name, email)."""
    rows = entities.list_rows(
        EntityKind.CONTACTS, {"id": contact_ids}, columns="id, full_name, email"
    )
    return {r["id"]: r for r in rows}
