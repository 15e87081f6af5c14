"""Generic CRUD over the interview engine's tables.

Every table is an ``EntityKind``; the functions below take a kind instead of
each entity carrying its own copy of the same select/insert/update/delete.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from interview_engine.core.logging import get_logger
from interview_engine.db.supabase_client import get_supabase

logger = get_logger(__name__)


class EntityKind(str, Enum):
    ASSESSMENTS = "assessments"
    QUESTIONNAIRES = "questionnaires"
    QUESTIONNAIRE_SECTIONS = "questionnaire_sections"
    QUESTIONNAIRE_STEPS = "questionnaire_steps"
    QUESTIONNAIRE_QUESTIONS = "questionnaire_questions"
    QUESTIONNAIRE_QUESTION_ROLES = "questionnaire_question_roles"
    QUESTIONNAIRE_QUESTION_PARTS = "questionnaire_question_parts"
    QUESTIONNAIRE_RATING_SCALES = "questionnaire_rating_scales"
    SHARED_ROLES = "shared_roles"
    ROLES = "roles"
    CONTACTS = "contacts"
    ROLE_CONTACTS = "role_contacts"
    BUSINESS_UNITS = "business_units"
    REGIONS = "regions"
    SITES = "sites"
    ASSET_GROUPS = "asset_groups"
    WORK_GROUPS = "work_groups"
    INTERVIEWS = "interviews"
    INTERVIEW_ROLES = "interview_roles"
    INTERVIEW_RESPONSES = "interview_responses"
    INTERVIEW_QUESTION_APPLICABLE_ROLES = "interview_question_applicable_roles"
    INTERVIEW_RESPONSE_ROLES = "interview_response_roles"
    INTERVIEW_QUESTION_PART_RESPONSES = "interview_question_part_responses"
    INTERVIEW_RESPONSE_ACTIONS = "interview_response_actions"


# Tables that are soft-deleted through an is_deleted flag
SOFT_DELETE_KINDS = frozenset(
    {
        EntityKind.ASSESSMENTS,
        EntityKind.QUESTIONNAIRES,
        EntityKind.QUESTIONNAIRE_SECTIONS,
        EntityKind.QUESTIONNAIRE_STEPS,
        EntityKind.QUESTIONNAIRE_QUESTIONS,
        EntityKind.QUESTIONNAIRE_QUESTION_ROLES,
        EntityKind.QUESTIONNAIRE_QUESTION_PARTS,
        EntityKind.QUESTIONNAIRE_RATING_SCALES,
        EntityKind.ROLES,
        EntityKind.WORK_GROUPS,
        EntityKind.INTERVIEWS,
        EntityKind.INTERVIEW_RESPONSE_ACTIONS,
    }
)


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _apply_filters(query: Any, filters: Mapping[str, Any]) -> Any:
    for column, value in filters.items():
        if isinstance(value, (list, tuple, set, frozenset)):
            query = query.in_(column, list(value))
        elif value is None:
            query = query.is_(column, "null")
        else:
            query = query.eq(column, value)
    return query


def list_rows(
    kind: EntityKind,
    filters: Mapping[str, Any] | None = None,
    columns: str = "*",
    order_by: str | None = None,
    include_deleted: bool = False,
    descending: bool = False,
) -> list[dict[str, Any]]:
    """
    List rows of a kind.

    Args:
        kind: Table to read
        filters: Column → value; list values become ``in`` filters, None ``is null``
        columns: Select clause
        order_by: Column to sort by
        include_deleted: Keep soft-deleted rows
        descending: Sort order_by descending

    Returns:
        List of row dicts
    """
    filters = dict(filters or {})
    if kind in SOFT_DELETE_KINDS and not include_deleted:
        filters.setdefault("is_deleted", False)

    # An empty in-filter can never match
    if any(isinstance(v, (list, tuple, set, frozenset)) and not v for v in filters.values()):
        return []

    supabase = get_supabase()

    try:
        query = _apply_filters(supabase.table(kind.value).select(columns), filters)
        if order_by:
            query = query.order(order_by, desc=descending)
        response = query.execute()
        return response.data or []

    except Exception as e:
        logger.error(f"Failed to list {kind.value}: {e}")
        raise


def get_row(
    kind: EntityKind,
    row_id: Any,
    columns: str = "*",
    include_deleted: bool = False,
) -> dict[str, Any] | None:
    """Get a single row by ID, or None when missing (or soft-deleted)."""
    rows = list_rows(kind, {"id": row_id}, columns=columns, include_deleted=include_deleted)
    return rows[0] if rows else None


def insert_rows(kind: EntityKind, rows: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """
    Insert rows and return them as stored.

    Raises:
        RuntimeError: If the store returns nothing for a non-empty insert
    """
    rows = [dict(r) for r in rows]
    if not rows:
        return []

    supabase = get_supabase()

    try:
        response = supabase.table(kind.value).insert(rows).execute()
        if not response.data:
            raise RuntimeError(f"No data returned from insert into {kind.value}")
        return response.data

    except Exception as e:
        logger.error(f"Failed to insert {len(rows)} row(s) into {kind.value}: {e}")
        raise


def insert_row(kind: EntityKind, row: Mapping[str, Any]) -> dict[str, Any]:
    return insert_rows(kind, [row])[0]


def upsert_rows(
    kind: EntityKind,
    rows: Iterable[Mapping[str, Any]],
    on_conflict: str,
) -> list[dict[str, Any]]:
    """Insert or replace rows on a unique constraint (comma-separated columns)."""
    rows = [dict(r) for r in rows]
    if not rows:
        return []

    supabase = get_supabase()

    try:
        response = supabase.table(kind.value).upsert(rows, on_conflict=on_conflict).execute()
        return response.data or []

    except Exception as e:
        logger.error(f"Failed to upsert into {kind.value}: {e}")
        raise


def update_rows(
    kind: EntityKind,
    filters: Mapping[str, Any],
    patch: Mapping[str, Any],
) -> list[dict[str, Any]]:
    """Update every row matching the filters; returns the updated rows."""
    supabase = get_supabase()

    try:
        query = _apply_filters(supabase.table(kind.value).update(dict(patch)), filters)
        response = query.execute()
        return response.data or []

    except Exception as e:
        logger.error(f"Failed to update {kind.value} where {dict(filters)}: {e}")
        raise


def update_row(kind: EntityKind, row_id: Any, patch: Mapping[str, Any]) -> dict[str, Any] | None:
    rows = update_rows(kind, {"id": row_id}, patch)
    return rows[0] if rows else None


def delete_rows(kind: EntityKind, filters: Mapping[str, Any]) -> None:
    """Hard delete every row matching the filters."""
    if not filters:
        raise ValueError(f"Refusing to delete from {kind.value} without filters")

    supabase = get_supabase()

    try:
        _apply_filters(supabase.table(kind.value).delete(), filters).execute()

    except Exception as e:
        logger.error(f"Failed to delete from {kind.value} where {dict(filters)}: {e}")
        raise


def soft_delete_row(kind: EntityKind, row_id: Any) -> dict[str, Any] | None:
    if kind not in SOFT_DELETE_KINDS:
        raise ValueError(f"{kind.value} does not support soft delete")
    return update_row(kind, row_id, {"is_deleted": True, "deleted_at": utc_now()})
