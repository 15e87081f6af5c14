"""Interview, response and role-association database operations."""

from typing import Any

from interview_engine.core.logging import get_logger
from interview_engine.db import entities
from interview_engine.db.entities import EntityKind

logger = get_logger(__name__)

# Rows written during interview creation, in write order
INTERVIEW_CHILD_KINDS = (
    EntityKind.INTERVIEW_ROLES,
    EntityKind.INTERVIEW_RESPONSES,
    EntityKind.INTERVIEW_QUESTION_APPLICABLE_ROLES,
    EntityKind.INTERVIEW_RESPONSE_ROLES,
)


# =============================================================================
# Interviews
# =============================================================================


def get_interview(interview_id: int) -> dict[str, Any] | None:
    """Get an interview, or None when missing or soft-deleted."""
    return entities.get_row(EntityKind.INTERVIEWS, interview_id)


def insert_interview(row: dict[str, Any]) -> dict[str, Any]:
    interview = entities.insert_row(EntityKind.INTERVIEWS, row)
    logger.info(f"Created interview {interview['id']}", extra={"interview_id": interview["id"]})
    return interview


def update_interview(interview_id: int, patch: dict[str, Any]) -> dict[str, Any] | None:
    return entities.update_row(
        EntityKind.INTERVIEWS, interview_id, {**patch, "updated_at": entities.utc_now()}
    )


def soft_delete_interview(interview_id: int) -> dict[str, Any] | None:
    return entities.soft_delete_row(EntityKind.INTERVIEWS, interview_id)


def purge_interview(interview_id: int) -> None:
    """
    Hard delete an interview and every row written while creating it.

    Children go first, in reverse write order, so nothing is left pointing
    at a missing interview even without cascading foreign keys. Every delete
    is attempted even when an earlier one fails; the interview row always is.

    Raises:
        RuntimeError: If any delete failed (after attempting all of them)
    """
    steps = [(kind, {"interview_id": interview_id}) for kind in reversed(INTERVIEW_CHILD_KINDS)]
    steps.append((EntityKind.INTERVIEWS, {"id": interview_id}))

    failed: list[tuple[EntityKind, Exception]] = []
    for kind, filters in steps:
        try:
            entities.delete_rows(kind, filters)
        except Exception as e:
            failed.append((kind, e))

    if failed:
        tables = ", ".join(kind.value for kind, _ in failed)
        logger.error(
            f"Purge of interview {interview_id} left rows in {tables}",
            extra={"interview_id": interview_id},
        )
        raise RuntimeError(
            f"Failed to purge interview {interview_id} from {tables}"
        ) from failed[0][1]

    logger.info(f"Purged interview {interview_id}", extra={"interview_id": interview_id})


def list_interviews(filters: dict[str, Any]) -> list[dict[str, Any]]:
    """Live interviews matching the filters, newest first."""
    return entities.list_rows(EntityKind.INTERVIEWS, filters, order_by="id", descending=True)


def access_code_exists(access_code: str) -> bool:
    rows = entities.list_rows(
        EntityKind.INTERVIEWS,
        {"access_code": access_code},
        columns="id",
        include_deleted=True,
    )
    return bool(rows)


# =============================================================================
# Creation-time associations
# =============================================================================


def insert_interview_roles(
    interview_id: int, company_id: str, role_ids: list[int], created_by: str | None = None
) -> list[dict[str, Any]]:
    return entities.insert_rows(
        EntityKind.INTERVIEW_ROLES,
        [
            {
                "interview_id": interview_id,
                "role_id": role_id,
                "company_id": company_id,
                "created_by": created_by,
            }
            for role_id in role_ids
        ],
    )


def list_interview_role_ids(interview_id: int) -> list[int]:
    rows = entities.list_rows(
        EntityKind.INTERVIEW_ROLES, {"interview_id": interview_id}, columns="role_id", order_by="role_id"
    )
    return [row["role_id"] for row in rows]


def insert_responses(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return entities.insert_rows(EntityKind.INTERVIEW_RESPONSES, rows)


def insert_applicable_roles(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return entities.insert_rows(EntityKind.INTERVIEW_QUESTION_APPLICABLE_ROLES, rows)


def list_applicable_roles(interview_id: int, question_id: int) -> list[dict[str, Any]]:
    return entities.list_rows(
        EntityKind.INTERVIEW_QUESTION_APPLICABLE_ROLES,
        {"interview_id": interview_id, "questionnaire_question_id": question_id},
    )


# =============================================================================
# Responses
# =============================================================================


def get_response(response_id: int) -> dict[str, Any] | None:
    return entities.get_row(EntityKind.INTERVIEW_RESPONSES, response_id)


def get_response_for_question(interview_id: int, question_id: int) -> dict[str, Any] | None:
    rows = entities.list_rows(
        EntityKind.INTERVIEW_RESPONSES,
        {"interview_id": interview_id, "questionnaire_question_id": question_id},
    )
    return rows[0] if rows else None


def list_responses(interview_id: int, applicable_only: bool = False) -> list[dict[str, Any]]:
    filters: dict[str, Any] = {"interview_id": interview_id}
    if applicable_only:
        filters["is_applicable"] = True
    return entities.list_rows(EntityKind.INTERVIEW_RESPONSES, filters, order_by="id")


def list_responses_for_interviews(interview_ids: list[int]) -> dict[int, list[dict[str, Any]]]:
    """Applicable responses grouped by interview ID (interviews without any map to [])."""
    rows = entities.list_rows(
        EntityKind.INTERVIEW_RESPONSES,
        {"interview_id": interview_ids, "is_applicable": True},
        order_by="id",
    )
    by_interview: dict[int, list[dict[str, Any]]] = {iid: [] for iid in interview_ids}
    for row in rows:
        by_interview.setdefault(row["interview_id"], []).append(row)
    return by_interview


def update_response(response_id: int, patch: dict[str, Any]) -> dict[str, Any] | None:
    return entities.update_row(
        EntityKind.INTERVIEW_RESPONSES, response_id, {**patch, "updated_at": entities.utc_now()}
    )


def insert_response_roles(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return entities.insert_rows(EntityKind.INTERVIEW_RESPONSE_ROLES, rows)


def list_response_roles(response_ids: list[int]) -> dict[int, list[dict[str, Any]]]:
    """Role tags grouped by response ID (responses without tags map to [])."""
    rows = entities.list_rows(
        EntityKind.INTERVIEW_RESPONSE_ROLES, {"interview_response_id": response_ids}
    )
    by_response: dict[int, list[dict[str, Any]]] = {rid: [] for rid in response_ids}
    for row in rows:
        by_response.setdefault(row["interview_response_id"], []).append(row)
    return by_response


def replace_response_roles(response: dict[str, Any], role_ids: list[int]) -> list[dict[str, Any]]:
    """Replace a response's role tags; an empty list clears them."""
    entities.delete_rows(
        EntityKind.INTERVIEW_RESPONSE_ROLES, {"interview_response_id": response["id"]}
    )
    return insert_response_roles(
        [
            {
                "interview_response_id": response["id"],
                "role_id": role_id,
                "company_id": response.get("company_id"),
                "interview_id": response["interview_id"],
            }
            for role_id in role_ids
        ]
    )


# =============================================================================
# Part responses
# =============================================================================


def upsert_part_responses(response_id: int, answers: dict[int, str]) -> list[dict[str, Any]]:
    """Store raw part answers, replacing any earlier answer for the same part."""
    return entities.upsert_rows(
        EntityKind.INTERVIEW_QUESTION_PART_RESPONSES,
        [
            {
                "interview_response_id": response_id,
                "question_part_id": part_id,
                "answer_value": value,
                "updated_at": entities.utc_now(),
            }
            for part_id, value in answers.items()
        ],
        on_conflict="interview_response_id,question_part_id",
    )


def restore_part_responses(
    response_id: int, previous_rows: list[dict[str, Any]], part_ids: list[int]
) -> None:
    """
    Put the answers for ``part_ids`` back to an earlier snapshot.

    Parts that had no answer in the snapshot are deleted; the others get
    their previous value back.
    """
    previous = {
        r["question_part_id"]: r["answer_value"]
        for r in previous_rows
        if r["question_part_id"] in part_ids
    }
    added = [part_id for part_id in part_ids if part_id not in previous]
    if added:
        entities.delete_rows(
            EntityKind.INTERVIEW_QUESTION_PART_RESPONSES,
            {"interview_response_id": response_id, "question_part_id": added},
        )
    if previous:
        upsert_part_responses(response_id, previous)


def list_part_responses(response_id: int) -> list[dict[str, Any]]:
    return entities.list_rows(
        EntityKind.INTERVIEW_QUESTION_PART_RESPONSES,
        {"interview_response_id": response_id},
        order_by="question_part_id",
    )


# =============================================================================
# Response actions
# =============================================================================


def insert_response_action(row: dict[str, Any]) -> dict[str, Any]:
    return entities.insert_row(EntityKind.INTERVIEW_RESPONSE_ACTIONS, row)


def update_response_action(action_id: int, patch: dict[str, Any]) -> dict[str, Any] | None:
    return entities.update_row(
        EntityKind.INTERVIEW_RESPONSE_ACTIONS, action_id, {**patch, "updated_at": entities.utc_now()}
    )


def soft_delete_response_action(action_id: int) -> dict[str, Any] | None:
    return entities.soft_delete_row(EntityKind.INTERVIEW_RESPONSE_ACTIONS, action_id)


def list_response_actions(response_id: int) -> list[dict[str, Any]]:
    return entities.list_rows(
        EntityKind.INTERVIEW_RESPONSE_ACTIONS,
        {"interview_response_id": response_id},
        order_by="id",
    )
