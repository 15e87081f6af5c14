"""Questionnaire structure reads: questions, declared role categories and parts."""

from typing import Any

from interview_engine.core.logging import get_logger
from interview_engine.core.schemas_questionnaires import QuestionnaireQuestion, QuestionPart
from interview_engine.db import entities
from interview_engine.db.entities import EntityKind

logger = get_logger(__name__)


def get_assessment(assessment_id: int) -> dict[str, Any] | None:
    """
    Get an assessment (company + questionnaire binding).

    Args:
        assessment_id: Assessment ID

    Returns:
        Assessment dict or None if missing or deleted
    """
    return entities.get_row(EntityKind.ASSESSMENTS, assessment_id)


def get_questionnaire(questionnaire_id: int) -> dict[str, Any] | None:
    return entities.get_row(EntityKind.QUESTIONNAIRES, questionnaire_id)


def _question_roles(question_ids: list[int]) -> dict[int, set[int]]:
    rows = entities.list_rows(
        EntityKind.QUESTIONNAIRE_QUESTION_ROLES,
        {"questionnaire_question_id": question_ids},
        columns="questionnaire_question_id, shared_role_id",
    )
    by_question: dict[int, set[int]] = {qid: set() for qid in question_ids}
    for row in rows:
        if row.get("shared_role_id") is not None:
            by_question.setdefault(row["questionnaire_question_id"], set()).add(row["shared_role_id"])
    return by_question


def _question_parts(question_ids: list[int]) -> dict[int, list[QuestionPart]]:
    rows = entities.list_rows(
        EntityKind.QUESTIONNAIRE_QUESTION_PARTS,
        {"questionnaire_question_id": question_ids},
        order_by="order_index",
    )
    by_question: dict[int, list[QuestionPart]] = {qid: [] for qid in question_ids}
    for row in rows:
        part = QuestionPart.model_validate({**row, "options": row.get("options") or {}})
        by_question.setdefault(row["questionnaire_question_id"], []).append(part)
    for parts in by_question.values():
        parts.sort(key=lambda p: p.order_index)
    return by_question


def _build_questions(question_rows: list[dict[str, Any]]) -> list[QuestionnaireQuestion]:
    question_ids = [q["id"] for q in question_rows]
    roles = _question_roles(question_ids)
    parts = _question_parts(question_ids)
    return [
        QuestionnaireQuestion(
            id=q["id"],
            questionnaire_step_id=q.get("questionnaire_step_id"),
            title=q.get("title") or "",
            question_text=q.get("question_text"),
            context=q.get("context"),
            order_index=q.get("order_index") or 0,
            declared_role_categories=roles.get(q["id"], set()),
            parts=parts.get(q["id"], []),
            rating_scale_mapping=q.get("rating_scale_mapping"),
        )
        for q in question_rows
    ]


def list_questionnaire_questions(questionnaire_id: int) -> list[QuestionnaireQuestion]:
    """
    Flatten a questionnaire into its questions, in section → step → question order.

    Args:
        questionnaire_id: Questionnaire ID

    Returns:
        Questions with declared role categories, parts and scoring mapping
    """
    sections = entities.list_rows(
        EntityKind.QUESTIONNAIRE_SECTIONS,
        {"questionnaire_id": questionnaire_id},
        columns="id, order_index",
    )
    if not sections:
        return []
    section_order = {s["id"]: s.get("order_index") or 0 for s in sections}

    steps = entities.list_rows(
        EntityKind.QUESTIONNAIRE_STEPS,
        {"questionnaire_section_id": list(section_order)},
        columns="id, questionnaire_section_id, order_index",
    )
    if not steps:
        return []
    step_order = {
        s["id"]: (section_order[s["questionnaire_section_id"]], s.get("order_index") or 0)
        for s in steps
    }

    question_rows = entities.list_rows(
        EntityKind.QUESTIONNAIRE_QUESTIONS,
        {"questionnaire_step_id": list(step_order)},
    )
    question_rows.sort(
        key=lambda q: (*step_order[q["questionnaire_step_id"]], q.get("order_index") or 0, q["id"])
    )

    questions = _build_questions(question_rows)
    logger.debug(f"Loaded {len(questions)} questions for questionnaire {questionnaire_id}")
    return questions


def get_question(question_id: int) -> QuestionnaireQuestion | None:
    """Get one question with its declared role categories, parts and scoring mapping."""
    row = entities.get_row(EntityKind.QUESTIONNAIRE_QUESTIONS, question_id)
    if not row:
        return None
    return _build_questions([row])[0]


def count_rating_levels(questionnaire_id: int) -> int:
    """Number of rating scale levels defined for a questionnaire."""
    rows = entities.list_rows(
        EntityKind.QUESTIONNAIRE_RATING_SCALES,
        {"questionnaire_id": questionnaire_id},
        columns="id",
    )
    return len(rows)


def get_questionnaire_tree(questionnaire_id: int) -> list[dict[str, Any]]:
    """
    Sections with their steps and questions, each level sorted by order_index.

    Args:
        questionnaire_id: Questionnaire ID

    Returns:
        Section dicts (id, title, order_index, steps); each step carries its
        questions as (id, title, order_index) dicts
    """
    sections = entities.list_rows(
        EntityKind.QUESTIONNAIRE_SECTIONS,
        {"questionnaire_id": questionnaire_id},
        columns="id, title, order_index",
    )
    steps = entities.list_rows(
        EntityKind.QUESTIONNAIRE_STEPS,
        {"questionnaire_section_id": [s["id"] for s in sections]},
        columns="id, questionnaire_section_id, title, order_index",
    )
    questions = entities.list_rows(
        EntityKind.QUESTIONNAIRE_QUESTIONS,
        {"questionnaire_step_id": [s["id"] for s in steps]},
        columns="id, questionnaire_step_id, title, order_index",
    )

    def _ordered(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return sorted(rows, key=lambda r: (r.get("order_index") or 0, r["id"]))

    questions_by_step: dict[int, list[dict[str, Any]]] = {}
    for q in _ordered(questions):
        questions_by_step.setdefault(q["questionnaire_step_id"], []).append(
            {"id": q["id"], "title": q.get("title") or "", "order_index": q.get("order_index") or 0}
        )

    steps_by_section: dict[int, list[dict[str, Any]]] = {}
    for s in _ordered(steps):
        steps_by_section.setdefault(s["questionnaire_section_id"], []).append(
            {
                "id": s["id"],
                "title": s.get("title") or "",
                "order_index": s.get("order_index") or 0,
                "questions": questions_by_step.get(s["id"], []),
            }
        )

    return [
        {
            "id": s["id"],
            "title": s.get("title") or "",
            "order_index": s.get("order_index") or 0,
            "steps": steps_by_section.get(s["id"], []),
        }
        for s in _ordered(sections)
    ]
