"""Interview lifecycle: creation, response updates, scoring and progress.

Creation writes the interview and everything hanging off it as a sequence of
non-transactional inserts. If any insert after the interview row fails, every
row written so far is deleted before the error reaches the caller, so a
partially created interview is never observable.
"""

import logging
import secrets
from collections import defaultdict
from typing import Any

from interview_engine.core.applicability import (
    questionnaire_has_applicable_questions,
    resolve_interview_applicability,
)
from interview_engine.core.config import get_settings
from interview_engine.core.exceptions import (
    AssessmentNotFoundError,
    InterviewCreationError,
    InterviewNotFoundError,
    NotFoundError,
    QuestionnaireNotFoundError,
    QuestionNotFoundError,
    ResponseNotFoundError,
    RoleLookupError,
    RoleNotApplicableError,
)
from interview_engine.core.logging import get_logger, log_with_context
from interview_engine.core.org_hierarchy import OrgLevel
from interview_engine.core.progress import average_rating, derive_progress
from interview_engine.core.schemas_interviews import (
    InterviewCreate,
    InterviewProgress,
    InterviewResponseUpdate,
    InterviewStatus,
    InterviewUpdate,
    PartAnswer,
    ResponseActionCreate,
    ResponseActionUpdate,
    ScoreSource,
    ValidationResult,
)
from interview_engine.core.schemas_questionnaires import (
    NUMERIC_ANSWER_TYPES,
    QuestionnaireQuestion,
)
from interview_engine.core.scoring import (
    build_manual_rating_patch,
    calculate_rating,
    serialize_answer,
)
from interview_engine.db import entities
from interview_engine.db import interviews as interviews_db
from interview_engine.db import questionnaires as questionnaires_db
from interview_engine.db import roles as roles_db

logger = get_logger(__name__)


# =============================================================================
# Creation
# =============================================================================


def _resolve_questionnaire(data: InterviewCreate) -> tuple[int, str, int | None]:
    """Return (questionnaire_id, company_id, assessment_id) for a creation request."""
    if data.assessment_id is not None:
        assessment = questionnaires_db.get_assessment(data.assessment_id)
        if not assessment:
            raise AssessmentNotFoundError(f"Assessment {data.assessment_id} not found")
        questionnaire_id = assessment.get("questionnaire_id")
        company_id = assessment["company_id"]
    else:
        questionnaire_id = data.questionnaire_id
        company_id = data.company_id

    if questionnaire_id is None or not questionnaires_db.get_questionnaire(questionnaire_id):
        raise QuestionnaireNotFoundError(f"Questionnaire {questionnaire_id} not found")

    return questionnaire_id, company_id, data.assessment_id


def _load_role_categories(company_id: str, selected_role_ids: list[int]) -> dict[int, int | None]:
    try:
        company_roles = roles_db.list_company_roles(company_id)
    except Exception as e:
        raise RoleLookupError(f"Failed to look up roles for company {company_id}: {e}") from e

    role_categories = roles_db.role_category_map(company_roles)
    missing = [r for r in selected_role_ids if r not in role_categories]
    if missing:
        raise RoleLookupError(f"Roles {missing} not found in company {company_id}")
    return role_categories


def _interview_row(
    data: InterviewCreate,
    questionnaire_id: int,
    company_id: str,
    assessment_id: int | None,
    created_by: str | None,
) -> dict[str, Any]:
    return {
        "name": data.name,
        "assessment_id": assessment_id,
        "questionnaire_id": questionnaire_id,
        "company_id": company_id,
        "interviewer_id": data.interviewer_id or created_by,
        "interviewee_id": data.interviewee_id,
        "interview_contact_id": data.interview_contact_id,
        "notes": data.notes,
        "is_individual": data.is_individual,
        "enabled": data.enabled,
        "access_code": data.access_code,
        "due_at": data.due_at.isoformat() if data.due_at else None,
        "status": InterviewStatus.PENDING.value,
        "is_deleted": False,
        "created_by": created_by,
    }


def create_interview(data: InterviewCreate, created_by: str | None = None) -> dict[str, Any]:
    """
    Create an interview with one response per questionnaire question.

    Args:
        data: Creation request
        created_by: ID of the user creating the interview

    Returns:
        The created interview row

    Raises:
        AssessmentNotFoundError: If the assessment does not exist
        QuestionnaireNotFoundError: If the questionnaire does not exist
        RoleLookupError: If company roles cannot be loaded or a selected role
            is not one of the company's roles
        InterviewCreationError: If any write fails (after rolling back)
    """
    questionnaire_id, company_id, assessment_id = _resolve_questionnaire(data)

    questions = questionnaires_db.list_questionnaire_questions(questionnaire_id)
    if not questions:
        logger.warning(
            f"No questionnaire questions associated with questionnaire {questionnaire_id}; "
            "interview will have no responses"
        )

    role_categories = _load_role_categories(company_id, data.role_ids)
    applicability = resolve_interview_applicability(questions, data.role_ids, role_categories)

    try:
        interview = interviews_db.insert_interview(
            _interview_row(data, questionnaire_id, company_id, assessment_id, created_by)
        )
    except Exception as e:
        raise InterviewCreationError(f"Failed to create interview: {e}") from e

    interview_id = interview["id"]

    try:
        if data.role_ids:
            interviews_db.insert_interview_roles(interview_id, company_id, data.role_ids, created_by)

        if questions:
            created_responses = interviews_db.insert_responses(
                [
                    {
                        "interview_id": interview_id,
                        "questionnaire_question_id": q.id,
                        "rating_score": None,
                        "is_unknown": False,
                        "score_source": None,
                        "comments": None,
                        "answered_at": None,
                        "is_applicable": applicability[q.id].is_applicable,
                        "company_id": company_id,
                        "created_by": created_by,
                    }
                    for q in questions
                ]
            )

            applicable_rows = [
                record.to_row(interview_id, company_id)
                for result in applicability.values()
                for record in result.records
            ]
            if applicable_rows:
                interviews_db.insert_applicable_roles(applicable_rows)

            # A single-role interview has no ambiguity about who answered
            if len(data.role_ids) == 1:
                interviews_db.insert_response_roles(
                    [
                        {
                            "interview_response_id": response["id"],
                            "role_id": data.role_ids[0],
                            "company_id": company_id,
                            "interview_id": interview_id,
                            "created_by": created_by,
                        }
                        for response in created_responses
                    ]
                )

    except Exception as e:
        logger.error(
            f"Interview creation failed, rolling back interview {interview_id}: {e}",
            extra={"interview_id": interview_id},
        )
        try:
            interviews_db.purge_interview(interview_id)
        except Exception as cleanup_error:
            logger.error(
                f"Rollback of interview {interview_id} failed: {cleanup_error}",
                extra={"interview_id": interview_id},
            )
        raise InterviewCreationError(f"Failed to create interview: {e}") from e

    log_with_context(
        logger,
        logging.INFO,
        "Interview materialized",
        interview_id=interview_id,
        questions=len(questions),
        applicable=sum(1 for r in applicability.values() if r.is_applicable),
        roles=len(data.role_ids),
    )
    return interview


def generate_access_code() -> str:
    """Generate a unique 8-character hex access code for an individual interview."""
    attempts = get_settings().ACCESS_CODE_MAX_ATTEMPTS
    for _ in range(attempts):
        access_code = secrets.token_hex(4)
        if not interviews_db.access_code_exists(access_code):
            return access_code
    raise InterviewCreationError(f"Could not generate a unique access code in {attempts} attempts")


def create_individual_interviews(
    assessment_id: int,
    contact_ids: list[int],
    name: str,
    created_by: str | None = None,
) -> list[dict[str, Any]]:
    """
    Create one individual interview per contact, scoped to the contact's role.

    Contacts without a role are skipped; a failure for one contact does not
    stop the others.

    Returns:
        Created interviews, each with its ``contact`` attached

    Raises:
        AssessmentNotFoundError: If the assessment does not exist
        InterviewCreationError: If no interview could be created
    """
    if not questionnaires_db.get_assessment(assessment_id):
        raise AssessmentNotFoundError(f"Assessment {assessment_id} not found")

    contact_roles = roles_db.get_contact_roles(contact_ids)
    if not contact_roles:
        raise InterviewCreationError("No roles found for the selected contacts")
    contacts = roles_db.get_contacts(contact_ids)

    created: list[dict[str, Any]] = []
    for contact_id in contact_ids:
        role_id = contact_roles.get(contact_id)
        contact = contacts.get(contact_id)
        if role_id is None:
            logger.warning(f"No role found for contact {contact_id}, skipping")
            continue
        if contact is None:
            logger.warning(f"No contact info found for contact {contact_id}, skipping")
            continue

        try:
            interview = create_interview(
                InterviewCreate(
                    name=name,
                    assessment_id=assessment_id,
                    role_ids=[role_id],
                    interview_contact_id=contact_id,
                    access_code=generate_access_code(),
                ),
                created_by=created_by,
            )
        except (InterviewCreationError, NotFoundError) as e:
            logger.error(f"Failed to create interview for contact {contact_id}: {e}")
            continue

        created.append({**interview, "contact": contact})

    if not created:
        raise InterviewCreationError("Failed to create any interviews")

    logger.info(f"Created {len(created)} individual interview(s) for assessment {assessment_id}")
    return created


# =============================================================================
# Interview administration
# =============================================================================


def get_interview(interview_id: int) -> dict[str, Any]:
    interview = interviews_db.get_interview(interview_id)
    if not interview:
        raise InterviewNotFoundError(f"Interview {interview_id} not found")
    return interview


def update_interview_details(interview_id: int, updates: InterviewUpdate) -> dict[str, Any]:
    """Apply administrative edits (name, notes, enabled flag, due date)."""
    interview = get_interview(interview_id)
    patch = updates.model_dump(exclude_unset=True, mode="json")
    if not patch:
        return interview
    return interviews_db.update_interview(interview_id, patch) or {**interview, **patch}


def delete_interview(interview_id: int) -> None:
    get_interview(interview_id)
    interviews_db.soft_delete_interview(interview_id)
    logger.info(f"Soft-deleted interview {interview_id}", extra={"interview_id": interview_id})


def validate_assessment_roles(assessment_id: int, role_ids: list[int]) -> ValidationResult:
    """Check that a role selection leaves the assessment's questionnaire something to ask."""
    assessment = questionnaires_db.get_assessment(assessment_id)
    if not assessment:
        raise AssessmentNotFoundError(f"Assessment {assessment_id} not found")
    if not assessment.get("questionnaire_id"):
        return ValidationResult(is_valid=False, has_universal_questions=False)

    questions = questionnaires_db.list_questionnaire_questions(assessment["questionnaire_id"])
    categories = [
        r.shared_role_id
        for r in (
            roles_db.get_roles(role_ids, company_id=assessment["company_id"]) if role_ids else []
        )
        if r.shared_role_id is not None
    ]
    is_valid, has_universal = questionnaire_has_applicable_questions(questions, categories)
    return ValidationResult(is_valid=is_valid, has_universal_questions=has_universal)


def list_interviews(
    company_id: str,
    assessment_id: int | None = None,
    statuses: list[InterviewStatus] | None = None,
) -> list[dict[str, Any]]:
    """
    List a company's interviews, newest first, with completion and average rating.

    Args:
        company_id: Company ID
        assessment_id: Only interviews of this assessment
        statuses: Only interviews in one of these statuses

    Returns:
        Interview rows with ``completion_rate`` (percentage of applicable
        questions answered) and ``average_score`` (None when nothing is rated)
    """
    filters: dict[str, Any] = {"company_id": company_id}
    if assessment_id is not None:
        filters["assessment_id"] = assessment_id
    if statuses:
        filters["status"] = [InterviewStatus(s).value for s in statuses]

    interviews = interviews_db.list_interviews(filters)
    if not interviews:
        return []

    responses_by_interview = interviews_db.list_responses_for_interviews([i["id"] for i in interviews])
    all_response_ids = [r["id"] for rows in responses_by_interview.values() for r in rows]
    tags = interviews_db.list_response_roles(all_response_ids)

    listed = []
    for interview in interviews:
        responses = [
            {**r, "response_roles": tags.get(r["id"], [])}
            for r in responses_by_interview.get(interview["id"], [])
        ]
        progress = derive_progress(responses, bool(interview.get("is_individual")))
        listed.append(
            {
                **interview,
                "completion_rate": progress.progress_percentage,
                "average_score": average_rating(responses),
            }
        )
    return listed


def get_interview_structure(interview_id: int) -> dict[str, Any]:
    """
    Navigation outline of an interview's questionnaire.

    Sections, steps and questions are ordered by their order_index and
    renumbered 0..n-1 within their parent.

    Raises:
        InterviewNotFoundError: If the interview does not exist
    """
    interview = get_interview(interview_id)
    sections = questionnaires_db.get_questionnaire_tree(interview["questionnaire_id"])

    def _renumber(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [{**item, "order_index": index} for index, item in enumerate(items)]

    outline = []
    for section in _renumber(sections):
        section["steps"] = [
            {**step, "questions": _renumber(step["questions"])}
            for step in _renumber(section["steps"])
        ]
        outline.append(section)

    return {
        "interview": {
            "id": interview["id"],
            "name": interview.get("name"),
            "questionnaire_id": interview["questionnaire_id"],
            "assessment_id": interview.get("assessment_id"),
            "is_individual": bool(interview.get("is_individual")),
        },
        "sections": outline,
    }


def get_interview_summary(interview_id: int) -> dict[str, Any]:
    """
    Header details for an interview: assessment, scoped roles and people.

    Individual interviews are answered by a contact through an access code,
    so the interviewer and the assessment id are not exposed for them.

    Raises:
        InterviewNotFoundError: If the interview does not exist
    """
    interview = get_interview(interview_id)
    is_individual = bool(interview.get("is_individual"))

    assessment = None
    if interview.get("assessment_id") is not None:
        row = questionnaires_db.get_assessment(interview["assessment_id"])
        if row:
            assessment = {"id": None if is_individual else row["id"], "name": row.get("name")}

    role_ids = interviews_db.list_interview_role_ids(interview_id)
    roles = roles_db.get_roles(role_ids) if role_ids else []

    return {
        "id": interview["id"],
        "name": interview.get("name"),
        "status": interview.get("status"),
        "notes": interview.get("notes"),
        "is_individual": is_individual,
        "enabled": interview.get("enabled"),
        "due_at": interview.get("due_at"),
        "interviewer_id": None if is_individual else interview.get("interviewer_id"),
        "interviewee_id": interview.get("interviewee_id"),
        "assessment": assessment,
        "roles": [{"id": r.id, "name": r.name} for r in roles],
    }


# Assessment scope columns, most specific first
ASSESSMENT_SCOPE_LEVELS = (
    ("asset_group_id", OrgLevel.ASSET_GROUP),
    ("site_id", OrgLevel.SITE),
    ("region_id", OrgLevel.REGION),
    ("business_unit_id", OrgLevel.BUSINESS_UNIT),
)


def get_roles_for_assessment(assessment_id: int) -> list[dict[str, Any]]:
    """
    Company roles an assessment can be scoped to, with their org names.

    An assessment bound to part of the org tree only offers roles whose work
    group sits beneath that node; the most specific bound level wins. Roles
    without a known work group are left out.

    Raises:
        AssessmentNotFoundError: If the assessment does not exist
    """
    assessment = questionnaires_db.get_assessment(assessment_id)
    if not assessment:
        raise AssessmentNotFoundError(f"Assessment {assessment_id} not found")

    scope = next(
        (
            (level, assessment[column])
            for column, level in ASSESSMENT_SCOPE_LEVELS
            if assessment.get(column) is not None
        ),
        None,
    )

    hierarchy = roles_db.load_org_hierarchy(assessment["company_id"])
    roles = []
    for role in roles_db.list_company_roles(assessment["company_id"]):
        nodes = {n.level: n for n in hierarchy.ancestor_nodes(role.work_group_id)}
        if OrgLevel.WORK_GROUP not in nodes:
            continue
        if scope is not None:
            scope_node = nodes.get(scope[0])
            if scope_node is None or scope_node.id != scope[1]:
                continue
        roles.append(
            {
                "id": role.id,
                "shared_role_id": role.shared_role_id,
                "name": role.name,
                "description": role.description,
                **{
                    f"{level.value}_name": nodes[level].name if level in nodes else None
                    for level in reversed(OrgLevel)
                },
            }
        )
    if not roles:
        logger.warning(f"No roles found for the scope of assessment {assessment_id}")
    return roles


# =============================================================================
# Progress
# =============================================================================


def get_progress(interview_id: int) -> InterviewProgress:
    """
    Recompute an interview's progress and status from its responses.

    The derived status is written back to the interview when it changed;
    a failed write is logged and the computed progress is still returned.
    """
    interview = get_interview(interview_id)
    is_individual = bool(interview.get("is_individual"))

    responses = interviews_db.list_responses(interview_id, applicable_only=True)
    if not is_individual:
        tags = interviews_db.list_response_roles([r["id"] for r in responses])
        responses = [{**r, "response_roles": tags.get(r["id"], [])} for r in responses]

    progress = derive_progress(responses, is_individual, interview.get("status"))

    if progress.status.value != interview.get("status"):
        try:
            interviews_db.update_interview(interview_id, {"status": progress.status.value})
            log_with_context(
                logger,
                logging.INFO,
                "Interview status changed",
                interview_id=interview_id,
                previous=interview.get("status"),
                status=progress.status.value,
            )
        except Exception as e:
            logger.error(
                f"Failed to update interview status: {e}", extra={"interview_id": interview_id}
            )

    return progress


# =============================================================================
# Responses
# =============================================================================


def get_response(response_id: int) -> dict[str, Any]:
    response = interviews_db.get_response(response_id)
    if not response:
        raise ResponseNotFoundError(f"Interview response {response_id} not found")
    return response


def get_response_detail(response_id: int) -> dict[str, Any]:
    """A response with its role tags, raw part answers and follow-up actions."""
    response = get_response(response_id)
    tags = interviews_db.list_response_roles([response_id])
    return {
        **response,
        "response_roles": tags.get(response_id, []),
        "question_part_responses": interviews_db.list_part_responses(response_id),
        "actions": interviews_db.list_response_actions(response_id),
    }


def _get_question(question_id: int) -> QuestionnaireQuestion:
    question = questionnaires_db.get_question(question_id)
    if not question:
        raise QuestionNotFoundError(f"Question {question_id} not found")
    return question


def _allowed_role_ids(response: dict[str, Any]) -> set[int]:
    applicable = interviews_db.list_applicable_roles(
        response["interview_id"], response["questionnaire_question_id"]
    )
    if any(r.get("is_universal") for r in applicable):
        company_id = response.get("company_id") or get_interview(response["interview_id"])["company_id"]
        return {r.id for r in roles_db.list_company_roles(company_id)}
    return {r["role_id"] for r in applicable if r.get("role_id") is not None}


def _validate_role_tags(response: dict[str, Any], role_ids: list[int]) -> None:
    if not role_ids:
        return
    allowed = _allowed_role_ids(response)
    invalid = [r for r in role_ids if r not in allowed]
    if invalid:
        raise RoleNotApplicableError(
            f"Roles {invalid} are not applicable to question "
            f"{response['questionnaire_question_id']} in interview {response['interview_id']}"
        )


def _rating_levels_for(question: QuestionnaireQuestion, interview_id: int) -> int:
    """Rating scale level count, only looked up when a numeric part needs derived ranges."""
    scoring = question.part_scoring or {}
    needs_levels = any(
        p.answer_type in NUMERIC_ANSWER_TYPES and not (scoring.get(str(p.id)) or {}).get("ranges")
        for p in question.parts
    )
    if not needs_levels:
        return 0
    interview = get_interview(interview_id)
    return questionnaires_db.count_rating_levels(interview["questionnaire_id"])


def _merge_part_answers(
    question: QuestionnaireQuestion,
    stored: list[dict[str, Any]],
    answers: list[PartAnswer],
) -> list[PartAnswer]:
    """Stored answers for the question's current parts, overlaid with the new ones."""
    part_ids = {p.id for p in question.parts}
    merged: dict[int, Any] = {
        row["question_part_id"]: row["answer_value"]
        for row in stored
        if row["question_part_id"] in part_ids and row.get("answer_value") is not None
    }
    merged.update({a.question_part_id: a.value for a in answers})
    return [PartAnswer(question_part_id=pid, value=value) for pid, value in merged.items()]


def _restore_part_answers(
    response_id: int, previous_parts: list[dict[str, Any]], part_ids: list[int]
) -> None:
    try:
        interviews_db.restore_part_responses(response_id, previous_parts, part_ids)
    except Exception as restore_error:
        logger.error(
            f"Restoring part answers for response {response_id} failed: {restore_error}",
            extra={"response_id": response_id},
        )


def update_response(response_id: int, update: InterviewResponseUpdate) -> dict[str, Any]:
    """
    Update a response's rating, unknown marker, role tags, part answers or comments.

    Part answers are stored per part and the rating is derived from every
    stored answer, with the new ones replacing earlier answers to the same
    parts. A manual rating is rejected for questions scored from parts. All
    validation happens before anything is written; if the rating write fails
    the part answers are put back as they were.

    Returns:
        The updated response with role tags and part answers

    Raises:
        ResponseNotFoundError: If the response does not exist
        QuestionNotFoundError: If the response's question no longer exists
        InvalidScoringConfigurationError: If part answers arrive for a question
            without usable part scoring
        RoleNotApplicableError: If a role tag is not applicable to the question
        ValueError: If a manual rating is given for a part-scored question
    """
    response = get_response(response_id)
    fields = update.model_fields_set
    patch: dict[str, Any] = {}
    part_values: dict[int, str] = {}
    previous_parts: list[dict[str, Any]] = []

    if update.part_answers is not None:
        question = _get_question(response["questionnaire_question_id"])
        previous_parts = interviews_db.list_part_responses(response_id)
        settings = get_settings()
        result = calculate_rating(
            question.parts,
            question.part_scoring,
            _merge_part_answers(question, previous_parts, update.part_answers),
            num_levels=_rating_levels_for(question, response["interview_id"]),
            default_min=settings.DEFAULT_NUMERIC_MIN,
            default_max=settings.DEFAULT_NUMERIC_MAX,
        )
        part_values = {a.question_part_id: serialize_answer(a.value) for a in update.part_answers}
        patch.update(
            {
                "rating_score": result.rating,
                "is_unknown": False,
                "score_source": ScoreSource.CALCULATED.value,
                "answered_at": entities.utc_now(),
            }
        )
        log_with_context(
            logger,
            logging.DEBUG,
            "Part answers scored",
            response_id=response_id,
            question_id=question.id,
            levels=result.part_levels,
            rating=result.rating,
        )

    manual_fields = {"rating_score", "is_unknown"} & fields
    if manual_fields:
        if update.rating_score is not None:
            question = _get_question(response["questionnaire_question_id"])
            if question.part_scoring:
                raise ValueError(
                    f"Question {question.id} is scored from its parts; rating cannot be set manually"
                )
        patch.update(build_manual_rating_patch({f: getattr(update, f) for f in manual_fields}))
        if patch.get("rating_score") is not None or patch.get("is_unknown"):
            patch["answered_at"] = entities.utc_now()

    if "comments" in fields:
        patch["comments"] = update.comments

    if update.role_ids is not None:
        _validate_role_tags(response, update.role_ids)

    if part_values:
        interviews_db.upsert_part_responses(response_id, part_values)
    if patch:
        try:
            interviews_db.update_response(response_id, patch)
        except Exception as e:
            logger.error(
                f"Failed to update response {response_id}, restoring part answers: {e}",
                extra={"response_id": response_id},
            )
            if part_values:
                _restore_part_answers(response_id, previous_parts, list(part_values))
            raise
    if update.role_ids is not None:
        interviews_db.replace_response_roles(response, update.role_ids)

    return get_response_detail(response_id)


# =============================================================================
# Question detail
# =============================================================================


def get_interview_question(interview_id: int, question_id: int) -> dict[str, Any]:
    """
    Question detail for answering: selectable roles grouped by org path,
    parts, and the current response.
    """
    interview = get_interview(interview_id)
    question = _get_question(question_id)

    applicable = interviews_db.list_applicable_roles(interview_id, question_id)
    is_universal = any(r.get("is_universal") for r in applicable)
    if is_universal:
        roles = roles_db.list_company_roles(interview["company_id"])
    else:
        role_ids = [r["role_id"] for r in applicable if r.get("role_id") is not None]
        roles = roles_db.get_roles(role_ids) if role_ids else []

    hierarchy = roles_db.load_org_hierarchy(interview["company_id"])
    grouped: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for role in roles:
        if role.shared_role_id is None:
            continue
        path = hierarchy.build_role_path(role.work_group_id)
        grouped[path].append(
            {
                "id": role.id,
                "shared_role_id": role.shared_role_id,
                "name": role.name,
                "description": role.description,
                "path": path,
            }
        )

    response = interviews_db.get_response_for_question(interview_id, question_id)
    return {
        "id": question.id,
        "title": question.title,
        "question_text": question.question_text,
        "context": question.context,
        "is_universal": is_universal,
        "question_parts": [p.model_dump(mode="json") for p in question.parts],
        "options": {"applicable_roles": dict(grouped)},
        "response": get_response_detail(response["id"]) if response else None,
    }


# =============================================================================
# Response actions
# =============================================================================


def add_response_action(response_id: int, data: ResponseActionCreate) -> dict[str, Any]:
    response = get_response(response_id)
    return interviews_db.insert_response_action(
        {
            "company_id": response.get("company_id"),
            "interview_id": response["interview_id"],
            "interview_response_id": response_id,
            "title": data.title,
            "description": data.description,
            "is_deleted": False,
        }
    )


def update_response_action(action_id: int, data: ResponseActionUpdate) -> dict[str, Any]:
    action = interviews_db.update_response_action(action_id, data.model_dump(exclude_unset=True))
    if not action:
        raise NotFoundError(f"Response action {action_id} not found")
    return action


def delete_response_action(action_id: int) -> None:
    if not interviews_db.soft_delete_response_action(action_id):
        raise NotFoundError(f"Response action {action_id} not found")
