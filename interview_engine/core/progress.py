"""Interview progress and status derivation (pure, no DB access)."""

from collections.abc import Iterable, Mapping
from typing import Any

from interview_engine.core.schemas_interviews import (
    InterviewProgress,
    InterviewStatus,
    ResponseProgress,
)


def is_response_answered(response: Mapping[str, Any], is_individual: bool) -> bool:
    """A rating or unknown marker, plus a role tag unless the interview is individual."""
    has_answer = response.get("rating_score") is not None or bool(response.get("is_unknown"))
    if not has_answer:
        return False
    return is_individual or bool(response.get("response_roles"))


def progress_percentage(answered: int, total: int) -> int:
    """Percentage rounded half-up; 0 when there is nothing to answer."""
    if total == 0:
        return 0
    return (200 * answered + total) // (2 * total)


def derive_status(answered: int, total: int) -> InterviewStatus:
    if answered == 0:
        return InterviewStatus.PENDING
    if answered == total and total > 0:
        return InterviewStatus.COMPLETED
    return InterviewStatus.IN_PROGRESS


def average_rating(responses: Iterable[Mapping[str, Any]]) -> float | None:
    """Mean rating over applicable rated responses, to 2 decimals; None when nothing is rated."""
    ratings = [
        r["rating_score"]
        for r in responses
        if r.get("is_applicable", True) and r.get("rating_score") is not None
    ]
    if not ratings:
        return None
    return round(sum(ratings) / len(ratings), 2)


def derive_progress(
    responses: Iterable[Mapping[str, Any]],
    is_individual: bool,
    previous_status: str | None = None,
) -> InterviewProgress:
    """
    Derive interview progress from its stored responses.

    Args:
        responses: Response rows, each with ``response_roles`` attached
            (the role tags for that response); non-applicable rows are ignored
        is_individual: Individual interviews carry their role implicitly
        previous_status: Status currently stored on the interview

    Returns:
        InterviewProgress; ``previous_status`` is set only when the status changed
    """
    applicable = [r for r in responses if r.get("is_applicable", True)]

    per_question: dict[int, ResponseProgress] = {}
    answered = 0
    for response in applicable:
        if is_response_answered(response, is_individual):
            answered += 1
        per_question[response["questionnaire_question_id"]] = ResponseProgress(
            id=response["id"],
            rating_score=response.get("rating_score"),
            is_unknown=bool(response.get("is_unknown")),
            is_applicable=True,
            has_rating_score=response.get("rating_score") is not None,
            has_roles=is_individual or bool(response.get("response_roles")),
        )

    total = len(applicable)
    status = derive_status(answered, total)

    previous = InterviewStatus(previous_status) if previous_status else None
    return InterviewProgress(
        status=status,
        previous_status=previous if previous != status else None,
        total_questions=total,
        answered_questions=answered,
        progress_percentage=progress_percentage(answered, total),
        responses=per_question,
    )
