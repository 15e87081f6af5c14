"""Tests for interview_engine.core.progress: pure progress/status derivation."""

import pytest

from interview_engine.core.progress import (
    average_rating,
    derive_progress,
    derive_status,
    is_response_answered,
    progress_percentage,
)
from interview_engine.core.schemas_interviews import InterviewStatus

# =============================================================================
# Helpers
# =============================================================================


def _response(
    rid: int,
    rating: int | None = None,
    is_unknown: bool = False,
    tagged: bool = False,
    is_applicable: bool = True,
) -> dict:
    return {
        "id": rid,
        "questionnaire_question_id": 1000 + rid,
        "rating_score": rating,
        "is_unknown": is_unknown,
        "is_applicable": is_applicable,
        "response_roles": [{"role_id": 10}] if tagged else [],
    }


def _ten_responses_four_rated_three_tagged() -> list[dict]:
    responses = [_response(i) for i in range(1, 11)]
    for i in range(4):
        responses[i]["rating_score"] = 3
    for i in range(3):
        responses[i]["response_roles"] = [{"role_id": 10}]
    return responses


# =============================================================================
# Answered rule
# =============================================================================


class TestIsResponseAnswered:
    def test_rating_and_role(self):
        assert is_response_answered(_response(1, rating=2, tagged=True), is_individual=False)

    def test_unknown_counts_as_answer(self):
        assert is_response_answered(_response(1, is_unknown=True, tagged=True), is_individual=False)

    def test_missing_role_tag(self):
        assert not is_response_answered(_response(1, rating=2), is_individual=False)

    def test_individual_waives_role_tag(self):
        assert is_response_answered(_response(1, rating=2), is_individual=True)

    def test_role_tag_without_answer(self):
        assert not is_response_answered(_response(1, tagged=True), is_individual=False)

    def test_zero_rating_is_an_answer(self):
        assert is_response_answered(_response(1, rating=0), is_individual=True)


@pytest.mark.parametrize(
    "answered,total,expected",
    [(0, 0, 0), (0, 5, 0), (3, 10, 30), (1, 3, 33), (2, 3, 67), (1, 8, 13), (5, 5, 100)],
)
def test_progress_percentage(answered, total, expected):
    assert progress_percentage(answered, total) == expected


class TestDeriveStatus:
    def test_pending(self):
        assert derive_status(0, 4) == InterviewStatus.PENDING
        assert derive_status(0, 0) == InterviewStatus.PENDING

    def test_in_progress(self):
        assert derive_status(1, 4) == InterviewStatus.IN_PROGRESS

    def test_completed(self):
        assert derive_status(4, 4) == InterviewStatus.COMPLETED


# =============================================================================
# Progress
# =============================================================================


class TestDeriveProgress:
    def test_multi_respondent_requires_role_tags(self):
        progress = derive_progress(_ten_responses_four_rated_three_tagged(), is_individual=False)

        assert progress.total_questions == 10
        assert progress.answered_questions == 3
        assert progress.progress_percentage == 30
        assert progress.status == InterviewStatus.IN_PROGRESS

    def test_individual_interview_ignores_role_tags(self):
        progress = derive_progress(_ten_responses_four_rated_three_tagged(), is_individual=True)

        assert progress.answered_questions == 4
        assert progress.progress_percentage == 40

    def test_non_applicable_responses_ignored(self):
        responses = [
            _response(1, rating=2, tagged=True),
            _response(2, rating=2, tagged=True, is_applicable=False),
            _response(3, is_applicable=False),
        ]

        progress = derive_progress(responses, is_individual=False)

        assert progress.total_questions == 1
        assert progress.status == InterviewStatus.COMPLETED
        assert list(progress.responses) == [1001]

    def test_no_applicable_responses(self):
        progress = derive_progress([], is_individual=False, previous_status="pending")

        assert progress.total_questions == 0
        assert progress.progress_percentage == 0
        assert progress.status == InterviewStatus.PENDING
        assert progress.previous_status is None

    def test_previous_status_reported_on_change(self):
        responses = [_response(1, rating=1, tagged=True), _response(2)]

        progress = derive_progress(responses, is_individual=False, previous_status="pending")

        assert progress.status == InterviewStatus.IN_PROGRESS
        assert progress.previous_status == InterviewStatus.PENDING

    def test_per_question_summary(self):
        responses = [_response(1, is_unknown=True), _response(2, rating=4, tagged=True)]

        progress = derive_progress(responses, is_individual=False)

        first = progress.responses[1001]
        assert first.is_unknown is True
        assert first.has_rating_score is False
        assert first.has_roles is False
        second = progress.responses[1002]
        assert second.rating_score == 4
        assert second.has_roles is True

    def test_idempotent(self):
        responses = _ten_responses_four_rated_three_tagged()

        assert derive_progress(responses, False) == derive_progress(responses, False)


class TestAverageRating:
    def test_mean_of_rated_applicable_responses(self):
        responses = [
            _response(1, rating=2),
            _response(2, rating=3),
            _response(3, rating=3),
            _response(4),
            _response(5, rating=1, is_applicable=False),
        ]

        assert average_rating(responses) == 2.67

    def test_nothing_rated(self):
        assert average_rating([_response(1, is_unknown=True)]) is None
        assert average_rating([]) is None
