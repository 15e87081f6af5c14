"""Tests for interview request schemas."""

import pytest
from pydantic import ValidationError

from interview_engine.core.schemas_interviews import (
    InterviewCreate,
    InterviewResponseUpdate,
    PartAnswer,
)
from interview_engine.core.schemas_questionnaires import QuestionnaireQuestion


class TestInterviewCreate:
    def test_requires_assessment_or_questionnaire_and_company(self):
        with pytest.raises(ValidationError):
            InterviewCreate(name="x", questionnaire_id=1)

        data = InterviewCreate(name="x", questionnaire_id=1, company_id="c1")
        assert data.assessment_id is None

    def test_role_ids_deduplicated_in_order(self):
        data = InterviewCreate(name="x", assessment_id=1, role_ids=[12, 10, 12])

        assert data.role_ids == [12, 10]

    def test_contact_makes_interview_individual(self):
        data = InterviewCreate(name="x", assessment_id=1, role_ids=[10], interview_contact_id=5)

        assert data.is_individual is True

    def test_individual_requires_exactly_one_role(self):
        with pytest.raises(ValidationError):
            InterviewCreate(name="x", assessment_id=1, role_ids=[10, 11], is_individual=True)
        with pytest.raises(ValidationError):
            InterviewCreate(name="x", assessment_id=1, interview_contact_id=5)


class TestInterviewResponseUpdate:
    def test_part_answers_exclude_manual_fields(self):
        with pytest.raises(ValidationError):
            InterviewResponseUpdate(
                rating_score=None, part_answers=[PartAnswer(question_part_id=1, value=3)]
            )

    def test_rating_and_unknown_exclusive(self):
        with pytest.raises(ValidationError):
            InterviewResponseUpdate(rating_score=2, is_unknown=True)

    def test_only_set_fields_tracked(self):
        update = InterviewResponseUpdate(comments="note")

        assert update.model_fields_set == {"comments"}


class TestPartScoringMapping:
    def test_weighted_mapping(self):
        question = QuestionnaireQuestion(
            id=1, rating_scale_mapping={"version": "weighted", "partScoring": {"1": {"true": 2}}}
        )

        assert question.part_scoring == {"1": {"true": 2}}

    def test_other_versions_ignored(self):
        question = QuestionnaireQuestion(id=1, rating_scale_mapping={"1": "Initial"})

        assert question.part_scoring is None
