"""Pydantic schemas for questionnaire structure, parts and roles."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AnswerType(str, Enum):
    BOOLEAN = "boolean"
    LABELLED_SCALE = "labelled_scale"
    SCALE = "scale"
    NUMBER = "number"
    PERCENTAGE = "percentage"


NUMERIC_ANSWER_TYPES = frozenset({AnswerType.SCALE, AnswerType.NUMBER, AnswerType.PERCENTAGE})

WEIGHTED_SCORING_VERSION = "weighted"


class NumericRange(BaseModel):
    """Inclusive value range mapped to a rating level."""

    min: float
    max: float
    level: int


class QuestionPart(BaseModel):
    """One answerable element of a decomposed question."""

    id: int
    questionnaire_question_id: int | None = None
    text: str = ""
    order_index: int = 0
    answer_type: AnswerType
    options: dict[str, Any] = Field(default_factory=dict)


class QuestionnaireQuestion(BaseModel):
    """A question flattened out of its section/step with its role scope."""

    id: int
    questionnaire_step_id: int | None = None
    title: str = ""
    question_text: str | None = None
    context: str | None = None
    order_index: int = 0
    declared_role_categories: set[int] = Field(default_factory=set)
    parts: list[QuestionPart] = Field(default_factory=list)
    rating_scale_mapping: dict[str, Any] | None = None

    @property
    def part_scoring(self) -> dict[str, dict[str, Any]] | None:
        """Per-part scoring maps keyed by part id, or None when not configured."""
        mapping = self.rating_scale_mapping
        if not mapping or mapping.get("version") != WEIGHTED_SCORING_VERSION:
            return None
        scoring = mapping.get("partScoring")
        return scoring if isinstance(scoring, dict) else None


class CompanyRole(BaseModel):
    """A concrete role in a company, bound to one role category."""

    id: int
    company_id: str | None = None
    shared_role_id: int | None = None
    work_group_id: int | None = None
    name: str | None = None
    description: str | None = None
