"""Pydantic schemas for interviews, responses and progress."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class InterviewStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ScoreSource(str, Enum):
    MANUAL = "manual"
    CALCULATED = "calculated"


class InterviewCreate(BaseModel):
    """Request to create an interview.

    The questionnaire and company come from ``assessment_id`` when given,
    otherwise ``questionnaire_id`` and ``company_id`` are both required.
    Binding a contact makes the interview individual, which scopes it to
    exactly one role.
    """

    name: str = Field(..., min_length=1)
    assessment_id: int | None = None
    questionnaire_id: int | None = None
    company_id: str | None = None
    role_ids: list[int] = Field(default_factory=list)
    interview_contact_id: int | None = None
    interviewer_id: str | None = None
    interviewee_id: str | None = None
    notes: str | None = None
    is_individual: bool = False
    enabled: bool = True
    access_code: str | None = None
    due_at: datetime | None = None

    @model_validator(mode="after")
    def _check_scope(self) -> "InterviewCreate":
        if self.assessment_id is None and (self.questionnaire_id is None or self.company_id is None):
            raise ValueError("assessment_id or both questionnaire_id and company_id are required")
        if self.interview_contact_id is not None:
            self.is_individual = True
        if self.is_individual and len(set(self.role_ids)) != 1:
            raise ValueError("Individual interviews must be scoped to exactly one role")
        # Preserve order, drop duplicates
        self.role_ids = list(dict.fromkeys(self.role_ids))
        return self


class InterviewUpdate(BaseModel):
    """Administrative edits; status is derived and cannot be set here."""

    name: str | None = None
    notes: str | None = None
    enabled: bool | None = None
    due_at: datetime | None = None


class PartAnswer(BaseModel):
    question_part_id: int
    value: bool | int | float | str


class InterviewResponseUpdate(BaseModel):
    """Partial update of a response; only fields explicitly set are applied."""

    rating_score: int | None = None
    is_unknown: bool | None = None
    role_ids: list[int] | None = None
    part_answers: list[PartAnswer] | None = None
    comments: str | None = None

    @model_validator(mode="after")
    def _check_exclusive(self) -> "InterviewResponseUpdate":
        manual = {"rating_score", "is_unknown"} & self.model_fields_set
        if self.part_answers is not None and manual:
            raise ValueError("part_answers cannot be combined with rating_score or is_unknown")
        if self.rating_score is not None and self.is_unknown:
            raise ValueError("rating_score and is_unknown=true are mutually exclusive")
        return self


class ResponseActionCreate(BaseModel):
    title: str | None = None
    description: str = Field(..., min_length=1)


class ResponseActionUpdate(BaseModel):
    title: str | None = None
    description: str | None = None


class ResponseProgress(BaseModel):
    id: int
    rating_score: int | None = None
    is_unknown: bool = False
    is_applicable: bool = True
    has_rating_score: bool = False
    has_roles: bool = False


class InterviewProgress(BaseModel):
    status: InterviewStatus
    previous_status: InterviewStatus | None = None
    total_questions: int
    answered_questions: int
    progress_percentage: int
    responses: dict[int, ResponseProgress] = Field(default_factory=dict)


class ValidationResult(BaseModel):
    is_valid: bool
    has_universal_questions: bool
