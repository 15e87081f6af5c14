"""Question applicability resolution.

Decides, for each question of a questionnaire, whether it applies to an
interview and which concrete company roles it applies to. Pure functions:
callers load roles and questions and persist the resulting records.

Four cases, keyed on whether the interview is scoped to roles and whether the
question declares role categories:

    interview roles | question categories | outcome
    ----------------+---------------------+-------------------------------------
    none            | none                | universal
    some            | none                | universal
    none            | some                | any company role in those categories
    some            | some                | interview roles in those categories
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from interview_engine.core.schemas_questionnaires import QuestionnaireQuestion


@dataclass(frozen=True)
class ApplicableRole:
    """One persisted applicability decision for an (interview, question)."""

    question_id: int
    is_universal: bool
    role_id: int | None = None

    def to_row(self, interview_id: int, company_id: str) -> dict:
        return {
            "interview_id": interview_id,
            "questionnaire_question_id": self.question_id,
            "is_universal": self.is_universal,
            "role_id": self.role_id,
            "company_id": company_id,
        }


@dataclass
class QuestionApplicability:
    question_id: int
    is_applicable: bool
    records: list[ApplicableRole] = field(default_factory=list)

    @property
    def is_universal(self) -> bool:
        return any(r.is_universal for r in self.records)

    @property
    def role_ids(self) -> list[int]:
        return [r.role_id for r in self.records if r.role_id is not None]


def _roles_in_categories(
    role_ids: Iterable[int],
    categories: set[int],
    role_categories: Mapping[int, int | None],
) -> list[int]:
    matched = {
        role_id
        for role_id in role_ids
        if role_categories.get(role_id) is not None and role_categories[role_id] in categories
    }
    return sorted(matched)


def resolve_question_applicability(
    question_id: int,
    interview_role_ids: Iterable[int],
    question_categories: Iterable[int],
    role_categories: Mapping[int, int | None],
) -> QuestionApplicability:
    """
    Resolve applicability of one question.

    Args:
        question_id: Questionnaire question ID
        interview_role_ids: Company roles the interview is scoped to (may be empty)
        question_categories: Role categories the question declares (may be empty)
        role_categories: Every company role ID mapped to its role category

    Returns:
        QuestionApplicability with the records to persist, one per role
        (deduplicated, ascending) or a single universal record
    """
    interview_roles = set(interview_role_ids)
    categories = set(question_categories)

    if not categories:
        # Interview scoping never narrows a question with no declared categories
        return QuestionApplicability(
            question_id=question_id,
            is_applicable=True,
            records=[ApplicableRole(question_id=question_id, is_universal=True)],
        )

    # An unscoped interview draws from the whole company's role pool
    pool = interview_roles if interview_roles else role_categories.keys()
    matched = _roles_in_categories(pool, categories, role_categories)

    return QuestionApplicability(
        question_id=question_id,
        is_applicable=bool(matched),
        records=[
            ApplicableRole(question_id=question_id, is_universal=False, role_id=role_id)
            for role_id in matched
        ],
    )


def resolve_interview_applicability(
    questions: Iterable[QuestionnaireQuestion],
    interview_role_ids: Iterable[int],
    role_categories: Mapping[int, int | None],
) -> dict[int, QuestionApplicability]:
    """Resolve every question of a questionnaire, keyed by question ID (in order)."""
    interview_roles = list(interview_role_ids)
    return {
        q.id: resolve_question_applicability(
            q.id, interview_roles, q.declared_role_categories, role_categories
        )
        for q in questions
    }


def questionnaire_has_applicable_questions(
    questions: Iterable[QuestionnaireQuestion],
    selected_categories: Iterable[int],
) -> tuple[bool, bool]:
    """
    Check whether a questionnaire has anything to ask the selected role categories.

    Returns:
        (is_valid, has_universal_questions). Any universal question makes the
        questionnaire valid regardless of the selection.
    """
    questions = list(questions)
    if not questions:
        return False, False

    if any(not q.declared_role_categories for q in questions):
        return True, True

    selected = set(selected_categories)
    declared = set().union(*(q.declared_role_categories for q in questions))
    return bool(selected & declared), False
