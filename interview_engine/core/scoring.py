"""Part scoring and manual rating rules for interview responses.

A question may be decomposed into parts. Each part answer maps to a rating
level through the question's weighted scoring configuration, and the levels
are averaged (rounded down) into the response's rating.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from interview_engine.core.exceptions import InvalidScoringConfigurationError
from interview_engine.core.logging import get_logger
from interview_engine.core.schemas_interviews import PartAnswer, ScoreSource
from interview_engine.core.schemas_questionnaires import (
    NUMERIC_ANSWER_TYPES,
    AnswerType,
    NumericRange,
    QuestionPart,
)

logger = get_logger(__name__)


@dataclass
class PartScoringResult:
    part_levels: dict[int, int | None] = field(default_factory=dict)
    rating: int | None = None

    @property
    def answered_count(self) -> int:
        return sum(1 for level in self.part_levels.values() if level is not None)


# =============================================================================
# Numeric ranges
# =============================================================================


def derive_numeric_ranges(
    min_value: float,
    max_value: float,
    num_levels: int,
    reversed: bool = False,
) -> list[NumericRange]:
    """Split ``min_value..max_value`` evenly across levels 1..num_levels."""
    if num_levels <= 0:
        return []

    range_size = (max_value - min_value) / num_levels
    ranges = []
    for i in range(num_levels):
        range_min = min_value + i * range_size
        range_max = max_value if i == num_levels - 1 else min_value + (i + 1) * range_size
        ranges.append(
            NumericRange(
                min=round(range_min, 2),
                max=round(range_max, 2),
                level=num_levels - i if reversed else i + 1,
            )
        )
    return ranges


def numeric_ranges_for_part(
    part: QuestionPart,
    scoring: Mapping[str, Any],
    num_levels: int,
    default_min: float = 0,
    default_max: float = 100,
) -> list[NumericRange]:
    """Explicit ranges from the scoring map, else ranges derived from the part options."""
    if scoring.get("ranges"):
        return [NumericRange.model_validate(r) for r in scoring["ranges"]]

    options = part.options or {}
    min_value = options.get("min")
    max_value = options.get("max")
    return derive_numeric_ranges(
        default_min if min_value is None else float(min_value),
        default_max if max_value is None else float(max_value),
        num_levels,
        reversed=bool(scoring.get("reversed", False)),
    )


def level_for_numeric(value: float, ranges: list[NumericRange]) -> int | None:
    """First range containing the value; the last range catches everything else."""
    if not ranges:
        return None
    for r in ranges:
        if r.min <= value <= r.max:
            return r.level
    return ranges[-1].level


# =============================================================================
# Part levels
# =============================================================================


def _lookup_key(answer_type: AnswerType, value: Any) -> str:
    if answer_type == AnswerType.BOOLEAN:
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value).strip().lower()
    return str(value)


def calculate_part_level(
    part: QuestionPart,
    scoring: Mapping[str, Any],
    value: Any,
    num_levels: int = 0,
    default_min: float = 0,
    default_max: float = 100,
) -> int | None:
    """
    Map one part answer to a rating level.

    Args:
        part: The question part being answered
        scoring: The part's scoring map
        value: Raw answer
        num_levels: Rating scale level count, used to derive numeric ranges
        default_min: Lower bound when a numeric part has no options.min
        default_max: Upper bound when a numeric part has no options.max

    Returns:
        Level, or None when the answer has no mapping (excluded from the aggregate)
    """
    if part.answer_type in NUMERIC_ANSWER_TYPES:
        if isinstance(value, bool):
            return None
        try:
            numeric_value = float(value)
        except (TypeError, ValueError):
            logger.warning(f"Non-numeric answer {value!r} for numeric part {part.id}")
            return None
        ranges = numeric_ranges_for_part(part, scoring, num_levels, default_min, default_max)
        return level_for_numeric(numeric_value, ranges)

    level = scoring.get(_lookup_key(part.answer_type, value))
    if level is None:
        # Unmapped answers are skipped rather than rejected (e.g. a renamed label)
        logger.warning(f"No scoring entry for answer {value!r} on part {part.id}")
        return None
    return int(level)


def aggregate_levels(levels: Iterable[int | None]) -> int | None:
    """Average of the matched levels, rounded down; None when nothing matched."""
    matched = [level for level in levels if level is not None]
    if not matched:
        return None
    return math.floor(sum(matched) / len(matched))


def calculate_rating(
    parts: Iterable[QuestionPart],
    part_scoring: Mapping[str, Mapping[str, Any]] | None,
    answers: Iterable[PartAnswer],
    num_levels: int = 0,
    default_min: float = 0,
    default_max: float = 100,
) -> PartScoringResult:
    """
    Score a set of part answers for one question.

    Raises:
        InvalidScoringConfigurationError: If the question has no part scoring
            configuration, or an answer references a part the question lacks
    """
    if not part_scoring:
        raise InvalidScoringConfigurationError("Question has no part scoring configuration")

    parts_by_id = {p.id: p for p in parts}
    result = PartScoringResult()

    for answer in answers:
        part = parts_by_id.get(answer.question_part_id)
        if part is None:
            raise InvalidScoringConfigurationError(
                f"Question part {answer.question_part_id} does not belong to this question"
            )

        scoring = part_scoring.get(str(part.id))
        if scoring is None:
            logger.warning(f"No scoring configured for part {part.id}, skipping")
            result.part_levels[part.id] = None
            continue

        result.part_levels[part.id] = calculate_part_level(
            part, scoring, answer.value, num_levels, default_min, default_max
        )

    result.rating = aggregate_levels(result.part_levels.values())
    return result


def serialize_answer(value: Any) -> str:
    """Answers are stored as text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# =============================================================================
# Manual ratings
# =============================================================================


def build_manual_rating_patch(updates: Mapping[str, Any]) -> dict[str, Any]:
    """
    Build the response patch for a manually entered rating or unknown marker.

    Only keys present in ``updates`` are considered. A non-null rating clears
    ``is_unknown``; ``is_unknown=True`` clears the rating.

    Raises:
        ValueError: If a rating and ``is_unknown=True`` are supplied together
    """
    rating = updates.get("rating_score")
    is_unknown = updates.get("is_unknown")

    if rating is not None and is_unknown:
        raise ValueError("rating_score and is_unknown=true are mutually exclusive")

    if is_unknown:
        return {"rating_score": None, "is_unknown": True, "score_source": None}

    if rating is not None:
        return {"rating_score": rating, "is_unknown": False, "score_source": ScoreSource.MANUAL.value}

    patch: dict[str, Any] = {}
    if "rating_score" in updates:
        patch.update({"rating_score": None, "score_source": None})
    if "is_unknown" in updates:
        patch["is_unknown"] = False
    return patch
