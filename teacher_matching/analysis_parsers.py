"""Parse stored analysis payloads (untyped JSON) into typed analysis bundles.

Malformed payloads become ``None`` so one bad row never blocks a run.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from teacher_matching.matching_types import (
    MBTI_LETTERS,
    MbtiPercentages,
    NameResult,
    SajuResult,
    StudentAnalysisData,
    TeacherAnalysisData,
)

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_mbti_percentages(data: Any) -> MbtiPercentages | None:
    """Accept a mapping only when all eight axis letters are numeric."""
    if not isinstance(data, dict):
        return None
    if not all(_is_number(data.get(letter)) for letter in MBTI_LETTERS):
        return None
    try:
        return MbtiPercentages.model_validate(data)
    except ValidationError as e:
        logger.warning("Discarding MBTI payload: %s", e)
        return None


def parse_saju_result(data: Any) -> SajuResult | None:
    """Accept a mapping with ``pillars`` and ``elements`` objects.

    When ``fiveElements`` is absent, a numeric ``elements`` mapping is used as
    the five-element balance.
    """
    if not isinstance(data, dict):
        return None
    elements = data.get("elements")
    if not isinstance(data.get("pillars"), dict) or not isinstance(elements, dict):
        return None
    if "fiveElements" not in data and "five_elements" not in data and all(
        _is_number(v) for v in elements.values()
    ):
        data = {**data, "fiveElements": elements}
    try:
        return SajuResult.model_validate(data)
    except ValidationError as e:
        logger.warning("Discarding saju payload: %s", e)
        return None


def parse_name_numerology(data: Any) -> NameResult | None:
    """Extract ``numerology`` from a stored name analysis.

    Stored shape: ``{"hasHanja": bool, "numerology": {...}}``; numerology is
    absent when the name has no registered hanja.
    """
    if not isinstance(data, dict):
        return None
    numerology = data.get("numerology")
    if not isinstance(numerology, dict):
        return None
    try:
        return NameResult.model_validate(numerology)
    except ValidationError as e:
        logger.warning("Discarding name numerology payload: %s", e)
        return None


def build_student_analysis(mbti: Any = None, saju: Any = None, name: Any = None) -> StudentAnalysisData:
    return StudentAnalysisData(
        mbti=parse_mbti_percentages(mbti),
        saju=parse_saju_result(saju),
        name=parse_name_numerology(name),
    )


def build_teacher_analysis(
    mbti: Any = None,
    saju: Any = None,
    name: Any = None,
    current_load: int = 0,
) -> TeacherAnalysisData:
    return TeacherAnalysisData(
        mbti=parse_mbti_percentages(mbti),
        saju=parse_saju_result(saju),
        name=parse_name_numerology(name),
        current_load=current_load,
    )
