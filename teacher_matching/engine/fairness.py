"""Fairness metrics for a finished assignment.

- Disparity index: spread of average score across student groups
- ABROCA: histogram skew of scores versus a uniform spread
- Distribution balance: 1 − coefficient of variation of per-teacher counts

All functions are *pure*.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Mapping
import logging

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from teacher_matching.matching_types import Assignment

logger = logging.getLogger(__name__)

HISTOGRAM_BINS = 10
SCORE_RANGE = 100.0

DISPARITY_LIMIT = 0.2
ABROCA_LIMIT = 0.3
BALANCE_FLOOR = 0.7


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------
class FairnessMetrics(BaseModel):
    """Disparity and ABROCA: lower is better. Balance: higher is better."""

    model_config = ConfigDict(frozen=True)

    disparity_index: float = Field(ge=0.0, le=1.0)
    abroca: float = Field(ge=0.0, le=1.0)
    distribution_balance: float = Field(ge=0.0, le=1.0)
    recommendations: list[str] = Field(default_factory=list)


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def calculate_fairness_metrics(
    assignments: list[Assignment],
    student_group_map: Mapping[str, str] | None = None,
) -> FairnessMetrics:
    """Audit *assignments*; without a group map the disparity index is 0."""
    disparity = (
        calculate_disparity_index(assignments, student_group_map)
        if student_group_map is not None
        else 0.0
    )
    abroca = calculate_abroca(assignments)
    balance = calculate_distribution_balance(assignments)

    recommendations = _fairness_recommendations(disparity, abroca, balance)
    logger.info(
        "Fairness audit over %d assignments: disparity=%.3f abroca=%.3f balance=%.3f",
        len(assignments), disparity, abroca, balance,
    )
    return FairnessMetrics(
        disparity_index=disparity,
        abroca=abroca,
        distribution_balance=balance,
        recommendations=recommendations,
    )


def calculate_disparity_index(
    assignments: list[Assignment],
    student_group_map: Mapping[str, str],
) -> float:
    """(max − min group average score) / 100; fewer than two groups → 0."""
    group_scores: dict[str, list[float]] = defaultdict(list)
    for a in assignments:
        group = student_group_map.get(a.student_id)
        if not group:
            continue
        group_scores[group].append(a.score)

    averages = [sum(s) / len(s) for s in group_scores.values() if s]
    if len(averages) < 2:
        return 0.0
    return _clamp((max(averages) - min(averages)) / SCORE_RANGE)


def calculate_abroca(assignments: list[Assignment]) -> float:
    """L1 distance of the score histogram from uniform, over 2 × n."""
    if not assignments:
        return 0.0

    bin_width = SCORE_RANGE / HISTOGRAM_BINS
    histogram = [0] * HISTOGRAM_BINS
    for a in assignments:
        index = min(max(int(a.score // bin_width), 0), HISTOGRAM_BINS - 1)
        histogram[index] += 1

    n = len(assignments)
    expected = n / HISTOGRAM_BINS
    l1 = sum(abs(count - expected) for count in histogram)
    return _clamp(l1 / (2 * n))


def calculate_distribution_balance(assignments: list[Assignment]) -> float:
    """1 − stdDev/mean of assignments per teacher; no assignments → 1."""
    if not assignments:
        return 1.0

    counts = np.array(list(Counter(a.teacher_id for a in assignments).values()), dtype=float)
    mean = float(np.mean(counts))
    if mean == 0:
        return 1.0
    return _clamp(1.0 - float(np.std(counts)) / mean)


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------
def _fairness_recommendations(disparity: float, abroca: float, balance: float) -> list[str]:
    recs: list[str] = []
    if disparity > DISPARITY_LIMIT:
        recs.append("학교 간 궁합 점수 차이가 큽니다. 가중치 재조정을 검토하세요.")
    if abroca > ABROCA_LIMIT:
        recs.append("궁합 점수 분포가 편향되어 있습니다. 알고리즘 검토가 필요합니다.")
    if balance < BALANCE_FLOOR:
        recs.append("선생님별 배정 분포가 불균형합니다. 부하 분산 가중치를 높이세요.")
    if not recs:
        recs.append("공정성 메트릭이 정상 범위입니다.")
    return recs
