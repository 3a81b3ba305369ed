"""Team composition recommendation generator.

Six fixed rules, each firing at most once, sorted high → medium → low.
All functions are *pure*.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from teacher_matching.engine.team_composition import DiversityScore, TeamComposition
from teacher_matching.matching_types import ELEMENT_LABELS

RecommendationCategory = Literal["diversity", "coverage", "balance"]
Priority = Literal["high", "medium", "low"]

_PRIORITY_ORDER: dict[Priority, int] = {"high": 0, "medium": 1, "low": 2}

VISUAL_IMBALANCE_SHARE = 40
LOW_DIVERSITY = 50
STRONG_DIVERSITY = 70


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------
class Recommendation(BaseModel):
    """A single team composition recommendation."""

    model_config = ConfigDict(frozen=True)

    id: str
    category: RecommendationCategory
    priority: Priority
    title: str
    description: str
    evidence: str
    action_items: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def get_team_recommendations(
    composition: TeamComposition,
    diversity_score: DiversityScore,
) -> list[Recommendation]:
    """Return fired recommendations, stably sorted by priority."""
    recs: list[Recommendation] = []

    _learning_style_rec(composition, recs)
    _saju_balance_rec(composition, recs)
    _subject_coverage_rec(composition, recs)
    _grade_coverage_rec(composition, recs)
    _diversity_recs(diversity_score, recs)

    return sorted(recs, key=lambda r: _PRIORITY_ORDER[r.priority])


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------
def _learning_style_rec(composition: TeamComposition, recs: list[Recommendation]) -> None:
    """Visual-dominant team where non-visual styles hold < 40% (100 − visual)."""
    ls = composition.learning_style_distribution
    if ls.dominant != "Visual" or 100 - ls.visual >= VISUAL_IMBALANCE_SHARE:
        return
    recs.append(Recommendation(
        id="rec-1",
        category="diversity",
        priority="high",
        title="학습 스타일 다양성 부족",
        description=f"팀 내 학습 스타일이 Visual({ls.visual}%)에 치중되어 있습니다.",
        evidence=(
            f"Auditory({ls.auditory}%), Reading({ls.reading}%), "
            f"Kinesthetic({ls.kinesthetic}%) 선생님 추가가 필요합니다."
        ),
        action_items=[
            "Auditory 또는 Kinesthetic 스타일 선생님 채용",
            "기존 선생님들의 학습 스타일 파악 강화",
        ],
    ))


def _saju_balance_rec(composition: TeamComposition, recs: list[Recommendation]) -> None:
    saju = composition.saju_elements_distribution
    if not saju.deficient:
        return
    deficient = ", ".join(ELEMENT_LABELS[e] for e in saju.deficient)
    recs.append(Recommendation(
        id="rec-2",
        category="balance",
        priority="medium",
        title="사주 오행 균형 개선",
        description=f"사주 오행 분석 결과 {deficient} 오행이 부족합니다.",
        evidence=f"주요 오행: {ELEMENT_LABELS.get(saju.dominant, saju.dominant)}",
        action_items=[
            "부족한 오행 선생님 채용 고려",
            "오행 균형을 고려한 팀 구성 재검토",
        ],
    ))


def _subject_coverage_rec(composition: TeamComposition, recs: list[Recommendation]) -> None:
    coverage = composition.expertise_coverage
    if not coverage.weak_subjects:
        return
    per_subject = ", ".join(f"{s}({c}명)" for s, c in coverage.subjects.items())
    recs.append(Recommendation(
        id="rec-3",
        category="coverage",
        priority="high",
        title="전문성 커버리지 강화",
        description=(
            "과목별 전문성이 고르지 않습니다. "
            f"{', '.join(coverage.weak_subjects)} 과목 커버리지가 부족합니다."
        ),
        evidence=f"과목별 선생님: {per_subject}",
        action_items=["취약 과목 전문 선생님 채용", "기존 선생님들의 과목 전문성 개발"],
    ))


def _grade_coverage_rec(composition: TeamComposition, recs: list[Recommendation]) -> None:
    coverage = composition.expertise_coverage
    if not coverage.weak_grades:
        return
    per_grade = ", ".join(f"{g}({c}명)" for g, c in coverage.grades.items())
    recs.append(Recommendation(
        id="rec-4",
        category="coverage",
        priority="medium",
        title="학년별 커버리지 개선",
        description=f"{', '.join(coverage.weak_grades)} 학년 커버리지가 부족합니다.",
        evidence=f"학년별 선생님: {per_grade}",
        action_items=["취약 학년 전문 선생님 배정", "학년 간 균형 있는 선생님 배치"],
    ))


def _diversity_recs(score: DiversityScore, recs: list[Recommendation]) -> None:
    if score.overall < LOW_DIVERSITY:
        recs.append(Recommendation(
            id="rec-5",
            category="diversity",
            priority="medium",
            title="다양성 점수 개선 필요",
            description=f"팀 전체 다양성 점수가 {score.overall}점으로 낮습니다.",
            evidence=(
                f"항목별 점수: MBTI({score.mbti_diversity}), "
                f"학습 스타일({score.learning_style_diversity}), "
                f"오행({score.saju_elements_diversity}), "
                f"과목({score.subject_diversity}), 학년({score.grade_diversity})"
            ),
            action_items=["성향이 다양한 선생님 채용", "기존 팀원 간 교류 강화"],
        ))
    if score.overall >= STRONG_DIVERSITY:
        recs.append(Recommendation(
            id="rec-6",
            category="balance",
            priority="low",
            title="팀 균형 우수",
            description="팀의 다양성과 균형이 우수합니다.",
            evidence=f"다양성 점수: {score.overall}점",
            action_items=["현재 균형 유지", "우수 사례 다른 팀과 공유"],
        ))
