"""Team composition analysis — five roster distributions and a diversity score.

Teachers missing a datum are skipped for that distribution only.
All functions are *pure*.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timezone
import logging
import math

from pydantic import BaseModel, ConfigDict, Field

from teacher_matching.matching_types import (
    ELEMENTS,
    GRADES,
    LEARNING_STYLES,
    MBTI_AXES,
    SUBJECTS,
    TEAM_ROLES,
    TeacherTeamData,
    grade_to_label,
)

logger = logging.getLogger(__name__)

DEFICIENT_ELEMENT_RATIO = 0.7
WEAK_COVERAGE_RATIO = 0.5
DAYS_PER_YEAR = 365
NO_DOMINANT = "-"


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------
class AxisRatios(BaseModel):
    """Letter share (%) within each MBTI axis."""

    model_config = ConfigDict(frozen=True)

    E: float = 0.0
    I: float = 0.0  # noqa: E741
    S: float = 0.0
    N: float = 0.0
    T: float = 0.0
    F: float = 0.0
    J: float = 0.0
    P: float = 0.0


class MBTIDistribution(BaseModel):
    model_config = ConfigDict(frozen=True)

    type_counts: dict[str, int] = Field(default_factory=dict)
    most_common: list[str] = Field(default_factory=list)
    rarest: list[str] = Field(default_factory=list)
    axis_ratios: AxisRatios = Field(default_factory=AxisRatios)


class LearningStyleDistribution(BaseModel):
    model_config = ConfigDict(frozen=True)

    visual: int = 0
    auditory: int = 0
    reading: int = 0
    kinesthetic: int = 0
    dominant: str = NO_DOMINANT


class SajuElementsDistribution(BaseModel):
    """Five-element shares (%) plus dominant / deficient element keys."""

    model_config = ConfigDict(frozen=True)

    wood: int = 0
    fire: int = 0
    earth: int = 0
    metal: int = 0
    water: int = 0
    dominant: str = NO_DOMINANT
    deficient: list[str] = Field(default_factory=list)


class ExperienceLevels(BaseModel):
    model_config = ConfigDict(frozen=True)

    junior: int = 0
    mid: int = 0
    senior: int = 0


class ExpertiseCoverage(BaseModel):
    model_config = ConfigDict(frozen=True)

    subjects: dict[str, int] = Field(default_factory=dict)
    grades: dict[str, int] = Field(default_factory=dict)
    experience_levels: ExperienceLevels = Field(default_factory=ExperienceLevels)
    weak_subjects: list[str] = Field(default_factory=list)
    weak_grades: list[str] = Field(default_factory=list)


class RoleDistribution(BaseModel):
    model_config = ConfigDict(frozen=True)

    TEAM_LEADER: int = 0
    MANAGER: int = 0
    TEACHER: int = 0


class TeamComposition(BaseModel):
    """Snapshot of a teacher roster."""

    model_config = ConfigDict(frozen=True)

    team_id: str
    teacher_count: int = Field(ge=0)
    mbti_distribution: MBTIDistribution
    learning_style_distribution: LearningStyleDistribution
    saju_elements_distribution: SajuElementsDistribution
    expertise_coverage: ExpertiseCoverage
    role_distribution: RoleDistribution


class DiversityScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall: int = Field(ge=0, le=100)
    mbti_diversity: int = Field(ge=0, le=100)
    learning_style_diversity: int = Field(ge=0, le=100)
    saju_elements_diversity: int = Field(ge=0, le=100)
    subject_diversity: int = Field(ge=0, le=100)
    grade_diversity: int = Field(ge=0, le=100)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _round(value: float) -> int:
    """Round half up (2.5 → 3), unlike the built-in banker's rounding."""
    return math.floor(value + 0.5)


def _pct(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def _experience_years(created_at: datetime, now: datetime) -> float:
    # naive timestamps are taken as UTC
    if created_at.tzinfo is None and now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    elif created_at.tzinfo is not None and now.tzinfo is None:
        created_at = created_at.astimezone(timezone.utc).replace(tzinfo=None)
    return (now - created_at).total_seconds() / (DAYS_PER_YEAR * 24 * 3600)


def _weak(counts: dict[str, int], categories: Sequence[str], teacher_count: int) -> list[str]:
    expected = teacher_count / len(categories) if teacher_count > 0 else 0.0
    return [c for c in categories if counts.get(c, 0) < expected * WEAK_COVERAGE_RATIO]


# ---------------------------------------------------------------------------
# Distributions
# ---------------------------------------------------------------------------
def analyze_mbti_distribution(teachers: list[TeacherTeamData]) -> MBTIDistribution:
    """Exact-type tally plus per-axis letter shares."""
    type_counts: Counter[str] = Counter()
    letters: Counter[str] = Counter()

    for t in teachers:
        code = (t.mbti_type or "").strip().upper()
        if not code:
            continue
        type_counts[code] += 1
        for letter in set(code):
            letters[letter] += 1

    # sorted() is stable, so equal counts keep first-seen order
    ranked = sorted(type_counts, key=lambda k: type_counts[k], reverse=True)
    ratios: dict[str, float] = {}
    for a, b in MBTI_AXES:
        pair_total = letters[a] + letters[b]
        ratios[a] = _pct(letters[a], pair_total)
        ratios[b] = _pct(letters[b], pair_total)

    return MBTIDistribution(
        type_counts=dict(type_counts),
        most_common=ranked[:3],
        rarest=list(reversed(ranked[-3:])),
        axis_ratios=AxisRatios(**ratios),
    )


def analyze_learning_style_distribution(teachers: list[TeacherTeamData]) -> LearningStyleDistribution:
    """Average learning-style percentages over teachers that have them."""
    sums = dict.fromkeys(LEARNING_STYLES, 0.0)
    count = 0

    for t in teachers:
        pct = t.mbti_percentages
        if pct is None:
            continue
        sums["Visual"] += pct.visual or 0
        sums["Auditory"] += pct.auditory or 0
        sums["Reading"] += pct.reading or 0
        sums["Kinesthetic"] += pct.kinesthetic or 0
        count += 1

    if count == 0:
        return LearningStyleDistribution()

    avg = {style: _round(total / count) for style, total in sums.items()}
    dominant = max(LEARNING_STYLES, key=lambda s: avg[s])  # first max wins

    return LearningStyleDistribution(
        visual=avg["Visual"],
        auditory=avg["Auditory"],
        reading=avg["Reading"],
        kinesthetic=avg["Kinesthetic"],
        dominant=dominant,
    )


def analyze_saju_elements_distribution(teachers: list[TeacherTeamData]) -> SajuElementsDistribution:
    """Summed five-element weights as shares, with dominant and deficient elements."""
    sums = dict.fromkeys(ELEMENTS, 0.0)

    for t in teachers:
        if t.saju_result is None or not t.saju_result.five_elements:
            continue
        for element in ELEMENTS:
            sums[element] += t.saju_result.five_elements.get(element) or 0

    total = sum(sums.values())
    if total <= 0:
        return SajuElementsDistribution()

    ranked = sorted(ELEMENTS, key=lambda e: sums[e], reverse=True)
    mean = total / len(ELEMENTS)
    deficient = [e for e in ranked if sums[e] < mean * DEFICIENT_ELEMENT_RATIO]

    return SajuElementsDistribution(
        **{e: _round(_pct(sums[e], total)) for e in ELEMENTS},
        dominant=ranked[0],
        deficient=deficient,
    )


def analyze_expertise_coverage(
    teachers: list[TeacherTeamData],
    now: datetime | None = None,
) -> ExpertiseCoverage:
    """Subject / grade coverage and experience tiers."""
    now = now or datetime.now(timezone.utc)
    subjects = dict.fromkeys(SUBJECTS, 0)
    grades = dict.fromkeys(GRADES, 0)
    levels = Counter()

    for t in teachers:
        for subject in t.subjects:
            if subject in subjects:
                subjects[subject] += 1
        for grade in t.student_grades:
            label = grade_to_label(grade)
            if label is None:
                logger.warning("Teacher %s has out-of-range student grade %r; ignored", t.id, grade)
                continue
            grades[label] += 1

        years = _experience_years(t.created_at, now)
        if years < 1:
            levels["junior"] += 1
        elif years < 3:
            levels["mid"] += 1
        else:
            levels["senior"] += 1

    return ExpertiseCoverage(
        subjects=subjects,
        grades=grades,
        experience_levels=ExperienceLevels(**levels),
        weak_subjects=_weak(subjects, SUBJECTS, len(teachers)),
        weak_grades=_weak(grades, GRADES, len(teachers)),
    )


def analyze_role_distribution(teachers: list[TeacherTeamData]) -> RoleDistribution:
    counts = Counter(t.role for t in teachers if t.role in TEAM_ROLES)
    return RoleDistribution(**counts)


def build_team_composition(
    team_id: str,
    teachers: list[TeacherTeamData],
    now: datetime | None = None,
) -> TeamComposition:
    return TeamComposition(
        team_id=team_id,
        teacher_count=len(teachers),
        mbti_distribution=analyze_mbti_distribution(teachers),
        learning_style_distribution=analyze_learning_style_distribution(teachers),
        saju_elements_distribution=analyze_saju_elements_distribution(teachers),
        expertise_coverage=analyze_expertise_coverage(teachers, now),
        role_distribution=analyze_role_distribution(teachers),
    )


# ---------------------------------------------------------------------------
# Diversity
# ---------------------------------------------------------------------------
def calculate_shannon_diversity(counts: Sequence[float], total: float) -> float:
    """Shannon entropy of *counts* normalised by ln(len(counts)), scaled to [0, 100].

    Zero total or fewer than two categories → 0.
    """
    if total <= 0 or len(counts) < 2:
        return 0.0

    h = 0.0
    for c in counts:
        if c <= 0:
            continue
        p = c / total
        h -= p * math.log(p)

    ratio = h / math.log(len(counts))
    return min(max(ratio * 100, 0.0), 100.0)


def calculate_diversity_score(composition: TeamComposition) -> DiversityScore:
    """Five Shannon components and their unweighted mean."""
    mbti = composition.mbti_distribution
    styles = composition.learning_style_distribution
    saju = composition.saju_elements_distribution
    expertise = composition.expertise_coverage

    subject_counts = list(expertise.subjects.values())
    grade_counts = list(expertise.grades.values())

    components = {
        "mbti_diversity": calculate_shannon_diversity(
            list(mbti.type_counts.values()), composition.teacher_count,
        ),
        "learning_style_diversity": calculate_shannon_diversity(
            [styles.visual, styles.auditory, styles.reading, styles.kinesthetic],
            composition.teacher_count * 100,
        ),
        "saju_elements_diversity": calculate_shannon_diversity(
            [saju.wood, saju.fire, saju.earth, saju.metal, saju.water], 100,
        ),
        "subject_diversity": calculate_shannon_diversity(subject_counts, sum(subject_counts)),
        "grade_diversity": calculate_shannon_diversity(grade_counts, sum(grade_counts)),
    }
    rounded = {name: _round(value) for name, value in components.items()}
    overall = _round(sum(rounded.values()) / len(rounded))

    return DiversityScore(overall=overall, **rounded)
