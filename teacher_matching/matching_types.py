"""Shared value objects and fixed category lists for teacher ↔ student matching.

Input bundles (MBTI / saju / name analyses), assignment candidates, the
compatibility score returned by the pluggable scoring function, and the
roster record used for team composition analysis.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Fixed categories
# ---------------------------------------------------------------------------
SUBJECTS: tuple[str, ...] = ("수학", "영어", "국어", "과학", "사회")
GRADES: tuple[str, ...] = ("중1", "중2", "중3", "고1", "고2", "고3")

MBTI_AXES: tuple[tuple[str, str], ...] = (("E", "I"), ("S", "N"), ("T", "F"), ("J", "P"))
MBTI_LETTERS: tuple[str, ...] = tuple(letter for pair in MBTI_AXES for letter in pair)

# Order doubles as the tie-break order for the dominant style.
LEARNING_STYLES: tuple[str, ...] = ("Visual", "Auditory", "Reading", "Kinesthetic")

ELEMENTS: tuple[str, ...] = ("wood", "fire", "earth", "metal", "water")
ELEMENT_LABELS: dict[str, str] = {
    "wood": "목",
    "fire": "화",
    "earth": "토",
    "metal": "금",
    "water": "수",
}

TEAM_ROLES: tuple[str, ...] = ("TEAM_LEADER", "MANAGER", "TEACHER")


def grade_to_label(grade: int) -> str | None:
    """Map a school grade number (1-6) to its label, ``None`` when out of range."""
    if 1 <= grade <= 3:
        return f"중{grade}"
    if 4 <= grade <= 6:
        return f"고{grade - 3}"
    return None


# ---------------------------------------------------------------------------
# Analysis bundles
# ---------------------------------------------------------------------------
class MbtiPercentages(BaseModel):
    """Per-letter MBTI percentages plus learning-style percentages."""

    model_config = ConfigDict(extra="allow")

    E: float | None = None
    I: float | None = None  # noqa: E741
    S: float | None = None
    N: float | None = None
    T: float | None = None
    F: float | None = None
    J: float | None = None
    P: float | None = None
    visual: float | None = None
    auditory: float | None = None
    reading: float | None = None
    kinesthetic: float | None = None


class SajuResult(BaseModel):
    """Saju (four pillars) result; only the five-element balance is read here."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    five_elements: dict[str, float] | None = Field(default=None, alias="fiveElements")
    day_master: str | None = Field(default=None, alias="dayMaster")


class NameResult(BaseModel):
    """Name numerology result."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    total_score: float | None = Field(default=None, alias="totalScore")


class StudentAnalysisData(BaseModel):
    mbti: MbtiPercentages | None = None
    saju: SajuResult | None = None
    name: NameResult | None = None


class TeacherAnalysisData(StudentAnalysisData):
    current_load: int = Field(default=0, ge=0)


# ---------------------------------------------------------------------------
# Assignment candidates
# ---------------------------------------------------------------------------
class TeacherCandidate(BaseModel):
    """A teacher available for assignment, with the load carried into the run."""

    id: str = Field(..., min_length=1)
    current_load: int = Field(default=0, ge=0)
    analysis_data: TeacherAnalysisData = Field(default_factory=TeacherAnalysisData)


class StudentCandidate(BaseModel):
    """A student waiting to be assigned."""

    id: str = Field(..., min_length=1)
    analysis_data: StudentAnalysisData = Field(default_factory=StudentAnalysisData)


# ---------------------------------------------------------------------------
# Compatibility score (produced by the external scoring function)
# ---------------------------------------------------------------------------
class CompatibilityBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    mbti: float = 0.0
    learning_style: float = 0.0
    saju: float = 0.0
    name: float = 0.0
    load_balance: float = 0.0


class CompatibilityScore(BaseModel):
    """Fit between one teacher and one student."""

    model_config = ConfigDict(frozen=True)

    overall: float = Field(ge=0.0, le=100.0)
    breakdown: CompatibilityBreakdown = Field(default_factory=CompatibilityBreakdown)
    reasons: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Assignments
# ---------------------------------------------------------------------------
class Assignment(BaseModel):
    """Flat (student, teacher, score) triple consumed by the fairness audit."""

    model_config = ConfigDict(frozen=True)

    student_id: str
    teacher_id: str
    score: float = Field(ge=0.0, le=100.0)


class DetailedAssignment(BaseModel):
    """Assignment carrying the full compatibility score."""

    model_config = ConfigDict(frozen=True)

    student_id: str
    teacher_id: str
    score: CompatibilityScore

    def to_assignment(self) -> Assignment:
        return Assignment(
            student_id=self.student_id,
            teacher_id=self.teacher_id,
            score=self.score.overall,
        )


def flatten_assignments(assignments: list[DetailedAssignment]) -> list[Assignment]:
    """Drop the score breakdown from each assignment."""
    return [a.to_assignment() for a in assignments]


# ---------------------------------------------------------------------------
# Roster record for team composition analysis
# ---------------------------------------------------------------------------
class TeacherTeamData(BaseModel):
    """A teacher as seen by the team composition analysis."""

    id: str = Field(..., min_length=1)
    name: str = ""
    role: str = "TEACHER"
    created_at: datetime
    mbti_type: str | None = None
    mbti_percentages: MbtiPercentages | None = None
    saju_result: SajuResult | None = None
    student_grades: list[int] = Field(default_factory=list)
    subjects: list[str] = Field(default_factory=list)
