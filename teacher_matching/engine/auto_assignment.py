"""Greedy student → teacher auto-assignment with a load cap.

Each student, in input order, goes to the eligible teacher with the strictly
highest compatibility score (first-seen wins ties). Single pass, no
backtracking: O(students × teachers).

All functions are *pure*. The scoring function is injected by the caller.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
import logging
import math

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from teacher_matching.matching_types import (
    CompatibilityScore,
    DetailedAssignment,
    StudentAnalysisData,
    StudentCandidate,
    TeacherAnalysisData,
    TeacherCandidate,
)

logger = logging.getLogger(__name__)

# Default cap = ceil(average load × LOAD_CAP_FACTOR)
LOAD_CAP_FACTOR = 1.2

ScoreFn = Callable[[TeacherAnalysisData, StudentAnalysisData, float], CompatibilityScore]


# ---------------------------------------------------------------------------
# Options / result models
# ---------------------------------------------------------------------------
class AutoAssignmentOptions(BaseModel):
    """Run options. Unset values fall back to the defaults described above."""

    max_students_per_teacher: int | None = Field(default=None, gt=0)
    min_compatibility_threshold: float | None = Field(default=None, ge=0.0, le=100.0)


class LoadStats(BaseModel):
    """Population statistics over per-teacher loads."""

    model_config = ConfigDict(frozen=True)

    mean: float = 0.0
    variance: float = 0.0
    std_dev: float = 0.0
    min: int = 0
    max: int = 0
    range: int = 0


class AssignmentSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_students: int = 0
    assigned_students: int = 0
    average_score: float = 0.0
    min_score: float = 0.0
    max_score: float = 0.0
    teacher_counts: dict[str, int] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def resolve_max_load(
    student_count: int,
    teacher_count: int,
    options: AutoAssignmentOptions | None = None,
) -> int:
    """Effective per-teacher cap for a run of the given size."""
    if options is not None and options.max_students_per_teacher is not None:
        return options.max_students_per_teacher
    if teacher_count == 0:
        return 0
    return math.ceil(student_count / teacher_count * LOAD_CAP_FACTOR)


def generate_auto_assignment(
    students: list[StudentCandidate],
    teachers: list[TeacherCandidate],
    score_fn: ScoreFn,
    options: AutoAssignmentOptions | None = None,
) -> list[DetailedAssignment]:
    """Assign each student to the best-scoring teacher that still has room.

    Args:
        students: Students to place, in priority order.
        teachers: Candidate teachers; ``current_load`` seeds the load table.
        score_fn: ``(teacher_analysis, student_analysis, average_load) -> CompatibilityScore``.
            The teacher analysis carries the running load of this run.
        options: Load cap and minimum score threshold.

    Returns:
        One assignment per placed student, in student order. Students with no
        eligible teacher are left out.
    """
    if not teachers or not students:
        return []

    options = options or AutoAssignmentOptions()
    average_load = len(students) / len(teachers)
    max_load = resolve_max_load(len(students), len(teachers), options)
    threshold = options.min_compatibility_threshold

    loads: dict[str, int] = {t.id: t.current_load for t in teachers}
    placed: set[str] = set()
    assignments: list[DetailedAssignment] = []

    for student in students:
        if student.id in placed:
            logger.warning("Student %s listed more than once; keeping first placement", student.id)
            continue

        best_teacher_id: str | None = None
        best_score: CompatibilityScore | None = None

        for teacher in teachers:
            load = loads[teacher.id]
            if load >= max_load:
                continue

            teacher_data = teacher.analysis_data.model_copy(update={"current_load": load})
            score = score_fn(teacher_data, student.analysis_data, average_load)

            if threshold is not None and score.overall < threshold:
                continue

            if best_score is None or score.overall > best_score.overall:
                best_teacher_id = teacher.id
                best_score = score

        if best_teacher_id is None or best_score is None:
            logger.debug("Student %s left unassigned (no eligible teacher)", student.id)
            continue

        assignments.append(DetailedAssignment(
            student_id=student.id,
            teacher_id=best_teacher_id,
            score=best_score,
        ))
        loads[best_teacher_id] += 1
        placed.add(student.id)
        logger.debug("Student %s -> teacher %s (%.1f)", student.id, best_teacher_id, best_score.overall)

    logger.info(
        "Auto-assignment placed %d/%d students across %d teachers (cap=%d)",
        len(assignments), len(students), len(teachers), max_load,
    )
    return assignments


def calculate_final_loads(
    teachers: list[TeacherCandidate],
    assignments: list[DetailedAssignment],
) -> dict[str, int]:
    """Starting load plus this run's placements, per teacher."""
    loads = {t.id: t.current_load for t in teachers}
    for a in assignments:
        loads[a.teacher_id] = loads.get(a.teacher_id, 0) + 1
    return loads


def calculate_load_stats(teacher_loads: Mapping[str, int]) -> LoadStats:
    """Mean / variance / std-dev / min / max / range of per-teacher loads."""
    if not teacher_loads:
        return LoadStats()

    arr = np.array(list(teacher_loads.values()), dtype=float)
    lo = int(arr.min())
    hi = int(arr.max())
    return LoadStats(
        mean=float(np.mean(arr)),
        variance=float(np.var(arr)),
        std_dev=float(np.std(arr)),
        min=lo,
        max=hi,
        range=hi - lo,
    )


def summarize_assignments(assignments: list[DetailedAssignment]) -> AssignmentSummary:
    """Descriptive summary of a run's output."""
    if not assignments:
        return AssignmentSummary()

    scores = [a.score.overall for a in assignments]
    counts: dict[str, int] = {}
    for a in assignments:
        counts[a.teacher_id] = counts.get(a.teacher_id, 0) + 1

    return AssignmentSummary(
        total_students=len(assignments),
        assigned_students=len(assignments),
        average_score=sum(scores) / len(scores),
        min_score=min(scores),
        max_score=max(scores),
        teacher_counts=counts,
    )
