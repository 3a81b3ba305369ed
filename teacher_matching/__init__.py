"""Teacher ↔ student matching: auto-assignment, team composition, fairness audit."""

from .engine.auto_assignment import (
    AutoAssignmentOptions,
    calculate_load_stats,
    generate_auto_assignment,
    summarize_assignments,
)
from .engine.fairness import FairnessMetrics, calculate_fairness_metrics
from .engine.team_analysis import TeamCompositionAnalysis, analyze_team_composition
from .matching_types import (
    Assignment,
    CompatibilityScore,
    DetailedAssignment,
    StudentCandidate,
    TeacherCandidate,
    TeacherTeamData,
)

__all__ = [
    "Assignment",
    "AutoAssignmentOptions",
    "CompatibilityScore",
    "DetailedAssignment",
    "FairnessMetrics",
    "StudentCandidate",
    "TeacherCandidate",
    "TeacherTeamData",
    "TeamCompositionAnalysis",
    "analyze_team_composition",
    "calculate_fairness_metrics",
    "calculate_load_stats",
    "generate_auto_assignment",
    "summarize_assignments",
]
