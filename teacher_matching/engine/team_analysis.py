"""Full team composition analysis: distributions → diversity → recommendations."""

from __future__ import annotations

from datetime import datetime, timezone
import logging

from pydantic import BaseModel, ConfigDict

from teacher_matching.engine.recommendations import Recommendation, get_team_recommendations
from teacher_matching.engine.team_composition import (
    DiversityScore,
    TeamComposition,
    build_team_composition,
    calculate_diversity_score,
)
from teacher_matching.matching_types import TeacherTeamData

logger = logging.getLogger(__name__)


class TeamCompositionAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    composition: TeamComposition
    diversity_score: DiversityScore
    recommendations: list[Recommendation]
    analyzed_at: datetime


def analyze_team_composition(
    team_id: str,
    teachers: list[TeacherTeamData],
    now: datetime | None = None,
) -> TeamCompositionAnalysis:
    """Analyse *teachers* as one team.

    Args:
        team_id: Identifier echoed into the composition snapshot.
        teachers: Roster records; partial data is skipped per distribution.
        now: Reference time for experience tiers and ``analyzed_at``
            (defaults to the current UTC time).
    """
    now = now or datetime.now(timezone.utc)
    composition = build_team_composition(team_id, teachers, now)
    diversity = calculate_diversity_score(composition)
    recommendations = get_team_recommendations(composition, diversity)

    logger.info(
        "Team %s analysed: %d teachers, diversity=%d, %d recommendations",
        team_id, len(teachers), diversity.overall, len(recommendations),
    )
    return TeamCompositionAnalysis(
        composition=composition,
        diversity_score=diversity,
        recommendations=recommendations,
        analyzed_at=now,
    )
