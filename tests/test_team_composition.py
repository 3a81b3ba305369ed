"""Tests for teacher_matching/engine/team_composition.py."""

from datetime import datetime, timedelta, timezone
import math

import pytest

from teacher_matching.engine.team_composition import (
    SajuElementsDistribution,
    analyze_expertise_coverage,
    analyze_learning_style_distribution,
    analyze_mbti_distribution,
    analyze_role_distribution,
    analyze_saju_elements_distribution,
    build_team_composition,
    calculate_diversity_score,
    calculate_shannon_diversity,
)
from teacher_matching.matching_types import MbtiPercentages, SajuResult, TeacherTeamData

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _teacher(i: int, **kwargs) -> TeacherTeamData:
    kwargs.setdefault("created_at", NOW - timedelta(days=730))
    return TeacherTeamData(id=f"t{i}", name=f"T{i}", **kwargs)


def _styles(visual=0, auditory=0, reading=0, kinesthetic=0) -> MbtiPercentages:
    return MbtiPercentages(visual=visual, auditory=auditory, reading=reading, kinesthetic=kinesthetic)


class TestMBTIDistribution:
    def test_single_shared_type(self):
        teachers = [_teacher(i, mbti_type="ENFP") for i in range(4)]
        dist = analyze_mbti_distribution(teachers)
        assert dist.type_counts == {"ENFP": 4}
        assert dist.most_common == ["ENFP"]
        assert dist.rarest == ["ENFP"]
        assert dist.axis_ratios.E == 100
        assert dist.axis_ratios.I == 0

    def test_axis_ratios_use_opposing_pair(self):
        types = ["INTJ", "ENTP", "ENFJ", "ISFP"]
        dist = analyze_mbti_distribution([_teacher(i, mbti_type=t) for i, t in enumerate(types)])
        assert dist.axis_ratios.E == pytest.approx(50.0)
        assert dist.axis_ratios.S == pytest.approx(25.0)
        assert dist.axis_ratios.N == pytest.approx(75.0)
        assert dist.axis_ratios.J == pytest.approx(50.0)

    def test_most_common_and_rarest_order(self):
        types = ["INTJ", "ENFP", "ENFP", "ISTJ", "INTJ", "ESFP"]
        dist = analyze_mbti_distribution([_teacher(i, mbti_type=t) for i, t in enumerate(types)])
        assert dist.most_common == ["INTJ", "ENFP", "ISTJ"]
        assert dist.rarest == ["ESFP", "ISTJ", "ENFP"]

    def test_whitespace_only_type_skipped(self):
        dist = analyze_mbti_distribution([_teacher(0, mbti_type="ENFP"), _teacher(1, mbti_type="   ")])
        assert dist.type_counts == {"ENFP": 1}
        assert dist.most_common == ["ENFP"]
        assert dist.rarest == ["ENFP"]

    def test_case_insensitive_and_missing_skipped(self):
        teachers = [
            _teacher(0, mbti_type="enfp"),
            _teacher(1, mbti_type="ENFP"),
            _teacher(2),
            _teacher(3, mbti_type=""),
        ]
        dist = analyze_mbti_distribution(teachers)
        assert dist.type_counts == {"ENFP": 2}

    def test_empty(self):
        dist = analyze_mbti_distribution([])
        assert dist.type_counts == {}
        assert dist.most_common == []
        assert dist.axis_ratios.E == 0


class TestLearningStyleDistribution:
    def test_average_and_dominant(self):
        teachers = [
            _teacher(0, mbti_percentages=_styles(60, 20, 10, 10)),
            _teacher(1, mbti_percentages=_styles(40, 30, 20, 10)),
            _teacher(2),
        ]
        dist = analyze_learning_style_distribution(teachers)
        assert (dist.visual, dist.auditory, dist.reading, dist.kinesthetic) == (50, 25, 15, 10)
        assert dist.dominant == "Visual"

    def test_rounds_half_up(self):
        teachers = [
            _teacher(0, mbti_percentages=_styles(25, 25, 25, 25)),
            _teacher(1, mbti_percentages=_styles(26, 24, 25, 25)),
        ]
        dist = analyze_learning_style_distribution(teachers)
        assert dist.visual == 26
        assert dist.auditory == 25

    def test_tie_break_order(self):
        dist = analyze_learning_style_distribution([_teacher(0, mbti_percentages=_styles(10, 40, 10, 40))])
        assert dist.dominant == "Auditory"
        dist = analyze_learning_style_distribution([_teacher(0, mbti_percentages=_styles(25, 25, 25, 25))])
        assert dist.dominant == "Visual"

    def test_no_data(self):
        dist = analyze_learning_style_distribution([_teacher(0)])
        assert dist.visual == 0
        assert dist.dominant == "-"


class TestSajuElementsDistribution:
    def test_deficient_elements(self):
        saju = SajuResult(five_elements={"wood": 50, "fire": 10, "earth": 10, "metal": 10, "water": 20})
        dist = analyze_saju_elements_distribution([_teacher(0, saju_result=saju)])
        assert (dist.wood, dist.fire, dist.earth, dist.metal, dist.water) == (50, 10, 10, 10, 20)
        assert dist.dominant == "wood"
        assert dist.deficient == ["fire", "earth", "metal"]

    def test_sums_across_teachers(self):
        teachers = [
            _teacher(0, saju_result=SajuResult(fiveElements={"wood": 30, "water": 20})),
            _teacher(1, saju_result=SajuResult(fiveElements={"wood": 20, "fire": 10, "earth": 10, "metal": 10})),
            _teacher(2, saju_result=SajuResult()),
            _teacher(3),
        ]
        dist = analyze_saju_elements_distribution(teachers)
        assert dist.wood == 50
        assert dist.deficient == ["fire", "earth", "metal"]

    def test_zero_total(self):
        dist = analyze_saju_elements_distribution([_teacher(0)])
        assert dist == SajuElementsDistribution()
        assert dist.dominant == "-"
        assert dist.deficient == []


class TestExpertiseCoverage:
    def test_experience_tiers(self):
        teachers = [
            _teacher(0, created_at=NOW - timedelta(days=100)),
            _teacher(1, created_at=NOW - timedelta(days=400)),
            _teacher(2, created_at=NOW - timedelta(days=365 * 3)),
            _teacher(3, created_at=(NOW - timedelta(days=2000)).replace(tzinfo=None)),
        ]
        levels = analyze_expertise_coverage(teachers, now=NOW).experience_levels
        assert (levels.junior, levels.mid, levels.senior) == (1, 1, 2)

    def test_grade_labels(self):
        coverage = analyze_expertise_coverage([_teacher(0, student_grades=[1, 4, 6, 6, 7])], now=NOW)
        assert coverage.grades["중1"] == 1
        assert coverage.grades["고1"] == 1
        assert coverage.grades["고3"] == 2
        assert sum(coverage.grades.values()) == 4

    def test_weak_subjects(self):
        teachers = [_teacher(i, subjects=["수학"]) for i in range(4)]
        teachers.append(_teacher(4, subjects=["영어", "미술"]))
        coverage = analyze_expertise_coverage(teachers, now=NOW)
        assert coverage.subjects == {"수학": 4, "영어": 1, "국어": 0, "과학": 0, "사회": 0}
        # expected share 5/5 = 1 → weak below 0.5
        assert coverage.weak_subjects == ["국어", "과학", "사회"]

    def test_weak_grades(self):
        teachers = [_teacher(i, student_grades=[1, 2, 3, 4, 5]) for i in range(6)]
        coverage = analyze_expertise_coverage(teachers, now=NOW)
        assert coverage.weak_grades == ["고3"]

    def test_empty_roster_has_no_weak_categories(self):
        coverage = analyze_expertise_coverage([], now=NOW)
        assert coverage.weak_subjects == []
        assert coverage.weak_grades == []
        assert set(coverage.subjects) == {"수학", "영어", "국어", "과학", "사회"}


class TestRoleDistribution:
    def test_counts_known_roles(self):
        roles = ["TEAM_LEADER", "TEACHER", "TEACHER", "ADMIN"]
        dist = analyze_role_distribution([_teacher(i, role=r) for i, r in enumerate(roles)])
        assert (dist.TEAM_LEADER, dist.MANAGER, dist.TEACHER) == (1, 0, 2)


class TestShannonDiversity:
    def test_zero_total(self):
        assert calculate_shannon_diversity([0, 0, 0], 0) == 0

    def test_single_category(self):
        assert calculate_shannon_diversity([5], 5) == 0

    def test_uniform(self):
        assert calculate_shannon_diversity([1, 1, 1, 1], 4) == pytest.approx(100.0)

    def test_concentrated(self):
        assert calculate_shannon_diversity([4, 0, 0, 0], 4) == 0

    def test_bounded(self):
        for counts, total in [([3, 1], 4), ([1, 2, 3], 6), ([10, 10], 5), ([1, 1], 100)]:
            value = calculate_shannon_diversity(counts, total)
            assert 0 <= value <= 100
            assert not math.isnan(value)


class TestDiversityScore:
    def test_empty_roster(self):
        score = calculate_diversity_score(build_team_composition("team", [], now=NOW))
        assert score.overall == 0
        assert score.mbti_diversity == 0

    def test_shared_type_has_zero_mbti_diversity(self):
        teachers = [_teacher(i, mbti_type="ISTJ") for i in range(4)]
        score = calculate_diversity_score(build_team_composition("team", teachers, now=NOW))
        assert score.mbti_diversity == 0

    def test_distinct_types_have_full_mbti_diversity(self):
        types = ["ISTJ", "ENFP", "INTP", "ESFJ"]
        teachers = [_teacher(i, mbti_type=t) for i, t in enumerate(types)]
        score = calculate_diversity_score(build_team_composition("team", teachers, now=NOW))
        assert score.mbti_diversity == 100

    def test_overall_is_mean_of_rounded_components(self):
        teachers = [
            _teacher(
                i,
                mbti_type=t,
                mbti_percentages=_styles(40, 30, 20, 10),
                saju_result=SajuResult(five_elements={"wood": 30, "fire": 20, "earth": 20, "metal": 20, "water": 10}),
                subjects=[s],
                student_grades=[i + 1],
            )
            for i, (t, s) in enumerate(zip(["ISTJ", "ENFP", "ISTJ"], ["수학", "영어", "국어"]))
        ]
        score = calculate_diversity_score(build_team_composition("team", teachers, now=NOW))
        parts = [
            score.mbti_diversity,
            score.learning_style_diversity,
            score.saju_elements_diversity,
            score.subject_diversity,
            score.grade_diversity,
        ]
        assert score.overall == math.floor(sum(parts) / 5 + 0.5)
        assert all(0 <= p <= 100 for p in parts)
