"""Tests for the compatibility scorer and partner ranking."""

import itertools

import pytest

from analysis.compatibility import (
    LUNCH_FACTORS,
    MAX_STAGGER_MINUTES,
    VALID_GRADE_PAIRS,
    WEIGHTS,
    compare_all,
    compute_compatibility,
    filter_results,
    rank_partners,
    score_arrival_departure,
    score_extracurriculars,
    score_grade_level,
    score_lunch,
    score_schedule_overlap,
)
from config.schema import ConfigurationError
from data.schedule_import import parse_course_line
from models.compatibility import CompatibilityResult, GradeScore
from models.course import CourseBuckets
from models.presence import DaySchedule, StudentSchedule
from presence.builder import build_schedule

BLOCK_PATTERNS = {
    1: "1.x.1.x.1.x",
    2: "2.x.2.x.2.x",
    3: "3.x.3.x.3.x",
    4: "x.4.x.4.x.4",
    5: "x.5.x.5.x.5",
    6: "x.6.x.6.x.6",
    7: "x.7.x.7.x.7",
}


# ─── Test data helpers ────────────────────────────────────────────────────────

def _make_student(name: str, grade: int, *blocks: int, co_curricular_end: str = None) -> StudentSchedule:
    lines = [f"20{b:02d}-FY-A Course {b} RG211 {BLOCK_PATTERNS[b]} Teacher, Some" for b in blocks]
    if co_curricular_end:
        lines.append("8720-T1-A Water Polo CFP CC.CC.CC.CC.CC.CC Grover, John D.")
    courses = CourseBuckets.from_records([parse_course_line(l) for l in lines])
    return build_schedule(name, grade, courses, co_curricular_end_time=co_curricular_end)


def _make_day(arrival=None, departure=None, lunch_free=False, can_leave=False) -> DaySchedule:
    return DaySchedule(day=1, arrival=arrival, class_end=departure, departure=departure,
                       lunch_free=lunch_free, can_leave_lunch=can_leave)


# ─── WEIGHTS & GRADE GATE ─────────────────────────────────────────────────────

class TestGradeLevel:
    def test_weights_sum(self):
        day_max = sum(WEIGHTS[k] for k in
                      ("schedule_overlap", "arrival_departure", "lunch", "extracurriculars"))
        assert day_max == 90
        assert day_max + WEIGHTS["grade_level"] == 100

    @pytest.mark.parametrize("pair", sorted(VALID_GRADE_PAIRS))
    def test_valid_pairs(self, pair):
        assert score_grade_level(*pair) == GradeScore(score=10, compatible=True)

    @pytest.mark.parametrize("pair", [(12, 11), (11, 12), (12, 10), (10, 12), (9, 9), (9, 10)])
    def test_invalid_pairs(self, pair):
        assert score_grade_level(*pair) == GradeScore(score=0, compatible=False)

    def test_gate_ignores_schedules(self):
        for grade_a, grade_b in itertools.product((9, 10, 11, 12), repeat=2):
            if (grade_a, grade_b) in VALID_GRADE_PAIRS:
                continue
            a = _make_student("A", grade_a, 1)
            b = _make_student("B", grade_b, 4)
            result = compute_compatibility(a, b)
            assert result.compatible is False
            assert result.final_score == 0
            assert result.day_scores == {}
            assert result.reason == f"Incompatible grade levels ({grade_a} + {grade_b})"


# ─── CONCRETE DAY ─────────────────────────────────────────────────────────────

class TestDayOneScenario:
    """A: Block 1 + Block 2 (8:00-11:45), B: Block 3 (12:45-14:00), both seniors."""

    @pytest.fixture
    def day_one(self):
        result = compute_compatibility(_make_student("A", 12, 1, 2), _make_student("B", 12, 3))
        return result.day_scores[1]

    def test_overlap(self, day_one):
        assert day_one.overlap.score == 35
        assert day_one.overlap.overlap_minutes == 0

    def test_stagger(self, day_one):
        assert day_one.arrival_departure.gap_minutes == 60
        assert day_one.arrival_departure.score == 13.75

    def test_lunch(self, day_one):
        assert day_one.lunch.score == 7.5

    def test_extracurricular(self, day_one):
        assert day_one.extracurricular.score == 11.25

    def test_total(self, day_one):
        assert day_one.total == 67.5


# ─── SUB-SCORES ───────────────────────────────────────────────────────────────

class TestOverlap:
    def test_half_overlap(self):
        a = _make_student("A", 12, 1, 2).days[1]
        b = _make_student("B", 12, 2, 3).days[1]
        score = score_schedule_overlap(a, b)
        assert score.overlap_minutes == 75
        assert score.score == 17.5

    def test_full_overlap_relative_to_lighter_day(self):
        a = _make_student("A", 12, 1, 2, 3).days[1]
        b = _make_student("B", 12, 2).days[1]
        assert score_schedule_overlap(a, b).score == 0

    def test_no_classes(self):
        score = score_schedule_overlap(_make_day(480, 555), _make_day())
        assert score.score == WEIGHTS["schedule_overlap"]
        assert score.overlap_minutes == 0

    def test_disjoint_schedules_every_day(self):
        a = _make_student("A", 10, 1, 4)
        b = _make_student("B", 11, 3, 7)
        result = compute_compatibility(a, b)
        assert all(ds.overlap.score == 35 for ds in result.day_scores.values())


class TestStagger:
    def test_tie_counts_first_student_as_earlier(self):
        a = _make_student("A", 12, 1).days[1]       # 8:00-9:15
        b = _make_student("B", 12, 1, 2).days[1]    # 8:00-11:45
        assert score_arrival_departure(a, b).gap_minutes == 480 - 555
        assert score_arrival_departure(a, b).score == 10.94
        assert score_arrival_departure(b, a).gap_minutes == 480 - 705
        assert score_arrival_departure(b, a).score == 7.81

    def test_later_first_argument(self):
        early = _make_day(480, 555)
        late = _make_day(765, 840)
        assert score_arrival_departure(late, early).gap_minutes == 210

    def test_exact_swap(self):
        score = score_arrival_departure(_make_day(480, 600), _make_day(600, 900))
        assert score.gap_minutes == 0
        assert score.score == 12.5
        assert "exact swap" in score.detail

    def test_clamped_low(self):
        score = score_arrival_departure(_make_day(480, 1140), _make_day(480, 1140))
        assert score.gap_minutes == -660
        assert score.score == 0

    def test_clamped_high(self):
        score = score_arrival_departure(_make_day(480, 500),
                                        _make_day(500 + MAX_STAGGER_MINUTES + 100, 1300))
        assert score.score == WEIGHTS["arrival_departure"]

    def test_no_classes(self):
        score = score_arrival_departure(_make_day(), _make_day(480, 555))
        assert score.score == 25
        assert score.gap_minutes is None


class TestLunch:
    def test_both_leave(self):
        a = _make_day(480, 900, lunch_free=True, can_leave=True)
        assert score_lunch(a, a).score == 15 * LUNCH_FACTORS["both"]

    def test_one_leaves(self):
        a = _make_day(480, 900, lunch_free=True, can_leave=True)
        b = _make_day(480, 900, lunch_free=True, can_leave=False)
        assert score_lunch(a, b).score == 15
        assert score_lunch(b, a).score == 15

    def test_neither_leaves(self):
        a = _make_day(480, 900, lunch_free=False, can_leave=True)
        assert score_lunch(a, a).score == 7.5

    def test_no_classes(self):
        a = _make_day(480, 900, lunch_free=True, can_leave=True)
        assert score_lunch(a, _make_day()).score == 15

    def test_from_schedules(self):
        a = _make_student("A", 12, 1, 3).days[1]
        b = _make_student("B", 12, 1, 3).days[1]
        assert score_lunch(a, b).score == 4.5


class TestExtracurriculars:
    def test_same_departure(self):
        score = score_extracurriculars(_make_day(480, 900), _make_day(600, 900))
        assert score.score == 0
        assert "no separation" in score.detail

    def test_capped(self):
        score = score_extracurriculars(_make_day(480, 555), _make_day(480, 1020))
        assert score.score == 15

    def test_linear(self):
        assert score_extracurriculars(_make_day(480, 840), _make_day(480, 900)).score == 5

    def test_unknown_departure(self):
        a = DaySchedule(day=1, arrival=480, class_end=555, departure=None)
        score = score_extracurriculars(a, _make_day(480, 900))
        assert score.score == 7.5

    def test_no_classes(self):
        assert score_extracurriculars(_make_day(), _make_day()).score == 15


# ─── FULL RESULT ──────────────────────────────────────────────────────────────

class TestComputeCompatibility:
    def test_empty_days_score_full(self):
        a = _make_student("A", 10, 1)
        b = _make_student("B", 10, 1)
        # Block 1 never meets on day 6
        day6 = compute_compatibility(a, b).day_scores[6]
        assert day6.total == 90
        assert day6.arrival_departure.gap_minutes is None

    def test_identical_full_schedules_below_half(self):
        a = _make_student("A", 12, *range(1, 8))
        b = _make_student("B", 12, *range(1, 8))
        result = compute_compatibility(a, b)
        assert result.compatible
        assert result.final_score < 50

    def test_final_is_average_plus_bonus(self):
        result = compute_compatibility(_make_student("A", 11, 1, 2), _make_student("B", 10, 3, 6))
        average = sum(d.total for d in result.day_scores.values()) / 6
        assert result.day_average == round(average, 2)
        assert result.final_score == round(average + 10, 2)
        assert 0 <= result.final_score <= 100

    def test_all_days_scored(self):
        result = compute_compatibility(_make_student("A", 12, 1), _make_student("B", 12, 4))
        assert sorted(result.day_scores) == [1, 2, 3, 4, 5, 6]
        assert result.reason is None

    def test_score_out_of_range(self):
        with pytest.raises(ConfigurationError):
            CompatibilityResult(student_a="A", student_b="B", compatible=True,
                                grade_score=GradeScore(score=10, compatible=True),
                                final_score=100.5)

    def test_round_trip(self):
        result = compute_compatibility(_make_student("A", 12, 1, 2),
                                       _make_student("B", 12, 3, co_curricular_end="17:00"))
        assert CompatibilityResult.model_validate(result.model_dump()) == result
        assert CompatibilityResult.model_validate(result.model_dump(mode="json")) == result


# ─── RANKING ──────────────────────────────────────────────────────────────────

@pytest.fixture
def pool():
    target = _make_student("TARGET", 12, 1)
    both = _make_student("BOTH", 12, 1, 3)
    afternoon = _make_student("AFTERNOON", 12, 3)
    junior = _make_student("JUNIOR", 11, 4)
    return target, [both, junior, target, afternoon]


class TestRankPartners:
    def test_order(self, pool):
        target, candidates = pool
        results = rank_partners(target, candidates)
        assert [r.student_b for r in results] == ["AFTERNOON", "BOTH", "JUNIOR"]
        assert results[0].final_score > results[1].final_score > results[2].final_score

    def test_self_skipped_by_name(self, pool):
        target, candidates = pool
        copy = _make_student("TARGET", 12, 7)
        results = rank_partners(target, candidates + [copy])
        assert all(r.student_b != "TARGET" for r in results)

    def test_incompatible_kept(self, pool):
        target, candidates = pool
        junior = next(r for r in rank_partners(target, candidates) if r.student_b == "JUNIOR")
        assert not junior.compatible
        assert junior.final_score == 0

    def test_stable_ties(self):
        target = _make_student("TARGET", 12, 1)
        twins = [_make_student(name, 12, 3) for name in ("X", "Y", "Z")]
        assert [r.student_b for r in rank_partners(target, twins)] == ["X", "Y", "Z"]
        twins.reverse()
        assert [r.student_b for r in rank_partners(target, twins)] == ["Z", "Y", "X"]

    def test_empty_pool(self):
        assert rank_partners(_make_student("TARGET", 12, 1), []) == []


class TestCompareAll:
    def test_every_pair_once(self, pool):
        target, candidates = pool
        students = [target] + [c for c in candidates if c.name != "TARGET"]
        results = compare_all(students)
        assert len(results) == 6
        pairs = {frozenset((r.student_a, r.student_b)) for r in results}
        assert len(pairs) == 6
        scores = [r.final_score for r in results]
        assert scores == sorted(scores, reverse=True)


class TestFilterResults:
    def test_min_score(self, pool):
        target, candidates = pool
        results = rank_partners(target, candidates)
        kept = filter_results(results, min_score=results[1].final_score)
        assert [r.student_b for r in kept] == ["AFTERNOON", "BOTH"]

    def test_drop_incompatible(self, pool):
        target, candidates = pool
        kept = filter_results(rank_partners(target, candidates), include_incompatible=False)
        assert all(r.compatible for r in kept)
        assert len(kept) == 2

    def test_limit(self, pool):
        target, candidates = pool
        assert len(filter_results(rank_partners(target, candidates), limit=1)) == 1
