"""Tandem parking compatibility of two students.

Weights (sum 100):
  - schedule overlap          35
  - arrival/departure stagger 25
  - lunch                     15
  - extracurriculars          15
  - grade level               10

The first four are scored per rotation day (max 90) and averaged over the
rotation, the grade bonus is added once. Grade-incompatible pairs score 0
without looking at the schedules.
"""

import logging
from typing import Iterable, Optional, Sequence

from config.defaults import ROTATION_DAYS
from config.time_grid import overlap_minutes
from models.compatibility import (
    CompatibilityResult,
    DayScore,
    GradeScore,
    OverlapScore,
    StaggerScore,
    SubScore,
)
from models.presence import DaySchedule, StudentSchedule

logger = logging.getLogger(__name__)

WEIGHTS: dict[str, int] = {
    "schedule_overlap": 35,
    "arrival_departure": 25,
    "lunch": 15,
    "extracurriculars": 15,
    "grade_level": 10,
}

# 12+12, 11+11, 11+10, 10+11, 10+10; seniors only pair with seniors
VALID_GRADE_PAIRS: frozenset[tuple[int, int]] = frozenset({
    (12, 12), (11, 11), (11, 10), (10, 11), (10, 10),
})

# Stagger gaps map linearly from [-600, +600] onto [0, 1]
MAX_STAGGER_MINUTES = 600
# Departure differences beyond three hours earn no more points
MAX_DEPARTURE_SEPARATION = 180

LUNCH_FACTORS: dict[str, float] = {
    "both": 0.3,
    "one": 1.0,
    "neither": 0.5,
}

NO_CLASSES = "One or both students have no classes"


def _round(value: float) -> float:
    return round(value, 2)


def _no_classes(a: DaySchedule, b: DaySchedule) -> bool:
    return a.arrival is None or b.arrival is None


# ─── Grade level ──────────────────────────────────────────────────────────────

def score_grade_level(grade_a: int, grade_b: int) -> GradeScore:
    compatible = (grade_a, grade_b) in VALID_GRADE_PAIRS
    return GradeScore(
        score=WEIGHTS["grade_level"] if compatible else 0,
        compatible=compatible,
    )


# ─── Per-day factors ──────────────────────────────────────────────────────────

def score_schedule_overlap(a: DaySchedule, b: DaySchedule) -> OverlapScore:
    """Minutes both students are in class at once, relative to the lighter day."""
    weight = WEIGHTS["schedule_overlap"]
    if _no_classes(a, b):
        return OverlapScore(score=weight, max_score=weight, detail=NO_CLASSES)

    occupied_a, occupied_b = a.occupied, b.occupied
    total = sum(
        overlap_minutes(sa.slot.start_min, sa.slot.end_min, sb.slot.start_min, sb.slot.end_min)
        for sa in occupied_a
        for sb in occupied_b
    )
    possible = min(a.occupied_minutes, b.occupied_minutes)
    normalized = total / possible if possible > 0 else 0.0
    return OverlapScore(
        score=_round(weight * (1 - normalized)),
        max_score=weight,
        overlap_minutes=total,
        detail=f"{total} min overlap out of {possible} max possible",
    )


def score_arrival_departure(a: DaySchedule, b: DaySchedule) -> StaggerScore:
    """Gap between the earlier student leaving and the later one arriving.

    Positive gaps are clean handoffs, zero an exact swap, negative gaps mean
    both need the spot at once. Ties on arrival count A as the earlier one.
    """
    weight = WEIGHTS["arrival_departure"]
    if _no_classes(a, b):
        return StaggerScore(score=weight, max_score=weight, detail=NO_CLASSES)

    earlier, later = (a, b) if a.arrival <= b.arrival else (b, a)
    gap = later.arrival - earlier.departure

    normalized = (gap + MAX_STAGGER_MINUTES) / (2 * MAX_STAGGER_MINUTES)
    normalized = max(0.0, min(1.0, normalized))

    if gap > 0:
        verdict = "clean handoff"
    elif gap == 0:
        verdict = "exact swap"
    else:
        verdict = "overlap"
    return StaggerScore(
        score=_round(weight * normalized),
        max_score=weight,
        gap_minutes=gap,
        detail=f"{gap:+d} min gap ({verdict})",
    )


def score_lunch(a: DaySchedule, b: DaySchedule) -> SubScore:
    """Seniors with a free lunch may take the car; one of two is ideal."""
    weight = WEIGHTS["lunch"]
    if _no_classes(a, b):
        return SubScore(score=weight, max_score=weight, detail=NO_CLASSES)

    leaving = sum(1 for d in (a, b) if d.lunch_free and d.can_leave_lunch)
    if leaving == 2:
        factor, detail = LUNCH_FACTORS["both"], "Both can leave for lunch (potential conflict)"
    elif leaving == 1:
        factor, detail = LUNCH_FACTORS["one"], "One can leave for lunch (complementary)"
    else:
        factor, detail = LUNCH_FACTORS["neither"], "Neither leaves for lunch (neutral)"
    return SubScore(score=_round(weight * factor), max_score=weight, detail=detail)


def score_extracurriculars(a: DaySchedule, b: DaySchedule) -> SubScore:
    """Separation of the two departure times, capped at three hours."""
    weight = WEIGHTS["extracurriculars"]
    if _no_classes(a, b):
        return SubScore(score=weight, max_score=weight, detail=NO_CLASSES)
    if a.departure is None or b.departure is None:
        return SubScore(score=_round(weight * 0.5), max_score=weight,
                        detail="Cannot determine departure times")

    diff = abs(a.departure - b.departure)
    normalized = min(diff / MAX_DEPARTURE_SEPARATION, 1.0)

    if diff == 0:
        detail = "Both leave at the same time (no separation)"
    elif diff < 60:
        detail = f"{diff} min difference in departure (small separation)"
    elif diff < 120:
        detail = f"{diff} min difference in departure (good separation)"
    else:
        detail = f"{diff} min difference in departure (excellent separation)"
    return SubScore(score=_round(weight * normalized), max_score=weight, detail=detail)


def score_day(day: int, a: DaySchedule, b: DaySchedule) -> DayScore:
    overlap = score_schedule_overlap(a, b)
    stagger = score_arrival_departure(a, b)
    lunch = score_lunch(a, b)
    extracurricular = score_extracurriculars(a, b)
    return DayScore(
        day=day,
        total=_round(overlap.score + stagger.score + lunch.score + extracurricular.score),
        overlap=overlap,
        arrival_departure=stagger,
        lunch=lunch,
        extracurricular=extracurricular,
    )


# ─── Pairs ────────────────────────────────────────────────────────────────────

def compute_compatibility(a: StudentSchedule, b: StudentSchedule) -> CompatibilityResult:
    """Full 0-100 compatibility of two built schedules."""
    grade = score_grade_level(a.grade, b.grade)
    if not grade.compatible:
        return CompatibilityResult(
            student_a=a.name,
            student_b=b.name,
            compatible=False,
            reason=f"Incompatible grade levels ({a.grade} + {b.grade})",
            grade_score=grade,
            final_score=0.0,
        )

    day_scores = {day: score_day(day, a.day(day), b.day(day)) for day in ROTATION_DAYS}
    day_average = sum(d.total for d in day_scores.values()) / len(ROTATION_DAYS)
    return CompatibilityResult(
        student_a=a.name,
        student_b=b.name,
        compatible=True,
        grade_score=grade,
        day_scores=day_scores,
        day_average=_round(day_average),
        final_score=_round(day_average + grade.score),
    )


def rank_partners(
    target: StudentSchedule, candidates: Iterable[StudentSchedule]
) -> list[CompatibilityResult]:
    """Score the target against every other candidate, best first.

    Candidates sharing the target's name are skipped. Nothing else is
    filtered; equal scores keep the candidate order.
    """
    results = [compute_compatibility(target, other)
               for other in candidates if other.name != target.name]
    results.sort(key=lambda r: r.final_score, reverse=True)

    compatible = sum(1 for r in results if r.compatible)
    logger.info(f"Ranked {len(results)} partners for {target.name} "
                f"({compatible} grade-compatible)")
    if results:
        logger.debug(f"Best partner for {target.name}: "
                     f"{results[0].partner_of(target.name)} ({results[0].final_score})")
    return results


def compare_all(schedules: Sequence[StudentSchedule]) -> list[CompatibilityResult]:
    """Every unordered pair once, best first."""
    results = [
        compute_compatibility(schedules[i], schedules[j])
        for i in range(len(schedules))
        for j in range(i + 1, len(schedules))
    ]
    results.sort(key=lambda r: r.final_score, reverse=True)
    logger.info(f"Compared {len(results)} pairs of {len(schedules)} students")
    return results


def filter_results(
    results: Iterable[CompatibilityResult],
    min_score: float = 0.0,
    include_incompatible: bool = True,
    limit: Optional[int] = None,
) -> list[CompatibilityResult]:
    """Apply the ranking filter; order is preserved."""
    kept = [
        r for r in results
        if r.final_score >= min_score and (r.compatible or include_incompatible)
    ]
    return kept[:limit] if limit is not None else kept
