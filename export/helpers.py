"""Shared row builders for the terminal views.

Each function returns plain string rows so the Rich renderer and the tests
see the same data.
"""

from typing import Iterable, Optional

from config.defaults import ROTATION_DAYS
from config.time_grid import minutes_to_time
from models.compatibility import CompatibilityResult
from models.course import ParsedSchedule
from models.presence import StudentSchedule

EMPTY = "—"

# Status colors for Rich markup
SCORE_STYLES: list[tuple[float, str]] = [
    (70.0, "green"),
    (50.0, "yellow"),
    (0.0, "red"),
]


def format_minutes(value: Optional[int]) -> str:
    """Minutes since midnight as "H:MM", "—" for None."""
    return EMPTY if value is None else minutes_to_time(value)


def score_style(score: float) -> str:
    for threshold, style in SCORE_STYLES:
        if score >= threshold:
            return style
    return "red"


def _join(names: list[str]) -> str:
    return ", ".join(names) if names else EMPTY


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


# ─── Presence ─────────────────────────────────────────────────────────────────

def schedule_rows(schedule: StudentSchedule) -> list[list[str]]:
    """One row per rotation day.

    Columns: Day, Arrival, Class end, Departure, Occupied, Free blocks,
    Lunch free, Can leave.
    """
    rows: list[list[str]] = []
    for day in ROTATION_DAYS:
        d = schedule.day(day)
        if not d.has_classes:
            rows.append([str(day), EMPTY, EMPTY, EMPTY, "no classes", _join(d.free_slots),
                         EMPTY, EMPTY])
            continue
        rows.append([
            str(day),
            format_minutes(d.arrival),
            format_minutes(d.class_end),
            format_minutes(d.departure),
            _join(d.occupied_slots),
            _join(d.free_slots),
            _yes_no(d.lunch_free),
            _yes_no(d.can_leave_lunch),
        ])
    return rows


# ─── Courses ──────────────────────────────────────────────────────────────────

def course_rows(parsed: ParsedSchedule) -> list[list[str]]:
    """Columns: Code, Title, Room, Pattern, Block, Category, Instructor."""
    return [
        [
            c.code,
            c.title,
            c.room or EMPTY,
            c.pattern,
            EMPTY if c.block is None else str(c.block),
            c.category.value,
            c.instructor or EMPTY,
        ]
        for c in parsed.courses.all_courses
    ]


# ─── Compatibility ────────────────────────────────────────────────────────────

def day_score_rows(result: CompatibilityResult) -> list[list[str]]:
    """Columns: Day, Overlap, Stagger, Lunch, Extracurricular, Total.

    Empty for grade-incompatible pairs.
    """
    rows: list[list[str]] = []
    for day in ROTATION_DAYS:
        ds = result.day_scores.get(day)
        if ds is None:
            continue
        rows.append([
            str(day),
            f"{ds.overlap.score:g}/{ds.overlap.max_score:g}",
            f"{ds.arrival_departure.score:g}/{ds.arrival_departure.max_score:g}",
            f"{ds.lunch.score:g}/{ds.lunch.max_score:g}",
            f"{ds.extracurricular.score:g}/{ds.extracurricular.max_score:g}",
            f"{ds.total:g}/90",
        ])
    return rows


def ranking_rows(results: Iterable[CompatibilityResult],
                 target: Optional[str] = None) -> list[list[str]]:
    """Columns: Rank, Student(s), Score, Status.

    With a target name only the partner is listed, otherwise both students.
    """
    rows: list[list[str]] = []
    for rank, r in enumerate(results, start=1):
        who = r.partner_of(target) if target else f"{r.student_a} / {r.student_b}"
        status = "compatible" if r.compatible else (r.reason or "incompatible")
        rows.append([str(rank), who, f"{r.final_score:.2f}", status])
    return rows
