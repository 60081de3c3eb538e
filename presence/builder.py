"""Daily campus presence: course records mapped onto the bell schedule.

For each rotation day the builder decides which bell slots a student sits in
and derives arrival, class end, departure (extended by a co-curricular) and
the lunch situation from them.
"""

import logging
from typing import Optional, Sequence

from config.defaults import ROTATION_DAYS, get_bell_day
from config.schema import BellSlot, BuilderConfig, SlotType
from config.time_grid import minutes_to_time, time_to_minutes
from models.course import CourseBuckets, CourseRecord, ParsedSchedule, SEMINAR_TOKEN
from models.presence import DaySchedule, SlotAssignment, SlotStatus, StudentSchedule

logger = logging.getLogger(__name__)

# Seminar slot names carry the grade: "Junior Seminar/OH", "Sophomore Seminar/OH"
GRADE_SEMINAR_KEYWORDS: dict[int, str] = {
    10: "sophomore",
    11: "junior",
    12: "senior",
}
SENIOR_SEMINAR_MARKER = "Senior"

_FIXED_STATUS = {
    SlotType.LUNCH: SlotStatus.LUNCH,
    SlotType.BREAK: SlotStatus.BREAK,
}


def is_grade_seminar(slot_name: str, grade: int) -> bool:
    keyword = GRADE_SEMINAR_KEYWORDS.get(grade)
    return keyword is not None and keyword in slot_name.lower()


def _first_active(records: Sequence[CourseRecord], day: int, value=None) -> Optional[CourseRecord]:
    for record in records:
        assigned = record.assignment(day)
        if assigned is not None and (value is None or assigned == value):
            return record
    return None


def _classify_slot(slot: BellSlot, day: int, courses: CourseBuckets,
                   grade: int) -> SlotAssignment:
    if slot.slot_type in _FIXED_STATUS:
        return SlotAssignment(slot=slot, status=_FIXED_STATUS[slot.slot_type])

    title: Optional[str] = None
    if slot.slot_type == SlotType.BLOCK:
        course = _first_active(courses.academic, day, slot.block)
        title = course.title if course else None
    elif slot.slot_type == SlotType.DIRECTED_STUDY:
        course = _first_active(courses.directed_study, day)
        title = course.title if course else None
    elif slot.slot_type == SlotType.SEMINAR:
        # Two independent ways in: a scheduled M12 seminar, or the grade's own slot
        seminar = _first_active(courses.seminar, day, SEMINAR_TOKEN)
        if seminar is not None and SENIOR_SEMINAR_MARKER in slot.name:
            title = seminar.title
        elif is_grade_seminar(slot.name, grade):
            title = slot.name
    # collaboration, community time and office hours stay free

    if title is None:
        return SlotAssignment(slot=slot, status=SlotStatus.FREE)
    return SlotAssignment(slot=slot, status=SlotStatus.OCCUPIED, course_title=title)


def build_day_schedule(
    day: int,
    courses: CourseBuckets,
    grade: int,
    co_curricular_end: Optional[int] = None,
    lunch_off_campus_grades: Sequence[int] = (12,),
) -> DaySchedule:
    """Presence of one student on one rotation day.

    co_curricular_end is the daily end of the student's co-curricular in
    minutes, None if the student has none.
    """
    slots = [_classify_slot(s, day, courses, grade) for s in get_bell_day(day)]
    occupied = [s for s in slots if s.is_occupied]

    arrival = min((s.slot.start_min for s in occupied), default=None)
    class_end = max((s.slot.end_min for s in occupied), default=None)
    departure = class_end
    if co_curricular_end is not None and class_end is not None:
        departure = max(class_end, co_curricular_end)

    lunch = next(s.slot for s in slots if s.status == SlotStatus.LUNCH)
    lunch_free = (
        any(s.slot.end_min <= lunch.start_min for s in occupied)
        and any(s.slot.start_min >= lunch.end_min for s in occupied)
    )

    return DaySchedule(
        day=day,
        arrival=arrival,
        class_end=class_end,
        departure=departure,
        occupied_slots=[s.slot.name for s in occupied],
        free_slots=[s.slot.name for s in slots
                    if s.status == SlotStatus.FREE and s.slot.slot_type == SlotType.BLOCK],
        lunch_free=lunch_free,
        can_leave_lunch=grade in lunch_off_campus_grades,
        has_co_curricular=co_curricular_end is not None,
        co_curricular_end=co_curricular_end,
        slots=slots,
    )


def build_schedule(
    student_name: str,
    grade: int,
    courses: CourseBuckets,
    co_curricular_end_time: Optional[str] = None,
    config: Optional[BuilderConfig] = None,
) -> StudentSchedule:
    """Presence over all rotation days.

    co_curricular_end_time ("HH:MM") overrides the configured default and
    only matters for students with a co-curricular.
    """
    config = config or BuilderConfig()
    has_co_curricular = bool(courses.co_curricular)
    co_curricular_end = (
        time_to_minutes(co_curricular_end_time or config.co_curricular_end_time)
        if has_co_curricular else None
    )

    days = {
        day: build_day_schedule(day, courses, grade, co_curricular_end,
                                config.lunch_off_campus_grades)
        for day in ROTATION_DAYS
    }
    schedule = StudentSchedule(
        name=student_name,
        grade=grade,
        days=days,
        has_co_curricular=has_co_curricular,
        co_curricular_end=co_curricular_end,
        co_curricular_name=courses.co_curricular[0].title if has_co_curricular else None,
    )

    if co_curricular_end is not None:
        logger.debug(
            f"{student_name}: {schedule.days_on_campus} days on campus, "
            f"co-curricular until {minutes_to_time(co_curricular_end)}")
    else:
        logger.debug(f"{student_name}: {schedule.days_on_campus} days on campus")
    return schedule


def build_from_parsed(
    parsed: ParsedSchedule,
    co_curricular_end_time: Optional[str] = None,
    config: Optional[BuilderConfig] = None,
) -> StudentSchedule:
    return build_schedule(parsed.student_name, parsed.grade, parsed.courses,
                          co_curricular_end_time, config)
