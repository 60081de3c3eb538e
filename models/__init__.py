from models.course import CourseBuckets, CourseCategory, CourseRecord, ParsedSchedule
from models.presence import DaySchedule, SlotAssignment, SlotStatus, StudentSchedule
from models.compatibility import (
    CompatibilityResult,
    DayScore,
    GradeScore,
    OverlapScore,
    StaggerScore,
    SubScore,
)

__all__ = [
    "CourseBuckets",
    "CourseCategory",
    "CourseRecord",
    "ParsedSchedule",
    "DaySchedule",
    "SlotAssignment",
    "SlotStatus",
    "StudentSchedule",
    "CompatibilityResult",
    "DayScore",
    "GradeScore",
    "OverlapScore",
    "StaggerScore",
    "SubScore",
]
