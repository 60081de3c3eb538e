"""Course records parsed from a student's schedule document (Pydantic v2)."""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from config.defaults import ROTATION_DAYS

# Special pattern tokens
CO_CURRICULAR_TOKEN = "CC"
DIRECTED_STUDY_TOKEN = "DS"
SEMINAR_TOKEN = "M12"

# Block number, special token or unknown verbatim token
BlockId = Union[int, str]


class CourseCategory(str, Enum):
    ACADEMIC = "academic"
    CO_CURRICULAR = "co_curricular"
    DIRECTED_STUDY = "directed_study"
    SEMINAR = "seminar"


TOKEN_CATEGORIES: dict[str, CourseCategory] = {
    CO_CURRICULAR_TOKEN: CourseCategory.CO_CURRICULAR,
    DIRECTED_STUDY_TOKEN: CourseCategory.DIRECTED_STUDY,
    SEMINAR_TOKEN: CourseCategory.SEMINAR,
}


class CourseRecord(BaseModel):
    """One row of the course table, e.g.

    2745-FY-B English IV: Criminal Minds RG211 x.6.x.6.x.6 Medawar, Jocelyn
    """
    model_config = ConfigDict(frozen=True)

    code: str                                   # "2745-FY-B"
    title: str
    room: Optional[str] = None                  # "RG211", None if not printed
    pattern: str                                # raw six-segment pattern
    block: Optional[BlockId] = None             # first non-empty token
    category: CourseCategory = CourseCategory.ACADEMIC
    # Rotation day -> block number / special token, None = no class
    day_assignments: dict[int, Optional[BlockId]]
    instructor: str = ""

    def assignment(self, day: int) -> Optional[BlockId]:
        return self.day_assignments.get(day)

    def is_active(self, day: int) -> bool:
        """True if the course meets on this rotation day."""
        return self.assignment(day) is not None

    @property
    def active_days(self) -> list[int]:
        return [d for d in ROTATION_DAYS if self.is_active(d)]


class CourseBuckets(BaseModel):
    """A student's courses split by category; all_courses keeps document order."""
    model_config = ConfigDict(frozen=True)

    academic: list[CourseRecord] = []
    co_curricular: list[CourseRecord] = []
    directed_study: list[CourseRecord] = []
    seminar: list[CourseRecord] = []
    all_courses: list[CourseRecord] = []

    @classmethod
    def from_records(cls, records: list[CourseRecord]) -> "CourseBuckets":
        buckets: dict[CourseCategory, list[CourseRecord]] = {c: [] for c in CourseCategory}
        for record in records:
            buckets[record.category].append(record)
        return cls(
            academic=buckets[CourseCategory.ACADEMIC],
            co_curricular=buckets[CourseCategory.CO_CURRICULAR],
            directed_study=buckets[CourseCategory.DIRECTED_STUDY],
            seminar=buckets[CourseCategory.SEMINAR],
            all_courses=list(records),
        )


class ParsedSchedule(BaseModel):
    """Header and course table of one schedule document."""
    model_config = ConfigDict(frozen=True)

    student_name: str
    grade: int
    courses: CourseBuckets

    def summary(self) -> str:
        c = self.courses
        return (
            f"{self.student_name} (grade {self.grade}): "
            f"{len(c.academic)} academic, {len(c.co_curricular)} co-curricular, "
            f"{len(c.directed_study)} directed study, {len(c.seminar)} seminar"
        )
