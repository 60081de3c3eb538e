"""Per-day campus presence of one student (Pydantic v2)."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from config.schema import BellSlot, ConfigurationError


class SlotStatus(str, Enum):
    OCCUPIED = "occupied"
    FREE = "free"
    LUNCH = "lunch"
    BREAK = "break"


class SlotAssignment(BaseModel):
    """A bell slot as seen by one student."""
    model_config = ConfigDict(frozen=True)

    slot: BellSlot
    status: SlotStatus = SlotStatus.FREE
    course_title: Optional[str] = None

    @property
    def is_occupied(self) -> bool:
        return self.status == SlotStatus.OCCUPIED


class DaySchedule(BaseModel):
    """One rotation day of one student. Times in minutes since midnight."""
    model_config = ConfigDict(frozen=True)

    day: int
    # None on days without any obligation
    arrival: Optional[int] = None
    class_end: Optional[int] = None
    # class_end, extended by the co-curricular
    departure: Optional[int] = None
    occupied_slots: list[str] = []
    # Unoccupied block slots only
    free_slots: list[str] = []
    # Classes both before and after lunch
    lunch_free: bool = False
    can_leave_lunch: bool = False
    has_co_curricular: bool = False
    co_curricular_end: Optional[int] = None
    slots: list[SlotAssignment] = []

    @property
    def occupied(self) -> list[SlotAssignment]:
        return [s for s in self.slots if s.is_occupied]

    @property
    def has_classes(self) -> bool:
        return self.arrival is not None

    @property
    def occupied_minutes(self) -> int:
        return sum(s.slot.duration for s in self.occupied)


class StudentSchedule(BaseModel):
    """A student's presence over the whole rotation."""
    model_config = ConfigDict(frozen=True)

    name: str
    grade: int
    days: dict[int, DaySchedule]
    has_co_curricular: bool = False
    # Effective daily end in minutes, None without a co-curricular
    co_curricular_end: Optional[int] = None
    co_curricular_name: Optional[str] = None

    def day(self, day: int) -> DaySchedule:
        """Presence on one rotation day."""
        try:
            return self.days[day]
        except KeyError:
            raise ConfigurationError(
                f"Invalid rotation day: {day!r} (expected one of {sorted(self.days)})"
            ) from None

    @property
    def days_on_campus(self) -> int:
        return sum(1 for d in self.days.values() if d.has_classes)
