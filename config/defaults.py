from collections import Counter
from types import MappingProxyType
from typing import Mapping

from config.schema import (
    BellSlot,
    BuilderConfig,
    ConfigurationError,
    RankingConfig,
    SlotType,
    TandemConfig,
)

# ─── Six-day rotation, HW 2025-2026 ───────────────────────────────────────────
# (name, block, type, start, end)

_RAW_BELL_SCHEDULE: dict[int, list[tuple]] = {
    1: [
        ("Block 1",             1,    SlotType.BLOCK,          "8:00",  "9:15"),
        ("Junior Seminar/OH",   None, SlotType.SEMINAR,        "9:20",  "10:25"),
        ("Block 2",             2,    SlotType.BLOCK,          "10:30", "11:45"),
        ("Lunch",               None, SlotType.LUNCH,          "11:45", "12:45"),
        ("Block 3",             3,    SlotType.BLOCK,          "12:45", "14:00"),
        ("Break",               None, SlotType.BREAK,          "14:00", "14:15"),
        ("DS/OH",               None, SlotType.DIRECTED_STUDY, "14:15", "15:00"),
    ],
    2: [
        ("Block 4",              4,    SlotType.BLOCK,   "8:00",  "9:15"),
        ("Sophomore Seminar/OH", None, SlotType.SEMINAR, "9:20",  "9:55"),
        ("Block 5",              5,    SlotType.BLOCK,   "10:00", "11:15"),
        ("Lunch",                None, SlotType.LUNCH,   "11:15", "12:15"),
        ("Block 6",              6,    SlotType.BLOCK,   "12:15", "13:30"),
        ("Break",                None, SlotType.BREAK,   "13:30", "13:45"),
        ("Block 7",              7,    SlotType.BLOCK,   "13:45", "15:00"),
    ],
    3: [
        ("Faculty Collaboration", None, SlotType.COLLABORATION, "8:00",  "9:50"),
        ("Block 2",               2,    SlotType.BLOCK,         "10:00", "11:15"),
        ("Lunch",                 None, SlotType.LUNCH,         "11:15", "12:15"),
        ("Block 3",               3,    SlotType.BLOCK,         "12:15", "13:30"),
        ("Break",                 None, SlotType.BREAK,         "13:30", "13:45"),
        ("Block 1",               1,    SlotType.BLOCK,         "13:45", "15:00"),
    ],
    4: [
        ("Block 5",                      5,    SlotType.BLOCK,   "8:00",  "9:15"),
        ("Senior Seminar/Soph Advisory", None, SlotType.SEMINAR, "9:20",  "9:55"),
        ("Block 6",                      6,    SlotType.BLOCK,   "10:00", "11:15"),
        ("Lunch",                        None, SlotType.LUNCH,   "11:15", "12:15"),
        ("Block 7",                      7,    SlotType.BLOCK,   "12:15", "13:30"),
        ("Break",                        None, SlotType.BREAK,   "13:30", "13:45"),
        ("Block 4",                      4,    SlotType.BLOCK,   "13:45", "15:00"),
    ],
    5: [
        ("Block 3",        3,    SlotType.BLOCK,          "8:00",  "9:15"),
        ("Community Time", None, SlotType.COMMUNITY,      "9:20",  "10:25"),
        ("Block 1",        1,    SlotType.BLOCK,          "10:30", "11:45"),
        ("Lunch",          None, SlotType.LUNCH,          "11:45", "12:45"),
        ("Block 2",        2,    SlotType.BLOCK,          "12:45", "14:00"),
        ("Break",          None, SlotType.BREAK,          "14:00", "14:15"),
        ("DS/OH",          None, SlotType.DIRECTED_STUDY, "14:15", "15:00"),
    ],
    6: [
        ("Block 6",      6,    SlotType.BLOCK,        "8:00",  "9:15"),
        ("Office Hours", None, SlotType.OFFICE_HOURS, "9:15",  "10:00"),
        ("Block 7",      7,    SlotType.BLOCK,        "10:00", "11:15"),
        ("Lunch",        None, SlotType.LUNCH,        "11:15", "12:15"),
        ("Block 4",      4,    SlotType.BLOCK,        "12:15", "13:30"),
        ("Break",        None, SlotType.BREAK,        "13:30", "13:45"),
        ("Block 5",      5,    SlotType.BLOCK,        "13:45", "15:00"),
    ],
}

MIN_SLOTS_PER_DAY = 6
MIN_DAYS_PER_BLOCK = 3
BLOCK_NUMBERS = range(1, 8)


def validate_bell_schedule(schedule: Mapping[int, tuple[BellSlot, ...]]) -> None:
    """Check the structural invariants of the bell schedule.

    - every day: at least 6 slots, exactly one lunch and one break
    - slots sorted by start and non-overlapping
    - every block 1-7 on at least 3 days (the rotation actually rotates)

    Raises ConfigurationError on the first violation.
    """
    for day, slots in schedule.items():
        if len(slots) < MIN_SLOTS_PER_DAY:
            raise ConfigurationError(
                f"Day {day} has {len(slots)} slots (expected >= {MIN_SLOTS_PER_DAY})")
        counts = Counter(s.slot_type for s in slots)
        if counts[SlotType.LUNCH] != 1 or counts[SlotType.BREAK] != 1:
            raise ConfigurationError(
                f"Day {day} needs exactly one lunch and one break slot")
        for prev, cur in zip(slots, slots[1:]):
            if cur.start_min < prev.end_min:
                raise ConfigurationError(
                    f"Day {day}: '{cur.name}' starts before '{prev.name}' ends")

    for block in BLOCK_NUMBERS:
        days = sum(1 for slots in schedule.values()
                   if any(s.block == block for s in slots))
        if days < MIN_DAYS_PER_BLOCK:
            raise ConfigurationError(
                f"Block {block} appears on {days} days (expected >= {MIN_DAYS_PER_BLOCK})")


def _load_bell_schedule() -> Mapping[int, tuple[BellSlot, ...]]:
    schedule = {
        day: tuple(
            BellSlot(name=name, block=block, slot_type=slot_type, start=start, end=end)
            for name, block, slot_type, start, end in rows
        )
        for day, rows in _RAW_BELL_SCHEDULE.items()
    }
    validate_bell_schedule(schedule)
    return MappingProxyType(schedule)


# Read-only, built once at import
BELL_SCHEDULE: Mapping[int, tuple[BellSlot, ...]] = _load_bell_schedule()
ROTATION_DAYS: tuple[int, ...] = tuple(sorted(BELL_SCHEDULE))


def get_bell_day(day: int) -> tuple[BellSlot, ...]:
    """Slots of one rotation day, in order."""
    try:
        return BELL_SCHEDULE[day]
    except KeyError:
        raise ConfigurationError(
            f"Invalid rotation day: {day!r} (expected one of {list(ROTATION_DAYS)})"
        ) from None


def default_tandem_config() -> TandemConfig:
    """Default: co-curriculars end at 17:00, only seniors leave at lunch."""
    return TandemConfig(
        school_name="Harvard-Westlake",
        builder=BuilderConfig(co_curricular_end_time="17:00",
                              lunch_off_campus_grades=[12]),
        ranking=RankingConfig(min_score=0.0, include_incompatible=True),
    )
