"""Synthetic schedule documents for demos and tests.

Produces the text lines a PDF extractor would return for a student schedule:
header, course table (with wrapped titles), semester marker and some grid
noise below it. Block patterns are derived from the bell schedule, so every
generated course meets exactly on the days its block is rung.
"""

import random
from typing import Optional

from config.defaults import BELL_SCHEDULE, ROTATION_DAYS
from config.schema import SlotType
from data.schedule_import import SEMESTER_MARKERS, TABLE_CAPTION
from models.course import CO_CURRICULAR_TOKEN, DIRECTED_STUDY_TOKEN, SEMINAR_TOKEN

# ─── Name lists ───────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "NATHAN", "DANIEL", "OLIVIA", "MAYA", "ETHAN", "CHLOE", "LUCAS", "AVA",
    "NOAH", "SOPHIA", "JAMES", "EMMA", "OWEN", "ISLA", "LEO", "GRACE",
    "HENRY", "ZOE", "JULIAN", "NORA",
]

_LAST_NAMES = [
    "YOU", "BAEK", "GARCIA", "NGUYEN", "COHEN", "PATEL", "KIM", "LOPEZ",
    "MILLER", "SHAH", "TANAKA", "REYES", "FISCHER", "OKAFOR", "ROSSI",
    "CHEN", "WALSH", "MORENO", "LEVY", "PARK",
]

_INSTRUCTORS = [
    "Medawar, Jocelyn", "Fernandez-Castro, Joaquin", "Engelberg, Ari R.",
    "Grover, John D.", "DeAngelis, Erik S.", "Huang, Lily", "Okoro, Samuel",
    "Whitman, Claire", "Bauer, Thomas", "Santos, Marisol",
]

_ROOMS = ["RG211", "SV112", "CH306", "MG100", "WT204", "KP118", "FH202", "ML100"]

# Some titles are long enough to wrap onto a second line
_ACADEMIC_TITLES = [
    "English IV: Criminal Minds",
    "Honors Spanish Seminar: Hist of Spain & Latin Amer",
    "AP Calculus BC",
    "Honors Chemistry",
    "US History",
    "AP Computer Science A",
    "Studio Art: Drawing and Painting Intensive",
    "Honors Physics: Mechanics",
    "Modern World History",
    "Statistics and Data Science",
    "Chamber Orchestra",
    "Honors Biology: Molecules to Ecosystems",
]

_CO_CURRICULARS = [
    ("Water Polo - Varsity Boys", "CFP"),
    ("Cross Country - Varsity", "TPSC"),
    ("Basketball - JV Girls", "TPGYM"),
    ("Fall Play Production", "RG211"),
]

_DIRECTED_STUDIES = [
    "Directed Study: Corporate and Personal Finance",
    "Directed Study: Independent Research",
]

WRAP_WIDTH = 30
NO_CLASS = "x"


# ─── Patterns from the bell schedule ──────────────────────────────────────────

def _pattern(token_for_day) -> str:
    return ".".join(token_for_day(day) or NO_CLASS for day in ROTATION_DAYS)


def block_pattern(block: int) -> str:
    """"x.6.x.6.x.6" style pattern of a numbered block."""
    return _pattern(lambda day: str(block)
                    if any(s.block == block for s in BELL_SCHEDULE[day]) else None)


def directed_study_pattern() -> str:
    return _pattern(lambda day: DIRECTED_STUDY_TOKEN
                    if any(s.slot_type == SlotType.DIRECTED_STUDY for s in BELL_SCHEDULE[day])
                    else None)


def senior_seminar_pattern() -> str:
    return _pattern(lambda day: SEMINAR_TOKEN
                    if any(s.slot_type == SlotType.SEMINAR and "Senior" in s.name
                           for s in BELL_SCHEDULE[day])
                    else None)


def co_curricular_pattern() -> str:
    return _pattern(lambda day: CO_CURRICULAR_TOKEN)


class FakeStudentGenerator:
    """Generates extracted-text schedule documents for a pool of students."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = random.Random(seed)
        self._used_names: set[str] = set()
        self._used_codes: set[str] = set()

    # ─── Building blocks ──────────────────────────────────────────────────────

    def _name(self) -> str:
        if len(self._used_names) >= len(_LAST_NAMES) * len(_FIRST_NAMES):
            raise ValueError(
                f"Name pool exhausted after {len(self._used_names)} students")
        while True:
            name = f"{self.rng.choice(_LAST_NAMES)}, {self.rng.choice(_FIRST_NAMES)}"
            if name not in self._used_names:
                self._used_names.add(name)
                return name

    def _code(self, term: str = "FY") -> str:
        while True:
            code = f"{self.rng.randint(1000, 9999)}-{term}-{self.rng.choice('ABCDEFGHI')}"
            if code not in self._used_codes:
                self._used_codes.add(code)
                return code

    def _course_lines(self, code: str, title: str, room: str, pattern: str,
                      instructor: str) -> list[str]:
        """One table row, wrapped after a word boundary if the title is long."""
        cut = title.rfind(" ", 0, WRAP_WIDTH) if len(title) > WRAP_WIDTH else -1
        if cut > 0:
            return [f"{code} {title[:cut]}", f"{title[cut + 1:]} {room} {pattern} {instructor}"]
        return [f"{code} {title} {room} {pattern} {instructor}"]

    # ─── Documents ────────────────────────────────────────────────────────────

    def generate_lines(self, grade: Optional[int] = None, name: Optional[str] = None,
                       num_blocks: Optional[int] = None) -> list[str]:
        """Text lines of one student's schedule document."""
        rng = self.rng
        grade = grade if grade is not None else rng.choice([10, 11, 12])
        name = name or self._name()
        num_blocks = num_blocks if num_blocks is not None else rng.randint(4, 7)
        student_id = f"{rng.randint(100, 999)}-{rng.randint(100, 999)}"

        lines = [
            "Harvard-Westlake School",
            "2025-2026 Student Schedule",
            f"{student_id} 2/{rng.randint(1, 28)}/2026\t{grade}\t{name} Grade:\tStudent:",
            f"Dean(s): {rng.choice(_INSTRUCTORS).split(',')[0]}",
            TABLE_CAPTION,
        ]

        blocks = sorted(rng.sample(range(1, 8), num_blocks))
        titles = rng.sample(_ACADEMIC_TITLES, num_blocks)
        for block, title in zip(blocks, titles):
            lines += self._course_lines(self._code(), title, rng.choice(_ROOMS),
                                        block_pattern(block), rng.choice(_INSTRUCTORS))

        if rng.random() < 0.4:
            title, room = rng.choice(_CO_CURRICULARS)
            lines += self._course_lines(self._code("T1"), title, room,
                                        co_curricular_pattern(), rng.choice(_INSTRUCTORS))
        if grade >= 11 and rng.random() < 0.3:
            lines += self._course_lines(self._code("S1"), rng.choice(_DIRECTED_STUDIES),
                                        "MG100", directed_study_pattern(),
                                        rng.choice(_INSTRUCTORS))
        if grade == 12:
            lines += self._course_lines(self._code(), "Senior Seminar", "MG101",
                                        senior_seminar_pattern(), "DeAngelis, Erik S.")

        lines.append(SEMESTER_MARKERS[0])
        # Rendered day grid, ignored by the parser
        lines += [f"Day {day}" for day in ROTATION_DAYS]
        return lines

    def generate_text(self, **kwargs) -> str:
        return "\n".join(self.generate_lines(**kwargs))

    def generate(self, count: int, grades: Optional[list[int]] = None) -> list[list[str]]:
        """Documents for count students; grades cycle through the given list."""
        return [
            self.generate_lines(grade=grades[i % len(grades)] if grades else None)
            for i in range(count)
        ]
