"""Import of printed student schedules.

Works on the text lines of the exported document (PDF text extraction happens
upstream). Only the course table at the top of the document is read, e.g.

    Course Title Room Schedule Teacher
    2745-FY-B English IV: Criminal Minds RG211 x.6.x.6.x.6 Medawar, Jocelyn
    3586-FY-B Honors Spanish Seminar: Hist of Spain &
    Latin Amer SV112 2.x.2.x.2.x Fernandez-Castro, Joaquin
    1st Semester

The rendered day grid below it is ignored.
"""

import logging
import re
from functools import reduce
from pathlib import Path
from typing import Iterable, Optional

from config.defaults import ROTATION_DAYS
from models.course import (
    BlockId,
    CourseBuckets,
    CourseCategory,
    CourseRecord,
    ParsedSchedule,
    TOKEN_CATEGORIES,
)

logger = logging.getLogger(__name__)


class ParseError(Exception):
    """The document does not look like a student schedule."""


# ─── Patterns ─────────────────────────────────────────────────────────────────

# "2745-FY-B", "8720-T1-A", "9012-FY-I"
COURSE_CODE_RE = re.compile(r"^\d{4}-[A-Z0-9]+-[A-Z]")
_CODE_PREFIX_RE = re.compile(r"^(\d{4}-[A-Z0-9]+-[A-Z])\s+")
# "x.6.x.6.x.6", "CC.CC.CC.CC.CC.CC", "DS.x.x.x.DS.x", "x.x.x.M12.x.x"
# Matched as a whole token; the segment count is checked by decode_pattern
SCHEDULE_PATTERN_RE = re.compile(r"(?<!\S)[x\dA-Z]+(?:\.[x\dA-Z]+){4,}(?!\S)", re.IGNORECASE)
# Room code at the end of the title part: "RG211", "TPSC", "CFP", "FH202"
_ROOM_SUFFIX_RE = re.compile(r"\s+([A-Z]{2,4}\d{2,3}|TPSC|CFP|TPGYM|FH\d+|ML\d+)\s*$")
# "211-563 2/6/2026	12	YOU, NATHAN Grade:	Student:"
_HEADER_RE = re.compile(r"\d{3}-\d{3}\s+\d+/\d+/\d+\s+(\d+)\s+([A-Z,\s]+?)\s*Grade:")
_HEADER_LOOSE_RE = re.compile(r"(\d{1,2})\s+([A-Z][A-Z, ]+?)\s*Grade:")

TABLE_CAPTION = "Course Title Room Schedule Teacher"
SEMESTER_MARKERS = ("1st Semester", "2nd Semester")
HEADER_SCAN_LINES = 10
NO_CLASS = "X"


# ─── Header ───────────────────────────────────────────────────────────────────

def extract_header(lines: list[str]) -> tuple[str, int]:
    """Student name ("LAST, FIRST") and grade from the document header."""
    window = lines[:HEADER_SCAN_LINES]
    for regex in (_HEADER_RE, _HEADER_LOOSE_RE):
        for line in window:
            match = regex.search(line)
            if match:
                return match.group(2).strip(), int(match.group(1))
    raise ParseError(
        f"Could not parse student header from the first {HEADER_SCAN_LINES} lines")


# ─── Schedule pattern ─────────────────────────────────────────────────────────

def _decode_token(part: str) -> Optional[BlockId]:
    upper = part.upper()
    if upper == NO_CLASS:
        return None
    if upper in TOKEN_CATEGORIES:
        return upper
    if upper.isdecimal():
        return int(upper)
    return part


def decode_pattern(pattern: str) -> tuple[dict[int, Optional[BlockId]], CourseCategory]:
    """Decode "x.6.x.6.x.6" into per-day assignments and the course category.

    Position n of the pattern is rotation day n. The category follows the
    first day that has a class; unknown tokens are kept as they are.
    """
    parts = pattern.split(".")
    if len(parts) != len(ROTATION_DAYS):
        raise ParseError(f"Invalid schedule pattern: {pattern!r}")

    assignments = {day: _decode_token(part) for day, part in zip(ROTATION_DAYS, parts)}
    first = next((v for v in assignments.values() if v is not None), None)
    category = TOKEN_CATEGORIES.get(first, CourseCategory.ACADEMIC)
    return assignments, category


def primary_block(assignments: dict[int, Optional[BlockId]]) -> Optional[BlockId]:
    """First non-empty assignment in day order."""
    return next((assignments[d] for d in ROTATION_DAYS if assignments.get(d) is not None), None)


# ─── Course lines ─────────────────────────────────────────────────────────────

def parse_course_line(line: str) -> Optional[CourseRecord]:
    """Split a joined table row into code, title, room, pattern and instructor.

    Returns None for rows without course code or schedule pattern, raises
    ParseError for a pattern without six segments.
    """
    code_match = _CODE_PREFIX_RE.match(line)
    if not code_match:
        logger.debug(f"Skipping line without course code: {line!r}")
        return None
    remainder = line[code_match.end():]

    pattern_match = SCHEDULE_PATTERN_RE.search(remainder)
    if not pattern_match:
        logger.debug(f"Skipping course without schedule pattern: {line!r}")
        return None
    pattern = pattern_match.group(0)

    before = remainder[:pattern_match.start()].strip()
    instructor = remainder[pattern_match.end():].strip()

    title, room = before, None
    room_match = _ROOM_SUFFIX_RE.search(before)
    if room_match:
        room = room_match.group(1)
        title = before[:room_match.start()].strip()

    assignments, category = decode_pattern(pattern)
    return CourseRecord(
        code=code_match.group(1),
        title=title,
        room=room,
        pattern=pattern,
        block=primary_block(assignments),
        category=category,
        day_assignments=assignments,
        instructor=re.sub(r",\s*$", "", instructor),
    )


def _join_row(rows: tuple[str, ...], line: str) -> tuple[str, ...]:
    line = line.strip()
    if not line:
        return rows
    if COURSE_CODE_RE.match(line):
        return rows + (line,)
    if not rows:
        # continuation before the first course
        return rows
    return rows[:-1] + (f"{rows[-1]} {line}",)


def join_table_rows(lines: Iterable[str]) -> list[str]:
    """Merge wrapped titles back onto the row they belong to."""
    return list(reduce(_join_row, lines, ()))


def _table_bounds(lines: list[str]) -> tuple[int, int]:
    start, end = None, len(lines)
    for i, raw in enumerate(lines):
        text = raw.strip()
        if text == TABLE_CAPTION:
            start = i + 1
        elif start is not None and text in SEMESTER_MARKERS:
            end = i
            break
    if start is None:
        raise ParseError(f"Could not find course table (no '{TABLE_CAPTION}' line)")
    return start, end


def extract_course_table(lines: list[str]) -> list[CourseRecord]:
    """All course records of the table, in document order."""
    start, end = _table_bounds(lines)
    records = [parse_course_line(row) for row in join_table_rows(lines[start:end])]
    return [r for r in records if r is not None]


# ─── Documents ────────────────────────────────────────────────────────────────

def parse_schedule_lines(lines: Iterable[str]) -> ParsedSchedule:
    """Parse the text lines of one schedule document."""
    lines = list(lines)
    name, grade = extract_header(lines)
    courses = CourseBuckets.from_records(extract_course_table(lines))
    parsed = ParsedSchedule(student_name=name, grade=grade, courses=courses)
    logger.debug(f"Parsed {parsed.summary()}")
    return parsed


def parse_schedule_text(text: str) -> ParsedSchedule:
    """Parse raw extracted text (one string, newline separated)."""
    return parse_schedule_lines(line.rstrip() for line in text.split("\n"))


def read_schedule_file(path: Path) -> ParsedSchedule:
    """Read a UTF-8 text export of a schedule document."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return parse_schedule_text(path.read_text(encoding="utf-8"))
