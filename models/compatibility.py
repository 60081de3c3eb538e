"""Result models of the tandem compatibility scorer (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from config.schema import ConfigurationError


class SubScore(BaseModel):
    """One weighted factor of one rotation day."""
    model_config = ConfigDict(frozen=True)

    score: float
    max_score: float
    detail: str = ""


class OverlapScore(SubScore):
    # Minutes both students sit in class at the same time
    overlap_minutes: int = 0


class StaggerScore(SubScore):
    # Later arrival minus earlier student's departure, None without classes
    gap_minutes: Optional[int] = None


class GradeScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: float
    compatible: bool


class DayScore(BaseModel):
    """The four factors of one rotation day (max 90)."""
    model_config = ConfigDict(frozen=True)

    day: int
    total: float
    overlap: OverlapScore
    arrival_departure: StaggerScore
    lunch: SubScore
    extracurricular: SubScore


class CompatibilityResult(BaseModel):
    """Tandem compatibility of two students, 0-100."""
    model_config = ConfigDict(frozen=True)

    student_a: str
    student_b: str
    compatible: bool
    # Set only for grade-incompatible pairs
    reason: Optional[str] = None
    grade_score: GradeScore
    day_scores: dict[int, DayScore] = {}
    day_average: float = 0.0
    final_score: float

    @model_validator(mode="after")
    def _check_range(self):
        if not 0.0 <= self.final_score <= 100.0:
            raise ConfigurationError(
                f"Compatibility score out of range for "
                f"{self.student_a} / {self.student_b}: {self.final_score}"
            )
        return self

    def partner_of(self, name: str) -> str:
        return self.student_b if name == self.student_a else self.student_a
