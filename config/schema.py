from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Optional
from enum import Enum

from config.time_grid import time_to_minutes


class ConfigurationError(Exception):
    """Internal inconsistency: bad rotation day, broken template, score out of range.

    Subclasses Exception directly: raised inside a Pydantic validator it
    propagates unchanged rather than as a ValidationError.
    """


# ─── TIME GRID (fixed six-day rotation) ───

class SlotType(str, Enum):
    BLOCK = "block"
    SEMINAR = "seminar"
    LUNCH = "lunch"
    BREAK = "break"
    DIRECTED_STUDY = "directed_study"
    COLLABORATION = "collaboration"
    COMMUNITY = "community"
    OFFICE_HOURS = "office_hours"


class BellSlot(BaseModel):
    """One scheduled interval of a rotation day."""
    model_config = ConfigDict(frozen=True)

    # Display name, matches the names used on printed schedules ("Block 3", "DS/OH")
    name: str
    # Numbered block 1-7, None for non-block slots
    block: Optional[int] = Field(None, ge=1, le=7)
    slot_type: SlotType
    # Wall-clock times "H:MM"
    start: str
    end: str
    # Derived from start/end, always recomputed on construction
    start_min: int
    end_min: int

    @model_validator(mode="before")
    @classmethod
    def _derive_minutes(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            if isinstance(data.get("start"), str):
                data["start_min"] = time_to_minutes(data["start"])
            if isinstance(data.get("end"), str):
                data["end_min"] = time_to_minutes(data["end"])
        return data

    @model_validator(mode="after")
    def _check_order(self):
        if self.end_min <= self.start_min:
            raise ValueError(
                f"Slot '{self.name}' ends ({self.end}) before it starts ({self.start})")
        if (self.slot_type == SlotType.BLOCK) != (self.block is not None):
            raise ValueError(
                f"Slot '{self.name}': only block slots carry a block number")
        return self

    @property
    def duration(self) -> int:
        return self.end_min - self.start_min


# ─── BUILDER ───

class BuilderConfig(BaseModel):
    """Defaults for turning course records into daily presence."""
    # Co-curricular end time "HH:MM" used when none is given per student
    co_curricular_end_time: str = Field("17:00",
        description="Default end of the daily co-curricular")
    # Grade levels allowed to leave campus at lunch
    lunch_off_campus_grades: list[int] = Field(
        default=[12],
        description="Grades allowed off campus at lunch")

    @field_validator("co_curricular_end_time")
    @classmethod
    def _valid_time(cls, v: str) -> str:
        time_to_minutes(v)
        return v


# ─── RANKING ───

class RankingConfig(BaseModel):
    """Filter applied by the CLI when listing partners."""
    # Drop results below this final score
    min_score: float = Field(0.0, ge=0.0, le=100.0,
        description="Minimum final score shown")
    # Keep grade-incompatible pairs (score 0) in the list
    include_incompatible: bool = Field(True,
        description="Show grade-incompatible pairs")


# ─── FULL CONFIG ───

class TandemConfig(BaseModel):
    """Complete configuration of the tandem scheduler."""
    school_name: str = Field("Harvard-Westlake",
        description="Name of the school")
    builder: BuilderConfig = Field(default_factory=BuilderConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
