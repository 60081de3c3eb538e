"""Terminal output (Rich) for schedules and compatibility results."""

from export.tui_renderer import (
    print_compatibility,
    print_courses,
    print_ranking,
    print_schedule,
)

__all__ = ["print_compatibility", "print_courses", "print_ranking", "print_schedule"]
