from presence.builder import build_day_schedule, build_from_parsed, build_schedule

__all__ = ["build_day_schedule", "build_from_parsed", "build_schedule"]
