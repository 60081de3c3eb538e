"""Rich terminal views for schedules, compatibility results and rankings.

Row contents come from export.helpers; this module only adds layout.
"""

from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config.defaults import ROTATION_DAYS
from export.helpers import (
    course_rows,
    day_score_rows,
    format_minutes,
    ranking_rows,
    schedule_rows,
    score_style,
)
from models.compatibility import CompatibilityResult
from models.course import ParsedSchedule
from models.presence import StudentSchedule

_console = Console()


def print_courses(parsed: ParsedSchedule, console: Optional[Console] = None) -> None:
    console = console or _console
    console.print(Panel(
        f"[bold]{parsed.student_name}[/bold]  |  Grade {parsed.grade}",
        title="Student",
        border_style="cyan",
    ))
    table = Table(title="Course table", box=box.ROUNDED)
    for col in ("Code", "Title", "Room", "Pattern", "Block", "Category", "Instructor"):
        table.add_column(col)
    for row in course_rows(parsed):
        table.add_row(*row)
    console.print(table)


def print_schedule(schedule: StudentSchedule, console: Optional[Console] = None) -> None:
    """Per-day arrival, departure and slots of one student."""
    console = console or _console
    header = f"[bold]{schedule.name}[/bold]  |  Grade {schedule.grade}"
    if schedule.has_co_curricular:
        header += (f"\nCo-curricular: {schedule.co_curricular_name} "
                   f"(ends {format_minutes(schedule.co_curricular_end)})")
    console.print(Panel(header, title="Campus presence", border_style="cyan"))

    table = Table(box=box.ROUNDED)
    table.add_column("Day", justify="right")
    table.add_column("Arrival")
    table.add_column("Class end")
    table.add_column("Departure")
    table.add_column("Occupied")
    table.add_column("Free blocks", style="dim")
    table.add_column("Lunch free")
    table.add_column("Can leave")
    for row in schedule_rows(schedule):
        table.add_row(*row)
    console.print(table)


def print_compatibility(result: CompatibilityResult, verbose: bool = False,
                        console: Optional[Console] = None) -> None:
    """Final score, and with verbose the per-day factor breakdown."""
    console = console or _console
    title = f"{result.student_a} ↔ {result.student_b}"

    if not result.compatible:
        console.print(Panel(
            f"[bold red]✗ INCOMPATIBLE[/bold red]\n{result.reason}\n"
            f"Final score: 0/100",
            title=title,
            border_style="red",
        ))
        return

    style = score_style(result.final_score)
    console.print(Panel(
        f"[bold {style}]{result.final_score:.2f}/100[/bold {style}]\n"
        f"Grade level: {result.grade_score.score:g}/10  |  "
        f"Day average: {result.day_average:.2f}/90",
        title=title,
        border_style=style,
    ))

    table = Table(title="Per day", box=box.ROUNDED)
    for col in ("Day", "Overlap", "Stagger", "Lunch", "Extracurricular", "Total"):
        table.add_column(col, justify="right")
    for row in day_score_rows(result):
        table.add_row(*row)
    console.print(table)

    if verbose:
        for day in ROTATION_DAYS:
            ds = result.day_scores[day]
            console.print(f"[bold]Day {day}[/bold]")
            console.print(f"  Schedule overlap:   {ds.overlap.detail}")
            console.print(f"  Arrival/departure:  {ds.arrival_departure.detail}")
            console.print(f"  Lunch:              {ds.lunch.detail}")
            console.print(f"  Extracurriculars:   {ds.extracurricular.detail}")


def print_ranking(results: Sequence[CompatibilityResult], target: Optional[str] = None,
                  console: Optional[Console] = None) -> None:
    console = console or _console
    if not results:
        console.print("[dim]No partners found.[/dim]")
        return
    title = f"Tandem partners for {target}" if target else "All pairs"
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("#", justify="right")
    table.add_column("Partner" if target else "Students", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Status")
    for result, row in zip(results, ranking_rows(results, target)):
        style = score_style(result.final_score) if result.compatible else "dim"
        row[2] = f"[{style}]{row[2]}[/{style}]"
        table.add_row(*row)
    console.print(table)
