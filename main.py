"""Tandem Parking Scheduler: main CLI.

Usage:
  python main.py parse <schedule.txt>                  Show the parsed course table
  python main.py schedule <schedule.txt>               Per-day campus presence
  python main.py compare <a.txt> <b.txt>               Compatibility of two students
  python main.py rank <target.txt> <other.txt>...      Rank partners for one student
  python main.py pairs <a.txt> <b.txt> <c.txt>...      All pairwise scores
  python main.py demo                                  Rank a synthetic student pool
  python main.py config show                           Show the configuration
  python main.py config init                           Write the default configuration

Schedules are the text exports of the printed student schedule PDFs.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()


def _abort(message: str) -> None:
    console.print(f"[red bold]Error:[/red bold] {escape(message)}")
    sys.exit(1)


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


class CliState:
    """Shared options of all commands. The config is loaded on first use."""

    def __init__(self, config_path: Optional[Path]) -> None:
        self.config_path = config_path
        self._config = None

    @property
    def config(self):
        from config.manager import ConfigManager

        if self._config is None:
            try:
                self._config = ConfigManager().load(self.config_path)
            except (FileNotFoundError, ValueError) as e:
                _abort(str(e))
        return self._config


def _load_schedule(path: Path, co_curricular_end: Optional[str], config):
    """Parse one schedule file and build its presence, aborting on bad input."""
    from data.schedule_import import ParseError, read_schedule_file
    from presence.builder import build_from_parsed

    try:
        parsed = read_schedule_file(path)
        return parsed, build_from_parsed(parsed, co_curricular_end, config.builder)
    except (ParseError, ValueError) as e:
        _abort(f"{path}: {e}")


# ─── PARSE ────────────────────────────────────────────────────────────────────

@click.command("parse")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON.")
@click.pass_obj
def cmd_parse(state: "CliState", file: Path, as_json: bool):
    """Shows header and course table of a schedule document."""
    from export.tui_renderer import print_courses

    parsed, _ = _load_schedule(file, None, state.config)
    if as_json:
        _echo_json(parsed.model_dump(mode="json"))
        return
    print_courses(parsed, console=console)
    console.print(f"\n[dim]{parsed.summary()}[/dim]")


# ─── SCHEDULE ─────────────────────────────────────────────────────────────────

@click.command("schedule")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--co-curricular-end", default=None, metavar="HH:MM",
              help="End of the daily co-curricular.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON.")
@click.pass_obj
def cmd_schedule(state: "CliState", file: Path, co_curricular_end: Optional[str], as_json: bool):
    """Shows the per-day campus presence of one student."""
    from export.tui_renderer import print_schedule

    _, schedule = _load_schedule(file, co_curricular_end, state.config)
    if as_json:
        _echo_json(schedule.model_dump(mode="json"))
        return
    print_schedule(schedule, console=console)


# ─── COMPARE ──────────────────────────────────────────────────────────────────

@click.command("compare")
@click.argument("file_a", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("file_b", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--co-curricular1", default=None, metavar="HH:MM",
              help="Co-curricular end of the first student.")
@click.option("--co-curricular2", default=None, metavar="HH:MM",
              help="Co-curricular end of the second student.")
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Explain every factor of every day.")
@click.option("--schedules", "show_schedules", is_flag=True, default=False,
              help="Also show both presence schedules.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON.")
@click.pass_obj
def cmd_compare(state: "CliState", file_a: Path, file_b: Path, co_curricular1: Optional[str],
                co_curricular2: Optional[str], verbose: bool, show_schedules: bool,
                as_json: bool):
    """Computes the tandem compatibility of two students."""
    from analysis.compatibility import compute_compatibility
    from export.tui_renderer import print_compatibility, print_schedule

    _, schedule_a = _load_schedule(file_a, co_curricular1, state.config)
    _, schedule_b = _load_schedule(file_b, co_curricular2, state.config)
    result = compute_compatibility(schedule_a, schedule_b)

    if as_json:
        data = {"result": result.model_dump(mode="json")}
        if show_schedules:
            data["schedules"] = [schedule_a.model_dump(mode="json"),
                                 schedule_b.model_dump(mode="json")]
        _echo_json(data)
        return

    if show_schedules:
        print_schedule(schedule_a, console=console)
        print_schedule(schedule_b, console=console)
    print_compatibility(result, verbose=verbose, console=console)


# ─── RANK ─────────────────────────────────────────────────────────────────────

@click.command("rank")
@click.argument("target", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("candidates", nargs=-1, required=True,
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--co-curricular", "co_curricular_ends", multiple=True,
              type=(click.Path(path_type=Path), str), metavar="FILE HH:MM",
              help="Co-curricular end for one of the files (repeatable).")
@click.option("--min-score", type=click.FloatRange(0, 100), default=None,
              help="Hide partners below this score.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON.")
@click.pass_obj
def cmd_rank(state: "CliState", target: Path, candidates: tuple[Path, ...],
             co_curricular_ends: tuple[tuple[Path, str], ...], min_score: Optional[float],
             as_json: bool):
    """Ranks all candidates as tandem partners for TARGET."""
    from analysis.compatibility import filter_results, rank_partners
    from export.tui_renderer import print_ranking

    config = state.config
    ends = {p.resolve(): t for p, t in co_curricular_ends}

    _, target_schedule = _load_schedule(target, ends.get(target.resolve()), config)
    pool = [_load_schedule(p, ends.get(p.resolve()), config)[1] for p in candidates]

    results = filter_results(
        rank_partners(target_schedule, pool),
        min_score=min_score if min_score is not None else config.ranking.min_score,
        include_incompatible=config.ranking.include_incompatible,
    )
    if as_json:
        _echo_json([r.model_dump(mode="json") for r in results])
        return
    print_ranking(results, target=target_schedule.name, console=console)


# ─── PAIRS ────────────────────────────────────────────────────────────────────

@click.command("pairs")
@click.argument("files", nargs=-1, required=True,
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON.")
@click.pass_obj
def cmd_pairs(state: "CliState", files: tuple[Path, ...], as_json: bool):
    """Scores every pair of the given students."""
    from analysis.compatibility import compare_all
    from export.tui_renderer import print_ranking

    if len(files) < 2:
        _abort("At least two schedules are needed.")
    schedules = [_load_schedule(p, None, state.config)[1] for p in files]
    results = compare_all(schedules)
    if as_json:
        _echo_json([r.model_dump(mode="json") for r in results])
        return
    print_ranking(results, console=console)


# ─── DEMO ─────────────────────────────────────────────────────────────────────

@click.command("demo")
@click.option("--count", default=8, type=click.IntRange(2, 200),
              help="Number of synthetic students.")
@click.option("--seed", default=42, help="Random seed for reproducible data.")
@click.pass_obj
def cmd_demo(state: "CliState", count: int, seed: int):
    """Generates a synthetic pool and ranks partners for its first student."""
    from analysis.compatibility import filter_results, rank_partners
    from data.fake_data import FakeStudentGenerator
    from data.schedule_import import parse_schedule_lines
    from export.tui_renderer import print_ranking, print_schedule
    from presence.builder import build_from_parsed

    config = state.config
    gen = FakeStudentGenerator(seed=seed)
    schedules = [
        build_from_parsed(parse_schedule_lines(lines), config=config.builder)
        for lines in gen.generate(count)
    ]
    target = schedules[0]
    print_schedule(target, console=console)
    results = filter_results(
        rank_partners(target, schedules),
        min_score=config.ranking.min_score,
        include_incompatible=config.ranking.include_incompatible,
    )
    print_ranking(results, target=target.name, console=console)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Show or create the configuration."""


@cmd_config.command("show")
@click.pass_obj
def config_show(state: "CliState"):
    """Shows the active configuration."""
    from config.defaults import BELL_SCHEDULE

    config = state.config
    source = state.config_path or "built-in defaults"
    console.print(Panel(
        f"[bold]{config.school_name}[/bold]  |  source: {source}",
        title="Configuration",
        border_style="cyan",
    ))

    table = Table(title="Settings", box=box.ROUNDED)
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("Co-curricular end", config.builder.co_curricular_end_time)
    table.add_row("Off-campus lunch grades",
                  ", ".join(str(g) for g in config.builder.lunch_off_campus_grades))
    table.add_row("Minimum score", f"{config.ranking.min_score:g}")
    table.add_row("Show incompatible", "yes" if config.ranking.include_incompatible else "no")
    console.print(table)

    grid = Table(title="Bell schedule", box=box.ROUNDED)
    grid.add_column("Day", justify="right")
    grid.add_column("Slots")
    for day, slots in BELL_SCHEDULE.items():
        grid.add_row(str(day), "\n".join(f"{s.start}-{s.end}  {s.name}" for s in slots))
    console.print(grid)


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing file.")
@click.pass_obj
def config_init(state: "CliState", force: bool):
    """Writes the default configuration as commented YAML."""
    from config.defaults import default_tandem_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    target = state.config_path or mgr.DEFAULT_CONFIG
    if target.exists() and not force:
        console.print(f"[yellow]A configuration already exists: {target}[/yellow]")
        if not click.confirm("Overwrite it?", default=False):
            return
    mgr.save(default_tandem_config(), target)


# ─── MAIN CLI ─────────────────────────────────────────────────────────────────

@click.group()
@click.option("--config", "config_path", default=None,
              type=click.Path(dir_okay=False, path_type=Path),
              help="Path of the YAML configuration.")
@click.option("--debug", is_flag=True, default=False, help="Verbose logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], debug: bool):
    """Tandem parking scheduler for Harvard-Westlake students.

    Start with: python main.py demo
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )

    ctx.obj = CliState(config_path)


def main():
    """Entry point."""
    cli()


cli.add_command(cmd_parse)
cli.add_command(cmd_schedule)
cli.add_command(cmd_compare)
cli.add_command(cmd_rank)
cli.add_command(cmd_pairs)
cli.add_command(cmd_demo)
cli.add_command(cmd_config)


if __name__ == "__main__":
    main()
