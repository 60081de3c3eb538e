"""Tests for the click CLI, run through click's CliRunner."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from main import cli

_COURSES = {
    1: "2001-FY-A Calculus BC RG211 1.x.1.x.1.x Medawar, Jocelyn",
    2: "2002-FY-A Physics MG100 2.x.2.x.2.x Huang, Lily",
    3: "2003-FY-A US History SV112 3.x.3.x.3.x Santos, Ana",
    4: "2004-FY-A Chemistry SV112 x.4.x.4.x.4 Grover, John D.",
}
_CC_LINE = "8720-T1-A Water Polo - Varsity Boys CFP CC.CC.CC.CC.CC.CC Grover, John D."


# ─── Test data helpers ────────────────────────────────────────────────────────

def _write_schedule(directory: Path, name: str, grade: int, *blocks: int,
                    co_curricular: bool = False) -> Path:
    lines = [
        "Harvard-Westlake School",
        "2025-2026 Student Schedule",
        f"211-563 2/12/2026\t{grade}\t{name} Grade:\tStudent:",
        "Course Title Room Schedule Teacher",
        *(_COURSES[b] for b in blocks),
    ]
    if co_curricular:
        lines.append(_CC_LINE)
    lines += ["1st Semester", "Day 1 Day 2 Day 3"]
    path = directory / f"{name.split(',')[0].lower()}.txt"
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def _run_json(*args: str):
    result = CliRunner().invoke(cli, list(args))
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


@pytest.fixture
def files(tmp_path: Path) -> dict[str, str]:
    return {
        "target": str(_write_schedule(tmp_path, "TARGET, TOM", 12, 1)),
        "both": str(_write_schedule(tmp_path, "BOTH, BEA", 12, 1, 3)),
        "afternoon": str(_write_schedule(tmp_path, "AFTERNOON, AL", 12, 3)),
        "junior": str(_write_schedule(tmp_path, "JUNIOR, JO", 11, 4)),
        "morning": str(_write_schedule(tmp_path, "MORNING, MO", 12, 1, 2)),
        "athlete": str(_write_schedule(tmp_path, "ATHLETE, ADA", 12, 1, co_curricular=True)),
    }


# ─── PARSE / SCHEDULE ─────────────────────────────────────────────────────────

class TestParseCommand:
    def test_json(self, files):
        data = _run_json("parse", files["both"], "--json")
        assert data["student_name"] == "BOTH, BEA"
        assert data["grade"] == 12
        assert [c["code"] for c in data["courses"]["academic"]] == ["2001-FY-A", "2003-FY-A"]

    def test_table(self, files):
        result = CliRunner().invoke(cli, ["parse", files["both"]])
        assert result.exit_code == 0
        assert "BOTH, BEA" in result.output

    def test_bad_document(self, tmp_path: Path):
        path = tmp_path / "junk.txt"
        path.write_text("nothing to see here\n", encoding="utf-8")
        result = CliRunner().invoke(cli, ["parse", str(path)])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_missing_file(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["parse", str(tmp_path / "missing.txt")])
        assert result.exit_code != 0


class TestScheduleCommand:
    def test_json(self, files):
        data = _run_json("schedule", files["target"], "--json")
        assert data["days"]["1"]["arrival"] == 480
        assert data["days"]["2"]["arrival"] is None

    def test_co_curricular_end(self, files):
        data = _run_json("schedule", files["athlete"], "--co-curricular-end", "18:00", "--json")
        assert data["co_curricular_end"] == 1080
        assert data["days"]["1"]["departure"] == 1080

    def test_bad_time(self, files):
        result = CliRunner().invoke(
            cli, ["schedule", files["athlete"], "--co-curricular-end", "6pm"])
        assert result.exit_code == 1

    def test_table(self, files):
        result = CliRunner().invoke(cli, ["schedule", files["athlete"]])
        assert result.exit_code == 0
        assert "Water Polo - Varsity Boys" in result.output


# ─── COMPARE ──────────────────────────────────────────────────────────────────

class TestCompareCommand:
    def test_json(self, files):
        data = _run_json("compare", files["morning"], files["afternoon"], "--json")
        result = data["result"]
        assert result["compatible"] is True
        assert result["day_scores"]["1"]["total"] == 67.5
        assert "schedules" not in data

    def test_with_schedules(self, files):
        data = _run_json("compare", files["morning"], files["afternoon"], "--schedules", "--json")
        assert [s["name"] for s in data["schedules"]] == ["MORNING, MO", "AFTERNOON, AL"]

    def test_co_curricular_override(self, files):
        data = _run_json("compare", files["athlete"], files["afternoon"],
                         "--co-curricular1", "18:00", "--json")
        extracurricular = data["result"]["day_scores"]["1"]["extracurricular"]
        assert extracurricular["score"] == 15

    def test_incompatible(self, files):
        data = _run_json("compare", files["target"], files["junior"], "--json")
        assert data["result"]["compatible"] is False
        assert data["result"]["final_score"] == 0
        assert data["result"]["day_scores"] == {}

    def test_verbose(self, files):
        result = CliRunner().invoke(
            cli, ["compare", files["morning"], files["afternoon"], "-v", "--schedules"])
        assert result.exit_code == 0
        assert "clean handoff" in result.output


# ─── RANK / PAIRS ─────────────────────────────────────────────────────────────

class TestRankCommand:
    def test_order(self, files):
        data = _run_json("rank", files["target"], files["both"], files["junior"],
                         files["afternoon"], files["target"], "--json")
        assert [r["student_b"] for r in data] == ["AFTERNOON, AL", "BOTH, BEA", "JUNIOR, JO"]

    def test_min_score(self, files):
        data = _run_json("rank", files["target"], files["both"], files["junior"],
                         "--min-score", "1", "--json")
        assert [r["student_b"] for r in data] == ["BOTH, BEA"]

    def test_per_file_co_curricular(self, files):
        data = _run_json("rank", files["target"], files["athlete"],
                         "--co-curricular", files["athlete"], "11:15", "--json")
        assert data[0]["day_scores"]["1"]["extracurricular"]["score"] == 10

    def test_table(self, files):
        result = CliRunner().invoke(cli, ["rank", files["target"], files["afternoon"]])
        assert result.exit_code == 0
        assert "Tandem partners for TARGET, TOM" in result.output

    def test_config_hides_incompatible(self, files, tmp_path: Path):
        config = tmp_path / "config.yaml"
        config.write_text("ranking:\n  include_incompatible: false\n", encoding="utf-8")
        result = CliRunner().invoke(cli, ["--config", str(config), "rank", files["target"],
                                          files["junior"], files["both"], "--json"])
        assert result.exit_code == 0
        assert [r["student_b"] for r in json.loads(result.stdout)] == ["BOTH, BEA"]


class TestPairsCommand:
    def test_all_pairs(self, files):
        data = _run_json("pairs", files["target"], files["both"], files["afternoon"], "--json")
        assert len(data) == 3
        scores = [r["final_score"] for r in data]
        assert scores == sorted(scores, reverse=True)

    def test_needs_two(self, files):
        result = CliRunner().invoke(cli, ["pairs", files["target"]])
        assert result.exit_code == 1
        assert "At least two schedules" in result.output


# ─── DEMO / CONFIG ────────────────────────────────────────────────────────────

class TestDemoCommand:
    def test_runs(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = CliRunner().invoke(cli, ["demo", "--count", "5", "--seed", "1"])
        assert result.exit_code == 0, result.output
        assert "Tandem partners for" in result.output

    def test_count_range(self):
        result = CliRunner().invoke(cli, ["demo", "--count", "1"])
        assert result.exit_code == 2


class TestConfigCommand:
    def test_init_and_show(self, tmp_path: Path):
        target = tmp_path / "tandem.yaml"
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(target), "config", "init"])
        assert result.exit_code == 0
        assert target.exists()

        result = runner.invoke(cli, ["--config", str(target), "config", "show"])
        assert result.exit_code == 0
        assert "Harvard-Westlake" in result.output

    def test_init_keeps_existing(self, tmp_path: Path):
        target = tmp_path / "tandem.yaml"
        target.write_text("school_name: Mine\n", encoding="utf-8")
        result = CliRunner().invoke(cli, ["--config", str(target), "config", "init"], input="n\n")
        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8") == "school_name: Mine\n"

    def test_init_force(self, tmp_path: Path):
        target = tmp_path / "tandem.yaml"
        target.write_text("school_name: Mine\n", encoding="utf-8")
        result = CliRunner().invoke(cli, ["--config", str(target), "config", "init", "--force"])
        assert result.exit_code == 0
        assert "Harvard-Westlake" in target.read_text(encoding="utf-8")

    def test_missing_config_file(self, files, tmp_path: Path):
        result = CliRunner().invoke(
            cli, ["--config", str(tmp_path / "nope.yaml"), "parse", files["target"]])
        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_invalid_config_file(self, files, tmp_path: Path):
        config = tmp_path / "bad.yaml"
        config.write_text("builder:\n  co_curricular_end_time: noon\n", encoding="utf-8")
        result = CliRunner().invoke(cli, ["--config", str(config), "parse", files["target"]])
        assert result.exit_code == 1
        assert "Invalid config file" in result.output


class TestHelp:
    def test_help(self):
        """--help lists every command."""
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Usage" in result.output
        for command in ("parse", "schedule", "compare", "rank", "pairs", "demo", "config"):
            assert command in result.output
