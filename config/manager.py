"""Config manager: load, save and validate the tandem configuration.

Uses ruamel.yaml so the saved file keeps its section comments.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import default_tandem_config
from config.schema import TandemConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML COMMENTS ───

_YAML_HEADER = f"""\
# ============================================
# Tandem Parking Scheduler configuration
# Created: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "builder": (
        "Daily presence",
        "Co-curricular end time (HH:MM) and grades allowed off campus at lunch.",
    ),
    "ranking": (
        "Ranking",
        "Filter for listed partners. Scores run from 0 to 100.",
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "tandem_config.yaml"

    def first_run_check(self) -> bool:
        """True if no config file exists yet."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Load ───

    def load(self, path: Optional[Path] = None) -> TandemConfig:
        """Load the config from YAML, validated by Pydantic.

        Without an explicit path a missing default file yields the built-in
        defaults.
        """
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            if path is None:
                return default_tandem_config()
            raise FileNotFoundError(
                f"Config file not found: {target}\n"
                f"Run 'python main.py config init' to create one."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return TandemConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Invalid config file: {target}\n"
                f"Pydantic error: {e}"
            ) from e

    # ─── Save ───

    def save(self, config: TandemConfig, path: Optional[Path] = None) -> Path:
        """Write the config as commented YAML."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Config saved: {target}")
        return target

    def _build_commented_yaml(self, config: TandemConfig) -> CommentedMap:
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        if "builder" in cm:
            builder_map = CommentedMap(cm["builder"])
            builder_map.yaml_add_eol_comment(
                "used when no per-student time is given", "co_curricular_end_time")
            cm["builder"] = builder_map

        return cm
