# -*- coding: utf-8 -*-
"""Run configuration read from a JSON file.

Layout::

    {
      "project_parameters": {"num_stages": 2, "years_per_stage": 5, "discount_rate": 0.05},
      "stage_data_paths": ["stage1", "stage2"],
      "global_data_paths": {"zones": "zones.csv", "transmission_lines": "lines.csv",
                            "thermal_plants": "thermal.csv",
                            "renewable_plants_definitions": "renewables.csv",
                            "storage_units": "storage.csv"},
      "missing_data_policy": "zero_fill",
      "solver": {"name": "appsi_highs", "time_limit_s": 600},
      "options": {"ramp_limits": false}
    }

Relative paths are resolved against the directory holding the file.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from stagecap.core.errors import ConfigurationError
from stagecap.core.types import MissingDataPolicy

log = logging.getLogger(__name__)

GLOBAL_DATA_KEYS = (
    "zones",
    "transmission_lines",
    "thermal_plants",
    "renewable_plants_definitions",
    "storage_units",
)


@dataclass(frozen=True)
class SolverSettings:
    name: str = "appsi_highs"
    time_limit_s: Optional[float] = None


@dataclass(frozen=True)
class RunConfig:
    num_stages: int
    years_per_stage: int
    discount_rate: float
    stage_dirs: Tuple[Path, ...]
    zones_csv: Path
    transmission_lines_csv: Path
    thermal_plants_csv: Path
    renewable_plants_csv: Path
    storage_units_csv: Path
    missing_data_policy: MissingDataPolicy = MissingDataPolicy.ZERO_FILL
    solver: SolverSettings = SolverSettings()
    ramp_limits: bool = False
    source: Optional[Path] = None


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key)
    if not isinstance(value, dict):
        raise ConfigurationError(f"[config] '{key}' must be an object.")
    return value


def _path(base: Path, value: Any, key: str) -> Path:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"[config] '{key}' must be a non-empty path string, got {value!r}.")
    p = Path(value.strip())
    return p if p.is_absolute() else (base / p)


def _number(section: Dict[str, Any], key: str, kind):
    if key not in section:
        raise ConfigurationError(f"[config] project_parameters.{key} is required.")
    value = section[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"[config] project_parameters.{key} must be numeric, got {value!r}.")
    if kind is int and float(value) != int(value):
        raise ConfigurationError(f"[config] project_parameters.{key} must be an integer, got {value!r}.")
    return kind(value)


def parse_run_config(raw: Dict[str, Any], base_dir: Path, source: Optional[Path] = None) -> RunConfig:
    if not isinstance(raw, dict):
        raise ConfigurationError("[config] top level must be a JSON object.")

    pp = _section(raw, "project_parameters")
    stage_paths = raw.get("stage_data_paths")
    if not isinstance(stage_paths, list):
        raise ConfigurationError("[config] 'stage_data_paths' must be a list of paths.")
    gp = _section(raw, "global_data_paths")
    for key in GLOBAL_DATA_KEYS:
        if key not in gp:
            raise ConfigurationError(f"[config] global_data_paths.{key} is required.")

    policy_raw = raw.get("missing_data_policy", MissingDataPolicy.ZERO_FILL.value)
    try:
        policy = MissingDataPolicy(policy_raw)
    except ValueError:
        allowed = [p.value for p in MissingDataPolicy]
        raise ConfigurationError(
            f"[config] missing_data_policy must be one of {allowed}, got {policy_raw!r}."
        ) from None

    solver_raw = raw.get("solver", {}) or {}
    if not isinstance(solver_raw, dict):
        raise ConfigurationError("[config] 'solver' must be an object.")
    time_limit = solver_raw.get("time_limit_s")
    if time_limit is not None and (isinstance(time_limit, bool) or not isinstance(time_limit, (int, float))):
        raise ConfigurationError(f"[config] solver.time_limit_s must be numeric, got {time_limit!r}.")
    solver = SolverSettings(
        name=str(solver_raw.get("name", SolverSettings.name)),
        time_limit_s=float(time_limit) if time_limit is not None else None,
    )

    options = raw.get("options", {}) or {}
    if not isinstance(options, dict):
        raise ConfigurationError("[config] 'options' must be an object.")

    return RunConfig(
        num_stages=_number(pp, "num_stages", int),
        years_per_stage=_number(pp, "years_per_stage", int),
        discount_rate=_number(pp, "discount_rate", float),
        stage_dirs=tuple(_path(base_dir, p, "stage_data_paths[]") for p in stage_paths),
        zones_csv=_path(base_dir, gp["zones"], "global_data_paths.zones"),
        transmission_lines_csv=_path(base_dir, gp["transmission_lines"], "global_data_paths.transmission_lines"),
        thermal_plants_csv=_path(base_dir, gp["thermal_plants"], "global_data_paths.thermal_plants"),
        renewable_plants_csv=_path(
            base_dir, gp["renewable_plants_definitions"], "global_data_paths.renewable_plants_definitions"
        ),
        storage_units_csv=_path(base_dir, gp["storage_units"], "global_data_paths.storage_units"),
        missing_data_policy=policy,
        solver=solver,
        ramp_limits=bool(options.get("ramp_limits", False)),
        source=source,
    )


def load_run_config(path: str | Path) -> RunConfig:
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as fh:
            raw = json.load(fh)
    except OSError as exc:
        raise ConfigurationError(f"[config] Cannot read {p}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"[config] Invalid JSON in {p}: {exc}") from exc

    cfg = parse_run_config(raw, p.resolve().parent, source=p)
    log.info(
        "Config %s: %d stages x %d years, r=%.4f, %d stage dirs",
        p, cfg.num_stages, cfg.years_per_stage, cfg.discount_rate, len(cfg.stage_dirs),
    )
    return cfg
