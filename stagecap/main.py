# main.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from stagecap.bess.io import load_storage_units
from stagecap.core.config import RunConfig, load_run_config
from stagecap.core.errors import ConfigurationError, EntityValidationError, SolverUnavailableError
from stagecap.core.types import ProjectParameters, index_stage_zone_data
from stagecap.demand.io import load_stage_zone_data
from stagecap.export.results import export_results, format_report
from stagecap.modeling.builder import BuildOptions, build_model
from stagecap.modeling.solver import solve_instance
from stagecap.network.io import load_transmission_lines, load_zones
from stagecap.renewable.core.types import attach_profiles
from stagecap.renewable.io import load_availability_profiles, load_renewable_plants
from stagecap.thermal.io import load_thermal_plants

log = logging.getLogger("stagecap")

EXIT_OK = 0
EXIT_NOT_OPTIMAL = 1
EXIT_BAD_INPUT = 2


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="stagecap",
        description="Multi-stage capacity expansion planning (zonal transport model).",
    )
    parser.add_argument("--config", type=Path, required=True, help="JSON run configuration")
    parser.add_argument("--solver", type=str, default=None, help="Pyomo solver name (overrides config)")
    parser.add_argument("--time-limit", type=float, default=None, help="solver wall-clock limit in seconds")
    parser.add_argument("--out-dir", type=Path, default=None, help="write result CSVs here")
    parser.add_argument("--no-solve", action="store_true", help="build the model and stop")
    parser.add_argument("--log-level", type=str, default="INFO")
    return parser.parse_args(argv)


def build_from_config(cfg: RunConfig):
    # ----- Red -----
    zones = load_zones(cfg.zones_csv)
    lines = load_transmission_lines(cfg.transmission_lines_csv)
    params = ProjectParameters(
        num_stages=cfg.num_stages,
        years_per_stage=cfg.years_per_stage,
        discount_rate=cfg.discount_rate,
        zones=zones,
        transmission_lines=lines,
    )
    log.info("Network: %d zones, %d lines", len(zones), len(lines))

    # ----- Activos -----
    thermal = load_thermal_plants(cfg.thermal_plants_csv)
    renewable = load_renewable_plants(cfg.renewable_plants_csv)
    storage = load_storage_units(cfg.storage_units_csv)
    log.info("Assets: %d thermal, %d renewable, %d storage", len(thermal), len(renewable), len(storage))

    # ----- Datos por etapa -----
    series = load_stage_zone_data(cfg.stage_dirs, zones, cfg.num_stages)
    profiles = {}
    for stage_id, stage_dir in enumerate(cfg.stage_dirs, start=1):
        profiles.update(load_availability_profiles(stage_id, stage_dir, renewable))
    renewable = attach_profiles(renewable, profiles)

    options = BuildOptions(missing_data_policy=cfg.missing_data_policy, ramp_limits=cfg.ramp_limits)
    return build_model(params, thermal, renewable, storage, index_stage_zone_data(series), options=options)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(message)s",
    )

    try:
        cfg = load_run_config(args.config)
        instance = build_from_config(cfg)
    except (ConfigurationError, EntityValidationError) as exc:
        log.error("%s", exc)
        return EXIT_BAD_INPUT

    if args.no_solve:
        print(format_report(instance, None))
        return EXIT_OK

    solver_name = args.solver or cfg.solver.name
    time_limit = args.time_limit if args.time_limit is not None else cfg.solver.time_limit_s
    try:
        outcome = solve_instance(instance, solver_name=solver_name, time_limit=time_limit)
    except SolverUnavailableError as exc:
        log.error("%s", exc)
        return EXIT_BAD_INPUT

    print(format_report(instance, outcome))
    if outcome.objective is not None and args.out_dir is not None:
        export_results(instance, args.out_dir)
    return EXIT_OK if outcome.solved else EXIT_NOT_OPTIMAL


if __name__ == "__main__":
    sys.exit(main())
