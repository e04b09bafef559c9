"""Lectura de centrales renovables y de sus perfiles de disponibilidad."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from stagecap.core.io.loaders import (
    clean_names,
    coerce_int,
    coerce_numeric,
    read_table,
    require_columns,
    series_values,
)
from stagecap.renewable.core.types import DETERMINISTIC_SCENARIO, ProfileTable, RenewablePlant

log = logging.getLogger(__name__)

RENEWABLE_COLUMNS = [
    "name",
    "capacity_mw",
    "variable_om_cost_usd_per_mwh",
    "curtailment_cost_usd_per_mwh",
    "investment_cost_usd_per_mw_year",
    "zone_id",
    "initial_capacity_mw",
]
_NUMERIC = [c for c in RENEWABLE_COLUMNS if c not in ("name", "zone_id")]


def profile_filename(plant: RenewablePlant) -> str:
    return f"zone_{plant.zone_id}_{plant.name}_profile.csv"


def load_renewable_plants(path_csv: Path) -> List[RenewablePlant]:
    """Plant definitions without availability; profiles are loaded per stage."""
    df = read_table(path_csv, "RenewablePlants")
    require_columns(df, RENEWABLE_COLUMNS, name="RenewablePlants")
    df = coerce_int(df, ["zone_id"], "RenewablePlants")
    df = coerce_numeric(df, _NUMERIC, "RenewablePlants")

    plants: List[RenewablePlant] = []
    for name, (_, row) in zip(clean_names(df["name"], "RenewablePlants"), df.iterrows()):
        values = {c: float(row[c]) for c in _NUMERIC}
        plants.append(RenewablePlant(name=name, zone_id=int(row["zone_id"]), **values))
    return plants


def load_availability_profiles(
    stage_id: int,
    stage_dir: Path,
    plants: Sequence[RenewablePlant],
) -> ProfileTable:
    """Availability of every plant for one stage, as ``{(plant, stage, 1): values}``.

    Each plant reads ``zone_<zone_id>_<name>_profile.csv`` from ``stage_dir``
    with an ``availability`` column. A missing file or column is only logged;
    parameter derivation then decides how to treat the gap.
    """
    table: ProfileTable = {}
    for plant in plants:
        path = Path(stage_dir) / profile_filename(plant)
        if not path.is_file():
            log.warning("Profile %s not found for plant %s, stage %s.", path, plant.name, stage_id)
            continue
        name = f"Profile:{plant.name}:stage{stage_id}"
        df = read_table(path, name)
        if "availability" not in df.columns:
            log.warning("Missing 'availability' column in %s.", path)
            continue
        values = tuple(series_values(df, "availability", name))
        table[(plant.name, int(stage_id), DETERMINISTIC_SCENARIO)] = values
    log.info("Stage %s: %d/%d renewable profiles loaded.", stage_id, len(table), len(plants))
    return table
