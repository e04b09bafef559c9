"""Lectura del catálogo de centrales térmicas."""

from __future__ import annotations

from pathlib import Path
from typing import List

from stagecap.core.io.loaders import (
    clean_names,
    coerce_int,
    coerce_numeric,
    read_table,
    require_columns,
)
from stagecap.thermal.core.types import ThermalPlant

THERMAL_COLUMNS = [
    "name",
    "capacity_mw",
    "min_stable_level_mw",
    "ramp_up_mw_per_hr",
    "ramp_down_mw_per_hr",
    "startup_cost_usd",
    "shutdown_cost_usd",
    "variable_om_cost_usd_per_mwh",
    "fuel_cost_usd_per_mmbtu",
    "heat_rate_mmbtu_per_mwh",
    "investment_cost_usd_per_mw_year",
    "zone_id",
    "initial_capacity_mw",
]
_NUMERIC = [c for c in THERMAL_COLUMNS if c not in ("name", "zone_id")]


def load_thermal_plants(path_csv: Path) -> List[ThermalPlant]:
    """Carga las centrales térmicas de ``path_csv``; una fila por central."""
    df = read_table(path_csv, "ThermalPlants")
    require_columns(df, THERMAL_COLUMNS, name="ThermalPlants")
    df = coerce_int(df, ["zone_id"], "ThermalPlants")
    df = coerce_numeric(df, _NUMERIC, "ThermalPlants")

    plants: List[ThermalPlant] = []
    for name, (_, row) in zip(clean_names(df["name"], "ThermalPlants"), df.iterrows()):
        values = {c: float(row[c]) for c in _NUMERIC}
        plants.append(ThermalPlant(name=name, zone_id=int(row["zone_id"]), **values))
    return plants
