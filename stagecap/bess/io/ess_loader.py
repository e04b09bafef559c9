"""Rutinas de lectura para unidades de almacenamiento.

El archivo CSV contiene toda la configuración de cada unidad: tres límites
de capacidad (energía, potencia de carga y de descarga), sus valores
existentes, eficiencias, límites de estado de carga y costos. Cada fila se
transforma en un :class:`StorageUnit` inmutable.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from stagecap.bess.core.types import StorageUnit
from stagecap.core.io.loaders import (
    clean_names,
    coerce_int,
    coerce_numeric,
    read_table,
    require_columns,
)

STORAGE_COLUMNS = [
    "name",
    "zone_id",
    "storage_capacity_mwh",
    "charge_power_mw",
    "discharge_power_mw",
    "charge_efficiency",
    "discharge_efficiency",
    "soc_min_fraction",
    "soc_max_fraction",
    "initial_storage_capacity_mwh",
    "initial_charge_power_mw",
    "initial_discharge_power_mw",
    "variable_om_cost_charge_usd_per_mwh",
    "variable_om_cost_discharge_usd_per_mwh",
    "investment_cost_usd_per_mw_year_power",
    "investment_cost_usd_per_mwh_year_energy",
]
_NUMERIC = STORAGE_COLUMNS[2:]


def load_storage_units(path_csv: Path) -> List[StorageUnit]:
    """Carga el catálogo de almacenamiento desde ``path_csv``.

    Every column is required; a blank cell surfaces as an entity validation
    error naming the unit and field.
    """
    df = read_table(path_csv, "StorageUnits")
    require_columns(df, STORAGE_COLUMNS, name="StorageUnits")
    df = coerce_int(df, ["zone_id"], "StorageUnits")
    df = coerce_numeric(df, _NUMERIC, "StorageUnits")

    units: List[StorageUnit] = []
    for name, (_, row) in zip(clean_names(df["name"], "StorageUnits"), df.iterrows()):
        values = {c: float(row[c]) for c in _NUMERIC}
        units.append(StorageUnit(name=name, zone_id=int(row["zone_id"]), **values))
    return units
