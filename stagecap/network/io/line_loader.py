"""Lectura detallada del catálogo de líneas de transmisión."""

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
from stagecap.network.core.types import TransmissionLine

LINE_COLUMNS = [
    "id",
    "from_zone_id",
    "to_zone_id",
    "reactance_pu",
    "thermal_limit_mw",
    "length_km",
    "investment_cost_usd_per_mw_year",
    "initial_capacity_mw",
]


def load_transmission_lines(path_csv: Path) -> List[TransmissionLine]:
    """Carga ``TransmissionLine`` desde ``path_csv``.

    Line ids are kept as text even when they look numeric. Endpoint zones are
    checked later, against the zone catalogue, by ``ProjectParameters``.
    """
    df = read_table(path_csv, "TransmissionLines")
    require_columns(df, LINE_COLUMNS, name="TransmissionLines")
    df = coerce_int(df, ["from_zone_id", "to_zone_id"], "TransmissionLines")
    df = coerce_numeric(df, LINE_COLUMNS[3:], "TransmissionLines")

    out: List[TransmissionLine] = []
    for lid, (_, row) in zip(clean_names(df["id"], "TransmissionLines"), df.iterrows()):
        out.append(
            TransmissionLine(
                id=lid,
                from_zone_id=int(row["from_zone_id"]),
                to_zone_id=int(row["to_zone_id"]),
                reactance_pu=float(row["reactance_pu"]),
                thermal_limit_mw=float(row["thermal_limit_mw"]),
                investment_cost_usd_per_mw_year=float(row["investment_cost_usd_per_mw_year"]),
                initial_capacity_mw=float(row["initial_capacity_mw"]),
                length_km=float(row["length_km"]),
            )
        )
    return out
