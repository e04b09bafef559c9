"""Lectura del catálogo de zonas."""

from __future__ import annotations

from pathlib import Path
from typing import List

from stagecap.core.io.loaders import clean_names, coerce_int, read_table, require_columns
from stagecap.network.core.types import Zone

ZONE_COLUMNS = ["id", "name"]


def load_zones(path_csv: Path) -> List[Zone]:
    """Zones sorted by id from a ``id,name`` table."""
    df = read_table(path_csv, "Zones")
    require_columns(df, ZONE_COLUMNS, name="Zones")
    df = coerce_int(df, ["id"], "Zones")
    names = clean_names(df["name"], "Zones")
    zones = [Zone(id=int(zid), name=n) for zid, n in zip(df["id"], names)]
    return sorted(zones, key=lambda z: z.id)
