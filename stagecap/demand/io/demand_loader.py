"""Lectura de la demanda por etapa.

Each stage directory holds ``demand_data.csv`` with one column per zone,
headed by the zone name, and one row per time step.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from stagecap.core.errors import ConfigurationError
from stagecap.core.io.loaders import read_csv_file, series_values
from stagecap.core.types import StageZoneTimeSeries
from stagecap.network.core.types import Zone

log = logging.getLogger(__name__)

DEMAND_FILENAME = "demand_data.csv"


def load_stage_demand(stage_id: int, stage_dir: Path, zones: Sequence[Zone]) -> List[StageZoneTimeSeries]:
    """Demand series of every zone found in the stage file.

    Zone columns are matched by name ignoring case and surrounding blanks; a
    zone without a column is logged and gets no entry.
    """
    path = Path(stage_dir) / DEMAND_FILENAME
    name = f"Demand:stage{stage_id}"
    df = read_csv_file(path, name)
    by_key = {str(c).strip().lower(): c for c in df.columns}

    out: List[StageZoneTimeSeries] = []
    for zone in zones:
        col = by_key.get(zone.name.strip().lower())
        if col is None:
            log.warning("Demand column for zone '%s' not found in %s.", zone.name, path)
            continue
        values = series_values(df, col, f"{name}:{zone.name}")
        out.append(StageZoneTimeSeries(stage_id=int(stage_id), zone_id=zone.id, demand=values))
    return out


def load_stage_zone_data(
    stage_dirs: Sequence[Path],
    zones: Sequence[Zone],
    num_stages: int,
) -> List[StageZoneTimeSeries]:
    """Demand of all stages; stage ``k`` (1-based) is read from ``stage_dirs[k-1]``."""
    if len(stage_dirs) != num_stages:
        raise ConfigurationError(
            f"[config] {len(stage_dirs)} stage data paths given for num_stages={num_stages}."
        )
    out: List[StageZoneTimeSeries] = []
    for stage_id, stage_dir in enumerate(stage_dirs, start=1):
        series = load_stage_demand(stage_id, stage_dir, zones)
        log.info("Stage %d: demand for %d/%d zones from %s", stage_id, len(series), len(zones), stage_dir)
        out.extend(series)
    return out
