# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

from stagecap.bess.core.types import StorageUnit
from stagecap.core.errors import ConfigurationError
from stagecap.core.types import ProjectParameters, StageZoneData
from stagecap.core.validators import ensure_names_unique, ensure_zones_known
from stagecap.renewable.core.types import RenewablePlant
from stagecap.thermal.core.types import ThermalPlant

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelSets:
    """Finite index sets of one run, sorted so enumeration order is stable."""

    stages: Tuple[int, ...]
    zones: Tuple[int, ...]
    steps: Tuple[int, ...]
    thermal: Tuple[str, ...]
    renewable: Tuple[str, ...]
    storage: Tuple[str, ...]
    lines: Tuple[str, ...]

    @property
    def generation(self) -> Tuple[str, ...]:
        return tuple(sorted(set(self.thermal) | set(self.renewable)))

    @property
    def has_operations(self) -> bool:
        return len(self.steps) > 0

    @property
    def first_stage(self) -> int:
        return self.stages[0]


def count_time_steps(stage_zone_data: StageZoneData, num_stages: int) -> int:
    """Length of the demand series of a sampled (stage, zone) entry.

    All series are expected to share this length; the sample is the
    smallest key so the choice does not depend on insertion order.
    """
    if not stage_zone_data:
        if num_stages > 0:
            raise ConfigurationError(
                "No stage-zone data available to determine the number of time steps "
                f"while num_stages={num_stages}."
            )
        return 0

    sample_key = min(stage_zone_data)
    n = len(stage_zone_data[sample_key].demand)
    if n == 0:
        log.warning("Demand profile for %s is empty: no time steps, investment-only model.", sample_key)

    uneven = sorted(k for k, ts in stage_zone_data.items() if len(ts.demand) != n)
    if uneven:
        log.warning(
            "%d stage-zone series differ from the sampled length %d (e.g. %s); "
            "shorter ones are zero padded, longer ones truncated.",
            len(uneven), n, uneven[:5],
        )
    return n


def build_sets(
    params: ProjectParameters,
    thermal: Sequence[ThermalPlant],
    renewable: Sequence[RenewablePlant],
    storage: Sequence[StorageUnit],
    stage_zone_data: StageZoneData,
) -> ModelSets:
    n_steps = count_time_steps(stage_zone_data, params.num_stages)

    th_names = [p.name for p in thermal]
    re_names = [p.name for p in renewable]
    st_names = [u.name for u in storage]
    ensure_names_unique(th_names, "ThermalPlants")
    ensure_names_unique(re_names, "RenewablePlants")
    ensure_names_unique(st_names, "StorageUnits")
    # thermal and renewable share the generation capacity family
    ensure_names_unique(th_names + re_names, "GenerationPlants")

    zones = tuple(params.zone_ids())
    zone_by_asset = {p.name: p.zone_id for p in (*thermal, *renewable)}
    zone_by_asset.update({u.name: u.zone_id for u in storage})
    ensure_zones_known(zone_by_asset, zones, "Assets")

    sets = ModelSets(
        stages=tuple(range(1, params.num_stages + 1)),
        zones=zones,
        steps=tuple(range(1, n_steps + 1)),
        thermal=tuple(sorted(th_names)),
        renewable=tuple(sorted(re_names)),
        storage=tuple(sorted(st_names)),
        lines=tuple(sorted(ln.id for ln in params.transmission_lines)),
    )
    log.info(
        "sets: stages=%d zones=%d steps=%d thermal=%d renewable=%d storage=%d lines=%d",
        len(sets.stages), len(sets.zones), len(sets.steps), len(sets.thermal),
        len(sets.renewable), len(sets.storage), len(sets.lines),
    )
    return sets
