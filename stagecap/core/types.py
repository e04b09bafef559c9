# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, NewType, Sequence, Tuple

from stagecap.core.errors import ConfigurationError
from stagecap.core.validators import (
    ensure_names_unique,
    invalid,
    require_positive_int,
)
from stagecap.network.core.types import TransmissionLine, Zone

# Semantic identifiers
AssetName = NewType("AssetName", str)
LineId = NewType("LineId", str)
ZoneId = int
StageId = int
StepId = int

# (stage, zone) -> demand series
StageZoneKey = Tuple[StageId, ZoneId]

HOURS_PER_YEAR = 8760.0


class MissingDataPolicy(str, Enum):
    """What to do when demand or availability data is absent for a key."""

    ZERO_FILL = "zero_fill"
    FAIL = "fail"


@dataclass(frozen=True)
class StageZoneTimeSeries:
    """Ordered demand (MW per time step) of one zone in one stage."""

    stage_id: int
    zone_id: int
    demand: Tuple[float, ...]

    def __post_init__(self):
        require_positive_int(self.stage_id, "stage_id", "StageZoneTimeSeries")
        require_positive_int(self.zone_id, "zone_id", "StageZoneTimeSeries")
        object.__setattr__(self, "demand", tuple(float(v) for v in self.demand))

    @property
    def key(self) -> StageZoneKey:
        return (self.stage_id, self.zone_id)


@dataclass(frozen=True)
class ProjectParameters:
    """Planning horizon, discounting and network topology of a run."""

    num_stages: int
    years_per_stage: int
    discount_rate: float
    zones: Tuple[Zone, ...] = ()
    transmission_lines: Tuple[TransmissionLine, ...] = ()

    def __post_init__(self):
        require_positive_int(self.num_stages, "num_stages", "ProjectParameters")
        require_positive_int(self.years_per_stage, "years_per_stage", "ProjectParameters")
        if not 0.0 <= float(self.discount_rate) <= 1.0:
            invalid("ProjectParameters", f"discount_rate must be within [0, 1], got {self.discount_rate!r}")
        object.__setattr__(self, "zones", tuple(self.zones))
        object.__setattr__(self, "transmission_lines", tuple(self.transmission_lines))

        ensure_names_unique((z.id for z in self.zones), "ProjectParameters.zones")
        ensure_names_unique((ln.id for ln in self.transmission_lines), "ProjectParameters.transmission_lines")
        known = {z.id for z in self.zones}
        for ln in self.transmission_lines:
            for end in (ln.from_zone_id, ln.to_zone_id):
                if end not in known:
                    invalid(f"TransmissionLine:{ln.id}", f"zone {end} does not exist")

    def zone_ids(self) -> Sequence[int]:
        return sorted(z.id for z in self.zones)

    def with_network(self, zones, transmission_lines) -> "ProjectParameters":
        """Same horizon, new topology (config is parsed before the network files)."""
        return ProjectParameters(
            num_stages=self.num_stages,
            years_per_stage=self.years_per_stage,
            discount_rate=self.discount_rate,
            zones=tuple(zones),
            transmission_lines=tuple(transmission_lines),
        )


StageZoneData = Dict[StageZoneKey, StageZoneTimeSeries]


def index_stage_zone_data(series: Sequence[StageZoneTimeSeries]) -> StageZoneData:
    """Key a flat list of series by (stage, zone); duplicates are an error."""
    out: StageZoneData = {}
    for item in series:
        if item.key in out:
            raise ConfigurationError(f"[StageZoneTimeSeries] duplicated key {item.key}")
        out[item.key] = item
    return out
