# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Sequence, Tuple

from stagecap.core.validators import (
    require_non_empty,
    require_non_negative,
    require_not_above,
    require_positive_int,
)

Plant = str
Stage = int
Scenario = int

# (stage, scenario) -> availability per time step
ProfileKey = Tuple[Stage, Scenario]
# (plant, stage, scenario) -> availability per time step, as returned by the loaders
ProfileTable = Dict[Tuple[Plant, Stage, Scenario], Tuple[float, ...]]

DETERMINISTIC_SCENARIO = 1


@dataclass(frozen=True)
class RenewablePlant:
    """Variable plant whose output is ``capacity * availability``.

    Availability values are fractions of installed capacity; they are not
    range checked here.
    """

    name: str
    capacity_mw: float
    zone_id: int
    initial_capacity_mw: float = 0.0
    variable_om_cost_usd_per_mwh: float = 0.0
    curtailment_cost_usd_per_mwh: float = 0.0
    investment_cost_usd_per_mw_year: float = 0.0
    availability: Mapping[ProfileKey, Tuple[float, ...]] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        require_non_empty(self.name, "name", "RenewablePlant")
        where = f"RenewablePlant:{self.name}"
        require_positive_int(self.zone_id, "zone_id", where)
        for f in (
            "capacity_mw",
            "initial_capacity_mw",
            "variable_om_cost_usd_per_mwh",
            "curtailment_cost_usd_per_mwh",
            "investment_cost_usd_per_mw_year",
        ):
            require_non_negative(getattr(self, f), f, where)
        require_not_above(self.initial_capacity_mw, self.capacity_mw, "initial_capacity_mw", "capacity_mw", where)
        frozen = {
            (int(s), int(sc)): tuple(float(v) for v in values)
            for (s, sc), values in dict(self.availability).items()
        }
        object.__setattr__(self, "availability", frozen)

    def profile(self, stage: int, scenario: int = DETERMINISTIC_SCENARIO) -> Tuple[float, ...] | None:
        return self.availability.get((stage, scenario))

    def with_profiles(self, profiles: Mapping[ProfileKey, Sequence[float]]) -> "RenewablePlant":
        """New record with ``profiles`` layered over the existing ones."""
        merged = dict(self.availability)
        merged.update({k: tuple(v) for k, v in profiles.items()})
        return replace(self, availability=merged)


def attach_profiles(plants: Sequence[RenewablePlant], table: ProfileTable) -> list[RenewablePlant]:
    """Combine plant records with a (plant, stage, scenario) profile table.

    Plants are never modified in place; entries for unknown plants are
    ignored.
    """
    by_plant: Dict[Plant, Dict[ProfileKey, Tuple[float, ...]]] = {}
    for (name, stage, scenario), values in table.items():
        by_plant.setdefault(name, {})[(stage, scenario)] = values
    return [p.with_profiles(by_plant[p.name]) if p.name in by_plant else p for p in plants]
