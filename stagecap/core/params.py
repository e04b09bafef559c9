# -*- coding: utf-8 -*-
"""Derived parameter tables consumed by the Pyomo blocks.

Everything here is plain Python (dicts keyed by tuples) so the tables can be
inspected and tested without building a model.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

from stagecap.bess.core.types import StorageUnit
from stagecap.core.discount import annuity_table, discount_table
from stagecap.core.errors import MissingDataError
from stagecap.core.sets import ModelSets
from stagecap.core.types import (
    HOURS_PER_YEAR,
    MissingDataPolicy,
    ProjectParameters,
    StageZoneData,
)
from stagecap.renewable.core.types import DETERMINISTIC_SCENARIO, RenewablePlant
from stagecap.thermal.core.types import ThermalPlant

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapacityBlockParams:
    """Cost and bounds of one expandable capacity family."""

    initial: Dict[str, float]
    ceiling: Dict[str, float]
    inv_cost: Dict[str, float]


@dataclass(frozen=True)
class ModelParams:
    # (zone, stage, t) -> MW
    demand: Dict[Tuple[int, int, int], float]
    # (plant, stage, t) -> fraction of installed capacity
    availability: Dict[Tuple[str, int, int], float]

    generation: CapacityBlockParams
    lines: CapacityBlockParams
    sto_energy: CapacityBlockParams
    sto_charge: CapacityBlockParams
    sto_discharge: CapacityBlockParams

    thermal_vom: Dict[str, float]
    thermal_fuel_cost: Dict[str, float]
    thermal_ramp_up: Dict[str, float]
    thermal_ramp_down: Dict[str, float]
    renewable_vom: Dict[str, float]
    sto_vom_charge: Dict[str, float]
    sto_vom_discharge: Dict[str, float]
    sto_eff_charge: Dict[str, float]
    sto_eff_discharge: Dict[str, float]
    sto_soc_min: Dict[str, float]
    sto_soc_max: Dict[str, float]

    zone_of: Dict[str, int]
    line_from: Dict[str, int]
    line_to: Dict[str, int]
    line_reactance: Dict[str, float]

    discount: Dict[int, float]
    annuity: Dict[int, float]
    annual_scale: float  # 8760 / |T|, 0 without time steps

    def assets_in_zone(self, names: Sequence[str], zone: int) -> Tuple[str, ...]:
        return tuple(n for n in names if self.zone_of.get(n) == zone)


def _handle_missing(policy: MissingDataPolicy, msg: str, *args) -> None:
    if policy is MissingDataPolicy.FAIL:
        raise MissingDataError(msg % args)
    log.warning(msg + " Assuming zeros.", *args)


def derive_demand(
    sets: ModelSets,
    stage_zone_data: StageZoneData,
    policy: MissingDataPolicy = MissingDataPolicy.ZERO_FILL,
) -> Dict[Tuple[int, int, int], float]:
    demand: Dict[Tuple[int, int, int], float] = {}
    for s in sets.stages:
        for z in sets.zones:
            ts = stage_zone_data.get((s, z))
            if ts is None:
                if sets.steps:
                    _handle_missing(policy, "Missing demand data for zone %s, stage %s.", z, s)
                profile: Tuple[float, ...] = ()
            else:
                profile = ts.demand
            for t in sets.steps:
                demand[(z, s, t)] = profile[t - 1] if t <= len(profile) else 0.0
    return demand


def derive_availability(
    sets: ModelSets,
    plants: Sequence[RenewablePlant],
    policy: MissingDataPolicy = MissingDataPolicy.ZERO_FILL,
) -> Dict[Tuple[str, int, int], float]:
    avail: Dict[Tuple[str, int, int], float] = {}
    n = len(sets.steps)
    for p in plants:
        for s in sets.stages:
            profile = p.profile(s, DETERMINISTIC_SCENARIO)
            if profile is None:
                if n:
                    _handle_missing(policy, "Missing renewable profile for %s, stage %s.", p.name, s)
                profile = ()
            elif len(profile) < n:
                log.warning(
                    "Renewable profile for %s, stage %s has %d values for %d time steps; "
                    "the remaining steps get zero availability.", p.name, s, len(profile), n,
                )
            for t in sets.steps:
                avail[(p.name, s, t)] = profile[t - 1] if t <= len(profile) else 0.0
    return avail


def derive_params(
    params: ProjectParameters,
    sets: ModelSets,
    thermal: Sequence[ThermalPlant],
    renewable: Sequence[RenewablePlant],
    storage: Sequence[StorageUnit],
    stage_zone_data: StageZoneData,
    policy: MissingDataPolicy = MissingDataPolicy.ZERO_FILL,
) -> ModelParams:
    lines = params.transmission_lines

    zone_of = {p.name: p.zone_id for p in thermal}
    zone_of.update({p.name: p.zone_id for p in renewable})
    zone_of.update({u.name: u.zone_id for u in storage})

    generation = CapacityBlockParams(
        initial={p.name: p.initial_capacity_mw for p in (*thermal, *renewable)},
        ceiling={p.name: p.capacity_mw for p in (*thermal, *renewable)},
        inv_cost={p.name: p.investment_cost_usd_per_mw_year for p in (*thermal, *renewable)},
    )
    line_block = CapacityBlockParams(
        initial={ln.id: ln.initial_capacity_mw for ln in lines},
        ceiling={ln.id: ln.thermal_limit_mw for ln in lines},
        inv_cost={ln.id: ln.investment_cost_usd_per_mw_year for ln in lines},
    )
    sto_energy = CapacityBlockParams(
        initial={u.name: u.initial_storage_capacity_mwh for u in storage},
        ceiling={u.name: u.storage_capacity_mwh for u in storage},
        inv_cost={u.name: u.investment_cost_usd_per_mwh_year_energy for u in storage},
    )
    # the power investment cost is charged to both charge and discharge blocks
    sto_charge = CapacityBlockParams(
        initial={u.name: u.initial_charge_power_mw for u in storage},
        ceiling={u.name: u.charge_power_mw for u in storage},
        inv_cost={u.name: u.investment_cost_usd_per_mw_year_power for u in storage},
    )
    sto_discharge = CapacityBlockParams(
        initial={u.name: u.initial_discharge_power_mw for u in storage},
        ceiling={u.name: u.discharge_power_mw for u in storage},
        inv_cost={u.name: u.investment_cost_usd_per_mw_year_power for u in storage},
    )

    n_steps = len(sets.steps)
    return ModelParams(
        demand=derive_demand(sets, stage_zone_data, policy),
        availability=derive_availability(sets, renewable, policy),
        generation=generation,
        lines=line_block,
        sto_energy=sto_energy,
        sto_charge=sto_charge,
        sto_discharge=sto_discharge,
        thermal_vom={p.name: p.variable_om_cost_usd_per_mwh for p in thermal},
        thermal_fuel_cost={p.name: p.fuel_cost_usd_per_mwh for p in thermal},
        thermal_ramp_up={p.name: p.ramp_up_mw_per_hr for p in thermal},
        thermal_ramp_down={p.name: p.ramp_down_mw_per_hr for p in thermal},
        renewable_vom={p.name: p.variable_om_cost_usd_per_mwh for p in renewable},
        sto_vom_charge={u.name: u.variable_om_cost_charge_usd_per_mwh for u in storage},
        sto_vom_discharge={u.name: u.variable_om_cost_discharge_usd_per_mwh for u in storage},
        sto_eff_charge={u.name: u.charge_efficiency for u in storage},
        sto_eff_discharge={u.name: u.discharge_efficiency for u in storage},
        sto_soc_min={u.name: u.soc_min_fraction for u in storage},
        sto_soc_max={u.name: u.soc_max_fraction for u in storage},
        zone_of=zone_of,
        line_from={ln.id: ln.from_zone_id for ln in lines},
        line_to={ln.id: ln.to_zone_id for ln in lines},
        line_reactance={ln.id: ln.reactance_pu for ln in lines},
        discount=discount_table(params.discount_rate, params.years_per_stage, sets.stages),
        annuity=annuity_table(params.discount_rate, params.years_per_stage, sets.stages),
        annual_scale=HOURS_PER_YEAR / n_steps if n_steps else 0.0,
    )
