from __future__ import annotations

import pytest

from stagecap.bess.core.types import StorageUnit
from stagecap.core.types import ProjectParameters, StageZoneTimeSeries, index_stage_zone_data
from stagecap.modeling.solver import solver_available
from stagecap.network.core.types import TransmissionLine, Zone
from stagecap.renewable.core.types import RenewablePlant
from stagecap.thermal.core.types import ThermalPlant

HIGHS_AVAILABLE = solver_available("appsi_highs")

requires_highs = pytest.mark.skipif(not HIGHS_AVAILABLE, reason="HiGHS solver not available")


def make_thermal(name="Coal1", capacity=100.0, zone=1, **kw) -> ThermalPlant:
    values = dict(
        name=name,
        capacity_mw=capacity,
        min_stable_level_mw=0.0,
        ramp_up_mw_per_hr=capacity,
        ramp_down_mw_per_hr=capacity,
        startup_cost_usd=0.0,
        shutdown_cost_usd=0.0,
        variable_om_cost_usd_per_mwh=0.0,
        fuel_cost_usd_per_mmbtu=0.0,
        heat_rate_mmbtu_per_mwh=0.0,
        investment_cost_usd_per_mw_year=90000.0,
        zone_id=zone,
        initial_capacity_mw=0.0,
    )
    values.update(kw)
    return ThermalPlant(**values)


def make_renewable(name="Solar1", capacity=100.0, zone=1, profiles=None, **kw) -> RenewablePlant:
    return RenewablePlant(name=name, capacity_mw=capacity, zone_id=zone, availability=profiles or {}, **kw)


def make_storage(name="Bat1", zone=1, **kw) -> StorageUnit:
    values = dict(
        name=name,
        zone_id=zone,
        storage_capacity_mwh=40.0,
        charge_power_mw=10.0,
        discharge_power_mw=10.0,
        charge_efficiency=0.9,
        discharge_efficiency=0.9,
    )
    values.update(kw)
    return StorageUnit(**values)


def make_params(num_stages=1, years=1, rate=0.0, zones=None, lines=()) -> ProjectParameters:
    zones = zones if zones is not None else [Zone(1, "North")]
    return ProjectParameters(
        num_stages=num_stages,
        years_per_stage=years,
        discount_rate=rate,
        zones=zones,
        transmission_lines=lines,
    )


def make_demand(by_stage_zone):
    """``{(stage, zone): [values]}`` -> indexed stage-zone data."""
    return index_stage_zone_data(
        [StageZoneTimeSeries(stage_id=s, zone_id=z, demand=v) for (s, z), v in by_stage_zone.items()]
    )


@pytest.fixture
def two_zones():
    return [Zone(1, "North"), Zone(2, "South")]


@pytest.fixture
def north_south_line():
    return TransmissionLine(
        id="NS",
        from_zone_id=1,
        to_zone_id=2,
        reactance_pu=0.1,
        thermal_limit_mw=100.0,
        investment_cost_usd_per_mw_year=1000.0,
    )


def write_csv(path, header, rows):
    lines = [",".join(header)] + [",".join(str(v) for v in r) for r in rows]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
