"""Thermal generating unit record."""

from __future__ import annotations

from dataclasses import dataclass

from stagecap.core.validators import (
    require_non_empty,
    require_non_negative,
    require_not_above,
    require_positive_int,
)


@dataclass(frozen=True)
class ThermalPlant:
    """Dispatchable fuel-burning plant.

    ``capacity_mw`` is the maximum buildable capacity; what exists before
    stage 1 is ``initial_capacity_mw``. Start-up and shut-down costs are
    carried for completeness but no commitment decision is modelled.
    """

    name: str
    capacity_mw: float
    min_stable_level_mw: float
    ramp_up_mw_per_hr: float
    ramp_down_mw_per_hr: float
    startup_cost_usd: float
    shutdown_cost_usd: float
    variable_om_cost_usd_per_mwh: float
    fuel_cost_usd_per_mmbtu: float
    heat_rate_mmbtu_per_mwh: float
    investment_cost_usd_per_mw_year: float
    zone_id: int
    initial_capacity_mw: float = 0.0

    def __post_init__(self):
        require_non_empty(self.name, "name", "ThermalPlant")
        where = f"ThermalPlant:{self.name}"
        require_positive_int(self.zone_id, "zone_id", where)
        for field in (
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
            "initial_capacity_mw",
        ):
            require_non_negative(getattr(self, field), field, where)
        require_not_above(self.initial_capacity_mw, self.capacity_mw, "initial_capacity_mw", "capacity_mw", where)
        require_not_above(self.min_stable_level_mw, self.capacity_mw, "min_stable_level_mw", "capacity_mw", where)

    @property
    def fuel_cost_usd_per_mwh(self) -> float:
        return self.fuel_cost_usd_per_mmbtu * self.heat_rate_mmbtu_per_mwh
