"""Storage unit record.

A storage unit is expanded as three independent capacity blocks: energy
(MWh), charge power (MW) and discharge power (MW). Each block has its own
maximum buildable value and its own existing (initial) value.
"""

from __future__ import annotations

from dataclasses import dataclass

from stagecap.core.validators import (
    invalid,
    require_fraction,
    require_non_empty,
    require_non_negative,
    require_not_above,
    require_positive_int,
)


@dataclass(frozen=True)
class StorageUnit:
    name: str
    zone_id: int
    storage_capacity_mwh: float
    charge_power_mw: float
    discharge_power_mw: float
    charge_efficiency: float = 1.0
    discharge_efficiency: float = 1.0
    soc_min_fraction: float = 0.0
    soc_max_fraction: float = 1.0
    initial_storage_capacity_mwh: float = 0.0
    initial_charge_power_mw: float = 0.0
    initial_discharge_power_mw: float = 0.0
    variable_om_cost_charge_usd_per_mwh: float = 0.0
    variable_om_cost_discharge_usd_per_mwh: float = 0.0
    investment_cost_usd_per_mw_year_power: float = 0.0
    investment_cost_usd_per_mwh_year_energy: float = 0.0

    def __post_init__(self):
        require_non_empty(self.name, "name", "StorageUnit")
        where = f"StorageUnit:{self.name}"
        require_positive_int(self.zone_id, "zone_id", where)
        for f in (
            "storage_capacity_mwh",
            "charge_power_mw",
            "discharge_power_mw",
            "initial_storage_capacity_mwh",
            "initial_charge_power_mw",
            "initial_discharge_power_mw",
            "variable_om_cost_charge_usd_per_mwh",
            "variable_om_cost_discharge_usd_per_mwh",
            "investment_cost_usd_per_mw_year_power",
            "investment_cost_usd_per_mwh_year_energy",
        ):
            require_non_negative(getattr(self, f), f, where)

        require_fraction(self.charge_efficiency, "charge_efficiency", where)
        require_fraction(self.discharge_efficiency, "discharge_efficiency", where)
        # discharge is divided by its efficiency in the energy balance
        if self.discharge_efficiency == 0:
            invalid(where, "discharge_efficiency must be greater than 0")
        require_fraction(self.soc_min_fraction, "soc_min_fraction", where)
        require_fraction(self.soc_max_fraction, "soc_max_fraction", where)
        require_not_above(self.soc_min_fraction, self.soc_max_fraction, "soc_min_fraction", "soc_max_fraction", where)

        require_not_above(self.initial_storage_capacity_mwh, self.storage_capacity_mwh,
                          "initial_storage_capacity_mwh", "storage_capacity_mwh", where)
        require_not_above(self.initial_charge_power_mw, self.charge_power_mw,
                          "initial_charge_power_mw", "charge_power_mw", where)
        require_not_above(self.initial_discharge_power_mw, self.discharge_power_mw,
                          "initial_discharge_power_mw", "discharge_power_mw", where)
